"""
versioning.py

Responsibility: Resolve the release version from git when it is not given explicitly.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from brewpub.errors import VersionError


def current_tag(cwd: str | Path | None = None) -> str:
    """Return the most recent tag reachable from HEAD."""
    cmd = ["git", "describe", "--tags", "--abbrev=0"]
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        output = getattr(e, "stdout", None) or str(e)
        raise VersionError(f"Could not determine the current git tag:\n\n{output}") from e

    tag = proc.stdout.strip()
    if not tag:
        raise VersionError("git describe returned an empty tag.")
    return tag


def normalize_version(tag: str) -> str:
    """`"v1.2.3"` -> `"1.2.3"`; anything else is returned stripped."""
    tag = tag.strip()
    if len(tag) > 1 and tag[0] in "vV" and tag[1].isdigit():
        return tag[1:]
    return tag
