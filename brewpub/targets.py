"""
targets.py

Responsibility: Turn the per-platform build artifacts of a release into the
normalized target structure the formula templates consume.

Two policies:
- single target: the first artifact carries no platform tag, so the release is
  assumed to ship exactly one universal artifact. Only that first artifact is used.
- multi target: artifacts are grouped by os in order of first appearance, each
  group keeping its input order.

This module does no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from brewpub.errors import ContractViolation
from brewpub.platforms import Arch, Os


@dataclass(frozen=True)
class Artifact:
    """One built release file, as produced by the build/checksum stage."""

    url: str
    content_hash: str
    os: Os | None = None
    arch: Arch | None = None


@dataclass(frozen=True)
class SingleTarget:
    url: str
    hash: str


@dataclass(frozen=True)
class ArchEntry:
    arch: Arch
    url: str
    hash: str


@dataclass(frozen=True)
class MultiTarget:
    os: Os
    archs: tuple[ArchEntry, ...]


Target = Union[SingleTarget, MultiTarget]

# Either () / (SingleTarget,) / (MultiTarget, ...). Never mixed.
Targets = tuple[Target, ...]


def derive(artifacts: Iterable[Artifact]) -> Targets:
    items = list(artifacts)
    if not items:
        return ()

    first = items[0]
    if first.os is None and first.arch is None:
        return (SingleTarget(url=first.url, hash=first.content_hash),)

    # Insertion-ordered dict keeps os groups in order of first appearance.
    groups: dict[Os, list[ArchEntry]] = {}
    for index, artifact in enumerate(items):
        if artifact.os is None or artifact.arch is None:
            raise ContractViolation(
                f"Artifact #{index} ({artifact.url}) is missing its os/arch tag "
                "in a multi-target release."
            )
        groups.setdefault(artifact.os, []).append(
            ArchEntry(arch=artifact.arch, url=artifact.url, hash=artifact.content_hash)
        )

    return tuple(MultiTarget(os=os_tag, archs=tuple(entries)) for os_tag, entries in groups.items())


def is_multi_target(targets: Targets) -> bool:
    return any(isinstance(t, MultiTarget) for t in targets)
