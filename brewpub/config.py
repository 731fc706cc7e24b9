"""
config.py

Responsibility: Load the YAML configuration and the artifact manifest into
deterministic, typed models.

Validation happens here, at the boundary. The rest of brewpub treats the parsed
result as the single source of truth and never looks at raw mappings again.
Defaults that belong to the publish workflow (branch names, committer, commit
message) are NOT filled in here.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from brewpub.errors import ConfigError
from brewpub.platforms import Arch, Os
from brewpub.targets import Artifact


@dataclass(frozen=True)
class Committer:
    """Identity attributed to commits made on the hosting service."""

    name: str
    email: str


@dataclass(frozen=True)
class RepositoryConfig:
    owner: str
    name: str


@dataclass(frozen=True)
class InstallConfig:
    binaries: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class PullRequestConfig:
    title: str | None = None
    body: str | None = None
    labels: tuple[str, ...] | None = None
    assignees: tuple[str, ...] | None = None
    head: str | None = None
    base: str | None = None


@dataclass(frozen=True)
class FormulaConfig:
    """The `brew` section of the configuration file."""

    name: str
    repository: RepositoryConfig
    description: str | None = None
    homepage: str | None = None
    license: str | None = None
    head: str | None = None
    test: str | None = None
    caveats: str | None = None
    commit_message: str | None = None
    commit_author: Committer | None = None
    install: InstallConfig = field(default_factory=InstallConfig)
    pull_request: PullRequestConfig | None = None


def _read_mapping(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"File does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _opt_str_list(data: dict[str, Any], key: str, where: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError(f"`{where}.{key}` must be a list of strings.")
    return tuple(str(v).strip() for v in value if str(v).strip())


def _mapping(data: dict[str, Any], key: str, where: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"`{where}.{key}` must be an object/mapping when provided.")
    return value


def parse_formula_config(data: dict[str, Any]) -> FormulaConfig:
    """
    Build a `FormulaConfig` from the raw `brew` mapping.

    Required keys: `name`, `repository.owner`, `repository.name`.
    """
    name = str(data.get("name") or "").strip()
    if not name:
        raise ConfigError("`brew.name` is required.")

    repo_raw = _mapping(data, "repository", "brew")
    if repo_raw is None:
        raise ConfigError("`brew.repository` is required.")
    owner = _opt_str(repo_raw, "owner")
    repo_name = _opt_str(repo_raw, "name")
    if not owner or not repo_name:
        raise ConfigError("`brew.repository` must define both `owner` and `name`.")

    author = None
    author_raw = _mapping(data, "commit_author", "brew")
    if author_raw is not None:
        author_name = _opt_str(author_raw, "name")
        author_email = _opt_str(author_raw, "email")
        if not author_name or not author_email:
            raise ConfigError("`brew.commit_author` must define both `name` and `email`.")
        author = Committer(name=author_name, email=author_email)

    install_raw = _mapping(data, "install", "brew") or {}
    binaries = _opt_str_list(install_raw, "binaries", "brew.install")
    if binaries is None:
        binaries = (name.lower(),)
    install = InstallConfig(
        binaries=binaries,
        dependencies=_opt_str_list(install_raw, "dependencies", "brew.install") or (),
    )

    pull_request = None
    pr_raw = data.get("pull_request")
    if pr_raw is True:
        pr_raw = {}
    if pr_raw is not None and pr_raw is not False:
        if not isinstance(pr_raw, dict):
            raise ConfigError("`brew.pull_request` must be an object/mapping when provided.")
        pull_request = PullRequestConfig(
            title=_opt_str(pr_raw, "title"),
            body=_opt_str(pr_raw, "body"),
            labels=_opt_str_list(pr_raw, "labels", "brew.pull_request"),
            assignees=_opt_str_list(pr_raw, "assignees", "brew.pull_request"),
            head=_opt_str(pr_raw, "head"),
            base=_opt_str(pr_raw, "base"),
        )

    return FormulaConfig(
        name=name,
        repository=RepositoryConfig(owner=owner, name=repo_name),
        description=_opt_str(data, "description"),
        homepage=_opt_str(data, "homepage"),
        license=_opt_str(data, "license"),
        head=_opt_str(data, "head"),
        test=_opt_str(data, "test"),
        caveats=_opt_str(data, "caveats"),
        commit_message=_opt_str(data, "commit_message"),
        commit_author=author,
        install=install,
        pull_request=pull_request,
    )


def load_config(config_path: str | Path) -> FormulaConfig:
    """Load the `brew` (or `formula`) section of a YAML configuration file."""
    path = Path(config_path)
    data = _read_mapping(path) or {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping/object at the top level.")

    section = data.get("brew", data.get("formula"))
    if section is None:
        raise ConfigError(f"No `brew` section found in {path}.")
    if not isinstance(section, dict):
        raise ConfigError("`brew` must be an object/mapping.")
    return parse_formula_config(section)


def parse_artifact(raw: Any, index: int) -> Artifact:
    if not isinstance(raw, dict):
        raise ConfigError(f"Artifact #{index} must be an object/mapping.")
    url = _opt_str(raw, "url")
    content_hash = _opt_str(raw, "sha256") or _opt_str(raw, "hash")
    if not url or not content_hash:
        raise ConfigError(f"Artifact #{index} must define `url` and `sha256`.")

    os_raw = _opt_str(raw, "os")
    arch_raw = _opt_str(raw, "arch")
    return Artifact(
        url=url,
        content_hash=content_hash,
        os=Os.parse(os_raw) if os_raw else None,
        arch=Arch.parse(arch_raw) if arch_raw else None,
    )


def load_artifacts(manifest_path: str | Path) -> list[Artifact]:
    """
    Load an artifact manifest: a YAML/JSON list (or a mapping with an
    `artifacts` list) of `{url, sha256, os?, arch?}` entries, order preserved.
    """
    path = Path(manifest_path)
    data = _read_mapping(path)
    if isinstance(data, dict):
        data = data.get("artifacts")
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError("Artifact manifest must be a list of artifacts.")
    return [parse_artifact(raw, i) for i, raw in enumerate(data)]
