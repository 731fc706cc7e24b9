"""
formula.py

Responsibility: Combine the formula configuration, a resolved version and the
derived targets into the single immutable record the renderer and the publish
workflow consume.
"""

from __future__ import annotations

from dataclasses import dataclass

from brewpub.config import (
    Committer,
    FormulaConfig,
    InstallConfig,
    PullRequestConfig,
    RepositoryConfig,
)
from brewpub.errors import ConfigError
from brewpub.targets import Targets

DEFAULT_BASE_BRANCH_NAME = "main"
DEFAULT_HEAD_BRANCH_NAME = "bumps-formula-version"
DEFAULT_COMMIT_MESSAGE = "update formula"
DEFAULT_COMMITTER = Committer(name="brewpub", email="brewpub@example.invalid")

FORMULA_EXTENSION = ".rb"


@dataclass(frozen=True)
class Formula:
    name: str
    head: str
    commit_message: str
    install: InstallConfig
    repository: RepositoryConfig
    version: str
    targets: Targets
    description: str | None = None
    homepage: str | None = None
    license: str | None = None
    test: str | None = None
    caveats: str | None = None
    commit_author: Committer | None = None
    pull_request: PullRequestConfig | None = None

    @property
    def file_name(self) -> str:
        return f"{self.name}{FORMULA_EXTENSION}"


def capitalize(name: str) -> str:
    """Upper-case the first character only; `"foo-bar"` -> `"Foo-bar"`."""
    if not name:
        raise ConfigError("Formula name must not be empty.")
    return name[0].upper() + name[1:]


def assemble(config: FormulaConfig, version: str, targets: Targets) -> Formula:
    return Formula(
        name=capitalize(config.name),
        description=config.description,
        homepage=config.homepage,
        license=config.license,
        head=config.head or DEFAULT_BASE_BRANCH_NAME,
        test=config.test,
        caveats=config.caveats,
        commit_message=config.commit_message or DEFAULT_COMMIT_MESSAGE,
        commit_author=config.commit_author,
        install=config.install,
        repository=config.repository,
        version=version,
        pull_request=config.pull_request,
        targets=targets,
    )
