from __future__ import annotations

import pytest

from brewpub.config import (
    Committer,
    FormulaConfig,
    InstallConfig,
    PullRequestConfig,
    RepositoryConfig,
)
from brewpub.formula import Formula, assemble
from brewpub.platforms import Arch, Os
from brewpub.targets import Artifact, derive


@pytest.fixture
def formula_config() -> FormulaConfig:
    return FormulaConfig(
        name="mytool",
        repository=RepositoryConfig(owner="acme", name="homebrew-tap"),
        description="Does the thing",
        homepage="https://example.com/mytool",
        license="MIT",
        install=InstallConfig(binaries=("mytool",)),
    )


@pytest.fixture
def single_artifacts() -> list[Artifact]:
    return [Artifact(url="https://example.com/mytool.tar.gz", content_hash="abc123")]


@pytest.fixture
def multi_artifacts() -> list[Artifact]:
    return [
        Artifact(url="u1", content_hash="h1", os=Os.LINUX, arch=Arch.AMD64),
        Artifact(url="u2", content_hash="h2", os=Os.DARWIN, arch=Arch.ARM64),
        Artifact(url="u3", content_hash="h3", os=Os.LINUX, arch=Arch.ARM64),
    ]


@pytest.fixture
def direct_formula(formula_config: FormulaConfig, single_artifacts: list[Artifact]) -> Formula:
    return assemble(formula_config, "1.2.3", derive(single_artifacts))


@pytest.fixture
def pr_formula(formula_config: FormulaConfig, single_artifacts: list[Artifact]) -> Formula:
    config = FormulaConfig(
        name=formula_config.name,
        repository=formula_config.repository,
        install=formula_config.install,
        commit_author=Committer(name="Release Bot", email="bot@example.com"),
        pull_request=PullRequestConfig(title="Bump mytool", body="New release", labels=("release",), assignees=("me",)),
    )
    return assemble(config, "1.2.3", derive(single_artifacts))
