"""
test_targets.py — grouping build artifacts into single/multi targets.
"""

from __future__ import annotations

import pytest

from brewpub.errors import ContractViolation
from brewpub.platforms import Arch, Os
from brewpub.targets import (
    ArchEntry,
    Artifact,
    MultiTarget,
    SingleTarget,
    derive,
    is_multi_target,
)


class TestEmpty:
    def test_no_artifacts_no_targets(self):
        assert derive([]) == ()

    def test_empty_is_not_multi(self):
        assert is_multi_target(derive([])) is False


class TestSingleTarget:
    def test_one_untagged_artifact(self, single_artifacts):
        assert derive(single_artifacts) == (SingleTarget(url="https://example.com/mytool.tar.gz", hash="abc123"),)

    def test_only_first_artifact_is_used(self):
        artifacts = [
            Artifact(url="a", content_hash="1"),
            Artifact(url="b", content_hash="2"),
            Artifact(url="c", content_hash="3"),
        ]
        assert derive(artifacts) == (SingleTarget(url="a", hash="1"),)

    def test_tagged_tail_is_dropped_when_first_is_untagged(self):
        artifacts = [
            Artifact(url="a", content_hash="1"),
            Artifact(url="b", content_hash="2", os=Os.LINUX, arch=Arch.AMD64),
        ]
        assert derive(artifacts) == (SingleTarget(url="a", hash="1"),)

    def test_accepts_generator(self):
        gen = (a for a in [Artifact(url="a", content_hash="1")])
        assert derive(gen) == (SingleTarget(url="a", hash="1"),)


class TestMultiTarget:
    def test_groups_by_os_in_first_appearance_order(self, multi_artifacts):
        assert derive(multi_artifacts) == (
            MultiTarget(
                os=Os.LINUX,
                archs=(ArchEntry(Arch.AMD64, "u1", "h1"), ArchEntry(Arch.ARM64, "u3", "h3")),
            ),
            MultiTarget(os=Os.DARWIN, archs=(ArchEntry(Arch.ARM64, "u2", "h2"),)),
        )

    def test_no_sorting_of_os_groups(self):
        artifacts = [
            Artifact(url="w", content_hash="hw", os=Os.WINDOWS, arch=Arch.AMD64),
            Artifact(url="d", content_hash="hd", os=Os.DARWIN, arch=Arch.AMD64),
            Artifact(url="l", content_hash="hl", os=Os.LINUX, arch=Arch.AMD64),
        ]
        assert [t.os for t in derive(artifacts)] == [Os.WINDOWS, Os.DARWIN, Os.LINUX]

    def test_arch_order_within_group_preserved(self):
        artifacts = [
            Artifact(url="a", content_hash="1", os=Os.LINUX, arch=Arch.ARM64),
            Artifact(url="b", content_hash="2", os=Os.LINUX, arch=Arch.AMD64),
        ]
        (target,) = derive(artifacts)
        assert [e.arch for e in target.archs] == [Arch.ARM64, Arch.AMD64]

    def test_is_multi(self, multi_artifacts):
        assert is_multi_target(derive(multi_artifacts)) is True

    def test_os_only_first_artifact_still_takes_multi_branch(self):
        artifacts = [Artifact(url="a", content_hash="1", os=Os.LINUX)]
        with pytest.raises(ContractViolation):
            derive(artifacts)

    def test_missing_tag_later_is_contract_violation(self):
        artifacts = [
            Artifact(url="a", content_hash="1", os=Os.LINUX, arch=Arch.AMD64),
            Artifact(url="b", content_hash="2"),
        ]
        with pytest.raises(ContractViolation, match="#1"):
            derive(artifacts)

    def test_deterministic(self, multi_artifacts):
        assert derive(multi_artifacts) == derive(list(multi_artifacts))
