"""
errors.py

Responsibility: The single exception hierarchy for brewpub.

Every remote or filesystem failure in the publish workflow is wrapped in one of
the step-specific classes below (with the original exception chained as
`__cause__`) so callers can tell which step failed without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class PublishStage(str, Enum):
    """States of one publish run. A failure names the stage it was attempting."""

    IDLE = "idle"
    RENDERED = "rendered"
    LOCAL_WRITTEN = "local_written"
    DIRECT_COMMITTED = "direct_committed"
    BASE_SHA_RESOLVED = "base_sha_resolved"
    BRANCH_CREATED = "branch_created"
    LOCAL_READ = "local_read"
    FILE_UPLOADED = "file_uploaded"
    PULL_REQUEST_OPENED = "pull_request_opened"


class BrewpubError(RuntimeError):
    pass


class ConfigError(BrewpubError, ValueError):
    pass


class ContractViolation(BrewpubError):
    """Input broke an upstream guarantee (e.g. a multi-target artifact without an os tag)."""


class VersionError(BrewpubError):
    pass


class TemplateError(BrewpubError):
    pass


class PublishError(BrewpubError):
    """
    Base for failures inside the publish workflow.

    `stage` is the state the failing step would have moved the run into;
    `completed_stage` is the last state the run actually reached.
    """

    stage: PublishStage = PublishStage.IDLE

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        completed_stage: PublishStage = PublishStage.IDLE,
    ) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.completed_stage = completed_stage


class RenderError(PublishError):
    stage = PublishStage.RENDERED


class LocalWriteError(PublishError):
    stage = PublishStage.LOCAL_WRITTEN


class LocalReadError(PublishError):
    stage = PublishStage.LOCAL_READ


class DirectUploadError(PublishError):
    stage = PublishStage.DIRECT_COMMITTED


RemoteUploadError = DirectUploadError


class BaseBranchLookupError(PublishError):
    stage = PublishStage.BASE_SHA_RESOLVED


class BranchCreationError(PublishError):
    stage = PublishStage.BRANCH_CREATED


class HeadBranchUploadError(PublishError):
    stage = PublishStage.FILE_UPLOADED


class PullRequestCreationError(PublishError):
    stage = PublishStage.PULL_REQUEST_OPENED
