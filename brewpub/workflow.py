"""
workflow.py

Responsibility: Publish a rendered formula to its tap repository.

High-level flow (`PublishWorkflow.publish`):
1) Render the formula -> text
2) Write `<Name>.rb` into the output directory
3a) No pull request configured: upsert the file straight onto `formula.head`
3b) Pull request configured:
    base sha -> create head branch -> re-read local file -> upsert on head
    -> open pull request

Every remote call is attempted exactly once. The first failure aborts the run
and is raised as the step-specific `PublishError` subclass, with the original
exception chained. Nothing is rolled back: a failure after the head branch was
created leaves that branch behind on the remote.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence, TypeVar

from brewpub.config import Committer
from brewpub.errors import (
    BaseBranchLookupError,
    BrewpubError,
    BranchCreationError,
    DirectUploadError,
    HeadBranchUploadError,
    LocalReadError,
    LocalWriteError,
    PublishError,
    PublishStage,
    PullRequestCreationError,
    RenderError,
)
from brewpub.formula import (
    DEFAULT_BASE_BRANCH_NAME,
    DEFAULT_COMMITTER,
    DEFAULT_HEAD_BRANCH_NAME,
    Formula,
)
from brewpub.renderer import Template

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FormulaRenderer(Protocol):
    def render(self, template: Template | str, formula: Formula) -> str: ...


class RepoHosting(Protocol):
    def get_commit_sha(self, branch: str) -> Any: ...

    def create_branch(self, branch: str, from_sha: str) -> None: ...

    def upsert_file(
        self, branch: str, path: str, message: str, content: str, committer: Committer | None = None
    ) -> None: ...

    def create_pull_request(
        self,
        *,
        title: str,
        head: str,
        base: str,
        body: str = "",
        assignees: Sequence[str] = (),
        labels: Sequence[str] = (),
        committer: Committer | None = None,
    ) -> Any: ...


class HostingClient(Protocol):
    def repo(self, owner: str, name: str) -> RepoHosting: ...


@dataclass(frozen=True)
class PullRequestPlan:
    """Pull request settings with every default applied."""

    committer: Committer
    head_branch: str
    base_branch: str
    title: str
    body: str
    labels: tuple[str, ...]
    assignees: tuple[str, ...]


def plan_pull_request(formula: Formula) -> PullRequestPlan:
    pr = formula.pull_request
    if pr is None:
        raise ValueError("formula has no pull request configuration")
    return PullRequestPlan(
        committer=formula.commit_author or DEFAULT_COMMITTER,
        head_branch=pr.head or DEFAULT_HEAD_BRANCH_NAME,
        base_branch=pr.base or DEFAULT_BASE_BRANCH_NAME,
        title=pr.title or "",
        body=pr.body or "",
        labels=tuple(pr.labels or ()),
        assignees=tuple(pr.assignees or ()),
    )


class _Run:
    """Stage bookkeeping for a single publish invocation."""

    def __init__(self, formula: Formula) -> None:
        self.formula = formula
        self.stage = PublishStage.IDLE

    def step(
        self,
        error_cls: type[PublishError],
        context: str,
        fn: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        try:
            result = fn(*args, **kwargs)
        except Exception as e:  # noqa: BLE001 - every failure is wrapped with its step context
            logger.debug("%s failed after stage %s", self.formula.name, self.stage.value)
            raise error_cls(context, e, completed_stage=self.stage) from e
        self.stage = error_cls.stage
        logger.debug("%s -> %s", self.formula.name, self.stage.value)
        return result


class PublishWorkflow:
    def __init__(
        self,
        client: HostingClient | None,
        renderer: FormulaRenderer,
        output_dir: str | Path = ".",
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._output_dir = Path(output_dir)

    def local_path(self, formula: Formula) -> Path:
        return self._output_dir / formula.file_name

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8", newline="\n")

    def _read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def render(self, formula: Formula, template: Template | str) -> str:
        """Render and write the formula locally, without any remote call."""
        run = _Run(formula)
        return self._render_and_write(run, template)

    def _render_and_write(self, run: _Run, template: Template | str) -> str:
        formula = run.formula
        logger.debug("Rendering formula template %s", template)
        text = run.step(RenderError, "error rendering the formula template", self._renderer.render, template, formula)

        path = self.local_path(formula)
        run.step(LocalWriteError, f"error writing {path}", self._write, path, text)
        logger.info("Wrote %s", path)
        return text

    def publish(self, formula: Formula, template: Template | str) -> str:
        """Render, write locally, then commit directly or through a pull request. Returns the rendered text."""
        if self._client is None:
            raise BrewpubError("publishing requires a hosting client")
        run = _Run(formula)
        text = self._render_and_write(run, template)

        repo = self._client.repo(formula.repository.owner, formula.repository.name)
        if formula.pull_request is None:
            self._commit_directly(run, repo, text)
        else:
            self._open_pull_request(run, repo)
        return text

    def _commit_directly(self, run: _Run, repo: RepoHosting, text: str) -> None:
        formula = run.formula
        logger.info("Committing %s to %s", formula.file_name, formula.head)
        run.step(
            DirectUploadError,
            f"error uploading file to {formula.head} branch",
            repo.upsert_file,
            formula.head,
            formula.file_name,
            formula.commit_message,
            text,
        )

    def _open_pull_request(self, run: _Run, repo: RepoHosting) -> None:
        formula = run.formula
        plan = plan_pull_request(formula)

        logger.info("Creating branch %s from %s", plan.head_branch, plan.base_branch)
        base_sha = run.step(
            BaseBranchLookupError,
            "error getting the base branch commit sha",
            lambda: repo.get_commit_sha(plan.base_branch).sha,
        )
        run.step(
            BranchCreationError,
            "error creating the branch",
            repo.create_branch,
            plan.head_branch,
            base_sha,
        )

        # Uploads what is on disk, so the local file may be changed between steps.
        path = self.local_path(formula)
        content = run.step(LocalReadError, f"error reading {path}", self._read, path)

        logger.info("Updating formula on %s", plan.head_branch)
        run.step(
            HeadBranchUploadError,
            "error uploading file to head branch",
            repo.upsert_file,
            plan.head_branch,
            formula.file_name,
            formula.commit_message,
            content,
            plan.committer,
        )

        logger.info("Creating pull request %s -> %s", plan.head_branch, plan.base_branch)
        pr = run.step(
            PullRequestCreationError,
            "error creating pull request",
            repo.create_pull_request,
            title=plan.title,
            body=plan.body,
            base=plan.base_branch,
            head=plan.head_branch,
            labels=list(plan.labels),
            assignees=list(plan.assignees),
            committer=plan.committer,
        )
        url = getattr(pr, "url", None)
        if url:
            logger.info("Opened pull request %s", url)
