"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

Only the operations the publish workflow needs are exposed, scoped to one
repository through `GitHubClient.repo(owner, name)`. Nothing here retries.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Sequence
from urllib.parse import quote

import requests

from brewpub.config import Committer
from brewpub.errors import BrewpubError

logger = logging.getLogger(__name__)


class GitHubError(BrewpubError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class BranchCommit:
    sha: str


@dataclass(frozen=True)
class PullRequest:
    number: int
    url: str
    head: str
    base: str


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com", timeout: float = 30) -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "brewpub",
        }

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._api_base}{path}"
        logger.debug("GitHub %s %s", method, path)
        try:
            r = requests.request(
                method, url, headers=self._headers(), json=json_body, params=params, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}", r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def repo(self, owner: str, name: str) -> RepoClient:
        return RepoClient(self, owner, name)


class RepoClient:
    """The four remote operations the publish workflow calls, scoped to one repository."""

    def __init__(self, client: GitHubClient, owner: str, name: str) -> None:
        self._client = client
        self.owner = owner
        self.name = name

    @property
    def _prefix(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def get_commit_sha(self, branch: str) -> BranchCommit:
        data = self._client.request("GET", f"{self._prefix}/branches/{quote(branch, safe='')}")
        return BranchCommit(sha=data["commit"]["sha"])

    def create_branch(self, branch: str, from_sha: str) -> None:
        """
        Create `refs/heads/<branch>` at `from_sha`.

        GitHub answers 422 when the ref already exists; that surfaces as a
        `GitHubError` and the existing branch is never reused.
        """
        self._client.request(
            "POST",
            f"{self._prefix}/git/refs",
            json_body={"ref": f"refs/heads/{branch}", "sha": from_sha},
        )

    def _existing_file_sha(self, branch: str, path: str) -> str | None:
        try:
            data = self._client.request("GET", f"{self._prefix}/contents/{quote(path)}", params={"ref": branch})
        except GitHubError as e:
            if e.status_code == 404:
                return None
            raise
        if isinstance(data, dict):
            return data.get("sha")
        return None

    def upsert_file(
        self,
        branch: str,
        path: str,
        message: str,
        content: str,
        committer: Committer | None = None,
    ) -> None:
        """Create `path` on `branch`, or replace it when it already exists."""
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        sha = self._existing_file_sha(branch, path)
        if sha:
            body["sha"] = sha
        if committer is not None:
            body["committer"] = {"name": committer.name, "email": committer.email}
        self._client.request("PUT", f"{self._prefix}/contents/{quote(path)}", json_body=body)

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
    ) -> PullRequest:
        """
        Open a pull request, then apply labels and assignees.

        The pulls endpoint has no committer field; `committer` is accepted for
        symmetry with `upsert_file` and only logged.
        """
        if committer is not None:
            logger.debug("Opening pull request %s -> %s as %s", head, base, committer.name)
        data = self._client.request(
            "POST",
            f"{self._prefix}/pulls",
            json_body={"title": title, "head": head, "base": base, "body": body},
        )
        pr = PullRequest(number=int(data["number"]), url=str(data.get("html_url") or ""), head=head, base=base)

        if labels:
            self._client.request(
                "POST", f"{self._prefix}/issues/{pr.number}/labels", json_body={"labels": list(labels)}
            )
        if assignees:
            self._client.request(
                "POST", f"{self._prefix}/issues/{pr.number}/assignees", json_body={"assignees": list(assignees)}
            )
        return pr
