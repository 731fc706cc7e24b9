"""
test_github_client.py — GitHub REST calls, with requests.request patched.
"""

from __future__ import annotations

import base64
from unittest.mock import MagicMock, patch

import pytest
import requests

from brewpub.config import Committer
from brewpub.github_client import BranchCommit, GitHubClient, GitHubError


def _resp(status: int = 200, payload=None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.json.return_value = payload if payload is not None else {}
    r.content = b"{}" if status != 204 else b""
    r.text = ""
    return r


@pytest.fixture
def repo():
    return GitHubClient("tok", api_base="https://gh.test/").repo("acme", "tap")


class TestClient:
    def test_token_required(self):
        with pytest.raises(GitHubError, match="token"):
            GitHubClient("  ")

    def test_headers_and_url(self, repo):
        with patch("brewpub.github_client.requests.request", return_value=_resp(payload={"commit": {"sha": "s"}})) as req:
            repo.get_commit_sha("main")
        method, url = req.call_args.args
        assert method == "GET"
        assert url == "https://gh.test/repos/acme/tap/branches/main"
        assert req.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_error_payload(self, repo):
        with patch("brewpub.github_client.requests.request", return_value=_resp(404, {"message": "Branch not found"})):
            with pytest.raises(GitHubError, match="Branch not found") as exc:
                repo.get_commit_sha("nope")
        assert exc.value.status_code == 404

    def test_transport_error_wrapped(self, repo):
        with patch("brewpub.github_client.requests.request", side_effect=requests.ConnectionError("down")):
            with pytest.raises(GitHubError, match="down"):
                repo.get_commit_sha("main")


class TestRepoOperations:
    def test_get_commit_sha(self, repo):
        with patch("brewpub.github_client.requests.request", return_value=_resp(payload={"commit": {"sha": "abc"}})):
            assert repo.get_commit_sha("main") == BranchCommit(sha="abc")

    def test_create_branch(self, repo):
        with patch("brewpub.github_client.requests.request", return_value=_resp(201, {"ref": "refs/heads/x"})) as req:
            repo.create_branch("x", "abc")
        assert req.call_args.args == ("POST", "https://gh.test/repos/acme/tap/git/refs")
        assert req.call_args.kwargs["json"] == {"ref": "refs/heads/x", "sha": "abc"}

    def test_create_existing_branch_fails(self, repo):
        with patch(
            "brewpub.github_client.requests.request",
            return_value=_resp(422, {"message": "Reference already exists"}),
        ):
            with pytest.raises(GitHubError, match="already exists"):
                repo.create_branch("x", "abc")

    def test_upsert_creates_new_file(self, repo):
        responses = [_resp(404, {"message": "Not Found"}), _resp(201, {"content": {}})]
        with patch("brewpub.github_client.requests.request", side_effect=responses) as req:
            repo.upsert_file("main", "Mytool.rb", "update formula", "class Mytool\n")
        put = req.call_args_list[1]
        assert put.args == ("PUT", "https://gh.test/repos/acme/tap/contents/Mytool.rb")
        body = put.kwargs["json"]
        assert body["branch"] == "main"
        assert body["message"] == "update formula"
        assert base64.b64decode(body["content"]).decode() == "class Mytool\n"
        assert "sha" not in body
        assert "committer" not in body

    def test_upsert_replaces_existing_file(self, repo):
        responses = [_resp(payload={"sha": "blob1"}), _resp(200, {"content": {}})]
        committer = Committer(name="Bot", email="bot@example.com")
        with patch("brewpub.github_client.requests.request", side_effect=responses) as req:
            repo.upsert_file("bump", "Mytool.rb", "msg", "x", committer)
        lookup = req.call_args_list[0]
        assert lookup.kwargs["params"] == {"ref": "bump"}
        body = req.call_args_list[1].kwargs["json"]
        assert body["sha"] == "blob1"
        assert body["committer"] == {"name": "Bot", "email": "bot@example.com"}

    def test_upsert_lookup_error_propagates(self, repo):
        with patch("brewpub.github_client.requests.request", return_value=_resp(500, {"message": "boom"})) as req:
            with pytest.raises(GitHubError, match="boom"):
                repo.upsert_file("main", "Mytool.rb", "m", "c")
        assert req.call_count == 1

    def test_create_pull_request_with_labels_and_assignees(self, repo):
        responses = [
            _resp(201, {"number": 7, "html_url": "https://gh.test/pr/7"}),
            _resp(200, []),
            _resp(201, {}),
        ]
        with patch("brewpub.github_client.requests.request", side_effect=responses) as req:
            pr = repo.create_pull_request(
                title="Bump", head="bump", base="main", body="b", labels=["release"], assignees=["me"]
            )
        assert pr.number == 7
        assert pr.url == "https://gh.test/pr/7"
        calls = req.call_args_list
        assert calls[0].kwargs["json"] == {"title": "Bump", "head": "bump", "base": "main", "body": "b"}
        assert calls[1].args[1].endswith("/issues/7/labels")
        assert calls[1].kwargs["json"] == {"labels": ["release"]}
        assert calls[2].args[1].endswith("/issues/7/assignees")

    def test_create_pull_request_without_extras(self, repo):
        with patch(
            "brewpub.github_client.requests.request", return_value=_resp(201, {"number": 1, "html_url": "u"})
        ) as req:
            repo.create_pull_request(title="", head="h", base="main")
        assert req.call_count == 1
