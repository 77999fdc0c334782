"""Shared fixtures: local storage and an in-memory GitHub contents API."""

from __future__ import annotations

import base64
import hashlib
import json
from pathlib import Path

import httpx
import pytest

from podnote.storage import GitHubFS, LocalFS

REPO_PREFIX = "/repos/me/assistant"


class FakeGitHub:
    """Just enough of the GitHub REST API for GitHubFS.

    Files live in ``files`` keyed by repository path on the agent branch.
    """

    def __init__(self, branch: str = "vercel-agent-commit", branch_exists: bool = True):
        self.branch = branch
        self.branches = {"main": "base-sha"}
        if branch_exists:
            self.branches[branch] = "base-sha"
        self.files: dict[str, bytes] = {}
        self.commits: list[tuple[str, str]] = []
        self.fail_contents_get = False
        self.conflict_on_write = False

    @staticmethod
    def sha(content: bytes) -> str:
        return hashlib.sha1(content).hexdigest()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        assert path.startswith(REPO_PREFIX), path
        rest = path[len(REPO_PREFIX):]

        if rest == "" and request.method == "GET":
            return httpx.Response(200, json={"default_branch": "main"})

        if rest.startswith("/branches/") and request.method == "GET":
            name = rest[len("/branches/"):]
            if name not in self.branches:
                return httpx.Response(404, json={"message": "Branch not found"})
            return httpx.Response(200, json={"name": name, "commit": {"sha": self.branches[name]}})

        if rest == "/git/refs" and request.method == "POST":
            body = json.loads(request.content)
            name = body["ref"][len("refs/heads/"):]
            if name in self.branches:
                return httpx.Response(422, json={"message": "Reference already exists"})
            self.branches[name] = body["sha"]
            return httpx.Response(201, json={"ref": body["ref"]})

        if rest.startswith("/contents/"):
            return self._contents(request, rest[len("/contents/"):])

        return httpx.Response(404, json={"message": "Not Found"})

    def _contents(self, request: httpx.Request, repo_path: str) -> httpx.Response:
        if request.method == "GET":
            if self.fail_contents_get:
                return httpx.Response(500, json={"message": "Server Error"})
            if request.url.params.get("ref") not in self.branches:
                return httpx.Response(404, json={"message": "No commit found for the ref"})
            if repo_path in self.files:
                content = self.files[repo_path]
                return httpx.Response(200, json={
                    "type": "file",
                    "name": repo_path.rsplit("/", 1)[-1],
                    "path": repo_path,
                    "sha": self.sha(content),
                    "encoding": "base64",
                    "content": base64.b64encode(content).decode("ascii"),
                })
            prefix = repo_path.rstrip("/") + "/"
            children: dict[str, str] = {}
            for file_path in self.files:
                if file_path.startswith(prefix):
                    child, _, deeper = file_path[len(prefix):].partition("/")
                    children[child] = "dir" if deeper else "file"
            if not children:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=[
                {"name": name, "type": kind, "path": prefix + name}
                for name, kind in sorted(children.items())
            ])

        body = json.loads(request.content)
        assert body["branch"] == self.branch
        current = self.files.get(repo_path)

        if request.method == "PUT":
            if self.conflict_on_write:
                return httpx.Response(409, json={"message": "is at abc but expected def"})
            if current is not None and body.get("sha") != self.sha(current):
                return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
            self.files[repo_path] = base64.b64decode(body["content"])
            self.commits.append(("PUT", body["message"]))
            return httpx.Response(201 if current is None else 200, json={"content": {"path": repo_path}})

        if request.method == "DELETE":
            if current is None:
                return httpx.Response(404, json={"message": "Not Found"})
            if body.get("sha") != self.sha(current):
                return httpx.Response(409, json={"message": "sha does not match"})
            del self.files[repo_path]
            self.commits.append(("DELETE", body["message"]))
            return httpx.Response(200, json={"commit": {}})

        return httpx.Response(405)


@pytest.fixture
def local_fs(tmp_path: Path) -> LocalFS:
    return LocalFS(tmp_path / "AGENT_WORKING_FOLDER")


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def github_fs(fake_github: FakeGitHub) -> GitHubFS:
    return GitHubFS(
        token="ghp_test",
        repo="me/assistant",
        transport=fake_github.transport(),
    )


@pytest.fixture(params=["local", "github"])
def any_fs(request, tmp_path: Path):
    """Run a test once per storage backend."""
    if request.param == "local":
        return LocalFS(tmp_path / "AGENT_WORKING_FOLDER")
    return GitHubFS(token="ghp_test", repo="me/assistant", transport=FakeGitHub().transport())


@pytest.fixture
def reading_list_skill() -> str:
    return (
        "---\n"
        "name: Reading List\n"
        "description: How to add books to the reading list\n"
        "---\n"
        "\n"
        "Always set Status to \"To Read\".\n"
    )
