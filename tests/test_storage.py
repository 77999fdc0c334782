"""Tests for the agent working-folder storage backends."""

from __future__ import annotations

import httpx
import pytest

from conftest import FakeGitHub
from podnote.storage import (
    DirEntry,
    GitHubFS,
    StorageConfigError,
    StorageConflictError,
    join_path,
    normalize_path,
)
from podnote.storage.github import parse_repo


class TestNormalizePath:
    """Tests for path normalization."""

    def test_strips_and_collapses(self):
        assert normalize_path("/notion//datasources/") == "notion/datasources"

    def test_dot_segments(self):
        assert normalize_path("./podcasts.yaml") == "podcasts.yaml"

    def test_parent_within_root(self):
        assert normalize_path("a/b/../c") == "a/c"

    def test_escape_rejected(self):
        with pytest.raises(ValueError):
            normalize_path("../secrets")

    def test_root(self):
        assert normalize_path("") == ""
        assert normalize_path("/") == ""

    def test_join(self):
        assert join_path("notion/datasources", "Books", "SKILL.md") == "notion/datasources/Books/SKILL.md"


class TestBackendContract:
    """Behaviour both backends must share."""

    @pytest.mark.asyncio
    async def test_read_missing_file(self, any_fs):
        assert await any_fs.read_file("missing.txt") is None
        assert await any_fs.exists("missing.txt") is False

    @pytest.mark.asyncio
    async def test_write_creates_parents_and_round_trips(self, any_fs):
        content = "line one\r\nline two ünïcode\n"
        await any_fs.write_file("a/b/c.md", content)
        assert await any_fs.read_file("a/b/c.md") == content
        assert await any_fs.exists("a/b") is True

    @pytest.mark.asyncio
    async def test_overwrite(self, any_fs):
        await any_fs.write_file("note.md", "v1")
        await any_fs.write_file("note.md", "v2")
        assert await any_fs.read_file("note.md") == "v2"

    @pytest.mark.asyncio
    async def test_read_dir(self, any_fs):
        await any_fs.write_file("root/file.txt", "x")
        await any_fs.write_file("root/sub/inner.txt", "y")
        entries = sorted(await any_fs.read_dir("root"), key=lambda e: e.name)
        assert entries == [DirEntry("file.txt", False), DirEntry("sub", True)]

    @pytest.mark.asyncio
    async def test_read_missing_dir(self, any_fs):
        assert await any_fs.read_dir("nowhere") == []

    @pytest.mark.asyncio
    async def test_remove_directory_recursively(self, any_fs):
        await any_fs.write_file("drafts/x/SKILL.md", "x")
        await any_fs.write_file("drafts/x/notes/extra.md", "y")
        await any_fs.write_file("drafts/y/SKILL.md", "keep")

        await any_fs.remove("drafts/x")

        assert await any_fs.exists("drafts/x") is False
        assert await any_fs.read_file("drafts/y/SKILL.md") == "keep"

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, any_fs):
        await any_fs.remove("never/existed")

    @pytest.mark.asyncio
    async def test_mkdir_is_idempotent(self, any_fs):
        await any_fs.mkdir("a/b")
        await any_fs.mkdir("a/b")

    @pytest.mark.asyncio
    async def test_refuses_to_remove_root(self, any_fs):
        with pytest.raises(ValueError):
            await any_fs.remove("")


class TestGitHubFS:
    """GitHub-specific behaviour."""

    def test_parse_repo(self):
        assert parse_repo("me/assistant") == ("me", "assistant")

    @pytest.mark.parametrize("repo", ["", "me", "me/", "/assistant", "a/b/c"])
    def test_parse_repo_invalid(self, repo):
        with pytest.raises(StorageConfigError):
            parse_repo(repo)

    def test_missing_token(self):
        with pytest.raises(StorageConfigError):
            GitHubFS(token="", repo="me/assistant")

    @pytest.mark.asyncio
    async def test_files_live_under_base_path(self, github_fs, fake_github):
        await github_fs.write_file("podcasts.yaml", "podcasts: []\n")
        assert fake_github.files == {"AGENT_WORKING_FOLDER/podcasts.yaml": b"podcasts: []\n"}

    @pytest.mark.asyncio
    async def test_commit_messages(self, github_fs, fake_github):
        await github_fs.write_file("notion/x.md", "x")
        await github_fs.remove("notion/x.md")
        assert fake_github.commits == [
            ("PUT", "[agent] Update notion/x.md"),
            ("DELETE", "[agent] Delete notion/x.md"),
        ]

    @pytest.mark.asyncio
    async def test_branch_created_from_default_branch(self):
        fake = FakeGitHub(branch_exists=False)
        fs = GitHubFS(token="t", repo="me/assistant", transport=fake.transport())

        await fs.write_file("a.txt", "hello")

        assert fake.branches["vercel-agent-commit"] == "base-sha"
        assert await fs.read_file("a.txt") == "hello"

    @pytest.mark.asyncio
    async def test_mkdir_creates_branch(self):
        fake = FakeGitHub(branch_exists=False)
        fs = GitHubFS(token="t", repo="me/assistant", transport=fake.transport())
        await fs.mkdir("notion")
        assert "vercel-agent-commit" in fake.branches

    @pytest.mark.asyncio
    async def test_reads_fail_open(self, github_fs, fake_github):
        await github_fs.write_file("a.txt", "hello")
        fake_github.fail_contents_get = True
        assert await github_fs.read_file("a.txt") is None
        assert await github_fs.read_dir("") == []

    @pytest.mark.asyncio
    async def test_write_errors_propagate(self, github_fs, fake_github):
        fake_github.fail_contents_get = True
        with pytest.raises(httpx.HTTPStatusError):
            await github_fs.write_file("a.txt", "hello")

    @pytest.mark.asyncio
    async def test_version_conflict(self, github_fs, fake_github):
        fake_github.conflict_on_write = True
        with pytest.raises(StorageConflictError) as exc_info:
            await github_fs.write_file("a.txt", "hello")
        assert exc_info.value.path == "a.txt"
