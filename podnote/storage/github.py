"""GitHub contents-API backend for the agent working folder.

Used in serverless deployments where the local disk is ephemeral. All reads
and writes go to one long-lived branch, created from the repository default
branch on first write. GitHub has no empty directories: a directory exists
only while some file lives under it, so ``mkdir`` just makes sure the branch
is there.

Read-side calls fail open: a transport or API error is logged and reported
as absence. Write-side calls raise.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Any
from urllib.parse import quote

import httpx

from podnote.storage.base import AgentFS, DirEntry, join_path, normalize_path
from podnote.storage.errors import StorageConfigError, StorageConflictError
from podnote.utils import get_logger

logger = get_logger(__name__)


def parse_repo(repo: str) -> tuple[str, str]:
    """Split an ``owner/repo`` string.

    Raises:
        StorageConfigError: If the value is not in ``owner/repo`` form
    """
    owner, _, name = repo.strip().partition("/")
    if not owner or not name or "/" in name:
        raise StorageConfigError(f'Invalid GITHUB_REPO format: {repo!r}. Expected "owner/repo"')
    return owner, name


class GitHubFS(AgentFS):
    """AgentFS backed by files on a GitHub branch.

    Example:
        >>> fs = GitHubFS(token="ghp_...", repo="me/assistant")
        >>> await fs.write_file("podcasts.yaml", text)   # commits to vercel-agent-commit
    """

    backend_name = "github"

    def __init__(
        self,
        token: str,
        repo: str,
        branch: str = "vercel-agent-commit",
        base_path: str = "AGENT_WORKING_FOLDER",
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize GitHub backend.

        Args:
            token: GitHub token with contents write access
            repo: Repository in ``owner/repo`` form
            branch: Dedicated branch all operations are scoped to
            base_path: Folder inside the repository that maps to the working root
            api_url: GitHub REST API base URL
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (tests mount a fake API here)
        """
        if not token:
            raise StorageConfigError("GitHub credentials not configured (GITHUB_TOKEN, GITHUB_REPO)")
        self.owner, self.repo = parse_repo(repo)
        self.branch = branch
        self.base_path = normalize_path(base_path)

        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout_seconds,
            transport=transport,
        )
        self._branch_ready = False
        self._branch_lock = asyncio.Lock()

    # ── helpers ───────────────────────────────────────────────────────────

    @property
    def _repo_url(self) -> str:
        return f"/repos/{quote(self.owner)}/{quote(self.repo)}"

    def _repo_path(self, path: str) -> str:
        return join_path(self.base_path, normalize_path(path))

    def _contents_url(self, repo_path: str) -> str:
        return f"{self._repo_url}/contents/{quote(repo_path, safe='/')}"

    async def _get_contents(self, path: str) -> Any | None:
        """Fetch raw contents metadata; None on 404. Other errors raise."""
        resp = await self._client.get(
            self._contents_url(self._repo_path(path)),
            params={"ref": self.branch},
        )
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    async def _lookup(self, path: str) -> Any | None:
        """Fail-open variant of _get_contents for read-side operations."""
        try:
            return await self._get_contents(path)
        except httpx.HTTPError as e:
            logger.warning(
                "GitHub lookup failed, treating as absent",
                extra={"path": path, "error": str(e)},
            )
            return None

    async def _ensure_branch(self) -> None:
        """Create the dedicated branch from the default branch if missing."""
        if self._branch_ready:
            return

        async with self._branch_lock:
            if self._branch_ready:
                return

            branch_url = f"{self._repo_url}/branches/{quote(self.branch, safe='')}"
            resp = await self._client.get(branch_url)
            if resp.status_code == 404:
                repo_resp = await self._client.get(self._repo_url)
                repo_resp.raise_for_status()
                default_branch = repo_resp.json()["default_branch"]

                base_resp = await self._client.get(
                    f"{self._repo_url}/branches/{quote(default_branch, safe='')}"
                )
                base_resp.raise_for_status()
                base_sha = base_resp.json()["commit"]["sha"]

                ref_resp = await self._client.post(
                    f"{self._repo_url}/git/refs",
                    json={"ref": f"refs/heads/{self.branch}", "sha": base_sha},
                )
                # 422 means another writer created it first
                if ref_resp.status_code != 422:
                    ref_resp.raise_for_status()
                logger.info(
                    f"Created branch {self.branch}",
                    extra={"from_branch": default_branch},
                )
            else:
                resp.raise_for_status()

            self._branch_ready = True

    @staticmethod
    def _raise_for_write(resp: httpx.Response, path: str) -> None:
        if resp.status_code == 409 or (
            resp.status_code == 422 and "sha" in resp.text.lower()
        ):
            raise StorageConflictError(path)
        resp.raise_for_status()

    # ── AgentFS ───────────────────────────────────────────────────────────

    async def exists(self, path: str) -> bool:
        return await self._lookup(path) is not None

    async def read_file(self, path: str) -> str | None:
        data = await self._lookup(path)
        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        if data.get("encoding") != "base64":
            return None
        return base64.b64decode(data.get("content", "")).decode("utf-8")

    async def write_file(self, path: str, content: str) -> None:
        await self._ensure_branch()
        repo_path = self._repo_path(path)

        # Update needs the current blob sha; absent file means create
        existing = await self._get_contents(path)
        payload: dict[str, Any] = {
            "message": f"[agent] Update {normalize_path(path)}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if isinstance(existing, dict) and existing.get("type") == "file":
            payload["sha"] = existing["sha"]

        resp = await self._client.put(self._contents_url(repo_path), json=payload)
        self._raise_for_write(resp, path)
        logger.info("Wrote file", extra={"path": repo_path, "branch": self.branch})

    async def read_dir(self, path: str) -> list[DirEntry]:
        data = await self._lookup(path)
        if not isinstance(data, list):
            return []
        return [
            DirEntry(name=item["name"], is_directory=item.get("type") == "dir")
            for item in data
        ]

    async def mkdir(self, path: str) -> None:
        await self._ensure_branch()

    async def remove(self, path: str) -> None:
        if not normalize_path(path):
            raise ValueError("Refusing to remove the working folder root")
        data = await self._get_contents(path)
        if data is None:
            return

        if isinstance(data, list):
            # No recursive delete in the contents API
            for item in data:
                await self.remove(join_path(normalize_path(path), item["name"]))
            return

        if data.get("type") != "file":
            return

        repo_path = self._repo_path(path)
        resp = await self._client.request(
            "DELETE",
            self._contents_url(repo_path),
            json={
                "message": f"[agent] Delete {normalize_path(path)}",
                "sha": data["sha"],
                "branch": self.branch,
            },
        )
        if resp.status_code == 404:
            return
        self._raise_for_write(resp, path)
        logger.info("Deleted file", extra={"path": repo_path, "branch": self.branch})

    async def aclose(self) -> None:
        await self._client.aclose()
