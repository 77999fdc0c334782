"""Local filesystem backend for the agent working folder."""

from __future__ import annotations

import shutil
from pathlib import Path

from podnote.storage.base import AgentFS, DirEntry, normalize_path
from podnote.utils import get_logger

logger = get_logger(__name__)


class LocalFS(AgentFS):
    """AgentFS rooted at a directory on the host filesystem.

    Example:
        >>> fs = LocalFS("./AGENT_WORKING_FOLDER")
        >>> await fs.write_file("notion/datasources/Books/SKILL.md", text)
    """

    backend_name = "local"

    def __init__(self, root: str | Path):
        """Initialize local backend.

        Args:
            root: Working folder; created lazily on first write
        """
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        normalized = normalize_path(path)
        return self.root / normalized if normalized else self.root

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def read_file(self, path: str) -> str | None:
        full_path = self._resolve(path)
        if not full_path.is_file():
            return None
        return full_path.read_bytes().decode("utf-8")

    async def write_file(self, path: str, content: str) -> None:
        full_path = self._resolve(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content.encode("utf-8"))
        logger.debug("Wrote file", extra={"path": str(full_path)})

    async def read_dir(self, path: str) -> list[DirEntry]:
        full_path = self._resolve(path)
        if not full_path.is_dir():
            return []
        return [
            DirEntry(name=entry.name, is_directory=entry.is_dir())
            for entry in sorted(full_path.iterdir())
        ]

    async def mkdir(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    async def remove(self, path: str) -> None:
        full_path = self._resolve(path)
        if full_path == self.root:
            raise ValueError("Refusing to remove the working folder root")
        if full_path.is_dir():
            shutil.rmtree(full_path)
        elif full_path.exists():
            full_path.unlink()
        else:
            return
        logger.debug("Removed path", extra={"path": str(full_path)})
