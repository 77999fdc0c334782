"""Agent filesystem interface.

Every path is relative to the agent working folder. Backends must behave
identically for the same logical path:

- absence is never an error on the read side (``read_file`` returns None,
  ``read_dir`` returns an empty list)
- ``write_file`` creates parent directories implicitly
- ``mkdir`` and ``remove`` are idempotent; ``remove`` is recursive
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DirEntry:
    """A single directory listing entry."""

    name: str
    is_directory: bool


def normalize_path(path: str) -> str:
    """Normalize a relative storage path.

    Strips leading/trailing separators, collapses repeated separators and
    ``.`` segments, and resolves ``..`` without allowing it to climb above
    the root.

    Examples:
        "/notion//datasources/" -> "notion/datasources"
        "./podcasts.yaml"       -> "podcasts.yaml"
        ""                      -> ""

    Raises:
        ValueError: If the path escapes the working folder
    """
    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise ValueError(f"Path escapes the working folder: {path}")
            parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


def join_path(*segments: str) -> str:
    """Join path segments with forward slashes and normalize."""
    return normalize_path("/".join(s for s in segments if s))


class AgentFS(ABC):
    """Async file operations on the agent working folder."""

    backend_name: str = "base"

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a file or directory exists."""

    @abstractmethod
    async def read_file(self, path: str) -> str | None:
        """Read file content, or None if the file does not exist."""

    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """Write file content, creating parent directories as needed."""

    @abstractmethod
    async def read_dir(self, path: str) -> list[DirEntry]:
        """List directory entries, or an empty list if absent."""

    @abstractmethod
    async def mkdir(self, path: str) -> None:
        """Create a directory (recursive, idempotent)."""

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Remove a file or directory tree; absent paths are a no-op."""

    async def aclose(self) -> None:
        """Release backend resources."""
