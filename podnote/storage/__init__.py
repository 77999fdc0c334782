"""Environment-aware storage for the agent working folder."""

from podnote.storage.base import AgentFS, DirEntry, join_path, normalize_path
from podnote.storage.errors import StorageConfigError, StorageConflictError, StorageError
from podnote.storage.github import GitHubFS
from podnote.storage.local import LocalFS

__all__ = [
    "AgentFS",
    "DirEntry",
    "GitHubFS",
    "LocalFS",
    "StorageConfigError",
    "StorageConflictError",
    "StorageError",
    "join_path",
    "normalize_path",
]
