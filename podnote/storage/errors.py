"""Storage exceptions."""


class StorageError(Exception):
    """Base class for storage failures."""


class StorageConfigError(StorageError):
    """The selected backend is missing required configuration."""


class StorageConflictError(StorageError):
    """A remote write lost a race against a concurrent change.

    The operation did not take effect and can be retried.
    """

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Conflicting update for {path}; retry the operation")
