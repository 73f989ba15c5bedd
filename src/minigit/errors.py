"""Custom exceptions for minigit.

Every failure a user can cause is a typed ``MinigitError``. The core raises
them and never terminates the process; the CLI turns them into a message and
a non-zero exit code.
"""

from pathlib import Path
from typing import Optional, Union


class MinigitError(RuntimeError):
    """Base class for all minigit errors."""
    pass


# Tracked-set Errors
class InvalidPathError(MinigitError):
    """Path does not name a trackable regular file."""

    def __init__(self, path: Union[str, Path], reason: str = "does not exist"):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid file path '{path}': {reason}")


class AlreadyTrackedError(MinigitError):
    """File is already in the tracked set."""

    def __init__(self, file):
        self.file = file
        super().__init__(f"File '{file.path}' is already tracked")


class NotFoundError(MinigitError):
    """No tracked file matches the given name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"File '{name}' is not tracked")


# Store Errors
class StoreError(MinigitError):
    """Base class for metadata store errors."""
    pass


class AlreadyInitializedError(StoreError):
    """A metadata store already exists."""

    def __init__(self, store_dir: Path):
        self.store_dir = store_dir
        super().__init__(f"Repository already initialized ({store_dir} exists)")


class NotInitializedError(StoreError):
    """No metadata store exists where one was expected."""

    def __init__(self, store_dir: Path):
        self.store_dir = store_dir
        super().__init__(f"Not a minigit repository (no {store_dir} found)")


class CorruptStoreError(StoreError):
    """A store record is missing or cannot be decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt store record {path}: {reason}")


class StoreLockedError(StoreError):
    """Another process holds the store lock."""

    def __init__(self, lock_path: Path, timeout: float):
        self.lock_path = lock_path
        self.timeout = timeout
        super().__init__(
            f"Repository is locked by another process ({lock_path}); "
            f"gave up after {timeout:g}s"
        )


# History Errors
class CommitNotFoundError(MinigitError):
    """No commit exists for the requested version."""

    def __init__(self, version: int, message: Optional[str] = None):
        self.version = version
        super().__init__(message or f"Commit not found for version {version}")


class EmptyHistoryError(CommitNotFoundError):
    """History was requested before anything was committed."""

    def __init__(self):
        super().__init__(0, "No commits recorded yet")


class InvalidRangeError(MinigitError):
    """History window is larger than the recorded history."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot show {requested} versions: "
            f"{available} recorded"
        )
