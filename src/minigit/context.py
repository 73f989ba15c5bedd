"""Project context for managing the working tree root and store paths."""

import contextlib
import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

import portalocker

from .constants import LOCK_FILE, MINIGIT_DIR
from .errors import InvalidPathError, NotInitializedError, StoreLockedError

logger = logging.getLogger(__name__)


def relative_to_root(path: Path, root: Path) -> Optional[Path]:
    """Express ``path`` relative to ``root``, or None if it lies outside.

    Directories are resolved but the final component is kept as given, so a
    symlink is addressed by its own name rather than its target's.
    """
    absolute = Path(os.path.abspath(path))
    located = absolute.parent.resolve() / absolute.name
    try:
        return located.relative_to(Path(root).resolve())
    except ValueError:
        return None


class ProjectContext:
    """Resolves every path minigit touches from an explicit working tree root."""

    def __init__(self, root: Union[str, Path]):
        """Initialize context for a working tree.

        Args:
            root: Working tree root; the store lives at ``root/.minigit``
        """
        self.root = Path(root).resolve()

    @classmethod
    def discover(cls, start_path: Optional[Path] = None) -> "ProjectContext":
        """Walk up from start_path to the nearest directory holding a store.

        Raises:
            NotInitializedError: If no ancestor holds a store
        """
        start = (start_path or Path.cwd()).resolve()
        for candidate in (start, *start.parents):
            if (candidate / MINIGIT_DIR).is_dir():
                return cls(candidate)
        raise NotInitializedError(start / MINIGIT_DIR)

    def is_initialized(self) -> bool:
        """Check if this root holds a store (without traversing up)."""
        return self.store_dir.is_dir()

    def resolve(self, path: Union[str, Path]) -> Path:
        """Convert a path to a root-relative one.

        Relative paths are taken relative to the root, not the process cwd.

        Raises:
            InvalidPathError: If the path lies outside the working tree
        """
        p = Path(path)
        absolute = p if p.is_absolute() else self.root / p
        rel = relative_to_root(absolute, self.root)
        if rel is None:
            raise InvalidPathError(path, "outside the working tree")
        return rel

    @property
    def store_dir(self) -> Path:
        """Get the metadata store directory."""
        return self.root / MINIGIT_DIR

    @property
    def lock_path(self) -> Path:
        return self.store_dir / LOCK_FILE

    @contextlib.contextmanager
    def lock(self, timeout: float = 10.0) -> Iterator[None]:
        """Hold the advisory store lock for the duration of the block.

        The lock serialises whole invocations only; it does not make the
        writes inside the block atomic.

        Raises:
            NotInitializedError: If the store does not exist
            StoreLockedError: If the lock is not acquired within timeout
        """
        if not self.is_initialized():
            raise NotInitializedError(self.store_dir)

        try:
            lock = portalocker.Lock(str(self.lock_path), "w", timeout=timeout)
            lock.acquire()
        except portalocker.exceptions.LockException:
            raise StoreLockedError(self.lock_path, timeout)

        logger.debug("Acquired store lock %s", self.lock_path)
        try:
            yield
        finally:
            lock.release()
            logger.debug("Released store lock %s", self.lock_path)
