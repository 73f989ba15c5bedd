"""Core data models for minigit.

A ``RepositoryFile`` is a validated reference to one trackable file and the
``TrackedFiles`` set is the ordered list of those references. Both are
persisted as-is in ``.minigit/tracked_files``.
"""

from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import MINIGIT_DIR
from .context import relative_to_root
from .errors import AlreadyTrackedError, InvalidPathError, NotFoundError


# ============= File References =============

class RepositoryFile(BaseModel):
    """Reference to a trackable file.

    ``path`` is a POSIX string relative to the working tree root whenever the
    file was created against a root. Equality is by ``(name, path)``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str

    @classmethod
    def create(
        cls,
        path: Union[str, Path],
        root: Optional[Path] = None,
    ) -> "RepositoryFile":
        """Validate ``path`` and build a reference to it.

        Args:
            path: File path; relative paths are taken relative to ``root``
            root: Working tree root the stored path is made relative to

        Raises:
            InvalidPathError: If the path is missing, not a regular file,
                outside ``root`` or inside the metadata store
        """
        p = Path(path)
        if root is not None and not p.is_absolute():
            p = root / p

        if not p.exists():
            raise InvalidPathError(path, "does not exist")
        if not p.is_file():
            raise InvalidPathError(path, "not a regular file")

        if root is None:
            return cls(name=p.name, path=p.as_posix())

        rel = relative_to_root(p, root)
        if rel is None:
            raise InvalidPathError(path, "outside the working tree")
        if rel.parts[0] == MINIGIT_DIR:
            raise InvalidPathError(path, "inside the metadata store")

        return cls(name=rel.name, path=rel.as_posix())

    def absolute(self, root: Path) -> Path:
        """Get the on-disk location of this file under ``root``."""
        return root / self.path


# ============= File Tracking =============

class TrackedFiles(BaseModel):
    """Ordered set of tracked files (stored in .minigit/tracked_files).

    Insertion order is preserved and no two entries are equal.
    """

    files: List[RepositoryFile] = Field(default_factory=list)

    def add(self, file: RepositoryFile) -> None:
        """Append a file to tracking.

        Raises:
            AlreadyTrackedError: If an equal file is already tracked
        """
        if self.is_tracked(file):
            raise AlreadyTrackedError(file)
        self.files.append(file)

    def remove(self, name: str) -> RepositoryFile:
        """Remove the first file whose name (or relative path) matches.

        Raises:
            NotFoundError: If no tracked file matches
        """
        for index, file in enumerate(self.files):
            if file.name == name or file.path == name:
                return self.files.pop(index)
        raise NotFoundError(name)

    def is_tracked(self, file: RepositoryFile) -> bool:
        return file in self.files

    @property
    def names(self) -> List[str]:
        """Names of tracked files in insertion order."""
        return [f.name for f in self.files]

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, file: object) -> bool:
        return file in self.files
