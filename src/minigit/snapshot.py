"""Commit snapshots with full file contents."""

import logging
from pathlib import Path
from typing import Iterable, List, Set

from pydantic import BaseModel, ConfigDict, Field

from .constants import COMMIT_META
from .core import RepositoryFile
from .errors import InvalidPathError
from .utils import get_iso_timestamp

logger = logging.getLogger(__name__)


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """Read a working file exactly, without newline translation."""
    with open(path, encoding=encoding, newline="") as f:
        return f.read()


def write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Overwrite a working file exactly, without newline translation."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(text)


class CommittedFile(BaseModel):
    """One file's full contents as captured by a commit.

    ``record`` names the file's snapshot record inside the commit directory.
    """

    model_config = ConfigDict(frozen=True)

    file: RepositoryFile
    contents: str
    record: str


class Commit(BaseModel):
    """
    Immutable snapshot of every tracked file at one version.

    No deltas are kept: each commit stores complete contents so any version
    can be restored on its own.
    """

    model_config = ConfigDict(frozen=True)

    version: int = Field(ge=1)
    message: str
    files: List[CommittedFile] = Field(default_factory=list)
    created: str = Field(default_factory=get_iso_timestamp)

    @classmethod
    def create(
        cls,
        message: str,
        version: int,
        files: Iterable[RepositoryFile],
        root: Path,
        encoding: str = "utf-8",
    ) -> "Commit":
        """Capture the current on-disk contents of ``files``.

        Raises:
            InvalidPathError: If a file is gone or is not readable as text
        """
        committed = []
        used: Set[str] = {COMMIT_META}
        for position, file in enumerate(files):
            path = file.absolute(root)
            try:
                contents = read_text(path, encoding)
            except FileNotFoundError:
                raise InvalidPathError(file.path, "tracked file no longer exists")
            except IsADirectoryError:
                raise InvalidPathError(file.path, "not a regular file")
            except UnicodeDecodeError:
                raise InvalidPathError(file.path, f"not a {encoding} text file")

            record = file.name
            suffix = position
            while record in used:
                record = f"{file.name}.{suffix}"
                suffix += 1
            used.add(record)
            committed.append(CommittedFile(file=file, contents=contents, record=record))

        logger.debug("Captured version %d (%d files)", version, len(committed))
        return cls(version=version, message=message, files=committed)

    @property
    def file_names(self) -> List[str]:
        """Names of the committed files in commit order."""
        return [cf.file.name for cf in self.files]

    @property
    def total_size(self) -> int:
        """UTF-8 bytes of content captured by this commit."""
        return sum(len(cf.contents.encode("utf-8")) for cf in self.files)
