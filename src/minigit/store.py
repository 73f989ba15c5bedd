"""Directory-based persistence for minigit.

Every record is one JSON document in the metadata store. ``JsonStore`` is
the single encode/decode contract; the module-level helpers fix which
record holds what:

    .minigit/
      tracked_files          ordered list of RepositoryFile
      VERSION                current version counter
      COMMIT_<version>/
        <file name>          SnapshotRecord per committed file
        meta                 CommitMeta

Writes are plain overwrites. Nothing here is atomic or transactional, so a
crash mid-save can leave the store partially updated.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from .constants import COMMIT_META, COMMIT_PREFIX, TRACKED_FILE, VERSION_FILE
from .core import RepositoryFile, TrackedFiles
from .errors import CorruptStoreError
from .snapshot import Commit, CommittedFile
from .storage_models import CommitFileEntry, CommitMeta, SnapshotRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore(Protocol):
    """
    Protocol for record stores.

    A record is addressed by its name and an optional subdirectory and is
    decoded back into the type the caller asks for.
    """

    def encode(self, name: str, value: Any, subdir: Optional[str] = None) -> Path:
        """Write ``value`` as record ``name`` and return its path."""
        ...

    def decode(self, name: str, type_: Type[T], subdir: Optional[str] = None) -> T:
        """Read record ``name`` as ``type_``."""
        ...

    def exists(self, name: str, subdir: Optional[str] = None) -> bool:
        ...


class JsonStore:
    """Record store keeping one JSON document per file under ``base_dir``."""

    def __init__(self, base_dir: Path, indent: Optional[int] = None):
        """
        Initialize JSON store.

        Args:
            base_dir: Metadata store directory
            indent: JSON indentation; None writes compact records
        """
        self.base_dir = Path(base_dir)
        self.indent = indent

    def path_for(self, name: str, subdir: Optional[str] = None) -> Path:
        base = self.base_dir / subdir if subdir else self.base_dir
        return base / name

    def encode(self, name: str, value: Any, subdir: Optional[str] = None) -> Path:
        path = self.path_for(name, subdir)
        text = json.dumps(to_jsonable_python(value), indent=self.indent, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
        return path

    def decode(self, name: str, type_: Type[T], subdir: Optional[str] = None) -> T:
        """Read and validate a record.

        Raises:
            CorruptStoreError: If the record is missing, unreadable or does
                not match ``type_``
        """
        path = self.path_for(name, subdir)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise CorruptStoreError(path, "record is missing")
        try:
            return TypeAdapter(type_).validate_json(data)
        except ValidationError as e:
            raise CorruptStoreError(path, f"{e.error_count()} validation error(s)") from e

    def exists(self, name: str, subdir: Optional[str] = None) -> bool:
        return self.path_for(name, subdir).exists()


# ============= Tracked Files & Version =============

def load_tracked(store: RecordStore) -> TrackedFiles:
    """Load the tracked files list."""
    return TrackedFiles(files=store.decode(TRACKED_FILE, List[RepositoryFile]))


def save_tracked(tracked: TrackedFiles, store: RecordStore) -> None:
    """Overwrite the tracked files list."""
    store.encode(TRACKED_FILE, tracked.files)


def load_version(store: RecordStore) -> int:
    """Load the version counter."""
    return store.decode(VERSION_FILE, int)


def save_version(version: int, store: RecordStore) -> None:
    """Overwrite the version counter."""
    store.encode(VERSION_FILE, version)


# ============= Commits =============

def commit_dir_name(version: int) -> str:
    return f"{COMMIT_PREFIX}{version}"


def scan_commit_versions(store_dir: Path) -> List[int]:
    """Find persisted commit versions, sorted ascending.

    Entries that are not ``COMMIT_<int>`` directories are ignored.
    """
    versions = []
    for entry in store_dir.iterdir():
        if not entry.is_dir() or not entry.name.startswith(COMMIT_PREFIX):
            continue
        suffix = entry.name[len(COMMIT_PREFIX):]
        if suffix.isdigit():
            versions.append(int(suffix))
        else:
            logger.debug("Skipping unrecognised store entry %s", entry.name)
    return sorted(versions)


def write_commit(commit: Commit, store: JsonStore) -> bool:
    """Persist a commit directory unless it already exists.

    Existing commit directories are never rewritten.

    Returns:
        True if the directory was written, False if it was already present
    """
    subdir = commit_dir_name(commit.version)
    commit_dir = store.base_dir / subdir
    if commit_dir.exists():
        logger.debug("Commit directory %s already persisted", subdir)
        return False

    commit_dir.mkdir()
    for cf in commit.files:
        record = SnapshotRecord(name=cf.file.name, path=cf.file.path, contents=cf.contents)
        store.encode(cf.record, record, subdir)

    meta = CommitMeta(
        version=commit.version,
        message=commit.message,
        created=commit.created,
        files=[
            CommitFileEntry(name=cf.file.name, path=cf.file.path, record=cf.record)
            for cf in commit.files
        ],
    )
    store.encode(COMMIT_META, meta, subdir)
    logger.debug("Wrote %s (%d files)", subdir, len(commit.files))
    return True


def read_commit(version: int, store: RecordStore) -> Commit:
    """Rebuild a commit from its directory.

    Raises:
        CorruptStoreError: If meta or a snapshot record is missing, malformed
            or disagrees with the directory name
    """
    subdir = commit_dir_name(version)
    meta = store.decode(COMMIT_META, CommitMeta, subdir)
    if meta.version != version:
        raise CorruptStoreError(
            Path(subdir) / COMMIT_META,
            f"records version {meta.version} inside {subdir}",
        )

    files = []
    for entry in meta.files:
        record = store.decode(entry.record, SnapshotRecord, subdir)
        files.append(
            CommittedFile(
                file=RepositoryFile(name=entry.name, path=entry.path),
                contents=record.contents,
                record=entry.record,
            )
        )

    kwargs = {"created": meta.created} if meta.created else {}
    return Commit(version=meta.version, message=meta.message, files=files, **kwargs)
