"""minigit repository: tracked files, version counter and commit history.

Each command follows the same cycle: ``Repository.load`` rebuilds the full
state from the metadata store, one operation mutates it in memory, and
``save`` writes it back. ``checkout`` and ``history`` never save.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import RepoConfig, load_repo_config, save_repo_config
from .context import ProjectContext
from .core import RepositoryFile, TrackedFiles
from .errors import (
    AlreadyInitializedError,
    CommitNotFoundError,
    CorruptStoreError,
    EmptyHistoryError,
    InvalidRangeError,
    NotInitializedError,
)
from .snapshot import Commit, write_text
from .store import (
    JsonStore,
    load_tracked,
    load_version,
    read_commit,
    save_tracked,
    save_version,
    scan_commit_versions,
    write_commit,
)

logger = logging.getLogger(__name__)


class Repository:
    """In-memory repository state bound to one working tree.

    Invariants:
    - ``commits`` is sorted by version with no gaps or duplicates
    - ``version`` equals the newest commit's version, or 0 with no commits
    """

    def __init__(
        self,
        ctx: ProjectContext,
        config: Optional[RepoConfig] = None,
        tracked_files: Optional[TrackedFiles] = None,
        commits: Optional[List[Commit]] = None,
        version: int = 0,
    ):
        self.ctx = ctx
        self.config = config or RepoConfig()
        self.tracked_files = tracked_files if tracked_files is not None else TrackedFiles()
        self.commits = list(commits or [])
        self.version = version

    @property
    def store(self) -> JsonStore:
        return JsonStore(self.ctx.store_dir, indent=self.config.json_indent)

    @property
    def latest(self) -> Optional[Commit]:
        """Most recent commit, if any."""
        return self.commits[-1] if self.commits else None

    # ============= Lifecycle =============

    @classmethod
    def create(cls, ctx: ProjectContext, config: Optional[RepoConfig] = None) -> "Repository":
        """Create the metadata store and return an empty repository.

        The tracked list and version counter are written by ``save``.

        Raises:
            AlreadyInitializedError: If the store already exists
        """
        if ctx.store_dir.exists():
            raise AlreadyInitializedError(ctx.store_dir)

        ctx.store_dir.mkdir(parents=True)
        config = config or RepoConfig()
        save_repo_config(config, ctx.root)
        logger.debug("Created store at %s", ctx.store_dir)
        return cls(ctx, config=config)

    @classmethod
    def load(cls, ctx: ProjectContext) -> "Repository":
        """Rebuild the full repository state from the metadata store.

        Raises:
            NotInitializedError: If the store does not exist
            CorruptStoreError: If a record is missing or malformed, or the
                persisted commits do not form a gapless sequence
        """
        if not ctx.is_initialized():
            raise NotInitializedError(ctx.store_dir)

        config = load_repo_config(ctx.root)
        store = JsonStore(ctx.store_dir, indent=config.json_indent)

        tracked = load_tracked(store)
        stored_version = load_version(store)

        commits = [read_commit(v, store) for v in scan_commit_versions(ctx.store_dir)]
        commits.sort(key=lambda c: c.version)

        expected = list(range(1, len(commits) + 1))
        if [c.version for c in commits] != expected:
            raise CorruptStoreError(
                ctx.store_dir,
                f"commit versions {[c.version for c in commits]} are not contiguous from 1",
            )

        version = commits[-1].version if commits else 0
        if stored_version != version:
            # A save interrupted between the commit directories and VERSION
            logger.warning(
                "Version counter %d disagrees with newest commit %d; using %d",
                stored_version, version, version,
            )

        logger.debug(
            "Loaded %s: %d tracked files, %d commits",
            ctx.root, len(tracked), len(commits),
        )
        return cls(ctx, config=config, tracked_files=tracked, commits=commits, version=version)

    def save(self) -> List[int]:
        """Persist the repository.

        New commit directories are written first, then the tracked list and
        version counter are overwritten. Existing commit directories are left
        untouched.

        Returns:
            Versions whose commit directories were written by this call
        """
        store = self.store
        written = [c.version for c in self.commits if write_commit(c, store)]
        save_tracked(self.tracked_files, store)
        save_version(self.version, store)
        logger.debug("Saved version %d (new commits: %s)", self.version, written or "none")
        return written

    # ============= Operations =============

    def add(self, name: Union[str, Path], message: Optional[str] = None) -> Commit:
        """Track a file and commit the whole tracked set.

        Args:
            name: File path, relative to the working tree root or absolute
            message: Commit message (default: "Adding a file <name>")

        Raises:
            InvalidPathError: If the path is not a trackable regular file
            AlreadyTrackedError: If the file is already tracked
        """
        file = RepositoryFile.create(name, root=self.ctx.root)
        self.tracked_files.add(file)
        try:
            return self.commit(message or f"Adding a file {file.name}")
        except Exception:
            # Snapshot failed; keep the tracked set as it was
            self.tracked_files.files.remove(file)
            raise

    def remove(self, name: str) -> RepositoryFile:
        """Stop tracking a file. History and the working file are unchanged.

        Raises:
            NotFoundError: If no tracked file matches ``name``
        """
        removed = self.tracked_files.remove(name)
        logger.debug("Untracked %s", removed.path)
        return removed

    def commit(self, message: Optional[str] = None) -> Commit:
        """Snapshot the entire tracked set as the next version.

        Only in-memory state changes; call ``save`` to persist.

        Raises:
            InvalidPathError: If a tracked file can no longer be read
        """
        next_version = self.version + 1
        commit = Commit.create(
            message or f"Commit version {next_version}",
            next_version,
            self.tracked_files.files,
            self.ctx.root,
            encoding=self.config.encoding,
        )
        self.commits.append(commit)
        self.version = next_version
        return commit

    def get_commit(self, version: int) -> Commit:
        """Look up a commit by version.

        Raises:
            CommitNotFoundError: If no commit has that version
        """
        for commit in self.commits:
            if commit.version == version:
                return commit
        raise CommitNotFoundError(version)

    def checkout(self, version: int) -> Commit:
        """Overwrite working files with the contents recorded at ``version``.

        Each file is written to the path recorded in the commit, whatever the
        tracked set looks like now.

        Raises:
            CommitNotFoundError: If no commit has that version
        """
        commit = self.get_commit(version)
        for cf in commit.files:
            write_text(cf.file.absolute(self.ctx.root), cf.contents, self.config.encoding)
            logger.debug("Restored %s from version %d", cf.file.path, version)
        return commit

    def history(self, n: Optional[int] = None) -> List[Commit]:
        """Report recent commits in ascending version order.

        Args:
            n: Number of versions ending at the current one; None reports
                only the most recent commit

        Raises:
            EmptyHistoryError: If ``n`` is None and nothing is committed
            InvalidRangeError: If ``n`` is below 1 or exceeds recorded versions
        """
        if n is None:
            if self.latest is None:
                raise EmptyHistoryError()
            return [self.latest]

        if n < 1 or n > len(self.commits):
            raise InvalidRangeError(n, len(self.commits))

        first = self.version - n + 1
        return [c for c in self.commits if first <= c.version <= self.version]
