"""Shared test fixtures and utilities."""

from pathlib import Path

import pytest

from minigit.context import ProjectContext
from minigit.repository import Repository


@pytest.fixture
def work_tree(tmp_path):
    """Create a working tree with a few text files."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / "b.txt").write_text("bee")

    sub = root / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("sea")
    return root


@pytest.fixture
def ctx(work_tree):
    """Project context rooted at the working tree."""
    return ProjectContext(work_tree)


@pytest.fixture
def repo(ctx):
    """Freshly initialized and saved repository."""
    repository = Repository.create(ctx)
    repository.save()
    return repository


@pytest.fixture
def reload(ctx):
    """Factory fixture that loads the repository as a new invocation would."""
    def _reload() -> Repository:
        return Repository.load(ctx)
    return _reload


@pytest.fixture
def write_file(work_tree):
    """Factory fixture to write files relative to the working tree."""
    def _write(path: str, content: str = "test content") -> Path:
        file_path = work_tree / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def tree_bytes():
    """Factory fixture mapping every file under a directory to its bytes."""
    def _tree_bytes(directory: Path) -> dict:
        return {
            p.relative_to(directory).as_posix(): p.read_bytes()
            for p in sorted(directory.rglob("*"))
            if p.is_file()
        }
    return _tree_bytes
