"""Tests for file references and the tracked file set."""

import pytest

from minigit.core import RepositoryFile, TrackedFiles
from minigit.errors import AlreadyTrackedError, InvalidPathError, NotFoundError


class TestRepositoryFile:
    """Test RepositoryFile validation."""

    def test_create_relative_to_root(self, work_tree):
        file = RepositoryFile.create("a.txt", root=work_tree)

        assert file.name == "a.txt"
        assert file.path == "a.txt"

    def test_create_nested_uses_final_component_as_name(self, work_tree):
        file = RepositoryFile.create("sub/c.txt", root=work_tree)

        assert file.name == "c.txt"
        assert file.path == "sub/c.txt"

    def test_create_absolute_path_is_stored_relative(self, work_tree):
        file = RepositoryFile.create(work_tree / "sub" / "c.txt", root=work_tree)

        assert file.path == "sub/c.txt"

    def test_create_without_root_keeps_path(self, work_tree):
        file = RepositoryFile.create(work_tree / "a.txt")

        assert file.name == "a.txt"
        assert file.path == (work_tree / "a.txt").as_posix()

    def test_missing_path_rejected(self, work_tree):
        with pytest.raises(InvalidPathError) as exc_info:
            RepositoryFile.create("nope.txt", root=work_tree)

        assert exc_info.value.reason == "does not exist"

    def test_directory_rejected(self, work_tree):
        with pytest.raises(InvalidPathError) as exc_info:
            RepositoryFile.create("sub", root=work_tree)

        assert exc_info.value.reason == "not a regular file"

    def test_path_outside_root_rejected(self, work_tree, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("x")

        with pytest.raises(InvalidPathError):
            RepositoryFile.create(outside, root=work_tree)

        with pytest.raises(InvalidPathError):
            RepositoryFile.create("../outside.txt", root=work_tree)

    def test_symlink_keeps_its_own_name(self, work_tree):
        (work_tree / "link.txt").symlink_to(work_tree / "a.txt")

        link = RepositoryFile.create("link.txt", root=work_tree)

        assert (link.name, link.path) == ("link.txt", "link.txt")
        assert link != RepositoryFile.create("a.txt", root=work_tree)

    def test_symlink_to_outside_target_allowed(self, work_tree, tmp_path):
        target = tmp_path / "outside.txt"
        target.write_text("x")
        (work_tree / "sub" / "out.txt").symlink_to(target)

        link = RepositoryFile.create("sub/out.txt", root=work_tree)

        assert link.path == "sub/out.txt"

    def test_store_files_rejected(self, repo, work_tree):
        with pytest.raises(InvalidPathError) as exc_info:
            RepositoryFile.create(".minigit/VERSION", root=work_tree)

        assert "metadata store" in exc_info.value.reason

    def test_equality_by_name_and_path(self, work_tree):
        first = RepositoryFile.create("a.txt", root=work_tree)
        second = RepositoryFile.create(work_tree / "a.txt", root=work_tree)
        nested = RepositoryFile.create("sub/c.txt", root=work_tree)

        assert first == second
        assert hash(first) == hash(second)
        assert first != nested

    def test_equality_ignores_content(self, work_tree):
        before = RepositoryFile.create("a.txt", root=work_tree)
        (work_tree / "a.txt").write_text("changed")
        after = RepositoryFile.create("a.txt", root=work_tree)

        assert before == after

    def test_absolute(self, work_tree):
        file = RepositoryFile.create("sub/c.txt", root=work_tree)

        assert file.absolute(work_tree) == work_tree / "sub" / "c.txt"


class TestTrackedFiles:
    """Test the ordered tracked file set."""

    @pytest.fixture
    def files(self, work_tree):
        return {
            name: RepositoryFile.create(name, root=work_tree)
            for name in ["a.txt", "b.txt", "sub/c.txt"]
        }

    def test_add_preserves_insertion_order(self, files):
        tracked = TrackedFiles()
        tracked.add(files["b.txt"])
        tracked.add(files["a.txt"])
        tracked.add(files["sub/c.txt"])

        assert tracked.names == ["b.txt", "a.txt", "c.txt"]
        assert len(tracked) == 3

    def test_add_duplicate_rejected(self, files, work_tree):
        tracked = TrackedFiles()
        tracked.add(files["a.txt"])

        with pytest.raises(AlreadyTrackedError):
            tracked.add(RepositoryFile.create("a.txt", root=work_tree))

        assert len(tracked) == 1

    def test_same_name_different_path_allowed(self, work_tree, write_file):
        write_file("c.txt", "top level")
        tracked = TrackedFiles()
        tracked.add(RepositoryFile.create("c.txt", root=work_tree))
        tracked.add(RepositoryFile.create("sub/c.txt", root=work_tree))

        assert tracked.names == ["c.txt", "c.txt"]

    def test_is_tracked(self, files):
        tracked = TrackedFiles()
        tracked.add(files["a.txt"])

        assert tracked.is_tracked(files["a.txt"])
        assert not tracked.is_tracked(files["b.txt"])
        assert files["a.txt"] in tracked

    def test_remove_shifts_remaining(self, files):
        tracked = TrackedFiles()
        for f in files.values():
            tracked.add(f)

        removed = tracked.remove("b.txt")

        assert removed == files["b.txt"]
        assert tracked.names == ["a.txt", "c.txt"]

    def test_remove_first_match_only(self, work_tree, write_file):
        write_file("c.txt", "top level")
        tracked = TrackedFiles()
        tracked.add(RepositoryFile.create("sub/c.txt", root=work_tree))
        tracked.add(RepositoryFile.create("c.txt", root=work_tree))

        removed = tracked.remove("c.txt")

        assert removed.path == "sub/c.txt"
        assert [f.path for f in tracked.files] == ["c.txt"]

    def test_remove_by_relative_path(self, files):
        tracked = TrackedFiles()
        for f in files.values():
            tracked.add(f)

        removed = tracked.remove("sub/c.txt")

        assert removed == files["sub/c.txt"]

    def test_remove_unknown_raises(self, files):
        tracked = TrackedFiles()
        tracked.add(files["a.txt"])

        with pytest.raises(NotFoundError) as exc_info:
            tracked.remove("zzz.txt")

        assert exc_info.value.name == "zzz.txt"
        assert len(tracked) == 1
