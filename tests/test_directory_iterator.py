"""
Testing DirectoryIterator (single level).
"""

import copy

import pytest

from drivepath import (
    DirectoryIterator,
    DirectoryOptions,
    EnumStatus,
    IteratorAccessError,
    set_default_backend,
)

from testutil import MemoryBackend, assert_no_leaks


def names(entries):
    return [str(e.path.filename()) for e in entries]


class TestListing:
    """Tests for listing the entries of one directory."""

    def test_lists_children_in_order(self, memfs):
        memfs.make_file("root/a")
        memfs.make_path("root/b")
        memfs.make_file("root/c")
        entries = list(DirectoryIterator("root", backend=memfs))
        assert [str(e.path) for e in entries] == ["root\\a", "root\\b", "root\\c"]
        assert entries[1].is_directory()
        assert entries[0].is_regular_file()
        assert_no_leaks(memfs)

    def test_does_not_descend(self, sample_tree):
        assert names(DirectoryIterator("root", backend=sample_tree)) == ["a", "b"]

    def test_entries_are_independent_objects(self, sample_tree):
        entries = list(DirectoryIterator("root", backend=sample_tree))
        assert entries[0] is not entries[1]
        assert entries[0].path == "root\\a"

    def test_empty_directory(self, memfs):
        memfs.make_path("root")
        it = DirectoryIterator("root", backend=memfs)
        assert it == DirectoryIterator()
        assert list(it) == []
        assert it.error is None
        assert_no_leaks(memfs)

    def test_without_dot_entries(self):
        fs = MemoryBackend(dots=False)
        fs.make_file("C:/x")
        fs.make_file("C:/y")
        assert names(DirectoryIterator("C:\\", backend=fs)) == ["x", "y"]
        assert_no_leaks(fs)

    def test_trailing_separator(self, sample_tree):
        for root in ("root\\", "root\\\\/"):
            entries = list(DirectoryIterator(root, backend=sample_tree))
            assert [str(e.path) for e in entries] == ["root\\a", "root\\b"]

    def test_uses_default_backend(self, sample_tree):
        set_default_backend(sample_tree)
        assert names(DirectoryIterator("root")) == ["a", "b"]

    def test_options_accepted(self, sample_tree):
        it = DirectoryIterator("root", DirectoryOptions.SKIP_PERMISSION_DENIED, backend=sample_tree)
        assert names(it) == ["a", "b"]


class TestIteratorProtocol:
    """Tests for entry/increment, copies and the end iterator."""

    def test_entry_and_increment(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        assert it.entry.path == "root\\a"
        assert it.increment()
        assert it.entry.path == "root\\b"
        assert not it.increment()
        assert it == DirectoryIterator()
        assert_no_leaks(sample_tree)

    def test_end_iterator_access(self):
        end = DirectoryIterator()
        with pytest.raises(IteratorAccessError):
            end.entry
        with pytest.raises(IteratorAccessError):
            end.increment()
        assert end.error is None
        assert list(end) == []

    def test_exhausted_iterator_access(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        list(it)
        with pytest.raises(IteratorAccessError):
            it.increment()

    def test_next_after_increment(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        assert next(it).path == "root\\a"
        it.increment()
        assert next(it).path == "root\\b"
        with pytest.raises(StopIteration):
            next(it)

    def test_copies_share_progress(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        other = copy.copy(it)
        assert other == it
        assert other is not it
        it.increment()
        assert other.entry.path == "root\\b"
        it.increment()
        assert other == DirectoryIterator()

    def test_distinct_walks_differ(self, sample_tree):
        first = DirectoryIterator("root", backend=sample_tree)
        second = DirectoryIterator("root", backend=sample_tree)
        assert first != second
        assert first != DirectoryIterator()
        first.close()
        second.close()

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(DirectoryIterator())

    def test_repr(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        assert "root\\\\a" in repr(it)
        it.close()
        assert repr(it) == "DirectoryIterator(<end>)"


class TestRelease:
    """Tests that handles are released."""

    def test_close(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        next(it)
        it.close()
        assert it == DirectoryIterator()
        it.close()
        assert_no_leaks(sample_tree)

    def test_context_manager(self, sample_tree):
        with DirectoryIterator("root", backend=sample_tree) as it:
            next(it)
        assert_no_leaks(sample_tree)

    def test_dropping_the_iterator(self, sample_tree):
        it = DirectoryIterator("root", backend=sample_tree)
        next(it)
        del it
        assert_no_leaks(sample_tree)


class TestFailures:
    """Tests for failed opens and failed listings."""

    def test_missing_directory(self, memfs):
        errors = []
        it = DirectoryIterator("root\\missing", backend=memfs, onerror=errors.append)
        assert it == DirectoryIterator()
        assert it.error is not None
        assert it.error.status is EnumStatus.FAILED
        assert it.error.path == "root\\missing"
        assert not it.error.is_access_denied
        assert errors == [it.error]
        assert_no_leaks(memfs)

    def test_access_denied(self, memfs):
        memfs.make_file("root/a")
        memfs.deny("root")
        it = DirectoryIterator("root", backend=memfs)
        assert list(it) == []
        assert it.error.is_access_denied
        assert "Permission denied" in it.error.message

    def test_failure_part_way(self, memfs):
        memfs.make_file("root/a")
        memfs.make_file("root/b")
        memfs.make_file("root/c")
        memfs.fail_listing("root", after=1)
        errors = []
        it = DirectoryIterator("root", backend=memfs, onerror=errors.append)
        assert names(it) == ["a"]
        assert it.error.status is EnumStatus.FAILED
        assert it.error.cause is memfs.last_error
        assert errors == [it.error]
        assert_no_leaks(memfs)

    def test_increment_reports_failure(self, memfs):
        memfs.make_file("root/a")
        memfs.make_file("root/b")
        memfs.fail_listing("root", after=1)
        it = DirectoryIterator("root", backend=memfs)
        assert not it.increment()
        assert it.error is not None
        assert it == DirectoryIterator()
