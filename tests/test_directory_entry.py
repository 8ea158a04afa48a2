"""
Testing DirectoryEntry.
"""

from drivepath import DirectoryEntry, FileAttribute


class TestDirectoryEntryTypes:
    """Tests for the type queries of an entry."""

    def test_regular_file(self, memfs):
        memfs.make_file("root/f.txt")
        entry = DirectoryEntry("root\\f.txt", memfs)
        assert entry.exists()
        assert entry.is_regular_file()
        assert not entry.is_directory()
        assert not entry.is_symlink()
        assert not entry.is_junction()

    def test_directory(self, memfs):
        memfs.make_path("root/d")
        entry = DirectoryEntry("root\\d", memfs)
        assert entry.is_directory()
        assert not entry.is_regular_file()
        assert entry.attributes & FileAttribute.DIRECTORY

    def test_symlink_to_directory(self, memfs):
        memfs.make_path("root/d")
        memfs.make_link("root/l", "root/d")
        entry = DirectoryEntry("root\\l", memfs)
        assert entry.attributes & FileAttribute.REPARSE_POINT
        assert entry.attributes & FileAttribute.DIRECTORY
        assert not entry.is_directory()
        assert not entry.is_regular_file()
        assert entry.is_symlink()
        assert not entry.is_junction()

    def test_junction(self, memfs):
        memfs.make_path("root/d")
        memfs.make_link("root/j", "root/d", junction=True)
        entry = DirectoryEntry("root\\j", memfs)
        assert entry.is_junction()
        assert not entry.is_symlink()
        assert not entry.is_directory()

    def test_missing(self, memfs):
        entry = DirectoryEntry("root\\missing", memfs)
        assert not entry.exists()
        assert entry.attributes == FileAttribute.UNKNOWN
        assert not entry.is_directory()
        assert not entry.is_regular_file()
        assert not entry.is_symlink()
        assert memfs.reparse_calls == 0

    def test_default_entry(self, memfs):
        entry = DirectoryEntry(backend=memfs)
        assert entry.path.empty()
        assert not entry.exists()
        assert memfs.attribute_calls == 0

    def test_reparse_tag_probed_only_for_reparse_points(self, memfs):
        memfs.make_file("root/f")
        memfs.make_path("root/d")
        memfs.make_link("root/l", "root/d")
        DirectoryEntry("root\\f", memfs).is_symlink()
        DirectoryEntry("root\\d", memfs).is_junction()
        assert memfs.reparse_calls == 0
        DirectoryEntry("root\\l", memfs).is_symlink()
        assert memfs.reparse_calls == 1


class TestDirectoryEntryRefresh:
    """Tests for the attribute snapshot and its refresh points."""

    def test_snapshot_goes_stale(self, memfs):
        memfs.make_file("root/f")
        entry = DirectoryEntry("root\\f", memfs)
        memfs.remove("root/f")
        assert entry.exists()
        entry.refresh()
        assert not entry.exists()

    def test_assign_refreshes_on_change(self, memfs):
        memfs.make_file("root/f")
        memfs.make_path("root/d")
        entry = DirectoryEntry("root\\f", memfs)
        calls = memfs.attribute_calls

        entry.assign("root\\f")
        assert memfs.attribute_calls == calls

        entry.assign("root\\d")
        assert memfs.attribute_calls == calls + 1
        assert entry.path == "root\\d"
        assert entry.is_directory()

    def test_replace_filename(self, memfs):
        memfs.make_file("root/f")
        memfs.make_file("root/g")
        entry = DirectoryEntry("root\\f", memfs)
        calls = memfs.attribute_calls

        entry.replace_filename("f")
        assert memfs.attribute_calls == calls

        entry.replace_filename("g")
        assert entry.path == "root\\g"
        assert memfs.attribute_calls == calls + 1
        assert entry.is_regular_file()

    def test_repr(self, memfs):
        memfs.make_file("root/f")
        assert "root\\\\f" in repr(DirectoryEntry("root\\f", memfs))
