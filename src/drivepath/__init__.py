# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

r"""
drivepath - path algebra and directory traversal for drive-letter filesystems

This package models paths of the form ``C:\Users\x`` (root name, root
directory, relative part) purely lexically, and walks directory trees
through a small set of OS primitives.

Basic usage::

    from drivepath import Path

    p = Path("C:\\Users\\x\\notes.txt")
    p.root_name()        # Path('C:')
    p.parent_path()      # Path('C:\\Users\\x')
    p.replace_extension(".md")
    list(p)              # [Path('C:'), Path('\\'), Path('Users'), Path('x'), Path('notes.md')]

Walking a tree::

    from drivepath import walk, DirectoryOptions

    for entry in walk("C:\\data", options=DirectoryOptions.SKIP_PERMISSION_DENIED):
        print(entry.path)

With explicit control over descent::

    from drivepath import RecursiveDirectoryIterator

    it = RecursiveDirectoryIterator("C:\\data")
    for entry in it:
        if entry.path.filename() == "node_modules":
            it.disable_recursion_pending()
"""

from drivepath.path import Path, PathFormat, PathIterator, current_path, set_current_path
from drivepath.directory import (
    DirectoryEntry,
    DirectoryIterator,
    RecursiveDirectoryIterator,
    iterdir,
    walk,
)
from drivepath.backend import Backend, NativeBackend, get_default_backend, set_default_backend
from drivepath.status import (
    exists,
    is_directory,
    is_regular_file,
    is_symlink,
    is_junction,
    is_hidden,
    is_readonly,
)
from drivepath.types import (
    DirectoryOptions,
    FileAttribute,
    ReparseTag,
    EnumStatus,
    FindData,
    WalkConfig,
    DrivePathError,
    IteratorAccessError,
    DirectoryIterationError,
)
from drivepath.util import VERSION as __version__

__all__ = [
    "Path",
    "PathFormat",
    "PathIterator",
    "current_path",
    "set_current_path",
    "DirectoryEntry",
    "DirectoryIterator",
    "RecursiveDirectoryIterator",
    "iterdir",
    "walk",
    "Backend",
    "NativeBackend",
    "get_default_backend",
    "set_default_backend",
    "exists",
    "is_directory",
    "is_regular_file",
    "is_symlink",
    "is_junction",
    "is_hidden",
    "is_readonly",
    "DirectoryOptions",
    "FileAttribute",
    "ReparseTag",
    "EnumStatus",
    "FindData",
    "WalkConfig",
    "DrivePathError",
    "IteratorAccessError",
    "DirectoryIterationError",
    "__version__",
]
