# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Operating system primitives used by the directory iterators.

The traversal engine only ever talks to a Backend. A Backend enumerates a
single directory level through opaque handles, reads attribute bits and
reparse tags, and wraps the process current directory. Failures are
reported through return values and ``last_error``; backend methods do not
raise.

Enumeration follows the Win32 find-handle model: opening a handle already
fills the caller's FindData with the first entry, every following entry
overwrites that same buffer, and ``.`` and ``..`` are reported like any
other entry.
"""

from __future__ import annotations

import os
import stat
from abc import ABC, abstractmethod
from typing import Any, Optional

from drivepath import grammar
from drivepath.types import EnumStatus, FileAttribute, FindData, ReparseTag

ENUM_WILDCARD = "*"


def enum_directory(pattern: str) -> str:
    """
    Directory part of an enumeration pattern such as 'C:\\dir\\*'.

    Only the single-level '*' wildcard is understood; a pattern without it
    names the directory itself.
    """
    segment = grammar.find_filename(pattern)
    if segment.found and segment.slice(pattern) == ENUM_WILDCARD:
        return pattern[: segment.offset] or "."
    return pattern or "."


def status_for_error(exc: OSError) -> EnumStatus:
    if isinstance(exc, PermissionError):
        return EnumStatus.ACCESS_DENIED
    return EnumStatus.FAILED


class Backend(ABC):
    """The narrow set of OS primitives the path and traversal code relies on."""

    def __init__(self) -> None:
        self.last_error: Optional[OSError] = None

    @abstractmethod
    def open_enum(self, pattern: str, data: FindData) -> tuple[EnumStatus, Optional[Any]]:
        """
        Start enumerating the directory named by pattern.

        On success returns (OK, handle) with data holding the first entry.
        On failure returns (ACCESS_DENIED or FAILED, None).
        """

    @abstractmethod
    def advance_enum(self, handle: Any, data: FindData) -> EnumStatus:
        """Fill data with the next entry. END when the directory is exhausted."""

    @abstractmethod
    def close_enum(self, handle: Any) -> None:
        """Release a handle returned by open_enum. Best effort, never fails loudly."""

    @abstractmethod
    def get_attributes(self, path: str) -> FileAttribute:
        """Attribute bits of path (not following links), or FileAttribute.UNKNOWN."""

    @abstractmethod
    def get_reparse_tag(self, path: str) -> ReparseTag:
        """Tell a symbolic link from a junction. UNKNOWN for anything else."""

    @abstractmethod
    def get_current_directory(self) -> Optional[str]:
        """Current directory text, or None if it cannot be read."""

    @abstractmethod
    def set_current_directory(self, path: str) -> bool:
        pass

    @abstractmethod
    def create_directory(self, path: str) -> bool:
        pass

    @abstractmethod
    def remove_directory(self, path: str) -> bool:
        pass


# =============================================================================
# Native backend
# =============================================================================


class _ScandirHandle:
    """Enumeration state for one directory: the dot entries, then os.scandir."""

    __slots__ = ("directory", "entries", "dots")

    def __init__(self, directory: str, entries):
        self.directory = directory
        self.entries = entries
        self.dots = [".."]


def to_native(path: str) -> str:
    """
    Convert path text to what the host OS accepts.

    On POSIX every backslash is taken as a separator and becomes '/', so a
    file or directory whose name contains a literal backslash cannot be
    reached: opening or descending into it fails like any missing path.
    """
    if os.sep == "/":
        return path.replace(grammar.PREFERRED_SEPARATOR, os.sep)
    return path


def attributes_from_stat(st: os.stat_result, name: str, target_is_dir: bool) -> FileAttribute:
    """
    Map an lstat() result to attribute bits.

    Windows reports the real bits in st_file_attributes. Elsewhere they are
    derived: links become reparse points (with DIRECTORY when the target is
    a directory, as Win32 reports directory links), dot-files are hidden,
    and files without owner write permission are read-only.
    """
    native_bits = getattr(st, "st_file_attributes", None)
    if native_bits is not None:
        return FileAttribute(native_bits)

    attrs = FileAttribute.NONE
    if stat.S_ISLNK(st.st_mode):
        attrs |= FileAttribute.REPARSE_POINT
        if target_is_dir:
            attrs |= FileAttribute.DIRECTORY
    elif stat.S_ISDIR(st.st_mode):
        attrs |= FileAttribute.DIRECTORY

    if name.startswith(".") and not grammar.is_dot_or_dot_dot(name):
        attrs |= FileAttribute.HIDDEN
    if not st.st_mode & stat.S_IWUSR:
        attrs |= FileAttribute.READONLY

    return attrs or FileAttribute.NORMAL


class NativeBackend(Backend):
    """Backend for the host operating system, built on os.scandir and os.lstat."""

    def open_enum(self, pattern: str, data: FindData) -> tuple[EnumStatus, Optional[Any]]:
        directory = to_native(enum_directory(pattern))
        try:
            entries = os.scandir(directory)
        except OSError as e:
            self.last_error = e
            data.clear()
            return status_for_error(e), None

        self.last_error = None
        data.name = "."
        data.attributes = FileAttribute.DIRECTORY
        return EnumStatus.OK, _ScandirHandle(directory, entries)

    def advance_enum(self, handle: _ScandirHandle, data: FindData) -> EnumStatus:
        if handle.dots:
            data.name = handle.dots.pop()
            data.attributes = FileAttribute.DIRECTORY
            return EnumStatus.OK

        while True:
            try:
                entry = next(handle.entries)
            except StopIteration:
                return EnumStatus.END
            except OSError as e:
                self.last_error = e
                return status_for_error(e)

            try:
                st = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                # Removed since the directory was read
                continue
            except OSError as e:
                self.last_error = e
                return status_for_error(e)

            # Dangling links, loops and unsearchable targets are still entries
            try:
                target_is_dir = stat.S_ISLNK(st.st_mode) and entry.is_dir(follow_symlinks=True)
            except OSError:
                target_is_dir = False

            data.name = entry.name
            data.attributes = attributes_from_stat(st, entry.name, target_is_dir)
            return EnumStatus.OK

    def close_enum(self, handle: _ScandirHandle) -> None:
        handle.entries.close()

    def get_attributes(self, path: str) -> FileAttribute:
        native = to_native(path)
        try:
            st = os.lstat(native)
        except OSError as e:
            self.last_error = e
            return FileAttribute.UNKNOWN
        return attributes_from_stat(st, grammar.filename(path), os.path.isdir(native))

    def get_reparse_tag(self, path: str) -> ReparseTag:
        native = to_native(path)
        try:
            st = os.lstat(native)
        except OSError as e:
            self.last_error = e
            return ReparseTag.UNKNOWN

        native_tag = getattr(st, "st_reparse_tag", None)
        if native_tag is not None:
            try:
                return ReparseTag(native_tag)
            except ValueError:
                return ReparseTag.UNKNOWN

        if stat.S_ISLNK(st.st_mode):
            return ReparseTag.SYMLINK
        if os.path.isjunction(native):
            return ReparseTag.MOUNT_POINT
        return ReparseTag.UNKNOWN

    def get_current_directory(self) -> Optional[str]:
        try:
            return os.getcwd()
        except OSError as e:
            self.last_error = e
            return None

    def set_current_directory(self, path: str) -> bool:
        try:
            os.chdir(to_native(path))
        except OSError as e:
            self.last_error = e
            return False
        return True

    def create_directory(self, path: str) -> bool:
        try:
            os.mkdir(to_native(path))
        except OSError as e:
            self.last_error = e
            return False
        return True

    def remove_directory(self, path: str) -> bool:
        try:
            os.rmdir(to_native(path))
        except OSError as e:
            self.last_error = e
            return False
        return True


_default_backend: Optional[Backend] = None


def get_default_backend() -> Backend:
    """Return the process-wide backend, creating a NativeBackend on first use."""
    global _default_backend
    if _default_backend is None:
        _default_backend = NativeBackend()
    return _default_backend


def set_default_backend(backend: Optional[Backend]) -> None:
    """Replace the process-wide backend. None restores a fresh NativeBackend on next use."""
    global _default_backend
    _default_backend = backend
