# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Type definitions for drivepath.

This module contains the enums, dataclasses and exceptions shared by the
backend, the directory entry and the directory iterators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Any, Callable, Optional

from drivepath.util import default_debug_level

if TYPE_CHECKING:
    from drivepath.backend import Backend


class FileAttribute(IntFlag):
    """File attribute bits, numerically identical to the Win32 FILE_ATTRIBUTE_* values."""

    NONE = 0
    READONLY = 0x1
    HIDDEN = 0x2
    SYSTEM = 0x4
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    NORMAL = 0x80
    TEMPORARY = 0x100
    REPARSE_POINT = 0x400
    # INVALID_FILE_ATTRIBUTES: the attributes could not be read
    UNKNOWN = 0xFFFFFFFF


class DirectoryOptions(IntFlag):
    """Traversal policy bits."""

    NONE = 0
    FOLLOW_DIRECTORY_SYMLINK = 0x1
    SKIP_PERMISSION_DENIED = 0x2


class ReparseTag(Enum):
    """Kinds of reparse point, as reported by the reparse tag probe."""

    MOUNT_POINT = 0xA0000003
    SYMLINK = 0xA000000C
    UNKNOWN = 0xFFFFFFFF


class EnumStatus(Enum):
    """Outcome of a single enumeration primitive call."""

    OK = "ok"
    END = "end"  # no more files at this level
    ACCESS_DENIED = "access-denied"
    FAILED = "failed"


@dataclass(slots=True)
class FindData:
    """
    Entry buffer filled in by the enumeration primitives.

    One buffer is reused for every result of a handle, so the content is only
    valid until the next open or advance call that receives it.
    """

    name: str = ""
    attributes: FileAttribute = FileAttribute.NONE

    def clear(self) -> None:
        self.name = ""
        self.attributes = FileAttribute.NONE


@dataclass(frozen=True)
class WalkConfig:
    """
    Configuration for iterdir() and walk().

    Attributes:
        options: Directory traversal policy (symlink following, permission skipping)
        recursive: Descend into subdirectories
        verbose: Verbosity level (0-4), defaults to $DRIVEPATH_VERBOSE
        backend: OS primitive layer; None selects the process default
        onerror: Called with each DirectoryIterationError that stops a walk
    """

    options: DirectoryOptions = DirectoryOptions.NONE
    recursive: bool = True
    verbose: int = field(default_factory=default_debug_level)
    backend: Optional[Backend] = None
    onerror: Optional[Callable[[DirectoryIterationError], Any]] = None


class DrivePathError(Exception):
    """Base error for drivepath, carrying a message and an errno-style code."""

    def __init__(self, message: str, errno: int = 1):
        super().__init__(message)
        self.message = message
        self.errno = errno


class IteratorAccessError(DrivePathError):
    """Dereferencing or advancing an end iterator. Always a programming error."""


class DirectoryIterationError(DrivePathError):
    """
    A failed open/advance during directory iteration.

    The traversal engine never raises this: it is recorded on the iterator
    (``iterator.error``) and handed to an ``onerror`` callback if one was given.
    """

    def __init__(
        self,
        message: str,
        path: str,
        status: EnumStatus,
        errno: int = 1,
        cause: Optional[OSError] = None,
    ):
        super().__init__(message, errno)
        self.path = path
        self.status = status
        self.cause = cause

    @property
    def is_access_denied(self) -> bool:
        return self.status is EnumStatus.ACCESS_DENIED
