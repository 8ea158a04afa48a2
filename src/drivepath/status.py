# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""File type and attribute queries on a single path."""

from __future__ import annotations

from typing import Optional

from drivepath.backend import Backend, get_default_backend
from drivepath.path import Path, PathLike
from drivepath.types import FileAttribute, ReparseTag


def _attributes(target: PathLike, backend: Optional[Backend]) -> FileAttribute:
    backend = backend or get_default_backend()
    return backend.get_attributes(str(Path(target)))


def _has(attributes: FileAttribute, bits: FileAttribute) -> bool:
    return attributes != FileAttribute.UNKNOWN and bool(attributes & bits)


def _reparse_tag(target: PathLike, backend: Optional[Backend]) -> ReparseTag:
    backend = backend or get_default_backend()
    if not _has(_attributes(target, backend), FileAttribute.REPARSE_POINT):
        return ReparseTag.UNKNOWN
    return backend.get_reparse_tag(str(Path(target)))


def exists(target: PathLike, backend: Optional[Backend] = None) -> bool:
    return _attributes(target, backend) != FileAttribute.UNKNOWN


def is_directory(target: PathLike, backend: Optional[Backend] = None) -> bool:
    """True for directories, including links and junctions that point at one."""
    return _has(_attributes(target, backend), FileAttribute.DIRECTORY)


def is_regular_file(target: PathLike, backend: Optional[Backend] = None) -> bool:
    attributes = _attributes(target, backend)
    return attributes != FileAttribute.UNKNOWN and not (
        attributes & (FileAttribute.DIRECTORY | FileAttribute.REPARSE_POINT)
    )


def is_symlink(target: PathLike, backend: Optional[Backend] = None) -> bool:
    return _reparse_tag(target, backend) is ReparseTag.SYMLINK


def is_junction(target: PathLike, backend: Optional[Backend] = None) -> bool:
    return _reparse_tag(target, backend) is ReparseTag.MOUNT_POINT


def is_hidden(target: PathLike, backend: Optional[Backend] = None) -> bool:
    return _has(_attributes(target, backend), FileAttribute.HIDDEN)


def is_readonly(target: PathLike, backend: Optional[Backend] = None) -> bool:
    return _has(_attributes(target, backend), FileAttribute.READONLY)
