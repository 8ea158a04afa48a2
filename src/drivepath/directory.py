# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Directory entries and directory iteration.

DirectoryIterator walks a single directory; RecursiveDirectoryIterator
walks a whole tree depth-first, yielding every directory before its
contents. Both are lazy, forward-only and built on the enumeration
primitives of a drivepath.backend.Backend.

Iterators never raise on filesystem errors. A failed step returns False
from increment()/pop(), records a DirectoryIterationError on
``iterator.error``, releases every handle and leaves the iterator at the
end. Copies made with copy.copy() share progress, and every finished
iterator compares equal to the end iterator ``DirectoryIterator()``.

Basic usage::

    from drivepath import RecursiveDirectoryIterator, DirectoryOptions

    with RecursiveDirectoryIterator("C:\\data", DirectoryOptions.SKIP_PERMISSION_DENIED) as it:
        for entry in it:
            if entry.is_directory() and entry.path.filename() == ".git":
                it.disable_recursion_pending()
            print("    " * it.depth + str(entry.path))
    if it.error:
        print("walk stopped early:", it.error.message)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator
from typing import Any, Optional

from drivepath import grammar
from drivepath.backend import ENUM_WILDCARD, Backend, get_default_backend
from drivepath.path import Path, PathLike
from drivepath.types import (
    DirectoryIterationError,
    DirectoryOptions,
    EnumStatus,
    FileAttribute,
    FindData,
    IteratorAccessError,
    ReparseTag,
    WalkConfig,
)
from drivepath.util import debug, set_debug_level

ErrorCallback = Callable[[DirectoryIterationError], Any]


class DirectoryEntry:
    """
    A path plus the attribute bits captured when the entry was produced.

    The attributes are a snapshot: they are only re-read by assign(),
    replace_filename() and refresh(). Telling a symbolic link from a
    junction costs one extra reparse tag probe.
    """

    __slots__ = ("_path", "_attributes", "_backend")

    def __init__(self, target: Optional[PathLike] = None, backend: Optional[Backend] = None):
        self._backend = backend or get_default_backend()
        if target is None:
            self._path = Path()
            self._attributes = FileAttribute.UNKNOWN
        else:
            self._path = Path(target)
            self._attributes = self._backend.get_attributes(str(self._path))

    @classmethod
    def _from_enum(cls, path: Path, attributes: FileAttribute, backend: Backend) -> DirectoryEntry:
        entry = cls.__new__(cls)
        entry._backend = backend
        entry._path = path
        entry._attributes = attributes
        return entry

    @property
    def path(self) -> Path:
        return self._path

    @property
    def attributes(self) -> FileAttribute:
        return self._attributes

    def assign(self, new_target: PathLike) -> None:
        if self._path != Path(new_target):
            self._path = Path(new_target)
            self.refresh()

    def replace_filename(self, replacement: PathLike) -> None:
        if self._path.filename() != Path(replacement):
            self._path.replace_filename(replacement)
            self.refresh()

    def refresh(self) -> None:
        self._attributes = self._backend.get_attributes(str(self._path))

    def exists(self) -> bool:
        return self._attributes != FileAttribute.UNKNOWN

    def is_directory(self) -> bool:
        # Directory links and junctions carry DIRECTORY too; they are not directories here
        return bool(self._attributes & FileAttribute.DIRECTORY) and not (
            self._attributes & FileAttribute.REPARSE_POINT
        )

    def is_regular_file(self) -> bool:
        return not (self._attributes & (FileAttribute.DIRECTORY | FileAttribute.REPARSE_POINT))

    def is_symlink(self) -> bool:
        return self._reparse_tag() is ReparseTag.SYMLINK

    def is_junction(self) -> bool:
        return self._reparse_tag() is ReparseTag.MOUNT_POINT

    def _reparse_tag(self) -> ReparseTag:
        if not self.exists() or not self._attributes & FileAttribute.REPARSE_POINT:
            return ReparseTag.UNKNOWN
        return self._backend.get_reparse_tag(str(self._path))

    def __repr__(self) -> str:
        return f"DirectoryEntry({str(self._path)!r}, {self._attributes!r})"


def _strip_trailing_separators(path: Path) -> None:
    """Drop separators at the end of path, never the root directory."""
    text = str(path)
    keep = len(grammar.root_path(text))
    end = len(text)
    while end > keep and grammar.is_slash(text[end - 1]):
        end -= 1
    path.assign(text[:end])


def _strip_last_component(path: Path) -> None:
    """Remove the filename and the separators before it."""
    _strip_trailing_separators(path.remove_filename())


# =============================================================================
# Iterator state (shared between copies of an iterator)
# =============================================================================


class _DirIterState:
    """Enumeration of one directory through one backend handle."""

    def __init__(self, target: Path, backend: Backend, onerror: Optional[ErrorCallback]):
        self.backend = backend
        self.onerror = onerror
        self.data = FindData()
        self.handle: Any = None
        self.path = target.copy()
        _strip_trailing_separators(self.path)
        self.entry: Optional[DirectoryEntry] = None
        self.error: Optional[DirectoryIterationError] = None
        self.error_reported = False
        self.finished = False
        # Whether the current entry was already handed out by __next__
        self.yielded = False

    @property
    def level(self) -> int:
        return 0

    def open_root(self) -> bool:
        status, handle = self._open(self.path)
        if status is not EnumStatus.OK:
            return self._fail(status, self.path)
        self.handle = handle
        return True

    def skip_dots(self) -> bool:
        """Move off '.' and '..' after the handle was opened."""
        while grammar.is_dot_or_dot_dot(self.data.name):
            status = self.backend.advance_enum(self.handle, self.data)
            if status is not EnumStatus.OK:
                return self._stop(status)
        self._assign()
        return True

    def advance(self) -> bool:
        status = self._next_entry()
        if status is not EnumStatus.OK:
            return self._stop(status)
        self._assign()
        return True

    def _next_entry(self) -> EnumStatus:
        """Read entries from the live handle until one is not a dot entry."""
        while True:
            status = self.backend.advance_enum(self.handle, self.data)
            if status is not EnumStatus.OK or not grammar.is_dot_or_dot_dot(self.data.name):
                return status

    def _open(self, directory: Path) -> tuple[EnumStatus, Any]:
        pattern = str(directory / ENUM_WILDCARD)
        status, handle = self.backend.open_enum(pattern, self.data)
        debug(4, self.level, f"open {pattern}: {status.value}")
        return status, handle

    def _close(self, handle: Any) -> None:
        debug(4, self.level, "close handle")
        self.backend.close_enum(handle)

    def _assign(self) -> None:
        self.entry = DirectoryEntry._from_enum(
            self.path / self.data.name, self.data.attributes, self.backend
        )
        debug(3, self.level, str(self.entry.path))

    def _stop(self, status: EnumStatus) -> bool:
        if status is EnumStatus.END:
            self.close()
            return False
        return self._fail(status, self.path)

    def _fail(self, status: EnumStatus, path: Path) -> bool:
        cause = self.backend.last_error
        reason = cause.strerror if cause is not None and cause.strerror else status.value
        self.error = DirectoryIterationError(
            f"cannot enumerate directory: {path} ({reason})",
            path=str(path),
            status=status,
            errno=cause.errno if cause is not None and cause.errno else 1,
            cause=cause,
        )
        debug(1, self.level, f"iteration stopped: {self.error.message}")
        self.close()
        return False

    def report(self) -> None:
        """Hand a recorded error to the onerror callback, once."""
        if self.error is not None and self.onerror is not None and not self.error_reported:
            self.error_reported = True
            self.onerror(self.error)

    def close(self) -> None:
        if self.handle is not None:
            handle, self.handle = self.handle, None
            self._close(handle)
        self.finished = True

    def __del__(self) -> None:
        self.close()


class _RecursiveDirIterState(_DirIterState):
    """
    Depth-first enumeration with an explicit stack of suspended parent handles.

    The handle of the directory being read is ``handle``; every ancestor's
    handle waits on ``stack``, so the depth is the stack size. Descent is
    deferred by one step: an entry that should be entered only sets
    ``recursion_pending``, and the next advance opens it. That way a
    directory is always produced before its children, and the caller gets
    a chance to cancel the descent.
    """

    def __init__(
        self,
        target: Path,
        options: DirectoryOptions,
        backend: Backend,
        onerror: Optional[ErrorCallback],
    ):
        self.stack: list[Any] = []
        self.options = options
        self.recursion_pending = False
        super().__init__(target, backend, onerror)

    @property
    def level(self) -> int:
        return len(self.stack)

    def should_recurse(self) -> bool:
        attrs = self.data.attributes
        if not attrs & FileAttribute.DIRECTORY:
            return False
        if attrs & FileAttribute.REPARSE_POINT:
            return bool(self.options & DirectoryOptions.FOLLOW_DIRECTORY_SYMLINK)
        return True

    def skip_dots(self) -> bool:
        return self._step(fresh=True)

    def advance(self) -> bool:
        return self._step(fresh=False)

    def pop(self) -> bool:
        """Leave the current directory and move to the entry after it in the parent."""
        if not self.stack:
            return False
        debug(2, self.level, f"pop out of {self.path}")
        self._ascend()
        self.recursion_pending = False
        return self._step(fresh=False)

    def _step(self, fresh: bool) -> bool:
        """
        Move to the next entry of the walk.

        ``fresh`` means the buffer holds the first, not yet consumed entry of
        a just-opened handle. Loops rather than recursing: leaving a level or
        skipping a denied directory just goes around again.
        """
        while True:
            if self.recursion_pending:
                self.recursion_pending = False
                status, child = self._descend()
                if status is EnumStatus.OK:
                    fresh = True
                elif status is EnumStatus.ACCESS_DENIED and (
                    self.options & DirectoryOptions.SKIP_PERMISSION_DENIED
                ):
                    debug(2, self.level, f"skipping {child} (permission denied)")
                    fresh = False
                else:
                    return self._fail(status, child)

            if fresh and not grammar.is_dot_or_dot_dot(self.data.name):
                status = EnumStatus.OK
            else:
                status = self._next_entry()
            fresh = False

            if status is EnumStatus.OK:
                if self.should_recurse():
                    self.recursion_pending = True
                self._assign()
                return True

            if status is EnumStatus.END and self.stack:
                self._ascend()
                continue

            return self._stop(status)

    def _descend(self) -> tuple[EnumStatus, Path]:
        # Opening the child refills the buffer that holds its name, so copy it first
        name = self.data.name
        child = self.path / name
        status, handle = self._open(child)
        if status is EnumStatus.OK:
            self.stack.append(self.handle)
            self.handle = handle
            self.path = child
            debug(1, self.level - 1, f"descend into {child}")
        return status, child

    def _ascend(self) -> None:
        self._close(self.handle)
        self.handle = self.stack.pop()
        _strip_last_component(self.path)
        debug(1, self.level, f"back in {self.path}")

    def close(self) -> None:
        super().close()
        while self.stack:
            self._close(self.stack.pop())
        self.recursion_pending = False


# =============================================================================
# Public iterators
# =============================================================================


class DirectoryIterator:
    """
    Lazy iterator over the entries of one directory, without '.' and '..'.

    DirectoryIterator() (no target) is the end iterator. Options are
    accepted for symmetry with RecursiveDirectoryIterator and have no effect.
    """

    def __init__(
        self,
        target: Optional[PathLike] = None,
        options: DirectoryOptions = DirectoryOptions.NONE,
        *,
        backend: Optional[Backend] = None,
        onerror: Optional[ErrorCallback] = None,
    ):
        self._state: Optional[_DirIterState] = None
        if target is None:
            return
        self._state = self._make_state(Path(target), DirectoryOptions(options),
                                       backend or get_default_backend(), onerror)
        if self._state.open_root():
            self._state.skip_dots()
        self._state.report()

    def _make_state(self, target, options, backend, onerror) -> _DirIterState:
        return _DirIterState(target, backend, onerror)

    def _live(self) -> Optional[_DirIterState]:
        """The shared state, or None once the iteration has finished."""
        state = self._state
        if state is None or state.finished:
            return None
        return state

    @property
    def entry(self) -> DirectoryEntry:
        state = self._live()
        if state is None:
            raise IteratorAccessError("dereferencing an end directory iterator")
        return state.entry

    @property
    def error(self) -> Optional[DirectoryIterationError]:
        return self._state.error if self._state is not None else None

    def increment(self) -> bool:
        """Move to the next entry. False at the end or on failure (see .error)."""
        state = self._live()
        if state is None:
            raise IteratorAccessError("incrementing an end directory iterator")
        moved = state.advance()
        state.yielded = False
        state.report()
        return moved

    def close(self) -> None:
        """Release every handle; this and all copies become the end iterator."""
        if self._state is not None:
            self._state.close()

    def __iter__(self):
        return self

    def __next__(self) -> DirectoryEntry:
        state = self._live()
        if state is None:
            raise StopIteration
        if state.yielded and not self.increment():
            raise StopIteration
        state.yielded = True
        return state.entry

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __copy__(self):
        other = self.__class__.__new__(self.__class__)
        other._state = self._state
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryIterator):
            return NotImplemented
        return self._live() is other._live()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = self._live()
        if state is None:
            return f"{self.__class__.__name__}(<end>)"
        return f"{self.__class__.__name__}({str(state.entry.path)!r})"


class RecursiveDirectoryIterator(DirectoryIterator):
    """
    Depth-first, pre-order iterator over a directory tree.

    Directory links and junctions are only entered with
    DirectoryOptions.FOLLOW_DIRECTORY_SYMLINK. With
    DirectoryOptions.SKIP_PERMISSION_DENIED a directory that cannot be
    opened for lack of permission is yielded but not entered; without it
    the iteration stops with an error.
    """

    _state: Optional[_RecursiveDirIterState]

    def _make_state(self, target, options, backend, onerror) -> _RecursiveDirIterState:
        return _RecursiveDirIterState(target, options, backend, onerror)

    @property
    def options(self) -> DirectoryOptions:
        return self._state.options if self._state is not None else DirectoryOptions.NONE

    @property
    def depth(self) -> int:
        state = self._live()
        return len(state.stack) if state is not None else 0

    @property
    def recursion_pending(self) -> bool:
        state = self._live()
        return state.recursion_pending if state is not None else False

    def disable_recursion_pending(self) -> None:
        """Do not enter the directory that was just produced."""
        state = self._live()
        if state is not None:
            state.recursion_pending = False

    def pop(self) -> bool:
        """
        Abandon the directory being read and continue with its next sibling.

        A no-op returning False at depth 0. Otherwise returns False when the
        walk ended or failed while moving on.
        """
        state = self._live()
        if state is None or not state.stack:
            return False
        moved = state.pop()
        state.yielded = False
        state.report()
        return moved


# =============================================================================
# Convenience API
# =============================================================================


def _make_config(config: WalkConfig | None, **kwargs) -> WalkConfig:
    """Create a WalkConfig from optional base config and overrides."""
    if "options" in kwargs:
        kwargs["options"] = DirectoryOptions(kwargs["options"])
    if config is None:
        return WalkConfig(**kwargs)
    elif kwargs:
        return dataclasses.replace(config, **kwargs)
    else:
        return config


def walk(
    root: PathLike,
    config: WalkConfig | None = None,
    **kwargs,
) -> Iterator[DirectoryEntry]:
    """Yield the entries under root, depth-first.

    Args:
        root: Directory to walk
        config: Optional WalkConfig
        **kwargs: Override config fields (options, recursive, verbose, backend, onerror)

    Every handle is released when the generator finishes or is closed.
    """
    cfg = _make_config(config, **kwargs)
    set_debug_level(cfg.verbose)

    iterator_class = RecursiveDirectoryIterator if cfg.recursive else DirectoryIterator
    with iterator_class(root, cfg.options, backend=cfg.backend, onerror=cfg.onerror) as it:
        yield from it


def iterdir(
    root: PathLike,
    config: WalkConfig | None = None,
    **kwargs,
) -> Iterator[DirectoryEntry]:
    """Yield the entries directly inside root."""
    kwargs["recursive"] = False
    yield from walk(root, config, **kwargs)
