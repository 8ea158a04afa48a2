# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

r"""
The Path value type.

A Path owns its text and offers composition, normalization and
decomposition on top of drivepath.grammar. All operations are lexical; the
only functions here that consult the operating system are current_path()
and set_current_path().

Example::

    >>> p = Path("C:\\Users") / "x" / "notes.txt"
    >>> str(p)
    'C:\\Users\\x\\notes.txt'
    >>> str(p.root_path()), str(p.stem()), str(p.extension())
    ('C:\\', 'notes', '.txt')
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional, Union

from drivepath import grammar
from drivepath.backend import Backend, get_default_backend
from drivepath.grammar import PREFERRED_SEPARATOR, ALTERNATE_SEPARATOR
from drivepath.types import IteratorAccessError

PathLike = Union["Path", str, "os.PathLike[str]"]


class PathFormat(Enum):
    """How separators in constructor text are treated."""

    AUTO = "auto"  # keep the text as given
    NATIVE = "native"  # '/' -> '\'
    GENERIC = "generic"  # '\' -> '/'


def _text_of(value: PathLike) -> str:
    if isinstance(value, Path):
        return value._text
    if isinstance(value, str):
        return value
    return os.fspath(value)


class Path:
    """A mutable path string with drive-letter aware decomposition."""

    __slots__ = ("_text",)

    preferred_separator = PREFERRED_SEPARATOR

    def __init__(self, text: PathLike = "", fmt: PathFormat = PathFormat.AUTO):
        self._text = _text_of(text)
        self._apply_format(fmt)

    def _apply_format(self, fmt: PathFormat) -> None:
        match fmt:
            case PathFormat.NATIVE:
                self._text = self._text.replace(ALTERNATE_SEPARATOR, PREFERRED_SEPARATOR)
            case PathFormat.GENERIC:
                self._text = self._text.replace(PREFERRED_SEPARATOR, ALTERNATE_SEPARATOR)
            case PathFormat.AUTO:
                pass

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def native(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Path({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        return NotImplemented

    # Mutable, so not hashable
    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        return bool(self._text)

    def __copy__(self) -> Path:
        return Path(self._text)

    def __deepcopy__(self, memo) -> Path:
        return Path(self._text)

    def copy(self) -> Path:
        return Path(self._text)

    def empty(self) -> bool:
        return not self._text

    def assign(self, text: PathLike) -> Path:
        self._text = _text_of(text)
        return self

    def clear(self) -> None:
        self._text = ""

    def swap(self, other: Path) -> None:
        self._text, other._text = other._text, self._text

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def append(self, other: PathLike) -> Path:
        """
        Join other onto this path (the /= operator).

        An empty operand is a no-op. An empty left side or an absolute right
        side ('X:\\...') replaces the text. Otherwise one preferred separator
        is inserted, unless either side already supplies a slash at the seam.
        """
        other_text = _text_of(other)
        if not other_text:
            return self

        if not self._text or grammar.has_drive_and_slash(other_text):
            self._text = other_text
            return self

        if not grammar.is_slash(self._text[-1]) and not grammar.is_slash(other_text[0]):
            self._text += PREFERRED_SEPARATOR
        self._text += other_text
        return self

    def concat(self, other: PathLike) -> Path:
        """Raw text concatenation (the += operator)."""
        self._text += _text_of(other)
        return self

    def __itruediv__(self, other: PathLike) -> Path:
        return self.append(other)

    def __truediv__(self, other: PathLike) -> Path:
        return self.copy().append(other)

    def __rtruediv__(self, other: PathLike) -> Path:
        return Path(other).append(self)

    def __iadd__(self, other: PathLike) -> Path:
        return self.concat(other)

    def __add__(self, other: PathLike) -> Path:
        return self.copy().concat(other)

    def __radd__(self, other: PathLike) -> Path:
        return Path(other).concat(self)

    # -------------------------------------------------------------------------
    # Modifiers
    # -------------------------------------------------------------------------

    def make_preferred(self) -> Path:
        self._text = self._text.replace(ALTERNATE_SEPARATOR, PREFERRED_SEPARATOR)
        return self

    def remove_filename(self) -> Path:
        segment = grammar.find_filename(self._text)
        if segment.found:
            self._text = self._text[: segment.offset]
        return self

    def replace_filename(self, replacement: PathLike) -> Path:
        self.remove_filename()
        return self.append(replacement)

    def replace_extension(self, replacement: PathLike = "") -> Path:
        """
        Swap the extension for replacement.

        The old extension (if any) is cut off. A non-empty replacement is
        appended with a single '.' in front of it, added only when the
        replacement does not start with one.
        """
        ext = grammar.extension(self._text)
        if ext:
            self._text = self._text[: len(self._text) - len(ext)]

        new_ext = _text_of(replacement)
        if new_ext:
            if not new_ext.startswith("."):
                self._text += "."
            self._text += new_ext
        return self

    # -------------------------------------------------------------------------
    # Decomposition
    # -------------------------------------------------------------------------

    def root_name(self) -> Path:
        return Path(grammar.root_name(self._text))

    def root_directory(self) -> Path:
        return Path(grammar.root_directory(self._text))

    def root_path(self) -> Path:
        return Path(grammar.root_path(self._text))

    def relative_path(self) -> Path:
        return Path(grammar.relative_path(self._text))

    def parent_path(self) -> Path:
        return Path(grammar.parent_path(self._text))

    def filename(self) -> Path:
        return Path(grammar.filename(self._text))

    def stem(self) -> Path:
        return Path(grammar.stem(self._text))

    def extension(self) -> Path:
        return Path(grammar.extension(self._text))

    def has_root_name(self) -> bool:
        return bool(grammar.root_name(self._text))

    def has_root_directory(self) -> bool:
        return bool(grammar.root_directory(self._text))

    def has_root_path(self) -> bool:
        return bool(grammar.root_path(self._text))

    def has_relative_path(self) -> bool:
        return bool(grammar.relative_path(self._text))

    def has_parent_path(self) -> bool:
        return bool(grammar.parent_path(self._text))

    def has_filename(self) -> bool:
        return bool(grammar.filename(self._text))

    def has_stem(self) -> bool:
        return bool(grammar.stem(self._text))

    def has_extension(self) -> bool:
        return bool(grammar.extension(self._text))

    def is_absolute(self) -> bool:
        return grammar.has_drive_and_slash(self._text)

    def is_relative(self) -> bool:
        return not self.is_absolute()

    def __iter__(self) -> PathIterator:
        return PathIterator(self)


class PathIterator:
    """
    Forward iterator over the elements of a path.

    Elements are, in order: the root name (if any), the root directory (if
    any), then every slash-delimited component of the relative part. Runs of
    separators never produce empty elements. PathIterator() with no source
    is the end iterator, which every exhausted iterator compares equal to.
    """

    __slots__ = ("_source", "_element", "_offset")

    def __init__(self, source: Optional[PathLike] = None):
        self._source: Optional[str] = None
        self._element = ""
        self._offset = 0
        if source is not None:
            text = _text_of(source)
            if text:
                self._source = text
                self._extract_first()

    def _set(self, offset: int, end: int) -> None:
        self._offset = offset
        self._element = self._source[offset:end]

    def _finish(self) -> None:
        self._source = None
        self._element = ""
        self._offset = 0

    def _extract_first(self) -> None:
        text = self._source
        if grammar.has_drive(text):
            self._set(0, 2)
        elif grammar.is_slash(text[0]):
            self._set(0, 1)
        else:
            self._set(0, grammar.component_end(text, 0))

    def _increment(self) -> None:
        text = self._source
        pos = self._offset + len(self._element)

        # Root name directly followed by the root directory ("C:\")
        if self._offset == 0 and pos == 2 and grammar.has_drive_and_slash(text):
            self._set(2, 3)
            return

        pos = grammar.skip_slashes(text, pos)
        if pos >= len(text):
            self._finish()
            return
        self._set(pos, grammar.component_end(text, pos))

    @property
    def at_end(self) -> bool:
        return self._source is None

    @property
    def current(self) -> Path:
        if self._source is None:
            raise IteratorAccessError("dereferencing an end path iterator")
        return Path(self._element)

    @property
    def offset(self) -> int:
        return self._offset

    def __iter__(self) -> PathIterator:
        return self

    def __next__(self) -> Path:
        if self._source is None:
            raise StopIteration
        element = Path(self._element)
        self._increment()
        return element

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathIterator):
            return NotImplemented
        if self._source is None or other._source is None:
            return self._source is None and other._source is None
        return self._element == other._element and self._offset == other._offset

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._source is None:
            return "PathIterator(<end>)"
        return f"PathIterator({self._element!r} @ {self._offset})"


# =============================================================================
# Current directory
# =============================================================================


def current_path(backend: Optional[Backend] = None) -> Path:
    """Return the process current directory, or an empty Path if it cannot be read."""
    backend = backend or get_default_backend()
    text = backend.get_current_directory()
    return Path(text) if text is not None else Path()


def set_current_path(new_path: PathLike, backend: Optional[Backend] = None) -> bool:
    """Change the process current directory. Returns False on failure."""
    backend = backend or get_default_backend()
    return backend.set_current_directory(_text_of(new_path))
