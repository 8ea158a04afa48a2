# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Lexical path grammar.

Pure functions over the text of a path. Nothing here touches the
filesystem and nothing here raises: every function is total over any
string, including the empty one.

Grammar summary::

    path           := [root-name] [root-directory] relative-path
    root-name      := ASCII-letter ":"
    root-directory := slash
    slash          := "\\" | "/"

A run of adjacent slashes is treated as a single separator.
"""

from __future__ import annotations

from dataclasses import dataclass

PREFERRED_SEPARATOR = "\\"
ALTERNATE_SEPARATOR = "/"

NPOS = -1


def is_slash(ch: str) -> bool:
    return ch == "\\" or ch == "/"


def is_dot_or_dot_dot(s: str) -> bool:
    return s == "." or s == ".."


def find_first_slash(s: str) -> int:
    """Index of the first slash in s, or NPOS."""
    for i, ch in enumerate(s):
        if is_slash(ch):
            return i
    return NPOS


def find_last_slash(s: str) -> int:
    """Index of the last slash in s, or NPOS."""
    for i in range(len(s) - 1, -1, -1):
        if is_slash(s[i]):
            return i
    return NPOS


def is_drive_prefix(ch: str) -> bool:
    return ("A" <= ch <= "Z") or ("a" <= ch <= "z")


def has_drive(s: str) -> bool:
    """True for text starting with a drive prefix such as 'C:'."""
    return len(s) >= 2 and is_drive_prefix(s[0]) and s[1] == ":"


def has_drive_and_slash(s: str) -> bool:
    """True for text starting with a drive prefix and a slash, such as 'C:\\'."""
    return len(s) >= 3 and is_drive_prefix(s[0]) and s[1] == ":" and is_slash(s[2])


def root_name(s: str) -> str:
    return s[:2] if has_drive(s) else ""


def root_directory(s: str) -> str:
    if not s:
        return ""

    if is_slash(s[0]):
        return s[:1]

    if has_drive_and_slash(s):
        return s[2:3]
    return ""


def root_path(s: str) -> str:
    if not s:
        return ""

    if is_slash(s[0]):
        return s[:1]

    if has_drive_and_slash(s):
        return s[:3]
    elif has_drive(s):
        return s[:2]
    return ""


def relative_path(s: str) -> str:
    if not s:
        return ""

    if is_slash(s[0]):
        return s[1:]
    elif has_drive_and_slash(s):
        return s[3:]
    elif has_drive(s):
        return s[2:]
    return s


def parent_path(s: str) -> str:
    """
    Text before the last slash.

    A lone leading slash is its own parent ('/' for '/foo'). Text without any
    slash has no parent component and is returned unchanged.
    """
    if not s:
        return ""

    slash = find_last_slash(s)
    if slash == 0:
        return s[:1]
    if slash == NPOS:
        return s
    return s[:slash]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """An (offset, length) slice of a path's text."""

    offset: int
    length: int

    @property
    def found(self) -> bool:
        return self.offset != NPOS and self.length > 0

    def slice(self, s: str) -> str:
        """Return the described text of s, or '' when not found."""
        if not self.found:
            return ""
        return s[self.offset : self.offset + self.length]


NOT_FOUND = PathSegment(NPOS, 0)


def find_filename(s: str) -> PathSegment:
    if not s:
        return NOT_FOUND

    slash = find_last_slash(s)
    if slash == NPOS:
        # The whole path is a filename
        return PathSegment(0, len(s))
    if slash == len(s) - 1:
        # Trailing slash: the path names a directory
        return NOT_FOUND
    return PathSegment(slash + 1, len(s) - slash - 1)


def filename(s: str) -> str:
    return find_filename(s).slice(s)


def extension_from_filename(name: str) -> str:
    """
    Extension of a bare filename, dot included.

    '.' and '..' have no extension, and neither does a name whose only dot
    is the leading one ('.hidden').
    """
    if not name or is_dot_or_dot_dot(name):
        return ""

    dot = name.rfind(".")
    if dot == NPOS or dot == 0:
        return ""
    return name[dot:]


def extension(s: str) -> str:
    return extension_from_filename(filename(s))


def stem(s: str) -> str:
    name = filename(s)
    ext = extension_from_filename(name)
    if not name:
        return ""
    if not ext:
        return name
    return name[: len(name) - len(ext)]


def skip_slashes(s: str, pos: int) -> int:
    """Index of the first non-slash character at or after pos (len(s) if none)."""
    end = len(s)
    while pos < end and is_slash(s[pos]):
        pos += 1
    return pos


def component_end(s: str, pos: int) -> int:
    """Index of the first slash at or after pos (len(s) if none)."""
    end = len(s)
    while pos < end and not is_slash(s[pos]):
        pos += 1
    return pos
