# DrivePath - path algebra and directory traversal for drive-letter filesystems
# Copyright (C) 2025 Istvan Sarandi
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Utility functions for drivepath.

This module contains the version constants and the verbosity-levelled
debug output shared by the path and traversal modules.
"""

from __future__ import annotations

import os
import sys

VERSION = "0.1.0"
PROGRAM_NAME = "drivepath"


def _level_from_environment() -> int:
    """Read the default verbosity from DRIVEPATH_VERBOSE (0 if unset or bad)."""
    try:
        return max(0, int(os.environ.get("DRIVEPATH_VERBOSE", "0")))
    except ValueError:
        return 0


# Debug level is module-level state
_debug_level = _level_from_environment()


def set_debug_level(level: int) -> None:
    """Set verbosity level for debug()."""
    global _debug_level
    _debug_level = level


def get_debug_level() -> int:
    """Get current debug level."""
    return _debug_level


def default_debug_level() -> int:
    """Verbosity a fresh WalkConfig starts with."""
    return _level_from_environment()


def debug(level: int, *args) -> None:
    """
    Log to STDERR based on debug_level setting.

    Verbosity rules:
        0: errors only
        >= 1: descending into / ascending out of directories, iterator failures
        >= 2: skipped directories (permission denied), explicit pops
        >= 3: every entry produced by a traversal
        >= 4: raw enumeration handle open/close calls

    Supports two calling conventions:
        debug(level, msg)
        debug(level, indent_level, msg)
    """
    if len(args) >= 2 and isinstance(args[0], int):
        indent_level = args[0]
        msg = args[1]
    elif len(args) >= 1:
        indent_level = 0
        msg = args[0]
    else:
        return

    if _debug_level >= level:
        indent = "    " * indent_level
        print(f"{indent}{msg}", file=sys.stderr)
