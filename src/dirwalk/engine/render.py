# src/dirwalk/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- flat path listings (list),
- indented tree views (list --tree),
- error lines (all commands).

It is presentation-only: it consumes visits and never prunes or reads
the filesystem.
"""

import sys
from collections.abc import Iterable
from typing import TextIO

from .model import FileType, Visit
from .scan import depth_of


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"
_RED = "\033[31m"

_COLOR = {
    FileType.DIR: "\033[34m",      # blue
    FileType.SYMLINK: "\033[36m",  # cyan
    FileType.FIFO: "\033[33m",     # yellow
    FileType.SOCKET: "\033[35m",   # magenta
}


def _supports_color(stream: TextIO) -> bool:
    """Return True if `stream` is a TTY."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, visit: Visit, *, color: bool) -> str:
    if not color or visit.entry is None:
        return text
    c = _COLOR.get(visit.entry.type, "")
    return f"{c}{text}{_RESET}" if c else text


# ---------------------------------------------------------------------
# Error lines
# ---------------------------------------------------------------------

def format_error(visit: Visit, *, color: bool = False) -> str:
    line = f"{visit.path}: {visit.error}"
    return f"{_RED}{line}{_RESET}" if color else line


def _report_error(visit: Visit, err: TextIO, *, color: bool) -> None:
    print(format_error(visit, color=color and _supports_color(err)), file=err)


# ---------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------

def format_entry(visit: Visit, *, long: bool = False, color: bool = False) -> str:
    """
    One listing line for a visit.

    Long format: `<type> <size> <path>`, sizes right-aligned to 10 columns.
    """
    text = _paint(visit.path, visit, color=color)
    if not long or visit.entry is None:
        return text

    info = visit.entry.info()
    return f"{info.type.symbol} {info.size:>10} {text}"


def render_list(
    visits: Iterable[Visit],
    *,
    long: bool = False,
    color: bool = True,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """
    Print visited paths, one per line; errors go to `err`.

    Returns the number of error visits seen.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    use_color = color and _supports_color(out)
    errors = 0

    for visit in visits:
        if visit.error is not None:
            errors += 1
            _report_error(visit, err, color=color)
            continue
        print(format_entry(visit, long=long, color=use_color), file=out)

    return errors


# ---------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------

def render_tree(
    visits: Iterable[Visit],
    root: str,
    *,
    color: bool = True,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """
    Print an indented tree: the root path first, then each entry by name,
    indented four spaces per level. Directories end with "/".

    Returns the number of error visits seen.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    use_color = color and _supports_color(out)
    errors = 0

    for visit in visits:
        if visit.error is not None:
            errors += 1
            _report_error(visit, err, color=color)
            continue

        depth = depth_of(root, visit.path)
        if depth == 0:
            print(_paint(visit.path, visit, color=use_color), file=out)
            continue

        name = visit.entry.name if visit.entry is not None else visit.path
        if visit.is_dir:
            name += "/"
        print(f"{'    ' * depth}{_paint(name, visit, color=use_color)}", file=out)

    return errors
