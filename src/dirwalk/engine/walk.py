# src/dirwalk/engine/walk.py

"""
Iterator-style directory walker.

A Walker steps through every file and directory under a root, including
the root itself, one call to `advance()` at a time:

    walker = Walker(OSFileSystem("/"), "usr/lib")
    while walker.advance():
        if walker.err is not None:
            print(walker.err, file=sys.stderr)
            continue
        print(walker.path)

Entries are visited in the order the filesystem lists them (lexical for
the bundled filesystems). A whole directory is read into memory before
its children are walked.

Symbolic links found in directories are not followed; if the root
itself is a symbolic link, its target is walked.
"""

import logging
import posixpath
from collections.abc import Iterator
from dataclasses import replace
from typing import Optional

from .fs import FileSystem, PartialReadError
from .model import DirEntry, Entry, FileInfo, Phase, StatEntry, UsageError, Visit

logger = logging.getLogger(__name__)


class Walker:
    """
    Depth-first walker over a FileSystem, driven by an explicit stack.

    Each stack slot carries its own pruning marks, so `skip_dir()` and
    `skip_parent()` are plain truncations of pending work.

    Not safe for concurrent use; the filesystem may change between calls
    to `advance()`.
    """

    def __init__(self, fsys: FileSystem, root: str) -> None:
        entry: Optional[Entry] = None
        error: Optional[Exception] = None
        try:
            entry = StatEntry(fsys.stat(root))
        except OSError as e:
            error = e

        self.fsys = fsys
        self.root = root
        self._cur = Visit(path="", entry=None, error=UsageError("walk: method advance must be called first"))
        self._stack: list[Visit] = [Visit(root, entry, error, 0, 0)]
        self._expand = False
        self._started = False

    def __repr__(self) -> str:
        return f"Walker({self.fsys!r}, {self.root!r})"

    def __iter__(self) -> Iterator["Walker"]:
        while self.advance():
            yield self

    # -----------------------------------------------------------------
    # Stepping
    # -----------------------------------------------------------------

    def advance(self) -> bool:
        """
        Visit the next file or directory.

        Must be called before each visit, including the first. Returns
        False when the walk reaches the end of the tree, and keeps
        returning False after that.
        """
        if self._expand and self._cur.expandable:
            self._expand_current()

        if not self._stack:
            self._expand = False
            return False

        self._cur = self._stack.pop()
        self._expand = True
        self._started = True
        return True

    def _expand_current(self) -> None:
        cur = self._cur
        children: list[DirEntry] = []
        error: Optional[OSError] = None

        try:
            children = self.fsys.read_dir(cur.path)
        except PartialReadError as e:
            children, error = e.entries, e
        except OSError as e:
            error = e

        logger.debug("read %s: %d entries", cur.path, len(children))

        n = len(self._stack)
        for child in reversed(children):
            p = posixpath.normpath(posixpath.join(cur.path, child.name))
            self._stack.append(Visit(p, child, None, len(self._stack), n))

        if error is not None:
            logger.debug("read %s failed: %s", cur.path, error)
            # Second visit, to report the read error.
            self._stack.append(replace(cur, error=error, phase=Phase.READ_ERROR))

    # -----------------------------------------------------------------
    # Current visit
    # -----------------------------------------------------------------

    @property
    def visit(self) -> Visit:
        """The most recent visit (a sentinel before the first advance)."""
        return self._cur

    @property
    def path(self) -> str:
        """
        Path of the most recent visit, with the walker's root as prefix.

        If the root is "dir" and it contains the file "a", this is "dir/a".
        """
        return self._cur.path

    @property
    def entry(self) -> Optional[Entry]:
        """
        Metadata of the most recent visit; None if the root could not be
        stat-ed.
        """
        return self._cur.entry

    @property
    def info(self) -> Optional[FileInfo]:
        entry = self._cur.entry
        return entry.info() if entry is not None else None

    @property
    def err(self) -> Optional[Exception]:
        """
        Error, if any, for the most recent visit.

        A directory whose read fails is visited twice: first before the
        read is attempted (err is None, giving a chance to call skip_dir
        and avoid the read), then after the failed read (err is the read
        error).

        A failed read may still have produced entries. In that case they
        are walked after the second visit; they may be incomplete. Call
        skip_dir on the second visit to avoid them.
        """
        return self._cur.error

    @property
    def phase(self) -> Phase:
        return self._cur.phase

    # -----------------------------------------------------------------
    # Pruning
    # -----------------------------------------------------------------

    def skip_dir(self) -> None:
        """
        Do not walk through the directory named by `path`.

        No read is attempted on a skipped directory. On a file this
        skips nothing.
        """
        if not self._started:
            return
        self._expand = False
        del self._stack[self._cur.skip_dir_mark:]

    def skip_parent(self) -> None:
        """
        Skip the item named by `path` (like skip_dir) along with the
        remaining items of its parent directory.
        """
        if not self._started:
            return
        self._expand = False
        del self._stack[self._cur.skip_parent_mark:]
