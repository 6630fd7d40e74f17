# src/dirwalk/engine/model.py

"""
Core traversal models.

This module defines the metadata shapes produced by filesystem
collaborators (stat-shaped FileInfo, listing-shaped DirEntry), the
adapter that unifies them behind a single Entry capability set, and the
Visit record that the walker keeps on its pending-work stack.

No filesystem access should happen here.
"""

import stat as _stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


# ---------------------------------------------------------------------
# File type
# ---------------------------------------------------------------------

class FileType(str, Enum):
    """
    Kind of a filesystem object, independent of permission bits.
    """

    REGULAR = "regular"
    DIR = "dir"
    SYMLINK = "symlink"
    FIFO = "fifo"
    SOCKET = "socket"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    UNKNOWN = "unknown"

    @classmethod
    def from_mode(cls, mode: int) -> "FileType":
        """
        Classify a POSIX st_mode value.
        """
        checks = (
            (_stat.S_ISDIR, cls.DIR),
            (_stat.S_ISREG, cls.REGULAR),
            (_stat.S_ISLNK, cls.SYMLINK),
            (_stat.S_ISFIFO, cls.FIFO),
            (_stat.S_ISSOCK, cls.SOCKET),
            (_stat.S_ISCHR, cls.CHAR_DEVICE),
            (_stat.S_ISBLK, cls.BLOCK_DEVICE),
        )
        for test, kind in checks:
            if test(mode):
                return kind
        return cls.UNKNOWN

    @property
    def symbol(self) -> str:
        """Single-character type column, `ls -l` style."""
        return _SYMBOLS[self]


_SYMBOLS = {
    FileType.REGULAR: "-",
    FileType.DIR: "d",
    FileType.SYMLINK: "l",
    FileType.FIFO: "p",
    FileType.SOCKET: "s",
    FileType.CHAR_DEVICE: "c",
    FileType.BLOCK_DEVICE: "b",
    FileType.UNKNOWN: "?",
}


# ---------------------------------------------------------------------
# Metadata shapes
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FileInfo:
    """
    Stat-shaped metadata for a single path.

    `mtime` is seconds since the epoch, as reported by the collaborator.
    """

    name: str
    type: FileType
    size: int = 0
    mtime: float = 0.0

    def is_dir(self) -> bool:
        return self.type is FileType.DIR


class Entry(Protocol):
    """
    Capability set shared by every `Visit.entry`.

    Roots are described by a stat call, children by a directory listing;
    both are exposed through this one shape.
    """

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> FileType: ...

    def is_dir(self) -> bool: ...

    def info(self) -> FileInfo: ...


@dataclass(frozen=True, slots=True)
class DirEntry:
    """
    Listing-shaped metadata for one child of a directory.
    """

    name: str
    type: FileType
    size: int = 0
    mtime: float = 0.0

    def is_dir(self) -> bool:
        return self.type is FileType.DIR

    def info(self) -> FileInfo:
        return FileInfo(name=self.name, type=self.type, size=self.size, mtime=self.mtime)


@dataclass(frozen=True, slots=True)
class StatEntry:
    """
    Adapts a FileInfo (from stat) to the Entry shape.
    """

    file_info: FileInfo

    @property
    def name(self) -> str:
        return self.file_info.name

    @property
    def type(self) -> FileType:
        return self.file_info.type

    def is_dir(self) -> bool:
        return self.file_info.is_dir()

    def info(self) -> FileInfo:
        return self.file_info


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------

class UsageError(Exception):
    """
    Reported through `Walker.err` when results are queried before the
    first call to `Walker.advance`.
    """


# ---------------------------------------------------------------------
# Visit
# ---------------------------------------------------------------------

class Phase(str, Enum):
    """
    Visit state of an in-flight item.

    PRE_READ    first (and usually only) visit; directories are expanded
                after it unless pruned.
    READ_ERROR  second visit of a directory whose listing failed.
    """

    PRE_READ = "pre_read"
    READ_ERROR = "read_error"


@dataclass(frozen=True, slots=True)
class Visit:
    """
    One traversal step result, and one slot of the pending-work stack.

    `skip_dir_mark` and `skip_parent_mark` are the stack lengths to
    truncate to when the consumer prunes this item's subtree, or this
    item's subtree plus its remaining siblings.
    """

    path: str
    entry: Optional[Entry]
    error: Optional[Exception] = None
    skip_dir_mark: int = 0
    skip_parent_mark: int = 0
    phase: Phase = Phase.PRE_READ

    @property
    def is_dir(self) -> bool:
        return self.entry is not None and self.entry.is_dir()

    @property
    def expandable(self) -> bool:
        """
        True if a directory listing should follow this visit.
        """
        return self.error is None and self.phase is Phase.PRE_READ and self.is_dir
