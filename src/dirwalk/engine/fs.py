# src/dirwalk/engine/fs.py

"""
Filesystem collaborators.

The walker consumes exactly two primitives:
- stat(path)     -> FileInfo, raising OSError on failure;
- read_dir(path) -> list[DirEntry] sorted by name, raising OSError on
  failure (PartialReadError when some entries were read first).

Paths are slash-separated and relative to the filesystem's own root;
"." names the root itself.

Two implementations are provided:
- OSFileSystem: a directory on the host filesystem,
- MapFileSystem: an in-memory tree, mainly for tests and fixtures.
"""

import errno
import os
import posixpath
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .model import DirEntry, FileInfo, FileType


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class InvalidPathError(OSError):
    """
    Raised for paths that are not slash-separated, root-relative names.
    """

    def __init__(self, path: str) -> None:
        super().__init__(errno.EINVAL, "invalid path", path)


class PartialReadError(OSError):
    """
    Raised by read_dir when a listing failed after some entries were read.

    `entries` holds what was discovered, sorted by name.
    """

    def __init__(self, entries: Sequence[DirEntry], cause: OSError) -> None:
        super().__init__(cause.errno, cause.strerror or str(cause))
        self.entries = sorted(entries, key=lambda e: e.name)
        self.cause = cause

    def __str__(self) -> str:
        return str(self.cause)


# ---------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------

class FileSystem(Protocol):
    def stat(self, path: str) -> FileInfo: ...

    def read_dir(self, path: str) -> list[DirEntry]: ...


def valid_path(path: str) -> bool:
    """
    Return True if `path` is "." or a sequence of non-empty elements
    joined by "/", none of which is "." or "..".
    """
    if path == ".":
        return True
    if not path:
        return False
    return all(part not in ("", ".", "..") for part in path.split("/"))


def _base_name(path: str) -> str:
    return "." if path == "." else posixpath.basename(path)


# ---------------------------------------------------------------------
# Host filesystem
# ---------------------------------------------------------------------

class OSFileSystem:
    """
    Filesystem rooted at a directory of the host OS.

    stat follows symbolic links (so a symlinked root is walked);
    listing entries are classified without following them.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)

    def __repr__(self) -> str:
        return f"OSFileSystem({str(self.root_dir)!r})"

    def _resolve(self, path: str) -> Path:
        if not valid_path(path):
            raise InvalidPathError(path)
        if path == ".":
            return self.root_dir
        return self.root_dir.joinpath(*path.split("/"))

    def stat(self, path: str) -> FileInfo:
        st = os.stat(self._resolve(path))
        return FileInfo(
            name=_base_name(path),
            type=FileType.from_mode(st.st_mode),
            size=st.st_size,
            mtime=st.st_mtime,
        )

    def read_dir(self, path: str) -> list[DirEntry]:
        full = self._resolve(path)
        entries: list[DirEntry] = []

        try:
            with os.scandir(full) as it:
                for de in it:
                    entries.append(_from_scandir(de))
        except OSError as e:
            if not entries:
                raise
            raise PartialReadError(entries, e) from e

        entries.sort(key=lambda e: e.name)
        return entries


def _from_scandir(de: os.DirEntry) -> DirEntry:
    try:
        st = de.stat(follow_symlinks=False)
    except OSError:
        # Vanished between listing and lstat; keep the name, lose the details.
        if de.is_symlink():
            kind = FileType.SYMLINK
        elif de.is_dir(follow_symlinks=False):
            kind = FileType.DIR
        elif de.is_file(follow_symlinks=False):
            kind = FileType.REGULAR
        else:
            kind = FileType.UNKNOWN
        return DirEntry(name=de.name, type=kind)

    return DirEntry(
        name=de.name,
        type=FileType.from_mode(st.st_mode),
        size=st.st_size,
        mtime=st.st_mtime,
    )


# ---------------------------------------------------------------------
# In-memory filesystem
# ---------------------------------------------------------------------

@dataclass(slots=True)
class MapFile:
    """
    A single node of a MapFileSystem.
    """

    data: bytes = b""
    type: FileType = FileType.REGULAR
    mtime: float = 0.0


class MapFileSystem:
    """
    In-memory filesystem backed by a mapping of paths to MapFile.

    Parent directories need not be listed; any path prefix of a key is
    a directory. The mapping is read on every call, so later changes to
    it are visible.
    """

    def __init__(self, files: Mapping[str, MapFile] | None = None) -> None:
        self.files: MutableMapping[str, MapFile] = dict(files or {})

    def __repr__(self) -> str:
        return f"MapFileSystem({len(self.files)} files)"

    def stat(self, path: str) -> FileInfo:
        if not valid_path(path):
            raise InvalidPathError(path)

        f = self.files.get(path)
        if f is not None:
            return FileInfo(name=_base_name(path), type=f.type, size=len(f.data), mtime=f.mtime)

        if path == "." or any(k.startswith(path + "/") for k in self.files):
            return FileInfo(name=_base_name(path), type=FileType.DIR)

        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)

    def read_dir(self, path: str) -> list[DirEntry]:
        info = self.stat(path)
        if not info.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)

        prefix = "" if path == "." else path + "/"
        children: dict[str, DirEntry] = {}

        for key, f in self.files.items():
            if not key.startswith(prefix) or key == path:
                continue

            name, sep, _ = key[len(prefix):].partition("/")
            if not name:
                continue

            if sep:
                # Implied directory; an explicit entry for it wins.
                children.setdefault(name, DirEntry(name=name, type=FileType.DIR))
            else:
                children[name] = DirEntry(name=name, type=f.type, size=len(f.data), mtime=f.mtime)

        return [children[name] for name in sorted(children)]
