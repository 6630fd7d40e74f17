"""
Tests for the filesystem collaborators.

OSFileSystem runs against a real tmp_path tree; MapFileSystem against
in-memory mappings.
"""

import os
from pathlib import Path

import pytest

from dirwalk.engine.fs import (
    InvalidPathError,
    MapFile,
    MapFileSystem,
    OSFileSystem,
    PartialReadError,
    valid_path,
)
from dirwalk.engine.model import DirEntry, FileType
from dirwalk.engine.walk import Walker


@pytest.fixture
def disk_tree(tmp_path: Path) -> Path:
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner.txt").write_text("inner", encoding="utf-8")
    (tmp_path / "a.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "c").mkdir()
    return tmp_path


# ---------------------------------------------------------------------
# Path validation
# ---------------------------------------------------------------------

@pytest.mark.parametrize("path", [".", "a", "a/b", "a.b/c", "..a"])
def test_valid_paths(path: str) -> None:
    assert valid_path(path)


@pytest.mark.parametrize("path", ["", "/a", "a/", "a//b", "./a", "a/./b", "..", "a/../b"])
def test_invalid_paths(path: str) -> None:
    assert not valid_path(path)


# ---------------------------------------------------------------------
# OSFileSystem
# ---------------------------------------------------------------------

def test_os_stat(disk_tree: Path) -> None:
    fsys = OSFileSystem(disk_tree)

    root = fsys.stat(".")
    assert root.name == "."
    assert root.is_dir()

    info = fsys.stat("a.txt")
    assert info.name == "a.txt"
    assert info.type is FileType.REGULAR
    assert info.size == 5


def test_os_stat_missing(disk_tree: Path) -> None:
    with pytest.raises(FileNotFoundError):
        OSFileSystem(disk_tree).stat("nope")


def test_os_stat_invalid_path(disk_tree: Path) -> None:
    with pytest.raises(InvalidPathError) as exc:
        OSFileSystem(disk_tree).stat("../escape")
    assert isinstance(exc.value, OSError)


def test_os_read_dir_sorted(disk_tree: Path) -> None:
    entries = OSFileSystem(disk_tree).read_dir(".")
    assert [(e.name, e.type) for e in entries] == [
        ("a.txt", FileType.REGULAR),
        ("b", FileType.DIR),
        ("c", FileType.DIR),
    ]


def test_os_read_dir_on_file(disk_tree: Path) -> None:
    with pytest.raises(NotADirectoryError):
        OSFileSystem(disk_tree).read_dir("a.txt")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_os_symlinks_not_followed_in_listing(disk_tree: Path) -> None:
    (disk_tree / "link").symlink_to(disk_tree / "b", target_is_directory=True)
    fsys = OSFileSystem(disk_tree)

    entries = {e.name: e for e in fsys.read_dir(".")}
    assert entries["link"].type is FileType.SYMLINK
    assert not entries["link"].is_dir()

    # A symlinked root is resolved by stat and walked.
    got = [w.path for w in Walker(fsys, "link")]
    assert got == ["link", "link/inner.txt"]


def test_os_walk(disk_tree: Path) -> None:
    got = [w.path for w in Walker(OSFileSystem(disk_tree), ".")]
    assert got == [".", "a.txt", "b", "b/inner.txt", "c"]


# ---------------------------------------------------------------------
# PartialReadError
# ---------------------------------------------------------------------

def test_partial_read_error_carries_sorted_entries() -> None:
    cause = OSError("incomplete readdir")
    err = PartialReadError([DirEntry("z", FileType.REGULAR), DirEntry("m", FileType.DIR)], cause)

    assert isinstance(err, OSError)
    assert [e.name for e in err.entries] == ["m", "z"]
    assert err.cause is cause
    assert str(err) == "incomplete readdir"


# ---------------------------------------------------------------------
# MapFileSystem
# ---------------------------------------------------------------------

def test_map_implied_directories() -> None:
    fsys = MapFileSystem({"d/z/u": MapFile(data=b"abc")})

    assert fsys.stat("d").is_dir()
    assert fsys.stat("d/z").is_dir()
    assert fsys.stat("d/z/u").size == 3
    assert [e.name for e in fsys.read_dir(".")] == ["d"]
    assert fsys.read_dir("d")[0].type is FileType.DIR


def test_map_explicit_entry_wins_over_implied() -> None:
    fsys = MapFileSystem(
        {
            "d/x": MapFile(),
            "d": MapFile(type=FileType.DIR, mtime=42.0),
        }
    )
    (entry,) = fsys.read_dir(".")
    assert entry.name == "d"
    assert entry.mtime == 42.0


def test_map_errors() -> None:
    fsys = MapFileSystem({"f": MapFile()})

    with pytest.raises(FileNotFoundError):
        fsys.stat("missing")
    with pytest.raises(FileNotFoundError):
        fsys.read_dir("missing")
    with pytest.raises(NotADirectoryError):
        fsys.read_dir("f")
    with pytest.raises(InvalidPathError):
        fsys.read_dir("/f")


def test_map_empty_root() -> None:
    fsys = MapFileSystem()
    assert fsys.stat(".").is_dir()
    assert fsys.read_dir(".") == []
