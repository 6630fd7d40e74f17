"""
Shared pytest fixtures.

Provides in-memory trees for the walker and a wrapper filesystem that
injects directory read errors while still returning the real entries.
"""

from collections.abc import Mapping

import pytest

from dirwalk.engine.fs import MapFile, MapFileSystem, PartialReadError
from dirwalk.engine.model import DirEntry, FileInfo, FileType


class DirErrorFileSystem:
    """
    Delegates to `base`, failing read_dir for the paths in `errors`.

    Entries are still returned with the injected error (a partial read).
    """

    def __init__(self, base: MapFileSystem, errors: Mapping[str, OSError]) -> None:
        self.base = base
        self.errors = dict(errors)
        self.reads: list[str] = []

    def stat(self, path: str) -> FileInfo:
        return self.base.stat(path)

    def read_dir(self, path: str) -> list[DirEntry]:
        self.reads.append(path)
        entries = self.base.read_dir(path)
        err = self.errors.get(path)
        if err is None:
            return entries
        if entries:
            raise PartialReadError(entries, err)
        raise err


@pytest.fixture
def small_tree() -> MapFileSystem:
    """{a/x, a/y, b}"""
    return MapFileSystem(
        {
            "a/x": MapFile(),
            "a/y": MapFile(),
            "b": MapFile(),
        }
    )


@pytest.fixture
def tree_with_error(small_tree: MapFileSystem) -> DirErrorFileSystem:
    """{a/x, a/y, b} where reading `a` fails after returning its entries."""
    return DirErrorFileSystem(small_tree, {"a": OSError("incomplete readdir")})


@pytest.fixture
def mixed_tree() -> MapFileSystem:
    """{a, b(dir), c, d/x, d/y(dir), d/z/u, d/z/v}"""
    return MapFileSystem(
        {
            "a": MapFile(),
            "b": MapFile(type=FileType.DIR),
            "c": MapFile(),
            "d/x": MapFile(),
            "d/y": MapFile(type=FileType.DIR),
            "d/z/u": MapFile(),
            "d/z/v": MapFile(),
        }
    )


@pytest.fixture
def error_fs_factory():
    """Build a DirErrorFileSystem over any MapFileSystem."""

    def make(base: MapFileSystem, errors: Mapping[str, OSError]) -> DirErrorFileSystem:
        return DirErrorFileSystem(base, errors)

    return make
