# src/dirwalk/engine/scan.py

"""
Rule-driven scanning on top of Walker.

This module turns a WalkConfig into pruning calls:
- depth limit (`tree -L` semantics),
- skip / stop name patterns,
- hidden entries,
- unreadable directories.

It performs *no rendering*.
"""

import fnmatch
import logging
import posixpath
from collections.abc import Iterator

from .config import WalkConfig
from .fs import FileSystem
from .model import Phase, Visit
from .walk import Walker

logger = logging.getLogger(__name__)


def depth_of(root: str, path: str) -> int:
    """
    Depth of `path` below `root`; the root itself is depth 0.

    Both are compared in normal form, since child paths are normalised
    while the root keeps its spelling.
    """
    root = posixpath.normpath(root)
    path = posixpath.normpath(path)
    if path == root:
        return 0
    if root == ".":
        return path.count("/") + 1
    return path[len(root):].strip("/").count("/") + 1


def _matches(name: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatchcase(name, pat) for pat in patterns)


def iter_visits(fsys: FileSystem, root: str, config: WalkConfig | None = None) -> Iterator[Visit]:
    """
    Yield visits in the subtree rooted at `root`, applying `config`.

    Rules, evaluated on each visit:
    - hidden names (leading ".") are dropped unless `include_hidden`;
      the root is never dropped,
    - error visits are logged and yielded; with `skip_unreadable` the
      partial contents of an unreadable directory are not walked,
    - names matching `stop` are yielded, then their subtree and later
      siblings are pruned,
    - names matching `skip` are yielded with their subtree pruned,
    - directories at depth >= `level` are yielded but not entered.
    """
    cfg = config or WalkConfig()
    walker = Walker(fsys, root)

    while walker.advance():
        visit = walker.visit
        is_root = visit.path == walker.root
        name = visit.entry.name if visit.entry is not None else visit.path

        if not is_root and not cfg.include_hidden and name.startswith("."):
            walker.skip_dir()
            continue

        if visit.error is not None:
            logger.info("%s: %s", visit.path, visit.error)
            if cfg.skip_unreadable and visit.phase is Phase.READ_ERROR:
                walker.skip_dir()
            yield visit
            continue

        if not is_root and _matches(name, cfg.stop):
            logger.debug("stop at %s", visit.path)
            walker.skip_parent()
        elif not is_root and _matches(name, cfg.skip):
            logger.debug("skip %s", visit.path)
            walker.skip_dir()
        elif cfg.level is not None and visit.is_dir and depth_of(root, visit.path) >= cfg.level:
            walker.skip_dir()

        yield visit
