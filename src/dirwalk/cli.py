# src/dirwalk/cli.py

"""
Command-line interface for dirwalk.

This module:
- defines argument parsing and subcommands,
- loads configuration and sets up logging,
- delegates walking to engine.scan and output to engine.render.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
import posixpath
from collections.abc import Iterator
from dataclasses import replace
from pathlib import Path

from dirwalk.engine.config import ConfigError, WalkConfig, find_default_config, load_config
from dirwalk.engine.fs import OSFileSystem
from dirwalk.engine.model import Visit
from dirwalk.engine.render import render_list, render_tree
from dirwalk.engine.scan import iter_visits

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_walk_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory or file to walk (default: .)",
    )
    p.add_argument(
        "-C",
        "--cd",
        type=str,
        default=".",
        help="Work as if current directory is this path (default: .)",
    )
    p.add_argument(
        "-L",
        "--level",
        type=int,
        default=None,
        help="Descend at most this many levels (tree -L semantics; root is level 0)",
    )
    p.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Do not descend into entries matching this glob (repeatable)",
    )
    p.add_argument(
        "--stop",
        action="append",
        default=[],
        metavar="PATTERN",
        help="After an entry matching this glob, skip the rest of its directory (repeatable)",
    )
    p.add_argument(
        "--hidden",
        action="store_true",
        default=None,
        help="Include entries whose name starts with '.'",
    )
    p.add_argument(
        "--skip-unreadable",
        action="store_true",
        default=None,
        help="Do not walk partial contents of directories that failed to read",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file (default: .dirwalk.yml in the working directory, if present)",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More log output (repeatable)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dirwalk")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser(
        "list",
        help="List files and directories in lexical order",
    )
    _add_walk_arguments(p_list)
    p_list.add_argument(
        "-l",
        "--long",
        action="store_true",
        help="Show type and size columns",
    )
    p_list.add_argument(
        "--tree",
        action="store_true",
        help="Indent entries by depth instead of printing full paths",
    )
    p_list.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    p_list.set_defaults(func=cmd_list)

    p_check = sub.add_parser(
        "check",
        help="Walk the tree and report unreadable paths",
    )
    _add_walk_arguments(p_check)
    p_check.set_defaults(func=cmd_check)

    return parser


# ---------------------------------------------------------------------
# Setup helpers
# ---------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_walk_config(args: argparse.Namespace, cwd: Path) -> WalkConfig:
    if args.config:
        path = Path(args.config)
        if not path.is_absolute():
            path = cwd / path
        base = load_config(path)
    else:
        default = find_default_config(cwd)
        base = load_config(default) if default is not None else WalkConfig()

    if args.level is not None and args.level < 0:
        raise ConfigError("--level", "must be a non-negative integer")

    return base.merged(
        level=args.level,
        skip=tuple(args.skip),
        stop=tuple(args.stop),
        include_hidden=args.hidden,
        skip_unreadable=args.skip_unreadable,
    )


def _open_root(cwd: Path, raw: str) -> tuple[OSFileSystem, str, str]:
    """
    Map a user-supplied root onto (filesystem, walk root, output label).

    Relative roots inside `cwd` are walked as given. Absolute roots and
    roots above `cwd` are walked as "." of their own filesystem, and
    their output is prefixed with the normalised root as typed.
    """
    root = posixpath.normpath(raw.replace("\\", "/"))
    if root.startswith("/") or root == ".." or root.startswith("../"):
        return OSFileSystem((cwd / raw).resolve()), ".", root
    return OSFileSystem(cwd), root, root


def _labelled(visits: Iterator[Visit], root: str, label: str) -> Iterator[Visit]:
    """
    Rewrite visit paths so they start with `label` instead of `root`.
    """
    if label == root:
        yield from visits
        return

    for visit in visits:
        path = label if visit.path == root else posixpath.join(label, visit.path)
        yield replace(visit, path=path)


def _prepare(args: argparse.Namespace) -> tuple[Iterator[Visit], str]:
    """
    Configure logging, load configuration and start the walk.

    Returns the visits and the root as it appears in output.
    """
    _configure_logging(args.verbose)

    cwd = (Path.cwd() / (args.cd or ".")).resolve()
    cfg = _load_walk_config(args, cwd)
    fsys, root, label = _open_root(cwd, args.root)

    logger.info("walking %s in %s", root, fsys.root_dir)
    return _labelled(iter_visits(fsys, root, cfg), root, label), label


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    try:
        visits, root = _prepare(args)
    except ConfigError as e:
        print(f"Error: {e}")
        return 2

    color = not bool(args.no_color)

    if args.tree:
        errors = render_tree(visits, root, color=color)
    else:
        errors = render_list(visits, long=bool(args.long), color=color)

    return 1 if errors else 0


def cmd_check(args: argparse.Namespace) -> int:
    try:
        visits, _ = _prepare(args)
    except ConfigError as e:
        print(f"Error: {e}")
        return 2

    had_errors = False
    for visit in visits:
        if visit.error is None:
            continue
        had_errors = True
        print(f"{visit.path}: {visit.error}")

    return 1 if had_errors else 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    return func(args)


if __name__ == "__main__":
    raise SystemExit(main())
