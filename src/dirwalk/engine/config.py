# src/dirwalk/engine/config.py

"""
Walk configuration.

Pruning rules can come from a YAML file (`.dirwalk.yml` by default) and
from command-line flags; flags are overlaid on top of the file.

File format (every key optional):

    level: 3                  # tree -L semantics, root is depth 0
    skip: [".git", "*.egg-info"]
    stop: ["STOP"]
    include_hidden: false
    skip_unreadable: false
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final, Optional

import yaml


DEFAULT_CONFIG_NAME: Final[str] = ".dirwalk.yml"

_KNOWN_KEYS: Final[frozenset[str]] = frozenset(
    {"level", "skip", "stop", "include_hidden", "skip_unreadable"}
)


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigError(Exception):
    """
    Raised when a configuration file or value is invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WalkConfig:
    """
    Pruning rules applied on top of a plain walk.

    `skip` and `stop` are glob patterns matched against entry names.
    """

    level: Optional[int] = None
    skip: tuple[str, ...] = ()
    stop: tuple[str, ...] = ()
    include_hidden: bool = False
    skip_unreadable: bool = False

    def __post_init__(self) -> None:
        if self.level is not None and self.level < 0:
            raise ConfigError("level", "must be a non-negative integer")

    def merged(
        self,
        *,
        level: Optional[int] = None,
        skip: tuple[str, ...] = (),
        stop: tuple[str, ...] = (),
        include_hidden: Optional[bool] = None,
        skip_unreadable: Optional[bool] = None,
    ) -> "WalkConfig":
        """
        Return a copy with command-line values applied.

        Scalars replace file values when given; patterns are appended.
        """
        return replace(
            self,
            level=self.level if level is None else level,
            skip=self.skip + tuple(skip),
            stop=self.stop + tuple(stop),
            include_hidden=self.include_hidden if include_hidden is None else include_hidden,
            skip_unreadable=self.skip_unreadable if skip_unreadable is None else skip_unreadable,
        )


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------

def load_config(path: str | Path) -> WalkConfig:
    """
    Parse a YAML configuration file into a WalkConfig.
    """
    p = Path(path)

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(p), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(p), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(p), "YAML root must be a mapping/dictionary")

    unknown = sorted(str(k) for k in data if k not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(str(p), f"Unknown key(s): {', '.join(unknown)}")

    return WalkConfig(
        level=_optional_level(str(p), data),
        skip=_patterns(str(p), data, "skip"),
        stop=_patterns(str(p), data, "stop"),
        include_hidden=_bool_field(str(p), data, "include_hidden"),
        skip_unreadable=_bool_field(str(p), data, "skip_unreadable"),
    )


def find_default_config(cwd: str | Path) -> Optional[Path]:
    """
    Return `cwd/.dirwalk.yml` if it exists.
    """
    candidate = Path(cwd) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def _optional_level(path: str, data: dict[str, Any]) -> Optional[int]:
    value = data.get("level")
    if value is None:
        return None

    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(path, "YAML key 'level' must be an integer")
    if value < 0:
        raise ConfigError(path, "YAML key 'level' must be non-negative")

    return value


def _patterns(path: str, data: dict[str, Any], key: str) -> tuple[str, ...]:
    raw = data.get(key)
    if raw is None:
        return ()

    if isinstance(raw, str):
        raw = [raw]

    if not isinstance(raw, list):
        raise ConfigError(path, f"YAML key '{key}' must be a list of patterns")

    out: list[str] = []
    for i, item in enumerate(raw, start=1):
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(path, f"{key}[{i}] must be a non-empty string")
        out.append(item.strip())

    return tuple(out)


def _bool_field(path: str, data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(path, f"YAML key '{key}' must be true or false")
    return value
