"""
TOML config for the walkglob command line.

The nearest of `.walkglob.toml`, `walkglob.toml` or a `pyproject.toml` with a
`[tool.walkglob]` table, searching upward from the working directory, supplies
defaults for CLI options. Keys may be kebab-case and may be grouped into
tables (`[traversal]`, `[exclusion]`, `[glob]`); the grouping is cosmetic.

Precedence is explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class WalkglobConfig:
    """
    Settings read from a config file. A field is `None` when the file does not
    set it, so that "not configured" differs from "set to the default".
    """

    # [traversal]
    max_depth: int | None = None
    follow_symlinks: bool | None = None
    canonicalize: bool | None = None
    include_dirs: bool | None = None
    include_files: bool | None = None
    include_symlinks: bool | None = None
    exts: list[str] | None = None
    # [exclusion]
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    glob_exclude: list[str] | None = None
    respect_gitignore: bool | None = None
    force_exclude: bool | None = None
    # [glob]
    case_insensitive: bool | None = None
    extended: bool | None = None
    globstar: bool | None = None


# Candidate file name and the table holding our settings (empty: the whole file).
_CONFIG_SOURCES: list[tuple[str, tuple[str, ...]]] = [
    (".walkglob.toml", ()),
    ("walkglob.toml", ()),
    ("pyproject.toml", ("tool", "walkglob")),
]

_LIST_FIELDS = {"exts", "exclude", "extend_exclude", "glob_exclude"}


def _field_kind(name: str) -> type:
    if name == "max_depth":
        return int
    if name in _LIST_FIELDS:
        return list
    return bool


_FIELD_KINDS: dict[str, type] = {f.name: _field_kind(f.name) for f in fields(WalkglobConfig)}


def _table(data: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any] | None:
    for key in keys:
        value = data.get(key)
        if not isinstance(value, dict):
            return None
        data = cast(dict[str, Any], value)
    return data


def _source_table(filename: str) -> tuple[str, ...]:
    return next((keys for name, keys in _CONFIG_SOURCES if name == filename), ())


def find_config_file(start_dir: Path) -> Path | None:
    """
    The config file closest to `start_dir`, or `None`. A `pyproject.toml`
    only counts if it has a `[tool.walkglob]` table; an unparseable one is
    passed over.
    """
    for directory in [start_dir.resolve(), *start_dir.resolve().parents]:
        for filename, keys in _CONFIG_SOURCES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if not keys:
                return candidate
            try:
                data = tomllib.loads(candidate.read_text())
            except (tomllib.TOMLDecodeError, OSError):
                continue
            if _table(data, keys) is not None:
                return candidate
    return None


def load_config(config_path: Path) -> WalkglobConfig:
    """
    Read `config_path` into a `WalkglobConfig`. Unknown keys and values of
    the wrong type are logged and ignored; invalid TOML raises
    `tomllib.TOMLDecodeError`.
    """
    data = tomllib.loads(config_path.read_text())
    settings = _table(data, _source_table(config_path.name)) or {}
    return _parse_config_data(settings, source=config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> WalkglobConfig:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    values: dict[str, Any] = {}
    for key, value in flat.items():
        name = key.replace("-", "_")
        kind = _FIELD_KINDS.get(name)
        if kind is None:
            logger.warning("Ignoring unrecognized config key %r in %s", key, source)
        elif not _has_kind(value, kind):
            logger.warning(
                "Ignoring config key %r in %s: expected %s, got %r",
                key,
                source,
                kind.__name__,
                value,
            )
        else:
            values[name] = value
    return WalkglobConfig(**values)


def _has_kind(value: Any, kind: type) -> bool:
    if kind is list:
        return isinstance(value, list) and all(
            isinstance(item, str) for item in cast(list[Any], value)
        )
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, bool)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: WalkglobConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy every setting `config` defines onto `cli_opts`, except those whose
    flag the user passed explicitly. Returns `cli_opts`, updated in place.
    """
    if config is None:
        return cli_opts

    for name in _FIELD_KINDS:
        value = getattr(config, name)
        if value is None or name in explicit_flags or not hasattr(cli_opts, name):
            continue
        setattr(cli_opts, name, value)
    return cli_opts
