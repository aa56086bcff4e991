"""
Glob compilation on top of `wcmatch`.

Single path segments are matched with `wcmatch.fnmatch`; whole absolute
paths (exclusions) are matched with `wcmatch.glob`. Wildcards match leading
dots, and matching is case-sensitive unless asked otherwise, on every
platform.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from dataclasses import dataclass

from wcmatch import fnmatch, glob

if os.name == "nt":
    _SEPARATORS = r"[\\/]+"
else:
    _SEPARATORS = r"/+"

_SEP_RE = re.compile(_SEPARATORS)
_EDGE_SEP_RE = re.compile(rf"^{_SEPARATORS}|{_SEPARATORS}$")
_TRAILING_SEP_RE = re.compile(rf"{_SEPARATORS}$")


@dataclass(frozen=True)
class GlobSyntax:
    """
    Which glob features are enabled.

    `extended` turns on extglob groups (`?(a|b)`, `*(...)`, `+(...)`,
    `@(...)`, `!(...)`) and brace expansion (`{a,b}`). `globstar` lets `**`
    span directories in path patterns.
    """

    extended: bool = True
    globstar: bool = True
    case_insensitive: bool = False

    def fnmatch_flags(self) -> int:
        flags = fnmatch.DOTMATCH
        flags |= fnmatch.IGNORECASE if self.case_insensitive else fnmatch.CASE
        if self.extended:
            flags |= fnmatch.EXTMATCH | fnmatch.BRACE
        return flags

    def glob_flags(self) -> int:
        flags = glob.DOTGLOB
        flags |= glob.IGNORECASE if self.case_insensitive else glob.CASE
        if self.extended:
            flags |= glob.EXTGLOB | glob.BRACE
        if self.globstar:
            flags |= glob.GLOBSTAR
        return flags


def is_glob(segment: str, syntax: GlobSyntax) -> bool:
    """True if `segment` contains pattern metacharacters under `syntax`."""
    return glob.is_magic(segment, flags=syntax.glob_flags())


def compile_segment(pattern: str, syntax: GlobSyntax) -> Callable[[str], bool]:
    """
    Compile one path segment (no separators) into a predicate over plain
    names.
    """
    flags = syntax.fnmatch_flags()

    def matches(name: str) -> bool:
        return fnmatch.fnmatch(name, pattern, flags=flags)

    return matches


def escape_path(path: str) -> str:
    """Escape `path` so that a path glob matches it literally."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return glob.escape(path)


def _anchor(pattern: str, anchor: str) -> str:
    pattern = os.path.normpath(pattern)
    while pattern == os.pardir or pattern.startswith(os.pardir + os.sep):
        anchor = os.path.dirname(anchor)
        pattern = pattern[len(os.pardir) + 1 :]
    prefix = escape_path(anchor)
    if pattern in ("", os.curdir):
        return prefix
    return prefix.rstrip("/") + "/" + pattern.replace(os.sep, "/")


def compile_path_matcher(
    pattern: str, syntax: GlobSyntax, anchor: str | None = None
) -> Callable[[str], bool]:
    """
    Compile a path glob into a predicate over absolute paths.

    A relative `pattern` is joined onto the absolute directory `anchor`,
    whose own characters are matched literally.
    """
    flags = syntax.glob_flags()
    if anchor is not None and not os.path.isabs(pattern):
        pattern = _anchor(pattern, anchor)
    elif anchor is not None:
        pattern = os.path.normpath(pattern).replace(os.sep, "/")
    elif os.sep != "/":
        pattern = pattern.replace(os.sep, "/")

    def matches(path: str) -> bool:
        return glob.globmatch(path, pattern, flags=flags)

    return matches


@dataclass(frozen=True)
class SplitGlob:
    """A glob broken into segments, with its root recorded separately."""

    segments: list[str]
    is_absolute: bool
    has_trailing_sep: bool
    # Drive or UNC root, with separator, of an absolute Windows glob.
    drive_root: str | None


def split_glob(pattern: str) -> SplitGlob:
    """
    Split a glob on path separators.

    Leading and trailing separators are dropped before splitting; repeated
    separators count as one.
    """
    drive, tail = os.path.splitdrive(pattern)
    is_absolute = os.path.isabs(pattern)
    segments = _SEP_RE.split(_EDGE_SEP_RE.sub("", tail))
    return SplitGlob(
        segments=segments,
        is_absolute=is_absolute,
        has_trailing_sep=bool(_TRAILING_SEP_RE.search(tail)),
        drive_root=drive + os.sep if drive and is_absolute else None,
    )
