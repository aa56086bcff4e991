"""Entry and option types shared by the walker and the glob expander."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

# A `match`/`skip` filter: a regex (string or compiled, searched against the
# full path) or a predicate called with the full path.
PathPattern = str | re.Pattern[str] | Callable[[str], bool]

StrPath = str | os.PathLike[str]


@dataclass(frozen=True)
class FileInfo:
    """Kind of a filesystem node, as reported by `stat` or `lstat`."""

    is_file: bool
    is_directory: bool
    is_symlink: bool


@dataclass(frozen=True)
class DirChild:
    """One immediate child of a directory, with its link-aware kind."""

    name: str
    is_file: bool
    is_directory: bool
    is_symlink: bool

    @property
    def info(self) -> FileInfo:
        return FileInfo(self.is_file, self.is_directory, self.is_symlink)


@dataclass(frozen=True)
class WalkEntry:
    """
    A filesystem node discovered during traversal.

    `name` is always the last component of `path`. For a followed symlink
    whose path has been canonicalized, that is the target's name, not the
    link's.
    """

    path: str
    name: str
    is_file: bool
    is_directory: bool
    is_symlink: bool

    @classmethod
    def from_info(cls, path: str, name: str, info: FileInfo) -> WalkEntry:
        return cls(
            path=path,
            name=name,
            is_file=info.is_file,
            is_directory=info.is_directory,
            is_symlink=info.is_symlink,
        )


@dataclass(frozen=True)
class WalkOptions:
    """
    Configuration for one `walk()` call.

    `max_depth=0` yields only the root; a negative depth yields nothing.
    `exts` is a list of path suffixes; `match` and `skip` are `PathPattern`
    lists. All three are applied to the full path of every candidate.
    """

    max_depth: float = math.inf
    include_files: bool = True
    include_dirs: bool = True
    include_symlinks: bool = True
    follow_symlinks: bool = False
    canonicalize: bool = True
    exts: Sequence[str] | None = None
    match: Sequence[PathPattern] | None = None
    skip: Sequence[PathPattern] | None = None


@dataclass(frozen=True)
class ExpandGlobOptions:
    """
    Configuration for one `expand_glob()` call.

    `root=None` means the working directory, or the filesystem root (drive
    on Windows) when the glob itself is absolute. `exclude` holds globs
    resolved against the root. `include_dirs` only filters the final result.
    """

    root: StrPath | None = None
    exclude: Sequence[str] = ()
    include_dirs: bool = True
    extended: bool = True
    globstar: bool = True
    case_insensitive: bool = False
    follow_symlinks: bool = False
    canonicalize: bool = True
