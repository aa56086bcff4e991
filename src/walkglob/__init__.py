"""
Lazy filesystem walking and glob expansion.

Usage::

    from walkglob import ExpandGlobOptions, WalkOptions, expand_glob, walk

    for entry in walk("src", WalkOptions(max_depth=2, include_dirs=False)):
        print(entry.path)

    for entry in expand_glob("src/**/*.py", ExpandGlobOptions(exclude=["src/vendor/**"])):
        print(entry.path)
"""

from walkglob.errors import WalkError, is_not_found_error
from walkglob.expand_glob import expand_glob, expand_glob_async
from walkglob.fs_backend import FileSystem, LocalFileSystem
from walkglob.types import (
    DirChild,
    ExpandGlobOptions,
    FileInfo,
    PathPattern,
    WalkEntry,
    WalkOptions,
)
from walkglob.walker import walk, walk_async

__all__ = [
    "DirChild",
    "ExpandGlobOptions",
    "FileInfo",
    "FileSystem",
    "LocalFileSystem",
    "PathPattern",
    "WalkEntry",
    "WalkError",
    "WalkOptions",
    "expand_glob",
    "expand_glob_async",
    "is_not_found_error",
    "walk",
    "walk_async",
]
