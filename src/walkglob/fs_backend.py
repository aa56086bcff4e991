"""
Filesystem collaborators used by the walker and the glob expander.

The core never calls `os` directly: it goes through a `FileSystem`, so an
alternative implementation (an in-memory tree, a test double) can be passed
to any entry point with `fs=`.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Sequence
from typing import Protocol

from walkglob.types import DirChild, FileInfo


class FileSystem(Protocol):
    """Metadata provider, directory lister and symlink resolver."""

    def stat(self, path: str) -> FileInfo:
        """Kind of `path`, following a terminal symlink."""
        ...

    def lstat(self, path: str) -> FileInfo:
        """Kind of `path`, not following a terminal symlink."""
        ...

    def list_children(self, path: str) -> Sequence[DirChild]:
        """Immediate children of the directory `path`, each exactly once."""
        ...

    def realpath(self, path: str) -> str:
        """Absolute path with every symlink hop resolved."""
        ...

    def cwd(self) -> str:
        """Current working directory."""
        ...


def _info_from_mode(mode: int) -> FileInfo:
    return FileInfo(
        is_file=stat.S_ISREG(mode),
        is_directory=stat.S_ISDIR(mode),
        is_symlink=stat.S_ISLNK(mode),
    )


class LocalFileSystem:
    """`FileSystem` backed by the local operating system."""

    def stat(self, path: str) -> FileInfo:
        return _info_from_mode(os.stat(path).st_mode)

    def lstat(self, path: str) -> FileInfo:
        return _info_from_mode(os.lstat(path).st_mode)

    def list_children(self, path: str) -> Sequence[DirChild]:
        children: list[DirChild] = []
        with os.scandir(path) as it:
            for entry in it:
                children.append(
                    DirChild(
                        name=entry.name,
                        is_file=entry.is_file(follow_symlinks=False),
                        is_directory=entry.is_dir(follow_symlinks=False),
                        is_symlink=entry.is_symlink(),
                    )
                )
        return children

    def realpath(self, path: str) -> str:
        # strict: a dangling link is an error, not a path to nowhere.
        return os.path.realpath(path, strict=True)

    def cwd(self) -> str:
        return os.getcwd()
