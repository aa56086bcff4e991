"""
Lazy depth-first directory traversal.

`walk()` and `walk_async()` yield a `WalkEntry` for the root and then for
every node below it, in pre-order: a directory comes before its children.
Entries are produced on demand from an explicit stack of directory cursors,
so a caller that stops iterating stops all further listing.

Sibling order is whatever order the directory lister returns. Symlink
cycles are not detected: with `follow_symlinks=True` a link pointing back
at one of its ancestors is walked again for as long as the caller keeps
consuming.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections.abc import AsyncIterator, Iterator, Sequence
from dataclasses import dataclass

from walkglob.errors import WalkError
from walkglob.fs_backend import FileSystem, LocalFileSystem
from walkglob.types import DirChild, FileInfo, PathPattern, StrPath, WalkEntry, WalkOptions

logger = logging.getLogger(__name__)


@dataclass
class _Cursor:
    """Position inside one directory listing."""

    path: str
    depth: float
    children: Iterator[DirChild] | None = None


def _hits(path: str, patterns: Sequence[PathPattern]) -> bool:
    for pattern in patterns:
        if callable(pattern):
            if pattern(path):
                return True
        elif re.search(pattern, path):
            return True
    return False


def _is_skipped(path: str, options: WalkOptions) -> bool:
    return options.skip is not None and _hits(path, options.skip)


def _passes_filters(path: str, options: WalkOptions) -> bool:
    """Apply `exts`, `match` and `skip` to a candidate path."""
    if options.exts is not None and not any(path.endswith(ext) for ext in options.exts):
        return False
    if options.match is not None and not _hits(path, options.match):
        return False
    return not _is_skipped(path, options)


def _wants_kind(entry: WalkEntry, options: WalkOptions) -> bool:
    if entry.is_directory:
        return options.include_dirs
    if entry.is_symlink:
        return options.include_symlinks
    return options.include_files


def _root_entry(path: str, info: FileInfo) -> WalkEntry:
    return WalkEntry.from_info(path, os.path.basename(path), info)


def _start(root_entry: WalkEntry, options: WalkOptions) -> tuple[WalkEntry | None, list[_Cursor]]:
    """What to yield for the root, and the initial cursor stack."""
    yielded = None
    if _wants_kind(root_entry, options) and _passes_filters(root_entry.path, options):
        yielded = root_entry
    if (
        options.max_depth < 1
        or not root_entry.is_directory
        or _is_skipped(root_entry.path, options)
    ):
        return yielded, []
    return yielded, [_Cursor(root_entry.path, options.max_depth)]


def _resolve_child(
    fs: FileSystem, parent: str, child: DirChild, options: WalkOptions
) -> tuple[str, FileInfo]:
    """
    Join a child onto its parent and, for a followed symlink, resolve it.

    The target is re-stat'ed after resolution because another process may
    have swapped it for a different kind of node in between. That race is
    accepted as-is.
    """
    path = os.path.join(parent, child.name)
    if not (child.is_symlink and options.follow_symlinks):
        return path, child.info
    real = fs.realpath(path)
    info = fs.lstat(real)
    return (real if options.canonicalize else path), info


def _visit(
    cursor: _Cursor, child: DirChild, path: str, info: FileInfo, options: WalkOptions
) -> tuple[WalkEntry | None, _Cursor | None]:
    """Decide what a resolved child yields and whether to descend into it."""
    entry = WalkEntry.from_info(path, os.path.basename(path), info)

    if child.is_symlink and not options.follow_symlinks:
        if options.include_symlinks and _passes_filters(path, options):
            return entry, None
        return None, None

    if info.is_directory or info.is_symlink:
        depth = cursor.depth - 1
        yielded = entry if options.include_dirs and _passes_filters(path, options) else None
        if depth < 1 or _is_skipped(path, options):
            return yielded, None
        return yielded, _Cursor(path, depth)

    if options.include_files and _passes_filters(path, options):
        return entry, None
    return None, None


def _wrap(err: OSError, root: str) -> WalkError:
    root = os.path.normpath(root)
    logger.debug("Walk failed under %s: %s", root, err)
    return WalkError(err, root)


def walk(
    root: StrPath,
    options: WalkOptions | None = None,
    *,
    fs: FileSystem | None = None,
) -> Iterator[WalkEntry]:
    """
    Walk the tree under `root`, yielding entries in depth-first pre-order.

    A missing root raises `FileNotFoundError` as-is. Any later failure, such
    as a directory vanishing mid-walk, raises `WalkError` at the point it
    happens, after everything found before it has been yielded.
    """
    options = options or WalkOptions()
    fs = fs or LocalFileSystem()
    if options.max_depth < 0:
        return

    root_path = os.path.normpath(os.fspath(root))
    first, stack = _start(_root_entry(root_path, fs.stat(root_path)), options)
    if first is not None:
        yield first

    while stack:
        cursor = stack[-1]
        try:
            if cursor.children is None:
                cursor.children = iter(fs.list_children(cursor.path))
            child = next(cursor.children, None)
            if child is None:
                stack.pop()
                continue
            path, info = _resolve_child(fs, cursor.path, child, options)
        except OSError as err:
            raise _wrap(err, cursor.path) from err

        entry, nested = _visit(cursor, child, path, info, options)
        if entry is not None:
            yield entry
        if nested is not None:
            stack.append(nested)


async def walk_async(
    root: StrPath,
    options: WalkOptions | None = None,
    *,
    fs: FileSystem | None = None,
) -> AsyncIterator[WalkEntry]:
    """Same as `walk()`, running every filesystem call in a worker thread."""
    options = options or WalkOptions()
    fs = fs or LocalFileSystem()
    if options.max_depth < 0:
        return

    root_path = os.path.normpath(os.fspath(root))
    root_info = await asyncio.to_thread(fs.stat, root_path)
    first, stack = _start(_root_entry(root_path, root_info), options)
    if first is not None:
        yield first

    while stack:
        cursor = stack[-1]
        try:
            if cursor.children is None:
                children = await asyncio.to_thread(fs.list_children, cursor.path)
                cursor.children = iter(children)
            child = next(cursor.children, None)
            if child is None:
                stack.pop()
                continue
            if child.is_symlink and options.follow_symlinks:
                path, info = await asyncio.to_thread(
                    _resolve_child, fs, cursor.path, child, options
                )
            else:
                path, info = _resolve_child(fs, cursor.path, child, options)
        except OSError as err:
            raise _wrap(err, cursor.path) from err

        entry, nested = _visit(cursor, child, path, info, options)
        if entry is not None:
            yield entry
        if nested is not None:
            stack.append(nested)
