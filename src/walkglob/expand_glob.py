"""
Glob expansion over the filesystem.

A glob such as `src/**/*.py` is split into segments. Leading literal
segments are folded onto the root without any pattern matching; the
remaining segments are consumed one at a time, each one advancing a
frontier of matches:

- `..` replaces every directory in the frontier with its parent.
- `**` replaces every directory with everything below it, itself included.
- Any other segment replaces every directory with its children whose name
  matches the segment.

The frontier is keyed by path, so matches reached through several branches
appear once. Each segment is fully expanded before the next one starts, and
the final matches are yielded sorted by path.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from dataclasses import dataclass

from walkglob.errors import WalkError, is_not_found_error
from walkglob.fs_backend import FileSystem, LocalFileSystem
from walkglob.patterns import (
    GlobSyntax,
    compile_path_matcher,
    compile_segment,
    is_glob,
    split_glob,
)
from walkglob.types import ExpandGlobOptions, StrPath, WalkEntry, WalkOptions
from walkglob.walker import walk, walk_async

logger = logging.getLogger(__name__)

NameMatcher = Callable[[str], bool]


@dataclass(frozen=True)
class _GlobPlan:
    """Everything derived from the glob and options before touching the tree."""

    fixed_root: str
    segments: list[str]
    has_trailing_sep: bool
    syntax: GlobSyntax
    exclusions: list[Callable[[str], bool]]
    options: ExpandGlobOptions

    def is_excluded(self, path: str) -> bool:
        return any(matches(path) for matches in self.exclusions)

    def segment_matcher(self, segment: str) -> NameMatcher | None:
        if segment in ("..", "**"):
            return None
        return compile_segment(segment, self.syntax)

    def walk_options(self, max_depth: float) -> WalkOptions:
        return WalkOptions(
            max_depth=max_depth,
            skip=self.exclusions,
            follow_symlinks=self.options.follow_symlinks,
            canonicalize=self.options.canonicalize,
        )

    def globstar_depth(self) -> float:
        return math.inf if self.syntax.globstar else 1


def _plan(glob: StrPath, options: ExpandGlobOptions, fs: FileSystem) -> _GlobPlan:
    split = split_glob(os.fspath(glob))
    syntax = GlobSyntax(
        extended=options.extended,
        globstar=options.globstar,
        case_insensitive=options.case_insensitive,
    )

    fs_root = split.drive_root or os.sep
    if options.root is not None:
        root = os.fspath(options.root)
    elif split.is_absolute:
        root = fs_root
    else:
        root = fs.cwd()
    if not os.path.isabs(root):
        root = os.path.join(fs.cwd(), root)
    abs_root = os.path.normpath(root)

    # Exclusions are anchored at the expansion root, not at the fixed prefix,
    # so that excluding the glob itself cancels every match.
    exclusions = [
        compile_path_matcher(pattern, syntax, anchor=abs_root) for pattern in options.exclude
    ]

    fixed_root = fs_root if split.is_absolute else abs_root
    segments = list(split.segments)
    while segments and not is_glob(segments[0], syntax):
        fixed_root = os.path.normpath(os.path.join(fixed_root, segments.pop(0)))

    return _GlobPlan(
        fixed_root=fixed_root,
        segments=segments,
        has_trailing_sep=split.has_trailing_sep,
        syntax=syntax,
        exclusions=exclusions,
        options=options,
    )


def _stat_entry(fs: FileSystem, path: str) -> WalkEntry | None:
    """Entry for `path`, or `None` if it does not exist."""
    try:
        info = fs.stat(path)
    except OSError as err:
        if is_not_found_error(err):
            return None
        raise WalkError(err, os.path.normpath(path)) from err
    return WalkEntry.from_info(path, os.path.basename(path), info)


def _parent(path: str) -> str:
    return os.path.normpath(os.path.join(path, os.pardir))


def _advance(
    fs: FileSystem,
    plan: _GlobPlan,
    current: WalkEntry,
    segment: str,
    matcher: NameMatcher | None,
) -> Iterator[WalkEntry]:
    if not current.is_directory:
        return

    if segment == "..":
        parent = _parent(current.path)
        if plan.is_excluded(parent):
            return
        entry = _stat_entry(fs, parent)
        if entry is not None:
            yield entry
        return

    try:
        if matcher is None:
            yield from walk(current.path, plan.walk_options(plan.globstar_depth()), fs=fs)
            return
        for entry in walk(current.path, plan.walk_options(1), fs=fs):
            if entry.path != current.path and matcher(entry.name):
                yield entry
    except OSError as err:
        raise WalkError(err, os.path.normpath(current.path)) from err


async def _advance_async(
    fs: FileSystem,
    plan: _GlobPlan,
    current: WalkEntry,
    segment: str,
    matcher: NameMatcher | None,
) -> list[WalkEntry]:
    if not current.is_directory:
        return []

    if segment == "..":
        parent = _parent(current.path)
        if plan.is_excluded(parent):
            return []
        entry = await asyncio.to_thread(_stat_entry, fs, parent)
        return [entry] if entry is not None else []

    try:
        if matcher is None:
            options = plan.walk_options(plan.globstar_depth())
            return [entry async for entry in walk_async(current.path, options, fs=fs)]
        return [
            entry
            async for entry in walk_async(current.path, plan.walk_options(1), fs=fs)
            if entry.path != current.path and matcher(entry.name)
        ]
    except OSError as err:
        raise WalkError(err, os.path.normpath(current.path)) from err


def _finish(matches: Iterable[WalkEntry], plan: _GlobPlan) -> list[WalkEntry]:
    results = list(matches)
    if plan.has_trailing_sep:
        results = [entry for entry in results if entry.is_directory]
    if not plan.options.include_dirs:
        results = [entry for entry in results if not entry.is_directory]
    results.sort(key=lambda entry: entry.path)
    return results


def expand_glob(
    glob: StrPath,
    options: ExpandGlobOptions | None = None,
    *,
    fs: FileSystem | None = None,
) -> Iterator[WalkEntry]:
    """
    Yield every entry matching `glob`, sorted by path.

    A glob whose literal prefix does not exist matches nothing. Failures while
    listing or stat'ing during expansion raise `WalkError`.
    """
    options = options or ExpandGlobOptions()
    fs = fs or LocalFileSystem()
    plan = _plan(glob, options, fs)
    logger.debug("Expanding %r from %s", os.fspath(glob), plan.fixed_root)

    fixed = _stat_entry(fs, plan.fixed_root)
    if fixed is None:
        return

    frontier: dict[str, WalkEntry] = {fixed.path: fixed}
    for segment in plan.segments:
        matcher = plan.segment_matcher(segment)
        advanced: dict[str, WalkEntry] = {}
        for current in frontier.values():
            for entry in _advance(fs, plan, current, segment, matcher):
                advanced[entry.path] = entry
        frontier = advanced
        logger.debug("Segment %r: %d matches", segment, len(frontier))

    yield from _finish(frontier.values(), plan)


async def expand_glob_async(
    glob: StrPath,
    options: ExpandGlobOptions | None = None,
    *,
    fs: FileSystem | None = None,
) -> AsyncIterator[WalkEntry]:
    """
    Same as `expand_glob()`, expanding all frontier entries of a segment
    concurrently.
    """
    options = options or ExpandGlobOptions()
    fs = fs or LocalFileSystem()
    plan = _plan(glob, options, fs)
    logger.debug("Expanding %r from %s", os.fspath(glob), plan.fixed_root)

    fixed = await asyncio.to_thread(_stat_entry, fs, plan.fixed_root)
    if fixed is None:
        return

    frontier: dict[str, WalkEntry] = {fixed.path: fixed}
    for segment in plan.segments:
        matcher = plan.segment_matcher(segment)
        batches = await asyncio.gather(
            *(_advance_async(fs, plan, current, segment, matcher) for current in frontier.values())
        )
        advanced: dict[str, WalkEntry] = {}
        for batch in batches:
            for entry in batch:
                advanced[entry.path] = entry
        frontier = advanced
        logger.debug("Segment %r: %d matches", segment, len(frontier))

    for entry in _finish(frontier.values(), plan):
        yield entry
