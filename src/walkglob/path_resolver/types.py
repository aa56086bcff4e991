"""Configuration types for path resolution."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from walkglob.path_resolver.defaults import DEFAULT_EXCLUDES
from walkglob.patterns import GlobSyntax
from walkglob.types import ExpandGlobOptions, PathPattern, WalkOptions


@dataclass
class ResolverConfig:
    """
    Configuration for resolving files, directories, and globs.

    `tool_name` determines the ignore file name (e.g., `.walkglobignore`).
    `exclude=None` means use `DEFAULT_EXCLUDES`; providing a list replaces them entirely.
    `exclude`/`extend_exclude` use gitignore syntax; `glob_exclude` holds globs
    handed to glob expansion, resolved against the working directory.
    """

    tool_name: str = "walkglob"
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    glob_exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = True
    force_exclude: bool = False
    max_depth: float = math.inf
    include_files: bool = True
    include_dirs: bool = True
    include_symlinks: bool = True
    follow_symlinks: bool = False
    canonicalize: bool = True
    exts: list[str] | None = None
    case_insensitive: bool = False
    extended: bool = True
    globstar: bool = True

    @property
    def effective_exclude(self) -> list[str]:
        """Combined exclude patterns: defaults (or `exclude`) + `extend_exclude`."""
        base = self.exclude if self.exclude is not None else list(DEFAULT_EXCLUDES)
        return base + self.extend_exclude

    @property
    def syntax(self) -> GlobSyntax:
        return GlobSyntax(
            extended=self.extended,
            globstar=self.globstar,
            case_insensitive=self.case_insensitive,
        )

    def walk_options(self, skip: Sequence[PathPattern]) -> WalkOptions:
        return WalkOptions(
            max_depth=self.max_depth,
            include_files=self.include_files,
            include_dirs=self.include_dirs,
            include_symlinks=self.include_symlinks,
            follow_symlinks=self.follow_symlinks,
            canonicalize=self.canonicalize,
            exts=self.exts,
            skip=skip,
        )

    def glob_options(self, root: str) -> ExpandGlobOptions:
        return ExpandGlobOptions(
            root=root,
            exclude=self.glob_exclude,
            include_dirs=self.include_dirs,
            extended=self.extended,
            globstar=self.globstar,
            case_insensitive=self.case_insensitive,
            follow_symlinks=self.follow_symlinks,
            canonicalize=self.canonicalize,
        )
