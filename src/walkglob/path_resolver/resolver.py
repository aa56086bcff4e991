"""
PathResolver: main entry point for resolving command-line style inputs.

Resolves a mix of files, directories, and glob patterns into a deduplicated,
path-sorted list of entries, applying all configured filters.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

import pathspec

from walkglob.expand_glob import expand_glob
from walkglob.fs_backend import FileSystem, LocalFileSystem
from walkglob.path_resolver.gitignore import IgnoreRules
from walkglob.path_resolver.types import ResolverConfig
from walkglob.patterns import is_glob
from walkglob.types import WalkEntry
from walkglob.walker import walk

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Expands inputs into entries: directories are walked, globs are expanded,
    plain files pass through. Gitignore-syntax exclusions prune walks and
    filter glob matches.
    """

    def __init__(self, config: ResolverConfig, fs: FileSystem | None = None) -> None:
        self._config: ResolverConfig = config
        self._fs: FileSystem = fs or LocalFileSystem()
        self._exclude_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines(
            "gitignore", config.effective_exclude
        )

    def resolve(self, paths: Sequence[str | Path]) -> list[WalkEntry]:
        """
        Resolve input paths into a path-sorted, deduplicated list of entries.

        Each input is handled as:
        - Existing file → included directly (unless `force_exclude` filters it)
        - Existing directory → walked with all filters applied
        - Contains glob characters → expanded then filtered
        - Otherwise → `FileNotFoundError`
        """
        found: dict[str, WalkEntry] = {}

        for raw_path in paths:
            text = os.fspath(raw_path)
            p = Path(text)

            if p.is_dir():
                logger.debug("Walking %s", text)
                entries = list(self._walk_directory(p))
            elif p.exists():
                entries = self._explicit_entries(p)
            elif is_glob(text, self._config.syntax):
                logger.debug("Expanding glob %s", text)
                options = self._config.glob_options(self._fs.cwd())
                matches = expand_glob(text, options, fs=self._fs)
                entries = [entry for entry in matches if self._keep_match(entry)]
            else:
                raise FileNotFoundError(f"Path not found: {raw_path}")

            for entry in entries:
                found.setdefault(entry.path, entry)

        return sorted(found.values(), key=lambda entry: entry.path)

    def _walk_directory(self, root: Path) -> Iterator[WalkEntry]:
        rules = IgnoreRules(
            Path(os.path.normpath(root)),
            self._exclude_spec,
            self._config.tool_name,
            self._config.respect_gitignore,
            self._fs,
        )
        return walk(root, self._config.walk_options(skip=[rules]), fs=self._fs)

    def _explicit_entries(self, path: Path) -> list[WalkEntry]:
        """An explicitly-named file is kept unless `force_exclude` matches it."""
        if self._config.force_exclude and self._is_excluded(path):
            return []
        normalized = os.path.normpath(path)
        return [WalkEntry.from_info(normalized, path.name, self._fs.stat(normalized))]

    def _keep_match(self, entry: WalkEntry) -> bool:
        if entry.is_file and not self._config.include_files:
            return False
        if entry.is_symlink and not self._config.include_symlinks:
            return False
        if self._config.exts is not None and not any(
            entry.path.endswith(ext) for ext in self._config.exts
        ):
            return False
        return not self._is_excluded(Path(entry.path))

    def _is_excluded(self, path: Path) -> bool:
        """Check the name and each parent directory name against the exclusions."""
        if self._exclude_spec.match_file(path.name):
            return True
        for part in path.parts[:-1]:
            if self._exclude_spec.match_file(part + "/"):
                return True
        return False
