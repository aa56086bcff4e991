"""Gitignore and tool-specific ignore file handling using pathspec."""

from __future__ import annotations

from pathlib import Path

import pathspec

from walkglob.fs_backend import FileSystem


def _read_ignore_file(path: Path) -> pathspec.PathSpec | None:
    """
    Compile an ignore file, or return `None` if it is missing, unreadable,
    not UTF-8, or has no patterns.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    lines = [line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """Compiled `.gitignore` of `directory`, or `None`."""
    return _read_ignore_file(directory / ".gitignore")


def load_tool_ignore(tool_name: str, start_dir: Path) -> pathspec.PathSpec | None:
    """
    Walk up from `start_dir` looking for `.{tool_name}ignore` (e.g., `.walkglobignore`).
    Returns the compiled spec of the first one found, or `None`.
    """
    ignore_name = f".{tool_name}ignore"
    current = start_dir.resolve()
    while True:
        candidate = current / ignore_name
        if candidate.is_file():
            return _read_ignore_file(candidate)
        parent = current.parent
        if parent == current:
            return None
        current = parent


class IgnoreRules:
    """
    `skip` predicate for walking `root`: true for paths that the exclusion
    patterns, the tool ignore file, or the `.gitignore` files between `root`
    and the path exclude.

    Paths outside `root` (canonicalized symlink targets) are never skipped.
    """

    def __init__(
        self,
        root: Path,
        exclude_spec: pathspec.PathSpec,
        tool_name: str,
        respect_gitignore: bool,
        fs: FileSystem,
    ) -> None:
        self._root: Path = root
        self._fs: FileSystem = fs
        self._exclude_spec: pathspec.PathSpec = exclude_spec
        self._tool_ignore: pathspec.PathSpec | None = load_tool_ignore(tool_name, root)
        self._respect_gitignore: bool = respect_gitignore
        # Cache gitignore specs per directory to avoid re-reading from disk.
        self._gitignore_cache: dict[Path, pathspec.PathSpec | None] = {}

    def __call__(self, path: str) -> bool:
        candidate = Path(path)
        try:
            rel = candidate.relative_to(self._root)
        except ValueError:
            return False
        if not rel.parts:
            return False

        suffix = "/" if self._is_dir(path) else ""
        name = candidate.name + suffix
        rel_text = rel.as_posix() + suffix

        for spec in (self._exclude_spec, self._tool_ignore):
            if spec is not None and (spec.match_file(name) or spec.match_file(rel_text)):
                return True

        if self._respect_gitignore:
            directory = self._root
            for depth, part in enumerate(rel.parts):
                spec = self._gitignore(directory)
                if spec is not None and spec.match_file(Path(*rel.parts[depth:]).as_posix() + suffix):
                    return True
                directory = directory / part
        return False

    def _is_dir(self, path: str) -> bool:
        try:
            return self._fs.stat(path).is_directory
        except OSError:
            return False

    def _gitignore(self, directory: Path) -> pathspec.PathSpec | None:
        if directory not in self._gitignore_cache:
            self._gitignore_cache[directory] = load_gitignore(directory)
        return self._gitignore_cache[directory]
