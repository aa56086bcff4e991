"""Tests for glob expansion."""

from __future__ import annotations

import errno
import os
from collections.abc import Sequence
from pathlib import Path

import pytest

from walkglob import (
    DirChild,
    ExpandGlobOptions,
    LocalFileSystem,
    WalkEntry,
    WalkError,
    expand_glob,
    expand_glob_async,
)


def _make_glob_tree(root: Path) -> Path:
    """
    Build the fixture tree used by most tests:

        a[b]c/foo
        abc
        abcdef
        abcdefghi
        link -> subdir
        subdir/abc
    """
    root = root.resolve()
    (root / "a[b]c").mkdir()
    (root / "a[b]c" / "foo").write_text("foo")
    for name in ["abc", "abcdef", "abcdefghi"]:
        (root / name).write_text(name)
    (root / "subdir").mkdir()
    (root / "subdir" / "abc").write_text("abc")
    try:
        (root / "link").symlink_to(root / "subdir", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported here")
    return root


def _rel(root: Path, entries: list[WalkEntry]) -> list[str]:
    return [Path(os.path.relpath(entry.path, root)).as_posix() for entry in entries]


def _expand(pattern: str, root: Path, **kwargs) -> list[str]:
    entries = list(expand_glob(pattern, ExpandGlobOptions(root=root, **kwargs)))
    for entry in entries:
        assert entry.path.startswith(str(root))
    return _rel(root, entries)


class _DenyingFs(LocalFileSystem):
    def __init__(self, deny: Sequence[str] = ()) -> None:
        self.listed: list[str] = []
        self._deny = set(deny)

    def list_children(self, path: str) -> Sequence[DirChild]:
        self.listed.append(path)
        if os.path.basename(path) in self._deny:
            raise PermissionError(errno.EACCES, "Permission denied", path)
        return super().list_children(path)


@pytest.fixture
def glob_root(tmp_path: Path) -> Path:
    return _make_glob_tree(tmp_path)


def test_expand_wildcard(glob_root: Path):
    assert _expand("*", glob_root) == [
        "a[b]c",
        "abc",
        "abcdef",
        "abcdefghi",
        "link",
        "subdir",
    ]


def test_expand_trailing_separator_keeps_directories(glob_root: Path):
    assert _expand("*/", glob_root) == ["a[b]c", "subdir"]


def test_expand_parent_segment_in_literal_prefix(glob_root: Path):
    assert _expand("subdir/../*", glob_root) == _expand("*", glob_root)


def test_expand_single_char_wildcards(glob_root: Path):
    assert _expand("abc???", glob_root) == ["abcdef"]
    assert _expand("abc[d]ef", glob_root) == ["abcdef"]


def test_expand_literal_path(glob_root: Path):
    assert _expand("abc", glob_root) == ["abc"]
    assert _expand("subdir/abc", glob_root) == ["subdir/abc"]


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("abc?(def|ghi)", ["abc", "abcdef"]),
        ("abc*(def|ghi)", ["abc", "abcdef", "abcdefghi"]),
        ("abc+(def|ghi)", ["abcdef", "abcdefghi"]),
        ("abc@(def|ghi)", ["abcdef"]),
        ("abc{def,ghi}", ["abcdef"]),
    ],
)
def test_expand_extended_syntax(glob_root: Path, pattern: str, expected: list[str]):
    assert _expand(pattern, glob_root) == expected


def test_expand_extended_disabled(glob_root: Path):
    assert _expand("abc{def,ghi}", glob_root, extended=False) == []


def test_expand_globstar(glob_root: Path):
    assert _expand("**/abc", glob_root) == ["abc", "subdir/abc"]


def test_expand_globstar_then_parent(glob_root: Path):
    assert _expand("subdir/**/..", glob_root) == ["."]


def test_expand_globstar_disabled(glob_root: Path):
    assert _expand("**", glob_root, globstar=False) == [
        ".",
        "a[b]c",
        "abc",
        "abcdef",
        "abcdefghi",
        "link",
        "subdir",
    ]


def test_expand_repeated_globstar_deduplicates(glob_root: Path):
    assert _expand("**/**/abc", glob_root) == ["abc", "subdir/abc"]


def test_expand_include_dirs_false(glob_root: Path):
    assert _expand("subdir", glob_root, include_dirs=False) == []
    assert _expand("*", glob_root, include_dirs=False) == [
        "abc",
        "abcdef",
        "abcdefghi",
        "link",
    ]


def test_expand_with_bracketed_root(glob_root: Path):
    assert _expand("*", glob_root / "a[b]c") == ["foo"]


def test_expand_through_file_matches_nothing(glob_root: Path):
    assert _expand("abc/*", glob_root) == []


def test_expand_missing_prefix_is_empty(glob_root: Path):
    assert _expand("nope/*", glob_root) == []
    assert _expand("*", glob_root / "missing") == []


def test_expand_follow_symlinks_root(glob_root: Path):
    assert _expand("*", glob_root / "link", follow_symlinks=True) == ["abc"]


def test_expand_follow_symlinks_canonicalize(glob_root: Path):
    assert _expand("**/abc", glob_root, follow_symlinks=True) == ["abc", "subdir/abc"]


def test_expand_follow_symlinks_without_canonicalize(glob_root: Path):
    result = _expand("**/abc", glob_root, follow_symlinks=True, canonicalize=False)
    assert result == ["abc", "link/abc", "subdir/abc"]


@pytest.mark.parametrize("pattern", ["*", "**/abc", "subdir/*", "abc*(def|ghi)"])
def test_expand_excluding_the_glob_itself(glob_root: Path, pattern: str):
    assert _expand(pattern, glob_root, exclude=[pattern]) == []


@pytest.mark.parametrize("pattern", ["*", "f?o", "*(f|o)"])
def test_expand_excluding_the_glob_itself_under_bracketed_root(glob_root: Path, pattern: str):
    root = glob_root / "a[b]c"
    assert _expand(pattern, root) != []
    assert _expand(pattern, root, exclude=[pattern]) == []


def test_expand_exclude_with_parent_segment(glob_root: Path):
    options = ExpandGlobOptions(root=glob_root / "subdir", exclude=["../ab*"])
    entries = list(expand_glob("../*", options))
    assert _rel(glob_root, entries) == ["a[b]c", "link", "subdir"]


def test_expand_follow_symlinks_matches_target_name(glob_root: Path):
    assert _expand("l*", glob_root, follow_symlinks=True) == []
    assert _expand("s*", glob_root, follow_symlinks=True) == ["subdir"]
    assert _expand("l*", glob_root, follow_symlinks=True, canonicalize=False) == ["link"]


def test_expand_exclude_prunes_subtree(tmp_path: Path):
    root = tmp_path.resolve()
    (root / "keep").mkdir()
    (root / "keep" / "a.txt").write_text("a")
    (root / "skipme" / "deep").mkdir(parents=True)
    (root / "skipme" / "b.txt").write_text("b")
    (root / "skipme" / "deep" / "c.txt").write_text("c")
    fs = _DenyingFs()

    options = ExpandGlobOptions(root=root, exclude=["skipme"])
    entries = list(expand_glob("**/*.txt", options, fs=fs))

    assert _rel(root, entries) == ["keep/a.txt"]
    assert str(root / "skipme") not in fs.listed


def test_expand_matches_dotfiles(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".hidden").write_text("h")
    (root / "shown").write_text("s")
    assert _expand("*", root) == [".hidden", "shown"]


def test_expand_case_sensitivity(glob_root: Path):
    assert _expand("A*", glob_root) == []
    assert _expand("A*", glob_root, case_insensitive=True) == [
        "a[b]c",
        "abc",
        "abcdef",
        "abcdefghi",
    ]


def test_expand_results_sorted_by_path(glob_root: Path):
    paths = [entry.path for entry in expand_glob("**", ExpandGlobOptions(root=glob_root))]
    assert paths == sorted(paths)
    assert len(paths) == len(set(paths))


def test_expand_absolute_glob(glob_root: Path):
    entries = list(expand_glob(str(glob_root / "ab*")))
    assert _rel(glob_root, entries) == ["abc", "abcdef", "abcdefghi"]


def test_expand_relative_to_working_directory(glob_root: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(glob_root)
    entries = list(expand_glob("subdir/*"))
    assert [entry.path for entry in entries] == [os.path.join(os.getcwd(), "subdir", "abc")]


def test_expand_entries_carry_kinds(glob_root: Path):
    entries = {entry.name: entry for entry in expand_glob("*", ExpandGlobOptions(root=glob_root))}
    assert entries["subdir"].is_directory
    assert entries["abc"].is_file
    assert entries["link"].is_symlink and not entries["link"].is_directory


def test_expand_wraps_listing_errors(glob_root: Path):
    fs = _DenyingFs(deny=["subdir"])
    with pytest.raises(WalkError) as exc_info:
        list(expand_glob("*/abc", ExpandGlobOptions(root=glob_root), fs=fs))
    assert exc_info.value.root == str(glob_root / "subdir")
    assert isinstance(exc_info.value.cause, PermissionError)


@pytest.mark.asyncio
@pytest.mark.parametrize("pattern", ["*", "*/", "**/abc", "subdir/**/..", "abc+(def|ghi)"])
async def test_expand_async_matches_sync(glob_root: Path, pattern: str):
    options = ExpandGlobOptions(root=glob_root)
    entries = [entry async for entry in expand_glob_async(pattern, options)]
    assert entries == list(expand_glob(pattern, options))


@pytest.mark.asyncio
async def test_expand_async_follow_symlinks(glob_root: Path):
    options = ExpandGlobOptions(root=glob_root, follow_symlinks=True, canonicalize=False)
    entries = [entry async for entry in expand_glob_async("**/abc", options)]
    assert _rel(glob_root, entries) == ["abc", "link/abc", "subdir/abc"]


@pytest.mark.asyncio
async def test_expand_async_missing_prefix(glob_root: Path):
    options = ExpandGlobOptions(root=glob_root)
    assert [entry async for entry in expand_glob_async("nope/*", options)] == []


@pytest.mark.asyncio
async def test_expand_async_wraps_listing_errors(glob_root: Path):
    options = ExpandGlobOptions(root=glob_root)
    with pytest.raises(WalkError):
        async for _ in expand_glob_async("*/abc", options, fs=_DenyingFs(deny=["subdir"])):
            pass
