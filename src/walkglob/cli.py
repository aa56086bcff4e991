#!/usr/bin/env python3
"""
walkglob: List files by walking directories and expanding globs

Common usage:
  walkglob .
  walkglob 'src/**/*.py'
  walkglob --max-depth 1 --no-files docs/
  walkglob --follow-symlinks --long 'build/*/'

Patterns are quoted so the shell does not expand them first.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import math
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from walkglob.config import find_config_file, load_config, merge_cli_with_config
from walkglob.errors import WalkError
from walkglob.types import WalkEntry


@dataclass
class Options:
    """Command-line options for the walkglob tool."""

    paths: list[str]
    output: str
    long: bool
    verbose: bool
    version: bool
    # Traversal options
    max_depth: float
    follow_symlinks: bool
    canonicalize: bool
    include_dirs: bool
    include_files: bool
    include_symlinks: bool
    exts: list[str] | None
    # Exclusion options
    exclude: list[str] | None
    extend_exclude: list[str]
    glob_exclude: list[str]
    respect_gitignore: bool
    force_exclude: bool
    # Glob syntax options
    case_insensitive: bool
    extended: bool
    globstar: bool


# argparse dest name -> Options field name, for flags a config file may also set.
_TRACKED_FLAGS: dict[str, str] = {
    "max_depth": "max_depth",
    "follow_symlinks": "follow_symlinks",
    "no_canonicalize": "canonicalize",
    "no_dirs": "include_dirs",
    "no_files": "include_files",
    "no_symlinks": "include_symlinks",
    "ext": "exts",
    "exclude": "exclude",
    "extend_exclude": "extend_exclude",
    "glob_exclude": "glob_exclude",
    "no_respect_gitignore": "respect_gitignore",
    "force_exclude": "force_exclude",
    "ignore_case": "case_insensitive",
    "no_extended": "extended",
    "no_globstar": "globstar",
}

_APPEND_FLAGS = {"ext", "exclude", "extend_exclude", "glob_exclude"}


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        help="Files, directories, or glob patterns to list (use '.' for current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout); written atomically",
    )
    parser.add_argument(
        "-l",
        "--long",
        action="store_true",
        help="Prefix each path with its kind: d (directory), f (file), l (symlink), ? (other)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug details to stderr"
    )
    # Traversal options
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help="Do not descend more than N levels below a directory argument (default: unlimited)",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Resolve symlinks and descend into linked directories",
    )
    parser.add_argument(
        "--no-canonicalize",
        action="store_true",
        help="With --follow-symlinks, report paths through the link instead of the resolved target",
    )
    parser.add_argument("--no-dirs", action="store_true", help="Do not list directories")
    parser.add_argument("--no-files", action="store_true", help="Do not list files")
    parser.add_argument("--no-symlinks", action="store_true", help="Do not list symlinks")
    parser.add_argument(
        "--ext",
        action="append",
        default=None,
        metavar="SUFFIX",
        help="Only list paths ending with SUFFIX (e.g., '.py'). Can be repeated",
    )
    # Exclusion options
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace all default exclusion patterns (gitignore syntax). Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Add to default exclusion patterns (e.g., 'drafts/'). Can be repeated",
    )
    parser.add_argument(
        "--glob-exclude",
        action="append",
        default=[],
        metavar="GLOB",
        help="Exclude glob matches under these globs, relative to the working directory. "
        "Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--force-exclude",
        action="store_true",
        help="Apply exclusion patterns even to files named explicitly on the command line",
    )
    # Glob syntax options
    parser.add_argument(
        "-i", "--ignore-case", action="store_true", help="Match glob patterns case-insensitively"
    )
    parser.add_argument(
        "--no-extended",
        action="store_true",
        help="Disable extglob groups like '@(a|b)' and brace expansion like '{a,b}'",
    )
    parser.add_argument(
        "--no-globstar",
        action="store_true",
        help="Treat '**' as a single-level wildcard",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    return parser


def _explicit_flags(args: list[str] | None) -> set[str]:
    """
    Options fields whose flags the user actually passed.

    Re-parses with sentinel defaults rather than comparing against default
    values, which fails when the user passes the default explicitly.
    """
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    for dest_name in _TRACKED_FLAGS:
        flag = "--" + dest_name.replace("_", "-")
        if dest_name in _APPEND_FLAGS:
            # append actions use None as sentinel (argparse creates a list when used)
            sentinel_parser.add_argument(flag, dest=dest_name, action="append", default=None)
        elif dest_name == "max_depth":
            sentinel_parser.add_argument(flag, dest=dest_name, type=int, default=_SENTINEL)
        else:
            sentinel_parser.add_argument(flag, dest=dest_name, action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("-i", dest="ignore_case", action="store_true", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit: set[str] = set()
    for dest_name, field_name in _TRACKED_FLAGS.items():
        val = getattr(sentinel_opts, dest_name, _SENTINEL)
        if dest_name in _APPEND_FLAGS:
            if val is not None:
                explicit.add(field_name)
        elif val is not _SENTINEL:
            explicit.add(field_name)
    return explicit


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` tracks which
    options the user explicitly passed (for config merge precedence).
    """
    opts = _build_parser().parse_args(args)
    options = Options(
        paths=opts.paths,
        output=opts.output,
        long=opts.long,
        verbose=opts.verbose,
        version=opts.version,
        max_depth=math.inf if opts.max_depth is None else opts.max_depth,
        follow_symlinks=opts.follow_symlinks,
        canonicalize=not opts.no_canonicalize,
        include_dirs=not opts.no_dirs,
        include_files=not opts.no_files,
        include_symlinks=not opts.no_symlinks,
        exts=opts.ext,
        exclude=opts.exclude,
        extend_exclude=opts.extend_exclude,
        glob_exclude=opts.glob_exclude,
        respect_gitignore=not opts.no_respect_gitignore,
        force_exclude=opts.force_exclude,
        case_insensitive=opts.ignore_case,
        extended=not opts.no_extended,
        globstar=not opts.no_globstar,
    )
    return options, _explicit_flags(args)


def _resolve_entries(options: Options) -> list[WalkEntry]:
    from walkglob.path_resolver import PathResolver, ResolverConfig

    config = ResolverConfig(
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
        glob_exclude=options.glob_exclude,
        respect_gitignore=options.respect_gitignore,
        force_exclude=options.force_exclude,
        max_depth=options.max_depth,
        include_files=options.include_files,
        include_dirs=options.include_dirs,
        include_symlinks=options.include_symlinks,
        follow_symlinks=options.follow_symlinks,
        canonicalize=options.canonicalize,
        exts=options.exts,
        case_insensitive=options.case_insensitive,
        extended=options.extended,
        globstar=options.globstar,
    )
    return PathResolver(config).resolve(options.paths)


def _kind(entry: WalkEntry) -> str:
    if entry.is_symlink:
        return "l"
    if entry.is_directory:
        return "d"
    if entry.is_file:
        return "f"
    return "?"


def _format(entries: list[WalkEntry], long: bool) -> str:
    if long:
        lines = [f"{_kind(entry)} {entry.path}" for entry in entries]
    else:
        lines = [entry.path for entry in entries]
    return "".join(line + "\n" for line in lines)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the walkglob CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("walkglob")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.paths:
        print(
            "Error: No input specified. Provide files, directories, or glob patterns"
            " (use '.' for current directory). Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    # Load and merge config file settings
    config_path = find_config_file(Path.cwd())
    if config_path:
        try:
            config = load_config(config_path)
        except ValueError as e:
            print(f"Error: Invalid config file {config_path}: {e}", file=sys.stderr)
            return 2
        merge_cli_with_config(options, config, explicit_flags)

    try:
        entries = _resolve_entries(options)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (WalkError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    text = _format(entries, options.long)
    if options.output == "-":
        sys.stdout.write(text)
    else:
        with atomic_output_file(Path(options.output), make_parents=True) as tmp_path:
            Path(tmp_path).write_text(text, encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(main())
