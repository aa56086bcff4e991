"""
Resolution of command-line style inputs (files, directories, globs) into
entries, with gitignore-aware exclusion.

Usage::

    from walkglob.path_resolver import PathResolver, ResolverConfig

    config = ResolverConfig(extend_exclude=["vendor/"], exts=[".md"])
    resolver = PathResolver(config)
    entries = resolver.resolve([".", "docs/**/*.md"])
"""

from walkglob.path_resolver.defaults import DEFAULT_EXCLUDES
from walkglob.path_resolver.resolver import PathResolver
from walkglob.path_resolver.types import ResolverConfig

__all__ = [
    "DEFAULT_EXCLUDES",
    "PathResolver",
    "ResolverConfig",
]
