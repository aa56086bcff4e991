"""
Default exclusion patterns for path resolution.

These patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

# Directories that almost never hold anything worth listing.
# Applied as a walk `skip` filter, so matching directories are never entered.
DEFAULT_EXCLUDES: list[str] = [
    # Version control
    ".git/",
    ".hg/",
    ".svn/",
    # Python
    ".venv/",
    "__pycache__/",
    ".tox/",
    ".nox/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".pytest_cache/",
    "*.egg-info/",
    # JavaScript/Node
    "node_modules/",
    ".next/",
    ".parcel-cache/",
    # IDE/Editor
    ".idea/",
    ".vscode/",
]
