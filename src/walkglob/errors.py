"""Errors raised during traversal and glob expansion."""

from __future__ import annotations

import errno

# A missing path component, or a file where a directory was expected.
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})


class WalkError(Exception):
    """
    A failure while walking, after the walk root itself was confirmed.

    `root` is the normalized directory being enumerated when the failure
    happened and `cause` is the underlying exception.
    """

    def __init__(self, cause: BaseException, root: str) -> None:
        super().__init__(f"{cause} for path {root!r}")
        self.cause: BaseException = cause
        self.root: str = root


def is_not_found_error(err: BaseException) -> bool:
    """True if `err` means the path does not exist."""
    if isinstance(err, (FileNotFoundError, NotADirectoryError)):
        return True
    return isinstance(err, OSError) and err.errno in _MISSING_ERRNOS
