# tagver/errors.py
from __future__ import annotations


class TagverError(RuntimeError):
    """Base error for everything the describe engine raises."""


class GraphAccessError(TagverError):
    """Raised when refs, commits or tag objects cannot be read."""


class NotFoundError(TagverError):
    """Raised when a well-formed query has no answer (e.g. no branch reaches HEAD)."""


class NotARepositoryError(TagverError):
    """Raised when the given path is not inside a git repository."""


class CIEnvironmentError(TagverError):
    """Raised when a CI provider is detected but its variables are incomplete."""
