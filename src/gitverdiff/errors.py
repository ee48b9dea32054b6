"""Domain-specific errors for gitverdiff."""

from __future__ import annotations


class GitVerDiffError(Exception):
    """Base error for gitverdiff."""


class RepositoryNotFoundError(GitVerDiffError):
    """Raised when no `.git` directory exists above the package root."""


class RefReadError(GitVerDiffError):
    """Raised when HEAD or the ref it points to cannot be read."""


class UnknownTokenError(GitVerDiffError):
    """Raised when a format token is not one of the known tokens."""

    def __init__(self, token: str):
        super().__init__(f"Unknown token: {token}")
        self.token = token
