"""Expand format tokens into the final version string."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .errors import UnknownTokenError
from .fingerprint import has_modifications
from .git.refs import RefState

PACKAGE_VERSION = "package-version"
BRANCH = "branch"
SHORT_COMMIT_SHA = "short-commit-sha"
COMMIT_SHA = "commit-sha"
DIFF_HASH = "diff-hash"

# token -> help text
TOKENS: dict[str, str] = {
    PACKAGE_VERSION: "The version from the package manifest.",
    BRANCH: "The current Git branch name.",
    SHORT_COMMIT_SHA: "The first 7 characters of the commit hash.",
    COMMIT_SHA: "The full commit hash.",
    DIFF_HASH: "The SHA256 hash of the diff (modified files).",
}

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9\-_.]")


def sanitize_for_filesystem(segment: str) -> str:
    return _UNSAFE_RE.sub(":", segment)


def format_tokens_help(default: Sequence[str]) -> str:
    lines = ["Available format tokens:"]
    lines += [f"  - {name}: {text}" for name, text in TOKENS.items()]
    lines.append("")
    lines.append(f"Default format: {', '.join(default)}.")
    return "\n".join(lines)


def _segment(token: str, *, version: str, ref: RefState, digest: str) -> str | None:
    if token == PACKAGE_VERSION:
        return f"v{version}" if version else None
    if token == BRANCH:
        if ref.detached:
            return None
        return ref.branch_name or None
    if token == SHORT_COMMIT_SHA:
        return ref.short_commit
    if token == COMMIT_SHA:
        return ref.commit_hash
    if token == DIFF_HASH:
        return digest if has_modifications(digest) else None
    raise UnknownTokenError(token)


def format_version(
    tokens: Sequence[str],
    *,
    version: str,
    ref: RefState,
    digest: str,
    separator: str,
) -> str:
    """Join the segments produced by `tokens`, in order, with `separator`.

    Tokens with nothing to show (no version, detached HEAD, clean tree) are
    dropped rather than rendered empty. Raises UnknownTokenError before any
    output is produced if a token is not recognized.
    """
    segments = []
    for token in tokens:
        seg = _segment(token, version=version, ref=ref, digest=digest)
        if seg is not None:
            segments.append(sanitize_for_filesystem(seg))
    return separator.join(segments)
