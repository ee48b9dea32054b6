"""Read the current commit and branch straight from `.git/HEAD`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import RefReadError
from .repo import GIT_DIR

SYMREF_PREFIX = "ref:"
HEADS_PREFIX = "refs/heads/"
SHORT_SHA_LEN = 7


@dataclass(frozen=True)
class RefState:
    commit_hash: str
    # None on a detached HEAD.
    branch_name: str | None

    @property
    def short_commit(self) -> str:
        # Identifiers shorter than SHORT_SHA_LEN are returned whole.
        return self.commit_hash[:SHORT_SHA_LEN]

    @property
    def detached(self) -> bool:
        return self.branch_name is None


def _read_stripped(path: Path, what: str) -> str:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise RefReadError(f"failed to read {what} at {path}: {e}") from e
    if not text:
        raise RefReadError(f"{what} at {path} is empty")
    return text


def read_ref_state(repo_root: Path) -> RefState:
    """Resolve HEAD under `repo_root` to a commit hash and optional branch name.

    A symbolic HEAD (`ref: refs/heads/<name>`) yields the branch name with the
    `refs/heads/` prefix removed; nested names such as `feat/test` keep their
    slashes. Any other HEAD content is taken as a detached commit hash.
    """
    git_dir = Path(repo_root) / GIT_DIR
    head = _read_stripped(git_dir / "HEAD", "HEAD")

    if not head.startswith(SYMREF_PREFIX):
        return RefState(commit_hash=head, branch_name=None)

    ref_path = head[len(SYMREF_PREFIX) :].strip()
    branch = ref_path[len(HEADS_PREFIX) :] if ref_path.startswith(HEADS_PREFIX) else ref_path
    commit = _read_stripped(git_dir / ref_path, f"ref {ref_path}")
    return RefState(commit_hash=commit, branch_name=branch)
