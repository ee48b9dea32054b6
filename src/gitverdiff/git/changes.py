"""Default change-set provider backed by the `git` command line."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

ChangeSetProvider = Callable[[Path], Iterable[str]]


class _GitCommandError(Exception):
    pass


def git_executable() -> str:
    """Return the git executable to invoke.

    Override with `GITVERDIFF_GIT`.
    """
    return os.environ.get("GITVERDIFF_GIT") or "git"


def _run_git(repo_root: Path, args: list[str]) -> str:
    cmd = [git_executable(), "-C", str(repo_root), *args]
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=False,
            check=False,
        )
    except FileNotFoundError as e:
        raise _GitCommandError(f"git not found (`{cmd[0]}` is missing from PATH)") from e
    except OSError as e:
        raise _GitCommandError(f"failed to run {cmd[0]}: {e}") from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise _GitCommandError(f"command failed: {' '.join(cmd)}\n{stderr}")
    return stdout


def _iter_ls_files(output: str) -> Iterable[str]:
    return (p for p in output.split("\0") if p)


def _iter_porcelain_paths(output: str) -> Iterable[str]:
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if len(token) < 4 or token[2] != " ":
            continue
        status = token[:2]
        if status == "!!":
            continue
        yield token[3:]
        # Rename/copy records carry the source path as the next token.
        if "R" in status or "C" in status:
            if index < len(tokens) and tokens[index]:
                yield tokens[index]
            index += 1


def git_changed_files(repo_root: Path) -> list[str]:
    """Return repository-relative paths that differ from HEAD.

    Covers modified, untracked (honoring ignore rules), staged, renamed and
    deleted paths. Failures talking to git are logged and produce an empty
    list so callers continue as if the tree were clean.
    """
    try:
        listed = _run_git(repo_root, ["ls-files", "--modified", "--others", "--exclude-standard", "-z"])
        status = _run_git(repo_root, ["status", "--porcelain=v1", "-z", "--untracked-files=all"])
    except _GitCommandError as e:
        logger.warning("Error retrieving modified files from Git: %s", e)
        return []

    paths = set(_iter_ls_files(listed))
    paths.update(_iter_porcelain_paths(status))
    logger.debug("git reports %d changed path(s)", len(paths))
    return sorted(paths)
