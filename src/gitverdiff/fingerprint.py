from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from wcmatch import glob

logger = logging.getLogger(__name__)

# sha256 of zero bytes; a digest equal to this means nothing was hashed.
EMPTY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

GLOB_FLAGS = glob.GLOBSTAR


def package_relative(repo_path: str, *, repo_root: Path, package_root: Path) -> str:
    """Re-express a repository-relative path relative to the package root.

    Paths outside the package come back with leading `..` segments.
    """
    absolute = os.path.normpath(os.path.join(repo_root, repo_path))
    return PurePath(os.path.relpath(absolute, package_root)).as_posix()


def matches_any(rel_path: str, patterns: Sequence[str]) -> bool:
    if not patterns:
        return False
    return glob.globmatch(rel_path, list(patterns), flags=GLOB_FLAGS)


@dataclass(frozen=True, order=True)
class SelectedFile:
    # Sort key: the package-relative path.
    rel: str
    repo_path: str


def select_files(
    changed: Iterable[str],
    *,
    repo_root: Path,
    package_root: Path,
    include: Sequence[str],
    ignore: Sequence[str],
) -> list[SelectedFile]:
    """Return the changed paths kept by include/ignore, sorted on the package-relative path."""
    selected: dict[str, SelectedFile] = {}
    for repo_path in changed:
        rel = package_relative(repo_path, repo_root=repo_root, package_root=package_root)
        if matches_any(rel, include) and not matches_any(rel, ignore):
            selected.setdefault(rel, SelectedFile(rel=rel, repo_path=repo_path))
    return sorted(selected.values())


def _resolve_file(file: SelectedFile, *, package_root: Path, repo_root: Path) -> Path | None:
    for candidate in (Path(package_root) / file.rel, Path(repo_root) / file.repo_path):
        if candidate.is_file():
            return candidate
    return None


def hash_files(files: Sequence[SelectedFile], *, package_root: Path, repo_root: Path) -> str:
    """Fold the bytes of `files` into one sha256 hex digest, in list order.

    Each file is looked up by its package-relative path under the package
    root, then by its repository-relative path under the repository root.
    Files that resolve to nothing readable contribute no bytes.
    """
    h = hashlib.sha256()
    for file in files:
        p = _resolve_file(file, package_root=package_root, repo_root=repo_root)
        if p is None:
            logger.debug("skipping %s: not found", file.repo_path)
            continue
        try:
            with p.open("rb") as f:
                for chunk in iter(lambda: f.read(1024 * 1024), b""):
                    h.update(chunk)
        except OSError as e:
            logger.debug("skipping %s: %s", p, e)
            continue
    return h.hexdigest()


def has_modifications(digest: str) -> bool:
    return digest != EMPTY_DIGEST
