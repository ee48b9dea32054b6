from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..errors import RepositoryNotFoundError

logger = logging.getLogger(__name__)

GIT_DIR = ".git"


@dataclass(frozen=True)
class ResolutionContext:
    package_root: Path
    repo_root: Path

    @property
    def is_nested(self) -> bool:
        """True when the package lives below the repository root."""
        return self.package_root != self.repo_root

    @property
    def roots(self) -> tuple[Path, ...]:
        """Roots to consult for configuration, package root first."""
        if self.is_nested:
            return (self.package_root, self.repo_root)
        return (self.package_root,)


def find_git_root(start: Path) -> Path:
    """Walk up from `start` to the nearest directory containing `.git/`."""
    start = Path(start).resolve()
    p = start
    while True:
        if (p / GIT_DIR).is_dir():
            return p
        if p.parent == p:
            break
        p = p.parent
    raise RepositoryNotFoundError(f"No .git directory found up the chain from {start}")


def resolve_context(package_root: Path) -> ResolutionContext:
    package_root = Path(package_root).resolve()
    repo_root = find_git_root(package_root)
    logger.debug("repository root %s for package root %s", repo_root, package_root)
    return ResolutionContext(package_root=package_root, repo_root=repo_root)
