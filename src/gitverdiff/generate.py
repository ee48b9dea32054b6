"""Public API: compute a version hash for a package."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from . import config
from .fingerprint import hash_files, select_files
from .formatter import format_version
from .git.changes import ChangeSetProvider, git_changed_files
from .git.refs import read_ref_state
from .git.repo import resolve_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options:
    include: Sequence[str] | None = None
    ignore: Sequence[str] | None = None
    # Comma-separated string or a sequence of tokens.
    format: str | Sequence[str] | None = None
    package_root: str | Path | None = None
    separator: str | None = None
    version: str | None = None


def generate_version_hash(
    options: Options | None = None,
    *,
    change_set_provider: ChangeSetProvider | None = None,
) -> str:
    """Generate a version hash from the Git state and modified file contents.

    Configuration is looked up in the package root first and falls back to the
    repository root (see `gitverdiff.config`). `change_set_provider` replaces
    the git-backed lookup of modified paths.

    Raises RepositoryNotFoundError, RefReadError or UnknownTokenError.
    """
    opts = options or Options()
    package_root = Path(opts.package_root) if opts.package_root else Path.cwd()
    ctx = resolve_context(package_root)

    include = config.resolve(config.INCLUDE, ctx, opts.include)
    ignore = config.resolve(config.IGNORE, ctx, opts.ignore)

    provider = change_set_provider or git_changed_files
    changed = set(provider(ctx.repo_root))

    files = select_files(
        changed,
        repo_root=ctx.repo_root,
        package_root=ctx.package_root,
        include=include,
        ignore=ignore,
    )
    logger.debug("selected %d of %d changed path(s): %s", len(files), len(changed), [f.rel for f in files])
    digest = hash_files(files, package_root=ctx.package_root, repo_root=ctx.repo_root)

    ref = read_ref_state(ctx.repo_root)

    return format_version(
        config.resolve(config.FORMAT, ctx, opts.format),
        version=config.resolve(config.VERSION, ctx, opts.version),
        ref=ref,
        digest=digest,
        separator=config.resolve(config.SEPARATOR, ctx, opts.separator),
    )
