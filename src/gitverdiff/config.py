"""Cascading configuration lookup.

Each setting is resolved by walking an ordered list of lookups and taking the
first non-empty result:

1. the caller-supplied override
2. the package root manifest (`package.json` then `pyproject.toml`)
3. the package root pattern file (include/ignore only)
4. steps 2-3 against the repository root, when it differs from the package root
5. a built-in default

Malformed manifests are treated as if the field were missing.
"""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .git.repo import ResolutionContext

logger = logging.getLogger(__name__)

NAMESPACE = "gitverdiff"
PACKAGE_JSON = "package.json"
PYPROJECT_TOML = "pyproject.toml"
INCLUDE_FILE = ".gitverdiff"
IGNORE_FILE = ".gitverdiffignore"

INCLUDE = "include"
IGNORE = "ignore"
FORMAT = "format"
SEPARATOR = "separator"
VERSION = "version"

DEFAULT_INCLUDE = ["**/*"]
DEFAULT_FORMAT = ["package-version", "branch", "short-commit-sha", "diff-hash"]
DEFAULT_SEPARATOR = "-"


@dataclass(frozen=True)
class Manifest:
    path: Path
    # Settings under the reserved namespace.
    settings: dict[str, Any]
    version: str


def _load_json(path: Path) -> dict[str, Any] | None:
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None
    return obj if isinstance(obj, dict) else None


def _load_toml(path: Path) -> dict[str, Any] | None:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _as_dict(obj: Any) -> dict[str, Any]:
    return obj if isinstance(obj, dict) else {}


def _as_str(obj: Any) -> str:
    return obj if isinstance(obj, str) else ""


def load_manifests(root: Path) -> list[Manifest]:
    """Return the parseable manifests under `root`, in lookup order."""
    root = Path(root)
    out: list[Manifest] = []

    pkg_json = root / PACKAGE_JSON
    if pkg_json.is_file():
        obj = _load_json(pkg_json)
        if obj is None:
            logger.debug("ignoring malformed %s", pkg_json)
        else:
            out.append(
                Manifest(
                    path=pkg_json,
                    settings=_as_dict(obj.get(NAMESPACE)),
                    version=_as_str(obj.get("version")),
                )
            )

    pyproject = root / PYPROJECT_TOML
    if pyproject.is_file():
        obj = _load_toml(pyproject)
        if obj is None:
            logger.debug("ignoring malformed %s", pyproject)
        else:
            out.append(
                Manifest(
                    path=pyproject,
                    settings=_as_dict(_as_dict(obj.get("tool")).get(NAMESPACE)),
                    version=_as_str(_as_dict(obj.get("project")).get("version")),
                )
            )

    return out


def read_patterns_file(path: Path) -> list[str]:
    """Read one pattern per line; blank lines are skipped. Missing file -> []."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def _coerce_patterns(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [p for p in value if isinstance(p, str) and p]
    return []


def _coerce_format(value: Any) -> list[str]:
    if isinstance(value, str):
        if not value.strip():
            return []
        return [t.strip() for t in value.split(",")]
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value]
    return []


@dataclass(frozen=True)
class _Setting:
    manifest_field: str | None
    pattern_file: str | None
    coerce: Callable[[Any], Any]
    default: Callable[[], Any]


_SETTINGS: dict[str, _Setting] = {
    INCLUDE: _Setting(INCLUDE, INCLUDE_FILE, _coerce_patterns, lambda: list(DEFAULT_INCLUDE)),
    IGNORE: _Setting(IGNORE, IGNORE_FILE, _coerce_patterns, list),
    FORMAT: _Setting(FORMAT, None, _coerce_format, lambda: list(DEFAULT_FORMAT)),
    SEPARATOR: _Setting(SEPARATOR, None, _as_str, lambda: DEFAULT_SEPARATOR),
    # The version lives at the top level of the manifest, not in the namespace.
    VERSION: _Setting(None, None, _as_str, str),
}

KINDS = tuple(_SETTINGS)

Lookup = Callable[[], Any]


def _manifest_lookup(kind: str, setting: _Setting, root: Path) -> Lookup:
    def lookup() -> Any:
        for manifest in load_manifests(root):
            if setting.manifest_field is None:
                value = manifest.version
            else:
                value = setting.coerce(manifest.settings.get(setting.manifest_field))
            if value:
                logger.debug("%s resolved from %s", kind, manifest.path)
                return value
        return None

    return lookup


def _pattern_file_lookup(kind: str, name: str, root: Path) -> Lookup:
    def lookup() -> Any:
        patterns = read_patterns_file(root / name)
        if patterns:
            logger.debug("%s resolved from %s", kind, root / name)
        return patterns

    return lookup


def lookup_chain(kind: str, ctx: ResolutionContext, override: Any = None) -> list[Lookup]:
    """Build the ordered lookups for `kind`; the default is not included."""
    try:
        setting = _SETTINGS[kind]
    except KeyError:
        raise ValueError(f"unknown config kind: {kind!r}") from None

    chain: list[Lookup] = [lambda: setting.coerce(override)]
    for root in ctx.roots:
        chain.append(_manifest_lookup(kind, setting, root))
        if setting.pattern_file is not None:
            chain.append(_pattern_file_lookup(kind, setting.pattern_file, root))
    return chain


def first_non_empty(lookups: Iterable[Lookup]) -> Any:
    for lookup in lookups:
        value = lookup()
        if value:
            return value
    return None


def resolve(kind: str, ctx: ResolutionContext, override: Any = None) -> Any:
    """Resolve one setting; always returns a value."""
    value = first_non_empty(lookup_chain(kind, ctx, override))
    if value:
        return value
    logger.debug("%s falls back to default", kind)
    return _SETTINGS[kind].default()
