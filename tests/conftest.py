import json
from pathlib import Path

import pytest

COMMIT = "abcdef1234567890abcdef1234567890abcdef12"


def write_repo(root: Path, *, head: str = "ref: refs/heads/main", refs: dict[str, str] | None = None) -> Path:
    git_dir = root / ".git"
    (git_dir / "refs" / "heads").mkdir(parents=True, exist_ok=True)
    (git_dir / "HEAD").write_text(head + "\n", encoding="utf-8")
    for ref, commit in (refs if refs is not None else {"refs/heads/main": COMMIT}).items():
        ref_path = git_dir / ref
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_text(commit + "\n", encoding="utf-8")
    return root


def write_package_json(root: Path, obj: dict) -> None:
    (root / "package.json").write_text(json.dumps(obj, indent=2), encoding="utf-8")


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    # Monorepo root with a full config in package.json.
    root = write_repo(tmp_path / "repo")
    write_package_json(
        root,
        {
            "version": "1.2.3",
            "gitverdiff": {
                "separator": "|",
                "format": "package-version,branch,short-commit-sha",
                "include": ["*.js"],
                "ignore": [],
            },
        },
    )
    return root


def changes(*paths: str):
    return lambda _repo_root: list(paths)
