from pathlib import Path

import pytest


def test_find_git_root_from_nested_dir(tmp_path: Path):
    from gitverdiff.git.repo import find_git_root

    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    nested = root / "src" / "lib"
    nested.mkdir(parents=True)

    assert find_git_root(nested) == root.resolve()
    assert find_git_root(root) == root.resolve()


def test_find_git_root_missing_raises(tmp_path: Path):
    from gitverdiff.errors import RepositoryNotFoundError
    from gitverdiff.git.repo import find_git_root

    with pytest.raises(RepositoryNotFoundError, match=r"No \.git directory found"):
        find_git_root(tmp_path)


def test_find_git_root_ignores_git_file(tmp_path: Path):
    from gitverdiff.errors import RepositoryNotFoundError
    from gitverdiff.git.repo import find_git_root

    (tmp_path / ".git").write_text("gitdir: elsewhere\n", encoding="utf-8")
    with pytest.raises(RepositoryNotFoundError):
        find_git_root(tmp_path)


def test_resolve_context_nested_package(tmp_path: Path):
    from gitverdiff.git.repo import resolve_context

    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    pkg = root / "packages" / "app"
    pkg.mkdir(parents=True)

    ctx = resolve_context(pkg)
    assert ctx.repo_root == root.resolve()
    assert ctx.package_root == pkg.resolve()
    assert ctx.is_nested
    assert ctx.roots == (pkg.resolve(), root.resolve())

    top = resolve_context(root)
    assert not top.is_nested
    assert top.roots == (root.resolve(),)
