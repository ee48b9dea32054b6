from __future__ import annotations

import logging
import subprocess
from pathlib import Path


def _fake_git(outputs: dict[str, bytes], calls: list[list[str]] | None = None):
    def fake_run(cmd, *args, **kwargs):  # noqa: ANN001
        if calls is not None:
            calls.append(list(cmd))
        sub = cmd[3]
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=outputs.get(sub, b""), stderr=b"")

    return fake_run


def test_git_changed_files_unions_ls_files_and_status(monkeypatch, tmp_path: Path):
    from gitverdiff.git.changes import git_changed_files

    calls: list[list[str]] = []
    outputs = {
        "ls-files": b"modified.txt\0new.txt\0",
        "status": b" M modified.txt\0 D deleted.txt\0?? new.txt\0D  staged-rm.txt\0",
    }
    monkeypatch.setattr(subprocess, "run", _fake_git(outputs, calls))

    files = git_changed_files(tmp_path)
    assert files == ["deleted.txt", "modified.txt", "new.txt", "staged-rm.txt"]
    assert calls[0][:3] == ["git", "-C", str(tmp_path)]
    assert calls[0][3] == "ls-files"
    assert calls[1][3] == "status"


def test_git_changed_files_handles_renames_and_ignored(monkeypatch, tmp_path: Path):
    from gitverdiff.git.changes import git_changed_files

    outputs = {
        "ls-files": b"",
        "status": b"R  new/name.py\0old/name.py\0!! build/out.o\0",
    }
    monkeypatch.setattr(subprocess, "run", _fake_git(outputs))

    assert git_changed_files(tmp_path) == ["new/name.py", "old/name.py"]


def test_git_changed_files_missing_git_returns_empty(monkeypatch, tmp_path: Path, caplog):
    from gitverdiff.git.changes import git_changed_files

    def fake_run(*args, **kwargs):  # noqa: ANN001
        raise FileNotFoundError("git")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with caplog.at_level(logging.WARNING, logger="gitverdiff.git.changes"):
        assert git_changed_files(tmp_path) == []
    assert "Error retrieving modified files from Git" in caplog.text


def test_git_changed_files_nonzero_exit_returns_empty(monkeypatch, tmp_path: Path, caplog):
    from gitverdiff.git.changes import git_changed_files

    def fake_run(cmd, *args, **kwargs):  # noqa: ANN001
        return subprocess.CompletedProcess(args=cmd, returncode=128, stdout=b"", stderr=b"fatal: not a git repository")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with caplog.at_level(logging.WARNING, logger="gitverdiff.git.changes"):
        assert git_changed_files(tmp_path) == []
    assert "not a git repository" in caplog.text


def test_git_executable_env_override(monkeypatch, tmp_path: Path):
    from gitverdiff.git.changes import git_changed_files, git_executable

    monkeypatch.setenv("GITVERDIFF_GIT", "/opt/git/bin/git")
    assert git_executable() == "/opt/git/bin/git"

    calls: list[list[str]] = []
    monkeypatch.setattr(subprocess, "run", _fake_git({}, calls))
    git_changed_files(tmp_path)
    assert calls[0][0] == "/opt/git/bin/git"


def test_git_changed_files_tolerates_non_utf8(monkeypatch, tmp_path: Path):
    from gitverdiff.git.changes import git_changed_files

    outputs = {"ls-files": b"caf\xe9.txt\0", "status": b""}
    monkeypatch.setattr(subprocess, "run", _fake_git(outputs))

    assert git_changed_files(tmp_path) == ["caf\ufffd.txt"]
