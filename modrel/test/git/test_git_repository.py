"""Tests for modrel.git.repository module."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from modrel.core.result import Err, Ok
from modrel.git.repository import Repository

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def origin(tmp_path: Path) -> Path:
    repo = tmp_path / "origin"
    repo.mkdir()
    _git(repo, "init", "-b", "release/1.20")
    _git(repo, "config", "user.email", "ci@example.com")
    _git(repo, "config", "user.name", "CI")
    (repo / "gradle.properties").write_text("mod_version=2.3.0\n", encoding="utf-8")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")
    return repo


class TestState:
    def test_missing_path(self, tmp_path: Path) -> None:
        repo = Repository(tmp_path / "absent")
        assert not repo.exists()
        assert repo.is_empty_dir()

    def test_non_empty_plain_dir(self, tmp_path: Path) -> None:
        (tmp_path / "file.txt").write_text("x", encoding="utf-8")
        repo = Repository(tmp_path)
        assert not repo.exists()
        assert not repo.is_empty_dir()


class TestClone:
    def test_clone_checks_out_branch(self, origin: Path, tmp_path: Path) -> None:
        dest = tmp_path / "scratch" / "release" / "1.20"
        result = Repository.clone(str(origin), branch="release/1.20", dest=dest)
        assert isinstance(result, Ok)
        assert result.value.exists()
        head = (dest / ".git" / "HEAD").read_text(encoding="utf-8")
        assert head.strip() == "ref: refs/heads/release/1.20"
        assert (dest / "gradle.properties").exists()

    def test_clone_unknown_branch(self, origin: Path, tmp_path: Path) -> None:
        result = Repository.clone(str(origin), branch="release/9.99", dest=tmp_path / "x")
        assert isinstance(result, Err)
        assert result.error.command == "clone"
        assert result.error.message


def test_pull_ff_picks_up_new_commits(origin: Path, tmp_path: Path) -> None:
    cloned = Repository.clone(str(origin), branch="release/1.20", dest=tmp_path / "copy")
    assert isinstance(cloned, Ok)
    (origin / "gradle.properties").write_text("mod_version=2.3.1\n", encoding="utf-8")
    _git(origin, "commit", "-am", "bump")

    repo = cloned.value
    assert isinstance(repo.fetch(), Ok)
    assert isinstance(repo.pull_ff(), Ok)
    assert "2.3.1" in (repo.path / "gradle.properties").read_text(encoding="utf-8")
