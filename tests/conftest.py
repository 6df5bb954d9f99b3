"""Shared fixtures: throwaway git repositories built with the git binary."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest


class GitRepoBuilder:
    """Creates commits in a temporary repository with fixed dates."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._day = 0

    def git(self, *args: str, date: str = "2024-01-01T12:00:00") -> str:
        env = {
            **os.environ,
            "GIT_AUTHOR_DATE": date,
            "GIT_COMMITTER_DATE": date,
            "GIT_CONFIG_NOSYSTEM": "1",
        }
        completed = subprocess.run(
            [
                "git", "-C", str(self.root),
                "-c", "user.name=Test", "-c", "user.email=test@example.com",
                "-c", "commit.gpgsign=false", "-c", "init.defaultBranch=main",
                *args,
            ],
            capture_output=True,
            text=True,
            env=env,
            check=True,
        )
        return completed.stdout

    def init(self) -> "GitRepoBuilder":
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        return self

    def commit(self, files: dict, message: str = "update") -> str:
        """Write files, commit them on the next day and return the commit hash."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            self.git("add", relative)

        self._day += 1
        self.git("commit", "-q", "-m", message, date=f"2024-01-{self._day:02d}T12:00:00")
        return self.git("rev-parse", "HEAD").strip()

    def move(self, source: str, target: str, message: str = "move") -> str:
        (self.root / target).parent.mkdir(parents=True, exist_ok=True)
        self.git("mv", source, target)
        self._day += 1
        self.git("commit", "-q", "-m", message, date=f"2024-01-{self._day:02d}T12:00:00")
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def isolated_tmp(tmp_path, monkeypatch):
    """A temporary directory that git never treats as part of an outer repository."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    return tmp_path


@pytest.fixture
def git_repo(isolated_tmp):
    """An initialised, empty git repository on branch main."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitRepoBuilder(isolated_tmp).init()
