"""Read-only access to a local git repository through the git binary."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set

from ..utils.logging import get_logger


class GitCommandError(RuntimeError):
    """A git invocation failed, timed out or git is not installed."""

    def __init__(self, args: Sequence[str], message: str, returncode: Optional[int] = None) -> None:
        self.git_args = list(args)
        self.returncode = returncode
        self.stderr = message
        super().__init__(f"git {' '.join(self.git_args)} failed: {message}")


@dataclass
class LoggedCommit:
    """A commit from the log of one file."""

    commit_id: str
    date: str
    path: str


class GitRepository:
    """Git working copy queried via ``subprocess``.

    Lazy object fetching is disabled, so reading a blob that a partial clone
    never downloaded fails instead of reaching for the network.
    """

    def __init__(self, repo_path: Path, git_binary: str = "git", timeout: float = 60.0) -> None:
        """Initialize the repository handle.

        Args:
            repo_path: Working tree directory
            git_binary: git executable name or path
            timeout: Seconds before a single git call is abandoned
        """
        self.repo_path = Path(repo_path)
        self.git_binary = git_binary
        self.timeout = timeout
        self.logger = get_logger("GitRepository")
        self._env = {
            **os.environ,
            "GIT_NO_LAZY_FETCH": "1",
            "GIT_TERMINAL_PROMPT": "0",
            "LC_ALL": "C",
        }

    def _run(self, *args: str) -> str:
        """Run git in the repository and return its stdout.

        Raises:
            GitCommandError: On non-zero exit, timeout or missing binary
        """
        command = [self.git_binary, "-C", str(self.repo_path), "-c", "core.quotePath=false", *args]
        self.logger.debug(f"git {' '.join(args)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                timeout=self.timeout,
                env=self._env,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandError(args, f"git executable not found: {self.git_binary}") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, f"timed out after {self.timeout}s") from e

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise GitCommandError(args, stderr or "unknown error", completed.returncode)

        return completed.stdout.decode("utf-8", errors="replace")

    def is_repository(self) -> bool:
        """Check whether the directory is inside a git work tree."""
        try:
            return self._run("rev-parse", "--is-inside-work-tree").strip() == "true"
        except GitCommandError:
            return False

    def current_branch(self) -> Optional[str]:
        """Name of the checked-out branch, None when detached or unknown."""
        try:
            branch = self._run("rev-parse", "--abbrev-ref", "HEAD").strip()
        except GitCommandError:
            return None
        return branch if branch and branch != "HEAD" else None

    def list_available_commits(self) -> Set[str]:
        """Every commit reachable from any local ref or HEAD.

        Returns:
            Full commit hashes
        """
        output = self._run("rev-list", "--all")
        return {line.strip() for line in output.splitlines() if line.strip()}

    def is_commit_available(self, commit_id: str, available: Optional[Set[str]] = None) -> bool:
        """Check that a commit object exists locally.

        Args:
            commit_id: Full commit hash
            available: Precomputed result of ``list_available_commits``

        Returns:
            True if the commit can be read
        """
        if available is not None:
            return commit_id in available
        try:
            self._run("cat-file", "-e", f"{commit_id}^{{commit}}")
        except GitCommandError:
            return False
        return True

    def list_commits_for_file(self, file_path: str) -> List[LoggedCommit]:
        """Commits that touched a file, following renames, newest first.

        Args:
            file_path: Path relative to the repository root

        Returns:
            Commits with their short ISO date and the file's path at that commit
        """
        output = self._run(
            "log", "--follow", "--format=commit %H %ad", "--date=short",
            "--name-only", "--", file_path,
        )

        commits: List[LoggedCommit] = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            if line.startswith("commit "):
                parts = line.split()
                if len(parts) >= 3:
                    commits.append(LoggedCommit(commit_id=parts[1], date=parts[2], path=file_path))
            elif commits:
                commits[-1].path = line

        return commits

    def read_file_at_revision(self, file_path: str, commit_id: str) -> str:
        """Content of a file at a given commit.

        Args:
            file_path: Path relative to the repository root
            commit_id: Commit hash

        Returns:
            File content

        Raises:
            GitCommandError: If the blob cannot be read
        """
        return self._run("show", f"{commit_id}:{file_path}")

