"""Tests for git access and history reconstruction."""

import json
import threading
from unittest.mock import Mock

import pytest

from tech_matrix.core.parsers import create_default_registry
from tech_matrix.git import GitCommandError, GitHistoryWalker, GitRepository, LoggedCommit


def package_json(*names):
    return json.dumps({"dependencies": {name: "*" for name in names}})


@pytest.fixture
def logged_commits():
    """Ten commits of package.json as git log lists them, newest first."""
    return [
        LoggedCommit(commit_id=f"{index:040x}", date=f"2024-01-{index:02d}", path="package.json")
        for index in range(10, 0, -1)
    ]


@pytest.fixture
def mock_repository(logged_commits):
    """Repository in which only commits 1, 4, 7 and 9 are present locally."""
    repository = Mock(spec=GitRepository)
    repository.list_commits_for_file.return_value = logged_commits
    repository.list_available_commits.return_value = {f"{index:040x}" for index in (1, 4, 7, 9)}
    repository.is_commit_available.side_effect = lambda commit_id, available=None: commit_id in available

    contents = {
        f"{1:040x}": package_json("react", "jquery"),
        f"{4:040x}": package_json("react", "jquery", "moment"),
        f"{7:040x}": package_json("react", "moment"),
        f"{9:040x}": package_json("react"),
    }
    repository.read_file_at_revision.side_effect = lambda path, commit_id: contents[commit_id]
    return repository


class TestGitHistoryWalker:
    """Test history reconstruction against a mocked repository."""

    def test_only_available_commits_are_read(self, mock_repository):
        """Test unavailable commits are skipped without reads."""
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        snapshots = walker.history("package.json")

        assert len(snapshots) == 4
        assert mock_repository.read_file_at_revision.call_count == 4

    def test_snapshots_oldest_first(self, mock_repository):
        """Test snapshots are returned in chronological order."""
        walker = GitHistoryWalker(mock_repository, create_default_registry(), max_workers=2)

        snapshots = walker.history("package.json")

        assert [s.commit_date for s in snapshots] == ["2024-01-01", "2024-01-04", "2024-01-07", "2024-01-09"]
        assert snapshots[0].dependencies == ["react", "jquery"]
        assert snapshots[-1].dependencies == ["react"]

    def test_unreadable_revision_skipped(self, mock_repository):
        """Test a failed read drops only that snapshot."""
        original = mock_repository.read_file_at_revision.side_effect

        def read(path, commit_id):
            if commit_id == f"{4:040x}":
                raise GitCommandError(["show"], "fatal: bad object")
            return original(path, commit_id)

        mock_repository.read_file_at_revision.side_effect = read
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        snapshots = walker.history("package.json")

        assert [s.commit_date for s in snapshots] == ["2024-01-01", "2024-01-07", "2024-01-09"]

    def test_malformed_revision_yields_empty_snapshot(self, mock_repository):
        """Test unparseable content still counts as a snapshot with no dependencies."""
        mock_repository.read_file_at_revision.side_effect = lambda path, commit_id: "{broken"
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        snapshots = walker.history("package.json")

        assert len(snapshots) == 4
        assert all(s.dependencies == [] for s in snapshots)

    def test_history_follows_renamed_paths(self, mock_repository, logged_commits):
        """Test each revision is read at the path it had in that commit."""
        for commit in logged_commits[5:]:
            commit.path = "web/package.json"
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        walker.history("package.json")

        mock_repository.read_file_at_revision.assert_any_call("web/package.json", f"{1:040x}")
        mock_repository.read_file_at_revision.assert_any_call("package.json", f"{9:040x}")

    def test_listing_failure_returns_empty(self, mock_repository):
        """Test an unreadable log gives no snapshots."""
        mock_repository.list_commits_for_file.side_effect = GitCommandError(["log"], "fatal: bad revision")
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        assert walker.history("package.json") == []

    def test_unknown_manifest_not_walked(self, mock_repository):
        """Test files without a parser are skipped before touching git."""
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        assert walker.history("README.md") == []
        mock_repository.list_commits_for_file.assert_not_called()

    def test_available_commits_listed_once(self, mock_repository):
        """Test the available set is computed once per walker."""
        walker = GitHistoryWalker(mock_repository, create_default_registry())

        walker.history("package.json")
        walker.history("package.json")

        assert mock_repository.list_available_commits.call_count == 1

    def test_cancelled_walk_reads_nothing(self, mock_repository):
        """Test a set cancel event stops revision reads."""
        cancel = threading.Event()
        cancel.set()
        walker = GitHistoryWalker(mock_repository, create_default_registry(), cancel_event=cancel)

        assert walker.history("package.json") == []
        mock_repository.read_file_at_revision.assert_not_called()

    def test_progress_reports(self, mock_repository):
        """Test progress messages end at 100%."""
        messages = []
        walker = GitHistoryWalker(mock_repository, create_default_registry(), on_progress=messages.append)

        walker.history("package.json")

        assert messages[-1] == "History of package.json: 100% (4/4 commits)"
        assert len(messages) == len(set(messages))

    def test_invalid_worker_count(self, mock_repository):
        """Test the pool needs at least one worker."""
        with pytest.raises(ValueError):
            GitHistoryWalker(mock_repository, create_default_registry(), max_workers=0)


class TestGitRepository:
    """Test the git wrapper against real repositories."""

    def test_missing_git_binary(self, isolated_tmp):
        """Test a missing executable surfaces as GitCommandError."""
        repository = GitRepository(isolated_tmp, git_binary="techmatrix-no-such-git")

        with pytest.raises(GitCommandError, match="not found"):
            repository.list_available_commits()
        assert repository.is_repository() is False
        assert repository.current_branch() is None

    def test_repository_queries(self, git_repo):
        """Test branch, commit listing and revision reads."""
        first = git_repo.commit({"go.mod": "module a\n\nrequire github.com/sirupsen/logrus v1.9.0\n"})
        second = git_repo.commit({"go.mod": "module a\n\nrequire github.com/gin-gonic/gin v1.9.1\n"})
        git_repo.commit({"README.md": "docs\n"})
        repository = GitRepository(git_repo.root)

        assert repository.is_repository()
        assert repository.current_branch() == "main"
        assert repository.list_available_commits() >= {first, second}
        assert repository.is_commit_available(first)
        assert not repository.is_commit_available("0" * 40)

        commits = repository.list_commits_for_file("go.mod")
        assert [c.commit_id for c in commits] == [second, first]
        assert [c.date for c in commits] == ["2024-01-02", "2024-01-01"]
        assert "logrus" in repository.read_file_at_revision("go.mod", first)

    def test_read_missing_revision(self, git_repo):
        """Test reading a path absent at a commit raises."""
        commit = git_repo.commit({"go.mod": "module a\n"})
        repository = GitRepository(git_repo.root)

        with pytest.raises(GitCommandError):
            repository.read_file_at_revision("Cargo.toml", commit)

    def test_rename_is_followed(self, git_repo):
        """Test log entries carry the path the file had at each commit."""
        git_repo.commit({"package.json": package_json("react", "jquery")})
        git_repo.move("package.json", "web/package.json")
        git_repo.commit({"web/package.json": package_json("react")})
        repository = GitRepository(git_repo.root)

        commits = repository.list_commits_for_file("web/package.json")

        assert [c.path for c in commits] == ["web/package.json", "web/package.json", "package.json"]

        snapshots = GitHistoryWalker(repository, create_default_registry()).history("web/package.json")
        assert snapshots[0].dependencies == ["react", "jquery"]
        assert snapshots[-1].dependencies == ["react"]

    def test_non_repository(self, isolated_tmp):
        """Test a plain directory is not a work tree."""
        assert GitRepository(isolated_tmp).is_repository() is False
