"""Reconstruction of a manifest's dependency sets across git history."""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from ..core.parsers import BaseParser, ParserRegistry
from ..utils.logging import get_logger
from .repository import GitCommandError, GitRepository, LoggedCommit

ProgressCallback = Callable[[str], None]


@dataclass
class HistorySnapshot:
    """Dependencies of one manifest as of one commit."""

    commit_date: str
    dependencies: List[str] = field(default_factory=list)
    commit_id: str = ""
    file_path: str = ""


class GitHistoryWalker:
    """Parses every locally available revision of a manifest.

    Commits named by the file's log but missing from the local object store
    (shallow or partial clones) are skipped, as are revisions whose content
    cannot be read. Retrieval runs on a bounded thread pool.
    """

    def __init__(
        self,
        repository: GitRepository,
        registry: ParserRegistry,
        max_workers: int = 4,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Initialize the walker.

        Args:
            repository: Repository to read from
            registry: Routes the manifest path to its parser
            max_workers: Upper bound on concurrent git reads
            on_progress: Receives human-readable progress lines
            cancel_event: When set, no further revisions are read
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.repository = repository
        self.registry = registry
        self.max_workers = max_workers
        self.on_progress = on_progress
        self.cancel_event = cancel_event or threading.Event()
        self.logger = get_logger("GitHistoryWalker")
        self._available: Optional[Set[str]] = None

    def _progress(self, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(message)

    def available_commits(self) -> Set[str]:
        """Locally available commits, computed once per walker."""
        if self._available is None:
            self._available = self.repository.list_available_commits()
        return self._available

    def history(self, file_path: str) -> List[HistorySnapshot]:
        """Dependency snapshots of a manifest, oldest first.

        Args:
            file_path: Repository-relative path of the manifest as it is now

        Returns:
            One snapshot per readable available commit; empty when the file
            has no parser or the history cannot be listed
        """
        parser = self.registry.find_parser_for_file(file_path)
        if parser is None:
            self.logger.debug(f"No parser for {file_path}, skipping history")
            return []

        try:
            available = self.available_commits()
            logged = self.repository.list_commits_for_file(file_path)
        except GitCommandError as e:
            self.logger.warning(f"Cannot read history of {file_path}: {e}")
            return []

        commits = []
        for commit in logged:
            if self.repository.is_commit_available(commit.commit_id, available):
                commits.append(commit)
            else:
                self.logger.debug(f"Commit {commit.commit_id[:8]} not available locally, skipping")

        if not commits:
            return []

        total = len(commits)
        completed = 0
        reported_step = -1
        snapshots: List[HistorySnapshot] = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._snapshot_at, parser, commit) for commit in commits]

            # log order is newest first; futures are consumed in that order
            for future in futures:
                snapshot = future.result()
                completed += 1
                if snapshot is not None:
                    snapshots.append(snapshot)

                step = completed * 10 // total
                if step != reported_step:
                    reported_step = step
                    self._progress(f"History of {file_path}: {step * 10}% ({completed}/{total} commits)")

        snapshots.reverse()
        return snapshots

    def _snapshot_at(self, parser: BaseParser, commit: LoggedCommit) -> Optional[HistorySnapshot]:
        if self.cancel_event.is_set():
            return None

        try:
            content = self.repository.read_file_at_revision(commit.path, commit.commit_id)
        except GitCommandError as e:
            self.logger.debug(f"Skipping {commit.path}@{commit.commit_id[:8]}: {e}")
            return None

        return HistorySnapshot(
            commit_date=commit.date,
            dependencies=parser.extract(commit.path, content),
            commit_id=commit.commit_id,
            file_path=commit.path,
        )
