"""Git history access for TechMatrix."""

from .history import GitHistoryWalker, HistorySnapshot
from .repository import GitCommandError, GitRepository, LoggedCommit

__all__ = [
    "GitCommandError",
    "GitHistoryWalker",
    "GitRepository",
    "HistorySnapshot",
    "LoggedCommit",
]
