"""Path utilities for listing repository files and filtering paths."""

import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional


DEFAULT_IGNORE_PATTERNS = [
    "**/node_modules/**",
    "**/.git/**",
    "**/dist/**",
    "**/build/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/venv/**",
    "**/.tox/**",
    "**/.pytest_cache/**",
]


class PathFilter:
    """Filters repository-relative paths based on glob patterns."""
    
    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.
        
        Args:
            ignore_patterns: Extra glob patterns to ignore on top of the defaults
        """
        self.ignore_patterns = DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])
    
    def is_ignored(self, path: PurePosixPath) -> bool:
        """Check if a path should be ignored.
        
        Args:
            path: Path relative to the repository root
            
        Returns:
            True if path should be ignored
        """
        # rooted so that "**/name/**" also catches top-level directories
        path_str = "/" + path.as_posix().lstrip("/")
        
        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(path_str, pattern):
                return True
        
        return False
    
    def filter_paths(self, paths: Iterator[PurePosixPath]) -> Iterator[PurePosixPath]:
        """Yield the paths that are not ignored."""
        for path in paths:
            if not self.is_ignored(path):
                yield path


def list_repository_files(
    root_path: Path,
    ignore_patterns: Optional[List[str]] = None
) -> List[str]:
    """List files of a working tree as sorted root-relative POSIX paths.
    
    Args:
        root_path: Repository directory
        ignore_patterns: Additional ignore patterns
        
    Returns:
        Relative paths of every file that is not ignored
        
    Raises:
        ValueError: If root path is not a directory
    """
    if not root_path.is_dir():
        raise ValueError(f"Repository path is not a directory: {root_path}")
    
    root = root_path.resolve()
    path_filter = PathFilter(ignore_patterns)
    relative = (
        PurePosixPath(path.relative_to(root).as_posix())
        for path in root.rglob("*")
        if path.is_file()
    )
    
    return sorted(path.as_posix() for path in path_filter.filter_paths(relative))
