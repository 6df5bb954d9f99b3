"""Utility functions and helpers for TechMatrix."""

from .logging import setup_logging, get_logger
from .performance import PerformanceMonitor, benchmark
from .path_utils import PathFilter, list_repository_files

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceMonitor",
    "benchmark",
    "PathFilter",
    "list_repository_files",
]
