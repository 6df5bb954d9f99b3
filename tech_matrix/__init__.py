"""TechMatrix - resolves dependency manifests to technologies and tracks the ones a repository dropped."""

__version__ = "0.1.0"

from .analyzer import TechRadarAnalyzer, analyze_repository
from .config import AnalysisConfig
from .core.aggregator import AnalysisResult, TechnologyItem
from .core.mappings import MappingError, load_mappings
from .core.matcher import TechnologyMatcher
from .core.parsers import ManifestRegistry
from .git.history import GitHistoryWalker, HistorySnapshot
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ConsoleFormatter",
    "GitHistoryWalker",
    "HistorySnapshot",
    "JSONFormatter",
    "ManifestRegistry",
    "MappingError",
    "TechRadarAnalyzer",
    "TechnologyItem",
    "TechnologyMatcher",
    "analyze_repository",
    "load_mappings",
]
