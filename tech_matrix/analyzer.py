"""End-to-end technology analysis of a repository."""

import threading
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

from .config import AnalysisConfig
from .core.aggregator import AnalysisResult, aggregate, reconcile, removed_dependencies
from .core.mappings import MappingTables, load_mappings
from .core.matcher import TechnologyMatcher
from .core.parsers import BaseParser, Dependency, ParsedDependencies, ParserRegistry, registry as default_registry
from .git.history import GitHistoryWalker, HistorySnapshot
from .git.repository import GitRepository
from .utils.logging import get_logger
from .utils.path_utils import list_repository_files
from .utils.performance import PerformanceMonitor, benchmark

ProgressCallback = Callable[[str], None]


class TechRadarAnalyzer:
    """Finds the technologies a repository uses now and the ones it dropped.

    Current dependencies come from the working tree. Past dependencies are
    the union over every locally available revision of each manifest. A
    dependency present in the past but not now marks its technology (or
    part of it) as removed.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        mappings: Optional[MappingTables] = None,
        registry: Optional[ParserRegistry] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            config: Analysis settings, defaults when None
            mappings: Mapping tables, loaded from ``config.mappings_dir`` when None
            registry: Manifest parser registry, the built-in one when None
            on_progress: Receives human-readable progress lines

        Raises:
            MappingError: If mapping tables cannot be loaded
        """
        self.config = config or AnalysisConfig()
        self.mappings = mappings or load_mappings(self.config.mappings_dir)
        self.registry = registry or default_registry
        self.matcher = TechnologyMatcher(self.mappings, case_sensitive=self.config.case_sensitive)
        self.on_progress = on_progress
        self.logger = get_logger("TechRadarAnalyzer")
        self.performance_monitor = PerformanceMonitor()

    def _progress(self, message: str) -> None:
        self.logger.debug(message)
        if self.on_progress is not None:
            self.on_progress(message)

    def discover_manifests(self, file_list: List[str]) -> List[Tuple[str, BaseParser]]:
        """Pick the files some registered parser understands.

        Args:
            file_list: Repository-relative paths

        Returns:
            (path, parser) pairs in input order
        """
        return self.registry.discover(file_list)

    def extract_current(self, file_path: str, content: str) -> List[str]:
        """Identifiers declared by a manifest's current content.

        Args:
            file_path: Manifest path, used for routing
            content: Manifest text

        Returns:
            Identifiers, empty when no parser accepts the path
        """
        parser = self.registry.find_parser_for_file(file_path)
        if parser is None:
            return []
        return parser.extract(file_path, content)

    def walk_history(
        self,
        repo_path: Path,
        file_path: str,
        cancel_event: Optional[threading.Event] = None
    ) -> List[HistorySnapshot]:
        """Dependency snapshots of one manifest, oldest first.

        Args:
            repo_path: Repository working tree
            file_path: Repository-relative manifest path
            cancel_event: Stops further revision reads when set

        Returns:
            Snapshots of every readable, locally available revision
        """
        walker = self._create_walker(self._open_repository(repo_path), cancel_event)
        return walker.history(file_path)

    def _open_repository(self, repo_path: Path) -> GitRepository:
        return GitRepository(
            Path(repo_path),
            git_binary=self.config.git_binary,
            timeout=self.config.git_timeout,
        )

    def _create_walker(
        self,
        repository: GitRepository,
        cancel_event: Optional[threading.Event]
    ) -> GitHistoryWalker:
        return GitHistoryWalker(
            repository,
            self.registry,
            max_workers=self.config.max_workers,
            on_progress=self.on_progress,
            cancel_event=cancel_event,
        )

    def _list_files(self, repo_root: Path) -> List[str]:
        return list_repository_files(repo_root, self.config.ignore_patterns)

    def _parse_current(self, repo_root: Path, file_path: str, parser: BaseParser) -> ParsedDependencies:
        try:
            return parser.parse(repo_root / file_path)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Cannot read {file_path}: {e}")
            return ParsedDependencies(source_file=Path(file_path), ecosystem=parser.ecosystem)

    @benchmark
    def analyze(
        self,
        repo_path: Path,
        file_list: Optional[List[str]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> AnalysisResult:
        """Analyze a repository working tree and its history.

        Args:
            repo_path: Repository directory
            file_list: Repository-relative files to consider; listed from the
                working tree when None
            cancel_event: When set, stops reading further files and revisions
                and returns what was gathered so far

        Returns:
            Adopt and remove partitions

        Raises:
            ValueError: If repo_path is not a directory
        """
        repo_root = Path(repo_path)
        if not repo_root.is_dir():
            raise ValueError(f"Repository path is not a directory: {repo_root}")

        cancel_event = cancel_event or threading.Event()
        repository = self._open_repository(repo_root)
        is_git = repository.is_repository()
        if not is_git:
            self.logger.info(f"{repo_root} is not a git work tree, history is skipped")

        with self.performance_monitor.measure("discover_manifests"):
            if file_list is None:
                file_list = self._list_files(repo_root)
            manifests = self.discover_manifests(file_list)

        self._progress(f"Found {len(file_list)} total files")
        self._progress(f"Analyzing {len(manifests)} dependency files...")

        walker = None
        if is_git and self.config.include_history:
            walker = self._create_walker(repository, cancel_event)

        current: Set[Dependency] = set()
        historical: Set[Dependency] = set()
        files_analyzed = 0
        snapshots_analyzed = 0

        for index, (file_path, parser) in enumerate(manifests, 1):
            if cancel_event.is_set():
                self.logger.warning("Analysis cancelled, returning partial result")
                break

            with self.performance_monitor.measure("extract_current"):
                parsed = self._parse_current(repo_root, file_path, parser)
            current.update(parsed.dependencies)
            files_analyzed += 1
            self._progress(f"[{index}/{len(manifests)}] {file_path}: {len(parsed.dependencies)} dependencies")

            if walker is None:
                continue

            with self.performance_monitor.measure("walk_history"):
                snapshots = walker.history(file_path)
            snapshots_analyzed += len(snapshots)
            for snapshot in snapshots:
                historical.update(self._tag(snapshot.dependencies, parser, file_path))

        with self.performance_monitor.measure("aggregate"):
            removed = removed_dependencies(current, historical)
            adopt_items = aggregate(current, self.matcher.resolve, self.matcher.categorize)
            remove_items = aggregate(removed, self.matcher.resolve, self.matcher.categorize)
            adopt, remove = reconcile(adopt_items, remove_items)

        self._progress(f"Found {len(adopt)} technologies in use, {len(remove)} removed")

        return AnalysisResult(
            adopt=adopt,
            remove=remove,
            branch=repository.current_branch() if is_git else None,
            files_analyzed=files_analyzed,
            snapshots_analyzed=snapshots_analyzed,
            cancelled=cancel_event.is_set(),
        )

    @staticmethod
    def _tag(names: List[str], parser: BaseParser, file_path: str) -> List[Dependency]:
        source = Path(file_path)
        return [Dependency(name=name, ecosystem=parser.ecosystem, source_file=source) for name in names]


def analyze_repository(
    repo_path: Path,
    file_list: Optional[List[str]] = None,
    config: Optional[AnalysisConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> AnalysisResult:
    """Convenience wrapper around ``TechRadarAnalyzer.analyze``.

    Args:
        repo_path: Repository directory
        file_list: Optional repository-relative file list
        config: Analysis settings
        on_progress: Progress callback

    Returns:
        Analysis result
    """
    analyzer = TechRadarAnalyzer(config=config, on_progress=on_progress)
    return analyzer.analyze(repo_path, file_list)
