"""Base parser class and data models for manifest parsing."""

import fnmatch
import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, Iterable, List, Optional, Set, Union

from ...utils.logging import get_logger

PathLike = Union[str, PurePath]

# Errors a parser may hit on malformed manifest text. JSON and TOML decode
# errors subclass ValueError, ElementTree's ParseError subclasses SyntaxError,
# and deeply nested arrays or tables exhaust the decoder's recursion limit.
MALFORMED_CONTENT_ERRORS = (
    ValueError, KeyError, TypeError, AttributeError, RecursionError, ET.ParseError
)


@dataclass
class Dependency:
    """A package identifier tagged with the ecosystem it was declared in."""

    name: str
    ecosystem: str = ""
    source_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate the dependency."""
        if not self.name or not self.name.strip():
            raise ValueError("Dependency name cannot be empty")
        # identifiers are kept as written; only surrounding whitespace goes
        self.name = self.name.strip()

    def __hash__(self) -> int:
        """Hash based on name and ecosystem."""
        return hash((self.name, self.ecosystem))

    def __eq__(self, other: Any) -> bool:
        """Equality based on name and ecosystem."""
        if not isinstance(other, Dependency):
            return False
        return self.name == other.name and self.ecosystem == other.ecosystem


@dataclass
class ParsedDependencies:
    """Container for dependencies extracted from one manifest."""

    dependencies: List[Dependency] = field(default_factory=list)
    source_file: Optional[Path] = None
    ecosystem: str = ""

    def add_dependency(self, dependency: Dependency) -> None:
        """Add a dependency to the collection.

        Args:
            dependency: Dependency to add
        """
        self.dependencies.append(dependency)

    def get_dependency_names(self) -> List[str]:
        """Get dependency names in declaration order.

        Returns:
            List of dependency names
        """
        return [dep.name for dep in self.dependencies]


def unique(names: Iterable[str]) -> List[str]:
    """Drop empty and repeated names, keeping first-seen order."""
    seen: Set[str] = set()
    result = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


class BaseParser(ABC):
    """Abstract base class for manifest parsers.

    A parser owns one ecosystem. ``dependency_files`` lists the file name rules
    it accepts: either an exact base name (``package.json``) or a glob matched
    against the base name (``*.csproj``).
    """

    ecosystem: str = ""
    dependency_files: List[str] = []

    def __init__(self) -> None:
        """Initialize the parser."""
        self.logger = get_logger(type(self).__name__)

    def can_parse(self, file_path: PathLike) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if one of the file name rules matches
        """
        filename = PurePath(file_path).name
        for rule in self.dependency_files:
            if "*" in rule:
                if fnmatch.fnmatchcase(filename, rule):
                    return True
            elif filename == rule:
                return True
        return False

    def extract(self, file_path: PathLike, content: str) -> List[str]:
        """Extract package identifiers from manifest text.

        Malformed content never raises: a warning is logged and an empty
        list is returned.

        Args:
            file_path: Path of the manifest, used to pick the file format
            content: Raw manifest text

        Returns:
            Identifiers in first-seen order, without duplicates
        """
        filename = PurePath(file_path).name
        try:
            return unique(self._extract(filename, content))
        except MALFORMED_CONTENT_ERRORS as e:
            self.logger.warning(f"Could not parse {file_path}: {e}")
            return []

    @abstractmethod
    def _extract(self, filename: str, content: str) -> Iterable[str]:
        """Yield raw identifiers for a manifest with the given base name."""

    def parse_content(self, file_path: PathLike, content: str) -> ParsedDependencies:
        """Build tagged dependencies from manifest text.

        Args:
            file_path: Path of the manifest
            content: Raw manifest text

        Returns:
            Parsed dependencies tagged with this parser's ecosystem
        """
        source = Path(file_path)
        result = ParsedDependencies(source_file=source, ecosystem=self.ecosystem)
        for name in self.extract(file_path, content):
            result.add_dependency(Dependency(name=name, ecosystem=self.ecosystem, source_file=source))
        return result

    def parse(self, file_path: Path) -> ParsedDependencies:
        """Read and parse a manifest file.

        Args:
            file_path: Path to the file to parse

        Returns:
            Parsed dependencies from the file
        """
        self.validate_file(file_path)
        content = file_path.read_text(encoding="utf-8", errors="replace")
        return self.parse_content(file_path, content)

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Args:
            file_path: Path to validate

        Raises:
            FileNotFoundError: If file doesn't exist
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
