"""Technology resolution: package identifiers to technologies and categories."""

import functools
import re
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..utils.logging import get_logger
from .mappings import MappingTables, TechnologyMapping
from .parsers import Dependency

# Category reported for technologies no table lists.
OTHER_CATEGORY = "Other"

WILDCARD = "*"


@functools.lru_cache(maxsize=4096)
def _compile_wildcard(pattern: str, case_sensitive: bool) -> "re.Pattern[str]":
    regex = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(regex, 0 if case_sensitive else re.IGNORECASE)


def matches_pattern(identifier: str, pattern: str, case_sensitive: bool = False) -> bool:
    """Check whether an identifier matches a mapping pattern.

    A pattern without ``*`` must equal the identifier. Each ``*`` stands for
    zero or more characters of any kind and the whole identifier has to
    match. Every other character is literal.

    Args:
        identifier: Package identifier from a manifest
        pattern: Pattern from a mapping table
        case_sensitive: Compare case-sensitively

    Returns:
        True if the identifier matches
    """
    if WILDCARD not in pattern:
        if case_sensitive:
            return identifier == pattern
        return identifier.casefold() == pattern.casefold()
    return _compile_wildcard(pattern, case_sensitive).fullmatch(identifier) is not None


def resolve_technology(
    identifier: str,
    mapping: TechnologyMapping,
    case_sensitive: bool = False
) -> str:
    """Resolve an identifier to a technology name.

    Exact patterns of every technology are tried before any wildcard pattern,
    so ``react-router`` listed exactly under one technology beats a
    ``react-*`` wildcard listed earlier under another. Within a pass the
    mapping's order decides.

    Args:
        identifier: Package identifier
        mapping: Technology to patterns mapping
        case_sensitive: Compare case-sensitively

    Returns:
        The technology name, or the identifier itself when nothing matches
    """
    for technology, patterns in mapping.items():
        for pattern in patterns:
            if WILDCARD not in pattern and matches_pattern(identifier, pattern, case_sensitive):
                return technology

    for technology, patterns in mapping.items():
        for pattern in patterns:
            if WILDCARD in pattern and matches_pattern(identifier, pattern, case_sensitive):
                return technology

    return identifier


def category_of(technology: str, category_mapping: Mapping[str, Sequence[str]]) -> str:
    """Look up the category listing a technology.

    Args:
        technology: Technology name
        category_mapping: Category to technology names mapping

    Returns:
        First category listing the name (case-insensitive), else ``"Other"``
    """
    wanted = technology.casefold()
    for category, technologies in category_mapping.items():
        for name in technologies:
            if name.casefold() == wanted:
                return category
    return OTHER_CATEGORY


class TechnologyMatcher:
    """Resolves ecosystem-tagged dependencies against loaded mapping tables.

    A dependency is resolved only within its own ecosystem's table, so the
    same identifier declared in two ecosystems can resolve differently.
    Categories come from the merged category lookup of all ecosystems.
    """

    def __init__(self, mappings: MappingTables, case_sensitive: bool = False) -> None:
        """Initialize the matcher.

        Args:
            mappings: Loaded mapping tables
            case_sensitive: Compare patterns case-sensitively
        """
        self.logger = get_logger("TechnologyMatcher")
        self.mappings = mappings
        self.case_sensitive = case_sensitive
        self._cache: Dict[Tuple[str, str], str] = {}
        self._category_cache: Dict[str, str] = {}

    def resolve(self, dependency: Dependency) -> str:
        """Resolve a dependency to its technology name."""
        return self.resolve_name(dependency.name, dependency.ecosystem)

    def resolve_name(self, name: str, ecosystem: Optional[str] = None) -> str:
        """Resolve a raw identifier.

        Args:
            name: Package identifier
            ecosystem: Ecosystem to resolve in; None uses the merged lookup

        Returns:
            Technology name
        """
        key = (ecosystem or "", name)
        if key not in self._cache:
            mapping = self.mappings.technology_mapping(ecosystem)
            technology = resolve_technology(name, mapping, self.case_sensitive)
            if technology == name:
                self.logger.debug(f"No technology mapping for {ecosystem or 'any'}:{name}")
            self._cache[key] = technology
        return self._cache[key]

    def categorize(self, technology: str) -> str:
        """Category of a technology name, ``"Other"`` when unlisted."""
        if technology not in self._category_cache:
            self._category_cache[technology] = category_of(
                technology, self.mappings.combined_category_mapping
            )
        return self._category_cache[technology]

    def clear_cache(self) -> None:
        self._cache.clear()
        self._category_cache.clear()

    def get_statistics(self) -> Dict[str, Any]:
        """Get matcher statistics.

        Returns:
            Cache sizes and table counts
        """
        return {
            "cached_resolutions": len(self._cache),
            "cached_categories": len(self._category_cache),
            "ecosystems": len(self.mappings.tables),
            "technologies": len(self.mappings.combined_technology_mapping),
            "categories": len(self.mappings.combined_category_mapping),
        }
