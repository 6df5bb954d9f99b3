"""Manifest parsing, technology resolution and aggregation for TechMatrix."""

from .aggregator import AnalysisResult, TechnologyItem, aggregate, reconcile, removed_dependencies
from .mappings import MappingError, MappingTables, default_mappings, load_mappings
from .matcher import OTHER_CATEGORY, TechnologyMatcher, category_of, matches_pattern, resolve_technology
from .parsers import Dependency, ManifestRegistry, ParsedDependencies

__all__ = [
    "AnalysisResult",
    "Dependency",
    "ManifestRegistry",
    "MappingError",
    "MappingTables",
    "OTHER_CATEGORY",
    "ParsedDependencies",
    "TechnologyItem",
    "TechnologyMatcher",
    "aggregate",
    "category_of",
    "default_mappings",
    "load_mappings",
    "matches_pattern",
    "reconcile",
    "removed_dependencies",
    "resolve_technology",
]
