"""Technology mapping tables.

Each ecosystem ships a nested table ``category -> technology -> patterns`` as
JSON package data. Tables are loaded once, validated, and flattened into the
two lookups the matcher needs: technology to patterns, and category to
technology names.
"""

import functools
import json
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..utils.logging import get_logger

# Merge order of the combined lookups.
ECOSYSTEMS = ("javascript", "python", "java", "go", "csharp", "cpp", "rust")

TechnologyMapping = Mapping[str, Tuple[str, ...]]
CategoryMapping = Mapping[str, Tuple[str, ...]]

logger = get_logger("TechnologyMappings")


class MappingError(ValueError):
    """Raised when a mapping table is missing or malformed."""


@dataclass(frozen=True)
class EcosystemMappingTable:
    """Immutable ``category -> technology -> patterns`` table of one ecosystem."""

    ecosystem: str
    categories: Mapping[str, Mapping[str, Tuple[str, ...]]]
    technology_mapping: TechnologyMapping = field(init=False, repr=False)
    category_mapping: CategoryMapping = field(init=False, repr=False)

    def __post_init__(self) -> None:
        technologies: Dict[str, Tuple[str, ...]] = {}
        categories: Dict[str, Tuple[str, ...]] = {}
        for category, techs in self.categories.items():
            # a technology listed twice keeps its first position, last patterns
            technologies.update(techs)
            categories[category] = tuple(techs.keys())

        object.__setattr__(self, "technology_mapping", MappingProxyType(technologies))
        object.__setattr__(self, "category_mapping", MappingProxyType(categories))

    @classmethod
    def from_dict(cls, ecosystem: str, data: Any, source: str = "<memory>") -> "EcosystemMappingTable":
        """Validate decoded table data and build a table.

        Args:
            ecosystem: Ecosystem the table belongs to
            data: Decoded ``{category: {technology: [pattern, ...]}}`` object
            source: Where the data came from, for error messages

        Returns:
            Frozen mapping table

        Raises:
            MappingError: If the data does not have the expected shape
        """
        if not isinstance(data, dict) or not data:
            raise MappingError(f"{source}: expected a non-empty object of categories")

        categories: Dict[str, Mapping[str, Tuple[str, ...]]] = {}
        for category, technologies in data.items():
            if not isinstance(category, str) or not category.strip():
                raise MappingError(f"{source}: category names must be non-empty strings")
            if not isinstance(technologies, dict):
                raise MappingError(f"{source}: category '{category}' must map technologies to patterns")

            techs: Dict[str, Tuple[str, ...]] = {}
            for technology, patterns in technologies.items():
                location = f"{source}: {category} / {technology}"
                if not isinstance(technology, str) or not technology.strip():
                    raise MappingError(f"{source}: technology names in '{category}' must be non-empty strings")
                if not isinstance(patterns, list) or not patterns:
                    raise MappingError(f"{location}: patterns must be a non-empty list")
                for pattern in patterns:
                    if not isinstance(pattern, str) or not pattern:
                        raise MappingError(f"{location}: invalid pattern {pattern!r}")
                techs[technology] = tuple(patterns)

            categories[category] = MappingProxyType(techs)

        return cls(ecosystem=ecosystem, categories=MappingProxyType(categories))


@dataclass(frozen=True)
class MappingTables:
    """All ecosystem tables plus the merged lookups across them."""

    tables: Mapping[str, EcosystemMappingTable]
    combined_category_mapping: CategoryMapping = field(init=False, repr=False)
    combined_technology_mapping: TechnologyMapping = field(init=False, repr=False)

    def __post_init__(self) -> None:
        categories: Dict[str, List[str]] = {}
        technologies: Dict[str, Tuple[str, ...]] = {}
        for table in self.tables.values():
            for category, names in table.category_mapping.items():
                categories.setdefault(category, []).extend(names)
            technologies.update(table.technology_mapping)

        object.__setattr__(
            self,
            "combined_category_mapping",
            MappingProxyType({category: tuple(names) for category, names in categories.items()}),
        )
        object.__setattr__(self, "combined_technology_mapping", MappingProxyType(technologies))

    @property
    def ecosystems(self) -> List[str]:
        return list(self.tables.keys())

    def technology_mapping(self, ecosystem: Optional[str]) -> TechnologyMapping:
        """Technology lookup for an ecosystem.

        Args:
            ecosystem: Ecosystem name, or None for the merged lookup

        Returns:
            The ecosystem's technology mapping, or the merged one when the
            ecosystem has no table
        """
        table = self.tables.get(ecosystem) if ecosystem else None
        if table is None:
            return self.combined_technology_mapping
        return table.technology_mapping

    @classmethod
    def from_tables(cls, tables: List[EcosystemMappingTable]) -> "MappingTables":
        """Build from tables, keeping the known ecosystem order first."""
        by_ecosystem = {table.ecosystem: table for table in tables}
        ordered = [name for name in ECOSYSTEMS if name in by_ecosystem]
        ordered.extend(name for name in by_ecosystem if name not in ordered)
        return cls(tables=MappingProxyType({name: by_ecosystem[name] for name in ordered}))


def load_mapping_table(ecosystem: str, path: Path) -> EcosystemMappingTable:
    """Load one ecosystem table from a JSON file.

    Args:
        ecosystem: Ecosystem name
        path: JSON file path

    Returns:
        Validated mapping table

    Raises:
        MappingError: If the file cannot be read or is malformed
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise MappingError(f"Cannot read mapping table {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise MappingError(f"{path}: invalid JSON at line {e.lineno} column {e.colno}") from e

    return EcosystemMappingTable.from_dict(ecosystem, data, source=str(path))


def _load_packaged_table(ecosystem: str) -> EcosystemMappingTable:
    resource = resources.files("tech_matrix") / "data" / f"{ecosystem}.json"
    try:
        data = json.loads(resource.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise MappingError(f"Packaged mapping table for {ecosystem} is unusable: {e}") from e
    return EcosystemMappingTable.from_dict(ecosystem, data, source=f"tech_matrix/data/{ecosystem}.json")


@functools.lru_cache(maxsize=1)
def default_mappings() -> MappingTables:
    """Mapping tables shipped with the package, loaded once per process."""
    return MappingTables.from_tables([_load_packaged_table(name) for name in ECOSYSTEMS])


def load_mappings(directory: Optional[Path] = None) -> MappingTables:
    """Load mapping tables, optionally overriding the shipped ones.

    Every ``<ecosystem>.json`` in ``directory`` replaces the shipped table for
    that ecosystem; files for unknown ecosystems add new tables.

    Args:
        directory: Directory with override tables, or None for the defaults

    Returns:
        Validated mapping tables

    Raises:
        MappingError: If the directory is missing or a table is malformed
    """
    defaults = default_mappings()
    if directory is None:
        return defaults

    if not directory.is_dir():
        raise MappingError(f"Mapping directory not found: {directory}")

    tables = dict(defaults.tables)
    for path in sorted(directory.glob("*.json")):
        logger.debug(f"Loading mapping override {path}")
        tables[path.stem] = load_mapping_table(path.stem, path)

    return MappingTables.from_tables(list(tables.values()))
