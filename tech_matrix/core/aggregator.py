"""Diffing and aggregation of dependencies into technology records."""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, TypeVar

from .matcher import OTHER_CATEGORY
from .parsers import Dependency

T = TypeVar("T")

# Radar stages in display order. Only adopt and remove are computed.
RADAR_STAGES = ("assess", "trial", "adopt", "hold", "remove")


@dataclass
class TechnologyItem:
    """A technology with the raw identifiers that resolved to it."""

    name: str
    category: str
    dependencies: Set[str] = field(default_factory=set)
    removed_dependencies: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with sorted identifier lists."""
        data: Dict[str, Any] = {
            "name": self.name,
            "category": self.category,
            "dependencies": sorted(self.dependencies),
        }
        if self.removed_dependencies:
            data["removedDependencies"] = sorted(self.removed_dependencies)
        return data


@dataclass
class AnalysisResult:
    """Technologies currently in use (adopt) and no longer in use (remove)."""

    adopt: List[TechnologyItem] = field(default_factory=list)
    remove: List[TechnologyItem] = field(default_factory=list)
    branch: Optional[str] = None
    files_analyzed: int = 0
    snapshots_analyzed: int = 0
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize as radar stages, unpopulated stages left empty."""
        data: Dict[str, Any] = {stage: [] for stage in RADAR_STAGES}
        data["adopt"] = [item.to_dict() for item in self.adopt]
        data["remove"] = [item.to_dict() for item in self.remove]
        if self.branch:
            data["branch"] = self.branch
        return data


def removed_dependencies(current: Iterable[T], historical: Iterable[T]) -> Set[T]:
    """Identifiers seen in some past revision but absent now.

    Args:
        current: Identifiers of the current revision
        historical: Union of identifiers over all past revisions

    Returns:
        ``historical - current``
    """
    return set(historical) - set(current)


def sort_key(item: TechnologyItem) -> Tuple[bool, str, str]:
    """Order items by category then name, with ``"Other"`` last."""
    return (item.category == OTHER_CATEGORY, item.category, item.name)


def aggregate(
    dependencies: Iterable[Dependency],
    resolve: Callable[[Dependency], str],
    categorize: Callable[[str], str]
) -> List[TechnologyItem]:
    """Group dependencies by resolved technology.

    Args:
        dependencies: Dependencies to group
        resolve: Maps a dependency to its technology name
        categorize: Maps a technology name to its category

    Returns:
        One item per technology, sorted by category then name with
        ``"Other"`` last
    """
    grouped: Dict[str, Set[str]] = {}
    for dependency in dependencies:
        grouped.setdefault(resolve(dependency), set()).add(dependency.name)

    items = [
        TechnologyItem(name=name, category=categorize(name), dependencies=names)
        for name, names in grouped.items()
    ]
    return sorted(items, key=sort_key)


def reconcile(
    adopt: List[TechnologyItem],
    remove: List[TechnologyItem]
) -> Tuple[List[TechnologyItem], List[TechnologyItem]]:
    """Fold removed identifiers of still-used technologies into their adopt item.

    A technology never ends up in both lists: when some of its identifiers
    are gone but others remain, the gone ones become the adopt item's
    ``removed_dependencies``. The inputs are not modified.

    Args:
        adopt: Items built from current dependencies
        remove: Items built from removed dependencies

    Returns:
        (adopt, remove) after folding
    """
    merged = [replace(item, dependencies=set(item.dependencies),
                      removed_dependencies=set(item.removed_dependencies))
              for item in adopt]
    by_name = {item.name: item for item in merged}

    standalone = []
    for item in remove:
        target = by_name.get(item.name)
        if target is None:
            standalone.append(replace(item, dependencies=set(item.dependencies)))
        else:
            target.removed_dependencies.update(item.dependencies)

    return merged, standalone
