"""Tests for dependency diffing and technology aggregation."""

import pytest

from tech_matrix.core.aggregator import (
    RADAR_STAGES,
    AnalysisResult,
    TechnologyItem,
    aggregate,
    reconcile,
    removed_dependencies,
)
from tech_matrix.core.matcher import OTHER_CATEGORY
from tech_matrix.core.parsers import Dependency

TECHNOLOGIES = {
    "react": "React",
    "react-dom": "React",
    "express": "Express",
    "zod": "Zod",
}

CATEGORIES = {
    "React": "Frontend Frameworks",
    "Express": "Backend Frameworks",
    "Zod": "Validation",
}


def resolve(dependency):
    return TECHNOLOGIES.get(dependency.name, dependency.name)


def categorize(technology):
    return CATEGORIES.get(technology, OTHER_CATEGORY)


def deps(*names, ecosystem="javascript"):
    return [Dependency(name=name, ecosystem=ecosystem) for name in names]


class TestRemovedDependencies:
    """Test the historical minus current difference."""

    def test_difference(self):
        """Test only identifiers absent now are reported."""
        current = set(deps("react", "express"))
        historical = set(deps("react", "jquery", "express", "moment"))

        assert removed_dependencies(current, historical) == set(deps("jquery", "moment"))

    def test_nothing_removed(self):
        """Test identical sets and empty history."""
        current = set(deps("react"))
        assert removed_dependencies(current, current) == set()
        assert removed_dependencies(current, set()) == set()

    def test_ecosystem_is_part_of_identity(self):
        """Test a name moving between ecosystems counts as removed in the old one."""
        current = set(deps("redis", ecosystem="rust"))
        historical = set(deps("redis", ecosystem="python"))

        assert removed_dependencies(current, historical) == historical


class TestAggregate:
    """Test grouping by technology."""

    def test_groups_and_sorts(self):
        """Test grouping, category then name order, Other last."""
        items = aggregate(deps("zod", "left-pad", "react-dom", "express", "react"), resolve, categorize)

        assert [(item.category, item.name) for item in items] == [
            ("Backend Frameworks", "Express"),
            ("Frontend Frameworks", "React"),
            ("Validation", "Zod"),
            (OTHER_CATEGORY, "left-pad"),
        ]
        assert items[1].dependencies == {"react", "react-dom"}

    def test_other_sorted_last_regardless_of_spelling(self):
        """Test Other follows categories that sort after it alphabetically."""
        items = aggregate(deps("left-pad", "zod"), resolve, lambda tech: "Zzz" if tech == "Zod" else OTHER_CATEGORY)

        assert [item.category for item in items] == ["Zzz", OTHER_CATEGORY]

    def test_order_independent_and_repeatable(self):
        """Test the same input in any order gives the same output."""
        first = aggregate(deps("react", "express", "left-pad"), resolve, categorize)
        second = aggregate(deps("left-pad", "express", "react"), resolve, categorize)

        assert [item.to_dict() for item in first] == [item.to_dict() for item in second]

    def test_empty_input(self):
        """Test no dependencies gives no items."""
        assert aggregate([], resolve, categorize) == []


class TestReconcile:
    """Test folding removed identifiers into adopt items."""

    def test_partially_removed_technology(self):
        """Test a technology still in use absorbs its removed identifiers."""
        adopt = aggregate(deps("react"), resolve, categorize)
        remove = aggregate(deps("react-dom", "jquery"), resolve, categorize)

        new_adopt, new_remove = reconcile(adopt, remove)

        assert [item.name for item in new_adopt] == ["React"]
        assert new_adopt[0].dependencies == {"react"}
        assert new_adopt[0].removed_dependencies == {"react-dom"}
        assert [item.name for item in new_remove] == ["jquery"]

    def test_no_technology_in_both(self):
        """Test adopt and remove never share a technology name."""
        adopt = aggregate(deps("react", "express"), resolve, categorize)
        remove = aggregate(deps("react-dom", "express", "moment"), resolve, categorize)

        new_adopt, new_remove = reconcile(adopt, remove)

        assert not {item.name for item in new_adopt} & {item.name for item in new_remove}

    def test_inputs_not_modified(self):
        """Test reconcile returns copies."""
        adopt = aggregate(deps("react"), resolve, categorize)
        remove = aggregate(deps("react-dom"), resolve, categorize)

        reconcile(adopt, remove)

        assert adopt[0].removed_dependencies == set()
        assert len(remove) == 1


class TestSerialization:
    """Test dictionary output."""

    def test_item_without_removed_dependencies(self):
        """Test removedDependencies is omitted when empty."""
        item = TechnologyItem(name="React", category="Frontend Frameworks", dependencies={"react-dom", "react"})

        assert item.to_dict() == {
            "name": "React",
            "category": "Frontend Frameworks",
            "dependencies": ["react", "react-dom"],
        }

    def test_item_with_removed_dependencies(self):
        """Test removed identifiers are listed sorted."""
        item = TechnologyItem(
            name="React",
            category="Frontend Frameworks",
            dependencies={"react"},
            removed_dependencies={"react-is", "react-dom"},
        )

        assert item.to_dict()["removedDependencies"] == ["react-dom", "react-is"]

    @pytest.mark.parametrize("branch", [None, "main"])
    def test_result_stages(self, branch):
        """Test every radar stage is present and only adopt and remove are filled."""
        result = AnalysisResult(
            adopt=[TechnologyItem(name="React", category="Frontend Frameworks", dependencies={"react"})],
            remove=[TechnologyItem(name="jQuery", category="Other", dependencies={"jquery"})],
            branch=branch,
        )

        data = result.to_dict()

        for stage in RADAR_STAGES:
            assert stage in data
        assert data["assess"] == data["trial"] == data["hold"] == []
        assert data["adopt"][0]["name"] == "React"
        assert data["remove"][0]["dependencies"] == ["jquery"]
        assert data.get("branch") == branch
