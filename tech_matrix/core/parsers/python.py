"""Python manifest parser."""

import re
import tomllib
from typing import Any, Dict, Iterable, List, Optional

from packaging.requirements import InvalidRequirement, Requirement

from .base import BaseParser


class PythonParser(BaseParser):
    """Parser for Python dependency files.

    Handles requirements files, ``setup.py``, ``pyproject.toml`` and
    ``Pipfile``. Names are reported as written, without PEP 503
    normalization, so that mapping patterns see the manifest's spelling.
    """

    ecosystem = "python"
    dependency_files = [
        "requirements.txt",
        "requirements-*.txt",
        "setup.py",
        "pyproject.toml",
        "Pipfile",
    ]

    _NAME = re.compile(r'^\s*([A-Za-z0-9][A-Za-z0-9._-]*)')
    _EGG = re.compile(r'#egg=([A-Za-z0-9][A-Za-z0-9._-]*)')
    _INSTALL_REQUIRES = re.compile(r'install_requires\s*=\s*\[(.*?)\]', re.DOTALL)
    _DEPENDENCIES_LIST = re.compile(r'dependencies\s*=\s*\[(.*?)\]', re.DOTALL)
    _QUOTED = re.compile(r'''['"]([^'"]+)['"]''')
    _INLINE_COMMENT = re.compile(r'\s+#.*$')

    def _extract(self, filename: str, content: str) -> Iterable[str]:
        if filename == "setup.py":
            return self._extract_setup_py(content)
        if filename == "pyproject.toml":
            return self._extract_pyproject(content)
        if filename == "Pipfile":
            return self._extract_pipfile(content)
        return self._extract_requirements(content)

    def _extract_requirements(self, content: str) -> List[str]:
        """Extract names from a requirements file.

        Args:
            content: Requirements file content

        Returns:
            Requirement names in file order
        """
        names = []

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("-"):
                # editable installs carry their name in the egg fragment
                if line.startswith(("-e", "--editable")):
                    egg = self._EGG.search(line)
                    if egg:
                        names.append(egg.group(1))
                continue

            name = self.requirement_name(self._INLINE_COMMENT.sub("", line))
            if name:
                names.append(name)

        return names

    def requirement_name(self, requirement: str) -> Optional[str]:
        """Get the distribution name from a PEP 508 requirement string.

        Args:
            requirement: Requirement such as ``django>=3.2`` or ``uvicorn[standard]``

        Returns:
            Distribution name, or None if the string names nothing
        """
        requirement = requirement.strip()
        try:
            return Requirement(requirement).name
        except InvalidRequirement:
            # bare URLs and local paths name a project only through #egg=
            if "://" in requirement or requirement.startswith((".", "/")):
                egg = self._EGG.search(requirement)
                return egg.group(1) if egg else None
            # pip options such as --hash make otherwise valid lines fail
            match = self._NAME.match(requirement)
            return match.group(1) if match else None

    def _extract_setup_py(self, content: str) -> List[str]:
        match = self._INSTALL_REQUIRES.search(content)
        if not match:
            return []
        return self._names_from_literal(match.group(1))

    def _names_from_literal(self, literal: str) -> List[str]:
        names = []
        for quoted in self._QUOTED.findall(literal):
            name = self.requirement_name(quoted)
            if name:
                names.append(name)
        return names

    def _extract_pyproject(self, content: str) -> List[str]:
        """Extract names from ``pyproject.toml``.

        PEP 621 tables and Poetry tables are read structurally. If the file
        is not valid TOML, quoted names inside the first ``dependencies``
        array are taken instead.

        Args:
            content: pyproject.toml content

        Returns:
            Dependency names
        """
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError:
            match = self._DEPENDENCIES_LIST.search(content)
            return self._names_from_literal(match.group(1)) if match else []

        names: List[str] = []

        project = data.get("project", {})
        if isinstance(project, dict):
            names.extend(self._requirement_names(project.get("dependencies")))
            optional = project.get("optional-dependencies")
            if isinstance(optional, dict):
                for group in optional.values():
                    names.extend(self._requirement_names(group))

        tool = data.get("tool", {})
        poetry = tool.get("poetry", {}) if isinstance(tool, dict) else {}
        if isinstance(poetry, dict):
            names.extend(self._poetry_names(poetry.get("dependencies")))
            names.extend(self._poetry_names(poetry.get("dev-dependencies")))
            groups = poetry.get("group")
            if isinstance(groups, dict):
                for group in groups.values():
                    if isinstance(group, dict):
                        names.extend(self._poetry_names(group.get("dependencies")))

        return names

    def _requirement_names(self, requirements: Any) -> List[str]:
        if not isinstance(requirements, list):
            return []
        names = []
        for requirement in requirements:
            if isinstance(requirement, str):
                name = self.requirement_name(requirement)
                if name:
                    names.append(name)
        return names

    @staticmethod
    def _poetry_names(table: Any) -> List[str]:
        if not isinstance(table, dict):
            return []
        return [name for name in table if name.lower() != "python"]

    def _extract_pipfile(self, content: str) -> List[str]:
        data: Dict[str, Any] = tomllib.loads(content)
        names = []
        for section in ("packages", "dev-packages"):
            table = data.get(section)
            if isinstance(table, dict):
                names.extend(table.keys())
        return names
