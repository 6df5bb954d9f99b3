"""C and C++ manifest parser."""

import json
import re
from typing import Iterable, List

from .base import BaseParser


class CppParser(BaseParser):
    """Parser for CMake, Conan and vcpkg manifests."""

    ecosystem = "cpp"
    dependency_files = [
        "CMakeLists.txt",
        "conanfile.txt",
        "conanfile.py",
        "vcpkg.json",
    ]

    _FIND_PACKAGE = re.compile(r'find_package\s*\(\s*([a-zA-Z0-9_]+)')
    _CONAN_QUOTED = re.compile(r'''["']([a-zA-Z0-9_.+-]+)/''')
    _CONAN_REFERENCE = re.compile(r'^([a-zA-Z0-9_.+-]+)/')
    CONAN_REQUIREMENT_SECTIONS = ("[requires]", "[tool_requires]", "[build_requires]")

    def _extract(self, filename: str, content: str) -> Iterable[str]:
        if filename == "CMakeLists.txt":
            return self._FIND_PACKAGE.findall(content)
        if filename == "vcpkg.json":
            return self._extract_vcpkg(content)
        if filename == "conanfile.txt":
            return self._extract_conanfile_txt(content)
        return self._CONAN_QUOTED.findall(content)

    def _extract_vcpkg(self, content: str) -> List[str]:
        data = json.loads(content)
        dependencies = data.get("dependencies", []) if isinstance(data, dict) else []
        if not isinstance(dependencies, list):
            return []

        names = []
        for entry in dependencies:
            if isinstance(entry, str):
                names.append(entry)
            elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
                names.append(entry["name"])
        return names

    def _extract_conanfile_txt(self, content: str) -> List[str]:
        """Extract references from a ``conanfile.txt``.

        Args:
            content: File content

        Returns:
            Package names from quoted references and requirement sections
        """
        names = list(self._CONAN_QUOTED.findall(content))
        in_requirements = False

        for raw_line in content.splitlines():
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue
            if line.startswith("["):
                in_requirements = line in self.CONAN_REQUIREMENT_SECTIONS
                continue
            if in_requirements:
                match = self._CONAN_REFERENCE.match(line)
                if match:
                    names.append(match.group(1))

        return names
