"""C# / .NET manifest parser."""

import re
from typing import Iterable

from .base import BaseParser


class CSharpParser(BaseParser):
    """Parser for NuGet references in project files and ``packages.config``."""

    ecosystem = "csharp"
    dependency_files = [
        "*.csproj",
        "*.fsproj",
        "*.vbproj",
        "packages.config",
        "Directory.Packages.props",
    ]

    # regexes instead of an XML parse: old project files are often not well formed
    _PACKAGE_REFERENCE = re.compile(r'<PackageReference\s+Include="([^"]+)"', re.IGNORECASE)
    _PACKAGE_VERSION = re.compile(r'<PackageVersion\s+Include="([^"]+)"', re.IGNORECASE)
    _PACKAGES_CONFIG = re.compile(r'<package\s+id="([^"]+)"', re.IGNORECASE)

    def _extract(self, filename: str, content: str) -> Iterable[str]:
        if filename == "packages.config":
            return self._PACKAGES_CONFIG.findall(content)
        if filename == "Directory.Packages.props":
            return self._PACKAGE_VERSION.findall(content)
        return self._PACKAGE_REFERENCE.findall(content)
