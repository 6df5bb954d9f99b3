"""Java manifest parsers for Maven and Gradle."""

import re
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional

from .base import BaseParser


def _local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """Text of the first direct child with the given local name."""
    for child in element:
        if _local_name(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


class JavaParser(BaseParser):
    """Parser for ``pom.xml``, Gradle build scripts and Gradle version catalogs.

    Identifiers have the form ``groupId:artifactId``.
    """

    ecosystem = "java"
    dependency_files = [
        "pom.xml",
        "build.gradle",
        "build.gradle.kts",
        "libs.versions.toml",
    ]

    _GRADLE_COORDINATE = re.compile(r'''['"]([a-zA-Z0-9_.-]+:[a-zA-Z0-9_.-]+)''')
    _CATALOG_MODULE = re.compile(r'''module\s*=\s*["']([^"':]+:[^"':]+)["']''')
    _CATALOG_GROUP_NAME = re.compile(
        r'''group\s*=\s*["']([^"']+)["']\s*,\s*name\s*=\s*["']([^"']+)["']'''
    )

    def _extract(self, filename: str, content: str) -> Iterable[str]:
        if filename == "pom.xml":
            return self._extract_pom(content)
        if filename == "libs.versions.toml":
            return self._extract_version_catalog(content)
        return self._GRADLE_COORDINATE.findall(content)

    def _extract_pom(self, content: str) -> List[str]:
        """Extract coordinates from a Maven POM.

        Each ``<dependency>`` element is read on its own, so the parent POM,
        plugin and project coordinates never pair up with a dependency's.

        Args:
            content: POM XML text

        Returns:
            ``groupId:artifactId`` identifiers
        """
        root = ET.fromstring(content)
        coordinates = []

        for element in root.iter():
            if _local_name(element.tag) != "dependency":
                continue
            group_id = _child_text(element, "groupId")
            artifact_id = _child_text(element, "artifactId")
            if group_id and artifact_id:
                coordinates.append(f"{group_id}:{artifact_id}")

        return coordinates

    def _extract_version_catalog(self, content: str) -> List[str]:
        coordinates = self._CATALOG_MODULE.findall(content)
        coordinates.extend(
            f"{group}:{name}" for group, name in self._CATALOG_GROUP_NAME.findall(content)
        )
        return coordinates
