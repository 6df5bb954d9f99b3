"""JavaScript and TypeScript manifest parser."""

import json
from typing import Iterable

from .base import BaseParser


class JavaScriptParser(BaseParser):
    """Parser for npm ``package.json`` manifests."""
    
    ecosystem = "javascript"
    dependency_files = ["package.json"]
    
    DEPENDENCY_SECTIONS = [
        "dependencies",
        "devDependencies",
        "peerDependencies",
        "optionalDependencies",
    ]
    
    # type declaration stubs say nothing about the technology stack
    EXCLUDED_PREFIXES = ("@types/",)
    
    def _extract(self, filename: str, content: str) -> Iterable[str]:
        data = json.loads(content)
        if not isinstance(data, dict):
            return
        
        for section_name in self.DEPENDENCY_SECTIONS:
            section = data.get(section_name)
            if not isinstance(section, dict):
                continue
            for name in section:
                if not name.startswith(self.EXCLUDED_PREFIXES):
                    yield name
