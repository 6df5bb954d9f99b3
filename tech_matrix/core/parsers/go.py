"""Go module manifest parser."""

import re
from typing import Iterable

from .base import BaseParser


class GoParser(BaseParser):
    """Parser for ``go.mod`` files.
    
    Both the single-line form ``require example.com/mod v1.2.3`` and the
    parenthesized ``require ( ... )`` block are recognised. The full module
    path is the identifier.
    """
    
    ecosystem = "go"
    dependency_files = ["go.mod"]
    
    _BLOCK_START = re.compile(r'^require\s*\($')
    _SINGLE_REQUIRE = re.compile(r'^require\s+(\S+)')
    _MODULE_PATH = re.compile(r'^([A-Za-z0-9._~/+-]+)')
    
    def _extract(self, filename: str, content: str) -> Iterable[str]:
        in_require_block = False
        
        for raw_line in content.splitlines():
            line = raw_line.split("//", 1)[0].strip()
            if not line:
                continue
            
            if in_require_block:
                if line.startswith(")"):
                    in_require_block = False
                    continue
                match = self._MODULE_PATH.match(line)
                if match:
                    yield match.group(1)
                continue
            
            if self._BLOCK_START.match(line):
                in_require_block = True
                continue
            
            match = self._SINGLE_REQUIRE.match(line)
            if match and match.group(1) != "(":
                yield match.group(1)
