"""Rust crate manifest parser."""

import re
from typing import Iterable, Optional

from .base import BaseParser


class RustParser(BaseParser):
    """Parser for ``Cargo.toml``.
    
    The manifest is scanned line by line rather than decoded as TOML so that
    a half-edited manifest in an old commit still yields its crate names.
    """
    
    ecosystem = "rust"
    dependency_files = ["Cargo.toml"]
    
    DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")
    
    _TABLE_HEADER = re.compile(r'^\[([^\[\]]+)\]\s*(?:#.*)?$')
    # serde = "1" and dotted forms such as serde.workspace = true
    _KEY = re.compile(r'^([A-Za-z0-9_-]+)\s*(?:\.\s*[A-Za-z0-9_-]+\s*)*=')
    
    def _extract(self, filename: str, content: str) -> Iterable[str]:
        in_dependency_table = False
        
        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            
            header = self._TABLE_HEADER.match(line)
            if header:
                table = header.group(1).strip()
                in_dependency_table = self._is_dependency_table(table)
                crate = self._crate_table_name(table)
                if crate:
                    yield crate
                continue
            
            if line.startswith("[["):
                in_dependency_table = False
                continue
            
            if in_dependency_table:
                match = self._KEY.match(line)
                if match:
                    yield match.group(1)
    
    def _is_dependency_table(self, table: str) -> bool:
        # [dependencies], [workspace.dependencies], [target.'cfg(unix)'.dependencies]
        last = table.rsplit(".", 1)[-1]
        return table in self.DEPENDENCY_TABLES or (
            "." in table and last in self.DEPENDENCY_TABLES
        )
    
    def _crate_table_name(self, table: str) -> Optional[str]:
        """Crate named by a ``[dependencies.serde]`` style header, if any."""
        for section in self.DEPENDENCY_TABLES:
            prefix = section + "."
            if table.startswith(prefix):
                return table[len(prefix):].strip().strip('"')
        return None
