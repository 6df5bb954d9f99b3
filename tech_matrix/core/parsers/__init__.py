"""Manifest parsers for the supported ecosystems."""

from .base import BaseParser, Dependency, ParsedDependencies
from .cpp import CppParser
from .csharp import CSharpParser
from .go import GoParser
from .java import JavaParser
from .javascript import JavaScriptParser
from .python import PythonParser
from .registry import ParserRegistry, register_parser
from .rust import RustParser


def create_default_registry() -> ParserRegistry:
    """Build a registry holding the built-in parsers in routing order."""
    default = ParserRegistry()
    default.register("javascript", JavaScriptParser())
    default.register("python", PythonParser())
    default.register("java", JavaParser())
    default.register("cpp", CppParser())
    default.register("go", GoParser())
    default.register("rust", RustParser())
    default.register("csharp", CSharpParser())
    return default


registry = create_default_registry()

# Convenience exports
ManifestRegistry = registry
__all__ = [
    "BaseParser",
    "Dependency",
    "ParsedDependencies",
    "ManifestRegistry",
    "ParserRegistry",
    "create_default_registry",
    "register_parser",
    "registry",
    "CppParser",
    "CSharpParser",
    "GoParser",
    "JavaParser",
    "JavaScriptParser",
    "PythonParser",
    "RustParser",
]
