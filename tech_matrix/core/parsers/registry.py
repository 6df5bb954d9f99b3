"""Plugin registry routing manifest files to parsers."""

from typing import Dict, Iterable, List, Optional, Tuple, Type

from .base import BaseParser, PathLike


class ParserRegistry:
    """Ordered registry of manifest parsers, one per ecosystem.
    
    Routing is first-match in registration order, so the order parsers are
    registered in is the tie-break when two parsers accept the same file.
    """
    
    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[str, BaseParser] = {}
    
    def register(self, ecosystem: str, parser: BaseParser) -> None:
        """Register a parser for an ecosystem.
        
        Re-registering an ecosystem replaces its parser in place.
        
        Args:
            ecosystem: Ecosystem name (e.g., 'python', 'go')
            parser: Parser instance to register
        """
        self._parsers[ecosystem] = parser
    
    def get_parser(self, ecosystem: str) -> Optional[BaseParser]:
        """Get the parser registered for an ecosystem.
        
        Args:
            ecosystem: Ecosystem name
            
        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get(ecosystem)
    
    def find_parser_for_file(self, file_path: PathLike) -> Optional[BaseParser]:
        """Find the first registered parser that accepts the given file.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Parser that can handle the file or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(file_path):
                return parser
        return None
    
    def discover(self, file_list: Iterable[str]) -> List[Tuple[str, BaseParser]]:
        """Select manifest files from a file list.
        
        Args:
            file_list: Repository-relative file paths
            
        Returns:
            (path, parser) pairs for every recognised manifest, in input order
        """
        manifests = []
        for file_path in file_list:
            parser = self.find_parser_for_file(file_path)
            if parser is not None:
                manifests.append((file_path, parser))
        return manifests
    
    def get_supported_ecosystems(self) -> List[str]:
        """Get list of supported ecosystems in registration order."""
        return list(self._parsers.keys())
    
    def get_dependency_file_patterns(self) -> List[str]:
        """Union of every parser's file name rules, registration order kept.
        
        Returns:
            File name rules such as ``package.json`` or ``*.csproj``
        """
        patterns: List[str] = []
        for parser in self._parsers.values():
            for rule in parser.dependency_files:
                if rule not in patterns:
                    patterns.append(rule)
        return patterns
    
    def get_sparse_checkout_patterns(self) -> List[str]:
        """File name rules rewritten as git sparse-checkout patterns.
        
        Glob rules starting with ``*`` already match at any depth. Other
        names are emitted both as ``**/name`` and as the bare ``name``.
        
        Returns:
            Patterns for ``git sparse-checkout set --no-cone``
        """
        patterns: List[str] = []
        for rule in self.get_dependency_file_patterns():
            if rule.startswith("*"):
                patterns.append(rule)
            else:
                patterns.extend([f"**/{rule}", rule])
        return patterns


class ParserDecorator:
    """Class decorator registering a parser with a registry."""
    
    def __init__(self, registry: ParserRegistry, ecosystem: str) -> None:
        """Initialize the decorator.
        
        Args:
            registry: Parser registry instance
            ecosystem: Ecosystem name
        """
        self.registry = registry
        self.ecosystem = ecosystem
    
    def __call__(self, parser_class: Type[BaseParser]) -> Type[BaseParser]:
        """Instantiate and register the parser class.
        
        Args:
            parser_class: Parser class to register
            
        Returns:
            The original parser class
        """
        self.registry.register(self.ecosystem, parser_class())
        return parser_class


def register_parser(ecosystem: str, registry: Optional[ParserRegistry] = None) -> ParserDecorator:
    """Decorator factory for registering plugin parsers.
    
    Args:
        ecosystem: Ecosystem name
        registry: Parser registry instance (uses global registry if None)
        
    Returns:
        Decorator function
    """
    if registry is None:
        from . import registry as global_registry
        registry = global_registry
    
    return ParserDecorator(registry, ecosystem)
