"""Module parsers using tree-sitter for AST analysis."""

from no_barrel_file.parsers.base import ModuleParser
from no_barrel_file.parsers.registry import ParserRegistry, get_parser_registry

__all__ = [
    "ModuleParser",
    "ParserRegistry",
    "get_parser_registry",
]
