"""JavaScript module parser using tree-sitter."""

import tree_sitter_javascript as ts_javascript
from tree_sitter import Language

from no_barrel_file.core import SourceLanguage
from no_barrel_file.parsers.base import ModuleParser


class JavaScriptParser(ModuleParser):
    """
    Parser for JavaScript modules, JSX included.

    Extracts import statements, export declarations and star re-exports
    using tree-sitter-javascript.
    """

    @property
    def language(self) -> SourceLanguage:
        return SourceLanguage.JAVASCRIPT

    @property
    def file_extensions(self) -> frozenset[str]:
        return frozenset({".js", ".jsx", ".mjs", ".cjs"})

    def _create_language(self) -> Language:
        return Language(ts_javascript.language())
