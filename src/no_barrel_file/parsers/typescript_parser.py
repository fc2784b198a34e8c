"""TypeScript module parsers using tree-sitter."""

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language

from no_barrel_file.core import SourceLanguage
from no_barrel_file.parsers.base import ModuleParser


class TypeScriptParser(ModuleParser):
    """
    Parser for TypeScript modules.

    Understands type-only imports and exports (`import type`, `export type`,
    and per-specifier `type` markers) on top of the ECMAScript forms.
    """

    @property
    def language(self) -> SourceLanguage:
        return SourceLanguage.TYPESCRIPT

    @property
    def file_extensions(self) -> frozenset[str]:
        return frozenset({".ts", ".mts", ".cts"})

    def _create_language(self) -> Language:
        return Language(ts_typescript.language_typescript())


class TsxParser(TypeScriptParser):
    """Parser for TypeScript modules containing JSX."""

    @property
    def language(self) -> SourceLanguage:
        return SourceLanguage.TSX

    @property
    def file_extensions(self) -> frozenset[str]:
        return frozenset({".tsx"})

    def _create_language(self) -> Language:
        return Language(ts_typescript.language_tsx())
