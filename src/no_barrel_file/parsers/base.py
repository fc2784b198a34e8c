"""Base parser abstraction for ECMAScript-family module parsers."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from tree_sitter import Language, Node, Parser

from no_barrel_file.core import (
    ExportDeclaration,
    ExportKind,
    ImportSpecifier,
    ImportStatement,
    ParsedModule,
    SourceLanguage,
)

# Top-level declarations and the kind of binding each one introduces
DECLARATION_KINDS: dict[str, ExportKind] = {
    "lexical_declaration": ExportKind.VALUE,
    "variable_declaration": ExportKind.VALUE,
    "function_declaration": ExportKind.VALUE,
    "generator_function_declaration": ExportKind.VALUE,
    "function_signature": ExportKind.VALUE,
    "class_declaration": ExportKind.VALUE,
    "abstract_class_declaration": ExportKind.VALUE,
    "enum_declaration": ExportKind.VALUE,
    "internal_module": ExportKind.VALUE,
    "module": ExportKind.VALUE,
    # TypeScript lets a plain import name these, so they stay ambiguous
    "interface_declaration": ExportKind.VALUE_OR_TYPE,
    "type_alias_declaration": ExportKind.VALUE_OR_TYPE,
}

_MODULE_KEYWORD_RX = re.compile(r"\b(?:export|import)\b")


@dataclass(slots=True)
class _ImportedBinding:
    source: str
    imported_name: str | None  # None for namespace imports
    is_type_only: bool


@dataclass(slots=True)
class _PendingExport:
    """`export { local as exported }` without a source, decided after the scan."""

    local_name: str
    exported_name: str
    is_type_only: bool
    start_line: int | None


class ModuleParser(ABC):
    """
    Abstract base class for module parsers.

    Each implementation supplies a tree-sitter grammar; the traversal of
    import and export statements is shared because the JavaScript,
    TypeScript and TSX grammars use the same node types for them.
    """

    def __init__(self) -> None:
        self._parser = Parser(self._create_language())

    @property
    @abstractmethod
    def language(self) -> SourceLanguage:
        """The source language this parser handles."""
        ...

    @property
    @abstractmethod
    def file_extensions(self) -> frozenset[str]:
        """File extensions this parser can handle (e.g., {'.ts'})."""
        ...

    @abstractmethod
    def _create_language(self) -> Language:
        """Build the tree-sitter language object."""
        ...

    def parse(self, source_code: str, module_id: str) -> ParsedModule:
        """
        Parse a module's import and export statements.

        Args:
            source_code: The raw source code content.
            module_id: Identifier of the module, echoed into the result.

        Returns:
            ParsedModule with export declarations, star re-exports, import
            statements and any syntax errors found in them.
        """
        source_bytes = source_code.encode("utf-8")
        tree = self._parser.parse(source_bytes)

        ctx = ModuleScanContext(module_id, source_bytes)
        for child in tree.root_node.children:
            self._process_top_level(child, ctx)

        return ctx.to_parsed_module()

    def _process_top_level(self, node: Node, ctx: "ModuleScanContext") -> None:
        match node.type:
            case "import_statement":
                self._check_errors(node, ctx, "import")
                self._process_import(node, ctx)
            case "export_statement":
                self._check_errors(node, ctx, "export")
                self._process_export(node, ctx)
            case "ERROR":
                self._check_keyword_errors(node, ctx)
            case "expression_statement":
                self._check_keyword_errors(node, ctx)
                # `namespace Foo {}` parses as an expression statement
                for child in node.named_children:
                    if child.type in DECLARATION_KINDS:
                        self._process_declaration(child, ctx)
            case _ if node.type in DECLARATION_KINDS or node.type == "ambient_declaration":
                self._process_declaration(node, ctx)
            case _:
                self._check_keyword_errors(node, ctx)

    def _check_keyword_errors(self, node: Node, ctx: "ModuleScanContext") -> None:
        """Report broken nodes that swallowed an import or export keyword."""
        if not node.has_error:
            return
        text = self._get_node_text(node, ctx.source_bytes)
        if _MODULE_KEYWORD_RX.search(text):
            line, _ = self._extract_start(node)
            ctx.add_error(f"line {line}: malformed statement {text.strip()[:60]!r}")

    def _check_errors(self, node: Node, ctx: "ModuleScanContext", keyword: str) -> None:
        if node.has_error:
            line, _ = self._extract_start(node)
            text = self._get_node_text(node, ctx.source_bytes).strip()
            ctx.add_error(f"line {line}: malformed {keyword} statement {text[:60]!r}")

    def _process_declaration(self, node: Node, ctx: "ModuleScanContext") -> list[str]:
        """Record the names a declaration binds and return them."""
        if node.type == "ambient_declaration":
            names: list[str] = []
            for child in node.named_children:
                if child.type in DECLARATION_KINDS:
                    names.extend(self._process_declaration(child, ctx))
            return names

        kind = DECLARATION_KINDS.get(node.type)
        if kind is None:
            return []

        names = self._declared_names(node, ctx.source_bytes)
        for name in names:
            ctx.declare_local(name, kind)
        return names

    def _declared_names(self, node: Node, source_bytes: bytes) -> list[str]:
        if node.type in ("lexical_declaration", "variable_declaration"):
            names: list[str] = []
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node:
                    names.extend(self._binding_names(name_node, source_bytes))
            return names

        name_node = node.child_by_field_name("name")
        if not name_node or name_node.type == "string":
            # `declare module "x"` does not bind a name
            return []
        # `namespace A.B {}` binds A
        return [self._get_node_text(name_node, source_bytes).split(".")[0]]

    def _binding_names(self, node: Node, source_bytes: bytes) -> list[str]:
        """Names bound by an identifier or destructuring pattern."""
        match node.type:
            case "identifier" | "shorthand_property_identifier_pattern":
                return [self._get_node_text(node, source_bytes)]
            case "pair_pattern":
                value = node.child_by_field_name("value")
                return self._binding_names(value, source_bytes) if value else []
            case "assignment_pattern" | "object_assignment_pattern":
                left = node.child_by_field_name("left")
                return self._binding_names(left, source_bytes) if left else []
            case "object_pattern" | "array_pattern" | "rest_pattern":
                names: list[str] = []
                for child in node.named_children:
                    names.extend(self._binding_names(child, source_bytes))
                return names
            case _:
                return []

    def _process_import(self, node: Node, ctx: "ModuleScanContext") -> None:
        source_node = node.child_by_field_name("source")
        if not source_node:
            # `import x = require("y")`
            return

        raw_source = self._get_node_text(source_node, ctx.source_bytes)
        source = _unquote(raw_source)
        statement_type_only = any(child.type == "type" for child in node.children)

        default_name: str | None = None
        namespace_name: str | None = None
        specifiers: list[ImportSpecifier] = []

        for child in node.children:
            if child.type != "import_clause":
                continue
            for part in child.children:
                match part.type:
                    case "identifier":
                        default_name = self._get_node_text(part, ctx.source_bytes)
                    case "namespace_import":
                        for sub in part.named_children:
                            if sub.type == "identifier":
                                namespace_name = self._get_node_text(sub, ctx.source_bytes)
                    case "named_imports":
                        specifiers.extend(self._import_specifiers(part, ctx.source_bytes))

        start_line, _ = self._extract_start(node)
        statement = ImportStatement(
            source=source,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            quote=raw_source[:1] if raw_source[:1] in ("'", '"') else '"',
            has_semicolon=bool(node.children) and node.children[-1].type == ";",
            is_type_only=statement_type_only,
            default_name=default_name,
            namespace_name=namespace_name,
            specifiers=tuple(specifiers),
            start_line=start_line,
        )
        ctx.add_import(statement)

    def _import_specifiers(self, node: Node, source_bytes: bytes) -> list[ImportSpecifier]:
        specifiers: list[ImportSpecifier] = []
        for spec in node.named_children:
            if spec.type != "import_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            if not name_node:
                continue
            alias_node = spec.child_by_field_name("alias")
            specifiers.append(
                ImportSpecifier(
                    name=_unquote(self._get_node_text(name_node, source_bytes)),
                    alias=self._get_node_text(alias_node, source_bytes) if alias_node else None,
                    is_type_only=any(child.type == "type" for child in spec.children),
                )
            )
        return specifiers

    def _process_export(self, node: Node, ctx: "ModuleScanContext") -> None:
        source_node = node.child_by_field_name("source")
        source = _unquote(self._get_node_text(source_node, ctx.source_bytes)) if source_node else None
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")
        child_types = [child.type for child in node.children]
        is_default = "default" in child_types
        is_type_only = "type" in child_types
        start_line, _ = self._extract_start(node)

        if declaration is not None:
            names = self._process_declaration(declaration, ctx)
            kind = DECLARATION_KINDS.get(declaration.type, ExportKind.VALUE)
            if declaration.type == "ambient_declaration":
                kind = ctx.local_kind(names[0]) if names else ExportKind.VALUE
            if is_default:
                local = names[0] if names else "default"
                ctx.add_export(ExportDeclaration(local, "default", kind, start_line=start_line))
            else:
                for name in names:
                    ctx.add_export(ExportDeclaration(name, name, kind, start_line=start_line))
            return

        if is_default:
            if value is not None and value.type == "identifier":
                name = self._get_node_text(value, ctx.source_bytes)
                ctx.add_pending(_PendingExport(name, "default", False, start_line))
            else:
                ctx.add_export(
                    ExportDeclaration("default", "default", ExportKind.VALUE, start_line=start_line)
                )
            return

        for child in node.children:
            match child.type:
                case "namespace_export" if source:
                    # `export * as ns from "x"` creates the namespace object here
                    names = [
                        _unquote(self._get_node_text(sub, ctx.source_bytes))
                        for sub in child.named_children
                    ]
                    if names:
                        ctx.add_export(
                            ExportDeclaration(names[-1], names[-1], ExportKind.VALUE, start_line=start_line)
                        )
                    return
                case "export_clause":
                    self._process_export_clause(child, source, is_type_only, start_line, ctx)
                    return

        if source and "*" in child_types:
            ctx.add_star_source(source)

    def _process_export_clause(
        self,
        node: Node,
        source: str | None,
        is_type_only: bool,
        start_line: int | None,
        ctx: "ModuleScanContext",
    ) -> None:
        for spec in node.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            if not name_node:
                continue
            alias_node = spec.child_by_field_name("alias")
            name = _unquote(self._get_node_text(name_node, ctx.source_bytes))
            exported = (
                _unquote(self._get_node_text(alias_node, ctx.source_bytes)) if alias_node else name
            )
            type_only = is_type_only or any(child.type == "type" for child in spec.children)

            if source:
                kind = ExportKind.TYPE if type_only else ExportKind.VALUE_OR_TYPE
                ctx.add_export(
                    ExportDeclaration(name, exported, kind, source=source, start_line=start_line)
                )
            else:
                ctx.add_pending(_PendingExport(name, exported, type_only, start_line))

    def _get_node_text(self, node: Node, source_bytes: bytes) -> str:
        """Extract text from node."""
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _extract_start(self, node: Node) -> tuple[int, int]:
        """
        Start position of a node.

        Returns (line, column); lines are 1-indexed, columns 0-indexed
        (tree-sitter convention).
        """
        row, column = node.start_point
        return row + 1, column


class ModuleScanContext:
    """
    Context object passed during parsing to accumulate results.

    Local `export { a }` specifiers are kept pending until the whole module
    is scanned, since a binding may be declared or imported after the
    export statement that names it.
    """

    def __init__(self, module_id: str, source_bytes: bytes) -> None:
        self.module_id = module_id
        self.source_bytes = source_bytes
        self.imports: list[ImportStatement] = []
        self.star_sources: list[str] = []
        self.errors: list[str] = []
        self._exports: list[ExportDeclaration | _PendingExport] = []
        self._local_kinds: dict[str, ExportKind] = {}
        self._imported: dict[str, _ImportedBinding] = {}

    def declare_local(self, name: str, kind: ExportKind) -> None:
        # `interface Foo` merged with `const Foo` is still a value
        if self._local_kinds.get(name) == ExportKind.VALUE:
            return
        self._local_kinds[name] = kind

    def local_kind(self, name: str) -> ExportKind:
        return self._local_kinds.get(name, ExportKind.VALUE_OR_TYPE)

    def add_import(self, statement: ImportStatement) -> None:
        self.imports.append(statement)
        if statement.default_name:
            self._imported[statement.default_name] = _ImportedBinding(
                statement.source, "default", statement.is_type_only
            )
        if statement.namespace_name:
            self._imported[statement.namespace_name] = _ImportedBinding(
                statement.source, None, statement.is_type_only
            )
        for spec in statement.specifiers:
            self._imported[spec.alias or spec.name] = _ImportedBinding(
                statement.source, spec.name, spec.is_type_only or statement.is_type_only
            )

    def add_export(self, declaration: ExportDeclaration) -> None:
        self._exports.append(declaration)

    def add_pending(self, pending: _PendingExport) -> None:
        self._exports.append(pending)

    def add_star_source(self, source: str) -> None:
        self.star_sources.append(source)

    def add_error(self, message: str) -> None:
        """Record a parsing error."""
        self.errors.append(message)

    def to_parsed_module(self) -> ParsedModule:
        exports = [
            self._settle(item) if isinstance(item, _PendingExport) else item
            for item in self._exports
        ]
        return ParsedModule(
            module_id=self.module_id,
            exports=tuple(exports),
            star_sources=tuple(self.star_sources),
            imports=tuple(self.imports),
            errors=tuple(self.errors),
        )

    def _settle(self, pending: _PendingExport) -> ExportDeclaration:
        """Turn a local export specifier into a declaration."""
        imported = self._imported.get(pending.local_name)
        if imported is not None and imported.imported_name is not None:
            type_only = pending.is_type_only or imported.is_type_only
            return ExportDeclaration(
                local_name=imported.imported_name,
                exported_name=pending.exported_name,
                kind=ExportKind.TYPE if type_only else ExportKind.VALUE_OR_TYPE,
                source=imported.source,
                start_line=pending.start_line,
            )

        if pending.is_type_only:
            kind = ExportKind.TYPE
        elif imported is not None:
            # Namespace object created by `import * as ns`
            kind = ExportKind.VALUE
        else:
            kind = self.local_kind(pending.local_name)
        return ExportDeclaration(
            local_name=pending.local_name,
            exported_name=pending.exported_name,
            kind=kind,
            start_line=pending.start_line,
        )


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"', "`"):
        return text[1:-1]
    return text
