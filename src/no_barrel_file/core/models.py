"""Core domain models - pure Python dataclasses with no framework dependencies."""

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping, Self


class SourceLanguage(StrEnum):
    """Supported source languages."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"

    @classmethod
    def from_extension(cls, extension: str) -> Self | None:
        """Get language from file extension."""
        mapping = {
            ".js": cls.JAVASCRIPT,
            ".mjs": cls.JAVASCRIPT,
            ".cjs": cls.JAVASCRIPT,
            ".jsx": cls.JAVASCRIPT,
            ".ts": cls.TYPESCRIPT,
            ".mts": cls.TYPESCRIPT,
            ".cts": cls.TYPESCRIPT,
            ".tsx": cls.TSX,
        }
        return mapping.get(extension.lower())


class ExportKind(StrEnum):
    """Whether an exported binding is a runtime value, a type, or not yet known."""

    VALUE = "value"
    TYPE = "type"  # Exported through type-only syntax
    VALUE_OR_TYPE = "value_or_type"  # Decided at the terminal module


@dataclass(frozen=True, slots=True)
class LocalOrigin:
    """The exporting module defines the binding itself."""


@dataclass(frozen=True, slots=True)
class ReExportOrigin:
    """The binding comes from another module, named by an import specifier."""

    specifier: str  # e.g. "./classes" or "@barrel-basic/constants"
    exported_name: str  # Name to look up in the source module

    def __post_init__(self) -> None:
        if not self.specifier:
            raise ValueError("ReExportOrigin specifier cannot be empty")


Origin = LocalOrigin | ReExportOrigin


@dataclass(frozen=True, slots=True)
class ExportEntry:
    """
    One named binding exposed by a module.

    ``local_name`` is the name bound inside the exporting module,
    ``exported_name`` the name importers see.
    """

    local_name: str
    exported_name: str
    kind: ExportKind
    origin: Origin = field(default_factory=LocalOrigin)

    @property
    def is_local(self) -> bool:
        return isinstance(self.origin, LocalOrigin)


@dataclass(frozen=True, slots=True)
class ExportTable:
    """
    Export surface of a single module.

    ``entries`` preserves declaration order; a later declaration of the same
    exported name replaces the earlier one. ``star_sources`` lists the
    specifiers of ``export * from`` declarations in order.
    """

    module_id: str
    entries: Mapping[str, ExportEntry] = field(default_factory=dict)
    star_sources: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Freeze the mapping so a published table can be shared safely
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, name: str) -> ExportEntry | None:
        return self.entries.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.entries)

    @property
    def is_barrel(self) -> bool:
        """True when the module re-exports anything from another module."""
        return bool(self.star_sources) or any(
            not entry.is_local for entry in self.entries.values()
        )


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """A single named import taken from the original import statement."""

    name: str
    alias: str | None = None
    is_type_only: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ResolutionRequest name cannot be empty")

    @property
    def local_name(self) -> str:
        """Name the importing file binds."""
        return self.alias or self.name


@dataclass(frozen=True, slots=True)
class ResolvedBinding:
    """Terminal result of following a request through re-export hops."""

    module_id: str
    exported_name: str
    alias: str | None
    kind: ExportKind
    hop_path: tuple[str, ...] = ()  # Diagnostics only

    @property
    def hop_count(self) -> int:
        return max(len(self.hop_path) - 1, 0)


@dataclass(frozen=True, slots=True)
class ImportEntry:
    """One specifier inside a synthesized import statement."""

    name: str
    alias: str | None = None
    is_type_only: bool = False


@dataclass(frozen=True, slots=True)
class ImportGroup:
    """All entries imported from one terminal module, in first-seen order."""

    module_id: str
    entries: tuple[ImportEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    """A request that could not be resolved, with the error explaining why."""

    request: ResolutionRequest
    error: Exception


@dataclass(frozen=True, slots=True)
class BarrelResolution:
    """Outcome of resolving a batch of requests against one barrel module."""

    barrel_module_id: str
    groups: tuple[ImportGroup, ...] = ()
    bindings: tuple[tuple[ResolutionRequest, ResolvedBinding], ...] = ()
    failures: tuple[ResolutionFailure, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.failures

    @property
    def is_direct(self) -> bool:
        """True when every resolved binding already lives in the barrel module."""
        return all(group.module_id == self.barrel_module_id for group in self.groups)


@dataclass(frozen=True, slots=True)
class ImportSpecifier:
    """A named specifier in an import statement: ``type name as alias``."""

    name: str
    alias: str | None = None
    is_type_only: bool = False

    def to_request(self, statement_type_only: bool = False) -> ResolutionRequest:
        return ResolutionRequest(
            name=self.name,
            alias=self.alias,
            is_type_only=self.is_type_only or statement_type_only,
        )


@dataclass(frozen=True, slots=True)
class ImportStatement:
    """
    An ``import`` statement found in a source file.

    Byte offsets refer to the UTF-8 encoded source and cover the whole
    statement, including a trailing semicolon when present.
    """

    source: str  # Module specifier without quotes
    start_byte: int
    end_byte: int
    quote: str = '"'
    has_semicolon: bool = False
    is_type_only: bool = False  # `import type { ... }`
    default_name: str | None = None
    namespace_name: str | None = None
    specifiers: tuple[ImportSpecifier, ...] = ()
    start_line: int | None = None

    @property
    def is_named_only(self) -> bool:
        return bool(self.specifiers) and self.namespace_name is None

    def requests(self) -> list[ResolutionRequest]:
        return [spec.to_request(self.is_type_only) for spec in self.specifiers]


@dataclass(frozen=True, slots=True)
class ExportDeclaration:
    """
    One exported name as written in a module, before specifiers are resolved.

    ``source`` is set for ``export { a } from "x"`` and for local names that
    were themselves imported; ``local_name`` is then the name inside ``source``.
    """

    local_name: str
    exported_name: str
    kind: ExportKind
    source: str | None = None
    start_line: int | None = None


@dataclass(frozen=True, slots=True)
class ParsedModule:
    """Result of parsing a module's import and export statements."""

    module_id: str
    exports: tuple[ExportDeclaration, ...] = ()
    star_sources: tuple[str, ...] = ()
    imports: tuple[ImportStatement, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def reexport_sources(self) -> tuple[str, ...]:
        """Specifiers this module re-exports from, in declaration order."""
        sources = [decl.source for decl in self.exports if decl.source]
        sources.extend(self.star_sources)
        return tuple(dict.fromkeys(sources))
