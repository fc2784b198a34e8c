"""Core domain layer - pure Python business logic."""

from no_barrel_file.core.errors import (
    BarrelFileError,
    CycleError,
    NotFoundError,
    ParseError,
    RequestError,
    TypeValueMismatchError,
    UnresolvedSymbolError,
)
from no_barrel_file.core.models import (
    BarrelResolution,
    ExportDeclaration,
    ExportEntry,
    ExportKind,
    ExportTable,
    ImportEntry,
    ImportGroup,
    ImportSpecifier,
    ImportStatement,
    LocalOrigin,
    Origin,
    ParsedModule,
    ReExportOrigin,
    ResolutionFailure,
    ResolutionRequest,
    ResolvedBinding,
    SourceLanguage,
)

__all__ = [
    "BarrelFileError",
    "BarrelResolution",
    "CycleError",
    "ExportDeclaration",
    "ExportEntry",
    "ExportKind",
    "ExportTable",
    "ImportEntry",
    "ImportGroup",
    "ImportSpecifier",
    "ImportStatement",
    "LocalOrigin",
    "NotFoundError",
    "Origin",
    "ParseError",
    "ParsedModule",
    "ReExportOrigin",
    "RequestError",
    "ResolutionFailure",
    "ResolutionRequest",
    "ResolvedBinding",
    "SourceLanguage",
    "TypeValueMismatchError",
    "UnresolvedSymbolError",
]
