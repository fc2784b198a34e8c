"""Service layer - file system, configuration files and rewriting."""

# Import order matters: rewrite_service depends on the others
from no_barrel_file.services.alias_resolver import AliasResolver, PathAlias
from no_barrel_file.services.file_discovery import (
    DiscoveredFile,
    discover_barrel_files,
    discover_files,
)
from no_barrel_file.services.ignorer import Ignorer
from no_barrel_file.services.module_loader import (
    FileSystemModuleLoader,
    InMemoryModuleLoader,
    PathModuleLoader,
)
from no_barrel_file.services.import_renderer import ImportRenderer
from no_barrel_file.services.rewrite_service import (
    FileRewrite,
    ImportRewriteService,
    ReplaceSummary,
    RewriteOptions,
)

__all__ = [
    "AliasResolver",
    "DiscoveredFile",
    "FileRewrite",
    "FileSystemModuleLoader",
    "Ignorer",
    "ImportRenderer",
    "ImportRewriteService",
    "InMemoryModuleLoader",
    "PathAlias",
    "PathModuleLoader",
    "ReplaceSummary",
    "RewriteOptions",
    "discover_barrel_files",
    "discover_files",
]
