"""Builds and caches per-module export tables."""

from dataclasses import dataclass, field

from no_barrel_file.core import (
    CycleError,
    ExportEntry,
    ExportKind,
    ExportTable,
    LocalOrigin,
    NotFoundError,
    ParseError,
    ParsedModule,
    ReExportOrigin,
    ResolutionRequest,
)
from no_barrel_file.core.loader import ModuleLoader
from no_barrel_file.logging import get_logger
from no_barrel_file.parsers import ParserRegistry, get_parser_registry

logger = get_logger(__name__)


@dataclass(slots=True)
class _StarSearch:
    """State of one lazy lookup through `export *` declarations."""

    name: str
    path: set[str] = field(default_factory=set)
    done: set[str] = field(default_factory=set)
    hit_cycle: bool = False


class ExportTableBuilder:
    """
    Parses modules into export tables on first reference.

    One builder is meant to live for a single resolution run: its cache is
    never invalidated, so a fresh builder must be created whenever the
    underlying sources may have changed.
    """

    def __init__(self, loader: ModuleLoader, registry: ParserRegistry | None = None) -> None:
        self._loader = loader
        self._registry = registry or get_parser_registry()
        self._tables: dict[str, ExportTable] = {}
        self._parsed: dict[str, ParsedModule] = {}

    @property
    def loader(self) -> ModuleLoader:
        return self._loader

    @property
    def cached_module_ids(self) -> tuple[str, ...]:
        return tuple(self._tables)

    def build(self, module_id: str) -> ExportTable:
        """
        Return the export table of ``module_id``, parsing it on first use.

        Raises:
            NotFoundError: The module cannot be loaded.
            ParseError: Its import/export syntax is malformed.
        """
        table = self._tables.get(module_id)
        if table is not None:
            return table

        parsed = self.parse(module_id)
        entries: dict[str, ExportEntry] = {}
        for declaration in parsed.exports:
            if declaration.source:
                origin = ReExportOrigin(declaration.source, declaration.local_name)
            else:
                origin = LocalOrigin()
            # Later declarations of a name replace earlier ones
            entries.pop(declaration.exported_name, None)
            entries[declaration.exported_name] = ExportEntry(
                local_name=declaration.local_name,
                exported_name=declaration.exported_name,
                kind=declaration.kind,
                origin=origin,
            )

        table = ExportTable(
            module_id=module_id,
            entries=entries,
            star_sources=parsed.star_sources,
        )
        # Publish only the fully built table
        self._tables[module_id] = table
        logger.debug(
            "export_table_built",
            module_id=module_id,
            entry_count=len(entries),
            star_count=len(parsed.star_sources),
        )
        return table

    def parse(self, module_id: str) -> ParsedModule:
        """Parse a module once and keep the result for this run."""
        parsed = self._parsed.get(module_id)
        if parsed is not None:
            return parsed

        parser = self._registry.get_parser_for_file(module_id)
        if parser is None:
            raise ParseError(module_id, "unsupported file type")

        source = self._loader.load_source(module_id)
        parsed = parser.parse(source, module_id)
        if parsed.has_errors:
            logger.debug("module_parse_failed", module_id=module_id, errors=parsed.errors)
            raise ParseError(module_id, "; ".join(parsed.errors))

        self._parsed[module_id] = parsed
        return parsed

    def resolve_specifier(self, importer: str, specifier: str) -> str:
        """Module id for a specifier written inside ``importer``."""
        return self._loader.resolve(specifier, importer)

    def find_entry(
        self, module_id: str, name: str, request: ResolutionRequest | None = None
    ) -> ExportEntry | None:
        """
        Look up ``name`` in a module, falling back to its `export *` sources.

        Explicit entries shadow star-derived ones; among star sources the
        first in declaration order that exposes the name wins. A star-derived
        entry re-exports the name unchanged from that star source.

        Raises:
            CycleError: Only star re-exports were found and they loop back
                into modules already being searched.
        """
        table = self.build(module_id)
        entry = table.get(name)
        if entry is not None:
            return entry
        if name == "default":
            # `export *` never forwards a default export
            return None

        search = _StarSearch(name=name, path={module_id})
        source = self._star_source_exposing(table, search)
        if source is not None:
            return ExportEntry(
                local_name=name,
                exported_name=name,
                kind=ExportKind.VALUE_OR_TYPE,
                origin=ReExportOrigin(source, name),
            )
        if search.hit_cycle and request is not None:
            raise CycleError(request, tuple(sorted(search.path | search.done)))
        return None

    def _star_source_exposing(self, table: ExportTable, search: _StarSearch) -> str | None:
        """First `export *` specifier of ``table`` whose module exposes the name."""
        for specifier in table.star_sources:
            try:
                target = self.resolve_specifier(table.module_id, specifier)
            except NotFoundError:
                logger.warning(
                    "star_source_not_found",
                    module_id=table.module_id,
                    specifier=specifier,
                )
                continue
            if self._exposes(target, search):
                return specifier
        return None

    def _exposes(self, module_id: str, search: _StarSearch) -> bool:
        if module_id in search.path:
            search.hit_cycle = True
            return False
        if module_id in search.done:
            return False

        table = self.build(module_id)
        if search.name in table.entries:
            return True

        search.path.add(module_id)
        try:
            return self._star_source_exposing(table, search) is not None
        finally:
            search.path.discard(module_id)
            search.done.add(module_id)
