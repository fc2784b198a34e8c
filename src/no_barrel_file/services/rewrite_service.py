"""Rewrites barrel imports in source files into direct imports."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from no_barrel_file.config import get_settings
from no_barrel_file.core import (
    BarrelFileError,
    BarrelResolution,
    ImportEntry,
    ImportStatement,
    NotFoundError,
    ResolutionFailure,
)
from no_barrel_file.logging import get_logger
from no_barrel_file.parsers import get_parser_registry
from no_barrel_file.resolution import ExportTableBuilder, resolve_barrel_import
from no_barrel_file.services.alias_resolver import AliasResolver
from no_barrel_file.services.file_discovery import discover_files, read_file_content
from no_barrel_file.services.ignorer import Ignorer
from no_barrel_file.services.import_renderer import ImportRenderer
from no_barrel_file.services.module_loader import FileSystemModuleLoader, normalize_path

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RewriteOptions:
    """Everything a worker process needs to rebuild the service."""

    root_path: str
    extensions: tuple[str, ...]
    target_path: str = "."
    barrel_path: str = "."
    ignore_paths: tuple[str, ...] = ()
    gitignore_path: str | None = ".gitignore"
    alias_config_path: str | None = None


@dataclass(frozen=True, slots=True)
class StatementRewrite:
    """One import statement and its replacement text."""

    line: int | None
    before: str
    after: str


@dataclass(frozen=True, slots=True)
class FileRewrite:
    """Result of rewriting one file."""

    path: str
    original: str
    updated: str
    statements: tuple[StatementRewrite, ...] = ()
    failures: tuple[ResolutionFailure, ...] = ()

    @property
    def changed(self) -> bool:
        return self.updated != self.original


@dataclass(slots=True)
class ReplaceSummary:
    """Outcome of a replace run."""

    files_scanned: int = 0
    files_updated: int = 0
    rewrites: list[FileRewrite] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _rewrite_file_in_process(options: RewriteOptions, file_path: str) -> FileRewrite:
    """
    Rewrite a single file (runs in separate process).

    Each process builds its own service, so loader and export-table caches
    stay confined to the worker.
    """
    return ImportRewriteService(options).rewrite_file(file_path)


class ImportRewriteService:
    """
    Replaces imports that go through barrel files with direct imports.

    Only imports whose target module lies under the barrel path and is not
    ignored are touched. Namespace and side-effect imports stay as written.
    """

    def __init__(self, options: RewriteOptions) -> None:
        self._options = options
        self._root = Path(options.root_path).resolve()
        self._ignorer = Ignorer(self._root, options.ignore_paths, options.gitignore_path)
        alias_resolver = AliasResolver.from_config(self._root, options.alias_config_path)
        self._loader = FileSystemModuleLoader(
            extensions=options.extensions,
            alias_resolver=alias_resolver,
            root_path=self._root.as_posix(),
        )
        self._renderer = ImportRenderer(self._loader)
        self._barrel_root = normalize_path((self._root / options.barrel_path).resolve().as_posix())
        self._registry = get_parser_registry()

    @property
    def loader(self) -> FileSystemModuleLoader:
        return self._loader

    @property
    def ignorer(self) -> Ignorer:
        return self._ignorer

    def replace_all(self, workers: int | None = None, write: bool = True) -> ReplaceSummary:
        """
        Rewrite every source file under the target path.

        Changed files are written back by this process only; workers just
        compute the new content.
        """
        workers = workers or get_settings().worker_count
        files = discover_files(
            self._root / self._options.target_path,
            self._options.extensions,
            self._ignorer,
        )
        paths = [f.absolute_path for f in files]
        summary = ReplaceSummary(files_scanned=len(paths))

        if workers > 1 and len(paths) > 1:
            results = self._rewrite_in_pool(paths, workers, summary)
        else:
            results = self._rewrite_sequentially(paths, summary)

        for result in results:
            if not result.changed:
                continue
            if write:
                Path(result.path).write_bytes(result.updated.encode("utf-8"))
            summary.files_updated += 1
            summary.rewrites.append(result)

        logger.info(
            "replace_completed",
            target_path=self._options.target_path,
            files_scanned=summary.files_scanned,
            files_updated=summary.files_updated,
        )
        return summary

    def _rewrite_sequentially(self, paths: list[str], summary: ReplaceSummary) -> list[FileRewrite]:
        results: list[FileRewrite] = []
        for path in paths:
            try:
                results.append(self.rewrite_file(path))
            except Exception as e:
                logger.warning("file_rewrite_exception", path=path, error=str(e))
                summary.errors.append(f"{path}: {e}")
        return results

    def _rewrite_in_pool(
        self, paths: list[str], workers: int, summary: ReplaceSummary
    ) -> list[FileRewrite]:
        results: list[FileRewrite] = []
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                (path, executor.submit(partial(_rewrite_file_in_process, self._options, path)))
                for path in paths
            ]
            for path, future in futures:
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.warning("file_rewrite_exception", path=path, error=str(e))
                    summary.errors.append(f"{path}: {e}")
        return results

    def rewrite_file(self, file_path: str | Path) -> FileRewrite:
        """Compute the rewritten content of one file without writing it."""
        module_id = normalize_path(Path(file_path).resolve().as_posix())
        try:
            source = read_file_content(module_id, errors="strict")
        except UnicodeDecodeError as e:
            # Invalid UTF-8 is left byte-for-byte
            logger.warning("file_skipped_not_utf8", path=module_id, error=str(e))
            return FileRewrite(path=module_id, original="", updated="")
        return self.rewrite_source(source, module_id)

    def rewrite_source(self, source: str, module_id: str) -> FileRewrite:
        """Rewrite the barrel imports found in ``source``."""
        parser = self._registry.get_parser_for_file(module_id)
        if parser is None:
            return FileRewrite(path=module_id, original=source, updated=source)

        parsed = parser.parse(source, module_id)
        if parsed.has_errors:
            logger.warning("file_skipped_parse_errors", path=module_id, errors=parsed.errors)
            return FileRewrite(path=module_id, original=source, updated=source)

        # One export-table cache per file
        builder = ExportTableBuilder(self._loader, self._registry)
        encoded = source.encode("utf-8")
        replacements: list[tuple[ImportStatement, str]] = []
        statements: list[StatementRewrite] = []
        failures: list[ResolutionFailure] = []

        for statement in parsed.imports:
            rewritten = self._rewrite_statement(statement, module_id, builder, failures)
            if rewritten is None:
                continue
            before = encoded[statement.start_byte : statement.end_byte].decode("utf-8")
            if rewritten == before:
                continue
            replacements.append((statement, rewritten))
            statements.append(StatementRewrite(line=statement.start_line, before=before, after=rewritten))

        # Splice from the end so earlier offsets stay valid
        for statement, text in sorted(replacements, key=lambda item: item[0].start_byte, reverse=True):
            encoded = encoded[: statement.start_byte] + text.encode("utf-8") + encoded[statement.end_byte :]

        return FileRewrite(
            path=module_id,
            original=source,
            updated=encoded.decode("utf-8"),
            statements=tuple(statements),
            failures=tuple(failures),
        )

    def _rewrite_statement(
        self,
        statement: ImportStatement,
        module_id: str,
        builder: ExportTableBuilder,
        failures: list[ResolutionFailure],
    ) -> str | None:
        if not statement.is_named_only:
            return None

        try:
            barrel_id = self._loader.resolve(statement.source, module_id)
        except NotFoundError:
            # Package imports and unresolvable paths are left alone
            return None
        if barrel_id == module_id or not self._is_under_barrel_root(barrel_id):
            return None
        if self._ignorer.is_ignored(barrel_id):
            return None

        try:
            resolution = resolve_barrel_import(
                barrel_id, statement.requests(), self._loader, builder=builder
            )
        except BarrelFileError as e:
            logger.warning(
                "barrel_unusable",
                path=module_id,
                line=statement.start_line,
                barrel=barrel_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        for failure in resolution.failures:
            logger.warning(
                "import_left_on_barrel",
                path=module_id,
                line=statement.start_line,
                name=failure.request.name,
                barrel=barrel_id,
                error_type=type(failure.error).__name__,
                error=str(failure.error),
            )
        failures.extend(resolution.failures)

        if resolution.is_direct:
            return None
        return self._render_plan(statement, module_id, barrel_id, resolution)

    def _render_plan(
        self,
        statement: ImportStatement,
        module_id: str,
        barrel_id: str,
        resolution: BarrelResolution,
    ) -> str:
        residual = [
            ImportEntry(
                name=failure.request.name,
                alias=failure.request.alias,
                is_type_only=failure.request.is_type_only,
            )
            for failure in resolution.failures
        ]
        style = dict(
            quote=statement.quote,
            semicolon=statement.has_semicolon,
            statement_type_only=statement.is_type_only,
        )

        lines: list[str] = []
        kept_emitted = False
        for group in resolution.groups:
            if group.module_id == barrel_id:
                entries = [*group.entries, *residual]
                lines.append(
                    self._renderer.render(
                        entries, statement.source, default_name=statement.default_name, **style
                    )
                )
                kept_emitted = True
                continue
            specifier = self._renderer.specifier_for(
                module_id, statement.source, barrel_id, group.module_id
            )
            lines.append(self._renderer.render(group.entries, specifier, **style))

        if not kept_emitted and (residual or statement.default_name):
            lines.append(
                self._renderer.render(
                    residual, statement.source, default_name=statement.default_name, **style
                )
            )
        return "\n".join(lines)

    def _is_under_barrel_root(self, module_id: str) -> bool:
        return module_id == self._barrel_root or module_id.startswith(self._barrel_root.rstrip("/") + "/")
