"""Barrel import resolution: export tables, graph walk and import planning."""

from collections.abc import Iterable

from no_barrel_file.core import (
    BarrelFileError,
    BarrelResolution,
    ResolutionFailure,
    ResolutionRequest,
    ResolvedBinding,
)
from no_barrel_file.core.loader import ModuleLoader
from no_barrel_file.logging import get_logger
from no_barrel_file.resolution.export_table import ExportTableBuilder
from no_barrel_file.resolution.resolver import BarrelGraphResolver
from no_barrel_file.resolution.synthesizer import ImportPlanSynthesizer

logger = get_logger(__name__)


def resolve_barrel_import(
    barrel_module_id: str,
    requests: Iterable[ResolutionRequest],
    loader: ModuleLoader,
    *,
    builder: ExportTableBuilder | None = None,
) -> BarrelResolution:
    """
    Resolve every request against a barrel and plan the replacement imports.

    The barrel itself must load and parse: NotFoundError and ParseError for
    it propagate. Any error raised while following a single request is
    collected as a failure and the remaining requests still resolve.

    Pass ``builder`` to share one export-table cache across several barrels
    of the same run; by default a fresh cache is used and discarded.
    """
    builder = builder or ExportTableBuilder(loader)
    builder.build(barrel_module_id)

    resolver = BarrelGraphResolver(builder)
    bindings: list[tuple[ResolutionRequest, ResolvedBinding]] = []
    failures: list[ResolutionFailure] = []

    for request in requests:
        try:
            binding = resolver.resolve(barrel_module_id, request)
        except BarrelFileError as e:
            logger.info(
                "request_unresolved",
                barrel=barrel_module_id,
                name=request.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            failures.append(ResolutionFailure(request=request, error=e))
            continue
        bindings.append((request, binding))

    groups = ImportPlanSynthesizer().synthesize(bindings)
    return BarrelResolution(
        barrel_module_id=barrel_module_id,
        groups=groups,
        bindings=tuple(bindings),
        failures=tuple(failures),
    )


__all__ = [
    "BarrelGraphResolver",
    "ExportTableBuilder",
    "ImportPlanSynthesizer",
    "resolve_barrel_import",
]
