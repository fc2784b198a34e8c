"""Follows re-export chains from a barrel to the module defining each symbol."""

from no_barrel_file.core import (
    CycleError,
    ExportKind,
    LocalOrigin,
    ReExportOrigin,
    ResolutionRequest,
    ResolvedBinding,
    TypeValueMismatchError,
    UnresolvedSymbolError,
)
from no_barrel_file.logging import get_logger
from no_barrel_file.resolution.export_table import ExportTableBuilder

logger = get_logger(__name__)


class BarrelGraphResolver:
    """
    Walks the re-export graph one hop at a time.

    The walk is iterative and keyed by a visited set of (module id, name)
    pairs, so a cyclic graph terminates with a CycleError instead of
    recursing without bound.
    """

    def __init__(self, builder: ExportTableBuilder) -> None:
        self._builder = builder

    def resolve(self, barrel_module_id: str, request: ResolutionRequest) -> ResolvedBinding:
        """
        Resolve one requested name to its terminal module.

        Raises:
            UnresolvedSymbolError: No module along the chain exports the name.
            CycleError: The chain revisits a (module, name) pair.
            TypeValueMismatchError: A value import reached a type-only export.
            NotFoundError, ParseError: A module on the chain is unusable.
        """
        module_id = barrel_module_id
        name = request.name
        visited: set[tuple[str, str]] = set()
        hop_path: list[str] = []
        type_only_hop = False

        while True:
            key = (module_id, name)
            hop_path.append(module_id)
            if key in visited:
                raise CycleError(request, tuple(hop_path))
            visited.add(key)

            entry = self._builder.find_entry(module_id, name, request)
            if entry is None:
                raise UnresolvedSymbolError(request, module_id, name, tuple(hop_path))

            if entry.kind == ExportKind.TYPE:
                type_only_hop = True

            match entry.origin:
                case LocalOrigin():
                    return self._terminal(
                        request, module_id, entry.exported_name, entry.kind, type_only_hop, hop_path
                    )
                case ReExportOrigin(specifier=specifier, exported_name=next_name):
                    module_id = self._builder.resolve_specifier(module_id, specifier)
                    name = next_name

    def _terminal(
        self,
        request: ResolutionRequest,
        module_id: str,
        exported_name: str,
        kind: ExportKind,
        type_only_hop: bool,
        hop_path: list[str],
    ) -> ResolvedBinding:
        effective_kind = ExportKind.TYPE if type_only_hop else kind
        if effective_kind == ExportKind.TYPE and not request.is_type_only:
            raise TypeValueMismatchError(request, module_id, exported_name)

        # Keep the importing file's local binding name across renames
        alias = request.alias
        if alias is None and exported_name != request.name:
            alias = request.name
        if alias == exported_name:
            alias = None

        binding = ResolvedBinding(
            module_id=module_id,
            exported_name=exported_name,
            alias=alias,
            kind=effective_kind,
            hop_path=tuple(hop_path),
        )
        logger.debug(
            "symbol_resolved",
            name=request.name,
            module_id=module_id,
            exported_name=exported_name,
            hops=binding.hop_count,
        )
        return binding
