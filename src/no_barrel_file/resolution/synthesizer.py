"""Aggregates resolved bindings into grouped import statements."""

from collections.abc import Iterable

from no_barrel_file.core import ImportEntry, ImportGroup, ResolutionRequest, ResolvedBinding


class ImportPlanSynthesizer:
    """
    Groups bindings by terminal module.

    Groups appear in the order their module is first reached while scanning
    the requests left to right; entries keep request order, aliases and
    per-symbol `type` markers. Identical entries are emitted once.
    """

    def synthesize(
        self, pairs: Iterable[tuple[ResolutionRequest, ResolvedBinding]]
    ) -> tuple[ImportGroup, ...]:
        grouped: dict[str, list[ImportEntry]] = {}
        seen: set[tuple[str, ImportEntry]] = set()

        for request, binding in pairs:
            entry = ImportEntry(
                name=binding.exported_name,
                alias=binding.alias,
                is_type_only=request.is_type_only,
            )
            key = (binding.module_id, entry)
            if key in seen:
                continue
            seen.add(key)
            grouped.setdefault(binding.module_id, []).append(entry)

        return tuple(
            ImportGroup(module_id=module_id, entries=tuple(entries))
            for module_id, entries in grouped.items()
        )
