"""Contract between the resolver and whoever supplies module source."""

from typing import Protocol


class ModuleLoader(Protocol):
    """What the resolver needs from its caller: specifier lookup and source text."""

    def resolve(self, specifier: str, importer: str | None = None) -> str:
        """
        Map an import specifier, seen from ``importer``, to a module id.

        Raises NotFoundError when no module matches.
        """
        ...

    def load_source(self, module_id: str) -> str:
        """Return the source text of a module, or raise NotFoundError."""
        ...
