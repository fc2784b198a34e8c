"""Formats import groups as source text."""

import posixpath
from collections.abc import Sequence

from no_barrel_file.core import ImportEntry, NotFoundError
from no_barrel_file.logging import get_logger
from no_barrel_file.services.module_loader import (
    DEFAULT_EXTENSIONS,
    PathModuleLoader,
    is_relative_specifier,
    strip_module_suffix,
)

logger = get_logger(__name__)


def _strip_extension(module_id: str, extensions: Sequence[str]) -> str:
    for ext in sorted(set(extensions) | set(DEFAULT_EXTENSIONS), key=len, reverse=True):
        if module_id.endswith(ext):
            return module_id[: -len(ext)]
    return module_id


class ImportRenderer:
    """
    Turns planned imports back into statements.

    House style comes from the statement being replaced: quote character
    and semicolon presence are copied, names are joined on one line.
    """

    def __init__(self, loader: PathModuleLoader) -> None:
        self._loader = loader

    def specifier_for(
        self,
        importer: str,
        original_specifier: str,
        barrel_module_id: str,
        module_id: str,
    ) -> str:
        """
        Specifier that reaches ``module_id`` in the style of the original import.

        Alias imports keep their alias prefix (``@barrel/constants``);
        relative imports stay relative to the importing file. Only a
        specifier that resolves back to ``module_id`` is returned; when the
        short form is shadowed (``util.ts`` next to ``util/index.ts``) the
        ``/index`` form is used.
        """
        if module_id == barrel_module_id:
            return original_specifier

        candidates = self._candidates(importer, original_specifier, barrel_module_id, module_id)
        for candidate in candidates:
            if self._resolves_to(candidate, importer, module_id):
                return candidate

        logger.warning(
            "specifier_unverified",
            importer=importer,
            module_id=module_id,
            specifier=candidates[-1],
        )
        return candidates[-1]

    def _candidates(
        self,
        importer: str,
        original_specifier: str,
        barrel_module_id: str,
        module_id: str,
    ) -> list[str]:
        extensions = self._loader.extensions
        short = strip_module_suffix(module_id, extensions)
        forms = [short]
        stem = _strip_extension(module_id, extensions)
        if stem != short:
            forms.append(stem)

        candidates: list[str] = []
        if not is_relative_specifier(original_specifier) and not original_specifier.startswith("/"):
            barrel_dir = strip_module_suffix(barrel_module_id, extensions)
            # `@barrel/index` and `@barrel` name the same directory
            prefix = strip_module_suffix(original_specifier.rstrip("/"), extensions)
            for form in forms:
                if form.startswith(barrel_dir + "/"):
                    candidates.append(prefix + "/" + form[len(barrel_dir) + 1 :])
                alias = self._loader.alias_resolver.alias_for(form)
                if alias:
                    candidates.append(alias)

        for form in forms:
            relative = posixpath.relpath(form, posixpath.dirname(importer))
            if not relative.startswith("."):
                relative = "./" + relative
            candidates.append(relative)
        return list(dict.fromkeys(candidates))

    def _resolves_to(self, specifier: str, importer: str, module_id: str) -> bool:
        try:
            return self._loader.resolve(specifier, importer) == module_id
        except NotFoundError:
            return False

    def render(
        self,
        entries: Sequence[ImportEntry],
        specifier: str,
        *,
        quote: str = '"',
        semicolon: bool = True,
        statement_type_only: bool = False,
        default_name: str | None = None,
    ) -> str:
        """Render one import statement."""
        use_statement_type = (
            statement_type_only
            and default_name is None
            and bool(entries)
            and all(entry.is_type_only for entry in entries)
        )

        names = [self._render_entry(entry, not use_statement_type) for entry in entries]
        bindings: list[str] = []
        if default_name:
            bindings.append(default_name)
        if names:
            bindings.append("{ " + ", ".join(names) + " }")

        head = "import type " if use_statement_type else "import "
        tail = ";" if semicolon else ""
        return f"{head}{', '.join(bindings)} from {quote}{specifier}{quote}{tail}"

    def _render_entry(self, entry: ImportEntry, per_symbol_type: bool) -> str:
        text = entry.name
        if entry.alias:
            text = f"{text} as {entry.alias}"
        if per_symbol_type and entry.is_type_only:
            text = f"type {text}"
        return text
