"""Module loaders: map import specifiers to module ids and read module source."""

import posixpath
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path

from no_barrel_file.core import NotFoundError
from no_barrel_file.logging import get_logger
from no_barrel_file.services.alias_resolver import AliasResolver

logger = get_logger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".d.ts",
    ".js",
    ".jsx",
    ".mts",
    ".cts",
    ".mjs",
    ".cjs",
)

# `import "./foo.js"` in TypeScript sources names foo.ts
_EMITTED_TO_SOURCE: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


def is_relative_specifier(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def normalize_path(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


def strip_module_suffix(module_id: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> str:
    """Drop the file extension and a trailing ``/index`` from a module path."""
    path = module_id
    # Longest first so `.d.ts` wins over `.ts`
    for ext in sorted(set(extensions) | set(DEFAULT_EXTENSIONS), key=len, reverse=True):
        if path.endswith(ext):
            path = path[: -len(ext)]
            break
    if posixpath.basename(path) == "index":
        path = posixpath.dirname(path)
    return path


class PathModuleLoader(ABC):
    """
    Resolves specifiers the way TypeScript's bundler resolution does.

    Module ids are normalized posix paths. Subclasses only decide where the
    bytes come from.
    """

    def __init__(
        self,
        extensions: Iterable[str] | None = None,
        alias_resolver: AliasResolver | None = None,
        root_path: str | None = None,
    ) -> None:
        self._extensions = tuple(extensions or DEFAULT_EXTENSIONS)
        self._alias_resolver = alias_resolver or AliasResolver()
        self._root_path = normalize_path(root_path) if root_path else None

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    @property
    def alias_resolver(self) -> AliasResolver:
        return self._alias_resolver

    @property
    def root_path(self) -> str | None:
        return self._root_path

    @abstractmethod
    def _is_file(self, path: str) -> bool:
        ...

    @abstractmethod
    def _read(self, path: str) -> str:
        ...

    def resolve(self, specifier: str, importer: str | None = None) -> str:
        for base in self._candidate_bases(specifier, importer):
            found = self._locate(base)
            if found:
                return found
        raise NotFoundError(specifier, importer)

    def load_source(self, module_id: str) -> str:
        if not self._is_file(module_id):
            raise NotFoundError(module_id)
        return self._read(module_id)

    def is_aliased(self, specifier: str) -> bool:
        return bool(self._alias_resolver.expand(specifier))

    def _candidate_bases(self, specifier: str, importer: str | None) -> list[str]:
        if is_relative_specifier(specifier):
            anchor = posixpath.dirname(importer) if importer else self._root_path
            if anchor is None:
                return []
            return [normalize_path(posixpath.join(anchor, specifier))]
        if specifier.startswith("/"):
            return [normalize_path(specifier)]
        return self._alias_resolver.expand(specifier)

    def _locate(self, base: str) -> str | None:
        if self._is_file(base) and base.endswith(self._extensions):
            return base

        for ext in self._extensions:
            if self._is_file(base + ext):
                return base + ext

        stem, ext = posixpath.splitext(base)
        for source_ext in _EMITTED_TO_SOURCE.get(ext, ()):
            if self._is_file(stem + source_ext):
                return stem + source_ext

        for ext in self._extensions:
            index = posixpath.join(base, "index" + ext)
            if self._is_file(index):
                return index
        return None


class FileSystemModuleLoader(PathModuleLoader):
    """Loads modules from disk."""

    def _is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def _read(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("module_read_failed", path=path, error=str(e))
            raise NotFoundError(path) from e


class InMemoryModuleLoader(PathModuleLoader):
    """Serves virtual modules from a mapping of path to source text."""

    def __init__(
        self,
        modules: Mapping[str, str],
        extensions: Iterable[str] | None = None,
        alias_resolver: AliasResolver | None = None,
        root_path: str | None = "/",
    ) -> None:
        super().__init__(extensions, alias_resolver, root_path)
        self._modules = {normalize_path(path): source for path, source in modules.items()}
        self.reads: list[str] = []

    def _is_file(self, path: str) -> bool:
        return path in self._modules

    def _read(self, path: str) -> str:
        self.reads.append(path)
        return self._modules[path]
