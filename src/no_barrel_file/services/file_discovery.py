"""File discovery utilities for walking codebases."""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from no_barrel_file.config import get_settings
from no_barrel_file.core import NotFoundError
from no_barrel_file.logging import get_logger
from no_barrel_file.parsers import get_parser_registry
from no_barrel_file.services.ignorer import Ignorer
from no_barrel_file.services.module_loader import PathModuleLoader

logger = get_logger(__name__)

# Directories to always skip
SKIP_DIRECTORIES = frozenset({
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    ".next",
    ".turbo",
    ".yarn",
    "coverage",
})


@dataclass(frozen=True, slots=True)
class DiscoveredFile:
    """A source file found under a discovery root."""

    relative_path: str
    absolute_path: str
    size_bytes: int


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    return any(path.endswith(ext) for ext in extensions)


def is_index_file(path: str, extensions: Iterable[str]) -> bool:
    name = Path(path).name
    return any(name == f"index{ext}" for ext in extensions)


def discover_files(
    root_path: str | Path,
    extensions: Iterable[str],
    ignorer: Ignorer | None = None,
) -> list[DiscoveredFile]:
    """
    Walk a directory tree and discover source files.

    Respects SKIP_DIRECTORIES, the ignorer and the configured size limit.
    Returns files sorted by path. A file path as root yields that file alone.
    """
    settings = get_settings()
    extensions = tuple(extensions)
    root = Path(root_path).resolve()
    if root.is_file():
        candidates = [root]
        base = root.parent
    elif root.is_dir():
        candidates = list(_walk(root, ignorer))
        base = root
    else:
        raise ValueError(f"Path does not exist: {root_path}")

    discovered: list[DiscoveredFile] = []
    for abs_path in candidates:
        if not has_extension(abs_path.name, extensions):
            continue
        if ignorer is not None and ignorer.is_ignored(abs_path):
            continue

        # Skip files that are too large
        try:
            size = abs_path.stat().st_size
        except OSError:
            continue
        if size > settings.max_file_size_bytes:
            logger.debug(
                "file_skipped_too_large",
                path=str(abs_path),
                size=size,
                max_size=settings.max_file_size_bytes,
            )
            continue

        discovered.append(
            DiscoveredFile(
                relative_path=abs_path.relative_to(base).as_posix(),
                absolute_path=abs_path.as_posix(),
                size_bytes=size,
            )
        )

    # Sort by path for deterministic processing
    discovered.sort(key=lambda f: f.relative_path)

    logger.info(
        "files_discovered",
        root_path=str(root),
        file_count=len(discovered),
    )

    return discovered


def _walk(root: Path, ignorer: Ignorer | None) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        # Filter out directories we should skip (in-place modification)
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in SKIP_DIRECTORIES
            and not (ignorer is not None and ignorer.is_ignored(current / d))
        )
        for filename in sorted(filenames):
            yield current / filename


def discover_barrel_files(
    root_path: str | Path,
    extensions: Iterable[str],
    loader: PathModuleLoader,
    ignorer: Ignorer | None = None,
) -> list[DiscoveredFile]:
    """
    Find barrel files: index modules re-exporting from at least one existing module.
    """
    registry = get_parser_registry()
    barrels: list[DiscoveredFile] = []

    for discovered in discover_files(root_path, extensions, ignorer):
        if not is_index_file(discovered.absolute_path, extensions):
            continue
        parser = registry.get_parser_for_file(discovered.absolute_path)
        if parser is None:
            continue

        content = read_file_content(discovered.absolute_path)
        parsed = parser.parse(content, discovered.absolute_path)
        if _reexports_existing_module(parsed.reexport_sources, discovered.absolute_path, loader):
            barrels.append(discovered)

    logger.info("barrel_files_discovered", root_path=str(root_path), barrel_count=len(barrels))
    return barrels


def _reexports_existing_module(sources: Iterable[str], importer: str, loader: PathModuleLoader) -> bool:
    for source in sources:
        try:
            loader.resolve(source, importer)
        except NotFoundError:
            continue
        return True
    return False


def read_file_content(file_path: str | Path, errors: str = "replace") -> str:
    """Read a source file as UTF-8 text; pass errors="strict" to reject invalid bytes."""
    with open(file_path, "rb") as f:
        raw_content = f.read()
    return raw_content.decode("utf-8", errors=errors)
