"""Ignore policy: .gitignore rules plus manually listed paths."""

from collections.abc import Iterable
from pathlib import Path

import pathspec

from no_barrel_file.logging import get_logger

logger = get_logger(__name__)


class Ignorer:
    """
    Decides whether a path under ``root_path`` should be skipped.

    Manual ignore paths are relative to the root; a directory ignores
    everything below it.
    """

    def __init__(
        self,
        root_path: str | Path,
        ignore_paths: Iterable[str] = (),
        gitignore_path: str | None = ".gitignore",
    ) -> None:
        self._root = Path(root_path).resolve()
        self._gitignore = self._load_gitignore(gitignore_path) if gitignore_path else None
        self._ignored_files: set[Path] = set()
        self._ignored_dirs: set[Path] = set()

        for path in ignore_paths:
            path = path.strip()
            if not path:
                continue
            full_path = (self._root / path).resolve()
            if full_path.is_dir():
                self._ignored_dirs.add(full_path)
            else:
                self._ignored_files.add(full_path)

    @property
    def root_path(self) -> Path:
        return self._root

    def is_ignored(self, path: str | Path) -> bool:
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = self._root / full_path
        full_path = full_path.resolve()

        if full_path in self._ignored_files or full_path in self._ignored_dirs:
            return True
        if any(full_path.is_relative_to(directory) for directory in self._ignored_dirs):
            return True

        if self._gitignore is not None and full_path.is_relative_to(self._root):
            relative = full_path.relative_to(self._root).as_posix()
            if relative == ".":
                return False
            if full_path.is_dir():
                relative += "/"
            return self._gitignore.match_file(relative)
        return False

    def _load_gitignore(self, gitignore_path: str) -> pathspec.GitIgnoreSpec | None:
        full_path = self._root / gitignore_path
        try:
            lines = full_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.info("gitignore_not_loaded", path=str(full_path), error=str(e))
            return None

        patterns = [
            line.strip() for line in lines if line.strip() and not line.strip().startswith("#")
        ]
        logger.debug("gitignore_loaded", path=str(full_path), pattern_count=len(patterns))
        return pathspec.GitIgnoreSpec.from_lines(patterns)
