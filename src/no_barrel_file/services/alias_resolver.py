"""Path alias expansion from tsconfig.json / jsconfig.json ``compilerOptions.paths``."""

import json
import posixpath
from dataclasses import dataclass
from pathlib import Path

from no_barrel_file.logging import get_logger

logger = get_logger(__name__)

# Guards against `extends` loops
MAX_EXTENDS_DEPTH = 10


@dataclass(frozen=True, slots=True)
class PathAlias:
    """
    One ``paths`` entry.

    ``pattern`` is the alias as written (``@app/*``); ``targets`` are absolute
    posix paths that may contain the same single ``*`` wildcard.
    """

    pattern: str
    targets: tuple[str, ...]

    @property
    def prefix(self) -> str:
        return self.pattern.split("*", 1)[0]

    @property
    def suffix(self) -> str:
        return self.pattern.split("*", 1)[1] if "*" in self.pattern else ""

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.pattern

    def match(self, specifier: str) -> str | None:
        """Return the text captured by ``*``, "" for an exact match, or None."""
        if not self.is_wildcard:
            return "" if specifier == self.pattern else None
        if (
            len(specifier) >= len(self.prefix) + len(self.suffix)
            and specifier.startswith(self.prefix)
            and specifier.endswith(self.suffix)
        ):
            return specifier[len(self.prefix) : len(specifier) - len(self.suffix)]
        return None


class AliasResolver:
    """
    Maps alias specifiers to file-system paths and back.

    Mirrors TypeScript's ``paths`` matching: exact patterns win over
    wildcard ones, and among wildcards the longest prefix wins.
    """

    def __init__(self, aliases: list[PathAlias] | None = None) -> None:
        self._aliases = list(aliases or [])

    @property
    def aliases(self) -> tuple[PathAlias, ...]:
        return tuple(self._aliases)

    def __bool__(self) -> bool:
        return bool(self._aliases)

    @classmethod
    def from_config(cls, root_path: str | Path, config_path: str | None) -> "AliasResolver":
        """
        Load aliases from a tsconfig/jsconfig file relative to ``root_path``.

        A missing or unreadable file is logged and yields an empty resolver.
        """
        if not config_path:
            return cls()

        full_path = Path(root_path) / config_path
        try:
            aliases = _load_aliases(full_path, depth=0)
        except (OSError, ValueError) as e:
            logger.warning("alias_config_ignored", path=str(full_path), error=str(e))
            return cls()

        logger.debug("alias_config_loaded", path=str(full_path), alias_count=len(aliases))
        return cls(aliases)

    def expand(self, specifier: str) -> list[str]:
        """Candidate paths for an aliased specifier, best match first."""
        matches: list[tuple[int, PathAlias, str]] = []
        for alias in self._aliases:
            captured = alias.match(specifier)
            if captured is None:
                continue
            # Exact patterns sort before any wildcard
            rank = len(alias.pattern) + 10_000 if not alias.is_wildcard else len(alias.prefix)
            matches.append((rank, alias, captured))

        matches.sort(key=lambda item: item[0], reverse=True)
        candidates: list[str] = []
        for _, alias, captured in matches:
            for target in alias.targets:
                candidates.append(posixpath.normpath(target.replace("*", captured, 1)))
        return candidates

    def alias_for(self, path: str) -> str | None:
        """
        Reverse lookup: the alias specifier that points at ``path``.

        ``path`` should have its extension and trailing ``/index`` removed.
        """
        best: tuple[int, str] | None = None
        for alias in self._aliases:
            for target in alias.targets:
                if not alias.is_wildcard:
                    if posixpath.normpath(target) == path:
                        candidate = (len(target) + 10_000, alias.pattern)
                    else:
                        continue
                else:
                    head, _, tail = target.partition("*")
                    if not path.startswith(head) or not path.endswith(tail):
                        continue
                    captured = path[len(head) : len(path) - len(tail) if tail else None]
                    if not captured:
                        continue
                    candidate = (len(head), alias.prefix + captured + alias.suffix)
                if best is None or candidate[0] > best[0]:
                    best = candidate
        return best[1] if best else None


def _load_aliases(config_file: Path, depth: int) -> list[PathAlias]:
    if depth > MAX_EXTENDS_DEPTH:
        raise ValueError(f"tsconfig extends chain too deep at {config_file}")

    data = json.loads(strip_json_comments(config_file.read_text(encoding="utf-8")))
    if not isinstance(data, dict):
        raise ValueError(f"{config_file} is not a JSON object")

    config_dir = config_file.resolve().parent
    aliases: list[PathAlias] = []

    extends = data.get("extends")
    if isinstance(extends, str) and extends.startswith("."):
        parent = (config_dir / extends).resolve()
        if parent.suffix != ".json":
            parent = parent.with_name(parent.name + ".json")
        aliases.extend(_load_aliases(parent, depth + 1))

    options = data.get("compilerOptions") or {}
    paths = options.get("paths") or {}
    base_url = options.get("baseUrl")
    base_dir = (config_dir / base_url).resolve() if base_url else config_dir

    own: list[PathAlias] = []
    for pattern, targets in paths.items():
        if not isinstance(targets, list) or not targets:
            continue
        resolved = tuple(
            posixpath.normpath((base_dir / str(target).replace("\\", "/")).as_posix())
            for target in targets
        )
        own.append(PathAlias(pattern=pattern, targets=resolved))

    if own:
        # A config's own `paths` replace inherited ones entirely
        return own
    return aliases


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments and trailing commas outside of strings."""
    return _drop_trailing_commas(_drop_comments(text))


def _drop_comments(text: str) -> str:
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False
    while i < length:
        char = text[i]
        if in_string:
            if char == "\\":
                out.append(text[i : i + 2])
                i += 2
                continue
            in_string = char != '"'
            out.append(char)
            i += 1
        elif char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
        else:
            out.append(char)
            i += 1
    return "".join(out)


def _drop_trailing_commas(text: str) -> str:
    out: list[str] = []
    in_string = False
    escaped = False
    for i, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "," and text[i + 1 :].lstrip()[:1] in ("}", "]"):
            continue
        out.append(char)
    return "".join(out)
