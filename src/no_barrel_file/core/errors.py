"""Error taxonomy for barrel resolution."""

from no_barrel_file.core.models import ResolutionRequest


class BarrelFileError(Exception):
    """Base class for all resolution errors."""

    def __reduce__(self):
        # Subclass __init__ signatures differ from self.args
        return (_rebuild_error, (type(self), self.args, self.__dict__))


def _rebuild_error(cls: type[BarrelFileError], args: tuple, state: dict) -> BarrelFileError:
    error = cls.__new__(cls)
    Exception.__init__(error, *args)
    error.__dict__.update(state)
    return error


class ParseError(BarrelFileError):
    """A module's import or export syntax could not be parsed."""

    def __init__(self, module_id: str, message: str, line: int | None = None) -> None:
        self.module_id = module_id
        self.line = line
        location = f"{module_id}:{line}" if line is not None else module_id
        super().__init__(f"{location}: {message}")


class NotFoundError(BarrelFileError):
    """A module specifier does not point at any loadable module."""

    def __init__(self, specifier: str, importer: str | None = None) -> None:
        self.specifier = specifier
        self.importer = importer
        if importer:
            message = f"Module not found: {specifier!r} (imported from {importer})"
        else:
            message = f"Module not found: {specifier!r}"
        super().__init__(message)


class RequestError(BarrelFileError):
    """Failure that only affects a single resolution request."""

    def __init__(self, request: ResolutionRequest, message: str) -> None:
        self.request = request
        super().__init__(message)


class UnresolvedSymbolError(RequestError):
    """The requested name is not exported anywhere along the chain."""

    def __init__(
        self, request: ResolutionRequest, module_id: str, name: str, hop_path: tuple[str, ...]
    ) -> None:
        self.module_id = module_id
        self.name = name
        self.hop_path = hop_path
        super().__init__(request, f"{name!r} is not exported by {module_id}")


class CycleError(RequestError):
    """The re-export chain loops without reaching a defining module."""

    def __init__(self, request: ResolutionRequest, hop_path: tuple[str, ...]) -> None:
        self.hop_path = hop_path
        chain = " -> ".join(hop_path)
        super().__init__(request, f"Circular re-export of {request.name!r}: {chain}")


class TypeValueMismatchError(RequestError):
    """A value import resolved to a type-only export."""

    def __init__(self, request: ResolutionRequest, module_id: str, name: str) -> None:
        self.module_id = module_id
        self.name = name
        super().__init__(
            request,
            f"{request.name!r} is imported as a value but {name!r} "
            f"is exported as type-only by {module_id}",
        )
