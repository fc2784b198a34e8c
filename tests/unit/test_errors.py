"""Tests for the error types."""

import pickle

from no_barrel_file.core import (
    CycleError,
    NotFoundError,
    ParseError,
    ResolutionRequest,
    TypeValueMismatchError,
    UnresolvedSymbolError,
)


class TestErrors:
    def test_messages(self):
        request = ResolutionRequest("Loop")

        assert str(ParseError("/m/a.ts", "bad export", line=3)) == "/m/a.ts:3: bad export"
        assert "imported from /m/a.ts" in str(NotFoundError("./b", "/m/a.ts"))
        assert "/m/a.ts -> /m/b.ts" in str(CycleError(request, ("/m/a.ts", "/m/b.ts")))

    def test_errors_survive_pickling(self):
        request = ResolutionRequest("T")
        errors = [
            ParseError("/m/a.ts", "bad export"),
            NotFoundError("./b", "/m/a.ts"),
            UnresolvedSymbolError(request, "/m/a.ts", "T", ("/m/a.ts",)),
            CycleError(request, ("/m/a.ts", "/m/b.ts")),
            TypeValueMismatchError(request, "/m/t.ts", "T"),
        ]

        for error in errors:
            restored = pickle.loads(pickle.dumps(error))

            assert type(restored) is type(error)
            assert str(restored) == str(error)
            assert restored.__dict__ == error.__dict__
