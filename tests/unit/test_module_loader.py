"""Tests for module loaders."""

from pathlib import Path

import pytest

from no_barrel_file.core import NotFoundError
from no_barrel_file.services import AliasResolver, FileSystemModuleLoader, InMemoryModuleLoader
from no_barrel_file.services.module_loader import is_relative_specifier, strip_module_suffix


class TestHelpers:
    def test_is_relative_specifier(self):
        assert is_relative_specifier("./a")
        assert is_relative_specifier("../a")
        assert is_relative_specifier(".")
        assert not is_relative_specifier("@scope/pkg")
        assert not is_relative_specifier(".hidden")

    def test_strip_module_suffix(self):
        assert strip_module_suffix("/p/a/index.ts") == "/p/a"
        assert strip_module_suffix("/p/a/b.tsx") == "/p/a/b"
        assert strip_module_suffix("/p/types.d.ts") == "/p/types"
        assert strip_module_suffix("/p/indexer.ts") == "/p/indexer"


class TestInMemoryModuleLoader:
    @pytest.fixture
    def loader(self) -> InMemoryModuleLoader:
        return InMemoryModuleLoader({
            "/p/src/a.ts": "export const a = 1;",
            "/p/src/lib/index.tsx": "export const lib = 1;",
            "/p/src/legacy.js": "export const legacy = 1;",
            "/p/src/emitted.ts": "export const emitted = 1;",
        })

    def test_resolve_with_extension_probe(self, loader: InMemoryModuleLoader):
        assert loader.resolve("./a", "/p/src/main.ts") == "/p/src/a.ts"

    def test_resolve_literal_path(self, loader: InMemoryModuleLoader):
        assert loader.resolve("./legacy.js", "/p/src/main.ts") == "/p/src/legacy.js"

    def test_resolve_directory_index(self, loader: InMemoryModuleLoader):
        assert loader.resolve("./lib", "/p/src/main.ts") == "/p/src/lib/index.tsx"

    def test_resolve_parent_directory(self, loader: InMemoryModuleLoader):
        assert loader.resolve("../a", "/p/src/lib/index.tsx") == "/p/src/a.ts"

    def test_resolve_js_specifier_to_ts_source(self, loader: InMemoryModuleLoader):
        assert loader.resolve("./emitted.js", "/p/src/main.ts") == "/p/src/emitted.ts"

    def test_resolve_absolute(self, loader: InMemoryModuleLoader):
        assert loader.resolve("/p/src/a") == "/p/src/a.ts"

    def test_package_specifier_not_found(self, loader: InMemoryModuleLoader):
        with pytest.raises(NotFoundError) as exc_info:
            loader.resolve("react", "/p/src/main.ts")

        assert exc_info.value.specifier == "react"
        assert exc_info.value.importer == "/p/src/main.ts"

    def test_load_source_records_reads(self, loader: InMemoryModuleLoader):
        assert loader.load_source("/p/src/a.ts") == "export const a = 1;"
        assert loader.reads == ["/p/src/a.ts"]

    def test_load_missing(self, loader: InMemoryModuleLoader):
        with pytest.raises(NotFoundError):
            loader.load_source("/p/src/missing.ts")

    def test_alias_resolution(self, memory_loader: InMemoryModuleLoader):
        assert memory_loader.resolve("@barrel-basic") == "/project/barrel-basic/index.ts"
        assert memory_loader.resolve("@barrel-nested/button") == "/project/barrel-nested/button.tsx"
        assert memory_loader.is_aliased("@barrel-basic")
        assert not memory_loader.is_aliased("react")


class TestFileSystemModuleLoader:
    def test_resolve_and_load(self, barrel_project: Path):
        root = barrel_project.as_posix()
        loader = FileSystemModuleLoader(
            alias_resolver=AliasResolver.from_config(barrel_project, "tsconfig.json"),
            root_path=root,
        )

        module_id = loader.resolve("@barrel-basic/classes")

        assert module_id == f"{root}/barrel-basic/classes.ts"
        assert "BasicClass" in loader.load_source(module_id)

    def test_resolve_relative_to_root_without_importer(self, barrel_project: Path):
        loader = FileSystemModuleLoader(root_path=barrel_project.as_posix())

        assert loader.resolve("./barrel-nested").endswith("barrel-nested/index.ts")

    def test_missing_file(self, tmp_path: Path):
        loader = FileSystemModuleLoader(root_path=tmp_path.as_posix())

        with pytest.raises(NotFoundError):
            loader.load_source((tmp_path / "missing.ts").as_posix())
