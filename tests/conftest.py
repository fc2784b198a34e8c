"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from no_barrel_file.resolution import ExportTableBuilder
from no_barrel_file.services import AliasResolver, InMemoryModuleLoader, PathAlias

VIRTUAL_ROOT = "/project"

TSCONFIG = """\
{
  // Path aliases used by the consumers
  "compilerOptions": {
    "baseUrl": ".",
    "paths": {
      "@barrel-basic": ["barrel-basic"],
      "@barrel-basic/*": ["barrel-basic/*"],
      "@barrel-circular": ["barrel-circular"],
      "@barrel-circular/*": ["barrel-circular/*"],
      "@barrel-nested": ["barrel-nested"],
      "@barrel-nested/*": ["barrel-nested/*"],
      "@ignored": ["ignored"], /* trailing comma below */
    },
  },
}
"""

PROJECT_FILES: dict[str, str] = {
    "barrel-basic/constants.ts": """\
export const BASIC_CONST = 1;
export let BASIC_LET = 2;
export var BASIC_VAR = 3;

const BASIC_CONST_SINGLE_EXPORT = 4;
let BASIC_LET_SINGLE_EXPORT = 5;
export { BASIC_CONST_SINGLE_EXPORT, BASIC_LET_SINGLE_EXPORT };
""",
    "barrel-basic/classes.ts": """\
export class BasicClass {
  value = 1;
}
""",
    "barrel-basic/enums.ts": """\
export enum BasicEnum {
  A,
  B,
}
""",
    "barrel-basic/types.ts": """\
export interface BasicInterface {
  id: number;
}

export type BasicType = string;
""",
    "barrel-basic/functions.ts": """\
export function basicFunction(): number {
  return 1;
}
""",
    "barrel-basic/re-exports.ts": """\
import { BasicClass } from "./classes";

export { BasicClass as RenamedBasicClass };

import { BasicType } from "./types";

type ReExportedBasicType = BasicType;
export type { ReExportedBasicType };

const ReExportedBasicConstToExport = 42;
export { ReExportedBasicConstToExport };
""",
    "barrel-basic/index.ts": """\
export * from "./constants";
export { BasicClass } from "./classes";
export * from "./enums";
export { BasicInterface } from "./types";
export type { BasicType } from "./types";
export { basicFunction } from "./functions";
export * from "./re-exports";
""",
    "barrel-circular/circular-a.ts": """\
export * from "./circular-b";

export class CircularA {}
""",
    "barrel-circular/circular-b.ts": """\
export * from "./circular-a";

export class CircularB {}
""",
    "barrel-circular/index.ts": """\
export * from "./circular-a";
export * from "./circular-b";
""",
    "barrel-loop/loop-a.ts": """\
export { Loop } from "./loop-b";
""",
    "barrel-loop/loop-b.ts": """\
export { Loop } from "./loop-a";
""",
    "barrel-loop/index.ts": """\
export { Loop } from "./loop-a";
export const Solid = true;
""",
    "barrel-nested/button.tsx": """\
export interface ButtonProps {
  label: string;
}

export function Button(props: ButtonProps) {
  return null;
}
""",
    "barrel-nested/nested/nested-function.ts": """\
export function nestedFunction(): void {}
""",
    "barrel-nested/nested/nested-constant.ts": """\
export const nestedConstant = "nested";
""",
    "barrel-nested/nested/index.ts": """\
export * from "./nested-function";
export { nestedConstant } from "./nested-constant";
""",
    "barrel-nested/index.ts": """\
export * from "./nested";
export { Button } from "./button";
export type { ButtonProps } from "./button";
""",
    "ignored/secret.ts": """\
export const SECRET = "secret";
""",
    "ignored/index.ts": """\
export { SECRET } from "./secret";
""",
    "ignored/relative-barrel-in-use.ts": """\
import { BASIC_CONST } from "../barrel-basic";
""",
    "dist/index.ts": """\
export * from "../barrel-basic";
""",
    "alias-barrel-in-use.ts": """\
import {
  BASIC_CONST,
  BASIC_LET,
  BasicClass,
  BasicEnum,
  BasicInterface,
  RenamedBasicClass,
  basicFunction as basicFunctionWithAs,
  basicFunction,
  type BasicType,
} from "@barrel-basic";

import { CircularA, CircularB } from '@barrel-circular';

import { Button, type ButtonProps, nestedConstant ,nestedFunction } from "@barrel-nested"
import { SECRET } from "@ignored"
import React from "react";

export const used = [BASIC_CONST, BASIC_LET, BasicClass, BasicEnum, CircularA, CircularB, SECRET, React];
""",
    "relative-barrel-in-use.ts": """\
import { BASIC_CONST, BasicClass, basicFunction } from "./barrel-basic";
import { nestedFunction } from "./barrel-nested";

export const used = [BASIC_CONST, BasicClass, basicFunction, nestedFunction];
""",
    "tsconfig.json": TSCONFIG,
    ".gitignore": "dist/\n",
}


def virtual_path(relative: str) -> str:
    return f"{VIRTUAL_ROOT}/{relative}"


def build_aliases(root: str) -> AliasResolver:
    aliases = []
    for name in ("barrel-basic", "barrel-circular", "barrel-nested", "ignored"):
        aliases.append(PathAlias(pattern=f"@{name}", targets=(f"{root}/{name}",)))
        aliases.append(PathAlias(pattern=f"@{name}/*", targets=(f"{root}/{name}/*",)))
    return AliasResolver(aliases)


def write_project(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def project_files() -> dict[str, str]:
    """Source files of the sample project, keyed by path relative to its root."""
    return dict(PROJECT_FILES)


@pytest.fixture
def memory_loader(project_files: dict[str, str]) -> InMemoryModuleLoader:
    """Loader serving the sample project from memory under /project."""
    modules = {
        virtual_path(relative): content
        for relative, content in project_files.items()
        if relative.endswith((".ts", ".tsx"))
    }
    return InMemoryModuleLoader(
        modules,
        alias_resolver=build_aliases(VIRTUAL_ROOT),
        root_path=VIRTUAL_ROOT,
    )


@pytest.fixture
def builder(memory_loader: InMemoryModuleLoader) -> ExportTableBuilder:
    return ExportTableBuilder(memory_loader)


@pytest.fixture
def barrel_project(tmp_path: Path, project_files: dict[str, str]) -> Path:
    """The sample project written to disk; returns its resolved root."""
    return write_project(tmp_path.resolve() / "project", project_files)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
