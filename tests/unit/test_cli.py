"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from no_barrel_file.cli import main


def invoke(runner: CliRunner, root: Path, *args: str):
    return runner.invoke(main, ["--root-path", str(root), "--log-level", "ERROR", *args])


class TestCount:
    def test_count(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(cli_runner, barrel_project, "--ignore-paths", "ignored", "count")

        assert result.exit_code == 0
        assert "5" in result.output.splitlines()

    def test_count_without_ignore_paths(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(cli_runner, barrel_project, "count")

        assert result.exit_code == 0
        assert "6" in result.output.splitlines()

    def test_count_with_extensions(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(cli_runner, barrel_project, "-e", "tsx,jsx", "count")

        assert result.exit_code == 0
        assert "0" in result.output.splitlines()

    def test_missing_root(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(main, ["--root-path", str(tmp_path / "nope"), "count"])

        assert result.exit_code != 0


class TestDisplay:
    def test_display(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(cli_runner, barrel_project, "-i", "ignored", "display")

        assert result.exit_code == 0
        lines = result.output.splitlines()
        start = lines.index("5 barrel files found")
        assert lines[start + 1 : start + 6] == [
            "barrel-basic/index.ts",
            "barrel-circular/index.ts",
            "barrel-loop/index.ts",
            "barrel-nested/index.ts",
            "barrel-nested/nested/index.ts",
        ]


class TestReplace:
    def test_replace(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(
            cli_runner, barrel_project, "-i", "ignored", "replace", "--alias-config-path", "tsconfig.json"
        )

        assert result.exit_code == 0
        assert "2 files updated" in result.output
        content = (barrel_project / "alias-barrel-in-use.ts").read_text()
        assert 'import { BASIC_CONST, BASIC_LET } from "@barrel-basic/constants";' in content

    def test_replace_twice(self, cli_runner: CliRunner, barrel_project: Path):
        args = ("-i", "ignored", "replace", "-a", "tsconfig.json")
        invoke(cli_runner, barrel_project, *args)

        result = invoke(cli_runner, barrel_project, *args)

        assert "0 files updated" in result.output

    def test_replace_verbose(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(
            cli_runner, barrel_project, "-i", "ignored", "replace", "-a", "tsconfig.json", "-v"
        )

        assert result.exit_code == 0
        assert "relative-barrel-in-use.ts" in result.output
        assert '  - import { nestedFunction } from "./barrel-nested";' in result.output
        assert '  + import { nestedFunction } from "./barrel-nested/nested/nested-function";' in result.output

    def test_replace_target_and_barrel_path(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(
            cli_runner,
            barrel_project,
            "-i", "ignored",
            "replace",
            "-t", "relative-barrel-in-use.ts",
            "-b", "barrel-nested",
        )

        assert "1 files updated" in result.output
        content = (barrel_project / "relative-barrel-in-use.ts").read_text()
        assert 'from "./barrel-basic";' in content
        assert "./barrel-nested/nested/nested-function" in content

    def test_replace_missing_target(self, cli_runner: CliRunner, barrel_project: Path):
        result = invoke(cli_runner, barrel_project, "replace", "-t", "missing")

        assert result.exit_code == 1
        assert "Error" in result.output
