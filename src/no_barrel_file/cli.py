"""Command line interface for finding and removing barrel-file imports."""

import sys
from pathlib import Path

import click
from rich.console import Console

from no_barrel_file.config import get_settings, parse_extensions
from no_barrel_file.logging import configure_logging, get_logger
from no_barrel_file.services import (
    AliasResolver,
    FileSystemModuleLoader,
    Ignorer,
    ImportRewriteService,
    RewriteOptions,
    discover_barrel_files,
)

console = Console()
logger = get_logger(__name__)


def _echo(text: str) -> None:
    # Paths may contain brackets, so no markup
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _split_paths(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@click.group()
@click.option(
    "--root-path", "-r",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Root directory of the project",
)
@click.option("--extensions", "-e", default=None, help="Comma-separated file extensions (default: .ts,.js,.tsx,.jsx)")
@click.option("--gitignore-path", "-g", default=None, help="Path of the .gitignore file relative to the root")
@click.option("--ignore-paths", "-i", default=None, help="Comma-separated paths to ignore, relative to the root")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def main(
    ctx: click.Context,
    root_path: str,
    extensions: str | None,
    gitignore_path: str | None,
    ignore_paths: str | None,
    log_level: str | None,
) -> None:
    """Find barrel files and rewrite imports that go through them."""
    settings = get_settings()
    configure_logging(level=log_level)

    ctx.ensure_object(dict)
    ctx.obj["root_path"] = str(Path(root_path).resolve())
    ctx.obj["extensions"] = parse_extensions(extensions) if extensions else settings.extensions
    ctx.obj["gitignore_path"] = gitignore_path or settings.gitignore_path
    ctx.obj["ignore_paths"] = _split_paths(ignore_paths)


def _find_barrels(obj: dict) -> list:
    ignorer = Ignorer(obj["root_path"], obj["ignore_paths"], obj["gitignore_path"])
    loader = FileSystemModuleLoader(
        extensions=obj["extensions"],
        alias_resolver=AliasResolver(),
        root_path=obj["root_path"],
    )
    return discover_barrel_files(obj["root_path"], obj["extensions"], loader, ignorer)


@main.command()
@click.pass_obj
def count(obj: dict) -> None:
    """Print the number of barrel files."""
    _echo(str(len(_find_barrels(obj))))


@main.command()
@click.pass_obj
def display(obj: dict) -> None:
    """List barrel files relative to the root."""
    barrels = _find_barrels(obj)
    _echo(f"{len(barrels)} barrel files found")
    for barrel in barrels:
        _echo(barrel.relative_path)


@main.command()
@click.option("--alias-config-path", "-a", default=None, help="tsconfig/jsconfig file with path aliases, relative to the root")
@click.option("--target-path", "-t", default=".", help="Directory whose files get rewritten, relative to the root")
@click.option("--barrel-path", "-b", default=".", help="Only rewrite imports of barrels under this path, relative to the root")
@click.option("--verbose", "-v", is_flag=True, help="Print every rewritten import")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Number of worker processes")
@click.pass_obj
def replace(
    obj: dict,
    alias_config_path: str | None,
    target_path: str,
    barrel_path: str,
    verbose: bool,
    workers: int | None,
) -> None:
    """Rewrite imports of barrel files into direct imports."""
    options = RewriteOptions(
        root_path=obj["root_path"],
        extensions=obj["extensions"],
        target_path=target_path,
        barrel_path=barrel_path,
        ignore_paths=obj["ignore_paths"],
        gitignore_path=obj["gitignore_path"],
        alias_config_path=alias_config_path,
    )

    try:
        summary = ImportRewriteService(options).replace_all(workers=workers)
    except (OSError, ValueError) as e:
        logger.error("replace_failed", error=str(e))
        console.print(f"[bold red]Error: {e}[/bold red]")
        sys.exit(1)

    if verbose:
        root = Path(obj["root_path"])
        for result in summary.rewrites:
            _echo(Path(result.path).relative_to(root).as_posix())
            for statement in result.statements:
                _echo(f"  - {statement.before}")
                for line in statement.after.splitlines():
                    _echo(f"  + {line}")

    for error in summary.errors:
        console.print(f"[yellow]Warning: {error}[/yellow]", highlight=False)

    _echo(f"{summary.files_updated} files updated")


if __name__ == "__main__":
    main()
