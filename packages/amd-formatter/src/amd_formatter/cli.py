# SPDX-License-Identifier: MIT
"""CLI entry point for the amd-formatter command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .config import ConfigError, FormatterOptions
from .formatter import FormatterError
from .module import DuplicateBindingError
from .parser import ModuleParseError
from .printer import PrinterError
from .resolver import ModuleResolutionError
from .writer import WriteError, convert


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_options(self) -> FormatterOptions:
        """Load options from pyproject.toml in the project directory."""
        return FormatterOptions.from_pyproject(self.project_dir or Path.cwd())


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


@click.group()
@click.version_option(package_name="amd-formatter")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project directory holding pyproject.toml.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Convert ES modules to AMD modules.

    \b
    Examples:
        amd-formatter convert main.js -s src -o build
        amd-formatter convert main.js --unnamed
        amd-formatter convert main.js --direct-exports
    """
    ctx.verbose = verbose
    ctx.project_dir = directory


@cli.command("convert")
@click.argument("entries", nargs=-1, required=True)
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Root directory of the ES module sources (defaults to config or '.').",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default="build",
    show_default=True,
    help="Directory to write AMD modules to.",
)
@click.option(
    "--named/--unnamed",
    "named_modules",
    default=None,
    help="Pass the module name as the first define() argument.",
)
@click.option(
    "--direct-exports/--no-direct-exports",
    default=None,
    help="Return a lone default export as the module value.",
)
@pass_context
def convert_command(
    ctx: Context,
    entries: tuple[str, ...],
    source_dir: Optional[Path],
    output_dir: Path,
    named_modules: Optional[bool],
    direct_exports: Optional[bool],
) -> None:
    """Convert ENTRIES and every module they import.

    ENTRIES are module paths relative to the source directory.
    """
    try:
        options = ctx.load_options().with_overrides(
            named_modules=named_modules,
            direct_exports=direct_exports,
            source_dir=source_dir,
        )
    except ConfigError as e:
        echo_error(str(e))
        raise SystemExit(1)

    root = options.source_dir or ctx.project_dir or Path.cwd()

    try:
        results = convert(entries, root, output_dir, options)
    except (
        ModuleResolutionError,
        ModuleParseError,
        DuplicateBindingError,
        FormatterError,
        PrinterError,
        WriteError,
    ) as e:
        echo_error(str(e))
        raise SystemExit(1)

    if ctx.verbose:
        for result in results:
            echo_info(f"  {result.module_path} -> {result.output_path} ({result.dependencies} dependencies)")

    echo_success(f"Converted {len(results)} module(s) into {output_dir}")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
