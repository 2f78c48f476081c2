"""
tokenforge CLI package.

- tokens.py: build, clean, validate, list and init commands
- common.py: Shared helpers (config loading, error reporting)

Entry point: ``tokenforge`` -> :func:`main`.
"""

from __future__ import annotations

import logging
import platform

import typer

from tokenforge._version import get_version
from tokenforge.cli.tokens import (
    build_command,
    clean_command,
    init_command,
    list_command,
    validate_command,
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"tokenforge version {get_version()}")
        typer.echo(f"  Python:   {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform: {platform.system()} {platform.release()}")
        raise typer.Exit()


app = typer.Typer(
    help="""tokenforge - design token build pipeline

Reads DTCG token files and writes CSS custom properties, SCSS variables,
Flutter constants and a typed object literal.
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every file and token step",
    ),
) -> None:
    """tokenforge CLI main callback for global options."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    if verbose:
        logging.getLogger("tokenforge").setLevel(logging.DEBUG)


app.command(name="build")(build_command)
app.command(name="clean")(clean_command)
app.command(name="validate")(validate_command)
app.command(name="list")(list_command)
app.command(name="init")(init_command)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = [
    "app",
    "main",
    "version_callback",
]
