"""Shared CLI helpers to reduce boilerplate across CLI command modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from tokenforge.core.builder import TokenDictionary
from tokenforge.core.config import load_config
from tokenforge.core.errors import ReferenceResolutionError, TokenForgeError

logger = logging.getLogger("tokenforge.cli")

console = Console()
err_console = Console(stderr=True)


def load_dictionary(project_dir: Path, config_path: Path | None = None) -> TokenDictionary:
    """Load the build configuration and wrap it in a TokenDictionary.

    Exits with code 1 if the configuration cannot be loaded.
    """
    root = project_dir.resolve()
    if not root.is_dir():
        fail(f"Project directory not found: {root}")
    try:
        config = load_config(root, config_path.resolve() if config_path else None)
    except TokenForgeError as e:
        fail(f"Configuration error: {e}")
    return TokenDictionary(config, base_dir=root)


def report_error(label: str, error: TokenForgeError) -> None:
    """Log a pipeline failure and print it, one line per reference error."""
    logger.error(f"{label}: {error}")
    if isinstance(error, ReferenceResolutionError):
        err_console.print(f"[red]{escape(label)}:[/red] {len(error.errors)} reference error(s)")
        for sub in error.errors:
            err_console.print(f"  [red]✗[/red] {escape(str(sub))}")
        return
    err_console.print(f"[red]{escape(label)}:[/red] {escape(str(error))}")


def fail(message: str) -> NoReturn:
    """Print an error and exit with code 1."""
    logger.error(message)
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)
