"""
Token build commands for tokenforge CLI.

- build: Write every platform's output files
- clean: Remove generated output files
- validate: Load, expand and resolve tokens and render platforms in memory
- list: Show tokens as a table
- init: Write a default tokenforge.toml
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from tokenforge.cli.common import console, fail, load_dictionary, report_error
from tokenforge.core.config import CONFIG_FILE, scaffold_config
from tokenforge.core.errors import TokenForgeError
from tokenforge.core.formats import render_value


def _display_path(path: Path, base: Path) -> str:
    return str(path.relative_to(base)) if path.is_relative_to(base) else str(path)


def build_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-d",
        help="Project directory (default: current directory)",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (default: <project>/{CONFIG_FILE})",
    ),
    platform: list[str] | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Platform to build (repeatable; default: all)",
    ),
) -> None:
    """
    Build design tokens for every configured platform.

    Examples:
        tokenforge build                      # All platforms
        tokenforge build -p css -p scss       # Selected platforms
        tokenforge build -c ci/tokens.toml    # Alternate config
    """
    dictionary = load_dictionary(project_dir, config_path)
    console.print("[bold]Building design tokens...[/bold]")

    try:
        result = dictionary.build_all_platforms(platform or None)
    except TokenForgeError as e:
        report_error("Build failed", e)
        raise typer.Exit(code=1)

    for name, paths in result.files.items():
        for path in paths:
            shown = _display_path(path, dictionary.base_dir)
            console.print(f"  [green]✓[/green] {escape(name)}: {escape(shown)}")
    console.print(f"[green]Build complete[/green] ({len(result)} files)")


def clean_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-d",
        help="Project directory (default: current directory)",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (default: <project>/{CONFIG_FILE})",
    ),
    platform: list[str] | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Platform to clean (repeatable; default: all)",
    ),
) -> None:
    """Remove generated output files."""
    dictionary = load_dictionary(project_dir, config_path)

    try:
        result = dictionary.clean_all_platforms(platform or None)
    except TokenForgeError as e:
        report_error("Clean failed", e)
        raise typer.Exit(code=1)

    console.print(f"Removed {len(result)} files")


def validate_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-d",
        help="Project directory (default: current directory)",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (default: <project>/{CONFIG_FILE})",
    ),
) -> None:
    """
    Check that tokens load, resolve and render without writing files.

    Reports every broken or circular reference at once.
    """
    dictionary = load_dictionary(project_dir, config_path)

    try:
        tokens = dictionary.tokens
        for name in dictionary.config.platforms:
            dictionary.format_platform(name)
    except TokenForgeError as e:
        report_error("Validation failed", e)
        raise typer.Exit(code=1)

    console.print(
        f"[green]Tokens are valid[/green] ({len(tokens)} tokens, "
        f"{len(dictionary.config.platforms)} platforms)"
    )


def list_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-d",
        help="Project directory (default: current directory)",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (default: <project>/{CONFIG_FILE})",
    ),
    platform: str | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Show names and values as transformed for this platform",
    ),
    token_type: str | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Only tokens of this type (e.g. color, dimension)",
    ),
) -> None:
    """List tokens with their type and value."""
    dictionary = load_dictionary(project_dir, config_path)

    try:
        tokens = dictionary.export_platform(platform) if platform else dictionary.tokens
    except TokenForgeError as e:
        report_error("Cannot list tokens", e)
        raise typer.Exit(code=1)

    if token_type:
        tokens = [t for t in tokens if t.type == token_type]
    if not tokens:
        fail("No tokens found")

    table = Table(title=f"Tokens ({platform or 'resolved'})")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Value")
    for token in tokens:
        table.add_row(escape(token.name), token.type or "-", escape(render_value(token.value)))
    console.print(table)


def init_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-d",
        help="Project directory (default: current directory)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help=f"Overwrite an existing {CONFIG_FILE}",
    ),
) -> None:
    """Write a default tokenforge.toml to the project directory."""
    root = project_dir.resolve()
    if not root.is_dir():
        fail(f"Project directory not found: {root}")

    path = scaffold_config(root, overwrite=force)
    if path is None:
        console.print(f"[yellow]{CONFIG_FILE} already exists[/yellow] (use --force to overwrite)")
        return
    console.print(f"[green]Created {escape(str(path))}[/green]")
