"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tokenforge.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


def test_version(cli_runner: CliRunner):
    """Test --version prints the package version."""
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "tokenforge version" in result.output


def test_build_command(cli_runner: CliRunner, token_project: Path):
    """Test build writes every default platform."""
    result = cli_runner.invoke(app, ["build", "--project", str(token_project)])
    assert result.exit_code == 0, result.output
    assert "Build complete" in result.output
    assert "(4 files)" in result.output
    css = (token_project / "build" / "css" / "variables.css").read_text()
    assert "--ds-color-action-primary: var(--ds-color-primitive-blue-500);" in css


def test_build_selected_platform(cli_runner: CliRunner, token_project: Path):
    """Test build with --platform only writes that platform."""
    result = cli_runner.invoke(app, ["build", "-d", str(token_project), "-p", "flutter"])
    assert result.exit_code == 0, result.output
    assert (token_project / "build" / "flutter" / "design_tokens.dart").exists()
    assert not (token_project / "build" / "css").exists()


def test_build_unknown_platform(cli_runner: CliRunner, token_project: Path):
    """Test build with an unknown platform fails."""
    result = cli_runner.invoke(app, ["build", "-d", str(token_project), "-p", "android"])
    assert result.exit_code == 1
    assert "Unknown platform" in result.output


def test_build_broken_reference(cli_runner: CliRunner, token_project: Path, write_tokens):
    """Test build fails and writes nothing when a reference is broken."""
    write_tokens("broken.json", {"color": {"bad": {"$value": "{color.nope}"}}})
    result = cli_runner.invoke(app, ["build", "-d", str(token_project)])
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "color.nope" in result.output
    assert not (token_project / "build").exists()


def test_validate_command(cli_runner: CliRunner, token_project: Path):
    """Test validate with valid tokens."""
    result = cli_runner.invoke(app, ["validate", "-d", str(token_project)])
    assert result.exit_code == 0, result.output
    assert "Tokens are valid" in result.output
    assert "6 tokens" in result.output
    assert not (token_project / "build").exists()


def test_validate_cycle(cli_runner: CliRunner, token_project: Path, write_tokens):
    """Test validate reports a circular reference."""
    write_tokens("loop.json", {"loop": {"a": {"$value": "{loop.b}"}, "b": {"$value": "{loop.a}"}}})
    result = cli_runner.invoke(app, ["validate", "-d", str(token_project)])
    assert result.exit_code == 1
    assert "Validation failed" in result.output
    assert "Circular reference" in result.output


def test_invalid_config(cli_runner: CliRunner, token_project: Path):
    """Test a malformed tokenforge.toml exits with an error."""
    (token_project / "tokenforge.toml").write_text("platforms = 3\n")
    result = cli_runner.invoke(app, ["validate", "-d", str(token_project)])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_list_command(cli_runner: CliRunner, token_project: Path):
    """Test list filtered by type."""
    result = cli_runner.invoke(app, ["list", "-d", str(token_project), "--type", "dimension"])
    assert result.exit_code == 0, result.output
    assert "spacing.base" in result.output
    assert "color.action.primary" not in result.output


def test_list_for_platform(cli_runner: CliRunner, token_project: Path):
    """Test list shows platform names."""
    result = cli_runner.invoke(app, ["list", "-d", str(token_project), "-p", "flutter"])
    assert result.exit_code == 0, result.output
    assert "spacingBase" in result.output


def test_list_no_match(cli_runner: CliRunner, token_project: Path):
    """Test list with a type nothing has."""
    result = cli_runner.invoke(app, ["list", "-d", str(token_project), "-t", "shadow"])
    assert result.exit_code == 1
    assert "No tokens found" in result.output


def test_clean_command(cli_runner: CliRunner, token_project: Path):
    """Test clean removes built files."""
    cli_runner.invoke(app, ["build", "-d", str(token_project)])
    result = cli_runner.invoke(app, ["clean", "-d", str(token_project)])
    assert result.exit_code == 0, result.output
    assert "Removed 4 files" in result.output
    assert not (token_project / "build" / "css" / "variables.css").exists()


def test_init_command(cli_runner: CliRunner, tmp_path: Path):
    """Test init writes tokenforge.toml once."""
    result = cli_runner.invoke(app, ["init", "-d", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "tokenforge.toml").exists()

    result = cli_runner.invoke(app, ["init", "-d", str(tmp_path)])
    assert result.exit_code == 0
    assert "already exists" in result.output
