"""Shared pytest fixtures for tokenforge tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tokenforge.core.ir import DesignToken

REPO_ROOT = Path(__file__).parent.parent


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Return the repository root (holds the bundled tokens/ directory)."""
    return REPO_ROOT


@pytest.fixture
def write_tokens(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Return a helper that writes a token file under tmp_path/tokens/."""

    def _write(name: str, data: dict[str, Any]) -> Path:
        path = tmp_path / "tokens" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def token_project(tmp_path: Path, write_tokens) -> Path:
    """Create a small token project with primitives, references and math."""
    write_tokens(
        "color.json",
        {
            "color": {
                "$type": "color",
                "primitive": {
                    "blue": {"500": {"$value": "#0066FF"}},
                    "white": {"$value": "#fff"},
                },
                "action": {
                    "primary": {
                        "$value": "{color.primitive.blue.500}",
                        "$description": "Primary call to action",
                    }
                },
            }
        },
    )
    write_tokens(
        "size.json",
        {
            "spacing": {
                "$type": "dimension",
                "base": {"$value": "8px"},
                "double": {"$value": "{spacing.base} * 2"},
                "bare": {"$value": 4},
            }
        },
    )
    return tmp_path


@pytest.fixture
def make_token() -> Callable[..., DesignToken]:
    """Return a factory for DesignToken from a dotted path."""

    def _make(dotted: str, value: Any, type: str | None = None, **kwargs: Any) -> DesignToken:
        return DesignToken(path=tuple(dotted.split(".")), value=value, type=type, **kwargs)

    return _make
