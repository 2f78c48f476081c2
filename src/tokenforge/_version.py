"""Package version: installed distribution metadata, else the source checkout's pyproject.toml."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "tokenforge"
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Return the tokenforge version, ``0.0.0`` when it cannot be determined."""
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        pass

    # Running from a source tree without an install
    try:
        data = tomllib.loads(_PYPROJECT.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return "0.0.0"
    return str(data.get("project", {}).get("version", "0.0.0"))
