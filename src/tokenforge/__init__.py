"""
tokenforge - design token build pipeline.

Reads DTCG design tokens and writes CSS custom properties, SCSS variables,
Flutter constants and a typed object literal.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.builder import BuildResult, TokenDictionary
from .core.config import create_default_config, load_config
from .core.errors import (
    BuildError,
    ConfigError,
    FormatError,
    ReferenceResolutionError,
    TokenForgeError,
    TokenParseError,
    TransformError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "TokenDictionary",
    "BuildResult",
    "create_default_config",
    "load_config",
    "TokenForgeError",
    "TokenParseError",
    "ConfigError",
    "ReferenceResolutionError",
    "TransformError",
    "FormatError",
    "BuildError",
]
