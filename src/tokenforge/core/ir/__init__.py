"""
tokenforge Intermediate Representation (IR) types.

Token models live in ``tokens``; build configuration models in ``config``.
Everything is re-exported here.
"""

from .config import (
    BuildConfig,
    BuildHooks,
    ExpandConfig,
    FileConfig,
    LogConfig,
    PlatformConfig,
    TokenFilter,
)
from .tokens import (
    COMPOSITE_TYPES,
    DIMENSION_TYPES,
    EXPAND_TYPES_MAP,
    REFERENCE_PATTERN,
    DesignToken,
    TokenType,
    find_references,
    whole_reference,
)

__all__ = [
    # Tokens
    "COMPOSITE_TYPES",
    "DIMENSION_TYPES",
    "EXPAND_TYPES_MAP",
    "REFERENCE_PATTERN",
    "DesignToken",
    "TokenType",
    "find_references",
    "whole_reference",
    # Config
    "BuildConfig",
    "BuildHooks",
    "ExpandConfig",
    "FileConfig",
    "LogConfig",
    "PlatformConfig",
    "TokenFilter",
]
