"""Core tokenforge functionality: IR, loading, expansion, resolution, transforms, formats, builds."""

from . import ir
from .builder import BuildResult, TokenDictionary
from .config import create_default_config, load_config, scaffold_config
from .errors import (
    BuildError,
    CircularReferenceError,
    ConfigError,
    ErrorContext,
    FormatError,
    ReferenceResolutionError,
    TokenForgeError,
    TokenParseError,
    TransformError,
    UnresolvedReferenceError,
)
from .expander import expand_tokens
from .formats import FormatContext, default_formats
from .loader import load_tokens
from .preprocessors import default_preprocessors
from .resolver import resolve_references
from .transforms import Transform, default_transform_groups, default_transforms

__all__ = [
    "ir",
    # Errors
    "TokenForgeError",
    "TokenParseError",
    "ConfigError",
    "UnresolvedReferenceError",
    "CircularReferenceError",
    "ReferenceResolutionError",
    "TransformError",
    "FormatError",
    "BuildError",
    "ErrorContext",
    # Pipeline
    "load_tokens",
    "expand_tokens",
    "resolve_references",
    "Transform",
    "default_transforms",
    "default_transform_groups",
    "FormatContext",
    "default_formats",
    "default_preprocessors",
    # Builds
    "TokenDictionary",
    "BuildResult",
    "create_default_config",
    "load_config",
    "scaffold_config",
]
