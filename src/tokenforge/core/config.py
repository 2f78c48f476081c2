"""
Build configuration persistence.

Reads tokenforge.toml from the project root into a BuildConfig. When no
file exists the default configuration applies: DTCG sources under
``tokens/``, the tokens-studio preprocessor, composite expansion, and the
four platforms (CSS custom properties, SCSS variables, Flutter constants,
typed object literal).

Default location: {project_root}/tokenforge.toml
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import ConfigError
from .ir import BuildConfig, BuildHooks

logger = logging.getLogger(__name__)

CONFIG_FILE = "tokenforge.toml"

DEFAULT_CONFIG_TOML = """\
# tokenforge build configuration
#
# Sources are DTCG token files ($value, $type, {references}).
# Each [platforms.<name>] table is one output target.

source = ["tokens/**/*.json"]
preprocessors = ["tokens-studio"]

[expand]
enabled = true

# CSS custom properties: --ds-color-action-primary
[platforms.css]
transform_group = "tokens-studio"
transforms = ["name/kebab"]
prefix = "ds"
build_path = "build/css/"

[[platforms.css.files]]
destination = "variables.css"
format = "css/variables"
# var(--ds-color-primitive-blue-500) instead of the resolved value
options = { output_references = true }

[platforms.scss]
transform_group = "scss"
prefix = "ds"
build_path = "build/scss/"

[[platforms.scss.files]]
destination = "_variables.scss"
format = "scss/variables"
options = { output_references = true }

[platforms.flutter]
transform_group = "flutter"
build_path = "build/flutter/"

[[platforms.flutter.files]]
destination = "design_tokens.dart"
format = "flutter/dart"
filter = { exclude_types = ["fontFamily", "cubicBezier", "strokeStyle", "boolean", "other"] }
options = { class_name = "DesignTokens" }

[platforms.vanilla-extract]
transform_group = "js"
build_path = "build/vanilla-extract/"

[[platforms.vanilla-extract.files]]
destination = "tokens.ts"
format = "typed-object"
"""


# =============================================================================
# Path helpers
# =============================================================================


def get_config_path(project_root: Path) -> Path:
    """Get the tokenforge.toml file path."""
    return project_root / CONFIG_FILE


def config_exists(project_root: Path) -> bool:
    """Check if a tokenforge.toml exists in the project."""
    return get_config_path(project_root).exists()


# =============================================================================
# Loading
# =============================================================================


def parse_config_data(data: dict[str, Any], hooks: BuildHooks | None = None) -> BuildConfig:
    """Validate raw TOML data into a BuildConfig.

    Raises:
        ConfigError: If the data does not match the configuration schema.
    """
    if "hooks" in data:
        raise ConfigError("'hooks' cannot be set from a configuration file")
    try:
        if hooks is not None:
            return BuildConfig(**data, hooks=hooks)
        return BuildConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def create_default_config(hooks: BuildHooks | None = None) -> BuildConfig:
    """Return the default build configuration."""
    return parse_config_data(tomllib.loads(DEFAULT_CONFIG_TOML), hooks)


def load_config(
    project_root: Path,
    config_path: Path | None = None,
    *,
    use_defaults: bool = True,
    hooks: BuildHooks | None = None,
) -> BuildConfig:
    """Load the build configuration.

    Args:
        project_root: Root directory of the token project.
        config_path: Explicit configuration file; overrides the default location.
        use_defaults: If True, return the default config when no file exists.
        hooks: Transforms, formats and preprocessors for the build
            (defaults to the built-in set).

    Returns:
        BuildConfig instance.

    Raises:
        ConfigError: If the file is missing (when use_defaults=False or an
            explicit path was given) or invalid.
    """
    path = config_path or get_config_path(project_root)

    if not path.exists():
        if use_defaults and config_path is None:
            logger.debug(f"No {CONFIG_FILE} found in {project_root}, using defaults")
            return create_default_config(hooks)
        raise ConfigError(f"Configuration not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path} is not valid UTF-8: {e}") from e

    config = parse_config_data(data, hooks)
    logger.debug(f"Loaded configuration from {path} ({len(config.platforms)} platforms)")
    return config


# =============================================================================
# Scaffolding
# =============================================================================


def scaffold_config(project_root: Path, *, overwrite: bool = False) -> Path | None:
    """Create a default tokenforge.toml file.

    Args:
        project_root: Root directory of the token project.
        overwrite: If True, overwrite an existing file.

    Returns:
        Path to created file, or None if skipped.
    """
    path = get_config_path(project_root)

    if path.exists() and not overwrite:
        logger.debug(f"Skipping existing config: {path}")
        return None

    path.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    logger.info(f"Wrote default configuration to {path}")
    return path
