"""
Build configuration IR types.

Mirrors the shape of tokenforge.toml: token sources, preprocessors,
composite expansion, and one PlatformConfig per output target. The
callables a build may use (transforms, transform groups, formats,
preprocessors) travel with the configuration in BuildHooks rather than
living in a module-level registry.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .tokens import COMPOSITE_TYPES, EXPAND_TYPES_MAP, DesignToken

# =============================================================================
# Hooks
# =============================================================================


def _default_transforms() -> dict[str, Any]:
    from ..transforms import default_transforms

    return default_transforms()


def _default_transform_groups() -> dict[str, list[str]]:
    from ..transforms import default_transform_groups

    return default_transform_groups()


def _default_formats() -> dict[str, Callable[..., str]]:
    from ..formats import default_formats

    return default_formats()


def _default_preprocessors() -> dict[str, Callable[..., dict[str, Any]]]:
    from ..preprocessors import default_preprocessors

    return default_preprocessors()


class BuildHooks(BaseModel):
    """Named callables available to a build."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    transforms: dict[str, Any] = Field(default_factory=_default_transforms)
    transform_groups: dict[str, list[str]] = Field(default_factory=_default_transform_groups)
    formats: dict[str, Callable[..., str]] = Field(default_factory=_default_formats)
    preprocessors: dict[str, Callable[..., dict[str, Any]]] = Field(
        default_factory=_default_preprocessors
    )

    def with_formats(self, formats: dict[str, Callable[..., str]]) -> BuildHooks:
        """Return hooks with extra (or replacement) formats."""
        return self.model_copy(update={"formats": {**self.formats, **formats}})

    def with_transforms(self, transforms: dict[str, Any]) -> BuildHooks:
        """Return hooks with extra (or replacement) transforms."""
        return self.model_copy(update={"transforms": {**self.transforms, **transforms}})


# =============================================================================
# Filters, files and platforms
# =============================================================================


class TokenFilter(BaseModel):
    """Selects which tokens a file receives. Empty criteria match everything."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    types: list[str] = Field(default_factory=list, description="Only these token types")
    exclude_types: list[str] = Field(default_factory=list, description="Drop these types")
    paths: list[str] = Field(
        default_factory=list, description="Dotted path prefixes, e.g. 'color.primitive'"
    )
    source_only: bool = Field(default=False, description="Drop tokens from include globs")

    def matches(self, token: DesignToken) -> bool:
        if self.types and token.type not in self.types:
            return False
        if self.exclude_types and token.type in self.exclude_types:
            return False
        if self.paths:
            dotted = token.dotted_path
            if not any(dotted == p or dotted.startswith(p + ".") for p in self.paths):
                return False
        if self.source_only and not token.is_source:
            return False
        return True


class FileConfig(BaseModel):
    """One output file of a platform."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    destination: str
    format: str
    filter: TokenFilter | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class PlatformConfig(BaseModel):
    """One output target (CSS, SCSS, Flutter, typed object...)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    transform_group: str | None = None
    transforms: list[str] = Field(default_factory=list)
    prefix: str | None = None
    build_path: str = "build/"
    files: list[FileConfig] = Field(default_factory=list)
    options: dict[str, Any] = Field(
        default_factory=dict, description="Defaults merged into every file's options"
    )


class ExpandConfig(BaseModel):
    """Which composite tokens are split into one token per property."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    include: list[str] = Field(default_factory=lambda: sorted(COMPOSITE_TYPES))
    exclude: list[str] = Field(default_factory=list)
    types_map: dict[str, dict[str, str]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in EXPAND_TYPES_MAP.items()}
    )

    def should_expand(self, token_type: str | None) -> bool:
        return (
            self.enabled
            and token_type is not None
            and token_type in self.include
            and token_type not in self.exclude
        )


class LogConfig(BaseModel):
    """How recoverable problems (token collisions) are reported."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    warnings: Literal["warn", "error", "disabled"] = "warn"


class BuildConfig(BaseModel):
    """Complete build configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: list[str] = Field(default_factory=lambda: ["tokens/**/*.json"])
    include: list[str] = Field(default_factory=list)
    preprocessors: list[str] = Field(default_factory=list)
    expand: ExpandConfig = Field(default_factory=ExpandConfig)
    platforms: dict[str, PlatformConfig] = Field(default_factory=dict)
    log: LogConfig = Field(default_factory=LogConfig)
    hooks: BuildHooks = Field(default_factory=BuildHooks, exclude=True)

    def get_platform(self, name: str) -> PlatformConfig:
        from ..errors import ConfigError

        try:
            return self.platforms[name]
        except KeyError:
            known = ", ".join(sorted(self.platforms)) or "none"
            raise ConfigError(f"Unknown platform '{name}' (configured: {known})") from None
