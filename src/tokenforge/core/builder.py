"""
Token dictionary and platform builds.

TokenDictionary runs the shared half of the pipeline once (load, expand,
resolve) and then, per platform, transforms the tokens and renders each
configured file with its format. Output depends only on the token files
and the configuration, so rebuilding unchanged input rewrites identical
bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import BuildError, ConfigError
from .expander import expand_tokens
from .formats import FormatContext
from .ir import BuildConfig, DesignToken, FileConfig, PlatformConfig
from .loader import load_tokens
from .resolver import resolve_references
from .transforms import transform_tokens

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Files written per platform."""

    files: dict[str, list[Path]] = field(default_factory=dict)

    @property
    def all_files(self) -> list[Path]:
        return [path for paths in self.files.values() for path in paths]

    def __len__(self) -> int:
        return len(self.all_files)


class TokenDictionary:
    """Loaded and resolved tokens plus the platforms to build from them.

    Args:
        config: Build configuration (hooks included).
        base_dir: Directory that token globs and build paths are relative to.
    """

    def __init__(self, config: BuildConfig, base_dir: Path | None = None) -> None:
        self.config = config
        self.base_dir = (base_dir or Path.cwd()).resolve()
        self._tokens: list[DesignToken] | None = None
        self._platform_tokens: dict[str, list[DesignToken]] = {}

    # -------------------------------------------------------------------------
    # Shared pipeline
    # -------------------------------------------------------------------------

    def load(self) -> list[DesignToken]:
        """Load and preprocess the raw tokens."""
        hooks = self.config.hooks
        steps = []
        for name in self.config.preprocessors:
            if name not in hooks.preprocessors:
                raise ConfigError(f"Unknown preprocessor '{name}'")
            steps.append(hooks.preprocessors[name])

        return load_tokens(
            self.base_dir,
            self.config.source,
            self.config.include,
            preprocessors=steps,
            on_collision=self.config.log.warnings,
        )

    @property
    def tokens(self) -> list[DesignToken]:
        """Expanded and resolved tokens, computed once."""
        if self._tokens is None:
            raw = self.load()
            expanded = expand_tokens(raw, self.config.expand)
            self._tokens = resolve_references(expanded)
            logger.info(
                f"Loaded {len(raw)} tokens ({len(self._tokens)} after expansion) "
                f"from {self.base_dir}"
            )
        return self._tokens

    # -------------------------------------------------------------------------
    # Platforms
    # -------------------------------------------------------------------------

    def export_platform(self, name: str) -> list[DesignToken]:
        """Tokens transformed for one platform."""
        if name not in self._platform_tokens:
            platform = self.config.get_platform(name)
            hooks = self.config.hooks
            self._platform_tokens[name] = transform_tokens(
                self.tokens, platform, hooks.transforms, hooks.transform_groups
            )
        return self._platform_tokens[name]

    def _build_dir(self, platform: PlatformConfig) -> Path:
        return self.base_dir / platform.build_path

    def _render_file(
        self,
        platform_name: str,
        platform: PlatformConfig,
        file: FileConfig,
        dictionary: list[DesignToken],
    ) -> str:
        formatter = self.config.hooks.formats.get(file.format)
        if formatter is None:
            raise ConfigError(f"Unknown format '{file.format}' for platform '{platform_name}'")

        tokens = [t for t in dictionary if file.filter is None or file.filter.matches(t)]
        if not tokens:
            logger.warning(f"{platform_name}: no tokens match the filter of {file.destination}")

        ctx = FormatContext(
            tokens=tokens,
            dictionary=dictionary,
            platform=platform,
            file=file,
            options={**platform.options, **file.options},
        )
        return formatter(ctx)

    def format_platform(self, name: str) -> dict[Path, str]:
        """Render every file of a platform without writing anything."""
        platform = self.config.get_platform(name)
        dictionary = self.export_platform(name)
        build_dir = self._build_dir(platform)
        return {
            build_dir / file.destination: self._render_file(name, platform, file, dictionary)
            for file in platform.files
        }

    def build_platform(self, name: str) -> list[Path]:
        """Write every file of a platform.

        Raises:
            BuildError: If a file cannot be written.
        """
        written: list[Path] = []
        for path, content in self.format_platform(name).items():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8", newline="\n")
            except OSError as e:
                raise BuildError(f"Cannot write {path}: {e}") from e
            logger.info(f"{name}: wrote {path}")
            written.append(path)
        return written

    def build_all_platforms(self, names: list[str] | None = None) -> BuildResult:
        """Build the given platforms (default: all, in configuration order)."""
        result = BuildResult()
        for name in names or list(self.config.platforms):
            result.files[name] = self.build_platform(name)
        return result

    def clean_platform(self, name: str) -> list[Path]:
        """Remove the files a platform writes; returns the ones removed."""
        platform = self.config.get_platform(name)
        build_dir = self._build_dir(platform)
        removed: list[Path] = []
        for file in platform.files:
            path = build_dir / file.destination
            if not path.exists():
                continue
            try:
                path.unlink()
            except OSError as e:
                raise BuildError(f"Cannot remove {path}: {e}") from e
            logger.info(f"{name}: removed {path}")
            removed.append(path)

        # Drop the build directory once it is empty
        if build_dir.is_dir() and not any(build_dir.iterdir()):
            build_dir.rmdir()
        return removed

    def clean_all_platforms(self, names: list[str] | None = None) -> BuildResult:
        result = BuildResult()
        for name in names or list(self.config.platforms):
            result.files[name] = self.clean_platform(name)
        return result
