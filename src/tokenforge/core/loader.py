"""
Token file discovery and loading.

Reads DTCG token files (JSON, or YAML for hand-authored sets), runs the
configured preprocessors over each parsed tree, and flattens groups into
an ordered list of DesignToken.

Ordering is deterministic: ``include`` files before ``source`` files, the
matches of each glob pattern sorted, and tokens in document order. When
two files define the same path the later one wins.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Literal

import yaml

from .errors import ErrorContext, TokenParseError, make_token_error
from .ir import DesignToken

logger = logging.getLogger(__name__)

TOKEN_FILE_SUFFIXES = frozenset({".json", ".yaml", ".yml"})

# Group-level keys that are metadata rather than children
_GROUP_META_KEYS = frozenset({"$type", "$description", "$extensions", "$deprecated"})


# =============================================================================
# Discovery
# =============================================================================


def _glob(base_dir: Path, pattern: str) -> list[Path]:
    path = Path(pattern)
    if path.is_absolute():
        anchor = Path(path.anchor)
        return sorted(anchor.glob(str(path.relative_to(anchor))))
    return sorted(base_dir.glob(pattern))


def discover_token_files(base_dir: Path, patterns: Iterable[str]) -> list[Path]:
    """Expand glob patterns relative to ``base_dir`` into token files.

    Args:
        base_dir: Directory the patterns are relative to.
        patterns: Glob patterns such as ``tokens/**/*.json``.

    Returns:
        Unique token files, in pattern order, each pattern's matches sorted.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        matches = [
            p for p in _glob(base_dir, pattern) if p.is_file() and p.suffix in TOKEN_FILE_SUFFIXES
        ]
        if not matches:
            logger.warning(f"Token pattern '{pattern}' matched no files under {base_dir}")
        for match in matches:
            resolved = match.resolve()
            if resolved not in seen:
                seen.add(resolved)
                files.append(match)
    return files


# =============================================================================
# Parsing
# =============================================================================


def load_token_file(path: Path) -> dict[str, Any]:
    """Parse one token file.

    Raises:
        TokenParseError: If the file cannot be read, is not valid JSON/YAML,
            or its top level is not a mapping.
    """
    context = ErrorContext(file=path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TokenParseError(f"Cannot read token file: {e}", context) from e
    except UnicodeDecodeError as e:
        raise TokenParseError(f"Token file is not valid UTF-8: {e}", context) from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except json.JSONDecodeError as e:
        raise TokenParseError(f"Invalid JSON at line {e.lineno}: {e.msg}", context) from e
    except yaml.YAMLError as e:
        raise TokenParseError(f"Invalid YAML: {e}", context) from e

    if data is None:
        logger.warning(f"Empty token file: {path}")
        return {}
    if not isinstance(data, dict):
        raise TokenParseError(
            f"Top level must be a mapping of groups, got {type(data).__name__}", context
        )
    return data


def flatten_token_tree(
    tree: dict[str, Any],
    file_path: Path | None = None,
    *,
    is_source: bool = True,
) -> list[DesignToken]:
    """Flatten a DTCG tree into tokens.

    A node with a ``$value`` key is a token; any other mapping is a group
    whose non-``$`` keys are children. ``$type`` set on a group applies to
    every descendant that does not declare its own.

    Raises:
        TokenParseError: If a node is neither a token nor a group.
    """
    tokens: list[DesignToken] = []

    def _walk(node: Any, path: tuple[str, ...], inherited_type: str | None) -> None:
        if not isinstance(node, dict):
            raise make_token_error(
                TokenParseError,
                f"Expected a token or group, got {type(node).__name__} {node!r}",
                file_path,
                ".".join(path),
            )

        if "$value" in node:
            tokens.append(
                DesignToken(
                    path=path,
                    value=node["$value"],
                    type=node.get("$type", inherited_type),
                    description=node.get("$description"),
                    file_path=file_path,
                    is_source=is_source,
                )
            )
            return

        group_type = node.get("$type", inherited_type)
        for key, child in node.items():
            key = str(key)
            if key.startswith("$"):
                if key not in _GROUP_META_KEYS:
                    logger.debug(f"Ignoring unknown group property {key} at {'.'.join(path)}")
                continue
            _walk(child, path + (key,), group_type)

    for key, node in tree.items():
        key = str(key)
        if key.startswith("$"):
            continue
        _walk(node, (key,), tree.get("$type"))

    return tokens


# =============================================================================
# Loading
# =============================================================================


def load_tokens(
    base_dir: Path,
    source: Iterable[str],
    include: Iterable[str] = (),
    *,
    preprocessors: Iterable[Callable[[dict[str, Any]], dict[str, Any]]] = (),
    on_collision: Literal["warn", "error", "disabled"] = "warn",
) -> list[DesignToken]:
    """Load, preprocess and flatten every token file of a build.

    Args:
        base_dir: Directory glob patterns are relative to.
        source: Glob patterns of the tokens being built.
        include: Glob patterns of supporting tokens, loaded first.
        preprocessors: Callables applied in order to each parsed file.
        on_collision: How to report a path defined more than once.

    Returns:
        Tokens in deterministic order; redefined paths keep their first
        position but take the later definition.

    Raises:
        TokenParseError: On unreadable files, malformed nodes, or (with
            ``on_collision="error"``) duplicate paths.
    """
    steps = list(preprocessors)
    by_path: dict[tuple[str, ...], DesignToken] = {}

    include_files = discover_token_files(base_dir, include)
    included = set(include_files)
    source_files = [f for f in discover_token_files(base_dir, source) if f not in included]
    batches = [(include_files, False), (source_files, True)]

    for files, is_source in batches:
        for path in files:
            tree = load_token_file(path)
            for step in steps:
                tree = step(tree)
            file_tokens = flatten_token_tree(tree, path, is_source=is_source)
            logger.debug(f"Loaded {len(file_tokens)} tokens from {path}")

            for token in file_tokens:
                previous = by_path.get(token.path)
                if previous is not None and previous.value != token.value:
                    message = (
                        f"Token collision: {token.dotted_path} defined in "
                        f"{previous.file_path} is overridden by {token.file_path}"
                    )
                    if on_collision == "error":
                        raise make_token_error(
                            TokenParseError, message, token.file_path, token.dotted_path
                        )
                    if on_collision == "warn":
                        logger.warning(message)
                by_path[token.path] = token

    return list(by_path.values())
