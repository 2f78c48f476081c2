"""
Output formats.

A format turns the transformed tokens of one file into text. Formats are
plain functions ``(FormatContext) -> str``; the build configuration carries
the mapping from format names to functions.

Built-in formats:
- css/variables: CSS custom properties in a ``:root`` block
- scss/variables: SCSS ``$variables``
- flutter/dart: a Dart class of ``static const`` Color and double members
- typed-object: a TypeScript ``as const`` object literal of nested tokens
- json/nested, json/flat
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .errors import ErrorContext, FormatError
from .ir import (
    REFERENCE_PATTERN,
    DesignToken,
    FileConfig,
    PlatformConfig,
    TokenType,
    find_references,
    whole_reference,
)
from .transforms import format_number

logger = logging.getLogger(__name__)

GENERATED_NOTICE = "Do not edit directly, this file was auto-generated."


@dataclass
class FormatContext:
    """Everything a format function receives.

    Attributes:
        tokens: Tokens written to this file (after the file's filter).
        dictionary: Every transformed token of the platform.
        platform: Platform configuration.
        file: File configuration.
        options: Platform options overlaid with file options.
    """

    tokens: list[DesignToken]
    dictionary: list[DesignToken]
    platform: PlatformConfig
    file: FileConfig
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._output_paths = {token.dotted_path: token for token in self.tokens}

    def lookup(self, dotted_path: str) -> DesignToken | None:
        """Find a token written to this file by path."""
        return self._output_paths.get(dotted_path)


Formatter = Callable[[FormatContext], str]


# =============================================================================
# Shared helpers
# =============================================================================


def file_header(options: dict[str, Any], comment: str = "//") -> str:
    """Generated-file notice; empty when ``show_file_header`` is false."""
    if not options.get("show_file_header", True):
        return ""
    if comment == "/*":
        return f"/**\n * {GENERATED_NOTICE}\n */\n\n"
    return f"{comment} {GENERATED_NOTICE}\n\n"


def render_value(value: Any) -> str:
    """Render a transformed value as source text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(render_value(v) for v in value)
    return json.dumps(value, ensure_ascii=False)


def sort_by_reference(tokens: list[DesignToken]) -> list[DesignToken]:
    """Stable order in which every token follows the tokens it refers to.

    Only references between tokens of the given list count.
    """
    by_path = {token.dotted_path: token for token in tokens}
    ordered: list[DesignToken] = []
    done: set[str] = set()
    visiting: set[str] = set()

    def _visit(token: DesignToken) -> None:
        path = token.dotted_path
        if path in done or path in visiting:
            return
        visiting.add(path)
        for ref in find_references(token.original_value):
            target = by_path.get(ref)
            if target is not None:
                _visit(target)
        visiting.discard(path)
        done.add(path)
        ordered.append(token)

    for token in tokens:
        _visit(token)
    return ordered


_MATH_OPERATOR = re.compile(r"\s[-+*/]\s")


def reference_value(
    token: DesignToken,
    ctx: FormatContext,
    render_ref: Callable[[DesignToken], str],
    *,
    wrap_math: Callable[[str], str] | None = None,
) -> str | None:
    """Render a token's authored references with ``render_ref``.

    Returns None when the authored value has no references, or when one of
    them points at a token not written to this file; callers then fall
    back to the resolved value.
    """
    original = token.original_value
    if not isinstance(original, str):
        return None
    refs = find_references(original)
    if not refs:
        return None

    targets = {ref: ctx.lookup(ref) for ref in refs}
    missing = [ref for ref, target in targets.items() if target is None]
    if missing:
        logger.debug(
            f"{token.dotted_path}: referenced token(s) {', '.join(missing)} not in output, "
            "writing resolved value"
        )
        return None

    if whole_reference(original) is not None:
        return render_ref(targets[refs[0]])  # type: ignore[arg-type]

    rendered = REFERENCE_PATTERN.sub(
        lambda m: render_ref(targets[m.group(1).strip()]),  # type: ignore[arg-type]
        original,
    )
    if wrap_math is not None and _MATH_OPERATOR.search(original):
        rendered = wrap_math(rendered)
    return rendered


# =============================================================================
# CSS / SCSS
# =============================================================================


def css_variables(ctx: FormatContext) -> str:
    """CSS custom properties.

    Options:
        selector: Block selector (default ``:root``).
        output_references: Write ``var(--referenced-name)`` for references.
    """
    selector = ctx.options.get("selector", ":root")
    output_references = ctx.options.get("output_references", False)
    tokens = sort_by_reference(ctx.tokens) if output_references else ctx.tokens

    lines = [f"{selector} {{"]
    for token in tokens:
        value = None
        if output_references:
            value = reference_value(
                token,
                ctx,
                lambda t: f"var(--{t.name})",
                wrap_math=lambda v: f"calc({v})",
            )
        if value is None:
            value = render_value(token.value)
        lines.append(f"  --{token.name}: {value};")
    lines.append("}")
    return file_header(ctx.options, "/*") + "\n".join(lines) + "\n"


def scss_variables(ctx: FormatContext) -> str:
    """SCSS variables.

    Options:
        output_references: Write ``$referenced-name`` for references.
    """
    output_references = ctx.options.get("output_references", False)
    tokens = sort_by_reference(ctx.tokens) if output_references else ctx.tokens

    lines = []
    for token in tokens:
        value = None
        if output_references:
            value = reference_value(token, ctx, lambda t: f"${t.name}")
        if value is None:
            value = render_value(token.value)
        lines.append(f"${token.name}: {value};")
    return file_header(ctx.options) + "\n".join(lines) + "\n"


# =============================================================================
# Flutter
# =============================================================================

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{1,6}")
_LEADING_FLOAT = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

DART_BLACK = "Color(0xFF000000)"


def dart_color(value: Any) -> str:
    """``#2186f3`` -> ``Color(0xFF2186F3)``.

    Strips a leading ``#`` and left-pads to six hex digits; anything that
    is not one to six hex digits becomes opaque black.
    """
    if not isinstance(value, str):
        return DART_BLACK
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if not _HEX_DIGITS.fullmatch(digits):
        return DART_BLACK
    return f"Color(0xFF{digits.rjust(6, '0').upper()})"


def parse_leading_float(value: Any) -> float:
    """Numeric prefix of a value (``16px`` -> 16.0), 0 when there is none."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if match:
            return float(match.group(0))
    return 0.0


def dart_double(value: Any) -> str:
    number = parse_leading_float(value)
    # Dart has no literal for infinity or NaN
    if not math.isfinite(number):
        return "0.0"
    return repr(number)


_DART_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def _check_dart_member(token: DesignToken, seen: dict[str, DesignToken]) -> None:
    context = ErrorContext(file=token.file_path, token=token.dotted_path)
    if not _DART_IDENTIFIER.fullmatch(token.name):
        raise FormatError(f"'{token.name}' is not a valid Dart identifier", context)
    previous = seen.get(token.name)
    if previous is not None:
        raise FormatError(
            f"Dart member '{token.name}' is also generated by {previous.dotted_path}", context
        )
    seen[token.name] = token


def flutter_dart(ctx: FormatContext) -> str:
    """Dart class of design token constants.

    Color tokens become ``Color`` literals, everything else a ``double``.

    Options:
        class_name: Name of the generated class (default ``DesignTokens``).

    Raises:
        FormatError: If a token name is not a Dart identifier or two tokens
            share one.
    """
    class_name = ctx.options.get("class_name", "DesignTokens")

    members = []
    seen: dict[str, DesignToken] = {}
    for token in ctx.tokens:
        _check_dart_member(token, seen)
        if token.type == TokenType.COLOR:
            members.append(f"  static const Color {token.name} = {dart_color(token.value)};")
        else:
            members.append(f"  static const double {token.name} = {dart_double(token.value)};")

    lines = [
        "import 'package:flutter/material.dart';",
        "",
        f"class {class_name} {{",
        f"  {class_name}._();",
        "",
        *members,
        "}",
    ]
    return file_header(ctx.options) + "\n".join(lines) + "\n"


# =============================================================================
# Nested object / JSON
# =============================================================================


def tokens_to_nested(tokens: list[DesignToken]) -> dict[str, Any]:
    """Rebuild the nested token tree from token paths.

    For every token with path ``[a, b, c]`` and value ``v`` the result
    satisfies ``obj[a][b][c] == v``.

    Raises:
        FormatError: If a path is both a value and a group.
    """
    root: dict[str, Any] = {}
    for token in tokens:
        node = root
        for depth, segment in enumerate(token.path[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise FormatError(
                    f"'{'.'.join(token.path[: depth + 1])}' is a token and cannot hold children",
                    ErrorContext(file=token.file_path, token=token.dotted_path),
                )
            node = child
        leaf = token.path[-1]
        if isinstance(node.get(leaf), dict):
            raise FormatError(
                "Token path is also a group of other tokens",
                ErrorContext(file=token.file_path, token=token.dotted_path),
            )
        node[leaf] = token.value
    return root


def typed_object(ctx: FormatContext) -> str:
    """TypeScript module exporting the nested tokens ``as const``.

    Options:
        export_name: Name of the exported constant (default ``tokens``).
        type_name: Name of the exported type (default ``Tokens``).
    """
    export_name = ctx.options.get("export_name", "tokens")
    type_name = ctx.options.get("type_name", "Tokens")
    body = json.dumps(tokens_to_nested(ctx.tokens), indent=2, ensure_ascii=False)
    return (
        file_header(ctx.options)
        + f"export const {export_name} = {body} as const;\n\n"
        + f"export type {type_name} = typeof {export_name};\n"
    )


def json_nested(ctx: FormatContext) -> str:
    return json.dumps(tokens_to_nested(ctx.tokens), indent=2, ensure_ascii=False) + "\n"


def json_flat(ctx: FormatContext) -> str:
    flat = {token.name: token.value for token in ctx.tokens}
    return json.dumps(flat, indent=2, ensure_ascii=False) + "\n"


def default_formats() -> dict[str, Formatter]:
    """Return a fresh mapping of the built-in formats."""
    return {
        "css/variables": css_variables,
        "scss/variables": scss_variables,
        "flutter/dart": flutter_dart,
        "typed-object": typed_object,
        "json/nested": json_nested,
        "json/flat": json_flat,
    }
