"""
Design token IR types.

A DesignToken is one named value from a DTCG token file. Tokens flow
through the pipeline (load -> expand -> resolve -> transform -> format)
as immutable models; each stage returns updated copies.
"""

from __future__ import annotations

import re
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Brace-delimited reference: {color.primitive.blue.500}
REFERENCE_PATTERN = re.compile(r"\{([^{}]+)\}")


class TokenType(StrEnum):
    """DTCG token types understood by the built-in transforms."""

    COLOR = "color"
    DIMENSION = "dimension"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    FONT_SIZE = "fontSize"
    LINE_HEIGHT = "lineHeight"
    LETTER_SPACING = "letterSpacing"
    DURATION = "duration"
    CUBIC_BEZIER = "cubicBezier"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STROKE_STYLE = "strokeStyle"
    SHADOW = "shadow"
    TYPOGRAPHY = "typography"
    BORDER = "border"
    TRANSITION = "transition"
    GRADIENT = "gradient"
    OTHER = "other"


COMPOSITE_TYPES: frozenset[str] = frozenset(
    {
        TokenType.SHADOW,
        TokenType.TYPOGRAPHY,
        TokenType.BORDER,
        TokenType.TRANSITION,
    }
)

# Types whose scalar values are lengths
DIMENSION_TYPES: frozenset[str] = frozenset(
    {
        TokenType.DIMENSION,
        TokenType.FONT_SIZE,
        TokenType.LETTER_SPACING,
    }
)

# Property types for the children of expanded composite tokens
EXPAND_TYPES_MAP: dict[str, dict[str, str]] = {
    TokenType.TYPOGRAPHY: {
        "fontFamily": TokenType.FONT_FAMILY,
        "fontWeight": TokenType.FONT_WEIGHT,
        "fontSize": TokenType.DIMENSION,
        "lineHeight": TokenType.LINE_HEIGHT,
        "letterSpacing": TokenType.DIMENSION,
        "paragraphSpacing": TokenType.DIMENSION,
        "textDecoration": TokenType.OTHER,
        "textCase": TokenType.OTHER,
    },
    TokenType.SHADOW: {
        "color": TokenType.COLOR,
        "offsetX": TokenType.DIMENSION,
        "offsetY": TokenType.DIMENSION,
        "blur": TokenType.DIMENSION,
        "spread": TokenType.DIMENSION,
        "inset": TokenType.BOOLEAN,
    },
    TokenType.BORDER: {
        "color": TokenType.COLOR,
        "width": TokenType.DIMENSION,
        "style": TokenType.STROKE_STYLE,
    },
    TokenType.TRANSITION: {
        "duration": TokenType.DURATION,
        "delay": TokenType.DURATION,
        "timingFunction": TokenType.CUBIC_BEZIER,
    },
}


class DesignToken(BaseModel):
    """A single design token.

    Attributes:
        path: Path segments from the root of the token tree.
        value: Current value (resolved and transformed as the pipeline runs).
        original_value: Value as authored, references intact.
        type: DTCG type, declared on the token or inherited from a group.
        description: Optional ``$description``.
        file_path: File the token was defined in.
        name: Output name; set by name transforms, dotted path until then.
        is_source: False for tokens loaded only through ``include`` globs.
    """

    model_config = ConfigDict(frozen=True)

    path: tuple[str, ...] = Field(min_length=1)
    value: Any
    original_value: Any = None
    type: str | None = None
    description: str | None = None
    file_path: Path | None = None
    name: str = ""
    is_source: bool = True

    def model_post_init(self, __context: Any) -> None:
        # Frozen model: write the defaults straight into __dict__
        if self.original_value is None:
            self.__dict__["original_value"] = self.value
        if not self.name:
            self.__dict__["name"] = self.dotted_path

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)

    @property
    def reference(self) -> str:
        """Reference string pointing at this token."""
        return "{" + self.dotted_path + "}"

    @property
    def is_composite(self) -> bool:
        return self.type in COMPOSITE_TYPES

    @property
    def has_references(self) -> bool:
        """Whether the authored value refers to other tokens."""
        return bool(find_references(self.original_value))


def find_references(value: Any) -> list[str]:
    """Return the dotted paths referenced anywhere inside a value.

    Walks nested lists and mappings; order follows first appearance.
    """
    found: list[str] = []

    def _walk(item: Any) -> None:
        if isinstance(item, str):
            for match in REFERENCE_PATTERN.finditer(item):
                ref = match.group(1).strip()
                if ref not in found:
                    found.append(ref)
        elif isinstance(item, dict):
            for sub in item.values():
                _walk(sub)
        elif isinstance(item, (list, tuple)):
            for sub in item:
                _walk(sub)

    _walk(value)
    return found


def whole_reference(value: Any) -> str | None:
    """Return the referenced path if ``value`` is exactly one reference."""
    if not isinstance(value, str):
        return None
    match = REFERENCE_PATTERN.fullmatch(value.strip())
    return match.group(1).strip() if match else None
