"""
Name and value transforms.

A platform lists transforms by name, directly or through a transform group.
Value transforms run in order on resolved values; each one's matcher decides
which tokens it touches. Name transforms compute the output name from the
token path (and platform prefix); when several are listed the last wins.
"""

from __future__ import annotations

import ast
import logging
import operator
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Literal

from .errors import ConfigError, ErrorContext, TokenForgeError, TransformError
from .ir import DIMENSION_TYPES, DesignToken, PlatformConfig, TokenType

logger = logging.getLogger(__name__)

TransformKind = Literal["name", "value"]


@dataclass(frozen=True)
class Transform:
    """A named name- or value-transform."""

    name: str
    kind: TransformKind
    transformer: Callable[[DesignToken, PlatformConfig], Any]
    matcher: Callable[[DesignToken], bool] | None = None

    def applies_to(self, token: DesignToken) -> bool:
        return self.matcher is None or self.matcher(token)


# =============================================================================
# Helpers
# =============================================================================


def format_number(value: float | int) -> str:
    """Render a number the way CSS authors write it (``16``, ``0.5``)."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{round(value, 4)}"
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Names
# =============================================================================

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")
_WORD_SEPARATOR = re.compile(r"[^A-Za-z0-9]+")


def split_words(parts: Iterable[str]) -> list[str]:
    """Split path segments into lowercase words.

    Separators are any non-alphanumeric run and camelCase boundaries:
    ``["font", "lineHeight", "neutral-variant"]`` ->
    ``["font", "line", "height", "neutral", "variant"]``.
    """
    words: list[str] = []
    for part in parts:
        spaced = _ACRONYM_BOUNDARY.sub(r"\1 \2", _CAMEL_BOUNDARY.sub(r"\1 \2", part))
        words.extend(w.lower() for w in _WORD_SEPARATOR.split(spaced) if w)
    return words


def _name_words(token: DesignToken, platform: PlatformConfig) -> list[str]:
    parts = list(token.path)
    if platform.prefix:
        parts.insert(0, platform.prefix)
    return split_words(parts)


def name_kebab(token: DesignToken, platform: PlatformConfig) -> str:
    return "-".join(_name_words(token, platform))


def name_snake(token: DesignToken, platform: PlatformConfig) -> str:
    return "_".join(_name_words(token, platform))


def name_constant(token: DesignToken, platform: PlatformConfig) -> str:
    return "_".join(_name_words(token, platform)).upper()


def name_camel(token: DesignToken, platform: PlatformConfig) -> str:
    words = _name_words(token, platform)
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


def name_pascal(token: DesignToken, platform: PlatformConfig) -> str:
    return "".join(w.capitalize() for w in _name_words(token, platform))


# =============================================================================
# Math
# =============================================================================

_MATH_UNITS = ("px", "rem", "em", "%", "ms", "s", "vh", "vw", "deg", "pt")
_NUMBER = re.compile(r"\d*\.?\d+(?:[eE][-+]?\d+)?")
_UNIT = re.compile(r"[a-z%]+")

_BIN_OPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS: dict[type, Callable[[Any], Any]] = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}


def _starts_signed_value(text: str, i: int) -> bool:
    """Whether the sign at ``text[i]`` begins a new value (``4px -2px``).

    A sign with whitespace before it and none after it is a negative
    operand of a multi-value string, not subtraction.
    """
    before = i > 0 and text[i - 1].isspace()
    after = i + 1 < len(text) and text[i + 1].isspace()
    return before and not after


def _scan_math(text: str) -> tuple[str, str] | None:
    """Strip units from an arithmetic expression.

    Returns ``(expression, unit)`` when ``text`` is arithmetic over numbers
    sharing at most one unit, None for anything else (including plain
    multi-value strings like ``0 -1px 2px``).
    """
    out: list[str] = []
    units: set[str] = set()
    has_operator = False
    expect_operand = True
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if expect_operand and ch in "+-" and i + 1 < len(text) and text[i + 1] in "0123456789.":
            # unary sign attached to a number
            out.append(ch)
            i += 1
            continue
        number = _NUMBER.match(text, i)
        if number and expect_operand:
            out.append(number.group(0))
            i = number.end()
            unit = _UNIT.match(text, i)
            if unit:
                if unit.group(0) not in _MATH_UNITS:
                    return None
                units.add(unit.group(0))
                i = unit.end()
            expect_operand = False
            continue
        if ch in "+-*/" and not expect_operand:
            if ch in "+-" and _starts_signed_value(text, i):
                return None
            out.append(ch)
            has_operator = True
            expect_operand = True
            i += 1
            continue
        if ch == "(" and expect_operand:
            out.append(ch)
            i += 1
            continue
        if ch == ")" and not expect_operand:
            out.append(ch)
            i += 1
            continue
        return None
    if not has_operator or expect_operand or len(units) > 1:
        return None
    return " ".join(out), (units.pop() if units else "")


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and _is_number(node.value):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        return _BIN_OPS[type(node.op)](_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f"Unsupported expression element: {ast.dump(node)}")


def resolve_math(value: str) -> str:
    """Evaluate ``8px * 2`` -> ``16px``; other strings come back unchanged."""
    scanned = _scan_math(value)
    if scanned is None:
        return value
    expression, unit = scanned
    try:
        result = _eval_node(ast.parse(expression, mode="eval"))
    except (SyntaxError, ValueError, ZeroDivisionError) as e:
        raise ValueError(f"Cannot evaluate '{value}': {e}") from e
    return f"{format_number(result)}{unit}"


# =============================================================================
# Values
# =============================================================================

_FONT_WEIGHTS: dict[str, int] = {
    "thin": 100,
    "hairline": 100,
    "extralight": 200,
    "ultralight": 200,
    "light": 300,
    "normal": 400,
    "regular": 400,
    "book": 400,
    "medium": 500,
    "semibold": 600,
    "demibold": 600,
    "bold": 700,
    "extrabold": 800,
    "ultrabold": 800,
    "black": 900,
    "heavy": 900,
}

_HEX_COLOR = re.compile(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")
_UNITLESS_NUMBER = re.compile(r"-?\d*\.?\d+")


def _percent(value: Any) -> Any:
    if isinstance(value, str) and value.strip().endswith("%"):
        return format_number(float(value.strip()[:-1]) / 100)
    return value


def _size_px(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    if _is_number(value):
        return "0" if value == 0 else f"{format_number(value)}px"
    if isinstance(value, str) and _UNITLESS_NUMBER.fullmatch(value.strip()):
        number = float(value)
        return "0" if number == 0 else f"{format_number(number)}px"
    return value


def _font_weight(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    if not isinstance(value, str):
        return value
    key = re.sub(r"[\s_-]", "", value).lower()
    weight = _FONT_WEIGHTS.get(key)
    return str(weight) if weight is not None else value


def _dtcg_object(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    return f"{format_number(value['value'])}{value['unit']}"


def _quote_family(name: str) -> str:
    name = name.strip()
    if " " in name and not (name.startswith(("'", '"'))):
        return f"'{name}'"
    return name


def _font_family(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    if isinstance(value, list):
        return ", ".join(_quote_family(str(v)) for v in value)
    return value


def _cubic_bezier(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    return f"cubic-bezier({', '.join(format_number(v) for v in value)})"


def _color_hex(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value.strip()
    digits = _HEX_COLOR.fullmatch(value).group(1)  # type: ignore[union-attr]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits.lower()}"


def _css_part(value: Any) -> str:
    if _is_number(value):
        return format_number(value)
    if isinstance(value, list):
        return ", ".join(_quote_family(str(v)) for v in value)
    return str(value)


def _shadow_layer(layer: dict[str, Any]) -> str:
    parts = [
        _css_part(layer.get(key, 0)) for key in ("offsetX", "offsetY", "blur", "spread")
    ]
    if "color" in layer:
        parts.append(_css_part(layer["color"]))
    if layer.get("inset"):
        parts.insert(0, "inset")
    return " ".join(parts)


def _shadow_shorthand(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    layers = value if isinstance(value, list) else [value]
    return ", ".join(_shadow_layer(layer) for layer in layers if isinstance(layer, dict))


def _border_shorthand(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    parts = [value.get("width"), value.get("style", "solid"), value.get("color")]
    return " ".join(_css_part(p) for p in parts if p is not None)


def _typography_shorthand(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    size = _css_part(value.get("fontSize", "16px"))
    if "lineHeight" in value:
        size = f"{size}/{_css_part(value['lineHeight'])}"
    parts = [value.get("fontWeight"), size, value.get("fontFamily")]
    return " ".join(_css_part(p) for p in parts if p is not None)


def _transition_shorthand(token: DesignToken, platform: PlatformConfig) -> Any:
    value = token.value
    timing = value.get("timingFunction")
    if isinstance(timing, list):
        timing = f"cubic-bezier({', '.join(format_number(v) for v in timing)})"
    parts = [value.get("duration"), timing, value.get("delay")]
    return " ".join(_css_part(p) for p in parts if p is not None)


def _of_type(*types: str) -> Callable[[DesignToken], bool]:
    return lambda token: token.type in types


def default_transforms() -> dict[str, Transform]:
    """Return a fresh mapping of the built-in transforms."""
    transforms = [
        Transform("name/kebab", "name", name_kebab),
        Transform("name/camel", "name", name_camel),
        Transform("name/snake", "name", name_snake),
        Transform("name/pascal", "name", name_pascal),
        Transform("name/constant", "name", name_constant),
        Transform(
            "ts/resolveMath",
            "value",
            lambda t, p: resolve_math(t.value),
            lambda t: isinstance(t.value, str),
        ),
        Transform(
            "dimension/dtcg",
            "value",
            _dtcg_object,
            lambda t: t.type in DIMENSION_TYPES
            and isinstance(t.value, dict)
            and {"value", "unit"} <= t.value.keys(),
        ),
        Transform(
            "duration/dtcg",
            "value",
            _dtcg_object,
            lambda t: t.type == TokenType.DURATION
            and isinstance(t.value, dict)
            and {"value", "unit"} <= t.value.keys(),
        ),
        Transform("ts/size/px", "value", _size_px, lambda t: t.type in DIMENSION_TYPES),
        Transform(
            "ts/opacity",
            "value",
            lambda t, p: _percent(t.value),
            lambda t: t.type in ("opacity", TokenType.NUMBER) and "opacity" in t.path,
        ),
        Transform(
            "ts/size/lineheight",
            "value",
            lambda t, p: _percent(t.value),
            _of_type(TokenType.LINE_HEIGHT),
        ),
        Transform(
            "ts/typography/fontWeight", "value", _font_weight, _of_type(TokenType.FONT_WEIGHT)
        ),
        Transform("fontFamily/css", "value", _font_family, _of_type(TokenType.FONT_FAMILY)),
        Transform(
            "cubicBezier/css",
            "value",
            _cubic_bezier,
            lambda t: t.type == TokenType.CUBIC_BEZIER
            and isinstance(t.value, list)
            and len(t.value) == 4,
        ),
        Transform(
            "color/hex",
            "value",
            _color_hex,
            lambda t: t.type == TokenType.COLOR
            and isinstance(t.value, str)
            and _HEX_COLOR.fullmatch(t.value.strip()) is not None,
        ),
        Transform(
            "shadow/css/shorthand",
            "value",
            _shadow_shorthand,
            lambda t: t.type == TokenType.SHADOW and isinstance(t.value, (dict, list)),
        ),
        Transform(
            "border/css/shorthand",
            "value",
            _border_shorthand,
            lambda t: t.type == TokenType.BORDER and isinstance(t.value, dict),
        ),
        Transform(
            "typography/css/shorthand",
            "value",
            _typography_shorthand,
            lambda t: t.type == TokenType.TYPOGRAPHY and isinstance(t.value, dict),
        ),
        Transform(
            "transition/css/shorthand",
            "value",
            _transition_shorthand,
            lambda t: t.type == TokenType.TRANSITION and isinstance(t.value, dict),
        ),
    ]
    return {t.name: t for t in transforms}


_VALUE_TRANSFORMS = [
    "ts/resolveMath",
    "dimension/dtcg",
    "duration/dtcg",
    "ts/size/px",
    "ts/opacity",
    "ts/size/lineheight",
    "ts/typography/fontWeight",
    "fontFamily/css",
    "cubicBezier/css",
    "shadow/css/shorthand",
    "border/css/shorthand",
    "typography/css/shorthand",
    "transition/css/shorthand",
]


def default_transform_groups() -> dict[str, list[str]]:
    """Return a fresh mapping of the built-in transform groups."""
    return {
        "tokens-studio": [*_VALUE_TRANSFORMS, "name/camel"],
        "css": [*_VALUE_TRANSFORMS, "color/hex", "name/kebab"],
        "scss": [*_VALUE_TRANSFORMS, "color/hex", "name/kebab"],
        "js": [*_VALUE_TRANSFORMS, "name/camel"],
        "flutter": [
            "ts/resolveMath",
            "dimension/dtcg",
            "duration/dtcg",
            "ts/opacity",
            "ts/size/lineheight",
            "ts/typography/fontWeight",
            "color/hex",
            "name/camel",
        ],
    }


# =============================================================================
# Applying transforms
# =============================================================================


def resolve_transforms(
    platform: PlatformConfig,
    transforms: dict[str, Transform],
    groups: dict[str, list[str]],
) -> list[Transform]:
    """List the transforms a platform uses: its group's, then its own.

    Raises:
        ConfigError: On an unknown transform group or transform name.
    """
    names: list[str] = []
    if platform.transform_group:
        if platform.transform_group not in groups:
            raise ConfigError(f"Unknown transform group '{platform.transform_group}'")
        names.extend(groups[platform.transform_group])
    names.extend(platform.transforms)

    resolved: list[Transform] = []
    for name in names:
        if name not in transforms:
            raise ConfigError(f"Unknown transform '{name}'")
        resolved.append(transforms[name])
    return resolved


def transform_token(
    token: DesignToken,
    platform: PlatformConfig,
    transforms: list[Transform],
) -> DesignToken:
    """Apply value transforms in order, then the last matching name transform.

    Raises:
        TransformError: If a transformer fails.
    """
    value_updates = 0
    for transform in transforms:
        if not transform.applies_to(token):
            continue
        try:
            result = transform.transformer(token, platform)
        except TokenForgeError:
            raise
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise TransformError(
                f"Transform '{transform.name}' failed: {e}",
                ErrorContext(file=token.file_path, token=token.dotted_path),
            ) from e
        if transform.kind == "name":
            token = token.model_copy(update={"name": result})
        elif result != token.value:
            token = token.model_copy(update={"value": result})
            value_updates += 1
    if value_updates:
        logger.debug(f"{token.dotted_path}: {value_updates} value transform(s) applied")
    return token


def transform_tokens(
    tokens: list[DesignToken],
    platform: PlatformConfig,
    transforms: dict[str, Transform],
    groups: dict[str, list[str]],
) -> list[DesignToken]:
    """Transform every token for one platform."""
    selected = resolve_transforms(platform, transforms, groups)
    return [transform_token(token, platform, selected) for token in tokens]
