"""
Token tree preprocessors.

A preprocessor receives one parsed token file (a nested dict) and returns
a new tree. They run before flattening, in the order listed in the build
configuration's ``preprocessors``.

The ``tokens-studio`` preprocessor accepts files exported by Tokens Studio
for Figma alongside plain DTCG files.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Preprocessor = Callable[[dict[str, Any]], dict[str, Any]]

# Legacy (un-prefixed) keys and their DTCG spelling
_LEGACY_KEYS: dict[str, str] = {
    "value": "$value",
    "type": "$type",
    "description": "$description",
}

# Tokens Studio type names -> DTCG type names
TOKENS_STUDIO_TYPES: dict[str, str] = {
    "spacing": "dimension",
    "sizing": "dimension",
    "borderRadius": "dimension",
    "borderWidth": "dimension",
    "fontSizes": "dimension",
    "letterSpacing": "dimension",
    "paragraphSpacing": "dimension",
    "paragraphIndent": "dimension",
    "fontFamilies": "fontFamily",
    "fontWeights": "fontWeight",
    "lineHeights": "lineHeight",
    "boxShadow": "shadow",
    "opacity": "number",
    "textCase": "other",
    "textDecoration": "other",
}

# Shadow layer keys -> DTCG shadow property names
_SHADOW_KEYS: dict[str, str] = {"x": "offsetX", "y": "offsetY"}


def _is_legacy_token(node: dict[str, Any]) -> bool:
    if "$value" in node or "value" not in node:
        return False
    value = node["value"]
    # A child group that happens to be called "value" holds token nodes
    if isinstance(value, dict):
        return not any(
            isinstance(v, dict) and ("$value" in v or "value" in v) for v in value.values()
        )
    return True


def _align_shadow_layer(layer: Any) -> Any:
    if not isinstance(layer, dict):
        return layer
    aligned: dict[str, Any] = {}
    for key, value in layer.items():
        if key == "type":
            aligned["inset"] = value == "innerShadow"
            continue
        aligned[_SHADOW_KEYS.get(key, key)] = value
    return aligned


def _align_node(node: dict[str, Any]) -> dict[str, Any]:
    if _is_legacy_token(node):
        node = {_LEGACY_KEYS.get(k, k): v for k, v in node.items()}

    aligned: dict[str, Any] = {}
    for key, value in node.items():
        key = str(key)
        if key == "$type" and isinstance(value, str):
            aligned[key] = TOKENS_STUDIO_TYPES.get(value, value)
        elif key.startswith("$"):
            aligned[key] = value
        elif isinstance(value, dict):
            aligned[key] = _align_node(value)
        else:
            aligned[key] = value

    if aligned.get("$type") == "shadow" and "$value" in aligned:
        raw = aligned["$value"]
        if isinstance(raw, list):
            aligned["$value"] = [_align_shadow_layer(layer) for layer in raw]
        else:
            aligned["$value"] = _align_shadow_layer(raw)
    return aligned


def tokens_studio(tree: dict[str, Any]) -> dict[str, Any]:
    """Normalise a Tokens Studio export into DTCG.

    - ``value``/``type``/``description`` become ``$value``/``$type``/``$description``
    - Tokens Studio type names map to DTCG types (``spacing`` -> ``dimension``)
    - Shadow layers use ``offsetX``/``offsetY``; ``type: innerShadow`` -> ``inset``
    """
    return _align_node(tree)


def default_preprocessors() -> dict[str, Preprocessor]:
    """Return a fresh mapping of the built-in preprocessors."""
    return {"tokens-studio": tokens_studio}
