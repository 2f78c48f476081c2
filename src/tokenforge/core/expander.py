"""
Composite token expansion.

Splits composite tokens (typography, shadow, border, transition) into one
token per property so every platform can address them individually:

    shadow.card = [{color, offsetX, ...}, {color, offsetX, ...}]
    ->  shadow.card.1.color, shadow.card.1.offsetX, ..., shadow.card.2.color, ...

    text-style.body = {fontFamily, fontSize, ...}
    ->  text-style.body.fontFamily, text-style.body.fontSize, ...

Layers of a multi-layer value are numbered from 1. A composite whose value
is a reference to another composite is dereferenced against the raw token
set before expansion; references inside property values are left for the
resolver.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import CircularReferenceError, ErrorContext, UnresolvedReferenceError
from .ir import DesignToken, ExpandConfig, whole_reference

logger = logging.getLogger(__name__)


def _dereference(
    token: DesignToken,
    by_path: dict[str, DesignToken],
) -> Any:
    """Follow whole-value references from ``token`` to a concrete raw value."""
    value = token.value
    chain = [token.dotted_path]
    while (ref := whole_reference(value)) is not None:
        if ref in chain:
            raise CircularReferenceError(
                chain + [ref], ErrorContext(file=token.file_path, token=token.dotted_path)
            )
        target = by_path.get(ref)
        if target is None:
            raise UnresolvedReferenceError(
                ref, ErrorContext(file=token.file_path, token=token.dotted_path)
            )
        chain.append(ref)
        value = target.value
    return value


def _child(parent: DesignToken, key: str, value: Any, child_type: str | None) -> DesignToken:
    return DesignToken(
        path=parent.path + (key,),
        value=value,
        type=child_type,
        description=parent.description,
        file_path=parent.file_path,
        is_source=parent.is_source,
    )


def _expand_value(
    parent: DesignToken,
    value: Any,
    parent_type: str,
    types_map: dict[str, str],
) -> list[DesignToken]:
    if isinstance(value, dict):
        return [
            _child(parent, str(key), sub, types_map.get(str(key), str(key)))
            for key, sub in value.items()
        ]

    expanded: list[DesignToken] = []
    for index, layer in enumerate(value, start=1):
        layer_token = _child(parent, str(index), layer, parent_type)
        if isinstance(layer, dict):
            expanded.extend(_expand_value(layer_token, layer, parent_type, types_map))
        else:
            expanded.append(layer_token)
    return expanded


def expand_token(
    token: DesignToken,
    config: ExpandConfig,
    by_path: dict[str, DesignToken],
) -> list[DesignToken]:
    """Expand one token; non-composite and scalar values come back unchanged."""
    if token.type is None or not config.should_expand(token.type):
        return [token]

    value = _dereference(token, by_path)
    if not isinstance(value, (dict, list)):
        return [token]

    children = _expand_value(token, value, token.type, config.types_map.get(token.type, {}))
    logger.debug(f"Expanded {token.dotted_path} into {len(children)} tokens")
    return children


def expand_tokens(tokens: list[DesignToken], config: ExpandConfig) -> list[DesignToken]:
    """Replace every composite token with its property tokens, keeping order.

    Raises:
        CircularReferenceError: If a composite refers back to itself.
        UnresolvedReferenceError: If a composite refers to a missing token.
    """
    if not config.enabled:
        return list(tokens)

    by_path = {token.dotted_path: token for token in tokens}
    expanded: list[DesignToken] = []
    for token in tokens:
        expanded.extend(expand_token(token, config, by_path))
    return expanded
