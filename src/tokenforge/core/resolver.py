"""
Reference resolution.

Substitutes brace-delimited references with the values they point at:

- ``"{color.primitive.blue.500}"`` (whole value) takes the target's resolved
  value with its native type, so lists and numbers survive.
- ``"{spacing.4} * 2"`` or ``"1px solid {color.border}"`` (embedded) are
  interpolated as strings.

Chains are followed to the end and memoised. Every broken reference in a
pass is collected and reported together in one ReferenceResolutionError.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from .errors import (
    CircularReferenceError,
    ErrorContext,
    ReferenceResolutionError,
    TokenForgeError,
    UnresolvedReferenceError,
)
from .ir import REFERENCE_PATTERN, DesignToken, find_references, whole_reference

logger = logging.getLogger(__name__)


def _stringify(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(_stringify(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ReferenceResolver:
    """Resolves references between the tokens of one dictionary."""

    def __init__(self, tokens: list[DesignToken]) -> None:
        self._by_path = {token.dotted_path: token for token in tokens}
        self._resolved: dict[str, Any] = {}
        self._failed: dict[str, TokenForgeError] = {}

    def resolve_token(self, token: DesignToken) -> Any:
        """Return the fully resolved value of ``token``."""
        return copy.deepcopy(self._resolve_path(token.dotted_path, [], token))

    def resolve_value(self, value: Any, token: DesignToken | None = None) -> Any:
        """Resolve references in an arbitrary value against this dictionary."""
        return self._resolve_value(value, [], token)

    def _resolve_path(self, path: str, stack: list[str], referrer: DesignToken | None) -> Any:
        if path in self._resolved:
            return self._resolved[path]
        if path in self._failed:
            raise self._failed[path]
        if path in stack:
            chain = stack[stack.index(path) :] + [path]
            raise CircularReferenceError(chain, self._context(referrer))

        token = self._by_path.get(path)
        if token is None:
            raise UnresolvedReferenceError(path, self._context(referrer))

        try:
            value = self._resolve_value(token.value, stack + [path], token)
        except TokenForgeError as e:
            self._failed[path] = e
            raise
        self._resolved[path] = value
        return value

    def _resolve_value(self, value: Any, stack: list[str], token: DesignToken | None) -> Any:
        if isinstance(value, str):
            ref = whole_reference(value)
            if ref is not None:
                return copy.deepcopy(self._resolve_path(ref, stack, token))
            if REFERENCE_PATTERN.search(value) is None:
                return value
            return REFERENCE_PATTERN.sub(
                lambda m: _stringify(self._resolve_path(m.group(1).strip(), stack, token)),
                value,
            )
        if isinstance(value, dict):
            return {k: self._resolve_value(v, stack, token) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve_value(v, stack, token) for v in value]
        return value

    @staticmethod
    def _context(token: DesignToken | None) -> ErrorContext | None:
        if token is None:
            return None
        return ErrorContext(file=token.file_path, token=token.dotted_path)


def resolve_references(tokens: list[DesignToken]) -> list[DesignToken]:
    """Return tokens with every reference in ``value`` substituted.

    ``original_value`` keeps the authored form for formats that output
    references.

    Raises:
        ReferenceResolutionError: Listing every unresolved or circular
            reference found.
    """
    resolver = ReferenceResolver(tokens)
    resolved: list[DesignToken] = []
    errors: list[TokenForgeError] = []

    for token in tokens:
        try:
            value = resolver.resolve_token(token)
        except (UnresolvedReferenceError, CircularReferenceError) as e:
            if not any(e is seen for seen in errors):
                errors.append(e)
            continue
        resolved.append(token.model_copy(update={"value": value}))

    if errors:
        raise ReferenceResolutionError(errors)

    logger.debug(f"Resolved {len(resolved)} tokens")
    return resolved


def get_reference_paths(token: DesignToken) -> list[str]:
    """Dotted paths the token's authored value refers to."""
    return find_references(token.original_value)
