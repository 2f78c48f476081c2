"""Tests for reference resolution."""

from __future__ import annotations

import pytest

from tokenforge.core.errors import (
    CircularReferenceError,
    ReferenceResolutionError,
    UnresolvedReferenceError,
)
from tokenforge.core.resolver import ReferenceResolver, get_reference_paths, resolve_references


def by_path(tokens):
    return {t.dotted_path: t for t in tokens}


class TestResolveReferences:
    """Test whole-value and embedded references."""

    def test_chain_resolves_to_literal(self, make_token):
        tokens = [
            make_token("color.primitive.blue", "#0066ff", "color"),
            make_token("color.brand", "{color.primitive.blue}", "color"),
            make_token("color.action.primary", "{color.brand}", "color"),
        ]
        resolved = by_path(resolve_references(tokens))
        assert resolved["color.action.primary"].value == "#0066ff"
        assert resolved["color.action.primary"].original_value == "{color.brand}"

    def test_whole_reference_keeps_native_type(self, make_token):
        tokens = [
            make_token("font.family.sans", ["Roboto", "sans-serif"], "fontFamily"),
            make_token("font.family.body", "{font.family.sans}", "fontFamily"),
            make_token("opacity.half", 0.5, "number"),
            make_token("opacity.disabled", "{opacity.half}", "number"),
        ]
        resolved = by_path(resolve_references(tokens))
        assert resolved["font.family.body"].value == ["Roboto", "sans-serif"]
        assert resolved["opacity.disabled"].value == 0.5

    def test_embedded_references_interpolated(self, make_token):
        tokens = [
            make_token("spacing.base", "8px", "dimension"),
            make_token("spacing.double", "{spacing.base} * 2", "dimension"),
            make_token("color.border", "#ccc", "color"),
            make_token("border.default", "1px solid {color.border}", "border"),
            make_token("font.sans", ["Inter", "sans-serif"], "fontFamily"),
            make_token("font.stack", "{font.sans}, system-ui", "fontFamily"),
        ]
        resolved = by_path(resolve_references(tokens))
        assert resolved["spacing.double"].value == "8px * 2"
        assert resolved["border.default"].value == "1px solid #ccc"
        assert resolved["font.stack"].value == "Inter, sans-serif, system-ui"

    def test_references_inside_structures(self, make_token):
        tokens = [
            make_token("color.black", "#000", "color"),
            make_token("shadow.card", [{"color": "{color.black}", "blur": "2px"}], "shadow"),
        ]
        resolved = by_path(resolve_references(tokens))
        assert resolved["shadow.card"].value == [{"color": "#000", "blur": "2px"}]

    def test_resolved_values_are_independent(self, make_token):
        tokens = [
            make_token("font.sans", ["Inter"], "fontFamily"),
            make_token("font.a", "{font.sans}", "fontFamily"),
            make_token("font.b", "{font.sans}", "fontFamily"),
        ]
        resolved = by_path(resolve_references(tokens))
        resolved["font.a"].value.append("mutated")
        assert resolved["font.b"].value == ["Inter"]
        assert resolved["font.sans"].value == ["Inter"]

    def test_order_preserved(self, make_token):
        tokens = [
            make_token("b", "{a}"),
            make_token("a", 1),
        ]
        assert [t.dotted_path for t in resolve_references(tokens)] == ["b", "a"]


class TestResolutionErrors:
    """Test error collection."""

    def test_missing_reference(self, make_token):
        tokens = [make_token("color.action", "{color.nope}", "color")]
        with pytest.raises(ReferenceResolutionError) as exc:
            resolve_references(tokens)
        [error] = exc.value.errors
        assert isinstance(error, UnresolvedReferenceError)
        assert error.reference == "color.nope"
        assert "color.action" in str(error)

    def test_group_reference_is_unresolved(self, make_token):
        tokens = [
            make_token("color.blue.500", "#00f", "color"),
            make_token("color.action", "{color.blue}", "color"),
        ]
        with pytest.raises(ReferenceResolutionError, match="color.blue"):
            resolve_references(tokens)

    def test_cycle_detected(self, make_token):
        tokens = [
            make_token("a", "{b}"),
            make_token("b", "{c}"),
            make_token("c", "{a}"),
        ]
        with pytest.raises(ReferenceResolutionError) as exc:
            resolve_references(tokens)
        [error] = exc.value.errors
        assert isinstance(error, CircularReferenceError)
        assert error.chain == ["a", "b", "c", "a"]

    def test_all_errors_collected(self, make_token):
        tokens = [
            make_token("x", "{missing.one}"),
            make_token("y", "{missing.two}"),
            make_token("z", "{x}"),
            make_token("ok", 1),
        ]
        with pytest.raises(ReferenceResolutionError) as exc:
            resolve_references(tokens)
        refs = sorted(e.reference for e in exc.value.errors)
        assert refs == ["missing.one", "missing.two"]
        assert "2 reference error(s)" in str(exc.value)


class TestReferenceResolver:
    """Test the resolver used directly."""

    def test_resolve_value(self, make_token):
        resolver = ReferenceResolver([make_token("size.4", "16px", "dimension")])
        assert resolver.resolve_value("{size.4}") == "16px"
        assert resolver.resolve_value("calc({size.4} + 1px)") == "calc(16px + 1px)"
        assert resolver.resolve_value(3) == 3

    def test_get_reference_paths(self, make_token):
        token = make_token("border.x", "{border.width} solid {color.border}", "border")
        assert get_reference_paths(token) == ["border.width", "color.border"]
