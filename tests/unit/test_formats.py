"""Tests for output formats."""

from __future__ import annotations

import json

import pytest

from tokenforge.core.errors import FormatError
from tokenforge.core.formats import (
    GENERATED_NOTICE,
    FormatContext,
    css_variables,
    dart_color,
    dart_double,
    flutter_dart,
    json_flat,
    scss_variables,
    sort_by_reference,
    tokens_to_nested,
    typed_object,
)
from tokenforge.core.ir import FileConfig, PlatformConfig


def context(tokens, fmt="css/variables", **options) -> FormatContext:
    return FormatContext(
        tokens=tokens,
        dictionary=tokens,
        platform=PlatformConfig(),
        file=FileConfig(destination="out", format=fmt),
        options=options,
    )


@pytest.fixture
def output_token(make_token):
    """Build a transformed token: resolved value plus authored original."""

    def _make(dotted, value, original=None, type=None, name=None):
        return make_token(
            dotted,
            value,
            type,
            original_value=original if original is not None else value,
            name=name or dotted.replace(".", "-"),
        )

    return _make


class TestDartColor:
    """Test hex to Flutter Color conversion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("#2186f3", "Color(0xFF2186F3)"),
            ("#2186F3", "Color(0xFF2186F3)"),
            ("2186f3", "Color(0xFF2186F3)"),
            ("#fff", "Color(0xFF000FFF)"),
            ("#1", "Color(0xFF000001)"),
        ],
    )
    def test_hex(self, value, expected):
        assert dart_color(value) == expected

    @pytest.mark.parametrize(
        "value", ["rgba(0, 0, 0, 0.12)", "#ff000000", "#", "red", "", None, 12]
    )
    def test_unparseable_is_black(self, value):
        assert dart_color(value) == "Color(0xFF000000)"

    def test_output_is_uppercase_hex(self):
        for value in ["#abcdef", "#a1b2c3", "#0f0f0f"]:
            rendered = dart_color(value)
            digits = rendered[len("Color(0xFF") : -1]
            assert len(digits) == 6
            assert digits == digits.upper()


class TestDartDouble:
    """Test numeric prefix parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("16px", "16.0"),
            ("1.5rem", "1.5"),
            (".5rem", "0.5"),
            ("-2px", "-2.0"),
            (4, "4.0"),
            (0.38, "0.38"),
            ("auto", "0.0"),
            ("", "0.0"),
            (None, "0.0"),
            (True, "0.0"),
            ([1, 2], "0.0"),
            ("1e999px", "0.0"),
            ("-1e999", "0.0"),
            (float("inf"), "0.0"),
            (float("nan"), "0.0"),
        ],
    )
    def test_parse(self, value, expected):
        assert dart_double(value) == expected


class TestFlutterDart:
    """Test the flutter/dart format."""

    def test_class_layout(self, output_token):
        tokens = [
            output_token("color.primary", "#2186f3", type="color", name="colorPrimary"),
            output_token("spacing.base", "8px", type="dimension", name="spacingBase"),
            output_token("opacity.disabled", 0.38, type="number", name="opacityDisabled"),
        ]
        out = flutter_dart(context(tokens, "flutter/dart"))
        assert out == (
            f"// {GENERATED_NOTICE}\n\n"
            "import 'package:flutter/material.dart';\n"
            "\n"
            "class DesignTokens {\n"
            "  DesignTokens._();\n"
            "\n"
            "  static const Color colorPrimary = Color(0xFF2186F3);\n"
            "  static const double spacingBase = 8.0;\n"
            "  static const double opacityDisabled = 0.38;\n"
            "}\n"
        )

    def test_class_name_option(self, output_token):
        tokens = [output_token("a", 1, type="number", name="a")]
        out = flutter_dart(context(tokens, "flutter/dart", class_name="Tokens"))
        assert "class Tokens {" in out
        assert "  Tokens._();" in out

    @pytest.mark.parametrize("name", ["500Primary", "color-primary", "color primary"])
    def test_invalid_identifier(self, output_token, name):
        tokens = [output_token("color.primary", "#fff", type="color", name=name)]
        with pytest.raises(FormatError, match="not a valid Dart identifier") as exc:
            flutter_dart(context(tokens, "flutter/dart"))
        assert exc.value.context.token == "color.primary"

    def test_duplicate_member(self, output_token):
        tokens = [
            output_token("space.x-small", "4px", type="dimension", name="spaceXSmall"),
            output_token("space.xSmall", "6px", type="dimension", name="spaceXSmall"),
        ]
        with pytest.raises(FormatError, match="space.x-small") as exc:
            flutter_dart(context(tokens, "flutter/dart"))
        assert exc.value.context.token == "space.xSmall"


class TestNested:
    """Test rebuilding the token tree."""

    def test_every_path_indexes_its_value(self, output_token):
        tokens = [
            output_token("color.primitive.blue.500", "#0066ff"),
            output_token("color.primitive.white", "#ffffff"),
            output_token("color.action.primary", "#0066ff"),
            output_token("spacing.4", "16px"),
            output_token("font.family.sans", "Roboto, sans-serif"),
        ]
        nested = tokens_to_nested(tokens)
        for token in tokens:
            node = nested
            for segment in token.path:
                node = node[segment]
            assert node == token.value
        assert list(nested) == ["color", "spacing", "font"]

    def test_value_and_group_conflict(self, output_token):
        with pytest.raises(FormatError, match="cannot hold children"):
            tokens_to_nested([output_token("a.b", 1), output_token("a.b.c", 2)])
        with pytest.raises(FormatError, match="also a group"):
            tokens_to_nested([output_token("a.b.c", 2), output_token("a.b", 1)])

    def test_typed_object(self, output_token):
        tokens = [
            output_token("spacing.4", "16px"),
            output_token("z-index.modal", 1300),
        ]
        out = typed_object(context(tokens, "typed-object"))
        body = json.dumps({"spacing": {"4": "16px"}, "z-index": {"modal": 1300}}, indent=2)
        assert out == (
            f"// {GENERATED_NOTICE}\n\n"
            f"export const tokens = {body} as const;\n\n"
            "export type Tokens = typeof tokens;\n"
        )

    def test_typed_object_names(self, output_token):
        out = typed_object(
            context([output_token("a", 1)], export_name="theme", type_name="Theme")
        )
        assert "export const theme = {" in out
        assert out.endswith("export type Theme = typeof theme;\n")


class TestCssVariables:
    """Test the css/variables format."""

    def test_plain_values(self, output_token):
        tokens = [
            output_token("color.primary", "#0066ff", name="ds-color-primary"),
            output_token("font.sans", ["Inter", "sans-serif"], name="ds-font-sans"),
        ]
        out = css_variables(context(tokens))
        assert out == (
            f"/**\n * {GENERATED_NOTICE}\n */\n\n"
            ":root {\n"
            "  --ds-color-primary: #0066ff;\n"
            "  --ds-font-sans: Inter, sans-serif;\n"
            "}\n"
        )

    def test_output_references(self, output_token):
        tokens = [
            output_token("color.action", "#0066ff", "{color.blue}", name="ds-color-action"),
            output_token("color.blue", "#0066ff", name="ds-color-blue"),
            output_token("spacing.base", "8px", name="ds-spacing-base"),
            output_token("spacing.double", "16px", "{spacing.base} * 2", name="ds-spacing-double"),
            output_token(
                "border.x", "1px solid #0066ff", "1px solid {color.blue}", name="ds-border-x"
            ),
        ]
        out = css_variables(context(tokens, output_references=True, show_file_header=False))
        assert out.splitlines() == [
            ":root {",
            "  --ds-color-blue: #0066ff;",
            "  --ds-color-action: var(--ds-color-blue);",
            "  --ds-spacing-base: 8px;",
            "  --ds-spacing-double: calc(var(--ds-spacing-base) * 2);",
            "  --ds-border-x: 1px solid var(--ds-color-blue);",
            "}",
        ]

    def test_reference_outside_file_writes_value(self, output_token):
        tokens = [output_token("color.action", "#0066ff", "{color.blue}", name="action")]
        out = css_variables(context(tokens, output_references=True))
        assert "--action: #0066ff;" in out

    def test_references_off_writes_values(self, output_token):
        tokens = [
            output_token("color.blue", "#0066ff", name="blue"),
            output_token("color.action", "#0066ff", "{color.blue}", name="action"),
        ]
        out = css_variables(context(tokens))
        assert "--action: #0066ff;" in out

    def test_selector(self, output_token):
        out = css_variables(
            context([output_token("a", "1", name="a")], selector="[data-theme='dark']")
        )
        assert "[data-theme='dark'] {" in out


class TestScssVariables:
    """Test the scss/variables format."""

    def test_references(self, output_token):
        tokens = [
            output_token("color.blue", "#0066ff", name="ds-color-blue"),
            output_token("color.action", "#0066ff", "{color.blue}", name="ds-color-action"),
        ]
        out = scss_variables(context(tokens, "scss/variables", output_references=True))
        assert out == (
            f"// {GENERATED_NOTICE}\n\n"
            "$ds-color-blue: #0066ff;\n"
            "$ds-color-action: $ds-color-blue;\n"
        )


class TestHelpers:
    """Test shared format helpers."""

    def test_sort_by_reference_is_stable(self, output_token):
        tokens = [
            output_token("c", 1, "{b}"),
            output_token("x", 2),
            output_token("b", 1, "{a}"),
            output_token("a", 1),
        ]
        assert [t.dotted_path for t in sort_by_reference(tokens)] == ["a", "b", "c", "x"]

    def test_json_flat(self, output_token):
        tokens = [output_token("spacing.4", "16px", name="spacing4")]
        assert json.loads(json_flat(context(tokens))) == {"spacing4": "16px"}
