"""Unit tests for declaration classification and prop extraction."""

from pathlib import Path

import pytest

from propkit.extraction import (
    PropertyDescriptor,
    create_prop_descriptors,
    encode,
    find_literal_node,
    format_type,
    get_prop_names,
    is_initial_state_decl,
    is_options_decl,
    is_props_decl,
    is_state_return_decl,
)
from propkit.typequery import Declaration, DeclarationKind, TypeLiteral


def alias(name):
    return Declaration(kind=DeclarationKind.TYPE_ALIAS, name=name, source_path=Path("/x.ts"))


class TestClassifiers:
    """Test declaration classification by name and kind."""

    def test_options(self):
        assert is_options_decl(alias("ButtonOptions"))
        assert is_props_decl(alias("ButtonOptions"))
        assert not is_options_decl(alias("Options"))

    def test_initial_state(self):
        assert is_initial_state_decl(alias("CheckboxInitialState"))
        assert is_props_decl(alias("CheckboxInitialState"))
        assert not is_state_return_decl(alias("CheckboxInitialState"))

    def test_state_return(self):
        assert is_state_return_decl(alias("CheckboxStateReturn"))
        assert not is_props_decl(alias("CheckboxStateReturn"))

    def test_interfaces_never_match(self):
        declaration = Declaration(kind=DeclarationKind.INTERFACE, name="ButtonOptions")
        assert not is_options_decl(declaration)
        assert not is_props_decl(declaration)

    def test_unrelated_names(self):
        assert not is_props_decl(alias("CheckboxHTMLProps"))
        assert not is_state_return_decl(alias("CheckboxState"))


class TestFormatType:
    """Test type label rendering."""

    def test_short_type(self):
        assert format_type("string | undefined") == "<code>string | undefined</code>"

    def test_escaping(self):
        assert format_type('"a" | Array<B>') == "<code>&#34;a&#34; | Array&#60;B&#62;</code>"

    def test_exactly_fifty_characters_not_truncated(self):
        text = "x" * 50
        assert format_type(text) == f"<code>{text}</code>"

    def test_long_type_truncated_with_title(self):
        """Should keep 47 characters plus an ellipsis and the full text in the title."""
        text = "a" * 30 + "b" * 30
        assert len(text) == 60
        assert format_type(text) == f'<code title="{text}">{"a" * 30}{"b" * 17}...</code>'

    def test_truncation_before_escaping(self):
        """Should measure length on the unescaped text."""
        text = "React.Dispatch<React.SetStateAction<" + "x" * 20 + ">>"
        result = format_type(text)
        assert result.startswith('<code title="React.Dispatch&#60;React.SetStateAction&#60;')
        assert result.endswith("&#60;xxxxxxxxxxx...</code>")

    def test_encode_non_ascii(self):
        assert encode("é") == "&#233;"
        assert encode("a&b") == "a&#38;b"


class TestPropDescriptors:
    """Test building prop descriptors from declarations."""

    def test_descriptors(self, load_source, project):
        parsed = load_source(
            "Button.ts",
            "export type ButtonOptions = {\n"
            "  /**\n"
            "   * Whether the button is disabled.\n"
            "   */\n"
            "  disabled?: boolean;\n"
            "  /** @private */\n"
            "  unstable_system?: any;\n"
            "  focusable: boolean;\n"
            "};\n",
        )
        descriptors = create_prop_descriptors(project, parsed.get_declaration("ButtonOptions"))
        assert descriptors == [
            PropertyDescriptor("disabled", "Whether the button is disabled.", "<code>boolean | undefined</code>"),
            PropertyDescriptor("focusable", "", "<code>boolean</code>"),
        ]

    def test_private_only_on_last_doc_comment(self, load_source, project):
        """Should look for @private in the doc comment closest to the property."""
        parsed = load_source(
            "A.ts",
            "export type AOptions = {\n  /** @private */\n  /** Public again. */\n  a: string;\n};\n",
        )
        descriptors = create_prop_descriptors(project, parsed.get_declaration("AOptions"))
        assert [d.name for d in descriptors] == ["a"]
        assert descriptors[0].description == "Public again."

    def test_prop_names_include_private(self, load_source, project):
        parsed = load_source("A.ts", "export type AOptions = {\n  /** @private */\n  a: string;\n  b: string;\n};\n")
        declaration = parsed.get_declaration("AOptions")
        assert get_prop_names(project, declaration) == ["b"]
        assert get_prop_names(project, declaration, include_private=True) == ["a", "b"]


class TestFindLiteralNode:
    """Test locating the first type literal in a declaration."""

    def test_depth_first(self, load_source):
        parsed = load_source(
            "A.ts",
            'export type AOptions = Pick<S, "a"> & { own: string } & { second: string };',
        )
        literal = find_literal_node(parsed.get_declaration("AOptions"))
        assert isinstance(literal, TypeLiteral)
        assert [m.name for m in literal.members] == ["own"]

    def test_no_literal(self, load_source):
        parsed = load_source("A.ts", "export type AOptions = Partial<S>;")
        assert find_literal_node(parsed.get_declaration("AOptions")) is None

    @pytest.mark.parametrize("source", ["export type AOptions = { a: { nested: string } };"])
    def test_outer_literal_first(self, load_source, source):
        literal = find_literal_node(load_source("A.ts", source).get_declaration("AOptions"))
        assert [m.name for m in literal.members] == ["a"]
