"""Unit tests for generated TypeScript formatting."""

from propkit.formatter import format_line, format_typescript, split_array_items


class TestSplitArrayItems:
    def test_strings_and_spreads(self):
        assert split_array_items('...A_KEYS, "a", "b, c"') == ["...A_KEYS", '"a"', '"b, c"']

    def test_escaped_quotes(self):
        assert split_array_items(r'"a\"b", "c"') == [r'"a\"b"', '"c"']


class TestFormatLine:
    """Test line breaking of array constants."""

    def test_short_line_unchanged(self):
        line = 'export const A_KEYS = ["a", "b"] as const;'
        assert format_line(line) == line

    def test_long_array_broken(self):
        line = 'export const CHECKBOX_KEYS = [...CHECKBOX_STATE_KEYS, "value", "checked", "unstable_clickOnEnter"] as const;'
        assert len(line) > 80
        assert format_line(line) == (
            "export const CHECKBOX_KEYS = [\n"
            "  ...CHECKBOX_STATE_KEYS,\n"
            '  "value",\n'
            '  "checked",\n'
            '  "unstable_clickOnEnter",\n'
            "] as const;"
        )

    def test_custom_width(self):
        line = 'const A_KEYS = ["a", "b"] as const;'
        assert format_line(line, line_width=20).startswith("const A_KEYS = [\n")

    def test_long_non_array_line_unchanged(self):
        line = "// " + "x" * 100
        assert format_line(line) == line


class TestFormatTypescript:
    def test_trailing_newline(self):
        source = '// Automatically generated\nconst A_KEYS = ["a"] as const;\n\n'
        assert format_typescript(source) == '// Automatically generated\nconst A_KEYS = ["a"] as const;\n'

    def test_idempotent(self):
        source = 'export const LONG_NAME_KEYS = ["aaaaaaaaaa", "bbbbbbbbbb", "cccccccccc", "dddddddddd", "eeeeeeeeee"] as const;\n'
        once = format_typescript(source)
        assert format_typescript(once) == once
