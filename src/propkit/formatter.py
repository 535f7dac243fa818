"""Formatting for generated TypeScript modules.

Generated key modules are committed, so their layout must not depend on
the machine that produced them. Array constants that fit the line width
stay on one line; longer ones are broken one element per line with a
trailing comma, the way prettier lays out string arrays.
"""

import re

DEFAULT_LINE_WIDTH = 80
INDENT = "  "

_ARRAY_CONST_RE = re.compile(r"^(?P<head>(?:export )?const \w+ = )\[(?P<items>.*)\](?P<tail> as const;)$")
_ITEM_RE = re.compile(r'"(?:[^"\\]|\\.)*"|[^,\s]+')


def split_array_items(items: str) -> list[str]:
    """Split the inside of a rendered array literal into its elements."""
    return _ITEM_RE.findall(items)


def format_line(line: str, line_width: int = DEFAULT_LINE_WIDTH) -> str:
    if len(line) <= line_width:
        return line
    match = _ARRAY_CONST_RE.match(line)
    if not match:
        return line
    items = split_array_items(match.group("items"))
    if not items:
        return line
    body = "".join(f"{INDENT}{item},\n" for item in items)
    return f"{match.group('head')}[\n{body}]{match.group('tail')}"


def format_typescript(source: str, line_width: int = DEFAULT_LINE_WIDTH) -> str:
    """Format generated TypeScript source.

    Example:
        >>> format_typescript('const A_KEYS = ["a"] as const;')
        'const A_KEYS = ["a"] as const;\\n'
    """
    lines = [format_line(line.rstrip(), line_width) for line in source.strip().split("\n")]
    return "\n".join(lines) + "\n"


__all__ = ["DEFAULT_LINE_WIDTH", "format_line", "format_typescript", "split_array_items"]
