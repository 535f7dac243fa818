"""Doc comment parsing."""

import re

from .models import JSDoc, JSDocTag

_STAR_LINE_RE = re.compile(r"^\s*\*\s?(.*)$")
_TAG_RE = re.compile(r"^@(?P<name>[A-Za-z][\w-]*)\s*(?P<text>.*)$")


def normalize_doc_lines(raw: str) -> list[str]:
    """Strip comment delimiters and leading stars from a ``/** */`` block."""
    body = raw
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines = []
    for line in body.split("\n"):
        match = _STAR_LINE_RE.match(line)
        lines.append((match.group(1) if match else line.strip()).rstrip())
    return lines


def parse_jsdoc(raw: str) -> JSDoc:
    """Parse a raw doc comment into a description and block tags.

    Example:
        >>> doc = parse_jsdoc("/**\\n * Whether it is visible.\\n * @private\\n */")
        >>> doc.description, doc.tag_names
        ('Whether it is visible.', ['private'])
    """
    description_lines: list[str] = []
    tags: list[JSDocTag] = []
    current: tuple[str, list[str]] | None = None
    in_fence = False

    for line in normalize_doc_lines(raw):
        stripped = line.strip()
        if stripped.startswith("```"):
            in_fence = not in_fence
        match = None if in_fence else _TAG_RE.match(stripped)
        if match:
            if current is not None:
                tags.append(JSDocTag(current[0], "\n".join(current[1]).strip()))
            current = (match.group("name"), [match.group("text")])
        elif current is not None:
            current[1].append(line)
        else:
            description_lines.append(line)

    if current is not None:
        tags.append(JSDocTag(current[0], "\n".join(current[1]).strip()))

    return JSDoc(description="\n".join(description_lines).strip(), tags=tuple(tags))


__all__ = ["normalize_doc_lines", "parse_jsdoc"]
