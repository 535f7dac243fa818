"""Markdown prop tables and heading-section injection.

This module renders a ``ModulePropMap`` as a Markdown fragment and replaces
the body of a README section (``## Props``) with it. Everything outside the
section is left byte-for-byte untouched, so regenerating from the same types
produces the same file.

Philosophy:
- Simple string formatting (no templates)
- Line-based section detection (fenced code aware)
- Self-contained and regeneratable
"""

import re
from dataclasses import dataclass

from propkit.exceptions import InjectionError
from propkit.extraction import PropertyDescriptor
from propkit.naming import is_experimental

from .aggregation import ModuleProps, ModulePropMap

GENERATED_MARKER = "<!-- Automatically generated -->"
NO_PROPS = "No props to show"
EXPERIMENTAL_MARKER = ' <span title="Experimental">⚠️</span>'
STATE_PROPS_NOTE = (
    "These props are returned by the state hook. You can spread them into this component "
    "(`{...state}`) or pass them separately. You can also provide these props from your own "
    "state logic."
)

DEFAULT_PROPS_HEADING = "Props"
_HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})[ \t]+(?P<text>.+?)(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})")


# ----------------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------------


def render_prop_row(prop: PropertyDescriptor) -> str:
    """Render one prop as a list item with its type and description."""
    marker = EXPERIMENTAL_MARKER if is_experimental(prop.name) else ""
    lines = [f"- **`{prop.name}`**{marker}", f"  {prop.type}"]
    if prop.description:
        lines.append("")
        lines.extend(f"  {line}" if line.strip() else "" for line in prop.description.split("\n"))
    return "\n".join(lines)


def render_module_section(title: str, module: ModuleProps, heading_level: int = 3) -> str:
    parts = [f"{'#' * heading_level} `{title}`"]

    if module.props:
        parts.append("\n\n".join(render_prop_row(prop) for prop in module.props))
    elif not module.state_props:
        parts.append(NO_PROPS)

    if module.state_props:
        rows = "\n\n".join(render_prop_row(prop) for prop in module.state_props)
        parts.append(
            f"<details><summary>{len(module.state_props)} state props</summary>\n\n"
            f"> {STATE_PROPS_NOTE}\n\n"
            f"{rows}\n\n"
            "</details>"
        )

    return "\n\n".join(parts)


def render_prop_types_markdown(prop_map: ModulePropMap, heading_level: int = 3) -> str:
    """Render all modules, in map order, as one generated fragment."""
    sections = [render_module_section(title, module, heading_level) for title, module in prop_map.items()]
    return "\n\n".join([GENERATED_MARKER, *sections])


# ----------------------------------------------------------------------------
# Injection
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class Heading:
    """An ATX heading found in a document."""

    line_index: int
    level: int
    text: str


def has_props_heading(markdown: str, title: str = DEFAULT_PROPS_HEADING) -> bool:
    """Quick check for a heading marker followed by ``title`` anywhere in the text."""
    return re.search(rf"#\s?{re.escape(title)}", markdown) is not None


def iter_headings(lines: list[str]) -> list[Heading]:
    """ATX headings outside fenced code blocks, in document order."""
    headings = []
    fence: str | None = None
    for index, line in enumerate(lines):
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group("fence")
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue
        match = _HEADING_RE.match(line)
        if match:
            headings.append(Heading(index, len(match.group("hashes")), match.group("text")))
    return headings


def find_heading(markdown: str, title: str) -> Heading | None:
    for heading in iter_headings(markdown.split("\n")):
        if heading.text == title:
            return heading
    return None


def inject_section(markdown: str, title: str, fragment: str) -> str:
    """Replace the body of the section titled ``title`` with ``fragment``.

    The body runs from the heading to the next heading of the same or a
    higher level.

    Raises:
        InjectionError: If the document has no heading titled ``title``
    """
    lines = markdown.split("\n")
    headings = iter_headings(lines)
    target = next((h for h in headings if h.text == title), None)
    if target is None:
        raise InjectionError(f"No '{title}' heading found")

    end = len(lines)
    for heading in headings:
        if heading.line_index > target.line_index and heading.level <= target.level:
            end = heading.line_index
            break

    before = "\n".join(lines[: target.line_index + 1])
    after = "\n".join(lines[end:]).strip("\n")
    sections = [before, fragment.strip("\n")]
    if after:
        sections.append(after)
    return "\n\n".join(sections).lstrip() + "\n"


__all__ = [
    "DEFAULT_PROPS_HEADING",
    "GENERATED_MARKER",
    "Heading",
    "NO_PROPS",
    "STATE_PROPS_NOTE",
    "find_heading",
    "has_props_heading",
    "inject_section",
    "iter_headings",
    "render_module_section",
    "render_prop_row",
    "render_prop_types_markdown",
]
