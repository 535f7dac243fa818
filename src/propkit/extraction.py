"""Declaration classification and property extraction.

Classifies top-level declarations by the naming convention
(``XOptions``, ``XInitialState``, ``XStateReturn``) and turns the
properties of a classified declaration into ``PropertyDescriptor`` rows
ready for the Markdown renderer.

Callers check ``is_state_return_decl`` before ``is_props_decl``; the
predicates do not validate that they are mutually exclusive.
"""

import re
from dataclasses import dataclass

from propkit.typequery import Declaration, DeclarationKind, Project, PropertySymbol, TypeLiteral

PRIVATE_TAG = "private"

# Rendered type text longer than this is truncated in the label
TYPE_MAX_LENGTH = 50
TYPE_TRUNCATED_LENGTH = 47

_OPTIONS_RE = re.compile(r".+Options$")
_INITIAL_STATE_RE = re.compile(r".+InitialState$")
_STATE_RETURN_RE = re.compile(r".+StateReturn$")
_ENCODE_RE = re.compile(r'[\u00A0-\u9999<>&"]')


@dataclass(frozen=True)
class PropertyDescriptor:
    """One documented property.

    Attributes:
        name: Property name
        description: Doc comment description (may contain blank-line paragraphs)
        type: Pre-rendered ``<code>`` element with the declared type
    """

    name: str
    description: str
    type: str


def _is_alias_named(declaration: Declaration, pattern: re.Pattern) -> bool:
    return declaration.kind is DeclarationKind.TYPE_ALIAS and bool(pattern.match(declaration.name))


def is_options_decl(declaration: Declaration) -> bool:
    return _is_alias_named(declaration, _OPTIONS_RE)


def is_initial_state_decl(declaration: Declaration) -> bool:
    return _is_alias_named(declaration, _INITIAL_STATE_RE)


def is_state_return_decl(declaration: Declaration) -> bool:
    return _is_alias_named(declaration, _STATE_RETURN_RE)


def is_props_decl(declaration: Declaration) -> bool:
    return is_options_decl(declaration) or is_initial_state_decl(declaration)


def get_tag_names(prop: PropertySymbol) -> list[str]:
    """Tag names of the doc comment closest to the property."""
    jsdoc = prop.last_jsdoc
    return jsdoc.tag_names if jsdoc else []


def get_comment(prop: PropertySymbol) -> str:
    jsdoc = prop.last_jsdoc
    return jsdoc.description.strip() if jsdoc else ""


def get_props(project: Project, node, include_private: bool = False, source_path=None) -> list[PropertySymbol]:
    """Properties of a declaration (or type node), optionally without ``@private`` ones."""
    props = project.get_properties(node, source_path)
    if include_private:
        return props
    return [prop for prop in props if PRIVATE_TAG not in get_tag_names(prop)]


def get_prop_names(project: Project, node, include_private: bool = False, source_path=None) -> list[str]:
    return [prop.escaped_name for prop in get_props(project, node, include_private, source_path)]


def encode(text: str) -> str:
    """Replace markup-significant and non-ASCII characters with character references."""
    return _ENCODE_RE.sub(lambda match: f"&#{ord(match.group(0))};", text)


def format_type(type_text: str) -> str:
    """Wrap rendered type text in a ``<code>`` element.

    The truncation decision is made on the unescaped text; both the label and
    the ``title`` are escaped afterwards.
    """
    if len(type_text) > TYPE_MAX_LENGTH:
        return f'<code title="{encode(type_text)}">{encode(type_text[:TYPE_TRUNCATED_LENGTH])}...</code>'
    return f"<code>{encode(type_text)}</code>"


def get_prop_type(project: Project, prop: PropertySymbol) -> str:
    return format_type(project.get_type_text(prop))


def create_prop_descriptor(project: Project, prop: PropertySymbol) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=prop.escaped_name,
        description=get_comment(prop),
        type=get_prop_type(project, prop),
    )


def create_prop_descriptors(project: Project, declaration: Declaration) -> list[PropertyDescriptor]:
    """Descriptors for the non-private properties of a declaration."""
    return [create_prop_descriptor(project, prop) for prop in get_props(project, declaration)]


def find_literal_node(declaration: Declaration) -> TypeLiteral | None:
    """First type literal inside a declaration's type, searching depth first."""
    if declaration.type_node is None:
        return None
    for node in declaration.type_node.walk():
        if isinstance(node, TypeLiteral):
            return node
    return None


__all__ = [
    "PRIVATE_TAG",
    "PropertyDescriptor",
    "TYPE_MAX_LENGTH",
    "create_prop_descriptor",
    "create_prop_descriptors",
    "encode",
    "find_literal_node",
    "format_type",
    "get_comment",
    "get_prop_names",
    "get_prop_type",
    "get_props",
    "get_tag_names",
    "is_initial_state_decl",
    "is_options_decl",
    "is_props_decl",
    "is_state_return_decl",
]
