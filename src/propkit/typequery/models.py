"""Data models for the TypeScript type-query engine.

This module defines the tokens, type nodes, doc comments and declarations
produced by the scanner and parser and consumed by the project-level
symbol lookup.

Philosophy:
- Ruthlessly simple dataclasses
- Closed set of declaration and type-node kinds
- Source text kept alongside structure so types render as written
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator


class TokenKind(Enum):
    """Lexical token categories."""

    IDENT = "ident"
    STRING = "string"
    TEMPLATE = "template"
    NUMBER = "number"
    REGEX = "regex"
    PUNCT = "punct"
    JSDOC = "jsdoc"


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind: Token category
        value: Raw source text of the token
        line: 1-based line number where the token starts
        newline_before: Whether a line break separates it from the previous token
    """

    kind: TokenKind
    value: str
    line: int
    newline_before: bool = False

    def is_punct(self, *values: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.value in values

    def is_ident(self, *values: str) -> bool:
        return self.kind is TokenKind.IDENT and (not values or self.value in values)


@dataclass(frozen=True)
class JSDocTag:
    """A block tag inside a doc comment (``@private``, ``@example`` ...)."""

    name: str
    text: str = ""


@dataclass(frozen=True)
class JSDoc:
    """A parsed ``/** ... */`` comment block."""

    description: str
    tags: tuple[JSDocTag, ...] = ()

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]


class DeclarationKind(Enum):
    """Top-level declaration kinds the engine distinguishes."""

    TYPE_ALIAS = "TypeAliasDeclaration"
    INTERFACE = "InterfaceDeclaration"
    UNRECOGNIZED = "Unrecognized"


# ----------------------------------------------------------------------------
# Type nodes
# ----------------------------------------------------------------------------


@dataclass
class TypeNode:
    """Base class for parsed type expressions.

    Attributes:
        text: Rendered source text of the expression
    """

    text: str

    def children(self) -> list["TypeNode"]:
        return []

    def walk(self) -> Iterator["TypeNode"]:
        """Yield this node and its descendants in source (pre-)order."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass
class PropertySignature:
    """A member of a type literal or interface body."""

    name: str
    type_text: str
    optional: bool = False
    jsdocs: list[JSDoc] = field(default_factory=list)
    type_node: TypeNode | None = None


@dataclass
class TypeLiteral(TypeNode):
    members: list[PropertySignature] = field(default_factory=list)

    def children(self) -> list[TypeNode]:
        return [m.type_node for m in self.members if m.type_node is not None]


@dataclass
class IntersectionType(TypeNode):
    types: list[TypeNode] = field(default_factory=list)

    def children(self) -> list[TypeNode]:
        return list(self.types)


@dataclass
class UnionType(TypeNode):
    types: list[TypeNode] = field(default_factory=list)

    def children(self) -> list[TypeNode]:
        return list(self.types)


@dataclass
class TypeReference(TypeNode):
    name: str = ""
    type_args: list[TypeNode] = field(default_factory=list)

    def children(self) -> list[TypeNode]:
        return list(self.type_args)


@dataclass
class LiteralType(TypeNode):
    """String, number or boolean literal type."""

    value: str = ""


@dataclass
class OpaqueType(TypeNode):
    """Any type expression the engine does not look into."""

    pass


# ----------------------------------------------------------------------------
# Declarations
# ----------------------------------------------------------------------------


@dataclass
class Declaration:
    """A top-level declaration of a source file.

    Attributes:
        kind: Declaration kind
        name: Declared identifier (escaped name)
        type_node: Aliased type (type aliases) or body literal (interfaces)
        heritage: Interface ``extends`` clauses
        jsdocs: Doc comments attached to the declaration
        source_path: File the declaration belongs to
    """

    kind: DeclarationKind
    name: str
    type_node: TypeNode | None = None
    heritage: list[TypeNode] = field(default_factory=list)
    jsdocs: list[JSDoc] = field(default_factory=list)
    source_path: Path | None = None

    @property
    def kind_name(self) -> str:
        return self.kind.value


@dataclass
class ImportBinding:
    """A name brought into a file by an import or re-export statement."""

    local_name: str
    imported_name: str
    specifier: str


@dataclass
class ParsedFile:
    """Result of parsing one source file."""

    path: Path
    declarations: list[Declaration] = field(default_factory=list)
    imports: list[ImportBinding] = field(default_factory=list)
    star_exports: list[str] = field(default_factory=list)
    named_exports: list[ImportBinding] = field(default_factory=list)

    @property
    def base_name_without_extension(self) -> str:
        name = self.path.name
        for suffix in (".d.ts", ".tsx", ".ts", ".jsx", ".js"):
            if name.endswith(suffix):
                return name[: -len(suffix)]
        return self.path.stem

    def get_declaration(self, name: str) -> Declaration | None:
        for declaration in self.declarations:
            if declaration.name == name and declaration.kind is not DeclarationKind.UNRECOGNIZED:
                return declaration
        return None


__all__ = [
    "Declaration",
    "DeclarationKind",
    "ImportBinding",
    "IntersectionType",
    "JSDoc",
    "JSDocTag",
    "LiteralType",
    "OpaqueType",
    "ParsedFile",
    "PropertySignature",
    "Token",
    "TokenKind",
    "TypeLiteral",
    "TypeNode",
    "TypeReference",
    "UnionType",
]
