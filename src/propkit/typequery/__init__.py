"""Static type queries over TypeScript source files.

A small, dependency-free reader for the declarations the documentation
pipeline needs: type aliases and interfaces, their properties, doc comments
and declared type text.

Public API:
    - Project: Load files and resolve names/properties across them
    - PropertySymbol: A resolved property with its declarations
    - parse_source: Parse one file's top-level declarations
    - parse_jsdoc: Parse a doc comment block
"""

from .jsdoc import parse_jsdoc
from .models import (
    Declaration,
    DeclarationKind,
    JSDoc,
    JSDocTag,
    ParsedFile,
    PropertySignature,
    TypeLiteral,
    TypeNode,
)
from .parser import parse_source
from .project import Project, PropertySymbol

__all__ = [
    "Declaration",
    "DeclarationKind",
    "JSDoc",
    "JSDocTag",
    "ParsedFile",
    "Project",
    "PropertySignature",
    "PropertySymbol",
    "TypeLiteral",
    "TypeNode",
    "parse_jsdoc",
    "parse_source",
]
