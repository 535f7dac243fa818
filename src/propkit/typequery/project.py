"""Project-level symbol lookup over parsed TypeScript files.

The project loads source files on demand, follows relative imports and
re-exports to find declarations by name, and resolves the property list of
a declaration's type. It answers the questions the documentation pipeline
asks of a type checker:

- Which properties does this type alias describe, in declaration order?
- Which doc comments are attached to a property?
- What is the declared type of a property, as display text?

Philosophy:
- Lazy loading (only files reachable from the analyzed modules)
- Declaration order preserved everywhere
- Unresolvable names contribute nothing instead of failing
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path

from propkit.exceptions import TypeQueryError

from .models import (
    Declaration,
    DeclarationKind,
    IntersectionType,
    JSDoc,
    LiteralType,
    OpaqueType,
    ParsedFile,
    PropertySignature,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)
from .parser import parse_source

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".js", ".jsx")

# Utility types whose properties are those of their first argument
PASSTHROUGH_UTILITIES = {"Partial", "Required", "Readonly", "NonNullable"}
OPTIONALITY_UTILITIES = {"Partial": True, "Required": False}

MAX_RESOLUTION_DEPTH = 32


@dataclass
class PropertySymbol:
    """A property of a resolved type.

    Attributes:
        name: Escaped property name
        declarations: Member signatures declaring the property
        source_path: File containing the first declaration
        optional: Optionality imposed by a mapped utility type (Partial,
            Required); None keeps the member's own
    """

    name: str
    declarations: list[PropertySignature] = field(default_factory=list)
    source_path: Path | None = None
    optional: bool | None = None

    @property
    def is_optional(self) -> bool:
        return self.declaration.optional if self.optional is None else self.optional

    @property
    def escaped_name(self) -> str:
        return self.name

    @property
    def declaration(self) -> PropertySignature:
        return self.declarations[0]

    @property
    def jsdocs(self) -> list[JSDoc]:
        return self.declaration.jsdocs

    @property
    def last_jsdoc(self) -> JSDoc | None:
        """The doc comment closest to the declaration, if any."""
        jsdocs = self.jsdocs
        return jsdocs[-1] if jsdocs else None


class Project:
    """A set of parsed TypeScript source files with cross-file name lookup.

    Example:
        >>> project = Project(Path("packages/reakit/tsconfig.json"))
        >>> files = project.add_source_files_at_paths(paths)
        >>> project.resolve_source_file_dependencies()
        >>> for declaration in files[0].declarations:
        ...     print(declaration.name)
    """

    def __init__(self, tsconfig_path: Path | None = None):
        """Initialize project.

        Args:
            tsconfig_path: Project configuration file; must exist when given

        Raises:
            TypeQueryError: If the configuration file does not exist
        """
        if tsconfig_path is not None and not Path(tsconfig_path).is_file():
            raise TypeQueryError(f"TypeScript config not found: {tsconfig_path}")
        self.tsconfig_path = tsconfig_path
        self._files: dict[Path, ParsedFile] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_source_file_at_path(self, path: Path | str) -> ParsedFile:
        """Parse a file into the project (cached by resolved path)."""
        resolved = Path(path).resolve()
        parsed = self._files.get(resolved)
        if parsed is None:
            text = resolved.read_text(encoding="utf-8")
            parsed = parse_source(text, resolved)
            self._files[resolved] = parsed
            logger.debug(f"Parsed {resolved} ({len(parsed.declarations)} statements)")
        return parsed

    def add_source_files_at_paths(self, paths: list[Path] | list[str]) -> list[ParsedFile]:
        """Parse several files, returning them in the given order."""
        return [self.add_source_file_at_path(path) for path in paths]

    def get_source_files(self) -> list[ParsedFile]:
        return [self._files[path] for path in sorted(self._files)]

    def resolve_source_file_dependencies(self) -> None:
        """Load every file reachable through relative imports and re-exports."""
        pending = list(self._files.values())
        while pending:
            parsed = pending.pop()
            specifiers = [binding.specifier for binding in parsed.imports]
            specifiers += parsed.star_exports
            specifiers += [binding.specifier for binding in parsed.named_exports if binding.specifier]
            for specifier in specifiers:
                target = self.resolve_module(parsed.path, specifier)
                if target is not None and target not in self._files:
                    pending.append(self.add_source_file_at_path(target))

    def resolve_module(self, from_path: Path, specifier: str) -> Path | None:
        """Resolve a relative module specifier to a file path."""
        if not specifier.startswith("."):
            return None
        base = (from_path.parent / specifier).resolve()
        candidates = [base] if base.suffix in SOURCE_EXTENSIONS else []
        candidates += [base.with_name(base.name + ext) for ext in SOURCE_EXTENSIONS]
        candidates += [base / f"index{ext}" for ext in SOURCE_EXTENSIONS]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        logger.debug(f"Cannot resolve {specifier!r} from {from_path}")
        return None

    def _load(self, path: Path) -> ParsedFile:
        return self._files.get(path) or self.add_source_file_at_path(path)

    # ------------------------------------------------------------------
    # Name lookup
    # ------------------------------------------------------------------

    def find_declaration(self, name: str, source_path: Path, _seen: set | None = None) -> Declaration | None:
        """Find the declaration a name refers to from within a file."""
        seen = _seen if _seen is not None else set()
        key = ("local", source_path, name)
        if key in seen:
            return None
        seen.add(key)

        parsed = self._load(source_path)
        declaration = parsed.get_declaration(name)
        if declaration is not None:
            return declaration

        for binding in parsed.imports:
            if binding.local_name == name:
                target = self.resolve_module(source_path, binding.specifier)
                if target is None:
                    return None
                return self.find_export(binding.imported_name, target, seen)
        return None

    def find_export(self, name: str, source_path: Path, _seen: set | None = None) -> Declaration | None:
        """Find the declaration a module exports under ``name``."""
        seen = _seen if _seen is not None else set()
        key = ("export", source_path, name)
        if key in seen:
            return None
        seen.add(key)

        parsed = self._load(source_path)
        declaration = parsed.get_declaration(name)
        if declaration is not None:
            return declaration

        for binding in parsed.named_exports:
            if binding.local_name != name:
                continue
            if not binding.specifier:
                return self.find_declaration(binding.imported_name, source_path, seen)
            target = self.resolve_module(source_path, binding.specifier)
            return self.find_export(binding.imported_name, target, seen) if target else None

        for specifier in parsed.star_exports:
            target = self.resolve_module(source_path, specifier)
            if target is None:
                continue
            found = self.find_export(name, target, seen)
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_properties(self, node: Declaration | TypeNode, source_path: Path | None = None) -> list[PropertySymbol]:
        """Return the properties of a declaration's type or of a type node.

        Args:
            node: Declaration, or a type node found inside one
            source_path: File used to resolve names in a bare type node

        Returns:
            Property symbols in declaration order
        """
        if isinstance(node, Declaration):
            return self._declaration_properties(node, 0)
        if source_path is None:
            raise ValueError("source_path is required for bare type nodes")
        return self._type_properties(node, Path(source_path), 0)

    def _declaration_properties(self, declaration: Declaration, depth: int) -> list[PropertySymbol]:
        if declaration.type_node is None or declaration.source_path is None:
            return []
        properties = self._type_properties(declaration.type_node, declaration.source_path, depth)
        if declaration.kind is DeclarationKind.INTERFACE:
            inherited = [
                self._type_properties(base, declaration.source_path, depth) for base in declaration.heritage
            ]
            properties = _merge([properties, *inherited])
        return properties

    def _type_properties(self, node: TypeNode, source_path: Path, depth: int) -> list[PropertySymbol]:
        if depth > MAX_RESOLUTION_DEPTH:
            logger.debug(f"Type resolution too deep at {node.text!r}")
            return []

        if isinstance(node, TypeLiteral):
            return [PropertySymbol(m.name, [m], source_path) for m in node.members]

        if isinstance(node, IntersectionType):
            return _merge([self._type_properties(part, source_path, depth + 1) for part in node.types])

        if isinstance(node, UnionType):
            groups = [self._type_properties(part, source_path, depth + 1) for part in node.types]
            common = set.intersection(*[{prop.name for prop in group} for group in groups])
            return [prop for prop in groups[0] if prop.name in common]

        if isinstance(node, TypeReference):
            return self._reference_properties(node, source_path, depth)

        return []

    def _reference_properties(self, node: TypeReference, source_path: Path, depth: int) -> list[PropertySymbol]:
        args = node.type_args
        if node.name in PASSTHROUGH_UTILITIES and args:
            properties = self._type_properties(args[0], source_path, depth + 1)
            optional = OPTIONALITY_UTILITIES.get(node.name)
            if optional is None:
                return properties
            return [dataclasses.replace(prop, optional=optional) for prop in properties]

        if node.name in ("Pick", "Omit") and len(args) == 2:
            properties = self._type_properties(args[0], source_path, depth + 1)
            keys = self._literal_names(args[1], source_path, depth + 1)
            if keys is None:
                return properties if node.name == "Omit" else []
            if node.name == "Pick":
                return [prop for prop in properties if prop.name in keys]
            return [prop for prop in properties if prop.name not in keys]

        declaration = self.find_declaration(node.name, source_path)
        if declaration is None:
            return []
        return self._declaration_properties(declaration, depth + 1)

    def _literal_names(self, node: TypeNode, source_path: Path, depth: int) -> set[str] | None:
        """Names in a string-literal union, or None when they cannot be known."""
        if depth > MAX_RESOLUTION_DEPTH:
            return None
        if isinstance(node, LiteralType):
            value = node.value
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                return {value[1:-1]}
            return set()
        if isinstance(node, UnionType):
            names: set[str] = set()
            for part in node.types:
                part_names = self._literal_names(part, source_path, depth + 1)
                if part_names is None:
                    return None
                names |= part_names
            return names
        if isinstance(node, OpaqueType) and node.text.startswith("keyof "):
            return None
        if isinstance(node, TypeReference):
            declaration = self.find_declaration(node.name, source_path)
            if declaration is not None and declaration.kind is DeclarationKind.TYPE_ALIAS and declaration.type_node:
                return self._literal_names(declaration.type_node, declaration.source_path, depth + 1)
        return None

    def get_type_text(self, symbol: PropertySymbol) -> str:
        """Render a property's declared type; optional members include ``undefined``."""
        member = symbol.declaration
        text = member.type_text
        if not symbol.is_optional:
            return text
        if isinstance(member.type_node, UnionType) and any(t.text == "undefined" for t in member.type_node.types):
            return text
        if text in ("any", "unknown", "undefined"):
            return text
        if "=>" in text and not isinstance(member.type_node, (UnionType, TypeReference)):
            text = f"({text})"
        return f"{text} | undefined"


def _merge(groups: list[list[PropertySymbol]]) -> list[PropertySymbol]:
    """Concatenate property groups; the first occurrence of a name wins."""
    merged: dict[str, PropertySymbol] = {}
    for group in groups:
        for prop in group:
            if prop.name not in merged:
                merged[prop.name] = prop
    return list(merged.values())


__all__ = ["MAX_RESOLUTION_DEPTH", "Project", "PropertySymbol"]
