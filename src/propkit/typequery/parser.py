"""Declaration and type-expression parser.

Parses the top level of a TypeScript source file into type alias and
interface declarations, import bindings and re-exports. Everything else
(functions, components, constants) is skipped statement by statement.

Type expressions are parsed into a small tree (literals, intersections,
unions, references). Anything outside that set becomes an ``OpaqueType``
carrying its rendered text, so unusual syntax never aborts a file.
"""

import dataclasses
import logging
from pathlib import Path

from .jsdoc import parse_jsdoc
from .models import (
    Declaration,
    DeclarationKind,
    ImportBinding,
    IntersectionType,
    JSDoc,
    LiteralType,
    OpaqueType,
    ParsedFile,
    PropertySignature,
    Token,
    TokenKind,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)
from .scanner import tokenize

logger = logging.getLogger(__name__)

OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
CLOSERS = {")", "]", "}", ">"}

STATEMENT_KEYWORDS = {
    "export",
    "import",
    "type",
    "interface",
    "const",
    "let",
    "var",
    "function",
    "class",
    "declare",
    "enum",
    "abstract",
}

# Tokens that continue an expression onto the next line
CONTINUATION_PUNCTUATORS = {
    "|",
    "&",
    "=>",
    ":",
    ",",
    "?",
    "=",
    "<",
    "(",
    "[",
    "{",
    ".",
    "...",
    "+",
    "-",
    "*",
    "/",
    "&&",
    "||",
    "??",
}
CONTINUATION_KEYWORDS = {"extends", "keyof", "typeof", "in", "infer", "readonly", "new"}

TYPE_OPERATORS = {"keyof", "unique", "readonly", "infer", "asserts"}
MEMBER_MODIFIERS = {"readonly", "public", "private", "protected", "static", "declare", "abstract"}


class TypeParseError(Exception):
    """Raised internally when a type expression falls outside the parsed subset."""

    pass


# ----------------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------------


def _normalize_string(value: str) -> str:
    if value.startswith("'") and value.endswith("'") and len(value) >= 2:
        inner = value[1:-1].replace("\\'", "'").replace('"', '\\"')
        return f'"{inner}"'
    return value


def render_tokens(tokens: list[Token]) -> str:
    """Render a token run as single-line type text.

    Example:
        >>> render_tokens(tokenize("(event:React.MouseEvent)=>void"))
        '(event: React.MouseEvent) => void'
    """
    if tokens and tokens[0].is_punct("|", "&"):
        tokens = tokens[1:]

    parts: list[str] = []
    conditional_depth = 0
    previous: Token | None = None

    for index, token in enumerate(tokens):
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        value = _normalize_string(token.value) if token.kind is TokenKind.STRING else token.value

        if token.kind is TokenKind.JSDOC:
            continue

        if token.kind is TokenKind.PUNCT:
            if value in ("|", "&", "=>", "="):
                parts.append(f" {value} ")
            elif value == "?":
                if following is not None and following.is_punct(":", ")", ",", ";", "]", "}"):
                    parts.append("?")
                else:
                    conditional_depth += 1
                    parts.append(" ? ")
            elif value == ":":
                if conditional_depth:
                    conditional_depth -= 1
                    parts.append(" : ")
                else:
                    parts.append(": ")
            elif value in (",", ";"):
                parts.append(f"{value} ")
            elif value == "{":
                parts.append("{}" if following is not None and following.is_punct("}") else "{ ")
            elif value == "}":
                if previous is not None and previous.is_punct("{"):
                    continue
                if parts:
                    parts[-1] = parts[-1].rstrip()
                parts.append(" }")
            elif value in (")", "]", ">", "."):
                if parts:
                    parts[-1] = parts[-1].rstrip()
                parts.append(value)
            else:
                parts.append(value)
        else:
            if (
                previous is not None
                and previous.kind is not TokenKind.PUNCT
                and parts
                and not parts[-1].endswith(" ")
            ):
                parts.append(" ")
            elif previous is not None and previous.is_punct(")", "]", ">") and token.kind is TokenKind.IDENT:
                parts.append(" ")
            parts.append(value)
        previous = token

    return " ".join("".join(parts).split())


# ----------------------------------------------------------------------------
# Token helpers
# ----------------------------------------------------------------------------


def find_matching(tokens: list[Token], start: int) -> int:
    """Return the index of the closer matching the opener at ``start``."""
    opener = tokens[start].value
    closer = OPENERS[opener]
    depth = 0
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token.kind is not TokenKind.PUNCT:
            continue
        if token.value == opener:
            depth += 1
        elif token.value == closer:
            depth -= 1
            if depth == 0:
                return index
    raise TypeParseError(f"Unbalanced {opener!r} at line {tokens[start].line}")


def _is_continuation(previous: Token | None, token: Token) -> bool:
    if previous is not None:
        if previous.kind is TokenKind.PUNCT and previous.value in CONTINUATION_PUNCTUATORS:
            return True
        if previous.is_ident(*CONTINUATION_KEYWORDS):
            return True
    if token.kind is TokenKind.PUNCT and token.value in ("|", "&", "=>", "?", ":", ".", ")", "]", "}", ">"):
        return True
    return token.is_ident("extends")


def find_type_end(tokens: list[Token], start: int, stop_at_comma: bool = False) -> int:
    """Return the exclusive end index of a type expression starting at ``start``.

    The type ends at a depth-0 ``;`` (or ``,`` when ``stop_at_comma``), at an
    unmatched closer, or at a line break that cannot continue the expression.
    """
    depth = 0
    previous: Token | None = None
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token.kind is TokenKind.PUNCT:
            value = token.value
            if depth == 0 and (value == ";" or (stop_at_comma and value == ",")):
                return index
            if value in OPENERS:
                depth += 1
            elif value in CLOSERS:
                if depth == 0:
                    return index
                depth -= 1
        if (
            depth == 0
            and index > start
            and token.newline_before
            and token.kind is not TokenKind.JSDOC
            and not _is_continuation(previous, token)
        ):
            return index
        if depth == 0 and index > start and token.kind is TokenKind.JSDOC:
            return index
        previous = token
    return len(tokens)


# ----------------------------------------------------------------------------
# Type expressions
# ----------------------------------------------------------------------------


class TypeParser:
    """Recursive-descent parser over the tokens of one type expression."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> TypeNode:
        if not self.tokens:
            raise TypeParseError("Empty type")
        node = self.parse_type()
        if self.pos != len(self.tokens):
            raise TypeParseError(f"Unexpected {self.tokens[self.pos].value!r}")
        return node

    def peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise TypeParseError("Unexpected end of type")
        self.pos += 1
        return token

    def expect(self, value: str) -> Token:
        token = self.next()
        if not token.is_punct(value):
            raise TypeParseError(f"Expected {value!r}, got {token.value!r}")
        return token

    def _at_punct(self, *values: str) -> bool:
        token = self.peek()
        return token is not None and token.is_punct(*values)

    def _opaque_from(self, start: int) -> OpaqueType:
        return OpaqueType(text=render_tokens(self.tokens[start : self.pos]))

    def parse_type(self) -> TypeNode:
        start = self.pos
        node = self.parse_union()
        token = self.peek()
        if token is not None and token.is_ident("extends"):
            self.next()
            self.parse_union()
            self.expect("?")
            self.parse_type()
            self.expect(":")
            self.parse_type()
            return self._opaque_from(start)
        return node

    def parse_union(self) -> TypeNode:
        if self._at_punct("|"):
            self.next()
        types = [self.parse_intersection()]
        while self._at_punct("|"):
            self.next()
            types.append(self.parse_intersection())
        if len(types) == 1:
            return types[0]
        return UnionType(text=" | ".join(t.text for t in types), types=types)

    def parse_intersection(self) -> TypeNode:
        if self._at_punct("&"):
            self.next()
        types = [self.parse_postfix()]
        while self._at_punct("&"):
            self.next()
            types.append(self.parse_postfix())
        if len(types) == 1:
            return types[0]
        return IntersectionType(text=" & ".join(t.text for t in types), types=types)

    def parse_postfix(self) -> TypeNode:
        node = self.parse_primary()
        while True:
            token = self.peek()
            if token is None or not token.is_punct("[") or token.newline_before:
                return node
            self.next()
            if self._at_punct("]"):
                self.next()
                node = OpaqueType(text=f"{node.text}[]")
            else:
                index = self.parse_type()
                self.expect("]")
                node = OpaqueType(text=f"{node.text}[{index.text}]")

    def _skip_balanced(self) -> None:
        self.pos = find_matching(self.tokens, self.pos) + 1

    def _parse_function_rest(self) -> TypeNode:
        """Parse ``(params) => ReturnType`` with the cursor on ``(``."""
        close = find_matching(self.tokens, self.pos)
        params = render_tokens(self.tokens[self.pos : close + 1])
        self.pos = close + 1
        self.expect("=>")
        returned = self.parse_type()
        return OpaqueType(text=f"{params} => {returned.text}")

    def parse_primary(self) -> TypeNode:
        start = self.pos
        token = self.next()

        if token.kind is TokenKind.PUNCT:
            value = token.value
            if value == "{":
                self.pos = start
                return self._parse_object_type()
            if value == "(":
                self.pos = start
                close = find_matching(self.tokens, start)
                following = self.tokens[close + 1] if close + 1 < len(self.tokens) else None
                if following is not None and following.is_punct("=>"):
                    return self._parse_function_rest()
                self.next()
                inner = self.parse_type()
                self.expect(")")
                return dataclasses.replace(inner, text=f"({inner.text})")
            if value == "<":
                self.pos = start
                self._skip_balanced()
                type_params = render_tokens(self.tokens[start : self.pos])
                if not self._at_punct("("):
                    raise TypeParseError("Expected function after type parameters")
                function = self._parse_function_rest()
                return OpaqueType(text=f"{type_params}{function.text}")
            if value == "[":
                self.pos = start
                self._skip_balanced()
                return self._opaque_from(start)
            if value == "-" and self._peek_kind(TokenKind.NUMBER):
                number = self.next()
                return LiteralType(text=f"-{number.value}", value=f"-{number.value}")
            raise TypeParseError(f"Unexpected {value!r}")

        if token.kind in (TokenKind.STRING, TokenKind.NUMBER, TokenKind.TEMPLATE):
            text = _normalize_string(token.value)
            return LiteralType(text=text, value=text)

        if token.kind is not TokenKind.IDENT:
            raise TypeParseError(f"Unexpected {token.value!r}")

        name = token.value
        if name in TYPE_OPERATORS:
            operand = self.parse_postfix()
            return OpaqueType(text=f"{name} {operand.text}")
        if name == "typeof":
            self._parse_entity_name()
            if self._at_punct("<"):
                self._skip_balanced()
            return self._opaque_from(start)
        if name == "new" or name == "abstract":
            if name == "abstract":
                self.next()
            if self._at_punct("<"):
                self._skip_balanced()
            if not self._at_punct("("):
                raise TypeParseError("Expected constructor parameters")
            function = self._parse_function_rest()
            return OpaqueType(text=f"new {function.text}")
        if name == "import" and self._at_punct("("):
            self._skip_balanced()
            while self._at_punct("."):
                self.next()
                self.next()
            if self._at_punct("<"):
                self._skip_balanced()
            return self._opaque_from(start)
        if name in ("true", "false"):
            return LiteralType(text=name, value=name)

        self.pos = start
        qualified = self._parse_entity_name()
        type_args: list[TypeNode] = []
        token = self.peek()
        if token is not None and token.is_punct("<") and not token.newline_before:
            self.next()
            while True:
                type_args.append(self.parse_type())
                if self._at_punct(","):
                    self.next()
                    continue
                self.expect(">")
                break
        text = qualified
        if type_args:
            text = f"{qualified}<{', '.join(arg.text for arg in type_args)}>"
        return TypeReference(text=text, name=qualified, type_args=type_args)

    def _peek_kind(self, kind: TokenKind) -> bool:
        token = self.peek()
        return token is not None and token.kind is kind

    def _parse_entity_name(self) -> str:
        token = self.next()
        if token.kind is not TokenKind.IDENT:
            raise TypeParseError(f"Expected identifier, got {token.value!r}")
        parts = [token.value]
        while self._at_punct(".") and self.peek(1) is not None and self.peek(1).kind is TokenKind.IDENT:
            self.next()
            parts.append(self.next().value)
        return ".".join(parts)

    def _parse_object_type(self) -> TypeNode:
        start = self.pos
        close = find_matching(self.tokens, start)
        body = self.tokens[start + 1 : close]
        self.pos = close + 1

        # Mapped types: { [K in Keys]: T }
        first = next((t for t in body if t.kind is not TokenKind.JSDOC), None)
        if first is not None and (first.is_punct("[", "+", "-") or first.is_ident("readonly")):
            mapped = [t for t in body if t.kind is not TokenKind.JSDOC]
            if any(t.is_ident("in") for t in mapped[:4]):
                return self._opaque_from(start)

        members = parse_members(body)
        return TypeLiteral(text=render_members(members), members=members)


def parse_type_tokens(tokens: list[Token]) -> TypeNode:
    """Parse a type expression, falling back to opaque text on unsupported syntax."""
    try:
        return TypeParser(tokens).parse()
    except TypeParseError as e:
        logger.debug(f"Opaque type {render_tokens(tokens)!r}: {e}")
        return OpaqueType(text=render_tokens(tokens))


# ----------------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------------


def render_members(members: list[PropertySignature]) -> str:
    if not members:
        return "{}"
    rendered = " ".join(f"{m.name}{'?' if m.optional else ''}: {m.type_text};" for m in members)
    return f"{{ {rendered} }}"


def _member_name(token: Token) -> str | None:
    if token.kind is TokenKind.IDENT or token.kind is TokenKind.NUMBER:
        return token.value
    if token.kind is TokenKind.STRING:
        return token.value[1:-1]
    return None


def parse_members(tokens: list[Token]) -> list[PropertySignature]:
    """Parse the members of a type literal or interface body.

    Index signatures, computed names and call signatures carry no property
    name and are skipped.
    """
    members: list[PropertySignature] = []
    jsdocs: list[JSDoc] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]

        if token.kind is TokenKind.JSDOC:
            jsdocs.append(parse_jsdoc(token.value))
            index += 1
            continue
        if token.is_punct(";", ","):
            index += 1
            continue

        # Modifiers only when followed by another member name on the same line
        while (
            token.is_ident(*MEMBER_MODIFIERS)
            and index + 1 < len(tokens)
            and _member_name(tokens[index + 1]) is not None
            and not tokens[index + 1].newline_before
        ):
            index += 1
            token = tokens[index]

        name = _member_name(token)
        if name is None:
            end = index + 1
            if token.is_punct("[", "(", "<"):
                try:
                    end = find_matching(tokens, index) + 1
                except TypeParseError:
                    pass
            index = max(find_type_end(tokens, end, stop_at_comma=True), end) if end < len(tokens) else end
            jsdocs = []
            continue

        index += 1
        optional = False
        if index < len(tokens) and tokens[index].is_punct("?"):
            optional = True
            index += 1

        if index < len(tokens) and tokens[index].is_punct(":"):
            type_start = index + 1
            type_end = find_type_end(tokens, type_start, stop_at_comma=True)
            type_tokens = tokens[type_start:type_end]
            type_node = parse_type_tokens(type_tokens) if type_tokens else OpaqueType(text="any")
            index = type_end
        elif index < len(tokens) and tokens[index].is_punct("(", "<"):
            try:
                type_node, index = _parse_method_signature(tokens, index)
            except TypeParseError:
                type_node = OpaqueType(text="any")
                index = find_type_end(tokens, index, stop_at_comma=True)
        else:
            type_node = OpaqueType(text="any")

        members.append(
            PropertySignature(
                name=name,
                type_text=type_node.text,
                optional=optional,
                jsdocs=jsdocs,
                type_node=type_node,
            )
        )
        jsdocs = []

    return members


def _parse_method_signature(tokens: list[Token], index: int) -> tuple[TypeNode, int]:
    """Parse ``<T>(params): Return`` into a function type."""
    type_params = ""
    if tokens[index].is_punct("<"):
        close = find_matching(tokens, index)
        type_params = render_tokens(tokens[index : close + 1])
        index = close + 1
    close = find_matching(tokens, index)
    params = render_tokens(tokens[index : close + 1])
    index = close + 1
    returned = "any"
    if index < len(tokens) and tokens[index].is_punct(":"):
        end = find_type_end(tokens, index + 1, stop_at_comma=True)
        returned = parse_type_tokens(tokens[index + 1 : end]).text
        index = end
    return OpaqueType(text=f"{type_params}{params} => {returned}"), index


# ----------------------------------------------------------------------------
# Top-level statements
# ----------------------------------------------------------------------------


class SourceParser:
    """Parses the top-level statements of one source file."""

    def __init__(self, text: str, path: Path):
        self.tokens = tokenize(text)
        self.parsed = ParsedFile(path=path)

    def parse(self) -> ParsedFile:
        tokens = self.tokens
        jsdocs: list[JSDoc] = []
        index = 0

        while index < len(tokens):
            token = tokens[index]
            if token.kind is TokenKind.JSDOC:
                jsdocs.append(parse_jsdoc(token.value))
                index += 1
                continue
            if token.is_punct(";"):
                index += 1
                continue

            try:
                index = self._parse_statement(index, jsdocs)
            except TypeParseError as e:
                logger.debug(f"{self.parsed.path}:{token.line}: skipping statement ({e})")
                index = self._skip_statement(index)
            jsdocs = []

        return self.parsed

    def _peek(self, index: int) -> Token | None:
        return self.tokens[index] if index < len(self.tokens) else None

    def _parse_statement(self, start: int, jsdocs: list[JSDoc]) -> int:
        index = start
        token = self.tokens[index]

        if token.is_ident("export"):
            following = self._peek(index + 1)
            after = self._peek(index + 2)
            if following is not None and following.is_punct("*"):
                return self._parse_star_export(index + 1)
            if following is not None and (
                following.is_punct("{") or (following.is_ident("type") and after is not None and after.is_punct("{"))
            ):
                return self._parse_named_exports(index + 1)
            if following is None or following.is_ident("default") or following.is_punct("="):
                return self._skip_unrecognized(start)
            index += 1

        token = self._peek(index)
        if token is not None and token.is_ident("declare"):
            index += 1
            token = self._peek(index)
        if token is None:
            return index

        following = self._peek(index + 1)
        after = self._peek(index + 2)

        if token.is_ident("import") and following is not None and not following.is_punct("(", "."):
            if start == index:
                return self._parse_import(index)
        if (
            token.is_ident("type")
            and following is not None
            and following.kind is TokenKind.IDENT
            and after is not None
            and after.is_punct("=", "<")
        ):
            return self._parse_type_alias(index, jsdocs)
        if token.is_ident("interface") and following is not None and following.kind is TokenKind.IDENT:
            return self._parse_interface(index, jsdocs)

        return self._skip_unrecognized(start)

    def _skip_unrecognized(self, start: int) -> int:
        name = ""
        for token in self.tokens[start : start + 4]:
            if token.kind is TokenKind.IDENT and token.value not in STATEMENT_KEYWORDS | {"default", "async"}:
                name = token.value
                break
        self.parsed.declarations.append(
            Declaration(kind=DeclarationKind.UNRECOGNIZED, name=name, source_path=self.parsed.path)
        )
        return self._skip_statement(start)

    def _skip_statement(self, start: int) -> int:
        """Return the index just past the statement starting at ``start``."""
        depth = 0
        previous: Token | None = None
        for index in range(start, len(self.tokens)):
            token = self.tokens[index]
            if (
                index > start
                and depth == 0
                and token.newline_before
                and token.is_ident(*STATEMENT_KEYWORDS)
                and not _is_continuation(previous, token)
            ):
                return index
            if token.kind is TokenKind.PUNCT:
                if token.value in ("(", "[", "{"):
                    depth += 1
                elif token.value in (")", "]", "}"):
                    depth = max(0, depth - 1)
                elif token.value == ";" and depth == 0:
                    return index + 1
            previous = token
        return len(self.tokens)

    def _statement_specifier(self, start: int) -> tuple[str | None, int, int]:
        """Locate the module specifier string of an import/export statement.

        Returns ``(specifier, specifier_index, end_index)``.
        """
        depth = 0
        for index in range(start, len(self.tokens)):
            token = self.tokens[index]
            if token.is_punct("{"):
                depth += 1
            elif token.is_punct("}"):
                depth -= 1
            elif token.kind is TokenKind.STRING and depth == 0:
                end = index + 1
                if self._peek(end) is not None and self._peek(end).is_punct(";"):
                    end += 1
                return token.value[1:-1], index, end
            elif depth == 0 and (token.is_punct(";") or (index > start and token.newline_before and token.is_ident(*STATEMENT_KEYWORDS))):
                return None, index, index + 1 if token.is_punct(";") else index
        return None, len(self.tokens), len(self.tokens)

    @staticmethod
    def _parse_specifiers(tokens: list[Token]) -> list[tuple[str, str]]:
        """Parse ``A, B as C, type D`` into ``(imported, local)`` pairs."""
        pairs = []
        group: list[Token] = []
        for token in tokens + [Token(TokenKind.PUNCT, ",", 0)]:
            if token.is_punct(","):
                names = [t.value for t in group if t.kind in (TokenKind.IDENT, TokenKind.STRING)]
                if names and names[0] == "type" and len(names) > 1:
                    names = names[1:]
                if len(names) == 3 and names[1] == "as":
                    pairs.append((names[0], names[2]))
                elif len(names) == 1:
                    pairs.append((names[0], names[0]))
                group = []
            elif token.kind is not TokenKind.JSDOC:
                group.append(token)
        return pairs

    def _parse_import(self, index: int) -> int:
        specifier, spec_index, end = self._statement_specifier(index + 1)
        if specifier is None:
            return end
        clause = self.tokens[index + 1 : spec_index]
        if clause and clause[-1].is_ident("from"):
            clause = clause[:-1]
        if clause and clause[0].is_ident("type") and len(clause) > 1 and not clause[1].is_ident("from"):
            if clause[1].is_punct("{") or clause[1].kind is TokenKind.IDENT:
                clause = clause[1:]

        position = 0
        if clause and clause[0].kind is TokenKind.IDENT:
            self.parsed.imports.append(ImportBinding(clause[0].value, "default", specifier))
            position = 1
        while position < len(clause):
            token = clause[position]
            if token.is_punct("{"):
                close = find_matching(clause, position)
                for imported, local in self._parse_specifiers(clause[position + 1 : close]):
                    self.parsed.imports.append(ImportBinding(local, imported, specifier))
                position = close + 1
            elif token.is_punct("*"):
                # Namespace imports are not resolved
                position += 3
            else:
                position += 1
        return end

    def _parse_star_export(self, index: int) -> int:
        specifier, spec_index, end = self._statement_specifier(index + 1)
        if specifier is not None and self.tokens[index + 1].is_ident("from"):
            self.parsed.star_exports.append(specifier)
        return end

    def _parse_named_exports(self, index: int) -> int:
        if self.tokens[index].is_ident("type"):
            index += 1
        close = find_matching(self.tokens, index)
        pairs = self._parse_specifiers(self.tokens[index + 1 : close])
        specifier = ""
        end = close + 1
        following = self._peek(end)
        if following is not None and following.is_ident("from"):
            specifier, _, end = self._statement_specifier(end + 1)
            specifier = specifier or ""
        elif following is not None and following.is_punct(";"):
            end += 1
        for imported, exported in pairs:
            self.parsed.named_exports.append(ImportBinding(exported, imported, specifier))
        return end

    def _parse_type_alias(self, index: int, jsdocs: list[JSDoc]) -> int:
        name = self.tokens[index + 1].value
        position = index + 2
        if self.tokens[position].is_punct("<"):
            position = find_matching(self.tokens, position) + 1
        token = self._peek(position)
        if token is None or not token.is_punct("="):
            raise TypeParseError(f"Expected '=' after type {name}")
        type_start = position + 1
        type_end = find_type_end(self.tokens, type_start)
        type_node = parse_type_tokens(self.tokens[type_start:type_end])
        self.parsed.declarations.append(
            Declaration(
                kind=DeclarationKind.TYPE_ALIAS,
                name=name,
                type_node=type_node,
                jsdocs=list(jsdocs),
                source_path=self.parsed.path,
            )
        )
        end = type_end
        if end < len(self.tokens) and self.tokens[end].is_punct(";"):
            end += 1
        return end

    def _parse_interface(self, index: int, jsdocs: list[JSDoc]) -> int:
        name = self.tokens[index + 1].value
        position = index + 2
        if position < len(self.tokens) and self.tokens[position].is_punct("<"):
            position = find_matching(self.tokens, position) + 1

        heritage: list[TypeNode] = []
        if position < len(self.tokens) and self.tokens[position].is_ident("extends"):
            position += 1
            while position < len(self.tokens) and not self.tokens[position].is_punct("{"):
                clause_end = find_type_end(self.tokens, position, stop_at_comma=True)
                # The body brace belongs to the interface, not the clause
                angle_depth = 0
                for brace in range(position, clause_end):
                    token = self.tokens[brace]
                    if token.is_punct("<"):
                        angle_depth += 1
                    elif token.is_punct(">"):
                        angle_depth -= 1
                    elif token.is_punct("{") and angle_depth == 0:
                        clause_end = brace
                        break
                if clause_end <= position:
                    raise TypeParseError(f"Malformed heritage clause in interface {name}")
                heritage.append(parse_type_tokens(self.tokens[position:clause_end]))
                position = clause_end
                if position < len(self.tokens) and self.tokens[position].is_punct(","):
                    position += 1

        if position >= len(self.tokens) or not self.tokens[position].is_punct("{"):
            raise TypeParseError(f"Expected body for interface {name}")
        close = find_matching(self.tokens, position)
        members = parse_members(self.tokens[position + 1 : close])
        self.parsed.declarations.append(
            Declaration(
                kind=DeclarationKind.INTERFACE,
                name=name,
                type_node=TypeLiteral(text=render_members(members), members=members),
                heritage=heritage,
                jsdocs=list(jsdocs),
                source_path=self.parsed.path,
            )
        )
        return close + 1


def parse_source(text: str, path: Path) -> ParsedFile:
    """Parse TypeScript source text into declarations and module bindings."""
    return SourceParser(text, path).parse()


__all__ = [
    "TypeParseError",
    "TypeParser",
    "find_matching",
    "find_type_end",
    "parse_members",
    "parse_source",
    "parse_type_tokens",
    "render_members",
    "render_tokens",
]
