"""Tokenizer for TypeScript source text.

The scanner produces just enough structure for declaration parsing:
identifiers, literals, punctuation and ``/** ... */`` doc comments. Other
comments are dropped. Runtime code (JSX, regular expressions) only needs to
tokenize well enough to be skipped, so malformed input degrades to single
punctuation tokens instead of failing.
"""

from .models import Token, TokenKind

# Longest first
MULTI_CHAR_PUNCTUATORS = (
    "...",
    "===",
    "!==",
    "**=",
    "=>",
    "==",
    "!=",
    "<=",
    "&&",
    "||",
    "??",
    "?.",
    "**",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
)

# Keywords after which a ``/`` starts a regular expression literal
_REGEX_PRECEDING_KEYWORDS = {
    "return",
    "typeof",
    "case",
    "do",
    "else",
    "in",
    "of",
    "new",
    "delete",
    "void",
    "throw",
    "instanceof",
    "yield",
    "await",
}


def _is_ident_start(char: str) -> bool:
    return char.isalpha() or char in "_$"


def _is_ident_part(char: str) -> bool:
    return char.isalnum() or char in "_$"


class Scanner:
    """Converts TypeScript source text into a list of tokens.

    Example:
        >>> tokens = Scanner("type A = { a: string };").scan()
        >>> [t.value for t in tokens][:3]
        ['type', 'A', '=']
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.tokens: list[Token] = []
        self._newline_pending = False

    def scan(self) -> list[Token]:
        text = self.text
        length = len(text)
        while self.pos < length:
            char = text[self.pos]

            if char == "\n":
                self._newline_pending = True
                self.line += 1
                self.pos += 1
            elif char.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = length if end == -1 else end
            elif text.startswith("/*", self.pos):
                self._scan_block_comment()
            elif char in "\"'":
                self._scan_string(char)
            elif char == "`":
                self._scan_template()
            elif char.isdigit() or (char == "." and text[self.pos + 1 : self.pos + 2].isdigit()):
                self._scan_number()
            elif _is_ident_start(char):
                self._scan_identifier()
            elif char == "/" and self._regex_allowed():
                self._scan_regex()
            else:
                self._scan_punctuator()
        return self.tokens

    def _emit(self, kind: TokenKind, value: str, line: int) -> None:
        self.tokens.append(Token(kind, value, line, self._newline_pending))
        self._newline_pending = False

    def _advance_to(self, end: int) -> str:
        value = self.text[self.pos : end]
        self.line += value.count("\n")
        self.pos = end
        return value

    def _scan_block_comment(self) -> None:
        start_line = self.line
        end = self.text.find("*/", self.pos + 2)
        end = len(self.text) if end == -1 else end + 2
        is_doc = self.text.startswith("/**", self.pos) and not self.text.startswith("/**/", self.pos)
        newline_before = self._newline_pending
        value = self._advance_to(end)
        if is_doc:
            self.tokens.append(Token(TokenKind.JSDOC, value, start_line, newline_before))
            self._newline_pending = False
        elif "\n" in value:
            self._newline_pending = True

    def _scan_string(self, quote: str) -> None:
        text = self.text
        index = self.pos + 1
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                self._emit(TokenKind.STRING, text[self.pos : index + 1], self.line)
                self.pos = index + 1
                return
            if char == "\n":
                break
            index += 1
        # Unterminated (JSX text, apostrophes): treat the quote as punctuation
        self._emit(TokenKind.PUNCT, quote, self.line)
        self.pos += 1

    def _scan_template(self) -> None:
        text = self.text
        start_line = self.line
        index = self.pos + 1
        depth = 0
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if depth == 0 and char == "`":
                index += 1
                break
            if depth == 0 and text.startswith("${", index):
                depth = 1
                index += 2
                continue
            if depth > 0:
                if char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
            index += 1
        value = self._advance_to(min(index, len(text)))
        self.tokens.append(Token(TokenKind.TEMPLATE, value, start_line, self._newline_pending))
        self._newline_pending = False

    def _scan_number(self) -> None:
        text = self.text
        index = self.pos
        while index < len(text) and (_is_ident_part(text[index]) or text[index] == "."):
            if text[index] == "." and text.startswith("..", index):
                break
            index += 1
        self._emit(TokenKind.NUMBER, text[self.pos : index], self.line)
        self.pos = index

    def _scan_identifier(self) -> None:
        text = self.text
        index = self.pos + 1
        while index < len(text) and _is_ident_part(text[index]):
            index += 1
        self._emit(TokenKind.IDENT, text[self.pos : index], self.line)
        self.pos = index

    def _regex_allowed(self) -> bool:
        if not self.tokens:
            return True
        previous = self.tokens[-1]
        if previous.kind is TokenKind.PUNCT:
            return previous.value not in (")", "]", "}")
        if previous.kind is TokenKind.IDENT:
            return previous.value in _REGEX_PRECEDING_KEYWORDS
        return previous.kind is TokenKind.JSDOC

    def _scan_regex(self) -> None:
        text = self.text
        index = self.pos + 1
        in_class = False
        while index < len(text):
            char = text[index]
            if char == "\n":
                break
            if char == "\\":
                index += 2
                continue
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                index += 1
                while index < len(text) and _is_ident_part(text[index]):
                    index += 1
                self._emit(TokenKind.REGEX, text[self.pos : index], self.line)
                self.pos = index
                return
            index += 1
        self._scan_punctuator()

    def _scan_punctuator(self) -> None:
        for punctuator in MULTI_CHAR_PUNCTUATORS:
            if self.text.startswith(punctuator, self.pos):
                self._emit(TokenKind.PUNCT, punctuator, self.line)
                self.pos += len(punctuator)
                return
        self._emit(TokenKind.PUNCT, self.text[self.pos], self.line)
        self.pos += 1


def tokenize(text: str) -> list[Token]:
    """Tokenize TypeScript source text."""
    return Scanner(text).scan()


__all__ = ["Scanner", "tokenize"]
