"""Tokenizer for the brace/semicolon configuration dialect.

Responsibilities:
- Pull characters from a readable stream and yield one token per call.
- Skip whitespace and `#` line comments, read quoted strings and identifier runs.
- Hold at most one pushed-back token for the parser's single-token lookahead.

Key types:
- `TokenType`: token kinds of the dialect.
- `Token`: one token with its text and starting position.
- `Lexer`: on-demand token source over one stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import LexicalError
from .io.streams import ReadableStream, as_text_reader

_SINGLE_CHAR_TOKENS = {
    "{": "LBRACE",
    "}": "RBRACE",
    "=": "EQUALS",
    ";": "SEMICOLON",
}
# `/` may start an identifier so unquoted absolute paths lex as one value.
_IDENT_START_EXTRA = frozenset("_$/")
_IDENT_PART_EXTRA = frozenset("_-./$")


class TokenType(Enum):
    """Token kinds; values are the labels used in diagnostics."""

    EOF = "end of input"
    IDENT = "identifier"
    STRING = "quoted string"
    LBRACE = "'{'"
    RBRACE = "'}'"
    EQUALS = "'='"
    SEMICOLON = "';'"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token.

    Attributes:
        type: Token kind.
        value: Recovered text for identifiers and quoted strings, empty otherwise.
        line: 1-based line of the token's first character.
        column: 1-based column of the token's first character.
    """

    type: TokenType
    value: str = ""
    line: int = 0
    column: int = 0

    def describe(self) -> str:
        """Return a short human-readable label for diagnostics."""

        if self.type is TokenType.IDENT:
            return f"identifier `{self.value}`"
        if self.type is TokenType.STRING:
            return f"quoted string {self.value!r}"
        return self.type.value


def is_ident_start(char: str) -> bool:
    """Return whether `char` may begin an unquoted identifier."""

    return char.isalpha() or char in _IDENT_START_EXTRA


def is_ident_part(char: str) -> bool:
    """Return whether `char` may continue an unquoted identifier."""

    return char.isalpha() or char.isdecimal() or char in _IDENT_PART_EXTRA


class Lexer:
    """Produce tokens on demand from one readable stream.

    The lexer reads the caller's stream but never closes it.
    """

    def __init__(self, stream: ReadableStream) -> None:
        """Wrap `stream` and reset position tracking to line 1."""

        self._reader = as_text_reader(stream)
        self._peeked: Token | None = None
        self._pending_char: str | None = None
        self._line = 1
        self._column = 0
        self._previous_position = (1, 0)

    def next_token(self) -> Token:
        """Consume and return the next token, honoring a pushed-back one first."""

        if self._peeked is not None:
            token = self._peeked
            self._peeked = None
            return token

        while True:
            char = self._read_char()
            if not char:
                return Token(TokenType.EOF, line=self._line, column=self._column + 1)
            if char == "#":
                self._skip_comment()
                continue
            if char.isspace():
                continue

            line, column = self._line, self._column
            kind = _SINGLE_CHAR_TOKENS.get(char)
            if kind is not None:
                return Token(TokenType[kind], line=line, column=column)
            if char == '"':
                return Token(TokenType.STRING, self._read_string(line, column), line, column)
            if is_ident_start(char):
                return Token(TokenType.IDENT, self._read_ident(char), line, column)
            raise LexicalError(
                detail=f"unexpected character {char!r}", line=line, column=column
            )

    def push_back(self, token: Token) -> None:
        """Return `token` to the stream so the next `next_token` call yields it."""

        if self._peeked is not None:
            raise RuntimeError("lexer already holds a pushed-back token")
        self._peeked = token

    def peek(self) -> Token:
        """Return the next token without consuming it."""

        token = self.next_token()
        self.push_back(token)
        return token

    def _read_char(self) -> str:
        """Read one character, returning an empty string at end of input."""

        if self._pending_char is not None:
            char = self._pending_char
            self._pending_char = None
        else:
            char = self._reader.read(1)
            if not char:
                return ""

        self._previous_position = (self._line, self._column)
        if char == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        return char

    def _unread_char(self, char: str) -> None:
        """Push one character back; only the most recently read one is supported."""

        self._pending_char = char
        self._line, self._column = self._previous_position

    def _skip_comment(self) -> None:
        """Discard input up to and including the next newline or end of input."""

        while True:
            char = self._read_char()
            if not char or char == "\n":
                return

    def _read_string(self, line: int, column: int) -> str:
        """Read a quoted string body after its opening quote.

        A backslash copies the following character literally.
        """

        parts: list[str] = []
        while True:
            char = self._read_char()
            if not char:
                raise LexicalError(detail="unterminated quoted string", line=line, column=column)
            if char == '"':
                return "".join(parts)
            if char == "\\":
                char = self._read_char()
                if not char:
                    raise LexicalError(
                        detail="unterminated quoted string", line=line, column=column
                    )
            parts.append(char)

    def _read_ident(self, first: str) -> str:
        """Read the rest of an identifier run starting with `first`."""

        parts = [first]
        while True:
            char = self._read_char()
            if not char:
                break
            if not is_ident_part(char):
                self._unread_char(char)
                break
            parts.append(char)
        return "".join(parts)
