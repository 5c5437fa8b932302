"""Recursive-descent parser producing the generic configuration form.

Grammar::

    config       := (assignment | domain_block)* EOF
    assignment   := IDENT '=' value ';'?
    domain_block := 'domain' '{' domain_entry* '}' ';'?
    domain_entry := (IDENT | STRING) '{' assignment* '}' ';'?
    value        := IDENT | STRING

The result is structure-agnostic: flat top-level assignments plus one level
of named domain blocks. Typed meaning is applied later by `dkimconf.config`.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigSyntaxError
from .io.streams import ReadableStream
from .lexer import Lexer, Token, TokenType

DOMAIN_KEYWORD = "domain"


@dataclass(frozen=True, slots=True)
class ParsedConfig:
    """Generic parse result.

    Attributes:
        assignments: Top-level identifier to value; last assignment wins.
        domains: Domain block label to that block's own assignments.
    """

    assignments: Mapping[str, str]
    domains: Mapping[str, Mapping[str, str]]


class ConfigParser:
    """Single-pass parser that exclusively owns one `Lexer`."""

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer

    def parse(self) -> ParsedConfig:
        """Consume the whole token stream and return the generic result."""

        assignments: dict[str, str] = {}
        domains: dict[str, Mapping[str, str]] = {}

        while True:
            token = self._lexer.next_token()
            if token.type is TokenType.EOF:
                return ParsedConfig(
                    assignments=MappingProxyType(assignments),
                    domains=MappingProxyType(domains),
                )
            if token.type is not TokenType.IDENT:
                raise ConfigSyntaxError(expected="an assignment or `domain` block", actual=token)
            if token.value == DOMAIN_KEYWORD:
                self._parse_domain_block(domains)
                continue
            assignments[token.value] = self._parse_assignment_tail()

    def _parse_domain_block(self, domains: dict[str, Mapping[str, str]]) -> None:
        """Parse `{ entry* }` after the `domain` keyword into `domains`."""

        self._expect(TokenType.LBRACE)
        while True:
            token = self._lexer.next_token()
            if token.type is TokenType.RBRACE:
                self._skip_optional(TokenType.SEMICOLON)
                return
            if token.type not in (TokenType.IDENT, TokenType.STRING):
                raise ConfigSyntaxError(expected="a domain label or '}'", actual=token)
            self._expect(TokenType.LBRACE)
            domains[token.value] = MappingProxyType(self._parse_block_body())

    def _parse_block_body(self) -> dict[str, str]:
        """Parse assignments up to and including the closing brace of one entry."""

        rule: dict[str, str] = {}
        while True:
            token = self._lexer.next_token()
            if token.type is TokenType.RBRACE:
                self._skip_optional(TokenType.SEMICOLON)
                return rule
            if token.type is not TokenType.IDENT:
                raise ConfigSyntaxError(expected="an assignment or '}'", actual=token)
            rule[token.value] = self._parse_assignment_tail()

    def _parse_assignment_tail(self) -> str:
        """Parse `'=' value ';'?` after an assignment key and return the value."""

        self._expect(TokenType.EQUALS)
        token = self._lexer.next_token()
        if token.type not in (TokenType.IDENT, TokenType.STRING):
            raise ConfigSyntaxError(expected="a value", actual=token)
        self._skip_optional(TokenType.SEMICOLON)
        return token.value

    def _expect(self, token_type: TokenType) -> Token:
        token = self._lexer.next_token()
        if token.type is not token_type:
            raise ConfigSyntaxError(expected=token_type.value, actual=token)
        return token

    def _skip_optional(self, token_type: TokenType) -> bool:
        """Consume the next token only if it has `token_type`."""

        if self._lexer.peek().type is not token_type:
            return False
        self._lexer.next_token()
        return True


def parse_config(stream: ReadableStream) -> ParsedConfig:
    """Parse a configuration stream into its generic form.

    Raises:
        LexicalError: On a character that cannot start a token or an unterminated string.
        ConfigSyntaxError: On any grammar violation.
    """

    return ConfigParser(Lexer(stream)).parse()


def parse_config_text(text: str) -> ParsedConfig:
    """Parse configuration held in a string."""

    return parse_config(io.StringIO(text))
