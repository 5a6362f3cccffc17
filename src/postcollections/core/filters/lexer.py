"""Lexer for filter expressions."""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .exceptions import FilterSyntaxError

INTEGER_PATTERN = re.compile(r"^\d+$")
FLOAT_PATTERN = re.compile(r"^\d+\.\d+$")

class TokenType(Enum):
    """Types of tokens in filter expressions."""
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    NULL = auto()
    IDENTIFIER = auto()

    # Operators
    COLON = auto()         # :
    MINUS = auto()         # - (negation)
    LT = auto()            # <
    GT = auto()            # >
    LTE = auto()           # <=
    GTE = auto()           # >=
    CONTAINS = auto()      # ~
    STARTS_WITH = auto()   # ~^
    ENDS_WITH = auto()     # ~$

    # Logical Operators
    AND = auto()           # +
    OR = auto()            # ,

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()

    EOF = auto()

@dataclass
class Token:
    """A single token in the filter expression."""
    type: TokenType
    value: str | int | float | bool | None
    position: int

class Lexer:
    """Tokenizes filter strings."""

    SINGLE_CHAR_TOKENS = {
        ":": TokenType.COLON,
        "-": TokenType.MINUS,
        "+": TokenType.AND,
        ",": TokenType.OR,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
    }

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.current_char = self.text[0] if self.text else None

    def error(self, message: str) -> None:
        """Raise a syntax error."""
        raise FilterSyntaxError(message, self.pos)

    def advance(self) -> None:
        """Move one character forward."""
        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek(self) -> str | None:
        """Look at the next character without moving."""
        peek_pos = self.pos + 1
        return self.text[peek_pos] if peek_pos < len(self.text) else None

    def skip_whitespace(self) -> None:
        """Skip over whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def _is_word_char(self, char: str | None) -> bool:
        return char is not None and (char.isalnum() or char in "_.-")

    def _string(self) -> Token:
        """Parse quoted string, honouring backslash escapes."""
        start_pos = self.pos
        quote_char = self.current_char
        self.advance()  # Skip opening quote

        result = ""
        while self.current_char is not None and self.current_char != quote_char:
            if self.current_char == "\\" and self.peek() is not None:
                self.advance()
            result += self.current_char
            self.advance()

        if self.current_char is None:
            self.error("Unterminated string literal")

        self.advance()  # Skip closing quote
        return Token(TokenType.STRING, result, start_pos)

    def _word(self) -> Token:
        """Parse a bare word: identifier, keyword or number."""
        start_pos = self.pos
        result = ""
        # Words may hold letters, digits, underscores, dots and inner hyphens
        # so that slugs, dates and dotted paths stay a single token
        while self._is_word_char(self.current_char):
            result += self.current_char
            self.advance()

        if INTEGER_PATTERN.match(result):
            return Token(TokenType.INTEGER, int(result), start_pos)
        if FLOAT_PATTERN.match(result):
            return Token(TokenType.FLOAT, float(result), start_pos)

        if result == "true":
            return Token(TokenType.BOOLEAN, True, start_pos)
        if result == "false":
            return Token(TokenType.BOOLEAN, False, start_pos)
        if result == "null":
            return Token(TokenType.NULL, None, start_pos)

        return Token(TokenType.IDENTIFIER, result, start_pos)

    def get_next_token(self) -> Token:  # noqa: C901
        """Get the next token from input."""
        while self.current_char is not None:

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char in ("'", '"'):
                return self._string()

            if self.current_char.isalnum() or self.current_char == "_":
                return self._word()

            start_pos = self.pos

            if self.current_char == "<":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.LTE, "<=", start_pos)
                self.advance()
                return Token(TokenType.LT, "<", start_pos)

            if self.current_char == ">":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.GTE, ">=", start_pos)
                self.advance()
                return Token(TokenType.GT, ">", start_pos)

            if self.current_char == "~":
                if self.peek() == "^":
                    self.advance()
                    self.advance()
                    return Token(TokenType.STARTS_WITH, "~^", start_pos)
                if self.peek() == "$":
                    self.advance()
                    self.advance()
                    return Token(TokenType.ENDS_WITH, "~$", start_pos)
                self.advance()
                return Token(TokenType.CONTAINS, "~", start_pos)

            token_type = self.SINGLE_CHAR_TOKENS.get(self.current_char)
            if token_type is not None:
                char = self.current_char
                self.advance()
                return Token(token_type, char, start_pos)

            self.error(f"Invalid character '{self.current_char}'")

        return Token(TokenType.EOF, None, self.pos)

    def tokenize(self) -> Iterator[Token]:
        """Generator that yields all tokens."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
