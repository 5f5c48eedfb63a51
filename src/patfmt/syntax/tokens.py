"""
Token definitions for the patfmt lexer.

This module defines the token types of pattern documents: identifiers,
keywords, literals and the punctuation used by patterns, paths and types.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from patfmt.syntax.codemap import Span
from patfmt.utils.errors import SourceLocation


class TokenType(Enum):
    """Enumeration of all token types in pattern documents."""

    # End of file
    EOF = auto()

    # Layout
    NEWLINE = auto()  # only emitted outside of brackets
    COMMENT = auto()

    # Identifiers
    IDENTIFIER = auto()
    LIFETIME = auto()  # 'a

    # Literals
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    CHAR = auto()

    # Keywords
    TRUE = auto()
    FALSE = auto()
    REF = auto()
    MUT = auto()
    BOX = auto()
    AS = auto()
    UNDERSCORE = auto()

    # Delimiters
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }

    # Punctuation
    COMMA = auto()  # ,
    COLON = auto()  # :
    DOUBLE_COLON = auto()  # ::
    AT = auto()  # @
    AMPERSAND = auto()  # &
    MINUS = auto()  # -
    BANG = auto()  # !
    LT = auto()  # <
    GT = auto()  # >
    DOT_DOT = auto()  # ..
    ELLIPSIS = auto()  # ...
    DOT_DOT_EQ = auto()  # ..=

    # Any other punctuation character; only meaningful inside macro bodies
    OTHER = auto()


KEYWORDS: dict[str, TokenType] = {
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "ref": TokenType.REF,
    "mut": TokenType.MUT,
    "box": TokenType.BOX,
    "as": TokenType.AS,
    "_": TokenType.UNDERSCORE,
}


SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    "@": TokenType.AT,
    "&": TokenType.AMPERSAND,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "<": TokenType.LT,
    ">": TokenType.GT,
}


MULTI_CHAR_TOKENS: dict[str, TokenType] = {
    "...": TokenType.ELLIPSIS,
    "..=": TokenType.DOT_DOT_EQ,
    "..": TokenType.DOT_DOT,
    "::": TokenType.DOUBLE_COLON,
}


OPENING_DELIMITERS = frozenset({TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE})
CLOSING_DELIMITERS = frozenset({TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE})


@dataclass
class Token:
    """
    Represents a single token from the source.

    Attributes:
        type: The type of this token
        value: The lexeme text (verbatim for literals)
        location: Source location of the first character
        end: Offset one past the last character
    """

    type: TokenType
    value: Any
    location: SourceLocation
    end: int

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.location})"
        return f"Token({self.type.name}, {self.location})"

    @property
    def span(self) -> Span:
        return Span(self.location.offset, self.end)

    @property
    def is_literal(self) -> bool:
        """Check if this token starts a literal pattern."""
        return self.type in {
            TokenType.INTEGER,
            TokenType.FLOAT,
            TokenType.STRING,
            TokenType.CHAR,
            TokenType.TRUE,
            TokenType.FALSE,
        }
