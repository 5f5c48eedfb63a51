"""
patfmt Lexer (Tokenizer).

Transforms a pattern document into a stream of tokens. Newlines are only
significant outside of brackets, where they separate document items.
"""

import string
from typing import Optional

from patfmt.syntax.tokens import (
    CLOSING_DELIMITERS,
    KEYWORDS,
    MULTI_CHAR_TOKENS,
    OPENING_DELIMITERS,
    SINGLE_CHAR_TOKENS,
    Token,
    TokenType,
)
from patfmt.utils.errors import LexerError, SourceLocation


class Lexer:
    """
    Tokenizer for pattern documents.

    The lexer supports:
    - Identifiers, keywords (ref, mut, box, as, true, false) and ``_``
    - Integer and float literals with radix prefixes, underscores and suffixes
    - String, byte string, char and byte char literals (kept verbatim)
    - Lifetimes (``'a``)
    - Line (``//``) and nestable block (``/* */``) comments
    - Punctuation for paths, ranges, references and macro bodies

    Usage:
        lexer = Lexer(source)
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Initialize the lexer with source text.

        Args:
            source: The pattern document to tokenize
            filename: Optional filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

        # Bracket nesting; newlines are only tokens at depth zero
        self._depth = 0
        self._line_start = 0

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    @property
    def _peek_char(self) -> Optional[str]:
        """Return the next character without consuming it."""
        return self._peek_ahead(1)

    def _peek_ahead(self, n: int) -> Optional[str]:
        """Return the character n positions ahead."""
        peek_pos = self.pos + n
        if peek_pos >= len(self.source):
            return None
        return self.source[peek_pos]

    def _location(self) -> SourceLocation:
        """Create a SourceLocation for the current position."""
        return SourceLocation(
            line=self.line,
            column=self.column,
            offset=self.pos,
            filename=self.filename,
        )

    def _current_line_text(self) -> str:
        """Extract the current line of source for error messages."""
        end = self.source.find("\n", self._line_start)
        if end == -1:
            end = len(self.source)
        return self.source[self._line_start:end]

    def _error(self, message: str, location: Optional[SourceLocation] = None) -> LexerError:
        return LexerError(message, location or self._location(), self._current_line_text())

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
            self._line_start = self.pos
        else:
            self.column += 1

        return char

    def _make_token(self, token_type: TokenType, start: SourceLocation) -> Token:
        """Build a token whose value is the source text consumed since ``start``."""
        return Token(token_type, self.source[start.offset:self.pos], start, self.pos)

    def _skip_whitespace(self) -> None:
        """Skip whitespace characters except newlines."""
        while self._current_char is not None and self._current_char in " \t\r":
            self._advance()

    def _read_line_comment(self) -> Token:
        """Read a ``//`` comment up to (not including) the end of the line."""
        start = self._location()
        while self._current_char is not None and self._current_char != "\n":
            self._advance()
        return Token(
            TokenType.COMMENT, self.source[start.offset:self.pos].rstrip(), start, self.pos
        )

    def _read_block_comment(self) -> Token:
        """Read a possibly nested ``/* ... */`` comment."""
        start = self._location()
        self._advance()  # /
        self._advance()  # *
        nesting = 1

        while nesting > 0:
            if self._current_char is None:
                raise self._error("Unterminated block comment", start)
            if self._current_char == "/" and self._peek_char == "*":
                self._advance()
                self._advance()
                nesting += 1
            elif self._current_char == "*" and self._peek_char == "/":
                self._advance()
                self._advance()
                nesting -= 1
            else:
                self._advance()

        return self._make_token(TokenType.COMMENT, start)

    def _read_string(self, start: SourceLocation) -> Token:
        """
        Read a string literal; the opening quote (and any ``b`` prefix)
        has not been consumed yet. Strings may span lines.
        """
        while self._current_char != '"':
            self._advance()  # b prefix
        self._advance()  # opening quote

        while True:
            if self._current_char is None:
                raise self._error("Unterminated string literal", start)

            if self._current_char == "\\":
                self._advance()
                if self._current_char is None:
                    raise self._error("Unterminated escape sequence")
                self._advance()
                continue

            if self._advance() == '"':
                break

        return self._make_token(TokenType.STRING, start)

    def _read_char_or_lifetime(self, start: SourceLocation) -> Token:
        """
        Read a char literal (``'x'``, ``'\\n'``, ``b'x'``) or a lifetime (``'a``).
        """
        is_byte = self._current_char == "b"
        if is_byte:
            self._advance()
        self._advance()  # opening quote

        if self._current_char == "\\":
            self._advance()  # backslash
            while True:
                if self._current_char is None or self._current_char == "\n":
                    raise self._error("Unterminated character literal", start)
                self._advance()
                if self._current_char == "'":
                    self._advance()
                    return self._make_token(TokenType.CHAR, start)

        if (
            self._current_char is not None
            and self._current_char != "\n"
            and self._peek_char == "'"
        ):
            self._advance()
            self._advance()
            return self._make_token(TokenType.CHAR, start)

        if not is_byte and self._current_char is not None and (
            self._current_char.isalpha() or self._current_char == "_"
        ):
            while self._current_char is not None and (
                self._current_char.isalnum() or self._current_char == "_"
            ):
                self._advance()
            return self._make_token(TokenType.LIFETIME, start)

        raise self._error("Invalid character literal", start)

    def _read_number(self) -> Token:
        """
        Read a numeric literal (integer or float).

        Supports:
        - Decimal integers: 123, 1_000
        - Radix prefixes: 0xFF, 0o17, 0b1010
        - Floats: 1.5, 1., 2e10, 1.5E-3
        - Type suffixes: 1u8, 2.0f32, 0xFF_u16
        """
        start = self._location()
        is_float = False

        if self._current_char == "0" and self._peek_char is not None and self._peek_char in "xob":
            self._advance()
            self._advance()
            while self._current_char is not None and (
                self._current_char.isalnum() or self._current_char == "_"
            ):
                self._advance()
            return self._make_token(TokenType.INTEGER, start)

        self._read_digits()

        if self._current_char == ".":
            following = self._peek_char
            if following is not None and following.isdigit():
                is_float = True
                self._advance()
                self._read_digits()
            elif following is None or not (
                following == "." or following.isalpha() or following == "_"
            ):
                # Trailing-dot float such as `1.`
                is_float = True
                self._advance()
                return self._make_token(TokenType.FLOAT, start)

        if self._current_char is not None and self._current_char in "eE":
            following = self._peek_char
            if following is not None and (
                following.isdigit()
                or (following in "+-" and (self._peek_ahead(2) or "").isdigit())
            ):
                is_float = True
                self._advance()
                if self._current_char in "+-":
                    self._advance()
                self._read_digits()

        if self._current_char is not None and (
            self._current_char.isalpha() or self._current_char == "_"
        ):
            if self._current_char == "f":
                is_float = True
            while self._current_char is not None and (
                self._current_char.isalnum() or self._current_char == "_"
            ):
                self._advance()

        return self._make_token(TokenType.FLOAT if is_float else TokenType.INTEGER, start)

    def _read_digits(self) -> None:
        while self._current_char is not None and (
            self._current_char.isdigit() or self._current_char == "_"
        ):
            self._advance()

    def _read_identifier_or_keyword(self) -> Token:
        """
        Read an identifier or keyword.

        Returns:
            An IDENTIFIER token or the appropriate keyword token.
        """
        start = self._location()

        while self._current_char is not None and (
            self._current_char.isalnum() or self._current_char == "_"
        ):
            self._advance()

        identifier = self.source[start.offset:self.pos]
        token_type = KEYWORDS.get(identifier, TokenType.IDENTIFIER)
        return Token(token_type, identifier, start, self.pos)

    def _read_punctuation(self) -> Token:
        """
        Read a punctuation token, longest match first.

        Returns:
            A punctuation token; characters with no dedicated type become OTHER.
        """
        start = self._location()

        for text in MULTI_CHAR_TOKENS:
            if self.source.startswith(text, self.pos):
                for _ in text:
                    self._advance()
                return Token(MULTI_CHAR_TOKENS[text], text, start, self.pos)

        char = self._current_char
        token_type = SINGLE_CHAR_TOKENS.get(char)

        if token_type is None:
            if char not in string.punctuation:
                raise self._error(f"Unexpected character: {char!r}")
            token_type = TokenType.OTHER

        self._advance()

        if token_type in OPENING_DELIMITERS:
            self._depth += 1
        elif token_type in CLOSING_DELIMITERS and self._depth > 0:
            self._depth -= 1

        return Token(token_type, char, start, self.pos)

    def _next_token(self) -> Token:
        """
        Extract the next token from the source.

        Returns:
            The next token; EOF once the source is exhausted.
        """
        while True:
            self._skip_whitespace()
            if self._current_char == "\n" and self._depth > 0:
                self._advance()
                continue
            break

        char = self._current_char

        if char is None:
            return Token(TokenType.EOF, None, self._location(), self.pos)

        if char == "\n":
            loc = self._location()
            self._advance()
            return Token(TokenType.NEWLINE, "\n", loc, self.pos)

        if char == "/" and self._peek_char == "/":
            return self._read_line_comment()

        if char == "/" and self._peek_char == "*":
            return self._read_block_comment()

        if char == '"':
            return self._read_string(self._location())

        if char == "'":
            return self._read_char_or_lifetime(self._location())

        if char == "b" and self._peek_char == '"':
            return self._read_string(self._location())

        if char == "b" and self._peek_char == "'":
            return self._read_char_or_lifetime(self._location())

        if char.isdigit():
            return self._read_number()

        if char.isalpha() or char == "_":
            return self._read_identifier_or_keyword()

        return self._read_punctuation()

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source.

        Returns:
            A list of all tokens including the final EOF token.
        """
        self.tokens = []
        self.pos = 0
        self.line = 1
        self.column = 1
        self._line_start = 0
        self._depth = 0

        while True:
            token = self._next_token()
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return self.tokens


def tokenize(source: str, filename: Optional[str] = None) -> list[Token]:
    """
    Convenience function to tokenize a pattern document.

    Args:
        source: Pattern document text
        filename: Optional filename for error reporting

    Returns:
        List of tokens
    """
    return Lexer(source, filename).tokenize()
