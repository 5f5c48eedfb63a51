"""
patfmt Parser.

A recursive descent parser that turns the token stream of a pattern
document into a ``PatternDocument``. Each document item is one pattern (or
one comment line); newlines outside of brackets separate items.
"""

from typing import Callable, Optional, TypeVar

from patfmt.syntax.ast_nodes import (
    BindingPattern,
    BoxPattern,
    CommentItem,
    ConstructorPattern,
    DocumentItem,
    Expression,
    FieldPattern,
    InferType,
    LifetimeArg,
    Literal,
    LiteralKind,
    LiteralPattern,
    NegatedExpression,
    OpaquePattern,
    Path,
    PathExpression,
    PathSegment,
    PathType,
    Pattern,
    PatternDocument,
    PatternItem,
    QualifiedPathPattern,
    QualifiedSelf,
    RangePattern,
    ReferencePattern,
    ReferenceType,
    SlicePattern,
    StructPattern,
    TuplePattern,
    TupleType,
    TypeRef,
    WildcardPattern,
)
from patfmt.syntax.codemap import Span
from patfmt.syntax.lexer import tokenize
from patfmt.syntax.tokens import CLOSING_DELIMITERS, OPENING_DELIMITERS, Token, TokenType
from patfmt.utils.errors import ParserError

T = TypeVar("T")


LITERAL_KINDS: dict[TokenType, LiteralKind] = {
    TokenType.INTEGER: LiteralKind.INTEGER,
    TokenType.FLOAT: LiteralKind.FLOAT,
    TokenType.STRING: LiteralKind.STRING,
    TokenType.CHAR: LiteralKind.CHAR,
    TokenType.TRUE: LiteralKind.BOOLEAN,
    TokenType.FALSE: LiteralKind.BOOLEAN,
}


MATCHING_DELIMITER: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}


DELIMITER_TEXT: dict[TokenType, str] = {
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
    TokenType.RBRACE: "}",
    TokenType.GT: ">",
}


class Parser:
    """
    Recursive descent parser for pattern documents.

    Usage:
        parser = Parser(tokens, source)
        document = parser.parse()
    """

    def __init__(self, tokens: list[Token], source: str = "",
                 filename: str = "<input>") -> None:
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            source: Optional source text, quoted in error messages
            filename: Optional filename for error reporting
        """
        self.tokens = tokens
        self.pos = 0
        self._source_lines: list[str] = source.splitlines() if source else []
        self._filename = filename

    # -------------------------------------------------------------------------
    # Token Stream Helpers
    # -------------------------------------------------------------------------

    @property
    def _current(self) -> Token:
        """Get the current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    @property
    def _previous(self) -> Token:
        """Get the previous token."""
        return self.tokens[self.pos - 1] if self.pos > 0 else self.tokens[0]

    def _peek(self, offset: int = 1) -> Token:
        """Peek at a token ahead of the current position."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._current.type == TokenType.EOF

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self._current.type in types

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Consume current token if it matches one of the given types."""
        if self._check(*types):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Consume current token if it matches, else raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error(message)

    def _skip_newlines(self) -> None:
        while self._match(TokenType.NEWLINE):
            pass

    def _span_from(self, start: Token) -> Span:
        """Span from the start of ``start`` to the end of the last consumed token."""
        return Span(start.location.offset, max(start.location.offset, self._previous.end))

    def _error(self, message: str) -> ParserError:
        """Create a parser error at the current token."""
        token = self._current
        source_line = None
        if 0 < token.location.line <= len(self._source_lines):
            source_line = self._source_lines[token.location.line - 1]
        found = "end of input" if token.type == TokenType.EOF else repr(token.value)
        return ParserError(f"{message}, found {found}", token.location, source_line)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def parse(self) -> PatternDocument:
        """
        Parse the whole token stream.

        Returns:
            The document with one item per pattern or comment line.
        """
        items: list[DocumentItem] = []
        newlines = 0

        while True:
            if self._match(TokenType.NEWLINE):
                newlines += 1
                continue
            if self._is_at_end():
                break

            blank_lines = max(0, newlines - 1) if items else 0
            newlines = 0
            items.append(self._parse_item(blank_lines))

            if not self._check(TokenType.NEWLINE, TokenType.EOF):
                raise self._error("Expected end of line after pattern")

        return PatternDocument(items=tuple(items), span=Span(0, self.tokens[-1].end))

    def _parse_item(self, blank_lines: int) -> DocumentItem:
        token = self._current
        if self._match(TokenType.COMMENT):
            return CommentItem(text=token.value, span=token.span, blank_lines_before=blank_lines)

        pattern = self._parse_pattern()
        comment: Optional[str] = None
        if self._check(TokenType.COMMENT):
            comment = self._advance().value

        return PatternItem(
            pattern=pattern,
            span=pattern.span,
            blank_lines_before=blank_lines,
            trailing_comment=comment,
        )

    # -------------------------------------------------------------------------
    # Patterns
    # -------------------------------------------------------------------------

    def _parse_pattern(self) -> Pattern:
        """
        Parse a pattern, including a trailing inclusive range.

        Handles:
            - Wildcard: _
            - Bindings: x, ref x, mut x, ref mut x, x @ pattern
            - References and boxes: &x, &mut x, box x
            - Tuples: (), (x,), (x, y)
            - Slices: [a, b], [first, rest.., last], [.., last]
            - Paths: Foo::Bar, Some(x), None(..), <T as Trait>::C
            - Structs: Point { x, y: 0, .. }
            - Literals and ranges: 0, -1, "s", 'a'...'z', 0..=9
            - Macro invocations: m!(...), m![...], m!{...}
        """
        start = self._current
        pattern = self._parse_primary_pattern()

        if self._check(TokenType.ELLIPSIS, TokenType.DOT_DOT_EQ):
            low = self._range_end_from_pattern(pattern)
            if low is None:
                raise self._error("Range patterns require literal or path bounds")
            self._advance()
            self._skip_newlines()
            high = self._parse_range_end()
            return RangePattern(low=low, high=high, span=self._span_from(start))

        return pattern

    def _parse_primary_pattern(self) -> Pattern:
        """Parse every pattern form except ranges."""
        start = self._current

        if self._match(TokenType.UNDERSCORE):
            return WildcardPattern(span=start.span)

        if self._match(TokenType.AMPERSAND):
            mutable = self._match(TokenType.MUT)
            inner = self._parse_pattern()
            return ReferencePattern(inner=inner, mutable=mutable, span=self._span_from(start))

        if self._match(TokenType.BOX):
            inner = self._parse_pattern()
            return BoxPattern(inner=inner, span=self._span_from(start))

        if self._check(TokenType.REF, TokenType.MUT):
            by_reference = self._match(TokenType.REF)
            mutable = self._match(TokenType.MUT)
            name = self._expect(TokenType.IDENTIFIER, "Expected binding name").value
            return self._finish_binding(name, by_reference, mutable, start)

        if self._match(TokenType.LPAREN):
            return self._parse_tuple_pattern(start)

        if self._match(TokenType.LBRACKET):
            return self._parse_slice_pattern(start)

        if self._current.is_literal or self._check(TokenType.MINUS):
            value = self._parse_literal_expression()
            return LiteralPattern(value=value, span=self._span_from(start))

        if self._check(TokenType.LT):
            qself, path = self._parse_qualified_path(type_context=False)
            return QualifiedPathPattern(path=path, qself=qself, span=self._span_from(start))

        if self._check(TokenType.IDENTIFIER, TokenType.DOUBLE_COLON):
            return self._parse_path_pattern(start)

        if self._check(TokenType.DOT_DOT):
            raise self._error(
                "'..' is only allowed as `Path(..)`, a slice rest or the last struct field"
            )

        if self._check(TokenType.COMMENT):
            raise self._error("Comments are only supported on their own line or after a pattern")

        raise self._error("Expected pattern")

    def _finish_binding(self, name: str, by_reference: bool, mutable: bool,
                        start: Token) -> BindingPattern:
        """Parse the optional ``@ pattern`` that follows a binding name."""
        sub_pattern: Optional[Pattern] = None
        if self._match(TokenType.AT):
            sub_pattern = self._parse_pattern()
        return BindingPattern(
            name=name,
            by_reference=by_reference,
            mutable=mutable,
            sub_pattern=sub_pattern,
            span=self._span_from(start),
        )

    def _parse_path_pattern(self, start: Token) -> Pattern:
        """Parse a binding, constructor, struct or macro pattern that starts with a path."""
        if self._check(TokenType.IDENTIFIER) and self._peek().type not in (
            TokenType.DOUBLE_COLON,
            TokenType.LPAREN,
            TokenType.LBRACE,
            TokenType.BANG,
        ):
            name = self._advance().value
            return self._finish_binding(name, False, False, start)

        path = self._parse_path(type_context=False)

        if self._match(TokenType.BANG):
            self._skip_token_tree()
            return OpaquePattern(span=self._span_from(start))

        if self._match(TokenType.LPAREN):
            args: Optional[tuple[Pattern, ...]]
            if self._check(TokenType.DOT_DOT) and self._peek().type == TokenType.RPAREN:
                self._advance()
                self._advance()
                args = None
            else:
                args = tuple(self._parse_comma_list(TokenType.RPAREN, self._parse_pattern))
            return ConstructorPattern(path=path, args=args, span=self._span_from(start))

        if self._match(TokenType.LBRACE):
            return self._parse_struct_pattern(path, start)

        return ConstructorPattern(path=path, args=(), span=self._span_from(start))

    def _parse_tuple_pattern(self, start: Token) -> Pattern:
        """
        Parse a parenthesised pattern; the '(' is already consumed.

        Handles:
            ()              -> empty tuple pattern
            (pattern)       -> grouped pattern (not a tuple)
            (pattern,)      -> single-element tuple pattern
            (p1, p2, ...)   -> multi-element tuple pattern
        """
        if self._match(TokenType.RPAREN):
            return TuplePattern(elements=(), span=self._span_from(start))

        first = self._parse_pattern()
        if self._match(TokenType.RPAREN):
            return first

        self._expect(TokenType.COMMA, "Expected ',' or ')' in tuple pattern")
        elements = [first] + self._parse_comma_list(TokenType.RPAREN, self._parse_pattern)
        return TuplePattern(elements=tuple(elements), span=self._span_from(start))

    def _parse_slice_pattern(self, start: Token) -> Pattern:
        """
        Parse a slice pattern; the '[' is already consumed.

        Handles:
            []                  -> empty slice
            [a, b, c]           -> exact elements
            [first, rest..]     -> named rest
            [first, .., last]   -> anonymous rest (kept as `_..`)
        """
        prefix: list[Pattern] = []
        suffix: list[Pattern] = []
        rest: Optional[Pattern] = None

        while not self._check(TokenType.RBRACKET):
            element_start = self._current
            if self._match(TokenType.DOT_DOT):
                element: Pattern = WildcardPattern(span=element_start.span)
                is_rest = True
            else:
                element = self._parse_pattern()
                is_rest = self._match(TokenType.DOT_DOT)

            if is_rest:
                if rest is not None:
                    raise self._error("Only one rest pattern is allowed in a slice pattern")
                rest = element
            elif rest is not None:
                suffix.append(element)
            else:
                prefix.append(element)

            if not self._match(TokenType.COMMA):
                break

        self._expect(TokenType.RBRACKET, "Expected ']' after slice pattern")
        return SlicePattern(
            prefix=tuple(prefix),
            rest=rest,
            suffix=tuple(suffix),
            span=self._span_from(start),
        )

    def _parse_struct_pattern(self, path: Path, start: Token) -> StructPattern:
        """Parse the fields of a struct pattern; the '{' is already consumed."""
        fields: list[FieldPattern] = []
        has_rest = False

        while not self._check(TokenType.RBRACE):
            if self._match(TokenType.DOT_DOT):
                has_rest = True
                self._match(TokenType.COMMA)
                break
            fields.append(self._parse_field_pattern())
            if not self._match(TokenType.COMMA):
                break

        message = "'..' must be the last field" if has_rest else "Expected '}' after struct fields"
        self._expect(TokenType.RBRACE, message)
        return StructPattern(
            path=path, fields=tuple(fields), has_rest=has_rest, span=self._span_from(start)
        )

    def _parse_field_pattern(self) -> FieldPattern:
        """
        Parse one struct field.

        Handles:
            x, ref x, mut x, ref mut x, box x   -> shorthand bindings
            x: pattern, 0: pattern              -> explicit field patterns
        """
        start = self._current

        if self._check(TokenType.IDENTIFIER, TokenType.INTEGER) and (
            self._peek().type == TokenType.COLON
        ):
            name = self._advance().value
            self._advance()  # :
            pattern = self._parse_pattern()
            return FieldPattern(
                field_name=name, pattern=pattern, is_shorthand=False, span=self._span_from(start)
            )

        boxed = self._match(TokenType.BOX)
        binding_start = self._current
        by_reference = self._match(TokenType.REF)
        mutable = self._match(TokenType.MUT)
        name = self._expect(TokenType.IDENTIFIER, "Expected field pattern").value

        pattern: Pattern = BindingPattern(
            name=name,
            by_reference=by_reference,
            mutable=mutable,
            span=self._span_from(binding_start),
        )
        if boxed:
            pattern = BoxPattern(inner=pattern, span=self._span_from(start))

        return FieldPattern(
            field_name=name, pattern=pattern, is_shorthand=True, span=self._span_from(start)
        )

    def _parse_comma_list(self, closing: TokenType, parse_item: Callable[[], T]) -> list[T]:
        """Parse comma-separated items up to and including ``closing``."""
        items: list[T] = []

        while not self._check(closing):
            items.append(parse_item())
            if not self._match(TokenType.COMMA):
                break

        self._expect(closing, f"Expected '{DELIMITER_TEXT[closing]}'")
        return items

    def _skip_token_tree(self) -> None:
        """Consume a balanced delimited token tree (a macro body)."""
        if not self._check(*OPENING_DELIMITERS):
            raise self._error("Expected '(', '[' or '{' after '!'")

        expected = [MATCHING_DELIMITER[self._advance().type]]
        while expected:
            token = self._current
            if token.type == TokenType.EOF:
                raise self._error(f"Unclosed macro body, expected '{DELIMITER_TEXT[expected[-1]]}'")
            if token.type in OPENING_DELIMITERS:
                expected.append(MATCHING_DELIMITER[token.type])
            elif token.type in CLOSING_DELIMITERS:
                if token.type != expected[-1]:
                    raise self._error(f"Mismatched delimiter, expected '{DELIMITER_TEXT[expected[-1]]}'")
                expected.pop()
            self._advance()

    # -------------------------------------------------------------------------
    # Expressions (literals and range bounds)
    # -------------------------------------------------------------------------

    def _parse_literal_expression(self) -> Expression:
        """Parse a literal, possibly negated: ``1``, ``-1``, ``"s"``, ``true``."""
        start = self._current

        if self._match(TokenType.MINUS):
            if not self._check(TokenType.INTEGER, TokenType.FLOAT):
                raise self._error("Expected a number after '-'")
            operand = self._parse_literal_expression()
            return NegatedExpression(operand=operand, span=self._span_from(start))

        if not self._current.is_literal:
            raise self._error("Expected literal")

        token = self._advance()
        return Literal(kind=LITERAL_KINDS[token.type], text=token.value, span=token.span)

    def _parse_range_end(self) -> Expression:
        """Parse the upper bound of a range: a literal or a path."""
        start = self._current

        if self._current.is_literal or self._check(TokenType.MINUS):
            return self._parse_literal_expression()

        if self._check(TokenType.LT):
            qself, path = self._parse_qualified_path(type_context=False)
            return PathExpression(path=path, qself=qself, span=self._span_from(start))

        if self._check(TokenType.IDENTIFIER, TokenType.DOUBLE_COLON):
            path = self._parse_path(type_context=False)
            return PathExpression(path=path, span=self._span_from(start))

        raise self._error("Expected range end")

    def _range_end_from_pattern(self, pattern: Pattern) -> Optional[Expression]:
        """Reinterpret an already parsed pattern as the lower bound of a range."""
        if isinstance(pattern, LiteralPattern):
            return pattern.value
        if isinstance(pattern, BindingPattern):
            if pattern.by_reference or pattern.mutable or pattern.sub_pattern is not None:
                return None
            path = Path(
                segments=(PathSegment(pattern.name, span=pattern.span),), span=pattern.span
            )
            return PathExpression(path=path, span=pattern.span)
        if isinstance(pattern, ConstructorPattern) and pattern.args == ():
            return PathExpression(path=pattern.path, span=pattern.span)
        if isinstance(pattern, QualifiedPathPattern):
            return PathExpression(path=pattern.path, qself=pattern.qself, span=pattern.span)
        return None

    # -------------------------------------------------------------------------
    # Paths and Types
    # -------------------------------------------------------------------------

    def _parse_path(self, type_context: bool) -> Path:
        """
        Parse a path such as ``a::b::C`` or ``::std::Vec::<u8>``.

        In type context generic arguments may also follow a segment
        directly (``Vec<u8>``); in patterns they need the ``::<`` form.
        """
        start = self._current
        is_global = self._match(TokenType.DOUBLE_COLON)
        segments = [self._parse_path_segment(type_context)]

        while self._check(TokenType.DOUBLE_COLON) and self._peek().type == TokenType.IDENTIFIER:
            self._advance()
            segments.append(self._parse_path_segment(type_context))

        return Path(segments=tuple(segments), is_global=is_global, span=self._span_from(start))

    def _parse_path_segment(self, type_context: bool) -> PathSegment:
        start = self._current
        name = self._expect(TokenType.IDENTIFIER, "Expected identifier in path").value
        generic_args: tuple[TypeRef, ...] = ()

        if self._check(TokenType.DOUBLE_COLON) and self._peek().type == TokenType.LT:
            self._advance()
            self._advance()
            generic_args = tuple(self._parse_comma_list(TokenType.GT, self._parse_type))
        elif type_context and self._match(TokenType.LT):
            generic_args = tuple(self._parse_comma_list(TokenType.GT, self._parse_type))

        return PathSegment(name=name, generic_args=generic_args, span=self._span_from(start))

    def _parse_qualified_path(self, type_context: bool) -> tuple[QualifiedSelf, Path]:
        """
        Parse ``<T>::a::b`` or ``<T as Trait>::a::b``.

        The returned path starts with the trait's segments, and the
        qualifier's ``position`` says how many of them there are.
        """
        start = self._current
        self._expect(TokenType.LT, "Expected '<'")
        ty = self._parse_type()

        trait_path: Optional[Path] = None
        if self._match(TokenType.AS):
            trait_path = self._parse_path(type_context=True)

        self._expect(TokenType.GT, "Expected '>' after qualified type")
        self._expect(TokenType.DOUBLE_COLON, "Expected '::' after qualified type")

        tail = [self._parse_path_segment(type_context)]
        while self._check(TokenType.DOUBLE_COLON) and self._peek().type == TokenType.IDENTIFIER:
            self._advance()
            tail.append(self._parse_path_segment(type_context))

        if trait_path is None:
            path = Path(segments=tuple(tail), span=self._span_from(start))
            return QualifiedSelf(ty=ty, position=0), path

        path = Path(
            segments=trait_path.segments + tuple(tail),
            is_global=trait_path.is_global,
            span=self._span_from(start),
        )
        return QualifiedSelf(ty=ty, position=len(trait_path.segments)), path

    def _parse_type(self) -> TypeRef:
        """
        Parse a type reference.

        Handles:
            u8, Vec<T>, ::a::B, <T as Trait>::Out   -> path types
            &T, &mut T, &'a T                       -> reference types
            (), (T,), (A, B)                        -> tuple types
            _, 'a                                   -> inferred type, lifetime
        """
        start = self._current

        if self._match(TokenType.AMPERSAND):
            lifetime: Optional[str] = None
            if self._check(TokenType.LIFETIME):
                lifetime = self._advance().value
            mutable = self._match(TokenType.MUT)
            inner = self._parse_type()
            return ReferenceType(
                inner=inner, mutable=mutable, lifetime=lifetime, span=self._span_from(start)
            )

        if self._match(TokenType.LPAREN):
            if self._match(TokenType.RPAREN):
                return TupleType(elements=(), span=self._span_from(start))
            first = self._parse_type()
            if self._match(TokenType.RPAREN):
                return first
            self._expect(TokenType.COMMA, "Expected ',' or ')' in tuple type")
            elements = [first] + self._parse_comma_list(TokenType.RPAREN, self._parse_type)
            return TupleType(elements=tuple(elements), span=self._span_from(start))

        if self._match(TokenType.UNDERSCORE):
            return InferType(span=start.span)

        if self._check(TokenType.LIFETIME):
            return LifetimeArg(name=self._advance().value, span=start.span)

        if self._check(TokenType.LT):
            qself, path = self._parse_qualified_path(type_context=True)
            return PathType(path=path, qself=qself, span=self._span_from(start))

        if self._check(TokenType.IDENTIFIER, TokenType.DOUBLE_COLON):
            return PathType(path=self._parse_path(type_context=True), span=self._span_from(start))

        raise self._error("Expected type")


def parse(tokens: list[Token], source: str = "", filename: str = "<input>") -> PatternDocument:
    """
    Convenience function to parse a token stream.

    Args:
        tokens: List of tokens from the lexer
        source: Optional source text for error messages
        filename: Optional filename for error reporting

    Returns:
        The parsed document
    """
    return Parser(tokens, source, filename).parse()


def parse_document(source: str, filename: Optional[str] = None) -> PatternDocument:
    """Tokenize and parse a pattern document."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source, filename or "<input>").parse()


def parse_pattern(source: str) -> Pattern:
    """
    Parse source text that holds exactly one pattern.

    Raises:
        ParserError: If the text holds no pattern or more than one item
    """
    document = parse_document(source)
    patterns = [item for item in document.items if isinstance(item, PatternItem)]
    if len(document.items) != 1 or len(patterns) != 1:
        raise ParserError(f"Expected exactly one pattern, found {len(document.items)} items")
    return patterns[0].pattern
