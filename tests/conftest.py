"""
Pytest configuration and shared fixtures for patfmt tests.
"""

import pytest

from patfmt.config import FormatConfig
from patfmt.rewrite.context import RewriteContext
from patfmt.rewrite.indent import Budget, Indent
from patfmt.rewrite.patterns import PatternRewriter
from patfmt.syntax.ast_nodes import Pattern, PatternDocument
from patfmt.syntax.lexer import Lexer
from patfmt.syntax.parser import Parser
from patfmt.syntax.tokens import Token


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str, filename: str = "test.pat") -> Lexer:
        return Lexer(source, filename)

    return _create_lexer


@pytest.fixture
def parser_factory(lexer_factory):
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str) -> Parser:
        tokens = lexer_factory(source).tokenize()
        return Parser(tokens, source, "test.pat")

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source text."""

    def _tokenize(source: str) -> list[Token]:
        return lexer_factory(source).tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source text into a document."""

    def _parse(source: str) -> PatternDocument:
        return parser_factory(source).parse()

    return _parse


@pytest.fixture
def parse_one(parse):
    """Fixture to parse source text holding a single pattern."""

    def _parse_one(source: str) -> Pattern:
        document = parse(source)
        assert len(document.items) == 1
        return document.items[0].pattern

    return _parse_one


@pytest.fixture
def context():
    """Rewrite context over an empty source with the default configuration."""
    return RewriteContext.for_source("")


@pytest.fixture
def render():
    """
    Fixture that renders a pattern with the default collaborators.

    The source text is only needed for patterns rendered verbatim.
    """

    def _render(
        pattern: Pattern,
        width: int = 100,
        offset: Indent = Indent(),
        source: str = "",
        config: FormatConfig | None = None,
    ):
        ctx = RewriteContext.for_source(source, config)
        return PatternRewriter(ctx).rewrite(pattern, Budget(width, offset))

    return _render


@pytest.fixture
def reformat(parse_one, render):
    """Fixture that parses one pattern and renders it."""

    def _reformat(source: str, width: int = 100, config: FormatConfig | None = None):
        return render(parse_one(source), width=width, source=source, config=config)

    return _reformat
