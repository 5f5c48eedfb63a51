"""
patfmt syntax package.

Lexer, parser and syntax tree for pattern documents.
"""

from patfmt.syntax.codemap import CodeMap, Span
from patfmt.syntax.lexer import Lexer, tokenize
from patfmt.syntax.parser import Parser, parse_document, parse_pattern

__all__ = [
    "CodeMap",
    "Span",
    "Lexer",
    "tokenize",
    "Parser",
    "parse_document",
    "parse_pattern",
]
