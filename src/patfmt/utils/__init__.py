"""
patfmt utilities package.

Error types and source locations shared by the front-end and the tools.
"""

from patfmt.utils.errors import (
    LexerError,
    ParserError,
    PatfmtError,
    SourceLocation,
)

__all__ = [
    "PatfmtError",
    "LexerError",
    "ParserError",
    "SourceLocation",
]
