"""
patfmt - a width-aware formatter for Rust-style patterns.

patfmt rewrites patterns such as ``Some(ref mut x)``, ``Point { x, .. }``
or ``[first, rest.., last]`` into a canonical layout that respects a
maximum line width, and keeps anything it cannot fit exactly as written.
"""

from patfmt.config import FormatConfig, ListTactic
from patfmt.formatter import (
    FormatResult,
    PatternFormatter,
    check_format,
    format_file,
    format_source,
    get_diff,
)
from patfmt.syntax.parser import parse_document, parse_pattern

__version__ = "0.1.0"
__all__ = [
    "FormatConfig",
    "ListTactic",
    "FormatResult",
    "PatternFormatter",
    "format_source",
    "format_file",
    "check_format",
    "get_diff",
    "parse_document",
    "parse_pattern",
]
