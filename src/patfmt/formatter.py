"""
patfmt Document Formatter.

Formats pattern documents: every pattern is rewritten to its canonical
form within the configured line width, and any pattern that cannot be
made to fit is kept exactly as written.

Usage:
    patfmt fmt input.pat
    patfmt fmt --check .
    patfmt fmt --diff .
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from patfmt.config import FormatConfig
from patfmt.rewrite.context import RewriteContext
from patfmt.rewrite.indent import NO_INDENT, Budget, Indent
from patfmt.rewrite.patterns import PatternRewriter
from patfmt.syntax.ast_nodes import CommentItem, Pattern, PatternDocument
from patfmt.syntax.codemap import CodeMap, Span
from patfmt.syntax.parser import parse_document
from patfmt.utils.errors import PatfmtError

logger = logging.getLogger("patfmt")


@dataclass(frozen=True)
class FormatResult:
    """
    Output of formatting a document.

    Attributes:
        text: The formatted document
        unformatted: Spans of patterns that did not fit and were kept verbatim
    """

    text: str
    unformatted: tuple[Span, ...] = ()


# =============================================================================
# Pattern Formatter
# =============================================================================


class PatternFormatter:
    """
    Formats pattern trees and whole pattern documents.

    Items are laid out from column zero with the full ``max_width``.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        """Initialize the formatter with optional configuration."""
        self.config = config or FormatConfig()

    def format_pattern(
        self,
        pattern: Pattern,
        codemap: CodeMap,
        width: Optional[int] = None,
        offset: Indent = NO_INDENT,
    ) -> Optional[str]:
        """Render one pattern; None if it cannot fit ``width`` (default ``max_width``)."""
        context = RewriteContext(self.config, codemap)
        budget = Budget(self.config.max_width if width is None else width, offset)
        return PatternRewriter(context).rewrite(pattern, budget)

    def format_document(self, document: PatternDocument, codemap: CodeMap) -> FormatResult:
        """Format every item of ``document``."""
        rewriter = PatternRewriter(RewriteContext(self.config, codemap))
        budget = Budget(self.config.max_width)
        lines: list[str] = []
        unformatted: list[Span] = []

        for index, item in enumerate(document.items):
            if index > 0:
                blank_lines = min(item.blank_lines_before, self.config.max_blank_lines)
                lines.extend([""] * blank_lines)

            if isinstance(item, CommentItem):
                lines.append(item.text)
                continue

            text = rewriter.rewrite(item.pattern, budget)
            if text is None:
                location = codemap.lookup(item.span.lo)
                logger.debug(f"Pattern at {location} does not fit, keeping it as written")
                text = codemap.snippet(item.span)
                unformatted.append(item.span)

            if item.trailing_comment is not None:
                text += " " + item.trailing_comment
            lines.append(text)

        result = "\n".join(lines)
        if self.config.trailing_newline and result and not result.endswith("\n"):
            result += "\n"

        return FormatResult(result, tuple(unformatted))


# =============================================================================
# Public API
# =============================================================================


def format_source_report(
    source: str,
    config: FormatConfig | None = None,
    filename: Optional[str] = None,
) -> FormatResult:
    """
    Format a pattern document and report which patterns were kept as written.

    Raises:
        PatfmtError: If the source cannot be parsed
    """
    document = parse_document(source, filename)
    codemap = CodeMap(source, filename)
    return PatternFormatter(config).format_document(document, codemap)


def format_source(
    source: str,
    config: FormatConfig | None = None,
    filename: Optional[str] = None,
) -> str:
    """
    Format a pattern document.

    Args:
        source: The pattern document to format
        config: Optional formatting configuration
        filename: Optional filename for error messages

    Returns:
        The formatted document

    Raises:
        PatfmtError: If the source cannot be parsed
    """
    return format_source_report(source, config, filename).text


def format_file(
    filepath: str | Path,
    config: FormatConfig | None = None,
    in_place: bool = False,
) -> str:
    """
    Format a pattern file.

    Args:
        filepath: Path to the .pat file
        config: Optional formatting configuration
        in_place: If True, write the formatted output back to the file

    Returns:
        The formatted document

    Raises:
        FileNotFoundError: If the file does not exist
        PatfmtError: If the source cannot be parsed
    """
    path = Path(filepath)
    source = path.read_text(encoding="utf-8")

    formatted = format_source(source, config, str(path))

    if in_place and formatted != source:
        path.write_text(formatted, encoding="utf-8")

    return formatted


def check_format(
    source: str,
    config: FormatConfig | None = None,
) -> bool:
    """
    Check if a document is already formatted.

    Returns:
        True if formatting would not change the source, False otherwise
        (including when the source cannot be parsed)
    """
    try:
        return source == format_source(source, config)
    except PatfmtError:
        return False


def get_diff(
    source: str,
    config: FormatConfig | None = None,
    filename: str = "<input>",
) -> str:
    """
    Get a diff showing formatting changes.

    Args:
        source: The pattern document
        config: Optional formatting configuration
        filename: Filename for diff header

    Returns:
        A unified diff string, or empty string if no changes needed

    Raises:
        PatfmtError: If the source cannot be parsed
    """
    formatted = format_source(source, config, filename)

    if source == formatted:
        return ""

    diff = difflib.unified_diff(
        source.splitlines(keepends=True),
        formatted.splitlines(keepends=True),
        fromfile=f"a/{filename}",
        tofile=f"b/{filename}",
    )

    return "".join(diff)
