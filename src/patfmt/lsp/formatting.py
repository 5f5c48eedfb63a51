"""
Document formatting for the patfmt LSP.

Wraps the patfmt formatter to produce LSP text edits for whole-document
and range formatting.
"""

from lsprotocol import types

from patfmt.config import FormatConfig
from patfmt.formatter import PatternFormatter, format_source
from patfmt.syntax.ast_nodes import PatternItem
from patfmt.syntax.codemap import CodeMap, Span
from patfmt.syntax.parser import parse_document
from patfmt.utils.errors import PatfmtError


def _position(codemap: CodeMap, offset: int) -> types.Position:
    location = codemap.lookup(offset)
    return types.Position(line=location.line - 1, character=location.column - 1)


def _span_range(codemap: CodeMap, span: Span) -> types.Range:
    return types.Range(start=_position(codemap, span.lo), end=_position(codemap, span.hi))


class LSPFormatter:
    """
    Provides formatting for the patfmt LSP server.

    Source that cannot be parsed produces no edits; the parse error is
    reported through diagnostics instead.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        """
        Initialize the formatter.

        Args:
            config: Optional formatting configuration
        """
        self.config = config or FormatConfig()
        self._formatter = PatternFormatter(self.config)

    def format_document(self, source: str) -> list[types.TextEdit]:
        """
        Format an entire document.

        Args:
            source: The pattern document to format

        Returns:
            A single edit replacing the whole document, or no edits if
            nothing changes
        """
        try:
            formatted = format_source(source, self.config)
        except PatfmtError:
            return []

        if source == formatted:
            return []

        codemap = CodeMap(source)
        return [
            types.TextEdit(
                range=_span_range(codemap, Span(0, len(source))),
                new_text=formatted,
            )
        ]

    def format_range(
        self,
        source: str,
        start_line: int,
        start_char: int,
        end_line: int,
        end_char: int,
    ) -> list[types.TextEdit]:
        """
        Format the patterns that overlap a range.

        Args:
            source: The pattern document
            start_line: 0-indexed start line
            start_char: 0-indexed start character
            end_line: 0-indexed end line
            end_char: 0-indexed end character

        Returns:
            One edit per pattern whose formatted text differs from the source
        """
        try:
            document = parse_document(source)
        except PatfmtError:
            return []

        codemap = CodeMap(source)
        range_lo = codemap.offset(start_line + 1, start_char + 1)
        range_hi = codemap.offset(end_line + 1, end_char + 1)

        edits: list[types.TextEdit] = []
        for item in document.items:
            if not isinstance(item, PatternItem):
                continue
            if item.span.hi < range_lo or item.span.lo > range_hi:
                continue

            formatted = self._formatter.format_pattern(item.pattern, codemap)
            if formatted is None or formatted == codemap.snippet(item.span):
                continue

            edits.append(types.TextEdit(range=_span_range(codemap, item.span), new_text=formatted))

        return edits


def format_document(source: str, config: FormatConfig | None = None) -> list[types.TextEdit]:
    """
    Convenience function to format a document.

    Args:
        source: The pattern document
        config: Optional formatting configuration

    Returns:
        List of text edits
    """
    return LSPFormatter(config).format_document(source)


def format_range(
    source: str,
    start_line: int,
    start_char: int,
    end_line: int,
    end_char: int,
    config: FormatConfig | None = None,
) -> list[types.TextEdit]:
    """
    Convenience function to format a range.

    Args:
        source: The pattern document
        start_line: 0-indexed start line
        start_char: 0-indexed start character
        end_line: 0-indexed end line
        end_char: 0-indexed end character
        config: Optional formatting configuration

    Returns:
        List of text edits
    """
    return LSPFormatter(config).format_range(source, start_line, start_char, end_line, end_char)
