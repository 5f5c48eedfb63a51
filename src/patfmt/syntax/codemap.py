"""
Source spans and the source-text accessor.

The code map owns the original document text and hands back verbatim
snippets for spans, which is how opaque patterns and unformattable items
are written out unchanged.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional

from patfmt.utils.errors import SourceLocation


@dataclass(frozen=True, slots=True)
class Span:
    """
    A half-open range of character offsets into the source.

    Attributes:
        lo: Offset of the first character
        hi: Offset one past the last character
    """

    lo: int = 0
    hi: int = 0

    def __post_init__(self) -> None:
        if self.lo < 0 or self.hi < self.lo:
            raise ValueError(f"invalid span: {self.lo}..{self.hi}")

    def __str__(self) -> str:
        return f"{self.lo}..{self.hi}"


DUMMY_SPAN = Span(0, 0)


class CodeMap:
    """
    Read-only view of a document's source text.

    Usage:
        codemap = CodeMap(source, "input.pat")
        text = codemap.snippet(span)
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        self.source = source
        self.filename = filename
        self._line_starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    def snippet(self, span: Span) -> str:
        """Return the original text covered by ``span``."""
        if span.hi > len(self.source):
            raise IndexError(f"span {span} is outside of the source ({len(self.source)} chars)")
        return self.source[span.lo:span.hi]

    def lookup(self, offset: int) -> SourceLocation:
        """Translate a character offset into a 1-indexed line/column location."""
        offset = max(0, min(offset, len(self.source)))
        line_index = bisect_right(self._line_starts, offset) - 1
        return SourceLocation(
            line=line_index + 1,
            column=offset - self._line_starts[line_index] + 1,
            offset=offset,
            filename=self.filename,
        )

    def offset(self, line: int, column: int) -> int:
        """Translate a 1-indexed line/column into a character offset, clamped to the source."""
        if line > len(self._line_starts):
            return len(self.source)
        start = self._line_starts[max(1, line) - 1]
        return min(start + max(1, column) - 1, len(self.source))
