"""
Unit tests for the text helpers used by the renderers.
"""

from patfmt.rewrite.indent import Indent
from patfmt.rewrite.utils import (
    extra_offset,
    first_line_width,
    format_mutability,
    last_line_width,
    wrap_str,
)


class TestFormatMutability:
    """Tests for format_mutability."""

    def test_mutable(self):
        assert format_mutability(True) == "mut "

    def test_immutable(self):
        assert format_mutability(False) == ""


class TestLineWidths:
    """Tests for first/last line measurement."""

    def test_single_line(self):
        """Single-line text is measured whole."""
        assert first_line_width("abc") == 3
        assert last_line_width("abc") == 3

    def test_multi_line(self):
        """Multi-line text is measured per line."""
        assert first_line_width("ab\ncdef") == 2
        assert last_line_width("ab\ncdef") == 4


class TestExtraOffset:
    """Tests for extra_offset."""

    def test_single_line_is_length(self):
        """Single-line text uses all of its characters."""
        assert extra_offset("Foo::", Indent(0, 8)) == 5

    def test_multi_line_discounts_indent(self):
        """The last line's continuation indent is not counted."""
        assert extra_offset("(a,\n     bb", Indent(0, 4)) == 3

    def test_multi_line_never_negative(self):
        """A last line shorter than the indent counts as zero."""
        assert extra_offset("a\nb", Indent(0, 8)) == 0


class TestWrapStr:
    """Tests for the width-fit check."""

    def test_single_line_fits(self):
        assert wrap_str("abc", 100, 3, Indent()) == "abc"

    def test_single_line_too_long(self):
        assert wrap_str("abcd", 100, 3, Indent()) is None

    def test_first_line_must_fit_after_offset(self):
        """The first line is limited by what remains of max_width after the offset."""
        assert wrap_str("abcdef", 10, 8, Indent(0, 6)) is None

    def test_multi_line_last_line_limit(self):
        """The last line must end within offset + width."""
        text = "a,\n    bbbbbb"
        assert wrap_str(text, 100, 10, Indent(0, 4)) == text
        assert wrap_str(text, 100, 5, Indent(0, 4)) is None

    def test_multi_line_middle_lines_limit(self):
        """Lines after the first are limited by max_width."""
        text = "a,\n" + "b" * 12 + ",\nc"
        assert wrap_str(text, 10, 10, Indent()) is None

    def test_text_is_not_reflowed(self):
        """Fitting text is returned unchanged."""
        text = "m!(a,\n   b)"
        assert wrap_str(text, 100, 50, Indent()) is text
