"""
Budget and indentation arithmetic.

Every renderer receives a ``Budget``: the columns still available on the
current line plus the ``Indent`` used for any continuation line it starts.
Budgets are immutable; narrowing one always yields a new value, and
narrowing past zero yields ``None`` (no fit) instead of a negative width.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from patfmt.config import FormatConfig


def checked_sub(width: int, columns: int) -> Optional[int]:
    """Subtract ``columns`` from ``width``, or return None if that would go negative."""
    if columns > width:
        return None
    return width - columns


@dataclass(frozen=True, slots=True)
class Indent:
    """
    Indentation of a continuation line.

    ``block_indent`` is the indentation of the enclosing block (rendered
    with tabs when ``hard_tabs`` is set); ``alignment`` is the extra visual
    alignment after it (always spaces).
    """

    block_indent: int = 0
    alignment: int = 0

    def __post_init__(self) -> None:
        if self.block_indent < 0 or self.alignment < 0:
            raise ValueError(f"negative indent: {self.block_indent}+{self.alignment}")

    def __add__(self, columns: int) -> Indent:
        return self.add_columns(columns)

    def add_columns(self, columns: int) -> Indent:
        """Return the indent ``columns`` further to the right."""
        return Indent(self.block_indent, self.alignment + columns)

    def width(self) -> int:
        return self.block_indent + self.alignment

    def to_string(self, config: FormatConfig) -> str:
        """Render the whitespace that starts a continuation line."""
        if config.hard_tabs:
            tabs, spaces = divmod(self.block_indent, config.tab_spaces)
            return "\t" * tabs + " " * (spaces + self.alignment)
        return " " * self.width()


NO_INDENT = Indent()


@dataclass(frozen=True, slots=True)
class Budget:
    """
    The horizontal space a renderer may use.

    Attributes:
        width: Columns remaining on the current line
        offset: Indentation for continuation lines
    """

    width: int
    offset: Indent = NO_INDENT

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"negative width: {self.width}")

    def shrink(self, columns: int) -> Optional[Budget]:
        """Reserve ``columns`` on the current line; None if they are not available."""
        width = checked_sub(self.width, columns)
        if width is None:
            return None
        return Budget(width, self.offset)

    def shift(self, columns: int) -> Budget:
        """Move continuation lines ``columns`` to the right."""
        return Budget(self.width, self.offset + columns)

    def narrow(self, columns: int) -> Optional[Budget]:
        """Reserve ``columns`` and start continuation lines after them."""
        shrunk = self.shrink(columns)
        if shrunk is None:
            return None
        return shrunk.shift(columns)

    def with_width(self, width: int) -> Budget:
        return Budget(width, self.offset)
