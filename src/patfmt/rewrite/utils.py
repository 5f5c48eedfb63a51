"""
Small text helpers shared by the renderers.
"""

from typing import Optional

from patfmt.rewrite.indent import Indent, checked_sub


def format_mutability(mutable: bool) -> str:
    return "mut " if mutable else ""


def first_line_width(text: str) -> int:
    index = text.find("\n")
    return len(text) if index == -1 else index


def last_line_width(text: str) -> int:
    return len(text) - (text.rfind("\n") + 1)


def extra_offset(text: str, offset: Indent) -> int:
    """
    Columns ``text`` occupies after ``offset`` on its last line.

    For single-line text this is its length; for multi-line text the last
    line already starts with the continuation indent, which is not counted.
    """
    index = text.rfind("\n")
    if index == -1:
        return len(text)
    return max(0, len(text) - (index + 1 + offset.width()))


def wrap_str(text: str, max_width: int, width: int, offset: Indent) -> Optional[str]:
    """
    Return ``text`` if it fits the given limits, otherwise None.

    The text is never reflowed. Single-line text must fit ``width``. The
    first line must also fit in what is left of the line after ``offset``,
    every other line must fit ``max_width``, and the last line must leave
    the caller ``width`` columns past the offset.
    """
    if "\n" not in text and len(text) > width:
        return None

    lines = text.split("\n")
    first_line_max = checked_sub(max_width, offset.width())
    if first_line_max is None or first_line_width(text) > first_line_max:
        return None
    if any(len(line) > max_width for line in lines[1:]):
        return None
    if len(lines[-1]) > offset.width() + width:
        return None
    return text
