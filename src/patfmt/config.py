"""
Formatting configuration for patfmt.

A single read-only ``FormatConfig`` is shared by every renderer for the
duration of a formatting run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ListTactic(Enum):
    """How the list layout engine arranges comma-separated items."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    HORIZONTAL_VERTICAL = "horizontal_vertical"


# Tactics a user may select; HORIZONTAL is only ever chosen by the engine.
CONFIGURABLE_LIST_TACTICS = (ListTactic.HORIZONTAL_VERTICAL, ListTactic.VERTICAL)


@dataclass(frozen=True)
class FormatConfig:
    """Configuration for the pattern formatter."""

    max_width: int = 100
    tab_spaces: int = 4
    hard_tabs: bool = False
    trailing_newline: bool = True
    max_blank_lines: int = 1
    list_tactic: ListTactic = ListTactic.HORIZONTAL_VERTICAL

    def __post_init__(self) -> None:
        if self.max_width <= 0:
            raise ValueError(f"max_width must be positive, got {self.max_width}")
        if self.tab_spaces <= 0:
            raise ValueError(f"tab_spaces must be positive, got {self.tab_spaces}")
        if self.max_blank_lines < 0:
            raise ValueError(f"max_blank_lines must not be negative, got {self.max_blank_lines}")
        if self.list_tactic not in CONFIGURABLE_LIST_TACTICS:
            raise ValueError(f"unsupported list tactic: {self.list_tactic.value}")
