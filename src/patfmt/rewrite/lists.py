"""
List layout engine.

Turns an ordered sequence of items into ``a, b, c`` when that fits on the
current line, and otherwise into one item per line:

    a,
    b,
    c

Continuation lines start at the budget's offset. There is never a
trailing separator.
"""

from typing import Callable, Optional, Sequence, TypeVar

from patfmt.config import ListTactic
from patfmt.rewrite.context import ListLayout, RewriteContext
from patfmt.rewrite.indent import Budget
from patfmt.rewrite.utils import last_line_width

T = TypeVar("T")

SEPARATOR = ", "


class ListFormatter(ListLayout):
    """Default ``ListLayout`` driven by ``FormatConfig.list_tactic``."""

    def __init__(self, context: RewriteContext) -> None:
        self.context = context

    def layout(
        self,
        items: Sequence[T],
        terminator: str,
        budget: Budget,
        rewrite_item: Callable[[T], Optional[str]],
    ) -> Optional[str]:
        rendered: list[str] = []
        for item in items:
            text = rewrite_item(item)
            if text is None:
                return None
            rendered.append(text)

        return self.format_item_list(rendered, terminator, budget)

    def format_item_list(
        self, rendered: Sequence[str], terminator: str, budget: Budget
    ) -> Optional[str]:
        """Join already rendered items using the tactic that fits."""
        if not rendered:
            return ""

        tactic = self.definitive_tactic(rendered, budget.width)
        if tactic == ListTactic.HORIZONTAL:
            return SEPARATOR.join(rendered)

        separator = ",\n" + budget.offset.to_string(self.context.config)
        last = rendered[-1]
        if "\n" in last:
            last_width = last_line_width(last)
        else:
            last_width = budget.offset.width() + len(last)
        if last_width + len(terminator) > budget.offset.width() + budget.width:
            return None

        return separator.join(rendered)

    def definitive_tactic(self, rendered: Sequence[str], width: int) -> ListTactic:
        """Pick HORIZONTAL or VERTICAL for items that are already rendered."""
        if len(rendered) > 1 and self.context.config.list_tactic == ListTactic.VERTICAL:
            return ListTactic.VERTICAL

        if any("\n" in text for text in rendered):
            return ListTactic.VERTICAL

        total = sum(len(text) for text in rendered) + len(SEPARATOR) * (len(rendered) - 1)
        if total <= width:
            return ListTactic.HORIZONTAL
        return ListTactic.VERTICAL
