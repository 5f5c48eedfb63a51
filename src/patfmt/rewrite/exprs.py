"""
Expression-level renderers: prefixed unary forms, binary pairs, tuples and
the literal/path expressions allowed inside patterns.
"""

import logging
from typing import Optional, Sequence, TypeVar

from patfmt.rewrite.context import (
    ExpressionRenderer,
    ListLayout,
    PairRenderer,
    PathRenderer,
    Rewrite,
    RewriteContext,
    TupleRenderer,
    UnaryPrefixRenderer,
)
from patfmt.rewrite.indent import Budget, checked_sub
from patfmt.rewrite.utils import last_line_width, wrap_str
from patfmt.syntax.ast_nodes import Expression, Literal, NegatedExpression, PathExpression
from patfmt.syntax.codemap import Span

logger = logging.getLogger("patfmt")

T = TypeVar("T")


class UnaryPrefixFormatter(UnaryPrefixRenderer):
    """``prefix + inner``, with the inner node placed right after the prefix."""

    def rewrite_prefix(
        self, prefix: str, inner: T, budget: Budget, rewrite: Rewrite[T]
    ) -> Optional[str]:
        inner_budget = budget.narrow(len(prefix))
        if inner_budget is None:
            return None
        result = rewrite(inner, inner_budget)
        if result is None:
            return None
        return prefix + result


class PairFormatter(PairRenderer):
    """
    Renders two operands around an infix.

    The single-line form is tried first. When it does not fit, the line is
    broken after the infix and the right operand starts a new line at the
    budget's offset, where it may use the full ``max_width``.
    """

    def __init__(self, context: RewriteContext) -> None:
        self.context = context

    def rewrite_pair(
        self,
        lhs: T,
        rhs: T,
        prefix: str,
        infix: str,
        suffix: str,
        budget: Budget,
        rewrite: Rewrite[T],
    ) -> Optional[str]:
        lhs_width = checked_sub(budget.width, len(prefix) + len(infix))
        rhs_width = checked_sub(budget.width, len(suffix))
        if lhs_width is None or rhs_width is None:
            return None

        single_line = self._rewrite_single_line(
            lhs, rhs, prefix, infix, suffix, budget, lhs_width, rhs_width, rewrite
        )
        if single_line is not None:
            return single_line

        # Break after the infix; the right operand gets a fresh line.
        lhs_result = rewrite(lhs, budget.with_width(lhs_width))
        if lhs_result is None:
            return None

        offset = budget.offset
        rhs_width = checked_sub(
            self.context.config.max_width, offset.width() + len(suffix)
        )
        if rhs_width is None:
            return None
        rhs_result = rewrite(rhs, Budget(rhs_width, offset))
        if rhs_result is None:
            return None

        return (
            f"{prefix}{lhs_result}{infix}\n"
            f"{offset.to_string(self.context.config)}{rhs_result}{suffix}"
        )

    def _rewrite_single_line(
        self,
        lhs: T,
        rhs: T,
        prefix: str,
        infix: str,
        suffix: str,
        budget: Budget,
        lhs_width: int,
        rhs_width: int,
        rewrite: Rewrite[T],
    ) -> Optional[str]:
        rhs_result = rewrite(rhs, budget.with_width(rhs_width))
        if rhs_result is None or "\n" in rhs_result:
            return None

        lhs_result = rewrite(lhs, budget.with_width(lhs_width))
        if lhs_result is None:
            return None

        result = prefix + lhs_result + infix
        remaining = max(0, budget.width - last_line_width(result))
        if len(rhs_result) + len(suffix) <= remaining:
            return result + rhs_result + suffix

        # The rhs may still fit if rendered into exactly the space left.
        narrow_width = checked_sub(remaining, len(suffix))
        if narrow_width is None:
            return None
        rhs_result = rewrite(rhs, Budget(narrow_width, budget.offset + len(result)))
        if rhs_result is None or len(rhs_result) > narrow_width:
            return None
        return result + rhs_result + suffix


class TupleFormatter(TupleRenderer):
    """
    Renders ``()``, ``(item,)`` and ``(a, b, ...)``.

    Items of a multi-element tuple are each allowed the rest of the line
    after the opening parenthesis; the list as a whole must fit inside the
    parentheses or fall back to one item per line.
    """

    def __init__(self, context: RewriteContext, lists: ListLayout) -> None:
        self.context = context
        self.lists = lists

    def rewrite_tuple(
        self, items: Sequence[T], span: Span, budget: Budget, rewrite: Rewrite[T]
    ) -> Optional[str]:
        indent = budget.offset + 1

        if len(items) == 1:
            # 3 = "(" + ",)"
            width = checked_sub(budget.width, 3)
            if width is None:
                return None
            result = rewrite(items[0], Budget(width, indent))
            return None if result is None else f"({result},)"

        item_width = checked_sub(self.context.config.max_width, indent.width() + 1)
        list_width = checked_sub(budget.width, 2)
        if item_width is None or list_width is None:
            logger.debug(f"Tuple at {span} has no room for its items")
            return None

        list_str = self.lists.layout(
            items,
            ")",
            Budget(list_width, indent),
            lambda item: rewrite(item, Budget(item_width, indent)),
        )
        if list_str is None:
            logger.debug(f"Tuple at {span} does not fit in {budget.width} columns")
            return None
        return f"({list_str})"


class ExpressionFormatter(ExpressionRenderer):
    """Renders literals, path constants and negated numbers."""

    def __init__(
        self, context: RewriteContext, paths: PathRenderer, unary: UnaryPrefixRenderer
    ) -> None:
        self.context = context
        self.paths = paths
        self.unary = unary

    def rewrite_expr(self, expr: Expression, budget: Budget) -> Optional[str]:
        if isinstance(expr, Literal):
            return wrap_str(
                expr.text, self.context.config.max_width, budget.width, budget.offset
            )
        if isinstance(expr, PathExpression):
            return self.paths.rewrite_path(expr.qself, expr.path, budget)
        if isinstance(expr, NegatedExpression):
            return self.unary.rewrite_prefix("-", expr.operand, budget, self.rewrite_expr)
        raise TypeError(f"Cannot rewrite expression of type {type(expr).__name__}")
