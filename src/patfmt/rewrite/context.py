"""
Rewrite context and collaborator interfaces.

The pattern dispatcher never lays out lists, paths, pairs, tuples or
expressions itself. It calls the renderers collected in ``Collaborators``,
each defined here as an abstract interface so that any of them can be
replaced (for example by a stub in tests).

Every renderer returns the rendered text, or None when nothing fits the
budget it was given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TypeVar

from patfmt.config import FormatConfig
from patfmt.rewrite.indent import Budget
from patfmt.syntax.ast_nodes import Expression, Path, QualifiedSelf, TypeRef
from patfmt.syntax.codemap import CodeMap, Span

T = TypeVar("T")

# Renders one node within a budget, or returns None if it does not fit.
Rewrite = Callable[[T, Budget], Optional[str]]


@dataclass(frozen=True)
class RewriteContext:
    """
    Read-only state shared by every renderer during a formatting run.

    Attributes:
        config: Formatting options
        codemap: Source text of the document being formatted
    """

    config: FormatConfig
    codemap: CodeMap

    @classmethod
    def for_source(cls, source: str, config: Optional[FormatConfig] = None,
                   filename: Optional[str] = None) -> RewriteContext:
        return cls(config or FormatConfig(), CodeMap(source, filename))

    def snippet(self, span: Span) -> str:
        return self.codemap.snippet(span)


class ListLayout(ABC):
    """Lays out comma-separated items on one line or one per line."""

    @abstractmethod
    def layout(
        self,
        items: Sequence[T],
        terminator: str,
        budget: Budget,
        rewrite_item: Callable[[T], Optional[str]],
    ) -> Optional[str]:
        """
        Render ``items`` with ``rewrite_item`` and join them.

        ``terminator`` is the text that will directly follow the last item
        (such as ``")"``). Continuation lines start at ``budget.offset``.
        """


class PathRenderer(ABC):
    """Renders paths (optionally qualified) and type references."""

    @abstractmethod
    def rewrite_path(
        self,
        qself: Optional[QualifiedSelf],
        path: Path,
        budget: Budget,
        expr_context: bool = True,
    ) -> Optional[str]: ...

    @abstractmethod
    def rewrite_type(self, ty: TypeRef, budget: Budget) -> Optional[str]: ...


class UnaryPrefixRenderer(ABC):
    """Renders a fixed prefix followed by an inner node."""

    @abstractmethod
    def rewrite_prefix(
        self, prefix: str, inner: T, budget: Budget, rewrite: Rewrite[T]
    ) -> Optional[str]: ...


class PairRenderer(ABC):
    """Renders ``prefix + lhs + infix + rhs + suffix``, breaking after the infix if needed."""

    @abstractmethod
    def rewrite_pair(
        self,
        lhs: T,
        rhs: T,
        prefix: str,
        infix: str,
        suffix: str,
        budget: Budget,
        rewrite: Rewrite[T],
    ) -> Optional[str]: ...


class TupleRenderer(ABC):
    """Renders a parenthesised, comma-separated sequence."""

    @abstractmethod
    def rewrite_tuple(
        self, items: Sequence[T], span: Span, budget: Budget, rewrite: Rewrite[T]
    ) -> Optional[str]: ...


class ExpressionRenderer(ABC):
    """Renders the expressions found in literal and range patterns."""

    @abstractmethod
    def rewrite_expr(self, expr: Expression, budget: Budget) -> Optional[str]: ...


@dataclass(frozen=True)
class Collaborators:
    """The renderers the pattern dispatcher delegates to."""

    lists: ListLayout
    paths: PathRenderer
    unary: UnaryPrefixRenderer
    pairs: PairRenderer
    tuples: TupleRenderer
    exprs: ExpressionRenderer
