"""
Path and type rendering.

Paths render as ``a::b::C``, ``::std::Vec::<u8>`` or, when qualified,
``<T as Trait>::C``. Generic arguments are written ``::<A, B>`` where a
path appears in a pattern or expression and ``<A, B>`` inside types.
"""

from typing import Optional, Sequence

from patfmt.rewrite.context import (
    ListLayout,
    PathRenderer,
    RewriteContext,
    TupleRenderer,
    UnaryPrefixRenderer,
)
from patfmt.rewrite.indent import Budget, checked_sub
from patfmt.rewrite.utils import extra_offset, format_mutability, wrap_str
from patfmt.syntax.ast_nodes import (
    InferType,
    LifetimeArg,
    Path,
    PathSegment,
    PathType,
    QualifiedSelf,
    ReferenceType,
    TupleType,
    TypeRef,
)


class PathFormatter(PathRenderer):
    """Default ``PathRenderer``."""

    def __init__(
        self,
        context: RewriteContext,
        lists: ListLayout,
        tuples: TupleRenderer,
        unary: UnaryPrefixRenderer,
    ) -> None:
        self.context = context
        self.lists = lists
        self.tuples = tuples
        self.unary = unary

    def rewrite_path(
        self,
        qself: Optional[QualifiedSelf],
        path: Path,
        budget: Budget,
        expr_context: bool = True,
    ) -> Optional[str]:
        skip_count = qself.position if qself is not None else 0
        global_prefix = "::" if path.is_global else ""
        result = ""

        if qself is None:
            result = global_prefix
        else:
            ty_budget = budget.narrow(1)
            if ty_budget is None:
                return None
            ty = self.rewrite_type(qself.ty, ty_budget)
            if ty is None:
                return None
            result = "<" + ty

            if skip_count > 0:
                result += " as " + global_prefix
                used = extra_offset(result, budget.offset)
                # 3 = ">::"
                width = checked_sub(budget.width, used + 3)
                if width is None:
                    return None
                result = self._rewrite_segments(
                    result,
                    path.segments[:skip_count],
                    Budget(width, budget.offset + used),
                    expr_context,
                )
                if result is None:
                    return None

            result += ">::"

        used = extra_offset(result, budget.offset)
        width = checked_sub(budget.width, used)
        if width is None:
            return None
        return self._rewrite_segments(
            result,
            path.segments[skip_count:],
            Budget(width, budget.offset + used),
            expr_context,
        )

    def _rewrite_segments(
        self,
        buffer: str,
        segments: Sequence[PathSegment],
        budget: Budget,
        expr_context: bool,
    ) -> Optional[str]:
        """Append ``::``-separated segments to ``buffer``; ``budget`` starts where it ends."""
        start = len(buffer)

        for index, segment in enumerate(segments):
            if index > 0:
                buffer += "::"
            used = extra_offset(buffer[start:], budget.offset)
            width = checked_sub(budget.width, used)
            if width is None:
                return None
            segment_str = self._rewrite_segment(
                segment, Budget(width, budget.offset + used), expr_context
            )
            if segment_str is None:
                return None
            buffer += segment_str

        return buffer

    def _rewrite_segment(
        self, segment: PathSegment, budget: Budget, expr_context: bool
    ) -> Optional[str]:
        after_name = budget.narrow(len(segment.name))
        if after_name is None:
            return None
        if not segment.generic_args:
            return segment.name

        separator = "::" if expr_context else ""
        # 1 = "<"
        list_offset = len(separator) + 1
        # 1 = ">"
        list_width = checked_sub(after_name.width, list_offset + 1)
        if list_width is None:
            return None
        list_budget = Budget(list_width, after_name.offset + list_offset)

        list_str = self.lists.layout(
            segment.generic_args,
            ">",
            list_budget,
            lambda ty: self.rewrite_type(ty, list_budget),
        )
        if list_str is None:
            return None
        return f"{segment.name}{separator}<{list_str}>"

    def rewrite_type(self, ty: TypeRef, budget: Budget) -> Optional[str]:
        if isinstance(ty, PathType):
            return self.rewrite_path(ty.qself, ty.path, budget, expr_context=False)

        if isinstance(ty, ReferenceType):
            prefix = "&"
            if ty.lifetime is not None:
                prefix += ty.lifetime + " "
            prefix += format_mutability(ty.mutable)
            return self.unary.rewrite_prefix(prefix, ty.inner, budget, self.rewrite_type)

        if isinstance(ty, TupleType):
            return self.tuples.rewrite_tuple(ty.elements, ty.span, budget, self.rewrite_type)

        if isinstance(ty, InferType):
            return "_" if budget.width >= 1 else None

        if isinstance(ty, LifetimeArg):
            return wrap_str(ty.name, self.context.config.max_width, budget.width, budget.offset)

        raise TypeError(f"Cannot rewrite type of type {type(ty).__name__}")
