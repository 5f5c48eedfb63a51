"""
Pattern rewriting.

``PatternRewriter`` renders a pattern tree within a ``Budget``: the columns
left on the current line and the indent for continuation lines. Each
variant composes the renderings of its children and of the collaborators
in ``Collaborators``; when no layout fits, the result is None and every
enclosing rewrite returns None as well.

Usage:
    context = RewriteContext.for_source(source)
    rewriter = PatternRewriter(context)
    text = rewriter.rewrite(pattern, Budget(context.config.max_width))
"""

from typing import Optional

from patfmt.rewrite.context import Collaborators, RewriteContext
from patfmt.rewrite.exprs import (
    ExpressionFormatter,
    PairFormatter,
    TupleFormatter,
    UnaryPrefixFormatter,
)
from patfmt.rewrite.indent import Budget, checked_sub
from patfmt.rewrite.lists import ListFormatter
from patfmt.rewrite.paths import PathFormatter
from patfmt.rewrite.utils import format_mutability, wrap_str
from patfmt.syntax.ast_nodes import (
    BindingPattern,
    BoxPattern,
    ConstructorPattern,
    FieldPattern,
    LiteralPattern,
    OpaquePattern,
    Pattern,
    PatternVisitor,
    QualifiedPathPattern,
    RangePattern,
    ReferencePattern,
    SlicePattern,
    StructPattern,
    TuplePattern,
    WildcardPattern,
)


def default_collaborators(context: RewriteContext) -> Collaborators:
    """Wire up the default renderers for ``context``."""
    lists = ListFormatter(context)
    unary = UnaryPrefixFormatter()
    tuples = TupleFormatter(context, lists)
    paths = PathFormatter(context, lists, tuples, unary)
    return Collaborators(
        lists=lists,
        paths=paths,
        unary=unary,
        pairs=PairFormatter(context),
        tuples=tuples,
        exprs=ExpressionFormatter(context, paths, unary),
    )


class PatternRewriter(PatternVisitor):
    """Renders patterns and struct field patterns."""

    def __init__(
        self, context: RewriteContext, collaborators: Optional[Collaborators] = None
    ) -> None:
        self.context = context
        self.collaborators = collaborators or default_collaborators(context)

    def rewrite(self, pattern: Pattern, budget: Budget) -> Optional[str]:
        """Render ``pattern`` within ``budget``; None if it cannot fit."""
        return self.visit(pattern, budget)

    def rewrite_field(self, field: FieldPattern, budget: Budget) -> Optional[str]:
        """Render a struct field as ``name: pattern``, or just the pattern for shorthand."""
        pattern = self.rewrite(field.pattern, budget)
        if field.is_shorthand or pattern is None:
            return pattern
        return f"{field.field_name}: {pattern}"

    def _wrap(self, text: str, budget: Budget) -> Optional[str]:
        return wrap_str(text, self.context.config.max_width, budget.width, budget.offset)

    # -------------------------------------------------------------------------
    # Variants
    # -------------------------------------------------------------------------

    def visit_wildcard(self, node: WildcardPattern, budget: Budget) -> Optional[str]:
        return "_" if budget.width >= 1 else None

    def visit_binding(self, node: BindingPattern, budget: Budget) -> Optional[str]:
        prefix = "ref " if node.by_reference else ""
        body = prefix + format_mutability(node.mutable) + node.name

        sub_pattern = ""
        if node.sub_pattern is not None:
            # 3 = " @ "
            sub_budget = budget.narrow(len(body) + 3)
            if sub_budget is None:
                return None
            rendered = self.rewrite(node.sub_pattern, sub_budget)
            if rendered is None:
                return None
            sub_pattern = " @ " + rendered

        return self._wrap(body + sub_pattern, budget)

    def visit_qualified_path(self, node: QualifiedPathPattern, budget: Budget) -> Optional[str]:
        return self.collaborators.paths.rewrite_path(node.qself, node.path, budget)

    def visit_range(self, node: RangePattern, budget: Budget) -> Optional[str]:
        exprs = self.collaborators.exprs
        return self.collaborators.pairs.rewrite_pair(
            node.low, node.high, "", "...", "", budget, exprs.rewrite_expr
        )

    def visit_reference(self, node: ReferencePattern, budget: Budget) -> Optional[str]:
        prefix = "&" + format_mutability(node.mutable)
        return self.collaborators.unary.rewrite_prefix(prefix, node.inner, budget, self.rewrite)

    def visit_box(self, node: BoxPattern, budget: Budget) -> Optional[str]:
        return self.collaborators.unary.rewrite_prefix("box ", node.inner, budget, self.rewrite)

    def visit_tuple(self, node: TuplePattern, budget: Budget) -> Optional[str]:
        return self.collaborators.tuples.rewrite_tuple(
            node.elements, node.span, budget, self.rewrite
        )

    def visit_constructor(self, node: ConstructorPattern, budget: Budget) -> Optional[str]:
        path = self.collaborators.paths.rewrite_path(None, node.path, budget)
        if path is None:
            return None

        if node.args is None:
            return self._wrap(f"{path}(..)", budget)
        if not node.args:
            return path

        # 2 = "(" + ")"
        args_width = checked_sub(budget.width, len(path) + 2)
        if args_width is None:
            return None
        args_budget = Budget(args_width, budget.offset + len(path) + 1)
        args = self.collaborators.lists.layout(
            node.args, ")", args_budget, lambda arg: self.rewrite(arg, args_budget)
        )
        if args is None:
            return None
        return f"{path}({args})"

    def visit_literal(self, node: LiteralPattern, budget: Budget) -> Optional[str]:
        return self.collaborators.exprs.rewrite_expr(node.value, budget)

    def visit_slice(self, node: SlicePattern, budget: Budget) -> Optional[str]:
        # Every element is offered the whole budget; the joined result is not re-checked.
        rendered: list[str] = []

        for element in node.prefix:
            text = self.rewrite(element, budget)
            if text is None:
                return None
            rendered.append(text)

        if node.rest is not None:
            text = self.rewrite(node.rest, budget)
            if text is None:
                return None
            rendered.append(text + "..")

        for element in node.suffix:
            text = self.rewrite(element, budget)
            if text is None:
                return None
            rendered.append(text)

        return "[" + ", ".join(rendered) + "]"

    def visit_struct(self, node: StructPattern, budget: Budget) -> Optional[str]:
        path = self.collaborators.paths.rewrite_path(None, node.path, budget)
        if path is None:
            return None

        if node.has_rest:
            rest_suffix, terminator = ", ..", ".."
        else:
            rest_suffix, terminator = "", "}"

        # 5 = " { " + " }"
        width = checked_sub(budget.width, len(path) + 5 + len(rest_suffix))
        if width is None:
            return None
        fields_budget = Budget(width, budget.offset + len(path) + 3)

        fields = self.collaborators.lists.layout(
            node.fields,
            terminator,
            fields_budget,
            lambda field: self.rewrite_field(field, fields_budget),
        )
        if fields is None:
            return None

        # The elision marker is appended without re-checking the budget.
        if node.has_rest:
            if "\n" in fields:
                indent = fields_budget.offset.to_string(self.context.config)
                fields += ",\n" + indent + ".."
            elif fields:
                fields += ", .."
            else:
                fields = ".."

        if not fields:
            return f"{path} {{}}"
        return f"{path} {{ {fields} }}"

    def visit_opaque(self, node: OpaquePattern, budget: Budget) -> Optional[str]:
        return self._wrap(self.context.snippet(node.span), budget)
