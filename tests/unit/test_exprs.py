"""
Unit tests for the expression-level renderers.
"""

import pytest

from patfmt.rewrite.context import RewriteContext
from patfmt.rewrite.exprs import PairFormatter, TupleFormatter, UnaryPrefixFormatter
from patfmt.rewrite.indent import Budget, Indent
from patfmt.rewrite.lists import ListFormatter
from patfmt.rewrite.patterns import default_collaborators
from patfmt.rewrite.utils import wrap_str
from patfmt.syntax.ast_nodes import (
    Literal,
    LiteralKind,
    NegatedExpression,
    Path,
    PathExpression,
)


def _text(context: RewriteContext):
    """A rewrite function for plain strings."""

    def _rewrite(text: str, budget: Budget):
        return wrap_str(text, context.config.max_width, budget.width, budget.offset)

    return _rewrite


class TestUnaryPrefix:
    """Prefix renderer."""

    def test_prefix_and_inner(self, context):
        result = UnaryPrefixFormatter().rewrite_prefix("&", "x", Budget(2), _text(context))
        assert result == "&x"

    def test_inner_budget_excludes_prefix(self, context):
        seen = []

        def _record(text, budget):
            seen.append(budget)
            return text

        UnaryPrefixFormatter().rewrite_prefix("box ", "x", Budget(10, Indent(0, 2)), _record)
        assert seen == [Budget(6, Indent(0, 6))]

    def test_prefix_too_long(self, context):
        assert UnaryPrefixFormatter().rewrite_prefix("box ", "x", Budget(3), _text(context)) is None


class TestPair:
    """Two operands around an infix."""

    def test_single_line(self, context):
        pairs = PairFormatter(context)
        assert pairs.rewrite_pair("aa", "bb", "", "...", "", Budget(7), _text(context)) == "aa...bb"

    def test_prefix_and_suffix(self, context):
        pairs = PairFormatter(context)
        result = pairs.rewrite_pair("aa", "bb", "<", "...", ">", Budget(20), _text(context))
        assert result == "<aa...bb>"

    def test_breaks_after_infix(self, context):
        """The right operand moves to a new line at the offset."""
        pairs = PairFormatter(context)
        result = pairs.rewrite_pair(
            "aa", "bb", "", "...", "", Budget(6, Indent(0, 4)), _text(context)
        )
        assert result == "aa...\n    bb"

    def test_multi_line_rhs_starts_new_line(self, context):
        pairs = PairFormatter(context)
        result = pairs.rewrite_pair("a", "b\nc", "", "...", "", Budget(50), _text(context))
        assert result == "a...\nb\nc"

    def test_no_room_for_infix(self, context):
        pairs = PairFormatter(context)
        assert pairs.rewrite_pair("a", "b", "", "...", "", Budget(2), _text(context)) is None

    def test_lhs_must_fit(self, context):
        pairs = PairFormatter(context)
        assert pairs.rewrite_pair("aaaa", "b", "", "...", "", Budget(6), _text(context)) is None


class TestTuple:
    """Parenthesised sequences."""

    @pytest.fixture
    def tuples(self, context):
        return TupleFormatter(context, ListFormatter(context))

    def test_empty(self, tuples, context):
        assert tuples.rewrite_tuple([], None, Budget(2), _text(context)) == "()"

    def test_single_element_keeps_comma(self, tuples, context):
        assert tuples.rewrite_tuple(["a"], None, Budget(4), _text(context)) == "(a,)"
        assert tuples.rewrite_tuple(["a"], None, Budget(3), _text(context)) is None

    def test_horizontal(self, tuples, context):
        assert tuples.rewrite_tuple(["a", "b"], None, Budget(6), _text(context)) == "(a, b)"

    def test_vertical_after_parenthesis(self, tuples, context):
        """Items that do not fit go one per line, aligned after '('."""
        result = tuples.rewrite_tuple(["aaa", "bbb"], None, Budget(8), _text(context))
        assert result == "(aaa,\n bbb)"

    def test_no_room_for_parentheses(self, tuples, context):
        assert tuples.rewrite_tuple(["a", "b"], None, Budget(1), _text(context)) is None


class TestExpressions:
    """Literals, path constants and negation."""

    @pytest.fixture
    def exprs(self, context):
        return default_collaborators(context).exprs

    def test_literal_text_is_verbatim(self, exprs):
        literal = Literal(LiteralKind.INTEGER, "1_000u32")
        assert exprs.rewrite_expr(literal, Budget(8)) == "1_000u32"
        assert exprs.rewrite_expr(literal, Budget(7)) is None

    def test_path_constant(self, exprs):
        expr = PathExpression(Path.from_names("i8", "MIN"))
        assert exprs.rewrite_expr(expr, Budget(10)) == "i8::MIN"

    def test_negated(self, exprs):
        expr = NegatedExpression(Literal(LiteralKind.FLOAT, "1.5"))
        assert exprs.rewrite_expr(expr, Budget(4)) == "-1.5"
        assert exprs.rewrite_expr(expr, Budget(3)) is None

    def test_unknown_expression(self, exprs):
        with pytest.raises(TypeError):
            exprs.rewrite_expr("1", Budget(10))
