"""
Unit tests for pattern rewriting with the default collaborators.
"""

import pytest

from patfmt.config import FormatConfig, ListTactic
from patfmt.rewrite.indent import Budget, Indent
from patfmt.rewrite.patterns import PatternRewriter
from patfmt.syntax.ast_nodes import (
    BindingPattern,
    BoxPattern,
    ConstructorPattern,
    FieldPattern,
    Literal,
    LiteralKind,
    LiteralPattern,
    OpaquePattern,
    Path,
    PathExpression,
    PathSegment,
    PathType,
    PatternVisitor,
    QualifiedPathPattern,
    QualifiedSelf,
    RangePattern,
    ReferencePattern,
    SlicePattern,
    StructPattern,
    TuplePattern,
    WildcardPattern,
)
from patfmt.syntax.codemap import Span


def _int(text: str) -> Literal:
    return Literal(LiteralKind.INTEGER, text)


def _lit(text: str) -> LiteralPattern:
    return LiteralPattern(_int(text))


def _bind(name: str) -> BindingPattern:
    return BindingPattern(name=name)


def _field(name: str, pattern, shorthand: bool = False) -> FieldPattern:
    return FieldPattern(field_name=name, pattern=pattern, is_shorthand=shorthand)


class TestWildcard:
    """The _ pattern."""

    def test_fits_in_one_column(self, render):
        assert render(WildcardPattern(), width=1) == "_"

    def test_no_room(self, render):
        assert render(WildcardPattern(), width=0) is None


class TestBinding:
    """Binding patterns."""

    def test_ref_mut(self, render):
        """ref mut x needs nine columns."""
        pattern = BindingPattern(name="x", by_reference=True, mutable=True)
        assert render(pattern, width=9) == "ref mut x"
        assert render(pattern, width=8) is None

    def test_mut_only(self, render):
        assert render(BindingPattern(name="x", mutable=True), width=5) == "mut x"

    def test_sub_pattern(self, render):
        pattern = BindingPattern(name="x", sub_pattern=WildcardPattern())
        assert render(pattern, width=5) == "x @ _"

    def test_sub_pattern_no_room(self, render):
        """The name alone exhausting the width leaves no room for the sub-pattern."""
        pattern = BindingPattern(name="abc", sub_pattern=WildcardPattern())
        assert render(pattern, width=3) is None

    def test_sub_pattern_result_checked(self, render):
        """The separator is reserved along with the name."""
        pattern = BindingPattern(name="x", sub_pattern=WildcardPattern())
        assert render(pattern, width=4) is None

    def test_sub_pattern_continues_after_separator(self, render):
        """Broken sub-patterns line up under their own first line."""
        pattern = BindingPattern(
            name="x",
            sub_pattern=ConstructorPattern(
                path=Path.from_names("Foo"), args=(_bind("aaaa"), _bind("bbbb"))
            ),
        )
        assert render(pattern, width=13) is None
        for width in range(14, 19):
            assert render(pattern, width=width) == "x @ Foo(aaaa,\n        bbbb)"
        assert render(pattern, width=19) == "x @ Foo(aaaa, bbbb)"


class TestConstructor:
    """The three argument-list states render differently."""

    def test_elided_payload(self, render):
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=None)
        assert render(pattern) == "Foo(..)"

    def test_empty_arguments(self, render):
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=())
        assert render(pattern) == "Foo"

    def test_arguments(self, render):
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=(WildcardPattern(),))
        assert render(pattern) == "Foo(_)"

    def test_three_states_differ(self, render):
        """None, () and (p,) never collapse into the same text."""
        path = Path.from_names("Foo")
        outputs = {
            render(ConstructorPattern(path=path, args=None)),
            render(ConstructorPattern(path=path, args=())),
            render(ConstructorPattern(path=path, args=(WildcardPattern(),))),
        }
        assert len(outputs) == 3

    def test_arguments_break_vertically(self, render):
        """Arguments that do not fit go one per line, aligned after the parenthesis."""
        pattern = ConstructorPattern(
            path=Path.from_names("Foo"), args=(_bind("alpha"), _bind("beta"))
        )
        assert render(pattern, width=14) == "Foo(alpha,\n    beta)"

    def test_path_too_long(self, render):
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=None)
        assert render(pattern, width=2) is None

    def test_no_room_for_parenthesis(self, render):
        """Reserving the opening parenthesis must not underflow."""
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=(WildcardPattern(),))
        assert render(pattern, width=3) is None

    def test_closing_parenthesis_reserved(self, render):
        """A single-line argument list leaves room for the closing parenthesis."""
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=(WildcardPattern(),))
        assert render(pattern, width=5) is None
        assert render(pattern, width=6) == "Foo(_)"

    def test_wide_arguments_go_vertical(self, render):
        """Arguments that only overflow by the parenthesis break instead."""
        pattern = ConstructorPattern(
            path=Path.from_names("Foo"), args=(_bind("aa"), _bind("bb"))
        )
        assert render(pattern, width=10) == "Foo(aa,\n    bb)"
        assert render(pattern, width=11) == "Foo(aa, bb)"

    def test_elided_payload_checked(self, render):
        pattern = ConstructorPattern(path=Path.from_names("Foo"), args=None)
        assert render(pattern, width=6) is None
        assert render(pattern, width=7) == "Foo(..)"


class TestStruct:
    """Struct patterns."""

    def test_fields_on_one_line(self, render):
        pattern = StructPattern(
            path=Path.from_names("Point"),
            fields=(_field("x", _lit("1")), _field("y", _lit("2"))),
        )
        assert render(pattern) == "Point { x: 1, y: 2 }"

    def test_rest_on_one_line(self, render):
        """A single-line field list ends with , .."""
        pattern = StructPattern(
            path=Path.from_names("Point"),
            fields=(_field("x", _lit("1")), _field("y", _lit("2"))),
            has_rest=True,
        )
        result = render(pattern)
        assert result == "Point { x: 1, y: 2, .. }"
        assert result.endswith(", .. }")

    def test_rest_alone(self, render):
        """With no fields the marker stands alone."""
        pattern = StructPattern(path=Path.from_names("Point"), has_rest=True)
        assert render(pattern) == "Point { .. }"

    def test_rest_after_vertical_fields(self, render):
        """Multi-line fields put the marker on its own line at the field indent."""
        pattern = StructPattern(
            path=Path.from_names("Point"),
            fields=(_field("x", _lit("1")), _field("y", _lit("2"))),
            has_rest=True,
        )
        assert render(pattern, width=22) == "Point { x: 1,\n        y: 2,\n        .. }"

    def test_rest_with_forced_vertical_layout(self, render):
        """A vertical list tactic also moves the marker to a new line."""
        config = FormatConfig(list_tactic=ListTactic.VERTICAL)
        pattern = StructPattern(
            path=Path.from_names("S"),
            fields=(_field("a", _bind("a"), True), _field("b", _bind("b"), True)),
            has_rest=True,
        )
        result = render(pattern, offset=Indent(0, 4), config=config)
        assert result == "S { a,\n        b,\n        .. }"

    def test_empty_struct(self, render):
        pattern = StructPattern(path=Path.from_names("Empty"))
        assert render(pattern) == "Empty {}"

    def test_shorthand_fields(self, render):
        """Shorthand fields render just their binding."""
        pattern = StructPattern(
            path=Path.from_names("P"),
            fields=(
                _field("x", _bind("x"), shorthand=True),
                _field("y", BindingPattern(name="y", by_reference=True), shorthand=True),
            ),
        )
        assert render(pattern) == "P { x, ref y }"

    def test_no_room_for_decoration(self, render):
        """The path plus braces must leave a non-negative field budget."""
        pattern = StructPattern(path=Path.from_names("Point"), has_rest=True)
        assert render(pattern, width=13) is None
        assert render(pattern, width=14) == "Point { .. }"

    def test_rest_marker_counts_against_last_line(self, render):
        """The marker is reserved as the terminator of a vertical field list."""
        pattern = StructPattern(
            path=Path.from_names("P"),
            fields=(_field("aa", _bind("aa"), True), _field("bb", _bind("bb"), True)),
            has_rest=True,
        )
        assert render(pattern, width=14) == "P { aa,\n    bb,\n    .. }"
        assert render(pattern, width=12) is None


class TestFieldPattern:
    """Struct field rendering."""

    def test_shorthand(self, context):
        rewriter = PatternRewriter(context)
        field = _field("x", _bind("x"), shorthand=True)
        assert rewriter.rewrite_field(field, Budget(10)) == "x"

    def test_named(self, context):
        rewriter = PatternRewriter(context)
        field = _field("y", _bind("z"))
        assert rewriter.rewrite_field(field, Budget(10)) == "y: z"

    def test_shorthand_is_not_inferred(self, context):
        """A non-shorthand field whose names match still renders both."""
        rewriter = PatternRewriter(context)
        assert rewriter.rewrite_field(_field("x", _bind("x")), Budget(10)) == "x: x"

    def test_no_fit_propagates(self, context):
        rewriter = PatternRewriter(context)
        assert rewriter.rewrite_field(_field("y", _bind("zz")), Budget(1)) is None
        assert rewriter.rewrite_field(_field("zz", _bind("zz"), True), Budget(1)) is None


class TestSlice:
    """Slice patterns."""

    def test_prefix_rest_suffix(self, render):
        pattern = SlicePattern(prefix=(_bind("a"),), rest=_bind("b"), suffix=(_bind("c"),))
        assert render(pattern) == "[a, b.., c]"

    def test_empty(self, render):
        assert render(SlicePattern()) == "[]"

    def test_each_element_gets_full_width(self, render):
        """Elements are checked one by one; the joined text is not."""
        pattern = SlicePattern(prefix=(_bind("aaa"), _bind("bbb")))
        assert render(pattern, width=3) == "[aaa, bbb]"

    def test_element_failure(self, render):
        pattern = SlicePattern(prefix=(_bind("a"),), suffix=(_bind("long"),))
        assert render(pattern, width=3) is None

    def test_rest_failure(self, render):
        pattern = SlicePattern(rest=_bind("long"))
        assert render(pattern, width=3) is None


class TestDelegatingVariants:
    """Variants that hand their layout to a collaborator."""

    def test_reference(self, render):
        assert render(ReferencePattern(inner=_bind("x"), mutable=True)) == "&mut x"

    def test_reference_budget(self, render):
        """The prefix is taken out of the inner pattern's width."""
        assert render(ReferencePattern(inner=_bind("x")), width=1) is None

    def test_box(self, render):
        assert render(BoxPattern(inner=_bind("x"))) == "box x"

    def test_range(self, render):
        assert render(RangePattern(low=_int("1"), high=_int("9"))) == "1...9"

    def test_range_breaks_after_connector(self, render):
        """A range that does not fit puts its upper bound on the next line."""
        pattern = RangePattern(
            low=PathExpression(Path.from_names("LOWER")),
            high=PathExpression(Path.from_names("UPPER")),
        )
        assert render(pattern, width=10, offset=Indent(0, 2)) == "LOWER...\n  UPPER"

    def test_tuple(self, render):
        assert render(TuplePattern(elements=(_bind("a"), _bind("b")))) == "(a, b)"

    def test_one_tuple(self, render):
        assert render(TuplePattern(elements=(_bind("a"),))) == "(a,)"

    def test_unit(self, render):
        assert render(TuplePattern(elements=())) == "()"
        assert render(TuplePattern(elements=()), width=1) is None

    def test_literal(self, render):
        assert render(_lit("0xFF_u8")) == "0xFF_u8"
        assert render(_lit("0xFF_u8"), width=6) is None

    def test_qualified_path(self, render):
        trait = Path(
            segments=(PathSegment("Bounded"), PathSegment("MAX")),
        )
        qself = QualifiedSelf(ty=PathType(Path.from_names("T")), position=1)
        assert render(QualifiedPathPattern(path=trait, qself=qself)) == "<T as Bounded>::MAX"


class TestOpaque:
    """Verbatim patterns."""

    def test_verbatim_text(self, render):
        source = "m!(a,   b)"
        assert render(OpaquePattern(span=Span(0, len(source))), source=source) == source

    def test_too_wide(self, render):
        source = "m!(a,   b)"
        assert render(OpaquePattern(span=Span(0, len(source))), width=5, source=source) is None

    def test_multi_line_verbatim(self, render):
        """Multi-line text is kept as is when its lines fit."""
        source = "m! {\n    a\n}"
        assert render(OpaquePattern(span=Span(0, len(source))), source=source) == source


class TestNestedNoFit:
    """No-fit results propagate through every level."""

    def test_deep_failure(self, render):
        inner = ConstructorPattern(path=Path.from_names("Some"), args=(_bind("x" * 20),))
        pattern = ReferencePattern(inner=BoxPattern(inner=inner))
        assert render(pattern, width=31) == "&box Some(" + "x" * 20 + ")"
        assert render(pattern, width=30) is None


class TestVisitorCompleteness:
    """Every variant must be handled."""

    def test_incomplete_visitor_rejected(self):
        """A visitor missing a variant method cannot be constructed."""

        class WildcardsOnly(PatternVisitor):
            def visit_wildcard(self, node, *args):
                return "_"

        with pytest.raises(TypeError):
            WildcardsOnly()

    def test_rewriter_handles_every_variant(self, context):
        assert not PatternRewriter.__abstractmethods__
        assert PatternRewriter(context) is not None
