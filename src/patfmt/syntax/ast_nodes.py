"""
Syntax tree node definitions for patfmt.

This module defines the pattern trees the formatter consumes, together with
the paths, type references and expressions that appear inside them. Every
node is immutable and carries the span of source text it was parsed from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Union

from patfmt.syntax.codemap import DUMMY_SPAN, Span


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PathSegment:
    """
    One ``::``-separated component of a path.

    Examples:
        Some, Vec::<u8>, HashMap::<K, V>
    """

    name: str
    generic_args: tuple[TypeRef, ...] = ()
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class Path:
    """
    A possibly global path: ``Foo``, ``a::b::C``, ``::std::option::Option``.
    """

    segments: tuple[PathSegment, ...]
    is_global: bool = False
    span: Span = DUMMY_SPAN

    @classmethod
    def from_names(cls, *names: str, is_global: bool = False) -> Path:
        """Build a path without generic arguments from plain segment names."""
        return cls(segments=tuple(PathSegment(name) for name in names), is_global=is_global)


@dataclass(frozen=True, slots=True)
class QualifiedSelf:
    """
    The ``<T as Trait>`` qualifier of a path.

    ``position`` counts the leading segments of the accompanying path that
    belong to the trait: ``<T as a::Trait>::C`` has position 2 and the path
    ``a::Trait::C``; ``<T>::C`` has position 0 and the path ``C``.
    """

    ty: TypeRef
    position: int = 0


# -----------------------------------------------------------------------------
# Type References
# -----------------------------------------------------------------------------


class TypeRef(ABC):
    """Base class for type references (qualifiers and generic arguments)."""

    span: Span


@dataclass(frozen=True, slots=True)
class PathType(TypeRef):
    """A named type: ``u8``, ``Vec<T>``, ``<T as Trait>::Output``."""

    path: Path
    qself: Optional[QualifiedSelf] = None
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class ReferenceType(TypeRef):
    """A borrowed type: ``&T``, ``&'a mut T``."""

    inner: TypeRef
    mutable: bool = False
    lifetime: Optional[str] = None
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class TupleType(TypeRef):
    """A tuple type: ``()``, ``(T,)``, ``(A, B)``."""

    elements: tuple[TypeRef, ...]
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class InferType(TypeRef):
    """The inferred type placeholder ``_``."""

    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class LifetimeArg(TypeRef):
    """A lifetime used as a generic argument: ``'a``, ``'static``."""

    name: str
    span: Span = DUMMY_SPAN


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ABC):
    """Base class for the expressions allowed inside patterns."""

    span: Span


class LiteralKind(Enum):
    """Lexical category of a literal."""

    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    CHAR = auto()
    BOOLEAN = auto()


@dataclass(frozen=True, slots=True)
class Literal(Expression):
    """
    A literal, kept as its verbatim source text.

    Examples:
        42, 0xFF_u8, 1.5e3, "hello", b"raw", 'x', true
    """

    kind: LiteralKind
    text: str
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class PathExpression(Expression):
    """A constant referenced by path: ``MAX``, ``u8::MAX``, ``<T>::ZERO``."""

    path: Path
    qself: Optional[QualifiedSelf] = None
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class NegatedExpression(Expression):
    """Arithmetic negation: ``-1``, ``-2.5``."""

    operand: Expression
    span: Span = DUMMY_SPAN


# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------


class Pattern(ABC):
    """
    Base class for patterns.

    The set of pattern variants is closed: each subclass dispatches to its
    own abstract method on ``PatternVisitor``.
    """

    span: Span

    @abstractmethod
    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        """Accept a visitor, forwarding any extra arguments to it."""
        pass


@dataclass(frozen=True, slots=True)
class WildcardPattern(Pattern):
    """The pattern ``_``, matching anything without binding."""

    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_wildcard(self, *args)


@dataclass(frozen=True, slots=True)
class BindingPattern(Pattern):
    """
    Bind a name, optionally by reference and/or mutably, optionally
    constrained by a sub-pattern.

    Examples:
        x, mut x, ref x, ref mut x, n @ 1...9
    """

    name: str
    by_reference: bool = False
    mutable: bool = False
    sub_pattern: Optional[Pattern] = None
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_binding(self, *args)


@dataclass(frozen=True, slots=True)
class QualifiedPathPattern(Pattern):
    """
    An associated constant used as a pattern.

    Examples:
        <T as Bounded>::MAX, <Self>::ZERO
    """

    path: Path
    qself: Optional[QualifiedSelf] = None
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_qualified_path(self, *args)


@dataclass(frozen=True, slots=True)
class RangePattern(Pattern):
    """
    An inclusive range: ``1...9``, ``'a'...'z'``, ``i8::MIN...-1``.
    """

    low: Expression
    high: Expression
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_range(self, *args)


@dataclass(frozen=True, slots=True)
class ReferencePattern(Pattern):
    """Dereference a borrowed value: ``&x``, ``&mut (a, b)``."""

    inner: Pattern
    mutable: bool = False
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_reference(self, *args)


@dataclass(frozen=True, slots=True)
class BoxPattern(Pattern):
    """Match through a box: ``box x``."""

    inner: Pattern
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_box(self, *args)


@dataclass(frozen=True, slots=True)
class TuplePattern(Pattern):
    """Destructure a tuple: ``()``, ``(x,)``, ``(x, _, 0)``."""

    elements: tuple[Pattern, ...]
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_tuple(self, *args)


@dataclass(frozen=True, slots=True)
class ConstructorPattern(Pattern):
    """
    Match a tuple-like variant or struct through its path.

    ``args`` distinguishes three cases that render differently:

        None        Some(..)    payload elided
        ()          Foo::Bar    explicit zero-argument form
        (p, ...)    Some(x)     positional sub-patterns
    """

    path: Path
    args: Optional[tuple[Pattern, ...]] = ()
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_constructor(self, *args)


@dataclass(frozen=True, slots=True)
class LiteralPattern(Pattern):
    """Match a literal value: ``0``, ``"hello"``, ``-1``, ``true``."""

    value: Expression
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_literal(self, *args)


@dataclass(frozen=True, slots=True)
class SlicePattern(Pattern):
    """
    Destructure a slice around an optional rest binding.

    Examples:
        [a, b], [first, rest.., last], [_.., last]
    """

    prefix: tuple[Pattern, ...] = ()
    rest: Optional[Pattern] = None
    suffix: tuple[Pattern, ...] = ()
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_slice(self, *args)


@dataclass(frozen=True, slots=True)
class FieldPattern:
    """
    One field binding inside a struct pattern.

    ``is_shorthand`` records that the source wrote ``x`` (or ``ref x``)
    rather than ``x: x``; it is never inferred by comparing names.
    """

    field_name: str
    pattern: Pattern
    is_shorthand: bool = False
    span: Span = DUMMY_SPAN


@dataclass(frozen=True, slots=True)
class StructPattern(Pattern):
    """
    Destructure a struct-like value by field name.

    Examples:
        Point { x, y: 0 }, Config { verbose: true, .. }, Empty {}
    """

    path: Path
    fields: tuple[FieldPattern, ...] = ()
    has_rest: bool = False
    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_struct(self, *args)


@dataclass(frozen=True, slots=True)
class OpaquePattern(Pattern):
    """
    A construct that is only ever reproduced verbatim from source, such as
    a macro invocation in pattern position (``my_macro!(a, b)``).
    """

    span: Span = DUMMY_SPAN

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        return visitor.visit_opaque(self, *args)


class PatternVisitor(ABC):
    """
    Visitor over the closed set of pattern variants.

    Every variant has an abstract method, so a subclass that misses one
    cannot be instantiated.
    """

    def visit(self, pattern: Pattern, *args: Any) -> Any:
        """Dispatch to the appropriate visit method."""
        return pattern.accept(self, *args)

    @abstractmethod
    def visit_wildcard(self, node: WildcardPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_binding(self, node: BindingPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_qualified_path(self, node: QualifiedPathPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_range(self, node: RangePattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_reference(self, node: ReferencePattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_box(self, node: BoxPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_tuple(self, node: TuplePattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_constructor(self, node: ConstructorPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_literal(self, node: LiteralPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_slice(self, node: SlicePattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_struct(self, node: StructPattern, *args: Any) -> Any: ...

    @abstractmethod
    def visit_opaque(self, node: OpaquePattern, *args: Any) -> Any: ...


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PatternItem:
    """A top-level pattern, optionally followed by a ``//`` comment."""

    pattern: Pattern
    span: Span = DUMMY_SPAN
    blank_lines_before: int = 0
    trailing_comment: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CommentItem:
    """A standalone comment line, reproduced verbatim."""

    text: str
    span: Span = DUMMY_SPAN
    blank_lines_before: int = 0


DocumentItem = Union[PatternItem, CommentItem]


@dataclass(frozen=True, slots=True)
class PatternDocument:
    """
    The root node of a pattern document: one item per logical line.
    """

    items: tuple[DocumentItem, ...]
    span: Span = DUMMY_SPAN
