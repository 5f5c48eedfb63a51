"""
patfmt rewrite package.

Width-budgeted renderers for patterns and the paths, types, lists and
expressions they contain.
"""

from patfmt.rewrite.context import Collaborators, RewriteContext
from patfmt.rewrite.indent import Budget, Indent, checked_sub
from patfmt.rewrite.patterns import PatternRewriter, default_collaborators

__all__ = [
    "Budget",
    "Indent",
    "checked_sub",
    "Collaborators",
    "RewriteContext",
    "PatternRewriter",
    "default_collaborators",
]
