"""
Diagnostic generation for the patfmt LSP.

Lexer and parser errors become error diagnostics. Patterns the formatter
has to keep as written, because no layout fits the configured width,
become warnings.
"""

from lsprotocol import types

from patfmt.config import FormatConfig
from patfmt.formatter import PatternFormatter
from patfmt.syntax.codemap import CodeMap, Span
from patfmt.syntax.lexer import Lexer
from patfmt.syntax.parser import Parser
from patfmt.utils.errors import LexerError, ParserError, PatfmtError

SOURCE = "patfmt"


class DiagnosticProvider:
    """
    Generates LSP diagnostics for a pattern document.

    This provider runs the lexer, the parser and the formatter to collect
    all errors and warnings for a document.
    """

    def __init__(self, source: str, uri: str, config: FormatConfig | None = None) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The pattern document to analyze
            uri: The document URI for location information
            config: Formatting configuration used for width warnings
        """
        self.source = source
        self.uri = uri
        self.config = config or FormatConfig()
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            List of LSP diagnostic objects
        """
        self._diagnostics = []

        # Phase 1: Lexer errors
        try:
            tokens = Lexer(self.source, filename=self.uri).tokenize()
        except LexerError as e:
            self._add_patfmt_error(e)
            return self._diagnostics

        # Phase 2: Parser errors
        try:
            document = Parser(tokens, source=self.source, filename=self.uri).parse()
        except ParserError as e:
            self._add_patfmt_error(e)
            return self._diagnostics

        # Phase 3: Patterns that cannot be formatted within the width
        codemap = CodeMap(self.source, self.uri)
        result = PatternFormatter(self.config).format_document(document, codemap)
        for span in result.unformatted:
            self._add_unformatted_warning(span, codemap)

        return self._diagnostics

    def _add_patfmt_error(self, error: PatfmtError) -> None:
        """
        Add a lexer or parser error as an LSP diagnostic.

        Args:
            error: The patfmt error
        """
        line = 0
        character = 0

        if error.location:
            line = max(0, error.location.line - 1)  # Convert to 0-indexed
            character = max(0, error.location.column - 1)

        # Underline up to the end of the offending token
        end_character = character + 1
        if error.source_line:
            rest_of_line = error.source_line[character:]
            for i, c in enumerate(rest_of_line):
                if c.isspace() or c in "()[]{},:":
                    end_character = character + max(1, i)
                    break
            else:
                end_character = character + max(1, len(rest_of_line))

        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=line, character=character),
                    end=types.Position(line=line, character=end_character),
                ),
                message=error.message,
                severity=types.DiagnosticSeverity.Error,
                source=SOURCE,
            )
        )

    def _add_unformatted_warning(self, span: Span, codemap: CodeMap) -> None:
        start = codemap.lookup(span.lo)
        end = codemap.lookup(span.hi)

        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=start.line - 1, character=start.column - 1),
                    end=types.Position(line=end.line - 1, character=end.column - 1),
                ),
                message=(
                    f"Pattern does not fit within {self.config.max_width} columns "
                    "and is kept as written"
                ),
                severity=types.DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )


def get_diagnostics_for_document(
    source: str, uri: str, config: FormatConfig | None = None
) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The pattern document
        uri: The document URI
        config: Optional formatting configuration

    Returns:
        List of LSP diagnostics
    """
    return DiagnosticProvider(source, uri, config).get_diagnostics()
