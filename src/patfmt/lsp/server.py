"""
patfmt Language Server Protocol (LSP) Server.

Serves pattern documents to editors through pygls:

- Diagnostics for syntax errors and for patterns too wide to format,
  refreshed whenever a document is opened, edited or saved
- Whole-document formatting
- Range formatting

Usage:
    # Editors talk to the server over stdio
    patfmt-lsp

    # A TCP socket is easier to attach to while debugging
    patfmt-lsp --tcp --port 2087
"""

import argparse
import logging
from typing import Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from patfmt import __version__
from patfmt.config import FormatConfig
from patfmt.lsp.diagnostics import get_diagnostics_for_document
from patfmt.lsp.formatting import LSPFormatter

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("patfmt-lsp")


class PatfmtLanguageServer(LanguageServer):
    """
    Language server for pattern documents.

    The server keeps no per-document state of its own: every diagnostic
    and formatting request works from the workspace's current text.
    """

    def __init__(self, config: Optional[FormatConfig] = None) -> None:
        super().__init__(
            name="patfmt-lsp",
            version=f"v{__version__}",
        )

        self.config = config or FormatConfig()
        self._formatter = LSPFormatter(self.config)

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Hook the document and formatting handlers into pygls."""
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(self._did_open)
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(self._did_change)
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(self._did_save)
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(self._did_close)

        self.feature(types.TEXT_DOCUMENT_FORMATTING)(self._formatting)
        self.feature(types.TEXT_DOCUMENT_RANGE_FORMATTING)(self._range_formatting)

    def _publish(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def _validate(self, uri: str, source: str) -> None:
        diagnostics = get_diagnostics_for_document(source, uri, self.config)
        logger.debug(f"Publishing {len(diagnostics)} diagnostic(s) for {uri}")
        self._publish(uri, diagnostics)

    def _revalidate(self, uri: str) -> None:
        """Re-check the workspace copy of ``uri``, if the workspace has one."""
        doc = self.workspace.get_text_document(uri)
        if doc is not None:
            self._validate(uri, doc.source)

    # =========================================================================
    # Document Lifecycle
    # =========================================================================

    def _did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        opened = params.text_document
        logger.info(f"Opened {opened.uri}")
        self._validate(opened.uri, opened.text)

    def _did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        logger.debug(f"Changed {params.text_document.uri}")
        self._revalidate(params.text_document.uri)

    def _did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        logger.info(f"Saved {params.text_document.uri}")
        self._revalidate(params.text_document.uri)

    def _did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        uri = params.text_document.uri
        logger.info(f"Closed {uri}")
        self._publish(uri, [])

    # =========================================================================
    # Formatting Requests
    # =========================================================================

    def _formatting(self, params: types.DocumentFormattingParams) -> Optional[list[types.TextEdit]]:
        doc = self.workspace.get_text_document(params.text_document.uri)
        if doc is None:
            return None
        return self._formatter.format_document(doc.source)

    def _range_formatting(
        self, params: types.DocumentRangeFormattingParams
    ) -> Optional[list[types.TextEdit]]:
        doc = self.workspace.get_text_document(params.text_document.uri)
        if doc is None:
            return None

        start, end = params.range.start, params.range.end
        return self._formatter.format_range(
            doc.source, start.line, start.character, end.line, end.character
        )


# =============================================================================
# Entry Point
# =============================================================================


def create_server(config: Optional[FormatConfig] = None) -> PatfmtLanguageServer:
    """Build a server with lifecycle logging attached."""
    server = PatfmtLanguageServer(config)

    @server.feature(types.INITIALIZED)
    def on_initialized(params: types.InitializedParams) -> None:  # noqa: ARG001
        logger.info(f"patfmt-lsp ready (max width {server.config.max_width})")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(params: None) -> None:  # noqa: ARG001
        logger.info("patfmt-lsp shutting down")

    return server


def main() -> None:
    """Run the language server over stdio, or over TCP with ``--tcp``."""
    parser = argparse.ArgumentParser(
        description="patfmt Language Server",
        prog="patfmt-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Listen on a TCP socket instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="TCP host (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="TCP port (default: %(default)s)",
    )
    parser.add_argument(
        "--max-width",
        type=int,
        default=FormatConfig.max_width,
        help="Maximum line width (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Log verbosity (default: %(default)s)",
    )
    args = parser.parse_args()

    level = getattr(logging, args.log_level.upper())
    for name in ("patfmt-lsp", "patfmt"):
        logging.getLogger(name).setLevel(level)

    server = create_server(FormatConfig(max_width=args.max_width))

    if args.tcp:
        logger.info(f"Listening on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Serving over stdio")
        server.start_io()


if __name__ == "__main__":
    main()
