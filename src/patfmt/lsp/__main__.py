"""
Entry point for running the patfmt LSP server as a module.

Usage:
    python -m patfmt.lsp
    python -m patfmt.lsp --tcp --port 2087
"""

from patfmt.lsp.server import main

if __name__ == "__main__":
    main()
