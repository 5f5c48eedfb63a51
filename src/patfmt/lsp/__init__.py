"""
patfmt language server.

Formatting, range formatting and diagnostics for pattern documents over
the Language Server Protocol.
"""
