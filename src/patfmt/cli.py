"""
patfmt Command-Line Interface.

Usage:
    patfmt fmt input.pat                # Print formatted output
    patfmt fmt --write patterns/        # Format files in place
    patfmt fmt --check .                # Exit 1 if anything would change
    patfmt fmt --diff --max-width 60 .
    patfmt tokens input.pat             # Show tokens (debug)
    patfmt ast input.pat                # Show syntax tree (debug)
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from patfmt import __version__
from patfmt.config import CONFIGURABLE_LIST_TACTICS, FormatConfig, ListTactic
from patfmt.formatter import check_format, format_source_report, get_diff
from patfmt.syntax.lexer import Lexer
from patfmt.syntax.parser import Parser
from patfmt.utils.errors import PatfmtError


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """Terminal colour escapes; emptied when output is not a terminal."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.RESET = ""


def _init_colors() -> None:
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Build the `patfmt` argument parser."""
    parser = argparse.ArgumentParser(
        prog="patfmt",
        description="patfmt - a width-aware formatter for Rust-style patterns",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fmt_parser = subparsers.add_parser(
        "fmt",
        aliases=["format"],
        help="Format pattern files",
    )
    fmt_parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="A .pat file, or a directory searched recursively (default: .)",
    )
    mode = fmt_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if any file would change",
    )
    mode.add_argument(
        "--diff",
        action="store_true",
        help="Print a unified diff instead of the formatted text",
    )
    mode.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Rewrite files in place instead of printing them",
    )
    fmt_parser.add_argument(
        "--max-width",
        type=_positive_int,
        default=FormatConfig.max_width,
        help="Maximum line width (default: %(default)s)",
    )
    fmt_parser.add_argument(
        "--tab-spaces",
        type=_positive_int,
        default=FormatConfig.tab_spaces,
        help="Columns per indentation level (default: %(default)s)",
    )
    fmt_parser.add_argument(
        "--hard-tabs",
        action="store_true",
        help="Indent continuation lines with tabs",
    )
    fmt_parser.add_argument(
        "--list-tactic",
        choices=[tactic.value for tactic in CONFIGURABLE_LIST_TACTICS],
        default=FormatConfig.list_tactic.value,
        help="Layout of comma-separated lists (default: %(default)s)",
    )
    fmt_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log patterns that had to be kept as written",
    )

    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show tokens for a pattern file (debug)",
    )
    tokens_parser.add_argument(
        "input",
        type=Path,
        help="Input pattern file (.pat)",
    )

    ast_parser = subparsers.add_parser(
        "ast",
        help="Show syntax tree for a pattern file (debug)",
    )
    ast_parser.add_argument(
        "input",
        type=Path,
        help="Input pattern file (.pat)",
    )

    return parser


def _config_from_args(args: argparse.Namespace) -> FormatConfig:
    return FormatConfig(
        max_width=args.max_width,
        tab_spaces=args.tab_spaces,
        hard_tabs=args.hard_tabs,
        list_tactic=ListTactic(args.list_tactic),
    )


def cmd_fmt(args: argparse.Namespace) -> int:
    """Handle the fmt command - format pattern files."""
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    config = _config_from_args(args)

    input_path = args.input or Path(".")

    if input_path.is_file():
        files = [input_path]
    elif input_path.is_dir():
        files = sorted(input_path.rglob("*.pat"))
        if not files:
            print(f"No .pat files found in {input_path}", file=sys.stderr)
            return 0
    else:
        print(f"Error: Path not found: {input_path}", file=sys.stderr)
        return 1

    exit_code = 0

    for filepath in files:
        try:
            source = filepath.read_text(encoding="utf-8")

            if args.check:
                if not check_format(source, config):
                    print(f"{Colors.YELLOW}Would reformat:{Colors.RESET} {filepath}")
                    exit_code = 1
            elif args.diff:
                diff = get_diff(source, config, filename=str(filepath))
                if diff:
                    print(diff)
                    exit_code = 1
            else:
                result = format_source_report(source, config, str(filepath))
                if result.unformatted:
                    count = len(result.unformatted)
                    print(
                        f"{Colors.YELLOW}Kept {count} pattern(s) as written in {filepath}"
                        f" (too wide for {config.max_width} columns){Colors.RESET}",
                        file=sys.stderr,
                    )
                if args.write:
                    if source != result.text:
                        filepath.write_text(result.text, encoding="utf-8")
                        print(f"{Colors.GREEN}Formatted:{Colors.RESET} {filepath}")
                else:
                    sys.stdout.write(result.text)

        except (PatfmtError, OSError) as e:
            print(f"{Colors.RED}Error formatting {filepath}:{Colors.RESET} {e}", file=sys.stderr)
            exit_code = 1

    if args.check and exit_code == 0:
        print(f"{Colors.GREEN}All files are properly formatted{Colors.RESET}")

    return exit_code


def _run_debug(input_path: Path, show: Callable[[str, str], None]) -> int:
    """Read ``input_path`` and hand its text to ``show``; lexer/parser errors exit 1."""
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    try:
        show(input_path.read_text(encoding="utf-8"), str(input_path))
    except PatfmtError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1
    return 0


def cmd_tokens(args: argparse.Namespace) -> int:
    """Print every token of a pattern file."""

    def show(source: str, filename: str) -> None:
        for token in Lexer(source, filename).tokenize():
            print(token)

    return _run_debug(args.input, show)


def cmd_ast(args: argparse.Namespace) -> int:
    """Print the syntax tree of a pattern file."""

    def show(source: str, filename: str) -> None:
        tokens = Lexer(source, filename).tokenize()
        _print_node(Parser(tokens, source, filename).parse())

    return _run_debug(args.input, show)


def _print_node(node: Any, indent: int = 0) -> None:
    """Pretty print a syntax tree node."""
    prefix = "  " * indent
    node_name = type(node).__name__

    attrs = {
        field.name: getattr(node, field.name)
        for field in dataclasses.fields(node)
        if field.name != "span"
    }

    if not attrs:
        print(f"{prefix}{node_name}")
        return

    print(f"{prefix}{node_name}:")
    for key, value in attrs.items():
        if dataclasses.is_dataclass(value):
            print(f"{prefix}  {key}:")
            _print_node(value, indent + 2)
        elif isinstance(value, tuple) and value and dataclasses.is_dataclass(value[0]):
            print(f"{prefix}  {key}: [")
            for item in value:
                _print_node(item, indent + 2)
            print(f"{prefix}  ]")
        else:
            print(f"{prefix}  {key}: {value!r}")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point of the `patfmt` command; returns the exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "fmt": cmd_fmt,
        "format": cmd_fmt,
        "tokens": cmd_tokens,
        "ast": cmd_ast,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
