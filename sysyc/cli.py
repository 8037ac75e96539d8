#!/usr/bin/env python3
"""
Command-line driver for the SysY front end.

Usage:
    sysyc program.sy
    sysyc program.sy --tokens --ast
    SYSYC_MINIMAL_UI=1 sysyc program.sy

Exit status is 0 for a clean run (warnings allowed), 1 when any lexical,
syntax or semantic error was reported and 2 when the input could not be read.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from . import __version__
from .lexer.errors import Diagnostic
from .parser.printer import format_tree
from .pipeline import compile_source

logger = logging.getLogger(__name__)

EXIT_INPUT_ERROR = 2


def is_minimal_ui() -> bool:
    """Plain output requested through SYSYC_MINIMAL_UI=1."""
    env = os.environ.get("SYSYC_MINIMAL_UI")
    if env is None:
        return False
    return env.strip().lower() in ("1", "true", "yes", "on")


def make_console(no_color: bool = False, stderr: bool = False) -> Console:
    plain = no_color or is_minimal_ui()
    return Console(stderr=stderr, no_color=plain, highlight=False)


def print_diagnostic(console: Console, diagnostic: Diagnostic):
    """Print one ``Error type <class> at line <n> : <message>`` line."""
    line = diagnostic.render()
    if is_minimal_ui():
        console.print(line, markup=False, soft_wrap=True)
        return

    color = "red" if diagnostic.is_error else "#9b59b6"
    prefix, _, rest = line.partition(" type ")
    console.print(f"[{color}]{prefix}[/{color}] type {escape(rest)}", soft_wrap=True)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysyc",
        description="Check a SysY source file: lexical, syntax and semantic analysis."
    )
    parser.add_argument("file", help="SysY source file")
    parser.add_argument("--tokens", action="store_true", help="print the token list")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree with resolved types")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    console = make_console(args.no_color)

    try:
        source = Path(args.file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        make_console(args.no_color, stderr=True).print(
            f"Error: could not read \"{args.file}\": {e}", markup=False, soft_wrap=True)
        return EXIT_INPUT_ERROR

    result = compile_source(source, args.file)

    if args.tokens:
        for token in result.tokens:
            console.print(token.describe(), markup=False, soft_wrap=True)

    if args.ast:
        console.print(
            format_tree(result.program, result.analysis.type_annotations),
            markup=False, soft_wrap=True
        )

    for diagnostic in result.diagnostics:
        print_diagnostic(console, diagnostic)

    logger.info("%s: %d diagnostics, exit code %d",
                args.file, len(result.diagnostics), result.exit_code)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
