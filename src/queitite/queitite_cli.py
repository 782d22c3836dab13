"""
Queitite CLI Entrypoint.

This module provides the command-line interface for checking Queitite source code.
It lexes and parses a program, reports syntax diagnostics, and can dump the token
stream or the AST for inspection.

Features:
    - Read source from `.qt` files or inline strings.
    - Lex and parse with statement-level error recovery (or stop at the first error).
    - Dump tokens and/or the AST (as JSON) to stdout.
    - Report diagnostics on stderr and exit non-zero when any were found.

Example usage:
    queitite hello.qt
    queitite -s "print 1 + 2" --dump-ast
    queitite hello.qt --dump-tokens
    queitite hello.qt --verbose

Functions:
    run_queitite(source: str, is_string: bool = False, dump_tokens: bool = False,
                 dump_ast: bool = False, fail_fast: bool = False) -> int:
        Executes the pipeline (lex → parse → dump/report) and returns an exit status.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes `run_queitite`.
"""

import argparse
import json
import logging
import sys

from queitite.queitite_errors import LexError, ParseError
from queitite.queitite_lexer import tokenize
from queitite.queitite_parser import Parser

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".qt"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


def run_queitite(
    source: str,
    is_string: bool = False,
    dump_tokens: bool = False,
    dump_ast: bool = False,
    fail_fast: bool = False,
) -> int:
    """
    Run the Queitite front end: lex, parse, and report.

    Args:
        source (str): The Queitite source code or path to a `.qt` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        dump_tokens (bool): Print the token stream; stops there unless `dump_ast` is also set.
        dump_ast (bool): Print the parsed program as JSON.
        fail_fast (bool): Stop at the first syntax error instead of recovering.

    Returns:
        int: 0 when the program parsed cleanly, 1 when any error was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.qt'.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    # 1. Read source
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    try:
        tokens = tokenize(source)
    except LexError as e:
        print(f"[line {e.line}] error: {e.message} (col {e.col})", file=sys.stderr)
        return 1
    logger.debug("lexed %d tokens", len(tokens))

    if dump_tokens:
        print("== TOKENS ==")
        for tok in tokens:
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value!r}")
        if not dump_ast:
            return 0

    # 3. Parsing
    parser = Parser(tokens, fail_fast=fail_fast)
    try:
        program = parser.parse()
    except ParseError:
        program = None

    # 4. Report
    for diagnostic in parser.diagnostics:
        print(diagnostic.format(), file=sys.stderr)
    if parser.reporter.had_error:
        print(
            f"parser exited with {parser.reporter.error_count} errors",
            file=sys.stderr,
        )
        return 1

    if dump_ast and program is not None:
        print("== AST ==")
        print(json.dumps(program.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Queitite CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--dump-tokens`: Print the token stream.
        - `--dump-ast`: Print the AST as JSON.
        - `--verbose`: Dump tokens and AST, and enable debug logging.
        - `--fail-fast`: Stop at the first syntax error.
    """
    parser = argparse.ArgumentParser(prog="queitite", description="queitite syntax checker")
    parser.add_argument("source", help="Program file, or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    dumps = parser.add_mutually_exclusive_group()
    dumps.add_argument(
        "--dump-tokens", action="store_true", help="Dump token stream and exit"
    )
    dumps.add_argument("--dump-ast", action="store_true", help="Dump AST and exit")
    dumps.add_argument(
        "--verbose", action="store_true", help="Dump tokens and AST with debug logging"
    )
    parser.add_argument(
        "--fail-fast", action="store_true", help="Stop at the first syntax error"
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return run_queitite(
            source=args.source,
            is_string=args.string,
            dump_tokens=args.dump_tokens or args.verbose,
            dump_ast=args.dump_ast or args.verbose,
            fail_fast=args.fail_fast,
        )
    except (OSError, ValueError) as e:
        print(f"queitite: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
