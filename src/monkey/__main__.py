#!/usr/bin/env python3
"""
CLI for the Monkey interpreter.

Usage:
    python -m monkey [repl]
    python -m monkey run FILE.monkey
    python -m monkey tokens FILE.monkey
    python -m monkey parse FILE.monkey [--tree | --json]

Global options:
    -v, --verbose     Increase log verbosity (repeatable)
    --config FILE     YAML settings file (default: $MONKEY_CONFIG)

Examples:
    # Start the console
    python -m monkey

    # Run a script; exit status is 1 on parse or runtime errors
    python -m monkey run examples/fib.monkey

    # Show the canonical, fully parenthesized form of a program
    python -m monkey parse examples/fib.monkey

    # Report parse diagnostics as JSON for editor tooling
    python -m monkey parse --json examples/fib.monkey
"""

import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings, load_settings
from .errors import ConfigError, ParseError

logger = logging.getLogger("monkey")

FATAL_RECURSION = "fatal: maximum recursion depth exceeded"


def _read_source(path_str: str) -> Optional[str]:
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    return source_path.read_text(encoding="utf-8")


def _user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "friend"


def cmd_repl(args, settings: Settings) -> int:
    """Start the interactive console."""
    from .repl import start

    print(f"Hello {_user_name()}! This is the Monkey programming language!")
    print("Feel free to type in commands")
    start(sys.stdin, sys.stdout, settings)
    return 0


def cmd_run(args, settings: Settings) -> int:
    """Run a Monkey source file."""
    from .runtime import Interpreter

    source = _read_source(args.file)
    if source is None:
        return 1

    interpreter = Interpreter(settings, sys.stdout)
    try:
        result = interpreter.run(source, filename=args.file)
    except RecursionError:
        print(FATAL_RECURSION, file=sys.stderr)
        return 1

    if result.diagnostics:
        print(result.error_message, file=sys.stderr)
        return 1
    if not result.success:
        print(result.display, file=sys.stderr)
        return 1
    return 0


def cmd_tokens(args, settings: Settings) -> int:
    """Print the token stream of a file, one token per line."""
    from .lexer import Lexer

    source = _read_source(args.file)
    if source is None:
        return 1

    for token in Lexer(source, args.file):
        print(f"{token.span.start.line}:{token.span.start.column}\t{token}")
    return 0


def cmd_parse(args, settings: Settings) -> int:
    """Parse a file and print its canonical form, AST dump or diagnostics as JSON."""
    from .parser import parse
    from .ast import dump_ast

    source = _read_source(args.file)
    if source is None:
        return 1

    if args.json:
        return _print_json_diagnostics(source, args.file, settings)

    try:
        program = parse(source, filename=args.file, max_errors=settings.max_errors)
    except ParseError as e:
        for diag in e.diagnostics:
            print(diag.format(settings.show_source), file=sys.stderr)
        print(f"{len(e.diagnostics)} error(s)", file=sys.stderr)
        return 1

    if args.tree:
        print(dump_ast(program))
    else:
        print(program)
    return 0


def _print_json_diagnostics(source: str, filename: str, settings: Settings) -> int:
    from .lexer import Lexer
    from .parser import Parser

    parser = Parser(Lexer(source, filename), settings.max_errors)
    parser.parse_program()
    print(json.dumps(parser.diagnostics.to_json(), indent=2))
    return 1 if parser.diagnostics.has_errors else 0


def _configure_logging(verbose: int, settings: Settings) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m monkey',
        description='Monkey programming language interpreter',
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (repeatable)')
    parser.add_argument('--config', metavar='FILE',
                        help='YAML settings file')

    subparsers = parser.add_subparsers(dest='action')

    subparsers.add_parser('repl', help='Start the interactive console (default)')

    run_parser = subparsers.add_parser('run', help='Run a Monkey source file')
    run_parser.add_argument('file', help='Monkey source file')

    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream of a file')
    tokens_parser.add_argument('file', help='Monkey source file')

    parse_parser = subparsers.add_parser('parse', help='Print the parsed form of a file')
    parse_parser.add_argument('file', help='Monkey source file')
    output_group = parse_parser.add_mutually_exclusive_group()
    output_group.add_argument('--tree', action='store_true',
                              help='Print an indented AST dump instead of source form')
    output_group.add_argument('--json', action='store_true',
                              help='Print parse diagnostics as JSON')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e.diagnostic.message}", file=sys.stderr)
        return 1

    _configure_logging(args.verbose, settings)
    if settings.recursion_limit is not None:
        logger.debug("recursion limit set to %d", settings.recursion_limit)
        sys.setrecursionlimit(settings.recursion_limit)

    if args.action in (None, 'repl'):
        return cmd_repl(args, settings)
    elif args.action == 'run':
        return cmd_run(args, settings)
    elif args.action == 'tokens':
        return cmd_tokens(args, settings)
    elif args.action == 'parse':
        return cmd_parse(args, settings)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
