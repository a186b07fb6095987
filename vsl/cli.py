"""
Command-line front end for the VSL parser (``vslc``).

Author: xwest
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional, TextIO

from . import __version__
from .driver import Driver, ParseOnlyBackend
from .lexer.errors import LexerError
from .lexer.lexer import Lexer
from .lexer.tokens import TokenType
from .parser.ast_nodes import Function, dump
from .parser.parser import DEFAULT_PRECEDENCE, Parser


logger = logging.getLogger(__name__)

PROMPT = "ready> "


class DumpingBackend(ParseOnlyBackend):
    """Backend that prints the tree of every parsed unit."""

    def __init__(self, out: TextIO):
        self.out = out

    def compile(self, function: Function) -> Function:
        print(dump(function), file=self.out)
        return super().compile(function)


def parse_precedence(values: List[str], ap: argparse.ArgumentParser) -> Dict[str, int]:
    table = dict(DEFAULT_PRECEDENCE)
    for value in values:
        # rpartition so that '==5' overrides '='
        operator, sep, number = value.rpartition("=")
        if not sep or len(operator) != 1:
            ap.error(f"--precedence expects OP=N with a single-character OP, got {value!r}")
        try:
            table[operator] = int(number)
        except ValueError:
            ap.error(f"--precedence value for {operator!r} must be an integer, got {number!r}")
    return table


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="vslc", description="VSL lexer and parser")
    ap.add_argument("file", nargs="?", default="-",
                    help="source file to parse (default: standard input)")
    ap.add_argument("--tokens", action="store_true",
                    help="print the token stream instead of parsing")
    ap.add_argument("--dump-ast", action="store_true",
                    help="print the syntax tree of every parsed unit")
    ap.add_argument("--precedence", action="append", default=[], metavar="OP=N",
                    help="set the precedence of a binary operator (repeatable)")
    ap.add_argument("--prompt", action="store_true",
                    help=f"write '{PROMPT.strip()}' before reading each unit")
    ap.add_argument("-q", "--quiet", action="store_true",
                    help="only report errors")
    ap.add_argument("--debug", action="store_true",
                    help="log every token read")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def print_tokens(lexer: Lexer, out: TextIO) -> int:
    """Print every token; returns the number of lexer errors."""
    errors = 0
    while True:
        try:
            token = lexer.next_token()
        except LexerError as e:
            logger.error("%s", str(e).rstrip())
            errors += 1
            continue
        print(f"{token.location}\t{token}", file=out)
        if token.type == TokenType.EOF:
            return errors


def run(source: TextIO, filename: str, args: argparse.Namespace,
        precedence: Dict[str, int], out: TextIO) -> int:
    lexer = Lexer(source, filename)
    if args.tokens:
        return 1 if print_tokens(lexer, out) else 0

    backend = DumpingBackend(out) if args.dump_ast else ParseOnlyBackend()
    driver = Driver(Parser(lexer, precedence), backend,
                    prompt=PROMPT if args.prompt else None)
    driver.run()
    return 1 if driver.errors else 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)
    precedence = parse_precedence(args.precedence, ap)

    if args.debug:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, format="%(message)s", level=level)

    filename = "<stdin>" if args.file == "-" else args.file
    try:
        if args.file == "-":
            return run(sys.stdin, filename, args, precedence, sys.stdout)
        with open(args.file, "r", encoding="utf-8") as f:
            return run(f, filename, args, precedence, sys.stdout)
    except OSError as e:
        logger.error("vslc: cannot read %s: %s", filename, e.strerror or e)
        return 2
    except UnicodeDecodeError as e:
        # The lexer reads lazily, so bad bytes surface in the middle of a parse
        logger.error("vslc: cannot decode %s as UTF-8: %s", filename, e.reason)
        return 2


if __name__ == "__main__":
    sys.exit(main())
