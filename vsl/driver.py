"""
Top-level driver for VSL.

Reads top-level units (function definitions and bare expressions) one at a
time and hands each to a code generator as soon as it is parsed. The code
generator is a collaborator: this package ships only backends that record
or report what was parsed.

Author: xwest
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Any, List, Optional, TextIO, Union

from .lexer.errors import LexerError
from .lexer.tokens import TokenType
from .parser.ast_nodes import Function, Program
from .parser.errors import ParseError, create_nesting_error
from .parser.parser import Parser


logger = logging.getLogger(__name__)

Diagnosable = Union[ParseError, LexerError]


class CodeGenerator(ABC):
    """Interface of the code generation stage fed by the driver."""

    @abstractmethod
    def compile(self, function: Function) -> Any:
        """Translate a parsed function into a compiled unit."""

    @abstractmethod
    def evaluate(self, compiled: Any) -> Any:
        """Run a compiled anonymous top-level expression and return its value."""


class ParseOnlyBackend(CodeGenerator):
    """Backend that only reports each parsed unit."""

    def compile(self, function: Function) -> Function:
        if function.is_anonymous:
            logger.info("Parsed a top-level expression.")
        else:
            logger.info("Parsed a function definition.")
        return function

    def evaluate(self, compiled: Function) -> None:
        return None


class CollectingBackend(ParseOnlyBackend):
    """Backend that keeps every parsed unit, in input order."""

    def __init__(self):
        self.functions: List[Function] = []

    def compile(self, function: Function) -> Function:
        self.functions.append(function)
        return super().compile(function)

    @property
    def program(self) -> Program:
        return Program(list(self.functions))


class Driver:
    """
    Top-level loop over a token stream.

    ``;`` between units is skipped, ``FUNC`` starts a definition and anything
    else is parsed as an anonymous top-level expression which is evaluated
    right after compilation. On any error the driver reports it and discards
    exactly one token before trying again, so parsing always terminates but
    badly malformed input may produce follow-on errors. Input nested deeper than
    the interpreter stack allows is reported once and the rest of the unit,
    up to the next ``;``, is dropped.
    """

    def __init__(self, parser: Parser, backend: Optional[CodeGenerator] = None,
                 prompt: Optional[str] = None, prompt_stream: Optional[TextIO] = None):
        """
        Initialize the driver.

        Args:
            parser: Unprimed parser to read units from
            backend: Code generator receiving each unit; defaults to ``ParseOnlyBackend``
            prompt: Text written before reading each unit (e.g. ``"ready> "``)
            prompt_stream: Where the prompt is written; defaults to stderr
        """
        self.parser = parser
        self.backend = backend if backend is not None else ParseOnlyBackend()
        self.prompt = prompt
        self.prompt_stream = prompt_stream
        self.errors: List[Diagnosable] = []
        self.results: List[Any] = []

    def run(self) -> int:
        """
        Parse the whole input.

        Returns:
            Number of units handed to the backend
        """
        handled = 0
        self._show_prompt()
        self._skip_token()  # prime the first token

        while True:
            token = self.parser.current
            if token.type == TokenType.EOF:
                break

            if token.is_char(";"):
                self._skip_token()
                continue

            if token.type == TokenType.FUNC:
                handled += self._handle(self.parser.parse_definition)
            else:
                handled += self._handle(self.parser.parse_top_level_expr)
            self._show_prompt()

        return handled

    def _handle(self, rule) -> int:
        try:
            function = rule()
        except (ParseError, LexerError) as e:
            self._report(e)
            self._skip_token()
            return 0
        except RecursionError:
            # Re-reading the same nesting would fail again: drop the rest of the unit
            self._report(create_nesting_error(self.parser.current))
            self._skip_unit()
            return 0

        compiled = self.backend.compile(function)
        if function.is_anonymous:
            self.results.append(self.backend.evaluate(compiled))
        return 1

    def _skip_token(self):
        """Advance one token. Lexer errors are reported and skipped over."""
        while True:
            try:
                self.parser.advance()
                return
            except LexerError as e:
                self._report(e)

    def _skip_unit(self):
        """Skip tokens up to the next ';' or the end of input."""
        while not (self.parser.current.type == TokenType.EOF or self.parser.current.is_char(";")):
            self._skip_token()

    def _report(self, error: Diagnosable):
        self.errors.append(error)
        logger.error("%s", str(error).rstrip())

    def _show_prompt(self):
        if self.prompt:
            stream = self.prompt_stream if self.prompt_stream is not None else sys.stderr
            stream.write(self.prompt)
            stream.flush()
