"""
VSL Lexical Analyzer

Converts a stream of source characters into VSL tokens, one token at a
time. The lexer keeps a single retained character between calls, so it can
read from an interactive stream without buffering the whole input.

Author: xwest
"""

import io
import logging
import string
from typing import Iterator, List, TextIO, Union

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, ASSIGN_LEXEME
from .errors import LexerError, create_invalid_number_error


logger = logging.getLogger(__name__)

# ASCII only: identifiers are [a-zA-Z][a-zA-Z0-9]*
IDENTIFIER_START = frozenset(string.ascii_letters)
IDENTIFIER_CONTINUE = frozenset(string.ascii_letters + string.digits)
NUMBER_CHARS = frozenset(string.digits + ".")


class Lexer:
    """
    VSL lexical analyzer.

    Call ``next_token()`` repeatedly; once the input is exhausted every
    further call returns an EOF token.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<stdin>"):
        """
        Initialize the lexer.

        Args:
            source: Source code string, or a text stream supporting ``read(1)``
            filename: Name of the source for error reporting
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.stream = source
        self.filename = filename
        self.errors: List[LexerError] = []

        # Position of last_char. The initial blank sits just before the input.
        self.line = 1
        self.column = 0
        self.offset = -1
        self.last_char = " "

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            LexerError: If a malformed numeric literal was consumed
        """
        token = self._scan()
        logger.debug("%s at %s", token, token.location)
        return token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the remaining input, including the final EOF token.

        Malformed literals are recorded in ``self.errors`` and skipped so that
        every problem in the input is collected; the first one is raised once
        the input is exhausted.
        """
        tokens = []
        while True:
            try:
                token = self.next_token()
            except LexerError as e:
                self.errors.append(e)
                continue
            tokens.append(token)
            if token.type == TokenType.EOF:
                break

        if self.errors:
            raise self.errors[0]

        return tokens

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def _scan(self) -> Token:
        while self.last_char.isspace():
            self._advance()

        location = self._location()
        char = self.last_char

        if char in IDENTIFIER_START:
            return self._scan_identifier_or_keyword(location)

        # ':' only forms a token together with a following '='
        if char == ":":
            self._advance()
            if self.last_char == "=":
                self._advance()
                return Token(TokenType.ASSIGN, ASSIGN_LEXEME, None, location)
            return Token(TokenType.CHAR, char, char, location)

        if char in NUMBER_CHARS:
            return self._scan_number(location)

        if char == "":
            return Token(TokenType.EOF, "", None, location)

        self._advance()
        return Token(TokenType.CHAR, char, char, location)

    def _scan_identifier_or_keyword(self, location: SourceLocation) -> Token:
        chars = []
        while self.last_char in IDENTIFIER_CONTINUE:
            chars.append(self.last_char)
            self._advance()

        lexeme = "".join(chars)
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None
        return Token(token_type, lexeme, value, location)

    def _scan_number(self, location: SourceLocation) -> Token:
        chars = []
        while self.last_char in NUMBER_CHARS:
            chars.append(self.last_char)
            self._advance()

        lexeme = "".join(chars)

        # The whole run is consumed before reporting, so the caller can resume
        # after the bad literal.
        if lexeme.count(".") > 1:
            raise create_invalid_number_error(
                lexeme, location, "A number may contain at most one decimal point."
            )
        try:
            value = float(lexeme)
        except ValueError:
            raise create_invalid_number_error(
                lexeme, location, "A number needs at least one digit."
            )

        return Token(TokenType.NUMBER, lexeme, value, location)

    def _advance(self):
        """Read the next character into ``last_char``."""
        if self.last_char == "":
            return
        if self.last_char == "\n":
            self.line += 1
            self.column = 0
        self.last_char = self.stream.read(1)
        self.offset += 1
        self.column += 1

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.offset)
