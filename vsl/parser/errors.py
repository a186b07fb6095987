"""
Error handling for the VSL parser.

Provides error reporting with source location information and
human-readable diagnostics for syntax errors.

Author: xwest
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation, KEYWORD_SPELLINGS
from ..lexer.errors import Diagnostic, ErrorRecovery


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P002": "Expected token not found",
    "P005": "Invalid expression",
    "P008": "Malformed function prototype",
    "P010": "Unexpected end of input",
}


def describe_expected(expected: Union[TokenType, str]) -> str:
    """Spell an expected token the way it appears in source."""
    if isinstance(expected, TokenType):
        if expected in KEYWORD_SPELLINGS:
            return f"'{KEYWORD_SPELLINGS[expected]}'"
        if expected == TokenType.ASSIGN:
            return "':='"
        return expected.name.lower()
    return expected


def create_missing_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for a missing expected token (a keyword or delimiter)."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error(describe_expected(expected), found.location)

    expected_str = describe_expected(expected)
    suggestions = None
    if isinstance(expected, TokenType) and found.is_identifier:
        close = ErrorRecovery.suggest_keyword_corrections(found.lexeme)
        if KEYWORD_SPELLINGS.get(expected) in close:
            suggestions = [f"Did you mean '{KEYWORD_SPELLINGS[expected]}'?"]

    return ParseError(
        message=f"Expected {expected_str}, found {found.describe()}",
        location=found.location,
        token=found,
        code="P002",
        help_text=f"The parser expected to see {expected_str} at this position.",
        suggestions=suggestions
    )


def create_invalid_expression_error(reason: str, found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("an expression", found.location)

    return ParseError(
        message=reason,
        location=found.location,
        token=found,
        code="P005",
        help_text=f"{found.describe()} cannot start an expression.",
    )


def create_prototype_error(message: str, found: Token, help_text: Optional[str] = None) -> ParseError:
    """Create an error for a malformed function prototype."""
    return ParseError(
        message=message,
        location=found.location,
        token=found,
        code="P008",
        help_text=help_text,
    )


def create_unexpected_eof_error(expected: str, location: SourceLocation) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=location,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}"]
    )


def create_nesting_error(found: Token) -> ParseError:
    """Create an error for input nested deeper than the parser can follow."""
    return ParseError(
        message="Expression nested too deeply",
        location=found.location,
        token=found,
        code="P005",
        help_text="Reduce the nesting of parentheses and statements, or split the expression.",
    )
