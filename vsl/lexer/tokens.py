"""
Token definitions for the VSL lexer.

This module defines every token type the VSL lexer can produce:
- Keywords (upper-case, matched case-sensitively)
- The two-character assignment operator ``:=``
- Identifiers and floating-point number literals
- Single characters (operators and punctuation not otherwise classified)

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in VSL.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input

    # ========================================================================
    # Keywords
    # ========================================================================

    # Functions
    FUNC = auto()                   # FUNC
    RETURN = auto()                 # RETURN

    # Conditionals
    IF = auto()                     # IF
    THEN = auto()                   # THEN
    ELSE = auto()                   # ELSE
    FI = auto()                     # FI

    # Loops
    WHILE = auto()                  # WHILE
    DO = auto()                     # DO
    DONE = auto()                   # DONE
    CONTINUE = auto()               # CONTINUE

    # Other statements
    PRINT = auto()                  # PRINT
    VAR = auto()                    # VAR

    # ========================================================================
    # Operators
    # ========================================================================
    ASSIGN = auto()                 # :=

    # ========================================================================
    # Identifiers and Literals
    # ========================================================================
    IDENTIFIER = auto()             # counter, fib, x1
    NUMBER = auto()                 # 42, 3.14, .5

    # Any other single character: + - * < = ( ) , ; ...
    CHAR = auto()


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and diagnostics.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the VSL language.

    Contains the token type, lexeme (raw text), semantic value
    and source location for error reporting.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # float for NUMBER, text for IDENTIFIER, char for CHAR
    location: SourceLocation        # Source location

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    def is_char(self, char: str) -> bool:
        """Check if this token is the single character ``char``."""
        return self.type == TokenType.CHAR and self.value == char

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORD_TYPES

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER

    def describe(self) -> str:
        """Human-readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.CHAR:
            return f"'{self.value}'"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.lexeme}'"
        if self.type == TokenType.NUMBER:
            return f"number '{self.lexeme}'"
        if self.is_keyword:
            return f"keyword '{self.lexeme}'"
        return f"'{self.lexeme}'"


# Reserved words, matched case-sensitively
KEYWORDS = {
    "FUNC": TokenType.FUNC,
    "RETURN": TokenType.RETURN,
    "IF": TokenType.IF,
    "THEN": TokenType.THEN,
    "ELSE": TokenType.ELSE,
    "FI": TokenType.FI,
    "DO": TokenType.DO,
    "WHILE": TokenType.WHILE,
    "DONE": TokenType.DONE,
    "CONTINUE": TokenType.CONTINUE,
    "PRINT": TokenType.PRINT,
    "VAR": TokenType.VAR,
}

KEYWORD_TYPES = frozenset(KEYWORDS.values())

# Spelling of each keyword token type, used when reporting a missing keyword
KEYWORD_SPELLINGS = {token_type: word for word, token_type in KEYWORDS.items()}

ASSIGN_LEXEME = ":="
