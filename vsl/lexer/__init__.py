"""
VSL Lexer Package

Implements the lexical analyzer (tokenizer) for the VSL language.

Key Features:
- Streaming, one token at a time, from a string or a text stream
- Upper-case keywords matched case-sensitively
- Two-character assignment operator ':='
- Strict floating-point literals (malformed numbers are reported)
- Source location tracking for diagnostics

Author: xwest
"""

from typing import List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer
from .errors import Diagnostic, LexerError


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """Tokenize a source string, including the final EOF token."""
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """Tokenize a source file, including the final EOF token."""
    with open(filepath, "r", encoding="utf-8") as f:
        return Lexer(f, filepath).tokenize()


__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "Diagnostic",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
