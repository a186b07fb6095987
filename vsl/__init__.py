"""
VSL Front End Package

Lexer and parser for VSL, a small imperative expression language. Source text
is turned into an abstract syntax tree, one top-level unit at a time, and each
unit is handed to a pluggable code generator.

Architecture:
    vsl/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    ├── driver.py        # Top-level loop and code generator interface
    └── cli.py           # vslc command-line front end

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import Parser, ParseError, parse_string, parse_file
from .driver import Driver, CodeGenerator, ParseOnlyBackend, CollectingBackend

__all__ = [
    # Core classes
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "Driver",
    "CodeGenerator",
    "ParseOnlyBackend",
    "CollectingBackend",

    # Convenience functions
    "parse_string",
    "parse_file",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
