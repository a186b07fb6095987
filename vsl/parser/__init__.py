"""
VSL Parser Package

Implements a recursive descent parser for the VSL language, with precedence
climbing for binary operator expressions.

Key Features:
- Configurable binary operator precedence table, fixed per parser instance
- Statement forms (IF, WHILE, RETURN, PRINT, VAR) usable in expression position
- Prototype parsing with unary/binary operator declarations and arity checks
- Structural AST nodes with source spans for diagnostics

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, DEFAULT_PRECEDENCE, parse_string, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "DEFAULT_PRECEDENCE",
    "parse_string",
    "parse_file",

    # AST nodes
    "Expression", "NumberLiteral", "VariableReference", "BinaryOp", "Call",
    "Assignment", "If", "While", "Return", "Print", "Block", "Continue",
    "OperatorKind", "Prototype", "Function", "Program", "SourceSpan",
    "ANONYMOUS_FUNCTION_NAME", "DEFAULT_BINARY_PRECEDENCE",
    "walk", "dump",

    # Error handling
    "ParseError",
]
