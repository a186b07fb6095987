"""
VSL Recursive Descent Parser

Implements a recursive descent parser for VSL statements and a precedence
climbing parser for binary expressions. The parser pulls tokens from a
``Lexer`` one at a time and keeps a single token of lookahead.

Every grammar rule raises ``ParseError`` at the point where it detects a
problem; the top-level driver is the only place that recovers.

Author: xwest
"""

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    ANONYMOUS_FUNCTION_NAME, DEFAULT_BINARY_PRECEDENCE,
    Assignment, BinaryOp, Block, Call, Continue, Expression, Function, If, NumberLiteral,
    OperatorKind, Print, Program, Prototype, Return, SourceSpan,
    VariableReference, While,
)
from .errors import (
    create_missing_token_error, create_invalid_expression_error,
    create_prototype_error,
)


# Higher binds tighter. Operators without an entry end an expression.
DEFAULT_PRECEDENCE: Mapping[str, int] = MappingProxyType({
    "=": 2,
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
})

MIN_OPERATOR_PRECEDENCE = 1
MAX_OPERATOR_PRECEDENCE = 100

OPERATOR_PROTOTYPE_KINDS = {
    "unary": OperatorKind.UNARY,
    "binary": OperatorKind.BINARY,
}


class Parser:
    """
    VSL parser.

    Builds AST nodes from the token stream of a ``Lexer``. The parser must be
    primed with ``advance()`` before the first rule is called.
    """

    def __init__(self, lexer: Lexer, precedence: Optional[Mapping[str, int]] = None):
        """
        Initialize the parser.

        Args:
            lexer: Source of tokens
            precedence: Binary operator precedence table; defaults to
                ``DEFAULT_PRECEDENCE``. The table is copied and frozen.

        Raises:
            ValueError: If the precedence table is malformed
        """
        self.lexer = lexer
        self.precedence = self._freeze_precedence(
            DEFAULT_PRECEDENCE if precedence is None else precedence
        )
        self.current: Optional[Token] = None
        self.previous: Optional[Token] = None

        # Rules for the tokens that can start an expression
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.IDENTIFIER: self._parse_identifier_expr,
            TokenType.NUMBER: self._parse_number_expr,
            TokenType.IF: self._parse_if_expr,
            TokenType.WHILE: self._parse_while_expr,
            TokenType.RETURN: self._parse_return_expr,
            TokenType.PRINT: self._parse_print_expr,
            TokenType.VAR: self._parse_var_expr,
            TokenType.CONTINUE: self._parse_continue_expr,
        }

    @staticmethod
    def _freeze_precedence(table: Mapping[str, int]) -> Mapping[str, int]:
        for operator, precedence in table.items():
            if not isinstance(operator, str) or len(operator) != 1:
                raise ValueError(f"operator must be a single character, got {operator!r}")
            if isinstance(precedence, bool) or not isinstance(precedence, int):
                raise ValueError(f"precedence of {operator!r} must be an integer, got {precedence!r}")
        return MappingProxyType(dict(table))

    # Token handling

    def advance(self) -> Token:
        """Read the next token from the lexer into ``current``."""
        self.previous = self.current
        self.current = self.lexer.next_token()
        return self.current

    def token_precedence(self) -> int:
        """Precedence of the current token, or -1 if it is not a binary operator."""
        token = self.current
        if token is None or token.type != TokenType.CHAR:
            return -1
        precedence = self.precedence.get(token.value, -1)
        if precedence <= 0:
            return -1
        return precedence

    def can_start_expression(self, token: Token) -> bool:
        return token.type in self.prefix_parsers or token.is_char("(")

    def _expect(self, token_type: TokenType) -> Token:
        if self.current.type != token_type:
            raise create_missing_token_error(token_type, self.current)
        token = self.current
        self.advance()
        return token

    def _expect_char(self, char: str) -> Token:
        if not self.current.is_char(char):
            raise create_missing_token_error(f"'{char}'", self.current)
        token = self.current
        self.advance()
        return token

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Span from ``start`` to the last consumed token."""
        end = self.previous.location if self.previous is not None else start
        return SourceSpan(start, end)

    # Expressions

    def parse_expression(self) -> Expression:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        return self.parse_bin_op_rhs(0, lhs)

    def parse_primary(self) -> Expression:
        """
        primary ::= identifierexpr | numberexpr | parenexpr
                  | ifexpr | whileexpr | returnexpr | printexpr | varexpr
                  | CONTINUE
        """
        token = self.current
        if token.is_char("("):
            return self._parse_paren_expr()

        rule = self.prefix_parsers.get(token.type)
        if rule is None:
            raise create_invalid_expression_error(
                "unknown token when expecting an expression", token
            )
        return rule()

    def parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """
        binoprhs ::= (binop primary)*

        Folds operators binding at least as tightly as ``min_precedence`` into
        ``lhs``. Operators of equal precedence associate to the left.
        """
        while True:
            token_precedence = self.token_precedence()
            if token_precedence < min_precedence:
                return lhs

            operator = self.current.value
            self.advance()

            rhs = self.parse_primary()

            # A tighter operator after rhs takes rhs as its left operand
            if token_precedence < self.token_precedence():
                rhs = self.parse_bin_op_rhs(token_precedence + 1, rhs)

            lhs = BinaryOp(operator, lhs, rhs, span=SourceSpan(lhs.span.start, rhs.span.end))

    def _parse_number_expr(self) -> NumberLiteral:
        token = self.current
        self.advance()
        return NumberLiteral(token.value, span=self._span(token.location))

    def _parse_paren_expr(self) -> Expression:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # eat (
        expr = self.parse_expression()
        self._expect_char(")")
        return expr

    def _parse_identifier_expr(self) -> Expression:
        """
        identifierexpr ::= identifier
                         | identifier ':=' expression
                         | identifier '(' [expression (',' expression)*] ')'
        """
        name_token = self.current
        name = name_token.value
        self.advance()

        if self.current.type == TokenType.ASSIGN:
            self.advance()
            value = self.parse_expression()
            return Assignment(name, value, span=self._span(name_token.location))

        if not self.current.is_char("("):
            return VariableReference(name, span=self._span(name_token.location))

        self.advance()  # eat (
        args = []
        if not self.current.is_char(")"):
            while True:
                args.append(self.parse_expression())

                if self.current.is_char(")"):
                    break

                if not self.current.is_char(","):
                    raise create_missing_token_error("')' or ',' in argument list", self.current)
                self.advance()

        self.advance()  # eat )
        return Call(name, args, span=self._span(name_token.location))

    # Statements

    def _parse_body(self, *terminators: TokenType) -> Expression:
        """
        Parse expressions up to one of ``terminators``.

        Expressions may be separated by ';'. A single expression is returned
        as-is; several are grouped into a ``Block``.
        """
        expressions = []
        while True:
            while self.current.is_char(";"):
                self.advance()
            if self.current.type in terminators or self.current.type == TokenType.EOF:
                break
            expressions.append(self.parse_expression())

        if not expressions:
            raise create_invalid_expression_error("Expected an expression in body", self.current)
        if len(expressions) == 1:
            return expressions[0]
        return Block(expressions, span=SourceSpan(expressions[0].span.start, expressions[-1].span.end))

    def _parse_if_expr(self) -> If:
        """ifexpr ::= 'IF' expression 'THEN' body ['ELSE' body] 'FI'"""
        start = self.current.location
        self.advance()  # eat IF

        condition = self.parse_expression()
        self._expect(TokenType.THEN)
        then_branch = self._parse_body(TokenType.ELSE, TokenType.FI)

        else_branch = None
        if self.current.type == TokenType.ELSE:
            self.advance()
            else_branch = self._parse_body(TokenType.FI)

        self._expect(TokenType.FI)
        return If(condition, then_branch, else_branch, span=self._span(start))

    def _parse_while_expr(self) -> While:
        """whileexpr ::= 'WHILE' expression 'DO' body 'DONE'"""
        start = self.current.location
        self.advance()  # eat WHILE

        condition = self.parse_expression()
        self._expect(TokenType.DO)
        body = self._parse_body(TokenType.DONE)
        self._expect(TokenType.DONE)
        return While(condition, body, span=self._span(start))

    def _parse_return_expr(self) -> Return:
        """returnexpr ::= 'RETURN' [expression]"""
        start = self.current.location
        self.advance()  # eat RETURN

        value = None
        if self.can_start_expression(self.current):
            value = self.parse_expression()
        return Return(value, span=self._span(start))

    def _parse_print_expr(self) -> Print:
        """printexpr ::= 'PRINT' expression"""
        start = self.current.location
        self.advance()  # eat PRINT

        value = self.parse_expression()
        return Print(value, span=self._span(start))

    def _parse_var_expr(self) -> Expression:
        """varexpr ::= 'VAR' identifier [':=' expression]"""
        start = self.current.location
        self.advance()  # eat VAR

        if self.current.type != TokenType.IDENTIFIER:
            raise create_missing_token_error("variable name after 'VAR'", self.current)
        name = self.current.value
        self.advance()

        if self.current.type == TokenType.ASSIGN:
            self.advance()
            value = self.parse_expression()
            return Assignment(name, value, is_declaration=True, span=self._span(start))

        return VariableReference(name, is_declaration=True, span=self._span(start))

    def _parse_continue_expr(self) -> Continue:
        start = self.current.location
        self.advance()  # eat CONTINUE
        return Continue(span=self._span(start))

    # Functions

    def parse_prototype(self) -> Prototype:
        """
        prototype ::= identifier '(' identifier* ')'
                    | 'unary' CHAR '(' identifier ')'
                    | 'binary' CHAR [number] '(' identifier identifier ')'
        """
        name_token = self.current
        if name_token.type != TokenType.IDENTIFIER:
            raise create_prototype_error("Expected function name in prototype", name_token)
        self.advance()

        name = name_token.value
        kind = OperatorKind.NONE
        precedence = DEFAULT_BINARY_PRECEDENCE

        if name in OPERATOR_PROTOTYPE_KINDS and self.current.type == TokenType.CHAR \
                and not self.current.is_char("("):
            kind = OPERATOR_PROTOTYPE_KINDS[name]
            name += self.current.value
            self.advance()

            if kind == OperatorKind.BINARY and self.current.type == TokenType.NUMBER:
                value = self.current.value
                if not MIN_OPERATOR_PRECEDENCE <= value <= MAX_OPERATOR_PRECEDENCE:
                    raise create_prototype_error(
                        "Invalid precedence: must be 1..100", self.current
                    )
                precedence = int(value)
                self.advance()

        if not self.current.is_char("("):
            raise create_prototype_error("Expected '(' in prototype", self.current)

        params = []
        while self.advance().type == TokenType.IDENTIFIER:
            if self.current.value in params:
                raise create_prototype_error(
                    f"Duplicate parameter name '{self.current.value}' in prototype",
                    self.current
                )
            params.append(self.current.value)

        if not self.current.is_char(")"):
            raise create_prototype_error(
                "Expected ')' in prototype", self.current,
                help_text="Parameters are identifiers separated by whitespace, not commas."
            )
        self.advance()  # eat )

        if kind != OperatorKind.NONE and len(params) != kind.value:
            raise create_prototype_error(
                "Invalid number of operands for operator", name_token,
                help_text=f"A {kind.name.lower()} operator takes exactly {kind.value} operand(s), "
                          f"'{name}' declares {len(params)}."
            )

        return Prototype(name, params, kind, precedence, span=self._span(name_token.location))

    def parse_definition(self) -> Function:
        """definition ::= 'FUNC' prototype expression"""
        start = self.current.location
        self.advance()  # eat FUNC

        prototype = self.parse_prototype()
        body = self.parse_expression()
        return Function(prototype, body, span=self._span(start))

    def parse_top_level_expr(self) -> Function:
        """toplevelexpr ::= expression, wrapped in an anonymous nullary function"""
        start = self.current.location
        body = self.parse_expression()
        prototype = Prototype(ANONYMOUS_FUNCTION_NAME, [], span=self._span(start))
        return Function(prototype, body, span=self._span(start))


def parse_string(source: str, filename: str = "<string>",
                 precedence: Optional[Mapping[str, int]] = None) -> Program:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting
        precedence: Optional binary operator precedence table

    Returns:
        Program holding every top-level unit in order

    Raises:
        ParseError: If parsing fails
        LexerError: If the input holds a malformed literal
    """
    from ..driver import Driver, CollectingBackend

    backend = CollectingBackend()
    driver = Driver(Parser(Lexer(source, filename), precedence), backend)
    driver.run()

    if driver.errors:
        raise driver.errors[0]

    return backend.program


def parse_file(filepath: str, precedence: Optional[Mapping[str, int]] = None) -> Program:
    """
    Convenience function to parse a source file.

    Raises:
        ParseError: If parsing fails
        LexerError: If the input holds a malformed literal
        OSError: If the file cannot be read
    """
    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()
    return parse_string(source, filepath, precedence)
