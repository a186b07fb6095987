"""
Abstract Syntax Tree node definitions for VSL.

Expressions form a closed sum type: one dataclass per variant, grouped in the
``Expression`` union. Every statement form is an expression so that all of
them compose uniformly. Nodes own their children (the AST is a strict tree)
and compare structurally; source spans are carried for diagnostics only and
take no part in equality.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union

from ..lexer.tokens import SourceLocation


ANONYMOUS_FUNCTION_NAME = "__anon_expr"
DEFAULT_BINARY_PRECEDENCE = 30


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


def _span_field():
    return field(default=None, compare=False, repr=False)


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class NumberLiteral:
    """Numeric literal; all VSL numbers are floating point."""
    value: float
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return []


@dataclass
class VariableReference:
    """Reference to a variable by name, or a ``VAR`` declaration without initializer."""
    name: str
    is_declaration: bool = False
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return []


@dataclass
class BinaryOp:
    """Binary operation on two operands."""
    operator: str
    left: "Expression"
    right: "Expression"
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return [self.left, self.right]


@dataclass
class Call:
    """Call of a function by name."""
    callee: str
    args: List["Expression"] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return list(self.args)


@dataclass
class Assignment:
    """``name := value``; ``is_declaration`` is set for ``VAR name := value``."""
    name: str
    value: "Expression"
    is_declaration: bool = False
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return [self.value]


@dataclass
class If:
    """``IF condition THEN then_branch [ELSE else_branch] FI``."""
    condition: "Expression"
    then_branch: "Expression"
    else_branch: Optional["Expression"] = None
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        children = [self.condition, self.then_branch]
        if self.else_branch is not None:
            children.append(self.else_branch)
        return children


@dataclass
class While:
    """``WHILE condition DO body DONE``."""
    condition: "Expression"
    body: "Expression"
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return [self.condition, self.body]


@dataclass
class Return:
    """``RETURN [value]``."""
    value: Optional["Expression"] = None
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return [self.value] if self.value is not None else []


@dataclass
class Print:
    """``PRINT value``."""
    value: "Expression"
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return [self.value]


@dataclass
class Block:
    """Sequence of expressions evaluated in order."""
    expressions: List["Expression"] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return list(self.expressions)


@dataclass
class Continue:
    """``CONTINUE`` inside a loop body."""
    span: Optional[SourceSpan] = _span_field()

    def children(self) -> List["Expression"]:
        return []


Expression = Union[
    NumberLiteral, VariableReference, BinaryOp, Call, Assignment,
    If, While, Return, Print, Block, Continue,
]


# ============================================================================
# Functions
# ============================================================================

class OperatorKind(Enum):
    """What a prototype declares: a plain function or an operator overload."""
    NONE = 0
    UNARY = 1
    BINARY = 2


@dataclass
class Prototype:
    """
    Function signature: name, parameter names and operator descriptor.

    ``precedence`` is only meaningful for binary operators.
    """
    name: str
    params: List[str] = field(default_factory=list)
    kind: OperatorKind = OperatorKind.NONE
    precedence: int = DEFAULT_BINARY_PRECEDENCE
    span: Optional[SourceSpan] = _span_field()

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def is_operator(self) -> bool:
        return self.kind != OperatorKind.NONE

    @property
    def is_unary_op(self) -> bool:
        return self.kind == OperatorKind.UNARY and self.arity == 1

    @property
    def is_binary_op(self) -> bool:
        return self.kind == OperatorKind.BINARY and self.arity == 2

    @property
    def operator_name(self) -> str:
        """The operator character of a unary or binary prototype."""
        if not (self.is_unary_op or self.is_binary_op):
            raise ValueError(f"prototype '{self.name}' does not declare an operator")
        return self.name[-1]


@dataclass
class Function:
    """A prototype together with its body expression."""
    prototype: Prototype
    body: Expression
    span: Optional[SourceSpan] = _span_field()

    @property
    def name(self) -> str:
        return self.prototype.name

    @property
    def is_anonymous(self) -> bool:
        return self.prototype.name == ANONYMOUS_FUNCTION_NAME


@dataclass
class Program:
    """All top-level units of a source, in input order."""
    functions: List[Function] = field(default_factory=list)

    @property
    def definitions(self) -> List[Function]:
        return [f for f in self.functions if not f.is_anonymous]

    @property
    def top_level_expressions(self) -> List[Function]:
        return [f for f in self.functions if f.is_anonymous]


# ============================================================================
# Traversal
# ============================================================================

def walk(node: Expression) -> Iterator[Expression]:
    """Yield ``node`` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def _label(node: Expression) -> str:
    if isinstance(node, NumberLiteral):
        return f"Number {_format_number(node.value)}"
    if isinstance(node, VariableReference):
        return f"{'VarDecl' if node.is_declaration else 'Variable'} {node.name}"
    if isinstance(node, BinaryOp):
        return f"BinaryOp '{node.operator}'"
    if isinstance(node, Call):
        return f"Call {node.callee}/{len(node.args)}"
    if isinstance(node, Assignment):
        return f"{'VarDecl' if node.is_declaration else 'Assign'} {node.name}"
    return type(node).__name__


def dump(node: Union[Expression, Function], indent: str = "  ") -> str:
    """Render a function or expression as an indented tree."""
    lines = []
    if isinstance(node, Function):
        proto = node.prototype
        header = f"Function {proto.name}({' '.join(proto.params)})"
        if proto.is_operator:
            header += f" {proto.kind.name.lower()}"
            if proto.kind == OperatorKind.BINARY:
                header += f" precedence={proto.precedence}"
        lines.append(header)
        stack = [(node.body, 1)]
    else:
        stack = [(node, 0)]

    # Explicit stack: long operator chains are deeper than the interpreter allows
    while stack:
        expr, depth = stack.pop()
        lines.append(f"{indent * depth}{_label(expr)}")
        stack.extend((child, depth + 1) for child in reversed(expr.children()))

    return "\n".join(lines)
