"""
Abstract Syntax Tree (AST) node definitions for the Monkey language.

Nodes are created once by the parser and never mutated afterwards. Every
node keeps the token that introduced it and renders a canonical string
form, in which every prefix and infix expression is fully parenthesized.
The canonical form is what the parser tests compare against:

    a + b * c      ->  (a + (b * c))
    -(5 + 5)       ->  (-(5 + 5))
    a * [1, 2][b]  ->  (a * ([1, 2][b]))
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Any
from abc import ABC, abstractmethod
from .tokens import Token, SourceSpan


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode(ABC):
    """Base class for all AST nodes."""
    token: Token  # The token that introduced this node

    def token_literal(self) -> str:
        """Literal text of the node's defining token, used in diagnostics."""
        return self.token.literal

    @property
    def span(self) -> SourceSpan:
        return self.token.span

    @abstractmethod
    def __str__(self) -> str:
        """Canonical source reconstruction."""


@dataclass(frozen=True)
class Statement(AstNode):
    """Base class for all statements."""


@dataclass(frozen=True)
class Expression(AstNode):
    """Base class for all expressions."""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    """A variable or function name reference."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """An array literal (e.g., [1, 2 * 2, x])."""
    elements: List[Expression] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class HashLiteral(Expression):
    """A hash literal (e.g., {"one": 1, true: 2}).

    Pairs are kept in source order so that evaluation order is
    deterministic.
    """
    pairs: List[Tuple[Expression, Expression]] = field(default_factory=list)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """A unary operation (e.g., !ok, -n)."""
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """A binary operation (e.g., a + b, x == y)."""
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    """An if-else expression; the alternative is optional."""
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """A function literal (e.g., fn(x, y) { x + y; })."""
    parameters: List[Identifier]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """A call (e.g., add(1, 2) or fn(x) { x }(5))."""
    function: Expression  # Identifier or FunctionLiteral, or any expression
    arguments: List[Expression] = field(default_factory=list)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class IndexExpression(Expression):
    """Index access (e.g., arr[0], h["key"])."""
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class LetStatement(Statement):
    """A binding (e.g., let x = 5;)."""
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """A return statement (e.g., return x;)."""
    return_value: Expression

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """An expression used as a statement."""
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """A brace-delimited block of statements."""
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program(AstNode):
    """The root node: an ordered sequence of statements."""
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


# =============================================================================
# Debug Helpers
# =============================================================================

def dump_ast(node: AstNode, indent: int = 0) -> str:
    """Render an indented structural dump of an AST node."""
    lines: List[str] = []
    _dump_into(lines, node, indent)
    return "\n".join(lines)


def _dump_into(lines: List[str], value: Any, indent: int, label: str = "") -> None:
    pad = "  " * indent
    prefix = f"{label}: " if label else ""
    if isinstance(value, AstNode):
        lines.append(f"{pad}{prefix}{value.__class__.__name__}")
        for name, child in value.__dict__.items():
            if name == "token":
                continue
            _dump_into(lines, child, indent + 1, name)
    elif isinstance(value, (list, tuple)):
        lines.append(f"{pad}{prefix}[")
        for item in value:
            _dump_into(lines, item, indent + 1)
        lines.append(f"{pad}]")
    else:
        lines.append(f"{pad}{prefix}{value!r}")


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(dump_ast(node))
