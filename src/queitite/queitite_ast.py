"""
Defines the abstract syntax tree (AST) produced by the Queitite parser.

Node Hierarchy
--------------
ASTNode (base)
├── Stmt
│   ├── Program - ordered top-level statements
│   ├── FunctionDecl - `fn name(params) do ... end`
│   ├── VarBinding - binding introduced in a `for` initializer slot
│   ├── Block - `do ... end`, also produced by `for` desugaring
│   ├── If - condition, then-branch, optional else-branch
│   ├── While - condition and body
│   ├── Print - `print expr`
│   ├── Return - `return expr`
│   └── ExpressionStmt - expression evaluated for its effect
└── Expr
    ├── Assign - `name = value`
    ├── Logical - `and` / `or`
    ├── Binary - arithmetic, comparison, equality, `**`, `??`
    ├── Unary - prefix `!` / `-`
    ├── Call - callee with argument list
    ├── Literal - number, string, boolean, nil
    ├── Variable - name reference
    └── Grouping - parenthesized expression

Design Notes
------------
- Nodes are frozen dataclasses and every sequence field is a tuple, so a tree
  cannot be modified after the parser returns it.
- `line` is keyword-only and excluded from equality: two trees are equal when
  their shape and payloads match, wherever they came from.
- `to_dict()` gives a JSON-compatible view used by the CLI's AST dump.

Usage:
    Binary("+", Literal(1), Binary("*", Literal(2), Literal(3)))
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

ASTDict = dict[str, Any]


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""

    kind: ClassVar[str] = "node"

    line: int = field(default=0, compare=False, kw_only=True)

    def children(self) -> tuple["ASTNode", ...]:
        """Direct child nodes in source order."""
        out: list[ASTNode] = []
        for f in fields(self):
            if f.name == "line":
                continue
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                out.append(value)
            elif isinstance(value, tuple):
                out.extend(v for v in value if isinstance(v, ASTNode))
        return tuple(out)

    def walk(self) -> Iterator["ASTNode"]:
        """Pre-order traversal of this subtree."""
        yield self
        for child in self.children():
            yield from child.walk()

    def to_dict(self) -> ASTDict:
        d: ASTDict = {"kind": self.kind, "line": self.line}
        for f in fields(self):
            if f.name == "line":
                continue
            d[f.name] = _to_plain(getattr(self, f.name))
        return d


def _to_plain(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


def count_nodes(node: ASTNode) -> int:
    return sum(1 for _ in node.walk())


@dataclass(frozen=True)
class Stmt(ASTNode):
    pass


@dataclass(frozen=True)
class Expr(ASTNode):
    pass


# Expressions


@dataclass(frozen=True)
class Assign(Expr):
    kind: ClassVar[str] = "assign"

    target: str
    value: Expr


@dataclass(frozen=True)
class Logical(Expr):
    kind: ClassVar[str] = "logical"

    operator: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    kind: ClassVar[str] = "binary"

    operator: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    kind: ClassVar[str] = "unary"

    operator: str
    operand: Expr


@dataclass(frozen=True)
class Call(Expr):
    kind: ClassVar[str] = "call"

    callee: Expr
    arguments: tuple[Expr, ...] = ()


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """
    Number (int/float), string, boolean, or `None` for `nil`.

    Equality also compares the payload type, so `true`, `1` and `1.0` stay
    distinct even though Python treats them as equal values.
    """

    kind: ClassVar[str] = "literal"

    value: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Variable(Expr):
    kind: ClassVar[str] = "variable"

    name: str


@dataclass(frozen=True)
class Grouping(Expr):
    kind: ClassVar[str] = "grouping"

    expression: Expr


# Statements


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    kind: ClassVar[str] = "expression_stmt"

    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    kind: ClassVar[str] = "print"

    expression: Expr


@dataclass(frozen=True)
class Return(Stmt):
    kind: ClassVar[str] = "return"

    value: Expr


@dataclass(frozen=True)
class VarBinding(Stmt):
    kind: ClassVar[str] = "var_binding"

    name: str
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Stmt):
    kind: ClassVar[str] = "block"

    statements: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class If(Stmt):
    kind: ClassVar[str] = "if"

    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class While(Stmt):
    kind: ClassVar[str] = "while"

    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class FunctionDecl(Stmt):
    kind: ClassVar[str] = "function"

    name: str
    params: tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class Program(Stmt):
    kind: ClassVar[str] = "program"

    statements: tuple[Stmt, ...] = ()


__all__ = [
    "ASTDict",
    "ASTNode",
    "Assign",
    "Binary",
    "Block",
    "Call",
    "Expr",
    "ExpressionStmt",
    "FunctionDecl",
    "Grouping",
    "If",
    "Literal",
    "Logical",
    "Print",
    "Program",
    "Return",
    "Stmt",
    "Unary",
    "VarBinding",
    "Variable",
    "While",
    "count_nodes",
]
