"""Abstract Syntax Tree (AST) definitions for the Ember language.

The AST classes defined in this module represent the syntactic structure
of parsed Ember programs. Nodes are frozen dataclasses holding tuples
rather than lists: a tree is built once by the parser and then shared,
read-only, by every evaluation of the same program text (including every
iteration of a loop body).

Nodes come in two families. :class:`Stmt` nodes are executed for their
effect; :class:`Expr` nodes are evaluated to a runtime value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Stmt(Node):
    pass


@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Stmt, ...]


# Statements


@dataclass(frozen=True)
class Let(Stmt):
    name: str
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Function(Stmt):
    name: str
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class ClassDecl(Stmt):
    name: str
    methods: Tuple[Function, ...]  # in declaration order


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expr: Expr


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class Print(Stmt):
    args: Tuple[Expr, ...]  # format string first


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Return(Stmt):
    value: Optional[Expr]


# Expressions


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class Assign(Expr):
    name: str
    value: Expr


@dataclass(frozen=True)
class Set(Expr):
    target: Expr
    name: str
    value: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    right: Expr
    op: str  # '&&' or '||'


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    right: Expr
    op: str


@dataclass(frozen=True)
class Unary(Expr):
    op: str
    operand: Expr


@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # int, str, bool or None


@dataclass(frozen=True)
class Grouping(Expr):
    expr: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: Tuple[Expr, ...]


@dataclass(frozen=True)
class Get(Expr):
    target: Expr
    name: str


@dataclass(frozen=True)
class This(Expr):
    pass
