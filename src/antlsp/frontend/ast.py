"""Syntax tree produced by :class:`antlsp.frontend.parser.Parser`."""
from __future__ import annotations

from dataclasses import dataclass, field

from .token import Token


@dataclass
class Node:
    token: Token


# -- types --------------------------------------------------------------------

@dataclass
class TypeName(Node):
    name: str


# -- expressions --------------------------------------------------------------

@dataclass
class IntLit(Node):
    value: int


@dataclass
class FloatLit(Node):
    value: float


@dataclass
class StringLit(Node):
    value: str


@dataclass
class BoolLit(Node):
    value: bool


@dataclass
class Name(Node):
    name: str


@dataclass
class Unary(Node):
    op: str
    operand: Node


@dataclass
class Binary(Node):
    op: str
    left: Node
    right: Node


@dataclass
class Call(Node):
    callee: Node
    args: list[Node] = field(default_factory=list)


# -- statements ---------------------------------------------------------------

@dataclass
class Block(Node):
    statements: list[Node] = field(default_factory=list)


@dataclass
class Let(Node):
    name: Token
    annotation: TypeName | None
    value: Node


@dataclass
class Assign(Node):
    name: Token
    value: Node


@dataclass
class Param:
    name: Token
    annotation: TypeName


@dataclass
class FuncDef(Node):
    name: Token
    params: list[Param]
    return_type: TypeName | None
    body: Block


@dataclass
class If(Node):
    condition: Node
    then: Block
    otherwise: Block | If | None = None


@dataclass
class While(Node):
    condition: Node
    body: Block


@dataclass
class Return(Node):
    value: Node | None = None


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class Program(Node):
    statements: list[Node] = field(default_factory=list)
