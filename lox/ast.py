"""Abstract Syntax Tree (AST) definitions for the Lox language.

The AST classes defined in this module represent the syntactic structure
of parsed Lox programs. They are consumed by the resolver and the
interpreter. Expression and statement kinds form two closed sets, listed
in the `Expr` and `Stmt` unions at the bottom of the module.

Nodes that refer to a variable (`Variable`, `Assign`, `This`, `Super`)
carry a `uid` that is unique for the life of the process. The resolver
records scope distances keyed by that id, so two structurally equal
references at different places in the tree never share a distance.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

_node_ids = itertools.count(1)


def _next_id() -> int:
    return next(_node_ids)


@dataclass
class Token:
    type: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return self.lexeme


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################

@dataclass
class Literal(Node):
    value: Any  # float, str, bool or None


@dataclass
class Grouping(Node):
    expression: Node


@dataclass
class UnaryOp(Node):
    operator: Token
    right: Node


@dataclass
class BinaryOp(Node):
    left: Node
    operator: Token
    right: Node


@dataclass
class LogicalOp(Node):
    left: Node
    operator: Token  # 'or' / 'and'
    right: Node


@dataclass
class Variable(Node):
    name: Token
    uid: int = field(default_factory=_next_id, compare=False, repr=False)


@dataclass
class Assign(Node):
    name: Token
    value: Node
    uid: int = field(default_factory=_next_id, compare=False, repr=False)


@dataclass
class Call(Node):
    callee: Node
    paren: Token  # closing parenthesis, used for error locations
    arguments: List[Node]


@dataclass
class Get(Node):
    object: Node
    name: Token


@dataclass
class Set(Node):
    object: Node
    name: Token
    value: Node


@dataclass
class This(Node):
    keyword: Token
    uid: int = field(default_factory=_next_id, compare=False, repr=False)


@dataclass
class Super(Node):
    keyword: Token
    method: Token
    uid: int = field(default_factory=_next_id, compare=False, repr=False)


###############################################################################
# Statements
###############################################################################

@dataclass
class ExprStmt(Node):
    expression: Node


@dataclass
class PrintStmt(Node):
    expression: Node


@dataclass
class VarDecl(Node):
    name: Token
    initializer: Optional[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Node


@dataclass
class FuncDecl(Node):
    name: Token
    params: List[Token]
    body: List[Node]


@dataclass
class ReturnStmt(Node):
    keyword: Token
    value: Optional[Node]


@dataclass
class ClassDecl(Node):
    name: Token
    superclass: Optional[Variable]
    methods: List[FuncDecl]


Expr = Union[
    Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable, Assign,
    Call, Get, Set, This, Super,
]

Stmt = Union[
    ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt, FuncDecl,
    ReturnStmt, ClassDecl,
]
