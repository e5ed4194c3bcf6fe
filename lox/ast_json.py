"""JSON serialization/deserialization for the Lox AST.

This module converts between Lox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding, so a syntax tree produced
by some other front end can be handed to the resolver and interpreter.

Nodes become `{"type": "<class name>", <field>: <value>, ...}`, tokens
become `{"type": ..., "lexeme": ..., "literal": ..., "line": ...}` and a
statement list is a plain list. Reference ids (`uid`) are not written;
nodes built by `ast_from_obj` receive fresh ones.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List

from .ast import (
    Token, Node, Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable,
    Assign, Call, Get, Set, This, Super, ExprStmt, PrintStmt, VarDecl, Block,
    IfStmt, WhileStmt, FuncDecl, ReturnStmt, ClassDecl,
)

NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable, Assign,
        Call, Get, Set, This, Super, ExprStmt, PrintStmt, VarDecl, Block,
        IfStmt, WhileStmt, FuncDecl, ReturnStmt, ClassDecl,
    )
}

TOKEN_KEYS = ('type', 'lexeme', 'literal', 'line')


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {"type": token.type, "lexeme": token.lexeme, "literal": token.literal, "line": token.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(o["type"], o["lexeme"], o.get("literal"), int(o.get("line", 0)))


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, float, int, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Token):
        return token_to_obj(node)
    if isinstance(node, Node) and type(node).__name__ in NODE_TYPES:
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            if f.name == 'uid':
                continue
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _is_token_obj(obj: Dict[str, Any]) -> bool:
    return set(obj) == set(TOKEN_KEYS)


def _literal_value(value: Any) -> Any:
    # JSON has no separate float type; Lox numbers are always floats
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    raise TypeError(f"Invalid literal value: {value!r}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, float, int, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    if _is_token_obj(obj):
        return token_from_obj(obj)
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    if cls is Literal:
        return Literal(_literal_value(obj.get("value")))
    kwargs = {}
    for f in fields(cls):
        if f.name == 'uid':
            continue
        kwargs[f.name] = ast_from_obj(obj.get(f.name))
    return cls(**kwargs)


def program_to_obj(statements: List[Node]) -> List[Any]:
    return [ast_to_obj(stmt) for stmt in statements]


def program_from_obj(data: Any) -> List[Node]:
    if not isinstance(data, list):
        raise TypeError("A program must be a list of statements")
    return [ast_from_obj(o) for o in data]
