"""Static variable resolution for Lox.

The resolver walks the syntax tree once, before anything runs, and works
out for every local variable reference how many scope frames lie between
the reference and the declaration it refers to. The scope stack it keeps
mirrors, frame for frame, the `Environment` chain the interpreter builds
at run time:

* a block opens one frame,
* a function call opens one frame for its parameters and body,
* a bound method call opens one frame holding `this` beneath that,
* a class with a superclass opens one frame holding `super` beneath that.

Anything not found in the stack is a global and is left unresolved; the
interpreter looks globals up by name so top-level functions and classes
may refer to each other before they are declared.

Problems found here raise `ResolveError` immediately, so a malformed
program never starts running.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from .ast import (
    Node, Token, Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable,
    Assign, Call, Get, Set, This, Super, ExprStmt, PrintStmt, VarDecl, Block,
    IfStmt, WhileStmt, FuncDecl, ReturnStmt, ClassDecl,
)
from .errors import ResolveError

if TYPE_CHECKING:
    from .interpreter import Interpreter

# Kinds of function body currently being resolved; methods and
# initializers count as functions, and any of them may `return`
FUNCTION_NONE = 'none'
FUNCTION = 'function'

# Kinds of class body currently being resolved
CLASS_NONE = 'none'
CLASS = 'class'
SUBCLASS = 'subclass'


class Resolver:
    def __init__(self, interpreter: Interpreter):
        self.interpreter = interpreter
        # name -> True once the declaration is complete
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FUNCTION_NONE
        self.current_class = CLASS_NONE

    def resolve(self, statements: List[Node]):
        for stmt in statements:
            self.resolve_stmt(stmt)

    # Scope bookkeeping
    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            raise ResolveError(name, 'Already a variable with this name in this scope.')
        scope[name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Node, name: Token):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
        # not found: global

    def resolve_function(self, function: FuncDecl, kind: str):
        enclosing_function = self.current_function
        self.current_function = kind
        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()
        self.current_function = enclosing_function

    # Statements
    def resolve_stmt(self, stmt: Node):
        if isinstance(stmt, Block):
            self.begin_scope()
            self.resolve(stmt.statements)
            self.end_scope()
            return
        if isinstance(stmt, VarDecl):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)
            return
        if isinstance(stmt, FuncDecl):
            # defined before the body so the function can call itself
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt, FUNCTION)
            return
        if isinstance(stmt, ClassDecl):
            self.resolve_class(stmt)
            return
        if isinstance(stmt, ExprStmt):
            self.resolve_expr(stmt.expression)
            return
        if isinstance(stmt, PrintStmt):
            self.resolve_expr(stmt.expression)
            return
        if isinstance(stmt, IfStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)
            return
        if isinstance(stmt, WhileStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)
            return
        if isinstance(stmt, ReturnStmt):
            if self.current_function == FUNCTION_NONE:
                raise ResolveError(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self.resolve_expr(stmt.value)
            return
        raise NotImplementedError(f"resolve: unexpected statement type {type(stmt)}")

    def resolve_class(self, stmt: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = CLASS
        self.declare(stmt.name)
        self.define(stmt.name)

        superclass: Optional[Variable] = stmt.superclass
        if superclass is not None:
            if superclass.name.lexeme == stmt.name.lexeme:
                raise ResolveError(superclass.name, "A class can't inherit from itself.")
            self.current_class = SUBCLASS
            self.resolve_expr(superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True
        for method in stmt.methods:
            self.resolve_function(method, FUNCTION)
        self.end_scope()

        if superclass is not None:
            self.end_scope()
        self.current_class = enclosing_class

    # Expressions
    def resolve_expr(self, expr: Node):
        if isinstance(expr, Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                raise ResolveError(expr.name, "Can't read local variable in its own initializer.")
            self.resolve_local(expr, expr.name)
            return
        if isinstance(expr, Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)
            return
        if isinstance(expr, Literal):
            return
        if isinstance(expr, Grouping):
            self.resolve_expr(expr.expression)
            return
        if isinstance(expr, UnaryOp):
            self.resolve_expr(expr.right)
            return
        if isinstance(expr, (BinaryOp, LogicalOp)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
            return
        if isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for argument in expr.arguments:
                self.resolve_expr(argument)
            return
        if isinstance(expr, Get):
            self.resolve_expr(expr.object)
            return
        if isinstance(expr, Set):
            self.resolve_expr(expr.value)
            self.resolve_expr(expr.object)
            return
        if isinstance(expr, This):
            if self.current_class == CLASS_NONE:
                raise ResolveError(expr.keyword, "Can't use 'this' outside of a class.")
            self.resolve_local(expr, expr.keyword)
            return
        if isinstance(expr, Super):
            if self.current_class == CLASS_NONE:
                raise ResolveError(expr.keyword, "Can't use 'super' outside of a class.")
            if self.current_class != SUBCLASS:
                raise ResolveError(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(expr, expr.keyword)
            return
        raise NotImplementedError(f"resolve: unexpected expression type {type(expr)}")
