from typing import Any

from lox.ast import Token


class LoxError(Exception):
    """Base class for errors reported against a Lox program."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(LoxError):
    """Raised by the front end when source text does not match the grammar."""
    def __init__(self, line: int, message: str):
        super().__init__(message)
        self.line = line

    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


class ResolveError(LoxError):
    """Static error found by the resolver; no code has run when it is raised."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token

    def __str__(self) -> str:
        return f"[line {self.token.line}] Error at '{self.token.lexeme}': {self.message}"


class LoxRuntimeError(LoxError):
    """Exception type used to propagate Lox runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.token.line}]"


class ReturnSignal:
    """Outcome of a statement that executed `return`.

    This is deliberately not an exception. `Interpreter.execute` returns it
    instead of None and every statement sequence stops as soon as it sees
    one, until the function call in progress unwraps `value`.
    """
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"
