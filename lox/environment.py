from typing import Any, Dict, Optional

from lox.ast import Token
from lox.errors import LoxRuntimeError


class Environment:
    """A single scope frame mapping names to values, chained to its parent.

    Frames are shared by reference: every closure created inside a frame keeps
    the frame alive. Parent links only point at frames that already existed
    when the child was created, so the chain never forms a cycle.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        # Redefinition in the same frame is allowed (globals, class names).
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.parent
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.parent
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            env = env.parent
        return env

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any):
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        names = ', '.join(self.values)
        if self.parent is None:
            return f"<Environment globals [{names}]>"
        return f"<Environment [{names}] -> {self.parent!r}>"
