import time
from dataclasses import dataclass
from typing import Any, Callable, List

from lox.types import LoxCallable


@dataclass(eq=False)
class BuiltinFunction(LoxCallable):
    """A host-provided function with a fixed arity."""
    name: str
    fn_arity: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.fn_arity

    def call(self, interpreter, arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def std_clock(args: List[Any]) -> float:
    return float(time.time())


BUILTINS = {
    'clock': BuiltinFunction('clock', 0, std_clock),
}
