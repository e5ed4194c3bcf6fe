from .ast import (
    Node, Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable, Assign,
    Call, Get, Set, This, Super,
)


class AstPrinter:
    """Renders expression trees in a parenthesized prefix form, e.g. `(* (- 1) 2)`."""

    def print(self, expr: Node) -> str:
        if isinstance(expr, (BinaryOp, LogicalOp)):
            return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)
        if isinstance(expr, Grouping):
            return self.parenthesize('group', expr.expression)
        if isinstance(expr, UnaryOp):
            return self.parenthesize(expr.operator.lexeme, expr.right)
        if isinstance(expr, Literal):
            return self.literal(expr.value)
        if isinstance(expr, Variable):
            return expr.name.lexeme
        if isinstance(expr, Assign):
            return self.parenthesize('=', expr.value, prefix=[expr.name.lexeme])
        if isinstance(expr, Call):
            return self.parenthesize('call', expr.callee, *expr.arguments)
        if isinstance(expr, Get):
            return self.parenthesize('.', expr.object, suffix=[expr.name.lexeme])
        if isinstance(expr, Set):
            target = self.parenthesize('.', expr.object, suffix=[expr.name.lexeme])
            return self.parenthesize('=', expr.value, prefix=[target])
        if isinstance(expr, This):
            return 'this'
        if isinstance(expr, Super):
            return f"(super {expr.method.lexeme})"
        raise NotImplementedError(f"print: unexpected node type {type(expr)}")

    @staticmethod
    def literal(value) -> str:
        if value is None:
            return 'nil'
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, float):
            text = repr(value)
            return text[:-2] if text.endswith('.0') else text
        return str(value)

    def parenthesize(self, name: str, *exprs: Node, prefix=(), suffix=()) -> str:
        parts = [name, *prefix]
        parts.extend(self.print(expr) for expr in exprs)
        parts.extend(suffix)
        return '(' + ' '.join(parts) + ')'
