from typing import Any, Callable

from ..ir.expr import Expr


class TSLContext:
    """
    Context object passed to TSL emitters.
    Lets an emitter print its operands and record what the output needs.
    """
    def __init__(self, generator: Any):
        self._generator = generator

    def param(self, value: Expr) -> str:
        """Resolve an operand to TSL source (e.g., 'add_1', 'float(0.5)', 'uv()')."""
        return self._generator.print_expr(value)

    def use(self, name: str) -> str:
        """Record an import and return the name for inline use."""
        self._generator.imports.add(name)
        return name

    def require(self, function: str) -> str:
        """Record a library function (see shader_lib) and return its name."""
        self._generator.library.add(function)
        return function

    def call(self, name: str, *operands: Expr) -> str:
        """`name(a, b, ...)` with `name` imported."""
        args = ', '.join(self.param(o) for o in operands)
        return f"{self.use(name)}({args})"


EmitterType = Callable[[Any, TSLContext], str]
