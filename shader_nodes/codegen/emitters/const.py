# Constant formatting utilities for TSL code generation

import math

from ...ir.expr import format_color
from ...ir.types import DataType


def format_number(value) -> str:
    """Python float -> JS number literal."""
    value = float(value)
    if not math.isfinite(value):
        return "0.0"
    return repr(value)


def format_constant(value, dtype: DataType, use) -> str:
    """
    Format a coerced value as a TSL literal node.

    `use` records the constructor import ('float', 'vec3', 'color', ...).
    """
    if value is None:
        return f"{use('float')}(0.0)"

    if dtype == DataType.BOOL:
        return f"{use('bool')}({'true' if value else 'false'})"
    if dtype == DataType.COLOR:
        return f"{use('color')}('{format_color(value)}')"
    if dtype.is_vector():
        comps = ', '.join(format_number(v) for v in value)
        return f"{use(str(dtype))}({comps})"
    return f"{use('float')}({format_number(value)})"
