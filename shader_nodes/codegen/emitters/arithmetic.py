# Arithmetic Operation Emitters
# Handles: ADD, SUB, MUL, DIV, MOD, NEGATE
#
# Printed in method-chaining form (a.add(b)), which needs no import.


def emit_method(method, op, ctx):
    """a.method(b, ...)"""
    param = ctx.param
    receiver = param(op.inputs[0])
    args = ', '.join(param(i) for i in op.inputs[1:])
    return f"{receiver}.{method}({args})"


def emit_add(op, ctx):
    return emit_method('add', op, ctx)


def emit_sub(op, ctx):
    return emit_method('sub', op, ctx)


def emit_mul(op, ctx):
    return emit_method('mul', op, ctx)


def emit_div(op, ctx):
    return emit_method('div', op, ctx)


def emit_mod(op, ctx):
    # mod() is the floored modulo; the % operator would truncate
    return ctx.call('mod', op.inputs[0], op.inputs[1])


def emit_negate(op, ctx):
    return emit_method('negate', op, ctx)
