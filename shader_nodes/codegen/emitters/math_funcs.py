# Math Function Emitters
# Handles: Power, Trig, Rounding, Min/Max, Clamp, Remap, Interpolation


def emit_function(func_name, op, ctx):
    """Emit a TSL function call over all operands: pow, sin, floor, clamp, mix..."""
    return ctx.call(func_name, *op.inputs)


def emit_remap(op, ctx):
    """remap(in, inLow, inHigh, outLow, outHigh)"""
    return ctx.call('remap', *op.inputs[:5])


def emit_smoothstep(op, ctx):
    """smoothstep(low, high, x)"""
    low, high, x = op.inputs[:3]
    return ctx.call('smoothstep', low, high, x)


def emit_step(op, ctx):
    """step(edge, x)"""
    return ctx.call('step', op.inputs[0], op.inputs[1])
