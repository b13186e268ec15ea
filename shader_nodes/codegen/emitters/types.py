# Type Operation Emitters
# Handles: CONSTRUCT, SWIZZLE


def emit_construct(op, ctx):
    """vec2(x, y) / vec3(x, y, z) / vec4(x, y, z, w)"""
    dtype = op.attrs['type']
    return ctx.call(str(dtype), *op.inputs)


def emit_swizzle(op, ctx):
    mask = op.attrs.get('mask', 'x')
    return f"{ctx.param(op.inputs[0])}.{mask}"
