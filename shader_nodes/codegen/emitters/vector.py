# Vector Operation Emitters
# Handles: DOT, CROSS, LENGTH, DISTANCE, NORMALIZE, REFLECT


def emit_dot(op, ctx):
    return ctx.call('dot', op.inputs[0], op.inputs[1])


def emit_cross(op, ctx):
    return ctx.call('cross', op.inputs[0], op.inputs[1])


def emit_length(op, ctx):
    return ctx.call('length', op.inputs[0])


def emit_distance(op, ctx):
    return ctx.call('distance', op.inputs[0], op.inputs[1])


def emit_normalize(op, ctx):
    return ctx.call('normalize', op.inputs[0])


def emit_reflect(op, ctx):
    """reflect(incident, normal)"""
    return ctx.call('reflect', op.inputs[0], op.inputs[1])
