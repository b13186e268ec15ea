# Texture Operation Emitters
# Handles: CHECKER, SIMPLEX_NOISE, SAMPLE, TRIPLANAR


def emit_checker(op, ctx):
    return ctx.call('checker', op.inputs[0])


def emit_simplex_noise(op, ctx):
    """simplexNoise2D is not part of three/tsl; its Fn is emitted from shader_lib."""
    uv = ctx.param(op.inputs[0])
    return f"{ctx.require('simplexNoise2D')}({uv})"


def emit_sample(op, ctx):
    """texture(map, uv)"""
    return ctx.call('texture', op.inputs[0], op.inputs[1])


def emit_triplanar(op, ctx):
    """triplanarTexture(texture(map) x3, scale, position, normal)"""
    tex = f"{ctx.use('texture')}({ctx.param(op.inputs[0])})"
    scale, position, normal = (ctx.param(i) for i in op.inputs[1:4])
    return f"{ctx.use('triplanarTexture')}({tex}, {tex}, {tex}, {scale}, {position}, {normal})"
