# Depth Operation Emitters
# Handles: VIEWPORT_DEPTH_TEXTURE, LINEAR_DEPTH, depth <-> view Z conversions

from ...ir.ops import OpCode

DEPTH_FUNCTIONS = {
    OpCode.VIEWPORT_DEPTH_TEXTURE: 'viewportDepthTexture',
    OpCode.LINEAR_DEPTH: 'linearDepth',
    OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z: 'perspectiveDepthToViewZ',
    OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z: 'logarithmicDepthToViewZ',
    OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH: 'viewZToOrthographicDepth',
}


def emit_depth(op, ctx):
    return ctx.call(DEPTH_FUNCTIONS[op.opcode], *op.inputs)
