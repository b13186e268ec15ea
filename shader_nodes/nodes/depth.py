from ..ir.expr import Input, attr, op
from ..ir.ops import OpCode
from .base import define_node, inp, standard_op

CATEGORY = 'Depth'

# Depth buffer sample at the current fragment
_SCENE_DEPTH = op(OpCode.VIEWPORT_DEPTH_TEXTURE, attr('screenUV'))

_DEPTH_CONVERSION_INPUTS = ['depth', 'near', 'far']


DEPTH_NODES = [
    define_node('depth', 'Fragment Depth', CATEGORY, template=attr('depth')),
    define_node('viewportDepthTexture', 'Viewport Depth Tex', CATEGORY,
                [inp('uv', semantic=attr('screenUV'))],
                template=op(OpCode.VIEWPORT_DEPTH_TEXTURE, Input('uv')),
                reads_depth=True),
    define_node('viewportDepth', 'Viewport Depth', CATEGORY, template=attr('depth')),
    define_node('viewportLinearDepth', 'Viewport Linear Depth', CATEGORY,
                template=attr('viewportLinearDepth')),
    define_node('linearDepth', 'Linear Depth', CATEGORY,
                [inp('depth', semantic=_SCENE_DEPTH)],
                template=op(OpCode.LINEAR_DEPTH, Input('depth')),
                reads_depth=True),
    define_node('cameraNear', 'Camera Near', CATEGORY, template=attr('cameraNear')),
    define_node('cameraFar', 'Camera Far', CATEGORY, template=attr('cameraFar')),
    standard_op('perspectiveDepthToViewZ', 'Depth -> ViewZ (Persp)', CATEGORY,
                OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z, _DEPTH_CONVERSION_INPUTS,
                reads_depth=True),
    standard_op('logarithmicDepthToViewZ', 'Depth -> ViewZ (Log)', CATEGORY,
                OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z, _DEPTH_CONVERSION_INPUTS),
    standard_op('viewZToOrthographicDepth', 'ViewZ -> OrthoDepth', CATEGORY,
                OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH, ['viewZ', 'near', 'far']),
    standard_op('sceneViewZ', 'Scene View Z', CATEGORY,
                OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z,
                [inp('depth', semantic=_SCENE_DEPTH), 'near', 'far'],
                reads_depth=True),
]
