# Pattern & Texture Node Definitions
# Handles: Texture 2D, Triplanar, Checker, Simplex Noise 2D, Fresnel

from ..ir.expr import Input, Texture, attr, op
from ..ir.ops import OpCode
from .base import define_node, inp

CATEGORY = 'Patterns & Textures'

DEFAULT_TEXTURE_URL = 'https://threejs.org/examples/textures/uv_grid_opengl.jpg'


def texture_bindings(data):
    """Binds the `map` placeholder to the image referenced by the node value."""
    return {'map': Texture(getattr(data, 'value', None) or DEFAULT_TEXTURE_URL)}


TEXTURE_NODES = [
    define_node('texture', 'Texture 2D', CATEGORY, ['uv'],
                template=op(OpCode.SAMPLE, Input('map'), Input('uv')),
                bindings=texture_bindings, rebuild_keys=('value',)),
    define_node('triplanar', 'Triplanar', CATEGORY, ['scale', 'normal', 'position'],
                template=op(OpCode.TRIPLANAR, Input('map'), Input('scale'),
                            Input('position'), Input('normal')),
                initial_values={'scale': 1.0},
                bindings=texture_bindings, rebuild_keys=('value',)),
    define_node('checker', 'Checker', CATEGORY, ['uv'],
                template=op(OpCode.CHECKER, Input('uv'))),
    define_node('simplexNoise2d', 'Simplex Noise 2D', CATEGORY, ['uv'],
                template=op(OpCode.SIMPLEX_NOISE, Input('uv'))),
]

# pow(1 - dot(normalView, viewDir), power); viewDir defaults to the view vector
FRESNEL_NODE = define_node(
    'fresnel', 'Fresnel', 'Effects',
    [inp('viewDir', semantic=op(OpCode.NORMALIZE, op(OpCode.NEGATE, attr('positionView')))),
     'power'],
    template=op(OpCode.POW,
                op(OpCode.SUB, 1.0, op(OpCode.DOT, attr('normalView'), Input('viewDir'))),
                Input('power')),
    initial_values={'power': 5.0},
)
