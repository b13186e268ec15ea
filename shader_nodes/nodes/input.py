# Input Node Definitions
# Handles: Constants (Float, Color, Vec2-4), Attributes (UV, Normal, Position, Time...)

from ..ir.expr import Input, attr, construct
from ..ir.types import DataType
from .base import define_node

CATEGORY_CONSTANTS = 'Constants'
CATEGORY_ATTRIBUTES = 'Attributes'


CONSTANT_NODES = [
    define_node('float', 'Float', CATEGORY_CONSTANTS,
                template=Input('value'), initial_value=0.5),
    define_node('color', 'Color', CATEGORY_CONSTANTS,
                template=Input('value'), initial_value='#ffffff'),
    define_node('vec2', 'Vec2', CATEGORY_CONSTANTS, ['x', 'y'],
                template=construct(DataType.VEC2, Input('x'), Input('y')),
                initial_values={'x': 0, 'y': 0}),
    define_node('vec3', 'Vec3', CATEGORY_CONSTANTS, ['x', 'y', 'z'],
                template=construct(DataType.VEC3, Input('x'), Input('y'), Input('z')),
                initial_values={'x': 0, 'y': 0, 'z': 0}),
    define_node('vec4', 'Vec4', CATEGORY_CONSTANTS, ['x', 'y', 'z', 'w'],
                template=construct(DataType.VEC4, Input('x'), Input('y'), Input('z'), Input('w')),
                initial_values={'x': 0, 'y': 0, 'z': 0, 'w': 0}),
]


def _attribute(type_id, label, name):
    return define_node(type_id, label, CATEGORY_ATTRIBUTES, template=attr(name))


ATTRIBUTE_NODES = [
    # The primary value scales the coordinate
    define_node('uv', 'UV Scale', CATEGORY_ATTRIBUTES,
                template=attr('uv').mul(Input('value')), initial_value=1.0),
    _attribute('screenUV', 'Screen UV', 'screenUV'),
    _attribute('viewportUV', 'Viewport UV', 'viewportUV'),
    _attribute('normal', 'Normal', 'normalLocal'),
    _attribute('normalView', 'Normal (View)', 'normalView'),
    _attribute('position', 'Position', 'positionLocal'),
    _attribute('positionView', 'Position (View)', 'positionView'),
    _attribute('modelViewPosition', 'ModelView Position', 'modelViewPosition'),
    _attribute('time', 'Time', 'time'),
]
