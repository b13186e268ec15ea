# Output & Tool Node Definitions
# Handles: Preview, Code, Standard Material, Basic Material

from ..ir.expr import Input
from .base import define_node, SlotSpec, KIND_OUTPUT, KIND_CODE

SIDE_FRONT = 0
SIDE_BACK = 1
SIDE_DOUBLE = 2

_MATERIAL_META = {
    'settings': ['transparent', 'depthWrite', 'depthTest'],
    'enums': {'side': {'options': {'Front': SIDE_FRONT, 'Back': SIDE_BACK, 'Double': SIDE_DOUBLE}}},
}

# Settings that change the built program rather than a parameter value
MATERIAL_SETTINGS = ('transparent', 'side', 'depthWrite', 'depthTest', 'alphaTest')


PREVIEW_NODE = define_node('preview', 'Preview', 'Tools', ['in'], outputs=(),
                           template=Input('in'))

CODE_NODE = define_node('code', 'Code', 'Custom', outputs=(), kind=KIND_CODE,
                        rebuild_keys=('code',))


MATERIAL_NODE = define_node(
    'material', 'Standard Material', 'Output',
    ['color', 'roughness', 'metalness', 'emissive', 'ao', 'normal', 'opacity', 'position', 'depth'],
    outputs=(),
    kind=KIND_OUTPUT,
    material_class='MeshStandardNodeMaterial',
    initial_values={
        'color': '#ffffff', 'roughness': 0.2, 'metalness': 0.8, 'emissive': '#000000',
        'ao': 1.0, 'opacity': 1.0, 'transparent': False, 'side': SIDE_FRONT,
    },
    meta=_MATERIAL_META,
    slots=(
        SlotSpec('color', '#ffffff', 'colorNode'),
        SlotSpec('roughness', 0.5, 'roughnessNode'),
        SlotSpec('metalness', 0.0, 'metalnessNode'),
        SlotSpec('emissive', '#000000', 'emissiveNode'),
        SlotSpec('ao', 1.0, 'aoNode'),
        SlotSpec('opacity', 1.0, 'opacityNode'),
        SlotSpec('normal', None, 'normalNode'),
        SlotSpec('depth', None, 'depthNode'),
        SlotSpec('position', None, 'positionNode'),
    ),
    rebuild_keys=MATERIAL_SETTINGS,
)

BASIC_MATERIAL_NODE = define_node(
    'basicMaterial', 'Basic Material', 'Output',
    ['fragment', 'opacity', 'position'],
    outputs=(),
    kind=KIND_OUTPUT,
    material_class='MeshBasicNodeMaterial',
    initial_values={'fragment': '#ffffff', 'opacity': 1.0, 'transparent': False, 'side': SIDE_FRONT},
    meta=_MATERIAL_META,
    slots=(
        SlotSpec('fragment', '#ffffff', 'fragmentNode'),
        SlotSpec('opacity', 1.0, 'opacityNode'),
        SlotSpec('position', None, 'positionNode'),
    ),
    rebuild_keys=MATERIAL_SETTINGS,
)

OUTPUT_NODES = [MATERIAL_NODE, BASIC_MATERIAL_NODE]
