import unittest

import pytest

from shader_nodes.ir.expr import Attribute, Operation
from shader_nodes.ir.ops import OpCode
from shader_nodes.nodes.base import KIND_CODE, KIND_OUTPUT, define_node
from shader_nodes.nodes.registry import (
    DEFAULT_DEFINITIONS, build_registry, categories, default_registry, lookup, normalize_type,
)


class TestLookup(unittest.TestCase):
    def setUp(self):
        self.registry = default_registry()

    def test_stored_type_suffix(self):
        """Stored node types carry a 'Node' suffix; both spellings resolve."""
        self.assertIs(lookup(self.registry, 'addNode'), lookup(self.registry, 'add'))
        self.assertEqual(normalize_type('simplexNoise2dNode'), 'simplexNoise2d')

    def test_unknown_type(self):
        self.assertIsNone(lookup(self.registry, 'bogusNode'))
        self.assertIsNone(lookup(self.registry, None))

    def test_default_registry_is_shared(self):
        self.assertIs(default_registry(), self.registry)

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            self.registry['add'] = DEFAULT_DEFINITIONS[0]

    def test_catalogue_is_complete(self):
        expected = {
            'float', 'color', 'vec2', 'vec3', 'vec4',
            'uv', 'screenUV', 'viewportUV', 'normal', 'normalView', 'position', 'positionView',
            'modelViewPosition', 'time',
            'add', 'sub', 'mul', 'div', 'mod', 'pow', 'sqrt', 'reciprocal', 'oneMinus',
            'sin', 'cos', 'tan', 'abs', 'floor', 'ceil', 'fract', 'sign',
            'min', 'max', 'clamp', 'remap', 'split',
            'dot', 'cross', 'length', 'distance', 'normalize', 'reflect',
            'mix', 'step', 'smoothstep',
            'texture', 'triplanar', 'checker', 'simplexNoise2d', 'fresnel',
            'depth', 'viewportDepthTexture', 'viewportDepth', 'viewportLinearDepth', 'linearDepth',
            'cameraNear', 'cameraFar', 'perspectiveDepthToViewZ', 'logarithmicDepthToViewZ',
            'viewZToOrthographicDepth', 'sceneViewZ',
            'preview', 'code', 'material', 'basicMaterial',
        }
        self.assertEqual(set(self.registry), expected)


class TestDefinitions(unittest.TestCase):
    def setUp(self):
        self.registry = default_registry()

    def test_semantic_defaults(self):
        """Coordinate-like handles fall back to attributes, not zero."""
        uv = lookup(self.registry, 'checker').input_spec('uv')
        self.assertIsInstance(uv.semantic, Attribute)
        self.assertEqual(uv.semantic.name, 'uv')

        normal = lookup(self.registry, 'reflect').input_spec('normal')
        self.assertEqual(normal.semantic.name, 'normalLocal')

        view_dir = lookup(self.registry, 'fresnel').input_spec('viewDir')
        self.assertIsInstance(view_dir.semantic, Operation)
        self.assertEqual(view_dir.semantic.opcode, OpCode.NORMALIZE)

    def test_neutral_inputs_have_no_semantic(self):
        a = lookup(self.registry, 'add').input_spec('a')
        self.assertFalse(a.has_semantic_default)

    def test_primary_value(self):
        self.assertTrue(lookup(self.registry, 'float').uses_primary_value)
        self.assertTrue(lookup(self.registry, 'uv').uses_primary_value)
        self.assertFalse(lookup(self.registry, 'add').uses_primary_value)

    def test_new_node_data(self):
        data = lookup(self.registry, 'add').new_node_data()
        self.assertEqual(data['label'], 'Add')
        self.assertEqual(data['inputs'], ['a', 'b'])
        self.assertEqual(data['outputs'], ['out'])
        self.assertEqual(data['values'], {'a': 1.0, 'b': 1.0})
        self.assertNotIn('value', data)

    def test_kinds(self):
        self.assertEqual(lookup(self.registry, 'material').kind, KIND_OUTPUT)
        self.assertEqual(lookup(self.registry, 'basicMaterial').kind, KIND_OUTPUT)
        self.assertEqual(lookup(self.registry, 'code').kind, KIND_CODE)

    def test_depth_sampling_nodes(self):
        reading = {t for t, d in self.registry.items() if d.reads_depth}
        self.assertEqual(reading, {'viewportDepthTexture', 'linearDepth',
                                   'perspectiveDepthToViewZ', 'sceneViewZ'})

    def test_material_slots(self):
        material = lookup(self.registry, 'material')
        names = [s.name for s in material.slots]
        self.assertEqual(names[:6], ['color', 'roughness', 'metalness', 'emissive', 'ao', 'opacity'])
        self.assertTrue(material.slots[names.index('normal')].optional)
        self.assertEqual(material.material_class, 'MeshStandardNodeMaterial')


def test_categories_follow_registration_order(registry):
    listing = categories(registry)
    assert list(listing) == [
        'Constants', 'Attributes', 'Math', 'Vectors', 'Logic',
        'Patterns & Textures', 'Effects', 'Depth', 'Tools', 'Custom', 'Output',
    ]
    assert listing['Constants'] == ['float', 'color', 'vec2', 'vec3', 'vec4']
    assert listing['Math'][-1] == 'split'


def test_duplicate_registration_rejected():
    node = define_node('thing', 'Thing', 'Tools')
    with pytest.raises(ValueError, match="registered twice"):
        build_registry([node, node])


def test_custom_registry():
    node = define_node('thing', 'Thing', 'Tools')
    registry = build_registry([node])
    assert lookup(registry, 'thingNode') is node
    assert lookup(registry, 'add') is None
