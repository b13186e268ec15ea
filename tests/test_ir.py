import unittest

import pytest

from shader_nodes.errors import ShapeError
from shader_nodes.ir.expr import (
    Attribute, Constant, Input, Operation, Uniform,
    attr, coerce_value, construct, op, substitute, swizzle, template_inputs, value_type, walk,
)
from shader_nodes.ir.ops import OpCode
from shader_nodes.ir.types import DataType


class TestValues(unittest.TestCase):
    def test_value_type_inference(self):
        """Raw node-data values map to the type they print as."""
        self.assertEqual(value_type(0.5), DataType.FLOAT)
        self.assertEqual(value_type('#ff0000'), DataType.COLOR)
        self.assertEqual(value_type([1, 2]), DataType.VEC2)
        self.assertEqual(value_type({'x': 1, 'y': 2, 'z': 3}), DataType.VEC3)

    def test_coerce_value(self):
        self.assertEqual(coerce_value({'x': 1, 'y': 2}, DataType.VEC2), (1.0, 2.0))
        self.assertEqual(coerce_value('#ff0000', DataType.COLOR), (1.0, 0.0, 0.0))
        self.assertEqual(coerce_value(2, DataType.VEC3), (2.0, 2.0, 2.0))
        self.assertEqual(coerce_value([1.0], DataType.VEC3), (1.0, 0.0, 0.0))
        self.assertEqual(coerce_value('oops', DataType.FLOAT), 0.0)

    def test_constant_color(self):
        c = Constant('#ff0000')
        self.assertEqual(c.type, DataType.COLOR)
        self.assertEqual(c.value, (1.0, 0.0, 0.0))

    def test_uniform_set_value_bumps_version(self):
        u = Uniform('f1', 'value', 0.5)
        u.set_value(2)
        self.assertEqual(u.value, 2.0)
        self.assertEqual(u.version, 1)
        self.assertEqual(u.key, ('f1', 'value'))


class TestTypeInference(unittest.TestCase):
    def test_scalar_broadcasts_over_vector(self):
        expr = op(OpCode.MUL, Constant((1.0, 2.0, 3.0)), 2.0)
        self.assertEqual(expr.type, DataType.VEC3)

    def test_color_mixes_with_vec3(self):
        expr = op(OpCode.ADD, Constant('#ffffff'), Constant((0.0, 0.0, 0.0)))
        self.assertEqual(expr.type, DataType.COLOR)

    def test_mismatched_vectors_raise(self):
        with self.assertRaises(ShapeError):
            op(OpCode.ADD, Constant((1.0, 2.0)), Constant((1.0, 2.0, 3.0)))

    def test_scalar_results(self):
        self.assertEqual(op(OpCode.DOT, attr('normalLocal'), attr('normalLocal')).type, DataType.FLOAT)
        self.assertEqual(op(OpCode.CHECKER, attr('uv')).type, DataType.FLOAT)

    def test_construct_and_sample(self):
        self.assertEqual(construct(DataType.VEC3, 1.0, 2.0, 3.0).type, DataType.VEC3)
        self.assertEqual(op(OpCode.SAMPLE, Input('map'), attr('uv')).type, DataType.VEC4)

    def test_cross_needs_vec3(self):
        with self.assertRaises(ShapeError):
            op(OpCode.CROSS, attr('uv'), attr('uv'))


class TestSwizzle(unittest.TestCase):
    def test_component_selection(self):
        self.assertEqual(swizzle(attr('uv'), 'x').type, DataType.FLOAT)
        self.assertEqual(swizzle(attr('normalLocal'), 'xy').type, DataType.VEC2)

    def test_attribute_sugar(self):
        """`.xy` on an expression is a swizzle operation."""
        expr = attr('positionLocal').xy
        self.assertIsInstance(expr, Operation)
        self.assertEqual(expr.attrs['mask'], 'xy')

    def test_missing_component_raises(self):
        with self.assertRaises(ShapeError):
            swizzle(attr('uv'), 'z')

    def test_scalar_splats(self):
        self.assertEqual(swizzle(Constant(1.0), 'xyz').type, DataType.VEC3)

    def test_unknown_attribute_name(self):
        with self.assertRaises(AttributeError):
            attr('uv').foo


def test_substitute_closes_template():
    template = op(OpCode.ADD, Input('a'), Input('b'))
    a = Constant(1.0)
    result = substitute(template, {'a': a})

    assert result is not template
    assert result.inputs[0] is a
    # Unbound handles fall back to float(0)
    assert isinstance(result.inputs[1], Constant)
    assert result.inputs[1].value == 0.0


def test_substitute_retypes_operations():
    template = op(OpCode.MUL, Input('a'), Input('b'))
    result = substitute(template, {'a': attr('uv'), 'b': Constant(2.0)})
    assert result.type == DataType.VEC2


def test_substitute_keeps_shared_subtrees_shared():
    shared = op(OpCode.SIN, Input('in'))
    template = op(OpCode.ADD, shared, shared)
    result = substitute(template, {'in': Constant(1.0)})
    assert result.inputs[0] is result.inputs[1]


def test_walk_is_inputs_first_and_distinct():
    leaf = attr('uv')
    mid = swizzle(leaf, 'x')
    root = op(OpCode.ADD, mid, mid)
    order = list(walk(root))
    assert order == [leaf, mid, root]


def test_template_inputs_in_first_use_order():
    template = op(OpCode.MIX, Input('a'), Input('b'), op(OpCode.SIN, Input('a')))
    assert template_inputs(template) == ['a', 'b']


def test_unknown_attribute_rejected():
    with pytest.raises(KeyError):
        Attribute('nope')
