import unittest

import numpy as np
import pytest

from shader_nodes.graph_extract.compiler import MaterialCompiler
from shader_nodes.model import Node
from shader_nodes.preview.interpreter import (
    PreviewInterpreter, PreviewSample, evaluate_preview, render_preview,
)
from shader_nodes.runtime.evaluator import EvalContext, ProgramEvaluator

from conftest import make_edge, make_node


class TestEvaluatePreview(unittest.TestCase):
    def test_add_of_constants(self):
        """float(2) + float(3) reads 5 anywhere on the surface."""
        nodes = [make_node('f1', 'float', 2.0), make_node('f2', 'float', 3.0), make_node('a1', 'add')]
        edges = [make_edge('f1', 'a1', 'a'), make_edge('f2', 'a1', 'b')]
        for u, v in [(0.0, 0.0), (0.5, 0.5), (0.9, 0.1)]:
            value = evaluate_preview(nodes[2], nodes, edges, PreviewSample(u, v))
            self.assertEqual(value, 5.0)

    def test_local_values_without_edges(self):
        node = make_node('a1', 'add', a=0.25, b=0.5)
        self.assertEqual(evaluate_preview(node, [node], []), 0.75)

    def test_vector_result_is_tuple(self):
        node = make_node('v1', 'vec3', x=1, y=2, z=3)
        self.assertEqual(evaluate_preview(node, [node], []), (1.0, 2.0, 3.0))

    def test_color_value(self):
        node = make_node('c1', 'color', '#ff0000')
        self.assertEqual(evaluate_preview(node, [node], []), (1.0, 0.0, 0.0))

    def test_unconnected_pattern_uses_surface_uv(self):
        """Checker cells flip with the sample position, so uv is not zero."""
        node = make_node('c1', 'checker')
        self.assertEqual(evaluate_preview(node, [node], [], PreviewSample(0.3, 0.3)), 0.0)
        self.assertEqual(evaluate_preview(node, [node], [], PreviewSample(0.7, 0.3)), 1.0)

    def test_split_projection(self):
        nodes = [make_node('v1', 'vec3', x=1, y=2, z=3), make_node('s1', 'split'), make_node('n1', 'oneMinus')]
        edges = [make_edge('v1', 's1', 'in'), make_edge('s1', 'n1', 'in', 'z')]
        self.assertEqual(evaluate_preview(nodes[2], nodes, edges), -2.0)

    def test_missing_component_is_neutral(self):
        nodes = [make_node('v1', 'vec2'), make_node('s1', 'split'), make_node('n1', 'oneMinus')]
        edges = [make_edge('v1', 's1', 'in'), make_edge('s1', 'n1', 'in', 'z')]
        self.assertEqual(evaluate_preview(nodes[2], nodes, edges), 1.0)

    def test_unknown_type_is_zero(self):
        node = Node(id='x1', type='bogusNode')
        self.assertEqual(evaluate_preview(node, [node], []), 0.0)

    def test_fresnel_defaults_to_facing_camera(self):
        node = make_node('fr1', 'fresnel')
        self.assertEqual(evaluate_preview(node, [node], []), 0.0)

    def test_time_attribute(self):
        node = make_node('t1', 'time')
        self.assertEqual(evaluate_preview(node, [node], [], PreviewSample(time=2.5)), 2.5)

    def test_safe_division(self):
        node = make_node('d1', 'div', a=1.0, b=0.0)
        self.assertAlmostEqual(evaluate_preview(node, [node], []), 1000.0)


class TestDepthGuard(unittest.TestCase):
    def test_self_cycle_terminates(self):
        """Each level adds b=1 until the guard returns 0 past max_depth."""
        node = make_node('a1', 'add')
        edges = [make_edge('a1', 'a1', 'a')]
        self.assertEqual(evaluate_preview(node, [node], edges, max_depth=2), 3.0)
        self.assertEqual(evaluate_preview(node, [node], edges), 11.0)

    def test_mutual_cycle_terminates(self):
        nodes = [make_node('a1', 'add'), make_node('m1', 'mul', b=0.5)]
        edges = [make_edge('a1', 'm1', 'a'), make_edge('m1', 'a1', 'a')]
        value = evaluate_preview(nodes[0], nodes, edges)
        self.assertTrue(np.isfinite(value))

    def test_guard_on_direct_call(self):
        node = make_node('f1', 'float', 2.0)
        interpreter = PreviewInterpreter([node], [], max_depth=3)
        self.assertEqual(interpreter.evaluate(node, EvalContext(), depth=4)[0, 0], 0.0)
        self.assertEqual(interpreter.evaluate(node, EvalContext(), depth=3)[0, 0], 2.0)


class TestRenderPreview(unittest.TestCase):
    def test_shape_and_alpha(self):
        node = make_node('f1', 'float', 1.0)
        pixels = render_preview(node, [node], [], width=8, height=4)
        self.assertEqual(pixels.shape, (4, 8, 4))
        self.assertEqual(pixels.dtype, np.uint8)
        self.assertTrue((pixels[..., 3] == 255).all())
        self.assertTrue((pixels[..., :3] == 255).all())

    def test_values_are_clamped(self):
        node = make_node('f1', 'float', -3.0)
        pixels = render_preview(node, [node], [], width=2, height=2)
        self.assertTrue((pixels[..., :3] == 0).all())

    def test_checker_pattern(self):
        node = make_node('c1', 'checker')
        pixels = render_preview(node, [node], [], width=4, height=4)
        # Row 0 is v = 1: u = 0 -> even cell, u = 0.5 -> odd cell
        self.assertEqual(tuple(pixels[0, 0, :3]), (0, 0, 0))
        self.assertEqual(tuple(pixels[0, 2, :3]), (255, 255, 255))

    def test_vec2_renders_red_green(self):
        node = make_node('u1', 'uv', 1.0)
        pixels = render_preview(node, [node], [], width=4, height=4)
        self.assertEqual(tuple(pixels[0, 0]), (0, 255, 0, 255))

    def test_texture_placeholder(self):
        node = make_node('t1', 'texture')
        pixels = render_preview(node, [node], [], width=10, height=10)
        greys = set(np.unique(pixels[..., 0]).tolist())
        self.assertEqual(greys, {51, 204})


# =============================================================================
# Preview vs compiled program
# =============================================================================

def _compile_and_preview(nodes, edges, target, sample):
    """Value of the color slot of the compiled program and the preview of `target`."""
    output = make_node('out', 'material')
    program = MaterialCompiler().compile(nodes + [output], edges + [make_edge(target, 'out', 'color')])
    compiled = ProgramEvaluator().evaluate(program.slot('color'), sample.to_context())
    row = compiled[0]
    live = float(row[0]) if row.shape[0] == 1 else tuple(float(c) for c in row)

    target_node = next(n for n in nodes if n.id == target)
    return live, evaluate_preview(target_node, nodes, edges, sample)


SAMPLES = [PreviewSample(0.1, 0.2), PreviewSample(0.5, 0.5), PreviewSample(0.85, 0.35)]


@pytest.mark.parametrize("sample", SAMPLES)
def test_arithmetic_graph_agrees(sample):
    nodes = [
        make_node('f1', 'float', 2.0), make_node('f2', 'float', 3.0),
        make_node('a1', 'add'), make_node('s1', 'sub'), make_node('m1', 'mul'),
        make_node('d1', 'div'), make_node('r1', 'mod', b=0.7),
    ]
    edges = [
        make_edge('f1', 'a1', 'a'), make_edge('f2', 'a1', 'b'),
        make_edge('f1', 's1', 'a'), make_edge('f2', 's1', 'b'),
        make_edge('a1', 'm1', 'a'), make_edge('s1', 'm1', 'b'),
        make_edge('m1', 'd1', 'a'), make_edge('f2', 'd1', 'b'),
        make_edge('d1', 'r1', 'a'),
    ]
    live, preview = _compile_and_preview(nodes, edges, 'r1', sample)
    assert live == pytest.approx(preview)
    assert preview == pytest.approx((-5.0 / 3.0) % 0.7)


@pytest.mark.parametrize("sample", SAMPLES)
def test_vector_graph_agrees(sample):
    nodes = [
        make_node('u1', 'uv', 3.0), make_node('v1', 'vec2', x=0.25, y=-1.0),
        make_node('a1', 'add'), make_node('f1', 'fract'), make_node('l1', 'length'),
        make_node('sm', 'smoothstep', low=0.2, high=0.9),
    ]
    edges = [
        make_edge('u1', 'a1', 'a'), make_edge('v1', 'a1', 'b'),
        make_edge('a1', 'f1', 'in'), make_edge('f1', 'l1', 'in'),
        make_edge('l1', 'sm', 'in'),
    ]
    live, preview = _compile_and_preview(nodes, edges, 'sm', sample)
    assert live == pytest.approx(preview)


@pytest.mark.parametrize("sample", SAMPLES)
def test_vec3_graph_agrees(sample):
    nodes = [
        make_node('p1', 'position'), make_node('n1', 'normalize'),
        make_node('c1', 'vec3', x=0.0, y=1.0, z=0.5), make_node('x1', 'cross'),
        make_node('m1', 'mix', alpha=0.25),
    ]
    edges = [
        make_edge('p1', 'n1', 'in'), make_edge('n1', 'x1', 'a'), make_edge('c1', 'x1', 'b'),
        make_edge('x1', 'm1', 'a'), make_edge('c1', 'm1', 'b'),
    ]
    live, preview = _compile_and_preview(nodes, edges, 'm1', sample)
    assert live == pytest.approx(preview)
    assert len(preview) == 3


def test_code_node_preview():
    code = "return {'inputs': ['a'], 'outputs': [{'out': inputs['a'].mul(3)}]}"
    nodes = [
        make_node('f1', 'float', 2.0),
        make_node('k1', 'code').with_data(code=code, inputs=('a',), outputs=('out',)),
    ]
    edges = [make_edge('f1', 'k1', 'a')]
    assert evaluate_preview(nodes[1], nodes, edges) == 6.0


def test_broken_code_node_preview_is_zero():
    node = make_node('k1', 'code').with_data(code="return {", inputs=(), outputs=('out',))
    assert evaluate_preview(node, [node], []) == 0.0


def test_code_node_uv_input_reads_surface():
    code = "return {'inputs': ['uv'], 'outputs': [{'out': inputs['uv']}]}"
    node = make_node('k1', 'code').with_data(code=code, inputs=('uv',), outputs=('out',),
                                             values={'uv': 3.0})
    assert evaluate_preview(node, [node], [], PreviewSample(0.25, 0.5)) == (0.25, 0.5)
