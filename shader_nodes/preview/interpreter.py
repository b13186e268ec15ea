"""
CPU preview interpreter.

Evaluates a single node's output to numbers for node thumbnails and
read-outs. Unlike the compilers it does not memoize: each input is
re-evaluated recursively, and a depth guard (default 10) bounds cycles by
returning 0.0 past the limit.

Node semantics come from the same definition templates the compilers use,
evaluated with the shared numeric kernels, so a pure-arithmetic graph gives
the same numbers here as the compiled program does.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from ..errors import ShaderNodesError
from ..ir.expr import Input, coerce_value, value_type
from ..model import Node, Edge
from ..nodes.base import KIND_CODE, KIND_OUTPUT, InputSpec, SEMANTIC_DEFAULTS
from ..nodes.registry import Registry, default_registry, lookup
from ..runtime import kernels
from ..runtime.evaluator import EvalContext, ProgramEvaluator, constant_value

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10

# Handle -> preview stand-in when unconnected, used instead of the semantic default
PREVIEW_DEFAULTS = {
    'viewDir': (0.0, 0.0, 1.0),
}

PreviewValue = Union[float, Tuple[float, ...]]
Evaluated = Union[np.ndarray, Dict[str, np.ndarray]]


@dataclass(frozen=True)
class PreviewSample:
    """Sample coordinate (u, v) in 0..1 and a time value."""
    u: float = 0.5
    v: float = 0.5
    time: float = 0.0

    def to_context(self) -> EvalContext:
        return EvalContext.at(self.u, self.v, self.time)


def _neutral() -> np.ndarray:
    return kernels.scalar(0.0)


def _raw_value(raw) -> np.ndarray:
    return constant_value(coerce_value(raw, value_type(raw)))


class PreviewInterpreter:

    def __init__(self, nodes: List[Node], edges: List[Edge], registry: Registry = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.registry = registry if registry is not None else default_registry()
        self.nodes_by_id: Dict[str, Node] = {}
        for node in nodes:
            self.nodes_by_id.setdefault(node.id, node)
        self.incoming: Dict[Tuple[str, Optional[str]], Edge] = {}
        for edge in edges:
            self.incoming.setdefault((edge.target, edge.target_handle), edge)
        self.max_depth = max_depth
        self.evaluator = ProgramEvaluator()

    def evaluate(self, node: Node, context: EvalContext, depth: int = 0) -> Evaluated:
        if depth > self.max_depth:
            return _neutral()

        definition = lookup(self.registry, node.type)
        if definition is None:
            logger.debug(f"Preview: unknown node type {node.type}")
            return _neutral()

        if definition.kind == KIND_CODE:
            return self._evaluate_code(node, context, depth)

        if definition.kind == KIND_OUTPUT or definition.template is None:
            return _neutral()

        bindings: Dict[str, np.ndarray] = {}
        for spec in definition.inputs:
            bindings[spec.name] = self.resolve_input(node, spec, context, depth)
        if definition.uses_primary_value:
            raw = node.data.value if node.data.value is not None else definition.initial_value
            bindings['value'] = _raw_value(raw if raw is not None else 0.0)

        try:
            return self.evaluator.evaluate(definition.template, context, bindings)
        except (ValueError, ArithmeticError, ShaderNodesError) as e:
            logger.debug(f"Preview: node '{node.id}' degraded to 0 ({e})")
            return _neutral()

    def resolve_input(self, node: Node, spec: InputSpec, context: EvalContext, depth: int) -> np.ndarray:
        edge = self.incoming.get((node.id, spec.name))
        if edge is not None:
            return self._follow(edge, context, depth)
        if spec.name in PREVIEW_DEFAULTS:
            return kernels.make_value(PREVIEW_DEFAULTS[spec.name])
        if spec.semantic is not None:
            return self.evaluator.evaluate(spec.semantic, context)
        raw = node.data.values.get(spec.name)
        return _raw_value(raw) if raw is not None else _neutral()

    def _follow(self, edge: Edge, context: EvalContext, depth: int) -> np.ndarray:
        source = self.nodes_by_id.get(edge.source)
        if source is None:
            return _neutral()
        return self.project(self.evaluate(source, context, depth + 1), edge.source_handle)

    def project(self, value: Evaluated, handle: Optional[str]) -> np.ndarray:
        if isinstance(value, dict):
            if handle in value:
                return value[handle]
            if handle in (None, 'out') and value:
                return next(iter(value.values()))
            return _neutral()
        if handle and handle != 'out':
            try:
                return kernels.swizzle(value, handle)
            except (ValueError, KeyError):
                # Missing component
                return _neutral()
        return value

    def _evaluate_code(self, node: Node, context: EvalContext, depth: int) -> Evaluated:
        from ..code_node import run_code

        bindings: Dict[str, np.ndarray] = {}
        placeholders = {}
        for handle in node.data.inputs:
            edge = self.incoming.get((node.id, handle))
            if edge is not None:
                bindings[handle] = self._follow(edge, context, depth)
            elif handle in SEMANTIC_DEFAULTS:
                bindings[handle] = self.evaluator.evaluate(SEMANTIC_DEFAULTS[handle], context)
            elif node.data.values.get(handle) is not None:
                bindings[handle] = _raw_value(node.data.values[handle])
            else:
                continue
            placeholders[handle] = Input(handle)

        try:
            outputs = run_code(node.data.code or '', placeholders, node_id=node.id)
            return {name: self.evaluator.evaluate(expr, context, bindings)
                    for name, expr in outputs.items()}
        except (ValueError, ArithmeticError, ShaderNodesError) as e:
            logger.debug(f"Preview: code node '{node.id}' degraded to 0 ({e})")
            return _neutral()


def _to_python(value: np.ndarray) -> PreviewValue:
    row = np.nan_to_num(value[0], nan=0.0, posinf=0.0, neginf=0.0)
    if row.shape[0] == 1:
        return float(row[0])
    return tuple(float(c) for c in row)


def evaluate_preview(node: Node, nodes: List[Node], edges: List[Edge],
                     sample: PreviewSample = None, registry: Registry = None,
                     max_depth: int = DEFAULT_MAX_DEPTH) -> PreviewValue:
    """
    Value of `node` at one sample: a float for scalars, a tuple of floats
    for vectors and colours.
    """
    interpreter = PreviewInterpreter(nodes, edges, registry, max_depth)
    value = interpreter.evaluate(node, (sample or PreviewSample()).to_context())
    if isinstance(value, dict):
        value = interpreter.project(value, None)
    return _to_python(value)


def render_preview(node: Node, nodes: List[Node], edges: List[Edge],
                   width: int = 64, height: int = 64, registry: Registry = None,
                   max_depth: int = DEFAULT_MAX_DEPTH, time: float = 0.0) -> np.ndarray:
    """
    RGBA thumbnail of `node`, shape (height, width, 4), dtype uint8.

    Scalars render grey, vec2 as (x, y, 0), vec3/colour as rgb; channels
    are clamped to [0, 1] and alpha is opaque.
    """
    interpreter = PreviewInterpreter(nodes, edges, registry, max_depth)
    context = EvalContext.grid(width, height, time)
    value = interpreter.evaluate(node, context)
    if isinstance(value, dict):
        value = interpreter.project(value, None)

    value = np.broadcast_to(value, (context.count, value.shape[-1]))
    size = value.shape[-1]
    if size == 1:
        rgb = np.repeat(value, 3, axis=-1)
    elif size == 2:
        rgb = np.concatenate([value, np.zeros((context.count, 1))], axis=-1)
    else:
        rgb = value[:, :3]

    rgb = np.clip(np.nan_to_num(rgb, nan=0.0), 0.0, 1.0)
    pixels = np.empty((context.count, 4), dtype=np.uint8)
    pixels[:, :3] = np.rint(rgb * 255).astype(np.uint8)
    pixels[:, 3] = 255
    return pixels.reshape(height, width, 4)
