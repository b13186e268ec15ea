"""
Code node: user-authored node bodies.

The node's `code` is the body of a Python function ``(tsl, inputs)`` that
returns::

    {'inputs': ['a', 'b'], 'outputs': [{'out': tsl.mix(inputs['a'], inputs['b'], 0.5)}]}

`outputs` may also be a plain ``{name: expr}`` mapping. `tsl` exposes the
expression builders (tsl.float, tsl.vec3, tsl.sin, tsl.uv(), tsl.normalLocal,
...) and `inputs` maps each connected input handle to its expression.
Missing handles read as float(0) through ``inputs[name]``; ``inputs.get``
lets the body choose its own fallback.

Probing runs the body against placeholder inputs to discover the declared
handles, so the editor can draw them before anything is connected.
"""

import builtins
import logging
import textwrap
from dataclasses import dataclass
from functools import lru_cache
from types import SimpleNamespace
from typing import Any, Callable, Dict, Mapping, Tuple

from .errors import CodeNodeError, ShaderNodesError
from .ir.expr import ATTRIBUTES, Constant, Expr, as_expr, attr, construct, op, swizzle
from .ir.ops import OpCode
from .ir.types import DataType
from .model import Node

logger = logging.getLogger(__name__)

_ENTRY_POINT = '__code_node__'

# Builtins visible to user code
SAFE_BUILTINS = {
    name: getattr(builtins, name)
    for name in (
        'abs', 'all', 'any', 'bool', 'dict', 'enumerate', 'float', 'int', 'isinstance',
        'len', 'list', 'max', 'min', 'range', 'reversed', 'round', 'sorted', 'str',
        'sum', 'tuple', 'zip', 'ValueError', 'KeyError', 'TypeError',
    )
}


# =============================================================================
# TSL builder namespace
# =============================================================================

def _fn(opcode: OpCode) -> Callable[..., Expr]:
    return lambda *args: op(opcode, *args)


def _float(value=0.0) -> Expr:
    if isinstance(value, Expr):
        return value if value.type.is_scalar() else swizzle(value, 'x')
    return Constant(float(value), DataType.FLOAT)


def _vector(dtype: DataType) -> Callable[..., Expr]:
    def build(*args):
        if not args:
            return Constant(0.0, dtype)
        if len(args) == 1 and not isinstance(args[0], Expr):
            return Constant(args[0], dtype)
        return construct(dtype, *args)
    return build


def _color(value='#ffffff') -> Expr:
    if isinstance(value, Expr):
        return value
    return Constant(value, DataType.COLOR)


def build_tsl_namespace() -> SimpleNamespace:
    """The `tsl` object handed to user code."""
    functions: Dict[str, Any] = {
        'float': _float,
        'vec2': _vector(DataType.VEC2),
        'vec3': _vector(DataType.VEC3),
        'vec4': _vector(DataType.VEC4),
        'color': _color,

        'add': _fn(OpCode.ADD), 'sub': _fn(OpCode.SUB),
        'mul': _fn(OpCode.MUL), 'div': _fn(OpCode.DIV),
        'mod': _fn(OpCode.MOD), 'negate': _fn(OpCode.NEGATE),

        'pow': _fn(OpCode.POW), 'sqrt': _fn(OpCode.SQRT),
        'reciprocal': _fn(OpCode.RECIPROCAL), 'oneMinus': _fn(OpCode.ONE_MINUS),
        'abs': _fn(OpCode.ABS), 'sign': _fn(OpCode.SIGN),
        'floor': _fn(OpCode.FLOOR), 'ceil': _fn(OpCode.CEIL), 'fract': _fn(OpCode.FRACT),
        'min': _fn(OpCode.MIN), 'max': _fn(OpCode.MAX),
        'clamp': _fn(OpCode.CLAMP), 'remap': _fn(OpCode.REMAP),
        'sin': _fn(OpCode.SIN), 'cos': _fn(OpCode.COS), 'tan': _fn(OpCode.TAN),

        'mix': _fn(OpCode.MIX), 'step': _fn(OpCode.STEP), 'smoothstep': _fn(OpCode.SMOOTHSTEP),

        'dot': _fn(OpCode.DOT), 'cross': _fn(OpCode.CROSS), 'length': _fn(OpCode.LENGTH),
        'distance': _fn(OpCode.DISTANCE), 'normalize': _fn(OpCode.NORMALIZE),
        'reflect': _fn(OpCode.REFLECT),

        'checker': _fn(OpCode.CHECKER), 'simplexNoise2D': _fn(OpCode.SIMPLEX_NOISE),

        'viewportDepthTexture': _fn(OpCode.VIEWPORT_DEPTH_TEXTURE),
        'linearDepth': _fn(OpCode.LINEAR_DEPTH),
        'perspectiveDepthToViewZ': _fn(OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z),
        'logarithmicDepthToViewZ': _fn(OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z),
        'viewZToOrthographicDepth': _fn(OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH),
    }
    for name, (_, called) in ATTRIBUTES.items():
        functions[name] = (lambda n=name: attr(n)) if called else attr(name)
    return SimpleNamespace(**functions)


TSL = build_tsl_namespace()


class CodeInputs(dict):
    """Input mapping given to user code; unknown handles read as float(0)."""

    def __missing__(self, key):
        return Constant(0.0)


# =============================================================================
# Compile / run
# =============================================================================

@dataclass(frozen=True)
class CodeShape:
    """Handles declared by a Code node body."""
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()


@lru_cache(maxsize=64)
def _compile_body(code: str) -> Callable:
    source = f"def {_ENTRY_POINT}(tsl, inputs):\n" + textwrap.indent(code.strip() or 'return {}', '    ')
    namespace: Dict[str, Any] = {'__builtins__': SAFE_BUILTINS}
    exec(compile(source, '<code node>', 'exec'), namespace)
    return namespace[_ENTRY_POINT]


def _call(code: str, inputs: Mapping[str, Expr], node_id: str = None) -> Any:
    try:
        body = _compile_body(code)
    except SyntaxError as e:
        raise CodeNodeError(f"Syntax error in code node (line {e.lineno}): {e.msg}", node_id) from e
    try:
        return body(TSL, CodeInputs(inputs))
    except ShaderNodesError as e:
        raise CodeNodeError(str(e), node_id) from e
    except Exception as e:  # user code may raise anything
        raise CodeNodeError(f"{type(e).__name__}: {e}", node_id) from e


def _parse_outputs(result: Any, node_id: str = None) -> Dict[str, Expr]:
    if isinstance(result, Expr):
        return {'out': result}
    if not isinstance(result, dict):
        raise CodeNodeError("Code node must return a dict with 'outputs'", node_id)

    raw = result.get('outputs', {})
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise CodeNodeError("'outputs' must be a list or a dict", node_id)

    outputs: Dict[str, Expr] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            raise CodeNodeError("Each output must be a {name: expression} dict", node_id)
        for name, value in entry.items():
            try:
                outputs[str(name)] = as_expr(value)
            except (TypeError, ValueError) as e:
                raise CodeNodeError(f"Output '{name}': {e}", node_id) from e
    return outputs


def run_code(code: str, inputs: Mapping[str, Expr], node_id: str = None) -> Dict[str, Expr]:
    """
    Runs a Code node body against resolved inputs.

    Returns:
        Output name -> expression, in declaration order

    Raises:
        CodeNodeError: If the body does not compile, raises, or returns a bad shape
    """
    return _parse_outputs(_call(code, inputs, node_id), node_id)


def probe_code(code: str, node_id: str = None) -> CodeShape:
    """Discovers the input and output handles a Code node body declares."""
    result = _call(code, {}, node_id)
    outputs = _parse_outputs(result, node_id)
    declared = result.get('inputs', []) if isinstance(result, dict) else []
    if not isinstance(declared, (list, tuple)):
        raise CodeNodeError("'inputs' must be a list of handle names", node_id)
    shape = CodeShape(tuple(str(i) for i in declared), tuple(outputs))
    logger.debug(f"Probed code node {node_id or ''}: {shape}")
    return shape


def apply_probe(node: Node) -> Node:
    """Copy of `node` with its handle lists taken from its code."""
    shape = probe_code(node.data.code or '', node.id)
    return node.with_data(inputs=shape.inputs, outputs=shape.outputs)
