"""
Live expression tree.

A compiled material is a DAG of Expr objects. Leaves are literal constants,
engine attributes (uv(), normalLocal, ...), texture references and
Uniforms; every inner node is an Operation tagged with an OpCode.

The same classes describe node semantics in the catalogue: a definition's
template is an Expr whose open leaves are Input placeholders naming the
node's handles. `substitute` closes a template over resolved inputs, which
is how both the live backend and the text backend obtain the expression for
a node.
"""

from typing import List, Optional, Dict, Any, Iterator, Tuple, Union

from .types import DataType
from .ops import OpCode, infer_type, SWIZZLE_INDEX

Number = Union[int, float]

# name -> (type, called as a function in TSL source)
ATTRIBUTES: Dict[str, Tuple[DataType, bool]] = {
    'uv': (DataType.VEC2, True),
    'screenUV': (DataType.VEC2, False),
    'viewportUV': (DataType.VEC2, False),
    'normalLocal': (DataType.VEC3, False),
    'normalView': (DataType.VEC3, False),
    'positionLocal': (DataType.VEC3, False),
    'positionView': (DataType.VEC3, False),
    'modelViewPosition': (DataType.VEC3, False),
    'time': (DataType.FLOAT, False),
    'depth': (DataType.FLOAT, False),
    'viewportLinearDepth': (DataType.FLOAT, False),
    'cameraNear': (DataType.FLOAT, False),
    'cameraFar': (DataType.FLOAT, False),
}


# =============================================================================
# Value helpers
# =============================================================================

def parse_color(text: str) -> Tuple[float, float, float]:
    """'#rgb' / '#rrggbb' -> (r, g, b) in 0..1. Malformed input gives black."""
    h = text.lstrip('#')
    if len(h) == 3:
        h = ''.join(c * 2 for c in h)
    try:
        return tuple(int(h[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        return (0.0, 0.0, 0.0)


def format_color(rgb) -> str:
    channels = [max(0, min(255, int(round(float(c) * 255)))) for c in rgb[:3]]
    return '#' + ''.join(f'{c:02x}' for c in channels)


def is_color_string(raw) -> bool:
    return isinstance(raw, str) and raw.startswith('#')


def _to_float(raw) -> float:
    if isinstance(raw, bool):
        return 1.0 if raw else 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw)
        except ValueError:
            return 0.0
    return 0.0


def value_type(raw) -> DataType:
    """Infers the DataType of a raw value stored in node data."""
    if is_color_string(raw):
        return DataType.COLOR
    if isinstance(raw, dict):
        size = sum(1 for k in 'xyzw' if k in raw)
        return DataType.vector_of(size)
    if isinstance(raw, (list, tuple)):
        return DataType.vector_of(len(raw))
    return DataType.FLOAT


def coerce_value(raw, dtype: DataType):
    """
    Normalizes a raw node-data value to a float (scalars) or a tuple of
    floats (vectors, colors) of the size `dtype` requires.
    """
    if dtype.is_scalar():
        if isinstance(raw, (list, tuple)):
            raw = raw[0] if raw else 0.0
        elif isinstance(raw, dict):
            raw = raw.get('x', 0.0)
        elif is_color_string(raw):
            return sum(parse_color(raw)) / 3.0
        return _to_float(raw)

    size = dtype.component_count()
    if is_color_string(raw):
        comps = list(parse_color(raw))
    elif isinstance(raw, dict):
        comps = [_to_float(raw.get(k, 0.0)) for k in 'xyzw'[:size]]
    elif isinstance(raw, (list, tuple)):
        comps = [_to_float(v) for v in raw]
    else:
        comps = [_to_float(raw)] * size
    comps = (comps + [0.0] * size)[:size]
    return tuple(comps)


# =============================================================================
# Expression nodes
# =============================================================================

class Expr:
    """Base class of every expression node. Compared by identity."""
    type: DataType = DataType.FLOAT

    def children(self) -> List['Expr']:
        return []

    # TSL-style method chaining, used by code nodes and templates
    def add(self, other): return op(OpCode.ADD, self, other)
    def sub(self, other): return op(OpCode.SUB, self, other)
    def mul(self, other): return op(OpCode.MUL, self, other)
    def div(self, other): return op(OpCode.DIV, self, other)
    def mod(self, other): return op(OpCode.MOD, self, other)
    def negate(self): return op(OpCode.NEGATE, self)

    def __add__(self, other): return self.add(other)
    def __radd__(self, other): return op(OpCode.ADD, other, self)
    def __sub__(self, other): return self.sub(other)
    def __rsub__(self, other): return op(OpCode.SUB, other, self)
    def __mul__(self, other): return self.mul(other)
    def __rmul__(self, other): return op(OpCode.MUL, other, self)
    def __truediv__(self, other): return self.div(other)
    def __rtruediv__(self, other): return op(OpCode.DIV, other, self)
    def __neg__(self): return self.negate()

    def __getattr__(self, name):
        # .x / .xy / .rgb component selection
        if name and len(name) <= 4 and all(c in SWIZZLE_INDEX for c in name):
            return swizzle(self, name)
        raise AttributeError(name)


class Constant(Expr):
    """Literal value baked into the program."""
    def __init__(self, value, type: Optional[DataType] = None):
        self.type = type or value_type(value)
        self.value = coerce_value(value, self.type)

    def __repr__(self):
        return f"Constant({self.value!r})"


class Uniform(Expr):
    """
    Mutable program parameter backing an unconnected input.

    One Uniform exists per (node id, handle) and survives rebuilds, so a
    value edit only has to call `set_value`.
    """
    def __init__(self, node_id: str, handle: str, value, type: Optional[DataType] = None):
        self.node_id = node_id
        self.handle = handle
        self.type = type or value_type(value)
        self.value = coerce_value(value, self.type)
        self.version = 0

    @property
    def key(self) -> Tuple[str, str]:
        return (self.node_id, self.handle)

    def set_value(self, raw):
        """Writes a new raw value (number, '#hex', list or {x,y,..})."""
        self.value = coerce_value(raw, self.type)
        self.version += 1

    def __repr__(self):
        return f"Uniform({self.node_id}:{self.handle}={self.value!r})"


class Attribute(Expr):
    """Engine-provided per-fragment value (uv(), normalLocal, time...)."""
    def __init__(self, name: str):
        if name not in ATTRIBUTES:
            raise KeyError(f"Unknown attribute '{name}'")
        self.name = name
        self.type, self.call = ATTRIBUTES[name]

    def __repr__(self):
        return f"Attribute({self.name})"


class Texture(Expr):
    """Reference to an image map, identified by its source URL."""
    type = DataType.TEXTURE

    def __init__(self, source: str):
        self.source = source

    def __repr__(self):
        return f"Texture({self.source!r})"


class Input(Expr):
    """Placeholder for a node handle inside a definition template."""
    def __init__(self, handle: str):
        self.handle = handle

    def __repr__(self):
        return f"Input({self.handle})"


class Symbol(Expr):
    """Opaque named reference to a value declared elsewhere (source text)."""
    def __init__(self, name: str, type: DataType = DataType.FLOAT):
        self.name = name
        self.type = type

    def __repr__(self):
        return f"Symbol({self.name})"


class Operation(Expr):
    """
    Data-driven operation: an OpCode applied to input expressions.
    The result type is inferred on construction and raises ShapeError
    for incompatible operands.
    """
    def __init__(self, opcode: OpCode, inputs: List[Expr], attrs: Optional[Dict[str, Any]] = None):
        self.opcode = opcode
        self.inputs = list(inputs)
        self.attrs = attrs or {}
        self.type = infer_type(opcode, [i.type for i in self.inputs], self.attrs)

    def children(self) -> List[Expr]:
        return self.inputs

    def __repr__(self):
        return f"Operation({self.opcode.name})"


# =============================================================================
# Construction helpers
# =============================================================================

def as_expr(value) -> Expr:
    if isinstance(value, Expr):
        return value
    return Constant(value)


def op(opcode: OpCode, *args, **attrs) -> Operation:
    return Operation(opcode, [as_expr(a) for a in args], attrs)


def swizzle(value: Expr, mask: str) -> Operation:
    return Operation(OpCode.SWIZZLE, [value], {'mask': mask})


def construct(dtype: DataType, *args) -> Operation:
    return Operation(OpCode.CONSTRUCT, [as_expr(a) for a in args], {'type': dtype})


def attr(name: str) -> Attribute:
    return Attribute(name)


# =============================================================================
# Traversal
# =============================================================================

def walk(root: Expr) -> Iterator[Expr]:
    """Yields every distinct node reachable from `root`, inputs first."""
    seen = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if id(node) in seen:
            continue
        if expanded:
            seen.add(id(node))
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children()):
            if id(child) not in seen:
                stack.append((child, False))


def template_inputs(template: Expr) -> List[str]:
    """Handles referenced by Input placeholders, in first-use order."""
    handles = []
    for node in walk(template):
        if isinstance(node, Input) and node.handle not in handles:
            handles.append(node.handle)
    return handles


def substitute(template: Expr, bindings: Dict[str, Expr]) -> Expr:
    """
    Returns `template` with every Input replaced by `bindings[handle]`.
    Shared sub-templates stay shared in the result.
    """
    memo: Dict[int, Expr] = {}

    def rebuild(node: Expr) -> Expr:
        key = id(node)
        if key in memo:
            return memo[key]
        if isinstance(node, Input):
            result = bindings.get(node.handle)
            if result is None:
                result = Constant(0.0)
        elif isinstance(node, Operation):
            new_inputs = [rebuild(i) for i in node.inputs]
            if all(a is b for a, b in zip(new_inputs, node.inputs)):
                result = node
            else:
                result = Operation(node.opcode, new_inputs, dict(node.attrs))
        else:
            result = node
        memo[key] = result
        return result

    return rebuild(template)
