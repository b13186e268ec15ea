from enum import Enum, auto
from typing import Sequence, Dict, Any
from .types import DataType
from ..errors import ShapeError

class OpCode(Enum):
    # --- Arithmetic ---
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    NEGATE = auto()

    # --- Math / Common ---
    POW = auto()
    SQRT = auto()
    RECIPROCAL = auto()
    ONE_MINUS = auto()
    ABS = auto()
    SIGN = auto()
    FLOOR = auto()
    CEIL = auto()
    FRACT = auto()
    MIN = auto()
    MAX = auto()
    CLAMP = auto()
    REMAP = auto()

    # --- Trigonometry ---
    SIN = auto()
    COS = auto()
    TAN = auto()

    # --- Interpolation ---
    MIX = auto()
    STEP = auto()
    SMOOTHSTEP = auto()

    # --- Vector ---
    DOT = auto()
    CROSS = auto()
    LENGTH = auto()
    DISTANCE = auto()
    NORMALIZE = auto()
    REFLECT = auto()

    # --- Constructors / Conversion ---
    CONSTRUCT = auto() # vec3(x, y, z)
    SWIZZLE = auto()   # val.xy

    # --- Patterns / Textures ---
    CHECKER = auto()
    SIMPLEX_NOISE = auto()
    SAMPLE = auto()     # texture(map, uv)
    TRIPLANAR = auto()  # triplanarTexture(map, map, map, scale, position, normal)

    # --- Depth ---
    VIEWPORT_DEPTH_TEXTURE = auto()
    LINEAR_DEPTH = auto()
    PERSPECTIVE_DEPTH_TO_VIEW_Z = auto()
    LOGARITHMIC_DEPTH_TO_VIEW_Z = auto()
    VIEW_Z_TO_ORTHOGRAPHIC_DEPTH = auto()


# Ops applied component-wise to every operand
ELEMENTWISE_BINARY = {
    OpCode.ADD, OpCode.SUB, OpCode.MUL, OpCode.DIV, OpCode.MOD,
    OpCode.POW, OpCode.MIN, OpCode.MAX, OpCode.STEP,
}

ELEMENTWISE_UNARY = {
    OpCode.NEGATE, OpCode.SQRT, OpCode.RECIPROCAL, OpCode.ONE_MINUS,
    OpCode.ABS, OpCode.SIGN, OpCode.FLOOR, OpCode.CEIL, OpCode.FRACT,
    OpCode.SIN, OpCode.COS, OpCode.TAN, OpCode.NORMALIZE,
}

ELEMENTWISE_NARY = {
    OpCode.CLAMP, OpCode.REMAP, OpCode.MIX, OpCode.SMOOTHSTEP, OpCode.REFLECT,
}

SCALAR_RESULT = {
    OpCode.DOT, OpCode.LENGTH, OpCode.DISTANCE,
    OpCode.CHECKER, OpCode.SIMPLEX_NOISE,
    OpCode.VIEWPORT_DEPTH_TEXTURE, OpCode.LINEAR_DEPTH,
    OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z, OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z,
    OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH,
}

SWIZZLE_INDEX = {'x': 0, 'y': 1, 'z': 2, 'w': 3, 'r': 0, 'g': 1, 'b': 2, 'a': 3}


def infer_arithmetic_type(opcode: OpCode, a: DataType, b: DataType) -> DataType:
    """Infers type for component-wise arithmetic between two operands."""
    if a == b:
        return a

    # Vector * Scalar interaction
    if a.is_vector() and b.is_scalar():
        return a
    if b.is_vector() and a.is_scalar():
        return b

    # Colors mix freely with vec3
    if {a, b} == {DataType.COLOR, DataType.VEC3}:
        return DataType.COLOR

    raise ShapeError(f"Invalid operand types for {opcode.name}: {a} vs {b}")


def infer_swizzle_type(source: DataType, mask: str) -> DataType:
    """Infers the result of selecting `mask` components from `source`."""
    if not mask or any(c not in SWIZZLE_INDEX for c in mask):
        raise ShapeError(f"Invalid swizzle mask '{mask}'")
    if source.is_scalar():
        # Swizzling a float splats it
        return DataType.vector_of(len(mask))
    size = source.component_count()
    for c in mask:
        if SWIZZLE_INDEX[c] >= size:
            raise ShapeError(f"Cannot read .{mask} from {source}")
    return DataType.vector_of(len(mask))


def infer_type(opcode: OpCode, inputs: Sequence[DataType], attrs: Dict[str, Any] = None) -> DataType:
    """
    Centralized dispatcher for operation type inference.

    Raises ShapeError when operands cannot be combined.
    """
    attrs = attrs or {}

    if opcode == OpCode.CONSTRUCT:
        return attrs['type']

    if opcode == OpCode.SWIZZLE:
        return infer_swizzle_type(inputs[0], attrs['mask'])

    if opcode in ELEMENTWISE_UNARY:
        return inputs[0]

    if opcode in ELEMENTWISE_BINARY or opcode in ELEMENTWISE_NARY:
        result = inputs[0]
        for other in inputs[1:]:
            result = infer_arithmetic_type(opcode, result, other)
        return result

    if opcode in SCALAR_RESULT:
        if opcode in {OpCode.DOT, OpCode.DISTANCE}:
            infer_arithmetic_type(opcode, inputs[0], inputs[1])
        return DataType.FLOAT

    if opcode == OpCode.CROSS:
        for t in inputs:
            if t.is_vector() and t.component_count() != 3:
                raise ShapeError(f"cross() needs vec3 operands, got {t}")
        return DataType.VEC3

    if opcode in {OpCode.SAMPLE, OpCode.TRIPLANAR}:
        return DataType.VEC4

    raise ShapeError(f"No inference rule for {opcode.name}")
