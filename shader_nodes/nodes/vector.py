from ..ir.ops import OpCode
from .base import standard_op

CATEGORY = 'Vectors'


VECTOR_NODES = [
    standard_op('dot', 'Dot Product', CATEGORY, OpCode.DOT, ['a', 'b'], {'a': 0, 'b': 0}),
    standard_op('cross', 'Cross Product', CATEGORY, OpCode.CROSS, ['a', 'b'], {'a': 0, 'b': 0}),
    standard_op('length', 'Length', CATEGORY, OpCode.LENGTH, ['in'], {'in': 0}),
    standard_op('distance', 'Distance', CATEGORY, OpCode.DISTANCE, ['a', 'b'], {'a': 0, 'b': 0}),
    standard_op('normalize', 'Normalize', CATEGORY, OpCode.NORMALIZE, ['in'], {'in': 0}),
    # 'normal' falls back to normalLocal when unconnected
    standard_op('reflect', 'Reflect', CATEGORY, OpCode.REFLECT, ['in', 'normal'], {'in': 0}),
]
