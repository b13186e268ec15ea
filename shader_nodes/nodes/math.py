from ..ir.ops import OpCode
from .base import standard_op

CATEGORY = 'Math'

_AB = {'a': 1.0, 'b': 1.0}


def _unary(type_id, label, opcode, initial=0.0):
    return standard_op(type_id, label, CATEGORY, opcode, ['in'], {'in': initial})


MATH_NODES = [
    standard_op('add', 'Add', CATEGORY, OpCode.ADD, ['a', 'b'], _AB),
    standard_op('sub', 'Subtract', CATEGORY, OpCode.SUB, ['a', 'b'], _AB),
    standard_op('mul', 'Multiply', CATEGORY, OpCode.MUL, ['a', 'b'], _AB),
    standard_op('div', 'Divide', CATEGORY, OpCode.DIV, ['a', 'b'], _AB),
    standard_op('mod', 'Modulo', CATEGORY, OpCode.MOD, ['a', 'b'], _AB),

    standard_op('pow', 'Power', CATEGORY, OpCode.POW, ['a', 'b'], _AB),
    _unary('sqrt', 'Sqrt', OpCode.SQRT, 1.0),
    _unary('reciprocal', 'Reciprocal (1/x)', OpCode.RECIPROCAL, 1.0),
    _unary('oneMinus', 'One Minus (1-x)', OpCode.ONE_MINUS),
    _unary('sin', 'Sin', OpCode.SIN),
    _unary('cos', 'Cos', OpCode.COS),
    _unary('tan', 'Tan', OpCode.TAN),
    _unary('abs', 'Abs', OpCode.ABS),
    _unary('floor', 'Floor', OpCode.FLOOR),
    _unary('ceil', 'Ceil', OpCode.CEIL),
    _unary('fract', 'Fract', OpCode.FRACT),
    _unary('sign', 'Sign', OpCode.SIGN),

    standard_op('min', 'Min', CATEGORY, OpCode.MIN, ['a', 'b'], {'a': 0, 'b': 0}),
    standard_op('max', 'Max', CATEGORY, OpCode.MAX, ['a', 'b'], {'a': 0, 'b': 0}),
    standard_op('clamp', 'Clamp', CATEGORY, OpCode.CLAMP, ['in', 'min', 'max'],
                {'in': 0, 'min': 0, 'max': 1}),
    standard_op('remap', 'Remap', CATEGORY, OpCode.REMAP,
                ['in', 'inLow', 'inHigh', 'outLow', 'outHigh'],
                {'in': 0.5, 'inLow': 0, 'inHigh': 1, 'outLow': 0, 'outHigh': 1}),
]
