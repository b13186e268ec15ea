# Converter Node Definitions
# Handles: Mix, Step, Smoothstep, Split

from ..ir.expr import Input
from ..ir.ops import OpCode
from .base import define_node, standard_op

CATEGORY_LOGIC = 'Logic'


CONVERTER_NODES = [
    standard_op('mix', 'Mix (Lerp)', CATEGORY_LOGIC, OpCode.MIX, ['a', 'b', 'alpha'],
                {'a': 0.0, 'b': 1.0, 'alpha': 0.5}),
    standard_op('step', 'Step', CATEGORY_LOGIC, OpCode.STEP, ['edge', 'in'],
                {'edge': 0.5, 'in': 0.0}),
    standard_op('smoothstep', 'Smoothstep', CATEGORY_LOGIC, OpCode.SMOOTHSTEP, ['low', 'high', 'in'],
                {'low': 0.0, 'high': 1.0, 'in': 0.0}),
]

# Split passes its input through; edges leaving it from x/y/z/w select a component.
SPLIT_NODE = define_node('split', 'Split / Separate', 'Math', ['in'],
                         outputs=['x', 'y', 'z', 'w'], template=Input('in'))
