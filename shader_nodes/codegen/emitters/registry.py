# Emitter Registry
# Maps OpCode -> emitter function

from typing import Dict, Optional

from ...ir.ops import OpCode
from ..tsl_context import EmitterType

from .arithmetic import emit_add, emit_sub, emit_mul, emit_div, emit_mod, emit_negate
from .math_funcs import emit_function, emit_remap, emit_smoothstep, emit_step
from .vector import emit_dot, emit_cross, emit_length, emit_distance, emit_normalize, emit_reflect
from .types import emit_construct, emit_swizzle
from .textures import emit_checker, emit_simplex_noise, emit_sample, emit_triplanar
from .depth import emit_depth


# Registry mapping OpCode to emitter function
EMITTER_REGISTRY: Dict[OpCode, EmitterType] = {
    # Arithmetic
    OpCode.ADD: emit_add,
    OpCode.SUB: emit_sub,
    OpCode.MUL: emit_mul,
    OpCode.DIV: emit_div,
    OpCode.MOD: emit_mod,
    OpCode.NEGATE: emit_negate,

    # Math / Common
    OpCode.POW: lambda op, ctx: emit_function('pow', op, ctx),
    OpCode.SQRT: lambda op, ctx: emit_function('sqrt', op, ctx),
    OpCode.RECIPROCAL: lambda op, ctx: emit_function('reciprocal', op, ctx),
    OpCode.ONE_MINUS: lambda op, ctx: emit_function('oneMinus', op, ctx),
    OpCode.ABS: lambda op, ctx: emit_function('abs', op, ctx),
    OpCode.SIGN: lambda op, ctx: emit_function('sign', op, ctx),
    OpCode.FLOOR: lambda op, ctx: emit_function('floor', op, ctx),
    OpCode.CEIL: lambda op, ctx: emit_function('ceil', op, ctx),
    OpCode.FRACT: lambda op, ctx: emit_function('fract', op, ctx),
    OpCode.MIN: lambda op, ctx: emit_function('min', op, ctx),
    OpCode.MAX: lambda op, ctx: emit_function('max', op, ctx),
    OpCode.CLAMP: lambda op, ctx: emit_function('clamp', op, ctx),
    OpCode.REMAP: emit_remap,

    # Trigonometry
    OpCode.SIN: lambda op, ctx: emit_function('sin', op, ctx),
    OpCode.COS: lambda op, ctx: emit_function('cos', op, ctx),
    OpCode.TAN: lambda op, ctx: emit_function('tan', op, ctx),

    # Interpolation
    OpCode.MIX: lambda op, ctx: emit_function('mix', op, ctx),
    OpCode.STEP: emit_step,
    OpCode.SMOOTHSTEP: emit_smoothstep,

    # Vector
    OpCode.DOT: emit_dot,
    OpCode.CROSS: emit_cross,
    OpCode.LENGTH: emit_length,
    OpCode.DISTANCE: emit_distance,
    OpCode.NORMALIZE: emit_normalize,
    OpCode.REFLECT: emit_reflect,

    # Types
    OpCode.CONSTRUCT: emit_construct,
    OpCode.SWIZZLE: emit_swizzle,

    # Patterns / Textures
    OpCode.CHECKER: emit_checker,
    OpCode.SIMPLEX_NOISE: emit_simplex_noise,
    OpCode.SAMPLE: emit_sample,
    OpCode.TRIPLANAR: emit_triplanar,

    # Depth
    OpCode.VIEWPORT_DEPTH_TEXTURE: emit_depth,
    OpCode.LINEAR_DEPTH: emit_depth,
    OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z: emit_depth,
    OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z: emit_depth,
    OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH: emit_depth,
}


def get_emitter(opcode: OpCode) -> Optional[EmitterType]:
    """Get emitter function for an OpCode, or None if not found."""
    return EMITTER_REGISTRY.get(opcode)


__all__ = ['EMITTER_REGISTRY', 'get_emitter']
