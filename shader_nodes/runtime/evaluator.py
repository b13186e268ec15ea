# Reference Expression Evaluator
# Computes the numeric value of live expression trees on the CPU.
#
# Supports:
# - Every OpCode with a kernel in runtime/kernels.py
# - Constants, Uniforms (current value), Attributes (flat-quad approximations)
# - Input placeholders bound by the caller (node templates in the preview)

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import numpy as np

from ..errors import CompilationError
from ..ir.expr import Attribute, Constant, Expr, Input, Operation, Symbol, Texture, Uniform
from ..ir.ops import OpCode
from . import kernels

logger = logging.getLogger(__name__)


@dataclass
class EvalContext:
    """
    Sample coordinates for evaluation.

    uv is an (N, 2) array; every value computed under this context has N
    rows (or 1 when it does not depend on the sample).
    """
    uv: np.ndarray = field(default_factory=lambda: np.array([[0.5, 0.5]]))
    time: float = 0.0

    @classmethod
    def at(cls, u: float, v: float, time: float = 0.0) -> 'EvalContext':
        return cls(np.array([[float(u), float(v)]]), float(time))

    @classmethod
    def grid(cls, width: int, height: int, time: float = 0.0) -> 'EvalContext':
        """Row-major pixel grid: u = x / width, v = 1 - y / height."""
        ys, xs = np.mgrid[0:height, 0:width]
        u = xs.reshape(-1) / float(width)
        v = 1.0 - ys.reshape(-1) / float(height)
        return cls(np.stack([u, v], axis=-1), float(time))

    @property
    def count(self) -> int:
        return self.uv.shape[0]


def attribute_value(name: str, context: EvalContext) -> np.ndarray:
    """CPU approximation of an engine attribute."""
    uv = context.uv
    if name in ('uv', 'screenUV', 'viewportUV'):
        return uv
    if name in ('normalLocal', 'normalView'):
        return kernels.make_value(kernels.NORMAL_APPROX)
    if name in ('positionLocal', 'positionView', 'modelViewPosition'):
        return np.concatenate([uv, np.zeros((uv.shape[0], 1))], axis=-1)
    if name == 'time':
        return kernels.scalar(context.time)
    if name in ('depth', 'viewportLinearDepth'):
        return kernels.scalar(kernels.DEPTH_APPROX)
    if name == 'cameraNear':
        return kernels.scalar(kernels.CAMERA_NEAR)
    if name == 'cameraFar':
        return kernels.scalar(kernels.CAMERA_FAR)
    logger.debug(f"No approximation for attribute '{name}'")
    return kernels.scalar(0.0)


def constant_value(value) -> np.ndarray:
    if isinstance(value, tuple):
        return kernels.make_value(value)
    return kernels.scalar(value)


class ProgramEvaluator:
    """
    Evaluates Expr trees to (N, C) numpy arrays.

    Shared sub-expressions are computed once per `evaluate` call.
    """

    def __init__(self):
        self._cache: Dict[int, np.ndarray] = {}

    def evaluate(self, expr: Expr, context: EvalContext,
                 bindings: Optional[Mapping[str, np.ndarray]] = None) -> np.ndarray:
        """
        Args:
            expr: Expression to evaluate
            context: Sample coordinates
            bindings: Values for Input placeholders, by handle

        Returns:
            Array of shape (N, C) or (1, C)
        """
        self._cache = {}
        return self._eval(expr, context, bindings or {})

    def _eval(self, expr: Expr, context: EvalContext, bindings) -> np.ndarray:
        key = id(expr)
        if key in self._cache:
            return self._cache[key]
        result = self._evaluate_impl(expr, context, bindings)
        self._cache[key] = result
        return result

    def _evaluate_impl(self, expr: Expr, context: EvalContext, bindings) -> np.ndarray:
        # === CONSTANTS / PARAMETERS ===
        if isinstance(expr, (Constant, Uniform)):
            return constant_value(expr.value)

        # === ATTRIBUTES ===
        if isinstance(expr, Attribute):
            return attribute_value(expr.name, context)

        # === TEMPLATE PLACEHOLDERS ===
        if isinstance(expr, Input):
            bound = bindings.get(expr.handle)
            return bound if bound is not None else kernels.scalar(0.0)

        # === TEXTURE MAPS (sampled by SAMPLE / TRIPLANAR) ===
        if isinstance(expr, Texture):
            return kernels.scalar(0.0)

        if isinstance(expr, Symbol):
            raise CompilationError(f"Cannot evaluate source reference '{expr.name}'")

        if not isinstance(expr, Operation):
            raise CompilationError(f"Cannot evaluate {expr!r}")

        args = [self._eval(i, context, bindings) for i in expr.inputs]

        # === SWIZZLE (extract components) ===
        if expr.opcode == OpCode.SWIZZLE:
            return kernels.swizzle(args[0], expr.attrs['mask'])

        # === CONSTRUCT ===
        if expr.opcode == OpCode.CONSTRUCT:
            return kernels.construct(args, expr.attrs['type'].component_count())

        # === KERNELS ===
        return kernels.apply(expr.opcode, args)


def evaluate(expr: Expr, context: EvalContext = None) -> np.ndarray:
    """One-shot evaluation of `expr` at `context` (default: uv 0.5, 0.5)."""
    return ProgramEvaluator().evaluate(expr, context or EvalContext())
