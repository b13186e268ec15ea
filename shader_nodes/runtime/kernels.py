"""
Numeric kernels shared by the reference evaluator and the CPU preview.

Every value is a float64 array of shape (N, C): N samples (or 1 for a
constant that broadcasts) by C components (1 for scalars). Kernels follow
GLSL semantics with the editor's safety rules: `mod` is floored, `sqrt`
clamps its argument to 0, a zero divisor becomes 0.001 (mod: 1) and a zero
remap range becomes 0.0001.

Engine-only inputs (textures, depth buffer, camera) have fixed CPU
approximations so thumbnails stay meaningful without a renderer.
"""

from typing import Callable, Dict, Sequence

import numpy as np

from ..ir.ops import OpCode, SWIZZLE_INDEX

Kernel = Callable[..., np.ndarray]

SAFE_DIVISOR = 0.001
SAFE_MODULUS = 1.0
SAFE_RANGE = 0.0001

# Attribute approximations for a flat quad facing the camera
NORMAL_APPROX = (0.0, 0.0, 1.0)
DEPTH_APPROX = 0.5
CAMERA_NEAR = 0.1
CAMERA_FAR = 100.0
VIEW_Z_SCALE = 10.0
TEXTURE_GRID = 5
TEXTURE_DARK = 0.2
TEXTURE_LIGHT = 0.8
NOISE_SCALE = 5.0


# =============================================================================
# Shape helpers
# =============================================================================

def make_value(components: Sequence[float]) -> np.ndarray:
    """(1, C) array for a constant."""
    return np.asarray(components, dtype=np.float64).reshape(1, -1)


def scalar(value: float) -> np.ndarray:
    return np.full((1, 1), float(value))


def first(a: np.ndarray) -> np.ndarray:
    """Scalar part of a value, shape (N, 1)."""
    return a[..., :1]


def _safe(a: np.ndarray, replacement: float) -> np.ndarray:
    return np.where(a == 0, replacement, a)


def as_vec3(a: np.ndarray) -> np.ndarray:
    if a.shape[-1] == 1:
        return np.repeat(a, 3, axis=-1)
    if a.shape[-1] < 3:
        return np.concatenate([a, np.zeros(a.shape[:-1] + (3 - a.shape[-1],))], axis=-1)
    return a[..., :3]


def _dot(a, b):
    return np.sum(a * b, axis=-1, keepdims=True)


def _length(a):
    return np.sqrt(np.sum(a * a, axis=-1, keepdims=True))


# =============================================================================
# Constructors / Conversion
# =============================================================================

def swizzle(a: np.ndarray, mask: str) -> np.ndarray:
    """
    Component selection. A scalar splats; reading a component the value
    does not have raises ValueError.
    """
    size = a.shape[-1]
    if size == 1:
        return np.repeat(a, len(mask), axis=-1)
    indices = [SWIZZLE_INDEX[c] for c in mask]
    if max(indices) >= size:
        raise ValueError(f"Cannot read .{mask} from a {size}-component value")
    return a[..., indices]


def construct(args: Sequence[np.ndarray], count: int) -> np.ndarray:
    """vecN(...) from the concatenated components of `args`."""
    rows = max(a.shape[0] for a in args)
    parts = [np.broadcast_to(a, (rows, a.shape[-1])) for a in args]
    joined = np.concatenate(parts, axis=-1)
    if joined.shape[-1] == 1:
        return np.repeat(joined, count, axis=-1)
    if joined.shape[-1] < count:
        pad = np.zeros((rows, count - joined.shape[-1]))
        return np.concatenate([joined, pad], axis=-1)
    return joined[..., :count]


# =============================================================================
# Patterns / Textures
# =============================================================================

def _uv_parts(uv):
    u = uv[..., 0:1]
    v = uv[..., 1:2] if uv.shape[-1] > 1 else u
    return u, v


def checker(uv):
    """1 on odd cells of a 2x2-per-unit grid, 0 on even cells."""
    u, v = _uv_parts(uv)
    return np.mod(np.floor(u * 2) + np.floor(v * 2), 2)


def pseudo_noise(x, y):
    n = np.sin(x * 12.9898 + y * 78.233) * 43758.5453
    return n - np.floor(n)


def smooth_noise(x, y):
    """Value noise: hashed lattice corners blended with a smoothstep curve."""
    i, j = np.floor(x), np.floor(y)
    f, g = x - i, y - j
    a = pseudo_noise(i, j)
    b = pseudo_noise(i + 1, j)
    c = pseudo_noise(i, j + 1)
    d = pseudo_noise(i + 1, j + 1)
    u = f * f * (3 - 2 * f)
    v = g * g * (3 - 2 * g)
    bottom = a + (b - a) * u
    top = c + (d - c) * u
    return bottom + (top - bottom) * v


def simplex_noise(uv):
    u, v = _uv_parts(uv)
    return smooth_noise(u * NOISE_SCALE, v * NOISE_SCALE)


def texture_grid(uv):
    """Placeholder image: 5x5 grid of dark/light cells, opaque."""
    u, v = _uv_parts(uv)
    cells = np.floor(u * TEXTURE_GRID) + np.floor(v * TEXTURE_GRID)
    grey = np.where(np.mod(cells, 2) == 0, TEXTURE_DARK, TEXTURE_LIGHT)
    return np.concatenate([grey, grey, grey, np.ones_like(grey)], axis=-1)


def triplanar(tex, scale, position, normal):
    return texture_grid(position[..., :2] if position.shape[-1] > 1 else position)


# =============================================================================
# Kernel table
# =============================================================================

def _remap(x, in_low, in_high, out_low, out_high):
    span = _safe(in_high - in_low, SAFE_RANGE)
    return out_low + (x - in_low) * (out_high - out_low) / span


def _smoothstep(low, high, x):
    t = np.clip((x - low) / _safe(high - low, SAFE_RANGE), 0.0, 1.0)
    return t * t * (3 - 2 * t)


def _normalize(a):
    length = _length(a)
    return a / np.where(length == 0, 1.0, length)


def _reflect(i, n):
    return i - 2.0 * _dot(n, i) * n


KERNELS: Dict[OpCode, Kernel] = {
    # Arithmetic
    OpCode.ADD: lambda a, b: a + b,
    OpCode.SUB: lambda a, b: a - b,
    OpCode.MUL: lambda a, b: a * b,
    OpCode.DIV: lambda a, b: a / _safe(b, SAFE_DIVISOR),
    OpCode.MOD: lambda a, b: np.mod(a, _safe(b, SAFE_MODULUS)),
    OpCode.NEGATE: lambda a: -a,

    # Math / Common
    OpCode.POW: lambda a, b: np.power(a, b),
    OpCode.SQRT: lambda a: np.sqrt(np.maximum(a, 0.0)),
    OpCode.RECIPROCAL: lambda a: 1.0 / _safe(a, SAFE_DIVISOR),
    OpCode.ONE_MINUS: lambda a: 1.0 - a,
    OpCode.ABS: np.abs,
    OpCode.SIGN: np.sign,
    OpCode.FLOOR: np.floor,
    OpCode.CEIL: np.ceil,
    OpCode.FRACT: lambda a: a - np.floor(a),
    OpCode.MIN: np.minimum,
    OpCode.MAX: np.maximum,
    OpCode.CLAMP: lambda x, lo, hi: np.minimum(np.maximum(x, lo), hi),
    OpCode.REMAP: _remap,

    # Trigonometry
    OpCode.SIN: np.sin,
    OpCode.COS: np.cos,
    OpCode.TAN: np.tan,

    # Interpolation
    OpCode.MIX: lambda a, b, t: a + (b - a) * t,
    OpCode.STEP: lambda edge, x: np.where(x < edge, 0.0, 1.0),
    OpCode.SMOOTHSTEP: _smoothstep,

    # Vector
    OpCode.DOT: _dot,
    OpCode.CROSS: lambda a, b: np.cross(as_vec3(a), as_vec3(b)),
    OpCode.LENGTH: _length,
    OpCode.DISTANCE: lambda a, b: _length(a - b),
    OpCode.NORMALIZE: _normalize,
    OpCode.REFLECT: _reflect,

    # Patterns / Textures
    OpCode.CHECKER: checker,
    OpCode.SIMPLEX_NOISE: simplex_noise,
    OpCode.SAMPLE: lambda tex, uv: texture_grid(uv),
    OpCode.TRIPLANAR: triplanar,

    # Depth
    OpCode.VIEWPORT_DEPTH_TEXTURE: lambda uv: uv[..., 0:1],
    OpCode.LINEAR_DEPTH: first,
    OpCode.PERSPECTIVE_DEPTH_TO_VIEW_Z: lambda depth, near, far: first(depth) * VIEW_Z_SCALE,
    OpCode.LOGARITHMIC_DEPTH_TO_VIEW_Z: lambda depth, near, far: first(depth) * VIEW_Z_SCALE,
    OpCode.VIEW_Z_TO_ORTHOGRAPHIC_DEPTH: lambda view_z, near, far: first(view_z) / VIEW_Z_SCALE,
}


def get_kernel(opcode: OpCode) -> Kernel:
    kernel = KERNELS.get(opcode)
    if kernel is None:
        raise KeyError(f"No kernel for {opcode.name}")
    return kernel


def apply(opcode: OpCode, args: Sequence[np.ndarray]) -> np.ndarray:
    """Runs the kernel for `opcode`, keeping the (N, C) layout."""
    with np.errstate(all='ignore'):
        result = np.asarray(get_kernel(opcode)(*args), dtype=np.float64)
    if result.ndim == 1:
        result = result.reshape(-1, 1)
    return result
