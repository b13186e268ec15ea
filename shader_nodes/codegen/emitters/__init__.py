# TSL Emitters Package
# One emitter per OpCode; each returns the TSL expression text for an operation

from .registry import EMITTER_REGISTRY, get_emitter
from .const import format_constant, format_number

__all__ = ['EMITTER_REGISTRY', 'get_emitter', 'format_constant', 'format_number']
