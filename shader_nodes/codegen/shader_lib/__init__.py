# TSL Helper Library Package
# Re-exports the function registry used by the TSL generator

from .registry import TSL_FUNCTIONS, resolve_dependencies, get_functions_code, get_functions_imports

__all__ = [
    'TSL_FUNCTIONS',
    'resolve_dependencies',
    'get_functions_code',
    'get_functions_imports',
]
