# Node Definition Catalogue
# Immutable descriptions of every node type, looked up by type id

from .base import NodeDefinition, InputSpec, SlotSpec, SEMANTIC_DEFAULTS, KIND_EXPR, KIND_OUTPUT, KIND_CODE
from .registry import build_registry, default_registry, lookup, normalize_type, categories, Registry

__all__ = [
    'NodeDefinition', 'InputSpec', 'SlotSpec', 'SEMANTIC_DEFAULTS',
    'KIND_EXPR', 'KIND_OUTPUT', 'KIND_CODE',
    'build_registry', 'default_registry', 'lookup', 'normalize_type', 'categories', 'Registry',
]
