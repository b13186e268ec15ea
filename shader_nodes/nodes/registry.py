# Node Definition Registry
# Maps node type id -> NodeDefinition

from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .base import NodeDefinition
from .input import CONSTANT_NODES, ATTRIBUTE_NODES
from .math import MATH_NODES
from .converter import CONVERTER_NODES, SPLIT_NODE
from .vector import VECTOR_NODES
from .textures import TEXTURE_NODES, FRESNEL_NODE
from .depth import DEPTH_NODES
from .output import PREVIEW_NODE, CODE_NODE, OUTPUT_NODES

Registry = Mapping[str, NodeDefinition]

# Registration order is the editor listing order
DEFAULT_DEFINITIONS: List[NodeDefinition] = [
    *CONSTANT_NODES,
    *ATTRIBUTE_NODES,
    *MATH_NODES,
    SPLIT_NODE,
    *VECTOR_NODES,
    *CONVERTER_NODES,
    *TEXTURE_NODES,
    FRESNEL_NODE,
    *DEPTH_NODES,
    PREVIEW_NODE,
    CODE_NODE,
    *OUTPUT_NODES,
]


def build_registry(definitions: Iterable[NodeDefinition] = None) -> Registry:
    """Builds a read-only type id -> definition mapping."""
    if definitions is None:
        definitions = DEFAULT_DEFINITIONS
    table: Dict[str, NodeDefinition] = {}
    for definition in definitions:
        if definition.type in table:
            raise ValueError(f"Node type '{definition.type}' registered twice")
        table[definition.type] = definition
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def default_registry() -> Registry:
    """The registry of built-in node types, built on first use."""
    return build_registry()


def normalize_type(type_id: Optional[str]) -> str:
    """Stored node types carry a 'Node' suffix ('addNode'); definitions do not."""
    if not type_id:
        return ''
    if type_id.endswith('Node') and len(type_id) > 4:
        return type_id[:-4]
    return type_id


def lookup(registry: Registry, type_id: Optional[str]) -> Optional[NodeDefinition]:
    """Get the definition for a node type, or None if not found."""
    return registry.get(normalize_type(type_id))


def categories(registry: Registry) -> Dict[str, List[str]]:
    """Category -> type ids, both in registration order."""
    listing: Dict[str, List[str]] = {}
    for type_id, definition in registry.items():
        listing.setdefault(definition.category, []).append(type_id)
    return listing

__all__ = ['Registry', 'DEFAULT_DEFINITIONS', 'build_registry', 'default_registry',
           'normalize_type', 'lookup', 'categories']
