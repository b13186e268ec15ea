"""
Graph model: the passive containers the editor mutates.

Nodes, edges and data bags carry no behaviour beyond (de)serialization and
immutable replacement. `on_change` is the editor callback attached to each
node's data; it is never persisted and is re-attached on load.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from .nodes.registry import Registry, default_registry, lookup, normalize_type


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class NodeData:
    """Free-form data bag of a node."""
    label: str = ''
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()
    value: Any = None
    values: Dict[str, Any] = field(default_factory=dict)
    meta: Optional[Dict[str, Any]] = None
    code: Optional[str] = None
    on_change: Optional[Callable] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'label': self.label,
            'inputs': list(self.inputs),
            'outputs': list(self.outputs),
        }
        if self.value is not None:
            data['value'] = self.value
        if self.values:
            data['values'] = dict(self.values)
        if self.meta is not None:
            data['meta'] = self.meta
        if self.code is not None:
            data['code'] = self.code
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], on_change: Callable = None) -> 'NodeData':
        return cls(
            label=data.get('label', ''),
            inputs=tuple(data.get('inputs') or ()),
            outputs=tuple(data.get('outputs') or ()),
            value=data.get('value'),
            values=dict(data.get('values') or {}),
            meta=data.get('meta'),
            code=data.get('code'),
            on_change=on_change,
        )


@dataclass(frozen=True)
class Node:
    id: str
    type: str
    data: NodeData = field(default_factory=NodeData)
    position: Position = field(default_factory=Position)

    @property
    def type_id(self) -> str:
        """Registry type id ('add' for a stored 'addNode')."""
        return normalize_type(self.type)

    def with_value(self, value) -> 'Node':
        """Copy of the node with a new primary value."""
        return replace(self, data=replace(self.data, value=value))

    def with_values(self, **values) -> 'Node':
        """Copy of the node with named values overwritten."""
        merged = dict(self.data.values)
        merged.update(values)
        return replace(self, data=replace(self.data, values=merged))

    def with_data(self, **changes) -> 'Node':
        return replace(self, data=replace(self.data, **changes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'position': {'x': self.position.x, 'y': self.position.y},
            'data': self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], on_change: Callable = None) -> 'Node':
        pos = data.get('position') or {}
        return cls(
            id=str(data['id']),
            type=data.get('type', ''),
            data=NodeData.from_dict(data.get('data') or {}, on_change),
            position=Position(pos.get('x', 0.0), pos.get('y', 0.0)),
        )


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'id': self.id, 'source': self.source, 'target': self.target}
        if self.source_handle is not None:
            data['sourceHandle'] = self.source_handle
        if self.target_handle is not None:
            data['targetHandle'] = self.target_handle
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Edge':
        return cls(
            id=str(data['id']),
            source=str(data['source']),
            target=str(data['target']),
            source_handle=data.get('sourceHandle'),
            target_handle=data.get('targetHandle'),
        )


# =============================================================================
# Editor operations
# =============================================================================

def create_node(type_id: str, position: Position = None, registry: Registry = None,
                node_id: str = None, on_change: Callable = None) -> Node:
    """New node seeded from its definition: id '<type>-<ms timestamp>', type '<type>Node'."""
    definition = lookup(registry if registry is not None else default_registry(), type_id)
    if definition is None:
        raise KeyError(f"Unknown node type '{type_id}'")
    if node_id is None:
        node_id = f"{definition.type}-{int(time.time() * 1000)}"
    return Node(
        id=node_id,
        type=f"{definition.type}Node",
        data=NodeData.from_dict(definition.new_node_data(), on_change),
        position=position or Position(),
    )


def connect(edges: List[Edge], edge: Edge) -> List[Edge]:
    """Adds `edge`, replacing whatever already feeds the same target handle."""
    kept = [e for e in edges
            if not (e.target == edge.target and e.target_handle == edge.target_handle)]
    kept.append(edge)
    return kept


def remove_node(nodes: List[Node], edges: List[Edge], node_id: str) -> Tuple[List[Node], List[Edge]]:
    """Drops a node and every edge attached to it."""
    return (
        [n for n in nodes if n.id != node_id],
        [e for e in edges if e.source != node_id and e.target != node_id],
    )


def replace_node(nodes: List[Node], node: Node) -> List[Node]:
    """Swaps the node with the same id for `node`."""
    return [node if n.id == node.id else n for n in nodes]
