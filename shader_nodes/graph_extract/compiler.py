# Live Material Compiler
# Builds an executable Program (Expr DAG per material slot) from a node graph.
#
# Unconnected inputs become Uniforms held in a parameter cache keyed by
# (node id, handle). The cache outlives rebuilds, so editing a value only
# writes the Uniform; the program is rebuilt only when the graph topology
# or a rebuild-relevant setting changes.

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ShaderNodesError
from ..ir.expr import Expr, Uniform, coerce_value, value_type
from ..model import Node, Edge
from ..nodes.registry import Registry, default_registry, lookup
from .core import GraphWalker, find_output_node, read_settings

logger = logging.getLogger(__name__)

ParameterKey = Tuple[str, str]


@dataclass(eq=False)
class Program:
    """
    An installed material program.

    Attributes:
        material_type: Engine material class ('MeshStandardNodeMaterial', ...)
        slots: Slot name ('color', 'fragment', ...) -> expression
        parameters: Uniforms referenced by the slots
        fingerprint: Topology fingerprint the program was built from
    """
    material_type: str
    slots: Dict[str, Expr] = field(default_factory=dict)
    transparent: bool = False
    side: int = 0
    depth_write: bool = True
    depth_test: bool = True
    alpha_test: Optional[float] = None
    parameters: Dict[ParameterKey, Uniform] = field(default_factory=dict)
    fingerprint: str = ''

    def slot(self, name: str) -> Optional[Expr]:
        return self.slots.get(name)

    def material_properties(self) -> Dict[str, Expr]:
        """Engine material property ('colorNode', ...) -> expression."""
        return {f"{name}Node": expr for name, expr in self.slots.items()}


def _rebuild_value(node: Node, key: str) -> Any:
    if key == 'value':
        return node.data.value
    if key == 'code':
        return node.data.code
    return node.data.values.get(key)


def topology_fingerprint(nodes: List[Node], edges: List[Edge], registry: Registry) -> str:
    """
    Summarizes everything that changes the program's structure: edges, node
    ids and types, and the per-type rebuild keys (material settings,
    texture URLs, code). Plain parameter values are left out.
    """
    edge_part = sorted(
        f"{e.source}:{e.source_handle}->{e.target}:{e.target_handle}" for e in edges
    )
    node_part = sorted(f"{n.id}:{n.type}" for n in nodes)
    key_part = []
    for node in nodes:
        definition = lookup(registry, node.type)
        if definition is None:
            continue
        for key in definition.rebuild_keys:
            key_part.append(f"{node.id}.{key}={_rebuild_value(node, key)!r}")
    key_part.sort()
    return '|'.join(edge_part) + '#' + '|'.join(node_part) + '#' + '|'.join(key_part)


class LiveWalker(GraphWalker):
    """Graph walk that binds unconnected inputs to cached Uniforms."""

    def __init__(self, nodes, edges, registry, parameters: Dict[ParameterKey, Uniform]):
        super().__init__(nodes, edges, registry)
        self.parameters = parameters
        self.used: Dict[ParameterKey, Uniform] = {}
        # New or retyped Uniforms; merged into the cache only once the build succeeds
        self.staged: Dict[ParameterKey, Uniform] = {}

    def local_value(self, node: Node, handle: str, raw: Any) -> Expr:
        key = (node.id, handle)
        uniform = self.staged.get(key)
        if uniform is None:
            uniform = self.parameters.get(key)
        if uniform is None or uniform.type != value_type(raw):
            uniform = Uniform(node.id, handle, raw)
            self.staged[key] = uniform
        elif coerce_value(raw, uniform.type) != uniform.value:
            uniform.set_value(raw)
        self.used[key] = uniform
        return uniform


class MaterialCompiler:
    """
    Turns node graphs into Programs.

    `compile` is atomic: a failing build logs the error, records it in
    `error` and keeps the previously installed program.
    """

    def __init__(self, registry: Registry = None):
        self.registry = registry if registry is not None else default_registry()
        self.parameters: Dict[ParameterKey, Uniform] = {}
        self.program: Optional[Program] = None
        self.fingerprint: Optional[str] = None
        self.error: Optional[str] = None
        self.build_count = 0
        self.last_walker: Optional[LiveWalker] = None

    def compile(self, nodes: List[Node], edges: List[Edge]) -> Optional[Program]:
        """
        Returns the program for the graph, rebuilding only if its topology
        changed since the last successful build.
        """
        fingerprint = topology_fingerprint(nodes, edges, self.registry)
        if fingerprint == self.fingerprint:
            self.update_parameters(nodes)
            return self.program

        try:
            program = self.build(nodes, edges, fingerprint)
        except ShaderNodesError as e:
            logger.error(f"Material compilation failed: {e}")
            self.error = str(e)
            return self.program
        except Exception as e:
            # RecursionError on very deep graphs, bad data outside the walk
            logger.exception(f"Material compilation failed: {e}")
            self.error = f"{type(e).__name__}: {e}"
            return self.program

        self.program = program
        self.fingerprint = fingerprint
        self.error = None
        return program

    def build(self, nodes: List[Node], edges: List[Edge], fingerprint: str = '') -> Optional[Program]:
        """Unconditional build; raises on failure and installs nothing."""
        self.build_count += 1
        found = find_output_node(nodes, self.registry)
        if found is None:
            logger.debug("No output node in graph")
            return None
        output_node, definition = found

        walker = LiveWalker(nodes, edges, self.registry, self.parameters)
        self.last_walker = walker

        slots: Dict[str, Expr] = {}
        for slot in definition.slots:
            expr = walker.resolve_slot(output_node, slot)
            if expr is not None:
                slots[slot.name] = expr

        settings = read_settings(output_node, nodes, self.registry)

        self.parameters.update(walker.staged)
        # Drop Uniforms of deleted nodes
        live_ids = {n.id for n in nodes}
        for key in [k for k in self.parameters if k[0] not in live_ids]:
            del self.parameters[key]

        logger.info(f"Built {definition.material_class} ({len(walker.built)} nodes, "
                     f"{len(walker.used)} parameters)")
        return Program(
            material_type=definition.material_class,
            slots=slots,
            transparent=settings.transparent,
            side=settings.side,
            depth_write=settings.depth_write,
            depth_test=settings.depth_test,
            alpha_test=settings.alpha_test,
            parameters=dict(walker.used),
            fingerprint=fingerprint,
        )

    def update_parameters(self, nodes: List[Node]):
        """Writes current node values into the cached Uniforms; never rebuilds."""
        for node in nodes:
            if node.data.value is not None:
                self._write((node.id, 'value'), node.data.value)
            for handle, raw in node.data.values.items():
                if raw is not None:
                    self._write((node.id, handle), raw)

    def _write(self, key: ParameterKey, raw: Any):
        uniform = self.parameters.get(key)
        if uniform is None:
            return
        if coerce_value(raw, uniform.type) != uniform.value:
            uniform.set_value(raw)

    def reset(self):
        self.parameters.clear()
        self.program = None
        self.fingerprint = None
        self.error = None
