# Core Graph Walk
# Resolves node inputs by following edges, shared by the live compiler and
# the TSL text generator.
#
# Resolution order for input handle H of node N:
#   1. an edge into (N, H) -> build the source node, project its output handle
#   2. a semantic default declared for H (uv(), normalLocal, cameraNear, ...)
#   3. N's local value for H -> backend hook (Uniform or literal)
#   4. neutral float(0)

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..errors import ShaderNodesError, GraphCompileError
from ..ir.expr import Expr, Constant, attr, substitute, swizzle
from ..model import Node, Edge
from ..nodes.base import NodeDefinition, InputSpec, SlotSpec, SEMANTIC_DEFAULTS, KIND_CODE, KIND_OUTPUT
from ..nodes.output import SIDE_FRONT
from ..nodes.registry import Registry, lookup

logger = logging.getLogger(__name__)

# A built node is one expression, or output name -> expression for Code nodes
NodeResult = Union[Expr, Dict[str, Expr]]


@dataclass
class MaterialSettings:
    """Root-level properties encoded by the output node's settings."""
    transparent: bool = False
    side: int = SIDE_FRONT
    depth_write: bool = True
    depth_test: bool = True
    alpha_test: Optional[float] = None


def find_output_node(nodes: List[Node], registry: Registry) -> Optional[Tuple[Node, NodeDefinition]]:
    """First node whose definition is a material output."""
    for node in nodes:
        definition = lookup(registry, node.type)
        if definition is not None and definition.kind == KIND_OUTPUT:
            return node, definition
    return None


def read_settings(output_node: Node, nodes: List[Node], registry: Registry) -> MaterialSettings:
    values = output_node.data.values
    # Sampling the depth buffer from an opaque pass is not allowed
    reads_depth = any(
        getattr(lookup(registry, n.type), 'reads_depth', False) for n in nodes
    )
    try:
        side = int(values.get('side', SIDE_FRONT) or SIDE_FRONT)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid side setting on '{output_node.id}'")
        side = SIDE_FRONT
    alpha_test = values.get('alphaTest')
    if alpha_test is not None:
        try:
            alpha_test = float(alpha_test)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid alphaTest setting on '{output_node.id}'")
            alpha_test = None
    return MaterialSettings(
        transparent=reads_depth or bool(values.get('transparent')),
        side=side,
        depth_write=bool(values.get('depthWrite', True)),
        depth_test=bool(values.get('depthTest', True)),
        alpha_test=alpha_test,
    )


class GraphWalker:
    """
    Depth-first walk over a node graph.

    Each node is built at most once per walk (`_memo`). A node that reaches
    itself through its own inputs is found in `_on_stack` and the back-edge
    resolves to a neutral value; the rest of the subtree is built normally.

    Subclasses supply the backend specifics through the hooks at the bottom.
    """

    def __init__(self, nodes: List[Node], edges: List[Edge], registry: Registry):
        self.registry = registry
        self.nodes = list(nodes)
        self.edges = list(edges)
        self.nodes_by_id: Dict[str, Node] = {}
        for node in self.nodes:
            self.nodes_by_id.setdefault(node.id, node)

        # (target id, target handle) -> edge; the first edge wins if the
        # one-edge-per-handle rule was broken upstream
        self.incoming: Dict[Tuple[str, Optional[str]], Edge] = {}
        for edge in self.edges:
            self.incoming.setdefault((edge.target, edge.target_handle), edge)

        self._memo: Dict[str, NodeResult] = {}
        self._on_stack: Set[str] = set()
        self.built: List[str] = []
        self.cycles: List[str] = []

    # --- Edges ---

    def edge_into(self, node_id: str, handle: str) -> Optional[Edge]:
        return self.incoming.get((node_id, handle))

    def resolve_edge(self, edge: Edge) -> Expr:
        source = self.nodes_by_id.get(edge.source)
        if source is None:
            logger.debug(f"Edge '{edge.id}' points at missing node '{edge.source}'")
            return self.neutral()
        return self.project(self.build_node(source), edge.source_handle)

    def project(self, result: NodeResult, handle: Optional[str]) -> Expr:
        """Selects the output `handle` of a built node."""
        if isinstance(result, dict):
            if handle in result:
                return result[handle]
            if handle in (None, 'out') and result:
                return next(iter(result.values()))
            return self.neutral()
        if handle and handle != 'out':
            return swizzle(result, handle)
        return result

    # --- Nodes ---

    def build_node(self, node: Node) -> NodeResult:
        if node.id in self._memo:
            return self._memo[node.id]
        if node.id in self._on_stack:
            logger.debug(f"Cycle broken at node '{node.id}'")
            self.cycles.append(node.id)
            return self.neutral()

        self._on_stack.add(node.id)
        try:
            result = self._build(node)
        except GraphCompileError:
            raise
        except (ShaderNodesError, ArithmeticError, TypeError, ValueError, KeyError) as e:
            raise GraphCompileError(str(e), node.id) from e
        finally:
            self._on_stack.discard(node.id)

        result = self.finish_node(node, result)
        self._memo[node.id] = result
        self.built.append(node.id)
        return result

    def _build(self, node: Node) -> NodeResult:
        definition = lookup(self.registry, node.type)
        if definition is None:
            logger.warning(f"Unknown node type: {node.type}")
            return self.unknown_node(node)

        if definition.kind == KIND_CODE:
            return self.build_code_node(node)

        if definition.kind == KIND_OUTPUT or definition.template is None:
            return self.neutral()

        bindings: Dict[str, Expr] = {}
        for spec in definition.inputs:
            bindings[spec.name] = self.resolve_input(node, spec)
        if definition.uses_primary_value:
            raw = node.data.value if node.data.value is not None else definition.initial_value
            bindings['value'] = self.local_value(node, 'value', raw if raw is not None else 0.0)
        if definition.bindings is not None:
            bindings.update(definition.bindings(node.data))

        return substitute(definition.template, bindings)

    def resolve_input(self, node: Node, spec: InputSpec) -> Expr:
        edge = self.edge_into(node.id, spec.name)
        if edge is not None:
            return self.resolve_edge(edge)
        if spec.semantic is not None:
            return spec.semantic
        raw = node.data.values.get(spec.name)
        if raw is None:
            raw = 0.0
        return self.local_value(node, spec.name, raw)

    def resolve_code_inputs(self, node: Node) -> Dict[str, Expr]:
        """
        Inputs of a Code node. Handles with nothing connected and no local
        value are left out so the user code can pick its own fallback.
        """
        resolved: Dict[str, Expr] = {}
        for handle in node.data.inputs:
            edge = self.edge_into(node.id, handle)
            if edge is not None:
                resolved[handle] = self.resolve_edge(edge)
            elif handle in SEMANTIC_DEFAULTS:
                resolved[handle] = SEMANTIC_DEFAULTS[handle]
            elif node.data.values.get(handle) is not None:
                resolved[handle] = self.local_value(node, handle, node.data.values[handle])
        return resolved

    def build_code_node(self, node: Node) -> Dict[str, Expr]:
        from ..code_node import run_code
        return run_code(node.data.code or '', self.resolve_code_inputs(node), node_id=node.id)

    # --- Output node ---

    def resolve_slot(self, output_node: Node, slot: SlotSpec) -> Optional[Expr]:
        """Expression for a material slot, or None for an unused optional slot."""
        edge = self.edge_into(output_node.id, slot.name)
        if edge is not None:
            value = self.resolve_edge(edge)
            if slot.name == 'position':
                # Position slots displace the mesh
                return attr('positionLocal').add(value)
            return value
        if slot.optional:
            return None
        raw = output_node.data.values.get(slot.name, slot.default)
        if raw is None:
            raw = slot.default
        return self.local_value(output_node, slot.name, raw)

    # --- Backend hooks ---

    def neutral(self) -> Expr:
        return Constant(0.0)

    def local_value(self, node: Node, handle: str, raw: Any) -> Expr:
        """Expression for an unconnected handle holding a local value."""
        return Constant(raw)

    def unknown_node(self, node: Node) -> NodeResult:
        return self.neutral()

    def finish_node(self, node: Node, result: NodeResult) -> NodeResult:
        """Called once per built node; returns what dependents will see."""
        return result
