"""
Persisted graph documents.

A document is ``{"nodes": [...], "edges": [...]}`` in the editor's JSON
shape (see model.Node.to_dict / model.Edge.to_dict). Loading validates the
whole document before touching the in-memory graph, so a rejected load
leaves the current graph as it was.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .errors import DocumentError
from .model import Node, Edge, connect

logger = logging.getLogger(__name__)


def parse_document(payload: Dict[str, Any], on_change: Callable = None) -> Tuple[List[Node], List[Edge]]:
    """
    Converts a decoded document into nodes and edges.

    Raises:
        DocumentError: If the node or edge array is missing or an entry is malformed
    """
    if not isinstance(payload, dict):
        raise DocumentError("Document must be an object with 'nodes' and 'edges'")
    raw_nodes = payload.get('nodes')
    raw_edges = payload.get('edges')
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise DocumentError("Document must contain 'nodes' and 'edges' arrays")

    try:
        nodes = [Node.from_dict(n, on_change) for n in raw_nodes]
        edges = [Edge.from_dict(e) for e in raw_edges]
    except (KeyError, TypeError, AttributeError) as e:
        raise DocumentError(f"Malformed document entry: {e}") from e

    ids = [n.id for n in nodes]
    if len(set(ids)) != len(ids):
        raise DocumentError("Document contains duplicate node ids")

    return nodes, edges


def serialize_document(nodes: List[Node], edges: List[Edge]) -> Dict[str, Any]:
    return {
        'nodes': [n.to_dict() for n in nodes],
        'edges': [e.to_dict() for e in edges],
    }


class GraphDocument:
    """
    The editor's current graph.

    `on_change` is re-attached to every node on load since callbacks are
    never part of the saved document.
    """

    def __init__(self, nodes: List[Node] = None, edges: List[Edge] = None,
                 on_change: Optional[Callable] = None):
        self.nodes: List[Node] = list(nodes or [])
        self.edges: List[Edge] = list(edges or [])
        self.on_change = on_change

    def load(self, payload: Union[str, bytes, Dict[str, Any]]):
        """
        Replace the graph with a document (dict or JSON text).

        Raises:
            DocumentError: If the document is rejected; the graph is unchanged
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                logger.warning(f"Rejected document: invalid JSON ({e})")
                raise DocumentError(f"Invalid JSON: {e}") from e

        try:
            nodes, edges = parse_document(payload, self.on_change)
        except DocumentError as e:
            logger.warning(f"Rejected document: {e}")
            raise

        self.nodes, self.edges = nodes, edges
        logger.debug(f"Loaded document ({len(nodes)} nodes, {len(edges)} edges)")

    def save(self) -> Dict[str, Any]:
        return serialize_document(self.nodes, self.edges)

    def dumps(self, indent: int = 2) -> str:
        return json.dumps(self.save(), indent=indent)

    def load_file(self, path: Union[str, Path]):
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise DocumentError(f"Cannot read {path}: {e}") from e
        self.load(text)

    def save_file(self, path: Union[str, Path]):
        Path(path).write_text(self.dumps(), encoding='utf-8')

    # --- Editing ---

    def add_node(self, node: Node):
        if self.on_change is not None and node.data.on_change is None:
            node = node.with_data(on_change=self.on_change)
        self.nodes.append(node)

    def connect(self, edge: Edge):
        self.edges = connect(self.edges, edge)

    def node(self, node_id: str) -> Optional[Node]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None
