"""
Editor-facing material session.

Value edits reach the installed program immediately through the parameter
cache. Structural edits (connections, node types, material settings, code)
arm a debounce deadline; the rebuild runs from `poll()` once the graph has
been quiet for `debounce_ms`, always against the latest snapshot.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

from .codegen.tsl import emit_source
from .config import CompilerSettings
from .errors import ShaderNodesError
from .graph_extract.compiler import MaterialCompiler, Program, topology_fingerprint
from .logger import setup_logger
from .model import Node, Edge
from .nodes.registry import Registry, default_registry
from .preview.interpreter import render_preview

logger = logging.getLogger(__name__)


class MaterialSession:
    """
    Owns a MaterialCompiler and decides when it rebuilds.

    Example:
        session = MaterialSession()
        session.update(nodes, edges)   # on every editor change
        session.poll()                 # once per frame
    """

    def __init__(self, registry: Registry = None, settings: CompilerSettings = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings or CompilerSettings()
        self.compiler = MaterialCompiler(self.registry)
        self._clock = clock

        self._pending: Optional[Tuple[List[Node], List[Edge]]] = None
        self._pending_fingerprint: Optional[str] = None
        self._deadline: Optional[float] = None
        self._latest: Tuple[List[Node], List[Edge]] = ([], [])

    @classmethod
    def from_settings_file(cls, path, registry: Registry = None, **kwargs) -> "MaterialSession":
        """Load settings from a JSON file and configure logging at its level."""
        settings = CompilerSettings.load(path)
        setup_logger(settings.log_level)
        return cls(registry=registry, settings=settings, **kwargs)

    # --- State ---

    @property
    def program(self) -> Optional[Program]:
        return self.compiler.program

    @property
    def error(self) -> Optional[str]:
        return self.compiler.error

    @property
    def pending(self) -> bool:
        return self._pending is not None

    # --- Editor events ---

    def update(self, nodes: List[Node], edges: List[Edge]):
        """Record the current graph. Never rebuilds by itself."""
        nodes, edges = list(nodes), list(edges)
        self._latest = (nodes, edges)
        self.compiler.update_parameters(nodes)

        fingerprint = topology_fingerprint(nodes, edges, self.registry)
        if fingerprint == self.compiler.fingerprint and self._pending is None:
            return
        if fingerprint == self._pending_fingerprint:
            # Same structure as the pending rebuild; keep the latest values
            self._pending = (nodes, edges)
            return

        self._pending = (nodes, edges)
        self._pending_fingerprint = fingerprint
        self._deadline = self._clock() + self.settings.debounce_ms / 1000.0
        logger.debug(f"Rebuild scheduled in {self.settings.debounce_ms} ms")

    def poll(self) -> bool:
        """Rebuild if the debounce deadline has passed. True when a new program was installed."""
        if self._pending is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Rebuild now if anything is pending."""
        if self._pending is None:
            return False
        nodes, edges = self._pending
        self._pending = None
        self._pending_fingerprint = None
        self._deadline = None

        previous = self.compiler.program
        start = self._clock()
        program = self.compiler.compile(nodes, edges)
        if self.compiler.error is not None:
            return False
        if program is not previous:
            logger.debug(f"Material rebuilt ({len(nodes)} nodes) in "
                        f"{(self._clock() - start) * 1000:.1f} ms")
            return True
        return False

    def export_source(self) -> str:
        """TSL source for the latest graph, pending edits included."""
        nodes, edges = self._latest
        return emit_source(nodes, edges, self.registry)

    def preview(self, node_id: str, time: float = 0.0):
        """RGBA thumbnail of a node in the latest graph, sized by the settings."""
        nodes, edges = self._latest
        node = next((n for n in nodes if n.id == node_id), None)
        if node is None:
            raise ShaderNodesError(f"No node with id '{node_id}'")
        size = self.settings.preview_size
        return render_preview(node, nodes, edges, width=size, height=size,
                              registry=self.registry,
                              max_depth=self.settings.preview_max_depth, time=time)
