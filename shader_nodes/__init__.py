"""
Shader Nodes: graph-to-program compiler for a procedural shading node editor.

Backends:
    MaterialCompiler   live expression tree (Program) with a parameter cache
    emit_source        standalone three.js TSL module
    evaluate_preview   CPU numbers for a single node (thumbnails)
"""

from .errors import (
    ShaderNodesError, CompilationError, GraphCompileError, ShapeError,
    DocumentError, CodeNodeError, ConfigError,
)
from .model import Node, NodeData, Edge, Position, create_node, connect, remove_node, replace_node
from .nodes.registry import default_registry, build_registry, lookup, categories
from .graph_extract.compiler import MaterialCompiler, Program, topology_fingerprint
from .codegen.tsl import emit_source
from .preview.interpreter import PreviewSample, evaluate_preview, render_preview
from .document import GraphDocument
from .session import MaterialSession
from .config import CompilerSettings
from .logger import setup_logger, get_logger

__version__ = "0.1.0"

__all__ = [
    'ShaderNodesError', 'CompilationError', 'GraphCompileError', 'ShapeError',
    'DocumentError', 'CodeNodeError', 'ConfigError',
    'Node', 'NodeData', 'Edge', 'Position', 'create_node', 'connect', 'remove_node', 'replace_node',
    'default_registry', 'build_registry', 'lookup', 'categories',
    'MaterialCompiler', 'Program', 'topology_fingerprint',
    'emit_source',
    'PreviewSample', 'evaluate_preview', 'render_preview',
    'GraphDocument', 'MaterialSession', 'CompilerSettings',
    'setup_logger', 'get_logger',
]
