# TSL Code Generation Package
# Emits a standalone three.js TSL module for a node graph

from .tsl import TSLGenerator, TSLWalker, emit_source, format_imports

__all__ = ['TSLGenerator', 'TSLWalker', 'emit_source', 'format_imports']
