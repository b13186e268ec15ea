# Graph Extraction Package
# Converts editor node graphs into live material programs

from .core import GraphWalker, MaterialSettings, find_output_node, read_settings
from .compiler import MaterialCompiler, Program, LiveWalker, topology_fingerprint

__all__ = [
    'GraphWalker', 'MaterialSettings', 'find_output_node', 'read_settings',
    'MaterialCompiler', 'Program', 'LiveWalker', 'topology_fingerprint',
]
