"""
Custom exceptions for Shader Nodes.

Graph problems that the editor produces all the time (unknown node types,
disconnected inputs, cycles) are NOT exceptions; they degrade to neutral
values. The classes below cover the failures that must reach the user.

Exception Hierarchy:
    ShaderNodesError (base)
    ├── CompilationError
    │   ├── GraphCompileError
    │   └── ShapeError
    ├── DocumentError
    ├── CodeNodeError
    └── ConfigError
"""


class ShaderNodesError(Exception):
    """Base exception for all Shader Nodes errors."""
    pass


# =============================================================================
# Compilation Errors
# =============================================================================

class CompilationError(ShaderNodesError):
    """Base exception for compilation/code generation errors."""
    pass


class GraphCompileError(CompilationError):
    """
    Raised when walking the node graph fails.

    Attributes:
        node_id: Id of the node being built when the failure happened
    """

    def __init__(self, message: str, node_id: str = None):
        super().__init__(message)
        self.node_id = node_id

    def __str__(self):
        msg = super().__str__()
        if self.node_id:
            return f"Node '{self.node_id}': {msg}"
        return msg


class ShapeError(CompilationError, TypeError):
    """Raised when an operation receives operands of incompatible shape."""
    pass


# =============================================================================
# Document / Code / Config Errors
# =============================================================================

class DocumentError(ShaderNodesError):
    """Raised when a persisted graph document is malformed."""
    pass


class CodeNodeError(ShaderNodesError):
    """
    Raised when the user code of a Code node cannot be probed or run.

    Attributes:
        node_id: Id of the Code node, when known
    """

    def __init__(self, message: str, node_id: str = None):
        super().__init__(message)
        self.node_id = node_id


class ConfigError(ShaderNodesError):
    """Raised when a settings file cannot be read."""
    pass
