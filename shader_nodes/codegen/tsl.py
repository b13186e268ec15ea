import logging
import re
from typing import Dict, List, Optional, Set

from ..errors import CompilationError, ShaderNodesError
from ..graph_extract.core import GraphWalker, NodeResult, find_output_node, read_settings
from ..ir.expr import Attribute, Constant, Expr, Input, Operation, Symbol, Texture, Uniform
from ..model import Node, Edge
from ..nodes.output import SIDE_BACK, SIDE_DOUBLE
from ..nodes.registry import Registry, default_registry
from .emitters import get_emitter, format_constant, format_number
from .shader_lib import get_functions_code, get_functions_imports
from .tsl_context import TSLContext

logger = logging.getLogger(__name__)

# Import name -> module; everything else comes from three/tsl
WEBGPU_IMPORTS = {'MeshStandardNodeMaterial', 'MeshBasicNodeMaterial'}
THREE_IMPORTS = {'BackSide', 'DoubleSide', 'TextureLoader'}
IMPORT_MODULES = ('three', 'three/tsl', 'three/webgpu')

# Identifiers the generated module declares outside the per-node consts
RESERVED_NAMES = {'material', 'textureLoader'}
TEXTURE_VAR = re.compile(r'map_\d+')


def format_imports(names: Set[str]) -> List[str]:
    """One sorted import statement per module, in IMPORT_MODULES order."""
    groups: Dict[str, List[str]] = {m: [] for m in IMPORT_MODULES}
    for name in names:
        if name in WEBGPU_IMPORTS:
            groups['three/webgpu'].append(name)
        elif name in THREE_IMPORTS:
            groups['three'].append(name)
        else:
            groups['three/tsl'].append(name)
    return [
        f"import {{ {', '.join(sorted(groups[m]))} }} from '{m}';"
        for m in IMPORT_MODULES if groups[m]
    ]


def _escape(text: str) -> str:
    return text.replace('\\', '\\\\').replace("'", "\\'")


class TSLWalker(GraphWalker):
    """
    Graph walk that declares one `const` per node, in completion order, so
    every variable is declared before it is referenced.
    """

    def __init__(self, nodes, edges, registry, generator: 'TSLGenerator'):
        super().__init__(nodes, edges, registry)
        self.generator = generator
        self.var_names: Dict[str, str] = {}
        self._taken: Set[str] = set()

    def var_name(self, node: Node) -> str:
        """'<type>_<id tail>', e.g. 'add_1712345' for node 'add-1712345' of type 'addNode'."""
        if node.id not in self.var_names:
            clean_type = re.sub(r'[^a-zA-Z0-9]', '', (node.type or 'node').replace('Node', '')).lower() or 'node'
            if clean_type[0].isdigit():
                clean_type = f"n{clean_type}"
            clean_id = re.sub(r'[^a-zA-Z0-9]', '_', node.id).split('_')[-1] or 'n'
            name = base = f"{clean_type}_{clean_id}"
            suffix = 2
            while name in self._taken or name in RESERVED_NAMES or TEXTURE_VAR.fullmatch(name):
                name = f"{base}_{suffix}"
                suffix += 1
            self._taken.add(name)
            self.var_names[node.id] = name
        return self.var_names[node.id]

    def unknown_node(self, node: Node) -> NodeResult:
        self.generator.statements.append(f"// Unknown node type: {node.type}")
        return self.neutral()

    def finish_node(self, node: Node, result: NodeResult) -> NodeResult:
        var = self.var_name(node)
        if isinstance(result, dict):
            declared = {}
            for name, expr in result.items():
                declared[name] = self._declare(f"{var}_{re.sub(r'[^a-zA-Z0-9_]', '_', name)}", expr)
            return declared
        return self._declare(var, result)

    def _declare(self, var: str, expr: Expr) -> Symbol:
        self.generator.statements.append(f"const {var} = {self.generator.print_expr(expr)};")
        return Symbol(var, expr.type)


class TSLGenerator:
    """
    Generates TSL (three.js shading language) source from a node graph.

    Output layout: imports, helper functions, texture loads, one `const`
    per reachable node, then the material and its slot assignments.
    """

    def __init__(self, registry: Registry = None):
        self.registry = registry if registry is not None else default_registry()
        self.ctx = TSLContext(self)
        self._reset()

    def _reset(self):
        self.imports: Set[str] = set()
        self.library: Set[str] = set()
        self.statements: List[str] = []
        self.textures: Dict[str, str] = {}

    # --- Expression printing ---

    def print_expr(self, expr: Expr) -> str:
        """Resolves an expression to its TSL source text."""
        if isinstance(expr, Symbol):
            return expr.name
        if isinstance(expr, (Constant, Uniform)):
            return format_constant(expr.value, expr.type, self.ctx.use)
        if isinstance(expr, Attribute):
            self.imports.add(expr.name)
            return f"{expr.name}()" if expr.call else expr.name
        if isinstance(expr, Texture):
            return self._texture_var(expr.source)
        if isinstance(expr, Operation):
            emitter = get_emitter(expr.opcode)
            if emitter is None:
                raise CompilationError(f"No TSL emitter for {expr.opcode.name}")
            return emitter(expr, self.ctx)
        if isinstance(expr, Input):
            raise CompilationError(f"Unbound input '{expr.handle}'")
        raise CompilationError(f"Cannot print {expr!r}")

    def _texture_var(self, source: str) -> str:
        if source not in self.textures:
            self.textures[source] = f"map_{len(self.textures)}"
        return self.textures[source]

    # --- Sections ---

    def generate(self, nodes: List[Node], edges: List[Edge]) -> str:
        self._reset()
        walker = TSLWalker(nodes, edges, self.registry, self)

        material_type = 'MeshStandardNodeMaterial'
        assignments: List[str] = []

        found = find_output_node(nodes, self.registry)
        if found is not None:
            output_node, definition = found
            material_type = definition.material_class
            for slot in definition.slots:
                expr = walker.resolve_slot(output_node, slot)
                if expr is not None:
                    assignments.append(f"material.{slot.prop} = {self.print_expr(expr)};")
            assignments.extend(self._settings_lines(read_settings(output_node, nodes, self.registry)))
        else:
            logger.debug("No output node; emitting an empty material")

        self.imports.add(material_type)

        sections = [self._generate_header()]
        library = self._generate_library()
        if library:
            sections.append(library)
        textures = self._generate_textures()
        if textures:
            sections.append(textures)
        sections.append('\n'.join(['// TSL Graph Generation', *self.statements]))
        sections.append('\n'.join([f"const material = new {material_type}();", *assignments]))
        return '\n\n'.join(sections) + '\n'

    def _settings_lines(self, settings) -> List[str]:
        lines = []
        if settings.transparent:
            lines.append("material.transparent = true;")
        if settings.side == SIDE_BACK:
            self.imports.add('BackSide')
            lines.append("material.side = BackSide;")
        elif settings.side == SIDE_DOUBLE:
            self.imports.add('DoubleSide')
            lines.append("material.side = DoubleSide;")
        if not settings.depth_write:
            lines.append("material.depthWrite = false;")
        if not settings.depth_test:
            lines.append("material.depthTest = false;")
        if settings.alpha_test is not None:
            lines.append(f"material.alphaTest = {format_number(settings.alpha_test)};")
        return lines

    def _generate_header(self) -> str:
        names = set(self.imports) | get_functions_imports(self.library)
        if self.textures:
            names.add('TextureLoader')
        return '\n'.join(format_imports(names))

    def _generate_library(self) -> str:
        return get_functions_code(self.library)

    def _generate_textures(self) -> str:
        if not self.textures:
            return ''
        lines = ["const textureLoader = new TextureLoader();"]
        for source, var in self.textures.items():
            lines.append(f"const {var} = textureLoader.load('{_escape(source)}');")
        return '\n'.join(lines)


def emit_source(nodes: List[Node], edges: List[Edge], registry: Registry = None) -> str:
    """
    Standalone TSL module for the graph.

    Never raises for graph problems: a failure is reported as a single
    comment line so the editor's code view always has something to show.
    """
    try:
        return TSLGenerator(registry).generate(nodes, edges)
    except ShaderNodesError as e:
        logger.error(f"TSL generation failed: {e}")
        return f"// Error generating code: {e}\n"
    except Exception as e:
        logger.exception(f"TSL generation failed: {e}")
        return f"// Error generating code: {type(e).__name__}: {e}\n"
