from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..ir.expr import Expr, Input, attr, op, template_inputs
from ..ir.ops import OpCode

# Node kinds
KIND_EXPR = 'expr'      # semantics given by a template
KIND_OUTPUT = 'output'  # material output, handled by the compiler
KIND_CODE = 'code'      # shape and semantics come from user code

# Handle name -> canonical attribute substituted when the handle is unconnected
SEMANTIC_DEFAULTS: Mapping[str, Expr] = MappingProxyType({
    'uv': attr('uv'),
    'normal': attr('normalLocal'),
    'position': attr('positionLocal'),
    'near': attr('cameraNear'),
    'far': attr('cameraFar'),
})


@dataclass(frozen=True)
class InputSpec:
    """A connectable input handle. `semantic` is used instead of zero when unconnected."""
    name: str
    semantic: Optional[Expr] = None

    @property
    def has_semantic_default(self) -> bool:
        return self.semantic is not None


@dataclass(frozen=True)
class SlotSpec:
    """A material output slot."""
    name: str
    default: Any = None        # raw default; None -> slot only set when connected
    prop: str = ''             # material property, e.g. 'colorNode'

    @property
    def optional(self) -> bool:
        return self.default is None


@dataclass(frozen=True)
class NodeDefinition:
    """
    Immutable description of a node type.

    `template` is the node's semantics as an expression over Input
    placeholders; both backends derive their output from it. The primary
    value of leaf nodes (Float, Color, UV scale) is read through the
    reserved `value` placeholder.
    """
    type: str
    label: str
    category: str
    inputs: Tuple[InputSpec, ...] = ()
    outputs: Tuple[str, ...] = ('out',)
    template: Optional[Expr] = None
    initial_value: Any = None
    initial_values: Mapping[str, Any] = field(default_factory=dict)
    meta: Optional[Mapping[str, Any]] = None
    kind: str = KIND_EXPR
    # data -> extra template bindings (e.g. the texture map of an image node)
    bindings: Optional[Callable[[Any], Dict[str, Expr]]] = None
    # data.values keys (or 'value') whose change requires a rebuild
    rebuild_keys: Tuple[str, ...] = ()
    reads_depth: bool = False
    slots: Tuple[SlotSpec, ...] = ()
    material_class: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'initial_values', MappingProxyType(dict(self.initial_values)))

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(i.name for i in self.inputs)

    @property
    def uses_primary_value(self) -> bool:
        if self.template is None:
            return False
        return 'value' in template_inputs(self.template) and 'value' not in self.input_names

    def input_spec(self, name: str) -> InputSpec:
        for spec in self.inputs:
            if spec.name == name:
                return spec
        return InputSpec(name, SEMANTIC_DEFAULTS.get(name))

    def new_node_data(self) -> Dict[str, Any]:
        """Data bag for a freshly created node of this type."""
        data = {
            'label': self.label,
            'inputs': list(self.input_names),
            'outputs': list(self.outputs),
            'values': dict(self.initial_values),
        }
        if self.initial_value is not None:
            data['value'] = self.initial_value
        if self.meta:
            data['meta'] = dict(self.meta)
        return data


def inp(name: str, semantic: Optional[Expr] = None) -> InputSpec:
    """Input handle with the canonical semantic default for its role, if any."""
    if semantic is None:
        semantic = SEMANTIC_DEFAULTS.get(name)
    return InputSpec(name, semantic)


def define_node(type: str, label: str, category: str, inputs=(), outputs=('out',),
                template: Optional[Expr] = None, **kwargs) -> NodeDefinition:
    specs = tuple(i if isinstance(i, InputSpec) else inp(i) for i in inputs)
    return NodeDefinition(type=type, label=label, category=category,
                          inputs=specs, outputs=tuple(outputs),
                          template=template, **kwargs)


def standard_op(type: str, label: str, category: str, opcode: OpCode,
                inputs, initial_values=None, **kwargs) -> NodeDefinition:
    """Definition whose template is `opcode` applied to its inputs in order."""
    specs = tuple(i if isinstance(i, InputSpec) else inp(i) for i in inputs)
    template = op(opcode, *[Input(s.name) for s in specs])
    return define_node(type, label, category, specs, template=template,
                       initial_values=initial_values or {}, **kwargs)
