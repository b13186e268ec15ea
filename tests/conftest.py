"""
Pytest configuration and shared fixtures for Shader Nodes tests.

This file provides:
1. Node / edge builders that mirror what the editor stores
2. Shared fixtures for the registry and common graphs
3. Helper assertions for generated TSL source

Usage:
    pytest tests/ -v
"""

import re

import pytest

from shader_nodes.model import Edge, create_node
from shader_nodes.nodes.registry import default_registry


# =============================================================================
# BUILDERS
# =============================================================================

def make_node(node_id, type_id, value=None, **values):
    """
    Node of a registered type with its definition's initial data,
    optionally overriding the primary value and named values.

    Example:
        make_node('f1', 'float', 2.0)
        make_node('m1', 'material', side=1)
    """
    node = create_node(type_id, node_id=node_id)
    if value is not None:
        node = node.with_value(value)
    if values:
        node = node.with_values(**values)
    return node


def make_edge(source, target, target_handle, source_handle=None):
    """Edge from `source` into `target`'s input `target_handle`."""
    suffix = f"-{source_handle}" if source_handle else ''
    return Edge(
        id=f"e-{source}{suffix}-{target}-{target_handle}",
        source=source,
        target=target,
        source_handle=source_handle,
        target_handle=target_handle,
    )


def make_add_chain(length):
    """
    float -> add -> add -> ... -> material.color, `length` add nodes long.

    Example:
        nodes, edges = make_add_chain(3)   # f0 -> a1 -> a2 -> a3 -> out
    """
    nodes = [make_node('f0', 'float', 1.0)]
    edges = []
    previous = 'f0'
    for i in range(1, length + 1):
        node_id = f"a{i}"
        nodes.append(make_node(node_id, 'add'))
        edges.append(make_edge(previous, node_id, 'a'))
        previous = node_id
    nodes.append(make_node('out', 'material'))
    edges.append(make_edge(previous, 'out', 'color'))
    return nodes, edges


class FakeClock:
    """Manually advanced clock for debounce tests."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def registry():
    """
    The built-in node definition registry.

    Example:
        def test_lookup(registry):
            assert lookup(registry, 'addNode') is not None
    """
    return default_registry()


@pytest.fixture
def checker_graph():
    """
    Scenario: uv scaled by 4 -> checker -> material color.

    Example:
        def test_something(checker_graph):
            nodes, edges = checker_graph
    """
    nodes = [
        make_node('u1', 'uv', 4.0),
        make_node('c1', 'checker'),
        make_node('out', 'material'),
    ]
    edges = [
        make_edge('u1', 'c1', 'uv'),
        make_edge('c1', 'out', 'color'),
    ]
    return nodes, edges


@pytest.fixture
def add_graph():
    """
    Scenario: float(2) + float(3) -> material color.

    Example:
        def test_something(add_graph):
            nodes, edges = add_graph
    """
    nodes = [
        make_node('f1', 'float', 2.0),
        make_node('f2', 'float', 3.0),
        make_node('a1', 'add'),
        make_node('out', 'material'),
    ]
    edges = [
        make_edge('f1', 'a1', 'a'),
        make_edge('f2', 'a1', 'b'),
        make_edge('a1', 'out', 'color'),
    ]
    return nodes, edges


@pytest.fixture
def clock():
    """Fake clock starting at t=0; call clock.advance(seconds)."""
    return FakeClock()


# =============================================================================
# HELPER ASSERTIONS
# =============================================================================

_DECLARATION = re.compile(r'^const (\w+) = ')


def declared_names(source):
    """Variable names of top-level `const` declarations, in order."""
    names = []
    for line in source.splitlines():
        match = _DECLARATION.match(line)
        if match:
            names.append(match.group(1))
    return names


def assert_declared_before_use(source):
    """Every `const` is declared before any line that references it."""
    lines = source.splitlines()
    for index, line in enumerate(lines):
        match = _DECLARATION.match(line)
        if not match:
            continue
        name = match.group(1)
        pattern = re.compile(rf'\b{re.escape(name)}\b')
        for earlier in lines[:index]:
            assert not pattern.search(earlier), f"'{name}' used before its declaration: {earlier}"


def import_line(source, module):
    """The import statement for `module`, or None."""
    for line in source.splitlines():
        if line.startswith('import ') and line.endswith(f"from '{module}';"):
            return line
    return None
