import json
import unittest
from unittest.mock import MagicMock

import pytest

from shader_nodes.document import GraphDocument, parse_document, serialize_document
from shader_nodes.errors import DocumentError
from shader_nodes.model import Edge, Position, connect, create_node, remove_node, replace_node

from conftest import make_edge, make_node


class TestNodeOperations(unittest.TestCase):
    def test_create_node(self):
        node = create_node('float', Position(10, 20), node_id='f1')
        self.assertEqual(node.type, 'floatNode')
        self.assertEqual(node.type_id, 'float')
        self.assertEqual(node.data.label, 'Float')
        self.assertEqual(node.data.value, 0.5)
        self.assertEqual(node.position, Position(10, 20))

    def test_create_node_generates_id(self):
        node = create_node('addNode')
        self.assertTrue(node.id.startswith('add-'))
        self.assertEqual(node.data.values, {'a': 1.0, 'b': 1.0})

    def test_create_unknown_type(self):
        with self.assertRaises(KeyError):
            create_node('bogus')

    def test_with_value_is_a_copy(self):
        node = make_node('f1', 'float', 1.0)
        edited = node.with_value(3.0)
        self.assertEqual(node.data.value, 1.0)
        self.assertEqual(edited.data.value, 3.0)
        self.assertEqual(edited.id, node.id)

    def test_with_values_merges(self):
        node = make_node('a1', 'add').with_values(b=4.0)
        self.assertEqual(node.data.values, {'a': 1.0, 'b': 4.0})

    def test_on_change_not_compared(self):
        node = make_node('f1', 'float')
        self.assertEqual(node, node.with_data(on_change=MagicMock()))


class TestEdgeOperations(unittest.TestCase):
    def test_connect_replaces_existing_edge(self):
        edges = [make_edge('f1', 'a1', 'a')]
        edges = connect(edges, make_edge('f2', 'a1', 'a'))
        self.assertEqual(len(edges), 1)
        self.assertEqual(edges[0].source, 'f2')

    def test_connect_other_handle(self):
        edges = connect([make_edge('f1', 'a1', 'a')], make_edge('f2', 'a1', 'b'))
        self.assertEqual(len(edges), 2)

    def test_remove_node_drops_edges(self):
        nodes = [make_node('f1', 'float'), make_node('a1', 'add')]
        edges = [make_edge('f1', 'a1', 'a'), make_edge('a1', 'out', 'color')]
        nodes, edges = remove_node(nodes, edges, 'a1')
        self.assertEqual([n.id for n in nodes], ['f1'])
        self.assertEqual(edges, [])

    def test_replace_node(self):
        nodes = [make_node('f1', 'float', 1.0), make_node('f2', 'float', 2.0)]
        nodes = replace_node(nodes, nodes[0].with_value(5.0))
        self.assertEqual([n.data.value for n in nodes], [5.0, 2.0])


# =============================================================================
# Documents
# =============================================================================

def test_round_trip_preserves_persisted_fields(checker_graph):
    nodes, edges = checker_graph
    edges = edges + [make_edge('c1', 'out', 'roughness', 'out')]
    text = json.dumps(serialize_document(nodes, edges))

    doc = GraphDocument()
    doc.load(text)

    assert doc.nodes == nodes
    assert doc.edges == edges


def test_edge_json_shape():
    edge = make_edge('s1', 'a1', 'a', 'x')
    assert edge.to_dict() == {
        'id': 'e-s1-x-a1-a', 'source': 's1', 'target': 'a1',
        'sourceHandle': 'x', 'targetHandle': 'a',
    }
    assert Edge.from_dict(edge.to_dict()) == edge


def test_rejected_load_leaves_graph_untouched(add_graph):
    nodes, edges = add_graph
    doc = GraphDocument(nodes, edges)

    with pytest.raises(DocumentError):
        doc.load({'nodes': []})
    with pytest.raises(DocumentError):
        doc.load('{not json')
    with pytest.raises(DocumentError):
        doc.load({'nodes': [{'type': 'floatNode'}], 'edges': []})

    assert doc.nodes == nodes
    assert doc.edges == edges


def test_duplicate_ids_rejected():
    payload = {'nodes': [make_node('f1', 'float').to_dict()] * 2, 'edges': []}
    with pytest.raises(DocumentError, match="duplicate"):
        parse_document(payload)


def test_on_change_reattached_on_load(add_graph):
    callback = MagicMock()
    source = GraphDocument(*add_graph)

    doc = GraphDocument(on_change=callback)
    doc.load(source.save())

    assert all(n.data.on_change is callback for n in doc.nodes)
    assert 'on_change' not in json.dumps(doc.save())


def test_file_round_trip(tmp_path, add_graph):
    path = tmp_path / "graph.json"
    GraphDocument(*add_graph).save_file(path)

    doc = GraphDocument()
    doc.load_file(path)
    assert doc.nodes == add_graph[0]
    assert doc.node('a1').type == 'addNode'


def test_missing_file(tmp_path):
    with pytest.raises(DocumentError):
        GraphDocument().load_file(tmp_path / "missing.json")


def test_add_node_attaches_callback():
    callback = MagicMock()
    doc = GraphDocument(on_change=callback)
    doc.add_node(make_node('f1', 'float'))
    doc.connect(make_edge('f1', 'out', 'color'))
    assert doc.node('f1').data.on_change is callback
    assert len(doc.edges) == 1
