"""Tests for Graph Builder - synthesizes a KnowledgeGraph from documents."""

import json
import logging
import random

import pytest

from atlasgraph.graph import Document, EdgeKind, GraphBuilder, TitleIndex, build_graph
from atlasgraph.graph.builder import PlacementBox
from tests.core.graph_test_helpers import edge_pairs, make_document, make_node


def _node_sets(graph):
    """Node and edge sets ignoring positions."""
    nodes = {(n.id, n.label, n.source_document_id, n.original_local_id, n.color) for n in graph.nodes}
    edges = {(e.id, e.source, e.target, e.kind) for e in graph.edges}
    return nodes, edges


class TestNamespacing:
    """Node ids are namespaced by document id."""

    def test_identical_local_ids_do_not_collide(self, two_documents, rng):
        graph = build_graph(two_documents, rng=rng)

        ids = [n.id for n in graph.nodes]
        assert ids == ["docA::1", "docA::2", "docB::1", "docB::2"]
        assert len(set(ids)) == len(ids)

    def test_node_keeps_origin(self, two_documents, rng):
        graph = build_graph(two_documents, rng=rng)

        node = graph.find_by_id("docB::2")
        assert node is not None
        assert node.source_document_id == "docB"
        assert node.original_local_id == "2"
        assert node.label == "Notes"

    def test_structural_edges_are_namespaced(self, two_documents, rng):
        graph = build_graph(two_documents, rng=rng)

        structural = list(graph.iter_edges(EdgeKind.STRUCTURAL))
        assert [(e.id, e.source, e.target) for e in structural] == [
            ("docA::e1", "docA::1", "docA::2"),
            ("docB::e1", "docB::1", "docB::2"),
        ]

    def test_edges_never_cross_documents_by_local_id(self, rng):
        """An edge naming a local id only its sibling document has is dropped."""
        docs = [
            make_document("A", nodes=[("x", "X")]),
            make_document("B", nodes=[("y", "Y")], edges=[("y", "x")]),
        ]
        graph = build_graph(docs, rng=rng)
        assert graph.edge_count() == 0

    def test_separator_inside_ids_does_not_collide(self, rng):
        docs = [
            make_document("a", nodes=[("b::c", "First"), ("x", "Other")]),
            make_document("a::b", nodes=[("c", "Third"), ("d", "Fourth")], edges=[("c", "d")]),
        ]
        graph = build_graph(docs, rng=rng)

        assert graph.node_count() == 4
        assert len({n.id for n in graph.nodes}) == 4
        (edge,) = graph.iter_edges(EdgeKind.STRUCTURAL)
        assert graph.find_by_id(edge.source).label == "Third"
        assert graph.find_by_id(edge.target).label == "Fourth"
        assert graph.find_by_id(edge.source).source_document_id == "a::b"

    def test_repeated_document_id_skipped_whole(self, rng):
        docs = [
            make_document("d1", nodes=[("1", "Alpha"), ("2", "Beta")]),
            make_document("d1", nodes=[("1", "Gamma"), ("2", "Delta")], edges=[("1", "2")]),
        ]
        graph = build_graph(docs, rng=rng)

        assert sorted(n.label for n in graph.nodes) == ["Alpha", "Beta"]
        assert graph.edge_count() == 0
        assert graph.skipped_documents() == ["d1"]
        assert graph.stats()["documents"] == 2

    def test_repeated_document_id_logged(self, caplog, rng):
        docs = [make_document("d1", nodes=[("1", "A")]), make_document("d1", nodes=[("1", "B")])]

        with caplog.at_level(logging.WARNING, logger="atlasgraph.graph.builder"):
            build_graph(docs, rng=rng)

        assert "already added" in caplog.text


class TestEdgeValidity:
    """Every emitted edge has both endpoints in the node set."""

    def test_structural_edge_ids_unique(self, rng):
        payload = {
            "nodes": [{"id": "1"}, {"id": "2"}],
            "edges": [{"source": "1", "target": "2"}, {"source": "1", "target": "2"}],
        }
        graph = build_graph([Document(id="A", serialized_graph=json.dumps(payload))], rng=rng)

        ids = [e.id for e in graph.edges]
        assert ids == ["A::1-2", "A::1-2#2"]

    def test_dangling_edge_dropped(self, rng):
        docs = [make_document("A", nodes=[("1", "One")], edges=[("1", "missing")])]
        graph = build_graph(docs, rng=rng)

        assert graph.edge_count() == 0

    def test_all_endpoints_exist(self, two_documents, rng):
        docs = two_documents + [
            make_document("C", nodes=[("1", "[[Budget]] [[Nope]]")], edges=[("1", "ghost")])
        ]
        graph = build_graph(docs, rng=rng)

        for edge in graph.edges:
            assert graph.find_by_id(edge.source) is not None
            assert graph.find_by_id(edge.target) is not None


class TestReferenceEdges:
    """Wikilinks in labels become reference edges."""

    def test_title_resolution_case_insensitive(self, two_documents, rng):
        graph = build_graph(two_documents, rng=rng)

        assert edge_pairs(graph.edges, EdgeKind.REFERENCE) == [("docB::1", "docA::1")]

    def test_title_resolution_same_document(self, rng):
        docs = [make_document("A", nodes=[("1", "Project Plan"), ("2", "See [[Project Plan]] for details")])]
        graph = build_graph(docs, rng=rng)

        assert edge_pairs(graph.edges, EdgeKind.REFERENCE) == [("A::2", "A::1")]

    def test_whitespace_insensitive(self, rng):
        docs = [make_document("A", nodes=[("1", "  Project Plan "), ("2", "[[project plan]]")])]
        graph = build_graph(docs, rng=rng)

        assert edge_pairs(graph.edges, EdgeKind.REFERENCE) == [("A::2", "A::1")]

    def test_self_loop_excluded(self, rng):
        docs = [make_document("A", nodes=[("1", "Foo [[Foo]]")])]
        graph = build_graph(docs, rng=rng)

        assert graph.edge_count(EdgeKind.REFERENCE) == 0

    def test_fan_out(self, rng):
        docs = [
            make_document("A", nodes=[("1", "Apple")]),
            make_document("B", nodes=[("1", "Apple"), ("2", "Eat [[Apple]]")]),
        ]
        graph = build_graph(docs, rng=rng)

        assert edge_pairs(graph.edges, EdgeKind.REFERENCE) == [
            ("B::2", "A::1"),
            ("B::2", "B::1"),
        ]

    def test_multiple_titles_in_one_label(self, rng):
        docs = [make_document("A", nodes=[("1", "Alpha"), ("2", "Beta"), ("3", "[[Alpha]] vs [[Beta]]")])]
        graph = build_graph(docs, rng=rng)

        assert edge_pairs(graph.edges, EdgeKind.REFERENCE) == [("A::3", "A::1"), ("A::3", "A::2")]

    def test_repeated_link_emits_parallel_edges_with_unique_ids(self, rng):
        docs = [make_document("A", nodes=[("1", "Alpha"), ("2", "[[Alpha]] and [[alpha]]")])]
        graph = build_graph(docs, rng=rng)

        refs = list(graph.iter_edges(EdgeKind.REFERENCE))
        assert [(e.source, e.target) for e in refs] == [("A::2", "A::1"), ("A::2", "A::1")]
        assert [e.id for e in refs] == ["link:A::2->A::1", "link:A::2->A::1#2"]

    def test_unmatched_title_creates_nothing(self, rng):
        docs = [make_document("A", nodes=[("1", "See [[Nowhere]]")])]
        graph = build_graph(docs, rng=rng)

        assert graph.edge_count() == 0

    def test_unmatched_title_logged(self, caplog, rng):
        docs = [make_document("A", nodes=[("1", "See [[Nowhere]]")])]

        with caplog.at_level(logging.DEBUG, logger="atlasgraph.graph.builder"):
            build_graph(docs, rng=rng)

        assert "Unresolved link [[Nowhere]]" in caplog.text

    def test_reference_edges_follow_structural_edges(self, two_documents, rng):
        graph = build_graph(two_documents, rng=rng)

        kinds = [e.kind for e in graph.edges]
        assert kinds == [EdgeKind.STRUCTURAL, EdgeKind.STRUCTURAL, EdgeKind.REFERENCE]


class TestMalformedDocuments:
    """A broken document never prevents the others from rendering."""

    def test_unparsable_document_skipped(self, two_documents, rng):
        docs = [two_documents[0], Document(id="bad", serialized_graph="{oops"), two_documents[1]]
        graph = build_graph(docs, rng=rng)

        assert graph.node_count() == 4
        assert graph.skipped_documents() == ["bad"]
        assert graph.stats()["documents"] == 3

    def test_skipped_document_logged(self, caplog, rng):
        with caplog.at_level(logging.WARNING, logger="atlasgraph.graph.builder"):
            build_graph([Document(id="bad", serialized_graph="nope")], rng=rng)

        assert "bad" in caplog.text

    def test_empty_input(self, rng):
        graph = build_graph([], rng=rng)

        assert graph.node_count() == 0
        assert graph.edge_count() == 0


class TestPlacement:
    """Initial placement is random within the bounding box."""

    def test_positions_within_box(self, two_documents):
        box = PlacementBox(width=50.0, height=20.0)
        graph = build_graph(two_documents, rng=random.Random(3), placement=box)

        for node in graph.nodes:
            assert 0.0 <= node.position.x <= 50.0
            assert 0.0 <= node.position.y <= 20.0

    def test_same_seed_same_positions(self, two_documents):
        first = build_graph(two_documents, rng=random.Random(42))
        second = build_graph(two_documents, rng=random.Random(42))

        assert [n.position for n in first.nodes] == [n.position for n in second.nodes]


class TestIdempotence:
    """Rebuilding the same snapshot yields the same node and edge sets."""

    def test_rebuild_same_sets(self, two_documents):
        first = build_graph(two_documents, rng=random.Random(1))
        second = build_graph(two_documents, rng=random.Random(2))

        assert _node_sets(first) == _node_sets(second)

    def test_builder_incremental_matches_function(self, two_documents, rng):
        builder = GraphBuilder(rng=random.Random(9))
        for doc in two_documents:
            builder.add_document(doc)

        assert _node_sets(builder.build()) == _node_sets(build_graph(two_documents, rng=rng))


class TestTitleIndex:
    """Tests for TitleIndex."""

    def test_lookup_normalizes(self):
        index = TitleIndex([make_node("a", 0, 0, label="Project Plan")])

        assert index.lookup("  PROJECT plan ") == ["a"]
        assert "project plan" in index

    def test_lookup_keeps_insertion_order(self):
        index = TitleIndex([make_node("b", 0, 0, label="Apple"), make_node("a", 0, 0, label="apple")])

        assert index.lookup("Apple") == ["b", "a"]

    def test_lookup_missing(self):
        index = TitleIndex()

        assert index.lookup("nothing") == []
        assert len(index) == 0


class TestKnowledgeGraph:
    """Tests for KnowledgeGraph accessors."""

    def test_stats(self, two_documents, rng):
        stats = build_graph(two_documents, rng=rng).stats()

        assert stats == {
            "documents": 2,
            "skipped_documents": 0,
            "nodes": 4,
            "edges": 3,
            "structural_edges": 2,
            "reference_edges": 1,
        }

    def test_find_by_id_missing(self, two_documents, rng):
        assert build_graph(two_documents, rng=rng).find_by_id("nope") is None

    @pytest.mark.parametrize("kind,count", [(None, 3), (EdgeKind.STRUCTURAL, 2), (EdgeKind.REFERENCE, 1)])
    def test_edge_count_by_kind(self, two_documents, rng, kind, count):
        assert build_graph(two_documents, rng=rng).edge_count(kind) == count
