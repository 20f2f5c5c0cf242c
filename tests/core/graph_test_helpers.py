"""Test helpers for graph and layout testing.

Factories for documents and positioned graphs, so tests can describe
inputs in a line or two.
"""

from __future__ import annotations

import json

from atlasgraph.graph import Document, GraphNode, Position
from atlasgraph.graph.relations import EdgeKind, GraphEdge


# === Document Factory ===


def make_document(
    doc_id: str,
    nodes: list[tuple[str, str]] | None = None,
    edges: list[tuple[str, str]] | None = None,
    workspace_id: str | None = "w1",
) -> Document:
    """Create a document from (local_id, label) nodes and (source, target) edges.

    Edge ids are generated as e1, e2, ...
    """
    payload = {
        "nodes": [{"id": nid, "data": {"label": label}} for nid, label in nodes or []],
        "edges": [
            {"id": f"e{i}", "source": source, "target": target}
            for i, (source, target) in enumerate(edges or [], start=1)
        ],
    }
    return Document(id=doc_id, serialized_graph=json.dumps(payload), workspace_id=workspace_id)


def board_record(
    doc_id: str,
    workspace_id: str,
    nodes: list[tuple[str, str]] | None = None,
    edges: list[tuple[str, str]] | None = None,
    title: str = "",
) -> dict:
    """Create a store record as exported by the workspace application."""
    document = make_document(doc_id, nodes, edges)
    return {
        "id": doc_id,
        "workspaceId": workspace_id,
        "title": title or doc_id,
        "data": document.serialized_graph,
        "updatedAt": 0,
    }


# === Positioned graph factories ===


def make_node(node_id: str, x: float, y: float, label: str = "") -> GraphNode:
    return GraphNode(
        id=node_id,
        label=label or node_id,
        source_document_id="doc",
        original_local_id=node_id,
        position=Position(x, y),
    )


def make_edge(source: str, target: str, kind: EdgeKind = EdgeKind.STRUCTURAL) -> GraphEdge:
    return GraphEdge(id=f"{source}-{target}", source=source, target=target, kind=kind)


def line_graph(count: int = 5, spacing: float = 40.0) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Nodes n0..n{count-1} on a diagonal, each linked to the next."""
    nodes = [make_node(f"n{i}", i * spacing, i * spacing * 0.5) for i in range(count)]
    edges = [make_edge(f"n{i}", f"n{i + 1}") for i in range(count - 1)]
    return nodes, edges


# === String conversion helpers ===


def edge_pairs(edges, kind: EdgeKind | None = None) -> list[tuple[str, str]]:
    """(source, target) pairs of edges, optionally of one kind."""
    return [(e.source, e.target) for e in edges if kind is None or e.kind == kind]
