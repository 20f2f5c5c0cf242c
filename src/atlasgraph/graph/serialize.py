"""Graph Serialization - Export graphs and layout frames to JSON-compatible dicts."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from atlasgraph.graph.builder import KnowledgeGraph
    from atlasgraph.graph.GraphNode import GraphNode
    from atlasgraph.graph.relations import GraphEdge
    from atlasgraph.layout.simulator import Frame


def serialize_nodes(nodes: Iterable[GraphNode]) -> list[dict[str, Any]]:
    return [node.to_dict() for node in nodes]


def serialize_edges(edges: Iterable[GraphEdge]) -> list[dict[str, Any]]:
    return [edge.to_dict() for edge in edges]


def serialize_graph(graph: KnowledgeGraph) -> dict[str, Any]:
    """Serialize a KnowledgeGraph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with "nodes", "edges", "stats" and "skipped_documents".
    """
    return {
        "nodes": serialize_nodes(graph.nodes),
        "edges": serialize_edges(graph.edges),
        "stats": graph.stats(),
        "skipped_documents": graph.skipped_documents(),
    }


def serialize_frame(frame: Frame) -> dict[str, Any]:
    """Serialize a published layout frame.

    Args:
        frame: Frame published by a layout session.

    Returns:
        Dict with "nodes", "edges", "iteration" and "max_displacement".
    """
    return {
        "nodes": serialize_nodes(frame.nodes),
        "edges": serialize_edges(frame.edges),
        "iteration": frame.iteration,
        "max_displacement": frame.max_displacement,
    }


def to_json(data: dict[str, Any], indent: int | None = 2) -> str:
    return json.dumps(data, indent=indent)
