"""Graph module - Knowledge graph synthesis.

Exports:
- Document: Authored unit holding a serialized graph
- GraphNode: Namespaced, positioned node
- Position: 2D coordinate
- GraphEdge: Typed edge between node ids
- EdgeKind: Enum of edge types
- GraphBuilder / build_graph: Synthesis of documents into a KnowledgeGraph
- TitleIndex: Normalized title lookup used for wikilink resolution
"""

from atlasgraph.graph.builder import (
    GraphBuilder,
    KnowledgeGraph,
    PlacementBox,
    TitleIndex,
    build_graph,
)
from atlasgraph.graph.deserializer import Document, DocumentDecodeError, decode_document
from atlasgraph.graph.GraphNode import GraphNode, Position, make_node_id
from atlasgraph.graph.links import extract_outbound_titles, parse_wikilinks
from atlasgraph.graph.relations import EdgeKind, GraphEdge

__all__ = [
    "Document",
    "DocumentDecodeError",
    "decode_document",
    "GraphNode",
    "Position",
    "make_node_id",
    "GraphEdge",
    "EdgeKind",
    "GraphBuilder",
    "KnowledgeGraph",
    "PlacementBox",
    "TitleIndex",
    "build_graph",
    "extract_outbound_titles",
    "parse_wikilinks",
]
