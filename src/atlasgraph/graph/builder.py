"""Graph Builder - Merges documents into one workspace knowledge graph.

This module provides the builder pattern for synthesizing a single graph
from independently authored documents: per-document sub-graphs are
namespaced, and [[Title]] wikilinks become reference edges between them.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from atlasgraph.graph.deserializer import Document, DocumentDecodeError, decode_document
from atlasgraph.graph.GraphNode import GraphNode, Position, make_node_id, normalize_title
from atlasgraph.graph.links import extract_outbound_titles
from atlasgraph.graph.relations import EdgeKind, GraphEdge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementBox:
    """Bounding box for the random initial placement of nodes."""

    width: float = 1000.0
    height: float = 1000.0

    def sample(self, rng: random.Random) -> Position:
        return Position(rng.uniform(0.0, self.width), rng.uniform(0.0, self.height))


class TitleIndex:
    """Normalized title -> ids of every node carrying that title.

    Built once per synthesis pass. Ids for a title keep node insertion
    order, so reference edges come out in a stable order.
    """

    def __init__(self, nodes: Iterable[GraphNode] = ()) -> None:
        self._ids: dict[str, list[str]] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: GraphNode) -> None:
        self._ids.setdefault(node.normalized_label, []).append(node.id)

    def lookup(self, title: str) -> list[str]:
        """Return ids of nodes whose label matches title (may be empty)."""
        return list(self._ids.get(normalize_title(title), ()))

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and normalize_title(title) in self._ids

    def __len__(self) -> int:
        return len(self._ids)


@dataclass
class KnowledgeGraph:
    """Container for the synthesized workspace graph.

    Provides indexed access to nodes and ordered access to edges.
    Node and edge order follow document order, then declaration order.
    """

    _nodes: dict[str, GraphNode] = field(default_factory=dict)
    _edges: list[GraphEdge] = field(default_factory=list)
    _skipped_documents: list[str] = field(default_factory=list)
    _document_count: int = 0

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[GraphEdge]:
        return list(self._edges)

    def find_by_id(self, node_id: str) -> GraphNode | None:
        """Find node by ID.

        Args:
            node_id: The namespaced node ID to find.

        Returns:
            The matching GraphNode, or None if not found.
        """
        return self._nodes.get(node_id)

    def iter_edges(self, kind: EdgeKind | None = None) -> Iterator[GraphEdge]:
        """Iterate edges, optionally only those of one kind."""
        for edge in self._edges:
            if kind is None or edge.kind == kind:
                yield edge

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self, kind: EdgeKind | None = None) -> int:
        return sum(1 for _ in self.iter_edges(kind))

    def skipped_documents(self) -> list[str]:
        """Ids of documents left out: undecodable graphs and repeated ids."""
        return list(self._skipped_documents)

    def stats(self) -> dict[str, int]:
        return {
            "documents": self._document_count,
            "skipped_documents": len(self._skipped_documents),
            "nodes": self.node_count(),
            "edges": len(self._edges),
            "structural_edges": self.edge_count(EdgeKind.STRUCTURAL),
            "reference_edges": self.edge_count(EdgeKind.REFERENCE),
        }


class GraphBuilder:
    """Builder for synthesizing a KnowledgeGraph from documents.

    Usage:
        builder = GraphBuilder(rng=random.Random(7))
        for document in documents:
            builder.add_document(document)
        graph = builder.build()

    A document that fails to decode is skipped and logged; it never stops
    the other documents from contributing.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        placement: PlacementBox | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.placement = placement or PlacementBox()
        self._nodes: dict[str, GraphNode] = {}
        self._edges: list[GraphEdge] = []
        self._skipped: list[str] = []
        self._document_ids: set[str] = set()
        self._document_count = 0

    def add_document(self, document: Document) -> None:
        """Add one document's nodes and structural edges.

        A document whose id was already added is skipped as a whole; its
        nodes would otherwise share ids with the first one's.
        """
        self._document_count += 1
        if document.id in self._document_ids:
            logger.warning("Skipping document %s: id already added", document.id)
            self._skipped.append(document.id)
            return
        try:
            local = decode_document(document)
        except DocumentDecodeError as e:
            logger.warning("Skipping document %s: %s", document.id, e.reason)
            self._skipped.append(document.id)
            return
        self._document_ids.add(document.id)

        added: set[str] = set()
        for local_node in local.nodes:
            node_id = make_node_id(document.id, local_node.id)
            self._nodes[node_id] = GraphNode(
                id=node_id,
                label=local_node.label,
                source_document_id=document.id,
                original_local_id=local_node.id,
                color=local_node.color,
                position=self.placement.sample(self.rng),
            )
            added.add(node_id)

        for local_edge in local.edges:
            source = make_node_id(document.id, local_edge.source)
            target = make_node_id(document.id, local_edge.target)
            if source not in added or target not in added:
                logger.debug(
                    "Dropping edge %s in document %s: dangling endpoint",
                    local_edge.id,
                    document.id,
                )
                continue
            self._edges.append(
                GraphEdge(
                    id=make_node_id(document.id, local_edge.id),
                    source=source,
                    target=target,
                    kind=EdgeKind.STRUCTURAL,
                )
            )

    def _reference_edges(self) -> list[GraphEdge]:
        """Resolve wikilinks in every label into reference edges."""
        index = TitleIndex(self._nodes.values())
        emitted: Counter[tuple[str, str]] = Counter()
        edges = []
        for node in self._nodes.values():
            for title in extract_outbound_titles(node.label):
                if title not in index:
                    logger.debug("Unresolved link [[%s]] in node %s", title, node.id)
                    continue
                for target_id in index.lookup(title):
                    if target_id == node.id:
                        continue
                    pair = (node.id, target_id)
                    emitted[pair] += 1
                    edge_id = f"link:{node.id}->{target_id}"
                    if emitted[pair] > 1:
                        edge_id = f"{edge_id}#{emitted[pair]}"
                    edges.append(
                        GraphEdge(
                            id=edge_id,
                            source=node.id,
                            target=target_id,
                            kind=EdgeKind.REFERENCE,
                        )
                    )
        return edges

    def build(self) -> KnowledgeGraph:
        """Build the final KnowledgeGraph.

        Returns:
            Graph holding every decoded node, structural edges in document
            order, followed by the synthesized reference edges.
        """
        references = self._reference_edges()
        logger.debug(
            "Built graph: %d nodes, %d structural edges, %d reference edges",
            len(self._nodes),
            len(self._edges),
            len(references),
        )
        return KnowledgeGraph(
            _nodes=dict(self._nodes),
            _edges=self._edges + references,
            _skipped_documents=list(self._skipped),
            _document_count=self._document_count,
        )


def build_graph(
    documents: Iterable[Document],
    rng: random.Random | None = None,
    placement: PlacementBox | None = None,
) -> KnowledgeGraph:
    """Synthesize the workspace graph from an ordered collection of documents.

    Args:
        documents: Documents in workspace order.
        rng: Random source for initial placement (seed it for repeatable output).
        placement: Bounding box for initial placement.

    Returns:
        The synthesized KnowledgeGraph.
    """
    builder = GraphBuilder(rng=rng, placement=placement)
    for document in documents:
        builder.add_document(document)
    return builder.build()
