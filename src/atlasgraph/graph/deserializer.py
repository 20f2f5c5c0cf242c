"""Document deserialization - decode a board's embedded graph.

Each document stores its own node/edge graph as a JSON string. This module
turns that string into plain local records that the GraphBuilder can
namespace and merge.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from atlasgraph.graph.GraphNode import DEFAULT_COLOR, DEFAULT_LABEL

logger = logging.getLogger(__name__)


class DocumentDecodeError(ValueError):
    """Raised when a document's serialized graph cannot be decoded."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"document {document_id!r}: {reason}")
        self.document_id = document_id
        self.reason = reason


@dataclass(frozen=True)
class Document:
    """An authored unit holding its own serialized graph.

    Attributes:
        id: Document id, used to namespace the document's node ids.
        serialized_graph: JSON text with optional "nodes" and "edges".
        workspace_id: Owning workspace, when known.
        title: Board title as shown in the workspace.
        updated_at: Last modification time (epoch milliseconds).
    """

    id: str
    serialized_graph: str
    workspace_id: str | None = None
    title: str = ""
    updated_at: int | None = None


@dataclass(frozen=True)
class LocalNode:
    id: str
    label: str = DEFAULT_LABEL
    color: str = DEFAULT_COLOR


@dataclass(frozen=True)
class LocalEdge:
    id: str
    source: str
    target: str


@dataclass
class DocumentGraph:
    """The decoded, still document-local graph of one document."""

    document_id: str
    nodes: list[LocalNode] = field(default_factory=list)
    edges: list[LocalEdge] = field(default_factory=list)


def _local_id(value: Any) -> str | None:
    """Coerce a JSON id to a string; None when unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        text = str(value)
        return text if text else None
    return None


def _decode_node(raw: Any) -> LocalNode | None:
    if not isinstance(raw, dict):
        return None
    node_id = _local_id(raw.get("id"))
    if node_id is None:
        return None

    data = raw.get("data")
    if not isinstance(data, dict):
        data = {}
    label = data.get("label")
    color = data.get("color")
    return LocalNode(
        id=node_id,
        label=label if isinstance(label, str) and label else DEFAULT_LABEL,
        color=color if isinstance(color, str) and color else DEFAULT_COLOR,
    )


def _decode_edge(raw: Any) -> tuple[str | None, str, str] | None:
    """Return (id or None, source, target) for a well-formed edge entry."""
    if not isinstance(raw, dict):
        return None
    source = _local_id(raw.get("source"))
    target = _local_id(raw.get("target"))
    if source is None or target is None:
        return None
    return _local_id(raw.get("id")), source, target


def _generated_edge_id(source: str, target: str, taken: set[str]) -> str:
    """Return "<source>-<target>", suffixed "#2", "#3", ... until it is unused."""
    base = f"{source}-{target}"
    edge_id = base
    count = 1
    while edge_id in taken:
        count += 1
        edge_id = f"{base}#{count}"
    return edge_id


def _decode_list(document_id: str, payload: dict[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentDecodeError(document_id, f"{key!r} is not a list")
    return value


def decode_document(document: Document) -> DocumentGraph:
    """Decode a document's serialized graph.

    Individual malformed node or edge entries are skipped. A local node or
    edge id repeated inside the same document keeps its first occurrence.
    Edges without an id get "<source>-<target>", suffixed "#2", "#3", ...
    where that id is already used in the document.

    Args:
        document: The document to decode.

    Returns:
        DocumentGraph with the document's local nodes and edges.

    Raises:
        DocumentDecodeError: If the payload is not JSON, is not an object,
            or carries "nodes"/"edges" that are not lists.
    """
    if not isinstance(document.serialized_graph, str):
        raise DocumentDecodeError(document.id, "serialized graph is not text")
    try:
        payload = json.loads(document.serialized_graph)
    except json.JSONDecodeError as e:
        raise DocumentDecodeError(document.id, f"invalid JSON ({e.msg})") from e
    if not isinstance(payload, dict):
        raise DocumentDecodeError(document.id, "serialized graph is not an object")

    raw_nodes = _decode_list(document.id, payload, "nodes")
    raw_edges = _decode_list(document.id, payload, "edges")

    graph = DocumentGraph(document_id=document.id)
    seen: set[str] = set()
    for raw in raw_nodes:
        node = _decode_node(raw)
        if node is None:
            logger.debug("Skipping malformed node in document %s: %r", document.id, raw)
            continue
        if node.id in seen:
            logger.debug("Skipping duplicate node %s in document %s", node.id, document.id)
            continue
        seen.add(node.id)
        graph.nodes.append(node)

    decoded = []
    for raw in raw_edges:
        edge = _decode_edge(raw)
        if edge is None:
            logger.debug("Skipping malformed edge in document %s: %r", document.id, raw)
            continue
        decoded.append(edge)

    # Generated ids must not take an id declared later in the list.
    taken = {edge_id for edge_id, _, _ in decoded if edge_id is not None}
    seen_edges: set[str] = set()
    for edge_id, source, target in decoded:
        if edge_id is None:
            edge_id = _generated_edge_id(source, target, taken)
            taken.add(edge_id)
        elif edge_id in seen_edges:
            logger.debug("Skipping duplicate edge %s in document %s", edge_id, document.id)
            continue
        seen_edges.add(edge_id)
        graph.edges.append(LocalEdge(id=edge_id, source=source, target=target))

    return graph
