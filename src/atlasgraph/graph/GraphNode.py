"""GraphNode - Node representation for the workspace knowledge graph.

This module provides the core node data structures:
- Position: Immutable 2D coordinate
- GraphNode: A document-local node lifted into the workspace graph
- make_node_id: Namespacing of document-local identifiers
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

NAMESPACE_SEPARATOR = "::"

DEFAULT_LABEL = "Untitled"
DEFAULT_COLOR = "#e2e8f0"


def _escape_id_part(value: str) -> str:
    return value.replace("\\", "\\\\").replace(":", "\\:")


def make_node_id(document_id: str, local_id: str) -> str:
    """Namespace a document-local id with its owning document's id.

    Identical local ids from different documents never collide because the
    document id is part of the result. A ":" or "\\" inside either part is
    backslash-escaped, so ("a", "b::c") and ("a::b", "c") stay distinct.

    Args:
        document_id: Id of the document declaring the node.
        local_id: Id of the node inside that document.

    Returns:
        Globally unique node id ("<doc>::<local>").
    """
    return f"{_escape_id_part(document_id)}{NAMESPACE_SEPARATOR}{_escape_id_part(local_id)}"


@dataclass(frozen=True)
class Position:
    """A point in the layout plane."""

    x: float
    y: float

    def moved(self, dx: float, dy: float) -> Position:
        """Return a new position offset by (dx, dy)."""
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class GraphNode:
    """A node in the workspace knowledge graph.

    Nodes are immutable snapshots. The layout simulator publishes new
    nodes every frame rather than mutating the ones it was given, so a
    consumer holding a frame never observes it changing underneath it.

    Attributes:
        id: Globally unique id (see make_node_id).
        label: Display label; may contain [[Title]] wikilinks.
        source_document_id: Id of the document that declared the node.
        original_local_id: Id of the node inside its document.
        color: CSS color used by the rendering surface.
        position: Current position in the layout plane.
    """

    id: str
    label: str
    source_document_id: str
    original_local_id: str
    color: str = DEFAULT_COLOR
    position: Position = Position(0.0, 0.0)

    @property
    def normalized_label(self) -> str:
        """Label as used for title lookups (lower-cased, trimmed)."""
        return normalize_title(self.label)

    def with_position(self, position: Position) -> GraphNode:
        """Return a copy of this node placed at a new position."""
        return replace(self, position=position)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "source_document_id": self.source_document_id,
            "original_local_id": self.original_local_id,
            "color": self.color,
            "position": self.position.to_dict(),
        }


def normalize_title(text: str) -> str:
    """Normalize a label or link title for case/whitespace-insensitive matching."""
    return text.strip().lower()
