"""Relations - Edge types and relationship semantics.

This module defines the edges between graph nodes:
- EdgeKind: Enum of relationship types
- GraphEdge: A typed edge between two node ids
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EdgeKind(Enum):
    """Types of edges in the workspace graph.

    - STRUCTURAL: Authored inside a single document's own graph
    - REFERENCE: Synthesized from a [[Title]] wikilink in a node label

    Both kinds pull their endpoints together identically during layout;
    the kind only affects how the rendering surface draws the edge.
    """

    STRUCTURAL = "structural"
    REFERENCE = "reference"

    @property
    def animated(self) -> bool:
        """Reference edges are drawn animated and undirected."""
        return self is EdgeKind.REFERENCE


@dataclass(frozen=True)
class GraphEdge:
    """A typed edge between two graph nodes.

    Edges refer to nodes by id so that a frame can replace every node
    without touching its edges.

    Attributes:
        id: Unique edge id.
        source: Id of the source node.
        target: Id of the target node.
        kind: The type of relationship.
    """

    id: str
    source: str
    target: str
    kind: EdgeKind

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
            "animated": self.kind.animated,
        }
