"""HTML Generator for graph layouts.

This module renders a laid-out graph as a standalone HTML page with an
inline SVG drawing. Uses Jinja2 templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from atlasgraph import __version__
from atlasgraph.graph.GraphNode import GraphNode
from atlasgraph.graph.links import LinkToken, parse_wikilinks
from atlasgraph.graph.relations import EdgeKind, GraphEdge

NODE_RADIUS = 10.0
MARGIN = 60.0


@dataclass
class LabelPart:
    """A run of label text; link runs are highlighted."""

    text: str
    is_link: bool


@dataclass
class NodeView:
    id: str
    x: float
    y: float
    color: str
    document: str
    parts: list[LabelPart]


@dataclass
class EdgeView:
    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    is_reference: bool


def label_parts(label: str) -> list[LabelPart]:
    """Split a label into plain and link runs for display."""
    parts = []
    for token in parse_wikilinks(label):
        if isinstance(token, LinkToken):
            parts.append(LabelPart(token.title, True))
        else:
            parts.append(LabelPart(token.value, False))
    return parts


class GraphHTMLGenerator:
    """Generates an HTML view of positioned nodes and edges.

    Args:
        nodes: Nodes at their final positions.
        edges: Edges between those nodes.
        title: Page title.
        version: Version string for display (defaults to the package version).
    """

    def __init__(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        title: str = "Global Graph",
        version: str | None = None,
    ) -> None:
        self.nodes = list(nodes)
        self.edges = list(edges)
        self.title = title
        self.version = version if version is not None else __version__

    def _view_box(self) -> tuple[float, float, float, float]:
        if not self.nodes:
            return (0.0, 0.0, 100.0, 100.0)
        xs = [node.position.x for node in self.nodes]
        ys = [node.position.y for node in self.nodes]
        min_x, min_y = min(xs) - MARGIN, min(ys) - MARGIN
        return (min_x, min_y, max(xs) + MARGIN - min_x, max(ys) + MARGIN - min_y)

    def _node_views(self) -> list[NodeView]:
        return [
            NodeView(
                id=node.id,
                x=node.position.x,
                y=node.position.y,
                color=node.color,
                document=node.source_document_id,
                parts=label_parts(node.label),
            )
            for node in self.nodes
        ]

    def _edge_views(self) -> list[EdgeView]:
        positions = {node.id: node.position for node in self.nodes}
        views = []
        for edge in self.edges:
            source = positions.get(edge.source)
            target = positions.get(edge.target)
            if source is None or target is None:
                continue
            views.append(
                EdgeView(
                    id=edge.id,
                    x1=source.x,
                    y1=source.y,
                    x2=target.x,
                    y2=target.y,
                    is_reference=edge.kind is EdgeKind.REFERENCE,
                )
            )
        return views

    def generate(self) -> str:
        """Generate the complete HTML document.

        Returns:
            Complete HTML document as string.
        """
        from jinja2 import Environment, PackageLoader, select_autoescape

        env = Environment(
            loader=PackageLoader("atlasgraph.html", "templates"),
            autoescape=select_autoescape(["html", "xml", "j2"]),
        )
        template = env.get_template("graph_view.html.j2")
        return template.render(
            title=self.title,
            version=self.version,
            view_box=self._view_box(),
            node_radius=NODE_RADIUS,
            nodes=self._node_views(),
            edges=self._edge_views(),
            node_count=len(self.nodes),
            edge_count=len(self.edges),
        )
