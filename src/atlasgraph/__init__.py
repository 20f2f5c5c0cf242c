"""
atlasgraph - Knowledge graph synthesis and force-directed layout

atlasgraph merges the mind-map boards of a workspace into one graph,
linking nodes across boards through [[Title]] wikilinks, and lays the
result out with a frame-by-frame force simulation.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("atlasgraph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from atlasgraph.graph import Document, EdgeKind, GraphEdge, GraphNode, build_graph
from atlasgraph.layout import ForceParams, LayoutSession, LayoutSimulator, SessionState

__all__ = [
    "__version__",
    "Document",
    "EdgeKind",
    "GraphEdge",
    "GraphNode",
    "build_graph",
    "ForceParams",
    "LayoutSession",
    "LayoutSimulator",
    "SessionState",
]
