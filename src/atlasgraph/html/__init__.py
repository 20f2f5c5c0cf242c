"""
atlasgraph.html - Standalone HTML rendering of graph layouts
"""

from atlasgraph.html.generator import GraphHTMLGenerator

__all__ = ["GraphHTMLGenerator"]
