"""
atlasgraph.commands - CLI command implementations
"""

__all__ = [
    "build_cmd",
    "config_cmd",
    "layout_cmd",
    "serve_cmd",
]
