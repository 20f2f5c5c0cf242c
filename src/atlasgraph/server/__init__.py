"""
atlasgraph.server - REST API over workspace graphs and layouts
"""

from atlasgraph.server.app import create_app, run_server

__all__ = ["create_app", "run_server"]
