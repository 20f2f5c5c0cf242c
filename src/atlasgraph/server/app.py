"""atlasgraph.server.app - Flask app factory and REST API routes.

This is a THIN REST wrapper: graph synthesis and layout live in
``atlasgraph.graph`` and ``atlasgraph.layout``. Every request rebuilds the
workspace graph from the store, so the server never holds layout state
between requests.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS

from atlasgraph import __version__
from atlasgraph.graph.factory import build_workspace_graph
from atlasgraph.graph.serialize import serialize_frame, serialize_graph
from atlasgraph.layout.forces import ForceParams
from atlasgraph.layout.simulator import settle_layout
from atlasgraph.store import JsonDocumentStore, StoreError

logger = logging.getLogger(__name__)


def _seed_arg() -> int | None:
    raw = request.args.get("seed")
    if raw is None or raw == "":
        return None
    return int(raw)


def create_app(store: JsonDocumentStore, config: dict[str, Any]) -> Flask:
    """Create the Flask application with REST API routes.

    Args:
        store: Document store to read workspaces from.
        config: atlasgraph configuration dict.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    CORS(app)

    layout_config = config.get("layout", {})
    params = ForceParams.from_config(layout_config)
    max_frames = int(layout_config.get("max_frames", 5000))

    _state: dict[str, Any] = {
        "store": store,
        "config": config,
        "start_time": time.time(),
    }

    @app.errorhandler(StoreError)
    def _store_error(e: StoreError):
        logger.error("Store error: %s", e)
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(ValueError)
    def _bad_request(e: ValueError):
        return jsonify({"error": str(e)}), 400

    @app.route("/api/status")
    def api_status():
        return jsonify(
            {
                "version": __version__,
                "store": str(_state["store"].path),
                "uptime": time.time() - _state["start_time"],
                "frame_rate": layout_config.get("frame_rate", 60),
                "max_frames": max_frames,
                "layout": {
                    name: getattr(params, name) for name in ForceParams.__dataclass_fields__
                },
            }
        )

    @app.route("/api/workspaces")
    def api_workspaces():
        return jsonify({"workspaces": _state["store"].workspace_ids()})

    @app.route("/api/workspaces/<workspace_id>/graph")
    def api_graph(workspace_id: str):
        graph = build_workspace_graph(
            workspace_id, _state["store"], _state["config"], seed=_seed_arg()
        )
        data = serialize_graph(graph)
        data["workspace"] = workspace_id
        return jsonify(data)

    @app.route("/api/workspaces/<workspace_id>/layout")
    def api_layout(workspace_id: str):
        graph = build_workspace_graph(
            workspace_id, _state["store"], _state["config"], seed=_seed_arg()
        )
        session = settle_layout(graph.nodes, graph.edges, params=params, max_frames=max_frames)
        if session.latest_frame is not None:
            data = serialize_frame(session.latest_frame)
        else:
            data = {
                "nodes": [node.to_dict() for node in session.nodes],
                "edges": [edge.to_dict() for edge in session.edges],
                "iteration": 0,
                "max_displacement": 0.0,
            }
        data["workspace"] = workspace_id
        data["state"] = session.state.value
        data["stats"] = graph.stats()
        return jsonify(data)

    return app


def run_server(
    store: JsonDocumentStore,
    config: dict[str, Any],
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the development server until interrupted."""
    server_config = config.get("server", {})
    app = create_app(store, config)
    app.run(
        host=host or server_config.get("host", "127.0.0.1"),
        port=int(port or server_config.get("port", 5005)),
    )
