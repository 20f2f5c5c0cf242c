"""Graph Factory - Shared utility for building a workspace graph from configuration.

Commands and the server use this instead of wiring the store, the
placement settings and the builder together themselves.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any

from atlasgraph.graph.builder import KnowledgeGraph, PlacementBox, build_graph
from atlasgraph.store import JsonDocumentStore


def resolve_store_path(config: dict[str, Any], base_dir: Path | None = None) -> Path:
    """Resolve store.path from config; relative paths are taken from base_dir."""
    path = Path(config.get("store", {}).get("path", ""))
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def placement_from_config(config: dict[str, Any]) -> PlacementBox:
    placement = config.get("placement", {})
    return PlacementBox(
        width=float(placement.get("width", 1000.0)),
        height=float(placement.get("height", 1000.0)),
    )


def rng_from_config(config: dict[str, Any], seed: int | None = None) -> random.Random:
    """Random source for initial placement.

    An explicit seed wins over placement.seed; an empty seed means an
    unseeded (non-repeatable) placement.
    """
    if seed is None:
        configured = config.get("placement", {}).get("seed", "")
        if configured not in ("", None):
            seed = int(configured)
    return random.Random(seed)


def build_workspace_graph(
    workspace_id: str,
    store: JsonDocumentStore,
    config: dict[str, Any],
    seed: int | None = None,
) -> KnowledgeGraph:
    """Fetch a workspace's documents and synthesize its graph.

    Args:
        workspace_id: Workspace to build.
        store: Store to read documents from.
        config: Effective configuration.
        seed: Optional placement seed overriding placement.seed.

    Returns:
        The synthesized KnowledgeGraph.

    Raises:
        StoreError: If the store cannot be read.
    """
    documents = store.fetch_documents(workspace_id)
    return build_graph(
        documents,
        rng=rng_from_config(config, seed),
        placement=placement_from_config(config),
    )
