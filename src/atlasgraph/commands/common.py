"""
atlasgraph.commands.common - Configuration and store lookup shared by commands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from atlasgraph.config import find_config_file, get_config
from atlasgraph.graph.factory import resolve_store_path
from atlasgraph.store import JsonDocumentStore


def load_configuration(args: argparse.Namespace) -> Dict[str, Any]:
    """Load configuration from --config, the nearest .atlasgraph.toml, or defaults."""
    return get_config(getattr(args, "config", None), Path.cwd())


def open_store(args: argparse.Namespace, config: Dict[str, Any]) -> JsonDocumentStore:
    """Open the store named by --store, or by store.path in config.

    A relative store.path is resolved against the config file's directory.
    """
    store_path = getattr(args, "store", None)
    if store_path is not None:
        return JsonDocumentStore(store_path)

    config_path = getattr(args, "config", None) or find_config_file(Path.cwd())
    base_dir = Path(config_path).parent if config_path else Path.cwd()
    return JsonDocumentStore(resolve_store_path(config, base_dir))
