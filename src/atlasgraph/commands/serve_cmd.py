"""
atlasgraph.commands.serve_cmd - Run the REST API server.
"""

from __future__ import annotations

import argparse
import sys

from atlasgraph.commands.common import load_configuration, open_store


def run(args: argparse.Namespace) -> int:
    """Run the serve command."""
    try:
        from atlasgraph.server.app import run_server
    except ImportError:
        print(
            "Error: serve requires the server extra. "
            "Install with: pip install atlasgraph[server]",
            file=sys.stderr,
        )
        return 1

    config = load_configuration(args)
    store = open_store(args, config)
    run_server(store, config, host=args.host, port=args.port)
    return 0
