"""
atlasgraph.commands.layout_cmd - Lay out a workspace graph.

Runs a layout session to convergence with a manually driven frame
scheduler and writes the final frame as JSON or as an HTML page.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from atlasgraph.commands.common import load_configuration, open_store
from atlasgraph.graph.factory import build_workspace_graph
from atlasgraph.graph.serialize import serialize_frame
from atlasgraph.layout.forces import ForceParams
from atlasgraph.layout.simulator import settle_layout


def run(args: argparse.Namespace) -> int:
    """Run the layout command."""
    config = load_configuration(args)
    store = open_store(args, config)
    graph = build_workspace_graph(args.workspace, store, config, seed=args.seed)

    layout_config = config.get("layout", {})
    params = ForceParams.from_config(layout_config)
    max_frames = args.max_frames if args.max_frames is not None else layout_config.get("max_frames")

    session = settle_layout(
        graph.nodes,
        graph.edges,
        params=params,
        max_frames=int(max_frames) if max_frames is not None else None,
    )

    if args.format == "html":
        from atlasgraph.html.generator import GraphHTMLGenerator

        output = GraphHTMLGenerator(
            session.nodes, session.edges, title=f"Global Graph - {args.workspace}"
        ).generate()
    else:
        frame = session.latest_frame
        data = serialize_frame(frame) if frame is not None else {"nodes": [], "edges": []}
        data["state"] = session.state.value
        output = json.dumps(data, indent=2)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {args.output}")
    else:
        print(output)

    if not args.quiet:
        print(
            f"Layout {session.state.value} after {session.iteration} iterations",
            file=sys.stderr,
        )
    return 0
