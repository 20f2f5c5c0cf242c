"""
atlasgraph.commands.build_cmd - Synthesize a workspace graph.
"""

from __future__ import annotations

import argparse
import json

from atlasgraph.commands.common import load_configuration, open_store
from atlasgraph.graph.factory import build_workspace_graph
from atlasgraph.graph.serialize import serialize_graph


def run(args: argparse.Namespace) -> int:
    """Run the build command.

    Prints a summary of the synthesized graph, or the whole graph as JSON
    with --json.
    """
    config = load_configuration(args)
    store = open_store(args, config)
    graph = build_workspace_graph(args.workspace, store, config, seed=args.seed)

    if args.json:
        print(json.dumps(serialize_graph(graph), indent=2))
        return 0

    if not args.quiet:
        stats = graph.stats()
        print(f"Workspace {args.workspace}")
        print(f"  documents: {stats['documents']} ({stats['skipped_documents']} skipped)")
        print(f"  nodes:     {stats['nodes']}")
        print(
            f"  edges:     {stats['edges']} "
            f"({stats['structural_edges']} structural, {stats['reference_edges']} reference)"
        )
        for document_id in graph.skipped_documents():
            print(f"  skipped:   {document_id}")
    return 0
