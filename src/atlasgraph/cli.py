"""
atlasgraph.cli - Command-line interface.

Main entry point for the atlasgraph CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from atlasgraph import __version__
from atlasgraph.commands import build_cmd, config_cmd, layout_cmd, serve_cmd
from atlasgraph.config import ConfigError, get_config


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="atlasgraph",
        description="Workspace knowledge graph synthesis and force-directed layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  atlasgraph build -w main                  # Summarize the graph of workspace "main"
  atlasgraph build -w main -j               # Print the graph as JSON
  atlasgraph layout -w main --seed 7        # Settle a repeatable layout, print JSON
  atlasgraph layout -w main --format html -o graph.html
  atlasgraph serve --port 5005              # REST API over the store

Configuration:
  atlasgraph config path                    # Show config file location
  atlasgraph config show                    # View all settings

For detailed command help: atlasgraph <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"atlasgraph {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--store",
        type=Path,
        help="Override the store export file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # build command
    build_parser = subparsers.add_parser(
        "build",
        help="Synthesize the knowledge graph of a workspace",
    )
    build_parser.add_argument(
        "-w",
        "--workspace",
        required=True,
        help="Workspace id",
    )
    build_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output the graph as JSON",
    )
    build_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random initial placement",
    )
    build_parser.add_argument(
        "--store",
        type=Path,
        default=argparse.SUPPRESS,
        help="Override the store export file",
        metavar="PATH",
    )

    # layout command
    layout_parser = subparsers.add_parser(
        "layout",
        help="Run the force-directed layout of a workspace graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The layout runs frame by frame until no node moves more than
layout.convergence_threshold on either axis. If --max-frames is reached
first, the session is cancelled and its last frame is reported.
""",
    )
    layout_parser.add_argument(
        "-w",
        "--workspace",
        required=True,
        help="Workspace id",
    )
    layout_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random initial placement",
    )
    layout_parser.add_argument(
        "--store",
        type=Path,
        default=argparse.SUPPRESS,
        help="Override the store export file",
        metavar="PATH",
    )
    layout_parser.add_argument(
        "--max-frames",
        type=int,
        help="Cancel the layout after N frames (default: layout.max_frames)",
        metavar="N",
    )
    layout_parser.add_argument(
        "--format",
        choices=["json", "html"],
        default="json",
        help="Output format (default: json)",
    )
    layout_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write output to file instead of stdout",
        metavar="FILE",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the REST API server",
    )
    serve_parser.add_argument(
        "--host",
        help="Host to bind (default: server.host)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Port to bind (default: server.port)",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser(
        "show",
        help="Show the merged configuration",
    )
    config_subparsers.add_parser(
        "path",
        help="Show the configuration file location",
    )

    return parser


def configure_logging(args: argparse.Namespace) -> None:
    """Set up the root logger from config, -v and -q."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        try:
            name = str(get_config(args.config, Path.cwd())["logging"]["level"])
        except (ConfigError, KeyError):
            name = "WARNING"
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install atlasgraph[completion]
    # Then activate: eval "$(register-python-argcomplete atlasgraph)"
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args)

    try:
        if args.command == "build":
            return build_cmd.run(args)
        elif args.command == "layout":
            return layout_cmd.run(args)
        elif args.command == "serve":
            return serve_cmd.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1
