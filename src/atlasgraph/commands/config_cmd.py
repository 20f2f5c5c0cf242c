"""
atlasgraph.commands.config_cmd - Inspect the effective configuration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit

from atlasgraph.commands.common import load_configuration
from atlasgraph.config import find_config_file


def run(args: argparse.Namespace) -> int:
    """Run the config command.

    Subcommands:
    - show: Print the merged configuration as TOML
    - path: Print the location of the config file in use
    """
    action = getattr(args, "config_action", None)

    if action == "path":
        config_path = args.config or find_config_file(Path.cwd())
        if config_path is None:
            print("No .atlasgraph.toml found (using defaults)", file=sys.stderr)
            return 1
        print(Path(config_path).resolve())
        return 0
    elif action == "show":
        print(tomlkit.dumps(load_configuration(args)), end="")
        return 0
    else:
        print("Usage: atlasgraph config <show|path>", file=sys.stderr)
        return 1
