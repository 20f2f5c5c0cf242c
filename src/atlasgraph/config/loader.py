"""
atlasgraph.config.loader - Configuration file loading and merging.

Configuration comes from three layers, later ones winning:
1. DEFAULT_CONFIG
2. .atlasgraph.toml (found by walking up from the working directory)
3. ATLASGRAPH_<SECTION>_<KEY> environment variables
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from atlasgraph.config.defaults import DEFAULT_CONFIG

CONFIG_FILENAME = ".atlasgraph.toml"
ENV_PREFIX = "ATLASGRAPH_"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def find_config_file(start_dir: Path) -> Optional[Path]:
    """Find .atlasgraph.toml in start_dir or any parent directory.

    Args:
        start_dir: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = Path(start_dir).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override into a copy of base.

    Nested tables are merged key by key; any other value in override
    replaces the one in base.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def parse_toml(content: str) -> Dict[str, Any]:
    """Parse TOML text into plain Python containers."""
    try:
        return tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment variable value into a typed value.

    JSON lists and objects, booleans and numbers are converted; anything
    else (including malformed JSON) is returned as the original string.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    for number in (int, float):
        try:
            return number(stripped)
        except ValueError:
            pass
    return value


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ATLASGRAPH_<SECTION>_<KEY> environment overrides in place.

    ATLASGRAPH_LAYOUT_IDEAL_LENGTH=150 sets config["layout"]["ideal_length"].
    Variables naming a section that does not exist are ignored.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not key or not isinstance(config.get(section), dict):
            continue
        config[section][key] = _try_parse_env_value(raw)
    return config


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load a configuration file and merge it over the defaults.

    Args:
        config_path: Path to a .atlasgraph.toml file.

    Returns:
        Merged configuration dict (environment overrides applied).

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    user_config = parse_toml(content)
    return _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user_config))


def get_config(config_path: Optional[Path] = None, start_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Resolve the effective configuration.

    Uses config_path when given, otherwise searches upward from start_dir
    (default: the working directory). Falls back to the defaults when no
    file is found.
    """
    if config_path is None:
        config_path = find_config_file(start_dir or Path.cwd())
    if config_path is None:
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))
    return load_config(config_path)
