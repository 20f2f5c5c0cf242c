"""
atlasgraph.config - Configuration loading and defaults
"""

from atlasgraph.config.defaults import DEFAULT_CONFIG
from atlasgraph.config.loader import (
    CONFIG_FILENAME,
    ENV_PREFIX,
    ConfigError,
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
)

__all__ = [
    "CONFIG_FILENAME",
    "ENV_PREFIX",
    "load_config",
    "get_config",
    "find_config_file",
    "merge_configs",
    "ConfigError",
    "DEFAULT_CONFIG",
]
