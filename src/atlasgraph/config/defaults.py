"""
atlasgraph.config.defaults - Default configuration values.
"""

DEFAULT_CONFIG = {
    "store": {
        # JSON export of the workspace record store
        "path": "atlas-export.json",
    },
    "placement": {
        # Initial positions are drawn uniformly from [0, width] x [0, height]
        "width": 1000.0,
        "height": 1000.0,
        # Integer seed for repeatable placement; empty means random
        "seed": "",
    },
    "layout": {
        "repulsion": 5000.0,
        "ideal_length": 200.0,
        "spring": 0.05,
        "gravity": 0.01,
        "velocity_clamp": 5.0,
        "convergence_threshold": 0.1,
        "frame_rate": 60,
        # Synchronous runs (CLI, server) cancel after this many frames
        "max_frames": 5000,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5005,
    },
    "logging": {
        "level": "WARNING",
    },
}
