"""Layout module - Force-directed positioning of the knowledge graph.

Exports:
- ForceParams: Tunable simulation constants
- LayoutSimulator / LayoutSession: start/cancel control surface
- Frame: Published layout snapshot
- SessionState: Session lifecycle states
- ManualFrameScheduler / AsyncioFrameScheduler: Frame schedulers
- settle_layout: Synchronous run to convergence
"""

from atlasgraph.layout.forces import ForceParams, SimulationNode, accumulate_forces, relax
from atlasgraph.layout.scheduler import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)
from atlasgraph.layout.simulator import (
    Frame,
    LayoutError,
    LayoutSession,
    LayoutSimulator,
    SessionState,
    settle_layout,
)

__all__ = [
    "ForceParams",
    "SimulationNode",
    "accumulate_forces",
    "relax",
    "FrameScheduler",
    "ManualFrameScheduler",
    "AsyncioFrameScheduler",
    "Frame",
    "LayoutError",
    "LayoutSession",
    "LayoutSimulator",
    "SessionState",
    "settle_layout",
]
