"""Layout Simulator - Frame-by-frame force-directed relaxation.

A LayoutSimulator starts LayoutSessions. Each session owns its node
positions for its lifetime and runs one relaxation step per scheduled
frame:

    IDLE --start--> RUNNING --(max displacement <= threshold)--> CONVERGED
                       |                                            |
                       +----------------cancel----------------------+--> CANCELLED

CONVERGED and CANCELLED are terminal. A new layout needs a new session.

Every frame is published as a new immutable Frame; the simulator never
mutates a node a consumer has already received. Dragging nodes by hand
would be modelled as pinning (excluding a node from integration), which
this module does not implement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from atlasgraph.graph.GraphNode import GraphNode
from atlasgraph.graph.relations import GraphEdge
from atlasgraph.layout.forces import ForceParams, relax
from atlasgraph.layout.scheduler import FrameScheduler, ManualFrameScheduler

logger = logging.getLogger(__name__)


class LayoutError(ValueError):
    """Raised for invalid arguments to the layout control surface."""


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Frame:
    """One published snapshot of the layout.

    Attributes:
        nodes: Every node at its position after this iteration.
        edges: The session's edges (unchanged from frame to frame).
        iteration: 1-based iteration number.
        max_displacement: Largest per-axis move made in this iteration.
    """

    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    iteration: int
    max_displacement: float


FrameListener = Callable[[Frame], None]


class LayoutSession:
    """A single layout run, from start until convergence or cancellation.

    Sessions are created by LayoutSimulator.start(); they are the handle
    passed to LayoutSimulator.cancel().
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        nodes: tuple[GraphNode, ...],
        edges: tuple[GraphEdge, ...],
        params: ForceParams,
        listeners: Iterable[FrameListener] = (),
    ) -> None:
        self.scheduler = scheduler
        self.params = params
        self.edges = edges
        self._nodes = nodes
        self._listeners = list(listeners)
        self._pending: Any = None
        self.state = SessionState.IDLE
        self.iteration = 0
        self.frames_published = 0
        self.latest_frame: Frame | None = None

    @property
    def nodes(self) -> tuple[GraphNode, ...]:
        """Node snapshot of the latest frame (the initial nodes before any)."""
        return self._nodes

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    def subscribe(self, listener: FrameListener) -> None:
        """Receive every frame published from now on."""
        self._listeners.append(listener)

    def _begin(self) -> None:
        if self.state is not SessionState.IDLE:
            raise LayoutError(f"session already {self.state.value}; start a new one")
        self.state = SessionState.RUNNING
        logger.info(
            "Layout session started: %d nodes, %d edges", len(self._nodes), len(self.edges)
        )
        self._schedule()

    def _schedule(self) -> None:
        self._pending = self.scheduler.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        # A scheduler that could not revoke the frame still must not move anything.
        if self.state is not SessionState.RUNNING:
            return
        self._pending = None

        nodes, max_displacement = relax(self._nodes, self.edges, self.params)
        self.iteration += 1
        self._nodes = tuple(nodes)
        frame = Frame(self._nodes, self.edges, self.iteration, max_displacement)
        try:
            self._publish(frame)
        except Exception:
            logger.error("Frame listener failed at iteration %d; cancelling session", self.iteration)
            self.cancel()
            raise

        if self.state is not SessionState.RUNNING:
            # A listener cancelled the session while handling the frame.
            return
        if max_displacement > self.params.convergence_threshold:
            self._schedule()
        else:
            self.state = SessionState.CONVERGED
            logger.info("Layout converged after %d iterations", self.iteration)

    def _publish(self, frame: Frame) -> None:
        self.latest_frame = frame
        self.frames_published += 1
        logger.debug(
            "Frame %d published (max displacement %.3f)", frame.iteration, frame.max_displacement
        )
        for listener in list(self._listeners):
            listener(frame)

    def cancel(self) -> None:
        """Stop the session; any pending frame is revoked before it runs.

        Cancelling an already cancelled session does nothing.
        """
        if self.state is SessionState.CANCELLED:
            return
        if self._pending is not None:
            self.scheduler.cancel_frame(self._pending)
            self._pending = None
        previous = self.state
        self.state = SessionState.CANCELLED
        logger.info("Layout session cancelled (was %s)", previous.value)


class LayoutSimulator:
    """Control surface for layout sessions.

    Usage:
        simulator = LayoutSimulator(AsyncioFrameScheduler())
        session = simulator.start(graph.nodes, graph.edges)
        ...
        simulator.cancel(session)
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        params: ForceParams | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.params = params or ForceParams()

    def start(
        self,
        nodes: Iterable[GraphNode],
        edges: Iterable[GraphEdge],
        on_frame: FrameListener | None = None,
    ) -> LayoutSession:
        """Start a layout session over the given graph.

        Args:
            nodes: Nodes with their initial positions.
            edges: Edges between those nodes.
            on_frame: Optional listener receiving every published frame.

        Returns:
            The running session; pass it to cancel() to stop it.

        Raises:
            LayoutError: If nodes or edges are missing or inconsistent. No
                session is created in that case.
        """
        node_tuple = _validate_nodes(nodes)
        edge_tuple = _validate_edges(edges, {node.id for node in node_tuple})
        session = LayoutSession(
            self.scheduler,
            node_tuple,
            edge_tuple,
            self.params,
            listeners=[on_frame] if on_frame is not None else [],
        )
        session._begin()
        return session

    def cancel(self, session: LayoutSession) -> None:
        """Cancel a session started by this simulator."""
        if not isinstance(session, LayoutSession):
            raise LayoutError(f"expected a LayoutSession, got {type(session).__name__}")
        if session.scheduler is not self.scheduler:
            raise LayoutError("session was not started by this simulator")
        session.cancel()


def _validate_nodes(nodes: Any) -> tuple[GraphNode, ...]:
    if nodes is None:
        raise LayoutError("nodes must be a collection of GraphNode, got None")
    try:
        node_tuple = tuple(nodes)
    except TypeError:
        raise LayoutError(f"nodes must be iterable, got {type(nodes).__name__}") from None
    seen: set[str] = set()
    for node in node_tuple:
        if not isinstance(node, GraphNode):
            raise LayoutError(f"nodes must be GraphNode instances, got {type(node).__name__}")
        if node.id in seen:
            raise LayoutError(f"duplicate node id: {node.id}")
        seen.add(node.id)
    return node_tuple


def _validate_edges(edges: Any, node_ids: set[str]) -> tuple[GraphEdge, ...]:
    if edges is None:
        raise LayoutError("edges must be a collection of GraphEdge, got None")
    try:
        edge_tuple = tuple(edges)
    except TypeError:
        raise LayoutError(f"edges must be iterable, got {type(edges).__name__}") from None
    for edge in edge_tuple:
        if not isinstance(edge, GraphEdge):
            raise LayoutError(f"edges must be GraphEdge instances, got {type(edge).__name__}")
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                raise LayoutError(f"edge {edge.id} references unknown node {endpoint}")
    return edge_tuple


def settle_layout(
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    params: ForceParams | None = None,
    max_frames: int | None = None,
    on_frame: FrameListener | None = None,
) -> LayoutSession:
    """Run a layout session synchronously until it stops.

    Frames are driven by a ManualFrameScheduler. If max_frames is reached
    before convergence, the session is cancelled.

    Returns:
        The finished session (CONVERGED or CANCELLED).
    """
    scheduler = ManualFrameScheduler()
    simulator = LayoutSimulator(scheduler, params)
    session = simulator.start(nodes, edges, on_frame=on_frame)
    scheduler.run_until_idle(max_frames)
    if session.is_running:
        logger.warning("Layout did not converge within %s frames; cancelling", max_frames)
        simulator.cancel(session)
    return session
