"""Force model for the force-directed layout.

Each relaxation step builds one SimulationNode per graph node from the
previous frame's positions, accumulates every force into those fresh
accumulators, and only then integrates. Positions are therefore never
read after being updated within the same step.

Repulsion is an all-pairs O(n^2) pass. That is the scaling boundary of
this layout: it is meant for graphs of at most a few hundred nodes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from atlasgraph.graph.GraphNode import GraphNode
from atlasgraph.graph.relations import GraphEdge


@dataclass(frozen=True)
class ForceParams:
    """Tunable constants of the simulation.

    Attributes:
        repulsion: Strength of the inverse-square push between every pair.
        ideal_length: Rest length of every edge spring.
        spring: Spring stiffness.
        gravity: Pull of every node toward the origin.
        velocity_clamp: Largest move per axis per frame.
        convergence_threshold: The session converges once no node moves
            more than this on either axis in a frame.
    """

    repulsion: float = 5000.0
    ideal_length: float = 200.0
    spring: float = 0.05
    gravity: float = 0.01
    velocity_clamp: float = 5.0
    convergence_threshold: float = 0.1

    @classmethod
    def from_config(cls, layout: Mapping[str, Any]) -> ForceParams:
        """Build params from the [layout] config section, ignoring unknown keys."""
        defaults = cls()
        return cls(
            **{
                name: float(layout.get(name, getattr(defaults, name)))
                for name in cls.__dataclass_fields__
            }
        )


@dataclass
class SimulationNode:
    """A node's previous-frame position plus this iteration's force accumulator."""

    id: str
    x: float
    y: float
    fx: float = 0.0
    fy: float = 0.0

    @classmethod
    def from_node(cls, node: GraphNode) -> SimulationNode:
        return cls(id=node.id, x=node.position.x, y=node.position.y)


def _separation(u: SimulationNode, v: SimulationNode) -> tuple[float, float, float, float]:
    """Return (dx, dy, dist_sq, dist) from u to v, with dist_sq floored to 1."""
    dx = v.x - u.x
    dy = v.y - u.y
    dist_sq = max(dx * dx + dy * dy, 1.0)
    return dx, dy, dist_sq, math.sqrt(dist_sq)


def apply_repulsion(bodies: Sequence[SimulationNode], params: ForceParams) -> None:
    """Push every unordered pair apart with an inverse-square force."""
    count = len(bodies)
    for i in range(count):
        u = bodies[i]
        for j in range(i + 1, count):
            v = bodies[j]
            dx, dy, dist_sq, dist = _separation(u, v)
            f = params.repulsion / dist_sq
            fx = (dx / dist) * f
            fy = (dy / dist) * f
            u.fx -= fx
            u.fy -= fy
            v.fx += fx
            v.fy += fy


def apply_springs(
    bodies: Mapping[str, SimulationNode],
    edges: Sequence[GraphEdge],
    params: ForceParams,
) -> None:
    """Pull stretched edges together and push compressed edges apart.

    Every edge contributes, whatever its kind; parallel edges superpose.
    """
    for edge in edges:
        u = bodies.get(edge.source)
        v = bodies.get(edge.target)
        if u is None or v is None:
            continue
        dx, dy, _, dist = _separation(u, v)
        force = (dist - params.ideal_length) * params.spring
        fx = (dx / dist) * force
        fy = (dy / dist) * force
        u.fx += fx
        u.fy += fy
        v.fx -= fx
        v.fy -= fy


def apply_gravity(bodies: Sequence[SimulationNode], params: ForceParams) -> None:
    """Pull every node toward the origin so components don't drift apart."""
    for body in bodies:
        body.fx -= body.x * params.gravity
        body.fy -= body.y * params.gravity


def accumulate_forces(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    params: ForceParams,
) -> list[SimulationNode]:
    """Compute this iteration's net force on every node.

    Args:
        nodes: Nodes at their previous-frame positions.
        edges: Edges between those nodes.
        params: Force constants.

    Returns:
        One SimulationNode per input node, in input order.
    """
    bodies = [SimulationNode.from_node(node) for node in nodes]
    apply_repulsion(bodies, params)
    apply_springs({body.id: body for body in bodies}, edges, params)
    apply_gravity(bodies, params)
    return bodies


def clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def integrate(
    nodes: Sequence[GraphNode],
    bodies: Sequence[SimulationNode],
    params: ForceParams,
) -> tuple[list[GraphNode], float]:
    """Move every node by its clamped force.

    The clamp is a per-frame move cap; no momentum carries between frames.

    Returns:
        New nodes at their new positions, and the largest absolute
        per-axis displacement of the step.
    """
    moved = []
    max_displacement = 0.0
    for node, body in zip(nodes, bodies):
        vx = clamp(body.fx, params.velocity_clamp)
        vy = clamp(body.fy, params.velocity_clamp)
        moved.append(node.with_position(node.position.moved(vx, vy)))
        max_displacement = max(max_displacement, abs(vx), abs(vy))
    return moved, max_displacement


def relax(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    params: ForceParams,
) -> tuple[list[GraphNode], float]:
    """Run one full relaxation step; see accumulate_forces and integrate."""
    bodies = accumulate_forces(nodes, edges, params)
    return integrate(nodes, bodies, params)
