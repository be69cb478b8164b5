"""Force simulation engine.

A discrete-time physical simulation advanced one fixed step per call:

1. Pairwise repulsion between every unordered pair of nodes (O(N^2))
2. Spring attraction along every resolved link towards a rest length
3. Centering pull, damping, velocity clamp, integration and bounds clamp

The order matters for the numerical outcome and is kept fixed. At most one
node is pinned (dragged); forces skip it, but it is still damped so that a
released node does not fling.

State is explicit: ``step`` takes a SimulationState and returns a new one,
leaving the input untouched.
"""

import copy
import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from forcegraph.layout.config import LayoutConfig
from forcegraph.layout.initializer import create_initial_nodes
from forcegraph.layout.links import resolve_index_links
from forcegraph.models import GraphPayload, IndexLink, NodeId, SimNode, id_key

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """Positions, velocities and topology of one simulation."""

    nodes: list[SimNode] = field(default_factory=list)
    links: list[IndexLink] = field(default_factory=list)
    pinned_id: str | None = None  # id_key of the dragged node
    tick_count: int = 0

    def index_of(self, node_id: NodeId) -> int | None:
        """Position of a node in ``nodes``, by string-coerced id."""
        key = id_key(node_id)
        for index, node in enumerate(self.nodes):
            if id_key(node.id) == key:
                return index
        return None


def step(state: SimulationState, config: LayoutConfig) -> SimulationState:
    """Advance the simulation by exactly one time step."""
    updated = [copy.copy(node) for node in state.nodes]
    if not updated:
        return replace(state, nodes=updated, tick_count=state.tick_count + 1)

    dt = config.time_step
    pinned = [id_key(node.id) == state.pinned_id for node in updated]

    # 1) Repulsion between all pairs keeps nodes apart
    count = len(updated)
    for i in range(count):
        node_a = updated[i]
        for j in range(i + 1, count):
            node_b = updated[j]

            dx = node_b.x - node_a.x
            dy = node_b.y - node_a.y
            dist_sq = dx * dx + dy * dy + config.distance_epsilon
            force = config.repel_strength / dist_sq
            inv_dist = 1.0 / math.sqrt(dist_sq)

            fx = force * dx * inv_dist
            fy = force * dy * inv_dist

            if not pinned[i]:
                node_a.vx -= fx * dt
                node_a.vy -= fy * dt
            if not pinned[j]:
                node_b.vx += fx * dt
                node_b.vy += fy * dt

    # 2) Springs pull linked nodes towards the rest length
    for link in state.links:
        source = updated[link.source_index]
        target = updated[link.target_index]

        dx = target.x - source.x
        dy = target.y - source.y
        dist = math.sqrt(dx * dx + dy * dy) or 1.0
        force = config.spring_strength * (dist - config.link_distance)

        fx = force * dx / dist
        fy = force * dy / dist

        if not pinned[link.source_index]:
            source.vx += fx * dt
            source.vy += fy * dt
        if not pinned[link.target_index]:
            target.vx -= fx * dt
            target.vy -= fy * dt

    # 3) Centering, damping, clamping, integration
    center_x, center_y = config.center
    max_speed_sq = config.max_velocity * config.max_velocity
    min_x, max_x = config.bounds_margin, config.width - config.bounds_margin
    min_y, max_y = config.bounds_margin, config.height - config.bounds_margin

    for index, node in enumerate(updated):
        if pinned[index]:
            node.vx *= config.damping
            node.vy *= config.damping
            continue

        node.vx += (center_x - node.x) * config.center_strength * dt
        node.vy += (center_y - node.y) * config.center_strength * dt

        node.vx *= config.damping
        node.vy *= config.damping

        speed_sq = node.vx * node.vx + node.vy * node.vy
        if speed_sq > max_speed_sq:
            scale = config.max_velocity / math.sqrt(speed_sq)
            node.vx *= scale
            node.vy *= scale

        node.x += node.vx
        node.y += node.vy

        node.x = max(min_x, min(max_x, node.x))
        node.y = max(min_y, min(max_y, node.y))

    return replace(state, nodes=updated, tick_count=state.tick_count + 1)


def pin_node(state: SimulationState, node_id: NodeId) -> SimulationState:
    """Pin a node for dragging. Unknown ids leave the state unchanged."""
    if state.index_of(node_id) is None:
        logger.debug(f"Cannot pin unknown node {node_id!r}")
        return state
    return replace(state, pinned_id=id_key(node_id))


def release_pin(state: SimulationState) -> SimulationState:
    """Release the pinned node, if any."""
    if state.pinned_id is None:
        return state
    return replace(state, pinned_id=None)


def move_pinned_node(
    state: SimulationState,
    x: float,
    y: float,
    config: LayoutConfig,
) -> SimulationState:
    """Place the pinned node at a pointer position and stop it.

    The position is clamped into the canvas bounds. Without a pinned node
    the state is returned unchanged.
    """
    if state.pinned_id is None:
        return state
    index = state.index_of(state.pinned_id)
    if index is None:
        return state

    x = max(config.bounds_margin, min(config.width - config.bounds_margin, x))
    y = max(config.bounds_margin, min(config.height - config.bounds_margin, y))

    nodes = list(state.nodes)
    nodes[index] = replace(nodes[index], x=x, y=y, vx=0.0, vy=0.0)
    return replace(state, nodes=nodes)


def kinetic_energy(nodes: Sequence[SimNode]) -> float:
    """Total kinetic energy (unit mass), used to report settling."""
    return sum(0.5 * (node.vx * node.vx + node.vy * node.vy) for node in nodes)


class ForceSimulation:
    """Owns a SimulationState and a config and advances them together.

    Tests and headless callers drive it synchronously::

        simulation = ForceSimulation.from_payload(payload)
        simulation.tick(300)
        positions = {node.id: (node.x, node.y) for node in simulation.nodes}
    """

    def __init__(
        self,
        state: SimulationState | None = None,
        config: LayoutConfig | None = None,
    ) -> None:
        self.state = state or SimulationState()
        self.config = config or LayoutConfig()

    @classmethod
    def from_payload(
        cls,
        payload: GraphPayload,
        config: LayoutConfig | None = None,
        rng: random.Random | None = None,
    ) -> "ForceSimulation":
        """Seed a simulation from a payload (grid + jitter, resolved links)."""
        config = config or LayoutConfig()
        nodes = create_initial_nodes(payload, config, rng=rng)
        links = resolve_index_links(nodes, payload.links)
        logger.debug(
            f"Simulation seeded: {len(nodes)} nodes, "
            f"{len(links)}/{len(payload.links)} links resolved"
        )
        return cls(SimulationState(nodes=nodes, links=links), config)

    @property
    def nodes(self) -> list[SimNode]:
        return self.state.nodes

    @property
    def pinned_id(self) -> str | None:
        return self.state.pinned_id

    @property
    def tick_count(self) -> int:
        return self.state.tick_count

    def tick(self, count: int = 1) -> list[SimNode]:
        """Advance ``count`` steps and return the current nodes."""
        for _ in range(count):
            self.state = step(self.state, self.config)
        return self.state.nodes

    def pin(self, node_id: NodeId) -> bool:
        """Pin a node. Returns False if the id is unknown."""
        self.state = pin_node(self.state, node_id)
        return self.state.pinned_id == id_key(node_id)

    def drag_to(self, x: float, y: float) -> None:
        """Move the pinned node to a pointer position."""
        self.state = move_pinned_node(self.state, x, y, self.config)

    def release(self) -> None:
        self.state = release_pin(self.state)

    def position_of(self, node_id: NodeId) -> tuple[float, float] | None:
        index = self.state.index_of(node_id)
        if index is None:
            return None
        node = self.state.nodes[index]
        return node.x, node.y

    def kinetic_energy(self) -> float:
        return kinetic_energy(self.state.nodes)
