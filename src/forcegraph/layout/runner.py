"""Scheduled simulation loop with a cancellation handle.

The runner replaces a host animation-frame callback with an ``asyncio`` task
that simulates one tick per interval and publishes every Nth tick. Loading a
new payload tears the old loop down and reseeds from scratch; positions are
never carried over between payloads.
"""

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from forcegraph.layout.config import LayoutConfig
from forcegraph.layout.simulation import ForceSimulation
from forcegraph.models import GraphPayload, NodeId, SimNode

logger = logging.getLogger(__name__)

PublishCallback = Callable[[list[SimNode], int], None]


@dataclass(frozen=True)
class ViewportRect:
    """Screen rectangle a canvas is rendered into."""

    left: float
    top: float
    width: float
    height: float


def pointer_to_canvas(
    client_x: float,
    client_y: float,
    rect: ViewportRect,
    config: LayoutConfig,
) -> tuple[float, float]:
    """Map pointer coordinates in a rendered viewport onto the canvas."""
    x = (client_x - rect.left) / rect.width * config.width if rect.width else 0.0
    y = (client_y - rect.top) / rect.height * config.height if rect.height else 0.0
    return x, y


class SimulationRunner:
    """Drives a ForceSimulation from a repeating task.

    Every scheduled iteration advances exactly one tick. Only every
    ``config.publish_every``-th tick replaces ``nodes`` and reaches
    subscribers, which keeps downstream update volume down without skipping
    physics.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self._rng = rng
        self._simulation: ForceSimulation | None = None
        self._task: asyncio.Task | None = None
        self._generation = 0
        self._subscribers: list[PublishCallback] = []
        self.nodes: list[SimNode] = []

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    @property
    def simulation(self) -> ForceSimulation | None:
        return self._simulation

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, callback: PublishCallback) -> Callable[[], None]:
        """Register a publish callback. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def load(self, payload: GraphPayload | None) -> None:
        """Replace the simulated graph.

        The previous loop is cancelled and its generation invalidated, so an
        in-flight tick can never write into the new payload's state. An
        empty or missing payload leaves the runner idle with no nodes.
        """
        self._cancel_task()
        self._generation += 1

        if payload is None or payload.is_empty:
            self._simulation = None
            self._publish([], 0)
            logger.info("Simulation cleared (no nodes)")
            return

        simulation = ForceSimulation.from_payload(payload, self.config, rng=self._rng)
        self._simulation = simulation
        self._publish(simulation.nodes, 0)
        logger.info(
            f"Simulation loaded: {len(simulation.nodes)} nodes, "
            f"{len(simulation.state.links)} links"
        )

        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, simulation),
        )
        self._task.add_done_callback(self._log_task_failure)

    async def stop(self) -> None:
        """Stop the loop. Safe to call repeatedly."""
        task = self._task
        was_running = task is not None and not task.done()
        self._cancel_task()
        # A task that already failed was reported by _log_task_failure
        if was_running:
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug("Simulation loop stopped")

    @staticmethod
    def _log_task_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Simulation loop failed: {error!r}", exc_info=error)

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, generation: int, simulation: ForceSimulation) -> None:
        """Tick until cancelled or superseded by a newer payload."""
        while generation == self._generation:
            self._advance(generation, simulation)
            await asyncio.sleep(self.config.tick_interval)

    def _advance(self, generation: int, simulation: ForceSimulation) -> None:
        simulation.tick()
        if generation != self._generation:
            return
        if simulation.tick_count % self.config.publish_every == 0:
            self._publish(simulation.nodes, simulation.tick_count)

    def run_sync(self, ticks: int) -> list[SimNode]:
        """Advance the current simulation without a clock.

        Publishing follows the same every-Nth-tick rule as the loop.
        """
        simulation = self._simulation
        if simulation is None:
            return []
        for _ in range(ticks):
            self._advance(self._generation, simulation)
        return simulation.nodes

    def _publish(self, nodes: list[SimNode], tick_count: int) -> None:
        self.nodes = nodes
        for callback in list(self._subscribers):
            callback(nodes, tick_count)

    # ==========================================================================
    # Pointer drag
    # ==========================================================================

    @property
    def dragged_id(self) -> str | None:
        if self._simulation is None:
            return None
        return self._simulation.pinned_id

    def begin_drag(self, node_id: NodeId) -> bool:
        """Pin a node to the pointer. Replaces any previous pin."""
        if self._simulation is None:
            return False
        return self._simulation.pin(node_id)

    def drag_to(self, x: float, y: float) -> None:
        """Move the pinned node and publish the change immediately."""
        simulation = self._simulation
        if simulation is None or simulation.pinned_id is None:
            return
        simulation.drag_to(x, y)
        self._publish(simulation.nodes, simulation.tick_count)

    def end_drag(self) -> None:
        if self._simulation is not None:
            self._simulation.release()
