"""Cold-start placement of nodes on a jittered near-square grid."""

import logging
import math
import random
from collections.abc import Sequence

from forcegraph.layout.config import LayoutConfig
from forcegraph.models import GraphNode, GraphPayload, SimNode

logger = logging.getLogger(__name__)


def grid_shape(count: int, aspect: float) -> tuple[int, int]:
    """Return (cols, rows) of a grid holding ``count`` cells at ``aspect``."""
    cols = max(1, math.ceil(math.sqrt(count * aspect)))
    rows = max(1, math.ceil(count / cols))
    return cols, rows


def create_initial_nodes(
    data: GraphPayload | Sequence[GraphNode] | None,
    config: LayoutConfig | None = None,
    rng: random.Random | None = None,
) -> list[SimNode]:
    """Seed one SimNode per input node.

    Nodes are laid out row by row on a grid whose shape follows the usable
    canvas aspect ratio, then jittered by up to +-10% of a cell so springs
    don't settle into a plain lattice. Velocities start at zero.

    Args:
        data: Payload or node list. None or empty yields an empty list.
        config: Canvas geometry. Defaults to LayoutConfig().
        rng: Random source for the jitter (module ``random`` if None).

    Returns:
        New SimNodes, in input order, inside the canvas minus the margin.
    """
    config = config or LayoutConfig()
    nodes = data.nodes if isinstance(data, GraphPayload) else list(data or [])
    if not nodes:
        return []

    rand = rng.random if rng is not None else random.random

    margin = config.init_margin
    usable_width = config.width - margin * 2
    usable_height = config.height - margin * 2

    count = len(nodes)
    cols, rows = grid_shape(count, usable_width / usable_height)

    cell_width = usable_width / (cols - 1) if cols > 1 else 0.0
    cell_height = usable_height / (rows - 1) if rows > 1 else 0.0

    max_x = config.width - margin
    max_y = config.height - margin

    seeded: list[SimNode] = []
    for index, node in enumerate(nodes):
        col = index % cols
        row = index // cols

        base_x = margin + col * cell_width
        base_y = margin + row * cell_height

        jitter_x = cell_width * config.init_jitter * (rand() - 0.5)
        jitter_y = cell_height * config.init_jitter * (rand() - 0.5)

        # Edge cells would otherwise be pushed past the margin
        x = min(max_x, max(margin, base_x + jitter_x))
        y = min(max_y, max(margin, base_y + jitter_y))

        seeded.append(SimNode.from_node(node, x, y))

    logger.debug(f"Seeded {count} nodes on a {cols}x{rows} grid")
    return seeded
