"""Force-directed layout engine.

Provides:
- Grid + jitter cold-start placement
- Fixed-step force simulation with single-node pinning
- Link resolution, search matching and label colors
- An asyncio runner that ticks continuously and publishes every Nth tick
"""

from forcegraph.layout.colors import CHART_COLORS, build_label_color_map, color_for_node
from forcegraph.layout.config import LayoutConfig
from forcegraph.layout.initializer import create_initial_nodes, grid_shape
from forcegraph.layout.links import create_node_map, resolve_index_links, resolve_links
from forcegraph.layout.runner import SimulationRunner, ViewportRect, pointer_to_canvas
from forcegraph.layout.search import (
    find_search_matches,
    node_matches_search_term,
    normalize_search_term,
)
from forcegraph.layout.simulation import (
    ForceSimulation,
    SimulationState,
    kinetic_energy,
    move_pinned_node,
    pin_node,
    release_pin,
    step,
)

__all__ = [
    # Config
    "LayoutConfig",
    # Initializer
    "create_initial_nodes",
    "grid_shape",
    # Simulation
    "ForceSimulation",
    "SimulationState",
    "step",
    "pin_node",
    "move_pinned_node",
    "release_pin",
    "kinetic_energy",
    # Links
    "create_node_map",
    "resolve_links",
    "resolve_index_links",
    # Search
    "normalize_search_term",
    "node_matches_search_term",
    "find_search_matches",
    # Colors
    "CHART_COLORS",
    "build_label_color_map",
    "color_for_node",
    # Runner
    "SimulationRunner",
    "ViewportRect",
    "pointer_to_canvas",
]
