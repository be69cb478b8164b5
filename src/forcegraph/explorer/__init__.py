"""Graph explorer: payload loading, live layout, search and selection."""

from forcegraph.explorer.selection import (
    LinkSelection,
    NodeSelection,
    Selection,
    has_focus,
    is_link_dimmed,
    is_node_dimmed,
    reconcile_selection,
)
from forcegraph.explorer.session import ExplorerStatus, GraphExplorer

__all__ = [
    "GraphExplorer",
    "ExplorerStatus",
    "Selection",
    "NodeSelection",
    "LinkSelection",
    "reconcile_selection",
    "has_focus",
    "is_node_dimmed",
    "is_link_dimmed",
]
