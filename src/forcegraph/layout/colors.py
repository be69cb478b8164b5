"""Label to color mapping."""

from collections.abc import Sequence

from forcegraph.models import GraphNode, GraphPayload

# Reused cyclically when there are more labels than colors
CHART_COLORS: tuple[str, ...] = (
    "#e76e50",
    "#2a9d90",
    "#274754",
    "#e8c468",
    "#f4a462",
)

DEFAULT_NODE_COLOR = "#ffffff"


def build_label_color_map(
    data: GraphPayload | Sequence[GraphNode] | None,
    palette: Sequence[str] = CHART_COLORS,
) -> dict[str, str]:
    """Assign a palette color to every distinct label.

    Labels are sorted lexicographically first, so the mapping depends only on
    which labels are present and not on node order.
    """
    if data is None:
        return {}
    nodes = data.nodes if isinstance(data, GraphPayload) else data

    labels = sorted({node.label for node in nodes if node.label})
    return {label: palette[index % len(palette)] for index, label in enumerate(labels)}


def color_for_node(
    node: GraphNode,
    color_map: dict[str, str],
    default: str = DEFAULT_NODE_COLOR,
) -> str:
    """Fill color of a node, falling back for unlabeled nodes."""
    if node.label and node.label in color_map:
        return color_map[node.label]
    return default
