"""Selection state and focus rules of the explorer.

The selection is exclusive: nothing, one node, or one link with its
resolved endpoints. It must always refer to the rendered node/link set, so it
is re-bound (or cleared) whenever nodes are republished or replaced.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from forcegraph.layout.search import node_matches_search_term
from forcegraph.models import GraphLink, ResolvedLink, SimNode, id_key


@dataclass(frozen=True)
class NodeSelection:
    node: SimNode
    type: Literal["node"] = "node"

    def to_dict(self) -> dict:
        return {"type": self.type, "node": self.node.to_dict()}


@dataclass(frozen=True)
class LinkSelection:
    link: GraphLink
    source: SimNode
    target: SimNode
    type: Literal["link"] = "link"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "link": self.link.to_dict(),
            "source": self.source.to_dict(),
            "target": self.target.to_dict(),
        }


Selection = NodeSelection | LinkSelection | None


def reconcile_selection(
    selection: Selection,
    node_map: Mapping[str, SimNode],
    resolved_links: Sequence[ResolvedLink],
) -> Selection:
    """Re-bind a selection to the current live objects.

    Returns None when the selected node or link is no longer rendered.
    """
    if selection is None:
        return None

    if isinstance(selection, NodeSelection):
        node = node_map.get(id_key(selection.node.id))
        return NodeSelection(node) if node is not None else None

    key = id_key(selection.link.id)
    for resolved in resolved_links:
        if id_key(resolved.link.id) == key:
            return LinkSelection(resolved.link, resolved.source, resolved.target)
    return None


def has_focus(selection: Selection, normalized_search: str) -> bool:
    """True when a selection or an active search should dim everything else."""
    return selection is not None or bool(normalized_search)


def is_node_selected(node: SimNode, selection: Selection) -> bool:
    return isinstance(selection, NodeSelection) and id_key(selection.node.id) == id_key(node.id)


def is_node_dimmed(node: SimNode, selection: Selection, normalized_search: str) -> bool:
    if not has_focus(selection, normalized_search):
        return False
    if is_node_selected(node, selection):
        return False
    return not node_matches_search_term(node, normalized_search)


def is_link_dimmed(
    resolved: ResolvedLink,
    selection: Selection,
    normalized_search: str,
) -> bool:
    """A link stays visible if selected, touching the selected node, or touching a search hit."""
    if not has_focus(selection, normalized_search):
        return False

    if isinstance(selection, LinkSelection) and id_key(selection.link.id) == id_key(resolved.link.id):
        return False

    if is_node_selected(resolved.source, selection) or is_node_selected(resolved.target, selection):
        return False

    touches_search = node_matches_search_term(
        resolved.source, normalized_search
    ) or node_matches_search_term(resolved.target, normalized_search)
    return not touches_search
