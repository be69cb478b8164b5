"""Link resolution: map opaque endpoint ids onto live simulated nodes."""

import logging
from collections.abc import Sequence

from forcegraph.models import (
    GraphLink,
    GraphNode,
    GraphPayload,
    IndexLink,
    ResolvedLink,
    SimNode,
    id_key,
)

logger = logging.getLogger(__name__)


def create_node_map(nodes: Sequence[SimNode]) -> dict[str, SimNode]:
    """Index nodes by string-coerced id so ``"1"`` and ``1`` resolve alike."""
    return {id_key(node.id): node for node in nodes}


def resolve_links(
    data: GraphPayload | Sequence[GraphLink] | None,
    node_map: dict[str, SimNode],
) -> list[ResolvedLink]:
    """Pair each link with its endpoint nodes.

    Links whose source or target is missing from ``node_map`` are dropped.
    Runs in a single pass and is cheap enough to call on every render.
    """
    if data is None:
        return []
    links = data.links if isinstance(data, GraphPayload) else data

    resolved: list[ResolvedLink] = []
    dropped = 0
    for link in links:
        source = node_map.get(id_key(link.source))
        target = node_map.get(id_key(link.target))
        if source is None or target is None:
            dropped += 1
            continue
        resolved.append(ResolvedLink(link=link, source=source, target=target))

    if dropped:
        logger.debug(f"Dropped {dropped} dangling links")
    return resolved


def resolve_index_links(
    nodes: Sequence[GraphNode],
    links: Sequence[GraphLink],
) -> list[IndexLink]:
    """Resolve links into index pairs for the tick function.

    Dangling links and self-loops are dropped.
    """
    index_by_id = {id_key(node.id): index for index, node in enumerate(nodes)}

    pairs: list[IndexLink] = []
    for link in links:
        source_index = index_by_id.get(id_key(link.source))
        target_index = index_by_id.get(id_key(link.target))
        if source_index is None or target_index is None:
            continue
        if source_index == target_index:
            continue
        pairs.append(IndexLink(source_index, target_index))
    return pairs
