"""forcegraph data models."""

from forcegraph.models.graph import (
    GraphLink,
    GraphNode,
    GraphPayload,
    GraphPayloadError,
    IndexLink,
    NodeId,
    ResolvedLink,
    SimNode,
    id_key,
)

__all__ = [
    "GraphNode",
    "GraphLink",
    "GraphPayload",
    "GraphPayloadError",
    "NodeId",
    "SimNode",
    "ResolvedLink",
    "IndexLink",
    "id_key",
]
