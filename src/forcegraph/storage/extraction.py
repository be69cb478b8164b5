"""Best-effort extraction of graph payloads from Neo4j result values.

User queries can return any shape: bare nodes, relationships without their
endpoints, paths, lists of those. Every value that looks like a node or a
relationship becomes part of the payload; everything else is ignored.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from typing import Any

from forcegraph.models import GraphLink, GraphNode, GraphPayload

logger = logging.getLogger(__name__)


def entity_id(entity: Any) -> str:
    """Stable string id of a Neo4j node or relationship."""
    element_id = getattr(entity, "element_id", None)
    if element_id is not None:
        return str(element_id)
    return str(entity.id)


def plain_value(value: Any) -> Any:
    """Convert a property value into something JSON can carry."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [plain_value(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): plain_value(v) for k, v in value.items()}
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    # Neo4j temporal types
    if hasattr(value, "iso_format"):
        return value.iso_format()
    return str(value)


def plain_properties(entity: Any) -> dict[str, Any]:
    """Property map of a node or relationship."""
    return {str(k): plain_value(v) for k, v in dict(entity.items()).items()}


def is_relationship(value: Any) -> bool:
    return (
        isinstance(getattr(value, "type", None), str)
        and hasattr(value, "start_node")
        and hasattr(value, "end_node")
        and hasattr(value, "items")
    )


def is_node(value: Any) -> bool:
    return hasattr(value, "labels") and hasattr(value, "items") and not is_relationship(value)


def is_path(value: Any) -> bool:
    return hasattr(value, "nodes") and hasattr(value, "relationships")


class PayloadBuilder:
    """Accumulates nodes and links from arbitrary result values."""

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._links: dict[str, GraphLink] = {}

    def add_node(self, node: Any) -> None:
        """Add or upgrade a node.

        A full node always overwrites an id-only placeholder created earlier
        for a relationship endpoint.
        """
        node_id = entity_id(node)
        labels = sorted(node.labels or [])
        self._nodes[node_id] = GraphNode(
            id=node_id,
            label=labels[0] if labels else None,
            properties=plain_properties(node),
        )

    def add_relationship(self, rel: Any) -> None:
        """Add a link, inserting placeholders for endpoints not seen yet."""
        start = rel.start_node
        end = rel.end_node
        start_id = entity_id(start)
        end_id = entity_id(end)

        for endpoint_id in (start_id, end_id):
            if endpoint_id not in self._nodes:
                self._nodes[endpoint_id] = GraphNode(id=endpoint_id)

        link_id = entity_id(rel)
        self._links[link_id] = GraphLink(
            id=link_id,
            source=start_id,
            target=end_id,
            type=rel.type,
            properties=plain_properties(rel),
        )

    def add_value(self, value: Any) -> None:
        """Walk one result value."""
        if value is None or isinstance(value, (str, bytes, int, float, bool)):
            return
        if is_relationship(value):
            self.add_relationship(value)
        elif is_node(value):
            self.add_node(value)
        elif is_path(value):
            for node in value.nodes:
                self.add_node(node)
            for rel in value.relationships:
                self.add_relationship(rel)
        elif isinstance(value, Mapping):
            for item in value.values():
                self.add_value(item)
        elif isinstance(value, Iterable):
            for item in value:
                self.add_value(item)

    def add_record(self, record: Mapping[str, Any]) -> None:
        for value in record.values():
            self.add_value(value)

    def build(self) -> GraphPayload:
        return GraphPayload(
            nodes=list(self._nodes.values()),
            links=list(self._links.values()),
        )


def payload_from_records(records: Iterable[Mapping[str, Any]]) -> GraphPayload:
    """Extract a payload from query records."""
    builder = PayloadBuilder()
    for record in records:
        builder.add_record(record)
    payload = builder.build()
    logger.debug(f"Extracted {len(payload.nodes)} nodes, {len(payload.links)} links")
    return payload
