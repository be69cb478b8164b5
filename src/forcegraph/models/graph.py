"""Graph payload models - nodes and links as received from a query executor."""

from dataclasses import dataclass, field
from typing import Any

NodeId = str | int


class GraphPayloadError(ValueError):
    """Raised when a raw payload cannot be turned into a GraphPayload."""


def id_key(value: Any) -> str:
    """Coerce a node/link id to the string used for every comparison.

    Numeric and string ids that stringify identically are the same entity,
    so ``1``, ``1.0`` and ``"1"`` all map to ``"1"``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class GraphNode:
    """A node of a graph payload. Immutable once received."""

    id: NodeId
    label: str | None = None  # Category name, e.g. the first Neo4j label
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """String-coerced id."""
        return id_key(self.id)

    @property
    def display_name(self) -> str:
        """Text shown on the node glyph."""
        return self.label if self.label is not None else id_key(self.id)

    def to_dict(self) -> dict:
        """Convert to the wire shape."""
        data: dict[str, Any] = {"id": self.id}
        if self.label is not None:
            data["label"] = self.label
        if self.properties:
            data["properties"] = dict(self.properties)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GraphNode":
        """Create from the wire shape."""
        if data.get("id") is None:
            raise GraphPayloadError(f"Node without id: {data!r}")
        return cls(
            id=data["id"],
            label=data.get("label") or None,
            properties=dict(data.get("properties") or {}),
        )


@dataclass
class GraphLink:
    """A directed link of a graph payload."""

    id: NodeId
    source: NodeId
    target: NodeId
    type: str | None = None  # Relationship kind
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """String-coerced id."""
        return id_key(self.id)

    def to_dict(self) -> dict:
        """Convert to the wire shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
        }
        if self.type is not None:
            data["type"] = self.type
        if self.properties:
            data["properties"] = dict(self.properties)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GraphLink":
        """Create from the wire shape."""
        for name in ("id", "source", "target"):
            if data.get(name) is None:
                raise GraphPayloadError(f"Link without {name}: {data!r}")
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            type=data.get("type") or None,
            properties=dict(data.get("properties") or {}),
        )


@dataclass
class GraphPayload:
    """One complete node + link dataset. A new payload replaces the old one."""

    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self) -> dict:
        """Convert to the wire shape."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphPayload":
        """Create from the wire shape ``{"nodes": [...], "links": [...]}``."""
        if not isinstance(data, dict):
            raise GraphPayloadError(f"Expected an object, got {type(data).__name__}")
        return cls(
            nodes=[GraphNode.from_dict(n) for n in data.get("nodes") or []],
            links=[GraphLink.from_dict(link) for link in data.get("links") or []],
        )


@dataclass
class SimNode(GraphNode):
    """A node with a simulated position and velocity.

    Created once per GraphNode at cold start, mutated every tick and on drag,
    replaced en masse when the payload changes.
    """

    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0

    @property
    def speed(self) -> float:
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5

    def to_dict(self) -> dict:
        """Convert to dictionary with position fields."""
        data = super().to_dict()
        data.update({"x": self.x, "y": self.y, "vx": self.vx, "vy": self.vy})
        return data

    @classmethod
    def from_node(
        cls,
        node: GraphNode,
        x: float,
        y: float,
        vx: float = 0.0,
        vy: float = 0.0,
    ) -> "SimNode":
        """Extend a received node with a position."""
        return cls(
            id=node.id,
            label=node.label,
            properties=node.properties,
            x=x,
            y=y,
            vx=vx,
            vy=vy,
        )


@dataclass
class ResolvedLink:
    """A link paired with live references to its endpoint nodes."""

    link: GraphLink
    source: SimNode
    target: SimNode

    def to_dict(self) -> dict:
        data = self.link.to_dict()
        data.update({
            "x1": self.source.x,
            "y1": self.source.y,
            "x2": self.target.x,
            "y2": self.target.y,
        })
        return data


@dataclass(frozen=True)
class IndexLink:
    """A link resolved to positions in the simulated node list."""

    source_index: int
    target_index: int
