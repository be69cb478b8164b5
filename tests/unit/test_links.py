"""Unit tests for link resolution."""

from forcegraph.layout import create_node_map, resolve_index_links, resolve_links
from forcegraph.models import GraphLink, GraphNode, GraphPayload, IndexLink, SimNode


def sim(node_id, x: float = 0.0, y: float = 0.0) -> SimNode:
    return SimNode(id=node_id, x=x, y=y)


class TestCreateNodeMap:
    """Tests for create_node_map."""

    def test_keys_are_strings(self) -> None:
        nodes = [sim(1), sim("two"), sim(3.0)]
        node_map = create_node_map(nodes)
        assert set(node_map) == {"1", "two", "3"}
        assert node_map["1"] is nodes[0]

    def test_empty(self) -> None:
        assert create_node_map([]) == {}


class TestResolveLinks:
    """Tests for resolve_links."""

    def test_drops_dangling_link(self) -> None:
        """A link to a missing endpoint is dropped, not an error."""
        a, b = sim("A"), sim("B")
        links = [
            GraphLink(id=1, source="A", target="B"),
            GraphLink(id=2, source="A", target="missing"),
        ]

        resolved = resolve_links(links, create_node_map([a, b]))

        assert len(resolved) == 1
        assert resolved[0].source is a
        assert resolved[0].target is b
        assert resolved[0].link.id == 1

    def test_mixed_id_types(self) -> None:
        """Numeric and string ids that stringify alike resolve to the same node."""
        nodes = [sim(1), sim("2")]
        links = [GraphLink(id="x", source="1", target=2)]

        resolved = resolve_links(links, create_node_map(nodes))

        assert len(resolved) == 1
        assert resolved[0].source is nodes[0]
        assert resolved[0].target is nodes[1]

    def test_accepts_payload(self, sample_payload: GraphPayload) -> None:
        nodes = [sim(n.id) for n in sample_payload.nodes]
        resolved = resolve_links(sample_payload, create_node_map(nodes))
        assert [r.link.id for r in resolved] == ["r1", "r2", "r3", "r4"]

    def test_none_payload(self) -> None:
        assert resolve_links(None, {}) == []

    def test_keeps_self_loops(self) -> None:
        """Rendering keeps self-loops; only the physics drops them."""
        node = sim("a")
        resolved = resolve_links([GraphLink(id=1, source="a", target="a")], create_node_map([node]))
        assert len(resolved) == 1

    def test_references_are_live(self) -> None:
        """Resolved endpoints are the node objects themselves."""
        a, b = sim("a", 1, 1), sim("b", 2, 2)
        resolved = resolve_links([GraphLink(id=1, source="a", target="b")], create_node_map([a, b]))
        a.x = 50
        assert resolved[0].source.x == 50


class TestResolveIndexLinks:
    """Tests for resolve_index_links."""

    def test_index_pairs(self, sample_payload: GraphPayload) -> None:
        pairs = resolve_index_links(sample_payload.nodes, sample_payload.links)
        assert pairs == [IndexLink(0, 1), IndexLink(0, 2), IndexLink(1, 2), IndexLink(2, 3)]

    def test_drops_self_loops_and_dangling(self) -> None:
        nodes = [GraphNode(id="a"), GraphNode(id="b")]
        links = [
            GraphLink(id=1, source="a", target="a"),
            GraphLink(id=2, source="a", target="zzz"),
            GraphLink(id=3, source="b", target="a"),
        ]
        assert resolve_index_links(nodes, links) == [IndexLink(1, 0)]
