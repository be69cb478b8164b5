"""Unit tests for graph payload extraction from Neo4j result values."""

from datetime import date

from forcegraph.storage.extraction import (
    PayloadBuilder,
    entity_id,
    is_node,
    is_path,
    is_relationship,
    payload_from_records,
    plain_value,
)


class FakeNode:
    """Stands in for neo4j.graph.Node."""

    def __init__(self, element_id: str, labels=(), **properties) -> None:
        self.element_id = element_id
        self.labels = frozenset(labels)
        self._properties = properties

    def items(self):
        return self._properties.items()


class FakeRelationship:
    """Stands in for neo4j.graph.Relationship."""

    def __init__(self, element_id: str, start: FakeNode, end: FakeNode, type: str, **properties) -> None:
        self.element_id = element_id
        self.start_node = start
        self.end_node = end
        self.type = type
        self._properties = properties

    @property
    def nodes(self):
        return self.start_node, self.end_node

    def items(self):
        return self._properties.items()


class FakePath:
    """Stands in for neo4j.graph.Path."""

    def __init__(self, nodes, relationships) -> None:
        self.nodes = tuple(nodes)
        self.relationships = tuple(relationships)


class LegacyEntity:
    """Entity without an element id."""

    id = 42


class TestDetection:
    """Tests for duck-typed value detection."""

    def test_kinds(self) -> None:
        a, b = FakeNode("n:1"), FakeNode("n:2")
        rel = FakeRelationship("r:1", a, b, "KNOWS")
        path = FakePath([a, b], [rel])

        assert is_node(a) and not is_relationship(a) and not is_path(a)
        assert is_relationship(rel) and not is_node(rel) and not is_path(rel)
        assert is_path(path) and not is_node(path)

    def test_entity_id(self) -> None:
        assert entity_id(FakeNode("4:abc:0")) == "4:abc:0"
        assert entity_id(LegacyEntity()) == "42"

    def test_plain_value(self) -> None:
        assert plain_value(date(2024, 1, 2)) == "2024-01-02"
        assert plain_value((1, "a", None)) == [1, "a", None]
        assert plain_value({"k": date(2024, 1, 2)}) == {"k": "2024-01-02"}
        assert plain_value(b"raw") == "b'raw'"


class TestPayloadBuilder:
    """Tests for accumulating payloads."""

    def test_node_relationship_node_record(self) -> None:
        alice = FakeNode("n:1", ["Person", "Admin"], name="Alice")
        acme = FakeNode("n:2", ["Company"], name="Acme")
        works = FakeRelationship("r:1", alice, acme, "WORKS_AT", since=2020)

        payload = payload_from_records([{"n": alice, "r": works, "m": acme}])

        assert [n.id for n in payload.nodes] == ["n:1", "n:2"]
        assert payload.nodes[0].label == "Admin"
        assert payload.nodes[0].properties == {"name": "Alice"}
        assert len(payload.links) == 1
        link = payload.links[0]
        assert (link.id, link.source, link.target, link.type) == ("r:1", "n:1", "n:2", "WORKS_AT")
        assert link.properties == {"since": 2020}

    def test_relationship_only_adds_placeholders(self) -> None:
        a, b = FakeNode("n:1", ["X"]), FakeNode("n:2", ["Y"])
        payload = payload_from_records([{"r": FakeRelationship("r:1", a, b, "T")}])

        assert [n.id for n in payload.nodes] == ["n:1", "n:2"]
        assert all(n.label is None and n.properties == {} for n in payload.nodes)

    def test_placeholder_upgraded_by_full_node(self) -> None:
        """A full node seen later replaces the id-only placeholder."""
        a, b = FakeNode("n:1", ["X"], name="a"), FakeNode("n:2", ["Y"])
        builder = PayloadBuilder()
        builder.add_relationship(FakeRelationship("r:1", a, b, "T"))
        builder.add_node(a)

        payload = builder.build()

        assert payload.nodes[0].label == "X"
        assert payload.nodes[0].properties == {"name": "a"}
        assert len(payload.nodes) == 2

    def test_path_and_collections(self) -> None:
        a, b, c = FakeNode("1", ["A"]), FakeNode("2", ["B"]), FakeNode("3", ["C"])
        ab = FakeRelationship("ab", a, b, "NEXT")
        bc = FakeRelationship("bc", b, c, "NEXT")

        payload = payload_from_records([
            {"p": FakePath([a, b, c], [ab, bc]), "extra": [a, {"nested": c}], "count": 3, "name": "x"},
        ])

        assert [n.id for n in payload.nodes] == ["1", "2", "3"]
        assert [link.id for link in payload.links] == ["ab", "bc"]

    def test_duplicates_are_merged(self) -> None:
        a, b = FakeNode("1", ["A"]), FakeNode("2", ["B"])
        rel = FakeRelationship("r", a, b, "T")

        payload = payload_from_records([{"n": a, "r": rel}, {"n": a, "r": rel}])

        assert len(payload.nodes) == 2
        assert len(payload.links) == 1

    def test_scalars_ignored(self) -> None:
        payload = payload_from_records([{"count": 1, "name": "x", "missing": None}])
        assert payload.is_empty
        assert payload.links == []

    def test_unlabeled_node(self) -> None:
        builder = PayloadBuilder()
        builder.add_node(FakeNode("n"))
        assert builder.build().nodes[0].label is None
