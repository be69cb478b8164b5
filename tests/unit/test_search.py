"""Unit tests for search matching and label colors."""

import pytest

from forcegraph.layout import (
    CHART_COLORS,
    build_label_color_map,
    color_for_node,
    find_search_matches,
    node_matches_search_term,
    normalize_search_term,
)
from forcegraph.models import GraphNode, GraphPayload


class TestNormalizeSearchTerm:
    """Tests for normalize_search_term."""

    def test_trims_and_lowercases(self) -> None:
        assert normalize_search_term("  AliCE ") == "alice"

    def test_none(self) -> None:
        assert normalize_search_term(None) == ""


class TestNodeMatchesSearchTerm:
    """Tests for node_matches_search_term."""

    def test_matches_property_value(self) -> None:
        """'alice' matches {name: 'Alice Smith'} but not {name: 'Bob'}."""
        alice = GraphNode(id=1, properties={"name": "Alice Smith"})
        bob = GraphNode(id=2, properties={"name": "Bob"})

        assert node_matches_search_term(alice, "alice")
        assert not node_matches_search_term(bob, "alice")

    def test_empty_term_matches_nothing(self) -> None:
        node = GraphNode(id="anything", label="Person", properties={"name": "Alice"})
        assert not node_matches_search_term(node, "")

    def test_matches_id(self) -> None:
        assert node_matches_search_term(GraphNode(id=12345), "234")
        assert node_matches_search_term(GraphNode(id="User-42"), "user-4")

    def test_matches_label(self) -> None:
        assert node_matches_search_term(GraphNode(id=1, label="Company"), "comp")

    def test_matches_key_value_pair(self) -> None:
        """Property keys and values are searched together as 'key value'."""
        node = GraphNode(id=1, properties={"age": 34})
        assert node_matches_search_term(node, "age 34")
        assert node_matches_search_term(node, "age")
        assert not node_matches_search_term(node, "age 35")

    def test_non_string_values(self) -> None:
        node = GraphNode(id=1, properties={"active": True, "tags": ["x", "y"]})
        assert node_matches_search_term(node, "active true")
        assert node_matches_search_term(node, "'x'")

    def test_unlabeled_node(self) -> None:
        assert not node_matches_search_term(GraphNode(id=1), "person")


class TestFindSearchMatches:
    """Tests for find_search_matches."""

    def test_raw_term_is_normalized(self, sample_payload: GraphPayload) -> None:
        matches = find_search_matches(sample_payload.nodes, "  PERSON ")
        assert [n.id for n in matches] == [1, "2"]

    def test_blank_term(self, sample_payload: GraphPayload) -> None:
        assert find_search_matches(sample_payload.nodes, "   ") == []


class TestLabelColorMap:
    """Tests for build_label_color_map."""

    def test_lexicographic_order(self) -> None:
        """Labels B, A, C get palette colors in order A, B, C."""
        nodes = [GraphNode(id=1, label="B"), GraphNode(id=2, label="A"), GraphNode(id=3, label="C")]
        color_map = build_label_color_map(nodes)

        assert list(color_map) == ["A", "B", "C"]
        assert color_map["A"] == CHART_COLORS[0]
        assert color_map["B"] == CHART_COLORS[1]
        assert color_map["C"] == CHART_COLORS[2]

    def test_independent_of_node_order(self) -> None:
        first = build_label_color_map([GraphNode(id=1, label="x"), GraphNode(id=2, label="y")])
        second = build_label_color_map([GraphNode(id=2, label="y"), GraphNode(id=1, label="x")])
        assert first == second

    def test_missing_labels_excluded(self) -> None:
        nodes = [GraphNode(id=1), GraphNode(id=2, label=""), GraphNode(id=3, label="Only")]
        assert build_label_color_map(nodes) == {"Only": CHART_COLORS[0]}

    def test_palette_is_cyclic(self) -> None:
        labels = [f"L{i}" for i in range(len(CHART_COLORS) + 2)]
        color_map = build_label_color_map([GraphNode(id=i, label=label) for i, label in enumerate(labels)])
        assert color_map["L5"] == CHART_COLORS[0]
        assert color_map["L6"] == CHART_COLORS[1]

    def test_payload_and_none(self, sample_payload: GraphPayload) -> None:
        assert build_label_color_map(None) == {}
        assert set(build_label_color_map(sample_payload)) == {"Company", "Person", "Topic"}

    @pytest.mark.parametrize(
        ("label", "expected"),
        [("A", "red"), (None, "#ffffff"), ("Unknown", "#ffffff")],
    )
    def test_color_for_node(self, label, expected) -> None:
        assert color_for_node(GraphNode(id=1, label=label), {"A": "red"}) == expected
