"""Pytest configuration and fixtures."""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from forcegraph.config import Settings
from forcegraph.layout import LayoutConfig
from forcegraph.models import GraphLink, GraphNode, GraphPayload
from forcegraph.storage.base import GraphSource


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        neo4j_uri="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="test_password",
        tick_interval=0.0,
        explorer_autoload=False,
    )


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Default canvas and physics constants."""
    return LayoutConfig()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible jitter."""
    return random.Random(1234)


@pytest.fixture
def sample_payload() -> GraphPayload:
    """Small social graph with mixed id types and one dangling link."""
    return GraphPayload(
        nodes=[
            GraphNode(id=1, label="Person", properties={"name": "Alice Smith", "age": 34}),
            GraphNode(id="2", label="Person", properties={"name": "Bob"}),
            GraphNode(id=3, label="Company", properties={"name": "Acme"}),
            GraphNode(id="topic-graphs", label="Topic"),
            GraphNode(id=5),
        ],
        links=[
            GraphLink(id="r1", source="1", target=2, type="KNOWS"),
            GraphLink(id="r2", source=1, target=3, type="WORKS_AT", properties={"since": 2020}),
            GraphLink(id="r3", source=2, target="3", type="WORKS_AT"),
            GraphLink(id="r4", source=3, target="topic-graphs", type="ABOUT"),
            GraphLink(id="r5", source=1, target="missing", type="KNOWS"),
        ],
    )


@pytest.fixture
def other_payload() -> GraphPayload:
    """A second payload sharing no ids with sample_payload."""
    return GraphPayload(
        nodes=[
            GraphNode(id="a", label="Service"),
            GraphNode(id="b", label="Database"),
        ],
        links=[GraphLink(id="e1", source="a", target="b", type="READS")],
    )


@pytest.fixture
def mock_source(sample_payload: GraphPayload) -> GraphSource:
    """Mock graph source returning the sample payload."""
    source = MagicMock(spec=GraphSource)
    source.fetch_default_graph = AsyncMock(return_value=sample_payload)
    source.run_graph_query = AsyncMock(return_value=sample_payload)
    return source
