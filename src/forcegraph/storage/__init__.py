"""Graph sources: query executors that produce graph payloads."""

from forcegraph.storage.base import GraphQueryError, GraphSource, GraphSourceError
from forcegraph.storage.http_source import HttpGraphSource
from forcegraph.storage.neo4j_client import Neo4jClient, close_client, get_client

__all__ = [
    "GraphSource",
    "GraphSourceError",
    "GraphQueryError",
    "HttpGraphSource",
    "Neo4jClient",
    "get_client",
    "close_client",
]
