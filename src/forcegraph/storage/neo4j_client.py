"""Neo4j client serving graph payloads to the explorer."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession
from neo4j.exceptions import ClientError, DriverError, Neo4jError, ServiceUnavailable

from forcegraph.config import settings
from forcegraph.models import GraphPayload
from forcegraph.storage.base import GraphQueryError, GraphSourceError
from forcegraph.storage.extraction import payload_from_records

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_QUERY = "MATCH (n)-[r]->(m) RETURN n, r, m LIMIT $limit"


class Neo4jClient:
    """Async Neo4j client implementing the GraphSource protocol."""

    def __init__(
        self,
        uri: str | None = None,
        user: str | None = None,
        password: str | None = None,
        database: str | None = None,
        default_limit: int | None = None,
    ) -> None:
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self.database = database or settings.neo4j_database
        self.default_limit = default_limit or settings.default_graph_limit
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        """Establish connection to Neo4j."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )
            # Verify connectivity
            try:
                await self._driver.verify_connectivity()
                logger.info(f"Connected to Neo4j at {self.uri}")
            except ServiceUnavailable as e:
                logger.error(f"Failed to connect to Neo4j: {e}")
                await self._driver.close()
                self._driver = None
                raise

    async def close(self) -> None:
        """Close the database connection."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Disconnected from Neo4j")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session."""
        if self._driver is None:
            await self.connect()
        assert self._driver is not None
        async with self._driver.session(database=self.database) as session:
            yield session

    async def execute_query(
        self,
        query: str,
        parameters: dict[str, Any] | None = None,
        **params: Any,
    ) -> list[dict[str, Any]]:
        """Execute a raw Cypher query."""
        merged = {**(parameters or {}), **params}
        results: list[dict[str, Any]] = []
        async with self.session() as session:
            result = await session.run(query, merged)
            async for record in result:
                results.append(dict(record))
        return results

    # ==========================================================================
    # GraphSource operations
    # ==========================================================================

    async def fetch_default_graph(self) -> GraphPayload:
        """Fetch a fixed slice of the graph for the initial view."""
        try:
            records = await self.execute_query(DEFAULT_GRAPH_QUERY, limit=self.default_limit)
        except (Neo4jError, DriverError, OSError) as e:
            logger.error(f"Error loading Neo4j graph: {e}")
            raise GraphSourceError(str(e) or "Unknown Neo4j error") from e

        payload = payload_from_records(records)
        logger.info(f"Default graph: {len(payload.nodes)} nodes, {len(payload.links)} links")
        return payload

    async def run_graph_query(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> GraphPayload:
        """Execute user Cypher and extract whatever nodes/relationships it returns."""
        if not isinstance(query, str) or not query.strip():
            raise GraphQueryError("Missing or invalid 'query' in request body.")

        try:
            records = await self.execute_query(query.strip(), params or {})
        except ClientError as e:
            logger.warning(f"Rejected graph query: {e}")
            raise GraphQueryError(e.message or str(e)) from e
        except (Neo4jError, DriverError, OSError) as e:
            logger.error(f"Error executing Neo4j graph query: {e}")
            raise GraphSourceError(str(e) or "Unknown Neo4j error") from e

        payload = payload_from_records(records)
        logger.info(f"Query graph: {len(payload.nodes)} nodes, {len(payload.links)} links")
        return payload


# Global client instance
_client: Neo4jClient | None = None


async def get_client() -> Neo4jClient:
    """Get or create the global Neo4j client."""
    global _client
    if _client is None:
        _client = Neo4jClient()
        await _client.connect()
    return _client


async def close_client() -> None:
    """Close the global Neo4j client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
