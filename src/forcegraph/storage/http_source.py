"""Graph source backed by a remote ``/api/graph`` endpoint."""

import logging
from typing import Any

import httpx

from forcegraph.config import settings
from forcegraph.models import GraphPayload
from forcegraph.storage.base import GraphQueryError, GraphSourceError

logger = logging.getLogger(__name__)

GRAPH_PATH = "/api/graph"


class HttpGraphSource:
    """Fetches payloads over HTTP: GET for the default graph, POST for queries."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.graph_api_url).rstrip("/")
        self.timeout = timeout or settings.graph_api_timeout
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def close(self) -> None:
        await self.client.aclose()

    async def fetch_default_graph(self) -> GraphPayload:
        """GET the default graph."""
        try:
            response = await self.client.get(GRAPH_PATH)
        except httpx.HTTPError as e:
            raise GraphSourceError(str(e) or type(e).__name__) from e
        return self._parse(response, GraphSourceError)

    async def run_graph_query(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> GraphPayload:
        """POST a query and parse the returned payload."""
        trimmed = (query or "").strip()
        if not trimmed:
            raise GraphQueryError("Missing or invalid 'query' in request body.")

        body: dict[str, Any] = {"query": trimmed}
        if params:
            body["params"] = params

        try:
            response = await self.client.post(GRAPH_PATH, json=body)
        except httpx.HTTPError as e:
            raise GraphSourceError(str(e) or type(e).__name__) from e
        return self._parse(response, GraphQueryError)

    @staticmethod
    def _parse(
        response: httpx.Response,
        error_cls: type[GraphSourceError],
    ) -> GraphPayload:
        if response.is_error:
            message = f"Request failed with status {response.status_code}"
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get("error"):
                message = str(data["error"])
            logger.error(f"Graph endpoint error: {message}")
            raise error_cls(message)

        try:
            return GraphPayload.from_dict(response.json())
        except ValueError as e:
            raise GraphSourceError(f"Malformed graph payload: {e}") from e
