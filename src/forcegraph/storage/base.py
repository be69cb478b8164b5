"""Graph source protocol and errors shared by all query executors."""

from typing import Any, Protocol, runtime_checkable

from forcegraph.models import GraphPayload


class GraphSourceError(Exception):
    """A payload could not be fetched. The message is shown to the user."""


class GraphQueryError(GraphSourceError):
    """A user-supplied query was missing, invalid or rejected."""


@runtime_checkable
class GraphSource(Protocol):
    """Anything that can produce graph payloads.

    Both acquisition modes yield the same payload shape; query language and
    backend are the source's business.
    """

    async def fetch_default_graph(self) -> GraphPayload:
        """Fetch the fixed default subgraph."""
        ...

    async def run_graph_query(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> GraphPayload:
        """Execute a free-form query and extract a payload from its result."""
        ...
