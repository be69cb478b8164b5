"""Explorer session: one user's view of a live graph layout.

Composes a graph source, the simulation runner, search and selection:

- Data: default fetch and free-form queries, with loading / error state
- Simulation: reseeded on every new payload, ticking independently of fetches
- View: search matches, exclusive selection, focus dimming, label colors
"""

import logging
from enum import Enum
from typing import Any

from forcegraph.explorer.selection import (
    LinkSelection,
    NodeSelection,
    Selection,
    is_link_dimmed,
    is_node_dimmed,
    is_node_selected,
    reconcile_selection,
)
from forcegraph.layout.colors import build_label_color_map, color_for_node
from forcegraph.layout.config import LayoutConfig
from forcegraph.layout.links import create_node_map, resolve_links
from forcegraph.layout.runner import SimulationRunner, ViewportRect, pointer_to_canvas
from forcegraph.layout.search import (
    find_search_matches,
    node_matches_search_term,
    normalize_search_term,
)
from forcegraph.models import GraphNode, GraphPayload, NodeId, ResolvedLink, SimNode, id_key
from forcegraph.storage.base import GraphSource, GraphSourceError

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a Cypher query to run."


class ExplorerStatus(str, Enum):
    """What the explorer can currently show."""

    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"  # Valid payload without nodes
    ERROR = "error"  # Default graph failed to load


class GraphExplorer:
    """Holds payload, simulation, search and selection for one view."""

    def __init__(
        self,
        source: GraphSource,
        config: LayoutConfig | None = None,
        runner: SimulationRunner | None = None,
    ) -> None:
        self.source = source
        self.config = config or LayoutConfig()
        self.runner = runner or SimulationRunner(self.config)

        self.payload: GraphPayload | None = None
        self.label_colors: dict[str, str] = {}
        self.loading = False
        self.error: str | None = None
        self.query = ""
        self.query_error: str | None = None
        self.search_term = ""
        self.selection: Selection = None

        # Only the most recent fetch may replace the payload
        self._request_seq = 0

    @property
    def status(self) -> ExplorerStatus:
        if self.loading:
            return ExplorerStatus.LOADING
        if self.error:
            return ExplorerStatus.ERROR
        if self.payload is None or self.payload.is_empty:
            return ExplorerStatus.EMPTY
        return ExplorerStatus.READY

    @property
    def nodes(self) -> list[SimNode]:
        """Latest published node positions."""
        return self.runner.nodes

    # ==========================================================================
    # Data
    # ==========================================================================

    async def load_default_graph(self) -> bool:
        """Fetch the default graph. Returns True if it was applied.

        On failure the explorer has no graph to simulate until a later
        fetch succeeds.
        """
        request = self._begin_request()
        self.error = None
        self.query_error = None

        try:
            payload = await self.source.fetch_default_graph()
        except GraphSourceError as e:
            if self._is_latest(request):
                logger.error(f"Failed to load default graph: {e}")
                self.error = str(e) or "Unknown error"
                self._apply_payload(None)
            return False
        except Exception as e:
            if self._is_latest(request):
                logger.exception(f"Unexpected error loading default graph: {e}")
                self.error = str(e) or "Unknown error"
                self._apply_payload(None)
            return False
        finally:
            if self._is_latest(request):
                self.loading = False

        if not self._is_latest(request):
            return False
        self._apply_payload(payload)
        return True

    async def run_query(self, query: str | None = None) -> bool:
        """Run a free-form query. Returns True if its payload was applied.

        A failed query keeps the current graph and simulation running.
        """
        if query is not None:
            self.query = query
        trimmed = self.query.strip()
        if not trimmed:
            self.query_error = EMPTY_QUERY_MESSAGE
            return False

        self.selection = None
        request = self._begin_request()
        self.query_error = None

        try:
            payload = await self.source.run_graph_query(trimmed)
        except GraphSourceError as e:
            if self._is_latest(request):
                logger.warning(f"Graph query failed: {e}")
                self.query_error = str(e) or "Unknown error while running query"
            return False
        except Exception as e:
            if self._is_latest(request):
                logger.exception(f"Unexpected error running graph query: {e}")
                self.query_error = str(e) or "Unknown error while running query"
            return False
        finally:
            if self._is_latest(request):
                self.loading = False

        if not self._is_latest(request):
            return False
        self.error = None
        self._apply_payload(payload)
        return True

    async def reset(self) -> bool:
        """Clear query and selection and reload the default graph."""
        self.selection = None
        self.query = ""
        return await self.load_default_graph()

    def _begin_request(self) -> int:
        self._request_seq += 1
        self.loading = True
        return self._request_seq

    def _is_latest(self, request: int) -> bool:
        return request == self._request_seq

    def _apply_payload(self, payload: GraphPayload | None) -> None:
        self.payload = payload
        self.label_colors = build_label_color_map(payload)
        self.runner.load(payload)
        self.selection = self._reconcile()
        if payload is not None:
            logger.info(f"Payload applied: {len(payload.nodes)} nodes, {len(payload.links)} links")

    # ==========================================================================
    # Search and selection
    # ==========================================================================

    @property
    def normalized_search(self) -> str:
        return normalize_search_term(self.search_term)

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    def search_matches(self) -> list[GraphNode]:
        if self.payload is None:
            return []
        return find_search_matches(self.payload.nodes, self.search_term)

    def resolved_links(self) -> list[ResolvedLink]:
        return resolve_links(self.payload, create_node_map(self.nodes))

    def select_node(self, node_id: NodeId) -> bool:
        node = create_node_map(self.nodes).get(id_key(node_id))
        if node is None:
            return False
        self.selection = NodeSelection(node)
        return True

    def select_link(self, link_id: NodeId) -> bool:
        key = id_key(link_id)
        for resolved in self.resolved_links():
            if id_key(resolved.link.id) == key:
                self.selection = LinkSelection(resolved.link, resolved.source, resolved.target)
                return True
        return False

    def clear_selection(self) -> None:
        self.selection = None

    def _reconcile(self, resolved: list[ResolvedLink] | None = None) -> Selection:
        if self.selection is None:
            return None
        node_map = create_node_map(self.nodes)
        if resolved is None:
            resolved = resolve_links(self.payload, node_map)
        return reconcile_selection(self.selection, node_map, resolved)

    # ==========================================================================
    # Dragging
    # ==========================================================================

    def begin_drag(self, node_id: NodeId) -> bool:
        """Pin a node to the pointer and select it."""
        if not self.runner.begin_drag(node_id):
            return False
        self.select_node(node_id)
        return True

    def drag_to(self, x: float, y: float) -> None:
        """Move the dragged node to canvas coordinates."""
        self.runner.drag_to(x, y)

    def drag_pointer(self, client_x: float, client_y: float, rect: ViewportRect) -> None:
        """Move the dragged node to a pointer position inside a viewport."""
        x, y = pointer_to_canvas(client_x, client_y, rect, self.config)
        self.runner.drag_to(x, y)

    def end_drag(self) -> None:
        self.runner.end_drag()

    # ==========================================================================
    # View
    # ==========================================================================

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready description of everything a renderer needs."""
        nodes = self.nodes
        node_map = create_node_map(nodes)
        resolved = resolve_links(self.payload, node_map)
        self.selection = self._reconcile(resolved)
        search = self.normalized_search

        node_views = []
        for node in nodes:
            data = node.to_dict()
            data.update({
                "key": id_key(node.id),
                "name": node.display_name,
                "color": color_for_node(node, self.label_colors),
                "selected": is_node_selected(node, self.selection),
                "search_match": node_matches_search_term(node, search),
                "dimmed": is_node_dimmed(node, self.selection, search),
            })
            node_views.append(data)

        link_views = []
        for item in resolved:
            data = item.to_dict()
            data.update({
                "selected": isinstance(self.selection, LinkSelection)
                and id_key(self.selection.link.id) == id_key(item.link.id),
                "dimmed": is_link_dimmed(item, self.selection, search),
            })
            link_views.append(data)

        payload = self.payload
        simulation = self.runner.simulation
        return {
            "status": self.status.value,
            "error": self.error,
            "query": self.query,
            "query_error": self.query_error,
            "search_term": self.search_term,
            "tick": simulation.tick_count if simulation else 0,
            "dragged_id": self.runner.dragged_id,
            "counts": {
                "nodes": len(payload.nodes) if payload else 0,
                "links": len(payload.links) if payload else 0,
                "resolved_links": len(resolved),
            },
            "canvas": {"width": self.config.width, "height": self.config.height},
            "nodes": node_views,
            "links": link_views,
            "label_colors": dict(self.label_colors),
            "selection": self.selection.to_dict() if self.selection else None,
            "search_matches": [node.to_dict() for node in self.search_matches()],
        }

    async def close(self) -> None:
        await self.runner.stop()
