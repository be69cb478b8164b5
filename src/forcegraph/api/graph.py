"""Graph endpoints.

- ``/api/graph``: storage-agnostic payloads (GET default slice, POST query)
- ``/api/explorer``: the live layout, search, selection and drag controls
"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from forcegraph.explorer import GraphExplorer
from forcegraph.layout.runner import ViewportRect
from forcegraph.storage.base import GraphSource, GraphSourceError

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================


class GraphQueryRequest(BaseModel):
    """Free-form query sent to the graph source."""

    query: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)


class ExplorerQueryRequest(BaseModel):
    query: str = ""


class SearchRequest(BaseModel):
    term: str = ""


class SelectRequest(BaseModel):
    """Select a node or link by id. Both empty clears the selection."""

    node_id: str | int | None = None
    link_id: str | int | None = None


class Viewport(BaseModel):
    left: float = 0.0
    top: float = 0.0
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class DragRequest(BaseModel):
    """Pointer drag event.

    ``start`` pins ``node_id``. ``move`` takes canvas coordinates ``x``/``y``,
    or pointer coordinates plus the viewport they were measured in.
    ``end`` releases the pin.
    """

    action: Literal["start", "move", "end"]
    node_id: str | int | None = None
    x: float | None = None
    y: float | None = None
    viewport: Viewport | None = None


# ============================================================================
# Helpers
# ============================================================================


def get_source(request: Request) -> GraphSource:
    """Get graph source from app state."""
    return request.app.state.source


def get_explorer(request: Request) -> GraphExplorer:
    """Get explorer from app state."""
    explorer = getattr(request.app.state, "explorer", None)
    if explorer is None:
        raise HTTPException(status_code=503, detail="Explorer not initialized")
    return explorer


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ============================================================================
# Payload endpoints
# ============================================================================


@router.get("/api/graph")
async def get_graph(request: Request) -> Any:
    """Default graph sample shown when the explorer first opens."""
    source = get_source(request)
    try:
        payload = await source.fetch_default_graph()
    except GraphSourceError as e:
        logger.error(f"Error loading graph: {e}")
        return error_response(str(e) or "Unknown graph source error", 500)
    return payload.to_dict()


@router.post("/api/graph")
async def query_graph(request: Request, body: GraphQueryRequest) -> Any:
    """Execute a user-supplied query and return whatever graph it yields."""
    if not body.query or not body.query.strip():
        return error_response("Missing or invalid 'query' in request body.", 400)

    source = get_source(request)
    try:
        payload = await source.run_graph_query(body.query, body.params)
    except GraphSourceError as e:
        logger.error(f"Error executing graph query: {e}")
        return error_response(str(e) or "Unknown graph source error", 500)
    return payload.to_dict()


# ============================================================================
# Explorer endpoints
# ============================================================================


@router.get("/api/explorer")
async def get_explorer_state(request: Request) -> dict:
    """Current layout snapshot."""
    return get_explorer(request).snapshot()


@router.post("/api/explorer/reload")
async def reload_default_graph(request: Request) -> dict:
    explorer = get_explorer(request)
    await explorer.load_default_graph()
    return explorer.snapshot()


@router.post("/api/explorer/query")
async def run_explorer_query(request: Request, body: ExplorerQueryRequest) -> dict:
    """Run a query; on failure the previous graph stays and ``query_error`` is set."""
    explorer = get_explorer(request)
    await explorer.run_query(body.query)
    return explorer.snapshot()


@router.post("/api/explorer/reset")
async def reset_explorer(request: Request) -> dict:
    explorer = get_explorer(request)
    await explorer.reset()
    return explorer.snapshot()


@router.post("/api/explorer/search")
async def search_explorer(request: Request, body: SearchRequest) -> dict:
    explorer = get_explorer(request)
    explorer.set_search_term(body.term)
    return explorer.snapshot()


@router.post("/api/explorer/select")
async def select_entity(request: Request, body: SelectRequest) -> dict:
    explorer = get_explorer(request)
    if body.node_id is not None:
        if not explorer.select_node(body.node_id):
            raise HTTPException(status_code=404, detail=f"Node not found: {body.node_id}")
    elif body.link_id is not None:
        if not explorer.select_link(body.link_id):
            raise HTTPException(status_code=404, detail=f"Link not found: {body.link_id}")
    else:
        explorer.clear_selection()
    return explorer.snapshot()


@router.post("/api/explorer/drag")
async def drag_node(request: Request, body: DragRequest) -> dict:
    explorer = get_explorer(request)

    if body.action == "start":
        if body.node_id is None:
            raise HTTPException(status_code=400, detail="'node_id' is required to start a drag")
        if not explorer.begin_drag(body.node_id):
            raise HTTPException(status_code=404, detail=f"Node not found: {body.node_id}")
    elif body.action == "move":
        if body.x is None or body.y is None:
            raise HTTPException(status_code=400, detail="'x' and 'y' are required to move")
        if body.viewport is not None:
            rect = ViewportRect(
                left=body.viewport.left,
                top=body.viewport.top,
                width=body.viewport.width,
                height=body.viewport.height,
            )
            explorer.drag_pointer(body.x, body.y, rect)
        else:
            explorer.drag_to(body.x, body.y)
    else:
        explorer.end_drag()

    return explorer.snapshot()


@router.get("/health")
async def health(request: Request) -> dict:
    explorer = getattr(request.app.state, "explorer", None)
    return {
        "status": "healthy",
        "explorer": explorer.status.value if explorer is not None else None,
    }
