"""FastAPI application for the graph explorer.

Serves graph payloads from the configured source and a live,
server-side force layout that clients poll and steer.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forcegraph.api.graph import router as graph_router
from forcegraph.config import settings
from forcegraph.explorer import GraphExplorer
from forcegraph.layout.config import LayoutConfig
from forcegraph.storage.neo4j_client import Neo4jClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    # Startup
    logger.info("Starting forcegraph API...")

    # A source injected before startup (e.g. in tests) takes precedence
    source = getattr(app.state, "source", None)
    owns_source = source is None
    if owns_source:
        source = Neo4jClient()
        logger.info(f"Using Neo4j graph source at {source.uri}")
    app.state.source = source

    explorer = GraphExplorer(source, LayoutConfig.from_settings(settings))
    app.state.explorer = explorer

    if settings.explorer_autoload:
        logger.info("Loading default graph...")
        await explorer.load_default_graph()
        logger.info(f"Explorer status: {explorer.status.value}")

    yield

    # Shutdown
    logger.info("Shutting down forcegraph API...")
    await explorer.close()
    app.state.explorer = None
    if owns_source:
        await source.close()
        app.state.source = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="forcegraph",
        description="Interactive force-directed layout for ad-hoc graph queries",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graph_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "forcegraph.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
