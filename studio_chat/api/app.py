"""FastAPI application factory.

Hosts the NiceGUI chat page and a health endpoint. The orchestrator itself
is a separate service reached through ``StudioSettings.api_url``; the
lifespan owns one pooled httpx client that every chat page reuses for it.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_chat import __version__
from studio_chat.config import get_settings

logger = logging.getLogger(__name__)

# Module-level shared client, open only while the app is running
_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient | None:
    """Return the orchestrator client opened by the running app.

    Returns:
        The shared client, or None outside the app lifespan (callers then
        open a client per request).
    """
    return _http_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Open the shared orchestrator client for the lifetime of the app.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    global _http_client
    settings = get_settings()
    logger.info(f"Starting Studio Chat; orchestrator at {settings.api_url}")

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        app.state.http_client = client
        _http_client = client
        try:
            yield
        finally:
            _http_client = None
            logger.info("Shutting down Studio Chat...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Studio Chat",
        description="Streaming chat client for a remote orchestrator.",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "studio-chat"}

    return application


app = create_app()
