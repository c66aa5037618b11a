"""Pytest fixtures and shared test configuration.

Fixtures:
    - settings: StudioSettings pointing at a fake orchestrator
    - data_dir: Temporary STUDIO_DATA_DIR for persistence tests
    - mock_http: Factory for an httpx.AsyncClient backed by MockTransport
    - async_client: HTTPX client for the FastAPI app
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from studio_chat.api import create_app
from studio_chat.config import StudioSettings

ORCHESTRATOR_URL = "http://orchestrator.test/api/v1/chat"


@pytest.fixture
def settings() -> StudioSettings:
    """Settings for a fake orchestrator endpoint."""
    return StudioSettings(api_url=ORCHESTRATOR_URL)


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point persistence at a temporary directory."""
    monkeypatch.setenv("STUDIO_DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for the FastAPI app.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
