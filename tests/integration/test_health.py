"""Integration tests for the FastAPI host."""

from pathlib import Path

from httpx import AsyncClient

from studio_chat.api.app import create_app, get_http_client, lifespan
from studio_chat.config import StudioSettings


class TestHealth:
    """Tests for GET /health."""

    async def test_health_reports_healthy(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "studio-chat"}

    async def test_health_rejects_post(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/health")

        assert response.status_code == 405


class TestLifespan:
    """Tests for the shared orchestrator client owned by the app lifespan."""

    async def test_shared_client_open_while_running(self, data_dir: Path) -> None:
        application = create_app()

        async with lifespan(application):
            client = get_http_client()
            assert client is application.state.http_client
            assert client.is_closed is False
            assert client.timeout.read == StudioSettings().request_timeout

        assert client.is_closed is True
        assert get_http_client() is None

    def test_no_shared_client_outside_lifespan(self) -> None:
        assert get_http_client() is None
