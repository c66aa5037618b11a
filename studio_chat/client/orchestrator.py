"""HTTP client for the orchestrator chat endpoint.

Both call styles POST the same body. The streaming call yields tokens as
they arrive; the non-streaming call returns one normalized transcript entry.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing, asynccontextmanager

import httpx

from studio_chat.client.errors import (
    OrchestratorConnectionError,
    OrchestratorStatusError,
    UnreadableBodyError,
)
from studio_chat.client.response import normalize_response
from studio_chat.client.tokens import iter_tokens
from studio_chat.config import StudioSettings
from studio_chat.models.schemas import OrchestratorRequest, TranscriptEntry

logger = logging.getLogger(__name__)

STREAM_ACCEPT = "text/event-stream, text/plain;q=0.9"


class OrchestratorClient:
    """Sends prompts to the configured orchestrator endpoint.

    Args:
        settings: Endpoint and model settings.
        http_client: Optional shared client. When omitted, a client is
            created and closed for every request.
    """

    def __init__(
        self,
        settings: StudioSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client

    @property
    def url(self) -> str:
        return self._settings.api_url

    def build_request(self, prompt: str, stream: bool) -> dict:
        """Request body for ``prompt``, without unset optional fields."""
        request = OrchestratorRequest(
            prompt=prompt,
            stream=stream,
            user_alias=self._settings.user_alias,
            model=self._settings.llm_model,
            temperature=self._settings.llm_temperature,
            max_tokens=self._settings.llm_max_tokens,
            persona=self._settings.orchestrator_persona,
        )
        return request.model_dump(exclude_none=True)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self._settings.request_timeout) as client:
            yield client

    async def send(self, prompt: str) -> TranscriptEntry:
        """Send a prompt and wait for the full reply.

        Args:
            prompt: The user's message.

        Returns:
            Agent TranscriptEntry with any reasoning layers attached.

        Raises:
            OrchestratorStatusError: Non-success HTTP status.
            UnreadableBodyError: Body is not a valid reply document.
            OrchestratorConnectionError: Transport failure.
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    self.url, json=self.build_request(prompt, stream=False)
                )
        except httpx.HTTPError as e:
            logger.error(f"Request to {self.url} failed: {e}")
            raise OrchestratorConnectionError(str(e), self.url) from e

        if not response.is_success:
            logger.error(f"Orchestrator returned HTTP {response.status_code}")
            raise OrchestratorStatusError(response.status_code, self.url)

        try:
            return normalize_response(response.json())
        except ValueError as e:
            # JSONDecodeError, UnicodeDecodeError and ValidationError all land here
            logger.error(f"Unreadable reply from {self.url}: {e}")
            raise UnreadableBodyError("Response body is not a valid reply", self.url) from e

    async def stream(
        self,
        prompt: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncGenerator[str]:
        """Send a prompt and yield reply tokens as they arrive.

        The response is closed when the generator finishes, fails, or is
        closed early by the caller.

        Args:
            prompt: The user's message.
            cancel: Optional event that stops reading without error.

        Yields:
            Tokens in arrival order.

        Raises:
            OrchestratorStatusError: Non-success HTTP status.
            UnreadableBodyError: Body could not be read.
            OrchestratorConnectionError: Transport failure, before or mid-stream.
        """
        try:
            async with (
                self._client() as client,
                client.stream(
                    "POST",
                    self.url,
                    json=self.build_request(prompt, stream=True),
                    headers={"Accept": STREAM_ACCEPT},
                ) as response,
            ):
                if not response.is_success:
                    logger.error(f"Orchestrator returned HTTP {response.status_code}")
                    raise OrchestratorStatusError(response.status_code, self.url)

                tokens = iter_tokens(
                    response.aiter_bytes(),
                    response.headers.get("content-type"),
                    cancel=cancel,
                    encoding=response.encoding,
                )
                async with aclosing(tokens):
                    async for token in tokens:
                        yield token
        except httpx.StreamError as e:
            logger.error(f"Response body from {self.url} is not readable: {e}")
            raise UnreadableBodyError("Response body is not readable", self.url) from e
        except httpx.HTTPError as e:
            logger.error(f"Stream from {self.url} failed: {e}")
            raise OrchestratorConnectionError(str(e), self.url) from e
