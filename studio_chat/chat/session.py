"""Chat session: validates input and routes it to the orchestrator."""

import asyncio
import logging
from collections.abc import Callable

from studio_chat.chat.accumulator import MessageAccumulator
from studio_chat.chat.transcript import Transcript
from studio_chat.client.errors import EmptyPromptError, StreamBusyError, connection_hint
from studio_chat.client.orchestrator import OrchestratorClient
from studio_chat.config import StudioSettings
from studio_chat.models.schemas import Role, TranscriptEntry

logger = logging.getLogger(__name__)


class ChatSession:
    """Manages chat state for one user.

    Args:
        settings: Active settings; ``stream`` selects the call style.
        transcript: History the replies are appended to.
        client: Orchestrator client (built from settings when omitted).
        on_change: Called whenever the transcript or loading state changes.
    """

    def __init__(
        self,
        settings: StudioSettings,
        transcript: Transcript | None = None,
        client: OrchestratorClient | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.settings = settings
        self.transcript = transcript if transcript is not None else Transcript()
        self.client = client or OrchestratorClient(settings)
        self.accumulator = MessageAccumulator(
            self.transcript,
            on_change=on_change,
            failure_message=connection_hint(settings.api_url),
        )
        self._cancel: asyncio.Event | None = None

    @property
    def is_busy(self) -> bool:
        return not self.accumulator.is_idle

    async def submit(self, text: str) -> TranscriptEntry | None:
        """Send a user message and fold the reply into the transcript.

        Args:
            text: Raw input from the UI.

        Returns:
            The agent entry (reply or error), or None if the stream was empty.

        Raises:
            EmptyPromptError: If the input is empty or whitespace-only.
            StreamBusyError: If a reply is still in progress.
        """
        prompt = text.strip()
        if not prompt:
            raise EmptyPromptError()
        if self.is_busy:
            raise StreamBusyError()

        self.transcript.append(TranscriptEntry(role=Role.USER, content=prompt))
        logger.info(f"Submitting message ({'stream' if self.settings.stream else 'single'})")

        if not self.settings.stream:
            return await self.accumulator.resolve(lambda: self.client.send(prompt))

        self._cancel = asyncio.Event()
        try:
            return await self.accumulator.consume(self.client.stream(prompt, self._cancel))
        finally:
            self._cancel = None

    def cancel(self) -> bool:
        """Stop reading the active stream; returns False if none is active."""
        if self._cancel is None or self._cancel.is_set():
            return False
        logger.info("Cancelling active stream")
        self._cancel.set()
        return True

    def toggle_pin(self, entry_id: str) -> TranscriptEntry:
        return self.transcript.toggle_pin(entry_id)

    def new_chat(self) -> None:
        """Clear the history; refused while a reply is in progress."""
        if self.is_busy:
            raise StreamBusyError()
        self.transcript.clear()
