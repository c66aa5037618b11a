"""Folds a token stream into a growing agent transcript entry.

The accumulator owns the single in-flight request guard. It moves through
IDLE -> AWAITING_FIRST_TOKEN -> STREAMING -> IDLE and notifies the UI on
every transition and every applied token.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import aclosing

from studio_chat.chat.transcript import Transcript
from studio_chat.client.errors import OrchestratorError, StreamBusyError
from studio_chat.models.schemas import Role, StreamState, TranscriptEntry

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Connection Error: the orchestrator reply could not be read."


class MessageAccumulator:
    """Applies streamed tokens to the transcript.

    Args:
        transcript: Transcript the reply is written to.
        on_change: Called on every state change and applied token.
        failure_message: Error entry text for failures outside the client's
            own error types.

    Attributes:
        is_loading: True until the first token (or the reply) arrives.
        is_streaming: True while a request is in flight.
    """

    def __init__(
        self,
        transcript: Transcript,
        on_change: Callable[[], None] | None = None,
        failure_message: str = FAILURE_MESSAGE,
    ) -> None:
        self._transcript = transcript
        self._on_change = on_change
        self._failure_message = failure_message
        self._state = StreamState.IDLE
        self._active: TranscriptEntry | None = None
        self.is_loading = False
        self.is_streaming = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is StreamState.IDLE

    @property
    def active_entry(self) -> TranscriptEntry | None:
        """Entry currently receiving tokens, if any."""
        return self._active

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def start(self) -> None:
        """Begin a request.

        Raises:
            StreamBusyError: If another request is still in flight.
        """
        if not self.is_idle:
            raise StreamBusyError()
        self._state = StreamState.AWAITING_FIRST_TOKEN
        self.is_loading = True
        self.is_streaming = True
        self._notify()

    def push(self, token: str) -> TranscriptEntry:
        """Apply one token, creating the agent entry on the first one.

        Raises:
            RuntimeError: If no stream has been started.
        """
        if self._state is StreamState.AWAITING_FIRST_TOKEN:
            self._active = self._transcript.append(
                TranscriptEntry(role=Role.AGENT, content=token)
            )
            self.is_loading = False
            self._state = StreamState.STREAMING
            logger.debug(f"First token received for entry {self._active.id}")
        elif self._state is StreamState.STREAMING and self._active is not None:
            self._transcript.append_content(self._active.id, token)
        else:
            raise RuntimeError("No stream in progress")
        self._notify()
        return self._active

    def finish(self) -> TranscriptEntry | None:
        """End the request; returns the streamed entry, if one was created."""
        entry = self._active
        if entry is None:
            logger.info("Stream ended without any tokens")
        else:
            self._transcript.flush()
        self._reset()
        return entry

    def fail(self, message: str) -> TranscriptEntry:
        """End the request after a failure.

        Partial content already streamed is kept as the final reply. If
        nothing arrived, a single error entry carrying ``message`` is added.
        """
        entry = self._active
        if entry is None:
            entry = self._transcript.append(
                TranscriptEntry(role=Role.AGENT, content=message, is_error=True)
            )
        else:
            logger.warning(f"Stream failed after partial reply; keeping entry {entry.id}")
            self._transcript.flush()
        self._reset()
        return entry

    def _reset(self) -> None:
        self._state = StreamState.IDLE
        self._active = None
        self.is_loading = False
        self.is_streaming = False
        self._notify()

    async def consume(self, tokens: AsyncGenerator[str]) -> TranscriptEntry | None:
        """Drive a full stream through the state machine.

        Args:
            tokens: Token sequence; closed on every exit path.

        Returns:
            The streamed entry, the error entry, or None for an empty stream.

        Raises:
            StreamBusyError: If another request is still in flight.
        """
        self.start()
        entry = None
        try:
            async with aclosing(tokens):
                async for token in tokens:
                    entry = self.push(token)
        except OrchestratorError as e:
            return self.fail(e.user_message)
        except Exception as e:
            logger.error(f"Stream failed unexpectedly: {e!r}")
            return self.fail(self._failure_message)
        finally:
            if not self.is_idle:
                self.finish()
        return entry

    async def resolve(
        self,
        request: Callable[[], Awaitable[TranscriptEntry]],
    ) -> TranscriptEntry:
        """Run a non-streaming request under the same guard.

        Args:
            request: Factory for the awaitable returning the agent entry.

        Returns:
            The appended reply entry, or the error entry.

        Raises:
            StreamBusyError: If another request is still in flight.
        """
        self.start()
        try:
            entry = self._transcript.append(await request())
        except OrchestratorError as e:
            return self.fail(e.user_message)
        except Exception as e:
            logger.error(f"Request failed unexpectedly: {e!r}")
            return self.fail(self._failure_message)
        finally:
            if not self.is_idle:
                self._reset()
        return entry
