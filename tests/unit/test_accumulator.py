"""Unit tests for MessageAccumulator."""

import asyncio

import httpx
import pytest

from studio_chat.chat.accumulator import FAILURE_MESSAGE, MessageAccumulator
from studio_chat.chat.transcript import Transcript
from studio_chat.client.errors import (
    OrchestratorConnectionError,
    OrchestratorStatusError,
    StreamBusyError,
)
from studio_chat.models.schemas import Role, StreamState, TranscriptEntry

URL = "http://orchestrator.test/api/v1/chat"


async def stream(*tokens: str):
    for token in tokens:
        yield token


@pytest.fixture
def transcript() -> Transcript:
    return Transcript()


@pytest.fixture
def accumulator(transcript: Transcript) -> MessageAccumulator:
    return MessageAccumulator(transcript)


class TestConsume:
    """Tests for streaming accumulation."""

    async def test_tokens_fold_into_one_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        entry = await accumulator.consume(stream("He", "llo"))

        assert len(transcript) == 1
        assert entry is transcript[0]
        assert entry.role is Role.AGENT
        assert entry.content == "Hello"
        assert entry.is_error is False
        assert accumulator.state is StreamState.IDLE

    async def test_loading_clears_after_first_token(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        """The entry exists and loading is off before the second token arrives."""
        observed = {}

        async def tokens():
            assert accumulator.is_loading is True
            assert accumulator.state is StreamState.AWAITING_FIRST_TOKEN
            yield "He"
            observed["loading"] = accumulator.is_loading
            observed["state"] = accumulator.state
            observed["content"] = transcript[0].content
            yield "llo"

        await accumulator.consume(tokens())

        assert observed == {"loading": False, "state": StreamState.STREAMING, "content": "He"}
        assert accumulator.is_streaming is False

    async def test_empty_stream_creates_no_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        entry = await accumulator.consume(stream())

        assert entry is None
        assert len(transcript) == 0
        assert accumulator.is_loading is False
        assert accumulator.is_idle

    async def test_error_after_token_keeps_partial_content(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        async def tokens():
            yield "partial"
            raise OrchestratorConnectionError("reset", URL)

        entry = await accumulator.consume(tokens())

        assert len(transcript) == 1
        assert entry.content == "partial"
        assert entry.is_error is False
        assert accumulator.is_idle

    async def test_error_before_token_adds_error_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        async def tokens():
            raise OrchestratorStatusError(502, URL)
            yield

        entry = await accumulator.consume(tokens())

        assert len(transcript) == 1
        assert entry.is_error is True
        assert URL in entry.content
        assert accumulator.is_idle
        assert accumulator.is_loading is False

    async def test_rejects_second_stream_while_active(
        self, accumulator: MessageAccumulator
    ) -> None:
        accumulator.start()

        with pytest.raises(StreamBusyError):
            await accumulator.consume(stream("x"))

        assert accumulator.state is StreamState.AWAITING_FIRST_TOKEN

    async def test_unexpected_error_after_token_keeps_partial_content(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        async def tokens():
            yield "a"
            raise RuntimeError("boom")

        entry = await accumulator.consume(tokens())

        assert entry.content == "a"
        assert entry.is_error is False
        assert list(transcript) == [entry]
        assert accumulator.is_idle

    async def test_transport_error_before_token_adds_error_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        """Errors from outside the client, such as a raw httpx failure, still end in an entry."""

        async def tokens():
            raise httpx.ReadError("connection reset")
            yield

        entry = await accumulator.consume(tokens())

        assert entry.is_error is True
        assert entry.content == FAILURE_MESSAGE
        assert list(transcript) == [entry]
        assert accumulator.is_idle
        assert accumulator.is_loading is False

    async def test_failure_message_is_configurable(self, transcript: Transcript) -> None:
        accumulator = MessageAccumulator(transcript, failure_message="Backend unavailable")

        async def tokens():
            raise LookupError("unknown encoding")
            yield

        entry = await accumulator.consume(tokens())

        assert entry.content == "Backend unavailable"

    async def test_task_cancellation_propagates(self, accumulator: MessageAccumulator) -> None:
        async def tokens():
            yield "a"
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await accumulator.consume(tokens())

        assert accumulator.is_idle

    async def test_notifies_on_every_change(self, transcript: Transcript) -> None:
        states = []
        accumulator = MessageAccumulator(
            transcript, on_change=lambda: states.append(accumulator.state)
        )

        await accumulator.consume(stream("a", "b"))

        assert states == [
            StreamState.AWAITING_FIRST_TOKEN,
            StreamState.STREAMING,
            StreamState.STREAMING,
            StreamState.IDLE,
        ]


class TestPush:
    """Tests for direct token application."""

    def test_push_without_start_fails(self, accumulator: MessageAccumulator) -> None:
        with pytest.raises(RuntimeError):
            accumulator.push("x")

    def test_only_active_entry_grows(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        earlier = transcript.append(TranscriptEntry(role=Role.USER, content="hi"))
        accumulator.start()
        accumulator.push("a")
        accumulator.push("b")
        accumulator.finish()

        assert earlier.content == "hi"
        assert [entry.content for entry in transcript] == ["hi", "ab"]


class TestResolve:
    """Tests for non-streaming requests."""

    async def test_reply_is_appended(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        reply = TranscriptEntry(role=Role.AGENT, content="ok")

        async def request() -> TranscriptEntry:
            assert accumulator.is_loading is True
            return reply

        entry = await accumulator.resolve(request)

        assert entry is reply
        assert list(transcript) == [reply]
        assert accumulator.is_idle

    async def test_failure_adds_error_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        async def request() -> TranscriptEntry:
            raise OrchestratorConnectionError("refused", URL)

        entry = await accumulator.resolve(request)

        assert entry.is_error is True
        assert "Failed to reach" in entry.content
        assert len(transcript) == 1

    async def test_unexpected_failure_adds_error_entry(
        self, accumulator: MessageAccumulator, transcript: Transcript
    ) -> None:
        async def request() -> TranscriptEntry:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        entry = await accumulator.resolve(request)

        assert entry.is_error is True
        assert entry.content == FAILURE_MESSAGE
        assert list(transcript) == [entry]
        assert accumulator.is_idle

    async def test_busy_request_is_never_started(self, accumulator: MessageAccumulator) -> None:
        calls = []

        async def request() -> TranscriptEntry:
            calls.append(True)
            return TranscriptEntry(role=Role.AGENT)

        accumulator.start()
        with pytest.raises(StreamBusyError):
            await accumulator.resolve(request)

        assert calls == []
