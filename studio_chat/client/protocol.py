"""Framing detection for streamed orchestrator responses."""

from enum import Enum

EVENT_STREAM_MARKER = "text/event-stream"


class StreamFraming(str, Enum):
    """Wire framing of a streamed response body."""

    EVENT_STREAM = "event_stream"
    PLAIN_CHUNKS = "plain_chunks"


def detect_framing(content_type: str | None) -> StreamFraming:
    """Pick the framing from the declared content type.

    Args:
        content_type: Value of the response's Content-Type header, if any.

    Returns:
        EVENT_STREAM when the type names an event stream, PLAIN_CHUNKS otherwise.
    """
    if content_type and EVENT_STREAM_MARKER in content_type.lower():
        return StreamFraming.EVENT_STREAM
    return StreamFraming.PLAIN_CHUNKS
