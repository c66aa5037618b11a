"""Orchestrator client and streaming response decoding.

Turns a live HTTP response into an ordered sequence of text tokens.

Responsibilities:
    - Incremental byte-to-text decoding across chunk boundaries
    - Framing detection (event stream vs. plain chunked text)
    - SSE line parsing and JSON payload normalization
    - Streaming and non-streaming requests over httpx
"""

from studio_chat.client.errors import (
    EmptyPromptError,
    OrchestratorConnectionError,
    OrchestratorError,
    OrchestratorStatusError,
    StreamBusyError,
    StudioError,
    UnreadableBodyError,
    connection_hint,
)
from studio_chat.client.orchestrator import OrchestratorClient
from studio_chat.client.payload import normalize_payload
from studio_chat.client.protocol import StreamFraming, detect_framing
from studio_chat.client.response import normalize_response
from studio_chat.client.sse import SSELineBuffer, iter_sse_payloads
from studio_chat.client.tokens import iter_tokens
from studio_chat.client.transport import read_text

__all__ = [
    "EmptyPromptError",
    "OrchestratorClient",
    "OrchestratorConnectionError",
    "OrchestratorError",
    "OrchestratorStatusError",
    "SSELineBuffer",
    "StreamBusyError",
    "StreamFraming",
    "StudioError",
    "UnreadableBodyError",
    "connection_hint",
    "detect_framing",
    "iter_sse_payloads",
    "iter_tokens",
    "normalize_payload",
    "normalize_response",
    "read_text",
]
