"""Studio Chat - streaming chat client for a remote orchestrator.

Talks to an orchestrator endpoint over HTTP, decodes its streamed reply
(event-stream or raw chunked text) and folds it into a live transcript.

Components:
    - client: transport reader, framing detection, SSE parsing, HTTP client
    - chat: transcript, message accumulator, submit flow
    - models: transcript and request/response schemas
    - api: FastAPI host for the UI
    - ui: NiceGUI chat interface
"""

__version__ = "0.1.0"
