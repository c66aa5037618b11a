from studio_chat.models.schemas import (
    OrchestratorRequest,
    OrchestratorResponse,
    ReasoningLayer,
    Role,
    StreamState,
    TranscriptEntry,
)

__all__ = [
    "OrchestratorRequest",
    "OrchestratorResponse",
    "ReasoningLayer",
    "Role",
    "StreamState",
    "TranscriptEntry",
]
