"""Pydantic models for the transcript and the orchestrator wire contract.

Models:
    - ReasoningLayer: One named block of intermediate reasoning
    - TranscriptEntry: One user or agent message in the chat history
    - StreamState: Lifecycle of the single active stream
    - OrchestratorRequest: Outbound request body
    - OrchestratorResponse: Non-streaming reply document
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_THOUGHT_ID = "default-thought"
DEFAULT_THOUGHT_TITLE = "Orchestrator Reasoning"


class Role(str, Enum):
    """Speaker of a transcript entry."""

    USER = "user"
    AGENT = "agent"


class StreamState(str, Enum):
    """States of the message accumulator."""

    IDLE = "idle"
    AWAITING_FIRST_TOKEN = "awaiting_first_token"
    STREAMING = "streaming"


class ReasoningLayer(BaseModel):
    """A named block of reasoning attached to an agent entry.

    Attributes:
        id: Layer identifier.
        title: Display title (e.g. "Planner").
        content: Reasoning text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str


def _new_entry_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TranscriptEntry(BaseModel):
    """A single message in the chat transcript.

    Only ``content`` of the newest agent entry changes after creation, and
    only while that entry receives streamed tokens.

    Attributes:
        id: Opaque identifier.
        role: Who produced the message.
        content: Message text.
        timestamp: Creation time (UTC).
        reasoning_layers: Optional reasoning blocks, in display order.
        is_error: True for synthesized failure entries.
        is_pinned: True when the user pinned the entry.
    """

    id: str = Field(default_factory=_new_entry_id)
    role: Role
    content: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
    reasoning_layers: list[ReasoningLayer] | None = None
    is_error: bool = False
    is_pinned: bool = False


class OrchestratorRequest(BaseModel):
    """Body of the POST sent to the orchestrator endpoint."""

    prompt: str = Field(..., min_length=1)
    stream: bool
    user_alias: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    persona: str | None = None


class OrchestratorResponse(BaseModel):
    """Non-streaming reply from the orchestrator.

    Older backends send a single ``thought`` string instead of ``thoughts``;
    it is folded into a one-element ``thoughts`` list during validation so
    nothing downstream sees the legacy shape.
    """

    response: str
    thoughts: list[ReasoningLayer] | None = None

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_thought(cls, data: Any) -> Any:
        """Convert a legacy ``thought`` string into ``thoughts``."""
        if not isinstance(data, dict):
            return data
        thought = data.get("thought")
        if data.get("thoughts") is None and isinstance(thought, str) and thought:
            data = {key: value for key, value in data.items() if key != "thought"}
            data["thoughts"] = [
                {
                    "id": DEFAULT_THOUGHT_ID,
                    "title": DEFAULT_THOUGHT_TITLE,
                    "content": thought,
                }
            ]
        return data

    def to_entry(self) -> TranscriptEntry:
        """Build the agent transcript entry for this reply."""
        return TranscriptEntry(
            role=Role.AGENT,
            content=self.response,
            reasoning_layers=self.thoughts,
        )
