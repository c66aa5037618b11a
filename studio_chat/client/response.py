"""Normalization of non-streaming orchestrator replies."""

from typing import Any

from studio_chat.models.schemas import OrchestratorResponse, TranscriptEntry


def normalize_response(document: Any) -> TranscriptEntry:
    """Build an agent transcript entry from a decoded reply document.

    A legacy single ``thought`` field becomes a one-element reasoning list
    with a fixed title before the entry is built.

    Args:
        document: Decoded JSON, shaped ``{response, thoughts?, thought?}``.

    Returns:
        The agent TranscriptEntry.

    Raises:
        pydantic.ValidationError: If the document lacks a text ``response``.
    """
    return OrchestratorResponse.model_validate(document).to_entry()
