"""Chat transcript and reply accumulation.

Responsibilities:
    - Append-only transcript with pinning and JSON persistence
    - Folding streamed tokens into a single agent entry
    - One request in flight at a time
    - Input validation and error entry synthesis
"""

from studio_chat.chat.accumulator import MessageAccumulator
from studio_chat.chat.session import ChatSession
from studio_chat.chat.transcript import Transcript, TranscriptStore

__all__ = ["ChatSession", "MessageAccumulator", "Transcript", "TranscriptStore"]
