"""Append-only chat transcript with JSON persistence."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import TypeAdapter

from studio_chat.config import HISTORY_FILE, get_data_dir
from studio_chat.models.schemas import TranscriptEntry

logger = logging.getLogger(__name__)

_entries_adapter = TypeAdapter(list[TranscriptEntry])


class TranscriptStore:
    """Reads and writes the chat history as a JSON list."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_data_dir() / HISTORY_FILE

    def load(self) -> list[TranscriptEntry]:
        if not self.path.exists():
            return []
        try:
            return _entries_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load chat history from {self.path}: {e}")
            return []

    def save(self, entries: list[TranscriptEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_entries_adapter.dump_json(entries, indent=2))

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)


class Transcript:
    """Ordered chat history.

    Entries are appended and never reordered. Only the content of the last
    entry may grow, through ``append_content``, while it is being streamed.
    Every other mutation is persisted immediately; streamed content is
    persisted by ``flush`` once the stream ends.

    Args:
        entries: Initial history.
        store: Optional persistence backend.
    """

    def __init__(
        self,
        entries: list[TranscriptEntry] | None = None,
        store: TranscriptStore | None = None,
    ) -> None:
        self._entries: list[TranscriptEntry] = list(entries or [])
        self._store = store

    @classmethod
    def load(cls, store: TranscriptStore) -> "Transcript":
        """Create a transcript from persisted history."""
        return cls(store.load(), store=store)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> TranscriptEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def append(self, entry: TranscriptEntry) -> TranscriptEntry:
        self._entries.append(entry)
        self.flush()
        return entry

    def append_content(self, entry_id: str, text: str) -> TranscriptEntry:
        """Append streamed text to the last entry.

        Raises:
            ValueError: If ``entry_id`` is not the last entry.
        """
        if not self._entries or self._entries[-1].id != entry_id:
            raise ValueError(f"Entry {entry_id} is not the active stream target")
        entry = self._entries[-1]
        entry.content += text
        return entry

    def toggle_pin(self, entry_id: str) -> TranscriptEntry:
        """Flip the pinned flag of an entry.

        Raises:
            KeyError: If no entry has ``entry_id``.
        """
        for entry in self._entries:
            if entry.id == entry_id:
                entry.is_pinned = not entry.is_pinned
                self.flush()
                return entry
        raise KeyError(entry_id)

    def pinned(self) -> list[TranscriptEntry]:
        return [entry for entry in self._entries if entry.is_pinned]

    def clear(self) -> None:
        """Start a new chat, dropping the persisted history."""
        self._entries.clear()
        if self._store is not None:
            self._store.delete()

    def flush(self) -> None:
        """Persist the current history, if a store is attached."""
        if self._store is not None:
            self._store.save(self._entries)
