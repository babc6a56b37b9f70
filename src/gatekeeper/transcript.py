"""Ordered transcript of conversation entries with a single trailing placeholder."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Speaker(str, Enum):
    """Logical author of a transcript entry."""

    USER = "user"
    BOT = "bot"
    SYSTEM = "system"
    ERROR = "error"


@dataclass(frozen=True)
class TranscriptEntry:
    """A single rendered block of the conversation.

    ``markdown`` marks bot answers whose text is markdown source and must be
    rendered to the current width before display.
    """

    speaker: Speaker
    text: str
    placeholder: bool = False
    markdown: bool = False


class Transcript:
    """Append-only entry log where only the placeholder may be replaced.

    At most one placeholder exists and it is always the last entry. Entries
    appended while a placeholder is present are inserted just before it.
    """

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        """Return an immutable view of all entries in order."""
        return tuple(self._entries)

    @property
    def placeholder(self) -> TranscriptEntry | None:
        if self._entries and self._entries[-1].placeholder:
            return self._entries[-1]
        return None

    def append(self, entry: TranscriptEntry) -> None:
        """Append a finished entry, keeping the placeholder last."""
        if entry.placeholder:
            raise ValueError("Use begin_placeholder() for placeholder entries.")
        if self.placeholder is not None:
            self._entries.insert(len(self._entries) - 1, entry)
        else:
            self._entries.append(entry)

    def begin_placeholder(self, speaker: Speaker, text: str) -> TranscriptEntry:
        """Append the in-progress placeholder entry."""
        if self.placeholder is not None:
            raise ValueError("A placeholder entry already exists.")
        entry = TranscriptEntry(speaker=speaker, text=text, placeholder=True)
        self._entries.append(entry)
        return entry

    def update_placeholder(self, text: str) -> bool:
        """Swap the visible text of the placeholder; return False when absent."""
        current = self.placeholder
        if current is None:
            return False
        self._entries[-1] = replace(current, text=text)
        return True

    def resolve_placeholder(self, entry: TranscriptEntry) -> bool:
        """Replace the placeholder in place with its final entry."""
        if entry.placeholder:
            raise ValueError("A placeholder cannot resolve to another placeholder.")
        if self.placeholder is None:
            return False
        self._entries[-1] = entry
        return True

    def clear(self) -> None:
        self._entries.clear()
