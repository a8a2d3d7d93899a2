"""Conversation transcript as shown to the user."""

from __future__ import annotations

from datetime import datetime
from dataclasses import field, dataclass

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"

KIND_TEXT = "text"
KIND_TRANSCRIPT = "transcript"
KIND_AUDIO = "audio"
KIND_ERROR = "error"


@dataclass(slots=True)
class TranscriptEntry:
    role: str
    kind: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)


class Transcript:
    def __init__(self) -> None:
        self.entries: list[TranscriptEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, role: str, content: object, kind: str = KIND_TEXT) -> TranscriptEntry:
        entry = TranscriptEntry(role=role, kind=kind, content=content if isinstance(content, str) else str(content))
        self.entries.append(entry)
        return entry

    def append_delta(self, kind: str, delta: str) -> TranscriptEntry:
        """Extend the last assistant entry of ``kind`` or start a new one."""
        last = self.entries[-1] if self.entries else None
        if last is not None and last.role == ROLE_ASSISTANT and last.kind == kind:
            last.content += delta
            return last
        return self.add(ROLE_ASSISTANT, delta, kind)

    def assistant_text(self) -> str:
        return "".join(
            e.content for e in self.entries if e.role == ROLE_ASSISTANT and e.kind in (KIND_TEXT, KIND_TRANSCRIPT)
        )


__all__ = [
    "KIND_AUDIO",
    "KIND_ERROR",
    "KIND_TEXT",
    "KIND_TRANSCRIPT",
    "ROLE_ASSISTANT",
    "ROLE_SYSTEM",
    "ROLE_USER",
    "Transcript",
    "TranscriptEntry",
]
