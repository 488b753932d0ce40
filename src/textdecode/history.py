"""History of successful decodes.

The engine never touches history; the boundary layer appends one entry per
successful decode through the `HistoryStore` interface. Two stores ship:
`MemoryHistoryStore` (process-local) and `JsonlHistoryStore` (append-only
JSONL file, one entry per line).
"""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from textdecode.decoder import DecodeSuccess
from textdecode.errors import ValidationError
from textdecode.kinds import EncodingKind


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    original_text: str
    decoded_text: str
    resolved_kind: EncodingKind
    original_length: int
    decoded_length: int
    created_at: datetime

    @staticmethod
    def from_outcome(
        original_text: str, outcome: DecodeSuccess, created_at: datetime | None = None
    ) -> HistoryEntry:
        return HistoryEntry(
            id=uuid.uuid4().hex,
            original_text=original_text,
            decoded_text=outcome.decoded_text,
            resolved_kind=outcome.resolved_kind,
            original_length=outcome.original_length,
            decoded_length=outcome.decoded_length,
            created_at=created_at or datetime.now(timezone.utc),
        )

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> HistoryEntry:
        return HistoryEntry(
            id=str(payload["id"]),
            original_text=str(payload["original_text"]),
            decoded_text=str(payload["decoded_text"]),
            resolved_kind=EncodingKind(payload["resolved_kind"]),
            original_length=int(payload["original_length"]),
            decoded_length=int(payload["decoded_length"]),
            created_at=datetime.fromisoformat(payload["created_at"]),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "original_text": self.original_text,
            "decoded_text": self.decoded_text,
            "resolved_kind": self.resolved_kind.value,
            "original_length": self.original_length,
            "decoded_length": self.decoded_length,
            "created_at": self.created_at.isoformat(),
        }


class HistoryStore(Protocol):
    def append(self, entry: HistoryEntry) -> None: ...

    def recent(self, limit: int = 10) -> list[HistoryEntry]: ...


def _newest_first(entries: list[HistoryEntry], limit: int) -> list[HistoryEntry]:
    # stable sort keeps later appends ahead of earlier ones with equal timestamps
    ordered = sorted(reversed(entries), key=lambda e: e.created_at, reverse=True)
    return ordered[:limit]


class MemoryHistoryStore:
    """In-process store; safe to share between threads."""

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: HistoryEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def recent(self, limit: int = 10) -> list[HistoryEntry]:
        with self._lock:
            snapshot = list(self._entries)
        return _newest_first(snapshot, limit)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class JsonlHistoryStore:
    """Append-only JSONL file store."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

    def append(self, entry: HistoryEntry) -> None:
        line = json.dumps(entry.to_mapping(), ensure_ascii=False) + "\n"
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)

    def all(self) -> list[HistoryEntry]:
        with self._lock:
            if not self.path.exists():
                return []
            with self.path.open(encoding="utf-8") as f:
                lines = [line.strip() for line in f]
        entries = []
        for lineno, line in enumerate(lines, start=1):
            if not line:
                continue
            try:
                entries.append(HistoryEntry.from_mapping(json.loads(line)))
            except (ValueError, KeyError, TypeError) as exc:
                raise ValidationError(
                    f"{self.path}:{lineno}: corrupt history entry: {exc}"
                ) from exc
        return entries

    def recent(self, limit: int = 10) -> list[HistoryEntry]:
        return _newest_first(self.all(), limit)


def format_time_ago(created_at: datetime, now: datetime | None = None) -> str:
    """Render a coarse relative age: just now, N minutes/hours/days ago."""
    now = now or datetime.now(timezone.utc)
    minutes = int((now - created_at).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    days = hours // 24
    return f"{days} day{'s' if days != 1 else ''} ago"
