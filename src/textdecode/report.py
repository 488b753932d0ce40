"""Statistics and exports over decode history."""

from __future__ import annotations

import csv
import json
from collections import Counter
from collections.abc import Sequence
from pathlib import Path

import pyarrow as pa

from textdecode.history import HistoryEntry

EXPORT_FORMATS = {".jsonl", ".csv", ".arrow"}


def summarize_history(entries: Sequence[HistoryEntry]) -> dict[str, object]:
    """Aggregate counts per kind and average lengths / length delta."""
    counts: Counter[str] = Counter(e.resolved_kind.value for e in entries)
    total = len(entries)
    if not total:
        return {
            "entries": 0,
            "kind_counts": {},
            "average_original_length": 0.0,
            "average_decoded_length": 0.0,
            "average_length_delta": 0.0,
        }
    original = sum(e.original_length for e in entries)
    decoded = sum(e.decoded_length for e in entries)
    return {
        "entries": total,
        "kind_counts": dict(counts.most_common()),
        "average_original_length": round(original / total, 4),
        "average_decoded_length": round(decoded / total, 4),
        "average_length_delta": round((decoded - original) / total, 4),
    }


def entry_to_row(entry: HistoryEntry) -> dict:
    """Flatten an entry into a CSV-friendly row."""
    row = entry.to_mapping()
    row["length_delta"] = entry.decoded_length - entry.original_length
    return row


def append_csv(path: Path, rows: Sequence[dict]) -> None:
    """Append rows to a CSV file, writing headers when the file is new."""
    if not rows:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        if is_new:
            writer.writeheader()
        writer.writerows(rows)


def entries_to_jsonl(entries: Sequence[HistoryEntry], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for entry in entries:
            f.write(json.dumps(entry.to_mapping(), ensure_ascii=False) + "\n")


def entries_to_arrow(entries: Sequence[HistoryEntry], path: Path) -> None:
    """Write entries to Arrow IPC for analytics-friendly consumption."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.table(
        {
            "id": pa.array([e.id for e in entries], type=pa.string()),
            "original_text": pa.array([e.original_text for e in entries], type=pa.string()),
            "decoded_text": pa.array([e.decoded_text for e in entries], type=pa.string()),
            "resolved_kind": pa.array([e.resolved_kind.value for e in entries], type=pa.string()),
            "original_length": pa.array([e.original_length for e in entries], type=pa.int64()),
            "decoded_length": pa.array([e.decoded_length for e in entries], type=pa.int64()),
            "created_at": pa.array(
                [e.created_at for e in entries], type=pa.timestamp("us", tz="UTC")
            ),
        }
    )
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)


def export_history(entries: Sequence[HistoryEntry], path: Path) -> Path:
    """Export entries in the format implied by the file suffix."""
    suffix = path.suffix.lower()
    if suffix not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{suffix}'. Choose from {EXPORT_FORMATS}.")
    if suffix == ".csv":
        if path.exists():
            path.unlink()
        append_csv(path, [entry_to_row(e) for e in entries])
    elif suffix == ".arrow":
        entries_to_arrow(entries, path)
    else:
        entries_to_jsonl(entries, path)
    return path
