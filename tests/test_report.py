import csv
import json
from datetime import datetime, timezone
from pathlib import Path

import pyarrow.ipc as pa_ipc
import pytest

from textdecode.decoder import decode
from textdecode.history import HistoryEntry
from textdecode.report import export_history, summarize_history


def _entries() -> list[HistoryEntry]:
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        HistoryEntry.from_outcome("SGVsbG8=", decode("SGVsbG8="), created_at=created),
        HistoryEntry.from_outcome("48656c6c6f", decode("48656c6c6f"), created_at=created),
        HistoryEntry.from_outcome("Uryyb", decode("Uryyb", "rot13"), created_at=created),
        HistoryEntry.from_outcome("6a6b6c", decode("6a6b6c"), created_at=created),
    ]


def test_summarize_history_counts_and_deltas():
    summary = summarize_history(_entries())
    assert summary["entries"] == 4
    assert summary["kind_counts"] == {"hex": 2, "base64": 1, "rot13": 1}
    # originals 8+10+5+6, decoded 5+5+5+3
    assert summary["average_original_length"] == 7.25
    assert summary["average_decoded_length"] == 4.5
    assert summary["average_length_delta"] == -2.75


def test_summarize_empty_history():
    summary = summarize_history([])
    assert summary["entries"] == 0
    assert summary["kind_counts"] == {}


def test_export_jsonl_and_csv(tmp_path: Path):
    entries = _entries()
    jsonl = export_history(entries, tmp_path / "out.jsonl")
    lines = jsonl.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    assert json.loads(lines[0])["resolved_kind"] == "base64"

    out = export_history(entries, tmp_path / "out.csv")
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 4
    assert rows[1]["length_delta"] == "-5"

    # exporting again replaces rather than appends
    export_history(entries[:1], out)
    with out.open(newline="", encoding="utf-8") as f:
        assert len(list(csv.DictReader(f))) == 1


def test_export_arrow(tmp_path: Path):
    path = export_history(_entries(), tmp_path / "out.arrow")
    with pa_ipc.open_file(path) as reader:
        table = reader.read_all()
    assert table.num_rows == 4
    assert table.column("resolved_kind").to_pylist()[0] == "base64"


def test_export_rejects_unknown_suffix(tmp_path: Path):
    with pytest.raises(ValueError):
        export_history(_entries(), tmp_path / "out.parquet")
