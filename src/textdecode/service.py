"""Boundary layer around the decode engine.

Validates request payloads, checks uploaded files, persists history for
successful decodes and shapes response payloads for the CLI and UI. Payload
keys follow the wire format: `success`, `decoded`, `detected_type`,
`original_length`, `decoded_length`, `session_id` (and `file_name` for files);
failures carry `error`, `error_kind` and `failed_type`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from textdecode.config import Settings
from textdecode.decoder import DecodeFailure, DecodeOutcome, decode
from textdecode.errors import FileRejectedError, TextDecodeError, ValidationError
from textdecode.history import HistoryEntry, HistoryStore
from textdecode.kinds import AUTO, MODE_CHOICES, EncodingKind, parse_kind
from textdecode.log import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class DecodeRequest:
    text: str
    kind: EncodingKind | None = None
    shift: int | None = None

    @property
    def mode(self) -> str:
        return self.kind.value if self.kind else AUTO


def _coerce_shift(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("shift must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"shift must be an integer, got {value!r}")


def validate_request(payload: Mapping[str, Any]) -> DecodeRequest:
    """Build a DecodeRequest from a loosely-typed payload, raising ValidationError."""
    text = payload.get("text")
    if not isinstance(text, str) or not text:
        raise ValidationError("text is required")
    mode = payload.get("mode", payload.get("encryption_type")) or AUTO
    if not isinstance(mode, (str, EncodingKind)):
        raise ValidationError(f"mode must be one of {', '.join(MODE_CHOICES)}")
    try:
        kind = parse_kind(mode)
    except ValueError as exc:
        raise ValidationError(
            f"unknown mode {mode!r}; expected one of {', '.join(MODE_CHOICES)}"
        ) from exc
    shift = _coerce_shift(payload.get("shift", payload.get("caesar_shift")))
    return DecodeRequest(text=text, kind=kind, shift=shift)


def failure_payload(message: str, error_kind: str, failed_type: str | None = None) -> dict:
    return {
        "success": False,
        "error": message,
        "error_kind": error_kind,
        "failed_type": failed_type,
    }


def run_request(request: DecodeRequest, settings: Settings | None = None) -> DecodeOutcome:
    """Run the engine for a validated request, applying the configured default shift."""
    settings = settings or Settings()
    shift = request.shift if request.shift is not None else settings.default_shift
    return decode(request.text, request.kind, shift=shift)


def decode_text(
    request: DecodeRequest, store: HistoryStore, settings: Settings | None = None
) -> dict:
    """Decode a validated request and persist a history entry on success."""
    outcome = run_request(request, settings)
    if isinstance(outcome, DecodeFailure):
        log.warning(
            "Decode failed (mode=%s, %s): %s", request.mode, outcome.error_kind, outcome.message
        )
        return failure_payload(
            outcome.message, outcome.error_kind, outcome.kind.value if outcome.kind else None
        )

    entry = HistoryEntry.from_outcome(request.text, outcome)
    store.append(entry)
    log.debug(
        "Decoded %d chars as %s (requested %s) into %d chars",
        entry.original_length,
        entry.resolved_kind.value,
        request.mode,
        entry.decoded_length,
    )
    return {
        "success": True,
        "decoded": outcome.decoded_text,
        "detected_type": outcome.resolved_kind.value,
        "original_length": outcome.original_length,
        "decoded_length": outcome.decoded_length,
        "session_id": entry.id,
    }


def handle_decode(
    payload: Mapping[str, Any], store: HistoryStore, settings: Settings | None = None
) -> dict:
    """Validate then decode, turning validation errors into a failure payload."""
    try:
        request = validate_request(payload)
    except ValidationError as exc:
        log.warning("Rejected decode request: %s", exc)
        return failure_payload(str(exc), "ValidationError")
    return decode_text(request, store, settings)


def check_file(filename: str, data: bytes, settings: Settings | None = None) -> str:
    """Apply upload rules and return the file content as text."""
    settings = settings or Settings()
    suffix = PurePath(filename).suffix.lower()
    if suffix not in settings.allowed_extensions:
        raise FileRejectedError(
            f"Unsupported file type '{suffix or filename}'. "
            f"Use one of {', '.join(settings.allowed_extensions)}."
        )
    if len(data) > settings.max_file_bytes:
        raise FileRejectedError(
            f"File is {len(data)} bytes; the limit is {settings.max_file_bytes} bytes."
        )
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileRejectedError(f"File is not valid UTF-8: {exc}") from exc


def decode_file(
    filename: str,
    data: bytes,
    store: HistoryStore,
    mode: str | EncodingKind = AUTO,
    shift: Any = None,
    settings: Settings | None = None,
) -> dict:
    """Decode an uploaded file. Raises FileRejectedError / ValidationError before decoding."""
    text = check_file(filename, data, settings)
    request = validate_request({"text": text, "mode": mode, "shift": shift})
    payload = decode_text(request, store, settings)
    payload["file_name"] = PurePath(filename).name
    return payload


def handle_file(
    filename: str,
    data: bytes,
    store: HistoryStore,
    mode: str | EncodingKind = AUTO,
    shift: Any = None,
    settings: Settings | None = None,
) -> dict:
    """Like decode_file but boundary errors come back as failure payloads."""
    try:
        return decode_file(filename, data, store, mode=mode, shift=shift, settings=settings)
    except TextDecodeError as exc:
        log.warning("Rejected file %s: %s", filename, exc)
        payload = failure_payload(str(exc), type(exc).__name__)
        payload["file_name"] = PurePath(filename).name
        return payload


def recent_history(
    store: HistoryStore, limit: int | None = None, settings: Settings | None = None
) -> list[HistoryEntry]:
    """Most recent entries, newest first."""
    settings = settings or Settings()
    limit = settings.history_limit if limit is None else limit
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    return store.recent(limit)
