"""Runtime settings loaded from YAML or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from textdecode.decoder import DEFAULT_SHIFT
from textdecode.errors import ValidationError

MAX_FILE_BYTES = 10 * 1024 * 1024
ALLOWED_EXTENSIONS: tuple[str, ...] = (".txt", ".log", ".dat")


@dataclass
class Settings:
    default_shift: int = DEFAULT_SHIFT
    max_file_bytes: int = MAX_FILE_BYTES
    allowed_extensions: tuple[str, ...] = field(default=ALLOWED_EXTENSIONS)
    history_path: Path | None = None
    history_limit: int = 10
    log_level: str = "WARNING"

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> Settings:
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(unknown)}")
        defaults = Settings()
        try:
            settings = Settings(
                default_shift=int(payload.get("default_shift", defaults.default_shift)),
                max_file_bytes=int(payload.get("max_file_bytes", defaults.max_file_bytes)),
                allowed_extensions=_parse_extensions(
                    payload.get("allowed_extensions", defaults.allowed_extensions)
                ),
                history_path=Path(payload["history_path"]).expanduser()
                if payload.get("history_path")
                else None,
                history_limit=int(payload.get("history_limit", defaults.history_limit)),
                log_level=str(payload.get("log_level", defaults.log_level)).upper(),
            )
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid settings: {exc}") from exc
        if settings.max_file_bytes <= 0:
            raise ValidationError("max_file_bytes must be positive")
        if settings.history_limit <= 0:
            raise ValidationError("history_limit must be positive")
        if not settings.allowed_extensions:
            raise ValidationError("allowed_extensions must not be empty")
        return settings

    def to_mapping(self) -> dict[str, Any]:
        return {
            "default_shift": self.default_shift,
            "max_file_bytes": self.max_file_bytes,
            "allowed_extensions": list(self.allowed_extensions),
            "history_path": str(self.history_path) if self.history_path else None,
            "history_limit": self.history_limit,
            "log_level": self.log_level,
        }


def _parse_extensions(value: Any) -> tuple[str, ...]:
    items = value.split(",") if isinstance(value, str) else list(value)
    normalized = []
    for item in items:
        ext = str(item).strip().lower()
        if ext:
            normalized.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(normalized)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML/JSON file; defaults when `path` is None."""
    if path is None:
        return Settings()
    if not path.is_file():
        raise ValidationError(f"Settings file not found: {path}")
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(path.read_text())
        else:
            payload = json.loads(path.read_text())
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Could not parse settings file {path}: {exc}") from exc
    if payload is None:
        return Settings()
    if not isinstance(payload, dict):
        raise ValidationError(f"Settings file must hold a mapping: {path}")
    return Settings.from_mapping(payload)


def sample_settings() -> dict[str, Any]:
    return {
        "default_shift": DEFAULT_SHIFT,
        "max_file_bytes": MAX_FILE_BYTES,
        "allowed_extensions": list(ALLOWED_EXTENSIONS),
        "history_path": "logs/history.jsonl",
        "history_limit": 10,
        "log_level": "INFO",
    }
