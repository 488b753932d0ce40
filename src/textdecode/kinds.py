"""Encoding kinds understood by the engine.

`EncodingKind` is closed: every member has exactly one decoder in
`textdecode.decoder`. `AUTO` is only valid in requests and is replaced by the
classifier's guess before decoding.
"""

from __future__ import annotations

from enum import Enum

AUTO = "auto"


class EncodingKind(str, Enum):
    DECIMAL = "decimal"
    HEX = "hex"
    BASE64 = "base64"
    CAESAR = "caesar"
    ROT13 = "rot13"
    URL = "url"

    @property
    def label(self) -> str:
        return KIND_LABELS[self]


KIND_LABELS: dict[EncodingKind, str] = {
    EncodingKind.DECIMAL: "Decimal character codes",
    EncodingKind.HEX: "Hexadecimal",
    EncodingKind.BASE64: "Base64",
    EncodingKind.CAESAR: "Caesar cipher",
    EncodingKind.ROT13: "ROT13",
    EncodingKind.URL: "URL (percent) encoding",
}

MODE_CHOICES: tuple[str, ...] = (AUTO, *(kind.value for kind in EncodingKind))


def parse_kind(value: str | EncodingKind) -> EncodingKind | None:
    """Map a mode literal to a kind; None means auto. Raises ValueError otherwise."""
    if isinstance(value, EncodingKind):
        return value
    if not isinstance(value, str):
        raise ValueError(f"mode must be a string, got {type(value).__name__}")
    normalized = value.strip().lower()
    if normalized == AUTO:
        return None
    return EncodingKind(normalized)
