"""Heuristic encoding detection.

Rules (structural, first match wins; order is part of the contract):
- Decimal: backslashes removed, the rest is non-empty ASCII digits. Plain digit
  strings without backslashes match too.
- Hex: whitespace removed, the rest is non-empty hex digits of even length.
- Base64: standard alphabet with trailing `=` padding, length divisible by 4.
- Url: contains `%` and only unreserved characters plus `%`.
- Anything else is treated as letter-shifted prose (Caesar).
"""

from __future__ import annotations

import re

from textdecode.kinds import EncodingKind

DIGITS_RE = re.compile(r"[0-9]+")
HEX_RE = re.compile(r"[0-9a-fA-F]+")
BASE64_RE = re.compile(r"[A-Za-z0-9+/]+=*")
URL_RE = re.compile(r"[A-Za-z0-9%\-_.~]+")
WHITESPACE_RE = re.compile(r"\s+")


def looks_decimal(text: str) -> bool:
    return DIGITS_RE.fullmatch(text.replace("\\", "")) is not None


def looks_hex(text: str) -> bool:
    compact = WHITESPACE_RE.sub("", text)
    return HEX_RE.fullmatch(compact) is not None and len(compact) % 2 == 0


def looks_base64(text: str) -> bool:
    return BASE64_RE.fullmatch(text) is not None and len(text) % 4 == 0


def looks_url(text: str) -> bool:
    return "%" in text and URL_RE.fullmatch(text) is not None


RULES = (
    (EncodingKind.DECIMAL, looks_decimal),
    (EncodingKind.HEX, looks_hex),
    (EncodingKind.BASE64, looks_base64),
    (EncodingKind.URL, looks_url),
)


def classify(text: str) -> EncodingKind:
    """Return the first kind whose shape matches, falling back to Caesar."""
    for kind, matches in RULES:
        if matches(text):
            return kind
    return EncodingKind.CAESAR
