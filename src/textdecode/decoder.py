"""Per-kind decoders and the dispatch entry point.

Each `decode_*` function raises `DecodeError` when its input does not fit the
encoding. `decode` is the only public entry point that callers should need: it
resolves `auto` through the classifier, runs the matching decoder and always
returns a `DecodeOutcome` value instead of raising.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Union
from urllib.parse import unquote_to_bytes

from textdecode.classifier import DIGITS_RE, WHITESPACE_RE, classify
from textdecode.errors import DecodeError, UnsupportedKindError
from textdecode.kinds import AUTO, EncodingKind, parse_kind

DEFAULT_SHIFT = 3
ROT13_SHIFT = 13
MAX_CODE_UNIT = 0xFFFF
SURROGATES = range(0xD800, 0xE000)

HEX_PAIR_RE = re.compile(r"[0-9a-fA-F]{2}")
BAD_PERCENT_RE = re.compile(r"%(?![0-9a-fA-F]{2})")
BASE64_PADDING_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")


@dataclass(frozen=True)
class DecodeSuccess:
    decoded_text: str
    resolved_kind: EncodingKind
    original_length: int

    ok = True

    @property
    def decoded_length(self) -> int:
        return len(self.decoded_text)


@dataclass(frozen=True)
class DecodeFailure:
    error_kind: str
    message: str
    kind: EncodingKind | None = None

    ok = False

    @staticmethod
    def from_error(exc: DecodeError | UnsupportedKindError) -> DecodeFailure:
        if isinstance(exc, DecodeError):
            return DecodeFailure(error_kind="DecodeError", message=exc.message, kind=exc.kind)
        return DecodeFailure(error_kind="UnsupportedKindError", message=str(exc))


DecodeOutcome = Union[DecodeSuccess, DecodeFailure]


def decode_decimal(text: str) -> str:
    """Decode backslash-separated decimal character codes, e.g. \\72\\105."""
    fragments = [frag for frag in text.split("\\") if frag]
    if not fragments:
        raise DecodeError(EncodingKind.DECIMAL, "no character codes found")
    chars = []
    for frag in fragments:
        if DIGITS_RE.fullmatch(frag) is None:
            raise DecodeError(EncodingKind.DECIMAL, f"not a decimal number: {frag!r}")
        # anything longer than five significant digits is out of range anyway
        if len(frag.lstrip("0")) > 5 or int(frag) > MAX_CODE_UNIT:
            raise DecodeError(EncodingKind.DECIMAL, f"character code out of range: {frag}")
        value = int(frag)
        if value in SURROGATES:
            raise DecodeError(EncodingKind.DECIMAL, f"lone surrogate code unit: {value}")
        chars.append(chr(value))
    return "".join(chars)


def decode_hex(text: str) -> str:
    """Decode pairs of hex digits; each byte maps to the code point of the same value."""
    compact = WHITESPACE_RE.sub("", text)
    if not compact:
        raise DecodeError(EncodingKind.HEX, "no hex digits found")
    if len(compact) % 2:
        raise DecodeError(EncodingKind.HEX, f"odd number of hex digits ({len(compact)})")
    chars = []
    for idx in range(0, len(compact), 2):
        pair = compact[idx : idx + 2]
        if HEX_PAIR_RE.fullmatch(pair) is None:
            raise DecodeError(EncodingKind.HEX, f"invalid hex pair {pair!r} at offset {idx}")
        chars.append(chr(int(pair, 16)))
    return "".join(chars)


def decode_base64(text: str) -> str:
    # padding only at the end, at most two '='; older binascii ignores the rest
    if BASE64_PADDING_RE.fullmatch(text) is None:
        raise DecodeError(EncodingKind.BASE64, "padding must only appear at the end")
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(EncodingKind.BASE64, f"invalid base64: {exc}") from exc
    if not raw:
        raise DecodeError(EncodingKind.BASE64, "no data to decode")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(EncodingKind.BASE64, f"decoded bytes are not UTF-8: {exc}") from exc


def _shift_letter(ch: str, shift: int) -> str:
    if "a" <= ch <= "z":
        base = ord("a")
    elif "A" <= ch <= "Z":
        base = ord("A")
    else:
        return ch
    return chr((ord(ch) - base - shift) % 26 + base)


def decode_caesar(text: str, shift: int = DEFAULT_SHIFT) -> str:
    """Shift ASCII letters backward by `shift`; everything else passes through."""
    return "".join(_shift_letter(ch, shift) for ch in text)


def decode_rot13(text: str) -> str:
    return decode_caesar(text, ROT13_SHIFT)


def decode_url(text: str) -> str:
    """Strict percent-decoding; `+` is kept literally."""
    bad = BAD_PERCENT_RE.search(text)
    if bad is not None:
        snippet = text[bad.start() : bad.start() + 3]
        raise DecodeError(
            EncodingKind.URL, f"malformed percent sequence {snippet!r} at offset {bad.start()}"
        )
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeError as exc:
        raise DecodeError(EncodingKind.URL, f"percent-decoded bytes are not UTF-8: {exc}") from exc


DECODERS: dict[EncodingKind, Callable[[str], str]] = {
    EncodingKind.DECIMAL: decode_decimal,
    EncodingKind.HEX: decode_hex,
    EncodingKind.BASE64: decode_base64,
    EncodingKind.CAESAR: decode_caesar,
    EncodingKind.ROT13: decode_rot13,
    EncodingKind.URL: decode_url,
}


def resolve_kind(text: str, kind: str | EncodingKind | None = AUTO) -> EncodingKind:
    """Turn a requested mode into a concrete kind, classifying when auto."""
    if kind is None:
        return classify(text)
    try:
        resolved = parse_kind(kind)
    except ValueError as exc:
        raise UnsupportedKindError(f"unsupported encoding: {kind!r}") from exc
    return classify(text) if resolved is None else resolved


def decode(
    text: str, kind: str | EncodingKind | None = AUTO, shift: int | None = None
) -> DecodeOutcome:
    """Decode `text` under `kind` (or the classifier's guess) without raising."""
    try:
        resolved = resolve_kind(text, kind)
        decoder = DECODERS.get(resolved)
        if decoder is None:
            raise UnsupportedKindError(f"no decoder registered for {resolved.value}")
        if resolved is EncodingKind.CAESAR:
            decoder = partial(decode_caesar, shift=DEFAULT_SHIFT if shift is None else shift)
        decoded = decoder(text)
    except (DecodeError, UnsupportedKindError) as exc:
        return DecodeFailure.from_error(exc)
    return DecodeSuccess(decoded_text=decoded, resolved_kind=resolved, original_length=len(text))
