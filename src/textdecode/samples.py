"""Sample encoders and a synthetic fixture generator.

The encoders are the inverses of the decoders in `textdecode.decoder` and are
used for fixtures, the CLI `encode` command and the benchmark script:
- decimal: `\\72\\101...` (one code per character, BMP only)
- hex: two lowercase hex digits per character (code points below 256 only)
- base64: UTF-8 bytes, standard alphabet with padding
- caesar: letters shifted forward by `shift`
- rot13: caesar with shift 13
- url: every byte outside the unreserved set percent-encoded
"""

from __future__ import annotations

import base64
import random
from collections.abc import Sequence
from urllib.parse import quote

from textdecode.decoder import DEFAULT_SHIFT, ROT13_SHIFT, decode_caesar
from textdecode.kinds import EncodingKind

DEFAULT_WORDS: Sequence[str] = (
    "hello",
    "mainframe",
    "decode",
    "cipher",
    "archive",
    "report",
    "quarterly",
    "ledger",
    "Alpha",
    "Zulu",
)


def encode_text(text: str, kind: EncodingKind, shift: int = DEFAULT_SHIFT) -> str:
    """Encode `text` so that decoding it under `kind` yields `text` again."""
    if kind is EncodingKind.DECIMAL:
        if any(ord(ch) > 0xFFFF for ch in text):
            raise ValueError("decimal samples only cover the basic multilingual plane")
        return "".join(f"\\{ord(ch)}" for ch in text)
    if kind is EncodingKind.HEX:
        if any(ord(ch) > 0xFF for ch in text):
            raise ValueError("hex samples only cover code points below 256")
        return "".join(f"{ord(ch):02x}" for ch in text)
    if kind is EncodingKind.BASE64:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")
    if kind is EncodingKind.CAESAR:
        return decode_caesar(text, -shift)
    if kind is EncodingKind.ROT13:
        return decode_caesar(text, ROT13_SHIFT)
    if kind is EncodingKind.URL:
        return quote(text, safe="")
    raise ValueError(f"unknown kind: {kind!r}")


def generate_samples(
    count: int = 8,
    *,
    seed: int = 1234,
    kinds: Sequence[EncodingKind] | None = None,
    words: Sequence[str] = DEFAULT_WORDS,
) -> list[dict]:
    """Generate encoded phrases with their plaintext and kind, cycling through kinds."""
    rng = random.Random(seed)
    pool = list(kinds or EncodingKind)
    samples: list[dict] = []
    for i in range(count):
        kind = pool[i % len(pool)]
        plaintext = " ".join(rng.choice(words) for _ in range(rng.randint(2, 5)))
        shift = rng.randint(1, 25) if kind is EncodingKind.CAESAR else DEFAULT_SHIFT
        samples.append(
            {
                "kind": kind.value,
                "plaintext": plaintext,
                "encoded": encode_text(plaintext, kind, shift=shift),
                "shift": shift if kind is EncodingKind.CAESAR else None,
            }
        )
    return samples
