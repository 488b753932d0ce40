"""Micro-benchmarks for detection and decoding on synthetic samples."""

from __future__ import annotations

import time

from textdecode.classifier import classify
from textdecode.decoder import decode
from textdecode.samples import generate_samples


def benchmark_decode(samples: int = 1000, runs: int = 3) -> dict[str, float]:
    items = generate_samples(count=samples)
    total_chars = sum(len(item["encoded"]) for item in items)
    best_classify = None
    best_decode = None
    for _ in range(runs):
        start = time.perf_counter()
        for item in items:
            classify(item["encoded"])
        elapsed = time.perf_counter() - start
        if best_classify is None or elapsed < best_classify:
            best_classify = elapsed

        start = time.perf_counter()
        for item in items:
            decode(item["encoded"], item["kind"], shift=item["shift"])
        elapsed = time.perf_counter() - start
        if best_decode is None or elapsed < best_decode:
            best_decode = elapsed
    return {
        "samples": samples,
        "chars": total_chars,
        "best_classify_seconds": best_classify or 0.0,
        "best_decode_seconds": best_decode or 0.0,
        "decode_chars_per_second": total_chars / best_decode if best_decode else 0.0,
    }


if __name__ == "__main__":
    result = benchmark_decode()
    print(result)
