import time
from pathlib import Path

import pandas as pd
import streamlit as st

from textdecode.config import Settings, load_settings
from textdecode.history import JsonlHistoryStore, MemoryHistoryStore, format_time_ago
from textdecode.kinds import MODE_CHOICES, KIND_LABELS, EncodingKind
from textdecode.log import configure_logging
from textdecode.report import summarize_history
from textdecode.service import handle_decode, handle_file, recent_history

SETTINGS_PATH = Path("textdecode.yaml")


def _mode_label(mode: str) -> str:
    return "Auto-detect" if mode == "auto" else KIND_LABELS[EncodingKind(mode)]


@st.cache_resource
def _load() -> tuple[Settings, JsonlHistoryStore | MemoryHistoryStore]:
    settings = load_settings(SETTINGS_PATH if SETTINGS_PATH.is_file() else None)
    configure_logging(settings.log_level)
    if settings.history_path:
        return settings, JsonlHistoryStore(settings.history_path)
    return settings, MemoryHistoryStore()


def _render_result(payload: dict, download_name: str) -> None:
    if not payload.get("success"):
        st.error(payload.get("error") or "Decoding failed.")
        return
    kind = EncodingKind(payload["detected_type"])
    st.success(f"Decoded as {kind.label}")
    st.text_area("Decoded text", payload["decoded"], height=200)
    cols = st.columns(3)
    cols[0].metric("Original length", payload["original_length"])
    cols[1].metric("Decoded length", payload["decoded_length"])
    cols[2].metric("Delta", payload["decoded_length"] - payload["original_length"])
    st.download_button(
        "Download decoded text",
        payload["decoded"].encode("utf-8"),
        file_name=download_name,
        mime="text/plain",
    )


def main() -> None:
    settings, store = _load()
    st.title("Text Decoder")
    st.caption(
        "Paste or upload text in decimal, hex, Base64, Caesar, ROT13 or URL encoding; "
        "pick the encoding or let the detector guess."
    )

    mode = st.selectbox("Encoding", MODE_CHOICES, format_func=_mode_label)
    shift = None
    if mode in {"auto", EncodingKind.CAESAR.value}:
        shift = st.number_input(
            "Caesar shift", min_value=-25, max_value=25, value=settings.default_shift, step=1
        )

    tabs = st.tabs(["Text", "File", "History"])

    with tabs[0]:
        text = st.text_area("Encoded text", height=150)
        if st.button("Decode", key="decode_text"):
            start = time.perf_counter()
            payload = handle_decode(
                {"text": text, "mode": mode, "shift": shift}, store, settings
            )
            elapsed = time.perf_counter() - start
            _render_result(payload, "decoded_text.txt")
            st.caption(f"{elapsed * 1000:.2f} ms")

    with tabs[1]:
        allowed = [ext.lstrip(".") for ext in settings.allowed_extensions]
        uploaded = st.file_uploader("Upload a text file", type=allowed)
        st.caption(f"Limit {settings.max_file_bytes // (1024 * 1024)} MB per file.")
        if uploaded and st.button("Decode file", key="decode_file"):
            payload = handle_file(
                uploaded.name, uploaded.getvalue(), store, mode=mode, shift=shift, settings=settings
            )
            _render_result(payload, f"decoded_{Path(uploaded.name).stem}.txt")

    with tabs[2]:
        entries = recent_history(store, settings=settings)
        if not entries:
            st.info("No decodes yet.")
        else:
            st.dataframe(
                pd.DataFrame(
                    [
                        {
                            "when": format_time_ago(e.created_at),
                            "kind": e.resolved_kind.label,
                            "original": e.original_text[:80],
                            "decoded": e.decoded_text[:80],
                            "original_length": e.original_length,
                            "decoded_length": e.decoded_length,
                        }
                        for e in entries
                    ]
                )
            )
            summary = summarize_history(entries)
            st.markdown("**Kinds in recent history**")
            st.bar_chart(pd.Series(summary["kind_counts"], name="count"))


if __name__ == "__main__":
    main()
