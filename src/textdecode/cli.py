from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.table import Table

from textdecode.classifier import classify
from textdecode.config import Settings, load_settings, sample_settings
from textdecode.errors import TextDecodeError, ValidationError
from textdecode.history import JsonlHistoryStore, format_time_ago
from textdecode.kinds import AUTO, MODE_CHOICES, EncodingKind
from textdecode.log import configure_logging
from textdecode.report import export_history, summarize_history
from textdecode.samples import encode_text
from textdecode.service import decode_text, handle_file, recent_history, validate_request

app = typer.Typer(help="Recover plaintext from classically encoded strings and files.")
console = Console()
DEFAULT_HISTORY_PATH = Path("logs/history.jsonl")
PREVIEW_CHARS = 48


class State:
    def __init__(self) -> None:
        self.settings = Settings()
        self.history_path = DEFAULT_HISTORY_PATH

    def store(self) -> JsonlHistoryStore:
        return JsonlHistoryStore(self.history_path)


state = State()


@app.callback()
def main(
    config: Path | None = typer.Option(
        None, "--config", "-C", help="Settings file (yaml/json)."
    ),
    history: Path | None = typer.Option(
        None, "--history", help="History JSONL path (overrides settings)."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level, e.g. DEBUG or WARNING."
    ),
) -> None:
    try:
        state.settings = load_settings(config)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    state.history_path = history or state.settings.history_path or DEFAULT_HISTORY_PATH
    configure_logging(log_level or state.settings.log_level)


def _print_json(payload: object) -> None:
    # soft_wrap keeps long values on one line; markup=False keeps brackets literal
    text = orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _check_mode(mode: str) -> str:
    if mode.lower() not in MODE_CHOICES:
        raise typer.BadParameter(f"Unsupported mode '{mode}'. Choose from {MODE_CHOICES}.")
    return mode.lower()


def _emit(payload: dict, output: Path | None) -> None:
    if output and payload.get("success"):
        output.write_text(payload["decoded"], encoding="utf-8")
        console.print(f"[bold green]Wrote decoded text[/] to {output}")
    _print_json(payload)
    if not payload.get("success"):
        raise typer.Exit(code=1)


@app.command()
def decode(
    text: str = typer.Argument(..., help="Encoded text."),
    mode: str = typer.Option(
        AUTO, "--mode", "-m", help=f"Encoding: {' | '.join(MODE_CHOICES)}.", callback=_check_mode
    ),
    shift: int | None = typer.Option(None, "--shift", "-s", help="Caesar shift."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the decoded text."
    ),
) -> None:
    """Decode text, guessing the encoding when mode is auto."""
    try:
        request = validate_request({"text": text, "mode": mode, "shift": shift})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _emit(decode_text(request, state.store(), state.settings), output)


@app.command("decode-file")
def decode_file_cmd(
    input: Path = typer.Argument(..., help="Text file (.txt, .log, .dat) to decode."),
    mode: str = typer.Option(
        AUTO, "--mode", "-m", help=f"Encoding: {' | '.join(MODE_CHOICES)}.", callback=_check_mode
    ),
    shift: int | None = typer.Option(None, "--shift", "-s", help="Caesar shift."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the decoded text."
    ),
) -> None:
    """Decode the contents of a file under the upload rules."""
    if not input.is_file():
        raise typer.BadParameter(f"Input file not found: {input}")
    data = input.read_bytes()
    console.print(f"[bold green]Read[/] {len(data)} bytes from {input}")
    payload = handle_file(
        input.name, data, state.store(), mode=mode, shift=shift, settings=state.settings
    )
    _emit(payload, output)


@app.command("classify")
def classify_cmd(text: str = typer.Argument(..., help="Text to classify.")) -> None:
    """Print the encoding the detection heuristic would pick."""
    kind = classify(text)
    _print_json({"kind": kind.value, "label": kind.label})


@app.command()
def encode(
    text: str = typer.Argument(..., help="Plaintext to encode."),
    kind: EncodingKind = typer.Option(..., "--kind", "-k", help="Target encoding."),
    shift: int | None = typer.Option(None, "--shift", "-s", help="Caesar shift."),
) -> None:
    """Encode plaintext; handy for building fixtures."""
    try:
        encoded = encode_text(
            text, kind, shift=state.settings.default_shift if shift is None else shift
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(encoded, markup=False, highlight=False, soft_wrap=True)


@app.command()
def history(
    limit: int | None = typer.Option(None, "--limit", "-n", help="Entries to show."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    """Show the most recent decodes, newest first."""
    try:
        entries = recent_history(state.store(), limit, state.settings)
    except TextDecodeError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if as_json:
        payload = [e.to_mapping() for e in entries]
        _print_json(payload)
        return
    table = Table(title=f"Recent decodes ({state.history_path})")
    table.add_column("When")
    table.add_column("Kind")
    table.add_column("Original")
    table.add_column("Decoded")
    table.add_column("Len", justify="right")
    for entry in entries:
        table.add_row(
            format_time_ago(entry.created_at),
            entry.resolved_kind.label,
            entry.original_text[:PREVIEW_CHARS],
            entry.decoded_text[:PREVIEW_CHARS],
            f"{entry.original_length}->{entry.decoded_length}",
        )
    console.print(table)


@app.command()
def stats() -> None:
    """Summarize the history log: counts per kind and length deltas."""
    try:
        entries = state.store().all()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--history") from exc
    _print_json(summarize_history(entries))


@app.command()
def export(
    output: Path = typer.Argument(..., help="Destination (.jsonl, .csv or .arrow)."),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Only the newest N entries."),
) -> None:
    """Export history for analysis."""
    store = state.store()
    try:
        if limit is None:
            entries = list(reversed(store.all()))
        else:
            entries = recent_history(store, limit, state.settings)
    except TextDecodeError as exc:
        raise typer.BadParameter(str(exc)) from exc
    try:
        export_history(entries, output)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"[bold green]Exported[/] {len(entries)} entries to {output}")


@app.command("config-template")
def config_template(
    output: Path | None = typer.Argument(None, help="Optional path for the template (json)."),
) -> None:
    """Print or write an editable settings template."""
    payload = orjson.dumps(sample_settings(), option=orjson.OPT_INDENT_2)
    if output:
        output.write_bytes(payload)
        console.print(f"[bold green]Wrote settings template[/] to {output}")
    else:
        console.print(payload.decode())


if __name__ == "__main__":
    app()
