import json
from pathlib import Path

from typer.testing import CliRunner

from textdecode.cli import app

runner = CliRunner()


def _invoke(tmp_path: Path, *args: str):
    return runner.invoke(app, ["--history", str(tmp_path / "history.jsonl"), *args])


def test_decode_auto_prints_payload_and_records_history(tmp_path: Path):
    result = _invoke(tmp_path, "decode", "SGVsbG8=")
    assert result.exit_code == 0, result.output
    assert '"decoded": "Hello"' in result.output
    assert '"detected_type": "base64"' in result.output
    lines = (tmp_path / "history.jsonl").read_text().splitlines()
    assert json.loads(lines[0])["resolved_kind"] == "base64"


def test_decode_with_shift_and_output_file(tmp_path: Path):
    out = tmp_path / "plain.txt"
    result = _invoke(
        tmp_path, "decode", "Ifmmp", "--mode", "caesar", "--shift", "1", "-o", str(out)
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "Hello"


def test_decode_failure_exits_non_zero(tmp_path: Path):
    result = _invoke(tmp_path, "decode", "48656c6c6", "--mode", "hex")
    assert result.exit_code == 1
    assert '"success": false' in result.output
    assert not (tmp_path / "history.jsonl").exists()


def test_decode_rejects_unknown_mode(tmp_path: Path):
    result = _invoke(tmp_path, "decode", "abc", "--mode", "morse")
    assert result.exit_code != 0


def test_decode_file_command(tmp_path: Path):
    src = tmp_path / "secret.txt"
    src.write_text("Hello%20World")
    result = _invoke(tmp_path, "decode-file", str(src))
    assert result.exit_code == 0, result.output
    assert '"file_name": "secret.txt"' in result.output
    assert '"decoded": "Hello World"' in result.output


def test_decode_file_rejects_extension(tmp_path: Path):
    src = tmp_path / "secret.bin"
    src.write_bytes(b"Uryyb")
    result = _invoke(tmp_path, "decode-file", str(src))
    assert result.exit_code == 1
    assert "FileRejectedError" in result.output


def test_classify_and_encode(tmp_path: Path):
    result = _invoke(tmp_path, "classify", "12345678")
    assert '"kind": "decimal"' in result.output
    result = _invoke(tmp_path, "encode", "Hello", "--kind", "rot13")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Uryyb"


def test_history_stats_and_export(tmp_path: Path):
    for text, mode in [("Uryyb", "rot13"), ("SGVsbG8=", "auto")]:
        assert _invoke(tmp_path, "decode", text, "--mode", mode).exit_code == 0
    result = _invoke(tmp_path, "history", "--json", "--limit", "1")
    assert result.exit_code == 0, result.output
    assert '"original_text": "SGVsbG8="' in result.output
    assert '"original_text": "Uryyb"' not in result.output

    result = _invoke(tmp_path, "history")
    assert result.exit_code == 0, result.output
    assert "ROT13" in result.output
    assert "Base64" in result.output

    result = _invoke(tmp_path, "stats")
    assert '"entries": 2' in result.output

    out = tmp_path / "export.csv"
    result = _invoke(tmp_path, "export", str(out))
    assert result.exit_code == 0, result.output
    assert "SGVsbG8=" in out.read_text()


def test_config_option_and_template(tmp_path: Path):
    template = tmp_path / "settings.json"
    assert _invoke(tmp_path, "config-template", str(template)).exit_code == 0
    payload = json.loads(template.read_text())
    payload["default_shift"] = 1
    payload["history_path"] = str(tmp_path / "configured.jsonl")
    template.write_text(json.dumps(payload))
    result = runner.invoke(app, ["--config", str(template), "decode", "Ifmmp", "-m", "caesar"])
    assert result.exit_code == 0, result.output
    assert '"decoded": "Hello"' in result.output
    assert (tmp_path / "configured.jsonl").exists()


def test_export_rejects_non_positive_limits(tmp_path: Path):
    for text in ["Uryyb", "Jbeyq", "Nyy"]:
        assert _invoke(tmp_path, "decode", text, "--mode", "rot13").exit_code == 0
    out = tmp_path / "export.jsonl"
    for limit in ["-1", "0"]:
        result = _invoke(tmp_path, "export", str(out), "--limit", limit)
        assert result.exit_code == 2
        assert not out.exists()

    result = _invoke(tmp_path, "export", str(out), "--limit", "2")
    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in out.read_text().splitlines()]
    assert [row["original_text"] for row in rows] == ["Nyy", "Jbeyq"]


def test_corrupt_history_is_a_usage_error(tmp_path: Path):
    assert _invoke(tmp_path, "decode", "Uryyb", "--mode", "rot13").exit_code == 0
    with (tmp_path / "history.jsonl").open("a") as f:
        f.write("{not json\n")
    for args in (["history"], ["stats"], ["export", str(tmp_path / "out.csv")]):
        result = _invoke(tmp_path, *args)
        assert result.exit_code == 2
