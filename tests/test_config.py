import json
from pathlib import Path

import pytest
import yaml

from textdecode.config import MAX_FILE_BYTES, Settings, load_settings, sample_settings
from textdecode.errors import ValidationError


def test_defaults_without_file():
    settings = load_settings(None)
    assert settings.default_shift == 3
    assert settings.max_file_bytes == MAX_FILE_BYTES == 10 * 1024 * 1024
    assert settings.allowed_extensions == (".txt", ".log", ".dat")
    assert settings.history_path is None


def test_load_yaml_and_normalize_extensions(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.safe_dump(
            {"default_shift": 5, "allowed_extensions": ["TXT", ".csv"], "log_level": "debug"}
        )
    )
    settings = load_settings(path)
    assert settings.default_shift == 5
    assert settings.allowed_extensions == (".txt", ".csv")
    assert settings.log_level == "DEBUG"


def test_load_json_sample_round_trips(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(sample_settings()))
    settings = load_settings(path)
    assert settings.history_path == Path("logs/history.jsonl")
    assert Settings.from_mapping(settings.to_mapping()) == settings


def test_empty_yaml_gives_defaults(tmp_path: Path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_settings(path) == Settings()


@pytest.mark.parametrize(
    "payload",
    [
        {"unknown_key": 1},
        {"default_shift": "three"},
        {"max_file_bytes": 0},
        {"history_limit": -1},
        {"allowed_extensions": []},
    ],
)
def test_invalid_settings_raise(payload):
    with pytest.raises(ValidationError):
        Settings.from_mapping(payload)


def test_missing_or_broken_files_raise(tmp_path: Path):
    with pytest.raises(ValidationError):
        load_settings(tmp_path / "nope.yaml")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ValidationError):
        load_settings(broken)
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ValidationError):
        load_settings(listing)
