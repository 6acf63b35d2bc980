"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from missionboard.config import Config, load_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.json")
    assert config == Config()
    assert config.default_pin == "1234"
    assert config.data_dir.name == "data"


def test_none_gives_defaults() -> None:
    assert load_config(None).tick_seconds == 1.0


def test_values_from_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"data_dir": str(tmp_path / "d"), "default_pin": "0000"}))

    config = load_config(path)
    assert config.data_dir == tmp_path / "d"
    assert config.default_pin == "0000"


@pytest.mark.parametrize(
    "values",
    [{"default_pin": "12345"}, {"default_pin": "abcd"}, {"tick_seconds": 0}],
)
def test_invalid_values_rejected(tmp_path: Path, values: dict) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(values))
    with pytest.raises(ValidationError):
        load_config(path)
