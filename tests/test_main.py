"""Tests for the command line entry point."""

import json
import logging
from pathlib import Path

import pytest

from missionboard.main import build_parser, main
from missionboard.state import AppState
from missionboard.store import JsonFileStore, StateRepository


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def run(tmp_path: Path, data_dir: Path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"tick_seconds": 0.001}))

    def _run(*argv: str) -> None:
        main(["--config", str(config), "--data-dir", str(data_dir), *argv])

    return _run


def _state(data_dir: Path) -> AppState:
    return StateRepository(JsonFileStore(data_dir)).load()


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_first_run_status(run, capsys: pytest.CaptureFixture[str]) -> None:
    run("status")
    out = capsys.readouterr().out
    assert "Child: (not set)" in out
    assert "Hello! Shall we start today's missions?" in out


def test_full_day(run, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    run("profile", "Mina")
    run("add", "Read", "1", "Candy", "--pin", "1234")
    mission_id = _state(data_dir).missions[0].id

    run("start", mission_id)
    run("run")
    assert "Mission complete!" in capsys.readouterr().out

    run("sticker", "rocket")
    run("status")
    out = capsys.readouterr().out
    assert "Today's sticker is already on the board" in out

    state = _state(data_dir)
    assert state.profile.name == "Mina"
    assert state.total_stickers == 1
    assert [log.title for log in state.mission_logs] == ["Read"]


def test_wrong_pin_exits(run, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        run("add", "Read", "10", "Candy", "--pin", "0000")

    assert exc.value.code == 1
    assert "[ERROR] missionboard.main: Wrong PIN" in capsys.readouterr().err
    assert _state(data_dir).missions == []


def test_parent_command_without_pin(run, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        run("grant", "2")
    assert "--pin" in capsys.readouterr().err


def test_time_warp(run, data_dir: Path) -> None:
    run("add", "Read", "10", "Candy", "--pin", "1234")
    run("start", _state(data_dir).missions[0].id)
    run("warp", "--pin", "1234")

    assert _state(data_dir).missions[0].status == "completed"


def test_pin_change(run, data_dir: Path) -> None:
    run("pin", "--current", "1234", "--new", "2468", "--verify", "2468")
    assert _state(data_dir).pin == "2468"

    run("grant", "3", "--pin", "2468")
    assert _state(data_dir).bonus_stickers == 3


def test_pin_change_verify_mismatch(run, data_dir: Path) -> None:
    with pytest.raises(SystemExit):
        run("pin", "--current", "1234", "--new", "2468", "--verify", "8642")
    assert _state(data_dir).pin == "1234"


@pytest.mark.parametrize(("new", "verify"), [("12", "12"), ("12345", "12345"), ("abcd", "abcd")])
def test_pin_change_rejects_malformed_pin(
    run, data_dir: Path, capsys: pytest.CaptureFixture[str], new: str, verify: str
) -> None:
    with pytest.raises(SystemExit) as exc:
        run("pin", "--current", "1234", "--new", new, "--verify", verify)

    assert exc.value.code == 1
    assert "PIN changed" not in capsys.readouterr().out
    assert _state(data_dir).pin == "1234"


def test_reward_and_preset_commands(
    run, data_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    run("reward", "add", "0", "500", "--pin", "1234")
    run("reward", "show")
    assert "current: ₩500" in capsys.readouterr().out

    run("add", "Read", "10", "Candy", "--pin", "1234")
    run("preset", "save", "Weekdays", "--pin", "1234")
    preset_id = _state(data_dir).presets[0].id
    run("clear", "--pin", "1234")
    run("preset", "load", preset_id, "--pin", "1234")

    assert [m.title for m in _state(data_dir).missions] == ["Read"]


def test_invalid_config(tmp_path: Path, data_dir: Path) -> None:
    config = tmp_path / "bad.json"
    config.write_text(json.dumps({"default_pin": "12"}))

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config), "--data-dir", str(data_dir), "status"])
    assert exc.value.code == 1
