"""Tests for the mission countdown."""

import pytest

from missionboard.timer import Countdown, format_remaining, run_countdown


@pytest.fixture
def completions() -> list[int]:
    return []


def _countdown(seconds: int, completions: list[int]) -> Countdown:
    return Countdown(duration_seconds=seconds, on_complete=lambda: completions.append(1))


class TestCountdown:
    def test_ticks_only_while_running(self, completions: list[int]) -> None:
        countdown = _countdown(3, completions)
        countdown.tick()
        assert countdown.remaining_seconds == 3

        countdown.start()
        countdown.tick()
        assert countdown.remaining_seconds == 2

    def test_completes_once_at_zero(self, completions: list[int]) -> None:
        countdown = _countdown(2, completions)
        countdown.start()
        for _ in range(5):
            countdown.tick()

        assert countdown.finished
        assert countdown.remaining_seconds == 0
        assert completions == [1]

    def test_pause_and_resume(self, completions: list[int]) -> None:
        countdown = _countdown(10, completions)
        countdown.start()
        countdown.tick()
        countdown.pause()
        countdown.tick()
        countdown.tick()
        assert countdown.remaining_seconds == 9

        countdown.resume()
        countdown.tick()
        assert countdown.remaining_seconds == 8

    def test_toggle(self, completions: list[int]) -> None:
        countdown = _countdown(10, completions)
        countdown.start()
        countdown.toggle()
        assert not countdown.running
        countdown.toggle()
        assert countdown.running

    def test_cancel_never_completes(self, completions: list[int]) -> None:
        countdown = _countdown(1, completions)
        countdown.start()
        countdown.cancel()
        countdown.resume()
        countdown.tick()

        assert countdown.cancelled
        assert not countdown.finished
        assert completions == []

    def test_for_minutes(self) -> None:
        countdown = Countdown.for_minutes(2)
        assert countdown.duration_seconds == 120
        assert countdown.progress == 1.0

    def test_zero_duration_finishes_on_start(self, completions: list[int]) -> None:
        countdown = _countdown(0, completions)
        countdown.start()
        assert countdown.finished
        assert completions == [1]


def test_run_countdown_uses_injected_sleep(completions: list[int]) -> None:
    sleeps: list[float] = []
    ticks: list[int] = []
    countdown = _countdown(3, completions)

    finished = run_countdown(
        countdown,
        interval_seconds=0.5,
        sleep=sleeps.append,
        on_tick=lambda c: ticks.append(c.remaining_seconds),
    )

    assert finished
    assert sleeps == [0.5, 0.5, 0.5]
    assert ticks == [2, 1, 0]
    assert completions == [1]


def test_run_countdown_interrupted(completions: list[int]) -> None:
    def interrupt(_: float) -> None:
        raise KeyboardInterrupt

    countdown = _countdown(3, completions)
    assert not run_countdown(countdown, sleep=interrupt)
    assert countdown.cancelled
    assert completions == []


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0:00"), (59, "0:59"), (600, "10:00"), (-3, "0:00")],
)
def test_format_remaining(seconds: int, expected: str) -> None:
    assert format_remaining(seconds) == expected
