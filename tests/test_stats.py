"""Tests for monthly statistics."""

from datetime import UTC, datetime

from missionboard_shared import MissionLog, StickerDay
from missionboard.missions import add_mission
from missionboard.state import AppState
from missionboard.stats import mission_counts_this_month, mission_stats, month_progress

NOW = datetime(2024, 3, 15, 9, 30, tzinfo=UTC)


def test_month_progress(state: AppState) -> None:
    for day in (1, 2, 3):
        state.stickers.append(StickerDay(date=f"2024-03-{day:02d}", count=1))
    state.stickers.append(StickerDay(date="2024-02-28", count=1))

    progress = month_progress(state, NOW)

    assert progress.stickers_in_month == 3
    assert progress.day_of_month == 15
    assert progress.completion_rate == 20


def test_completion_rate_rounds_half_up(state: AppState) -> None:
    # 1 of 8 days is 12.5%
    state.stickers.append(StickerDay(date="2024-03-01", count=1))
    progress = month_progress(state, datetime(2024, 3, 8, tzinfo=UTC))
    assert progress.completion_rate == 13


def test_empty_month(state: AppState) -> None:
    progress = month_progress(state, NOW)
    assert progress.stickers_in_month == 0
    assert progress.completion_rate == 0


def test_mission_stats_follow_mission_list(state: AppState) -> None:
    add_mission(state, "Read", 10, "Candy", NOW)
    add_mission(state, "Draw", 5, "Sticker", NOW)
    state.mission_logs.extend(
        [
            MissionLog(date="2024-03-01", title="Read"),
            MissionLog(date="2024-03-02", title="Read"),
            MissionLog(date="2024-03-02", title="Removed mission"),
            MissionLog(date="2024-02-27", title="Draw"),
        ]
    )

    result = {s.title: (s.count, s.rate) for s in mission_stats(state, NOW)}

    assert result == {"Read": (2, 13), "Draw": (0, 0)}


def test_counts_for_summary_use_calendar_month() -> None:
    logs = [
        MissionLog(date="2024-03-01", title="Read"),
        MissionLog(date="2024-03-14", title="Read"),
        MissionLog(date="2024-03-14", title="Draw"),
        MissionLog(date="2024-02-29", title="Read"),
    ]
    assert mission_counts_this_month(logs, NOW) == {"Read": 2, "Draw": 1}
