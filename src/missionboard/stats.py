"""Monthly statistics for the parent view and the summary message."""

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from missionboard_shared import MissionLog

from .dates import month_id_for
from .state import AppState


@dataclass(frozen=True)
class MonthProgress:
    stickers_in_month: int
    day_of_month: int
    completion_rate: int  # percent


@dataclass(frozen=True)
class MissionStat:
    title: str
    count: int
    rate: int  # percent of days so far


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def month_progress(state: AppState, now: datetime) -> MonthProgress:
    """Stickers on the current board against the days elapsed this month."""
    placed = sum(1 for s in state.stickers if s.date.startswith(state.current_month_id))
    return MonthProgress(
        stickers_in_month=placed,
        day_of_month=now.day,
        completion_rate=_percent(placed, now.day),
    )


def mission_stats(state: AppState, now: datetime) -> list[MissionStat]:
    counts = Counter(
        log.title for log in state.mission_logs if log.date.startswith(state.current_month_id)
    )
    return [
        MissionStat(title=m.title, count=counts[m.title], rate=_percent(counts[m.title], now.day))
        for m in state.missions
    ]


def mission_counts_this_month(logs: list[MissionLog], now: datetime) -> dict[str, int]:
    """Completions per mission title in the calendar month of ``now``."""
    month = month_id_for(now)
    return dict(Counter(log.title for log in logs if log.date.startswith(month)))
