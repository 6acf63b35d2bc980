"""Calendar helpers: today's date id, month ids and month day listings."""

import calendar
from datetime import date, datetime, timedelta


class Clock:
    """Source of the current time. Tests substitute a fixed clock."""

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def today(self) -> str:
        return today_str(self.now())

    def month_id(self) -> str:
        return month_id_for(self.now())


class FixedClock(Clock):
    """Clock pinned to a given instant, advanced explicitly."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        self.instant += delta


def today_str(now: datetime | None = None) -> str:
    """Return the calendar day as YYYY-MM-DD."""
    return (now or datetime.now()).date().isoformat()


def month_id_for(now: datetime | None = None) -> str:
    """Return the calendar month as YYYY-MM."""
    return (now or datetime.now()).strftime("%Y-%m")


def parse_month_id(month_id: str) -> tuple[int, int]:
    year, month = month_id.split("-")
    return int(year), int(month)


def days_in_month(month_id: str) -> int:
    year, month = parse_month_id(month_id)
    return calendar.monthrange(year, month)[1]


def month_days(month_id: str) -> list[str]:
    """All days of a month as YYYY-MM-DD, in ascending order."""
    year, month = parse_month_id(month_id)
    return [
        date(year, month, day).isoformat()
        for day in range(1, days_in_month(month_id) + 1)
    ]
