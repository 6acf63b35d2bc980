"""Sticker awards, bonus gap-fill and the monthly board layout."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from missionboard_shared import StickerDay, StickerType

from .dates import month_days
from .state import AppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardCell:
    """One calendar day on the sticker board."""

    day: int
    date: str
    sticker: StickerDay | None = None

    @property
    def filled(self) -> bool:
        return self.sticker is not None and self.sticker.count > 0


def has_sticker_on(state: AppState, day: str) -> bool:
    return any(s.date == day and s.count > 0 for s in state.stickers)


def can_award(state: AppState, today: str) -> bool:
    """A sticker is earned once every mission is done and none is running."""
    return (
        bool(state.missions)
        and not state.pending_missions
        and state.active_mission is None
        and not has_sticker_on(state, today)
    )


def award_sticker(state: AppState, sticker_type: StickerType, today: str) -> StickerDay | None:
    """Place today's sticker. Does nothing when the child is not eligible."""
    if not can_award(state, today):
        logger.debug("Sticker not awarded for %s: not eligible", today)
        return None

    sticker = StickerDay(date=today, count=1, sticker_type=sticker_type)
    state.stickers.append(sticker)
    logger.info("Awarded %s sticker for %s", sticker_type, today)
    return sticker


def first_empty_day(state: AppState) -> str | None:
    """Earliest day of the current month with no sticker entry."""
    taken = {s.date for s in state.stickers}
    return next((day for day in month_days(state.current_month_id) if day not in taken), None)


def use_bonus(state: AppState) -> StickerDay | None:
    """Spend one bonus sticker on the earliest empty day of the month.

    A full month leaves the balance untouched.
    """
    if state.bonus_stickers <= 0:
        return None

    target = first_empty_day(state)
    if target is None:
        logger.info("Month %s is full, bonus sticker kept", state.current_month_id)
        return None

    sticker = StickerDay(date=target, count=1, is_bonus_used=True, sticker_type=StickerType.STAR)
    state.stickers.append(sticker)
    state.bonus_stickers -= 1
    logger.info("Bonus sticker placed on %s, %d left", target, state.bonus_stickers)
    return sticker


def grant_bonus(state: AppState, count: int) -> bool:
    if count <= 0:
        return False
    state.bonus_stickers += count
    logger.info("Granted %d bonus stickers, balance %d", count, state.bonus_stickers)
    return True


def month_board(stickers: Sequence[StickerDay], month_id: str) -> list[BoardCell]:
    by_date = {s.date: s for s in stickers}
    return [
        BoardCell(day=index, date=day, sticker=by_date.get(day))
        for index, day in enumerate(month_days(month_id), start=1)
    ]
