"""Month rollover: archive the sticker board and start a new month."""

import logging
from datetime import datetime

from missionboard_shared import ArchiveEntry

from .dates import month_id_for
from .state import AppState

logger = logging.getLogger(__name__)


def rollover(state: AppState, now: datetime) -> ArchiveEntry:
    """Archive the current board and reset for the month of ``now``.

    Only runs when the parent asks for it; a board left alone keeps its old
    month id across calendar months.
    """
    entry = ArchiveEntry(
        month_id=state.current_month_id,
        stickers=tuple(state.stickers),
        total_stickers=state.total_stickers,
        archived_at=now,
    )
    state.archives.insert(0, entry)
    state.current_month_id = month_id_for(now)
    state.stickers.clear()
    state.mission_logs.clear()
    logger.info(
        "Archived month %s with %d stickers, new month %s",
        entry.month_id,
        entry.total_stickers,
        state.current_month_id,
    )
    return entry
