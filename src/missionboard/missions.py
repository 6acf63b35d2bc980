"""Mission lifecycle: create, delete, start, cancel, complete, daily reset.

All functions mutate the given AppState in place and report whether they
changed anything. Requests that would break an invariant (a second active
mission, completing a mission that is not running) are ignored.
"""

import logging
import uuid
from datetime import datetime

from missionboard_shared import Mission, MissionLog, MissionStatus

from .dates import today_str
from .state import AppState

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Short opaque identifier for missions and presets."""
    return uuid.uuid4().hex[:9]


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def add_mission(
    state: AppState,
    title: str,
    duration_minutes: int,
    reward: str,
    now: datetime,
) -> Mission | None:
    """Append a pending mission. Returns None if the input is unusable."""
    title = title.strip()
    if not title:
        logger.warning("Refusing to add a mission without a title")
        return None
    if not _is_positive_int(duration_minutes):
        logger.warning("Refusing to add mission %r with duration %r", title, duration_minutes)
        return None

    mission = Mission(
        id=new_id(),
        title=title,
        duration_minutes=duration_minutes,
        reward=reward.strip(),
        created_at=now,
    )
    state.missions.append(mission)
    logger.info("Added mission %s (%r, %d min)", mission.id, title, duration_minutes)
    return mission


def delete_mission(state: AppState, mission_id: str) -> bool:
    mission = state.find_mission(mission_id)
    if mission is None:
        return False
    state.missions.remove(mission)
    if mission.status == MissionStatus.ACTIVE:
        logger.info("Deleted the active mission %s", mission_id)
    else:
        logger.info("Deleted mission %s", mission_id)
    return True


def clear_missions(state: AppState) -> bool:
    if not state.missions:
        return False
    logger.info("Cleared %d missions", len(state.missions))
    state.missions.clear()
    return True


def start_mission(state: AppState, mission_id: str) -> bool:
    """Make a pending mission the single active one."""
    mission = state.find_mission(mission_id)
    if mission is None or mission.status != MissionStatus.PENDING:
        logger.debug("Mission %s is not pending, not starting", mission_id)
        return False

    running = state.active_mission
    if running is not None:
        logger.debug("Mission %s already active, not starting %s", running.id, mission_id)
        return False

    mission.status = MissionStatus.ACTIVE
    logger.info("Started mission %s (%r)", mission.id, mission.title)
    return True


def cancel_mission(state: AppState, mission_id: str) -> bool:
    mission = state.find_mission(mission_id)
    if mission is None or mission.status != MissionStatus.ACTIVE:
        return False
    mission.status = MissionStatus.PENDING
    logger.info("Cancelled mission %s", mission.id)
    return True


def complete_mission(
    state: AppState,
    mission_id: str,
    now: datetime,
    force: bool = False,
) -> Mission | None:
    """Mark a mission completed and log it for today.

    Normally only the active mission can complete. ``force`` (the PIN-gated
    time warp) accepts any mission that is not already completed.
    """
    mission = state.find_mission(mission_id)
    if mission is None or mission.status == MissionStatus.COMPLETED:
        return None
    if not force and mission.status != MissionStatus.ACTIVE:
        logger.debug("Mission %s is not active, not completing", mission_id)
        return None

    mission.status = MissionStatus.COMPLETED
    mission.completed_at = now
    state.mission_logs.append(MissionLog(date=today_str(now), title=mission.title))
    logger.info(
        "Completed mission %s (%r)%s",
        mission.id,
        mission.title,
        " via time warp" if force else "",
    )
    return mission


def reset_daily_status(state: AppState, today: str) -> bool:
    """Make every mission available again on the first load of a new day.

    Returns True if a reset happened.
    """
    if state.last_reset_date == today:
        return False

    logger.info("New day detected (%s), resetting %d missions", today, len(state.missions))
    for mission in state.missions:
        mission.status = MissionStatus.PENDING
    state.last_reset_date = today
    return True
