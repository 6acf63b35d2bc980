"""Named mission sets that can be saved and loaded back."""

import logging
from datetime import datetime

from missionboard_shared import Mission, MissionPreset, MissionTemplate

from .missions import new_id
from .state import AppState

logger = logging.getLogger(__name__)


def save_preset(state: AppState, name: str) -> MissionPreset | None:
    """Snapshot the current missions as templates under ``name``."""
    name = name.strip()
    if not name:
        return None

    preset = MissionPreset(
        id=new_id(),
        name=name,
        missions=[
            MissionTemplate(
                title=m.title,
                duration_minutes=m.duration_minutes,
                reward=m.reward,
            )
            for m in state.missions
        ],
    )
    state.presets.append(preset)
    logger.info("Saved preset %r with %d missions", name, len(preset.missions))
    return preset


def load_preset(state: AppState, preset: MissionPreset, now: datetime) -> list[Mission]:
    """Replace every mission with fresh pending copies of the templates."""
    state.missions = [
        Mission(
            id=new_id(),
            title=t.title,
            duration_minutes=t.duration_minutes,
            reward=t.reward,
            created_at=now,
        )
        for t in preset.missions
    ]
    logger.info("Loaded preset %r (%d missions)", preset.name, len(state.missions))
    return state.missions


def find_preset(state: AppState, preset_id: str) -> MissionPreset | None:
    return next((p for p in state.presets if p.id == preset_id), None)


def delete_preset(state: AppState, preset_id: str) -> bool:
    preset = find_preset(state, preset_id)
    if preset is None:
        return False
    state.presets.remove(preset)
    return True
