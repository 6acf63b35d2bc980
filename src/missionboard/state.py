"""Application state owned by a Mission Board session."""

from dataclasses import dataclass, field

from missionboard_shared import (
    ArchiveEntry,
    ChildProfile,
    Mission,
    MissionLog,
    MissionPreset,
    MissionStatus,
    RewardConfig,
    StickerDay,
)
from missionboard_shared.models import DEFAULT_PIN


@dataclass
class AppState:
    """Mutable domain state. Component functions take it by reference."""

    missions: list[Mission] = field(default_factory=list)
    stickers: list[StickerDay] = field(default_factory=list)
    bonus_stickers: int = 0
    archives: list[ArchiveEntry] = field(default_factory=list)
    current_month_id: str = ""
    last_reset_date: str = ""
    presets: list[MissionPreset] = field(default_factory=list)
    reward_config: RewardConfig = field(default_factory=RewardConfig)
    profile: ChildProfile = field(default_factory=ChildProfile)
    mission_logs: list[MissionLog] = field(default_factory=list)
    pin: str = DEFAULT_PIN

    def find_mission(self, mission_id: str) -> Mission | None:
        return next((m for m in self.missions if m.id == mission_id), None)

    @property
    def active_mission(self) -> Mission | None:
        """The single mission currently running, if any."""
        return next((m for m in self.missions if m.status == MissionStatus.ACTIVE), None)

    @property
    def pending_missions(self) -> list[Mission]:
        return [m for m in self.missions if m.status == MissionStatus.PENDING]

    @property
    def total_stickers(self) -> int:
        return sum(s.count for s in self.stickers)
