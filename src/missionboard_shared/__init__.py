from .models import (
    ArchiveEntry,
    ChildProfile,
    Mission,
    MissionLog,
    MissionPreset,
    MissionStatus,
    MissionTemplate,
    RewardConfig,
    RewardStep,
    RewardType,
    StickerDay,
    StickerType,
)

__all__ = [
    "ArchiveEntry",
    "ChildProfile",
    "Mission",
    "MissionLog",
    "MissionPreset",
    "MissionStatus",
    "MissionTemplate",
    "RewardConfig",
    "RewardStep",
    "RewardType",
    "StickerDay",
    "StickerType",
]
