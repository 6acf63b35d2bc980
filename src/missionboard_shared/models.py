"""Persisted data models for Mission Board.

These models define the schema for every value kept in the key-value store.
Field names are snake_case here and camelCase in stored documents.
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PIN = "1234"
PIN_LENGTH = 4
MAX_REWARD_STEPS = 5

Pin = Annotated[str, Field(pattern=rf"^\d{{{PIN_LENGTH}}}$")]
BonusBalance = Annotated[int, Field(ge=0)]


class MissionStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


class StickerType(StrEnum):
    STAR = "star"
    HEART = "heart"
    ROCKET = "rocket"
    CROWN = "crown"
    MEDAL = "medal"


class RewardType(StrEnum):
    CURRENCY = "currency"
    TEXT = "text"


class Mission(BaseModel):
    """Store: missions[]

    A timed task with a reward. Only the mission lifecycle functions change it.
    """

    id: str
    title: str
    duration_minutes: Annotated[int, Field(gt=0)]
    reward: str
    status: MissionStatus = MissionStatus.PENDING
    created_at: datetime
    completed_at: datetime | None = None


class MissionTemplate(BaseModel):
    """A mission without identity or status, as kept inside a preset."""

    model_config = ConfigDict(frozen=True)

    title: str
    duration_minutes: Annotated[int, Field(gt=0)]
    reward: str


class MissionPreset(BaseModel):
    """Store: presets[]"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    missions: list[MissionTemplate] = Field(default_factory=list)


class StickerDay(BaseModel):
    """Store: stickers[]

    At most one entry per date. Never changed after creation.
    """

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    count: Annotated[int, Field(ge=0)] = 1
    is_bonus_used: bool | None = None
    sticker_type: StickerType | None = None


class RewardStep(BaseModel):
    stickers_threshold: Annotated[int, Field(ge=0)] = 0
    reward_text: str = ""


class RewardConfig(BaseModel):
    """Store: reward-config"""

    type: RewardType = RewardType.CURRENCY
    steps: Annotated[list[RewardStep], Field(max_length=MAX_REWARD_STEPS)] = Field(
        default_factory=list
    )


class ArchiveEntry(BaseModel):
    """Store: archives[]

    Snapshot of a finished month's sticker board, newest first in the list.
    """

    model_config = ConfigDict(frozen=True)

    month_id: str  # YYYY-MM
    stickers: tuple[StickerDay, ...] = ()
    total_stickers: Annotated[int, Field(ge=0)] = 0
    archived_at: datetime


class ChildProfile(BaseModel):
    """Store: profile"""

    name: str = ""
    photo: str | None = None  # opaque data reference, e.g. a data: URL


class MissionLog(BaseModel):
    """Store: mission-logs[]

    One entry per completed mission, used for monthly statistics.
    """

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    title: str
