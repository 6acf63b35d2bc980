"""Mission Board session: owns the state and commits every change."""

import logging
from datetime import datetime
from enum import StrEnum

from missionboard_shared import (
    ArchiveEntry,
    ChildProfile,
    Mission,
    MissionPreset,
    RewardType,
    StickerDay,
    StickerType,
)
from missionboard_shared.documents import StoreKey
from missionboard_shared.models import DEFAULT_PIN

from . import archive, missions, presets, rewards, stickers, stats
from .dates import Clock
from .pin import PinEvent, PinOutcome, PinPad, PinState, UnlockTarget
from .store import KeyValueStore, StateRepository
from .timer import Countdown
from .voice import (
    BONUS_PHRASE,
    DEFAULT_MESSAGE,
    Speaker,
    Summarizer,
    random_phrase,
    refresh_summary,
    speak_safely,
)

logger = logging.getLogger(__name__)


class AppMode(StrEnum):
    CHILD = "child"
    PARENT = "parent"
    AUTH = "auth"
    TIME_WARP_AUTH = "time_warp_auth"
    ARCHIVES = "archives"


class MissionBoardApp:
    """One running session over a single local store.

    Domain functions change ``self.state``; each public method then commits
    the keys it touched. Speech and summaries run only after the commit.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock | None = None,
        speaker: Speaker | None = None,
        summarizer: Summarizer | None = None,
        default_pin: str = DEFAULT_PIN,
    ):
        self.repo = StateRepository(store)
        self.clock = clock or Clock()
        self.speaker = speaker
        self.summarizer = summarizer
        self.pin_pad = PinPad()
        self.mode = AppMode.CHILD
        self.message = DEFAULT_MESSAGE
        self.countdown: Countdown | None = None
        self.state = self.repo.load()
        self._on_load(default_pin)

    def _on_load(self, default_pin: str) -> None:
        if not self.repo.exists(StoreKey.PIN):
            self.state.pin = default_pin

        if not self.state.current_month_id:
            self.state.current_month_id = self.clock.month_id()
            self.repo.commit(self.state, StoreKey.CURRENT_MONTH_ID)

        if missions.reset_daily_status(self.state, self.clock.today()):
            self.repo.commit(self.state, StoreKey.MISSIONS, StoreKey.LAST_RESET_DATE)

        if self.state.mission_logs:
            self.refresh_message()

    def _commit(self, *keys: StoreKey) -> None:
        self.repo.commit(self.state, *keys)

    def _now(self) -> datetime:
        return self.clock.now()

    def _require_parent(self, action: str) -> bool:
        if self.mode != AppMode.PARENT:
            logger.warning("Ignoring %s outside parent mode", action)
            return False
        return True

    # -- profile ---------------------------------------------------------

    @property
    def needs_onboarding(self) -> bool:
        return not self.state.profile.name.strip()

    def set_profile(self, name: str, photo: str | None = None) -> bool:
        """Set the child's name and photo. Allowed at onboarding or in parent mode."""
        if not (self.needs_onboarding or self.mode == AppMode.PARENT):
            logger.warning("Ignoring profile change outside parent mode")
            return False
        name = name.strip()
        if not name:
            return False
        self.state.profile = ChildProfile(
            name=name,
            photo=photo if photo is not None else self.state.profile.photo,
        )
        self._commit(StoreKey.PROFILE)
        return True

    # -- missions --------------------------------------------------------

    @property
    def active_mission(self) -> Mission | None:
        return self.state.active_mission

    def add_mission(self, title: str, duration_minutes: int, reward: str) -> Mission | None:
        if not self._require_parent("add mission"):
            return None
        mission = missions.add_mission(self.state, title, duration_minutes, reward, self._now())
        if mission is not None:
            self._commit(StoreKey.MISSIONS)
        return mission

    def delete_mission(self, mission_id: str) -> bool:
        if not self._require_parent("delete mission"):
            return False
        was_active = self.active_mission is not None and self.active_mission.id == mission_id
        if not missions.delete_mission(self.state, mission_id):
            return False
        if was_active:
            self._stop_countdown()
        self._commit(StoreKey.MISSIONS)
        return True

    def clear_missions(self) -> bool:
        if not self._require_parent("clear missions"):
            return False
        if not missions.clear_missions(self.state):
            return False
        self._stop_countdown()
        self._commit(StoreKey.MISSIONS)
        return True

    def start_mission(self, mission_id: str) -> Countdown | None:
        """Start a mission and return the countdown the UI should drive."""
        if not missions.start_mission(self.state, mission_id):
            return None
        self._commit(StoreKey.MISSIONS)
        return self.start_countdown()

    def start_countdown(self) -> Countdown | None:
        """(Re)create the countdown for the active mission."""
        mission = self.active_mission
        if mission is None:
            return None
        mission_id = mission.id
        self.countdown = Countdown.for_minutes(
            mission.duration_minutes,
            on_complete=lambda: self.complete_mission(mission_id),
        )
        return self.countdown

    def _stop_countdown(self) -> None:
        if self.countdown is not None:
            self.countdown.cancel()
            self.countdown = None

    def cancel_mission(self, mission_id: str) -> bool:
        if not missions.cancel_mission(self.state, mission_id):
            return False
        self._stop_countdown()
        self._commit(StoreKey.MISSIONS)
        return True

    def complete_mission(self, mission_id: str, force: bool = False) -> Mission | None:
        mission = missions.complete_mission(self.state, mission_id, self._now(), force=force)
        if mission is None:
            return None
        if self.countdown is not None and not self.countdown.finished:
            self.countdown.cancel()
        self.countdown = None
        self._commit(StoreKey.MISSIONS, StoreKey.MISSION_LOGS)
        return mission

    # -- stickers --------------------------------------------------------

    @property
    def can_award(self) -> bool:
        return stickers.can_award(self.state, self.clock.today())

    @property
    def has_sticker_today(self) -> bool:
        return stickers.has_sticker_on(self.state, self.clock.today())

    def award_sticker(self, sticker_type: StickerType) -> StickerDay | None:
        sticker = stickers.award_sticker(self.state, sticker_type, self.clock.today())
        if sticker is None:
            return None
        self._commit(StoreKey.STICKERS)
        speak_safely(self.speaker, random_phrase())
        return sticker

    def use_bonus(self) -> StickerDay | None:
        sticker = stickers.use_bonus(self.state)
        if sticker is None:
            return None
        self._commit(StoreKey.STICKERS, StoreKey.BONUS_BALANCE)
        speak_safely(self.speaker, BONUS_PHRASE)
        return sticker

    def grant_bonus(self, count: int) -> bool:
        if not self._require_parent("grant bonus"):
            return False
        if not stickers.grant_bonus(self.state, count):
            return False
        self._commit(StoreKey.BONUS_BALANCE)
        return True

    def board(self) -> list[stickers.BoardCell]:
        return stickers.month_board(self.state.stickers, self.state.current_month_id)

    # -- rewards ---------------------------------------------------------

    def current_reward(self) -> str:
        return rewards.current_reward(self.state.total_stickers, self.state.reward_config)

    def tier_progress(self) -> list[rewards.TierStatus]:
        return rewards.tier_progress(self.state.total_stickers, self.state.reward_config)

    def add_reward_step(self, stickers_threshold: int = 0, reward_text: str = "") -> bool:
        if not self._require_parent("add reward step"):
            return False
        return self._commit_reward(
            rewards.add_step(self.state.reward_config, stickers_threshold, reward_text)
        )

    def update_reward_step(
        self,
        index: int,
        stickers_threshold: int | None = None,
        reward_text: str | None = None,
    ) -> bool:
        if not self._require_parent("update reward step"):
            return False
        return self._commit_reward(
            rewards.update_step(self.state.reward_config, index, stickers_threshold, reward_text)
        )

    def remove_reward_step(self, index: int) -> bool:
        if not self._require_parent("remove reward step"):
            return False
        return self._commit_reward(rewards.remove_step(self.state.reward_config, index))

    def set_reward_type(self, reward_type: RewardType) -> bool:
        if not self._require_parent("set reward type"):
            return False
        return self._commit_reward(rewards.set_reward_type(self.state.reward_config, reward_type))

    def _commit_reward(self, changed: bool) -> bool:
        if changed:
            self._commit(StoreKey.REWARD_CONFIG)
        return changed

    # -- month rollover --------------------------------------------------

    def rollover(self) -> ArchiveEntry | None:
        if not self._require_parent("month rollover"):
            return None
        entry = archive.rollover(self.state, self._now())
        self._commit(
            StoreKey.ARCHIVES,
            StoreKey.CURRENT_MONTH_ID,
            StoreKey.STICKERS,
            StoreKey.MISSION_LOGS,
        )
        return entry

    # -- presets ---------------------------------------------------------

    def save_preset(self, name: str) -> MissionPreset | None:
        if not self._require_parent("save preset"):
            return None
        preset = presets.save_preset(self.state, name)
        if preset is not None:
            self._commit(StoreKey.PRESETS)
        return preset

    def load_preset(self, preset_id: str) -> list[Mission] | None:
        if not self._require_parent("load preset"):
            return None
        preset = presets.find_preset(self.state, preset_id)
        if preset is None:
            return None
        self._stop_countdown()
        loaded = presets.load_preset(self.state, preset, self._now())
        self._commit(StoreKey.MISSIONS)
        return loaded

    def delete_preset(self, preset_id: str) -> bool:
        if not self._require_parent("delete preset"):
            return False
        if not presets.delete_preset(self.state, preset_id):
            return False
        self._commit(StoreKey.PRESETS)
        return True

    # -- statistics ------------------------------------------------------

    def month_progress(self) -> stats.MonthProgress:
        return stats.month_progress(self.state, self._now())

    def mission_stats(self) -> list[stats.MissionStat]:
        return stats.mission_stats(self.state, self._now())

    def refresh_message(self) -> str:
        counts = stats.mission_counts_this_month(self.state.mission_logs, self._now())
        self.message = refresh_summary(
            self.summarizer, self.state.profile.name, counts, self.message
        )
        return self.message

    # -- modes and PIN ---------------------------------------------------

    def request_parent_mode(self) -> bool:
        if self.mode != AppMode.CHILD or not self.pin_pad.begin_unlock(UnlockTarget.PARENT):
            return False
        self.mode = AppMode.AUTH
        return True

    def request_time_warp(self) -> bool:
        if self.mode != AppMode.CHILD or self.active_mission is None:
            return False
        if not self.pin_pad.begin_unlock(UnlockTarget.TIME_WARP):
            return False
        if self.countdown is not None:
            self.countdown.pause()
        self.mode = AppMode.TIME_WARP_AUTH
        return True

    def begin_pin_change(self) -> bool:
        if not self._require_parent("PIN change"):
            return False
        if not self.pin_pad.begin_change():
            return False
        self.mode = AppMode.AUTH
        return True

    def press_digit(self, digit: str) -> PinEvent:
        event = self.pin_pad.press(digit, self.state.pin)
        if event.outcome == PinOutcome.UNLOCKED:
            self._unlock(event.target)
        elif event.outcome == PinOutcome.CHANGED and event.new_pin is not None:
            self.state.pin = event.new_pin
            self._commit(StoreKey.PIN)
        return event

    def enter_pin(self, pin: str) -> PinEvent:
        """Press every digit of ``pin`` and return the last event."""
        event = PinEvent(PinOutcome.IGNORED)
        for digit in pin:
            event = self.press_digit(digit)
        return event

    def _unlock(self, target: UnlockTarget | None) -> None:
        if target == UnlockTarget.PARENT:
            self.mode = AppMode.PARENT
        elif target == UnlockTarget.TIME_WARP:
            mission = self.active_mission
            if mission is not None:
                self.complete_mission(mission.id, force=True)
            self.mode = AppMode.CHILD

    def clear_failed_pin(self) -> None:
        self.pin_pad.clear_failed_attempt()

    def finish_pin_change(self) -> None:
        if self.pin_pad.state == PinState.CONFIRMED:
            self.pin_pad.acknowledge()
            self.mode = AppMode.PARENT

    def show_archives(self) -> bool:
        if self.mode != AppMode.CHILD:
            return False
        self.mode = AppMode.ARCHIVES
        return True

    def back(self) -> AppMode:
        """Back button: leave the current screen."""
        if self.mode == AppMode.AUTH and not self.pin_pad.is_idle and self.pin_pad.target is None:
            # Leaving the PIN change wizard returns to the parent screen.
            self.pin_pad.cancel()
            self.mode = AppMode.PARENT
        elif self.mode == AppMode.AUTH and self.pin_pad.state == PinState.CONFIRMED:
            self.finish_pin_change()
        else:
            if self.mode == AppMode.TIME_WARP_AUTH and self.countdown is not None:
                self.countdown.resume()
            self.pin_pad.cancel()
            self.mode = AppMode.CHILD
        return self.mode
