"""PIN keypad state machine.

Gates parent mode and the time warp behind the stored PIN, and runs the
PIN change wizard:

    idle -> entering_unlock -> idle                          (unlock)
    idle -> awaiting_current -> awaiting_new -> verifying_new -> confirmed -> idle

The pad never stores the PIN itself. Callers pass the stored PIN to
``press`` and persist ``PinEvent.new_pin`` when a change is confirmed.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

from missionboard_shared.models import PIN_LENGTH

logger = logging.getLogger(__name__)

# How long a failed unlock attempt stays on screen before the UI clears it.
FAILED_PIN_DISPLAY_SECONDS = 0.5


class PinState(StrEnum):
    IDLE = "idle"
    ENTERING_UNLOCK = "entering_unlock"
    AWAITING_CURRENT = "awaiting_current"
    AWAITING_NEW = "awaiting_new"
    VERIFYING_NEW = "verifying_new"
    CONFIRMED = "confirmed"


class UnlockTarget(StrEnum):
    PARENT = "parent"
    TIME_WARP = "time_warp"


class PinOutcome(StrEnum):
    IGNORED = "ignored"
    DIGIT = "digit"
    UNLOCKED = "unlocked"
    MISMATCH = "mismatch"
    ADVANCED = "advanced"
    CHANGED = "changed"


@dataclass(frozen=True)
class PinEvent:
    outcome: PinOutcome
    target: UnlockTarget | None = None
    new_pin: str | None = None


@dataclass
class PinPad:
    state: PinState = PinState.IDLE
    buffer: str = ""
    target: UnlockTarget | None = None
    candidate: str | None = None
    clear_pending: bool = False

    @property
    def is_idle(self) -> bool:
        return self.state in (PinState.IDLE, PinState.CONFIRMED)

    def begin_unlock(self, target: UnlockTarget) -> bool:
        if not self.is_idle:
            return False
        self._reset(PinState.ENTERING_UNLOCK)
        self.target = target
        return True

    def begin_change(self) -> bool:
        if not self.is_idle:
            return False
        self._reset(PinState.AWAITING_CURRENT)
        return True

    def cancel(self) -> None:
        """Back out of any entry, dropping the buffer and any new PIN."""
        if self.state != PinState.IDLE:
            logger.debug("PIN entry cancelled from %s", self.state)
        self._reset(PinState.IDLE)

    def acknowledge(self) -> None:
        """Leave the confirmed state once the UI has shown it."""
        if self.state == PinState.CONFIRMED:
            self._reset(PinState.IDLE)

    def clear_buffer(self) -> None:
        self.buffer = ""
        self.clear_pending = False

    def clear_failed_attempt(self) -> None:
        """Called by the UI after FAILED_PIN_DISPLAY_SECONDS."""
        if self.clear_pending:
            self.clear_buffer()

    def press(self, digit: str, stored_pin: str) -> PinEvent:
        if self.is_idle or len(digit) != 1 or not digit.isdigit():
            return PinEvent(PinOutcome.IGNORED)

        if self.clear_pending:
            self.clear_buffer()
        self.buffer += digit
        if len(self.buffer) < PIN_LENGTH:
            return PinEvent(PinOutcome.DIGIT)

        entered = self.buffer
        if self.state == PinState.ENTERING_UNLOCK:
            return self._check_unlock(entered, stored_pin)
        if self.state == PinState.AWAITING_CURRENT:
            return self._check_current(entered, stored_pin)
        if self.state == PinState.AWAITING_NEW:
            self.candidate = entered
            self.state = PinState.VERIFYING_NEW
            self.buffer = ""
            return PinEvent(PinOutcome.ADVANCED)
        return self._check_verify(entered)

    def _check_unlock(self, entered: str, stored_pin: str) -> PinEvent:
        if entered != stored_pin:
            logger.info("Wrong PIN entered for %s", self.target)
            # Keep the failed digits visible until the UI clears them.
            self.clear_pending = True
            return PinEvent(PinOutcome.MISMATCH, target=self.target)

        target = self.target
        self._reset(PinState.IDLE)
        logger.info("PIN accepted for %s", target)
        return PinEvent(PinOutcome.UNLOCKED, target=target)

    def _check_current(self, entered: str, stored_pin: str) -> PinEvent:
        self.buffer = ""
        if entered != stored_pin:
            logger.info("Current PIN did not match during PIN change")
            return PinEvent(PinOutcome.MISMATCH)
        self.state = PinState.AWAITING_NEW
        return PinEvent(PinOutcome.ADVANCED)

    def _check_verify(self, entered: str) -> PinEvent:
        candidate = self.candidate
        self.buffer = ""
        self.candidate = None
        if entered != candidate:
            logger.info("New PIN confirmation did not match")
            self.state = PinState.AWAITING_NEW
            return PinEvent(PinOutcome.MISMATCH)
        self.state = PinState.CONFIRMED
        logger.info("PIN changed")
        return PinEvent(PinOutcome.CHANGED, new_pin=entered)

    def _reset(self, state: PinState) -> None:
        self.state = state
        self.buffer = ""
        self.target = None
        self.candidate = None
        self.clear_pending = False
