"""Countdown for the active mission, driven by one-second ticks."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Countdown:
    """Cancellable countdown. ``tick`` is called once per elapsed second."""

    duration_seconds: int
    on_complete: Callable[[], None] | None = None
    remaining_seconds: int = field(init=False)
    running: bool = field(default=False, init=False)
    cancelled: bool = field(default=False, init=False)
    finished: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.remaining_seconds = max(0, self.duration_seconds)

    @classmethod
    def for_minutes(
        cls, minutes: int, on_complete: Callable[[], None] | None = None
    ) -> "Countdown":
        return cls(duration_seconds=minutes * 60, on_complete=on_complete)

    @property
    def done(self) -> bool:
        return self.finished or self.cancelled

    @property
    def progress(self) -> float:
        """Fraction of the time still left, 1.0 at start."""
        if self.duration_seconds <= 0:
            return 0.0
        return self.remaining_seconds / self.duration_seconds

    def start(self) -> None:
        if self.done:
            return
        self.running = True
        if self.remaining_seconds == 0:
            self._finish()

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        if not self.done:
            self.running = True

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.resume()

    def cancel(self) -> None:
        self.running = False
        self.cancelled = True

    def tick(self) -> None:
        if not self.running or self.done:
            return
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self._finish()

    def _finish(self) -> None:
        self.running = False
        self.finished = True
        logger.debug("Countdown of %ds finished", self.duration_seconds)
        if self.on_complete is not None:
            self.on_complete()


def format_remaining(seconds: int) -> str:
    """Render seconds as M:SS."""
    seconds = max(0, seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


def run_countdown(
    countdown: Countdown,
    interval_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    on_tick: Callable[[Countdown], None] | None = None,
) -> bool:
    """Drive a countdown until it finishes or is cancelled.

    Returns True if it ran to zero.
    """
    countdown.start()
    try:
        while not countdown.done:
            sleep(interval_seconds)
            countdown.tick()
            if on_tick:
                on_tick(countdown)
    except KeyboardInterrupt:
        logger.info("Countdown interrupted with %ds left", countdown.remaining_seconds)
        countdown.cancel()
    return countdown.finished
