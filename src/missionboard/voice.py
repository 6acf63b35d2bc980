"""Encouragement phrases and the speech/summary capability boundary."""

import logging
import random
from typing import Protocol

logger = logging.getLogger(__name__)

ENCOURAGING_PHRASES = (
    "Amazing! You did it!",
    "Great job! That was awesome!",
    "You're the best today! ✨",
    "Wow, mission clear! 🏆",
    "I knew you could do it!",
    "Your effort is wonderful! 💖",
    "Awesome! On to the next one! 🚀",
)
BONUS_PHRASE = "You got a bonus sticker! Fantastic!"
DEFAULT_MESSAGE = "Hello! Shall we start today's missions?"


class Speaker(Protocol):
    def speak(self, text: str) -> None: ...


class Summarizer(Protocol):
    def summarize(self, child_name: str, mission_counts: dict[str, int]) -> str: ...


class LogSpeaker:
    """Speaker that writes phrases to the log instead of playing audio."""

    def speak(self, text: str) -> None:
        logger.info("Speaking: %s", text)


class TemplateSummarizer:
    """Offline summary: praises the most completed mission."""

    def summarize(self, child_name: str, mission_counts: dict[str, int]) -> str:
        if not mission_counts:
            return f"Let's start a mission, {child_name}!"
        title, count = max(mission_counts.items(), key=lambda item: item[1])
        return f"{child_name} did {title} {count}x!"


def encouraging_phrase(mission_id: str) -> str:
    """Stable phrase for a completed mission, chosen from its id."""
    index = sum(ord(char) for char in mission_id) % len(ENCOURAGING_PHRASES)
    return ENCOURAGING_PHRASES[index]


def random_phrase() -> str:
    return random.choice(ENCOURAGING_PHRASES)


def speak_safely(speaker: Speaker | None, text: str) -> bool:
    """Speak a phrase. Returns True if the speaker accepted it."""
    if speaker is None:
        return False
    try:
        speaker.speak(text)
        return True
    except Exception:
        logger.exception("Failed to speak phrase")
        return False


def refresh_summary(
    summarizer: Summarizer | None,
    child_name: str,
    mission_counts: dict[str, int],
    previous: str,
) -> str:
    """Ask for a new summary line, keeping ``previous`` if that fails."""
    if summarizer is None or not child_name.strip():
        return previous
    try:
        message = summarizer.summarize(child_name, mission_counts).strip()
    except Exception:
        logger.exception("Failed to generate summary message")
        return previous
    return message or previous
