"""Reward tier evaluation and reward configuration editing."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from missionboard_shared import RewardConfig, RewardStep, RewardType
from missionboard_shared.models import MAX_REWARD_STEPS

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "not configured"
CURRENCY_SYMBOL = "₩"


@dataclass(frozen=True)
class TierStatus:
    step: RewardStep
    achieved: bool


def format_currency(text: str) -> str:
    """Format a numeric reward as currency, or return the text unchanged."""
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        return text
    if not amount.is_finite():
        return text
    try:
        if amount == amount.to_integral_value():
            return f"{CURRENCY_SYMBOL}{int(amount):,}"
        return f"{CURRENCY_SYMBOL}{amount:,}"
    except ValueError:
        # Exponents too large to render as digits
        return text


def current_reward(total_stickers: int, config: RewardConfig) -> str:
    """Reward text for the highest tier reached.

    Below every threshold the lowest tier is still shown, so the child always
    sees the first goal.
    """
    if not config.steps:
        return NOT_CONFIGURED

    ordered = sorted(config.steps, key=lambda s: s.stickers_threshold, reverse=True)
    reached = next((s for s in ordered if s.stickers_threshold <= total_stickers), ordered[-1])

    if config.type == RewardType.CURRENCY:
        return format_currency(reached.reward_text)
    return reached.reward_text


def tier_progress(total_stickers: int, config: RewardConfig) -> list[TierStatus]:
    return [
        TierStatus(step=step, achieved=total_stickers >= step.stickers_threshold)
        for step in config.steps
    ]


def _sort_steps(config: RewardConfig) -> None:
    config.steps.sort(key=lambda s: s.stickers_threshold)


def add_step(config: RewardConfig, stickers_threshold: int = 0, reward_text: str = "") -> bool:
    if len(config.steps) >= MAX_REWARD_STEPS:
        logger.warning("Reward config already has %d steps", MAX_REWARD_STEPS)
        return False
    if stickers_threshold < 0:
        return False
    config.steps.append(RewardStep(stickers_threshold=stickers_threshold, reward_text=reward_text))
    _sort_steps(config)
    return True


def update_step(
    config: RewardConfig,
    index: int,
    stickers_threshold: int | None = None,
    reward_text: str | None = None,
) -> bool:
    if not 0 <= index < len(config.steps):
        return False
    if stickers_threshold is not None and stickers_threshold < 0:
        return False

    step = config.steps[index]
    if stickers_threshold is not None:
        step.stickers_threshold = stickers_threshold
    if reward_text is not None:
        step.reward_text = reward_text
    _sort_steps(config)
    return True


def remove_step(config: RewardConfig, index: int) -> bool:
    if not 0 <= index < len(config.steps):
        return False
    del config.steps[index]
    return True


def set_reward_type(config: RewardConfig, reward_type: RewardType) -> bool:
    if config.type == reward_type:
        return False
    config.type = reward_type
    return True
