"""Tests for reward tier evaluation."""

import pytest

from missionboard_shared import RewardConfig, RewardStep, RewardType
from missionboard.rewards import (
    NOT_CONFIGURED,
    add_step,
    current_reward,
    format_currency,
    remove_step,
    set_reward_type,
    tier_progress,
    update_step,
)


def _config(reward_type: RewardType, *steps: tuple[int, str]) -> RewardConfig:
    return RewardConfig(
        type=reward_type,
        steps=[RewardStep(stickers_threshold=t, reward_text=text) for t, text in steps],
    )


class TestCurrentReward:
    def test_not_configured_without_steps(self) -> None:
        assert current_reward(10, RewardConfig()) == NOT_CONFIGURED

    @pytest.mark.parametrize(
        ("total", "expected"),
        [(0, "A"), (4, "A"), (5, "B"), (12, "C")],
    )
    def test_highest_reached_tier(self, total: int, expected: str) -> None:
        config = _config(RewardType.TEXT, (0, "A"), (5, "B"), (10, "C"))
        assert current_reward(total, config) == expected

    def test_unsorted_steps(self) -> None:
        config = _config(RewardType.TEXT, (10, "C"), (0, "A"), (5, "B"))
        assert current_reward(7, config) == "B"

    def test_below_every_threshold_shows_lowest_tier(self) -> None:
        config = _config(RewardType.TEXT, (10, "Bike"), (3, "Ice cream"))
        assert current_reward(0, config) == "Ice cream"

    def test_currency_formatting(self) -> None:
        config = _config(RewardType.CURRENCY, (0, "500"), (5, "10000"))
        assert current_reward(1, config) == "₩500"
        assert current_reward(6, config) == "₩10,000"

    def test_non_numeric_currency_is_shown_raw(self) -> None:
        config = _config(RewardType.CURRENCY, (0, "Lego set"))
        assert current_reward(3, config) == "Lego set"


class TestFormatCurrency:
    def test_integer(self) -> None:
        assert format_currency("1234567") == "₩1,234,567"

    def test_decimal(self) -> None:
        assert format_currency("1500.5") == "₩1,500.5"

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "12 apples", "1e5000"])
    def test_invalid_returns_text(self, text: str) -> None:
        assert format_currency(text) == text


class TestTierProgress:
    def test_achieved_flags(self) -> None:
        config = _config(RewardType.TEXT, (0, "A"), (5, "B"), (10, "C"))
        flags = [t.achieved for t in tier_progress(5, config)]
        assert flags == [True, True, False]


class TestEditing:
    def test_add_keeps_steps_sorted(self) -> None:
        config = RewardConfig()
        add_step(config, 10, "C")
        add_step(config, 0, "A")
        add_step(config, 5, "B")
        assert [s.stickers_threshold for s in config.steps] == [0, 5, 10]

    def test_capped_at_five_steps(self) -> None:
        config = RewardConfig()
        for threshold in range(5):
            assert add_step(config, threshold, str(threshold))
        assert not add_step(config, 99, "too many")
        assert len(config.steps) == 5

    def test_negative_threshold_rejected(self) -> None:
        config = RewardConfig()
        assert not add_step(config, -1, "x")
        add_step(config, 1, "x")
        assert not update_step(config, 0, stickers_threshold=-3)

    def test_update_and_remove(self) -> None:
        config = _config(RewardType.TEXT, (0, "A"), (5, "B"))
        assert update_step(config, 1, reward_text="Bike")
        assert config.steps[1].reward_text == "Bike"
        assert not update_step(config, 7, reward_text="nope")

        assert remove_step(config, 0)
        assert [s.reward_text for s in config.steps] == ["Bike"]
        assert not remove_step(config, 3)

    def test_threshold_update_keeps_steps_sorted(self) -> None:
        config = _config(RewardType.TEXT, (0, "A"), (5, "B"))
        assert update_step(config, 0, stickers_threshold=10)

        assert [s.stickers_threshold for s in config.steps] == [5, 10]
        assert [s.reward_text for s in config.steps] == ["B", "A"]
        assert [t.step.reward_text for t in tier_progress(7, config)] == ["B", "A"]

    def test_set_type(self) -> None:
        config = RewardConfig()
        assert set_reward_type(config, RewardType.TEXT)
        assert not set_reward_type(config, RewardType.TEXT)
        assert config.type == RewardType.TEXT
