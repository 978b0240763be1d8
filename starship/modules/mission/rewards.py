"""
Mission Reward Policy

Static per-difficulty reward table plus the range check used when a mission
is defined. Rewards are a property of the mission fixed at creation; they are
never re-checked when the mission is completed.

    EASY     XP 10-50    coins 5-20    recommended 25 / 10
    MEDIUM   XP 50-100   coins 20-50   recommended 75 / 30
    HARD     XP 150-500  coins 50-200  recommended 200 / 100
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Union

from starship.database.models.enums import Difficulty
from starship.modules.shared.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class RewardAmount:
    xp: int
    coins: int


@dataclass(frozen=True, slots=True)
class DifficultyRewardRange:
    min: RewardAmount
    max: RewardAmount
    recommended: RewardAmount

    def xp_in_range(self, xp: int) -> bool:
        return self.min.xp <= xp <= self.max.xp

    def coins_in_range(self, coins: int) -> bool:
        return self.min.coins <= coins <= self.max.coins


DEFAULT_REWARD_TABLE: Mapping[Difficulty, DifficultyRewardRange] = {
    Difficulty.EASY: DifficultyRewardRange(
        min=RewardAmount(xp=10, coins=5),
        max=RewardAmount(xp=50, coins=20),
        recommended=RewardAmount(xp=25, coins=10),
    ),
    Difficulty.MEDIUM: DifficultyRewardRange(
        min=RewardAmount(xp=50, coins=20),
        max=RewardAmount(xp=100, coins=50),
        recommended=RewardAmount(xp=75, coins=30),
    ),
    Difficulty.HARD: DifficultyRewardRange(
        min=RewardAmount(xp=150, coins=50),
        max=RewardAmount(xp=500, coins=200),
        recommended=RewardAmount(xp=200, coins=100),
    ),
}


def parse_difficulty(value: Union[Difficulty, str]) -> Difficulty:
    """
    Accept a `Difficulty` or its name in any case.

    Raises:
        ValidationError: For anything else
    """
    if isinstance(value, Difficulty):
        return value
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().upper())
        except ValueError:
            pass
    valid = ", ".join(d.value for d in Difficulty)
    raise ValidationError(
        "difficulty", f"Invalid difficulty '{value}'. Must be one of: {valid}"
    )


class RewardPolicy:
    """
    Range validation over a difficulty reward table.

    Args:
        table: Mapping of every `Difficulty` to its reward range
    """

    def __init__(
        self, table: Mapping[Difficulty, DifficultyRewardRange] = DEFAULT_REWARD_TABLE
    ) -> None:
        self._table: Dict[Difficulty, DifficultyRewardRange] = dict(table)

    def reward_range(self, difficulty: Union[Difficulty, str]) -> DifficultyRewardRange:
        return self._table[parse_difficulty(difficulty)]

    def recommended_rewards(self, difficulty: Union[Difficulty, str]) -> RewardAmount:
        return self.reward_range(difficulty).recommended

    def validate_reward(
        self, difficulty: Union[Difficulty, str], xp_reward: int, coin_reward: int
    ) -> bool:
        """True iff both amounts lie inside the difficulty's inclusive range."""
        rng = self.reward_range(difficulty)
        return rng.xp_in_range(xp_reward) and rng.coins_in_range(coin_reward)

    def describe_violation(
        self, difficulty: Union[Difficulty, str], xp_reward: int, coin_reward: int
    ) -> Optional[str]:
        """
        None when the rewards are valid, otherwise a message naming the
        difficulty, the offending amount(s) and the accepted range.
        """
        level = parse_difficulty(difficulty)
        rng = self._table[level]
        xp_ok = rng.xp_in_range(xp_reward)
        coins_ok = rng.coins_in_range(coin_reward)

        if not xp_ok and not coins_ok:
            return (
                f"For {level.value} difficulty: "
                f"XP must be {rng.min.xp}-{rng.max.xp}, "
                f"coins must be {rng.min.coins}-{rng.max.coins}"
            )
        if not xp_ok:
            return (
                f"For {level.value} difficulty: "
                f"XP must be between {rng.min.xp}-{rng.max.xp}"
            )
        if not coins_ok:
            return (
                f"For {level.value} difficulty: "
                f"Coins must be between {rng.min.coins}-{rng.max.coins}"
            )
        return None
