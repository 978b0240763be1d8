"""
Mission definition validation.

Runs before anything is written: reward range for the difficulty, display
emoji, title, description and category. Every failure raises
`ValidationError` naming the field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import regex

from starship.core.config.config import Config
from starship.core.validation.input_validator import InputValidator
from starship.database.models.enums import Difficulty, MissionCategory
from starship.modules.mission.rewards import RewardPolicy, parse_difficulty
from starship.modules.mission.schemas import MissionDraft
from starship.modules.shared.exceptions import ValidationError

EMOJI_MAX_LENGTH = 10

# Pictographs plus the joiners, variation selectors and tag characters that
# compose multi-codepoint emoji (ZWJ sequences, flags, skin tones), and
# keycaps: a digit, "#" or "*", an optional VS16, then U+20E3.
_KEYCAP = r"[0-9#*]\ufe0f?\u20e3"
_EMOJI_SEQUENCE = regex.compile(
    r"^(?:"
    + _KEYCAP
    + r"|[\p{Emoji_Presentation}\p{Extended_Pictographic}\u200d\ufe0f\U000E0020-\U000E007F]"
    + r")+$"
)
_PICTOGRAPH = regex.compile(
    r"[\p{Emoji_Presentation}\p{Extended_Pictographic}]|" + _KEYCAP
)


def validate_emoji(glyph: Any) -> bool:
    """
    True if `glyph` is 1-10 characters made only of emoji codepoints.

    Length counts Unicode codepoints.
    """
    if not isinstance(glyph, str):
        return False
    if not 1 <= len(glyph) <= EMOJI_MAX_LENGTH:
        return False
    return bool(_EMOJI_SEQUENCE.match(glyph)) and bool(_PICTOGRAPH.search(glyph))


def parse_category(value: Union[MissionCategory, str]) -> MissionCategory:
    if isinstance(value, MissionCategory):
        return value
    choice = InputValidator.validate_choice(
        value, "category", [c.value for c in MissionCategory]
    )
    return MissionCategory(choice)


@dataclass(frozen=True)
class ValidatedMission:
    """Normalized mission fields, ready to persist."""

    title: str
    description: str
    xp_reward: int
    coin_reward: int
    category: MissionCategory
    emoji: str
    is_daily: bool
    difficulty: Difficulty


class MissionValidator:
    """
    Validates mission definitions on create and update.

    Args:
        reward_policy: Difficulty reward ranges
        title_max_length: Maximum trimmed title length
        description_max_length: Maximum description length
    """

    def __init__(
        self,
        reward_policy: RewardPolicy,
        title_max_length: int = 100,
        description_max_length: int = 500,
    ) -> None:
        self.reward_policy = reward_policy
        self.title_max_length = title_max_length
        self.description_max_length = description_max_length

    @classmethod
    def from_config(cls, reward_policy: RewardPolicy, config: Any = Config) -> "MissionValidator":
        return cls(
            reward_policy,
            title_max_length=config.MISSION_TITLE_MAX_LENGTH,
            description_max_length=config.MISSION_DESCRIPTION_MAX_LENGTH,
        )

    def validate_title(self, title: Any) -> str:
        trimmed = InputValidator.validate_string(
            title, "title", max_length=self.title_max_length
        )
        if not trimmed:
            raise ValidationError("title", "Mission title cannot be empty")
        return trimmed

    def validate_description(self, description: Any) -> str:
        return InputValidator.validate_string(
            description,
            "description",
            min_length=1,
            max_length=self.description_max_length,
        )

    def validate_emoji(self, emoji: Any) -> str:
        if not validate_emoji(emoji):
            raise ValidationError(
                "emoji",
                f"Must be 1-{EMOJI_MAX_LENGTH} emoji characters, got {emoji!r}",
            )
        return emoji

    def validate_rewards(
        self, difficulty: Union[Difficulty, str], xp_reward: Any, coin_reward: Any
    ) -> tuple:
        level = parse_difficulty(difficulty)
        xp = InputValidator.validate_integer(xp_reward, "xp_reward")
        coins = InputValidator.validate_integer(coin_reward, "coin_reward")
        # The difficulty range is the only bound, so its message names it
        violation = self.reward_policy.describe_violation(level, xp, coins)
        if violation is not None:
            raise ValidationError("rewards", violation)
        return level, xp, coins

    def validate_draft(self, draft: MissionDraft) -> ValidatedMission:
        """
        Validate every field of a new (or merged updated) mission.

        Raises:
            ValidationError: On the first field that fails
        """
        title = self.validate_title(draft.title)
        description = self.validate_description(draft.description)
        category = parse_category(draft.category)
        emoji = self.validate_emoji(draft.emoji)
        if not isinstance(draft.is_daily, bool):
            raise ValidationError("is_daily", f"Must be a boolean, got {draft.is_daily!r}")
        difficulty, xp, coins = self.validate_rewards(
            draft.difficulty, draft.xp_reward, draft.coin_reward
        )
        return ValidatedMission(
            title=title,
            description=description,
            xp_reward=xp,
            coin_reward=coins,
            category=category,
            emoji=emoji,
            is_daily=draft.is_daily,
            difficulty=difficulty,
        )
