"""
Level / Rank Calculator

Purpose
-------
Pure lookups over a level threshold table:

- total XP -> level
- level -> rank
- total XP -> progress within the current level

The calculator is an instance built over a table so services can be handed an
alternate table (tests do this). The default is `DEFAULT_LEVEL_TABLE`.

Terminal Level
--------------
At the highest defined level there is no next threshold. Progress then
plateaus: `max_xp` equals `current_xp`, `progress_percent` is 100 and
`required_for_next` equals the total XP. This is a cap, not an error.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from starship.core.exceptions import ConfigurationError
from starship.modules.progression.level_table import DEFAULT_LEVEL_TABLE, LevelThreshold
from starship.modules.shared.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class LevelProgress:
    level: int
    current_xp: int
    max_xp: int
    required_for_next: int
    progress_percent: float


# (upper bound inclusive, tier, multiplier)
_LEVEL_TIERS = (
    (5, "beginner", 1.0),
    (15, "intermediate", 1.1),
    (25, "advanced", 1.25),
    (40, "expert", 1.5),
)
_TOP_TIER = ("legend", 2.0)


class LevelCalculator:
    """
    Lookups over an ordered level threshold table.

    Args:
        thresholds: Entries sorted by ascending level with strictly increasing
            `required_xp`, the first of which requires 0 XP.

    Raises:
        ConfigurationError: If the table breaks any of those rules.
    """

    def __init__(self, thresholds: Sequence[LevelThreshold] = DEFAULT_LEVEL_TABLE) -> None:
        self._thresholds = tuple(thresholds)
        self._check_table(self._thresholds)

        self._levels: List[int] = [t.level for t in self._thresholds]
        self._required: List[int] = [t.required_xp for t in self._thresholds]
        self._index_by_level: Dict[int, int] = {
            t.level: i for i, t in enumerate(self._thresholds)
        }

    @staticmethod
    def _check_table(thresholds: Sequence[LevelThreshold]) -> None:
        if not thresholds:
            raise ConfigurationError("level_table", "must contain at least one level")
        if thresholds[0].required_xp != 0:
            raise ConfigurationError("level_table", "first level must require 0 XP")
        for prev, cur in zip(thresholds, thresholds[1:]):
            if cur.level <= prev.level or cur.required_xp <= prev.required_xp:
                raise ConfigurationError(
                    "level_table",
                    f"entries must ascend by level and XP (level {cur.level})",
                )

    @property
    def thresholds(self) -> tuple:
        return self._thresholds

    @property
    def max_level(self) -> int:
        return self._levels[-1]

    # ------------------------------------------------------------------
    # Core lookups
    # ------------------------------------------------------------------

    def _index_for_total_xp(self, total_xp: int) -> int:
        if isinstance(total_xp, bool) or not isinstance(total_xp, int):
            raise ValidationError("total_xp", f"must be an integer, got {total_xp!r}")
        if total_xp < 0:
            raise ValidationError("total_xp", f"must be non-negative, got {total_xp}")
        return max(bisect_right(self._required, total_xp) - 1, 0)

    def level_for_total_xp(self, total_xp: int) -> int:
        """Largest level whose required XP is <= `total_xp`."""
        return self._levels[self._index_for_total_xp(total_xp)]

    def rank_for_level(self, level: int) -> str:
        """Rank of the largest entry whose level is <= `level`; first rank if none."""
        idx = bisect_right(self._levels, level) - 1
        if idx < 0:
            return self._thresholds[0].rank
        return self._thresholds[idx].rank

    def level_progress(self, total_xp: int) -> LevelProgress:
        idx = self._index_for_total_xp(total_xp)
        base = self._required[idx]
        current_xp = total_xp - base

        if idx == len(self._thresholds) - 1:
            return LevelProgress(
                level=self._levels[idx],
                current_xp=current_xp,
                max_xp=current_xp,
                required_for_next=total_xp,
                progress_percent=100.0,
            )

        next_required = self._required[idx + 1]
        max_xp = next_required - base
        percent = min(100.0, max(0.0, current_xp / max_xp * 100.0))

        return LevelProgress(
            level=self._levels[idx],
            current_xp=current_xp,
            max_xp=max_xp,
            required_for_next=next_required,
            progress_percent=percent,
        )

    # ------------------------------------------------------------------
    # Informational helpers
    # ------------------------------------------------------------------

    def required_xp_for_level(self, level: int) -> int:
        """Cumulative XP for `level`; 0 for levels not in the table."""
        idx = self._index_by_level.get(level)
        return 0 if idx is None else self._required[idx]

    def xp_needed_for_next_level(self, total_xp: int) -> int:
        """XP still missing to the next threshold; 0 at the terminal level."""
        idx = self._index_for_total_xp(total_xp)
        if idx == len(self._thresholds) - 1:
            return 0
        return self._required[idx + 1] - total_xp

    def next_threshold(self, level: int) -> Optional[LevelThreshold]:
        idx = self._index_by_level.get(level)
        if idx is None or idx + 1 >= len(self._thresholds):
            return None
        return self._thresholds[idx + 1]

    def format_level_display(self, level: int) -> str:
        return f"Level {level} // {self.rank_for_level(level)}"

    @staticmethod
    def level_tier(level: int) -> str:
        for upper, tier, _ in _LEVEL_TIERS:
            if level <= upper:
                return tier
        return _TOP_TIER[0]

    @staticmethod
    def level_multiplier(level: int) -> float:
        """Tier multiplier. Informational; rewards are never scaled by it."""
        for upper, _, multiplier in _LEVEL_TIERS:
            if level <= upper:
                return multiplier
        return _TOP_TIER[1]

