"""
Streak Continuity Rule

Purpose
-------
Decide whether a completion continues a streak or starts a new one.

Day Boundary Policy
-------------------
Continuity is decided on calendar days in a configured timezone
(`STREAK_TIMEZONE`, default UTC), not on elapsed 24h windows:

- no previous completion        -> 1
- same or next calendar day      -> previous + 1
- two or more calendar days gap  -> 1

So 23:00 Monday followed by 01:00 Tuesday continues the streak, and so does
08:00 Monday followed by 22:00 Tuesday (38 hours later). 23:00 Monday
followed by 00:30 Wednesday resets even though only ~25.5 hours passed.

The user-wide aggregate works on the stored `last_streak_date`: several
recurring missions completed on one day count as one streak day.

Streak bonuses are a static milestone table. They are reported through the
streak status read and are not granted automatically.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from starship.core.config.config import Config
from starship.core.database.base import ensure_utc
from starship.core.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class StreakBonus:
    xp: int
    coins: int


@dataclass(frozen=True, slots=True)
class StreakMilestone:
    days: int
    bonus: StreakBonus


DEFAULT_STREAK_MILESTONES: Tuple[StreakMilestone, ...] = (
    StreakMilestone(days=5, bonus=StreakBonus(xp=20, coins=2)),
)


def resolve_timezone(name: str) -> tzinfo:
    """
    Map a zone name to a tzinfo.

    Raises:
        ConfigurationError: If the zone is unknown
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError("STREAK_TIMEZONE", f"unknown timezone '{name}'") from exc


class StreakRule:
    """
    Calendar-day streak continuity plus the streak bonus milestones.

    Args:
        tz: Timezone whose midnight separates streak days
        milestones: Bonus thresholds, any order
    """

    def __init__(
        self,
        tz: tzinfo = timezone.utc,
        milestones: Sequence[StreakMilestone] = DEFAULT_STREAK_MILESTONES,
    ) -> None:
        self.tz = tz
        self._milestones = tuple(sorted(milestones, key=lambda m: m.days))

    @classmethod
    def from_config(cls, config: Any = Config) -> "StreakRule":
        return cls(tz=resolve_timezone(getattr(config, "STREAK_TIMEZONE", "UTC")))

    @property
    def milestones(self) -> Tuple[StreakMilestone, ...]:
        return self._milestones

    # ------------------------------------------------------------------
    # Day arithmetic
    # ------------------------------------------------------------------

    def local_date(self, moment: datetime) -> date:
        """Calendar date of `moment` in the streak timezone (naive = UTC)."""
        return ensure_utc(moment).astimezone(self.tz).date()

    def day_gap(self, earlier: datetime, later: datetime) -> int:
        """Number of calendar-day boundaries between two instants."""
        return (self.local_date(later) - self.local_date(earlier)).days

    # ------------------------------------------------------------------
    # Continuity
    # ------------------------------------------------------------------

    def next_mission_streak(
        self,
        previous_streak: int,
        last_completed: Optional[datetime],
        now: datetime,
    ) -> int:
        """Per-mission streak after a completion at `now`."""
        if last_completed is None:
            return 1
        if self.day_gap(last_completed, now) <= 1:
            return previous_streak + 1
        return 1

    def next_user_streak(
        self,
        current_streak: int,
        last_streak_date: Optional[date],
        today: date,
    ) -> int:
        """User-wide streak after a recurring completion on `today`."""
        if last_streak_date is None:
            return 1
        gap = (today - last_streak_date).days
        if gap <= 0:
            return max(current_streak, 1)
        if gap == 1:
            return current_streak + 1
        return 1

    def is_streak_alive(self, last_streak_date: Optional[date], today: date) -> bool:
        """True while completing a recurring mission today would extend the streak."""
        if last_streak_date is None:
            return False
        return (today - last_streak_date).days <= 1

    # ------------------------------------------------------------------
    # Bonuses
    # ------------------------------------------------------------------

    def streak_bonus(self, current_streak: int) -> Optional[StreakBonus]:
        """Bonus of the highest milestone reached, or None."""
        for milestone in reversed(self._milestones):
            if current_streak >= milestone.days:
                return milestone.bonus
        return None

    def next_milestone(self, current_streak: int) -> Optional[StreakMilestone]:
        """Lowest milestone not yet reached, or None."""
        for milestone in self._milestones:
            if current_streak < milestone.days:
                return milestone
        return None
