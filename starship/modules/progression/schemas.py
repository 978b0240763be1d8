"""
Progression read models.

Detached snapshots of progress, level and history data returned by the
progression and completion services.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from starship.core.database.base import ensure_utc

if TYPE_CHECKING:
    from starship.database.models import Mission, MissionHistory, UserProgress


def _plain(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class UserProgressView:
    user_id: str
    level: int
    current_xp: int
    max_xp: int
    total_xp_earned: int
    coins: int
    total_missions_completed: int
    current_streak: int
    longest_streak: int
    rank: str
    last_active: Optional[datetime]
    last_streak_date: Optional[date]
    preferred_lang: str

    @classmethod
    def from_model(cls, progress: UserProgress) -> "UserProgressView":
        return cls(
            user_id=progress.user_id,
            level=progress.level,
            current_xp=progress.current_xp,
            max_xp=progress.max_xp,
            total_xp_earned=progress.total_xp_earned,
            coins=progress.coins,
            total_missions_completed=progress.total_missions_completed,
            current_streak=progress.current_streak,
            longest_streak=progress.longest_streak,
            rank=progress.rank,
            last_active=ensure_utc(progress.last_active),
            last_streak_date=progress.last_streak_date,
            preferred_lang=progress.preferred_lang,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {k: _plain(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class LevelInfo:
    level: int
    rank: str
    display: str
    tier: str
    multiplier: float
    current_xp: int
    max_xp: int
    total_xp_earned: int
    required_for_next: int
    xp_to_next_level: int
    progress_percent: float
    is_max_level: bool


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    mission_id: str
    xp_earned: int
    coin_earned: int
    completed_at: datetime
    mission_title: str = "Unknown Mission"
    category: Optional[str] = None

    @classmethod
    def from_model(
        cls, record: MissionHistory, mission: Optional[Mission] = None
    ) -> "HistoryEntry":
        return cls(
            id=record.id,
            mission_id=record.mission_id,
            xp_earned=record.xp_earned,
            coin_earned=record.coin_earned,
            completed_at=ensure_utc(record.completed_at),
            mission_title=mission.title if mission is not None else "Unknown Mission",
            category=mission.category.value if mission is not None else None,
        )


@dataclass(frozen=True)
class HistoryPage:
    items: List[HistoryEntry]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


@dataclass(frozen=True)
class MissionStats:
    """
    Completion statistics over an optional window.

    `total_missions` counts the missions this user has state for and
    `completed_missions` those currently marked completed. XP, coins and the
    per-category / per-day breakdowns cover history rows inside the window.
    """

    total_missions: int
    completed_missions: int
    total_completions: int
    completion_rate: float
    total_xp: int
    total_coins: int
    by_category: Dict[str, int] = field(default_factory=dict)
    by_day: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class StreakBonusView:
    xp: int
    coins: int


@dataclass(frozen=True)
class StreakMilestoneView:
    days: int
    days_remaining: int
    bonus: StreakBonusView


@dataclass(frozen=True)
class StreakStatus:
    current_streak: int
    longest_streak: int
    last_streak_date: Optional[date]
    is_active: bool
    bonus: Optional[StreakBonusView]
    next_milestone: Optional[StreakMilestoneView]
