"""
Mission module data shapes.

Inputs (`MissionDraft`, `MissionUpdate`, `MissionFilters`) come from the outer
API layer; outputs (`MissionView`, `UserMissionView`, `DailyMissionView`,
`MissionCompleteResult`) are detached snapshots safe to return after the
session closes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from starship.core.database.base import ensure_utc
from starship.database.models.enums import Difficulty, MissionCategory

if TYPE_CHECKING:
    from starship.database.models import Mission, UserMission
    from starship.modules.progression.schemas import UserProgressView


def _plain(value: Any) -> Any:
    if isinstance(value, (Difficulty, MissionCategory)):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class MissionDraft:
    title: str
    description: str
    xp_reward: int
    coin_reward: int
    category: Union[MissionCategory, str]
    emoji: str
    is_daily: bool = False
    difficulty: Union[Difficulty, str] = Difficulty.EASY


@dataclass(frozen=True)
class MissionUpdate:
    """Partial update; None means "leave unchanged"."""

    title: Optional[str] = None
    description: Optional[str] = None
    xp_reward: Optional[int] = None
    coin_reward: Optional[int] = None
    category: Optional[Union[MissionCategory, str]] = None
    emoji: Optional[str] = None
    is_daily: Optional[bool] = None
    difficulty: Optional[Union[Difficulty, str]] = None
    is_active: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class MissionFilters:
    category: Optional[Union[MissionCategory, str]] = None
    difficulty: Optional[Union[Difficulty, str]] = None
    is_daily: Optional[bool] = None
    is_active: Optional[bool] = True
    search: Optional[str] = None


@dataclass(frozen=True)
class MissionView:
    id: str
    title: str
    description: str
    xp_reward: int
    coin_reward: int
    category: MissionCategory
    emoji: str
    is_daily: bool
    difficulty: Difficulty
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, mission: Mission) -> "MissionView":
        return cls(
            id=mission.id,
            title=mission.title,
            description=mission.description,
            xp_reward=mission.xp_reward,
            coin_reward=mission.coin_reward,
            category=MissionCategory(mission.category),
            emoji=mission.emoji,
            is_daily=mission.is_daily,
            difficulty=Difficulty(mission.difficulty),
            is_active=mission.is_active,
            created_at=ensure_utc(mission.created_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {k: _plain(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class UserMissionView:
    mission: MissionView
    is_completed: bool
    completed_at: Optional[datetime]
    streak: int
    last_completed: Optional[datetime]

    @classmethod
    def from_models(cls, state: UserMission, mission: Mission) -> "UserMissionView":
        return cls(
            mission=MissionView.from_model(mission),
            is_completed=state.is_completed,
            completed_at=ensure_utc(state.completed_at),
            streak=state.streak,
            last_completed=ensure_utc(state.last_completed),
        )


@dataclass(frozen=True)
class DailyMissionView:
    """A recurring mission plus this user's state for today."""

    mission: MissionView
    completed_today: bool
    streak: int
    last_completed: Optional[datetime]


@dataclass(frozen=True)
class MissionCompleteResult:
    success: bool
    xp_earned: int
    coin_earned: int
    level_up: bool
    streak: int
    message: str
    user_progress: UserProgressView
    new_level: Optional[int] = None
    streak_updated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": self.success,
            "xp_earned": self.xp_earned,
            "coin_earned": self.coin_earned,
            "level_up": self.level_up,
            "streak_updated": self.streak_updated,
            "streak": self.streak,
            "message": self.message,
            "user_progress": self.user_progress.to_dict(),
        }
        if self.new_level is not None:
            data["new_level"] = self.new_level
        return data
