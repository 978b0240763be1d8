"""
Mission Module
==============

Domain: mission definitions, reward rules and mission completion

Services:
- MissionService: create, read, update, delete; daily and per-user views
- MissionCompletionService: atomic completion with rewards, level and streaks
"""

from .completion import MissionCompletionService
from .rewards import DEFAULT_REWARD_TABLE, RewardPolicy, parse_difficulty
from .schemas import (
    DailyMissionView,
    MissionCompleteResult,
    MissionDraft,
    MissionFilters,
    MissionUpdate,
    MissionView,
    UserMissionView,
)
from .service import MissionService
from .validation import MissionValidator, validate_emoji

__all__ = [
    "MissionService",
    "MissionCompletionService",
    "MissionValidator",
    "RewardPolicy",
    "DEFAULT_REWARD_TABLE",
    "parse_difficulty",
    "validate_emoji",
    "MissionDraft",
    "MissionUpdate",
    "MissionFilters",
    "MissionView",
    "UserMissionView",
    "DailyMissionView",
    "MissionCompleteResult",
]
