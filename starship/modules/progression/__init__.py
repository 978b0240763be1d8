"""
Progression Module
==================

Domain: levels, ranks, streaks and the read side of user progress

Services:
- ProgressService: registration, progress, level info, history, stats, streak status

Policies:
- LevelCalculator: cumulative XP -> level, rank and progress
- StreakRule: calendar-day streak continuity and milestone bonuses
"""

from .calculator import LevelCalculator, LevelProgress
from .level_table import DEFAULT_LEVEL_TABLE, MAX_LEVEL, LevelThreshold
from .service import ProgressService
from .streak import (
    DEFAULT_STREAK_MILESTONES,
    StreakBonus,
    StreakMilestone,
    StreakRule,
    resolve_timezone,
)

__all__ = [
    "ProgressService",
    "LevelCalculator",
    "LevelProgress",
    "LevelThreshold",
    "DEFAULT_LEVEL_TABLE",
    "MAX_LEVEL",
    "StreakRule",
    "StreakBonus",
    "StreakMilestone",
    "DEFAULT_STREAK_MILESTONES",
    "resolve_timezone",
]
