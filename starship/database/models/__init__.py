"""
Database Models Package
=======================

SQLAlchemy ORM models for Starship Commander. All models:
- Are schema-only, no business logic
- Use Mapped[] syntax with mapped_column()
- Inherit IdMixin (string UUID key) and TimestampMixin

Importing this package registers every table on `Base.metadata`.
"""

from starship.core.database.base import Base

from .enums import Difficulty, MissionCategory
from .mission import Mission
from .mission_history import MissionHistory
from .user_mission import UserMission
from .user_progress import INITIAL_RANK, UserProgress

__all__ = [
    "Base",
    "Difficulty",
    "MissionCategory",
    "Mission",
    "MissionHistory",
    "UserMission",
    "UserProgress",
    "INITIAL_RANK",
]
