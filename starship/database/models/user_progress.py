"""
UserProgress: one row per user holding level, XP, coins and streaks.
Schema only.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from starship.core.database.base import Base, IdMixin, TimestampMixin

INITIAL_RANK = "Cadet"


class UserProgress(Base, IdMixin, TimestampMixin):
    """
    Progression state for a single user.

    Created at registration with level 1 and zeroed counters; afterwards
    mutated only by the mission completion orchestrator.

    `last_streak_date` is the calendar day (streak timezone) of the user's
    most recent recurring-mission completion.
    """

    __tablename__ = "user_progress"

    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )

    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    total_xp_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_missions_completed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_streak_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    rank: Mapped[str] = mapped_column(String(32), nullable=False, default=INITIAL_RANK)
    last_active: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    preferred_lang: Mapped[str] = mapped_column(String(8), nullable=False, default="en")
