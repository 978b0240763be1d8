"""
UserMission: per (user, mission) completion state.
Schema only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from starship.core.database.base import Base, IdMixin, TimestampMixin


class UserMission(Base, IdMixin, TimestampMixin):
    """
    Created on a user's first completion of a mission and updated on every
    later one. `streak` only grows for recurring missions.
    """

    __tablename__ = "user_missions"
    __table_args__ = (
        UniqueConstraint("user_id", "mission_id", name="uq_user_missions_user_mission"),
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    mission_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("missions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_completed: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
