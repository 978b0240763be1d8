"""
MissionHistory: append-only record of every mission completion.
Schema only.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from starship.core.database.base import Base, IdMixin, TimestampMixin, utc_now


class MissionHistory(Base, IdMixin, TimestampMixin):
    """
    One row per completion event. Never updated or deleted.
    """

    __tablename__ = "mission_history"
    __table_args__ = (
        Index("ix_mission_history_user_completed", "user_id", "completed_at"),
    )

    user_progress_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user_progress.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    # No FK: history outlives mission deletion
    mission_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    xp_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    coin_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
