"""
Mission: a definable habit or task with fixed rewards.
Schema only.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from starship.core.database.base import Base, IdMixin, TimestampMixin
from starship.database.models.enums import Difficulty, MissionCategory


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Mission(Base, IdMixin, TimestampMixin):
    """
    Mission definition.

    Reward amounts are fixed when the mission is created and validated
    against its difficulty; completion never re-validates them.
    """

    __tablename__ = "missions"
    __table_args__ = (
        Index("ix_missions_active_title", "is_active", "title"),
        Index("ix_missions_daily", "is_daily", "is_active"),
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    coin_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[MissionCategory] = mapped_column(
        Enum(
            MissionCategory,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    emoji: Mapped[str] = mapped_column(String(10), nullable=False)
    is_daily: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(
            Difficulty,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=Difficulty.EASY,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
