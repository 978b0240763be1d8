"""
Repositories for missions and per-user mission state.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from starship.database.models import Mission, UserMission
from starship.database.models.enums import Difficulty, MissionCategory
from starship.modules.shared.base_repository import BaseRepository


class MissionRepository(BaseRepository[Mission]):
    """Repository for Mission definitions."""

    async def find_active_by_title(
        self,
        session: AsyncSession,
        title: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Mission]:
        """Active mission with exactly this title, optionally ignoring one id."""
        conditions = [Mission.title == title, Mission.is_active.is_(True)]
        if exclude_id is not None:
            conditions.append(Mission.id != exclude_id)
        return await self.find_one_where(session, *conditions)

    async def list_filtered(
        self,
        session: AsyncSession,
        category: Optional[MissionCategory] = None,
        difficulty: Optional[Difficulty] = None,
        is_daily: Optional[bool] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Mission]:
        conditions = []
        if category is not None:
            conditions.append(Mission.category == category)
        if difficulty is not None:
            conditions.append(Mission.difficulty == difficulty)
        if is_daily is not None:
            conditions.append(Mission.is_daily.is_(is_daily))
        if is_active is not None:
            conditions.append(Mission.is_active.is_(is_active))
        if search:
            conditions.append(func.lower(Mission.title).contains(search.lower()))

        return await self.find_many_where(
            session,
            *conditions,
            order_by=[Mission.created_at.desc(), Mission.title],
        )


class UserMissionRepository(BaseRepository[UserMission]):
    """Repository for per-user mission state."""

    async def find_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        mission_id: str,
        for_update: bool = False,
    ) -> Optional[UserMission]:
        return await self.find_one_where(
            session,
            UserMission.user_id == user_id,
            UserMission.mission_id == mission_id,
            for_update=for_update,
        )

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        is_completed: Optional[bool] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Tuple[UserMission, Mission]]:
        """
        State rows joined with their mission, newest completion first.

        The date window applies to `completed_at`.
        """
        stmt = (
            select(UserMission, Mission)
            .join(Mission, Mission.id == UserMission.mission_id)
            .where(UserMission.user_id == user_id)
        )
        if is_completed is not None:
            stmt = stmt.where(UserMission.is_completed.is_(is_completed))
        if date_from is not None:
            stmt = stmt.where(UserMission.completed_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(UserMission.completed_at <= date_to)
        stmt = stmt.order_by(UserMission.completed_at.desc())

        result = await session.execute(stmt)
        rows = [(state, mission) for state, mission in result.all()]

        self.log.debug(
            "Repository.list_for_user: UserMission",
            extra={"model": "UserMission", "found_count": len(rows)},
        )
        return rows
