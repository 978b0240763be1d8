"""
Repositories for user progress and completion history.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from starship.database.models import MissionHistory, UserProgress
from starship.modules.shared.base_repository import BaseRepository


class UserProgressRepository(BaseRepository[UserProgress]):
    """Repository for UserProgress rows (one per user)."""

    async def find_by_user_id(
        self, session: AsyncSession, user_id: str, for_update: bool = False
    ) -> Optional[UserProgress]:
        return await self.find_one_where(
            session,
            UserProgress.user_id == user_id,
            for_update=for_update,
        )


class MissionHistoryRepository(BaseRepository[MissionHistory]):
    """Append-only completion records. Exposes no update helpers."""

    @staticmethod
    def _window(
        user_id: str,
        date_from: Optional[datetime],
        date_to: Optional[datetime],
    ) -> list:
        conditions = [MissionHistory.user_id == user_id]
        if date_from is not None:
            conditions.append(MissionHistory.completed_at >= date_from)
        if date_to is not None:
            conditions.append(MissionHistory.completed_at <= date_to)
        return conditions

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[MissionHistory]:
        """History rows for a user, newest first."""
        return await self.find_many_where(
            session,
            *self._window(user_id, date_from, date_to),
            order_by=[MissionHistory.completed_at.desc()],
            limit=limit,
            offset=offset,
        )

    async def count_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> int:
        return await self.count(session, *self._window(user_id, date_from, date_to))
