"""
ProgressService - user progression reads and registration

Purpose
-------
Own the UserProgress lifecycle outside of mission completion: register a
user, read their progress and level information, page through their
completion history, aggregate mission statistics and report streak status.

Domain
------
- Register a user with level 1 and zeroed counters
- Read progress snapshots and derived level information
- Page through append-only completion history
- Aggregate completions per category and per calendar day
- Report whether the user-wide streak is still alive

Dependencies
------------
- UnitOfWork: session and transaction boundaries (injected)
- LevelCalculator: level, rank and progress derivation (injected)
- StreakRule: calendar-day policy and milestone bonuses (injected)
- Logger: structured logging
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional

from starship.core.database.base import ensure_utc, utc_now
from starship.core.logging.logger import LogContext, get_logger
from starship.core.validation.input_validator import InputValidator
from starship.database.models import Mission, MissionHistory, UserMission, UserProgress
from starship.modules.mission.repository import MissionRepository, UserMissionRepository
from starship.modules.progression.repository import (
    MissionHistoryRepository,
    UserProgressRepository,
)
from starship.modules.progression.schemas import (
    HistoryEntry,
    HistoryPage,
    LevelInfo,
    MissionStats,
    StreakBonusView,
    StreakMilestoneView,
    StreakStatus,
    UserProgressView,
)
from starship.modules.shared.base_service import BaseService
from starship.modules.shared.exceptions import ConflictError, UserProgressNotFoundError
from starship.modules.shared.validators import validate_date_range, validate_pagination

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from starship.core.database.service import UnitOfWork
    from starship.modules.progression.calculator import LevelCalculator
    from starship.modules.progression.streak import StreakRule


class ProgressService(BaseService):
    """
    Read side of progression plus user registration.

    Public Methods
    --------------
    - register_user() -> Create the progress row for a new user
    - get_user_progress() -> Current progress snapshot
    - get_level_info() -> Level, rank, tier and progress toward next level
    - get_user_history() -> Page of completion history, newest first
    - get_mission_stats() -> Completion statistics over a window
    - get_streak_status() -> Streak continuity and milestone bonus
    """

    def __init__(
        self,
        db: UnitOfWork,
        level_calculator: LevelCalculator,
        streak_rule: StreakRule,
        logger: Optional[Logger] = None,
    ) -> None:
        super().__init__(logger or get_logger(__name__))
        self.db = db
        self.levels = level_calculator
        self.streaks = streak_rule

        self._progress_repo = UserProgressRepository(
            UserProgress, get_logger(f"{__name__}.UserProgressRepository")
        )
        self._history_repo = MissionHistoryRepository(
            MissionHistory, get_logger(f"{__name__}.MissionHistoryRepository")
        )
        self._mission_repo = MissionRepository(
            Mission, get_logger(f"{__name__}.MissionRepository")
        )
        self._user_mission_repo = UserMissionRepository(
            UserMission, get_logger(f"{__name__}.UserMissionRepository")
        )

    # ========================================================================
    # HELPERS
    # ========================================================================

    async def _require_progress(
        self, session: AsyncSession, user_id: str, for_update: bool = False
    ) -> UserProgress:
        progress = await self._progress_repo.find_by_user_id(
            session, user_id, for_update=for_update
        )
        if progress is None:
            raise UserProgressNotFoundError(user_id)
        return progress

    async def _missions_by_id(
        self, session: AsyncSession, mission_ids: List[str]
    ) -> Dict[str, Mission]:
        if not mission_ids:
            return {}
        missions = await self._mission_repo.find_many_where(
            session, Mission.id.in_(sorted(set(mission_ids)))
        )
        return {mission.id: mission for mission in missions}

    # ========================================================================
    # PUBLIC API - Write Operations
    # ========================================================================

    async def register_user(
        self, user_id: str, preferred_lang: str = "en"
    ) -> UserProgressView:
        """
        Create the progress row for a new user.

        Raises:
            ValidationError: If user_id or preferred_lang is malformed
            ConflictError: If the user is already registered
        """
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        preferred_lang = InputValidator.validate_string(
            preferred_lang, "preferred_lang", min_length=2, max_length=8
        )

        async with LogContext(user_id=user_id, operation="register_user"):
            async with self.db.get_transaction("register_user") as session:
                existing = await self._progress_repo.find_by_user_id(session, user_id)
                if existing is not None:
                    raise ConflictError("UserProgress", "user_id", user_id)

                start = self.levels.level_progress(0)
                progress = self._progress_repo.add(
                    session,
                    UserProgress(
                        user_id=user_id,
                        level=start.level,
                        current_xp=0,
                        max_xp=start.max_xp,
                        total_xp_earned=0,
                        coins=0,
                        total_missions_completed=0,
                        current_streak=0,
                        longest_streak=0,
                        rank=self.levels.rank_for_level(start.level),
                        last_active=utc_now(),
                        preferred_lang=preferred_lang,
                    ),
                )
                await self._progress_repo.flush(session)
                view = UserProgressView.from_model(progress)

            self.log_operation("register_user", user_id=user_id)
            return view

    # ========================================================================
    # PUBLIC API - Read Operations
    # ========================================================================

    async def get_user_progress(self, user_id: str) -> UserProgressView:
        """
        Raises:
            UserProgressNotFoundError: If the user has no progress row
        """
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        async with self.db.get_session() as session:
            progress = await self._require_progress(session, user_id)
            return UserProgressView.from_model(progress)

    async def get_level_info(self, user_id: str) -> LevelInfo:
        """
        Level, rank and progress toward the next level.

        Values are recomputed from `total_xp_earned` so the answer always
        agrees with the level table.
        """
        progress = await self.get_user_progress(user_id)
        snapshot = self.levels.level_progress(progress.total_xp_earned)
        is_max_level = snapshot.level == self.levels.max_level

        return LevelInfo(
            level=snapshot.level,
            rank=self.levels.rank_for_level(snapshot.level),
            display=self.levels.format_level_display(snapshot.level),
            tier=self.levels.level_tier(snapshot.level),
            multiplier=self.levels.level_multiplier(snapshot.level),
            current_xp=snapshot.current_xp,
            max_xp=snapshot.max_xp,
            total_xp_earned=progress.total_xp_earned,
            required_for_next=snapshot.required_for_next,
            xp_to_next_level=self.levels.xp_needed_for_next_level(
                progress.total_xp_earned
            ),
            progress_percent=round(snapshot.progress_percent, 2),
            is_max_level=is_max_level,
        )

    async def get_user_history(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> HistoryPage:
        """
        Page of completion history, newest first.

        Entries whose mission was deleted keep their rewards and carry the
        title "Unknown Mission".
        """
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        validate_date_range(date_from, date_to)
        date_from, date_to = ensure_utc(date_from), ensure_utc(date_to)
        validate_pagination(limit, offset)

        async with self.db.get_session() as session:
            await self._require_progress(session, user_id)

            records = await self._history_repo.list_for_user(
                session, user_id, date_from, date_to, limit=limit, offset=offset
            )
            total = await self._history_repo.count_for_user(
                session, user_id, date_from, date_to
            )
            missions = await self._missions_by_id(
                session, [record.mission_id for record in records]
            )

            items = [
                HistoryEntry.from_model(record, missions.get(record.mission_id))
                for record in records
            ]

        return HistoryPage(items=items, total=total, limit=limit, offset=offset)

    async def get_mission_stats(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> MissionStats:
        """
        Completion statistics for one user.

        Per-day buckets are calendar days in the streak timezone, keyed by
        ISO date.
        """
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        validate_date_range(date_from, date_to)
        date_from, date_to = ensure_utc(date_from), ensure_utc(date_to)

        async with self.db.get_session() as session:
            await self._require_progress(session, user_id)

            states = await self._user_mission_repo.list_for_user(session, user_id)
            records = await self._history_repo.list_for_user(
                session, user_id, date_from, date_to
            )
            missions = await self._missions_by_id(
                session, [record.mission_id for record in records]
            )

        total_missions = len(states)
        completed_missions = sum(1 for state, _ in states if state.is_completed)
        completion_rate = (
            round(completed_missions / total_missions * 100.0, 2)
            if total_missions
            else 0.0
        )

        by_category: Counter = Counter()
        by_day: Counter = Counter()
        for record in records:
            mission = missions.get(record.mission_id)
            by_category[mission.category.value if mission is not None else "unknown"] += 1
            by_day[self.streaks.local_date(record.completed_at).isoformat()] += 1

        return MissionStats(
            total_missions=total_missions,
            completed_missions=completed_missions,
            total_completions=len(records),
            completion_rate=completion_rate,
            total_xp=sum(record.xp_earned for record in records),
            total_coins=sum(record.coin_earned for record in records),
            by_category=dict(by_category),
            by_day=dict(sorted(by_day.items())),
        )

    async def get_streak_status(
        self, user_id: str, now: Optional[datetime] = None
    ) -> StreakStatus:
        """
        Streak continuity as of `now`.

        A streak whose last day is more than one calendar day behind today
        has lapsed and is reported as 0, even though the stored counter is
        only reset by the next recurring completion.
        """
        progress = await self.get_user_progress(user_id)
        today = self.streaks.local_date(now or utc_now())

        is_active = self.streaks.is_streak_alive(progress.last_streak_date, today)
        current = progress.current_streak if is_active else 0

        bonus = self.streaks.streak_bonus(current)
        upcoming = self.streaks.next_milestone(current)

        return StreakStatus(
            current_streak=current,
            longest_streak=progress.longest_streak,
            last_streak_date=progress.last_streak_date,
            is_active=is_active,
            bonus=StreakBonusView(bonus.xp, bonus.coins) if bonus else None,
            next_milestone=(
                StreakMilestoneView(
                    days=upcoming.days,
                    days_remaining=upcoming.days - current,
                    bonus=StreakBonusView(upcoming.bonus.xp, upcoming.bonus.coins),
                )
                if upcoming
                else None
            ),
        )
