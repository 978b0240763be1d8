"""
Mission Completion Orchestrator

Purpose
-------
Apply one mission completion for one user as a single atomic unit: update
the per-mission streak, credit XP and coins, recompute level and rank,
advance the user-wide streak and append a history record.

Transaction Flow
----------------
1. Share-lock the mission row; a missing or inactive mission is not found
2. Lock the user's progress row; an unregistered user is not found
3. Lock (or create) the user's state for this mission
4. Per-mission streak (recurring missions only)
5. New totals, then level / rank from cumulative XP
6. User-wide streak and longest streak (recurring missions only)
7. Write state, progress and history; commit

Any exception before commit rolls every change back. Storage failures
surface as `PersistenceError`; domain errors propagate unchanged.

Concurrency
-----------
The mission row is share-locked (FOR SHARE) and the user rows are read
with SELECT ... FOR UPDATE where the backend supports it (SQLite ignores
both clauses). There is no idempotency key, so two
submissions of the same completion are both applied.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from starship.core.database.base import ensure_utc, utc_now
from starship.core.logging.logger import LogContext, get_logger
from starship.core.validation.input_validator import InputValidator
from starship.database.models import Mission, MissionHistory, UserMission, UserProgress
from starship.modules.mission.repository import MissionRepository, UserMissionRepository
from starship.modules.mission.schemas import MissionCompleteResult
from starship.modules.progression.repository import (
    MissionHistoryRepository,
    UserProgressRepository,
)
from starship.modules.progression.schemas import UserProgressView
from starship.modules.shared.base_service import BaseService
from starship.modules.shared.exceptions import NotFoundError, UserProgressNotFoundError

if TYPE_CHECKING:
    from logging import Logger

    from starship.core.database.service import UnitOfWork
    from starship.modules.progression.calculator import LevelCalculator
    from starship.modules.progression.streak import StreakRule


class MissionCompletionService(BaseService):
    """
    Orchestrates a mission completion inside one unit of work.

    Args:
        db: Unit of work providing the transaction
        level_calculator: Level and rank derivation
        streak_rule: Calendar-day streak policy
        logger: Structured logger
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

        self._mission_repo = MissionRepository(
            Mission, get_logger(f"{__name__}.MissionRepository")
        )
        self._user_mission_repo = UserMissionRepository(
            UserMission, get_logger(f"{__name__}.UserMissionRepository")
        )
        self._progress_repo = UserProgressRepository(
            UserProgress, get_logger(f"{__name__}.UserProgressRepository")
        )
        self._history_repo = MissionHistoryRepository(
            MissionHistory, get_logger(f"{__name__}.MissionHistoryRepository")
        )

    async def complete_mission(
        self,
        mission_id: str,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> MissionCompleteResult:
        """
        Complete `mission_id` for `user_id`.

        Args:
            mission_id: Mission to complete
            user_id: Registered user completing it
            now: Completion instant (defaults to the current UTC time)

        Returns:
            MissionCompleteResult with rewards, level-up flag, the mission's
            streak and a snapshot of the updated progress

        Raises:
            ValidationError: If an identifier is malformed
            NotFoundError: If the mission is missing or inactive
            UserProgressNotFoundError: If the user has no progress row
            PersistenceError: If the storage layer fails (nothing is written)
        """
        mission_id = InputValidator.validate_identifier(mission_id, "mission_id")
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        now = ensure_utc(now) if now is not None else utc_now()

        async with LogContext(
            user_id=user_id, mission_id=mission_id, operation="complete_mission"
        ):
            async with self.db.get_transaction("complete_mission") as session:
                # Shared lock: missions are read by every user's completion
                mission = await self._mission_repo.get_for_update(
                    session, mission_id, read=True
                )
                if mission is None or not mission.is_active:
                    raise NotFoundError("Mission", mission_id)

                progress = await self._progress_repo.find_by_user_id(
                    session, user_id, for_update=True
                )
                if progress is None:
                    raise UserProgressNotFoundError(user_id)

                state = await self._user_mission_repo.find_for_user(
                    session, user_id, mission_id, for_update=True
                )

                # Per-mission streak
                if mission.is_daily:
                    mission_streak = self.streaks.next_mission_streak(
                        state.streak if state else 0,
                        state.last_completed if state else None,
                        now,
                    )
                else:
                    mission_streak = state.streak if state else 0

                # Totals, level, rank
                xp_earned = mission.xp_reward
                coin_earned = mission.coin_reward
                previous_level = progress.level
                total_xp = progress.total_xp_earned + xp_earned

                snapshot = self.levels.level_progress(total_xp)
                level_up = snapshot.level > previous_level

                # User-wide streak
                if mission.is_daily:
                    today = self.streaks.local_date(now)
                    progress.current_streak = self.streaks.next_user_streak(
                        progress.current_streak, progress.last_streak_date, today
                    )
                    progress.last_streak_date = today
                    progress.longest_streak = max(
                        progress.longest_streak, progress.current_streak
                    )

                # Writes
                if state is None:
                    state = self._user_mission_repo.add(
                        session, UserMission(user_id=user_id, mission_id=mission_id)
                    )
                state.is_completed = True
                state.completed_at = now
                state.last_completed = now
                state.streak = mission_streak

                progress.total_xp_earned = total_xp
                progress.coins += coin_earned
                progress.total_missions_completed += 1
                progress.level = snapshot.level
                progress.current_xp = snapshot.current_xp
                progress.max_xp = snapshot.max_xp
                progress.rank = self.levels.rank_for_level(snapshot.level)
                progress.last_active = now

                self._history_repo.add(
                    session,
                    MissionHistory(
                        user_progress_id=progress.id,
                        user_id=user_id,
                        mission_id=mission_id,
                        xp_earned=xp_earned,
                        coin_earned=coin_earned,
                        completed_at=now,
                    ),
                )
                await self._history_repo.flush(session)

                progress_view = UserProgressView.from_model(progress)

            if level_up:
                message = f"Mission completed! You leveled up to {snapshot.level}!"
                self.log.info(
                    "User leveled up",
                    extra={
                        "previous_level": previous_level,
                        "new_level": snapshot.level,
                        "rank": progress_view.rank,
                    },
                )
            else:
                message = f"Mission completed! +{xp_earned} XP, +{coin_earned} coins"

            self.log_operation(
                "complete_mission",
                xp_earned=xp_earned,
                coin_earned=coin_earned,
                level_up=level_up,
                streak=mission_streak,
            )

            return MissionCompleteResult(
                success=True,
                xp_earned=xp_earned,
                coin_earned=coin_earned,
                level_up=level_up,
                streak=mission_streak,
                message=message,
                user_progress=progress_view,
                new_level=snapshot.level if level_up else None,
                streak_updated=True,
            )
