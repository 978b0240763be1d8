"""
MissionService - mission definitions and per-user mission state

Purpose
-------
Create, read, update and delete mission definitions, and expose each user's
mission state (daily missions, completed missions). Completion itself lives
in `MissionCompletionService`.

Domain
------
- Validate mission definitions before anything is written
- Keep titles unique among active missions
- List missions by category, difficulty, recurrence and title search
- Report today's recurring missions with the user's state

Dependencies
------------
- UnitOfWork: session and transaction boundaries (injected)
- MissionValidator: definition validation (injected)
- StreakRule: calendar-day policy for "completed today" (injected)
- Logger: structured logging
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional

from starship.core.database.base import ensure_utc, utc_now
from starship.core.logging.logger import LogContext, get_logger
from starship.core.validation.input_validator import InputValidator
from starship.database.models import Mission, UserMission
from starship.modules.mission.repository import MissionRepository, UserMissionRepository
from starship.modules.mission.rewards import parse_difficulty
from starship.modules.mission.schemas import (
    DailyMissionView,
    MissionDraft,
    MissionFilters,
    MissionUpdate,
    MissionView,
    UserMissionView,
)
from starship.modules.mission.validation import ValidatedMission, parse_category
from starship.modules.shared.base_service import BaseService
from starship.modules.shared.exceptions import ConflictError, NotFoundError
from starship.modules.shared.validators import validate_date_range

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from starship.core.database.service import UnitOfWork
    from starship.modules.mission.validation import MissionValidator
    from starship.modules.progression.streak import StreakRule


class MissionService(BaseService):
    """
    Mission catalogue management.

    Public Methods
    --------------
    - create_mission() -> Validate and persist a new mission
    - get_mission() -> Single mission by id
    - list_missions() -> Missions matching filters
    - update_mission() -> Apply a partial update, re-validating the result
    - delete_mission() -> Remove a mission and its per-user state
    - get_daily_missions() -> Active recurring missions with user state
    - get_user_missions() -> A user's mission state rows
    """

    def __init__(
        self,
        db: UnitOfWork,
        validator: MissionValidator,
        streak_rule: StreakRule,
        logger: Optional[Logger] = None,
    ) -> None:
        super().__init__(logger or get_logger(__name__))
        self.db = db
        self.validator = validator
        self.streaks = streak_rule

        self._mission_repo = MissionRepository(
            Mission, get_logger(f"{__name__}.MissionRepository")
        )
        self._user_mission_repo = UserMissionRepository(
            UserMission, get_logger(f"{__name__}.UserMissionRepository")
        )

    async def _require_mission(
        self, session: AsyncSession, mission_id: str, for_update: bool = False
    ) -> Mission:
        if for_update:
            mission = await self._mission_repo.get_for_update(session, mission_id)
        else:
            mission = await self._mission_repo.get(session, mission_id)
        if mission is None:
            raise NotFoundError("Mission", mission_id)
        return mission

    async def _ensure_title_available(
        self, session: AsyncSession, title: str, exclude_id: Optional[str] = None
    ) -> None:
        clash = await self._mission_repo.find_active_by_title(
            session, title, exclude_id=exclude_id
        )
        if clash is not None:
            raise ConflictError("Mission", "title", title)

    @staticmethod
    def _apply(mission: Mission, validated: ValidatedMission) -> None:
        mission.title = validated.title
        mission.description = validated.description
        mission.xp_reward = validated.xp_reward
        mission.coin_reward = validated.coin_reward
        mission.category = validated.category
        mission.emoji = validated.emoji
        mission.is_daily = validated.is_daily
        mission.difficulty = validated.difficulty

    # ========================================================================
    # PUBLIC API - Write Operations
    # ========================================================================

    async def create_mission(self, draft: MissionDraft) -> MissionView:
        """
        Validate and persist a new mission.

        Raises:
            ValidationError: If any field fails validation (nothing is written)
            ConflictError: If an active mission already has this title
        """
        validated = self.validator.validate_draft(draft)

        async with LogContext(operation="create_mission"):
            async with self.db.get_transaction("create_mission") as session:
                await self._ensure_title_available(session, validated.title)

                mission = Mission(is_active=True)
                self._apply(mission, validated)
                self._mission_repo.add(session, mission)
                await self._mission_repo.flush(session)
                view = MissionView.from_model(mission)

            self.log_operation(
                "create_mission",
                mission_id=view.id,
                difficulty=view.difficulty.value,
                is_daily=view.is_daily,
            )
            return view

    async def update_mission(self, mission_id: str, changes: MissionUpdate) -> MissionView:
        """
        Apply a partial update.

        The merged record is validated as a whole, so changing only the
        difficulty still re-checks the existing rewards against it.

        Raises:
            NotFoundError: If the mission does not exist
            ValidationError: If the merged record is invalid
            ConflictError: If the new title clashes with another active mission
        """
        mission_id = InputValidator.validate_identifier(mission_id, "mission_id")
        updates = changes.changes()
        is_active = updates.pop("is_active", None)

        async with LogContext(mission_id=mission_id, operation="update_mission"):
            async with self.db.get_transaction("update_mission") as session:
                mission = await self._require_mission(session, mission_id, for_update=True)

                merged = MissionDraft(
                    title=updates.get("title", mission.title),
                    description=updates.get("description", mission.description),
                    xp_reward=updates.get("xp_reward", mission.xp_reward),
                    coin_reward=updates.get("coin_reward", mission.coin_reward),
                    category=updates.get("category", mission.category),
                    emoji=updates.get("emoji", mission.emoji),
                    is_daily=updates.get("is_daily", mission.is_daily),
                    difficulty=updates.get("difficulty", mission.difficulty),
                )
                validated = self.validator.validate_draft(merged)

                will_be_active = mission.is_active if is_active is None else is_active
                if will_be_active:
                    await self._ensure_title_available(
                        session, validated.title, exclude_id=mission.id
                    )

                self._apply(mission, validated)
                if is_active is not None:
                    mission.is_active = bool(is_active)
                await self._mission_repo.flush(session)
                view = MissionView.from_model(mission)

            self.log_operation(
                "update_mission", mission_id=mission_id, fields=sorted(changes.changes())
            )
            return view

    async def delete_mission(self, mission_id: str) -> bool:
        """
        Delete a mission together with every user's state for it.

        Completion history is kept; its entries report the mission as
        unknown afterwards.

        Raises:
            NotFoundError: If the mission does not exist
        """
        mission_id = InputValidator.validate_identifier(mission_id, "mission_id")

        async with LogContext(mission_id=mission_id, operation="delete_mission"):
            async with self.db.get_transaction("delete_mission") as session:
                mission = await self._require_mission(session, mission_id, for_update=True)

                states = await self._user_mission_repo.find_many_where(
                    session, UserMission.mission_id == mission_id
                )
                for state in states:
                    await self._user_mission_repo.delete(session, state)
                await self._mission_repo.delete(session, mission)

            self.log_operation(
                "delete_mission", mission_id=mission_id, removed_states=len(states)
            )
            return True

    # ========================================================================
    # PUBLIC API - Read Operations
    # ========================================================================

    async def get_mission(self, mission_id: str) -> MissionView:
        """
        Raises:
            NotFoundError: If the mission does not exist
        """
        mission_id = InputValidator.validate_identifier(mission_id, "mission_id")
        async with self.db.get_session() as session:
            mission = await self._require_mission(session, mission_id)
            return MissionView.from_model(mission)

    async def list_missions(
        self, filters: Optional[MissionFilters] = None
    ) -> List[MissionView]:
        """Missions matching `filters`; active missions only by default."""
        filters = filters or MissionFilters()
        category = parse_category(filters.category) if filters.category else None
        difficulty = parse_difficulty(filters.difficulty) if filters.difficulty else None
        search = filters.search.strip() if filters.search else None

        async with self.db.get_session() as session:
            missions = await self._mission_repo.list_filtered(
                session,
                category=category,
                difficulty=difficulty,
                is_daily=filters.is_daily,
                is_active=filters.is_active,
                search=search,
            )
            return [MissionView.from_model(mission) for mission in missions]

    async def get_daily_missions(
        self, user_id: str, now: Optional[datetime] = None
    ) -> List[DailyMissionView]:
        """
        Active recurring missions with this user's state.

        `completed_today` compares calendar days in the streak timezone.
        """
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        today = self.streaks.local_date(now or utc_now())

        async with self.db.get_session() as session:
            missions = await self._mission_repo.list_filtered(
                session, is_daily=True, is_active=True
            )
            states: Dict[str, UserMission] = {}
            if missions:
                rows = await self._user_mission_repo.find_many_where(
                    session,
                    UserMission.user_id == user_id,
                    UserMission.mission_id.in_([m.id for m in missions]),
                )
                states = {row.mission_id: row for row in rows}

            result = []
            for mission in missions:
                state = states.get(mission.id)
                last_completed = state.last_completed if state else None
                completed_today = (
                    last_completed is not None
                    and self.streaks.local_date(last_completed) == today
                )
                result.append(
                    DailyMissionView(
                        mission=MissionView.from_model(mission),
                        completed_today=completed_today,
                        streak=state.streak if state else 0,
                        last_completed=(
                            UserMissionView.from_models(state, mission).last_completed
                            if state
                            else None
                        ),
                    )
                )
            return result

    async def get_user_missions(
        self,
        user_id: str,
        is_completed: Optional[bool] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[UserMissionView]:
        """A user's mission state rows, newest completion first."""
        user_id = InputValidator.validate_identifier(user_id, "user_id")
        validate_date_range(date_from, date_to)
        date_from, date_to = ensure_utc(date_from), ensure_utc(date_to)

        async with self.db.get_session() as session:
            rows = await self._user_mission_repo.list_for_user(
                session,
                user_id,
                is_completed=is_completed,
                date_from=date_from,
                date_to=date_to,
            )
            return [UserMissionView.from_models(state, mission) for state, mission in rows]
