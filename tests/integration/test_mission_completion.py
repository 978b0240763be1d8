"""
Integration Tests for MissionCompletionService
==============================================

Runs the completion orchestrator against an in-memory SQLite database.

Test Coverage
-------------
- Rewards, totals and level-up
- Per-mission and user-wide streaks across calendar days
- All-or-nothing behaviour when a write fails
- Missing or inactive missions and unregistered users
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from starship.core.exceptions import ErrorKind, PersistenceError
from starship.modules.mission import MissionUpdate
from starship.modules.mission.repository import MissionRepository, UserMissionRepository
from starship.modules.progression.repository import (
    MissionHistoryRepository,
    UserProgressRepository,
)
from starship.modules.shared.exceptions import NotFoundError, UserProgressNotFoundError
from tests.conftest import at

pytestmark = [pytest.mark.integration, pytest.mark.database]


# ============================================================================
# REWARDS AND LEVELS
# ============================================================================


class TestRewards:
    async def test_easy_mission_without_level_up(
        self, completion_service, progress_service, create_mission, registered_user
    ):
        # Arrange
        mission = await create_mission(xp_reward=25, coin_reward=10)

        # Act
        result = await completion_service.complete_mission(mission.id, registered_user)

        # Assert
        assert result.success is True
        assert result.xp_earned == 25
        assert result.coin_earned == 10
        assert result.level_up is False
        assert result.new_level is None
        assert result.message == "Mission completed! +25 XP, +10 coins"

        progress = await progress_service.get_user_progress(registered_user)
        assert progress.total_xp_earned == 25
        assert progress.coins == 10
        assert progress.level == 1
        assert progress.current_xp == 25
        assert progress.max_xp == 50
        assert progress.total_missions_completed == 1
        assert result.user_progress == progress

    async def test_crossing_threshold_levels_up(
        self, completion_service, progress_service, create_mission, registered_user
    ):
        # Arrange
        big = await create_mission(title="Deep work", xp_reward=45, coin_reward=10)
        small = await create_mission(title="Stretch", xp_reward=10, coin_reward=5)
        await completion_service.complete_mission(big.id, registered_user)

        # Act
        result = await completion_service.complete_mission(small.id, registered_user)

        # Assert
        assert result.level_up is True
        assert result.new_level == 2
        assert result.message == "Mission completed! You leveled up to 2!"
        assert result.user_progress.total_xp_earned == 55
        assert result.user_progress.current_xp == 5
        assert result.user_progress.max_xp == 70
        assert result.user_progress.rank == "Cadet"
        assert result.to_dict()["new_level"] == 2

    async def test_completion_appends_history(
        self, completion_service, progress_service, create_mission, registered_user
    ):
        mission = await create_mission()

        await completion_service.complete_mission(mission.id, registered_user)
        await completion_service.complete_mission(mission.id, registered_user)

        history = await progress_service.get_user_history(registered_user)
        assert history.total == 2
        assert all(entry.mission_title == "Read 20 pages" for entry in history.items)


# ============================================================================
# STREAKS
# ============================================================================


class TestStreaks:
    async def test_daily_mission_streak_follows_calendar_days(
        self, completion_service, progress_service, create_mission, registered_user
    ):
        mission = await create_mission(is_daily=True)

        first = await completion_service.complete_mission(
            mission.id, registered_user, now=at(2026, 3, 2, 23)
        )
        second = await completion_service.complete_mission(
            mission.id, registered_user, now=at(2026, 3, 3, 1)
        )
        after_gap = await completion_service.complete_mission(
            mission.id, registered_user, now=at(2026, 3, 5, 9)
        )

        assert (first.streak, second.streak, after_gap.streak) == (1, 2, 1)

        progress = await progress_service.get_user_progress(registered_user)
        assert progress.current_streak == 1
        assert progress.longest_streak == 2

    async def test_longest_streak_never_decreases(
        self, completion_service, progress_service, create_mission, registered_user
    ):
        mission = await create_mission(is_daily=True)
        days = [2, 3, 4, 6, 7, 10]
        longest_seen = []

        for day in days:
            result = await completion_service.complete_mission(
                mission.id, registered_user, now=at(2026, 3, day)
            )
            longest_seen.append(result.user_progress.longest_streak)

        assert longest_seen == sorted(longest_seen)
        assert longest_seen[-1] == 3

    async def test_several_daily_missions_count_one_streak_day(
        self, completion_service, create_mission, registered_user
    ):
        run = await create_mission(title="Run", is_daily=True, category="health", emoji="🏃")
        read = await create_mission(title="Read", is_daily=True)

        await completion_service.complete_mission(run.id, registered_user, now=at(2026, 3, 2, 8))
        result = await completion_service.complete_mission(
            read.id, registered_user, now=at(2026, 3, 2, 20)
        )

        assert result.user_progress.current_streak == 1

    async def test_one_shot_mission_leaves_streaks_alone(
        self, completion_service, create_mission, registered_user
    ):
        mission = await create_mission(is_daily=False)

        result = await completion_service.complete_mission(mission.id, registered_user)

        assert result.streak == 0
        assert result.user_progress.current_streak == 0
        assert result.user_progress.last_streak_date is None


# ============================================================================
# FAILURES
# ============================================================================


class TestFailures:
    async def test_write_failure_changes_nothing(
        self,
        mocker,
        completion_service,
        progress_service,
        mission_service,
        create_mission,
        registered_user,
    ):
        # Arrange
        mission = await create_mission(is_daily=True)
        before = await progress_service.get_user_progress(registered_user)
        mocker.patch.object(
            MissionHistoryRepository,
            "add",
            side_effect=SQLAlchemyError("simulated write failure"),
        )

        # Act
        with pytest.raises(PersistenceError) as exc_info:
            await completion_service.complete_mission(mission.id, registered_user)

        # Assert
        assert exc_info.value.kind is ErrorKind.PERSISTENCE
        assert exc_info.value.is_retryable is False
        mocker.stopall()

        after = await progress_service.get_user_progress(registered_user)
        assert after == before
        history = await progress_service.get_user_history(registered_user)
        assert history.total == 0
        assert await mission_service.get_user_missions(registered_user) == []

    async def test_unknown_mission(self, completion_service, registered_user):
        with pytest.raises(NotFoundError) as exc_info:
            await completion_service.complete_mission("missing", registered_user)

        assert exc_info.value.error_code == "MISSION_NOT_FOUND"
        assert exc_info.value.kind.status == 404

    async def test_inactive_mission(
        self, completion_service, mission_service, create_mission, registered_user
    ):
        mission = await create_mission()
        await mission_service.update_mission(mission.id, MissionUpdate(is_active=False))

        with pytest.raises(NotFoundError):
            await completion_service.complete_mission(mission.id, registered_user)

    async def test_unregistered_user(self, completion_service, create_mission):
        mission = await create_mission()

        with pytest.raises(UserProgressNotFoundError) as exc_info:
            await completion_service.complete_mission(mission.id, "ghost")

        assert exc_info.value.error_code == "USER_PROGRESS_NOT_FOUND"


# ============================================================================
# LOCKING
# ============================================================================


class TestLocking:
    async def test_mission_row_takes_shared_lock(
        self, mocker, completion_service, create_mission, registered_user
    ):
        mission = await create_mission()
        spy = mocker.spy(MissionRepository, "get_for_update")

        await completion_service.complete_mission(mission.id, registered_user)

        spy.assert_called_once()
        assert spy.call_args.kwargs == {"read": True}

    async def test_user_rows_take_exclusive_locks(
        self, mocker, completion_service, create_mission, registered_user
    ):
        mission = await create_mission()
        progress_spy = mocker.spy(UserProgressRepository, "find_by_user_id")
        state_spy = mocker.spy(UserMissionRepository, "find_for_user")

        await completion_service.complete_mission(mission.id, registered_user)

        assert progress_spy.call_args.kwargs["for_update"] is True
        assert state_spy.call_args.kwargs["for_update"] is True
