"""
Integration Tests for MissionService
====================================

Mission definitions, title uniqueness among active missions, partial
updates with re-validation, and per-user mission views.
"""

import pytest

from starship.database.models.enums import Difficulty, MissionCategory
from starship.modules.mission import MissionFilters, MissionUpdate
from starship.modules.shared.exceptions import ConflictError, NotFoundError, ValidationError
from tests.conftest import at, make_draft

pytestmark = [pytest.mark.integration, pytest.mark.database]


class TestCreateMission:
    async def test_create_returns_view(self, mission_service):
        view = await mission_service.create_mission(make_draft(title="  Journal  "))

        assert view.id
        assert view.title == "Journal"
        assert view.category is MissionCategory.STUDY
        assert view.difficulty is Difficulty.EASY
        assert view.is_active is True
        assert view.created_at.tzinfo is not None

    async def test_out_of_range_rewards_write_nothing(self, mission_service):
        with pytest.raises(ValidationError) as exc_info:
            await mission_service.create_mission(make_draft(xp_reward=200, coin_reward=100))

        assert "10-50" in exc_info.value.message
        assert await mission_service.list_missions() == []

    async def test_duplicate_active_title_conflicts(self, mission_service):
        await mission_service.create_mission(make_draft(title="Meditate"))

        with pytest.raises(ConflictError) as exc_info:
            await mission_service.create_mission(make_draft(title="Meditate"))

        assert exc_info.value.kind.status == 409

    async def test_duplicate_of_inactive_title_is_allowed(self, mission_service):
        old = await mission_service.create_mission(make_draft(title="Meditate"))
        await mission_service.update_mission(old.id, MissionUpdate(is_active=False))

        new = await mission_service.create_mission(make_draft(title="Meditate"))

        assert new.id != old.id


class TestUpdateMission:
    async def test_partial_update(self, mission_service):
        mission = await mission_service.create_mission(make_draft())

        updated = await mission_service.update_mission(
            mission.id, MissionUpdate(description="Read thirty pages", emoji="📖")
        )

        assert updated.description == "Read thirty pages"
        assert updated.emoji == "📖"
        assert updated.title == mission.title

    async def test_difficulty_change_rechecks_existing_rewards(self, mission_service):
        mission = await mission_service.create_mission(make_draft(xp_reward=25, coin_reward=10))

        with pytest.raises(ValidationError) as exc_info:
            await mission_service.update_mission(
                mission.id, MissionUpdate(difficulty=Difficulty.HARD)
            )

        assert "HARD" in exc_info.value.message
        unchanged = await mission_service.get_mission(mission.id)
        assert unchanged.difficulty is Difficulty.EASY

    async def test_rename_onto_active_title_conflicts(self, mission_service):
        await mission_service.create_mission(make_draft(title="Run"))
        other = await mission_service.create_mission(make_draft(title="Walk"))

        with pytest.raises(ConflictError):
            await mission_service.update_mission(other.id, MissionUpdate(title="Run"))

    async def test_update_missing_mission(self, mission_service):
        with pytest.raises(NotFoundError):
            await mission_service.update_mission("missing", MissionUpdate(title="X"))


class TestReadAndDelete:
    async def test_list_filters(self, mission_service):
        await mission_service.create_mission(make_draft(title="Run", category="health", is_daily=True))
        await mission_service.create_mission(
            make_draft(title="Paint", category="creative", difficulty="medium", xp_reward=75, coin_reward=30)
        )

        daily = await mission_service.list_missions(MissionFilters(is_daily=True))
        medium = await mission_service.list_missions(MissionFilters(difficulty="MEDIUM"))
        search = await mission_service.list_missions(MissionFilters(search="pai"))

        assert [m.title for m in daily] == ["Run"]
        assert [m.title for m in medium] == ["Paint"]
        assert [m.title for m in search] == ["Paint"]

    async def test_get_missing_mission(self, mission_service):
        with pytest.raises(NotFoundError):
            await mission_service.get_mission("missing")

    async def test_delete_keeps_history(
        self, mission_service, completion_service, progress_service, registered_user
    ):
        mission = await mission_service.create_mission(make_draft())
        await completion_service.complete_mission(mission.id, registered_user)

        assert await mission_service.delete_mission(mission.id) is True

        with pytest.raises(NotFoundError):
            await mission_service.get_mission(mission.id)
        assert await mission_service.get_user_missions(registered_user) == []
        history = await progress_service.get_user_history(registered_user)
        assert history.total == 1
        assert history.items[0].mission_title == "Unknown Mission"


class TestUserViews:
    async def test_daily_missions_mark_today(
        self, mission_service, completion_service, registered_user
    ):
        run = await mission_service.create_mission(make_draft(title="Run", is_daily=True))
        await mission_service.create_mission(make_draft(title="Read", is_daily=True))
        await mission_service.create_mission(make_draft(title="Once"))
        await completion_service.complete_mission(run.id, registered_user, now=at(2026, 3, 2, 9))

        same_day = await mission_service.get_daily_missions(registered_user, now=at(2026, 3, 2, 21))
        next_day = await mission_service.get_daily_missions(registered_user, now=at(2026, 3, 3, 9))

        by_title = {view.mission.title: view for view in same_day}
        assert set(by_title) == {"Run", "Read"}
        assert by_title["Run"].completed_today is True
        assert by_title["Run"].streak == 1
        assert by_title["Read"].completed_today is False
        assert all(not view.completed_today for view in next_day)

    async def test_user_missions_filter_by_date(
        self, mission_service, completion_service, registered_user
    ):
        early = await mission_service.create_mission(make_draft(title="Early"))
        late = await mission_service.create_mission(make_draft(title="Late"))
        await completion_service.complete_mission(early.id, registered_user, now=at(2026, 3, 1))
        await completion_service.complete_mission(late.id, registered_user, now=at(2026, 3, 20))

        everything = await mission_service.get_user_missions(registered_user, is_completed=True)
        recent = await mission_service.get_user_missions(
            registered_user, date_from=at(2026, 3, 10)
        )

        assert [view.mission.title for view in everything] == ["Late", "Early"]
        assert [view.mission.title for view in recent] == ["Late"]
        assert recent[0].completed_at == at(2026, 3, 20)
