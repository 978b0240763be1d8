"""
PostgreSQL Integration Tests
============================

Runs the completion flow against a real PostgreSQL server started with
testcontainers. Skipped unless STARSHIP_POSTGRES_TESTS=1.
"""

import asyncio
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from starship.core.database.service import DatabaseService, DatabaseSettings
from starship.modules.mission import MissionCompletionService, MissionService
from starship.modules.progression import ProgressService
from tests.conftest import make_draft

pytestmark = [pytest.mark.integration, pytest.mark.database, pytest.mark.postgres]


@pytest.fixture(scope="module")
def postgres_url() -> Generator[str, None, None]:
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer(image="postgres:17-alpine", driver="asyncpg")
    container.start()
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest_asyncio.fixture
async def pg_db(postgres_url: str) -> AsyncGenerator[DatabaseService, None]:
    service = DatabaseService(DatabaseSettings(url=postgres_url, testing=True))
    await service.initialize()
    await service.create_schema()

    yield service

    await service.drop_schema()
    await service.shutdown()


async def test_completion_on_postgres(pg_db, mission_validator, level_calculator, streak_rule):
    # Arrange
    missions = MissionService(pg_db, mission_validator, streak_rule)
    completion = MissionCompletionService(pg_db, level_calculator, streak_rule)
    progress = ProgressService(pg_db, level_calculator, streak_rule)
    await progress.register_user("pg-user")
    mission = await missions.create_mission(make_draft(xp_reward=45, coin_reward=10))

    # Act
    result = await completion.complete_mission(mission.id, "pg-user")

    # Assert
    assert result.user_progress.total_xp_earned == 45
    assert pg_db.settings.is_postgres is True
    assert await pg_db.health_check() is True


async def test_concurrent_completions_are_serialized(
    pg_db, mission_validator, level_calculator, streak_rule
):
    # Row locks serialize both completions; neither update is lost
    missions = MissionService(pg_db, mission_validator, streak_rule)
    completion = MissionCompletionService(pg_db, level_calculator, streak_rule)
    progress = ProgressService(pg_db, level_calculator, streak_rule)
    await progress.register_user("pg-racer")
    mission = await missions.create_mission(make_draft(xp_reward=25, coin_reward=10))

    await asyncio.gather(
        completion.complete_mission(mission.id, "pg-racer"),
        completion.complete_mission(mission.id, "pg-racer"),
    )

    final = await progress.get_user_progress("pg-racer")
    assert final.total_xp_earned == 50
    assert final.level == 2
    assert final.total_missions_completed == 2
