"""
Pytest Configuration and Fixtures for Starship Commander Tests
==============================================================

Purpose
-------
Centralized fixtures for the test suite: database service, policy objects,
domain services and data factories.

Architecture Notes
------------------
- Environment variables are set before any `starship` import because
  `Config` loads at import time
- Unit tests use pure policy objects or mocks (fast, isolated)
- Service tests run against an in-memory SQLite engine, one per test
- PostgreSQL tests use testcontainers and only run with
  STARSHIP_POSTGRES_TESTS=1
"""

from __future__ import annotations

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from datetime import datetime, timezone
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio

from starship.core.database.service import DatabaseService, DatabaseSettings
from starship.core.logging.logger import clear_log_context, get_logger
from starship.database.models.enums import Difficulty, MissionCategory
from starship.modules.mission import (
    MissionCompletionService,
    MissionDraft,
    MissionService,
    MissionValidator,
    MissionView,
    RewardPolicy,
)
from starship.modules.progression import LevelCalculator, ProgressService, StreakRule

logger = get_logger(__name__)

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_collection_modifyitems(config, items):
    """Skip PostgreSQL tests unless explicitly enabled."""
    if os.getenv("STARSHIP_POSTGRES_TESTS") == "1":
        return
    skip_pg = pytest.mark.skip(reason="set STARSHIP_POSTGRES_TESTS=1 to run")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_pg)


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_log_context()


# ============================================================================
# POLICY FIXTURES (Unit Tests)
# ============================================================================


@pytest.fixture
def level_calculator() -> LevelCalculator:
    return LevelCalculator()


@pytest.fixture
def reward_policy() -> RewardPolicy:
    return RewardPolicy()


@pytest.fixture
def streak_rule() -> StreakRule:
    return StreakRule()


@pytest.fixture
def mission_validator(reward_policy: RewardPolicy) -> MissionValidator:
    return MissionValidator(reward_policy)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[DatabaseService, None]:
    """
    Fresh in-memory database with the full schema.

    Scope: function (clean slate per test)
    """
    service = DatabaseService(DatabaseSettings(url=MEMORY_URL, testing=True))
    await service.initialize()
    await service.create_schema()

    yield service

    await service.shutdown()


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def mission_service(
    db: DatabaseService, mission_validator: MissionValidator, streak_rule: StreakRule
) -> MissionService:
    return MissionService(db, mission_validator, streak_rule)


@pytest.fixture
def completion_service(
    db: DatabaseService, level_calculator: LevelCalculator, streak_rule: StreakRule
) -> MissionCompletionService:
    return MissionCompletionService(db, level_calculator, streak_rule)


@pytest.fixture
def progress_service(
    db: DatabaseService, level_calculator: LevelCalculator, streak_rule: StreakRule
) -> ProgressService:
    return ProgressService(db, level_calculator, streak_rule)


# ============================================================================
# FACTORIES
# ============================================================================


def make_draft(**overrides) -> MissionDraft:
    """EASY study mission worth 25 XP / 10 coins unless overridden."""
    fields = {
        "title": "Read 20 pages",
        "description": "Read twenty pages of any book",
        "xp_reward": 25,
        "coin_reward": 10,
        "category": MissionCategory.STUDY,
        "emoji": "📚",
        "is_daily": False,
        "difficulty": Difficulty.EASY,
    }
    fields.update(overrides)
    return MissionDraft(**fields)


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """UTC instant shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def create_mission(
    mission_service: MissionService,
) -> Callable[..., Awaitable[MissionView]]:
    async def _create(**overrides) -> MissionView:
        return await mission_service.create_mission(make_draft(**overrides))

    return _create


@pytest_asyncio.fixture
async def registered_user(progress_service: ProgressService) -> str:
    user_id = "user-1"
    await progress_service.register_user(user_id)
    return user_id
