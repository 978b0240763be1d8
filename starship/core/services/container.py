"""
Service Container
=================

Purpose
-------
Composition root for Starship Commander. Builds the database service, the
pure policy objects (level calculator, reward policy, streak rule, mission
validator) and the domain services, wiring each one through its
constructor.

Responsibilities
----------------
- Initialize and shut down the database service
- Build every domain service with its collaborators
- Expose services to the outer API layer

Non-Responsibilities
--------------------
- Business logic
- Process-wide registration (each container is an ordinary object; tests
  build their own)
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from starship.core.config.config import Config
from starship.core.database.service import DatabaseService, DatabaseSettings
from starship.core.logging.logger import get_logger
from starship.core.services.error_response_service import ErrorResponseService
from starship.modules.mission import (
    MissionCompletionService,
    MissionService,
    MissionValidator,
    RewardPolicy,
)
from starship.modules.progression import LevelCalculator, ProgressService, StreakRule

if TYPE_CHECKING:
    from logging import Logger


class ServiceContainer:
    """
    Builds and holds every service for one application instance.

    Usage:
        container = ServiceContainer()
        await container.initialize()

        result = await container.completion.complete_mission(mission_id, user_id)

        await container.shutdown()
    """

    def __init__(
        self,
        settings: Optional[DatabaseSettings] = None,
        config: Any = Config,
        logger: Optional[Logger] = None,
        create_schema: bool = False,
    ) -> None:
        """
        Args:
            settings: Database settings (defaults to values from `config`)
            config: Configuration source for policy objects
            logger: Container logger
            create_schema: Create missing tables during `initialize()`
        """
        self._config = config
        self._logger = logger or get_logger(__name__)
        self._create_schema = create_schema

        self.db = DatabaseService(settings)

        self._level_calculator: Optional[LevelCalculator] = None
        self._reward_policy: Optional[RewardPolicy] = None
        self._streak_rule: Optional[StreakRule] = None
        self._validator: Optional[MissionValidator] = None

        self._missions: Optional[MissionService] = None
        self._completion: Optional[MissionCompletionService] = None
        self._progress: Optional[ProgressService] = None
        self._errors = ErrorResponseService()

        self._initialized = False
        self._service_init_times: Dict[str, float] = {}

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def initialize(self) -> None:
        if self._initialized:
            self._logger.warning("ServiceContainer already initialized")
            return

        start = time.perf_counter()
        self._logger.info("Service container initialization starting...")

        try:
            await self.db.initialize()
            if self._create_schema:
                await self.db.create_schema()

            self._level_calculator = LevelCalculator()
            self._reward_policy = RewardPolicy()
            self._streak_rule = StreakRule.from_config(self._config)
            self._validator = MissionValidator.from_config(
                self._reward_policy, self._config
            )

            self._missions = self._create_service(
                "missions",
                MissionService,
                db=self.db,
                validator=self._validator,
                streak_rule=self._streak_rule,
            )
            self._completion = self._create_service(
                "completion",
                MissionCompletionService,
                db=self.db,
                level_calculator=self._level_calculator,
                streak_rule=self._streak_rule,
            )
            self._progress = self._create_service(
                "progress",
                ProgressService,
                db=self.db,
                level_calculator=self._level_calculator,
                streak_rule=self._streak_rule,
            )

            self._initialized = True
            self._logger.info(
                "Service container initialized successfully",
                extra={
                    "service_count": len(self._service_init_times),
                    "total_duration_ms": (time.perf_counter() - start) * 1000.0,
                },
            )
        except Exception as e:
            self._logger.critical(
                "Service container initialization failed",
                exc_info=True,
                extra={"error": str(e)},
            )
            await self.db.shutdown()
            raise

    def _create_service(self, name: str, cls: type, **dependencies: Any) -> Any:
        start = time.perf_counter()
        instance = cls(
            logger=get_logger(f"{cls.__module__}.{cls.__name__}"),
            **dependencies,
        )
        duration = time.perf_counter() - start
        self._service_init_times[name] = duration
        self._logger.debug(f"Initialized {name} in {duration:.3f}s")
        return instance

    async def shutdown(self) -> None:
        if not self._initialized:
            return

        self._logger.info("Shutting down service container...")
        await self.db.shutdown()
        self._initialized = False
        self._logger.info("Service container shut down")

    async def health_check(self) -> Dict[str, Any]:
        return {
            "initialized": self._initialized,
            "service_count": len(self._service_init_times),
            "database": await self.db.health_check() if self._initialized else False,
        }

    # ========================================================================
    # Services
    # ========================================================================

    def _require(self, service: Optional[Any]) -> Any:
        if not self._initialized or service is None:
            raise RuntimeError("ServiceContainer not initialized. Call initialize() first.")
        return service

    @property
    def missions(self) -> MissionService:
        return self._require(self._missions)

    @property
    def completion(self) -> MissionCompletionService:
        return self._require(self._completion)

    @property
    def progress(self) -> ProgressService:
        return self._require(self._progress)

    @property
    def errors(self) -> ErrorResponseService:
        return self._errors

    @property
    def is_initialized(self) -> bool:
        return self._initialized
