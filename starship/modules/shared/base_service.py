"""
Base Service Foundation

Purpose
-------
Foundational class for all domain services in Starship Commander. Services
implement business logic, open units of work, enforce business rules and
raise domain exceptions.

Design Notes
------------
This base class provides:
- Structured logging with operation context

What this class does NOT do:
- Open database transactions (services do that through their injected
  `UnitOfWork`)
- Hold any process-wide state

Usage
-----
    class MissionService(BaseService):
        def __init__(self, db: UnitOfWork, logger: Logger):
            super().__init__(logger)
            self.db = db
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from logging import Logger


class BaseService:
    """
    Base class for all domain services.

    Args:
        logger: Structured logger instance
    """

    def __init__(self, logger: Logger) -> None:
        self.log = logger

    def log_operation(self, operation: str, **context: Any) -> None:
        self.log.info(
            f"Service operation: {operation}",
            extra={"operation": operation, **context},
        )

