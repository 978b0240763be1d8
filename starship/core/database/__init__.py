"""
Database subsystem for Starship Commander.

Provides the async SQLAlchemy engine, the unit-of-work boundary, and the ORM
base classes and mixins for model definitions.
"""

from starship.core.database.base import (
    Base,
    IdMixin,
    TimestampMixin,
    ensure_utc,
    new_uuid,
    utc_now,
)
from starship.core.database.service import (
    DatabaseInitializationError,
    DatabaseNotInitializedError,
    DatabaseService,
    DatabaseSettings,
    UnitOfWork,
)

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "ensure_utc",
    "new_uuid",
    "utc_now",
    "DatabaseService",
    "DatabaseSettings",
    "UnitOfWork",
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
]
