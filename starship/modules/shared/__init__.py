"""
Starship Shared Module

Domain-level foundations for the mission and progression modules:
- Domain exceptions
- Base service and repository patterns
- Domain validation utilities

Usage
-----
    from starship.modules.shared import (
        BaseService,
        BaseRepository,
        NotFoundError,
        validate_date_range,
    )
"""

from __future__ import annotations

from .base_repository import BaseRepository
from .base_service import BaseService
from .exceptions import (
    ConflictError,
    NotFoundError,
    StarshipDomainException,
    UserProgressNotFoundError,
    ValidationError,
)
from .validators import (
    validate_date_range,
    validate_pagination,
)

__all__ = [
    "BaseRepository",
    "BaseService",
    "StarshipDomainException",
    "NotFoundError",
    "UserProgressNotFoundError",
    "ValidationError",
    "ConflictError",
    "validate_date_range",
    "validate_pagination",
]
