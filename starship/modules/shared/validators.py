"""
Starship Domain Validators

Domain validation utilities that raise structured domain exceptions when a
rule is broken. Validators take the data to check as parameters, never touch
the database, and return None on success.

Usage
-----
    from starship.modules.shared.validators import validate_date_range

    validate_date_range(date_from, date_to)
    # Raises ValidationError if date_from is after date_to
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .exceptions import ValidationError

if TYPE_CHECKING:
    from datetime import datetime


MAX_PAGE_SIZE = 200


def validate_date_range(
    date_from: Optional[datetime], date_to: Optional[datetime]
) -> None:
    """
    Validate an optional [date_from, date_to] window.

    Raises:
        ValidationError: If both bounds are given and date_from > date_to
    """
    if date_from is not None and date_to is not None and date_from > date_to:
        raise ValidationError(
            "date_range",
            f"date_from ({date_from.isoformat()}) must not be after "
            f"date_to ({date_to.isoformat()})",
        )


def validate_pagination(limit: int, offset: int, max_limit: int = MAX_PAGE_SIZE) -> None:
    """
    Raises:
        ValidationError: If limit is outside 1..max_limit or offset is negative
    """
    if not (1 <= limit <= max_limit):
        raise ValidationError(
            "limit", f"limit must be between 1 and {max_limit}, got {limit}"
        )
    if offset < 0:
        raise ValidationError("offset", f"offset must be non-negative, got {offset}")
