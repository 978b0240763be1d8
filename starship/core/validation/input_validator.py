"""
Input Validation Layer for Starship Commander

Purpose
-------
Centralized validation for raw inputs arriving from the outer API layer:
type coercion, bounds checking and format checks for identifiers, integers,
strings and enumerated choices.

Responsibilities
----------------
- Validate and convert inputs to the right types
- Enforce bounds on numeric inputs
- Validate user and mission identifiers
- Validate string length and choice inputs
- Raise ValidationError with readable messages

Non-Responsibilities
--------------------
- Business rules such as reward ranges (mission validation module)
- Persistence constraints

Observability
-------------
Every validation failure is logged at debug level with the field name, the
raw value (repr) and the reason.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional, Sequence

from starship.core.logging.logger import get_logger
from starship.modules.shared.exceptions import ValidationError

logger = get_logger(__name__)

MAX_IDENTIFIER_LENGTH = 64


def _raise_validation_error(field_name: str, value: Any, message: str) -> NoReturn:
    """
    Centralized helper to log and raise a ValidationError.
    """
    logger.debug(
        "Input validation failed",
        extra={
            "field_name": field_name,
            "raw_value": repr(value),
            "reason": message,
        },
    )
    raise ValidationError(field_name, message)


class InputValidator:
    """
    Centralized input validation.

    All validation methods:
    - Are stateless and deterministic
    - Return validated values on success
    - Raise ValidationError on failure (never silently fail)
    """

    # =========================================================================
    # INTEGER VALIDATION
    # =========================================================================

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
        allow_zero: bool = True,
    ) -> int:
        """
        Validate and convert value to integer with optional bounds checking.

        Booleans are rejected even though they are `int` subclasses.

        Raises:
            ValidationError: If validation fails
        """
        if value is None:
            _raise_validation_error(field_name, value, "Value is required")

        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            _raise_validation_error(
                field_name, value, f"Must be a whole number, got '{value}'"
            )

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            _raise_validation_error(
                field_name,
                value,
                f"Must be a whole number, got '{value}'",
            )

        if not allow_zero and int_value == 0:
            _raise_validation_error(field_name, int_value, "Cannot be zero")

        if min_value is not None and int_value < min_value:
            _raise_validation_error(
                field_name,
                int_value,
                f"Must be at least {min_value}, got {int_value}",
            )

        if max_value is not None and int_value > max_value:
            _raise_validation_error(
                field_name,
                int_value,
                f"Cannot exceed {max_value}, got {int_value}",
            )

        return int_value

    # =========================================================================
    # IDENTIFIER VALIDATION
    # =========================================================================

    @staticmethod
    def validate_identifier(value: Any, field_name: str) -> str:
        """
        Validate an opaque string identifier (user id, mission id).

        Leading/trailing whitespace is stripped; the result must be non-empty
        and at most 64 characters.
        """
        if not isinstance(value, str):
            _raise_validation_error(field_name, value, "Must be a string identifier")

        stripped = value.strip()
        if not stripped:
            _raise_validation_error(field_name, value, "Value is required")
        if len(stripped) > MAX_IDENTIFIER_LENGTH:
            _raise_validation_error(
                field_name,
                value,
                f"Cannot exceed {MAX_IDENTIFIER_LENGTH} characters",
            )
        return stripped

    # =========================================================================
    # STRING VALIDATION
    # =========================================================================

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ) -> str:
        """
        Validate string input with optional length constraints.

        The value is stripped before length checks.
        """
        if value is None:
            _raise_validation_error(field_name, value, "Value is required")
        if not isinstance(value, str):
            _raise_validation_error(field_name, value, "Must be a string")

        str_value = value.strip()

        if min_length is not None and len(str_value) < min_length:
            _raise_validation_error(
                field_name,
                str_value,
                f"Must be at least {min_length} characters",
            )

        if max_length is not None and len(str_value) > max_length:
            _raise_validation_error(
                field_name,
                str_value,
                f"Cannot exceed {max_length} characters",
            )

        return str_value

    # =========================================================================
    # CHOICE VALIDATION
    # =========================================================================

    @staticmethod
    def validate_choice(
        value: Any,
        field_name: str,
        valid_choices: Sequence[str],
    ) -> str:
        """
        Validate that value is one of the allowed choices (case-insensitive).

        Returns:
            Lowercased validated choice
        """
        str_value = str(value).lower().strip()
        normalized_choices = {choice.lower() for choice in valid_choices}

        if str_value not in normalized_choices:
            choices_str = ", ".join(sorted(valid_choices))
            _raise_validation_error(
                field_name,
                value,
                f"Invalid choice '{value}'. Must be one of: {choices_str}",
            )

        return str_value
