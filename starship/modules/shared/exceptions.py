"""
Domain exceptions for Starship Commander.

Purpose
-------
Define the structured, domain-specific exception hierarchy. Services raise
these for business rule violations and missing resources; the outer API layer
turns them into responses through `ErrorResponseService`.

Design Notes
------------
- All domain exceptions inherit from `StarshipDomainException`.
- Each exception carries `message`, `details`, `severity`, `is_retryable`,
  `error_code` and an explicit `kind` (`ErrorKind`).
- Validation failures are raised before any mutation takes place.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from starship.core.exceptions import ErrorKind, ErrorSeverity


class StarshipDomainException(Exception):
    """
    Base exception for all Starship domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise StarshipDomainException(
        ...     "Mission cannot be completed",
        ...     {"reason": "inactive"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False
    KIND: ErrorKind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        self.kind: ErrorKind = self.KIND
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "error_kind": self.kind.value,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"kind={self.kind.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class NotFoundError(StarshipDomainException):
    """
    Raised when a requested resource cannot be found.

    Args:
        resource_type: Type of resource (e.g., "Mission")
        identifier: Optional identifier for the missing resource
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False
    KIND = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class UserProgressNotFoundError(NotFoundError):
    """
    Raised when a user has no progress row.

    Registration always creates one, so its absence is a data integrity
    problem upstream rather than a normal miss. Logged at ERROR and never
    retried.
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("UserProgress", user_id)
        self.error_code = "USER_PROGRESS_NOT_FOUND"


class ValidationError(StarshipDomainException):
    """
    Raised when input fails domain validation.

    Args:
        field: Name of the field that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False
    KIND = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.validation_message = message
        super().__init__(
            f"Validation error for {field}: {message}",
            details={
                "field": field,
                "validation_message": message,
            },
            error_code=f"VALIDATION_{field.upper()}",
        )


class ConflictError(StarshipDomainException):
    """
    Raised when a write would violate a uniqueness rule.

    Args:
        resource_type: Type of resource (e.g., "Mission")
        field: Field whose value collides
        value: The colliding value
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False
    KIND = ErrorKind.CONFLICT

    def __init__(self, resource_type: str, field: str, value: Any) -> None:
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            details={
                "resource_type": resource_type,
                "field": field,
                "value": value,
            },
            error_code=f"{resource_type.upper()}_CONFLICT",
        )
