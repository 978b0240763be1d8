"""
Error Response Service for Starship Commander.

Purpose
-------
Turn domain and infrastructure exceptions into plain response dicts for the
outer API layer. The response status comes from the exception's `ErrorKind`,
never from its message text.

Responsibilities
----------------
- Map each `ErrorKind` to a title and HTTP-equivalent status
- Expose domain error messages and details to callers
- Hide infrastructure internals behind a generic message
- Provide a fallback for unknown exception types

Non-Responsibilities
--------------------
- Logging (handled by services)
- Exception creation or domain logic
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from starship.core.exceptions import (
    ErrorKind,
    ErrorSeverity,
    StarshipInfrastructureException,
)
from starship.modules.shared.exceptions import StarshipDomainException

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
SYSTEM_ERROR_MESSAGE = "A system error occurred. Please try again in a moment."


class ErrorTemplate:
    """Title and default help text for one error kind."""

    def __init__(self, title: str, help_text: Optional[str] = None) -> None:
        self.title = title
        self.help_text = help_text


ERROR_TEMPLATES: Dict[ErrorKind, ErrorTemplate] = {
    ErrorKind.NOT_FOUND: ErrorTemplate("Not Found"),
    ErrorKind.VALIDATION: ErrorTemplate(
        "Invalid Input", "Please check your input and try again."
    ),
    ErrorKind.CONFLICT: ErrorTemplate("Already Exists"),
    ErrorKind.PERSISTENCE: ErrorTemplate(
        "Database Error", "If this persists, contact support."
    ),
    ErrorKind.CONFIGURATION: ErrorTemplate(
        "Configuration Error", "Error code: CONFIG_ERROR"
    ),
}


class ErrorResponseService:
    """
    Formats exceptions into response dicts:

        {
            "success": False,
            "error": "Mission not found: 42",
            "error_code": "MISSION_NOT_FOUND",
            "error_kind": "not_found",
            "status": 404,
            "details": {...},
            "title": "Not Found",
            "help_text": None,
            "severity": "info",
        }
    """

    def format_error(self, error: Exception) -> Dict[str, Any]:
        if isinstance(error, StarshipDomainException):
            return self._build(
                error.kind,
                message=error.message,
                error_code=error.error_code,
                details=dict(error.details),
                severity=error.severity,
            )

        if isinstance(error, StarshipInfrastructureException):
            return self._build(
                error.kind,
                message=SYSTEM_ERROR_MESSAGE,
                error_code=error.error_code,
                details={},
                severity=error.severity,
            )

        return self._format_fallback_error(error)

    @staticmethod
    def _build(
        kind: ErrorKind,
        message: str,
        error_code: str,
        details: Dict[str, Any],
        severity: ErrorSeverity,
    ) -> Dict[str, Any]:
        template = ERROR_TEMPLATES[kind]
        return {
            "success": False,
            "error": message,
            "error_code": error_code,
            "error_kind": kind.value,
            "status": kind.status,
            "details": details,
            "title": template.title,
            "help_text": template.help_text,
            "severity": severity.value,
        }

    def _format_fallback_error(self, error: Exception) -> Dict[str, Any]:
        """Unknown exceptions never leak their message."""
        return {
            "success": False,
            "error": GENERIC_ERROR_MESSAGE,
            "error_code": "INTERNAL_ERROR",
            "error_kind": None,
            "status": 500,
            "details": {},
            "title": "Something Went Wrong",
            "help_text": "The issue has been logged. If this persists, contact support.",
            "severity": ErrorSeverity.ERROR.value,
        }
