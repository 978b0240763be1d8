"""
Unit tests for the exception hierarchy and ErrorResponseService.

Responses are chosen from the explicit error kind, never from message text.
"""

import pytest
from sqlalchemy.exc import OperationalError

from starship.core.exceptions import (
    ConfigurationError,
    ErrorKind,
    ErrorSeverity,
    PersistenceError,
    get_error_kind,
    is_transient_error,
    should_alert,
)
from starship.core.services import ErrorResponseService
from starship.modules.shared.exceptions import (
    ConflictError,
    NotFoundError,
    UserProgressNotFoundError,
    ValidationError,
)


@pytest.fixture
def error_service() -> ErrorResponseService:
    return ErrorResponseService()


@pytest.mark.unit
class TestErrorKinds:
    @pytest.mark.parametrize(
        "error,kind,status",
        [
            (NotFoundError("Mission", "m-1"), ErrorKind.NOT_FOUND, 404),
            (UserProgressNotFoundError("u-1"), ErrorKind.NOT_FOUND, 404),
            (ValidationError("title", "bad"), ErrorKind.VALIDATION, 400),
            (ConflictError("Mission", "title", "Run"), ErrorKind.CONFLICT, 409),
            (
                PersistenceError("complete_mission", RuntimeError("disk full")),
                ErrorKind.PERSISTENCE,
                500,
            ),
            (ConfigurationError("STREAK_TIMEZONE", "bad"), ErrorKind.CONFIGURATION, 500),
        ],
    )
    def test_kind_and_status(self, error, kind, status):
        assert error.kind is kind
        assert get_error_kind(error) is kind
        assert kind.status == status

    def test_unknown_exception_has_no_kind(self):
        assert get_error_kind(RuntimeError("boom")) is None

    def test_user_progress_not_found_is_distinct(self):
        error = UserProgressNotFoundError("u-1")

        assert isinstance(error, NotFoundError)
        assert error.error_code == "USER_PROGRESS_NOT_FOUND"
        assert error.severity is ErrorSeverity.ERROR
        assert error.is_retryable is False
        assert should_alert(error) is True

    def test_not_found_is_informational(self):
        error = NotFoundError("Mission", "m-1")

        assert error.error_code == "MISSION_NOT_FOUND"
        assert error.message == "Mission not found: m-1"
        assert should_alert(error) is False

    def test_persistence_error_is_not_retryable(self):
        original = OperationalError("UPDATE", {}, Exception("locked"))
        error = PersistenceError("complete_mission", original)

        assert is_transient_error(error) is False
        assert error.details["operation"] == "complete_mission"
        assert error.original_error is original

    def test_to_dict_carries_kind(self):
        data = ConflictError("Mission", "title", "Run").to_dict()

        assert data["error_kind"] == "conflict"
        assert data["error_code"] == "MISSION_CONFLICT"


@pytest.mark.unit
class TestErrorResponseService:
    def test_domain_error_response(self, error_service):
        response = error_service.format_error(ValidationError("title", "too long"))

        assert response["success"] is False
        assert response["status"] == 400
        assert response["error_kind"] == "validation"
        assert response["error_code"] == "VALIDATION_TITLE"
        assert response["error"] == "Validation error for title: too long"
        assert response["details"] == {"field": "title", "validation_message": "too long"}

    def test_not_found_message_does_not_decide_status(self, error_service):
        # A validation error whose text mentions "not found" is still a 400
        response = error_service.format_error(ValidationError("mission", "not found"))
        assert response["status"] == 400

    def test_infrastructure_error_hides_internals(self, error_service):
        error = PersistenceError("complete_mission", RuntimeError("password=secret"))

        response = error_service.format_error(error)

        assert response["status"] == 500
        assert response["error_kind"] == "persistence"
        assert "secret" not in response["error"]
        assert response["details"] == {}

    def test_unknown_error_is_generic_500(self, error_service):
        response = error_service.format_error(KeyError("internal"))

        assert response["status"] == 500
        assert response["error"] == "An unexpected error occurred."
        assert response["error_kind"] is None
