"""
Unit tests for InputValidator and the shared domain validators.
"""

from datetime import datetime, timezone

import pytest

from starship.core.validation import InputValidator
from starship.modules.shared.exceptions import ValidationError
from starship.modules.shared.validators import (
    validate_date_range,
    validate_pagination,
)


@pytest.mark.unit
class TestIntegers:
    def test_accepts_integral_values(self):
        assert InputValidator.validate_integer("42", "n") == 42
        assert InputValidator.validate_integer(3.0, "n") == 3

    @pytest.mark.parametrize("value", [True, 2.5, "x", None])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError):
            InputValidator.validate_integer(value, "n")

    def test_bounds(self):
        with pytest.raises(ValidationError):
            InputValidator.validate_integer(0, "n", min_value=1)
        with pytest.raises(ValidationError):
            InputValidator.validate_integer(11, "n", max_value=10)
        with pytest.raises(ValidationError):
            InputValidator.validate_integer(0, "n", allow_zero=False)


@pytest.mark.unit
class TestIdentifiers:
    def test_strips_whitespace(self):
        assert InputValidator.validate_identifier("  user-1 ", "user_id") == "user-1"

    @pytest.mark.parametrize("value", ["", "   ", None, 12, "x" * 65])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_identifier(value, "user_id")
        assert exc_info.value.field == "user_id"


@pytest.mark.unit
class TestChoices:
    def test_case_insensitive(self):
        assert InputValidator.validate_choice("Study", "category", ["study", "health"]) == "study"

    def test_unknown_choice(self):
        with pytest.raises(ValidationError):
            InputValidator.validate_choice("sleep", "category", ["study", "health"])


@pytest.mark.unit
class TestDomainValidators:
    def test_date_range(self):
        early = datetime(2026, 1, 1, tzinfo=timezone.utc)
        late = datetime(2026, 2, 1, tzinfo=timezone.utc)

        validate_date_range(early, late)
        validate_date_range(None, late)
        with pytest.raises(ValidationError):
            validate_date_range(late, early)

    @pytest.mark.parametrize("limit,offset", [(0, 0), (201, 0), (10, -1)])
    def test_pagination(self, limit, offset):
        with pytest.raises(ValidationError):
            validate_pagination(limit, offset)
