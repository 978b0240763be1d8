"""
Unit tests for Config parsing helpers.
"""

import pytest

from starship.core.config import Config, Environment


@pytest.mark.unit
class TestSafeParsing:
    def test_int_from_env(self, monkeypatch):
        monkeypatch.setenv("STARSHIP_TEST_INT", "25")
        assert Config._safe_int("STARSHIP_TEST_INT", 10, min_val=1) == 25

    def test_int_malformed_falls_back(self, monkeypatch):
        monkeypatch.setenv("STARSHIP_TEST_INT", "many")
        assert Config._safe_int("STARSHIP_TEST_INT", 10) == 10

    def test_int_out_of_bounds_falls_back(self, monkeypatch):
        monkeypatch.setenv("STARSHIP_TEST_INT", "0")
        assert Config._safe_int("STARSHIP_TEST_INT", 10, min_val=1) == 10

    @pytest.mark.parametrize(
        "raw,expected", [("yes", True), ("ON", True), ("0", False), ("off", False)]
    )
    def test_bool_values(self, monkeypatch, raw, expected):
        monkeypatch.setenv("STARSHIP_TEST_BOOL", raw)
        assert Config._safe_bool("STARSHIP_TEST_BOOL", not expected) is expected

    def test_bool_malformed_falls_back(self, monkeypatch):
        monkeypatch.setenv("STARSHIP_TEST_BOOL", "maybe")
        assert Config._safe_bool("STARSHIP_TEST_BOOL", True) is True

    def test_optional_bool_unset(self, monkeypatch):
        monkeypatch.delenv("STARSHIP_TEST_BOOL", raising=False)
        assert Config._safe_optional_bool("STARSHIP_TEST_BOOL") is None


@pytest.mark.unit
class TestLoadedValues:
    def test_testing_environment(self):
        assert Config.is_testing() is True
        assert Config.environment() is Environment.TESTING
        assert Config.is_production() is False

    def test_defaults(self):
        assert Config.MISSION_TITLE_MAX_LENGTH == 100
        assert Config.MISSION_DESCRIPTION_MAX_LENGTH == 500
        assert Config.STREAK_TIMEZONE == "UTC"

    def test_summary_hides_url(self):
        summary = Config.get_config_summary()

        assert summary["database_scheme"] == "sqlite+aiosqlite"
        assert summary["environment"] == "testing"
        assert "database_url" not in summary


@pytest.mark.unit
class TestEnvironment:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("production", Environment.PRODUCTION),
            ("Staging", Environment.STAGING),
            ("test", Environment.TESTING),
            ("moonbase", Environment.DEVELOPMENT),
        ],
    )
    def test_from_string(self, raw, expected):
        assert Environment.from_string(raw) is expected

    def test_production_check_follows_environment(self, monkeypatch):
        monkeypatch.setattr(Config, "ENVIRONMENT", "production")

        assert Config.is_production() is True
        assert Config.is_testing() is False
