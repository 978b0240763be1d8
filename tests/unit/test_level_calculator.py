"""
Unit tests for LevelCalculator.

Covers level lookup, rank lookup, progress within a level and the terminal
level plateau.
"""

import pytest

from starship.core.exceptions import ConfigurationError
from starship.modules.progression import DEFAULT_LEVEL_TABLE, LevelCalculator, LevelThreshold
from starship.modules.shared.exceptions import ValidationError


@pytest.mark.unit
class TestLevelLookup:
    """Test total XP -> level."""

    def test_zero_xp_is_level_one(self, level_calculator):
        assert level_calculator.level_for_total_xp(0) == 1

    def test_threshold_is_inclusive(self, level_calculator):
        assert level_calculator.level_for_total_xp(49) == 1
        assert level_calculator.level_for_total_xp(50) == 2
        assert level_calculator.level_for_total_xp(120) == 3

    def test_level_never_decreases_as_xp_grows(self, level_calculator):
        previous = 0
        for total_xp in range(0, 60_000, 37):
            level = level_calculator.level_for_total_xp(total_xp)
            assert level >= previous
            previous = level

    def test_beyond_table_is_max_level(self, level_calculator):
        assert level_calculator.level_for_total_xp(10_000_000) == 50
        assert level_calculator.max_level == 50

    @pytest.mark.parametrize("bad", [-1, 1.5, "10", None, True])
    def test_rejects_invalid_xp(self, level_calculator, bad):
        with pytest.raises(ValidationError):
            level_calculator.level_for_total_xp(bad)


@pytest.mark.unit
class TestRankLookup:
    """Test level -> rank."""

    def test_ranks_follow_table(self, level_calculator):
        assert level_calculator.rank_for_level(1) == "Cadet"
        assert level_calculator.rank_for_level(2) == "Cadet"
        assert level_calculator.rank_for_level(3) == "Ensign"
        assert level_calculator.rank_for_level(9) == "Commander"
        assert level_calculator.rank_for_level(50) == "Galactic Legend"

    def test_level_below_table_gets_first_rank(self, level_calculator):
        assert level_calculator.rank_for_level(0) == "Cadet"

    def test_display_string(self, level_calculator):
        assert level_calculator.format_level_display(3) == "Level 3 // Ensign"


@pytest.mark.unit
class TestLevelProgress:
    """Test progress within the current level."""

    def test_progress_mid_level(self, level_calculator):
        progress = level_calculator.level_progress(25)

        assert progress.level == 1
        assert progress.current_xp == 25
        assert progress.max_xp == 50
        assert progress.required_for_next == 50
        assert progress.progress_percent == pytest.approx(50.0)

    def test_progress_after_level_up(self, level_calculator):
        progress = level_calculator.level_progress(55)

        assert progress.level == 2
        assert progress.current_xp == 5
        assert progress.max_xp == 70

    def test_current_xp_stays_below_max_xp(self, level_calculator):
        for total_xp in range(0, 56_100, 101):
            progress = level_calculator.level_progress(total_xp)
            assert 0 <= progress.current_xp < progress.max_xp

    def test_terminal_level_plateaus(self, level_calculator):
        progress = level_calculator.level_progress(60_000)

        assert progress.level == 50
        assert progress.current_xp == 60_000 - 56_100
        assert progress.max_xp == progress.current_xp
        assert progress.progress_percent == 100.0
        assert level_calculator.xp_needed_for_next_level(60_000) == 0

    def test_xp_needed_for_next_level(self, level_calculator):
        assert level_calculator.xp_needed_for_next_level(45) == 5

    @pytest.mark.parametrize("level,required", [(1, 0), (2, 50), (3, 120), (50, 56_100), (51, 0), (0, 0)])
    def test_required_xp_for_level(self, level_calculator, level, required):
        assert level_calculator.required_xp_for_level(level) == required

    def test_next_threshold(self, level_calculator):
        assert level_calculator.next_threshold(1).required_xp == 50
        assert level_calculator.next_threshold(50) is None


@pytest.mark.unit
class TestTiers:
    @pytest.mark.parametrize(
        "level,tier,multiplier",
        [
            (1, "beginner", 1.0),
            (15, "intermediate", 1.1),
            (25, "advanced", 1.25),
            (40, "expert", 1.5),
            (41, "legend", 2.0),
        ],
    )
    def test_tier_boundaries(self, level, tier, multiplier):
        assert LevelCalculator.level_tier(level) == tier
        assert LevelCalculator.level_multiplier(level) == multiplier


@pytest.mark.unit
class TestCustomTables:
    """Alternate tables are accepted when well-formed."""

    def test_custom_table(self):
        calculator = LevelCalculator(
            [
                LevelThreshold(1, 0, "Rookie"),
                LevelThreshold(2, 10, "Rookie"),
                LevelThreshold(3, 30, "Pilot"),
            ]
        )

        assert calculator.level_for_total_xp(30) == 3
        assert calculator.rank_for_level(3) == "Pilot"

    def test_first_level_must_start_at_zero(self):
        with pytest.raises(ConfigurationError):
            LevelCalculator([LevelThreshold(1, 5, "Rookie")])

    def test_entries_must_ascend(self):
        with pytest.raises(ConfigurationError):
            LevelCalculator(
                [LevelThreshold(1, 0, "A"), LevelThreshold(2, 0, "B")]
            )

    def test_default_table_is_complete(self):
        assert [t.level for t in DEFAULT_LEVEL_TABLE] == list(range(1, 51))
