"""
Tests for configuration objects and their validation.
"""

from dataclasses import replace

import pytest

from tt_ratings.config import (
    BASELINE_RATING,
    FORMAT_WEIGHTS,
    K_FACTOR,
    MIN_MATCHES_FOR_ELO,
    ConfigurationError,
    EloConfig,
    StatsConfig,
    read_env_number,
)


class TestEloConfigDefaults:
    """Tests for the documented defaults."""

    def test_defaults_match_constants(self):
        config = EloConfig()
        assert config.baseline == BASELINE_RATING
        assert config.k_factor == K_FACTOR
        assert dict(config.format_weights) == FORMAT_WEIGHTS
        assert config.k_policy == "fixed"

    def test_longer_formats_weigh_more(self):
        config = EloConfig()
        weights = [config.format_weight(fmt) for fmt in ("bo1", "bo3", "bo5", "bo7")]
        assert weights == sorted(weights)

    def test_format_weights_are_read_only(self):
        config = EloConfig()
        with pytest.raises(TypeError):
            config.format_weights["bo1"] = 10

    def test_override_subset(self):
        config = replace(EloConfig(), k_factor=20)
        assert config.k_factor == 20
        assert config.scale == EloConfig().scale


class TestEloConfigValidation:
    """Inconsistent configurations fail at construction."""

    @pytest.mark.parametrize("overrides", [
        {"scale": 0},
        {"k_factor": -1},
        {"k_half_life": 0},
        {"doubles_multiplier": 0},
        {"k_min": 80, "k_max": 40},
        {"k_policy": "adaptive"},
        {"floor": 1200, "baseline": 1000},
        {"format_weights": {"bo1": 1, "bo3": 1, "bo5": 1}},
        {"format_weights": {"bo1": 0, "bo3": 1, "bo5": 1, "bo7": 1}},
        {"doubles_format_weights": {"bo1": 1}},
    ])
    def test_rejects(self, overrides):
        with pytest.raises(ConfigurationError):
            EloConfig(**overrides)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            EloConfig(scale=-400)

    def test_floor_equal_to_baseline_is_allowed(self):
        assert EloConfig(floor=1000, baseline=1000).floor == 1000


class TestStatsConfig:
    """Tests for statistics thresholds."""

    def test_defaults(self):
        assert StatsConfig().min_matches_for_elo == MIN_MATCHES_FOR_ELO

    def test_negative_threshold_rejected(self):
        with pytest.raises(ConfigurationError):
            StatsConfig(min_matchup_matches=-1)


class TestEnvironmentOverrides:
    """Tests for TT_* environment variables."""

    def test_read_env_number_fallbacks(self, monkeypatch):
        monkeypatch.setenv("TT_TEST_BLANK", "  ")
        monkeypatch.setenv("TT_TEST_WORD", "abc")
        monkeypatch.setenv("TT_TEST_INF", "inf")
        monkeypatch.setenv("TT_TEST_OK", "12.5")

        assert read_env_number("TT_TEST_MISSING", 3) == 3
        assert read_env_number("TT_TEST_BLANK", 3) == 3
        assert read_env_number("TT_TEST_WORD", 3) == 3
        assert read_env_number("TT_TEST_INF", 3) == 3
        assert read_env_number("TT_TEST_OK", 3) == 12.5

    def test_elo_from_env(self, monkeypatch):
        monkeypatch.setenv("TT_ELO_K_FACTOR", "24")
        monkeypatch.setenv("TT_ELO_SCALE", "not-a-number")
        monkeypatch.setenv("TT_ELO_K_POLICY", "Decaying")
        monkeypatch.setenv("TT_ELO_WEIGHT_BO7", "3")

        config = EloConfig.from_env()

        assert config.k_factor == 24
        assert config.scale == EloConfig().scale
        assert config.k_policy == "decaying"
        assert config.format_weights["bo7"] == 3
        assert config.doubles_format_weights is None

    def test_doubles_weights_from_env(self, monkeypatch):
        monkeypatch.setenv("TT_ELO_DOUBLES_WEIGHT_BO1", "0.75")

        config = EloConfig.from_env()

        assert config.format_weight("bo1", "doubles") == 0.75
        assert config.format_weight("bo3", "doubles") == config.format_weights["bo3"]
        assert config.format_weight("bo1", "singles") == config.format_weights["bo1"]

    def test_keyword_overrides_win(self, monkeypatch):
        monkeypatch.setenv("TT_ELO_BASELINE", "1500")
        assert EloConfig.from_env(baseline=1200).baseline == 1200

    def test_invalid_env_fails_fast(self, monkeypatch):
        monkeypatch.setenv("TT_ELO_FLOOR", "5000")
        with pytest.raises(ConfigurationError):
            EloConfig.from_env()

    def test_stats_from_env(self, monkeypatch):
        monkeypatch.setenv("TT_STATS_MIN_MATCHES_FOR_ELO", "2")
        config = StatsConfig.from_env()
        assert config.min_matches_for_elo == 2
        assert config.min_partnership_games == StatsConfig().min_partnership_games
