"""Unit tests for configuration schema."""

import pytest
from unittest.mock import patch
from pydantic import ValidationError

from profrate.config import Config, get_config, reload_config


class TestConfigDefaults:
    def test_defaults(self, test_config):
        assert test_config.rmp_graphql_url == "https://www.ratemyprofessors.com/graphql"
        assert test_config.school_name == "University of California Davis"
        assert test_config.school_legacy_id == 1073
        assert test_config.search_page_size == 25
        assert test_config.score_exact_last_name == 50.0
        assert test_config.score_partial_last_name == 35.0
        assert test_config.score_first_name == 20.0
        assert test_config.score_first_initial == 10.0
        assert test_config.score_popularity_cap == 10.0
        assert test_config.score_popularity_scale == 5.0
        assert test_config.log_level == "INFO"

    def test_defaults_validate_cleanly(self, test_config):
        assert test_config.validate_configuration() == []


class TestConfigValidation:
    def test_log_level_normalized(self):
        assert Config(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, log_level="LOUD")

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, search_page_size=0)
        with pytest.raises(ValidationError):
            Config(_env_file=None, search_page_size=500)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, score_first_name=-1)

    def test_trailing_slash_stripped(self):
        config = Config(_env_file=None, rmp_profile_base_url="https://example.test/professor/")

        assert config.rmp_profile_base_url == "https://example.test/professor"

    def test_issues_reported(self):
        config = Config(
            _env_file=None,
            rmp_graphql_url="ftp://example.test",
            school_name="  ",
            score_exact_last_name=5,
            score_partial_last_name=8,
        )

        issues = config.validate_configuration()

        assert "RMP_GRAPHQL_URL must be an http(s) URL" in issues
        assert "SCHOOL_NAME is required" in issues
        assert any("SCORE_EXACT_LAST_NAME" in issue for issue in issues)
        assert any("SCORE_POPULARITY_CAP" in issue for issue in issues)


class TestEnvironment:
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SCHOOL_LEGACY_ID", "42")
        monkeypatch.setenv("SCORE_FIRST_NAME", "25.5")

        config = Config(_env_file=None)

        assert config.school_legacy_id == 42
        assert config.score_first_name == 25.5

    def test_get_config_is_cached(self):
        with patch("profrate.config._config", None):
            first = get_config()
            assert get_config() is first

    def test_reload_config(self, monkeypatch):
        with patch("profrate.config._config", None):
            first = get_config()
            monkeypatch.setenv("SEARCH_PAGE_SIZE", "10")
            reloaded = reload_config()

            assert reloaded is not first
            assert reloaded.search_page_size == 10
