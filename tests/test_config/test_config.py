"""Tests for settings validation and logging helpers."""

import os
import sys
from unittest.mock import patch

import pytest
from pydantic import ValidationError

sys.path.append("src")
from signalist.config.logging import parse_file_size, redact_secrets
from signalist.config.settings import Settings, get_settings, validate_required_settings


class TestSettings:
    """Test application settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.alert_hour == 13
        assert settings.alert_weekly_day == "mon"
        assert settings.alert_monthly_day == 1
        assert settings.inactive_user_days == 15

    def test_environment_variables_are_read(self):
        env = {"FINNHUB_API_KEY": "fh-key", "SMTP_USER": "u@x.com", "SMTP_PASSWORD": "pw"}
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)

        assert settings.is_market_data_configured()
        assert settings.is_email_configured()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("alert_hour", 24),
            ("alert_monthly_day", 31),
            ("alert_weekly_day", "someday"),
            ("alert_max_concurrency", 0),
            ("smtp_port", 70000),
            ("environment", "staging"),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_explicit_database_url(self):
        settings = Settings(_env_file=None, database_url="sqlite:///:memory:")
        assert settings.get_database_url() == "sqlite:///:memory:"

    def test_auth_token_required_to_start(self):
        with patch.dict(os.environ, {"ENDPOINT_AUTH_TOKEN": ""}):
            get_settings.cache_clear()
            assert validate_required_settings() is False

        with patch.dict(os.environ, {"ENDPOINT_AUTH_TOKEN": "secret"}):
            get_settings.cache_clear()
            assert validate_required_settings() is True


class TestLoggingHelpers:
    def test_parse_file_size(self):
        assert parse_file_size("10MB") == 10 * 1024 * 1024
        assert parse_file_size("512kb") == 512 * 1024
        assert parse_file_size("2048") == 2048

    def test_secrets_are_redacted(self):
        event = {"event": "Finnhub request", "token": "abc", "symbol": "AAPL", "password": None}

        redacted = redact_secrets(None, "info", event)

        assert redacted["token"] == "***"
        assert redacted["symbol"] == "AAPL"
        assert redacted["password"] is None
