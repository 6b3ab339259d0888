"""
Unit Tests for Startup Security Checks.

Config and secrets are passed in directly as real schema objects.
"""

from types import SimpleNamespace

import pytest

from todo_miniapp.core.startup_checks import StartupSecurityError, run_startup_checks


class TestDevelopment:
    """Outside production only hard misconfiguration blocks startup."""

    def test_passes_with_token(self, app_config, mock_settings):
        run_startup_checks(app_config, mock_settings)

    def test_missing_token_only_warns(self, app_config):
        run_startup_checks(app_config, SimpleNamespace(telegram_bot_token=""))

    def test_short_token_allowed(self, app_config):
        run_startup_checks(app_config, SimpleNamespace(telegram_bot_token="123:abc"))


class TestProduction:
    """Production refuses to start on unsafe settings."""

    def test_passes_when_hardened(self, production_config, mock_settings):
        run_startup_checks(production_config, mock_settings)

    def test_missing_token_blocks(self, production_config):
        with pytest.raises(StartupSecurityError, match="TELEGRAM_BOT_TOKEN is empty"):
            run_startup_checks(production_config, SimpleNamespace(telegram_bot_token=""))

    def test_short_token_blocks(self, production_config):
        with pytest.raises(StartupSecurityError, match="minimum is 30"):
            run_startup_checks(production_config, SimpleNamespace(telegram_bot_token="123:abc"))

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"debug": True}, "debug is true"),
            ({"docs_enabled": True}, "docs_enabled is true"),
            ({"secure_cookie": False}, "secure_cookie is false"),
            ({"cors_origins": ["http://localhost:3000"]}, "CORS origins contain localhost"),
        ],
    )
    def test_unsafe_setting_blocks(self, overrides, message, mock_settings, make_app_config):
        options = {
            "environment": "production",
            "debug": False,
            "docs_enabled": False,
            "secure_cookie": True,
            "cors_origins": ["https://todo.example.com"],
        }
        options.update(overrides)

        with pytest.raises(StartupSecurityError, match=message):
            run_startup_checks(make_app_config(**options), mock_settings)

    def test_reports_every_failure(self, make_app_config):
        config = make_app_config(environment="production")
        with pytest.raises(StartupSecurityError) as exc_info:
            run_startup_checks(config, SimpleNamespace(telegram_bot_token=""))
        assert "5 security check(s) failed" in str(exc_info.value)
