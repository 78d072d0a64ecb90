"""Unit tests for settings parsing and configuration checks."""

import pytest

from sacredsix.core import config
from sacredsix.core.config import (
    ConfigValidator,
    EnvironmentEnum,
    LogLevelEnum,
    Settings,
    get_config_summary,
)


class TestSettings:
    def test_environment_aliases(self):
        assert Settings(environment="prod").environment is EnvironmentEnum.production
        assert Settings(environment="dev").environment is EnvironmentEnum.development
        assert Settings(environment="test").is_testing is True

    def test_log_level_is_case_insensitive(self):
        assert Settings(log_level="debug").log_level is LogLevelEnum.DEBUG

    def test_allowed_origins_list(self):
        settings = Settings(allowed_origins="https://a.example, ,https://b.example ")

        assert settings.allowed_origins_list == ["https://a.example", "https://b.example"]

    def test_has_email_requires_credentials(self):
        assert Settings(smtp_host="smtp.example.com").has_email is False
        assert Settings(smtp_host="smtp.example.com", smtp_user="u", smtp_password="p").has_email is True

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("APP_NAME", "Sacred Six Staging")
        monkeypatch.setenv("SMTP_PORT", "2525")

        settings = Settings()

        assert settings.app_name == "Sacred Six Staging"
        assert settings.smtp_port == 2525


class TestConfigValidator:
    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "settings", Settings(database_url=None))

        with pytest.raises(ValueError, match="DATABASE_URL"):
            ConfigValidator.validate_required_settings()

    def test_production_requires_email(self, monkeypatch):
        monkeypatch.setattr(
            config,
            "settings",
            Settings(database_url="postgresql+asyncpg://db/app", environment="production"),
        )

        with pytest.raises(ValueError, match="SMTP_HOST"):
            ConfigValidator.validate_required_settings()

    def test_valid_configuration(self, monkeypatch):
        monkeypatch.setattr(config, "settings", Settings(database_url="sqlite+aiosqlite:///./x.db"))

        ConfigValidator.validate_required_settings()

    def test_config_summary(self):
        summary = get_config_summary()

        assert summary["app_name"] == config.settings.app_name
        assert summary["database_configured"] is True
        assert "email_enabled" in summary["features"]
