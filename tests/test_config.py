"""Tests for the config module."""

from sheetfill.config import ERROR_PREFIX, Settings, _env_flag
from sheetfill.engine import RenderOptions


class TestEnvFlag:
    """Test boolean flag parsing."""

    def test_truthy_values(self, monkeypatch):
        for value in ["1", "true", "TRUE", " yes ", "on"]:
            monkeypatch.setenv("SHEETFILL_TEST_FLAG", value)
            assert _env_flag("SHEETFILL_TEST_FLAG") is True

    def test_falsy_values(self, monkeypatch):
        monkeypatch.setenv("SHEETFILL_TEST_FLAG", "no")
        assert _env_flag("SHEETFILL_TEST_FLAG") is False

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("SHEETFILL_TEST_FLAG", raising=False)
        assert _env_flag("SHEETFILL_TEST_FLAG") is False
        assert _env_flag("SHEETFILL_TEST_FLAG", "true") is True


class TestSettings:
    """Test Settings configuration."""

    def test_explicit_values(self):
        settings = Settings(auto_parse_numbers=True, log_level="DEBUG", merge_scan_columns=5)

        assert settings.auto_parse_numbers is True
        assert settings.log_level == "DEBUG"
        assert settings.merge_scan_columns == 5

    def test_error_prefix(self):
        assert Settings().error_prefix == ERROR_PREFIX == "#ERROR:"


class TestRenderOptions:
    """Test per-call render options."""

    def test_defaults(self):
        assert RenderOptions().auto_parse_numbers is False

    def test_from_settings(self, monkeypatch):
        from sheetfill.engine import models

        monkeypatch.setattr(models, "settings", Settings(auto_parse_numbers=True))

        assert RenderOptions.from_settings().auto_parse_numbers is True
