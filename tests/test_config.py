"""Tests for config.py -- defaults, env var overrides, ParseContext."""

import pytest

from wschema.config import SchemaSettings
from wschema.context import ParseContext
from wschema.errors import ConfigError

# Env vars that pydantic-settings reads -- must be cleaned for default tests
_CONFIG_ENV_VARS = [
    "WSCHEMA_LOG_LEVEL", "WSCHEMA_LOG_FILE", "WSCHEMA_ABORT_EARLY",
    "WSCHEMA_REPORT_INPUT", "WSCHEMA_SUGGESTION_CUTOFF",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove wschema env vars so defaults tests see actual defaults."""
    for var in _CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_default_values(self):
        settings = SchemaSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.abort_early is False
        assert settings.report_input is True
        assert settings.suggestion_cutoff == 80.0


class TestOverrides:
    def test_constructor_override(self):
        settings = SchemaSettings(_env_file=None, abort_early=True, suggestion_cutoff=60)
        assert settings.abort_early is True
        assert settings.suggestion_cutoff == 60.0

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("WSCHEMA_ABORT_EARLY", "true")
        monkeypatch.setenv("WSCHEMA_LOG_LEVEL", "DEBUG")
        settings = SchemaSettings(_env_file=None)
        assert settings.abort_early is True
        assert settings.log_level == "DEBUG"

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("ABORT_EARLY", "true")
        assert SchemaSettings(_env_file=None).abort_early is False

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("WSCHEMA_REPORT_INPUT=false\nUNRELATED=1\n")
        settings = SchemaSettings(_env_file=env_file)
        assert settings.report_input is False

    def test_kwargs_beat_env(self, monkeypatch):
        monkeypatch.setenv("WSCHEMA_ABORT_EARLY", "true")
        assert SchemaSettings(_env_file=None, abort_early=False).abort_early is False


class TestCheckValues:
    def test_defaults_pass(self):
        SchemaSettings(_env_file=None).check_values()

    def test_lowercase_level_accepted(self):
        SchemaSettings(_env_file=None, log_level="debug").check_values()

    def test_bad_log_level(self):
        with pytest.raises(ConfigError, match="log_level"):
            SchemaSettings(_env_file=None, log_level="LOUD").check_values()

    def test_cutoff_out_of_range(self):
        with pytest.raises(ConfigError, match="suggestion_cutoff"):
            SchemaSettings(_env_file=None, suggestion_cutoff=150).check_values()


class TestParseContext:
    def test_carries_settings(self):
        settings = SchemaSettings(
            _env_file=None, abort_early=True, report_input=False, suggestion_cutoff=70
        )
        ctx = settings.parse_context()
        assert ctx == ParseContext(abort_early=True, report_input=False, suggestion_cutoff=70.0)

    def test_error_map_passed_through(self):
        def error_map(issue, default):
            return None

        ctx = SchemaSettings(_env_file=None).parse_context(error_map)
        assert ctx.error_map is error_map

    def test_invalid_settings_rejected(self):
        with pytest.raises(ConfigError):
            SchemaSettings(_env_file=None, suggestion_cutoff=-1).parse_context()
