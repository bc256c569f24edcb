"""Tests for RegistryConfig and the global config accessor."""

import pytest
from pydantic import ValidationError

from rubylith.compatibility.types import WELL_SUPPORTED_COMPONENT_TYPES, ComponentType
from rubylith.config import RegistryConfig, get_config, reset_config


class TestDefaults:
    def test_defaults(self):
        config = RegistryConfig(_env_file=None)
        assert config.log_level == "info"
        assert config.log_format == "text"
        assert config.min_environment_score == 80
        assert config.batch_max_workers == 1
        assert config.emit_span_events is True
        assert set(config.well_supported_types) == WELL_SUPPORTED_COMPONENT_TYPES


class TestEnvironmentOverrides:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RUBYLITH_LOG_LEVEL", "debug")
        monkeypatch.setenv("RUBYLITH_MIN_ENVIRONMENT_SCORE", "65")
        monkeypatch.setenv("RUBYLITH_EMIT_SPAN_EVENTS", "false")
        config = RegistryConfig(_env_file=None)
        assert config.log_level == "debug"
        assert config.min_environment_score == 65
        assert config.emit_span_events is False

    def test_comma_separated_types(self, monkeypatch):
        monkeypatch.setenv("RUBYLITH_WELL_SUPPORTED_TYPES", "plugin, template")
        config = RegistryConfig(_env_file=None)
        assert config.well_supported_types == [ComponentType.PLUGIN, ComponentType.TEMPLATE]

    def test_unknown_type_rejected(self, monkeypatch):
        monkeypatch.setenv("RUBYLITH_WELL_SUPPORTED_TYPES", "widget")
        with pytest.raises(ValidationError):
            RegistryConfig(_env_file=None)

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("RUBYLITH_LOG_FORMAT=json\n")
        assert RegistryConfig(_env_file=env_file).log_format == "json"


class TestBounds:
    @pytest.mark.parametrize("score", [-1, 101])
    def test_min_environment_score(self, score):
        with pytest.raises(ValidationError):
            RegistryConfig(min_environment_score=score)

    def test_batch_workers(self):
        with pytest.raises(ValidationError):
            RegistryConfig(batch_max_workers=0)

    def test_log_format(self):
        with pytest.raises(ValidationError):
            RegistryConfig(log_format="xml")


class TestGetConfig:
    def test_singleton(self):
        assert get_config() is get_config()

    def test_overrides_replace_singleton(self):
        first = get_config()
        second = get_config(batch_max_workers=4)
        assert second is not first
        assert second.batch_max_workers == 4
        assert get_config() is second

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first
