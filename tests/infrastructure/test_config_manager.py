#!/usr/bin/env python3
"""Comprehensive tests for the ConfigManager module."""

import pytest

from gittreefs.core.constants import ErrorCode
from gittreefs.infrastructure.config_manager import (
    CONFIG_SCHEMA,
    ConfigError,
    ConfigManager,
    ConfigSource,
)


class TestConfigSource:
    """Tests for ConfigSource enum."""

    def test_precedence_order(self):
        sources = [
            ConfigSource.COMPILED_DEFAULTS,
            ConfigSource.USER_CONFIG,
            ConfigSource.ENVIRONMENT,
            ConfigSource.RUNTIME,
        ]
        for i in range(len(sources) - 1):
            assert sources[i].value < sources[i + 1].value


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_defaults(self):
        config = ConfigManager()
        assert config.get("gittreefs.api.url") == "https://api.github.com"
        assert config.get("gittreefs.api.timeout_seconds") == 30.0
        assert config.get("gittreefs.listing.use_cache") is False
        assert config.get("gittreefs.logging.level") == "WARNING"

    def test_get_missing_returns_default(self):
        config = ConfigManager()
        assert config.get("gittreefs.nope", default=7) == 7
        assert config.get("gittreefs.api.url.deeper") is None

    def test_defaults_not_shared_between_instances(self):
        first = ConfigManager()
        first._config[ConfigSource.COMPILED_DEFAULTS]["gittreefs"]["api"]["url"] = "https://x"
        assert ConfigManager().get("gittreefs.api.url") == "https://api.github.com"

    def test_does_not_read_environment_on_construction(self, monkeypatch):
        monkeypatch.setenv("GITTREEFS_API__URL", "https://env.example.com")
        assert ConfigManager().get("gittreefs.api.url") == "https://api.github.com"

    def test_load_file(self, config_file):
        config = ConfigManager(str(config_file))
        assert config.get("gittreefs.api.url") == "https://github.example.com/api/v3"
        assert config.get("gittreefs.api.timeout_seconds") == 5
        assert config.get("gittreefs.listing.use_cache") is True
        # Untouched keys fall through to defaults
        assert config.get("gittreefs.api.accept") == "application/vnd.github+json"

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(str(temp_dir / "missing.yaml"))
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_load_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("gittreefs: [unclosed")
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigManager().load_file(str(path))

    def test_load_non_mapping(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Invalid config format"):
            ConfigManager().load_file(str(path))

    def test_load_environment(self):
        config = ConfigManager()
        config.load_environment(
            {
                "GITTREEFS_API__TIMEOUT_SECONDS": "2.5",
                "GITTREEFS_LISTING__USE_CACHE": "true",
                "GITTREEFS_LOGGING__LEVEL": "DEBUG",
                "OTHER_VAR": "ignored",
            }
        )
        assert config.get("gittreefs.api.timeout_seconds") == 2.5
        assert config.get("gittreefs.listing.use_cache") is True
        assert config.get("gittreefs.logging.level") == "DEBUG"

    def test_environment_value_parsing(self):
        config = ConfigManager()
        assert config._parse_env_value("no") is False
        assert config._parse_env_value("12") == 12
        assert config._parse_env_value("1.5") == 1.5
        assert config._parse_env_value("text") == "text"

    def test_runtime_overrides_file(self, config_file):
        config = ConfigManager(str(config_file))
        config.set("gittreefs.api.timeout_seconds", 99)
        assert config.get("gittreefs.api.timeout_seconds") == 99

    def test_load_dict_copies(self):
        data = {"gittreefs": {"listing": {"use_cache": True}}}
        config = ConfigManager()
        config.load_dict(data)
        data["gittreefs"]["listing"]["use_cache"] = False
        assert config.get("gittreefs.listing.use_cache") is True

    def test_get_all_merges(self, config_file):
        config = ConfigManager(str(config_file))
        merged = config.get_all()
        assert merged["gittreefs"]["api"]["url"] == "https://github.example.com/api/v3"
        assert merged["gittreefs"]["api"]["accept"] == "application/vnd.github+json"

    def test_validate_schema(self, config_file):
        assert ConfigManager(str(config_file)).validate_schema(CONFIG_SCHEMA)

    def test_validate_schema_rejects_wrong_type(self):
        config = ConfigManager()
        config.set("gittreefs.api.timeout_seconds", "fast")
        with pytest.raises(ConfigError, match="timeout_seconds"):
            config.validate_schema(CONFIG_SCHEMA)

    def test_validate_schema_rejects_non_dict_section(self):
        config = ConfigManager()
        config.set("gittreefs.listing", "on")
        with pytest.raises(ConfigError, match="Expected dict for listing"):
            config.validate_schema(CONFIG_SCHEMA)

    def test_clear_keeps_defaults(self):
        config = ConfigManager()
        config.set("gittreefs.api.url", "https://x")
        config.clear()
        assert config.get("gittreefs.api.url") == "https://api.github.com"

    def test_clear_single_source(self):
        config = ConfigManager()
        config.set("gittreefs.api.url", "https://x")
        config.clear(ConfigSource.COMPILED_DEFAULTS)
        assert config.get("gittreefs.api.url") == "https://x"
        config.clear(ConfigSource.RUNTIME)
        assert config.get("gittreefs.api.url") == "https://api.github.com"
