#!/usr/bin/env python3
"""Tests for the hierarchical ConfigManager."""

import pytest
import yaml

from artifilter.core.constants import ErrorCode
from artifilter.infrastructure.config_manager import (
    CONFIG_SCHEMA,
    ConfigError,
    ConfigManager,
    ConfigSource,
)


class TestConfigSource:
    """Tests for ConfigSource enum."""

    def test_precedence_order(self):
        sources = list(ConfigSource)
        assert [s.value for s in sources] == [1, 2, 3, 4, 5, 6]
        assert sources[0] is ConfigSource.COMPILED_DEFAULTS
        assert sources[-1] is ConfigSource.RUNTIME


class TestConfigError:
    """Tests for ConfigError exception."""

    def test_creation(self):
        error = ConfigError("Test error", ErrorCode.NOT_FOUND)
        assert error.message == "Test error"
        assert error.error_code == ErrorCode.NOT_FOUND
        assert str(error) == "Test error"

    def test_default_code(self):
        assert ConfigError("x").error_code == ErrorCode.INVALID_INPUT


class TestDefaults:
    """Compiled defaults."""

    def test_defaults(self):
        config = ConfigManager(load_environment=False)
        assert config.get("artifilter.filter.includes") == []
        assert config.get("artifilter.filter.transitive") is False
        assert config.get("artifilter.logging.level") == "INFO"
        assert config.get("artifilter.report.missed_criteria") is True

    def test_missing_key(self):
        config = ConfigManager(load_environment=False)
        assert config.get("artifilter.nope") is None
        assert config.get("artifilter.nope", default=5) == 5
        assert config.get("artifilter.filter.includes.deeper") is None

    def test_defaults_not_shared(self):
        first = ConfigManager(load_environment=False)
        first.get("artifilter.filter.includes").append("x")
        assert ConfigManager(load_environment=False).get("artifilter.filter.includes") == []


class TestLoadFile:
    """Tests for YAML loading."""

    def test_load_file(self, config_file):
        config = ConfigManager(str(config_file), load_environment=False)
        assert config.get("artifilter.filter.includes") == ["!*:*:*:tests:*", "org.example:*"]
        assert config.get("artifilter.logging.level") == "WARNING"

    def test_file_without_root_key(self, tmp_path):
        path = tmp_path / "bare.yaml"
        path.write_text(yaml.safe_dump({"filter": {"transitive": True}}))

        config = ConfigManager(str(path), load_environment=False)
        assert config.get("artifilter.filter.transitive") is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(str(tmp_path / "missing.yaml"))
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("artifilter: [unclosed")
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigManager(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Invalid config format"):
            ConfigManager(str(path))

    def test_file_level_source(self, config_file):
        config = ConfigManager(str(config_file), load_environment=False)
        assert config._config[ConfigSource.USER_CONFIG]["artifilter"]["logging"] == {
            "level": "WARNING"
        }


class TestEnvironment:
    """Tests for ARTIFILTER_* overrides."""

    def test_bool(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_FILTER_TRANSITIVE", "true")
        assert ConfigManager().get("artifilter.filter.transitive") is True

    def test_single_pattern(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_FILTER_INCLUDES", "org.example:*")
        assert ConfigManager().get("artifilter.filter.includes") == "org.example:*"

    def test_pattern_list_keeps_version_ranges(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_FILTER_INCLUDES", "g:a:jar:*:[1.0,2.0) !*:tests")
        assert ConfigManager().get("artifilter.filter.includes") == [
            "g:a:jar:*:[1.0,2.0)",
            "!*:tests",
        ]

    def test_key_with_underscore(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_REPORT_MISSED_CRITERIA", "no")
        assert ConfigManager().get("artifilter.report.missed_criteria") is False

    def test_environment_beats_file(self, monkeypatch, config_file):
        monkeypatch.setenv("ARTIFILTER_LOGGING_LEVEL", "DEBUG")
        config = ConfigManager(str(config_file))
        assert config.get("artifilter.logging.level") == "DEBUG"

    def test_ignored_variables(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_", "x")
        monkeypatch.setenv("ARTIFILTER_FILTER", "x")
        config = ConfigManager()
        assert ConfigSource.ENVIRONMENT not in config._config

    def test_parse_env_value(self):
        config = ConfigManager(load_environment=False)
        assert config._parse_env_value("yes") is True
        assert config._parse_env_value("False") is False
        assert config._parse_env_value("42") == 42
        assert config._parse_env_value("1.5") == 1.5
        assert config._parse_env_value("a b") == ["a", "b"]
        assert config._parse_env_value("a,b") == "a,b"


class TestPrecedence:
    """Tests for merging across sources."""

    def test_cli_beats_file(self, config_file):
        config = ConfigManager(str(config_file), load_environment=False)
        config.load_dict(
            {"artifilter": {"filter": {"includes": ["cli"]}}}, ConfigSource.CLI_ARGS
        )
        assert config.get("artifilter.filter.includes") == ["cli"]
        # Sibling keys from lower levels survive the merge
        assert config.section()["filter"]["excludes"] == ["*:*:pom"]

    def test_runtime_beats_cli(self):
        config = ConfigManager(load_environment=False)
        config.load_dict({"artifilter": {"filter": {"transitive": False}}}, ConfigSource.CLI_ARGS)
        config.load_dict({"artifilter": {"filter": {"transitive": True}}})
        assert config.get("artifilter.filter.transitive") is True

    def test_section(self):
        config = ConfigManager(load_environment=False)
        section = config.section()
        assert set(section) == {"filter", "logging", "report"}


class TestSchema:
    """Tests for schema validation."""

    def test_valid(self, config_file):
        config = ConfigManager(str(config_file), load_environment=False)
        assert config.validate_schema(CONFIG_SCHEMA)

    def test_wrong_type(self):
        config = ConfigManager(load_environment=False)
        config.load_dict({"artifilter": {"filter": {"transitive": "maybe"}}})
        with pytest.raises(ConfigError, match="transitive"):
            config.validate_schema(CONFIG_SCHEMA)

    def test_expected_section(self):
        config = ConfigManager(load_environment=False)
        config.load_dict({"artifilter": {"report": True}})
        with pytest.raises(ConfigError, match="Expected dict for report"):
            config.validate_schema(CONFIG_SCHEMA)
