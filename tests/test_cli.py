"""Tests for CLI argument parsing, configuration and the entry point.

This module tests the command-line interface including:
- Argument parsing and validation
- Building the CLI configuration level
- Logging setup
- End to end runs over temporary input files
"""

import io

import pytest
import yaml

from artifilter.cli import (
    CLIError,
    build_config_from_args,
    load_configuration,
    main,
    parse_arguments,
    setup_logging,
)
from artifilter.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from artifilter.infrastructure.logger import LogLevel, get_logger


class TestParseArguments:
    """Test argument parsing."""

    def test_defaults(self):
        args = parse_arguments([])

        assert args.includes is None
        assert args.excludes is None
        assert args.transitive is None
        assert not args.fail_on_missed
        assert not args.debug
        assert args.input is None
        assert args.config is None

    def test_repeated_patterns(self):
        args = parse_arguments(["-i", "org.example:*", "--include", "!*:tests", "-e", "*:*:pom"])

        assert args.includes == ["org.example:*", "!*:tests"]
        assert args.excludes == ["*:*:pom"]

    def test_flags(self, input_file):
        args = parse_arguments(["-t", "--fail-on-missed", "--debug", "--input", str(input_file)])

        assert args.transitive is True
        assert args.fail_on_missed
        assert args.debug
        assert args.input == str(input_file)

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])

        assert exc_info.value.code == 0
        assert "artifilter 1.0.0" in capsys.readouterr().out

    def test_missing_config(self, tmp_path):
        with pytest.raises(CLIError, match="Configuration file does not exist"):
            parse_arguments(["--config", str(tmp_path / "missing.yaml")])

    def test_config_is_directory(self, tmp_path):
        with pytest.raises(CLIError, match="not a file"):
            parse_arguments(["--config", str(tmp_path)])

    def test_missing_input(self, tmp_path):
        with pytest.raises(CLIError, match="Input file does not exist"):
            parse_arguments(["--input", str(tmp_path / "missing.txt")])

    def test_input_is_directory(self, tmp_path):
        with pytest.raises(CLIError, match="Input path is not a file"):
            parse_arguments(["--input", str(tmp_path)])


class TestBuildConfigFromArgs:
    """Test the CLI configuration level."""

    def test_nothing_given(self):
        assert build_config_from_args(parse_arguments([])) == {"artifilter": {}}

    def test_filter_options(self):
        config = build_config_from_args(parse_arguments(["-i", "a", "-e", "b", "-t"]))

        assert config == {
            "artifilter": {
                "filter": {"includes": ["a"], "excludes": ["b"], "transitive": True}
            }
        }

    def test_debug(self):
        config = build_config_from_args(parse_arguments(["--debug"]))

        assert config["artifilter"]["logging"] == {"level": "DEBUG"}
        assert config["artifilter"]["report"] == {"filtered": True}

    def test_log_file(self, tmp_path):
        log_file = str(tmp_path / "a.log")
        config = build_config_from_args(parse_arguments(["--log-file", log_file]))
        assert config["artifilter"]["logging"] == {"file": log_file}


class TestLoadConfiguration:
    """Test configuration loading across levels."""

    def test_file_then_arguments(self, config_file):
        config = load_configuration(parse_arguments(["--config", str(config_file), "-i", "cli:*"]))
        section = config.section()

        assert section["filter"]["includes"] == ["cli:*"]
        assert section["filter"]["excludes"] == ["*:*:pom"]
        assert section["logging"]["level"] == "WARNING"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_FILTER_TRANSITIVE", "yes")
        section = load_configuration(parse_arguments([])).section()
        assert section["filter"]["transitive"] is True

    def test_arguments_beat_environment(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_FILTER_INCLUDES", "env:*")
        section = load_configuration(parse_arguments(["-i", "cli:*"])).section()
        assert section["filter"]["includes"] == ["cli:*"]

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"filter": {"transitive": "sometimes"}}))

        with pytest.raises(ConfigError):
            load_configuration(parse_arguments(["--config", str(path)]))


class TestSetupLogging:
    """Test logging setup."""

    @staticmethod
    def configured(logging_config):
        config = ConfigManager(load_environment=False)
        config.load_dict({"artifilter": {"logging": logging_config}}, ConfigSource.CLI_ARGS)
        return config

    def test_default_level(self):
        logger = setup_logging(ConfigManager(load_environment=False))
        assert logger.get_level() == LogLevel.INFO
        assert get_logger() is logger

    def test_configured_level(self):
        logger = setup_logging(self.configured({"level": "debug"}))
        assert logger.get_level() == LogLevel.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("ARTIFILTER_LOGGING_LEVEL", "ERROR")
        logger = setup_logging(ConfigManager())
        assert logger.get_level() == LogLevel.ERROR

    def test_unknown_level(self):
        with pytest.raises(CLIError, match="Unknown log level: LOUD"):
            setup_logging(self.configured({"level": "LOUD"}))

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "artifilter.log"
        logger = setup_logging(self.configured({"level": "INFO", "file": str(log_file)}))
        logger.info("hello")

        for handler in logger.logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()


class TestMain:
    """End to end runs of the entry point."""

    def test_includes(self, input_file, capsys):
        code = main(["--include", "org.example:*", "--input", str(input_file)])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == [
            "org.example:lib:jar:1.0",
            "org.example:lib:jar:tests:1.0",
            "org.example:parent:pom:1.0",
        ]

    def test_config_file(self, config_file, input_file, capsys):
        code = main(["--config", str(config_file), "--input", str(input_file)])

        assert code == 0
        assert capsys.readouterr().out == "org.example:lib:jar:1.0\n"

    def test_transitive_from_environment(self, monkeypatch, config_file, input_file, capsys):
        monkeypatch.setenv("ARTIFILTER_FILTER_TRANSITIVE", "true")
        code = main(["--config", str(config_file), "--input", str(input_file)])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == [
            "org.example:lib:jar:1.0",
            "org.other:util:jar:2.0",
        ]

    def test_missed_criteria_warning(self, input_file, capsys):
        code = main(["-i", "org.example:*", "-i", "com.never:*", "--input", str(input_file)])

        assert code == 0
        err = capsys.readouterr().err
        assert "never triggered in this artifact inclusion filter" in err
        assert "o  'com.never:*'" in err

    def test_fail_on_missed(self, input_file, capsys):
        code = main(["-i", "com.never:*", "--fail-on-missed", "--input", str(input_file)])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("g:a:jar:1\ng:b:pom:1\n"))
        code = main(["-e", "*:*:pom"])

        assert code == 0
        assert capsys.readouterr().out == "g:a:jar:1\n"

    def test_invalid_pattern(self, input_file, capsys):
        code = main(["-i", "a:b:c:d:e:f", "--input", str(input_file)])

        assert code == 1
        assert "Error: Invalid pattern: a:b:c:d:e:f" in capsys.readouterr().err

    def test_bad_version_range(self, input_file, capsys):
        code = main(["-i", "*:*:*:*:[2.0,1.0]", "--input", str(input_file)])

        assert code == 1
        assert "Wrong version spec" in capsys.readouterr().err

    def test_malformed_input(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("g:a:jar:1\ng:a\n")

        code = main(["--input", str(path)])

        assert code == 1
        assert "Line 2" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        code = main(["--input", str(tmp_path / "missing.txt")])

        assert code == 1
        assert "Input file does not exist" in capsys.readouterr().err

    def test_keyboard_interrupt(self, monkeypatch, capsys):
        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("artifilter.main.run_artifilter", interrupted)
        assert main([]) == 130
        assert "Interrupted" in capsys.readouterr().err
