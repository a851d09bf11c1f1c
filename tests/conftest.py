"""Shared pytest fixtures for ArtiFilter tests."""
import os
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
import yaml

from artifilter.core.constants import ENV_PREFIX
from artifilter.infrastructure import logger as logger_module
from artifilter.rules.coordinate import Coordinate


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop ARTIFILTER_* variables and the global logger between tests."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)

    monkeypatch.setattr(logger_module, "_global_logger", None)


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double that records calls and reports every level enabled."""
    logger = MagicMock()
    logger.is_enabled_for.return_value = True
    return logger


@pytest.fixture
def jar() -> Coordinate:
    """Plain jar coordinate without classifier."""
    return Coordinate("org.example", "lib", "jar", None, "1.0")


@pytest.fixture
def test_jar() -> Coordinate:
    """Jar coordinate with a classifier."""
    return Coordinate("org.example", "lib", "jar", "tests", "1.0")


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Representative configuration document."""
    return {
        "artifilter": {
            "filter": {
                "includes": ["!*:*:*:tests:*", "org.example:*"],
                "excludes": ["*:*:pom"],
                "transitive": False,
            },
            "logging": {"level": "WARNING"},
            "report": {"missed_criteria": True, "filtered": False},
        }
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config: Dict[str, Any]) -> Path:
    """Write sample_config to a YAML file."""
    path = tmp_path / "artifilter.yaml"
    path.write_text(yaml.safe_dump(sample_config))
    return path


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Coordinate list with a comment, a blank line and a trail."""
    path = tmp_path / "deps.txt"
    path.write_text(
        "# resolved dependencies\n"
        "org.example:lib:jar:1.0\n"
        "\n"
        "org.example:lib:jar:tests:1.0\n"
        "org.other:util:jar:2.0 org.example:app:jar:1.0 org.other:util:jar:2.0\n"
        "org.example:parent:pom:1.0\n"
    )
    return path
