"""Tests for configuration module."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from ctstep.config import (
    DEFAULT_RUNNER_COMMAND,
    StepConfig,
    _parse_bool,
    _parse_non_negative_float,
    _validate_log_level,
    load_config,
)

ENV_VARS = (
    "CTSTEP_LOG_LEVEL",
    "CTSTEP_LOG_JSON",
    "CTSTEP_CREDENTIALS_FILE",
    "CTSTEP_HOST_CONNECTIONS_FILE",
    "CTSTEP_RUNNER_COMMAND",
    "CTSTEP_RUNNER_TIMEOUT",
    "CTSTEP_PROJECT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    # setenv first so values loaded from .env files are undone too
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def empty_env_file(tmp_path: Path) -> Path:
    path = tmp_path / ".env"
    path.touch()
    return path


class TestStepConfig:
    """Tests for StepConfig dataclass."""

    def test_defaults(self) -> None:
        """Test StepConfig default values."""
        config = StepConfig()
        assert config.log_level == "INFO"
        assert config.log_json is False
        assert config.credentials_file is None
        assert config.host_connections_file is None
        assert config.runner_command == DEFAULT_RUNNER_COMMAND == "TotalTestCLI"
        assert config.project == ""

    def test_frozen_immutable(self) -> None:
        """StepConfig should be immutable after creation."""
        config = StepConfig()
        with pytest.raises(FrozenInstanceError):
            config.project = "other"  # type: ignore[misc]

    def test_zero_timeout_means_unlimited(self) -> None:
        """Test that a zero runner timeout maps to no limit."""
        assert StepConfig(runner_timeout=0.0).effective_runner_timeout is None
        assert StepConfig(runner_timeout=90.0).effective_runner_timeout == 90.0


class TestHelpers:
    """Tests for the value parsing helpers."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes"])
    def test_parse_bool_true(self, value: str) -> None:
        """Test values parsed as True."""
        assert _parse_bool(value) is True

    @pytest.mark.parametrize("value", ["", "false", "0", "no", "on"])
    def test_parse_bool_false(self, value: str) -> None:
        """Test values parsed as False."""
        assert _parse_bool(value) is False

    def test_validate_log_level_normalizes(self) -> None:
        """Test that log levels are upper-cased."""
        assert _validate_log_level("debug") == "DEBUG"

    def test_validate_log_level_invalid_uses_default(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an unknown log level falls back to INFO with a warning."""
        with caplog.at_level(logging.WARNING):
            assert _validate_log_level("VERBOSE") == "INFO"
        assert "Invalid CTSTEP_LOG_LEVEL" in caplog.text

    def test_parse_non_negative_float(self) -> None:
        """Test parsing a valid non-negative float."""
        assert _parse_non_negative_float("2.5", "X", 0.0) == 2.5

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_parse_non_negative_float_invalid_uses_default(
        self, value: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that negative or non-numeric values fall back with a warning."""
        with caplog.at_level(logging.WARNING):
            assert _parse_non_negative_float(value, "CTSTEP_RUNNER_TIMEOUT", 0.0) == 0.0
        assert "CTSTEP_RUNNER_TIMEOUT" in caplog.text


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_with_empty_env(
        self, clean_env: pytest.MonkeyPatch, empty_env_file: Path
    ) -> None:
        """Test that an empty environment yields the default config."""
        config = load_config(empty_env_file)
        assert config == StepConfig()

    def test_loads_from_env_vars(
        self, clean_env: pytest.MonkeyPatch, empty_env_file: Path
    ) -> None:
        """Test that every CTSTEP_* variable is read."""
        clean_env.setenv("CTSTEP_LOG_LEVEL", "debug")
        clean_env.setenv("CTSTEP_LOG_JSON", "yes")
        clean_env.setenv("CTSTEP_CREDENTIALS_FILE", "/etc/ctstep/credentials.yaml")
        clean_env.setenv("CTSTEP_HOST_CONNECTIONS_FILE", "/etc/ctstep/hosts.yaml")
        clean_env.setenv("CTSTEP_RUNNER_COMMAND", "/opt/ttt/TotalTestCLI.sh")
        clean_env.setenv("CTSTEP_RUNNER_TIMEOUT", "600")
        clean_env.setenv("CTSTEP_PROJECT", "payments")

        config = load_config(empty_env_file)

        assert config.log_level == "DEBUG"
        assert config.log_json is True
        assert config.credentials_file == Path("/etc/ctstep/credentials.yaml")
        assert config.host_connections_file == Path("/etc/ctstep/hosts.yaml")
        assert config.runner_command == "/opt/ttt/TotalTestCLI.sh"
        assert config.runner_timeout == 600.0
        assert config.project == "payments"

    def test_loads_from_env_file(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("CTSTEP_PROJECT=inventory\nCTSTEP_LOG_LEVEL=WARNING\n")

        config = load_config(env_file)

        assert config.project == "inventory"
        assert config.log_level == "WARNING"

    def test_blank_runner_command_uses_default(
        self, clean_env: pytest.MonkeyPatch, empty_env_file: Path
    ) -> None:
        """Test that a blank runner command keeps the default."""
        clean_env.setenv("CTSTEP_RUNNER_COMMAND", "   ")
        assert load_config(empty_env_file).runner_command == DEFAULT_RUNNER_COMMAND

    def test_blank_store_paths_are_none(
        self, clean_env: pytest.MonkeyPatch, empty_env_file: Path
    ) -> None:
        """Test that blank store paths mean no store file."""
        clean_env.setenv("CTSTEP_CREDENTIALS_FILE", " ")
        assert load_config(empty_env_file).credentials_file is None
