"""Configuration loading from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Valid log levels
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_RUNNER_COMMAND = "TotalTestCLI"


@dataclass(frozen=True)
class StepConfig:
    """Application configuration loaded from environment.

    This dataclass is frozen (immutable) to prevent accidental modification
    after creation.
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # External stores (YAML files); None means an empty store
    credentials_file: Path | None = None
    host_connections_file: Path | None = None

    # Test runner
    runner_command: str = DEFAULT_RUNNER_COMMAND
    runner_timeout: float = 0.0  # seconds, 0 = no limit

    # Project scope used for credential lookups
    project: str = ""

    @property
    def effective_runner_timeout(self) -> float | None:
        """Runner timeout in seconds, or None when unlimited."""
        return self.runner_timeout if self.runner_timeout > 0 else None


def _validate_log_level(value: str, default: str = "INFO") -> str:
    """Validate and normalize a log level string.

    Args:
        value: The log level string to validate.
        default: The default value to use if invalid.

    Returns:
        The validated log level (uppercase), or the default if invalid.

    Logs a warning if the value is invalid.
    """
    normalized = value.upper()
    if normalized not in VALID_LOG_LEVELS:
        logging.warning(
            "Invalid CTSTEP_LOG_LEVEL: '%s' is not valid, using default '%s'. Valid values: %s",
            value,
            default,
            ", ".join(sorted(VALID_LOG_LEVELS)),
        )
        return default
    return normalized


def _parse_bool(value: str) -> bool:
    """Parse a string as a boolean.

    Returns:
        True if value is "true", "1", or "yes" (case-insensitive), False otherwise.
    """
    return value.lower() in ("true", "1", "yes")


def _parse_non_negative_float(value: str, name: str, default: float) -> float:
    """Parse a string as a non-negative float with validation.

    Args:
        value: The string value to parse.
        name: The name of the setting (for error messages).
        default: The default value to use if parsing fails.

    Returns:
        The parsed non-negative float, or the default if invalid.

    Logs a warning if the value is invalid.
    """
    try:
        parsed = float(value)
        if parsed < 0:
            logging.warning(
                "Invalid %s: %f is negative, using default %f",
                name,
                parsed,
                default,
            )
            return default
        return parsed
    except ValueError:
        logging.warning(
            "Invalid %s: '%s' is not a valid number, using default %f",
            name,
            value,
            default,
        )
        return default


def _optional_path(value: str) -> Path | None:
    return Path(value) if value.strip() else None


def load_config(env_file: Path | None = None) -> StepConfig:
    """Load configuration from environment variables.

    Args:
        env_file: Optional path to .env file. If not provided,
                  looks for .env in current directory.

    Returns:
        StepConfig object with loaded values.

    Invalid values are replaced by defaults with a logged warning:
    - CTSTEP_LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - CTSTEP_RUNNER_TIMEOUT must be a non-negative number
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    log_level = _validate_log_level(os.getenv("CTSTEP_LOG_LEVEL", "INFO"))
    log_json = _parse_bool(os.getenv("CTSTEP_LOG_JSON", ""))

    runner_command = os.getenv("CTSTEP_RUNNER_COMMAND", "").strip() or DEFAULT_RUNNER_COMMAND
    runner_timeout = _parse_non_negative_float(
        os.getenv("CTSTEP_RUNNER_TIMEOUT", "0"),
        "CTSTEP_RUNNER_TIMEOUT",
        0.0,
    )

    return StepConfig(
        log_level=log_level,
        log_json=log_json,
        credentials_file=_optional_path(os.getenv("CTSTEP_CREDENTIALS_FILE", "")),
        host_connections_file=_optional_path(os.getenv("CTSTEP_HOST_CONNECTIONS_FILE", "")),
        runner_command=runner_command,
        runner_timeout=runner_timeout,
        project=os.getenv("CTSTEP_PROJECT", ""),
    )


__all__ = ["DEFAULT_RUNNER_COMMAND", "VALID_LOG_LEVELS", "StepConfig", "load_config"]
