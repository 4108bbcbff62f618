"""Structured logging configuration for the continuous test step."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

# Context fields rendered by both formatters, in display order
CONTEXT_FIELDS: tuple[str, ...] = ("project", "build", "environment_id", "state")


def _component(record: logging.LogRecord) -> str:
    # "ctstep.dispatcher" -> "dispatcher"
    return record.name.split(".")[-1] if "." in record.name else record.name


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured log messages.

    Includes timestamp, level, component, message, and any extra context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with structured output.

        Args:
            record: The log record to format.

        Returns:
            Formatted log string.
        """
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).strftime("%Y-%m-%d %H:%M:%S.%f")[
            :-3
        ]

        parts = [
            f"{timestamp}",
            f"[{record.levelname:8}]",
            f"[{_component(record):12}]",
        ]

        context_parts = []
        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                context_parts.append(f"{key}={getattr(record, key)}")

        if context_parts:
            parts.append(f"[{' '.join(context_parts)}]")

        parts.append(record.getMessage())

        if record.exc_info:
            parts.append(self.formatException(record.exc_info))

        return " ".join(parts)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs JSON log messages for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "component": _component(record),
            "message": record.getMessage(),
        }

        for key in (*CONTEXT_FIELDS, "error_type"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ContextAdapter(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter that adds context to all log messages.

    Usage:
        logger = get_logger(__name__)
        ctx_logger = logger.with_context(project="payments", environment_id="ENV1")
        ctx_logger.info("Validating parameters")
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Add context to the log record.

        Args:
            msg: The log message.
            kwargs: Keyword arguments for the log call.

        Returns:
            Tuple of (message, kwargs) with context added.
        """
        extra = kwargs.get("extra", {})
        if self.extra is not None:
            extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


class StepLogger(logging.Logger):
    """Custom logger with context support."""

    def with_context(self, **context: Any) -> ContextAdapter:
        """Create a logger adapter with additional context.

        Args:
            **context: Context fields to add to all log messages.

        Returns:
            ContextAdapter with the specified context.
        """
        return ContextAdapter(self, context)


logging.setLoggerClass(StepLogger)


def get_logger(name: str) -> StepLogger:
    """Get a logger with the custom StepLogger class.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StepLogger instance.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    replace_handlers: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        json_format: If True, output JSON-formatted logs.
        replace_handlers: If True, remove existing handlers before adding new ones.
            Set to False to preserve handlers installed by the host.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    if replace_handlers:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    # stderr keeps the build log on stdout free of diagnostics
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(StructuredFormatter())

    root_logger.addHandler(handler)

    logging.getLogger("ctstep").setLevel(numeric_level)


def log_step_summary(
    logger: logging.Logger,
    project: str,
    environment_id: str,
    state: str,
    message: str,
    error_type: str | None = None,
) -> None:
    """Log a summary of a step dispatch.

    Args:
        logger: Logger to use.
        project: Project scope the step ran in.
        environment_id: Target test environment.
        state: Final dispatch state (succeeded, failed, rejected).
        message: Outcome message shown in the build log.
        error_type: Class name of the failure, if any.
    """
    if state == "succeeded":
        log_method = logger.info
    elif state == "rejected":
        log_method = logger.warning
    else:
        log_method = logger.error

    extra: dict[str, Any] = {
        "project": project,
        "environment_id": environment_id,
        "state": state,
    }
    if error_type:
        extra["error_type"] = error_type

    log_method(
        "Continuous test step %s for environment %s: %s",
        state,
        environment_id or "<unset>",
        message,
        extra=extra,
    )


__all__ = [
    "CONTEXT_FIELDS",
    "ContextAdapter",
    "JSONFormatter",
    "StepLogger",
    "StructuredFormatter",
    "get_logger",
    "log_step_summary",
    "setup_logging",
]
