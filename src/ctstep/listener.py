"""Build log channel handed to the step by the host."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from ctstep.logging import get_logger

logger = get_logger(__name__)

ERROR_PREFIX = "ERROR: "


class TaskListener:
    """Writes human-readable progress lines to a build log.

    Every line is also mirrored to the package logger at DEBUG level
    (``error`` lines at ERROR level), so diagnostics end up in the
    structured log as well as the build log.

    Usage:
        listener = TaskListener()
        listener.println("environmentId = ENV1")
        listener.error("Test failure")
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the listener.

        Args:
            stream: Text stream receiving the build log. Defaults to stdout.
        """
        self._stream = stream if stream is not None else sys.stdout
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        """Lines written so far, without trailing newlines."""
        return list(self._lines)

    def println(self, message: str) -> None:
        """Write a progress line to the build log."""
        self._write(message, logging.DEBUG)

    def error(self, message: str) -> None:
        """Write an error line to the build log."""
        self._write(f"{ERROR_PREFIX}{message}", logging.ERROR)

    def _write(self, line: str, level: int) -> None:
        self._lines.append(line)
        self._stream.write(line + "\n")
        self._stream.flush()
        logger.log(level, "%s", line)


__all__ = ["ERROR_PREFIX", "TaskListener"]
