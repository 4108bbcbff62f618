"""Tests for TaskListener."""

from __future__ import annotations

import logging
from io import StringIO

import pytest

from ctstep.listener import TaskListener


class TestTaskListener:
    """Tests for TaskListener."""

    def test_println_writes_line(self) -> None:
        """Test that println writes one line to the stream."""
        stream = StringIO()
        listener = TaskListener(stream)

        listener.println("environmentId = ENV1")

        assert stream.getvalue() == "environmentId = ENV1\n"
        assert listener.lines == ["environmentId = ENV1"]

    def test_error_prefixes_line(self) -> None:
        """Test that error lines carry the ERROR prefix."""
        stream = StringIO()
        listener = TaskListener(stream)

        listener.error("Test failure")

        assert stream.getvalue() == "ERROR: Test failure\n"

    def test_lines_is_a_copy(self) -> None:
        """Test that the lines property returns a copy."""
        listener = TaskListener(StringIO())
        listener.println("a")
        listener.lines.clear()
        assert listener.lines == ["a"]

    def test_mirrors_to_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that lines are mirrored to the package logger."""
        listener = TaskListener(StringIO())

        with caplog.at_level(logging.DEBUG, logger="ctstep.listener"):
            listener.println("progress")
            listener.error("boom")

        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
            (logging.DEBUG, "progress"),
            (logging.ERROR, "ERROR: boom"),
        ]
