"""Execution context passed from the host to the step and on to the runner."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ctstep.listener import TaskListener
from ctstep.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildRun:
    """The build the step executes in.

    Attributes:
        project: Project (job) scope; credential lookups are scoped to it.
        number: Build number within the project.
        env: Build environment variables passed on to launched processes.
    """

    project: str
    number: int = 1
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of a launched process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class Launcher:
    """Starts processes on behalf of the step.

    The host owns process placement; this default launcher runs commands
    locally with the inherited environment overlaid by the build and call
    environments.
    """

    def launch(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> LaunchResult:
        """Run a command to completion.

        Args:
            cmd: Command and arguments.
            cwd: Working directory.
            env: Variables added to the inherited environment.
            timeout: Seconds before the process is killed, or None.

        Returns:
            LaunchResult with the exit code and captured output.

        Raises:
            subprocess.TimeoutExpired: If the timeout elapses.
            FileNotFoundError: If the executable does not exist.
        """
        full_env = dict(os.environ)
        if env:
            full_env.update(env)

        logger.debug("Launching %s (cwd=%s, timeout=%s)", cmd[0] if cmd else "", cwd, timeout)
        result = subprocess.run(
            list(cmd),
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(cwd) if cwd else None,
            env=full_env,
        )
        return LaunchResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


@dataclass(frozen=True)
class ExecutionContext:
    """Everything a runner needs from the host for one invocation."""

    run: BuildRun
    workspace: Path
    launcher: Launcher
    listener: TaskListener

    @property
    def project(self) -> str:
        return self.run.project


__all__ = ["BuildRun", "ExecutionContext", "LaunchResult", "Launcher"]
