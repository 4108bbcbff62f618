"""Test runner interface and the command-line runner adapter.

The runner is the external collaborator that actually executes the tests,
parses results and uploads them. The step only needs a boolean outcome from
it. CommandTestRunner adapts an external test CLI to that contract; how the
CLI talks to the test server is its own business.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod

from ctstep.context import ExecutionContext
from ctstep.credentials import CredentialResolver
from ctstep.errors import InvalidCredentialError, RunnerFailureError
from ctstep.logging import get_logger
from ctstep.parameters import ParameterBundle

logger = get_logger(__name__)

# Environment variable carrying the password to the runner process
PASSWORD_ENV_VAR = "CTSTEP_RUNNER_PASSWORD"


class TestRunner(ABC):
    """Abstract interface for the external test-execution runner."""

    # Not a test class, despite the name
    __test__ = False

    @abstractmethod
    def run(self, bundle: ParameterBundle, context: ExecutionContext) -> bool:
        """Execute the tests described by a validated bundle.

        Args:
            bundle: Validated parameters.
            context: Host execution context.

        Returns:
            True if the tests passed (and thresholds were met), False otherwise.

        Raises:
            Exception: Runners may raise; the dispatcher reports it as a failure.
        """
        pass


class CommandTestRunner(TestRunner):
    """Runs tests by launching an external test CLI.

    The CLI receives the bundle as long options and the password through the
    ``CTSTEP_RUNNER_PASSWORD`` environment variable so it never appears on a
    command line. Exit code 0 means success. Output is copied to the build
    log line by line.
    """

    __test__ = False

    def __init__(
        self,
        command: str,
        resolver: CredentialResolver,
        timeout: float | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            command: Path or name of the test CLI executable.
            resolver: Resolves the bundle's credentials id to a login.
            timeout: Seconds to allow the CLI, or None for no limit.
        """
        self._command = command
        self._resolver = resolver
        self._timeout = timeout

    @property
    def command(self) -> str:
        return self._command

    def build_command(
        self, bundle: ParameterBundle, context: ExecutionContext, username: str
    ) -> list[str]:
        """Build the CLI argument list for a bundle.

        Args:
            bundle: Validated parameters.
            context: Host execution context.
            username: Resolved login name.

        Returns:
            List of command arguments for the launcher.
        """
        cmd = [
            self._command,
            "--environment-id", bundle.environment_id,
            "--server-url", bundle.server_url,
            "--user", username,
            "--workspace", str(context.workspace),
            "--source-folder", bundle.source_folder,
            "--report-folder", bundle.report_folder,
            "--cc-threshold", str(bundle.cc_threshold),
        ]
        if bundle.folder_path:
            cmd.extend(["--folder-path", bundle.folder_path])
        if bundle.sonar_version:
            cmd.extend(["--sonar-version", bundle.sonar_version])
        if bundle.account_info:
            cmd.extend(["--account-info", bundle.account_info])
        if bundle.recursive:
            cmd.append("--recursive")
        if bundle.stop_if_test_fails_or_threshold_reached:
            cmd.append("--stop-if-test-fails-or-threshold-reached")
        if bundle.upload_to_server:
            cmd.append("--upload-to-server")
        if bundle.halt_at_failure:
            cmd.append("--halt-at-failure")
        return cmd

    def run(self, bundle: ParameterBundle, context: ExecutionContext) -> bool:
        login = self._resolver.resolve(context.project, bundle.credentials_id)
        if login is None:
            raise InvalidCredentialError(bundle.credentials_id)

        cmd = self.build_command(bundle, context, login.username)
        env = dict(context.run.env)
        env[PASSWORD_ENV_VAR] = login.password

        logger.info(
            "Running test CLI: environment=%s, timeout=%ss",
            bundle.environment_id,
            self._timeout,
            extra={"project": context.project, "build": context.run.number},
        )

        try:
            result = context.launcher.launch(
                cmd, cwd=context.workspace, env=env, timeout=self._timeout
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Test CLI timed out after %ss", self._timeout)
            raise RunnerFailureError(
                f"Test execution timed out after {self._timeout}s", cause=e
            ) from e
        except FileNotFoundError as e:
            logger.error("Test CLI not found at path: %s", self._command)
            raise RunnerFailureError(
                f"Test CLI executable not found: {self._command}", cause=e
            ) from e

        for line in result.stdout.splitlines():
            context.listener.println(line)
        if not result.succeeded:
            for line in result.stderr.splitlines():
                context.listener.println(line)
            logger.warning("Test CLI exited with code %d", result.returncode)
        return result.succeeded


__all__ = ["PASSWORD_ENV_VAR", "CommandTestRunner", "TestRunner"]
