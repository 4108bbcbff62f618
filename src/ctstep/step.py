"""The continuous test pipeline step exposed to the CI host."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ctstep.context import BuildRun, ExecutionContext, Launcher
from ctstep.credentials import CredentialResolver, CredentialStore
from ctstep.dispatcher import DispatchResult, RunDispatcher
from ctstep.errors import RunnerFailureError, StepAbortedError
from ctstep.host_connections import HostConnectionRegistry
from ctstep.listener import TaskListener
from ctstep.logging import get_logger
from ctstep.options import Option, OptionListBuilder
from ctstep.parameters import ParameterBundle
from ctstep.runner import TestRunner
from ctstep.validator import ConfigValidator

logger = get_logger(__name__)

# Name the step is referenced by in pipeline scripts
STEP_SYMBOL = "totaltest"


@dataclass(frozen=True)
class StepServices:
    """Host-provided collaborators injected into the step."""

    credential_store: CredentialStore
    runner: TestRunner
    host_registry: HostConnectionRegistry | None = None


class ContinuousTestStep:
    """A configured continuous test step.

    The host calls ``perform`` once per build step execution. Success returns
    normally; any failure raises StepAbortedError carrying the typed cause,
    which fails the build.

    Usage:
        step = ContinuousTestStep(bundle, services)
        step.perform(BuildRun("payments"), Path("."), Launcher(), TaskListener())
    """

    def __init__(self, bundle: ParameterBundle, services: StepServices) -> None:
        self._bundle = bundle
        self._services = services
        resolver = CredentialResolver(services.credential_store)
        self._dispatcher = RunDispatcher(ConfigValidator(resolver), services.runner)

    @property
    def bundle(self) -> ParameterBundle:
        return self._bundle

    def perform(
        self,
        run: BuildRun,
        workspace: Path,
        launcher: Launcher,
        listener: TaskListener,
    ) -> DispatchResult:
        """Execute the step for one build.

        Args:
            run: The build being executed.
            workspace: Build workspace directory.
            launcher: Process launcher for the runner.
            listener: Build log.

        Returns:
            The successful DispatchResult.

        Raises:
            StepAbortedError: If validation or the test run failed. The
                original StepError is available as ``cause``.
        """
        context = ExecutionContext(run=run, workspace=workspace, launcher=launcher, listener=listener)
        result = self._dispatcher.perform(self._bundle, context)
        if not result.succeeded:
            error = result.error or RunnerFailureError()
            raise StepAbortedError(error) from error
        return result

    def credential_options(self, project: str) -> list[Option]:
        """Credential drop-down for this step's form."""
        return self._option_builder().build_credential_options(
            project, self._bundle.credentials_id
        )

    def server_url_options(self) -> list[Option]:
        """Server URL drop-down for this step's form."""
        return self._option_builder().build_server_url_options(self._bundle.server_url)

    def _option_builder(self) -> OptionListBuilder:
        return OptionListBuilder(self._services.credential_store, self._services.host_registry)


__all__ = ["STEP_SYMBOL", "ContinuousTestStep", "StepServices"]
