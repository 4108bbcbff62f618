"""Validation-then-run dispatch for one step invocation."""

from __future__ import annotations

from dataclasses import dataclass

from ctstep.context import ExecutionContext
from ctstep.errors import (
    ParameterValidationError,
    RunnerFailureError,
    StepError,
    UnexpectedStepError,
)
from ctstep.logging import get_logger, log_step_summary
from ctstep.parameters import ParameterBundle
from ctstep.runner import TestRunner
from ctstep.types import DispatchState
from ctstep.validator import ConfigValidator

logger = get_logger(__name__)

DISPLAY_NAME = "Continuous Test"
TEST_FAILURE_MESSAGE = "Test failure"
TEST_SUCCESS_MESSAGE = "Test Success..."


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a dispatch.

    Attributes:
        state: Terminal state reached.
        error: The typed failure, None on success.
        runner_invoked: Whether the runner was called.
    """

    state: DispatchState
    error: StepError | None = None
    runner_invoked: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state == DispatchState.SUCCEEDED

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else TEST_SUCCESS_MESSAGE


class RunDispatcher:
    """Validates a bundle and, if accepted, hands it to the test runner.

    Validation failures stop the dispatch before the runner is invoked.
    Any other exception raised while validating, such as an unreachable
    credential store, also stops it, in the FAILED state.
    Runner failures, whether a False outcome or a raised exception, end in
    the FAILED state. No retries.
    """

    def __init__(self, validator: ConfigValidator, runner: TestRunner) -> None:
        self._validator = validator
        self._runner = runner

    def perform(self, bundle: ParameterBundle, context: ExecutionContext) -> DispatchResult:
        """Run one dispatch.

        Args:
            bundle: Parameters for this invocation.
            context: Host execution context.

        Returns:
            DispatchResult carrying the terminal state and typed error.
        """
        listener = context.listener
        listener.println(f"Running {DISPLAY_NAME}\n")

        try:
            self._validator.validate(bundle, context.project, listener)
        except ParameterValidationError as e:
            listener.println(str(e))
            return self._finish(bundle, context, DispatchState.REJECTED, e, runner_invoked=False)
        except Exception as e:
            listener.println(str(e) or type(e).__name__)
            return self._finish(
                bundle,
                context,
                DispatchState.FAILED,
                UnexpectedStepError(e),
                runner_invoked=False,
            )
        logger.debug(
            "Parameters validated, invoking runner",
            extra={"state": DispatchState.VALIDATED, "project": context.project},
        )

        error: StepError | None
        try:
            success = self._runner.run(bundle, context)
        except StepError as e:
            listener.println(str(e))
            error = e
        except Exception as e:
            listener.println(str(e) or type(e).__name__)
            error = UnexpectedStepError(e)
        else:
            if success:
                listener.println(TEST_SUCCESS_MESSAGE)
                return self._finish(bundle, context, DispatchState.SUCCEEDED, None)
            listener.error(TEST_FAILURE_MESSAGE)
            error = RunnerFailureError(TEST_FAILURE_MESSAGE)

        return self._finish(bundle, context, DispatchState.FAILED, error)

    def _finish(
        self,
        bundle: ParameterBundle,
        context: ExecutionContext,
        state: DispatchState,
        error: StepError | None,
        runner_invoked: bool = True,
    ) -> DispatchResult:
        result = DispatchResult(state=state, error=error, runner_invoked=runner_invoked)
        log_step_summary(
            logger,
            project=context.project,
            environment_id=bundle.environment_id,
            state=state,
            message=result.message,
            error_type=type(error).__name__ if error is not None else None,
        )
        return result


__all__ = [
    "DISPLAY_NAME",
    "TEST_FAILURE_MESSAGE",
    "TEST_SUCCESS_MESSAGE",
    "DispatchResult",
    "RunDispatcher",
]
