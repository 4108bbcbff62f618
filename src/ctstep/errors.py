"""Exception hierarchy for the continuous test step.

Every failure the step can report derives from StepError so that callers can
tell step failures apart from programming errors. Validation failures carry
the form field name they refer to; runner and unexpected failures carry the
original exception as ``cause`` (and as ``__cause__`` when raised with
``from``), so the typed reason survives up to the pipeline boundary.

Hierarchy:
    StepError
    ├── ParameterValidationError
    │   ├── MissingParameterError
    │   ├── InvalidCredentialError
    │   ├── FieldTooLongError
    │   ├── ThresholdOutOfRangeError
    │   └── InvalidParameterError
    ├── RunnerFailureError
    ├── UnexpectedStepError
    └── StepAbortedError
"""

from __future__ import annotations

# Messages shown in the build log for each missing identity field.
MISSING_PARAMETER_MESSAGES: dict[str, str] = {
    "environmentId": (
        "Missing parameter Environment Id - please get the environment ID "
        "from the repository server"
    ),
    "serverUrl": (
        "Missing parameter CES server URL - please use the host connection "
        "configuration to configure"
    ),
    "credentialsId": "Missing Credentials ID - configure plugin correctly",
}


class StepError(Exception):
    """Base class for all failures reported by the step."""

    pass


class ParameterValidationError(StepError):
    """Raised when a parameter bundle fails validation.

    Attributes:
        field: Form field name of the offending parameter (camelCase).
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class MissingParameterError(ParameterValidationError):
    """Raised when a required parameter is empty."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(
            field,
            message or MISSING_PARAMETER_MESSAGES.get(field, f"Missing parameter {field}"),
        )


class InvalidCredentialError(ParameterValidationError):
    """Raised when a credentials id does not resolve to a usable login."""

    def __init__(self, credentials_id: str) -> None:
        super().__init__(
            "credentialsId",
            "Credential ID entered is not valid - enter valid ID from the credential store",
        )
        self.credentials_id = credentials_id


class FieldTooLongError(ParameterValidationError):
    """Raised when a text parameter exceeds its maximum length."""

    def __init__(self, field: str, max_length: int, actual_length: int) -> None:
        if field == "accountInfo":
            message = f"Entered accounting information is greater than {max_length} characters."
        else:
            message = f"Parameter {field} is greater than {max_length} characters."
        super().__init__(field, message)
        self.max_length = max_length
        self.actual_length = actual_length


class ThresholdOutOfRangeError(ParameterValidationError):
    """Raised when a percentage threshold is outside its allowed range."""

    def __init__(self, field: str, value: int, minimum: int, maximum: int) -> None:
        super().__init__(
            field,
            f"Parameter {field} must be between {minimum} and {maximum}, got {value}",
        )
        self.value = value


class InvalidParameterError(ParameterValidationError):
    """Raised when a form value cannot be bound to its parameter type."""

    pass


class RunnerFailureError(StepError):
    """Raised when the test runner reports failure.

    Attributes:
        cause: The exception raised by the runner, or None when the runner
            simply returned a failed outcome.
    """

    def __init__(self, message: str = "Test failure", cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnexpectedStepError(StepError):
    """Wraps an exception that is not part of the step's own taxonomy."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class StepAbortedError(StepError):
    """Raised by the pipeline step to abort the build.

    Attributes:
        cause: The typed StepError that caused the abort.
    """

    def __init__(self, cause: StepError) -> None:
        super().__init__(str(cause))
        self.cause = cause


__all__ = [
    "MISSING_PARAMETER_MESSAGES",
    "FieldTooLongError",
    "InvalidCredentialError",
    "InvalidParameterError",
    "MissingParameterError",
    "ParameterValidationError",
    "RunnerFailureError",
    "StepAbortedError",
    "StepError",
    "ThresholdOutOfRangeError",
    "UnexpectedStepError",
]
