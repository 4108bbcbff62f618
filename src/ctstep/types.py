"""Type definitions and enums for the continuous test step.

This module provides centralized enums for the values that flow through the
step, replacing magic strings with type-safe constants.

Usage:
    from ctstep.types import DispatchState, SonarVersion

    # StrEnum members compare equal to their string values
    if result.state == DispatchState.SUCCEEDED:
        ...

    SonarVersion.is_valid("6")  # True
"""

from __future__ import annotations

from enum import StrEnum


class SonarVersion(StrEnum):
    """SonarQube versions the runner can produce reports for.

    Values:
        V5: SonarQube 5 report layout ("5")
        V6: SonarQube 6 report layout ("6")
    """

    V5 = "5"
    V6 = "6"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string value is a supported SonarQube version.

        Args:
            value: The string value to validate.

        Returns:
            True if the value matches a supported version.
        """
        return value in cls._value2member_map_

    @classmethod
    def values(cls) -> frozenset[str]:
        """Return all supported SonarQube versions as a frozenset."""
        return frozenset(member.value for member in cls)


class CredentialKind(StrEnum):
    """Shapes of credentials a credential store may hold.

    Only USERNAME_PASSWORD credentials can be used by the step; the other
    kinds exist so that stores can be shared with unrelated consumers.

    Values:
        USERNAME_PASSWORD: Login name plus secret ("username_password")
        SECRET_TEXT: A bare token ("secret_text")
        CERTIFICATE: A client certificate ("certificate")
    """

    USERNAME_PASSWORD = "username_password"
    SECRET_TEXT = "secret_text"
    CERTIFICATE = "certificate"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string value is a known credential kind.

        Args:
            value: The string value to validate.

        Returns:
            True if the value matches a known credential kind.
        """
        return value in cls._value2member_map_

    @classmethod
    def values(cls) -> frozenset[str]:
        """Return all credential kind values as a frozenset."""
        return frozenset(member.value for member in cls)


class DispatchState(StrEnum):
    """States of a single step dispatch.

    Transitions:
        NOT_STARTED -> VALIDATED | REJECTED
        VALIDATED -> SUCCEEDED | FAILED

    Values:
        NOT_STARTED: Dispatch has not run yet ("not_started")
        VALIDATED: Parameters were accepted ("validated")
        REJECTED: Parameters failed validation ("rejected")
        SUCCEEDED: Runner reported success ("succeeded")
        FAILED: Runner reported failure or raised ("failed")
    """

    NOT_STARTED = "not_started"
    VALIDATED = "validated"
    REJECTED = "rejected"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible from this state."""
        return self in (DispatchState.REJECTED, DispatchState.SUCCEEDED, DispatchState.FAILED)


__all__ = [
    "CredentialKind",
    "DispatchState",
    "SonarVersion",
]
