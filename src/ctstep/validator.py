"""Validation gate run before every dispatch."""

from __future__ import annotations

from ctstep.credentials import CredentialResolver, LoginInfo
from ctstep.errors import (
    FieldTooLongError,
    InvalidCredentialError,
    MissingParameterError,
    ThresholdOutOfRangeError,
)
from ctstep.listener import TaskListener
from ctstep.logging import get_logger
from ctstep.parameters import (
    MAX_ACCOUNT_INFO_LENGTH,
    MAX_CC_THRESHOLD,
    MIN_CC_THRESHOLD,
    ParameterBundle,
)

logger = get_logger(__name__)


class ConfigValidator:
    """Validates a parameter bundle against required-field and format rules.

    Checks run in a fixed order and stop at the first failure:

    1. environmentId must be non-empty.
    2. serverUrl must be non-empty.
    3. credentialsId must be non-empty and resolve to a login.
    4. accountInfo, when set, must be at most 52 characters.
    5. ccThreshold must be within 0..100.

    Each accepted field is echoed to the build log.
    """

    def __init__(self, resolver: CredentialResolver) -> None:
        self._resolver = resolver

    def validate(
        self, bundle: ParameterBundle, project: str, listener: TaskListener
    ) -> LoginInfo:
        """Validate a bundle for the given project.

        Args:
            bundle: Parameters to validate.
            project: Project scope used for credential resolution.
            listener: Build log receiving progress lines.

        Returns:
            The login the credentials id resolved to.

        Raises:
            MissingParameterError: If an identity field is empty.
            InvalidCredentialError: If the credentials id does not resolve.
            FieldTooLongError: If accountInfo is longer than 52 characters.
            ThresholdOutOfRangeError: If ccThreshold is outside 0..100.
        """
        log = logger.with_context(project=project, environment_id=bundle.environment_id)

        if not bundle.environment_id:
            raise MissingParameterError("environmentId")
        listener.println(f"environmentId = {bundle.environment_id}")

        if not bundle.server_url:
            raise MissingParameterError("serverUrl")
        listener.println(f"serverUrl = {bundle.server_url}")

        if not bundle.credentials_id:
            raise MissingParameterError("credentialsId")
        login = self._resolver.resolve(project, bundle.credentials_id)
        if login is None:
            raise InvalidCredentialError(bundle.credentials_id)
        listener.println("Credentials entered...")

        if bundle.account_info and len(bundle.account_info) > MAX_ACCOUNT_INFO_LENGTH:
            raise FieldTooLongError(
                "accountInfo", MAX_ACCOUNT_INFO_LENGTH, len(bundle.account_info)
            )

        if not MIN_CC_THRESHOLD <= bundle.cc_threshold <= MAX_CC_THRESHOLD:
            raise ThresholdOutOfRangeError(
                "ccThreshold", bundle.cc_threshold, MIN_CC_THRESHOLD, MAX_CC_THRESHOLD
            )
        listener.println(f"ccThreshold = {bundle.cc_threshold}")

        log.debug("Parameters accepted")
        return login


__all__ = ["ConfigValidator"]
