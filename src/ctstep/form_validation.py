"""Live validators for the step's configuration form.

One function per configurable field. Each returns a FormValidation that the
UI layer renders next to the field; none of them raise.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from ctstep.errors import InvalidParameterError
from ctstep.parameters import MAX_ACCOUNT_INFO_LENGTH, MAX_CC_THRESHOLD, MIN_CC_THRESHOLD, parse_int

CC_THRESHOLD_MESSAGE = (
    f"Code coverage threshold must be a whole number between {MIN_CC_THRESHOLD} "
    f"and {MAX_CC_THRESHOLD}"
)
ENVIRONMENT_ID_MESSAGE = "Environment ID is required"
SERVER_URL_MESSAGE = "CES server URL is required"
CREDENTIALS_ID_MESSAGE = "Login credentials are required"
REPORT_FOLDER_MESSAGE = "Report folder is required"
REPORT_FOLDER_NOT_DIRECTORY_MESSAGE = "Report folder must be a folder, not a file"
FOLDER_PATH_NOT_DIRECTORY_MESSAGE = "Test folder path must be a folder, not a file"
ACCOUNT_INFO_MESSAGE = (
    f"Accounting information cannot be longer than {MAX_ACCOUNT_INFO_LENGTH} characters"
)


class FormValidation(NamedTuple):
    """Result of validating one form field.

    Attributes:
        is_ok: True if the value is acceptable.
        message: Description of the problem, empty if ok.
    """

    is_ok: bool
    message: str

    @classmethod
    def ok(cls) -> FormValidation:
        """Create a successful validation result."""
        return cls(is_ok=True, message="")

    @classmethod
    def error(cls, message: str) -> FormValidation:
        """Create a failed validation result with the given message."""
        return cls(is_ok=False, message=message)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _resolve(value: str, base_dir: Path | None) -> Path:
    path = Path(value)
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def check_cc_threshold(value: str | None) -> FormValidation:
    """The threshold must be an integer percentage in 0..100."""
    if not value:
        return FormValidation.error(CC_THRESHOLD_MESSAGE)
    try:
        threshold = parse_int(value, "ccThreshold")
    except InvalidParameterError:
        return FormValidation.error(CC_THRESHOLD_MESSAGE)
    if threshold < MIN_CC_THRESHOLD or threshold > MAX_CC_THRESHOLD:
        return FormValidation.error(CC_THRESHOLD_MESSAGE)
    return FormValidation.ok()


def check_environment_id(value: str | None) -> FormValidation:
    if _is_blank(value):
        return FormValidation.error(ENVIRONMENT_ID_MESSAGE)
    return FormValidation.ok()


def check_server_url(value: str | None) -> FormValidation:
    if _is_blank(value):
        return FormValidation.error(SERVER_URL_MESSAGE)
    return FormValidation.ok()


def check_credentials_id(value: str | None) -> FormValidation:
    if _is_blank(value):
        return FormValidation.error(CREDENTIALS_ID_MESSAGE)
    return FormValidation.ok()


def check_report_folder(value: str | None, base_dir: Path | None = None) -> FormValidation:
    """The report folder is required and must not name an existing plain file.

    Args:
        value: Submitted folder.
        base_dir: Directory relative paths are resolved against; the current
            directory when None.
    """
    if value is None or _is_blank(value):
        return FormValidation.error(REPORT_FOLDER_MESSAGE)
    if _resolve(value, base_dir).is_file():
        return FormValidation.error(REPORT_FOLDER_NOT_DIRECTORY_MESSAGE)
    return FormValidation.ok()


def check_folder_path(value: str | None, base_dir: Path | None = None) -> FormValidation:
    """The test folder is optional but, when it exists, must be a directory."""
    if value is not None and not _is_blank(value):
        if _resolve(value, base_dir).is_file():
            return FormValidation.error(FOLDER_PATH_NOT_DIRECTORY_MESSAGE)
    return FormValidation.ok()


def check_account_info(value: str | None) -> FormValidation:
    # Blank values are allowed whatever their length
    if value is not None and not _is_blank(value) and len(value) > MAX_ACCOUNT_INFO_LENGTH:
        return FormValidation.error(ACCOUNT_INFO_MESSAGE)
    return FormValidation.ok()


__all__ = [
    "FormValidation",
    "check_account_info",
    "check_cc_threshold",
    "check_credentials_id",
    "check_environment_id",
    "check_folder_path",
    "check_report_folder",
    "check_server_url",
]
