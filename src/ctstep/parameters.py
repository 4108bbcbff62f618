"""Parameter bundle for one continuous test step invocation.

The bundle is immutable. Identity fields are given at construction; optional
settings either take their defaults or are supplied by name, either directly
or through ``with_options`` / ``from_form``. Nothing here validates the
values: that is the job of ConfigValidator, which runs once per invocation.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from ctstep.errors import InvalidParameterError

MAX_ACCOUNT_INFO_LENGTH = 52
MIN_CC_THRESHOLD = 0
MAX_CC_THRESHOLD = 100

DEFAULT_FOLDER_PATH = ""
DEFAULT_CC_THRESHOLD = 0
DEFAULT_SOURCE_FOLDER = "COBOL"
DEFAULT_REPORT_FOLDER = "TTTReport"
DEFAULT_RECURSIVE = True
DEFAULT_STOP_IF_TEST_FAILS_OR_THRESHOLD_REACHED = True
DEFAULT_UPLOAD_TO_SERVER = False
DEFAULT_HALT_AT_FAILURE = False
DEFAULT_ACCOUNT_INFO = ""

IDENTITY_FIELDS: tuple[str, ...] = ("environment_id", "folder_path", "server_url", "credentials_id")

# Form (camelCase) name -> bundle attribute name
FORM_FIELD_NAMES: dict[str, str] = {
    "environmentId": "environment_id",
    "folderPath": "folder_path",
    "serverUrl": "server_url",
    "credentialsId": "credentials_id",
    "recursive": "recursive",
    "stopIfTestFailsOrThresholdReached": "stop_if_test_fails_or_threshold_reached",
    "uploadToServer": "upload_to_server",
    "haltAtFailure": "halt_at_failure",
    "ccThreshold": "cc_threshold",
    "sonarVersion": "sonar_version",
    "sourceFolder": "source_folder",
    "reportFolder": "report_folder",
    "accountInfo": "account_info",
}

_ATTRIBUTE_FORM_NAMES = {attr: form for form, attr in FORM_FIELD_NAMES.items()}

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
# Form integers longer than this are rejected before conversion
MAX_INTEGER_DIGITS = 18


def form_name(attribute: str) -> str:
    """Return the form field name for a bundle attribute."""
    return _ATTRIBUTE_FORM_NAMES.get(attribute, attribute)


def parse_bool(value: Any) -> bool:
    """Parse a form value as a boolean.

    Returns:
        True for bools that are True and for "true", "1", "yes", "on"
        (case-insensitive); False otherwise.
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


def parse_int(value: Any, field: str) -> int:
    """Parse a form value as a decimal integer.

    Only an optional sign followed by digits is accepted, so values such as
    "1_0", " 5" or "5.0" are rejected, as are values with more than
    MAX_INTEGER_DIGITS digits.

    Raises:
        InvalidParameterError: If the value is not an integer.
    """
    if isinstance(value, bool):
        raise InvalidParameterError(field, f"Parameter {field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value)
    if not _INTEGER_PATTERN.fullmatch(text):
        raise InvalidParameterError(field, f"Parameter {field} must be an integer, got {text!r}")
    digits = len(text.lstrip("+-"))
    if digits > MAX_INTEGER_DIGITS:
        raise InvalidParameterError(
            field, f"Parameter {field} must be an integer, got {digits} digits"
        )
    return int(text)


@dataclass(frozen=True)
class ParameterBundle:
    """Connection parameters and options for a continuous test run."""

    # Identity
    environment_id: str
    folder_path: str
    server_url: str
    credentials_id: str

    # Options
    recursive: bool = DEFAULT_RECURSIVE
    stop_if_test_fails_or_threshold_reached: bool = DEFAULT_STOP_IF_TEST_FAILS_OR_THRESHOLD_REACHED
    upload_to_server: bool = DEFAULT_UPLOAD_TO_SERVER
    halt_at_failure: bool = DEFAULT_HALT_AT_FAILURE
    cc_threshold: int = DEFAULT_CC_THRESHOLD
    sonar_version: str = ""
    source_folder: str = DEFAULT_SOURCE_FOLDER
    report_folder: str = DEFAULT_REPORT_FOLDER
    account_info: str = DEFAULT_ACCOUNT_INFO

    def with_options(self, **changes: Any) -> ParameterBundle:
        """Return a copy of this bundle with some options replaced.

        Raises:
            ValueError: If an identity field is included in ``changes``.
            TypeError: If an unknown option name is given.
        """
        identity = sorted(set(changes) & set(IDENTITY_FIELDS))
        if identity:
            raise ValueError(f"Identity fields cannot be changed: {', '.join(identity)}")
        return replace(self, **changes)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> ParameterBundle:
        """Bind a bundle from submitted form data.

        Keys may be form names (``ccThreshold``) or attribute names
        (``cc_threshold``); unknown keys are ignored. Missing identity fields
        bind as empty strings so that validation reports them, and missing
        options keep their defaults. ``None`` values count as missing.

        Raises:
            InvalidParameterError: If the threshold is not an integer.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in form.items():
            attribute = FORM_FIELD_NAMES.get(key, key)
            if attribute in known and value is not None:
                values[attribute] = value

        kwargs: dict[str, Any] = {name: str(values.get(name, "")) for name in IDENTITY_FIELDS}
        for name in ("recursive", "stop_if_test_fails_or_threshold_reached",
                     "upload_to_server", "halt_at_failure"):
            if name in values:
                kwargs[name] = parse_bool(values[name])
        if "cc_threshold" in values:
            kwargs["cc_threshold"] = parse_int(values["cc_threshold"], "ccThreshold")
        for name in ("sonar_version", "source_folder", "report_folder", "account_info"):
            if name in values:
                kwargs[name] = str(values[name])

        return cls(**kwargs)

    def to_form(self) -> dict[str, Any]:
        """Return the bundle as form data keyed by form field names."""
        return {form_name(f.name): getattr(self, f.name) for f in fields(self)}


__all__ = [
    "DEFAULT_ACCOUNT_INFO",
    "DEFAULT_CC_THRESHOLD",
    "DEFAULT_FOLDER_PATH",
    "DEFAULT_HALT_AT_FAILURE",
    "DEFAULT_RECURSIVE",
    "DEFAULT_REPORT_FOLDER",
    "DEFAULT_SOURCE_FOLDER",
    "DEFAULT_STOP_IF_TEST_FAILS_OR_THRESHOLD_REACHED",
    "DEFAULT_UPLOAD_TO_SERVER",
    "FORM_FIELD_NAMES",
    "IDENTITY_FIELDS",
    "MAX_ACCOUNT_INFO_LENGTH",
    "MAX_CC_THRESHOLD",
    "MAX_INTEGER_DIGITS",
    "MIN_CC_THRESHOLD",
    "ParameterBundle",
    "form_name",
    "parse_bool",
    "parse_int",
]
