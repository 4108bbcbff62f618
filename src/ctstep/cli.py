"""Command-line interface argument parsing for the continuous test step.

This module provides the CLI argument parser that handles:
- Step parameters (environment, server, credentials, folders, options)
- Option list display (--list credentials|servers)
- Project and workspace selection
- Log level override
- Environment file specification
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from ctstep.parameters import (
    DEFAULT_CC_THRESHOLD,
    DEFAULT_REPORT_FOLDER,
    DEFAULT_SOURCE_FOLDER,
)
from ctstep.types import SonarVersion

LIST_CHOICES = ("credentials", "servers")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Optional list of arguments to parse. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace. Step parameters use the bundle
        attribute names (environment_id, cc_threshold, ...); in addition:
        - list: Option list to print instead of running, or None
        - project: Project scope override
        - workspace: Build workspace directory
        - build_number: Build number reported to the runner
        - log_level: Logging level
        - env_file: Path to .env file
    """
    parser = argparse.ArgumentParser(
        prog="ctstep",
        description="Continuous test step - validate parameters and run tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    step = parser.add_argument_group("step parameters")
    step.add_argument("--environment-id", default="", help="Target test environment id")
    step.add_argument("--folder-path", default="", help="Folder containing the tests")
    step.add_argument("--server-url", default="", help="CES server URL")
    step.add_argument("--credentials-id", default="", help="Credential id in the credential store")
    step.add_argument(
        "--recursive",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Search the test folder recursively (default: on)",
    )
    step.add_argument(
        "--stop-if-test-fails-or-threshold-reached",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Fail the step if a test fails or the coverage threshold is missed (default: on)",
    )
    step.add_argument(
        "--upload-to-server",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Upload results to the server (default: off)",
    )
    step.add_argument(
        "--halt-at-failure",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Stop at the first failing test case (default: off)",
    )
    step.add_argument(
        "--cc-threshold",
        type=int,
        default=DEFAULT_CC_THRESHOLD,
        help="Code coverage threshold percentage, 0-100 (default: 0)",
    )
    step.add_argument(
        "--sonar-version",
        choices=sorted(SonarVersion.values()),
        default="",
        help="SonarQube version of the generated report",
    )
    step.add_argument(
        "--source-folder",
        default=DEFAULT_SOURCE_FOLDER,
        help=f"Source folder (default: {DEFAULT_SOURCE_FOLDER})",
    )
    step.add_argument(
        "--report-folder",
        default=DEFAULT_REPORT_FOLDER,
        help=f"Report folder (default: {DEFAULT_REPORT_FOLDER})",
    )
    step.add_argument("--account-info", default="", help="Accounting information (max 52 chars)")

    parser.add_argument(
        "--list",
        choices=LIST_CHOICES,
        default=None,
        help="Print the selectable credentials or server URLs and exit",
    )

    parser.add_argument(
        "--project",
        default=None,
        help="Project scope for credential lookups (overrides CTSTEP_PROJECT)",
    )

    parser.add_argument(
        "--workspace",
        type=Path,
        default=Path("."),
        help="Build workspace directory (default: .)",
    )

    parser.add_argument(
        "--build-number",
        type=int,
        default=1,
        help="Build number (default: 1)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (overrides CTSTEP_LOG_LEVEL)",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: ./.env)",
    )

    return parser.parse_args(args)


def bundle_form(parsed: argparse.Namespace) -> dict[str, Any]:
    """Extract the step parameters from parsed arguments as form data."""
    names = (
        "environment_id",
        "folder_path",
        "server_url",
        "credentials_id",
        "recursive",
        "stop_if_test_fails_or_threshold_reached",
        "upload_to_server",
        "halt_at_failure",
        "cc_threshold",
        "sonar_version",
        "source_folder",
        "report_folder",
        "account_info",
    )
    return {name: getattr(parsed, name) for name in names}


__all__ = ["LIST_CHOICES", "bundle_form", "parse_args"]
