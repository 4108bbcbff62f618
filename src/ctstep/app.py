"""Command-line runner for the continuous test step.

Acts as the composition root: loads configuration, sets up logging, wires
the host collaborators through the container, then either prints an option
list or performs the step once.

Exit codes:
    0: Step succeeded (or option list printed)
    1: Step aborted (validation or test failure)
    2: Configuration or store file error
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any, TextIO

from ctstep.cli import bundle_form, parse_args
from ctstep.config import StepConfig, load_config
from ctstep.container import StepContainer, create_container, create_option_builder, create_step
from ctstep.context import BuildRun, Launcher
from ctstep.errors import InvalidParameterError, StepAbortedError
from ctstep.listener import TaskListener
from ctstep.logging import get_logger, setup_logging
from ctstep.parameters import ParameterBundle
from ctstep.store_files import StoreLoadError

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_STEP_FAILED = 1
EXIT_CONFIG_ERROR = 2


def apply_cli_overrides(config: StepConfig, parsed: argparse.Namespace) -> StepConfig:
    """Apply CLI argument overrides to the configuration.

    Args:
        config: Base configuration loaded from environment.
        parsed: Parsed command-line arguments.

    Returns:
        New StepConfig instance with CLI overrides applied.
    """
    overrides: dict[str, Any] = {}

    if parsed.log_level:
        overrides["log_level"] = parsed.log_level
    if parsed.project is not None:
        overrides["project"] = parsed.project

    if overrides:
        return replace(config, **overrides)
    return config


def print_options(
    container: StepContainer,
    which: str,
    config: StepConfig,
    bundle: ParameterBundle,
    out: TextIO,
) -> None:
    """Print a drop-down option list, one ``[*] value  label`` line per entry."""
    builder = create_option_builder(container)
    if which == "credentials":
        options = builder.build_credential_options(config.project, bundle.credentials_id)
    else:
        options = builder.build_server_url_options(bundle.server_url)

    # Skip the leading empty option
    for option in options[1:]:
        marker = "*" if option.selected else " "
        out.write(f"[{marker}] {option.value}  {option.label}\n")


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Optional list of command-line arguments.

    Returns:
        Exit code for the application.
    """
    parsed = parse_args(args)
    config = apply_cli_overrides(load_config(parsed.env_file), parsed)
    setup_logging(config.log_level, json_format=config.log_json)

    try:
        bundle = ParameterBundle.from_form(bundle_form(parsed))
    except InvalidParameterError as e:
        logger.error("Invalid step parameter: %s", e)
        return EXIT_CONFIG_ERROR

    logger.debug("Effective step configuration: %s", bundle.to_form())

    container = create_container(config)

    try:
        if parsed.list:
            print_options(container, parsed.list, config, bundle, sys.stdout)
            return EXIT_SUCCESS

        step = create_step(container, bundle)
        step.perform(
            BuildRun(project=config.project, number=parsed.build_number),
            parsed.workspace,
            Launcher(),
            TaskListener(sys.stdout),
        )
    except StoreLoadError as e:
        logger.error("Failed to load store: %s", e)
        return EXIT_CONFIG_ERROR
    except StepAbortedError as e:
        logger.error(
            "Step aborted: %s",
            e,
            extra={"project": config.project, "error_type": type(e.cause).__name__},
        )
        return EXIT_STEP_FAILED

    return EXIT_SUCCESS


__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_STEP_FAILED",
    "EXIT_SUCCESS",
    "apply_cli_overrides",
    "main",
    "print_options",
]
