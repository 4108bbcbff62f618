"""Continuous Test Step - parameter validation and dispatch for CI test runs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("continuous-test-step")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source without pip install)
    __version__ = "0.0.0.dev0"

# Re-export core public API
from ctstep.app import main
from ctstep.parameters import ParameterBundle
from ctstep.step import ContinuousTestStep, StepServices

# NOTE: Update this list when adding new exports to this module.
__all__ = [
    "__version__",
    "ContinuousTestStep",
    "ParameterBundle",
    "StepServices",
    "main",
]
