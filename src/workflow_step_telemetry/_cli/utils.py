"""Shared helpers for CLI commands."""

from importlib.metadata import PackageNotFoundError, version

from ..models import ActionInputs, ExecutionContext
from ..phases import WorkflowTelemetry


def get_version() -> str:
    """Get the installed version of the package.

    Returns
    -------
    str
        Version string from package metadata, or "unknown".

    """
    try:
        return version("workflow-step-telemetry")
    except PackageNotFoundError:
        return "unknown"


def telemetry_from_env() -> WorkflowTelemetry:
    """Build the telemetry runner from the GitHub Actions environment."""
    return WorkflowTelemetry(
        context=ExecutionContext.from_env(),
        inputs=ActionInputs.from_env(),
    )
