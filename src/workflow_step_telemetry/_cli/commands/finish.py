"""CLI command for the finish phase."""

import sys

import click

from ..utils import telemetry_from_env


@click.command()
def finish() -> None:
    """Send step spans, close the trace and publish the summary (action post step).

    Exits with status 0 when the current job cannot be found, since
    telemetry is best-effort in that case.

    """
    telemetry = telemetry_from_env()
    if not telemetry.finish():
        sys.exit(1)
