"""CLI command for the init phase."""

import sys

import click

from ..utils import telemetry_from_env


@click.command()
def init() -> None:
    """Install buildevents and start the trace (action main step).

    Reads action inputs from INPUT_* variables and run context from the
    GitHub Actions environment.

    """
    telemetry = telemetry_from_env()
    if not telemetry.init():
        sys.exit(1)
