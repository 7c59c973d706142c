"""CLI command wrapping a command in a span."""

import shlex
import sys

import click

from ..utils import telemetry_from_env


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def cmd(name: str, command: tuple[str, ...]) -> None:
    r"""Run COMMAND and report it as a span named NAME.

    Uses the TRACE_ID exported by the init phase.

    Examples:
      \b
      workflow-step-telemetry cmd "unit tests" -- pytest -x tests/

    """
    telemetry = telemetry_from_env()
    if not telemetry.run_command(name, shlex.join(command)):
        sys.exit(1)
