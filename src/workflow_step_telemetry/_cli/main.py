"""Main CLI entry point for workflow-step-telemetry."""

import click

from .commands.cmd import cmd
from .commands.finish import finish
from .commands.init import init
from .utils import get_version


def version_callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Show version and exit.

    Args:
        ctx: Click context
        param: Click parameter (unused)
        value: Whether --version flag was provided

    """
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"workflow-step-telemetry {get_version()}")
    ctx.exit()


@click.group(
    help="Trace GitHub Actions workflow steps in Honeycomb with buildevents",
)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
def cli() -> None:
    """Workflow step telemetry.

    Run 'init' as the action main step and 'finish' as its post step.
    """


cli.add_command(init)
cli.add_command(finish)
cli.add_command(cmd)


if __name__ == "__main__":
    cli()
