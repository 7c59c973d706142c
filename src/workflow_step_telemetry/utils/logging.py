"""Console logging helpers built on Rich.

Log output goes to stderr so that stdout stays free for runner workflow
commands and for output captured by the calling workflow.
"""

import os

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Return the shared stderr console.

    Returns
    -------
    Console
        Rich console writing to stderr.

    """
    global _console  # noqa: PLW0603
    if _console is None:
        _console = Console(stderr=True, highlight=False)
    return _console


def is_debug_enabled() -> bool:
    """Check whether runner debug logging is switched on.

    Returns
    -------
    bool
        True when ``RUNNER_DEBUG`` is ``"1"``.

    """
    return os.environ.get("RUNNER_DEBUG") == "1"


def log_info(message: str) -> None:
    """Log an informational message."""
    get_console().print(f"[blue]ℹ[/blue] {message}")


def log_success(message: str) -> None:
    """Log a success message."""
    get_console().print(f"[green]✓[/green] {message}")


def log_error(message: str) -> None:
    """Log an error message."""
    get_console().print(f"[red]✗[/red] {message}")


def log_debug(message: str) -> None:
    """Log a debug message when runner debug logging is enabled."""
    if is_debug_enabled():
        get_console().print(f"[dim]» {message}[/dim]")
