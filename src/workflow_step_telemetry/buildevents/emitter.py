"""Span emission through the buildevents executable."""

import shlex
import subprocess

from ..errors import SpanEmissionError
from ..utils.logging import log_debug


class SpanEmitter:
    """Send build, step and command spans with buildevents.

    Configuration (API key, host, dataset, CI provider) reaches buildevents
    through the ``BUILDEVENT_*`` environment set by the installer.

    Parameters
    ----------
    executable : str, optional
        buildevents executable name or path (default="buildevents").

    """

    def __init__(self, executable: str = "buildevents"):
        self.executable = executable

    def _run(self, subcommand: str, *args: str, capture: bool = False) -> str:
        """Run a buildevents subcommand.

        Parameters
        ----------
        subcommand : str
            One of ``build``, ``step``, ``cmd``.
        *args : str
            Positional arguments for the subcommand.
        capture : bool, optional
            Capture stdout instead of streaming it to the job log.

        Returns
        -------
        str
            Stripped stdout when ``capture`` is True, else empty string.

        Raises
        ------
        SpanEmissionError
            If buildevents exits with a non-zero status.

        """
        cmd = [self.executable, subcommand, *args]
        log_debug(f"Running: {shlex.join(cmd)}")
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE if capture else None,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            raise SpanEmissionError(subcommand, result.returncode)
        return (result.stdout or "").strip() if capture else ""

    def build(self, trace_id: str, start_time: str, result: str) -> str | None:
        """Close the root build span.

        Parameters
        ----------
        trace_id : str
            Trace ID of the workflow run.
        start_time : str
            Build start, seconds since epoch.
        result : str
            ``success`` or ``failure``.

        Returns
        -------
        str or None
            Trace URL printed by buildevents, None if it printed nothing.

        """
        return self._run("build", trace_id, start_time, result, capture=True) or None

    def step(self, trace_id: str, span_id: str, start_time: str, name: str) -> None:
        """Send a step span that started at ``start_time`` and ends now."""
        self._run("step", trace_id, span_id, start_time, name)

    def cmd(self, trace_id: str, span_id: str, name: str, command: str) -> None:
        """Run ``command`` under buildevents so it is timed as a span."""
        self._run("cmd", trace_id, span_id, name, "--", *shlex.split(command))
