"""Trace and span identifiers."""

import hashlib
import random
import re
import time

from ..models import ExecutionContext

_WHITESPACE = re.compile(r"\s+")


def replace_spaces(value: str) -> str:
    """Replace every run of whitespace with a single underscore."""
    return _WHITESPACE.sub("_", value)


def get_timestamp() -> int:
    """Current time in whole seconds since epoch."""
    return int(time.time())


def random_span_id() -> str:
    """Random 32-bit span ID for spans that are emitted exactly once."""
    return str(random.randrange(2**32))


def build_trace_id(context: ExecutionContext, otel_trace_id: bool = False) -> str:
    """Derive the trace ID of a workflow run.

    Both phases of a job compute the same value, since it depends only on
    repository, workflow, run number and run attempt.

    Parameters
    ----------
    context : ExecutionContext
        Current job context.
    otel_trace_id : bool, optional
        Return the MD5 hex digest (32 characters) of the raw ID, which is a
        valid OpenTelemetry trace ID (default=False).

    Returns
    -------
    str
        Trace ID.

    """
    components = [
        context.repository,
        context.workflow,
        context.run_number,
        context.run_attempt,
    ]
    raw_trace_id = replace_spaces("-".join(c for c in components if c))
    if otel_trace_id:
        return hashlib.md5(raw_trace_id.encode("utf-8")).hexdigest()
    return raw_trace_id


def step_span_id(name: str, number: int) -> str:
    """Span ID of a workflow step, stable across retries of the finish phase.

    Parameters
    ----------
    name : str
        Step name.
    number : int
        Step ordinal.

    Returns
    -------
    str
        First 8 hex characters of ``md5("{name}-{number}")``.

    """
    return hashlib.md5(f"{name}-{number}".encode("utf-8")).hexdigest()[:8]
