"""Trace identity and step span tracing."""

from .identity import (
    build_trace_id,
    get_timestamp,
    random_span_id,
    replace_spaces,
    step_span_id,
)
from .step_tracer import StepTracer

__all__ = [
    "StepTracer",
    "build_trace_id",
    "get_timestamp",
    "random_span_id",
    "replace_spaces",
    "step_span_id",
]
