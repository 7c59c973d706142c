"""Workflow Step Telemetry - trace GitHub Actions workflow steps in Honeycomb."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("workflow-step-telemetry")
except PackageNotFoundError:
    # Package not installed, use fallback
    __version__ = "0.1.0.dev"

from .buildevents import FieldStore, SpanEmitter
from .errors import ErrorKind, TelemetryError
from .github import CommentPublisher, GitHubClient, JobResolver
from .models import (
    ActionInputs,
    ExecutionContext,
    PullRequest,
    WorkflowJob,
    WorkflowStep,
)
from .phases import WorkflowTelemetry
from .tracing import StepTracer, build_trace_id

__all__ = [
    "ActionInputs",
    "CommentPublisher",
    "ErrorKind",
    "ExecutionContext",
    "FieldStore",
    "GitHubClient",
    "JobResolver",
    "PullRequest",
    "SpanEmitter",
    "StepTracer",
    "TelemetryError",
    "WorkflowJob",
    "WorkflowStep",
    "WorkflowTelemetry",
    "build_trace_id",
    "__version__",
]
