"""Data models for workflow step telemetry."""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from . import runner


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp from the GitHub API."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class PullRequest:
    """Pull request that triggered the workflow run.

    Attributes
    ----------
    number : int
        Pull request number.
    head_sha : str
        SHA of the pull request head commit.

    """

    number: int
    head_sha: str = ""


@dataclass(frozen=True)
class ExecutionContext:
    """Identifiers of the running workflow job, read once from the runner.

    Every component receives this value explicitly instead of reading
    ``os.environ`` on its own.
    """

    repository: str = ""
    repository_owner: str = ""
    workflow: str = ""
    run_id: str = ""
    run_number: str = ""
    run_attempt: str = ""
    actor: str = ""
    event_name: str = ""
    sha: str = ""
    ref: str = ""
    head_ref: str = ""
    base_ref: str = ""
    job: str = ""
    runner_os: str = ""
    runner_name: str = ""
    server_url: str = "https://github.com"
    workflow_status: str = "success"
    pull_request: PullRequest | None = None

    @property
    def commit(self) -> str:
        """Commit that triggered the run: PR head if on a PR, else the run SHA."""
        if self.pull_request and self.pull_request.head_sha:
            return self.pull_request.head_sha
        return self.sha

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExecutionContext":
        """Build the context from GitHub Actions environment variables.

        Parameters
        ----------
        environ : Mapping[str, str] or None, optional
            Environment to read. Defaults to ``os.environ``.

        Returns
        -------
        ExecutionContext
            Context for the current job.

        """
        env = os.environ if environ is None else environ
        return cls(
            repository=env.get("GITHUB_REPOSITORY", ""),
            repository_owner=env.get("GITHUB_REPOSITORY_OWNER", ""),
            workflow=env.get("GITHUB_WORKFLOW", ""),
            run_id=env.get("GITHUB_RUN_ID", ""),
            run_number=env.get("GITHUB_RUN_NUMBER", ""),
            run_attempt=env.get("GITHUB_RUN_ATTEMPT", ""),
            actor=env.get("GITHUB_ACTOR", ""),
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            sha=env.get("GITHUB_SHA", ""),
            ref=env.get("GITHUB_REF", ""),
            head_ref=env.get("GITHUB_HEAD_REF", ""),
            base_ref=env.get("GITHUB_BASE_REF", ""),
            job=env.get("GITHUB_JOB", ""),
            runner_os=env.get("RUNNER_OS", ""),
            runner_name=env.get("RUNNER_NAME", ""),
            server_url=env.get("GITHUB_SERVER_URL") or "https://github.com",
            workflow_status=env.get("GITHUB_ACTION_WORKFLOW_STATUS") or "success",
            pull_request=_load_pull_request(env.get("GITHUB_EVENT_PATH", "")),
        )


def _load_pull_request(event_path: str) -> PullRequest | None:
    """Read the pull request from the webhook event payload, if any."""
    if not event_path or not os.path.exists(event_path):
        return None
    with open(event_path, "r") as f:
        payload = json.load(f)
    pull_request = payload.get("pull_request")
    if not pull_request or not pull_request.get("number"):
        return None
    return PullRequest(
        number=int(pull_request["number"]),
        head_sha=(pull_request.get("head") or {}).get("sha", ""),
    )


@dataclass(frozen=True)
class ActionInputs:
    """Action inputs given in the workflow ``with:`` block.

    Attributes
    ----------
    apikey : str
        Honeycomb API key (secret).
    apihost : str
        Honeycomb API host, empty for the buildevents default.
    dataset : str
        Honeycomb dataset.
    matrix_key : str
        Optional label folded into span names for matrix jobs.
    otel_trace_id : bool
        Hash the trace ID into a 32-character hex digest.
    job_summary : bool
        Append the trace summary to the job summary.
    comment_on_pr : bool
        Post the trace summary as a pull request comment.
    hide_previous_comments : bool
        Minimize summaries posted for older commits on the same PR.
    github_token : str
        Token used for GitHub API calls.

    """

    apikey: str = ""
    apihost: str = ""
    dataset: str = ""
    matrix_key: str = ""
    otel_trace_id: bool = False
    job_summary: bool = False
    comment_on_pr: bool = False
    hide_previous_comments: bool = True
    github_token: str = ""

    @classmethod
    def from_env(cls) -> "ActionInputs":
        """Read inputs from ``INPUT_*`` environment variables.

        Required inputs are checked by the init phase, which is the only
        phase that needs them.

        Returns
        -------
        ActionInputs
            Parsed inputs.

        """
        hide_previous = runner.get_input("hide_previous_comments")
        return cls(
            apikey=runner.get_input("apikey"),
            apihost=runner.get_input("apihost"),
            dataset=runner.get_input("dataset"),
            matrix_key=runner.get_input("matrix-key"),
            otel_trace_id=runner.get_boolean_input("otel-traceid"),
            job_summary=runner.get_boolean_input("job_summary"),
            comment_on_pr=runner.get_boolean_input("comment_on_pr"),
            hide_previous_comments=(
                not hide_previous or hide_previous.lower() == "true"
            ),
            github_token=(
                runner.get_input("github_token")
                or os.environ.get("GITHUB_TOKEN", "")
                or os.environ.get("GH_TOKEN", "")
            ),
        )


@dataclass(frozen=True)
class WorkflowStep:
    """One step of a workflow job as reported by the GitHub API."""

    name: str
    number: int
    status: str = ""
    conclusion: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "WorkflowStep":
        """Build a step from a GitHub API ``steps[]`` entry."""
        return cls(
            name=data.get("name") or "",
            number=int(data.get("number") or 0),
            status=data.get("status") or "",
            conclusion=data.get("conclusion"),
            started_at=_parse_timestamp(data.get("started_at")),
            completed_at=_parse_timestamp(data.get("completed_at")),
        )


@dataclass(frozen=True)
class WorkflowJob:
    """Snapshot of a workflow job as reported by the GitHub API.

    Attributes
    ----------
    id : int
        Job ID.
    name : str
        Job display name.
    status : str
        One of ``queued``, ``in_progress``, ``completed``.
    conclusion : str or None
        Job conclusion, None while the job is running.
    runner_name : str or None
        Name of the runner executing the job.
    started_at : datetime or None
        Job start time.
    completed_at : datetime or None
        Job completion time.
    steps : list[WorkflowStep]
        Steps in ordinal order.

    """

    id: int
    name: str = ""
    status: str = ""
    conclusion: str | None = None
    runner_name: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    steps: list[WorkflowStep] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "WorkflowJob":
        """Build a job from a GitHub API ``jobs[]`` entry."""
        steps = [WorkflowStep.from_api(step) for step in data.get("steps") or []]
        return cls(
            id=int(data.get("id") or 0),
            name=data.get("name") or "",
            status=data.get("status") or "",
            conclusion=data.get("conclusion"),
            runner_name=data.get("runner_name"),
            started_at=_parse_timestamp(data.get("started_at")),
            completed_at=_parse_timestamp(data.get("completed_at")),
            steps=sorted(steps, key=lambda step: step.number),
        )


@dataclass(frozen=True)
class IssueComment:
    """Comment on an issue or pull request."""

    id: int
    node_id: str
    body: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "IssueComment":
        """Build a comment from a GitHub API response."""
        return cls(
            id=int(data["id"]),
            node_id=data.get("node_id") or "",
            body=data.get("body") or "",
        )
