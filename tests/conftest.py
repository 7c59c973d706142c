"""Shared fixtures for workflow-step-telemetry tests."""

import os
from datetime import UTC, datetime

import pytest

from workflow_step_telemetry.models import (
    ExecutionContext,
    PullRequest,
    WorkflowJob,
    WorkflowStep,
)

HEAD_SHA = "b" * 40
OLD_SHA = "a" * 40


# Variables the code under test writes straight into os.environ
EXPORTED_VARIABLES = (
    "TRACE_ID",
    "BUILDEVENT_FILE",
    "BUILDEVENT_APIKEY",
    "BUILDEVENT_APIHOST",
    "BUILDEVENT_DATASET",
    "BUILDEVENT_CIPROVIDER",
)


def isolate_runner_env(monkeypatch):
    """Clear runner variables and undo anything the test exports."""
    for key in list(os.environ):
        if (
            key.startswith(("INPUT_", "STATE_", "GITHUB_", "BUILDEVENT_"))
            or key in ("TRACE_ID", "RUNNER_DEBUG", "RUNNER_NAME", "GH_TOKEN")
        ):
            monkeypatch.delenv(key, raising=False)
    # setenv records the prior state, so teardown also removes values
    # exported during the test rather than only restoring deleted ones
    for key in EXPORTED_VARIABLES:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
    """Keep tests away from the runner files of a real GitHub Actions job."""
    isolate_runner_env(monkeypatch)


@pytest.fixture
def context():
    """Execution context of a pull request run."""
    return ExecutionContext(
        repository="VectorInstitute/test-repo",
        repository_owner="VectorInstitute",
        workflow="CI Build",
        run_id="1234567890",
        run_number="42",
        run_attempt="1",
        actor="octocat",
        event_name="pull_request",
        sha="c" * 40,
        ref="refs/pull/7/merge",
        head_ref="feature",
        base_ref="main",
        job="test",
        runner_os="Linux",
        runner_name="GitHub Actions 2",
        pull_request=PullRequest(number=7, head_sha=HEAD_SHA),
    )


@pytest.fixture
def job():
    """Running job with two finished steps."""
    return WorkflowJob(
        id=555,
        name="test",
        status="in_progress",
        conclusion=None,
        runner_name="GitHub Actions 2",
        started_at=datetime(2025, 1, 1, 0, 0, 0, tzinfo=UTC),
        completed_at=datetime(2025, 1, 1, 0, 5, 0, tzinfo=UTC),
        steps=[
            WorkflowStep(
                name="Set up job",
                number=1,
                status="completed",
                conclusion="success",
                started_at=datetime(2025, 1, 1, 0, 0, 0, tzinfo=UTC),
                completed_at=datetime(2025, 1, 1, 0, 0, 5, tzinfo=UTC),
            ),
            WorkflowStep(
                name="Run tests",
                number=2,
                status="completed",
                conclusion="success",
                started_at=datetime(2025, 1, 1, 0, 0, 5, tzinfo=UTC),
                completed_at=datetime(2025, 1, 1, 0, 4, 0, tzinfo=UTC),
            ),
        ],
    )
