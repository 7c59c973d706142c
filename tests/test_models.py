"""Tests for data models."""

import json
from datetime import UTC, datetime

from workflow_step_telemetry.models import (
    ActionInputs,
    ExecutionContext,
    PullRequest,
    WorkflowJob,
)


class TestExecutionContext:
    """Test ExecutionContext construction."""

    def test_from_env(self, tmp_path):
        """Test context fields and pull request are read from the runner."""
        event = tmp_path / "event.json"
        event.write_text(
            json.dumps({"pull_request": {"number": 7, "head": {"sha": "f" * 40}}})
        )
        env = {
            "GITHUB_REPOSITORY": "octo/repo",
            "GITHUB_WORKFLOW": "CI",
            "GITHUB_RUN_ID": "99",
            "GITHUB_RUN_NUMBER": "3",
            "GITHUB_RUN_ATTEMPT": "2",
            "GITHUB_SHA": "e" * 40,
            "RUNNER_NAME": "runner-1",
            "GITHUB_EVENT_PATH": str(event),
        }

        ctx = ExecutionContext.from_env(env)

        assert ctx.run_attempt == "2"
        assert ctx.runner_name == "runner-1"
        assert ctx.pull_request == PullRequest(number=7, head_sha="f" * 40)
        assert ctx.commit == "f" * 40
        assert ctx.workflow_status == "success"
        assert ctx.server_url == "https://github.com"

    def test_commit_without_pull_request(self):
        """Test commit falls back to the run SHA outside pull requests."""
        ctx = ExecutionContext.from_env({"GITHUB_SHA": "e" * 40})

        assert ctx.pull_request is None
        assert ctx.commit == "e" * 40

    def test_push_event_has_no_pull_request(self, tmp_path):
        """Test an event payload without pull_request yields None."""
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))

        ctx = ExecutionContext.from_env({"GITHUB_EVENT_PATH": str(event)})

        assert ctx.pull_request is None


class TestActionInputs:
    """Test ActionInputs parsing."""

    def test_from_env(self, monkeypatch):
        """Test inputs and defaults."""
        monkeypatch.setenv("INPUT_APIKEY", "k")
        monkeypatch.setenv("INPUT_DATASET", "d")
        monkeypatch.setenv("INPUT_OTEL-TRACEID", "true")
        monkeypatch.setenv("INPUT_COMMENT_ON_PR", "true")
        monkeypatch.setenv("GITHUB_TOKEN", "ghs_x")

        inputs = ActionInputs.from_env()

        assert inputs.apikey == "k"
        assert inputs.dataset == "d"
        assert inputs.otel_trace_id is True
        assert inputs.comment_on_pr is True
        assert inputs.job_summary is False
        assert inputs.hide_previous_comments is True
        assert inputs.github_token == "ghs_x"

    def test_hide_previous_comments_disabled(self, monkeypatch):
        """Test supersession can be switched off."""
        monkeypatch.setenv("INPUT_HIDE_PREVIOUS_COMMENTS", "false")

        assert ActionInputs.from_env().hide_previous_comments is False


class TestWorkflowJob:
    """Test WorkflowJob parsing."""

    def test_from_api(self):
        """Test API payloads are parsed with steps in ordinal order."""
        job = WorkflowJob.from_api(
            {
                "id": 1,
                "name": "build",
                "status": "in_progress",
                "conclusion": None,
                "runner_name": "r",
                "started_at": "2025-01-01T00:00:00Z",
                "completed_at": None,
                "steps": [
                    {
                        "name": "Second",
                        "number": 2,
                        "status": "in_progress",
                        "started_at": "2025-01-01T00:01:00Z",
                        "completed_at": None,
                    },
                    {
                        "name": "First",
                        "number": 1,
                        "status": "completed",
                        "conclusion": "success",
                        "started_at": "2025-01-01T00:00:00Z",
                        "completed_at": "2025-01-01T00:01:00Z",
                    },
                ],
            }
        )

        assert job.started_at == datetime(2025, 1, 1, tzinfo=UTC)
        assert job.completed_at is None
        assert [step.name for step in job.steps] == ["First", "Second"]
        assert job.steps[0].completed_at == datetime(2025, 1, 1, 0, 1, tzinfo=UTC)
        assert job.steps[1].conclusion is None
