"""Tests for current job resolution."""

from unittest.mock import MagicMock

import pytest

from workflow_step_telemetry.errors import GitHubAPIError
from workflow_step_telemetry.github import JobResolver
from workflow_step_telemetry.models import WorkflowJob


def _jobs(start, count, runner_name="other-runner", status="in_progress"):
    return [
        WorkflowJob(
            id=start + i,
            name=f"job-{start + i}",
            status=status,
            runner_name=runner_name,
        )
        for i in range(count)
    ]


@pytest.fixture
def client():
    """Mock GitHub client."""
    return MagicMock()


@pytest.fixture
def sleep():
    """Mock sleep recording simulated delays."""
    return MagicMock()


class TestFindCurrentJob:
    """Test a single scan over job pages."""

    def test_match_on_third_page_stops_paging(self, client, context, sleep):
        """Test 100/100/50 pages with the match on the last page."""
        match = WorkflowJob(
            id=999, name="test", status="in_progress", runner_name=context.runner_name
        )
        pages = {
            0: _jobs(0, 100),
            1: _jobs(100, 100),
            2: _jobs(200, 25) + [match] + _jobs(226, 24),
        }
        client.list_jobs_for_run.side_effect = lambda run_id, page, per_page: pages[page]

        job = JobResolver(client, context, sleep=sleep).resolve_current_job()

        assert job is match
        requested = [c.kwargs["page"] for c in client.list_jobs_for_run.call_args_list]
        assert requested == [0, 1, 2]
        sleep.assert_not_called()

    def test_short_page_ends_scan(self, client, context):
        """Test a page shorter than 100 is treated as the last one."""
        client.list_jobs_for_run.return_value = _jobs(0, 50)

        assert JobResolver(client, context).find_current_job() is None
        assert client.list_jobs_for_run.call_count == 1

    def test_empty_page_ends_scan(self, client, context):
        """Test an empty page ends the scan."""
        client.list_jobs_for_run.side_effect = [_jobs(0, 100), []]

        assert JobResolver(client, context).find_current_job() is None
        assert client.list_jobs_for_run.call_count == 2

    def test_requires_in_progress_status(self, client, context):
        """Test jobs on this runner that are not in progress are ignored."""
        client.list_jobs_for_run.return_value = _jobs(
            0, 3, runner_name=context.runner_name, status="completed"
        )

        assert JobResolver(client, context).find_current_job() is None

    def test_lists_current_run(self, client, context):
        """Test the run ID of the context is requested."""
        client.list_jobs_for_run.return_value = []

        JobResolver(client, context).find_current_job()

        client.list_jobs_for_run.assert_called_once_with(
            context.run_id, page=0, per_page=100
        )


class TestResolveCurrentJob:
    """Test retries around the page scan."""

    def test_match_on_fourth_attempt(self, client, context, sleep):
        """Test three empty scans then a match cost three one-second delays."""
        match = WorkflowJob(
            id=7, name="test", status="in_progress", runner_name=context.runner_name
        )
        client.list_jobs_for_run.side_effect = [[], [], [], [match]]

        job = JobResolver(client, context, sleep=sleep).resolve_current_job()

        assert job is match
        assert client.list_jobs_for_run.call_count == 4
        assert sum(c.args[0] for c in sleep.call_args_list) == pytest.approx(3.0)

    def test_exhausted_after_ten_attempts(self, client, context, sleep):
        """Test resolution gives up after ten scans."""
        client.list_jobs_for_run.return_value = []

        assert JobResolver(client, context, sleep=sleep).resolve_current_job() is None
        assert client.list_jobs_for_run.call_count == 10

    def test_job_without_id_is_retried(self, client, context, sleep):
        """Test a matching record without an ID does not count as found."""
        incomplete = WorkflowJob(
            id=0, name="test", status="in_progress", runner_name=context.runner_name
        )
        match = WorkflowJob(
            id=8, name="test", status="in_progress", runner_name=context.runner_name
        )
        client.list_jobs_for_run.side_effect = [[incomplete], [match]]

        assert JobResolver(client, context, sleep=sleep).resolve_current_job() is match

    def test_fetch_error_returns_none_without_retry(self, client, context, sleep):
        """Test an API error stops polling and yields None."""
        client.list_jobs_for_run.side_effect = GitHubAPIError("HTTP 403")

        assert JobResolver(client, context, sleep=sleep).resolve_current_job() is None
        assert client.list_jobs_for_run.call_count == 1
        sleep.assert_not_called()
