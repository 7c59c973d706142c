"""Find the workflow job record of the running job."""

import time
from collections.abc import Callable

from ..models import ExecutionContext, WorkflowJob
from ..utils.logging import log_debug, log_error
from ..utils.retry import retry_until
from .client import GitHubClient

PAGE_SIZE = 100
MAX_ATTEMPTS = 10
RETRY_DELAY_SECONDS = 1.0


class JobResolver:
    """Poll the jobs of the current run until the running job shows up.

    GitHub may take a moment to report a job as ``in_progress``, so the
    page scan is retried with a fixed delay.

    Parameters
    ----------
    client : GitHubClient
        API client.
    context : ExecutionContext
        Current job context, supplies run ID and runner name.
    max_attempts : int, optional
        Number of page scans (default=10).
    delay_seconds : float, optional
        Delay between scans (default=1.0).
    sleep : Callable[[float], None], optional
        Sleep function, replaceable in tests.

    """

    def __init__(
        self,
        client: GitHubClient,
        context: ExecutionContext,
        max_attempts: int = MAX_ATTEMPTS,
        delay_seconds: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.context = context
        self.max_attempts = max_attempts
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def _is_current(self, job: WorkflowJob) -> bool:
        return (
            job.status == "in_progress"
            and job.runner_name == self.context.runner_name
        )

    def find_current_job(self) -> WorkflowJob | None:
        """Scan every page of jobs once for the running job.

        Returns
        -------
        WorkflowJob or None
            First in-progress job on this runner, None if no page has one.

        Raises
        ------
        GitHubAPIError
            If listing a page fails.

        """
        page = 0
        while True:
            jobs = self.client.list_jobs_for_run(
                self.context.run_id, page=page, per_page=PAGE_SIZE
            )
            if not jobs:
                break
            for job in jobs:
                if self._is_current(job):
                    return job
            # A short page is the last one
            if len(jobs) < PAGE_SIZE:
                break
            page += 1
        return None

    def resolve_current_job(self) -> WorkflowJob | None:
        """Find the running job, retrying while GitHub catches up.

        Returns
        -------
        WorkflowJob or None
            The current job, or None if it could not be found. None means
            telemetry cannot be reported for this run.

        """
        try:
            return retry_until(
                self.find_current_job,
                lambda job: job is not None and bool(job.id),
                max_attempts=self.max_attempts,
                delay_seconds=self.delay_seconds,
                sleep=self.sleep,
            )
        except Exception as e:
            log_debug(f"Job listing failed: {e}")
            log_error(
                "Unable to get current workflow job info. "
                'Please make sure that your workflow has "actions:read" permission!'
            )
            return None
