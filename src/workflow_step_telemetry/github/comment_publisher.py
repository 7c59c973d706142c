"""Publish the trace summary and hide summaries of older commits."""

import re

from .. import runner
from ..models import ActionInputs, ExecutionContext, IssueComment, WorkflowJob
from ..utils.logging import log_debug, log_error, log_info
from .client import GitHubClient

# Hidden tag identifying summaries rendered by this action
SUMMARY_MARKER = "<!-- workflow-step-telemetry:trace-summary -->"

# Substrings of summaries rendered before the marker was introduced
LEGACY_SUMMARY_MARKERS = (
    "### 🔍 Workflow Trace",
    "📊 Open Trace in Honeycomb",
    "## Workflow Step Trace -",
)

COMMIT_PATTERN = re.compile(r"commit/([a-f0-9]{40})", re.IGNORECASE)


def is_trace_summary(body: str) -> bool:
    """Check whether a comment body is a trace summary posted by this action."""
    return SUMMARY_MARKER in body or all(
        marker in body for marker in LEGACY_SUMMARY_MARKERS
    )


def extract_commit(body: str) -> str | None:
    """Return the commit SHA linked from a trace summary, if any."""
    match = COMMIT_PATTERN.search(body)
    return match.group(1) if match else None


def render_trace_content(job: WorkflowJob, trace_url: str) -> str:
    """Render the trace summary block for a job.

    Parameters
    ----------
    job : WorkflowJob
        Current job.
    trace_url : str
        Honeycomb trace URL returned by buildevents.

    Returns
    -------
    str
        Markdown block with trace link, step count, duration and status.

    """
    step_count = len(job.steps)
    duration = 0
    if job.started_at and job.completed_at:
        duration = round((job.completed_at - job.started_at).total_seconds())

    content = [
        "",
        "### 🔍 Workflow Trace",
        "",
        "View the complete execution trace for this workflow in Honeycomb:",
        "",
        f"**[📊 Open Trace in Honeycomb]({trace_url})**",
        "",
        "**Job Summary:**",
        f"- Steps: {step_count}",
        f"- Duration: {duration}s",
        f"- Status: {job.conclusion or 'completed'}",
        "",
        "This trace includes detailed timing and context for all "
        f"{step_count} workflow steps.",
    ]
    return "\n".join(content)


class CommentPublisher:
    """Report the trace summary to the job summary and the pull request.

    Parameters
    ----------
    client : GitHubClient
        API client.
    context : ExecutionContext
        Current job context.
    inputs : ActionInputs
        Action inputs selecting the report targets.

    """

    def __init__(
        self, client: GitHubClient, context: ExecutionContext, inputs: ActionInputs
    ):
        self.client = client
        self.context = context
        self.inputs = inputs

    def render(self, job: WorkflowJob, trace_url: str) -> str:
        """Render the full report: title, commit and job links, trace summary."""
        base_url = f"{self.context.server_url}/{self.context.repository}"
        job_url = f"{base_url}/runs/{job.id}?check_suite_focus=true"
        commit = self.context.commit
        commit_url = f"{base_url}/commit/{commit}"

        log_debug(f"Workflow - Job: {self.context.workflow} - {self.context.job}")
        log_debug(f"Job url: {job_url}")
        log_debug(f"Commit url: {commit_url}")

        title = f"## Workflow Step Trace - {self.context.workflow} / {job.name}"
        info = (
            f"Workflow step trace for commit [{commit}]({commit_url})\n"
            f"You can access workflow job details [here]({job_url})"
        )
        return "\n".join(
            [SUMMARY_MARKER, title, info, render_trace_content(job, trace_url)]
        )

    def publish(self, job: WorkflowJob, trace_url: str) -> bool:
        """Write the report to the enabled targets.

        Parameters
        ----------
        job : WorkflowJob
            Current job.
        trace_url : str
            Honeycomb trace URL.

        Returns
        -------
        bool
            False if the pull request comment could not be created.
            Job summary and supersession failures are only logged.

        """
        log_info("Reporting all content ...")
        content = self.render(job, trace_url)

        if self.inputs.job_summary:
            try:
                runner.append_summary(content)
            except Exception as e:
                log_error(f"Failed to write job summary: {e}")

        pull_request = self.context.pull_request
        if self.inputs.comment_on_pr and pull_request:
            log_debug(f"Found Pull Request: #{pull_request.number}")
            try:
                new_comment = self.client.create_issue_comment(
                    pull_request.number, content
                )
            except Exception as e:
                log_error(f"Failed to comment on pull request: {e}")
                return False

            if self.inputs.hide_previous_comments:
                self.hide_previous_comments(exclude_comment_id=new_comment.id)
        else:
            log_debug("Couldn't find Pull Request")

        log_info("Reporting all content completed")
        return True

    def find_outdated_comments(
        self, comments: list[IssueComment], exclude_comment_id: int | None = None
    ) -> list[IssueComment]:
        """Select trace summaries that link to a commit other than the current one."""
        current_commit = self.context.commit
        outdated = []
        for comment in comments:
            if comment.id == exclude_comment_id or not is_trace_summary(comment.body):
                continue
            commit = extract_commit(comment.body)
            if commit and commit.lower() != current_commit.lower():
                outdated.append(comment)
        return outdated

    def hide_previous_comments(self, exclude_comment_id: int | None = None) -> int:
        """Minimize trace summaries posted for older commits on this PR.

        Parameters
        ----------
        exclude_comment_id : int or None, optional
            Comment to leave alone, normally the one just created.

        Returns
        -------
        int
            Number of comments minimized.

        """
        pull_request = self.context.pull_request
        if not pull_request:
            return 0

        try:
            comments = self.client.list_issue_comments(pull_request.number)
        except Exception as e:
            log_debug(f"Failed to hide previous comments: {e}")
            return 0

        hidden = 0
        for comment in self.find_outdated_comments(comments, exclude_comment_id):
            try:
                self.client.minimize_comment(comment.node_id)
            except Exception as e:
                log_debug(f"Failed to hide comment {comment.id}: {e}")
                continue
            log_debug(f"Hidden comment from older commit: {comment.id}")
            hidden += 1
        return hidden
