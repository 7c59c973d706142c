"""GitHub API access through the gh CLI."""

import json
import os
import subprocess
from typing import Any

from ..errors import ErrorKind, GitHubAPIError
from ..models import ExecutionContext, IssueComment, WorkflowJob

MINIMIZE_COMMENT_MUTATION = """
mutation($commentId: ID!) {
  minimizeComment(input: {subjectId: $commentId, classifier: OUTDATED}) {
    minimizedComment {
      isMinimized
    }
  }
}
"""


class GitHubClient:
    """Call the GitHub REST and GraphQL APIs with ``gh api``.

    Parameters
    ----------
    context : ExecutionContext
        Current job context, supplies the repository.
    gh_token : str
        Token with ``actions:read`` and ``pull-requests:write``.

    Attributes
    ----------
    context : ExecutionContext
        Current job context.
    gh_token : str
        GitHub token.

    """

    def __init__(self, context: ExecutionContext, gh_token: str):
        self.context = context
        self.gh_token = gh_token

    def _run_gh_api(
        self, args: list[str], kind: ErrorKind = ErrorKind.COMMENT_API
    ) -> Any:
        """Execute ``gh api`` and decode its JSON output.

        Parameters
        ----------
        args : list[str]
            Arguments following ``gh api``.
        kind : ErrorKind, optional
            Kind attached to the error on failure.

        Returns
        -------
        Any
            Decoded JSON response, None for an empty body.

        Raises
        ------
        GitHubAPIError
            If the command fails or the output is not JSON.

        """
        env = os.environ.copy()
        if self.gh_token:
            env["GH_TOKEN"] = self.gh_token

        try:
            result = subprocess.run(
                ["gh", "api", *args],
                capture_output=True,
                text=True,
                check=True,
                env=env,
            )
        except subprocess.CalledProcessError as e:
            raise GitHubAPIError(
                f"gh api {args[0]} failed: {(e.stderr or '').strip() or e}", kind
            ) from e

        output = result.stdout.strip()
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise GitHubAPIError(
                f"Invalid JSON from gh api {args[0]}: {e}", kind
            ) from e

    def list_jobs_for_run(
        self, run_id: str, page: int, per_page: int = 100
    ) -> list[WorkflowJob]:
        """List one page of jobs for a workflow run."""
        data = self._run_gh_api(
            [
                f"repos/{self.context.repository}/actions/runs/{run_id}/jobs",
                "--method",
                "GET",
                "-F",
                f"per_page={per_page}",
                "-F",
                f"page={page}",
            ],
            kind=ErrorKind.JOB_RESOLUTION,
        )
        return [WorkflowJob.from_api(job) for job in (data or {}).get("jobs") or []]

    def list_issue_comments(
        self, issue_number: int, per_page: int = 100
    ) -> list[IssueComment]:
        """List the first page of comments on an issue or pull request."""
        data = self._run_gh_api(
            [
                f"repos/{self.context.repository}/issues/{issue_number}/comments",
                "--method",
                "GET",
                "-F",
                f"per_page={per_page}",
            ]
        )
        return [IssueComment.from_api(comment) for comment in data or []]

    def create_issue_comment(self, issue_number: int, body: str) -> IssueComment:
        """Post a comment on an issue or pull request."""
        data = self._run_gh_api(
            [
                f"repos/{self.context.repository}/issues/{issue_number}/comments",
                "--method",
                "POST",
                "-f",
                f"body={body}",
            ]
        )
        return IssueComment.from_api(data)

    def minimize_comment(self, node_id: str) -> bool:
        """Hide a comment as outdated.

        Returns
        -------
        bool
            Whether GitHub reports the comment as minimized.

        """
        data = self._run_gh_api(
            [
                "graphql",
                "-f",
                f"query={MINIMIZE_COMMENT_MUTATION}",
                "-f",
                f"commentId={node_id}",
            ]
        )
        minimized = (
            ((data or {}).get("data") or {}).get("minimizeComment") or {}
        ).get("minimizedComment") or {}
        return bool(minimized.get("isMinimized"))
