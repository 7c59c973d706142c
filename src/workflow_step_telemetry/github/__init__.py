"""GitHub API client, job resolution and trace summary publishing."""

from .client import GitHubClient
from .comment_publisher import CommentPublisher, render_trace_content
from .job_resolver import JobResolver

__all__ = ["CommentPublisher", "GitHubClient", "JobResolver", "render_trace_content"]
