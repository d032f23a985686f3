"""GitHub API client and issue reopener.

This module wraps the GitHub REST calls used to post the docs-label
reminder and reopen an issue.
"""

from .client import GitHubAPIError, GitHubClient
from .reopener import IssueReopener, build_reminder_comment

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "IssueReopener",
    "build_reminder_comment",
]
