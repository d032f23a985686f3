"""Reopening of issues closed without a docs-impact label.

The reopener posts a reminder comment and then sets the issue back to
open. The two calls run in that order; a failed comment stops the
sequence, and a failed reopen leaves the comment in place.
"""

import logging

from ..webhook.models import Issue, IssueState
from .client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)

REMINDER_TEMPLATE = (
    "Please help keep our documentation up to date by adding either "
    "`{no_impact}` or `{has_impact}` as a label to this issue to notify "
    "our documentation authors as to whether or not this issue affects "
    "the documentation."
)


def build_reminder_comment(has_impact: str, no_impact: str) -> str:
    """Build the reminder posted on an issue closed without a docs label."""
    return REMINDER_TEMPLATE.format(has_impact=has_impact, no_impact=no_impact)


class IssueReopener:
    """Posts the docs-label reminder and reopens the issue.

    Attributes:
        github_client: Authenticated GitHub API client.
        owner: Owner of the repository the issues live in.
        repo: Repository name.
        comment_body: The reminder text posted on every reopened issue.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        owner: str,
        repo: str,
        has_impact_label: str,
        no_impact_label: str,
    ) -> None:
        self.github_client = github_client
        self.owner = owner
        self.repo = repo
        self.comment_body = build_reminder_comment(has_impact_label, no_impact_label)

    async def reopen(self, issue: Issue) -> None:
        """Comment on and reopen ``issue``.

        Raises:
            GitHubAPIError: From whichever call failed. When the comment
                fails the reopen is not attempted.
        """
        context = {
            "owner": self.owner,
            "repo": self.repo,
            "issue_number": issue.number,
        }

        try:
            await self.github_client.create_comment(
                self.owner, self.repo, issue.number, self.comment_body
            )
        except GitHubAPIError as e:
            logger.error(
                "Got %s trying to add a friendly comment to the issue",
                e.message,
                extra=context,
            )
            raise

        try:
            await self.github_client.update_issue_state(
                self.owner, self.repo, issue.number, IssueState.OPEN.value
            )
        except GitHubAPIError as e:
            logger.error(
                "Got %s trying to reopen the issue",
                e.message,
                extra=context,
            )
            raise

        logger.info("Reopened issue", extra=context)
