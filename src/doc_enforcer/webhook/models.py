"""GitHub webhook event models for the docs label enforcer.

Only the fields the enforcer reads are modelled; anything else in the
payload is ignored.

GitHub Webhook Payload Structure (issues event, trimmed):
{
  "action": "closed",
  "issue": {
    "number": 123,
    "state": "closed",
    "labels": [{"name": "bug"}, {"name": "docs/no-impact"}]
  }
}
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class IssueState(str, Enum):
    """GitHub issue states."""

    OPEN = "open"
    CLOSED = "closed"


class WebhookOutcome(str, Enum):
    """Result of handling one webhook delivery.

    Attributes:
        REJECTED: Signature header missing, duplicated or wrong.
        MALFORMED: Body could not be decoded into an event.
        IGNORED: No issue in the event, or the issue is not closed.
        COMPLIANT: Closed issue already carries a docs-impact label.
        REOPENED: Reminder posted and issue reopened.
        FAILED: A GitHub API call failed or timed out.
    """

    REJECTED = "rejected"
    MALFORMED = "malformed"
    IGNORED = "ignored"
    COMPLIANT = "compliant"
    REOPENED = "reopened"
    FAILED = "failed"


class Label(BaseModel):
    """A label attached to an issue."""

    name: Optional[str] = None


class Issue(BaseModel):
    """The parts of a GitHub issue the enforcer consumes.

    Attributes:
        number: The issue number within the repository.
        state: "open" or "closed".
        labels: Labels attached to the issue, in payload order.
    """

    number: int = Field(..., description="The issue number within the repository")

    state: Optional[str] = Field(
        default=None,
        description="The issue state reported by GitHub",
    )

    labels: List[Label] = Field(
        default_factory=list,
        description="Labels attached to the issue",
    )

    @field_validator("labels", mode="before")
    @classmethod
    def null_labels_as_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @property
    def is_closed(self) -> bool:
        return self.state == IssueState.CLOSED.value


class IssueEvent(BaseModel):
    """A decoded issue webhook delivery.

    Events that are not about an issue (pings, pushes) decode with
    ``issue`` set to None.
    """

    action: Optional[str] = None
    issue: Optional[Issue] = None
