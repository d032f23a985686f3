"""GitHub webhook handling for the docs label enforcer.

This module receives issue events from GitHub, verifies their
X-Hub-Signature header and decides whether the issue must be reopened.
"""

from .handler import WebhookReceiver, create_webhook_receiver
from .models import Issue, IssueEvent, IssueState, Label, WebhookOutcome
from .signature import compute_signature, validate_signature

__all__ = [
    "Issue",
    "IssueEvent",
    "IssueState",
    "Label",
    "WebhookOutcome",
    "WebhookReceiver",
    "compute_signature",
    "create_webhook_receiver",
    "validate_signature",
]
