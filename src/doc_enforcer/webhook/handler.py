"""GitHub webhook receiver for the docs label enforcer.

This module provides the WebhookReceiver class, which takes one delivery
from signature check to (possibly) reopening the issue:

1. Validate the X-Hub-Signature header; a bad signature drops the
   delivery before the body is decoded.
2. Decode the body into an IssueEvent.
3. Ignore events without an issue and issues that are not closed.
4. Reopen closed issues that carry neither docs-impact label.

GitHub API failures are logged and reported as WebhookOutcome.FAILED;
they never propagate to the HTTP layer.
"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from pydantic import ValidationError

from ..config import EnforcerSettings
from ..github.client import GitHubAPIError
from ..policy import has_doc_labels, label_names
from .models import IssueEvent, WebhookOutcome
from .signature import validate_signature

if TYPE_CHECKING:
    from ..github.reopener import IssueReopener
    from ..metrics import EnforcerMetrics

logger = logging.getLogger(__name__)


class WebhookReceiver:
    """Handles signed GitHub issue webhook deliveries.

    The receiver holds no per-request state, so one instance serves all
    concurrent deliveries.

    Attributes:
        settings: The immutable service configuration.
        reopener: Comments on and reopens non-compliant issues.
        metrics: Optional collector that records each outcome.
    """

    def __init__(
        self,
        settings: EnforcerSettings,
        reopener: "IssueReopener",
        metrics: Optional["EnforcerMetrics"] = None,
    ) -> None:
        self.settings = settings
        self.reopener = reopener
        self.metrics = metrics

    def parse_event(self, body: bytes) -> Optional[IssueEvent]:
        """Decode a webhook body into an IssueEvent.

        Args:
            body: The raw JSON request body.

        Returns:
            The decoded event, or None if the body is not a valid payload.
        """
        try:
            return IssueEvent.model_validate_json(body)
        except ValidationError as e:
            logger.warning(
                "Could not decode json: %s",
                e,
                extra={"error_count": e.error_count()},
            )
            return None

    async def handle(
        self,
        headers: Mapping[str, Sequence[str]],
        body: bytes,
    ) -> WebhookOutcome:
        """Process one webhook delivery.

        Args:
            headers: Request headers as name -> list of values.
            body: The raw request body.

        Returns:
            The WebhookOutcome describing what was done.
        """
        outcome = await self._handle(headers, body)
        if self.metrics is not None:
            self.metrics.record_outcome(outcome)
        return outcome

    async def _handle(
        self,
        headers: Mapping[str, Sequence[str]],
        body: bytes,
    ) -> WebhookOutcome:
        if not validate_signature(headers, body, self.settings.secret_token):
            return WebhookOutcome.REJECTED

        event = self.parse_event(body)
        if event is None:
            return WebhookOutcome.MALFORMED

        issue = event.issue
        if issue is None:
            logger.debug("Ignoring event without an issue: action=%s", event.action)
            return WebhookOutcome.IGNORED

        if not issue.is_closed:
            logger.debug(
                "Ignoring issue #%s in state %s", issue.number, issue.state
            )
            return WebhookOutcome.IGNORED

        if has_doc_labels(issue.labels, self.settings.required_labels):
            logger.info(
                "Issue #%s closed with docs label",
                issue.number,
                extra={"labels": label_names(issue.labels)},
            )
            return WebhookOutcome.COMPLIANT

        logger.info(
            "Issue #%s closed without a docs label, reopening",
            issue.number,
            extra={"labels": label_names(issue.labels)},
        )

        start = time.monotonic()
        try:
            await asyncio.wait_for(
                self.reopener.reopen(issue),
                timeout=self.settings.reopen_timeout_seconds,
            )
        except GitHubAPIError as e:
            logger.error(
                "Got error reopening issue #%s: %s",
                issue.number,
                e.message,
                extra={"status_code": e.status_code},
            )
            return WebhookOutcome.FAILED
        except asyncio.TimeoutError:
            logger.error(
                "Timed out reopening issue #%s after %ss",
                issue.number,
                self.settings.reopen_timeout_seconds,
            )
            return WebhookOutcome.FAILED
        finally:
            if self.metrics is not None:
                self.metrics.record_reopen_duration(time.monotonic() - start)

        return WebhookOutcome.REOPENED


def create_webhook_receiver(
    settings: EnforcerSettings,
    reopener: "IssueReopener",
    metrics: Optional["EnforcerMetrics"] = None,
) -> WebhookReceiver:
    """Factory function to create a WebhookReceiver instance."""
    return WebhookReceiver(settings=settings, reopener=reopener, metrics=metrics)
