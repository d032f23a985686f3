"""Metrics collection for the webhook receiver."""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from .webhook.models import WebhookOutcome


class EnforcerMetrics:
    """Prometheus metrics for webhook handling."""

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        self.webhooks_total = Counter(
            'doc_enforcer_webhooks_total',
            'Webhook deliveries by outcome',
            ['outcome'],
            registry=registry,
        )
        self.reopen_duration_seconds = Histogram(
            'doc_enforcer_reopen_duration_seconds',
            'Time spent commenting on and reopening an issue',
            registry=registry,
        )

    def record_outcome(self, outcome: WebhookOutcome):
        """Record how a delivery was handled."""
        self.webhooks_total.labels(outcome=outcome.value).inc()

    def record_reopen_duration(self, duration: float):
        """Record comment + reopen timing."""
        self.reopen_duration_seconds.observe(duration)
