"""FastAPI application entry point for the docs label enforcer.

This module provides the FastAPI application that receives GitHub issue
webhooks and reopens issues closed without a documentation-impact label.

Endpoints:
- POST /github_endpoint: signed GitHub issue webhook deliveries
- GET /whoami: fixed identification text
- GET /metrics: Prometheus metrics
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.requests import ClientDisconnect

from .config import EnforcerSettings, get_settings
from .github.client import GitHubClient
from .github.reopener import IssueReopener
from .metrics import EnforcerMetrics
from .webhook.handler import WebhookReceiver
from .webhook.models import WebhookOutcome

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

WHOAMI_TEXT = "github webhook for enforcing doc labels on PR's\n"

metrics = EnforcerMetrics()

# Outcomes that are answered with something other than 200
_ERROR_STATUS = {
    WebhookOutcome.REJECTED: 401,
    WebhookOutcome.MALFORMED: 400,
}


def _redact_secret(value: str, visible_chars: int = 4) -> str:
    """Redact a secret value, showing only the first few characters.

    Args:
        value: The secret value to redact.
        visible_chars: Number of characters to show at the start.

    Returns:
        Redacted string with asterisks replacing hidden characters.
    """
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _log_configuration(settings: EnforcerSettings) -> None:
    """Log configuration values with secrets redacted."""
    logger.info("Docs label enforcer configuration:")
    logger.info(f"  Repository: {settings.full_repository}")
    logger.info(f"  Required labels: {', '.join(settings.required_labels)}")
    logger.info(f"  GitHub Base URL: {settings.github_base_url}")
    logger.info(f"  GitHub Access Token: {_redact_secret(settings.github_access_token)}")
    logger.info(f"  Secret Token: {_redact_secret(settings.secret_token)}")
    logger.info(f"  Request Timeout Seconds: {settings.request_timeout_seconds}")
    logger.info(f"  Reopen Timeout Seconds: {settings.reopen_timeout_seconds}")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")


def _header_map(request: Request) -> Dict[str, List[str]]:
    # Raw pairs keep repeated headers as separate values
    headers: Dict[str, List[str]] = {}
    for name, value in request.headers.raw:
        headers.setdefault(name.decode("latin-1"), []).append(value.decode("latin-1"))
    return headers


def create_app(
    settings: Optional[EnforcerSettings] = None,
    github_client: Optional[GitHubClient] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service configuration. Read from the environment at
                  startup when omitted.
        github_client: GitHub client to use. When omitted one is created
                       from the settings and closed on shutdown.

    Returns:
        The configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Docs label enforcer starting up...")

        cfg = settings if settings is not None else get_settings()
        _log_configuration(cfg)

        client = github_client
        if client is None:
            client = GitHubClient(
                token=cfg.github_access_token,
                base_url=cfg.github_base_url,
                timeout=cfg.request_timeout_seconds,
            )

        reopener = IssueReopener(
            github_client=client,
            owner=cfg.repo_owner,
            repo=cfg.repo_name,
            has_impact_label=cfg.has_impact_label,
            no_impact_label=cfg.no_impact_label,
        )
        app.state.receiver = WebhookReceiver(
            settings=cfg, reopener=reopener, metrics=metrics
        )

        logger.info("serving webhook at %s:%s", cfg.host, cfg.port)

        yield

        logger.info("Docs label enforcer shutting down...")
        if github_client is None:
            await client.close()

    app = FastAPI(
        title="enforce-docs-labels",
        description="Reopens GitHub issues closed without a docs-impact label",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/whoami", response_class=PlainTextResponse)
    async def whoami():
        """Identify the service."""
        return WHOAMI_TEXT

    @app.get("/metrics")
    async def prometheus_metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/github_endpoint")
    async def github_endpoint(request: Request):
        """GitHub webhook receiver endpoint.

        Signature failures get 401 and undecodable payloads 400. Every
        other delivery is acknowledged with 200, including ones where a
        GitHub API call failed.
        """
        try:
            body = await request.body()
        except ClientDisconnect as e:
            logger.warning("Error reading body: %s", e)
            return PlainTextResponse("can't read body", status_code=400)

        receiver: WebhookReceiver = request.app.state.receiver
        outcome = await receiver.handle(_header_map(request), body)

        content = {"status": outcome.value}
        status_code = _ERROR_STATUS.get(outcome)
        if status_code is not None:
            return JSONResponse(content=content, status_code=status_code)
        return content

    return app


def main() -> None:
    """Run the service with uvicorn."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
