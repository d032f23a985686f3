"""Unit tests for the HTTP surface of the docs label enforcer."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import encode, make_payload
from doc_enforcer.github.client import GitHubAPIError, GitHubClient
from doc_enforcer.main import WHOAMI_TEXT, _redact_secret, create_app
from doc_enforcer.webhook.signature import compute_signature


@pytest.fixture
def github_client():
    client = MagicMock()
    client.create_comment = AsyncMock(return_value={"id": 1})
    client.update_issue_state = AsyncMock(return_value={"state": "open"})
    client.close = AsyncMock()
    return client


@pytest.fixture
def client(settings, github_client):
    app = create_app(settings=settings, github_client=github_client)
    with TestClient(app) as test_client:
        yield test_client


def _post(client: TestClient, payload, secret: str = "test-secret", signature=None):
    body = encode(payload)
    headers = {"Content-Type": "application/json"}
    if signature is None:
        signature = compute_signature(body, secret)
    if signature:
        headers["X-Hub-Signature"] = signature
    return client.post("/github_endpoint", content=body, headers=headers)


class TestWhoami:
    def test_returns_identification(self, client):
        response = client.get("/whoami")

        assert response.status_code == 200
        assert response.text == WHOAMI_TEXT

    def test_ignores_request_details(self, client):
        response = client.get(
            "/whoami",
            params={"q": "anything"},
            headers={"X-Hub-Signature": "sha1=bogus"},
        )

        assert response.status_code == 200
        assert response.text == WHOAMI_TEXT


class TestGithubEndpoint:
    def test_reopens_unlabelled_closed_issue(self, client, github_client):
        response = _post(client, make_payload(state="closed", labels=["bug"], number=5))

        assert response.status_code == 200
        assert response.json() == {"status": "reopened"}
        github_client.create_comment.assert_awaited_once()
        github_client.update_issue_state.assert_awaited_once_with(
            "vmware", "vic", 5, "open"
        )

    def test_labelled_closed_issue_left_closed(self, client, github_client):
        response = _post(client, make_payload(labels=["docs/no-impact"]))

        assert response.status_code == 200
        assert response.json() == {"status": "compliant"}
        github_client.create_comment.assert_not_awaited()
        github_client.update_issue_state.assert_not_awaited()

    def test_open_issue_ignored(self, client, github_client):
        response = _post(client, make_payload(state="open"))

        assert response.json() == {"status": "ignored"}
        github_client.create_comment.assert_not_awaited()

    def test_missing_signature_rejected(self, client, github_client):
        response = _post(client, make_payload(), signature="")

        assert response.status_code == 401
        assert response.json() == {"status": "rejected"}
        github_client.create_comment.assert_not_awaited()

    def test_bad_signature_rejected(self, client, github_client):
        response = _post(client, make_payload(), secret="wrong-secret")

        assert response.status_code == 401
        github_client.create_comment.assert_not_awaited()

    def test_malformed_body(self, client):
        body = b"{not json"
        response = client.post(
            "/github_endpoint",
            content=body,
            headers={"X-Hub-Signature": compute_signature(body, "test-secret")},
        )

        assert response.status_code == 400
        assert response.json() == {"status": "malformed"}

    def test_api_failure_still_acknowledged(self, client, github_client):
        github_client.create_comment.side_effect = GitHubAPIError(
            "GitHub API error: 500", status_code=500
        )

        response = _post(client, make_payload())

        assert response.status_code == 200
        assert response.json() == {"status": "failed"}
        github_client.update_issue_state.assert_not_awaited()

    def test_injected_client_not_closed(self, settings, github_client):
        app = create_app(settings=settings, github_client=github_client)
        with TestClient(app):
            pass

        github_client.close.assert_not_awaited()

    def test_repeated_signature_header_rejected(self, client, github_client):
        body = encode(make_payload())
        signature = compute_signature(body, "test-secret")

        response = client.post(
            "/github_endpoint",
            content=body,
            headers=[("X-Hub-Signature", signature), ("X-Hub-Signature", signature)],
        )

        assert response.status_code == 401
        assert response.json() == {"status": "rejected"}
        github_client.create_comment.assert_not_awaited()

    def test_unreadable_body(self, settings, github_client):
        app = create_app(settings=settings, github_client=github_client)
        sent = []

        async def receive():
            return {"type": "http.disconnect"}

        async def send(message):
            sent.append(message)

        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "POST",
            "scheme": "http",
            "path": "/github_endpoint",
            "raw_path": b"/github_endpoint",
            "root_path": "",
            "query_string": b"",
            "headers": [(b"content-type", b"application/json")],
            "client": ("testclient", 50000),
            "server": ("testserver", 80),
        }

        asyncio.run(app(scope, receive, send))

        start = next(m for m in sent if m["type"] == "http.response.start")
        body = b"".join(m.get("body", b"") for m in sent if m["type"] == "http.response.body")
        assert start["status"] == 400
        assert body == b"can't read body"
        github_client.create_comment.assert_not_awaited()


class TestGitHubResponses:
    def test_non_json_success_body_still_acknowledged(self, settings):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, text="created")

        github_client = GitHubClient(
            token="ghp_test",
            base_url="https://api.github.test",
            transport=httpx.MockTransport(handler),
        )
        app = create_app(settings=settings, github_client=github_client)

        with TestClient(app) as test_client:
            response = _post(test_client, make_payload(state="closed", labels=[]))

        assert response.status_code == 200
        assert response.json() == {"status": "failed"}
        # The comment call failed, so no reopen was attempted
        assert [r.method for r in requests] == ["POST"]


class TestMetricsEndpoint:
    def test_exposes_webhook_counter(self, client):
        _post(client, make_payload(state="open"))

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "doc_enforcer_webhooks_total" in response.text


class TestRedactSecret:
    def test_short_value_fully_hidden(self):
        assert _redact_secret("abc") == "***"

    def test_long_value_keeps_prefix(self):
        assert _redact_secret("ghp_abcdef") == "ghp_******"
