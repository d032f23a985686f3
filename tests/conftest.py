"""Pytest configuration for all tests."""

import json
from typing import Any, Dict, List, Optional

import pytest

from doc_enforcer.config import EnforcerSettings
from doc_enforcer.webhook.signature import compute_signature

TEST_SECRET = "test-secret"


def make_payload(
    state: Optional[str] = "closed",
    labels: Optional[List[str]] = None,
    number: int = 42,
    action: str = "closed",
) -> Dict[str, Any]:
    """Build a GitHub issues webhook payload."""
    return {
        "action": action,
        "issue": {
            "number": number,
            "state": state,
            "labels": [{"name": name} for name in (labels or [])],
            "user": {"login": "octocat"},
        },
        "repository": {"name": "vic", "owner": {"login": "vmware"}},
    }


def encode(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


def signed_headers(body: bytes, secret: str = TEST_SECRET) -> Dict[str, List[str]]:
    return {"X-Hub-Signature": [compute_signature(body, secret)]}


@pytest.fixture
def settings() -> EnforcerSettings:
    return EnforcerSettings(
        secret_token=TEST_SECRET,
        github_access_token="ghp_test_token",
        repo_owner="vmware",
        repo_name="vic",
        reopen_timeout_seconds=5.0,
    )
