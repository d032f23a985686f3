"""Webhook service that reopens GitHub issues closed without a docs label.

This package provides:
- Signature validation for GitHub webhook deliveries
- The documentation-impact label policy
- A GitHub API client and the issue reopener
- The FastAPI application serving /github_endpoint and /whoami
"""

__version__ = "1.0.0"
