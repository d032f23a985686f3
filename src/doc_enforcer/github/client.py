"""GitHub API client for issue interactions.

This module provides an async wrapper around the two GitHub REST calls
the enforcer makes:
- Creating comments on issues
- Editing an issue's state

Requests carry an explicit timeout. Failed requests are not retried; any
error is raised as GitHubAPIError for the caller to log.
"""

import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """A GitHub call that did not produce a usable response.

    ``status_code`` is None when no response arrived (timeout, refused
    connection); ``response_body`` holds the raw text when one did.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url
        super().__init__(message)


class GitHubClient:
    """Comment-and-reopen client authenticated with a static bearer token.

    The underlying httpx.AsyncClient is created on first use and shared by
    all deliveries; ``transport`` lets tests swap in httpx.MockTransport.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                    "User-Agent": "enforce-docs-labels/1.0",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(
        self,
        method: str,
        path: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Raises:
            GitHubAPIError: On a transport failure or timeout, a status of
                400 and above, or a body that is not a JSON object.
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            raise GitHubAPIError(
                f"Request timed out after {self.timeout}s", request_url=url
            ) from e
        except httpx.RequestError as e:
            raise GitHubAPIError(f"Request failed: {e}", request_url=url) from e

        if response.status_code >= 400:
            logger.error(
                "GitHub API error",
                extra={
                    "status_code": response.status_code,
                    "method": method,
                    "path": path,
                    "response_body": response.text[:500],
                },
            )
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
                request_url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                "GitHub API returned a non-JSON body",
                status_code=response.status_code,
                response_body=response.text,
                request_url=url,
            ) from e
        if not isinstance(data, dict):
            raise GitHubAPIError(
                f"Expected a JSON object from GitHub, got {type(data).__name__}",
                status_code=response.status_code,
                response_body=response.text,
                request_url=url,
            )
        return data

    async def create_comment(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        body: str,
    ) -> Dict[str, Any]:
        """POST a markdown comment on an issue and return the created comment."""
        context = {"owner": owner, "repo": repo, "issue_number": issue_number}
        logger.info("Creating comment on issue", extra=context)

        comment = await self._send(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            {"body": body},
        )

        logger.info(
            "Comment created",
            extra={**context, "comment_id": comment.get("id")},
        )
        return comment

    async def update_issue_state(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        state: str,
    ) -> Dict[str, Any]:
        """PATCH an issue's state ("open"/"closed") and return the issue.

        Setting the state an issue already has succeeds on GitHub's side.
        """
        context = {"owner": owner, "repo": repo, "issue_number": issue_number}
        logger.info("Updating issue state to %s", state, extra=context)

        issue = await self._send(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/{issue_number}",
            {"state": state},
        )

        logger.info("Issue is now %s", issue.get("state"), extra=context)
        return issue
