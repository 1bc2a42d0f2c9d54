"""GitHub REST calls used by the feedback workflow.

Issue creation is load-bearing and raises on failure. Repository dispatch
reports success as a bool so the webhook can decide what to show in Slack.
Commenting and closing are best-effort: failures are logged, never raised.
"""

import logging
from typing import Any

import httpx

from feedback_api.errors import RemoteCallError
from feedback_api.models.feedback import TrackedIssue
from feedback_api.services.http_client import get_shared_client, github_headers

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


def _repo_url(api_url: str, owner: str, repo: str) -> str:
    return f"{api_url.rstrip('/')}/repos/{owner}/{repo}"


async def create_issue(
    owner: str,
    repo: str,
    title: str,
    body: str,
    labels: list[str],
    *,
    token: str,
    api_url: str = GITHUB_API_URL,
) -> TrackedIssue:
    """Create an issue and return its number and URL.

    Raises:
        RemoteCallError: On a network error or a non-2xx response.
    """
    client = get_shared_client()
    try:
        resp = await client.post(
            f"{_repo_url(api_url, owner, repo)}/issues",
            headers=github_headers(token),
            json={"title": title, "body": body, "labels": labels},
        )
    except httpx.HTTPError as e:
        logger.error("GitHub issue creation failed for %s/%s: %s", owner, repo, e)
        raise RemoteCallError("Failed to create issue") from e

    if not resp.is_success:
        logger.error(
            "GitHub issue creation returned %d for %s/%s", resp.status_code, owner, repo
        )
        raise RemoteCallError("Failed to create issue")

    try:
        data: dict[str, Any] = resp.json()
        return TrackedIssue(
            number=data["number"],
            url=data["html_url"],
            owner=owner,
            repo=repo,
        )
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Unexpected GitHub issue response for %s/%s: %s", owner, repo, e)
        raise RemoteCallError("Failed to create issue") from e


async def dispatch_repository_event(
    owner: str,
    repo: str,
    event_type: str,
    issue_number: int,
    *,
    token: str,
    api_url: str = GITHUB_API_URL,
) -> bool:
    """Fire a repository_dispatch event. Returns True on a 2xx response."""
    client = get_shared_client()
    try:
        resp = await client.post(
            f"{_repo_url(api_url, owner, repo)}/dispatches",
            headers=github_headers(token),
            json={
                "event_type": event_type,
                "client_payload": {"issue_number": issue_number},
            },
        )
    except httpx.HTTPError:
        logger.exception(
            "repository_dispatch %s failed for %s/%s#%d",
            event_type,
            owner,
            repo,
            issue_number,
        )
        return False

    if not resp.is_success:
        logger.warning(
            "repository_dispatch %s returned %d for %s/%s#%d",
            event_type,
            resp.status_code,
            owner,
            repo,
            issue_number,
        )
        return False

    logger.info("Dispatched %s for %s/%s#%d", event_type, owner, repo, issue_number)
    return True


async def add_issue_comment(
    owner: str,
    repo: str,
    issue_number: int,
    body: str,
    *,
    token: str,
    api_url: str = GITHUB_API_URL,
) -> None:
    """Post a comment on an issue (best-effort)."""
    client = get_shared_client()
    try:
        resp = await client.post(
            f"{_repo_url(api_url, owner, repo)}/issues/{issue_number}/comments",
            headers=github_headers(token),
            json={"body": body},
        )
        if not resp.is_success:
            logger.warning(
                "Comment on %s/%s#%d returned %d",
                owner,
                repo,
                issue_number,
                resp.status_code,
            )
    except httpx.HTTPError:
        logger.exception("Comment on %s/%s#%d failed", owner, repo, issue_number)


async def close_issue(
    owner: str,
    repo: str,
    issue_number: int,
    *,
    token: str,
    api_url: str = GITHUB_API_URL,
) -> None:
    """Close an issue (best-effort)."""
    client = get_shared_client()
    try:
        resp = await client.patch(
            f"{_repo_url(api_url, owner, repo)}/issues/{issue_number}",
            headers=github_headers(token),
            json={"state": "closed"},
        )
        if not resp.is_success:
            logger.warning(
                "Closing %s/%s#%d returned %d",
                owner,
                repo,
                issue_number,
                resp.status_code,
            )
    except httpx.HTTPError:
        logger.exception("Closing %s/%s#%d failed", owner, repo, issue_number)
