"""Slack notifications for new feedback.

Usage:
    from feedback_api.services.slack import build_feedback_blocks, post_notification

    blocks = build_feedback_blocks(issue, submission)
    await post_notification(channel, "New feedback", blocks, token=token)
"""

import logging
from typing import Any

import httpx

from feedback_api.models.feedback import FeedbackCategory, FeedbackSubmission, TrackedIssue
from feedback_api.models.slack import SlackAction
from feedback_api.services.http_client import get_shared_client, slack_headers

logger = logging.getLogger(__name__)

SLACK_API_URL = "https://slack.com/api"
DESCRIPTION_LIMIT = 500

CATEGORY_DISPLAY_NAMES: dict[FeedbackCategory, str] = {
    FeedbackCategory.BUG: "Bug report",
    FeedbackCategory.FEATURE: "Feature request",
    FeedbackCategory.QUESTION: "Question",
    FeedbackCategory.OTHER: "Other",
}


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters Slack uses for links and mentions."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _mrkdwn(text: str) -> dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def _button(text: str, action_id: str, value: str, **extra: str) -> dict[str, Any]:
    return {
        "type": "button",
        "text": {"type": "plain_text", "text": text, "emoji": True},
        "action_id": action_id,
        "value": value,
        **extra,
    }


def build_feedback_blocks(
    issue: TrackedIssue, submission: FeedbackSubmission
) -> list[dict[str, Any]]:
    """Block Kit layout announcing a new feedback issue with triage buttons."""
    category = submission.category
    token = issue.action_token
    return [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "📝 New feedback", "emoji": True},
        },
        {
            "type": "section",
            "fields": [
                _mrkdwn(f"*Category:*\n{CATEGORY_DISPLAY_NAMES[category]}"),
                _mrkdwn(f"*Issue:*\n<{issue.url}|#{issue.number}>"),
            ],
        },
        {"type": "section", "text": _mrkdwn(f"*Title:*\n{escape_mrkdwn(submission.title)}")},
        {
            "type": "section",
            "text": _mrkdwn(
                f"*Description:*\n{escape_mrkdwn(truncate(submission.description))}"
            ),
        },
        {"type": "divider"},
        {"type": "section", "text": _mrkdwn("*Create an implementation plan?*")},
        {
            "type": "actions",
            "elements": [
                _button(
                    "📋 Create plan",
                    SlackAction.CREATE_PLAN.value,
                    token,
                    style="primary",
                ),
                _button(
                    "❌ Reject",
                    SlackAction.REJECT_IMPLEMENTATION.value,
                    token,
                    style="danger",
                ),
                _button("View on GitHub", "view_issue", token, url=issue.url),
            ],
        },
    ]


async def post_notification(
    channel: str,
    text: str,
    blocks: list[dict[str, Any]],
    *,
    token: str,
    api_url: str = SLACK_API_URL,
) -> bool:
    """Post a message via chat.postMessage (best-effort).

    Returns True when Slack acknowledges the message. Missing credentials,
    network errors and ``ok: false`` replies are logged and return False.
    """
    if not token or not channel:
        logger.info("Slack notification skipped: missing credentials")
        return False

    client = get_shared_client()
    try:
        resp = await client.post(
            f"{api_url.rstrip('/')}/chat.postMessage",
            headers=slack_headers(token),
            json={"channel": channel, "text": text, "blocks": blocks},
        )
        result = resp.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("Slack notification error")
        return False

    if not isinstance(result, dict):
        result = {}
    if not resp.is_success or not result.get("ok"):
        logger.error(
            "Slack notification failed (%d): %s",
            resp.status_code,
            result.get("error", "unknown"),
        )
        return False
    return True
