"""Feedback intake: GitHub issue creation and Slack notification."""

import logging

from feedback_api.config import Settings
from feedback_api.errors import ConfigError
from feedback_api.models.feedback import FeedbackCategory, FeedbackSubmission, TrackedIssue
from feedback_api.services.github import create_issue
from feedback_api.services.slack import build_feedback_blocks, post_notification

logger = logging.getLogger(__name__)

FEEDBACK_LABEL = "user-feedback"

# Feedback category -> GitHub label
CATEGORY_LABELS: dict[FeedbackCategory, str] = {
    FeedbackCategory.BUG: "bug",
    FeedbackCategory.FEATURE: "enhancement",
    FeedbackCategory.QUESTION: "question",
    FeedbackCategory.OTHER: "other",
}


def category_label(category: FeedbackCategory) -> str:
    return CATEGORY_LABELS[category]


def build_issue_body(submission: FeedbackSubmission) -> str:
    category = submission.category.value
    return "\n".join(
        [
            submission.description,
            "",
            "---",
            "",
            f"**Category:** {category}",
            "_Submitted via the feedback form._",
        ]
    )


async def submit_feedback(
    submission: FeedbackSubmission, settings: Settings
) -> TrackedIssue:
    """Create a GitHub issue for the submission and announce it in Slack.

    The Slack post is a courtesy: its outcome never affects the result.

    Raises:
        ConfigError: If the GitHub token, owner or repo is not configured.
        RemoteCallError: If the issue could not be created.
    """
    if not settings.github_configured:
        raise ConfigError("GitHub not configured")

    issue = await create_issue(
        settings.github_repo_owner,
        settings.github_repo_name,
        submission.title,
        build_issue_body(submission),
        [FEEDBACK_LABEL, category_label(submission.category)],
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    logger.info(
        "Created issue %s/%s#%d: %s",
        issue.owner,
        issue.repo,
        issue.number,
        submission.title[:50],
    )

    posted = await post_notification(
        settings.slack_channel_id,
        f"New feedback: {submission.title}",
        build_feedback_blocks(issue, submission),
        token=settings.slack_bot_token,
        api_url=settings.slack_api_url,
    )
    if not posted:
        logger.warning("Issue #%d created without a Slack notification", issue.number)

    return issue
