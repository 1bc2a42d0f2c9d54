"""Route decoded Slack callbacks to GitHub side effects.

Each button click maps to exactly one effect:

    create_plan             -> repository_dispatch "claude-plan"
    replan                  -> repository_dispatch "claude-plan"
    approve_implementation  -> repository_dispatch "claude-implement"
    reject_implementation   -> comment on the issue, then close it

Nothing is persisted and repeated clicks are not deduplicated; the workflows
on the other side of the dispatch own any deduplication. The result of a
successful action replaces the original Slack message so the channel shows
who acted.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from feedback_api.config import Settings
from feedback_api.errors import PayloadError
from feedback_api.models.slack import (
    BlockActionsPayload,
    SlackAction,
    SlackPayload,
    UrlVerificationPayload,
)
from feedback_api.services.action_token import ActionTarget, parse_action_token
from feedback_api.services.github import (
    add_issue_comment,
    close_issue,
    dispatch_repository_event,
)

logger = logging.getLogger(__name__)

PLAN_EVENT = "claude-plan"
IMPLEMENT_EVENT = "claude-implement"


@dataclass(frozen=True)
class ActionResult:
    """HTTP status and JSON body to send back to Slack."""

    status_code: int
    body: dict[str, Any]


def acknowledge() -> ActionResult:
    return ActionResult(200, {"ok": True})


def replace_message(summary: str, detail: str) -> ActionResult:
    """Build a response that replaces the clicked message in the channel."""
    return ActionResult(
        200,
        {
            "response_type": "in_channel",
            "replace_original": True,
            "text": summary,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": detail}},
            ],
        },
    )


ActionHandler = Callable[[ActionTarget, str, Settings], Awaitable[ActionResult]]


async def _dispatch(
    target: ActionTarget,
    event_type: str,
    settings: Settings,
    summary: str,
    detail: str,
) -> ActionResult:
    ok = await dispatch_repository_event(
        target.owner,
        target.repo,
        event_type,
        target.issue_number,
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    if not ok:
        # Leave the original message (and its buttons) in place
        return acknowledge()
    return replace_message(summary, detail)


async def _create_plan(target: ActionTarget, user: str, settings: Settings) -> ActionResult:
    n = target.issue_number
    return await _dispatch(
        target,
        PLAN_EVENT,
        settings,
        summary=f"📋 Creating a plan for issue #{n}...",
        detail=(
            f"📋 Plan creation for *Issue #{n}* started by *{user}*.\n\n"
            "You will be notified when the plan is ready..."
        ),
    )


async def _replan(target: ActionTarget, user: str, settings: Settings) -> ActionResult:
    n = target.issue_number
    return await _dispatch(
        target,
        PLAN_EVENT,
        settings,
        summary=f"🔄 Re-planning issue #{n}...",
        detail=f"🔄 Re-plan for *Issue #{n}* started by *{user}*.",
    )


async def _approve_implementation(
    target: ActionTarget, user: str, settings: Settings
) -> ActionResult:
    n = target.issue_number
    return await _dispatch(
        target,
        IMPLEMENT_EVENT,
        settings,
        summary=f"✅ Implementation started for issue #{n}",
        detail=(
            f"✅ Implementation of *Issue #{n}* approved by *{user}*.\n\n"
            "Starting the implementation workflow..."
        ),
    )


async def _reject_implementation(
    target: ActionTarget, user: str, settings: Settings
) -> ActionResult:
    n = target.issue_number
    # Both calls are best-effort: a failed comment does not block the close
    await add_issue_comment(
        target.owner,
        target.repo,
        n,
        f"## ❌ Rejected\n\nRejected in Slack by {user}.",
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    await close_issue(
        target.owner,
        target.repo,
        n,
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    logger.info("Issue %s/%s#%d rejected by %s", target.owner, target.repo, n, user)
    return replace_message(
        summary=f"❌ Issue #{n} rejected",
        detail=f"❌ *Issue #{n}* rejected by *{user}*.\n\nThe issue has been closed.",
    )


ACTION_HANDLERS: dict[SlackAction, ActionHandler] = {
    SlackAction.CREATE_PLAN: _create_plan,
    SlackAction.REPLAN: _replan,
    SlackAction.APPROVE_IMPLEMENTATION: _approve_implementation,
    SlackAction.REJECT_IMPLEMENTATION: _reject_implementation,
}

_unhandled = set(SlackAction) - ACTION_HANDLERS.keys()
if _unhandled:
    raise RuntimeError(
        f"No handler for Slack actions: {sorted(a.value for a in _unhandled)}"
    )


async def route_block_action(
    payload: BlockActionsPayload, settings: Settings
) -> ActionResult:
    """Run the effect for the first action in a block_actions payload.

    Unknown action ids (e.g. link buttons) are acknowledged without touching
    the action value.

    Raises:
        PayloadError: If there is no action, or a routable action carries a
            value that does not resolve to an issue.
    """
    if not payload.actions:
        raise PayloadError("No action found")
    action = payload.actions[0]

    try:
        slack_action = SlackAction(action.action_id)
    except ValueError:
        logger.info("Acknowledging unrouted Slack action %r", action.action_id)
        return acknowledge()

    target = parse_action_token(
        action.value,
        default_owner=settings.github_repo_owner,
        default_repo=settings.github_repo_name,
    )
    logger.info(
        "Slack action %s on %s/%s#%d by %s",
        slack_action.value,
        target.owner,
        target.repo,
        target.issue_number,
        payload.user_name,
    )
    return await ACTION_HANDLERS[slack_action](target, payload.user_name, settings)


async def route_payload(payload: SlackPayload, settings: Settings) -> ActionResult:
    """Turn any decoded Slack payload into the response to send back."""
    if isinstance(payload, UrlVerificationPayload):
        return ActionResult(200, {"challenge": payload.challenge})
    if isinstance(payload, BlockActionsPayload):
        return await route_block_action(payload, settings)
    logger.debug("Acknowledging Slack payload of type %r", payload.type)
    return acknowledge()
