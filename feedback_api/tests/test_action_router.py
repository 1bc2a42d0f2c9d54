"""Tests for routing Slack button clicks to GitHub effects."""

from unittest.mock import AsyncMock, MagicMock, call

import httpx
import pytest

from feedback_api.errors import PayloadError
from feedback_api.models.slack import (
    BlockActionsPayload,
    SlackAction,
    UnknownPayload,
    UrlVerificationPayload,
)
from feedback_api.services.action_router import (
    ACTION_HANDLERS,
    IMPLEMENT_EVENT,
    PLAN_EVENT,
    route_block_action,
    route_payload,
)

ROUTER = "feedback_api.services.action_router"


@pytest.fixture
def github(mocker):
    """Patch the three GitHub effects the router can trigger."""
    manager = MagicMock()
    manager.attach_mock(
        mocker.patch(
            f"{ROUTER}.dispatch_repository_event", new_callable=AsyncMock, return_value=True
        ),
        "dispatch",
    )
    manager.attach_mock(
        mocker.patch(f"{ROUTER}.add_issue_comment", new_callable=AsyncMock), "comment"
    )
    manager.attach_mock(mocker.patch(f"{ROUTER}.close_issue", new_callable=AsyncMock), "close")
    return manager


def _payload(make_block_actions, action_id, value="acme/repo|7", **kwargs):
    return BlockActionsPayload.model_validate(make_block_actions(action_id, value, **kwargs))


def _text(result) -> str:
    return result.body["text"] + " " + result.body["blocks"][0]["text"]["text"]


def test_every_action_has_a_handler():
    assert set(ACTION_HANDLERS) == set(SlackAction)


async def test_url_verification_echoes_challenge(mock_settings):
    result = await route_payload(
        UrlVerificationPayload(type="url_verification", challenge="abc123"), mock_settings
    )
    assert result.status_code == 200
    assert result.body == {"challenge": "abc123"}


async def test_unknown_payload_type_is_acknowledged(mock_settings, github):
    result = await route_payload(UnknownPayload(type="view_submission"), mock_settings)
    assert result.body == {"ok": True}
    github.dispatch.assert_not_called()


@pytest.mark.parametrize(
    "action_id, event_type, phrase",
    [
        ("create_plan", PLAN_EVENT, "Plan creation"),
        ("replan", PLAN_EVENT, "Re-plan"),
        ("approve_implementation", IMPLEMENT_EVENT, "approved"),
    ],
)
async def test_dispatch_actions(mock_settings, github, make_block_actions, action_id, event_type, phrase):
    payload = _payload(make_block_actions, action_id, name="Dana")

    result = await route_payload(payload, mock_settings)

    github.dispatch.assert_awaited_once_with(
        "acme",
        "repo",
        event_type,
        7,
        token="test-token",
        api_url="https://api.github.com",
    )
    github.comment.assert_not_called()
    github.close.assert_not_called()
    assert result.status_code == 200
    assert result.body["replace_original"] is True
    assert result.body["response_type"] == "in_channel"
    text = _text(result)
    assert "Dana" in text
    assert "#7" in text
    assert phrase in text


async def test_reject_comments_then_closes(mock_settings, github, make_block_actions):
    payload = _payload(make_block_actions, "reject_implementation", "acme/repo|7", name="Dana")

    result = await route_payload(payload, mock_settings)

    github.dispatch.assert_not_called()
    assert github.mock_calls[:2] == [
        call.comment(
            "acme",
            "repo",
            7,
            "## ❌ Rejected\n\nRejected in Slack by Dana.",
            token="test-token",
            api_url="https://api.github.com",
        ),
        call.close("acme", "repo", 7, token="test-token", api_url="https://api.github.com"),
    ]
    text = _text(result)
    assert "7" in text
    assert "rejected" in text
    assert "Dana" in text
    assert "closed" in text


async def test_reject_closes_even_when_comment_fails(mock_settings, make_block_actions, monkeypatch):
    calls = []

    async def failing_post(self, url, **kwargs):
        calls.append(("post", url))
        return httpx.Response(500)

    async def mock_patch(self, url, **kwargs):
        calls.append(("patch", url))
        return httpx.Response(200, json={"state": "closed"})

    monkeypatch.setattr(httpx.AsyncClient, "post", failing_post)
    monkeypatch.setattr(httpx.AsyncClient, "patch", mock_patch)
    payload = _payload(make_block_actions, "reject_implementation", "acme/repo|7", name="Dana")

    result = await route_payload(payload, mock_settings)

    assert calls == [
        ("post", "https://api.github.com/repos/acme/repo/issues/7/comments"),
        ("patch", "https://api.github.com/repos/acme/repo/issues/7"),
    ]
    assert "rejected" in _text(result)


async def test_failed_dispatch_leaves_message_unchanged(mock_settings, github, make_block_actions):
    github.dispatch.return_value = False
    payload = _payload(make_block_actions, "create_plan")

    result = await route_payload(payload, mock_settings)

    assert result.status_code == 200
    assert result.body == {"ok": True}


async def test_repeated_clicks_are_not_deduplicated(mock_settings, github, make_block_actions):
    payload = _payload(make_block_actions, "create_plan")

    first = await route_payload(payload, mock_settings)
    second = await route_payload(payload, mock_settings)

    assert github.dispatch.await_count == 2
    assert first.body["replace_original"] is True
    assert second.body["replace_original"] is True


async def test_token_without_repo_uses_configured_defaults(mock_settings, github, make_block_actions):
    payload = _payload(make_block_actions, "approve_implementation", "|15")

    await route_payload(payload, mock_settings)

    args = github.dispatch.await_args.args
    assert args == ("testowner", "testrepo", IMPLEMENT_EVENT, 15)


@pytest.mark.parametrize("value", ["acme/repo|abc", "acme/repo|1/2", "garbage", None])
async def test_invalid_action_value_makes_no_remote_call(mock_settings, github, make_block_actions, value):
    payload = _payload(make_block_actions, "create_plan", value)

    with pytest.raises(PayloadError, match="Invalid action value"):
        await route_block_action(payload, mock_settings)

    github.dispatch.assert_not_called()


async def test_unresolvable_without_defaults(override_settings, github, make_block_actions):
    settings = override_settings(github_repo_owner="", github_repo_name="")
    payload = _payload(make_block_actions, "reject_implementation", "|7")

    with pytest.raises(PayloadError):
        await route_block_action(payload, settings)

    github.comment.assert_not_called()
    github.close.assert_not_called()


async def test_no_actions(mock_settings, github):
    payload = BlockActionsPayload(type="block_actions", actions=[])

    with pytest.raises(PayloadError, match="No action found"):
        await route_block_action(payload, mock_settings)


async def test_unrecognized_action_is_acknowledged(mock_settings, github, make_block_actions):
    # Link buttons also post a block_actions callback
    payload = _payload(make_block_actions, "view_issue", None)

    result = await route_block_action(payload, mock_settings)

    assert result.body == {"ok": True}
    github.dispatch.assert_not_called()
    github.comment.assert_not_called()
    github.close.assert_not_called()


async def test_only_first_action_is_used(mock_settings, github, make_block_actions):
    data = make_block_actions("replan", "acme/repo|3")
    data["actions"].append({"action_id": "reject_implementation", "value": "acme/repo|4"})

    await route_payload(BlockActionsPayload.model_validate(data), mock_settings)

    assert github.dispatch.await_count == 1
    github.close.assert_not_called()


async def test_unknown_user_name(mock_settings, github):
    payload = BlockActionsPayload.model_validate(
        {"type": "block_actions", "actions": [{"action_id": "replan", "value": "a/b|1"}]}
    )

    result = await route_payload(payload, mock_settings)

    assert "Unknown" in _text(result)
