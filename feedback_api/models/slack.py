"""Slack interactivity payload models.

Only the fields the webhook router reads are declared; everything else
Slack sends is ignored.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class SlackAction(str, Enum):
    """Button action ids the webhook knows how to route."""

    CREATE_PLAN = "create_plan"
    REPLAN = "replan"
    APPROVE_IMPLEMENTATION = "approve_implementation"
    REJECT_IMPLEMENTATION = "reject_implementation"


class SlackUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    username: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.username or "Unknown"


class BlockAction(BaseModel):
    """A single element of the ``actions`` list in a block_actions payload."""

    model_config = ConfigDict(extra="ignore")

    action_id: str
    value: str | None = None


class UrlVerificationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["url_verification"]
    challenge: str


class BlockActionsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["block_actions"]
    actions: list[BlockAction] = []
    user: SlackUser | None = None

    @property
    def user_name(self) -> str:
        return self.user.display_name if self.user else "Unknown"


class UnknownPayload(BaseModel):
    """Any payload type the router does not act on."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None


SlackPayload = UrlVerificationPayload | BlockActionsPayload | UnknownPayload
