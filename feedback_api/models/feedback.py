"""Feedback submission models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from feedback_api.services.action_token import encode_action_token


class FeedbackCategory(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    QUESTION = "question"
    OTHER = "other"


class FeedbackSubmission(BaseModel):
    """User feedback form submission.

    Strings are trimmed before the length check, so whitespace-only values
    are rejected the same way as missing ones.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: FeedbackCategory = FeedbackCategory.OTHER


class TrackedIssue(BaseModel):
    """A GitHub issue created from a feedback submission."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., gt=0)
    url: str
    owner: str
    repo: str

    @property
    def action_token(self) -> str:
        """Value embedded in Slack buttons to identify this issue."""
        return encode_action_token(self.owner, self.repo, self.number)


class FeedbackResponse(BaseModel):
    """Response after a successful feedback submission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    issue_number: int
    issue_url: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the intake endpoint."""

    success: bool = False
    error: str
    code: str
