"""Feedback submission endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from feedback_api.config import Settings, get_settings
from feedback_api.errors import (
    ConfigError,
    InvalidJSON,
    RemoteCallError,
    RequestValidationFailed,
    TriageError,
)
from feedback_api.models.feedback import (
    ErrorResponse,
    FeedbackCategory,
    FeedbackResponse,
    FeedbackSubmission,
)
from feedback_api.services.feedback import submit_feedback

router = APIRouter(prefix="/feedback", tags=["feedback"])
logger = logging.getLogger(__name__)


def _error_response(error: TriageError) -> JSONResponse:
    body = ErrorResponse(error=error.message, code=error.code)
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


def _describe_validation_error(e: ValidationError) -> str:
    """Turn the first pydantic error into a message naming the field."""
    err = e.errors()[0]
    field = ".".join(str(part) for part in err["loc"]) or "body"
    if err["type"] in ("missing", "string_too_short"):
        return f"{field} is required"
    if err["type"] == "string_type":
        return f"{field} must be a string"
    if err["type"] == "enum" or field == "category":
        choices = ", ".join(c.value for c in FeedbackCategory)
        return f"{field} must be one of: {choices}"
    return f"{field}: {err['msg']}"


def parse_submission(raw_body: bytes) -> FeedbackSubmission:
    """Parse and validate a raw JSON request body.

    Raises:
        InvalidJSON: If the body is not JSON.
        RequestValidationFailed: If it is not an object or a field is invalid.
    """
    try:
        data = json.loads(raw_body)
    except ValueError as e:
        raise InvalidJSON("Invalid JSON") from e

    if not isinstance(data, dict):
        raise RequestValidationFailed("Request body must be a JSON object")

    try:
        return FeedbackSubmission.model_validate(data)
    except ValidationError as e:
        raise RequestValidationFailed(_describe_validation_error(e)) from e


@router.post(
    "",
    status_code=201,
    response_model=FeedbackResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_feedback(request: Request, settings: Settings = Depends(get_settings)):
    """Submit feedback. Created as a GitHub issue and announced in Slack."""
    try:
        submission = parse_submission(await request.body())
        issue = await submit_feedback(submission, settings)
    except (InvalidJSON, RequestValidationFailed) as e:
        return _error_response(e)
    except ConfigError as e:
        logger.error("Feedback rejected: %s", e.message)
        return _error_response(e)
    except Exception:
        logger.exception("POST /api/v1/feedback error")
        return _error_response(RemoteCallError("Failed to submit feedback"))

    return FeedbackResponse(issue_number=issue.number, issue_url=issue.url)
