"""Decode Slack interactivity requests.

Slack posts interactive callbacks as ``application/x-www-form-urlencoded``
with a single ``payload`` field holding a JSON document.
"""

import json
import logging
import urllib.parse

from pydantic import BaseModel, ValidationError

from feedback_api.errors import PayloadError
from feedback_api.models.slack import (
    BlockActionsPayload,
    SlackPayload,
    UnknownPayload,
    UrlVerificationPayload,
)

logger = logging.getLogger(__name__)

_PAYLOAD_MODELS: dict[str, type[BaseModel]] = {
    "url_verification": UrlVerificationPayload,
    "block_actions": BlockActionsPayload,
}


def decode_payload(raw_body: bytes | str) -> SlackPayload:
    """Extract and parse the ``payload`` field of a form-encoded body.

    Raises:
        PayloadError: If the field is missing, is not a JSON object, or does
            not match the shape expected for its ``type``.
    """
    body_str = raw_body.decode("utf-8", errors="replace") if isinstance(raw_body, bytes) else raw_body
    form = urllib.parse.parse_qs(body_str)
    values = form.get("payload")
    if not values or not values[0]:
        raise PayloadError("Missing payload")

    try:
        data = json.loads(values[0])
    except json.JSONDecodeError as e:
        logger.warning("Slack payload is not valid JSON: %s", e)
        raise PayloadError("Invalid payload") from e

    if not isinstance(data, dict):
        raise PayloadError("Invalid payload")

    payload_type = data.get("type")
    model: type[BaseModel] = UnknownPayload
    if isinstance(payload_type, str):
        model = _PAYLOAD_MODELS.get(payload_type, UnknownPayload)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Slack %s payload failed validation: %d error(s)",
            payload_type,
            e.error_count(),
        )
        raise PayloadError("Invalid payload") from e
