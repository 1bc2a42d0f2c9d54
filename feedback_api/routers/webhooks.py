"""Slack interactivity webhook.

Slack calls this endpoint when someone clicks a button on a feedback
notification. The request is authenticated with the app signing secret
before the payload is even parsed.
"""

import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from feedback_api.config import Settings, get_settings
from feedback_api.errors import PayloadError, SignatureError
from feedback_api.services.action_router import route_payload
from feedback_api.services.signature import verify_slack_signature
from feedback_api.services.slack_payload import decode_payload

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger(__name__)


@router.post("/slack")
async def slack_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    x_slack_signature: str = Header(default=""),
    x_slack_request_timestamp: str = Header(default=""),
):
    """Handle a Slack interactive callback (button click or URL verification)."""
    raw_body = await request.body()

    try:
        if not verify_slack_signature(
            settings.slack_signing_secret,
            x_slack_signature,
            x_slack_request_timestamp,
            raw_body,
        ):
            raise SignatureError("Invalid signature")

        payload = decode_payload(raw_body)
        result = await route_payload(payload, settings)
    except SignatureError as e:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Rejected Slack webhook from %s: bad signature", client_ip)
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except PayloadError as e:
        logger.warning("Rejected Slack webhook: %s", e.message)
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception:
        logger.exception("Slack webhook error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return JSONResponse(status_code=result.status_code, content=result.body)
