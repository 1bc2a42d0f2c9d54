"""Slack request signature verification.

Slack signs every request with HMAC-SHA256 over ``v0:{timestamp}:{body}``
using the app's signing secret and sends the result as
``X-Slack-Signature: v0=<hex>``. A request is accepted only if the
signature matches and the timestamp is within ``max_age`` seconds of now.
"""

import hashlib
import hmac
import logging
import time

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"
DEFAULT_MAX_AGE = 300  # seconds


def compute_slack_signature(signing_secret: str, timestamp: str, body: bytes) -> str:
    """Return the ``v0=<hex>`` signature Slack would send for this request."""
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(signing_secret.encode(), basestring, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    signing_secret: str,
    signature: str,
    timestamp: str,
    body: bytes | str,
    *,
    now: float | None = None,
    max_age: int = DEFAULT_MAX_AGE,
) -> bool:
    """Check a Slack request signature and its freshness.

    Fails closed: returns False when no secret is configured, when the
    timestamp is missing or not an integer, when the request is older (or
    further in the future) than ``max_age`` seconds, or when the signature
    does not match. Never raises on malformed input.
    """
    if not signing_secret:
        logger.warning("Slack signing secret not configured, rejecting request")
        return False

    try:
        ts = int(timestamp)
    except (TypeError, ValueError):
        logger.debug("Rejecting Slack request with non-integer timestamp %r", timestamp)
        return False

    current = int(now if now is not None else time.time())
    if abs(current - ts) > max_age:
        logger.debug("Rejecting stale Slack request (timestamp %d, now %d)", ts, current)
        return False

    raw = body.encode() if isinstance(body, str) else body
    expected = compute_slack_signature(signing_secret, timestamp, raw)
    return hmac.compare_digest(expected.encode(), (signature or "").encode())
