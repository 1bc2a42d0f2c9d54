"""Send a signed Slack button click to a running API, for local testing.

Usage:
    python -m scripts.send_slack_action create_plan acme/widgets|7
    python -m scripts.send_slack_action reject_implementation "|7" --user dana
    python -m scripts.send_slack_action --challenge abc123
    python -m scripts.send_slack_action create_plan acme/widgets|7 --url http://localhost:8000

Signs with SLACK_SIGNING_SECRET from the environment (or .env), exactly as
Slack would, so the request goes through the real verification path.
"""

import argparse
import asyncio
import json
import logging
import sys
import time
import urllib.parse

import httpx

from feedback_api.config import get_settings
from feedback_api.services.signature import compute_slack_signature

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("send_slack_action")


def build_payload(args: argparse.Namespace) -> dict:
    if args.challenge:
        return {"type": "url_verification", "challenge": args.challenge}
    return {
        "type": "block_actions",
        "user": {"id": "ULOCAL", "name": args.user},
        "actions": [{"action_id": args.action_id, "value": args.value, "type": "button"}],
    }


async def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("action_id", nargs="?", default="create_plan")
    parser.add_argument("value", nargs="?", default="")
    parser.add_argument("--user", default="local-tester")
    parser.add_argument("--challenge", help="Send a url_verification handshake instead")
    parser.add_argument("--url", default="http://localhost:8000")
    args = parser.parse_args()

    secret = get_settings().slack_signing_secret
    if not secret:
        logger.error("SLACK_SIGNING_SECRET is not set")
        return 1

    body = urllib.parse.urlencode({"payload": json.dumps(build_payload(args))})
    timestamp = str(int(time.time()))
    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": compute_slack_signature(secret, timestamp, body.encode()),
    }

    async with httpx.AsyncClient(timeout=30.0) as client:
        resp = await client.post(
            f"{args.url.rstrip('/')}/api/v1/webhooks/slack", content=body, headers=headers
        )

    print(f"HTTP {resp.status_code}")
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
    return 0 if resp.is_success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
