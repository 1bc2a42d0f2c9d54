"""
Feedback Triage API

Turns user feedback into GitHub issues, announces them in Slack, and
handles the Slack button clicks that drive planning, implementation and
rejection.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feedback_api.config import Settings, get_settings
from feedback_api.logging_config import configure_logging
from feedback_api.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from feedback_api.routers import feedback, webhooks
from feedback_api.services.http_client import close_shared_client

logger = logging.getLogger(__name__)

settings = get_settings()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    configure_logging(debug=settings.debug)
    if not settings.slack_signing_secret:
        logger.warning("SLACK_SIGNING_SECRET is empty; Slack webhooks will be rejected")
    yield
    await close_shared_client()


app = FastAPI(
    title="Feedback Triage API",
    description="User feedback to GitHub issues, triaged from Slack",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)

# CORS (the feedback form posts from the web frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

# Request ID (added last so it runs first, as the outermost middleware)
app.add_middleware(RequestIDMiddleware)

# Routers
app.include_router(feedback.router, prefix="/api/v1")
app.include_router(webhooks.router, prefix="/api/v1")


def _run_health_checks(s: Settings) -> dict[str, Any]:
    """Report which integrations have the configuration they need."""
    checks = {
        "github": "ok" if s.github_configured else "fail",
        "slack": "ok" if s.slack_configured and s.slack_signing_secret else "fail",
    }
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded — failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    return {
        "status": overall,
        "service": "feedback-triage-api",
        "version": VERSION,
        "checks": checks,
    }


@app.get("/api/v1/health")
async def health_check(s: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Health check reporting configuration status."""
    return _run_health_checks(s)
