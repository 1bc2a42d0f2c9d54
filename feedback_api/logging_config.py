"""Process-wide logging setup."""

import logging

from feedback_api.middleware import RequestIDFilter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Send application logs to stderr, tagged with the current request ID."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIDFilter())

    root = logging.getLogger("feedback_api")
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False
