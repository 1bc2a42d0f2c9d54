"""Error taxonomy shared by the intake and webhook endpoints.

Each error carries the HTTP status it maps to and, for the intake API,
the machine-readable ``code`` returned in the response envelope.
"""


class TriageError(Exception):
    """Base class for errors the API turns into JSON responses."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidJSON(TriageError):
    """Request body could not be parsed as JSON."""

    status_code = 400
    code = "INVALID_JSON"


class RequestValidationFailed(TriageError):
    """Caller input is malformed. The message names the offending field."""

    status_code = 400
    code = "VALIDATION_ERROR"


class SignatureError(TriageError):
    """Inbound webhook signature is missing, wrong, or stale."""

    status_code = 401
    code = "INVALID_SIGNATURE"


class PayloadError(TriageError):
    """Inbound webhook payload or action value could not be decoded."""

    status_code = 400
    code = "INVALID_PAYLOAD"


class ConfigError(TriageError):
    """Required process-wide configuration is missing."""

    status_code = 500
    code = "CONFIG_ERROR"


class RemoteCallError(TriageError):
    """A load-bearing call to GitHub or Slack failed."""

    status_code = 500
    code = "INTERNAL_ERROR"
