"""Error taxonomy for the Gemina client.

Every error raised by this package derives from ``GeminaError`` so the
command-line entry point can report it with a single handler.
"""

from __future__ import annotations


class GeminaError(Exception):
    """Base error for all client failures."""


class SourceError(GeminaError):
    """Raised when a local source file is missing, unsupported or too large."""


class TransportError(GeminaError):
    """Raised when an HTTP call fails below the HTTP layer (connection, timeout)."""


class ResponseError(GeminaError):
    """An HTTP response carried a status code outside the accepted set."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error! status: {status_code} - {body}")


class SubmissionError(ResponseError):
    """Raised when the upload endpoint answers outside the 2xx range."""


class PollingError(ResponseError):
    """Raised when the status endpoint answers outside 200 / 202 / 404."""


class PollingTimeoutError(GeminaError):
    """Raised when a bounded poll policy runs out of attempts or time."""

    def __init__(self, external_id: str, attempts: int, elapsed: float) -> None:
        self.external_id = external_id
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(
            f"Document {external_id} not ready after {attempts} attempts ({elapsed:.1f}s)"
        )
