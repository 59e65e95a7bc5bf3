"""Errors raised by the client.

Transport and status errors abort a request as a single terminal
failure.  :class:`FrameDecodeWarning` is the one non-fatal member: the
decoder logs it and moves on to the next frame.
"""


class LyrebirdError(Exception):
    """Base class for all client errors."""


class TransportError(LyrebirdError):
    """The request never completed (connection, TLS, timeout...)."""


class StatusError(LyrebirdError):
    """The API answered with a non-200 status.

    Args:
        status_code: Numeric HTTP status.
        error_type: ``error.type`` from the API error envelope, if any.
        message: ``error.message`` from the API error envelope, if any.
    """

    default_message = "Unexpected status code"

    def __init__(
        self,
        status_code: int,
        error_type: str | None = None,
        message: str | None = None,
    ):
        self.status_code = status_code
        self.error_type = error_type
        self.message = message
        detail = f"{self.default_message}: {status_code}"
        if error_type or message:
            detail += f" ({error_type or 'error'}: {message or ''})"
        super().__init__(detail)


class BadRequest(StatusError):
    """400: the request parameters were rejected."""

    default_message = "Bad request. Check your request parameters"

    def __init__(self, error_type: str | None = None, message: str | None = None):
        super().__init__(400, error_type, message)


class Unauthorized(StatusError):
    """401: the API key was rejected."""

    default_message = "Unauthorized. Check your authorization"

    def __init__(self, error_type: str | None = None, message: str | None = None):
        super().__init__(401, error_type, message)


class UnexpectedStatus(StatusError):
    """Any other non-200 status; ``status_code`` carries the code."""


class ResponseParseError(LyrebirdError):
    """A non-streaming body did not match the expected response shape."""

    def __init__(self, body: str):
        self.body = body
        super().__init__(f"Unable to parse response body: {body[:200]!r}")


class StreamError(LyrebirdError):
    """The API reported an error event in the middle of a stream."""

    def __init__(self, error_type: str, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(f"{error_type}: {message}")


class EncodingError(LyrebirdError):
    """Streamed bytes are not valid UTF-8. Fatal for the whole stream."""


class FrameDecodeWarning(UserWarning):
    """A single frame's payload did not match any known stream event."""

    def __init__(self, payload: str, reason: str = ""):
        self.payload = payload
        self.reason = reason
        super().__init__(f"Couldn't parse stream event: {payload}")
