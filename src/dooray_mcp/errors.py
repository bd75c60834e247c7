"""Exception types raised by the Dooray client and handlers."""
from typing import Any, Optional


class DoorayError(Exception):
    """Base class for all Dooray MCP faults."""


class AuthenticationError(DoorayError):
    """Missing credential at startup, or HTTP 401 from the API."""


class DoorayAPIError(DoorayError):
    """Remote-reported failure.

    Raised for non-2xx HTTP responses and for 2xx responses whose envelope
    header reports ``isSuccessful: false``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, raw_body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.raw_body = raw_body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code!r})"


class TransportError(DoorayAPIError):
    """Network-level failure, or an unexpected status in a file transfer."""


def format_error(error: BaseException) -> str:
    """Human-readable one-line description of an exception."""
    if isinstance(error, TransportError):
        return error.message
    if isinstance(error, DoorayAPIError):
        if error.status_code is not None:
            return f"{error.message} (HTTP {error.status_code})"
        return error.message
    message = str(error)
    return message or type(error).__name__
