"""
Error taxonomy for GetIPIntel lookups.

Every failed lookup is reported as exactly one of these exceptions. None of
them are retried internally; the caller decides what to do next.
"""

from typing import Optional


class IntelError(Exception):
    """Base class for all lookup failures."""


class TransportError(IntelError):
    """The HTTP exchange itself did not complete."""


class TransportConnectionError(TransportError):
    """Connection refused, reset, DNS or TLS failure."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Connection failed: {type(cause).__name__}: {cause}")


class RequestTimeoutError(TransportError):
    """The request did not complete within the configured timeout."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Request timed out after {timeout_ms} ms")


class IncompleteResponseError(TransportError):
    """The connection was terminated while the response was still being received."""

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__("The connection was terminated while the message was still being sent")


class HttpStatusError(IntelError):
    """The service answered with a status other than 200."""

    def __init__(self, status_code: int, body: str = ''):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP request Failed. Status Code: {status_code}")


class UnexpectedContentTypeError(IntelError):
    """The response is not JSON."""

    def __init__(self, received: Optional[str]):
        self.received = received
        super().__init__(f"Invalid content-type. Expected application/json but received {received}")


class MalformedBodyError(IntelError):
    """The response body could not be parsed as JSON."""

    def __init__(self, cause: BaseException, body: str = ''):
        self.cause = cause
        self.body = body
        super().__init__(f"Malformed JSON body: {cause}")


class ServiceError(IntelError):
    """
    The service reported a failure.

    The raw body is kept verbatim; the service encodes its error messages as
    either plain text or JSON.
    """

    def __init__(self, raw_body: str):
        self.raw_body = raw_body
        super().__init__(raw_body)
