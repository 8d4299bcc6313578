"""Custom exception classes for crossloom.

Query builders never raise: invalid combinations are normalized when the
request is rendered. Everything that can go wrong on the wire is a
:class:`TransportError` and is propagated to the caller unchanged.
"""

import httpx


class CrossloomError(Exception):
    """Base exception class for all crossloom errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        if self.response is not None:
            url_info = getattr(getattr(self.response, "request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class TransportError(CrossloomError):
    """Raised when the transport could not produce a response envelope."""


class APIError(TransportError):
    """The Crossref API answered with a non-success status (4xx/5xx)."""


class NotFoundError(APIError):
    """The requested resource does not exist (404 Not Found)."""


class RateLimitError(APIError):
    """The API rate limit was hit (429 Too Many Requests)."""


class TimeoutError(TransportError):
    """An HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class NetworkError(TransportError):
    """A connection could not be established or was interrupted."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class ResponseDecodeError(TransportError):
    """The response body is not a Crossref JSON envelope."""


class UnexpectedMessageError(CrossloomError):
    """The envelope carries a different message type than the one requested.

    Attributes:
        expected: The message type the caller asked for (e.g. ``work``).
        got: The message type reported by the server.
    """

    def __init__(self, expected: str, got: str | None):
        super().__init__(f"Expected message of type '{expected}' but got '{got}'")
        self.expected = expected
        self.got = got


class ValidationError(CrossloomError):
    """Client-side misuse detected before a request is sent."""


class ConfigurationError(CrossloomError):
    """Represents an error in the library's configuration."""

    def __init__(self, message: str):
        super().__init__(message, response=None)
