"""InstantDB client exceptions."""


class InstantError(Exception):
    """Base exception for InstantDB client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(InstantError):
    """The HTTP exchange could not be completed (network, DNS, TLS, timeout)."""

    pass


class APIError(InstantError):
    """The service answered with a non-success status.

    Attributes:
        status: Status line text, e.g. "404 Not Found".
        status_code: Numeric HTTP status.
        body: Raw response body.
        message: Best-effort message extracted from the body.
    """

    def __init__(self, status: str, body: str, message: str, status_code: int = 0):
        super().__init__(message)
        self.status = status
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return f"API error: Status: {self.status}, Message: {self.message}, Body: {self.body}"


class DecodeError(InstantError):
    """A successful response did not match the expected shape."""

    pass


class ConfigError(InstantError):
    """Client configuration is missing or invalid."""

    pass
