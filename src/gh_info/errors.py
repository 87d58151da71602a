"""
Fetch error classes for profile requests.

This module defines the failures a profile fetch can end in:
- NetworkError: Connection or DNS failure before a response arrived
- RequestTimeoutError: The request exceeded its deadline
- ProtocolError: The API answered with a non-2xx status
- DecodeError: The response body was not a valid profile
- InvalidUsernameError: The username is empty or a dot segment

All of them derive from FetchError so the interaction loop can absorb any
fetch failure into its view state without catching unrelated exceptions.
"""


class FetchError(Exception):
    """
    Base class for every failure of a single profile fetch.

    Attributes:
        username: The profile that was being fetched
    """

    def __init__(self, username: str, message: str) -> None:
        self.username = username
        super().__init__(message)


class NetworkError(FetchError):
    """
    Raised when the request never produced a response.

    Attributes:
        username: The profile that was being fetched
        reason: Description of the transport failure
    """

    def __init__(self, username: str, reason: str) -> None:
        self.reason = reason
        super().__init__(username, f"network error fetching '{username}': {reason}")


class RequestTimeoutError(NetworkError):
    """
    Raised when the request exceeded the configured timeout.

    Attributes:
        username: The profile that was being fetched
        timeout: Deadline in seconds, if known
    """

    def __init__(self, username: str, timeout: float | None = None) -> None:
        self.timeout = timeout
        reason = f"timed out after {timeout:g}s" if timeout else "timed out"
        super().__init__(username, reason)


class ProtocolError(FetchError):
    """
    Raised when the API answers with a non-success HTTP status.

    Attributes:
        username: The profile that was being fetched
        status_code: HTTP status returned by the API
        reason: Reason phrase or API message
    """

    def __init__(self, username: str, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        message = f"HTTP {status_code} fetching '{username}'"
        if reason:
            message += f": {reason}"
        super().__init__(username, message)


class DecodeError(FetchError):
    """Raised when the response body cannot be decoded into a profile."""

    def __init__(self, username: str, reason: str) -> None:
        self.reason = reason
        super().__init__(username, f"invalid response for '{username}': {reason}")


class InvalidUsernameError(FetchError):
    """Raised before any request when the username cannot name a user."""

    def __init__(self, username: str) -> None:
        super().__init__(username, f"invalid username {username!r}")
