from __future__ import annotations


class SleeperError(Exception):
    """Base class for failures while building a roster aggregation.

    Attributes:
        message: Human-readable error description.
        cause: Optional underlying exception that caused this error.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class UserNotFoundError(SleeperError):
    """The username lookup did not resolve to a Sleeper user."""

    def __init__(self, username: str, cause: Exception | None = None) -> None:
        super().__init__(f"User not found: {username}", cause)
        self.username = username


class NetworkFailureError(SleeperError):
    """A request failed, returned a non-success status, or had an undecodable body."""

    def __init__(self, url: str, cause: Exception | None = None) -> None:
        super().__init__(f"Request to {url} failed", cause)
        self.url = url


class RequestTimeoutError(NetworkFailureError):
    def __init__(self, url: str, cause: Exception | None = None) -> None:
        super().__init__(url, cause)
        self.message = f"Request to {url} timed out"


class EnrichmentDegradedError(SleeperError):
    """The identifier crosswalk could not be loaded; external ids will be missing."""


def user_message(error: SleeperError) -> str:
    """Short message for display, keeping not-found apart from other failures."""
    if isinstance(error, UserNotFoundError):
        return "User not found"
    if isinstance(error, RequestTimeoutError):
        return "Request timed out, please try again"
    return "Could not load data from Sleeper"
