"""Exceptions raised by the Met collection client."""

from __future__ import annotations


class MetAPIError(Exception):
    """Base class for every error raised by the client."""


class TransportError(MetAPIError):
    """The request never produced a response (DNS, connection, timeout)."""


class StatusError(MetAPIError):
    """The API answered with something other than HTTP 200."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"got non-200 response code: {status_code} ({url})")
        self.status_code = status_code
        self.url = url


class DecodeError(MetAPIError):
    """The response body is not JSON or does not have the expected shape."""


class ValidationError(MetAPIError, ValueError):
    """Options were rejected before any request was made."""
