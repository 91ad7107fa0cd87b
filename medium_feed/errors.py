"""
Error taxonomy for the Medium feed pipeline.

Fetch and input-validation failures are raised to the caller. Extraction
never raises. Cache persistence problems are reported as PersistenceWarning
and never abort a request.
"""

from __future__ import annotations

from typing import Any


class MediumFeedError(Exception):
    """Base class for errors reported to pipeline callers."""

    def to_payload(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "message": str(self)}


class NetworkError(MediumFeedError):
    """Transport failure reaching the source (DNS, timeout, connection reset)."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class FetchError(MediumFeedError):
    """The source answered with a non-success HTTP status."""

    def __init__(self, status: int, url: str | None = None, message: str | None = None):
        super().__init__(message or f"Failed to fetch {url}: {status}")
        self.status = status
        self.url = url

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["status"] = self.status
        return payload


class InputError(MediumFeedError):
    """The caller supplied missing or disallowed input."""


class PersistenceWarning(UserWarning):
    """The cache snapshot could not be read or written."""
