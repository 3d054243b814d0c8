"""Exception types for Last.fm Jam Sync."""

from typing import Optional


class JamSyncError(Exception):
    """Base class for all sync errors."""


class ConfigurationError(JamSyncError):
    """Required settings (API key, user) are missing or invalid."""


class TransportError(JamSyncError):
    """An HTTP request could not be completed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Request to {url} failed: {message}")
        self.url = url


class UpstreamError(JamSyncError):
    """The loved-tracks request failed; the whole sync is aborted."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidationError(JamSyncError):
    """The cache invalidation hook failed."""
