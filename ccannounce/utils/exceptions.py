"""Exception hierarchy for ccAnnounce.

Per-cycle announce failures are wrapped in :class:`TrackerAnnounceError` and
delivered through the result channel; only construction-time violations are
raised to the caller.
"""

from __future__ import annotations

from typing import Any


class CCAnnounceError(Exception):
    """Base exception for all ccAnnounce errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize ccAnnounce error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class NetworkError(CCAnnounceError):
    """Network-related errors."""


class TrackerError(NetworkError):
    """Tracker communication errors."""


class TrackerAnnounceError(TrackerError):
    """A failed announce cycle, tagged with the info hash it was made for."""

    def __init__(self, info_hash: str, error: BaseException):
        """Wrap ``error`` raised while announcing ``info_hash``."""
        super().__init__(
            f"Announce failed for {info_hash}: {error}",
            details={"info_hash": info_hash},
        )
        self.info_hash = info_hash
        self.error = error
        self.__cause__ = error


class ValidationError(CCAnnounceError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class TrackerConfigurationError(ValidationError):
    """Invalid arguments given when constructing a tracker."""


class BencodeError(ValidationError):
    """Bencode decoding errors."""
