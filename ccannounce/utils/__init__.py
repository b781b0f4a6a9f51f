"""Shared utilities and infrastructure.

This module contains common utilities used throughout the application.
"""

from __future__ import annotations

from ccannounce.utils.exceptions import (
    BencodeError,
    CCAnnounceError,
    ConfigurationError,
    NetworkError,
    TrackerAnnounceError,
    TrackerConfigurationError,
    TrackerError,
    ValidationError,
)
from ccannounce.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BencodeError",
    "CCAnnounceError",
    "ConfigurationError",
    "NetworkError",
    "TrackerAnnounceError",
    "TrackerConfigurationError",
    "TrackerError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
