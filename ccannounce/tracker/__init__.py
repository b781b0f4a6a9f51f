"""Tracker announce scheduling."""

from __future__ import annotations

from ccannounce.tracker.base import Tracker
from ccannounce.tracker.channel import (
    AlreadyRunning,
    AnnounceFailure,
    AnnounceOutcome,
    AnnounceSuccess,
    ResultChannel,
)
from ccannounce.tracker.factory import create_tracker
from ccannounce.tracker.http_tracker import HttpTracker
from ccannounce.tracker.options import AnnounceOptionsProvider, resolve_options
from ccannounce.tracker.timer import PeriodicTimer

__all__ = [
    "AlreadyRunning",
    "AnnounceFailure",
    "AnnounceOptionsProvider",
    "AnnounceOutcome",
    "AnnounceSuccess",
    "HttpTracker",
    "PeriodicTimer",
    "ResultChannel",
    "Tracker",
    "create_tracker",
    "resolve_options",
]
