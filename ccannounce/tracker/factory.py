"""Pick a tracker implementation for an announce URL."""

from __future__ import annotations

import urllib.parse
from typing import TYPE_CHECKING

from ccannounce.tracker.http_tracker import HttpTracker
from ccannounce.utils.exceptions import TrackerError

if TYPE_CHECKING:
    from ccannounce.tracker.base import Tracker
    from ccannounce.tracker.options import AnnounceOptionsProvider

TRACKER_SCHEMES: dict[str, type[HttpTracker]] = {
    "http": HttpTracker,
    "https": HttpTracker,
}


def create_tracker(
    announce_url: str,
    info_hash_buffer: bytes,
    provider: AnnounceOptionsProvider | None = None,
) -> Tracker:
    """Create a tracker for ``announce_url`` based on its scheme.

    Raises:
        TrackerError: if the scheme is not supported

    """
    scheme = urllib.parse.urlparse(announce_url).scheme.lower()
    tracker_cls = TRACKER_SCHEMES.get(scheme)
    if tracker_cls is None:
        msg = f"Unsupported tracker scheme: {scheme or announce_url}"
        raise TrackerError(msg)
    return tracker_cls(announce_url, info_hash_buffer, provider=provider)
