"""ccAnnounce - BitTorrent tracker announce scheduling."""

from __future__ import annotations

__version__ = "0.1.0"
