"""Fixtures for tracker scheduling tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from ccannounce.models import AnnounceEvent, PeerEvent
from ccannounce.tracker.base import Tracker

INFO_HASH = bytes(range(20))


class FakeTracker(Tracker):
    """Tracker whose announce replays scripted results.

    Each scripted item is returned, raised (if an exception) or awaited
    (if an ``asyncio.Event``, then the next item is used).
    """

    def __init__(self, *args: Any, results: list[Any] | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.results = list(results or [])
        self.calls: list[tuple[AnnounceEvent | None, dict[str, Any]]] = []

    async def announce(
        self, event: AnnounceEvent | None, options: dict[str, Any]
    ) -> PeerEvent:
        self.calls.append((event, options))
        item = self.results.pop(0) if self.results else PeerEvent()
        if isinstance(item, asyncio.Event):
            await item.wait()
            item = self.results.pop(0) if self.results else PeerEvent()
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def make_tracker():
    """Build FakeTrackers and force-stop whatever was started."""
    trackers: list[FakeTracker] = []

    def _make(
        results: list[Any] | None = None,
        info_hash_buffer: bytes = INFO_HASH,
        **kwargs: Any,
    ) -> FakeTracker:
        tracker = FakeTracker(
            "http://tracker.example.com/announce",
            "http://tracker.example.com/announce",
            info_hash_buffer,
            results=results,
            **kwargs,
        )
        trackers.append(tracker)
        return tracker

    yield _make

    for tracker in trackers:
        tracker._clean()
        tracker._stopped = True


@pytest.fixture
def first_cycle():
    """Wait for the first outcome and for the cycle to finish re-arming."""

    async def _wait(tracker: FakeTracker, channel):
        outcome = await asyncio.wait_for(channel.get(), timeout=1.0)
        await asyncio.wait_for(tracker._cycle_task, timeout=1.0)
        return outcome

    return _wait


@pytest.fixture
def tracker_cls():
    """The scripted tracker class, for constructing trackers by hand."""
    return FakeTracker
