"""Announce scheduling for a single tracker.

A :class:`Tracker` repeatedly announces to one tracker endpoint for one info
hash. The polling period follows the ``interval`` / ``min interval`` values
the tracker returns, and a failed announce never ends the loop: failures are
wrapped and delivered through the same :class:`ResultChannel` as successes.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from ccannounce.config import get_config
from ccannounce.models import AnnounceEvent, PeerEvent
from ccannounce.tracker.channel import AlreadyRunning, ResultChannel
from ccannounce.tracker.options import AnnounceOptionsProvider, resolve_options
from ccannounce.tracker.timer import PeriodicTimer
from ccannounce.utils.exceptions import (
    TrackerAnnounceError,
    TrackerConfigurationError,
)
from ccannounce.utils.logging_config import LoggingContext


class Tracker(ABC):
    """Base class for announcing to one tracker on a self-adjusting schedule.

    Subclasses implement :meth:`announce` for a concrete transport.
    """

    def __init__(
        self,
        tracker_id: str,
        announce_url: str,
        info_hash_buffer: bytes,
        provider: AnnounceOptionsProvider | None = None,
        announce_interval: float | None = None,
    ):
        """Initialize the tracker.

        Args:
            tracker_id: Stable identity for this tracker, usually the announce URL
            announce_url: Tracker endpoint
            info_hash_buffer: Raw info hash of the torrent
            provider: Optional source of per-announce options
            announce_interval: Interval used until the tracker dictates one
                (defaults to ``announce.default_interval`` from config)

        Raises:
            TrackerConfigurationError: if id, URL or info hash are missing, or
                the announce interval is not positive

        """
        if not tracker_id:
            msg = "Tracker id can't be empty"
            raise TrackerConfigurationError(msg)
        if not announce_url:
            msg = "Announce URL can't be empty"
            raise TrackerConfigurationError(msg)
        if not info_hash_buffer:
            msg = "Info hash buffer can't be empty"
            raise TrackerConfigurationError(msg)
        if announce_interval is not None and announce_interval <= 0:
            msg = f"Announce interval must be positive, got {announce_interval}"
            raise TrackerConfigurationError(msg)

        self.config = get_config()
        self.id = tracker_id
        self.announce_url = announce_url
        self.info_hash_buffer = bytes(info_hash_buffer)
        self.provider = provider
        self.announce_interval = (
            announce_interval
            if announce_interval is not None
            else self.config.announce.default_interval
        )

        self._info_hash: str | None = None
        self._stopped = True
        self._announce_timer: PeriodicTimer | None = None
        self._channel: ResultChannel | None = None
        self._cycle_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

        self.logger = logging.getLogger(__name__)

    @property
    def info_hash(self) -> str:
        """Lowercase hex form of the info hash, computed once."""
        if self._info_hash is None:
            self._info_hash = self.info_hash_buffer.hex()
        return self._info_hash

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def start(self) -> ResultChannel:
        """Start announcing and return the channel of outcomes.

        The first announce is made right away with the ``started`` event.
        If the tracker is already running, the returned channel holds a
        single :class:`AlreadyRunning` outcome and the running loop is left
        alone.

        Raises:
            RuntimeError: if no event loop is running; the tracker stays idle

        """
        if not self._stopped:
            self.logger.debug("Tracker %s already running", self.id)
            return ResultChannel.single(AlreadyRunning())

        # Fail before touching state when no loop is running
        asyncio.get_running_loop()
        self._stopped = False
        if self._channel is not None:
            self._channel.close()
        channel = ResultChannel()
        self._channel = channel
        self._cancel_timer()
        self.logger.info("Starting announces to %s for %s", self.id, self.info_hash)
        self._run_cycle(None, AnnounceEvent.STARTED, channel)
        return channel

    async def stop(self, force: bool = False) -> Any:
        """Stop announcing.

        Sends one ``stopped`` announce and returns its result, unless
        ``force`` is set, in which case nothing is sent and True is returned.
        Returns False if the tracker was not running. An error from the
        ``stopped`` announce is raised to the caller.
        """
        if self._stopped:
            return False
        self._clean()
        self._stopped = True
        if force:
            self.logger.info("Force-stopped tracker %s", self.id)
            return True
        with LoggingContext(
            "announce_stopped", log_level=logging.INFO, logger=self.logger
        ):
            return await self.announce(
                AnnounceEvent.STOPPED, await self._announce_options()
            )

    async def complete(self) -> Any:
        """Stop announcing after the download finished.

        Sends one ``completed`` announce and returns its result, or False if
        the tracker was not running. Subclasses that hold resources should
        override this as well as :meth:`stop`.
        """
        if self._stopped:
            return False
        self._clean()
        self._stopped = True
        with LoggingContext(
            "announce_completed", log_level=logging.INFO, logger=self.logger
        ):
            return await self.announce(
                AnnounceEvent.COMPLETED, await self._announce_options()
            )

    @abstractmethod
    async def announce(
        self, event: AnnounceEvent | None, options: dict[str, Any]
    ) -> PeerEvent:
        """Make one announce round trip.

        Args:
            event: started, update, completed, stopped, or None
            options: Query options such as uploaded/downloaded/left

        Returns:
            The tracker's answer. Its ``interval`` / ``min_interval`` drive
            the polling period.

        Raises:
            Exception: on any transport, timeout or decode failure

        """

    def _run_cycle(
        self,
        timer: PeriodicTimer | None,
        event: AnnounceEvent,
        channel: ResultChannel,
    ) -> None:
        """Schedule one cycle as a task."""
        task = asyncio.ensure_future(self._interval_announce(timer, event, channel))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._cycle_task = task

    def _on_timer(
        self,
        timer: PeriodicTimer,
        event: AnnounceEvent,
        channel: ResultChannel,
    ) -> None:
        if self._cycle_task is not None and not self._cycle_task.done():
            self.logger.debug(
                "Announce to %s still in flight, skipping tick %d",
                self.id,
                timer.tick,
            )
            return
        self._run_cycle(timer, event, channel)

    async def _interval_announce(
        self,
        timer: PeriodicTimer | None,
        event: AnnounceEvent,
        channel: ResultChannel,
    ) -> None:
        """Run one announce cycle and re-arm the timer if the interval moved.

        ``timer`` is None for the first cycle of a run, otherwise it is the
        timer whose tick triggered this cycle.
        """
        try:
            if self._stopped:
                if timer is not None:
                    timer.cancel()
                return

            result = None
            try:
                result = await self.announce(event, await self._announce_options())
            except Exception as e:
                if self._is_current(channel):
                    self.logger.warning("Announce to %s failed: %s", self.id, e)
                    channel.add_error(TrackerAnnounceError(self.info_hash, e))
            else:
                if self._is_current(channel):
                    channel.add(result)

            if not self._is_current(channel):
                # Stopped or restarted while the announce was in flight
                if timer is not None:
                    timer.cancel()
                return

            interval = self._next_interval(result)
            if timer is None or interval != self.announce_interval:
                if timer is not None:
                    timer.cancel()
                self._cancel_timer()
                if interval != self.announce_interval:
                    self.logger.debug(
                        "Announce interval for %s changed %s -> %s",
                        self.id,
                        self.announce_interval,
                        interval,
                    )
                self.announce_interval = interval
                self._announce_timer = PeriodicTimer(
                    interval,
                    lambda t: self._on_timer(t, event, channel),
                )
        except Exception as e:
            self.logger.warning("Announce cycle for %s failed: %s", self.id, e)
            channel.add_error(TrackerAnnounceError(self.info_hash, e))

    def _next_interval(self, result: Any) -> float:
        """Pick the next polling interval from an announce result."""
        interval = None
        if isinstance(result, PeerEvent):
            inter = result.interval
            min_inter = result.min_interval
            if inter is None:
                interval = min_inter
            elif min_inter is not None:
                interval = min(inter, min_inter)
            else:
                interval = inter
        if interval is None:
            interval = self.announce_interval
        return interval

    def _is_current(self, channel: ResultChannel) -> bool:
        return not self._stopped and channel is self._channel

    async def _announce_options(self) -> dict[str, Any]:
        return await resolve_options(
            self.config.announce.default_options(),
            self.provider,
            self.announce_url,
            self.info_hash,
        )

    def _cancel_timer(self) -> None:
        if self._announce_timer is not None:
            self._announce_timer.cancel()
            self._announce_timer = None

    def _clean(self) -> None:
        if self._channel is not None:
            self._channel.close()
        self._cancel_timer()

    def __repr__(self) -> str:
        """Return a debug representation."""
        state = "stopped" if self._stopped else "running"
        return f"<{type(self).__name__} {self.id} {self.info_hash} {state}>"
