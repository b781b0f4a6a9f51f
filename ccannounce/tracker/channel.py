"""Result channel delivering announce outcomes to a single consumer."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Union

from ccannounce.utils.exceptions import TrackerAnnounceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnounceSuccess:
    """A cycle whose announce call returned a result."""

    result: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AnnounceFailure:
    """A cycle that failed; the loop keeps running."""

    error: TrackerAnnounceError

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class AlreadyRunning:
    """Yielded by ``start()`` when the tracker is already running."""

    @property
    def ok(self) -> bool:
        return False


AnnounceOutcome = Union[AnnounceSuccess, AnnounceFailure, AlreadyRunning]

_CLOSED = object()


class ResultChannel:
    """Ordered, push-only stream of :data:`AnnounceOutcome` values.

    Consume it with ``async for``. Iteration ends once the channel is closed
    and every outcome pushed before the close has been delivered. A closed
    channel never reopens; pushes after close are dropped.
    """

    def __init__(self) -> None:
        """Initialize an open, empty channel."""
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    def push(self, outcome: AnnounceOutcome) -> bool:
        """Append an outcome. Returns False if the channel is closed."""
        if self._closed:
            logger.debug("Dropping %r pushed to a closed channel", outcome)
            return False
        self._queue.put_nowait(outcome)
        return True

    def add(self, result: Any) -> bool:
        """Push a successful result."""
        return self.push(AnnounceSuccess(result))

    def add_error(self, error: TrackerAnnounceError) -> bool:
        """Push a wrapped failure."""
        return self.push(AnnounceFailure(error))

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def get(self) -> AnnounceOutcome:
        """Wait for the next outcome.

        Raises:
            StopAsyncIteration: if the channel is closed and drained

        """
        if self._drained:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            raise StopAsyncIteration
        return item

    def __aiter__(self) -> AsyncIterator[AnnounceOutcome]:
        return self

    async def __anext__(self) -> AnnounceOutcome:
        return await self.get()

    @classmethod
    def single(cls, outcome: AnnounceOutcome) -> ResultChannel:
        """Return a closed channel that yields exactly ``outcome``."""
        channel = cls()
        channel.push(outcome)
        channel.close()
        return channel
