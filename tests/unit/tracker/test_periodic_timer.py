"""Tests for PeriodicTimer."""

from __future__ import annotations

import asyncio

import pytest

from ccannounce.tracker.timer import PeriodicTimer

pytestmark = [pytest.mark.unit, pytest.mark.tracker]


@pytest.mark.asyncio
async def test_timer_fires_repeatedly():
    ticks = []
    done = asyncio.Event()

    def _on_tick(timer):
        ticks.append(timer.tick)
        if len(ticks) == 3:
            done.set()

    timer = PeriodicTimer(0.01, _on_tick)
    await asyncio.wait_for(done.wait(), timeout=1.0)
    timer.cancel()

    assert ticks == [1, 2, 3]
    assert not timer.is_active


@pytest.mark.asyncio
async def test_cancel_inside_callback_stops_timer():
    ticks = []

    def _on_tick(timer):
        ticks.append(timer.tick)
        timer.cancel()

    timer = PeriodicTimer(0.01, _on_tick)
    await asyncio.sleep(0.1)

    assert ticks == [1]
    assert not timer.is_active


@pytest.mark.asyncio
async def test_cancelled_timer_never_fires():
    ticks = []
    timer = PeriodicTimer(0.01, ticks.append)
    timer.cancel()
    timer.cancel()
    await asyncio.sleep(0.05)

    assert ticks == []
    assert "cancelled" in repr(timer)


@pytest.mark.asyncio
@pytest.mark.parametrize("period", [0, -1])
async def test_period_must_be_positive(period):
    with pytest.raises(ValueError, match="positive"):
        PeriodicTimer(period, lambda _t: None)
