# This project was developed with assistance from AI tools.
"""Tests for the periodic tick driver."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from factories import NOW

from lending.schemas.reminder import ProcessSummary, TickResult
from lending.services.ticker import ReminderTicker, get_ticker, set_ticker


def _coordinator(side_effect=None):
    coordinator = AsyncMock()
    coordinator.tick.return_value = TickResult(
        loans_updated=0, reminders=ProcessSummary(), ran_at=NOW
    )
    if side_effect is not None:
        coordinator.tick.side_effect = side_effect
    return coordinator


@pytest.mark.asyncio
async def test_start_runs_tick_immediately_and_stop_cancels():
    coordinator = _coordinator()
    ticker = ReminderTicker(coordinator, interval_seconds=3600)

    ticker.start()
    await asyncio.sleep(0.01)

    assert ticker.is_running
    coordinator.tick.assert_awaited_once()

    await ticker.stop()
    assert not ticker.is_running


@pytest.mark.asyncio
async def test_ticks_repeat_every_interval():
    coordinator = _coordinator()
    ticker = ReminderTicker(coordinator, interval_seconds=0.01)

    ticker.start()
    await asyncio.sleep(0.1)
    await ticker.stop()

    assert coordinator.tick.await_count >= 3


@pytest.mark.asyncio
async def test_failing_tick_keeps_loop_alive():
    coordinator = _coordinator(side_effect=RuntimeError("boom"))
    ticker = ReminderTicker(coordinator, interval_seconds=0.01)

    ticker.start()
    await asyncio.sleep(0.05)

    assert ticker.is_running
    assert coordinator.tick.await_count >= 2
    await ticker.stop()


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent():
    coordinator = _coordinator()
    ticker = ReminderTicker(coordinator, interval_seconds=3600)

    await ticker.stop()
    ticker.start()
    ticker.start()
    await asyncio.sleep(0.01)
    await ticker.stop()
    await ticker.stop()

    coordinator.tick.assert_awaited_once()


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ReminderTicker(_coordinator(), interval_seconds=0)


def test_ticker_registry():
    ticker = ReminderTicker(_coordinator(), interval_seconds=1)
    set_ticker(ticker)
    assert get_ticker() is ticker
    set_ticker(None)
    assert get_ticker() is None
