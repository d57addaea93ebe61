"""Tests for the telemetry fan-out channel (fide.telemetry.broadcast).

Covers:
- Every subscriber receives every message, in order
- No replay of messages published before subscribing
- Lagging subscribers are closed instead of blocking publish
- Explicit close ends iteration and unsubscribes
- TelemetryRunner ticks publish DLT register lines
"""

from __future__ import annotations

import asyncio

import pytest

from fide.config import TelemetryConfig
from fide.telemetry.broadcast import BroadcastChannel
from fide.telemetry.formats import format_as_dlt_registers
from fide.telemetry.motor import MotorSimulator
from fide.telemetry.server import TelemetryRunner

pytestmark = pytest.mark.unit


async def _drain(subscription, count: int) -> list[str]:
    received: list[str] = []
    for _ in range(count):
        message = await asyncio.wait_for(subscription.recv(), timeout=1)
        received.append(message)
    return received


class TestBroadcastChannel:
    @pytest.mark.asyncio
    async def test_fan_out_in_order(self):
        channel = BroadcastChannel(capacity=10)
        first = channel.subscribe()
        second = channel.subscribe()

        for i in range(5):
            assert channel.publish(f"m{i}") == 2

        expected = [f"m{i}" for i in range(5)]
        assert await _drain(first, 5) == expected
        assert await _drain(second, 5) == expected

    @pytest.mark.asyncio
    async def test_no_history_replay(self):
        channel = BroadcastChannel(capacity=10)
        channel.publish("before")
        late = channel.subscribe()
        channel.publish("after")

        assert await _drain(late, 1) == ["after"]

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        channel = BroadcastChannel(capacity=1)
        assert channel.publish("nobody") == 0

    @pytest.mark.asyncio
    async def test_slow_subscriber_dropped(self):
        channel = BroadcastChannel(capacity=3)
        slow = channel.subscribe()
        fast = channel.subscribe()

        delivered = []
        for i in range(3):
            delivered.append(channel.publish(f"m{i}"))
            assert await fast.recv() == f"m{i}"
        delivered.append(channel.publish("m3"))

        assert delivered == [2, 2, 2, 1]
        assert slow.closed is True
        assert slow.lagged is True
        assert channel.subscriber_count == 1
        assert await fast.recv() == "m3"

        # Already-buffered messages drain, then iteration stops.
        assert [message async for message in slow] == ["m0", "m1", "m2"]

    @pytest.mark.asyncio
    async def test_close_ends_iteration(self):
        channel = BroadcastChannel(capacity=5)
        subscription = channel.subscribe()
        channel.publish("only")
        subscription.close()

        assert [message async for message in subscription] == ["only"]
        assert channel.subscriber_count == 0
        assert channel.publish("later") == 0

    @pytest.mark.asyncio
    async def test_channel_close_closes_everyone(self):
        channel = BroadcastChannel(capacity=5)
        subs = [channel.subscribe() for _ in range(3)]
        channel.close()

        assert all(sub.closed for sub in subs)
        assert channel.subscriber_count == 0
        assert await subs[0].recv() is None

    @pytest.mark.asyncio
    async def test_waiting_receiver_wakes_on_publish(self):
        channel = BroadcastChannel(capacity=5)
        subscription = channel.subscribe()

        waiter = asyncio.create_task(subscription.recv())
        await asyncio.sleep(0)
        channel.publish("wake")
        assert await asyncio.wait_for(waiter, timeout=1) == "wake"

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            BroadcastChannel(capacity=0)


class TestTelemetryRunner:
    @pytest.mark.asyncio
    async def test_tick_publishes_register_lines(self):
        config = TelemetryConfig(tick_ms=100)
        runner = TelemetryRunner(config, MotorSimulator(clock=lambda: 0.0), verbose=False)
        subscription = runner.channel.subscribe()

        lines = runner.tick()

        assert lines == format_as_dlt_registers(runner.simulator.telemetry())
        assert lines[0] == "REG:SPEED:50.00"
        assert lines[1] == "REG:TORQUE:72.50"
        assert lines[-1] == "REG:STATUS:idle"
        assert await _drain(subscription, 5) == lines
        assert runner.ticks == 1

    @pytest.mark.asyncio
    async def test_run_loop_ticks_until_cancelled(self):
        runner = TelemetryRunner(TelemetryConfig(tick_ms=5), verbose=False)
        subscription = runner.channel.subscribe()

        task = asyncio.create_task(runner.run())
        first = await asyncio.wait_for(subscription.recv(), timeout=2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert first.startswith("REG:SPEED:")
        assert runner.ticks >= 1
