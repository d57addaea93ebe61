"""Tests for the motor simulator and its text formats.

Covers:
- Initial state and first reading
- Acceleration limit, snapping to target, clamping
- Torque / current / temperature relations
- Target speed oscillation driven by the injected clock
- DLT register, trace, dump and chart encodings
"""

from __future__ import annotations

import math

import pytest

from fide.telemetry.formats import (
    format_as_chart_data,
    format_as_dlt_registers,
    format_as_dlt_trace,
    format_as_register_dump,
)
from fide.telemetry.motor import MotorSimulator, MotorTelemetry

pytestmark = pytest.mark.unit


def _frozen_clock(value: float = 0.0):
    return lambda: value


class TestMotorSimulator:
    def test_initial_reading(self):
        sim = MotorSimulator(clock=_frozen_clock(12.5))
        reading = sim.telemetry()

        assert reading.timestamp == 12500
        assert reading.speed == 0.0
        assert reading.torque == 0.0
        assert reading.temperature == 25.0
        assert reading.current == 0.0
        assert reading.status == "idle"

    def test_first_tick_respects_acceleration(self):
        sim = MotorSimulator(acceleration=500.0, clock=_frozen_clock(0.0))
        sim.update(0.1)

        assert sim.speed == pytest.approx(50.0)
        assert sim.torque == pytest.approx((1500.0 - 50.0) * 0.05)
        assert sim.current == pytest.approx(sim.torque * 0.1 + 50.0 * 0.001)
        heat = sim.current * 0.5
        assert sim.temperature == pytest.approx(25.0 + heat * 0.1)

    def test_target_follows_clock(self):
        sim = MotorSimulator(clock=_frozen_clock(5.0))
        sim.update(0.1)
        assert sim.target_speed == pytest.approx(1500.0 + 500.0 * math.sin(1.0))

    def test_snaps_to_target_when_close(self):
        sim = MotorSimulator(acceleration=500.0, clock=_frozen_clock(0.0))
        sim.speed = 1480.0
        sim.update(0.1)
        assert sim.speed == 1500.0
        assert sim.torque == 0.0

    def test_decelerates_toward_lower_target(self):
        sim = MotorSimulator(acceleration=500.0, clock=_frozen_clock(0.0))
        sim.speed = 2000.0
        sim.update(0.1)
        assert sim.speed == pytest.approx(1950.0)

    def test_speed_clamped_to_max(self):
        sim = MotorSimulator(max_speed=1000.0, acceleration=10_000.0, clock=_frozen_clock(0.0))
        sim.update(1.0)
        assert sim.speed == 1000.0

    def test_reaches_running_state(self):
        sim = MotorSimulator(clock=_frozen_clock(0.0))
        for _ in range(5):
            sim.update(0.1)
        assert sim.speed == pytest.approx(250.0)
        assert sim.telemetry().status == "running"

    def test_temperature_cools_toward_ambient(self):
        sim = MotorSimulator(clock=_frozen_clock(0.0))
        sim.speed = 1500.0
        sim.temperature = 80.0
        sim.update(0.1)
        assert 25.0 < sim.temperature < 80.0

    @pytest.mark.parametrize("requested,expected", [(-5.0, 0.0), (1200.0, 1200.0), (9999.0, 3000.0)])
    def test_set_target_speed_clamped(self, requested: float, expected: float):
        sim = MotorSimulator()
        sim.set_target_speed(requested)
        assert sim.target_speed == expected


@pytest.fixture
def reading() -> MotorTelemetry:
    return MotorTelemetry(
        timestamp=1700000000123,
        speed=1523.456,
        torque=1.2345,
        temperature=31.987,
        current=1.6789,
        status="running",
    )


class TestFormats:
    def test_dlt_registers(self, reading: MotorTelemetry):
        assert format_as_dlt_registers(reading) == [
            "REG:SPEED:1523.46",
            "REG:TORQUE:1.23",
            "REG:TEMP:31.99",
            "REG:CURRENT:1.68",
            "REG:STATUS:running",
        ]

    def test_dlt_trace(self, reading: MotorTelemetry):
        assert format_as_dlt_trace(reading) == [
            "MOTOR:1700000000123:update:SPEED=1523",
            "MOTOR:1700000000123:update:TORQUE=1.2",
            "MOTOR:1700000000123:update:TEMP=32.0",
            "MOTOR:1700000000123:update:CURRENT=1.68",
        ]

    def test_register_dump(self, reading: MotorTelemetry):
        assert format_as_register_dump(reading) == (
            "SPEED:1523 TORQUE:1.2 TEMP:32.0 CURRENT:1.68 STATUS:running"
        )

    def test_chart_data(self, reading: MotorTelemetry):
        assert format_as_chart_data(reading) == [
            "SPEED:1700000000123:1523.46",
            "TORQUE:1700000000123:1.23",
            "TEMP:1700000000123:31.99",
            "CURRENT:1700000000123:1.68",
        ]
