"""Fixed-timestep DC motor model producing synthetic telemetry."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from pydantic import BaseModel, Field

AMBIENT_TEMPERATURE = 25.0
BASE_TARGET_SPEED = 1500.0
TARGET_SPEED_SWING = 500.0
RUNNING_THRESHOLD = 100.0


class MotorTelemetry(BaseModel):
    """One reading taken from the simulator."""

    timestamp: int = Field(..., description="Unix time in milliseconds")
    speed: float = Field(..., description="RPM")
    torque: float = Field(..., description="Nm")
    temperature: float = Field(..., description="Degrees Celsius")
    current: float = Field(..., description="Amperes")
    status: str


class MotorSimulator:
    """Motor that chases a slowly oscillating target speed.

    Args:
        max_speed: Upper speed clamp in RPM.
        acceleration: Maximum speed change in RPM per second.
        clock: Source of wall-clock seconds. Drives both the target speed
            oscillation and reading timestamps.
    """

    def __init__(
        self,
        max_speed: float = 3000.0,
        acceleration: float = 500.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_speed = max_speed
        self.acceleration = acceleration
        self.clock = clock
        self.speed = 0.0
        self.target_speed = BASE_TARGET_SPEED
        self.torque = 0.0
        self.temperature = AMBIENT_TEMPERATURE
        self.current = 0.0

    def update(self, dt: float) -> None:
        """Advance the model by *dt* seconds."""
        speed_diff = self.target_speed - self.speed
        delta_speed = math.copysign(self.acceleration * dt, speed_diff)
        if abs(speed_diff) < abs(delta_speed):
            self.speed = self.target_speed
        else:
            self.speed += delta_speed
        self.speed = min(max(self.speed, 0.0), self.max_speed)

        self.torque = abs(self.target_speed - self.speed) * 0.05
        self.current = self.torque * 0.1 + self.speed * 0.001

        heat_generation = self.current * 0.5
        cooling = (self.temperature - AMBIENT_TEMPERATURE) * 0.1
        self.temperature += (heat_generation - cooling) * dt

        self.target_speed = BASE_TARGET_SPEED + TARGET_SPEED_SWING * math.sin(self.clock() * 0.2)

    def telemetry(self) -> MotorTelemetry:
        return MotorTelemetry(
            timestamp=int(self.clock() * 1000),
            speed=self.speed,
            torque=self.torque,
            temperature=self.temperature,
            current=self.current,
            status="running" if self.speed > RUNNING_THRESHOLD else "idle",
        )

    def set_target_speed(self, speed: float) -> None:
        self.target_speed = min(max(speed, 0.0), self.max_speed)
