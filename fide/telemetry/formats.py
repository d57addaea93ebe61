"""Text encodings of motor readings understood by the DLT timeline viewer.

``format_as_dlt_registers`` is what the telemetry server streams; the other
encodings feed the viewer's trace, dump and chart panes.
"""

from __future__ import annotations

from fide.telemetry.motor import MotorTelemetry


def format_as_dlt_registers(telemetry: MotorTelemetry) -> list[str]:
    """One ``REG:<name>:<value>`` line per register."""
    return [
        f"REG:SPEED:{telemetry.speed:.2f}",
        f"REG:TORQUE:{telemetry.torque:.2f}",
        f"REG:TEMP:{telemetry.temperature:.2f}",
        f"REG:CURRENT:{telemetry.current:.2f}",
        f"REG:STATUS:{telemetry.status}",
    ]


def format_as_dlt_trace(telemetry: MotorTelemetry) -> list[str]:
    """Timestamped ``MOTOR:<ts>:update:<NAME>=<value>`` trace events."""
    ts = telemetry.timestamp
    return [
        f"MOTOR:{ts}:update:SPEED={telemetry.speed:.0f}",
        f"MOTOR:{ts}:update:TORQUE={telemetry.torque:.1f}",
        f"MOTOR:{ts}:update:TEMP={telemetry.temperature:.1f}",
        f"MOTOR:{ts}:update:CURRENT={telemetry.current:.2f}",
    ]


def format_as_register_dump(telemetry: MotorTelemetry) -> str:
    return (
        f"SPEED:{telemetry.speed:.0f} TORQUE:{telemetry.torque:.1f} "
        f"TEMP:{telemetry.temperature:.1f} CURRENT:{telemetry.current:.2f} "
        f"STATUS:{telemetry.status}"
    )


def format_as_chart_data(telemetry: MotorTelemetry) -> list[str]:
    """``<NAME>:<ts>:<value>`` points for the chart view."""
    ts = telemetry.timestamp
    return [
        f"SPEED:{ts}:{telemetry.speed:.2f}",
        f"TORQUE:{ts}:{telemetry.torque:.2f}",
        f"TEMP:{ts}:{telemetry.temperature:.2f}",
        f"CURRENT:{ts}:{telemetry.current:.2f}",
    ]
