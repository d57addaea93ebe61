"""Motor telemetry simulator used by the ``motor_sim`` board template.

Quick usage::

    from fide.telemetry import create_telemetry_app

    app = create_telemetry_app(project_name="my-motor")
    # uvicorn.run(app, port=8084)
"""

from fide.telemetry.broadcast import BroadcastChannel, Subscription
from fide.telemetry.formats import (
    format_as_chart_data,
    format_as_dlt_registers,
    format_as_dlt_trace,
    format_as_register_dump,
)
from fide.telemetry.motor import MotorSimulator, MotorTelemetry
from fide.telemetry.server import TelemetryRunner, create_telemetry_app

__all__ = [
    "BroadcastChannel",
    "MotorSimulator",
    "MotorTelemetry",
    "Subscription",
    "TelemetryRunner",
    "create_telemetry_app",
    "format_as_chart_data",
    "format_as_dlt_registers",
    "format_as_dlt_trace",
    "format_as_register_dump",
]
