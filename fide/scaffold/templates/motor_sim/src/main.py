"""{{PROJECT_NAME}} - motor telemetry simulation.

Streams DLT register lines (REG:SPEED, REG:TORQUE, ...) to WebSocket viewers.
"""

import uvicorn

from fide.config import TelemetryConfig
from fide.telemetry import create_telemetry_app

PROJECT_NAME = "{{PROJECT_NAME}}"

config = TelemetryConfig(port=8084, tick_ms=100, max_speed=3000.0, acceleration=500.0)
app = create_telemetry_app(config, project_name=PROJECT_NAME)

if __name__ == "__main__":
    uvicorn.run(app, host=config.host, port=config.port)
