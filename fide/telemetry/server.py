"""Motor telemetry server.

Runs the motor simulator on a fixed tick and streams each reading, encoded as
DLT register lines, to every connected WebSocket viewer.

Endpoints::

    WS  /         telemetry stream (welcome JSON, then one text frame per line)
    GET /viewer   minimal HTML viewer for the stream
    GET /health

Usage::

    python -m fide.telemetry.server --port 8084 --tick-ms 100
"""

from __future__ import annotations

import argparse
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.markup import escape

from fide.config import Config, TelemetryConfig
from fide.telemetry.broadcast import BroadcastChannel
from fide.telemetry.formats import format_as_dlt_registers
from fide.telemetry.motor import MotorSimulator
from fide.utils import console, print_error, print_warning

_TEMPLATE_DIR = Path(__file__).parent / "templates"

WELCOME_MESSAGE = {"type": "connected", "message": "Connected to motor simulation"}


class TelemetryRunner:
    """Owns the simulator, the fan-out channel and the tick loop."""

    def __init__(
        self,
        config: TelemetryConfig,
        simulator: MotorSimulator | None = None,
        verbose: bool = True,
    ) -> None:
        self.config = config
        self.simulator = simulator or MotorSimulator(
            max_speed=config.max_speed, acceleration=config.acceleration
        )
        self.channel = BroadcastChannel(config.channel_capacity)
        self.verbose = verbose
        self.ticks = 0

    def tick(self) -> list[str]:
        """Advance one step and publish the reading. Returns the lines sent."""
        self.simulator.update(self.config.tick_ms / 1000.0)
        reading = self.simulator.telemetry()
        self.ticks += 1

        if self.verbose:
            console.print(
                f"[dim]Motor: speed={reading.speed:.0f} RPM, torque={reading.torque:.1f} Nm, "
                f"temp={reading.temperature:.1f}°C, current={reading.current:.2f}A[/dim]"
            )

        lines = format_as_dlt_registers(reading)
        for line in lines:
            self.channel.publish(line)
        return lines

    async def run(self) -> None:
        """Tick forever at the configured period."""
        period = self.config.tick_ms / 1000.0
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            next_tick += period
            self.tick()
            await asyncio.sleep(max(0.0, next_tick - loop.time()))


def create_telemetry_app(
    config: TelemetryConfig | None = None,
    project_name: str = "motor_sim",
    runner: TelemetryRunner | None = None,
) -> FastAPI:
    """Build the telemetry FastAPI app; the tick loop runs for the app's lifespan."""
    config = config or TelemetryConfig()
    runner = runner or TelemetryRunner(config)
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "j2"]),
    )

    def report_failure(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            print_error(f"Telemetry loop stopped: {escape(repr(task.exception()))}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        console.print(f"[bold]Starting {escape(project_name)} - Motor Simulation[/bold]")
        task = asyncio.create_task(runner.run())
        task.add_done_callback(report_failure)
        try:
            yield
        finally:
            task.cancel()
            await asyncio.wait([task])
            runner.channel.close()

    app = FastAPI(title=f"{project_name} telemetry", lifespan=lifespan)
    app.state.runner = runner

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "viewers": runner.channel.subscriber_count,
            "ticks": runner.ticks,
        }

    @app.get("/viewer", response_class=HTMLResponse)
    async def viewer():
        template = env.get_template("viewer.html.j2")
        return template.render(project_name=project_name, ws_port=config.port)

    @app.websocket("/")
    async def telemetry_stream(websocket: WebSocket):
        await websocket.accept()
        peer = f"{websocket.client.host}:{websocket.client.port}" if websocket.client else "?"
        console.print(f"New WebSocket connection from: {escape(peer)}")

        subscription = runner.channel.subscribe()
        await websocket.send_json(WELCOME_MESSAGE)

        async def forward() -> None:
            async for message in subscription:
                await websocket.send_text(message)
            if subscription.lagged:
                print_warning(f"Viewer {escape(peer)} fell behind; disconnecting")
                await websocket.close(code=1008)

        send_task = asyncio.create_task(forward())
        try:
            while True:
                text = await websocket.receive_text()
                console.print(f"Received from {escape(peer)}: {escape(text)}")
        except (WebSocketDisconnect, RuntimeError):
            console.print(f"Client {escape(peer)} disconnected")
        finally:
            subscription.close()
            send_task.cancel()
            try:
                await send_task
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                console.print(f"[dim]Send loop for {escape(peer)} ended: {escape(repr(exc))}[/dim]")
            console.print(f"Connection closed: {escape(peer)}")

    return app


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``python -m fide.telemetry.server`` / ``fide-telemetry``."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Motor telemetry simulator")
    parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="WebSocket port (default: 8084)")
    parser.add_argument("--tick-ms", type=int, default=None, help="Tick period in ms (default: 100)")
    parser.add_argument(
        "--capacity", type=int, default=None, help="Per-viewer buffer before disconnect (default: 100)"
    )
    parser.add_argument("--project-name", default="motor_sim", help="Name shown in logs and viewer")
    args = parser.parse_args()

    config = Config.from_env().telemetry
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.tick_ms:
        config.tick_ms = args.tick_ms
    if args.capacity:
        config.channel_capacity = args.capacity

    app = create_telemetry_app(config, project_name=args.project_name)
    console.print(f"WebSocket server listening on ws://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
