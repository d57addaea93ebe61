
"""Settings for the FIDE backend processes.

``Config`` holds where board templates live, how workspace URLs are built,
and the bind addresses of the scaffolding API and the telemetry simulator.
It is built once per process, from a saved JSON file or from ``FIDE_*``
environment variables, and handed to the app factories.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "scaffold" / "templates"


class ServerConfig(BaseModel):
    """Bind address and CORS policy for the scaffolding HTTP server."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class TelemetryConfig(BaseModel):
    """Tuning knobs for the motor telemetry simulator."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8084, ge=1, le=65535)
    tick_ms: int = Field(default=100, ge=1, description="Simulation tick period in milliseconds")
    channel_capacity: int = Field(
        default=100, ge=1, description="Messages buffered per viewer before it is dropped"
    )
    max_speed: float = Field(default=3000.0, gt=0, description="Maximum motor speed in RPM")
    acceleration: float = Field(default=500.0, gt=0, description="RPM per second")


class Config(BaseModel):
    """Global FIDE backend configuration.

    Instances are typically created once by a CLI entry point and then passed
    to ``create_app`` / ``create_telemetry_app``.
    """

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    workspace_prefix: str = Field(default="/workspace")
    server: ServerConfig = Field(default_factory=ServerConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            FIDE_TEMPLATES_DIR, FIDE_WORKSPACE_PREFIX, FIDE_HOST, FIDE_PORT,
            FIDE_TELEMETRY_HOST, FIDE_TELEMETRY_PORT, FIDE_TICK_MS,
            FIDE_CHANNEL_CAPACITY.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("FIDE_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["FIDE_TEMPLATES_DIR"])
        if os.environ.get("FIDE_WORKSPACE_PREFIX"):
            kwargs["workspace_prefix"] = os.environ["FIDE_WORKSPACE_PREFIX"]

        server_kwargs: dict[str, Any] = {}
        if os.environ.get("FIDE_HOST"):
            server_kwargs["host"] = os.environ["FIDE_HOST"]
        if os.environ.get("FIDE_PORT"):
            server_kwargs["port"] = int(os.environ["FIDE_PORT"])

        telemetry_kwargs: dict[str, Any] = {}
        if os.environ.get("FIDE_TELEMETRY_HOST"):
            telemetry_kwargs["host"] = os.environ["FIDE_TELEMETRY_HOST"]
        if os.environ.get("FIDE_TELEMETRY_PORT"):
            telemetry_kwargs["port"] = int(os.environ["FIDE_TELEMETRY_PORT"])
        if os.environ.get("FIDE_TICK_MS"):
            telemetry_kwargs["tick_ms"] = int(os.environ["FIDE_TICK_MS"])
        if os.environ.get("FIDE_CHANNEL_CAPACITY"):
            telemetry_kwargs["channel_capacity"] = int(os.environ["FIDE_CHANNEL_CAPACITY"])

        return cls(
            server=ServerConfig(**server_kwargs),
            telemetry=TelemetryConfig(**telemetry_kwargs),
            **kwargs,
        )
