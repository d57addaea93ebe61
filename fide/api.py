"""HTTP API for the FIDE scaffolding backend.

Routes::

    GET  /health
    GET  /api/boards
    POST /api/projects
    GET  /api/projects/{project_id}
    GET  /api/projects/{project_id}/files/{file_path:path}

Handlers are plain ``def`` functions so FastAPI runs them in its worker
thread pool; the registry's own lock protects the shared project map.

Usage::

    python -m fide.api --port 3000
    python -m fide.api --templates-dir ./templates
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from rich.markup import escape

from fide.config import Config
from fide.scaffold.models import (
    BoardConfig,
    CreateProjectRequest,
    CreateProjectResponse,
    ProjectInfo,
)
from fide.scaffold.registry import create_registry
from fide.service import Outcome, ScaffoldService, ServiceError
from fide.utils import console, print_summary_table

_STATUS_CODES: dict[Outcome, int] = {
    Outcome.NOT_FOUND: 404,
    Outcome.INTERNAL: 500,
}


def create_app(config: Config | None = None, service: ScaffoldService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Backend configuration; defaults to ``Config()``.
        service: Pre-built service, mainly for tests. When omitted a fresh,
            empty registry over ``config.templates_dir`` is created.
    """
    config = config or Config()
    if service is None:
        service = ScaffoldService(
            create_registry(config.templates_dir, workspace_prefix=config.workspace_prefix)
        )

    app = FastAPI(
        title="FIDE Backend",
        description="Board-template project scaffolding service",
        version="0.1.0",
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=_STATUS_CODES.get(exc.outcome, 500),
            content={"detail": exc.detail},
        )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @app.get("/api/boards", response_model=list[BoardConfig])
    def get_boards():
        return service.list_boards()

    @app.post(
        "/api/projects",
        response_model=CreateProjectResponse,
        response_model_exclude_none=True,
    )
    def create_project(payload: CreateProjectRequest):
        return service.create_project(payload)

    @app.get("/api/projects/{project_id}", response_model=ProjectInfo)
    def get_project(project_id: str):
        return service.get_project(project_id)

    @app.get("/api/projects/{project_id}/files/{file_path:path}", response_class=PlainTextResponse)
    def get_project_file(project_id: str, file_path: str):
        return PlainTextResponse(service.get_project_file(project_id, file_path))

    return app


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``python -m fide.api`` / ``fide-server``."""
    import uvicorn

    parser = argparse.ArgumentParser(description="FIDE backend -- board project scaffolding server")
    parser.add_argument("--config", default=None, help="Path to a saved JSON config")
    parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: 3000)")
    parser.add_argument(
        "--templates-dir",
        default=None,
        help="Directory holding one subdirectory per board template",
    )
    args = parser.parse_args()

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            console.print(f"[bold red]Error:[/bold red] Config file not found: {escape(str(config_path))}")
            sys.exit(1)
        config = Config.load(config_path)
    else:
        config = Config.from_env()

    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.templates_dir:
        config.templates_dir = Path(args.templates_dir)

    app = create_app(config)
    boards = app.state.service.list_boards()
    print_summary_table(
        ((b.id, b.name, b.mcu, b.architecture, b.ram_kb, b.flash_kb) for b in boards),
        columns=["Board", "Name", "MCU", "Arch", "RAM (KB)", "Flash (KB)"],
        title=f"Boards in {escape(str(config.templates_dir))}",
    )
    console.print(
        f"[bold green]FIDE backend listening on "
        f"http://{config.server.host}:{config.server.port}[/bold green]"
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
