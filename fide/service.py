"""Service facade between the project registry and any outer boundary.

``ScaffoldService`` exposes the three user-facing operations (list boards,
create project, read project file) plus a project lookup, and converts the
scaffolder's typed failures into a ``ServiceError`` carrying a boundary
``Outcome``. Callers can then tell "retry with different input"
(``NOT_FOUND``) from "the server needs attention" (``INTERNAL``) without
knowing the scaffolder's exception hierarchy.
"""

from __future__ import annotations

from enum import Enum

from rich.markup import escape

from fide.scaffold.errors import (
    BoardNotFoundError,
    FileReadError,
    ProjectNotFoundError,
    ScaffoldError,
    TemplateNotFoundError,
    TemplateReadError,
)
from fide.scaffold.models import (
    BoardConfig,
    CreateProjectRequest,
    CreateProjectResponse,
    ProjectInfo,
)
from fide.scaffold.registry import ProjectRegistry
from fide.utils import console, print_error


class Outcome(str, Enum):
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ServiceError(Exception):
    """Raised by ``ScaffoldService`` for every failed operation."""

    def __init__(self, outcome: Outcome, detail: str) -> None:
        self.outcome = outcome
        self.detail = detail
        super().__init__(detail)


class ScaffoldService:
    """Boundary-facing wrapper around a ``ProjectRegistry``."""

    def __init__(self, registry: ProjectRegistry) -> None:
        self.registry = registry

    def list_boards(self) -> list[BoardConfig]:
        console.print("[cyan]list boards[/cyan]")
        return self.registry.catalog.list_boards()

    def create_project(self, request: CreateProjectRequest) -> CreateProjectResponse:
        console.print(
            f"[cyan]create project[/cyan] project_name={escape(repr(request.project_name))} "
            f"board_id={escape(repr(request.board_id))}"
        )
        try:
            response = self.registry.create(request.project_name, request.board_id)
        except ScaffoldError as exc:
            raise _translate(exc, "Failed to create project") from exc
        console.print(f"  [green]+[/green] Created project {response.project_id}")
        return response

    def get_project(self, project_id: str) -> ProjectInfo:
        try:
            record = self.registry.get(project_id)
        except ScaffoldError as exc:
            raise _translate(exc, "Failed to get project") from exc
        return ProjectInfo(
            project_id=record.project_id,
            container_id=record.container_id,
            project_name=record.project_name,
            board_id=record.board_id,
            created_at=record.created_at,
            workspace_url=self.registry.workspace_url(record.project_id),
        )

    def get_project_file(self, project_id: str, file_path: str) -> str:
        console.print(
            f"[cyan]get file[/cyan] project_id={escape(repr(project_id))} "
            f"file_path={escape(repr(file_path))}"
        )
        try:
            return self.registry.get_file(project_id, file_path)
        except ScaffoldError as exc:
            raise _translate(exc, "Failed to get file") from exc


def _translate(exc: ScaffoldError, action: str) -> ServiceError:
    """Map a scaffolder failure to a boundary outcome and log it."""
    if isinstance(exc, (BoardNotFoundError, ProjectNotFoundError)):
        outcome, detail = Outcome.NOT_FOUND, str(exc)
    elif isinstance(exc, FileReadError):
        if exc.caller_error:
            outcome, detail = Outcome.NOT_FOUND, f"File not found: {exc.relative_path}"
        else:
            outcome, detail = Outcome.INTERNAL, f"File cannot be served: {exc.relative_path}"
    elif isinstance(exc, (TemplateNotFoundError, TemplateReadError)):
        outcome, detail = Outcome.INTERNAL, "Board template is unavailable"
    else:
        outcome, detail = Outcome.INTERNAL, "Internal scaffolding error"

    print_error(f"{action}: {escape(str(exc))}")
    return ServiceError(outcome, detail)
