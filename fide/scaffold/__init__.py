"""FIDE scaffolder -- board discovery, template snapshots and the project registry.

Quick usage::

    from fide.scaffold import BoardCatalog, ProjectRegistry

    registry = ProjectRegistry(BoardCatalog("templates"))
    created = registry.create("blinky", "esp32")
    source = registry.get_file(created.project_id, "src/main.c")
"""

from fide.scaffold.boards import BoardCatalog
from fide.scaffold.errors import (
    BoardNotFoundError,
    FileReadError,
    FileReadReason,
    ProjectNotFoundError,
    ScaffoldError,
    TemplateNotFoundError,
    TemplateReadError,
)
from fide.scaffold.models import (
    BoardConfig,
    CreateProjectRequest,
    CreateProjectResponse,
    FileNode,
    ProjectInfo,
    ProjectRecord,
)
from fide.scaffold.registry import ProjectRegistry, ReadWriteLock, create_registry
from fide.scaffold.tree import PLACEHOLDER, read_rendered_file, resolve_template_path, snapshot

__all__ = [
    "PLACEHOLDER",
    "BoardCatalog",
    "BoardConfig",
    "BoardNotFoundError",
    "CreateProjectRequest",
    "CreateProjectResponse",
    "FileNode",
    "FileReadError",
    "FileReadReason",
    "ProjectInfo",
    "ProjectNotFoundError",
    "ProjectRecord",
    "ProjectRegistry",
    "ReadWriteLock",
    "ScaffoldError",
    "TemplateNotFoundError",
    "TemplateReadError",
    "create_registry",
    "read_rendered_file",
    "resolve_template_path",
    "snapshot",
]
