"""Pydantic models shared by the catalog, tree builder, registry and API.

These models are the single source of truth for the JSON shapes the HTTP
boundary returns. Serialise with ``exclude_none=True`` so that file nodes
carry no ``children`` key.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

U32_MAX = 2**32 - 1


class BoardConfig(BaseModel):
    """One supported hardware target, read from a ``board.json`` descriptor."""

    id: str = Field(..., min_length=1, description="Unique board key")
    name: str = Field(..., description="Display name")
    mcu: str
    architecture: str
    ram_kb: int = Field(..., ge=0, le=U32_MAX)
    flash_kb: int = Field(..., ge=0, le=U32_MAX)
    template_root: Path = Field(
        default=Path("."),
        exclude=True,
        description="Directory the descriptor was found in; never read from the descriptor",
    )


class FileNode(BaseModel):
    """One entry in a template tree snapshot."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str = Field(..., description="Slash-separated path relative to the template root")
    is_directory: bool
    children: list[FileNode] | None = Field(
        default=None, description="Sorted child entries; None for files"
    )


class ProjectRecord(BaseModel):
    """A live scaffolded project held by the registry."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    container_id: str = Field(..., description="Opaque secondary workspace identifier")
    project_name: str
    board_id: str
    template_root: Path
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CreateProjectRequest(BaseModel):
    project_name: str
    board_id: str


class CreateProjectResponse(BaseModel):
    project_id: str
    container_id: str
    file_tree: list[FileNode]
    workspace_url: str


class ProjectInfo(BaseModel):
    """Public view of a ``ProjectRecord``; the template root stays server-side."""

    project_id: str
    container_id: str
    project_name: str
    board_id: str
    created_at: datetime
    workspace_url: str
