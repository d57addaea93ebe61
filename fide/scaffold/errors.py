"""Failure taxonomy for board discovery, template reads and the project registry."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every scaffolding failure."""


class BoardNotFoundError(ScaffoldError):
    """Raised when a board id has no matching catalog entry."""

    def __init__(self, board_id: str) -> None:
        self.board_id = board_id
        super().__init__(f"Board not found: {board_id}")


class ProjectNotFoundError(ScaffoldError):
    """Raised when a project id is unknown to the registry.

    The registry is volatile, so ids issued before a restart end up here too.
    """

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class TemplateNotFoundError(ScaffoldError):
    """Raised when a board's template root is missing from disk."""

    def __init__(self, template_root: str | Path) -> None:
        self.template_root = Path(template_root)
        super().__init__(f"Template path does not exist: {template_root}")


class TemplateReadError(ScaffoldError):
    """Raised when a directory inside a template tree cannot be listed."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot read template directory {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FileReadReason(str, Enum):
    """Why a template file could not be served."""

    INVALID_PATH = "invalid_path"
    NOT_FOUND = "not_found"
    NOT_A_FILE = "not_a_file"
    NOT_TEXT = "not_text"
    UNREADABLE = "unreadable"


_CALLER_REASONS = frozenset(
    {FileReadReason.INVALID_PATH, FileReadReason.NOT_FOUND, FileReadReason.NOT_A_FILE}
)


class FileReadError(ScaffoldError):
    """Raised when a template file cannot be resolved, read or decoded.

    The message only ever mentions the path the caller supplied, never the
    resolved location on disk.
    """

    def __init__(self, relative_path: str, reason: FileReadReason, detail: str = "") -> None:
        self.relative_path = relative_path
        self.reason = reason
        self.detail = detail
        message = f"Failed to read file {relative_path!r}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def caller_error(self) -> bool:
        """``True`` when the request itself was at fault rather than the template."""
        return self.reason in _CALLER_REASONS
