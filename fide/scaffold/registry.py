"""In-memory project registry.

The registry binds generated project ids to the board template they were
created from. It is volatile: every process starts with an empty registry
and ids issued by an earlier process are unknown.

Records are immutable once inserted, so a single reader/writer lock around
the id -> record mapping is all the synchronisation needed. Filesystem work
(board lookup, template snapshot, file reads) always happens outside the
lock.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fide.scaffold.boards import BoardCatalog
from fide.scaffold.errors import BoardNotFoundError, ProjectNotFoundError
from fide.scaffold.models import CreateProjectResponse, ProjectRecord
from fide.scaffold.tree import read_rendered_file, snapshot


class ReadWriteLock:
    """Readers share the lock; a writer holds it alone.

    A waiting writer blocks newly arriving readers so that a steady stream of
    reads cannot starve it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ProjectRegistry:
    """Creates projects from board templates and serves their files.

    Args:
        catalog: Board catalog used to resolve ``board_id`` at creation time.
        workspace_prefix: URL prefix for the ``workspace_url`` handed back on
            creation.
    """

    def __init__(self, catalog: BoardCatalog, workspace_prefix: str = "/workspace") -> None:
        self.catalog = catalog
        self.workspace_prefix = workspace_prefix.rstrip("/")
        self._projects: dict[str, ProjectRecord] = {}
        self._lock = ReadWriteLock()

    # -- Mutation ------------------------------------------------------------

    def create(self, project_name: str, board_id: str) -> CreateProjectResponse:
        """Register a new project for *board_id* and snapshot its template.

        Nothing is inserted unless every step succeeds.

        Raises:
            BoardNotFoundError: If the catalog has no board with that id.
            TemplateNotFoundError: If the board's template directory is gone.
            TemplateReadError: If part of the template cannot be listed.
        """
        board = self.catalog.get_board(board_id)
        if board is None:
            raise BoardNotFoundError(board_id)

        file_tree = snapshot(board.template_root)

        record = ProjectRecord(
            project_id=str(uuid.uuid4()),
            container_id=str(uuid.uuid4()),
            project_name=project_name,
            board_id=board.id,
            template_root=board.template_root,
        )
        with self._lock.write_locked():
            self._projects[record.project_id] = record

        return CreateProjectResponse(
            project_id=record.project_id,
            container_id=record.container_id,
            file_tree=file_tree,
            workspace_url=self.workspace_url(record.project_id),
        )

    # -- Lookup --------------------------------------------------------------

    def get(self, project_id: str) -> ProjectRecord:
        """Return the record for *project_id*.

        Raises:
            ProjectNotFoundError: If the id is unknown.
        """
        with self._lock.read_locked():
            record = self._projects.get(project_id)
        if record is None:
            raise ProjectNotFoundError(project_id)
        return record

    def get_file(self, project_id: str, relative_path: str) -> str:
        """Return a project file rendered with the project's name.

        The board is not looked up again: the template root captured at
        creation time is used even if the board has since left the catalog.

        Raises:
            ProjectNotFoundError: If the id is unknown.
            FileReadError: If the file cannot be resolved or read.
        """
        record = self.get(project_id)
        return read_rendered_file(record.template_root, relative_path, record.project_name)

    def list_projects(self) -> list[ProjectRecord]:
        """Return every record, oldest first."""
        with self._lock.read_locked():
            records = list(self._projects.values())
        return sorted(records, key=lambda r: r.created_at)

    def workspace_url(self, project_id: str) -> str:
        return f"{self.workspace_prefix}/{project_id}"

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._projects)

    def __contains__(self, project_id: object) -> bool:
        with self._lock.read_locked():
            return project_id in self._projects


def create_registry(templates_dir: str | Path, workspace_prefix: str = "/workspace") -> ProjectRegistry:
    """Build a registry backed by a fresh catalog over *templates_dir*."""
    return ProjectRegistry(BoardCatalog(templates_dir), workspace_prefix=workspace_prefix)
