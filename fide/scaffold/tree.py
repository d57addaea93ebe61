"""Template tree snapshots and rendered file reads.

``snapshot`` walks a board template and describes it as a sorted, nested list
of ``FileNode`` objects. ``read_rendered_file`` serves one template file with
the project-name placeholder substituted. Substitution is a literal string
replacement performed at read time only; templates on disk are never
modified.

Client-supplied paths are untrusted. ``resolve_template_path`` canonicalises
the path against the template root and checks containment before any file is
opened, so traversal attempts are rejected without revealing whether the
target exists.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from fide.scaffold.errors import (
    FileReadError,
    FileReadReason,
    TemplateNotFoundError,
    TemplateReadError,
)
from fide.scaffold.models import FileNode

PLACEHOLDER = "{{PROJECT_NAME}}"


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def snapshot(template_root: str | Path) -> list[FileNode]:
    """Describe the directory tree under *template_root*.

    Entries are sorted by name at every depth, with files and directories
    interleaved rather than grouped. Paths are POSIX-style and relative to
    the root. Symlinks resolving outside the root are left out, so the tree
    only lists paths that ``read_rendered_file`` will serve.

    Raises:
        TemplateNotFoundError: If the root does not exist or is not a directory.
        TemplateReadError: If a directory inside the tree cannot be listed.
    """
    root = Path(template_root)
    if not root.is_dir():
        raise TemplateNotFoundError(root)
    return _snapshot_dir(
        root,
        PurePosixPath(),
        ancestors=frozenset({_dir_key(root)}),
        real_root=Path(os.path.realpath(root)),
    )


def _snapshot_dir(
    directory: Path,
    relative: PurePosixPath,
    ancestors: frozenset[tuple[int, int]],
    real_root: Path,
) -> list[FileNode]:
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise TemplateReadError(directory, exc.strerror or str(exc)) from exc

    nodes: list[FileNode] = []
    for entry in entries:
        if entry.is_symlink() and not Path(os.path.realpath(entry)).is_relative_to(real_root):
            continue
        entry_relative = relative / entry.name
        if entry.is_dir():
            key = _dir_key(entry)
            if key in ancestors:
                # Symlink back to an ancestor; listing it again would never end.
                children: list[FileNode] = []
            else:
                children = _snapshot_dir(entry, entry_relative, ancestors | {key}, real_root)
            nodes.append(
                FileNode(
                    name=entry.name,
                    path=str(entry_relative),
                    is_directory=True,
                    children=children,
                )
            )
        else:
            nodes.append(FileNode(name=entry.name, path=str(entry_relative), is_directory=False))
    return nodes


def _dir_key(directory: Path) -> tuple[int, int]:
    try:
        stat = directory.stat()
    except OSError as exc:
        raise TemplateReadError(directory, exc.strerror or str(exc)) from exc
    return (stat.st_dev, stat.st_ino)


# ---------------------------------------------------------------------------
# File reads
# ---------------------------------------------------------------------------


def resolve_template_path(template_root: str | Path, relative_path: str) -> Path:
    """Resolve *relative_path* inside *template_root* or reject it.

    The path is joined to the canonical root and fully resolved (``..``
    collapsed, symlinks followed). The result must lie strictly below the
    root. Existence is not checked here.

    Raises:
        FileReadError: With reason ``INVALID_PATH`` for empty, absolute or
            escaping paths.
    """
    if not relative_path or "\x00" in relative_path:
        raise FileReadError(relative_path, FileReadReason.INVALID_PATH)
    if Path(relative_path).is_absolute() or PurePosixPath(relative_path).is_absolute():
        raise FileReadError(relative_path, FileReadReason.INVALID_PATH, "absolute path")

    root = Path(os.path.realpath(template_root))
    candidate = Path(os.path.realpath(root / relative_path))
    if candidate == root or not candidate.is_relative_to(root):
        raise FileReadError(relative_path, FileReadReason.INVALID_PATH, "outside template root")
    return candidate


def read_rendered_file(template_root: str | Path, relative_path: str, project_name: str) -> str:
    """Read one template file and substitute the project-name placeholder.

    Args:
        template_root: Root directory of the board template.
        relative_path: Caller-supplied path relative to the root.
        project_name: Replacement for every ``{{PROJECT_NAME}}`` occurrence.

    Returns:
        The rendered file content.

    Raises:
        FileReadError: If the path escapes the root, does not exist, is not a
            regular file, is not UTF-8 text, or cannot be read.
    """
    path = resolve_template_path(template_root, relative_path)

    # realpath drops a trailing separator; "file.txt/" names a directory.
    names_directory = relative_path.endswith(("/", os.sep))
    try:
        not_a_file = path.exists() and (names_directory or not path.is_file())
    except OSError as exc:
        raise FileReadError(
            relative_path, FileReadReason.UNREADABLE, exc.strerror or type(exc).__name__
        ) from exc
    if not_a_file:
        raise FileReadError(relative_path, FileReadReason.NOT_A_FILE)

    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileReadError(relative_path, FileReadReason.NOT_FOUND) from exc
    except IsADirectoryError as exc:
        raise FileReadError(relative_path, FileReadReason.NOT_A_FILE) from exc
    except UnicodeDecodeError as exc:
        raise FileReadError(relative_path, FileReadReason.NOT_TEXT, "not valid UTF-8") from exc
    except OSError as exc:
        if path.exists() and not path.is_file():
            raise FileReadError(relative_path, FileReadReason.NOT_A_FILE) from exc
        raise FileReadError(
            relative_path, FileReadReason.UNREADABLE, exc.strerror or type(exc).__name__
        ) from exc

    return render(content, project_name)


def render(content: str, project_name: str) -> str:
    """Replace every placeholder occurrence in *content* with *project_name*."""
    return content.replace(PLACEHOLDER, project_name)
