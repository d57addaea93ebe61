"""Shared pytest fixtures for the FIDE backend test suite.

Provides reusable fixtures for:
- A throwaway templates directory with valid, missing and broken boards
- Catalog, registry and service instances wired to that directory
- A FastAPI ``TestClient`` over the scaffolding API
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from fide.api import create_app
from fide.config import Config
from fide.scaffold.boards import BoardCatalog
from fide.scaffold.registry import ProjectRegistry
from fide.service import ScaffoldService


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_board_descriptor(board_id: str, **overrides: Any) -> dict[str, Any]:
    """Build a realistic ``board.json`` payload."""
    descriptor: dict[str, Any] = {
        "id": board_id,
        "name": f"{board_id.upper()} Dev Board",
        "mcu": f"{board_id.upper()}-MCU",
        "architecture": "arm-cortex-m4",
        "ram_kb": 256,
        "flash_kb": 1024,
    }
    descriptor.update(overrides)
    return descriptor


def write_board(
    templates_dir: Path,
    directory: str,
    files: dict[str, str | bytes],
    descriptor: dict[str, Any] | str | None = None,
) -> Path:
    """Create one board template directory.

    Args:
        templates_dir: Root of all templates.
        directory: Name of the board's subdirectory.
        files: ``{relative_path: content}``; bytes are written raw.
        descriptor: Dict (serialised as JSON), raw string, or ``None`` for
            no ``board.json`` at all.
    """
    root = templates_dir / directory
    root.mkdir(parents=True, exist_ok=True)
    if isinstance(descriptor, dict):
        (root / "board.json").write_text(json.dumps(descriptor), encoding="utf-8")
    elif isinstance(descriptor, str):
        (root / "board.json").write_text(descriptor, encoding="utf-8")

    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Template fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Templates root with two valid boards and two that must be skipped.

    - ``alpha``: nested tree with a placeholder file and a binary file
    - ``beta``: single source file
    - ``no_descriptor``: files but no ``board.json``
    - ``broken``: unparsable ``board.json``
    """
    root = tmp_path / "templates"
    root.mkdir()
    write_board(
        root,
        "alpha",
        {
            "README.md": "Hello {{PROJECT_NAME}}",
            "src/main.c": '// {{PROJECT_NAME}}\nint main(void) { return 0; }\n',
            "src/drivers/led.h": "#pragma once\n",
            "assets/logo.bin": b"\xff\xfe\x00\x81binary",
        },
        descriptor=make_board_descriptor("alpha"),
    )
    write_board(
        root,
        "beta",
        {"main.c": "int main(void) { /* {{PROJECT_NAME}} */ }\n"},
        descriptor=make_board_descriptor("beta", architecture="riscv32", ram_kb=64),
    )
    write_board(root, "no_descriptor", {"main.c": "int main(void);\n"})
    write_board(root, "broken", {"main.c": ""}, descriptor="{ not json")
    yield root


@pytest.fixture
def catalog(templates_dir: Path) -> BoardCatalog:
    return BoardCatalog(templates_dir)


@pytest.fixture
def registry(catalog: BoardCatalog) -> ProjectRegistry:
    return ProjectRegistry(catalog)


@pytest.fixture
def service(registry: ProjectRegistry) -> ScaffoldService:
    return ScaffoldService(registry)


@pytest.fixture
def api_client(templates_dir: Path) -> TestClient:
    """TestClient over a fresh app bound to ``templates_dir``."""
    app = create_app(Config(templates_dir=templates_dir))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def add_board(templates_dir: Path):
    """Factory adding a board directory under ``templates_dir``.

    Usage::

        add_board("gamma", {"main.c": "..."}, ram_kb=64)
        add_board("raw", descriptor="{ not json")
        add_board("bare", descriptor=None)

    Extra keyword arguments override fields of the default descriptor,
    whose ``id`` is the directory name unless ``id`` is given.
    """
    def _add(
        directory: str,
        files: dict[str, str | bytes] | None = None,
        descriptor: dict[str, Any] | str | None | object = ...,
        **overrides: Any,
    ) -> Path:
        if descriptor is ...:
            board_id = overrides.pop("id", directory)
            descriptor = make_board_descriptor(board_id, **overrides)
        return write_board(templates_dir, directory, files or {}, descriptor=descriptor)

    return _add
