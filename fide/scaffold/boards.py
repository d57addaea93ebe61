"""Board catalog: discovers supported boards from the templates directory.

Every immediate subdirectory of the templates root that holds a valid
``board.json`` becomes one ``BoardConfig``. The catalog keeps no state; each
query rescans the disk so that adding or removing a template directory takes
effect without a restart.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from fide.scaffold.models import BoardConfig
from fide.utils import console

DESCRIPTOR_NAME = "board.json"


class BoardCatalog:
    """Best-effort scanner over a directory of board templates.

    A malformed template never breaks the listing for every other board:
    unreadable or invalid descriptors are skipped and reported as a dim
    console notice only.
    """

    def __init__(self, templates_dir: str | Path) -> None:
        self.templates_dir = Path(templates_dir)

    def list_boards(self) -> list[BoardConfig]:
        """Return every board found under the templates root, in scan order."""
        try:
            entries = list(self.templates_dir.iterdir())
        except OSError as exc:
            location = escape(str(self.templates_dir))
            console.print(f"  [dim]Board catalog unavailable at {location}: {escape(str(exc))}[/dim]")
            return []

        boards: list[BoardConfig] = []
        for entry in entries:
            board = _load_board(entry)
            if board is not None:
                boards.append(board)
        return boards

    def get_board(self, board_id: str) -> BoardConfig | None:
        """Return the board whose ``id`` equals *board_id*, or ``None``.

        If several descriptors declare the same id, the last one scanned wins.
        """
        found: BoardConfig | None = None
        for board in self.list_boards():
            if board.id == board_id:
                found = board
        return found


def _load_board(directory: Path) -> BoardConfig | None:
    """Parse ``<directory>/board.json``; ``None`` when absent or invalid."""
    descriptor = directory / DESCRIPTOR_NAME
    try:
        if not directory.is_dir() or not descriptor.is_file():
            return None
        raw = descriptor.read_text(encoding="utf-8")
        board = BoardConfig.model_validate_json(raw)
    except (OSError, UnicodeDecodeError, ValidationError) as exc:
        console.print(
            f"  [dim]Skipping board template {escape(directory.name)}: {escape(str(exc))}[/dim]"
        )
        return None
    return board.model_copy(update={"template_root": directory})
