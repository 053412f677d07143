# src/kanbanctl/engine/ops.py

"""
Filesystem-level operations and storage rendering.

This module contains:
- board directory initialisation,
- serialisation of BoardRecord objects to the board text layout,
- whole-file board CRUD (create / read / update / delete).

Every write re-renders the full file; there is no append mode and no
locking against concurrent editors.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import StorageError
from .parse import (
    COLUMN_FENCE,
    COMPUTED_FIELD,
    CREATED_FIELD,
    DATE_PREFIX,
    DESCRIPTION_PREFIX,
    EFFORT_FIELD,
    FIELD_SEP,
    HEADER_MARKER,
    IMPACT_FIELD,
    TAGS_FIELD,
    URGENCY_FIELD,
    load_board,
)
from .record import BoardRecord, TaskRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Store initialisation
# ---------------------------------------------------------------------

def ensure_board_dir(base_dir: Path) -> Path:
    """
    Ensure the board directory exists, creating parents as needed.
    """
    if base_dir.is_dir():
        return base_dir

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(str(base_dir), f"Cannot create board directory: {e}") from e

    logger.info("Created board directory %s", base_dir)
    return base_dir


# ---------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------

def render_board_text(board: BoardRecord) -> str:
    """
    Render a board record in the board text layout.

    Titles and names must not contain `|`, `==` or newlines: the layout
    has no escaping.
    """
    lines = [
        f"# {HEADER_MARKER} {board.name}",
        f"{DATE_PREFIX} {board.date}",
        f"{DESCRIPTION_PREFIX} {board.description}",
        "",
    ]

    for column in board.columns:
        lines.append(f"{COLUMN_FENCE} {column.name} {COLUMN_FENCE}")
        for task in column.tasks:
            lines.append(_render_task_line(task))
        lines.append("")

    return "\n".join(lines) + "\n"


def _render_task_line(task: TaskRecord) -> str:
    parts = [f"* [ID:{task.id}] {task.title}"]

    if task.priority is not None:
        prio = task.priority
        parts.append(f"{IMPACT_FIELD} {prio.impact}")
        parts.append(f"{URGENCY_FIELD} {prio.urgency}")
        parts.append(f"{EFFORT_FIELD} {prio.effort}")
        computed = prio.computed()
        if computed is not None:
            parts.append(f"{COMPUTED_FIELD} {computed:.2f}")

    if task.tags:
        parts.append(f"{TAGS_FIELD} {','.join(task.tags)}")

    if task.created is not None:
        parts.append(f"{CREATED_FIELD} {task.created}")

    return f" {FIELD_SEP} ".join(parts)


# ---------------------------------------------------------------------
# Board CRUD
# ---------------------------------------------------------------------

def save_board(path: str | Path, board: BoardRecord) -> None:
    """
    Persist a board by fully re-rendering its file.
    """
    p = Path(path)
    try:
        p.write_text(render_board_text(board), encoding="utf-8")
    except OSError as e:
        raise StorageError(str(p), f"Cannot write board file: {e}") from e

    logger.debug("Saved board '%s' to %s", board.name, p)


def create_board(path: str | Path, board: BoardRecord) -> None:
    save_board(path, board)


def read_board(path: str | Path) -> BoardRecord:
    return load_board(path)


def update_board(path: str | Path, board: BoardRecord) -> None:
    save_board(path, board)


def delete_board(path: str | Path) -> None:
    """
    Remove a board file.
    """
    p = Path(path)
    try:
        p.unlink()
    except OSError as e:
        raise StorageError(str(p), f"Cannot delete board file: {e}") from e

    logger.info("Deleted board file %s", p)
