# src/kanbanctl/engine/parse.py

"""
Board file parser.

Parses the plain-text board layout into a BoardRecord:

    # TUI Kanban Board: <name>
    Date: <date>
    Description: <description>

    == <column name> ==
    * [ID:<id>] <title> | Impact: <n> | Urgency: <n> | Effort: <n> | Computed: <f> | Tags: <a,b> | Created: <date>

Parsing is permissive: unknown lines are skipped, a missing or malformed
`[ID:...]` becomes id 0, and a task without all three priority fields
gets no priority. Only I/O failures raise.
"""

import logging
import re
from pathlib import Path
from typing import Final, Optional

from .errors import StorageError
from .record import BoardRecord, ColumnRecord, Priority, TaskRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------

HEADER_MARKER: Final[str] = "TUI Kanban Board:"
DATE_PREFIX: Final[str] = "Date:"
DESCRIPTION_PREFIX: Final[str] = "Description:"
COLUMN_FENCE: Final[str] = "=="
TASK_BULLET: Final[str] = "*"
FIELD_SEP: Final[str] = "|"

IMPACT_FIELD: Final[str] = "Impact:"
URGENCY_FIELD: Final[str] = "Urgency:"
EFFORT_FIELD: Final[str] = "Effort:"
COMPUTED_FIELD: Final[str] = "Computed:"
TAGS_FIELD: Final[str] = "Tags:"
CREATED_FIELD: Final[str] = "Created:"

_TASK_HEAD_RE = re.compile(r"^\*\s*(?:\[ID:(?P<id>[^\]]*)\])?\s*(?P<title>.*)$")


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def load_board(path: str | Path) -> BoardRecord:
    """
    Read and parse a board file.

    Raises StorageError if the file cannot be read.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(str(p), f"Cannot read board file: {e}") from e

    board = parse_board_text(text)
    logger.debug("Loaded board '%s' from %s (%d columns)", board.name, p, len(board.columns))
    return board


def parse_board_text(text: str) -> BoardRecord:
    """
    Parse board file contents. Never raises on malformed input.
    """
    board = BoardRecord(name="")
    current: Optional[ColumnRecord] = None

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.startswith("#"):
            idx = line.find(HEADER_MARKER)
            if idx >= 0:
                board.name = line[idx + len(HEADER_MARKER):].strip()
            continue

        if line.startswith(DATE_PREFIX):
            board.date = line[len(DATE_PREFIX):].strip()
            continue

        if line.startswith(DESCRIPTION_PREFIX):
            board.description = line[len(DESCRIPTION_PREFIX):].strip()
            continue

        if line.startswith(COLUMN_FENCE) and line.endswith(COLUMN_FENCE):
            current = board.add_column(line.strip("=").strip())
            continue

        if line.startswith(TASK_BULLET):
            if current is None:
                logger.debug("Skipping task line outside any column: %r", line)
                continue
            current.tasks.append(_parse_task_line(line))
            continue

        logger.debug("Skipping unrecognised line: %r", line)

    return board


# ---------------------------------------------------------------------
# Task lines
# ---------------------------------------------------------------------

def _parse_task_line(line: str) -> TaskRecord:
    head, *fields = [part.strip() for part in line.split(FIELD_SEP)]

    m = _TASK_HEAD_RE.match(head)
    raw_id = (m.group("id") or "") if m else ""
    title = m.group("title").strip() if m else ""

    impact: Optional[int] = None
    urgency: Optional[int] = None
    effort: Optional[int] = None
    tags: list[str] = []
    created: Optional[str] = None

    for part in fields:
        if part.startswith(IMPACT_FIELD):
            impact = _parse_int(part[len(IMPACT_FIELD):])
        elif part.startswith(URGENCY_FIELD):
            urgency = _parse_int(part[len(URGENCY_FIELD):])
        elif part.startswith(EFFORT_FIELD):
            effort = _parse_int(part[len(EFFORT_FIELD):])
        elif part.startswith(TAGS_FIELD):
            tags = [t.strip() for t in part[len(TAGS_FIELD):].strip().split(",")]
        elif part.startswith(CREATED_FIELD):
            created = part[len(CREATED_FIELD):].strip()
        # Computed: is derived from the other three and always recomputed.

    priority = None
    if impact is not None and urgency is not None and effort is not None:
        priority = Priority(impact=impact, urgency=urgency, effort=effort)

    return TaskRecord(
        id=_parse_int(raw_id) or 0,
        title=title,
        priority=priority,
        tags=tags,
        created=created,
    )


def _parse_int(raw: str) -> Optional[int]:
    s = raw.strip()
    return int(s) if s.isascii() and s.isdigit() else None
