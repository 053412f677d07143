# src/kanbanctl/engine/board.py

"""
Board model: the single mutable board owned by the editor.

This module contains *all* state-changing operations on the interactive
board: column and task add / delete / move / rename, selection and
navigation, jump labels, board switching, and the bridge to the on-disk
record used for persistence.

Design principles:
- Structural mutations save the board immediately; navigation does not.
- Persistence failures never undo the in-memory change. They are logged
  and surfaced through `status_message`.
- Only the active column may have a selected task.
"""

import logging
import string
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Final, Optional

from .errors import BoardNotFoundError, KanbanError
from .model import DEFAULT_IMPACT, Column, InputMode, Task
from .ops import read_board, save_board
from .record import BoardRecord, ColumnRecord, Priority, TaskRecord
from .scan import CREATE_NEW_BOARD, BoardStore, is_create_new

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

DEFAULT_BOARD_TITLE: Final[str] = "Kanban Board"
DEFAULT_COLUMN_TITLE: Final[str] = "To Do"
SEED_TASK_TITLES: Final[tuple[str, ...]] = ("Implement UI", "Add task functionality")
BOARD_DESCRIPTION: Final[str] = "TUI Kanban Board"

# Stored alongside the impact score; not editable in the board model.
DEFAULT_URGENCY: Final[int] = 5
DEFAULT_EFFORT: Final[int] = 3

# 'l' and 'o' are left out: too easy to confuse with '1' and '0'.
JUMP_LABELS: Final[str] = "abcdefghijkmnpqrstuvwxyz"
JUMP_LABELS_EXTENDED: Final[str] = string.ascii_uppercase


def _today() -> str:
    """Return today's ISO date (isolated for testability)."""
    return date.today().isoformat()


# ---------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------

class Board:
    """
    In-memory board plus editor state (input mode, text buffer, board picker).

    A fresh board has one "To Do" column with two seed tasks and starts in
    board selection mode. `file_path` stays None until persistence is set
    up through `initialize_storage`, `create_new_board` or `open_board`.
    """

    def __init__(self, title: str = DEFAULT_BOARD_TITLE, store: Optional[BoardStore] = None):
        self.title: str = title
        self.store: BoardStore = store if store is not None else BoardStore(base_dir=None)

        self._next_id: int = 1
        self.columns: list[Column] = [
            Column(
                title=DEFAULT_COLUMN_TITLE,
                tasks=[self._new_task(t) for t in SEED_TASK_TITLES],
                selected_task=0,
            )
        ]
        self.active_column: int = 0

        self.input_mode: InputMode = InputMode.BOARD_SELECTION
        self.input_text: str = ""

        self.file_path: Optional[Path] = None
        self.available_boards: list[str] = []
        self.selected_board_index: Optional[int] = 0

        self.status_message: str = ""

    # -----------------------------------------------------------------
    # Read-only helpers
    # -----------------------------------------------------------------

    @property
    def current_column(self) -> Optional[Column]:
        if not self.columns or self.active_column >= len(self.columns):
            return None
        return self.columns[self.active_column]

    @property
    def current_task(self) -> Optional[Task]:
        column = self.current_column
        return column.current_task if column is not None else None

    @property
    def has_selected_task(self) -> bool:
        return self.current_task is not None

    def total_task_count(self) -> int:
        return sum(len(c.tasks) for c in self.columns)

    # -----------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------

    def _allocate_id(self) -> int:
        task_id = self._next_id
        self._next_id += 1
        return task_id

    def _new_task(self, title: str) -> Task:
        return Task(task_id=self._allocate_id(), title=title, priority=DEFAULT_IMPACT)

    def _unique_column_title(self, title: str, *, ignore: Optional[int] = None) -> str:
        """
        Append " (n)" with increasing n until `title` is unused.
        """
        taken = {c.title for i, c in enumerate(self.columns) if i != ignore}
        candidate = title
        n = 1
        while candidate in taken:
            candidate = f"{title} ({n})"
            n += 1
        return candidate

    def _focus_active_column(self) -> None:
        """
        Scope selection to the active column.

        Clears every other column's selection and makes sure a non-empty
        active column has exactly one valid selected task.
        """
        for i, column in enumerate(self.columns):
            if i != self.active_column:
                column.selected_task = None

        column = self.current_column
        if column is None:
            return

        if not column.tasks:
            column.selected_task = None
        elif column.selected_task is None:
            column.selected_task = 0
        elif column.selected_task >= len(column.tasks):
            column.selected_task = len(column.tasks) - 1

    def _finish_input(self) -> None:
        self.input_text = ""
        self.input_mode = InputMode.NORMAL

    def report(self, message: str) -> None:
        """
        Surface a recoverable problem to the user.
        """
        logger.warning(message)
        self.status_message = message

    def _autosave(self) -> None:
        """
        Save after a structural change. Failures are reported, not raised.
        """
        if self.file_path is None:
            logger.debug("Board '%s' has no file; change kept in memory only", self.title)
            return

        try:
            self.save()
        except KanbanError as e:
            self.report(f"Error saving board: {e}")

    # -----------------------------------------------------------------
    # Columns
    # -----------------------------------------------------------------

    def add_column(self, title: str) -> Column:
        column = Column(title=self._unique_column_title(title))
        self.columns.append(column)

        self._autosave()
        self._finish_input()
        return column

    def rename_current_column(self, title: str) -> None:
        column = self.current_column
        if column is not None:
            column.title = self._unique_column_title(title, ignore=self.active_column)
            self._autosave()

        self._finish_input()

    def delete_current_column(self) -> None:
        """
        Remove the active column.

        Deleting the last remaining column leaves the board with no columns.
        """
        if not self.columns:
            return

        self.columns.pop(self.active_column)
        if self.columns and self.active_column >= len(self.columns):
            self.active_column = len(self.columns) - 1
        if not self.columns:
            self.active_column = 0

        self._focus_active_column()
        self._autosave()

    def select_prev_column(self) -> None:
        if self.active_column > 0:
            self.active_column -= 1
            self._focus_active_column()

    def select_next_column(self) -> None:
        if self.active_column < len(self.columns) - 1:
            self.active_column += 1
            self._focus_active_column()

    def switch_to_column(self, index: int) -> bool:
        """
        Make column `index` active without saving. Returns False if out of range.
        """
        if not 0 <= index < len(self.columns):
            return False

        self.active_column = index
        self._focus_active_column()
        return True

    def jump_to_column(self, key_index: int) -> None:
        """
        Jump by number key: 0 -> first column, 1..9 -> columns 0..8.

        Out-of-range keys leave the board (and the input mode) unchanged.
        """
        target = 0 if key_index == 0 else key_index - 1
        if not self.switch_to_column(target):
            return

        self.input_mode = InputMode.NORMAL
        self._autosave()

    # -----------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------

    def add_task(self, title: str) -> Optional[Task]:
        """
        Append a task to the active column and select it.
        """
        column = self.current_column
        if column is None:
            self.report("Cannot add a task: the board has no columns")
            self._finish_input()
            return None

        task = self._new_task(title)
        column.tasks.append(task)
        column.selected_task = len(column.tasks) - 1

        self._autosave()
        self._finish_input()
        return task

    def rename_current_task(self, title: str) -> None:
        task = self.current_task
        if task is not None:
            task.title = title
            self._autosave()

        self._finish_input()

    def delete_current_task(self) -> None:
        column = self.current_column
        if column is None:
            return

        if column.remove_selected() is not None:
            self._autosave()

    def select_prev_task(self) -> None:
        column = self.current_column
        if column is None:
            return

        if not column.tasks:
            column.selected_task = None
        elif column.selected_task is None:
            column.selected_task = len(column.tasks) - 1
        elif column.selected_task > 0:
            column.selected_task -= 1

    def select_next_task(self) -> None:
        column = self.current_column
        if column is None:
            return

        if not column.tasks:
            column.selected_task = None
        elif column.selected_task is None:
            column.selected_task = 0
        elif column.selected_task < len(column.tasks) - 1:
            column.selected_task += 1

    def move_task_to_column(self, target_index: int) -> None:
        """
        Move the selected task to the end of column `target_index`.

        No-op when the target is out of range or is the active column.
        The moved task is not selected in the target column.
        """
        if target_index >= len(self.columns) or target_index == self.active_column:
            return

        source = self.current_column
        if source is None:
            return

        task = source.remove_selected()
        if task is None:
            return

        target = self.columns[target_index]
        target.tasks.append(task)

        # Unreachable under the guard above; kept so the target column's
        # selection is only ever touched when it is the active one.
        if self.active_column == target_index:
            target.selected_task = len(target.tasks) - 1

        self._autosave()

    def jump_to_task(self, column_index: int, task_index: int) -> None:
        if not self.switch_to_column(column_index):
            return

        column = self.columns[column_index]
        if task_index < len(column.tasks):
            column.selected_task = task_index

        self.input_mode = InputMode.NORMAL
        self._autosave()

    # -----------------------------------------------------------------
    # Jump labels
    # -----------------------------------------------------------------

    def get_jump_labels(self) -> list[str]:
        """
        Label alphabet for the current board.

        Uppercase letters are added once there are more tasks than
        lowercase labels.
        """
        labels = list(JUMP_LABELS)
        if self.total_task_count() > len(labels):
            labels.extend(JUMP_LABELS_EXTENDED)
        return labels

    def _iter_positions(self) -> Iterator[tuple[int, int]]:
        for c_idx, column in enumerate(self.columns):
            for t_idx in range(len(column.tasks)):
                yield c_idx, t_idx

    def get_jump_label_for_task(self, column_index: int, task_index: int) -> Optional[str]:
        """
        Label of a task in column-major order, or None if it has none.
        """
        labels = self.get_jump_labels()
        for n, pos in enumerate(self._iter_positions()):
            if pos == (column_index, task_index):
                return labels[n] if n < len(labels) else None
        return None

    def get_task_by_jump_label(self, label: str) -> Optional[tuple[int, int]]:
        labels = self.get_jump_labels()
        if label not in labels:
            return None

        wanted = labels.index(label)
        for n, pos in enumerate(self._iter_positions()):
            if n == wanted:
                return pos
        return None

    # -----------------------------------------------------------------
    # Record bridge
    # -----------------------------------------------------------------

    def to_record(self) -> BoardRecord:
        """
        Translate the board into its on-disk record.

        Urgency and effort get fixed defaults, every task is stamped with
        today's date, and a missing impact becomes the default.
        """
        today = _today()
        record = BoardRecord(name=self.title, date=today, description=BOARD_DESCRIPTION)

        for column in self.columns:
            col_rec = ColumnRecord(name=column.title)
            for task in column.tasks:
                impact = task.priority if task.priority is not None else DEFAULT_IMPACT
                col_rec.tasks.append(
                    TaskRecord(
                        id=task.task_id,
                        title=task.title,
                        priority=Priority(impact=impact, urgency=DEFAULT_URGENCY, effort=DEFAULT_EFFORT),
                        tags=[],
                        created=today,
                    )
                )
            record.columns.append(col_rec)

        return record

    def update_from_record(self, record: BoardRecord) -> None:
        """
        Rebuild columns and tasks from a loaded record.

        Only the impact survives as the task priority; description, tags,
        created, urgency and effort are dropped. The previously active
        column is found again by title when possible, otherwise the index
        is clamped. Only that column gets a selection (its first task).
        """
        previous = self.current_column.title if self.current_column is not None else None

        self._next_id = max((t.id for c in record.columns for t in c.tasks), default=0) + 1
        used: set[int] = set()

        self.columns = []
        for col_rec in record.columns:
            column = Column(title=col_rec.name)
            for task_rec in col_rec.tasks:
                task_id = task_rec.id
                if task_id <= 0 or task_id in used:
                    task_id = self._allocate_id()
                used.add(task_id)

                column.tasks.append(
                    Task(
                        task_id=task_id,
                        title=task_rec.title,
                        priority=task_rec.priority.impact if task_rec.priority is not None else None,
                    )
                )
            self.columns.append(column)

        if previous is not None:
            for i, column in enumerate(self.columns):
                if column.title == previous:
                    self.active_column = i
                    break

        if not self.columns:
            self.active_column = 0
        elif self.active_column >= len(self.columns):
            self.active_column = len(self.columns) - 1

        for i, column in enumerate(self.columns):
            column.selected_task = 0 if i == self.active_column and column.tasks else None

    # -----------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------

    def save(self) -> None:
        """
        Write the board to its file. Raises on failure.
        """
        if self.file_path is None:
            raise BoardNotFoundError("No file path set")
        save_board(self.file_path, self.to_record())

    def load(self) -> None:
        """
        Replace the board contents from its file. Raises on failure.
        """
        if self.file_path is None:
            raise BoardNotFoundError("No file path set")
        self.update_from_record(read_board(self.file_path))

    def initialize_storage(self) -> None:
        """
        Bind the board to `<base_dir>/<title>.txt`.

        An existing file is loaded; otherwise the current board is saved there.
        """
        path = self.store.path_for(self.title)
        self.file_path = path

        if path.exists():
            self.load()
        else:
            self.save()

    # -----------------------------------------------------------------
    # Board switching
    # -----------------------------------------------------------------

    def scan_available_boards(self) -> None:
        """
        Refresh the board picker. Without a board directory only the
        "[Create New Board]" entry is offered.
        """
        try:
            self.available_boards = self.store.scan()
        except KanbanError as e:
            self.report(f"Error scanning boards: {e}")
            self.available_boards = [CREATE_NEW_BOARD]

        self.selected_board_index = 0 if self.available_boards else None

    def select_prev_board(self) -> None:
        if self.selected_board_index is not None and self.selected_board_index > 0:
            self.selected_board_index -= 1

    def select_next_board(self) -> None:
        if self.selected_board_index is not None and self.selected_board_index < len(self.available_boards) - 1:
            self.selected_board_index += 1

    @property
    def highlighted_board(self) -> Optional[str]:
        idx = self.selected_board_index
        if idx is None or not 0 <= idx < len(self.available_boards):
            return None
        return self.available_boards[idx]

    def open_board(self, display_name: str) -> None:
        """
        Load the named board and make it current. Raises on failure,
        leaving the current board untouched.
        """
        path = self.store.path_for(display_name)
        record = read_board(path)

        self.file_path = path
        self.title = display_name
        self.update_from_record(record)
        self.input_mode = InputMode.NORMAL
        logger.info("Opened board '%s' (%s)", display_name, path)

    def load_selected_board(self) -> None:
        """
        Open the highlighted board, or switch to board creation if the
        "[Create New Board]" entry is highlighted.
        """
        name = self.highlighted_board
        if name is None:
            return

        if is_create_new(name):
            self.input_mode = InputMode.ADDING_BOARD
            self.input_text = ""
            return

        self.open_board(name)

    def create_new_board(self, title: str) -> None:
        """
        Start a new board with a single empty column and save it.

        The in-memory board is replaced even if it cannot be saved.
        """
        self.title = title
        self.columns = [Column(title=DEFAULT_COLUMN_TITLE)]
        self.active_column = 0
        self._next_id = 1

        # Detach from the previous file first so a failed lookup cannot
        # write this board over it.
        self.file_path = None
        self.file_path = self.store.path_for(title)
        self.save()
        logger.info("Created board '%s' (%s)", title, self.file_path)
