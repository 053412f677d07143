# src/kanbanctl/engine/model.py

"""
Core in-memory domain models.

This module defines the interactive representations of tasks and
columns, and the set of input modes the board can be in.

These are not the on-disk records (see `record.py`); the board model
bridges between the two. No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Optional


DEFAULT_IMPACT: Final[int] = 5


# ---------------------------------------------------------------------
# Input mode
# ---------------------------------------------------------------------

class InputMode(str, Enum):
    """
    Modal state of the board editor.

    The same physical key means different things in different modes.
    """

    NORMAL = "normal"
    ADDING_COLUMN = "adding_column"
    ADDING_TASK = "adding_task"
    RENAMING_COLUMN = "renaming_column"
    RENAMING_TASK = "renaming_task"
    MOVE = "move"
    CONFIRM_DELETE_COLUMN = "confirm_delete_column"
    COLUMN_SELECTION = "column_selection"
    JUMP_TO_COLUMN = "jump_to_column"
    JUMP_TO_TASK = "jump_to_task"
    BOARD_SELECTION = "board_selection"
    ADDING_BOARD = "adding_board"

    @property
    def is_text_entry(self) -> bool:
        """
        True for popup modes that collect text into the input buffer.
        """
        return self in _TEXT_ENTRY_MODES


_TEXT_ENTRY_MODES: Final[frozenset[InputMode]] = frozenset(
    {
        InputMode.ADDING_COLUMN,
        InputMode.ADDING_TASK,
        InputMode.RENAMING_COLUMN,
        InputMode.RENAMING_TASK,
        InputMode.ADDING_BOARD,
    }
)


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Task:
    """
    A card on the board.

    `priority` is the impact score only; urgency and effort live in the
    board file and are not tracked while editing.
    `task_id` is assigned by the owning board and is unique within it.
    """

    task_id: int
    title: str
    description: Optional[str] = None
    priority: Optional[int] = DEFAULT_IMPACT


# ---------------------------------------------------------------------
# Column
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Column:
    """
    A named list of tasks.

    Only the active column may have `selected_task` set.
    """

    title: str
    tasks: list[Task] = field(default_factory=list)
    selected_task: Optional[int] = None

    @property
    def current_task(self) -> Optional[Task]:
        if self.selected_task is None or self.selected_task >= len(self.tasks):
            return None
        return self.tasks[self.selected_task]

    def remove_selected(self) -> Optional[Task]:
        """
        Remove the selected task and re-clamp the selection.

        If the removed task was last, the new last task becomes selected;
        an emptied column has no selection.
        """
        idx = self.selected_task
        if idx is None or idx >= len(self.tasks):
            return None

        task = self.tasks.pop(idx)

        if not self.tasks:
            self.selected_task = None
        elif idx >= len(self.tasks):
            self.selected_task = len(self.tasks) - 1

        return task
