# src/kanbanctl/engine/record.py

"""
On-disk board records.

These types mirror the board file layout one-to-one and are what the
codec (parse / ops) reads and writes. They are deliberately separate from
the interactive model in `model.py` / `board.py`: the board model
translates to and from these records, dropping fields it does not track.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from typing import Final, Optional

from .errors import BoardNotFoundError


# ---------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------

# Calibration constants for the 1..10 computed scale.
# (impact + urgency) / effort spans roughly [0.2, 20.0] for
# impact, urgency in [0, 10] and effort in [1, 10].
COMPUTED_OFFSET: Final[float] = 0.2
COMPUTED_SPAN: Final[float] = 19.8


@dataclass(slots=True)
class Priority:
    """
    Impact / urgency / effort breakdown, each scored 0..10.
    """

    impact: int
    urgency: int
    effort: int

    def computed(self) -> Optional[float]:
        """
        Overall priority normalised onto a 1..10 scale.

        Returns None when effort is 0. The value is derived data: it is
        written to disk for the reader's benefit but never parsed back.
        """
        if self.effort == 0:
            return None

        base = (self.impact + self.urgency) / self.effort
        return 1.0 + 9.0 * ((base - COMPUTED_OFFSET) / COMPUTED_SPAN)


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------

@dataclass(slots=True)
class TaskRecord:
    """
    A single `* [ID:n] ...` line.
    """

    id: int
    title: str
    priority: Optional[Priority] = None
    tags: list[str] = field(default_factory=list)
    created: Optional[str] = None


@dataclass(slots=True)
class ColumnRecord:
    """
    A `== name ==` section and the task lines under it.
    """

    name: str
    tasks: list[TaskRecord] = field(default_factory=list)


@dataclass(slots=True)
class BoardRecord:
    """
    A whole board file: header fields plus columns in file order.
    """

    name: str
    date: str = ""
    description: str = ""
    columns: list[ColumnRecord] = field(default_factory=list)

    def add_column(self, name: str) -> ColumnRecord:
        column = ColumnRecord(name=name)
        self.columns.append(column)
        return column

    def find_column(self, name: str) -> ColumnRecord:
        for column in self.columns:
            if column.name == name:
                return column
        raise BoardNotFoundError(f"Column '{name}' not found")

    def add_task(self, column_name: str, task: TaskRecord) -> None:
        self.find_column(column_name).tasks.append(task)

    def update_task(self, column_name: str, task_id: int, updated: TaskRecord) -> None:
        """
        Replace the first task with `task_id` in the named column.
        """
        column = self.find_column(column_name)
        for i, task in enumerate(column.tasks):
            if task.id == task_id:
                column.tasks[i] = updated
                return
        raise BoardNotFoundError(f"Task with id {task_id} not found in column '{column_name}'")

    def delete_task(self, column_name: str, task_id: int) -> None:
        """
        Remove every task with `task_id` from the named column.
        """
        column = self.find_column(column_name)
        kept = [t for t in column.tasks if t.id != task_id]
        if len(kept) == len(column.tasks):
            raise BoardNotFoundError(f"Task with id {task_id} not found in column '{column_name}'")
        column.tasks = kept
