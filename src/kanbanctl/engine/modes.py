# src/kanbanctl/engine/modes.py

"""
Modal key handling.

Maps key presses to board operations and input mode changes. Each mode
reads the same physical keys differently, in the manner of a modal text
editor. All board mutation coming from the keyboard goes through here.

Normal mode understands:
- single keys that act immediately (quit, navigation, mode switches),
- two-key chords started by a prefix key (`space` or `d`), collected in a
  pending buffer and matched against CHORDS.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final, Optional

from .board import Board
from .errors import KanbanError
from .model import InputMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------

ENTER: Final[str] = "enter"
ESC: Final[str] = "esc"
BACKSPACE: Final[str] = "backspace"
UP: Final[str] = "up"
DOWN: Final[str] = "down"
LEFT: Final[str] = "left"
RIGHT: Final[str] = "right"


@dataclass(frozen=True, slots=True)
class Key:
    """
    A single key press.

    `code` is either one printable character or one of the named keys
    above. `ctrl` is set for Control-modified letters.
    """

    code: str
    ctrl: bool = False

    @property
    def char(self) -> Optional[str]:
        """The typed character, or None for named / Control keys."""
        if self.ctrl or len(self.code) != 1:
            return None
        return self.code

    @property
    def digit(self) -> Optional[int]:
        c = self.char
        return int(c) if c is not None and "0" <= c <= "9" else None


# ---------------------------------------------------------------------
# Defaults and chord table
# ---------------------------------------------------------------------

DEFAULT_NEW_COLUMN: Final[str] = "New Column"
DEFAULT_NEW_TASK: Final[str] = "New Task"
DEFAULT_RENAMED_COLUMN: Final[str] = "Unnamed Column"
DEFAULT_RENAMED_TASK: Final[str] = "Unnamed Task"
DEFAULT_NEW_BOARD: Final[str] = "My Kanban Board"

CHORD_PREFIXES: Final[frozenset[str]] = frozenset({" ", "d"})

# chord -> InputHandler method name
CHORDS: Final[dict[str, str]] = {
    " c": "_start_add_column",
    " t": "_start_add_task",
    " d": "_delete_task",
    " b": "_open_board_picker",
    " j": "_start_jump_to_column",
    " f": "_start_jump_to_task",
    " r": "_start_rename_task",
    " R": "_start_rename_column",
    "dd": "_confirm_delete_column",
}

HELP_TEXT: Final[dict[InputMode, str]] = {
    InputMode.NORMAL: (
        "h/l columns | j/k tasks | g move task | m move mode | "
        "␣c column | ␣t task | ␣d del task | dd del column | "
        "␣r/␣R rename | ␣j/␣f jump | ␣b boards | q quit"
    ),
    InputMode.ADDING_COLUMN: "Enter column name | Enter to confirm | Esc to cancel",
    InputMode.ADDING_TASK: "Enter task name | Enter to confirm | Esc to cancel",
    InputMode.RENAMING_COLUMN: "Edit column name | Enter to confirm | Esc to cancel",
    InputMode.RENAMING_TASK: "Edit task name | Enter to confirm | Esc to cancel",
    InputMode.MOVE: "Press 0-9 to jump to that column | Esc to cancel",
    InputMode.CONFIRM_DELETE_COLUMN: "Delete this column? y/n",
    InputMode.COLUMN_SELECTION: "Press 1-9 to move the task to that column | Esc to cancel",
    InputMode.JUMP_TO_COLUMN: "Press 1-9 to jump to that column | any other key cancels",
    InputMode.JUMP_TO_TASK: "Type a task label to jump to it | Esc to cancel",
    InputMode.BOARD_SELECTION: "j/k or arrows to choose | Enter to open | Esc or ␣b to close | q to quit",
    InputMode.ADDING_BOARD: "Enter board name | Enter to create | Esc to go back",
}


# ---------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------

class InputHandler:
    """
    Input state machine driving a Board.

    `handle_key` applies at most one transition per key and returns False
    once the user has asked to quit.
    """

    def __init__(self, board: Board):
        self.board = board
        self.pending: str = ""

        self._dispatch: dict[InputMode, Callable[[Key], bool]] = {
            InputMode.NORMAL: self._on_normal,
            InputMode.ADDING_COLUMN: self._on_text_entry,
            InputMode.ADDING_TASK: self._on_text_entry,
            InputMode.RENAMING_COLUMN: self._on_text_entry,
            InputMode.RENAMING_TASK: self._on_text_entry,
            InputMode.ADDING_BOARD: self._on_text_entry,
            InputMode.MOVE: self._on_move,
            InputMode.CONFIRM_DELETE_COLUMN: self._on_confirm_delete_column,
            InputMode.COLUMN_SELECTION: self._on_column_selection,
            InputMode.JUMP_TO_COLUMN: self._on_jump_to_column,
            InputMode.JUMP_TO_TASK: self._on_jump_to_task,
            InputMode.BOARD_SELECTION: self._on_board_selection,
        }

    @property
    def mode(self) -> InputMode:
        return self.board.input_mode

    def help_text(self) -> str:
        return HELP_TEXT[self.mode]

    def handle_key(self, key: Key) -> bool:
        """
        Apply one key press. Returns False when the editor should exit.
        """
        self.board.status_message = ""
        if self.mode not in (InputMode.NORMAL, InputMode.BOARD_SELECTION):
            self.pending = ""
        return self._dispatch[self.mode](key)

    def _set_mode(self, mode: InputMode) -> None:
        logger.debug("Mode %s -> %s", self.board.input_mode.value, mode.value)
        self.board.input_mode = mode

    # -----------------------------------------------------------------
    # Normal mode
    # -----------------------------------------------------------------

    def _on_normal(self, key: Key) -> bool:
        char = key.char

        if self.pending:
            chord = self.pending + (char or "")
            self.pending = ""
            action = CHORDS.get(chord) if char is not None else None
            if action is not None:
                getattr(self, action)()
                return True
            # Unmatched: drop the prefix and treat this key as a fresh press.

        if char is not None and char in CHORD_PREFIXES:
            self.pending = char
            return True

        return self._on_normal_single(key)

    def _on_normal_single(self, key: Key) -> bool:
        board = self.board

        if key.ctrl:
            if key.code == "s":
                self._save_now()
            return True

        code = key.code
        if code == "q":
            return False
        if code in ("h", LEFT):
            board.select_prev_column()
        elif code in ("l", RIGHT):
            board.select_next_column()
        elif code in ("j", DOWN):
            board.select_next_task()
        elif code in ("k", UP):
            board.select_prev_task()
        elif code == "g":
            if board.has_selected_task:
                self._set_mode(InputMode.COLUMN_SELECTION)
        elif code == "m":
            self._set_mode(InputMode.MOVE)

        return True

    def _save_now(self) -> None:
        try:
            self.board.save()
        except KanbanError as e:
            self.board.report(f"Error saving board: {e}")

    # Chord actions

    def _start_text_entry(self, mode: InputMode, initial: str = "") -> None:
        self.board.input_text = initial
        self._set_mode(mode)

    def _start_add_column(self) -> None:
        self._start_text_entry(InputMode.ADDING_COLUMN)

    def _start_add_task(self) -> None:
        self._start_text_entry(InputMode.ADDING_TASK)

    def _start_rename_column(self) -> None:
        column = self.board.current_column
        if column is not None:
            self._start_text_entry(InputMode.RENAMING_COLUMN, column.title)

    def _start_rename_task(self) -> None:
        task = self.board.current_task
        if task is not None:
            self._start_text_entry(InputMode.RENAMING_TASK, task.title)

    def _delete_task(self) -> None:
        self.board.delete_current_task()

    def _open_board_picker(self) -> None:
        self.board.scan_available_boards()
        self._set_mode(InputMode.BOARD_SELECTION)

    def _start_jump_to_column(self) -> None:
        self._set_mode(InputMode.JUMP_TO_COLUMN)

    def _start_jump_to_task(self) -> None:
        if self.board.total_task_count():
            self._set_mode(InputMode.JUMP_TO_TASK)

    def _confirm_delete_column(self) -> None:
        if self.board.columns:
            self._set_mode(InputMode.CONFIRM_DELETE_COLUMN)

    # -----------------------------------------------------------------
    # Text entry popups
    # -----------------------------------------------------------------

    def _on_text_entry(self, key: Key) -> bool:
        board = self.board

        if key.code == ENTER:
            self._commit_text(board.input_text)
        elif key.code == ESC:
            board.input_text = ""
            if self.mode is InputMode.ADDING_BOARD:
                self._set_mode(InputMode.BOARD_SELECTION)
            else:
                self._set_mode(InputMode.NORMAL)
        elif key.code == BACKSPACE:
            board.input_text = board.input_text[:-1]
        elif key.char is not None:
            board.input_text += key.char

        return True

    def _commit_text(self, text: str) -> None:
        board = self.board
        mode = self.mode

        if mode is InputMode.ADDING_COLUMN:
            board.add_column(text or DEFAULT_NEW_COLUMN)
        elif mode is InputMode.ADDING_TASK:
            board.add_task(text or DEFAULT_NEW_TASK)
        elif mode is InputMode.RENAMING_COLUMN:
            board.rename_current_column(text or DEFAULT_RENAMED_COLUMN)
        elif mode is InputMode.RENAMING_TASK:
            board.rename_current_task(text or DEFAULT_RENAMED_TASK)
        elif mode is InputMode.ADDING_BOARD:
            try:
                board.create_new_board(text or DEFAULT_NEW_BOARD)
            except KanbanError as e:
                board.report(f"Error creating board: {e}")
            board.input_text = ""
            self._set_mode(InputMode.NORMAL)

    # -----------------------------------------------------------------
    # Column targeting modes
    # -----------------------------------------------------------------

    def _on_move(self, key: Key) -> bool:
        if key.code == ESC:
            self._set_mode(InputMode.NORMAL)
        elif key.digit is not None:
            self.board.jump_to_column(key.digit)
        return True

    def _on_confirm_delete_column(self, key: Key) -> bool:
        if key.char == "y":
            self.board.delete_current_column()
            self._set_mode(InputMode.NORMAL)
        elif key.char == "n" or key.code == ESC:
            self._set_mode(InputMode.NORMAL)
        return True

    def _on_column_selection(self, key: Key) -> bool:
        digit = key.digit
        if key.code == ESC:
            self._set_mode(InputMode.NORMAL)
        elif digit is not None:
            if digit >= 1:
                self.board.move_task_to_column(digit - 1)
            self._set_mode(InputMode.NORMAL)
        return True

    def _on_jump_to_column(self, key: Key) -> bool:
        digit = key.digit
        if digit is not None and digit >= 1:
            self.board.switch_to_column(digit - 1)
        self._set_mode(InputMode.NORMAL)
        return True

    def _on_jump_to_task(self, key: Key) -> bool:
        if key.code == ESC:
            self._set_mode(InputMode.NORMAL)
            return True

        if key.char is None:
            return True

        target = self.board.get_task_by_jump_label(key.char)
        if target is not None:
            self.board.jump_to_task(*target)
        return True

    # -----------------------------------------------------------------
    # Board picker
    # -----------------------------------------------------------------

    def _on_board_selection(self, key: Key) -> bool:
        board = self.board
        code = key.code
        pending, self.pending = self.pending, ""

        if code == ESC:
            if not board.columns:
                return False
            self._set_mode(InputMode.NORMAL)
        elif key.char == " ":
            self.pending = " "
        elif key.char == "b" and pending == " ":
            self._set_mode(InputMode.NORMAL)
        elif key.char == "q":
            return False
        elif code in (UP, "k") and not key.ctrl:
            board.select_prev_board()
        elif code in (DOWN, "j") and not key.ctrl:
            board.select_next_board()
        elif code == ENTER:
            try:
                board.load_selected_board()
            except KanbanError as e:
                board.report(f"Error loading board: {e}")

        return True
