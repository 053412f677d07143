# src/kanbanctl/engine/render.py

"""
Rendering helpers.

This module is responsible for:
- the plain-text board view (show),
- drawing the interactive board on a curses screen.

It is presentation-only: it reads the board model and never mutates it.
"""

from __future__ import annotations

import curses
import re
import shutil
import sys
import textwrap
from typing import TYPE_CHECKING, Optional

from .model import InputMode, Task

if TYPE_CHECKING:
    from .board import Board


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_RESET = "\033[0m"
_DIM = "\033[90m"
_ACTIVE = "\033[33m"
_LABEL = "\033[31m"


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _visible_len(s: str) -> int:
    """Return string length without ANSI colour escapes."""
    return len(_ANSI_RE.sub("", s))


# ---------------------------------------------------------------------
# Plain-text board view (show)
# ---------------------------------------------------------------------

def format_board(board: "Board", *, color: bool = False) -> list[str]:
    """
    Lay out a board as boxed text, one section per column.

    Each task line carries its jump label and impact score.
    Width is capped at 80 characters.
    """
    width = min(80, shutil.get_terminal_size(fallback=(80, 24)).columns)
    inner_w = max(20, width - 4)

    def paint(code: str, s: str) -> str:
        return f"{code}{s}{_RESET}" if color else s

    def rule(ch: str = "-") -> str:
        return f"+{ch * (width - 2)}+"

    def line(content: str = "") -> str:
        pad = inner_w - _visible_len(content)
        return f"| {content}{' ' * max(0, pad)} |"

    out = [rule("="), line(board.title[:inner_w]), rule("=")]

    if not board.columns:
        out.append(line(paint(_DIM, "(no columns)")))

    for c_idx, column in enumerate(board.columns):
        if c_idx:
            out.append(rule())

        header = f"{column.title} ({c_idx + 1}/{len(board.columns)})"
        out.append(line(paint(_ACTIVE, header) if c_idx == board.active_column else header))

        if not column.tasks:
            out.append(line(paint(_DIM, "  (empty)")))

        for t_idx, task in enumerate(column.tasks):
            label = board.get_jump_label_for_task(c_idx, t_idx) or " "
            impact = "-" if task.priority is None else str(task.priority)
            marker = ">" if column.selected_task == t_idx else " "

            prefix = f"{marker} [{label}] "
            suffix = f" ({impact})"
            wrapped = textwrap.wrap(
                task.title,
                width=max(10, inner_w - len(prefix) - len(suffix)),
                break_long_words=True,
            ) or [""]

            out.append(line(f"{marker} [{paint(_LABEL, label)}] " + wrapped[0] + suffix))
            for rest in wrapped[1:]:
                out.append(line(" " * len(prefix) + rest))

    out.append(rule("="))
    return out


def render_board(board: "Board", *, color: bool = True) -> None:
    print()
    for ln in format_board(board, color=color and _supports_color()):
        print(ln)
    print()


# ---------------------------------------------------------------------
# Curses screen
# ---------------------------------------------------------------------

COLUMN_WIDTH = 32
COLUMN_GAP = 2

PAIR_TITLE = 1
PAIR_ACTIVE = 2
PAIR_SELECTED = 3
PAIR_LABEL = 4
PAIR_DIM = 5
PAIR_PRIORITY_HIGH = 6
PAIR_PRIORITY_MEDIUM = 7
PAIR_PRIORITY_NORMAL = 8
PAIR_PRIORITY_LOW = 9


def init_colors() -> None:
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(PAIR_TITLE, curses.COLOR_CYAN, -1)
    curses.init_pair(PAIR_ACTIVE, curses.COLOR_YELLOW, -1)
    curses.init_pair(PAIR_SELECTED, curses.COLOR_WHITE, curses.COLOR_BLUE)
    curses.init_pair(PAIR_LABEL, curses.COLOR_RED, -1)
    curses.init_pair(PAIR_DIM, curses.COLOR_BLACK, -1)
    curses.init_pair(PAIR_PRIORITY_HIGH, curses.COLOR_RED, -1)
    curses.init_pair(PAIR_PRIORITY_MEDIUM, curses.COLOR_YELLOW, -1)
    curses.init_pair(PAIR_PRIORITY_NORMAL, curses.COLOR_GREEN, -1)
    curses.init_pair(PAIR_PRIORITY_LOW, curses.COLOR_BLUE, -1)


def priority_pair(priority: Optional[int]) -> int:
    """
    Colour pair for an impact score: 8+ high, 5+ medium, 3+ normal,
    anything lower is low. Unscored tasks are dimmed.
    """
    if priority is None:
        return PAIR_DIM
    if priority >= 8:
        return PAIR_PRIORITY_HIGH
    if priority >= 5:
        return PAIR_PRIORITY_MEDIUM
    if priority >= 3:
        return PAIR_PRIORITY_NORMAL
    return PAIR_PRIORITY_LOW


def task_text_lines(task: Task, width: int) -> list[str]:
    """
    Wrap a task title followed by its impact, e.g. "Ship it (5)".
    """
    impact = "-" if task.priority is None else str(task.priority)
    return textwrap.wrap(f"{task.title} ({impact})", width=width, break_long_words=True) or [""]


def _put(win: "curses.window", y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x >= width:
        return
    try:
        win.addnstr(y, x, text, max(0, width - x - 1), attr)
    except curses.error:
        # Writing the bottom-right cell raises even though it succeeds.
        pass


def _first_visible_column(board: "Board", visible: int) -> int:
    if len(board.columns) <= visible:
        return 0
    return min(max(0, board.active_column - visible + 1), len(board.columns) - visible)


def draw_screen(win: "curses.window", board: "Board", help_text: str) -> None:
    """
    Redraw the whole screen from the current board state.
    """
    win.erase()
    height, width = win.getmaxyx()

    _put(win, 0, max(0, (width - len(board.title)) // 2), board.title, curses.color_pair(PAIR_TITLE) | curses.A_BOLD)

    visible = max(1, width // (COLUMN_WIDTH + COLUMN_GAP))
    start = _first_visible_column(board, visible)
    show_labels = board.input_mode is InputMode.JUMP_TO_TASK
    show_numbers = board.input_mode in (
        InputMode.MOVE,
        InputMode.COLUMN_SELECTION,
        InputMode.JUMP_TO_COLUMN,
    )

    for offset, c_idx in enumerate(range(start, min(len(board.columns), start + visible))):
        column = board.columns[c_idx]
        x = offset * (COLUMN_WIDTH + COLUMN_GAP) + 1
        active = c_idx == board.active_column

        header = f"{column.title} ({c_idx + 1}/{len(board.columns)})"
        if show_numbers:
            header = f"[{c_idx + 1}] {header}"
        attr = curses.color_pair(PAIR_ACTIVE) | curses.A_BOLD if active else 0
        _put(win, 2, x, header[:COLUMN_WIDTH], attr)
        _put(win, 3, x, "─" * COLUMN_WIDTH, curses.color_pair(PAIR_TITLE))

        y = 4
        for t_idx, task in enumerate(column.tasks):
            if y >= height - 3:
                break

            label = board.get_jump_label_for_task(c_idx, t_idx) if show_labels else None
            prefix = f"{label} " if label else "● "
            lines = task_text_lines(task, COLUMN_WIDTH - 3)
            dot = curses.color_pair(PAIR_LABEL if label else priority_pair(task.priority))

            selected = column.selected_task == t_idx
            attr = curses.color_pair(PAIR_SELECTED) | curses.A_BOLD if selected else 0
            for i, text in enumerate(lines):
                if y >= height - 3:
                    break
                lead = prefix if i == 0 else "  "
                _put(win, y, x, lead, dot if i == 0 else attr)
                _put(win, y, x + len(lead), text, attr)
                y += 1
            y += 1

    _draw_popup(win, board)

    if board.status_message:
        _put(win, height - 2, 1, board.status_message, curses.color_pair(PAIR_LABEL))
    _put(win, height - 1, 1, help_text, curses.color_pair(PAIR_DIM) | curses.A_BOLD)

    win.refresh()


def _box(win: "curses.window", title: str, rows: list[str], *, min_width: int = 40) -> tuple[int, int, int]:
    height, width = win.getmaxyx()
    box_w = min(width - 2, max(min_width, len(title) + 4, *(len(r) + 4 for r in rows)))
    box_h = len(rows) + 2
    top = max(0, (height - box_h) // 2)
    left = max(0, (width - box_w) // 2)

    _put(win, top, left, "┌" + "─" * (box_w - 2) + "┐")
    _put(win, top, left + 2, f" {title} ", curses.A_BOLD)
    for i, row in enumerate(rows, start=1):
        _put(win, top + i, left, "│ " + row.ljust(box_w - 4)[: box_w - 4] + " │")
    _put(win, top + box_h - 1, left, "└" + "─" * (box_w - 2) + "┘")
    return top, left, box_w


_POPUP_TITLES = {
    InputMode.ADDING_COLUMN: "New Column",
    InputMode.ADDING_TASK: "New Task",
    InputMode.RENAMING_COLUMN: "Rename Column",
    InputMode.RENAMING_TASK: "Rename Task",
    InputMode.ADDING_BOARD: "New Board",
}


def _draw_popup(win: "curses.window", board: "Board") -> None:
    mode = board.input_mode

    if mode.is_text_entry:
        _box(win, _POPUP_TITLES[mode], [board.input_text + "_"])
    elif mode is InputMode.CONFIRM_DELETE_COLUMN:
        column = board.current_column
        name = column.title if column is not None else ""
        _box(win, "Delete Column", [f"Delete '{name}' and all its tasks? (y/n)"])
    elif mode is InputMode.BOARD_SELECTION:
        rows = [
            ("> " if i == board.selected_board_index else "  ") + name
            for i, name in enumerate(board.available_boards)
        ] or ["(no boards)"]
        _box(win, "Select Board", rows)
