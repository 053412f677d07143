# src/kanbanctl/tui.py

"""
Interactive terminal loop.

Blocks on one key, feeds it to the input state machine, redraws, and
repeats until the user quits. Everything runs on one thread: file saves
complete before the next key is read.
"""

import curses
import logging
from typing import Optional

from kanbanctl.engine.board import Board
from kanbanctl.engine.modes import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, UP, InputHandler, Key
from kanbanctl.engine.render import draw_screen, init_colors

logger = logging.getLogger(__name__)


ESC_DELAY_MS = 25

# Raw mode delivers Ctrl+C as a key instead of SIGINT.
INTERRUPT = Key("c", ctrl=True)

_NAMED_KEYS = {
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
}


# ---------------------------------------------------------------------
# Key translation
# ---------------------------------------------------------------------

def translate_key(raw: str | int) -> Optional[Key]:
    """
    Convert a `get_wch()` result into a Key, or None for keys the editor
    ignores (resize events, function keys, tab).
    """
    if isinstance(raw, int):
        name = _NAMED_KEYS.get(raw)
        return Key(name) if name is not None else None

    if raw in ("\n", "\r"):
        return Key(ENTER)
    if raw == "\x1b":
        return Key(ESC)
    if raw in ("\x7f", "\b"):
        return Key(BACKSPACE)
    if raw == "\t":
        return None

    code = ord(raw)
    if 1 <= code <= 26:
        return Key(chr(code + 96), ctrl=True)
    if code < 32:
        return None
    return Key(raw)


# ---------------------------------------------------------------------
# Logging bridge
# ---------------------------------------------------------------------

class StatusLineHandler(logging.Handler):
    """
    Mirror warnings into the board's status line while the screen is owned
    by curses.
    """

    def __init__(self, board: Board, level: int = logging.WARNING):
        super().__init__(level)
        self.board = board

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.board.status_message = self.format(record)
        except Exception:
            self.handleError(record)


# ---------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------

def _loop(stdscr: "curses.window", board: Board, handler: InputHandler) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    try:
        init_colors()
    except curses.error:
        logger.debug("Terminal has no colour support")

    # cbreak leaves flow control on, which swallows Ctrl+S as XOFF.
    curses.raw()
    stdscr.keypad(True)
    curses.set_escdelay(ESC_DELAY_MS)

    while True:
        draw_screen(stdscr, board, handler.help_text())

        key = translate_key(stdscr.get_wch())
        if key is None:
            continue
        if key == INTERRUPT:
            logger.info("Interrupted")
            return

        if not handler.handle_key(key):
            logger.info("Quit requested")
            return


def run_tui(board: Board) -> None:
    """
    Run the editor until the user quits.
    """
    handler = InputHandler(board)
    status = StatusLineHandler(board)
    root = logging.getLogger()
    root.addHandler(status)

    try:
        curses.wrapper(_loop, board, handler)
    finally:
        root.removeHandler(status)
