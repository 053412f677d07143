# src/kanbanctl/cli.py

"""
Command-line interface for kanbanctl.

This module:
- defines argument parsing and subcommands,
- resolves settings once and passes them down explicitly,
- delegates board logic to engine modules.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
import sys
from pathlib import Path

from kanbanctl.config import Settings
from kanbanctl.engine.board import Board
from kanbanctl.engine.errors import BoardNotFoundError, KanbanError
from kanbanctl.engine.ops import delete_board
from kanbanctl.engine.render import render_board
from kanbanctl.engine.scan import BoardStore, is_create_new

logger = logging.getLogger("kanbanctl")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kanbanctl")
    parser.add_argument(
        "-C",
        "--dir",
        type=str,
        default=None,
        help="Board directory (overrides KANBAN_DIR and the config file)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yml (default: $XDG_CONFIG_HOME/kanbanctl/config.yml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    sub = parser.add_subparsers(dest="command")

    # ------------------------------------------------------------------
    # Interactive
    # ------------------------------------------------------------------

    p_tui = sub.add_parser(
        "tui",
        help="Open the interactive board editor (default)",
    )
    p_tui.set_defaults(func=cmd_tui)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_list = sub.add_parser(
        "list",
        help="List boards in the board directory",
    )
    p_list.set_defaults(func=cmd_list)

    p_show = sub.add_parser(
        "show",
        help="Print a board as text",
    )
    p_show.add_argument("name", help="Board name (as shown by 'list')")
    p_show.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    p_show.set_defaults(func=cmd_show)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    p_new = sub.add_parser(
        "new",
        help="Create an empty board",
    )
    p_new.add_argument("name", help="Board name")
    p_new.set_defaults(func=cmd_new)

    p_delete = sub.add_parser(
        "delete",
        help="Delete a board file",
    )
    p_delete.add_argument("name", help="Board name (as shown by 'list')")
    p_delete.set_defaults(func=cmd_delete)

    return parser


# ---------------------------------------------------------------------
# Setup helpers
# ---------------------------------------------------------------------

def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.load(args.config)
    if args.dir:
        settings.base_dir = Path(args.dir).expanduser().absolute()
    return settings


def _configure_logging(settings: Settings, *, verbose: bool, interactive: bool) -> None:
    """
    Log to the configured file, else stderr. The interactive editor owns
    the terminal, so without a log file its records are only mirrored to
    the status line.
    """
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    elif interactive:
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)


def _require_existing(store: BoardStore, name: str) -> Path:
    if is_create_new(name):
        raise BoardNotFoundError(f"Not a board name: {name}")

    path = store.path_for(name)
    if not path.is_file():
        raise BoardNotFoundError(f"Board not found: {name}")
    return path


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_tui(args: argparse.Namespace, settings: Settings) -> int:
    from kanbanctl.tui import run_tui

    if not settings.persistence_enabled:
        print("Warning: KANBAN_DIR is not set. Changes won't be saved.", file=sys.stderr)
        print("Set KANBAN_DIR (or base_dir in config.yml) to enable persistence.", file=sys.stderr)

    board = Board(title=settings.default_board, store=BoardStore(settings.base_dir))
    board.scan_available_boards()

    run_tui(board)
    return 0


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    store = BoardStore(settings.base_dir)
    for name in store.scan():
        if not is_create_new(name):
            print(name)
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    store = BoardStore(settings.base_dir)
    _require_existing(store, args.name)

    board = Board(store=store)
    board.open_board(args.name)

    render_board(board, color=not bool(args.no_color))
    return 0


def cmd_new(args: argparse.Namespace, settings: Settings) -> int:
    name = (args.name or "").strip()
    if not name:
        print("Error: board name is required")
        return 1

    store = BoardStore(settings.base_dir)
    if store.path_for(name).exists():
        print(f"Error: board already exists: {name}")
        return 1

    board = Board(store=store)
    board.create_new_board(name)

    print(board.file_path)
    return 0


def cmd_delete(args: argparse.Namespace, settings: Settings) -> int:
    store = BoardStore(settings.base_dir)
    path = _require_existing(store, args.name)

    delete_board(path)
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None) or cmd_tui

    try:
        settings = _resolve_settings(args)
        _configure_logging(settings, verbose=bool(args.verbose), interactive=func is cmd_tui)
    except (KanbanError, OSError) as e:
        print(f"Error: {e}")
        return 1

    try:
        return func(args, settings)
    except KanbanError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
