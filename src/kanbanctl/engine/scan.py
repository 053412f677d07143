# src/kanbanctl/engine/scan.py

"""
Board discovery and naming.

A base directory holds one `<snake_case_name>.txt` file per board.
This module maps between those filenames and the display names shown
in the board picker. It performs *no parsing*.

The mapping is lossy: "Work Board" and "work board" share a file, and
an underscore in a display name cannot be told apart from a space.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional

from .errors import ConfigurationError, StorageError
from .ops import ensure_board_dir


BOARD_SUFFIX: Final[str] = ".txt"
CREATE_NEW_BOARD: Final[str] = "[Create New Board]"


# ---------------------------------------------------------------------
# Name mapping
# ---------------------------------------------------------------------

def filename_to_display(stem: str) -> str:
    """
    "work_board" -> "work board"
    """
    return stem.replace("_", " ")


def display_to_filename(display_name: str) -> str:
    """
    "Work Board" -> "work_board.txt"
    """
    return display_name.lower().replace(" ", "_") + BOARD_SUFFIX


def display_to_path(base_dir: str | Path, display_name: str) -> Path:
    return Path(base_dir) / display_to_filename(display_name)


def is_create_new(display_name: str) -> bool:
    return display_name == CREATE_NEW_BOARD


# ---------------------------------------------------------------------
# Directory scan
# ---------------------------------------------------------------------

def scan(base_dir: Optional[str | Path]) -> list[str]:
    """
    List board display names under `base_dir`, sorted, with the
    "[Create New Board]" sentinel appended.

    The directory is created if missing. Raises ConfigurationError when
    no base directory is configured at all.
    """
    if base_dir is None:
        raise ConfigurationError("Board directory is not configured (set KANBAN_DIR)")

    d = ensure_board_dir(Path(base_dir))

    try:
        names = [
            filename_to_display(entry.stem)
            for entry in d.iterdir()
            if entry.is_file() and entry.suffix == BOARD_SUFFIX
        ]
    except OSError as e:
        raise StorageError(str(d), f"Cannot list board directory: {e}") from e

    names.sort()
    names.append(CREATE_NEW_BOARD)
    return names


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BoardStore:
    """
    Board directory bound to a configured base path.

    `base_dir` is None when persistence is disabled for the session.
    """

    base_dir: Optional[Path]

    @property
    def enabled(self) -> bool:
        return self.base_dir is not None

    def require_base_dir(self) -> Path:
        if self.base_dir is None:
            raise ConfigurationError("Board directory is not configured (set KANBAN_DIR)")
        return self.base_dir

    def scan(self) -> list[str]:
        return scan(self.base_dir)

    def path_for(self, display_name: str) -> Path:
        """
        Resolve a display name to its board file (directory created if needed).
        """
        base = ensure_board_dir(self.require_base_dir())
        return display_to_path(base, display_name).absolute()
