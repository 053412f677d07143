# src/kanbanctl/engine/errors.py

"""
Error taxonomy shared by the engine modules.

- ConfigurationError: no base directory is known (persistence disabled)
  or the config file itself is unusable.
- BoardNotFoundError: a board file, column or task targeted by an
  operation is absent.
- StorageError: reading, writing or creating a board file/directory failed.

Malformed board file contents are never an error: the parser falls back
to permissive defaults instead.
"""

from dataclasses import dataclass


class KanbanError(Exception):
    """
    Base class for all recoverable kanbanctl errors.
    """


class ConfigurationError(KanbanError):
    """
    Raised when persistence is not configured (or misconfigured).
    """


class BoardNotFoundError(KanbanError):
    """
    Raised when a targeted board, column or task does not exist.
    """


@dataclass(frozen=True, slots=True)
class StorageError(KanbanError):
    """
    Raised when a board file or directory cannot be read or written.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"
