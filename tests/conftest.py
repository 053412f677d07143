"""
Shared fixtures.
"""
import pytest

from kanbanctl.engine.board import Board
from kanbanctl.engine.model import Column, InputMode, Task
from kanbanctl.engine.scan import BoardStore


@pytest.fixture
def store(tmp_path):
    return BoardStore(base_dir=tmp_path / "boards")


@pytest.fixture
def board():
    """In-memory board in normal mode with no file attached."""
    b = Board(title="Test")
    b.input_mode = InputMode.NORMAL
    return b


@pytest.fixture
def three_columns(board):
    """Columns A (3 tasks, middle selected), B (1 task), C (empty); A active."""
    board.columns = [
        Column("A", tasks=[Task(1, "a1"), Task(2, "a2"), Task(3, "a3")], selected_task=1),
        Column("B", tasks=[Task(4, "b1")]),
        Column("C"),
    ]
    board.active_column = 0
    board._next_id = 5
    return board
