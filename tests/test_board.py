"""
Tests for the board model: columns, tasks, selection, jump labels,
persistence and board switching.
"""
import pytest

from kanbanctl.engine import board as board_module
from kanbanctl.engine.board import Board
from kanbanctl.engine.errors import BoardNotFoundError, ConfigurationError, StorageError
from kanbanctl.engine.model import Column, InputMode, Task
from kanbanctl.engine.ops import save_board
from kanbanctl.engine.parse import load_board
from kanbanctl.engine.record import BoardRecord, ColumnRecord, Priority, TaskRecord
from kanbanctl.engine.scan import CREATE_NEW_BOARD


def _selections(board: Board) -> list:
    return [c.selected_task for c in board.columns]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Construction
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_new_board_defaults():
    b = Board()

    assert b.title == "Kanban Board"
    assert b.input_mode is InputMode.BOARD_SELECTION
    assert b.file_path is None
    assert [c.title for c in b.columns] == ["To Do"]
    assert [t.title for t in b.columns[0].tasks] == ["Implement UI", "Add task functionality"]
    assert b.columns[0].selected_task == 0
    assert len({t.task_id for t in b.columns[0].tasks}) == 2


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Columns
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_add_column_dedupes_titles(board):
    board.add_column("To Do")
    board.add_column("To Do")

    assert [c.title for c in board.columns] == ["To Do", "To Do (1)", "To Do (2)"]
    assert board.input_mode is InputMode.NORMAL
    assert board.input_text == ""


def test_rename_column_dedupes_against_others(board):
    board.add_column("Doing")
    board.select_next_column()

    board.rename_current_column("To Do")
    assert board.columns[1].title == "To Do (1)"

    # Keeping its own name is not a clash.
    board.rename_current_column("To Do (1)")
    assert board.columns[1].title == "To Do (1)"


def test_column_navigation_scopes_selection(three_columns):
    b = three_columns
    for c in b.columns:
        c.selected_task = 0 if c.tasks else None

    b.select_next_column()
    assert b.active_column == 1
    assert _selections(b) == [None, 0, None]

    b.select_next_column()
    assert b.active_column == 2
    assert _selections(b) == [None, None, None]

    b.select_next_column()
    assert b.active_column == 2

    b.select_prev_column()
    b.select_prev_column()
    b.select_prev_column()
    assert b.active_column == 0
    assert _selections(b) == [0, None, None]


def test_jump_to_column_key_mapping(three_columns):
    b = three_columns
    b.input_mode = InputMode.MOVE

    b.jump_to_column(3)
    assert b.active_column == 2
    assert b.input_mode is InputMode.NORMAL

    b.jump_to_column(0)
    assert b.active_column == 0

    b.jump_to_column(2)
    assert b.active_column == 1

    b.input_mode = InputMode.MOVE
    b.jump_to_column(9)
    assert b.active_column == 1
    assert b.input_mode is InputMode.MOVE


def test_delete_middle_and_last_column(three_columns):
    b = three_columns
    b.active_column = 2

    b.delete_current_column()
    assert [c.title for c in b.columns] == ["A", "B"]
    assert b.active_column == 1
    assert b.columns[1].selected_task == 0

    b.delete_current_column()
    b.delete_current_column()
    assert b.columns == []
    assert b.active_column == 0
    assert b.current_column is None


def test_empty_board_operations_are_safe(board):
    board.delete_current_column()
    assert board.columns == []

    board.select_next_column()
    board.select_prev_column()
    board.select_next_task()
    board.select_prev_task()
    board.delete_current_task()
    board.delete_current_column()
    board.move_task_to_column(0)
    board.jump_to_column(1)
    board.rename_current_column("x")
    board.rename_current_task("x")

    assert board.add_task("orphan") is None
    assert "no columns" in board.status_message
    assert board.get_jump_labels()
    assert board.get_task_by_jump_label("a") is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tasks
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_add_task_selects_it_with_unique_id(board):
    task = board.add_task("Write tests")

    col = board.columns[0]
    assert col.tasks[-1] is task
    assert col.selected_task == len(col.tasks) - 1
    assert task.priority == 5
    assert task.task_id not in {t.task_id for t in col.tasks[:-1]}


def test_task_navigation_bounds(three_columns):
    b = three_columns

    b.select_next_task()
    b.select_next_task()
    assert b.columns[0].selected_task == 2

    for _ in range(5):
        b.select_prev_task()
    assert b.columns[0].selected_task == 0

    b.columns[0].selected_task = None
    b.select_prev_task()
    assert b.columns[0].selected_task == 2

    b.columns[0].selected_task = None
    b.select_next_task()
    assert b.columns[0].selected_task == 0


def test_rename_current_task(three_columns):
    three_columns.rename_current_task("renamed")
    assert three_columns.columns[0].tasks[1].title == "renamed"


def test_delete_only_task_leaves_no_selection(board):
    board.columns = [Column("Only", tasks=[Task(1, "x")], selected_task=0)]

    board.delete_current_task()
    assert board.columns[0].tasks == []
    assert board.columns[0].selected_task is None

    board.select_next_task()
    board.select_prev_task()
    board.delete_current_task()
    board.move_task_to_column(0)
    assert board.columns[0].selected_task is None


def test_delete_last_task_selects_new_last(three_columns):
    b = three_columns
    b.columns[0].selected_task = 2

    b.delete_current_task()
    assert [t.title for t in b.columns[0].tasks] == ["a1", "a2"]
    assert b.columns[0].selected_task == 1


def test_move_task_to_column(three_columns):
    b = three_columns

    b.move_task_to_column(1)

    assert [t.title for t in b.columns[0].tasks] == ["a1", "a3"]
    assert b.columns[0].selected_task == 1
    assert [t.title for t in b.columns[1].tasks] == ["b1", "a2"]
    assert b.columns[1].selected_task is None
    assert b.active_column == 0


def test_move_task_guards(three_columns):
    b = three_columns

    b.move_task_to_column(0)
    b.move_task_to_column(3)
    assert [t.title for t in b.columns[0].tasks] == ["a1", "a2", "a3"]

    b.columns[0].selected_task = None
    b.move_task_to_column(1)
    assert len(b.columns[1].tasks) == 1


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Jump labels
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_jump_labels_skip_confusable_letters(board):
    labels = board.get_jump_labels()

    assert "l" not in labels
    assert "o" not in labels
    assert len(labels) == 24


def test_jump_labels_extend_past_24_tasks(board):
    for n in range(28):
        board.add_task(f"task {n}")

    assert board.total_task_count() == 30
    assert len(board.get_jump_labels()) >= 30
    assert board.get_jump_label_for_task(0, 0) == "a"
    assert board.get_jump_label_for_task(0, 24) == "A"
    assert board.get_task_by_jump_label("A") == (0, 24)


def test_jump_labels_are_column_major(three_columns):
    b = three_columns

    assert b.get_jump_label_for_task(1, 0) == "d"
    assert b.get_task_by_jump_label("c") == (0, 2)
    assert b.get_task_by_jump_label("e") is None
    assert b.get_task_by_jump_label("l") is None
    assert b.get_jump_label_for_task(2, 0) is None


def test_jump_to_task(three_columns):
    b = three_columns
    b.input_mode = InputMode.JUMP_TO_TASK

    b.jump_to_task(1, 0)

    assert b.active_column == 1
    assert _selections(b) == [None, 0, None]
    assert b.input_mode is InputMode.NORMAL


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Record bridge
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_to_record_uses_fixed_defaults(three_columns, monkeypatch):
    monkeypatch.setattr(board_module, "_today", lambda: "2026-01-02")
    b = three_columns
    b.columns[0].tasks[0].priority = None

    record = b.to_record()

    assert record.name == "Test"
    assert record.date == "2026-01-02"
    assert record.description == "TUI Kanban Board"
    assert [c.name for c in record.columns] == ["A", "B", "C"]

    first = record.columns[0].tasks[0]
    assert first == TaskRecord(
        id=1,
        title="a1",
        priority=Priority(impact=5, urgency=5, effort=3),
        tags=[],
        created="2026-01-02",
    )


def test_update_from_record_keeps_only_impact(board):
    record = BoardRecord(
        name="x",
        columns=[
            ColumnRecord(
                name="To Do",
                tasks=[
                    TaskRecord(id=3, title="t", priority=Priority(7, 9, 2), tags=["a"], created="2020-01-01"),
                    TaskRecord(id=4, title="no priority"),
                ],
            )
        ],
    )

    board.update_from_record(record)

    t, bare = board.columns[0].tasks
    assert (t.task_id, t.title, t.priority, t.description) == (3, "t", 7, None)
    assert bare.priority is None


def test_update_from_record_restores_active_column_by_title(three_columns):
    b = three_columns
    b.active_column = 1

    record = BoardRecord(
        name="x",
        columns=[ColumnRecord(name="New"), ColumnRecord(name="B", tasks=[TaskRecord(id=1, title="b")])],
    )
    b.update_from_record(record)

    assert b.active_column == 1
    assert _selections(b) == [None, 0]


def test_update_from_record_clamps_active_column(three_columns):
    b = three_columns
    b.active_column = 2

    b.update_from_record(BoardRecord(name="x", columns=[ColumnRecord(name="Z")]))

    assert b.active_column == 0
    assert _selections(b) == [None]


def test_update_from_record_repairs_ids(board):
    record = BoardRecord(
        name="x",
        columns=[
            ColumnRecord(
                name="C",
                tasks=[TaskRecord(id=4, title="a"), TaskRecord(id=4, title="b"), TaskRecord(id=0, title="c")],
            )
        ],
    )

    board.update_from_record(record)

    assert [t.task_id for t in board.columns[0].tasks] == [4, 5, 6]
    assert board.add_task("d").task_id == 7


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Persistence
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_save_and_load_without_path_raise(board):
    with pytest.raises(BoardNotFoundError):
        board.save()
    with pytest.raises(BoardNotFoundError):
        board.load()


def test_structural_changes_autosave(board, tmp_path):
    board.file_path = tmp_path / "test.txt"

    board.add_column("Doing")

    saved = load_board(board.file_path)
    assert [c.name for c in saved.columns] == ["To Do", "Doing"]


def test_navigation_does_not_save(board, tmp_path):
    board.file_path = tmp_path / "test.txt"

    board.select_next_task()
    board.select_next_column()

    assert not board.file_path.exists()


def test_save_failure_is_reported_and_change_kept(board, tmp_path):
    # A directory cannot be written as a file.
    board.file_path = tmp_path

    board.add_column("Doing")

    assert [c.title for c in board.columns] == ["To Do", "Doing"]
    assert board.status_message.startswith("Error saving board")


def test_save_load_scenario(store):
    b = Board(title="Scenario", store=store)
    b.initialize_storage()
    assert b.file_path.is_file()

    b.add_column("Doing")
    b.select_next_column()
    b.add_task("write spec")
    b.save()

    restored = Board(title="Scenario", store=store)
    restored.columns = [Column("Doing")]
    restored.active_column = 0
    restored.file_path = b.file_path
    restored.load()

    assert [c.title for c in restored.columns] == ["To Do", "Doing"]
    assert restored.active_column == 1
    assert restored.current_task.title == "write spec"
    assert restored.columns[0].selected_task is None


def test_initialize_storage_loads_existing_file(store):
    path = store.path_for("Existing")
    save_board(path, BoardRecord(name="Existing", columns=[ColumnRecord(name="Backlog")]))

    b = Board(title="Existing", store=store)
    b.initialize_storage()

    assert b.file_path == path
    assert [c.title for c in b.columns] == ["Backlog"]


def test_initialize_storage_without_directory_raises():
    with pytest.raises(ConfigurationError):
        Board().initialize_storage()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Board switching
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_scan_without_directory_offers_only_create(board):
    board.scan_available_boards()

    assert board.available_boards == [CREATE_NEW_BOARD]
    assert board.selected_board_index == 0
    assert board.status_message.startswith("Error scanning boards")


def test_board_picker_navigation(store):
    save_board(store.path_for("home board"), BoardRecord(name="home board"))
    save_board(store.path_for("work board"), BoardRecord(name="work board"))

    b = Board(store=store)
    b.scan_available_boards()
    assert b.available_boards == ["home board", "work board", CREATE_NEW_BOARD]

    b.select_prev_board()
    assert b.highlighted_board == "home board"

    for _ in range(5):
        b.select_next_board()
    assert b.highlighted_board == CREATE_NEW_BOARD


def test_open_board(store):
    save_board(
        store.path_for("work board"),
        BoardRecord(name="work board", columns=[ColumnRecord(name="Todo", tasks=[TaskRecord(id=9, title="ship")])]),
    )

    b = Board(store=store)
    b.open_board("work board")

    assert b.title == "work board"
    assert b.file_path == store.path_for("work board")
    assert b.input_mode is InputMode.NORMAL
    assert b.current_task.title == "ship"


def test_open_missing_board_leaves_state(store):
    b = Board(store=store)
    b.file_path = store.path_for("current")

    with pytest.raises(StorageError):
        b.open_board("ghost")

    assert b.file_path == store.path_for("current")
    assert b.title == "Kanban Board"
    assert b.input_mode is InputMode.BOARD_SELECTION


def test_load_selected_board_sentinel_starts_creation(store):
    b = Board(store=store)
    b.scan_available_boards()
    b.input_text = "leftover"

    b.load_selected_board()

    assert b.input_mode is InputMode.ADDING_BOARD
    assert b.input_text == ""


def test_create_new_board(store):
    b = Board(store=store)

    b.create_new_board("Side Project")

    assert b.title == "Side Project"
    assert [c.title for c in b.columns] == ["To Do"]
    assert b.columns[0].tasks == []
    assert b.file_path == store.path_for("Side Project")
    assert load_board(b.file_path).name == "Side Project"


def test_create_new_board_without_directory_detaches(board, tmp_path):
    board.file_path = tmp_path / "previous.txt"

    with pytest.raises(ConfigurationError):
        board.create_new_board("Nowhere")

    assert board.file_path is None
    assert board.title == "Nowhere"
    assert not (tmp_path / "previous.txt").exists()
