"""
Tests for board discovery and display-name mapping.
"""
import pytest

from kanbanctl.engine.errors import ConfigurationError
from kanbanctl.engine.scan import (
    CREATE_NEW_BOARD,
    BoardStore,
    display_to_filename,
    display_to_path,
    filename_to_display,
    is_create_new,
    scan,
)


def test_name_mapping():
    assert display_to_filename("Work Board") == "work_board.txt"
    assert filename_to_display("work_board") == "work board"
    assert is_create_new(CREATE_NEW_BOARD)
    assert not is_create_new("work board")


def test_display_to_path(tmp_path):
    assert display_to_path(tmp_path, "Work Board") == tmp_path / "work_board.txt"


def test_scan_lists_sorted_boards_with_sentinel(tmp_path):
    (tmp_path / "work_board.txt").write_text("", encoding="utf-8")
    (tmp_path / "home_board.txt").write_text("", encoding="utf-8")
    (tmp_path / "notes.md").write_text("", encoding="utf-8")
    (tmp_path / "folder.txt").mkdir()

    assert scan(tmp_path) == ["home board", "work board", CREATE_NEW_BOARD]


def test_scan_creates_missing_directory(tmp_path):
    base = tmp_path / "a" / "b"

    assert scan(base) == [CREATE_NEW_BOARD]
    assert base.is_dir()


def test_scan_without_directory_raises():
    with pytest.raises(ConfigurationError):
        scan(None)


def test_store_path_for(tmp_path):
    base = tmp_path / "boards"
    store = BoardStore(base_dir=base)

    path = store.path_for("Side Project")

    assert path == (base / "side_project.txt").absolute()
    assert base.is_dir()
    assert store.enabled


def test_disabled_store_refuses_paths():
    store = BoardStore(base_dir=None)

    assert not store.enabled
    with pytest.raises(ConfigurationError):
        store.path_for("anything")
