from __future__ import annotations

from datetime import datetime, timezone

import pytest

from card_recommender.errors import CardNotFoundError, DataAccessError
from card_recommender.service import RecommendationService
from card_recommender.storage import Storage


def test_storage_board_lifecycle(tmp_path) -> None:
    storage = Storage(tmp_path / "boards.db")
    storage.init_db()

    board_id = storage.create_board("Launch")
    todo = storage.create_list(board_id, "To Do")
    done = storage.create_list(board_id, "Done")
    old = storage.create_list(board_id, "Old ideas")
    storage.archive_list(old)

    subject = storage.create_card(
        todo,
        "Fix urgent login bug",
        priority="high",
        due_at=datetime(2026, 2, 20, tzinfo=timezone.utc),
    )
    sibling = storage.create_card(todo, "Login page copy")
    archived = storage.create_card(done, "Login page experiment")
    storage.archive_card(archived)

    card = storage.fetch_card(subject)
    assert card.board_id == board_id
    assert card.list_id == todo
    assert card.priority == "high"
    assert card.due_date == datetime(2026, 2, 20, tzinfo=timezone.utc)

    siblings = storage.fetch_sibling_cards(board_id, exclude_card_id=subject, limit=50)
    assert [item.id for item in siblings] == [sibling]
    assert storage.fetch_sibling_cards(board_id, exclude_card_id=subject, limit=0) == []

    assert [item.title for item in storage.fetch_lists(board_id)] == ["To Do", "Done"]

    with pytest.raises(CardNotFoundError):
        storage.fetch_card(archived)


def test_create_card_rejects_unknown_list_and_priority(tmp_path) -> None:
    storage = Storage(tmp_path / "boards.db")
    storage.init_db()

    with pytest.raises(DataAccessError):
        storage.create_card("missing-list", "Orphan")
    board_id = storage.create_board("Launch")
    list_id = storage.create_list(board_id, "To Do")
    with pytest.raises(ValueError):
        storage.create_card(list_id, "Card", priority="someday")


def test_sqlite_failures_surface_as_data_access_errors(tmp_path) -> None:
    storage = Storage(tmp_path)  # a directory cannot be opened as a database

    with pytest.raises(DataAccessError):
        storage.fetch_lists("board")


def test_board_dump_round_trip_through_service(tmp_path, board_dump) -> None:
    storage = Storage(tmp_path / "boards.db")
    storage.init_db()
    board_id = storage.load_board_dump(board_dump)

    assert board_id == "board-1"
    assert len(storage.fetch_sibling_cards(board_id, exclude_card_id="card-1", limit=50)) == 3

    result = RecommendationService(storage).recommend_for_card("card-1")
    moves = [item for item in result.suggestions if item.kind == "list_movement"]
    assert moves and moves[0].suggested_list_title == "Done"


def test_board_dump_archives_rows_without_ids(tmp_path) -> None:
    storage = Storage(tmp_path / "boards.db")
    storage.init_db()

    board_id = storage.load_board_dump(
        {
            "id": "b-archive",
            "lists": [{"id": "todo", "title": "To Do"}, {"title": "Old ideas", "archived": True}],
            "cards": [
                {"id": "keep", "title": "Live card", "list_id": "todo"},
                {"title": "Retired card", "list_id": "todo", "isArchived": True},
            ],
        }
    )

    assert [item.title for item in storage.fetch_lists(board_id)] == ["To Do"]
    siblings = storage.fetch_sibling_cards(board_id, exclude_card_id="none", limit=50)
    assert [item.id for item in siblings] == ["keep"]


def test_board_dump_with_unknown_list_is_rolled_back(tmp_path) -> None:
    storage = Storage(tmp_path / "boards.db")
    storage.init_db()

    with pytest.raises(DataAccessError):
        storage.load_board_dump(
            {
                "id": "b-broken",
                "lists": [{"id": "todo", "title": "To Do"}],
                "cards": [
                    {"id": "ok", "title": "Fine", "list_id": "todo"},
                    {"id": "orphan", "title": "Orphan", "list_id": "missing"},
                ],
            }
        )

    assert storage.fetch_lists("b-broken") == []
    with pytest.raises(CardNotFoundError):
        storage.fetch_card("ok")
    # Nothing was committed, so the same dump ids can be loaded again.
    assert storage.load_board_dump({"id": "b-broken", "lists": [{"id": "todo", "title": "To Do"}]}) == "b-broken"
