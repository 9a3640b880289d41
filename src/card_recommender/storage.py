from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

import structlog

from .errors import CardNotFoundError, DataAccessError
from .models import DEFAULT_PRIORITY, PRIORITIES, BoardList, Card, card_from_dict, list_from_dict, parse_timestamp

logger = structlog.get_logger()


class Storage:
    """SQLite-backed board store implementing the board source fetches."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _session(self, operation: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._connect() as conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("Board storage query failed", operation=operation, db_path=str(self.db_path), error=str(exc))
            raise DataAccessError(f"{operation} failed: {exc}") from exc

    def init_db(self) -> None:
        with self._session("init_db") as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS boards (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS lists (
                    id TEXT PRIMARY KEY,
                    board_id TEXT NOT NULL REFERENCES boards(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    archived INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS cards (
                    id TEXT PRIMARY KEY,
                    board_id TEXT NOT NULL REFERENCES boards(id) ON DELETE CASCADE,
                    list_id TEXT NOT NULL REFERENCES lists(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_at TEXT NULL,
                    archived INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_cards_board ON cards(board_id, archived);
                CREATE INDEX IF NOT EXISTS idx_lists_board ON lists(board_id, archived);
                """
            )
            conn.commit()

    def create_board(self, title: str, *, board_id: str | None = None) -> str:
        with self._session("create_board") as conn:
            new_id = _insert_board(conn, title, board_id)
            conn.commit()
        return new_id

    def create_list(self, board_id: str, title: str, *, position: int | None = None, list_id: str | None = None) -> str:
        with self._session("create_list") as conn:
            new_id = _insert_list(conn, board_id, title, position=position, list_id=list_id)
            conn.commit()
        return new_id

    def create_card(
        self,
        list_id: str,
        title: str,
        description: str = "",
        *,
        priority: str = DEFAULT_PRIORITY,
        due_at: datetime | str | None = None,
        card_id: str | None = None,
    ) -> str:
        if priority not in PRIORITIES:
            raise ValueError(f"Unsupported priority: {priority}")
        with self._session("create_card") as conn:
            new_id = _insert_card(conn, list_id, title, description, priority=priority, due_at=due_at, card_id=card_id)
            conn.commit()
        return new_id

    def archive_card(self, card_id: str) -> None:
        with self._session("archive_card") as conn:
            conn.execute("UPDATE cards SET archived = 1 WHERE id = ?", (card_id,))
            conn.commit()

    def archive_list(self, list_id: str) -> None:
        with self._session("archive_list") as conn:
            conn.execute("UPDATE lists SET archived = 1 WHERE id = ?", (list_id,))
            conn.commit()

    def load_board_dump(self, payload: dict[str, Any]) -> str:
        """Seed one board from a ``{"title", "lists", "cards"}`` JSON dump; returns the board id.

        The whole dump is written in one transaction, so a card that points at
        an unknown list leaves nothing behind. Lists and cards without an id
        get a generated one; cards refer to lists by their id in the dump, so
        id-less lists can hold no cards.
        """
        cards = [card_from_dict(raw) for raw in payload.get("cards") or []]
        with self._session("load_board_dump") as conn:
            board_id = _insert_board(
                conn,
                str(payload.get("title") or "Imported board"),
                str(payload.get("id") or payload.get("board_id") or "") or None,
            )
            list_ids: dict[str, str] = {}
            for raw in payload.get("lists") or []:
                board_list = list_from_dict(raw)
                new_id = _insert_list(
                    conn, board_id, board_list.title, list_id=board_list.id or None, archived=board_list.archived
                )
                if board_list.id:
                    list_ids[board_list.id] = new_id
            for card in cards:
                if card.list_id not in list_ids:
                    raise DataAccessError(f"Card {card.id or card.title!r} refers to unknown list: {card.list_id}")
                _insert_card(
                    conn,
                    list_ids[card.list_id],
                    card.title,
                    card.description,
                    priority=card.priority,
                    due_at=card.due_date,
                    card_id=card.id or None,
                    archived=card.archived,
                )
            conn.commit()
        logger.info("Loaded board dump", board_id=board_id, lists=len(list_ids), cards=len(cards))
        return board_id

    def fetch_card(self, card_id: str) -> Card:
        with self._session("fetch_card") as conn:
            row = conn.execute("SELECT * FROM cards WHERE id = ? AND archived = 0", (card_id,)).fetchone()
        if row is None:
            raise CardNotFoundError(card_id)
        return _row_to_card(row)

    def fetch_sibling_cards(self, board_id: str, exclude_card_id: str, limit: int) -> list[Card]:
        with self._session("fetch_sibling_cards") as conn:
            rows = conn.execute(
                """
                SELECT * FROM cards
                WHERE board_id = ? AND id != ? AND archived = 0
                ORDER BY created_at, id
                LIMIT ?
                """,
                (board_id, exclude_card_id, limit),
            ).fetchall()
        return [_row_to_card(row) for row in rows]

    def fetch_lists(self, board_id: str) -> list[BoardList]:
        with self._session("fetch_lists") as conn:
            rows = conn.execute(
                "SELECT * FROM lists WHERE board_id = ? AND archived = 0 ORDER BY position, id",
                (board_id,),
            ).fetchall()
        return [
            BoardList(id=str(row["id"]), title=str(row["title"]), board_id=str(row["board_id"]))
            for row in rows
        ]


def _row_to_card(row: sqlite3.Row) -> Card:
    return Card(
        id=str(row["id"]),
        title=str(row["title"]),
        description=str(row["description"] or ""),
        priority=str(row["priority"] or DEFAULT_PRIORITY),
        list_id=str(row["list_id"]),
        board_id=str(row["board_id"]),
        due_date=parse_timestamp(row["due_at"]) if row["due_at"] else None,
        archived=bool(row["archived"]),
    )


def _insert_board(conn: sqlite3.Connection, title: str, board_id: str | None = None) -> str:
    new_id = board_id or str(uuid.uuid4())
    now = datetime.now(tz=timezone.utc).isoformat()
    conn.execute("INSERT INTO boards(id, title, created_at) VALUES(?, ?, ?)", (new_id, title, now))
    return new_id


def _insert_list(
    conn: sqlite3.Connection,
    board_id: str,
    title: str,
    *,
    position: int | None = None,
    list_id: str | None = None,
    archived: bool = False,
) -> str:
    new_id = list_id or str(uuid.uuid4())
    if position is None:
        row = conn.execute(
            "SELECT COALESCE(MAX(position), -1) + 1 AS next FROM lists WHERE board_id = ?",
            (board_id,),
        ).fetchone()
        position = int(row["next"])
    conn.execute(
        "INSERT INTO lists(id, board_id, title, position, archived) VALUES(?, ?, ?, ?, ?)",
        (new_id, board_id, title, position, int(archived)),
    )
    return new_id


def _insert_card(
    conn: sqlite3.Connection,
    list_id: str,
    title: str,
    description: str = "",
    *,
    priority: str = DEFAULT_PRIORITY,
    due_at: datetime | str | None = None,
    card_id: str | None = None,
    archived: bool = False,
) -> str:
    row = conn.execute("SELECT board_id FROM lists WHERE id = ?", (list_id,)).fetchone()
    if row is None:
        raise DataAccessError(f"List not found: {list_id}")
    new_id = card_id or str(uuid.uuid4())
    due_text = parse_timestamp(due_at).isoformat() if due_at else None
    now = datetime.now(tz=timezone.utc).isoformat()
    conn.execute(
        """
        INSERT INTO cards(id, board_id, list_id, title, description, priority, due_at, archived, created_at)
        VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (new_id, row["board_id"], list_id, title, description, priority, due_text, int(archived), now),
    )
    return new_id
