from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Protocol

from .errors import CardNotFoundError, DataAccessError
from .models import BoardList, Card, card_from_dict, list_from_dict


class BoardSource(Protocol):
    """Read access to the board data the engine needs. Archived records are never returned."""

    def fetch_card(self, card_id: str) -> Card:
        ...

    def fetch_sibling_cards(self, board_id: str, exclude_card_id: str, limit: int) -> list[Card]:
        ...

    def fetch_lists(self, board_id: str) -> list[BoardList]:
        ...


class InMemoryBoardSource:
    def __init__(self, cards: Iterable[Card] = (), lists: Iterable[BoardList] = ()):
        self._cards = list(cards)
        self._lists = list(lists)

    @classmethod
    def from_dump(cls, payload: dict[str, Any]) -> "InMemoryBoardSource":
        """Build a source from ``{"lists": [...], "cards": [...]}``.

        Cards and lists without a board id inherit the dump's top-level
        ``board_id`` (or ``id``); cards without one inherit it from their list.
        """
        if not isinstance(payload, dict):
            raise DataAccessError("Board dump must be a JSON object.")
        board_id = str(payload.get("board_id") or payload.get("id") or "")
        lists = []
        for item in payload.get("lists") or []:
            board_list = list_from_dict(item)
            if not board_list.board_id and board_id:
                board_list = replace(board_list, board_id=board_id)
            lists.append(board_list)
        list_boards = {item.id: item.board_id for item in lists}

        cards = []
        for item in payload.get("cards") or []:
            card = card_from_dict(item)
            if not card.board_id:
                inherited = list_boards.get(card.list_id) or board_id
                card = replace(card, board_id=inherited)
            cards.append(card)
        return cls(cards=cards, lists=lists)

    def fetch_card(self, card_id: str) -> Card:
        for card in self._cards:
            if card.id == card_id and not card.archived:
                return card
        raise CardNotFoundError(card_id)

    def fetch_sibling_cards(self, board_id: str, exclude_card_id: str, limit: int) -> list[Card]:
        siblings = [
            card
            for card in self._cards
            if card.board_id == board_id and card.id != exclude_card_id and not card.archived
        ]
        return siblings[:limit]

    def fetch_lists(self, board_id: str) -> list[BoardList]:
        return [item for item in self._lists if item.board_id == board_id and not item.archived]
