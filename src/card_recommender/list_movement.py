from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .keywords import first_match
from .models import BoardList, Card, ListMovementSuggestion
from .text import NormalizedText


@dataclass(frozen=True)
class ListRule:
    category: str
    title_terms: tuple[str, ...]
    confidence: str
    reason: str


LIST_RULES = (
    ListRule("status.done", ("done",), "high", "Card text mentions completion ('{keyword}')"),
    ListRule("status.blocked", ("blocked",), "high", "Card text suggests the work is blocked ('{keyword}')"),
    ListRule("status.in_progress", ("progress",), "medium", "Card text indicates work has begun ('{keyword}')"),
    ListRule("status.testing", ("test", "qa", "review"), "medium", "Card text mentions testing or review ('{keyword}')"),
)


def find_list(lists: Iterable[BoardList], title_terms: tuple[str, ...]) -> BoardList | None:
    for board_list in lists:
        title = board_list.title.lower()
        if any(term in title for term in title_terms):
            return board_list
    return None


def suggest_list_movement(
    card: Card,
    text: NormalizedText,
    lists: Iterable[BoardList],
) -> ListMovementSuggestion | None:
    available = [item for item in lists if not item.archived]
    for rule in LIST_RULES:
        keyword = first_match(rule.category, text)
        if keyword is None:
            continue
        target = find_list(available, rule.title_terms)
        if target is None:
            continue
        if target.id == card.list_id:
            return None
        return ListMovementSuggestion(
            suggested_list_title=target.title,
            suggested_list_id=target.id,
            reason=rule.reason.format(keyword=keyword),
            confidence=rule.confidence,
        )
    return None
